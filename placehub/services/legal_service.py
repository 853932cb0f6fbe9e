"""
Legal Service - imprint, terms and privacy pages of a site.

Public reads fall back to the Hungarian translation when the requested
language is missing and derive an SEO description from the content when
none was written.
"""
import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from placehub.core.config import settings
from placehub.core.languages import normalize_lang
from placehub.db.enums import Lang, LegalPageKey
from placehub.db.models import LegalPage, LegalPageTranslation
from placehub.decision.error_codes import ErrorCodeDictionary
from placehub.exceptions import BadRequestError, NotFoundError
from placehub.schemas.legal import (
    LegalPageCreate, LegalPageTranslationInput, LegalPageUpdate,
    OpenGraph, PublicLegalPage, SeoPayload, TwitterCard,
)
from placehub.services.site_key_resolver import SiteKeyResolver
from placehub.utils.text import first_sentences, strip_html

logger = logging.getLogger(__name__)

_KEYS = ", ".join(key.value for key in LegalPageKey)


def pick_translation(
    translations: List[LegalPageTranslation],
    lang: str,
    fallback_lang: str = "hu",
) -> Optional[LegalPageTranslation]:
    """Translation in ``lang``, else in ``fallback_lang``"""
    by_lang = {Lang(t.lang).value: t for t in translations}
    return by_lang.get(lang) or by_lang.get(fallback_lang)


def seo_description(translation: LegalPageTranslation) -> str:
    if translation.seo_description:
        return strip_html(translation.seo_description)
    return first_sentences(translation.content, 2)


class LegalService:
    """Public and admin access to legal pages"""

    def __init__(self, site_resolver: Optional[SiteKeyResolver] = None):
        self.site_resolver = site_resolver or SiteKeyResolver()

    # ------------------------------------------------------------------
    # Public
    # ------------------------------------------------------------------

    async def get_page(
        self,
        db: AsyncSession,
        lang: str,
        page: str,
        site_key: Optional[str] = None,
    ) -> PublicLegalPage:
        """
        Render one legal page for a public request.

        Raises:
            BadRequestError: invalid language or page key
            NotFoundError: unknown site, page missing or inactive, no usable translation
        """
        normalize_lang(lang)
        try:
            key = LegalPageKey(page)
        except ValueError:
            raise BadRequestError(ErrorCodeDictionary.LEGAL_001, context={"page": page})
        site = await self.site_resolver.resolve(db, lang, site_key)

        legal_page = await db.scalar(
            select(LegalPage).where(LegalPage.site_id == site["site_id"], LegalPage.key == key)
        )
        if legal_page is None or not legal_page.is_active:
            raise NotFoundError(ErrorCodeDictionary.LEGAL_002, context={"page": key.value})

        return self._render(legal_page, site["lang"])

    async def get_page_by_id(
        self,
        db: AsyncSession,
        lang: str,
        page_id: UUID,
        site_key: Optional[str] = None,
    ) -> PublicLegalPage:
        """Render an active legal page of the addressed site by id"""
        normalize_lang(lang)
        site = await self.site_resolver.resolve(db, lang, site_key)

        legal_page = await db.scalar(
            select(LegalPage).where(LegalPage.id == page_id, LegalPage.site_id == site["site_id"])
        )
        if legal_page is None or not legal_page.is_active:
            raise NotFoundError(ErrorCodeDictionary.LEGAL_002, entity_id=page_id)

        return self._render(legal_page, site["lang"])

    @staticmethod
    def _render(legal_page: LegalPage, lang: str) -> PublicLegalPage:
        key = LegalPageKey(legal_page.key)
        translation = pick_translation(legal_page.translations, lang, settings.fallback_lang)
        if translation is None:
            raise NotFoundError(ErrorCodeDictionary.LEGAL_003, entity_id=legal_page.id)

        title = translation.seo_title or translation.title
        description = seo_description(translation)
        image = translation.seo_image

        return PublicLegalPage(
            key=key,
            title=translation.title,
            short_description=translation.short_description,
            content=translation.content or "",
            seo=SeoPayload(
                title=title,
                description=description,
                image=image,
                keywords=list(translation.seo_keywords or []),
                canonical=None,
                robots=None,
                og=OpenGraph(title=title, description=description, image=image),
                twitter=TwitterCard(title=title, description=description, image=image),
            ),
        )

    # ------------------------------------------------------------------
    # Admin
    # ------------------------------------------------------------------

    async def list_pages(self, db: AsyncSession, site_id: UUID) -> List[LegalPage]:
        result = await db.execute(
            select(LegalPage)
            .where(LegalPage.site_id == site_id)
            .order_by(LegalPage.created_at.desc())
        )
        return list(result.scalars().all())

    async def get(self, db: AsyncSession, page_id: UUID, site_id: UUID) -> LegalPage:
        legal_page = await db.scalar(
            select(LegalPage)
            .where(LegalPage.id == page_id, LegalPage.site_id == site_id)
            .execution_options(populate_existing=True)
        )
        if legal_page is None:
            raise NotFoundError(ErrorCodeDictionary.LEGAL_002, entity_id=page_id)
        return legal_page

    async def get_by_key(self, db: AsyncSession, key: str, site_id: UUID) -> LegalPage:
        page_key = self._validate_key(key)
        legal_page = await db.scalar(
            select(LegalPage).where(LegalPage.site_id == site_id, LegalPage.key == page_key)
        )
        if legal_page is None:
            raise NotFoundError(ErrorCodeDictionary.LEGAL_002, context={"key": key})
        return legal_page

    async def create(self, db: AsyncSession, data: LegalPageCreate) -> LegalPage:
        page_key = self._validate_key(data.key)

        existing = await db.scalar(
            select(LegalPage.id).where(LegalPage.site_id == data.site_id, LegalPage.key == page_key)
        )
        if existing is not None:
            raise BadRequestError(ErrorCodeDictionary.LEGAL_004, entity_id=existing)

        legal_page = LegalPage(
            site_id=data.site_id,
            key=page_key,
            is_active=data.is_active,
            translations=[self._new_translation(t) for t in data.translations],
        )
        db.add(legal_page)
        await db.commit()

        logger.info(f"Legal page {page_key.value} created for site {data.site_id}")
        return await self.get(db, legal_page.id, data.site_id)

    async def update(
        self,
        db: AsyncSession,
        page_id: UUID,
        site_id: UUID,
        data: LegalPageUpdate,
    ) -> LegalPage:
        legal_page = await self.get(db, page_id, site_id)

        if data.is_active is not None:
            legal_page.is_active = data.is_active

        if data.translations:
            by_lang = {Lang(t.lang): t for t in legal_page.translations}
            for incoming in data.translations:
                current = by_lang.get(incoming.lang)
                if current is None:
                    legal_page.translations.append(self._new_translation(incoming))
                else:
                    self._apply_translation(current, incoming)

        await db.commit()
        return await self.get(db, page_id, site_id)

    async def delete(self, db: AsyncSession, page_id: UUID, site_id: UUID) -> None:
        legal_page = await self.get(db, page_id, site_id)
        await db.delete(legal_page)
        await db.commit()
        logger.info(f"Legal page {page_id} deleted")

    @staticmethod
    def _validate_key(key: str) -> LegalPageKey:
        try:
            return LegalPageKey(key)
        except ValueError:
            raise BadRequestError(
                ErrorCodeDictionary.LEGAL_001.with_message(
                    f"Invalid legal page key: {key}. Must be one of: {_KEYS}"
                ),
                context={"key": key},
            )

    @staticmethod
    def _apply_translation(target: LegalPageTranslation, source: LegalPageTranslationInput) -> None:
        target.title = source.title
        target.short_description = source.short_description
        target.content = source.content
        target.seo_title = source.seo_title
        target.seo_description = source.seo_description
        target.seo_image = source.seo_image
        target.seo_keywords = list(source.seo_keywords)

    def _new_translation(self, source: LegalPageTranslationInput) -> LegalPageTranslation:
        translation = LegalPageTranslation(lang=source.lang)
        self._apply_translation(translation, source)
        return translation
