"""
Site Service - sites and their public site keys.

A site slug is stored in ASCII form. Every new site gets a primary key per
supported language so it is reachable on each language route right away.
"""
import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from placehub.db.enums import Lang
from placehub.db.models import Site, SiteKey, SiteTranslation
from placehub.decision.error_codes import ErrorCodeDictionary
from placehub.exceptions import BadRequestError, NotFoundError
from placehub.schemas.sites import (
    SiteCreate, SiteKeyCreate, SiteKeyUpdate, SiteTranslationInput, SiteUpdate,
)
from placehub.utils.text import ascii_slug

logger = logging.getLogger(__name__)


def normalize_site_slug(value: str) -> str:
    slug = ascii_slug(value)
    if not slug:
        raise BadRequestError(ErrorCodeDictionary.SITE_006, context={"slug": value})
    return slug


class SiteService:
    """Admin CRUD for sites and site keys"""

    # ------------------------------------------------------------------
    # Sites
    # ------------------------------------------------------------------

    async def list_sites(self, db: AsyncSession) -> List[Site]:
        result = await db.execute(select(Site).order_by(Site.created_at.desc()))
        return list(result.scalars().all())

    async def get(self, db: AsyncSession, site_id: UUID) -> Site:
        site = await db.scalar(
            select(Site).where(Site.id == site_id).execution_options(populate_existing=True)
        )
        if site is None:
            raise NotFoundError(ErrorCodeDictionary.SITE_003, entity_id=site_id)
        return site

    async def create(self, db: AsyncSession, data: SiteCreate) -> Site:
        """
        Create a site with a primary key in every language.

        Raises:
            BadRequestError: slug empty after normalization or already taken
        """
        slug = normalize_site_slug(data.slug)
        await self._ensure_slug_free(db, slug)

        site = Site(
            slug=slug,
            primary_domain=data.primary_domain or None,
            is_active=data.is_active,
            translations=[self._new_translation(t) for t in data.translations],
            keys=[SiteKey(lang=lang, slug=slug, is_primary=True, is_active=True) for lang in Lang],
        )
        db.add(site)
        await db.commit()

        logger.info(f"Site {slug} created with keys for {', '.join(lang.value for lang in Lang)}")
        return await self.get(db, site.id)

    async def update(self, db: AsyncSession, site_id: UUID, data: SiteUpdate) -> Site:
        site = await self.get(db, site_id)

        if data.slug is not None:
            slug = normalize_site_slug(data.slug)
            if slug != site.slug:
                await self._ensure_slug_free(db, slug)
                site.slug = slug
        if "primary_domain" in data.model_fields_set:
            site.primary_domain = data.primary_domain or None
        if data.is_active is not None:
            site.is_active = data.is_active

        if data.translations:
            by_lang = {Lang(t.lang): t for t in site.translations}
            for incoming in data.translations:
                current = by_lang.get(incoming.lang)
                if current is None:
                    site.translations.append(self._new_translation(incoming))
                else:
                    self._apply_translation(current, incoming)

        await db.commit()
        return await self.get(db, site_id)

    async def delete(self, db: AsyncSession, site_id: UUID) -> None:
        """Delete a site; keys, places and subscriptions cascade"""
        site = await self.get(db, site_id)
        await db.delete(site)
        await db.commit()
        logger.info(f"Site {site_id} deleted")

    # ------------------------------------------------------------------
    # Site keys
    # ------------------------------------------------------------------

    async def list_keys(self, db: AsyncSession, site_id: UUID) -> List[SiteKey]:
        await self.get(db, site_id)
        result = await db.execute(
            select(SiteKey)
            .where(SiteKey.site_id == site_id)
            .order_by(SiteKey.is_primary.desc(), SiteKey.lang.asc(), SiteKey.created_at.asc())
        )
        return list(result.scalars().all())

    async def get_key(self, db: AsyncSession, site_id: UUID, key_id: UUID) -> SiteKey:
        key = await db.scalar(
            select(SiteKey)
            .where(SiteKey.id == key_id, SiteKey.site_id == site_id)
            .execution_options(populate_existing=True)
        )
        if key is None:
            raise NotFoundError(
                ErrorCodeDictionary.SITE_007.with_message(f"Site key with id {key_id} not found"),
                entity_id=key_id,
            )
        return key

    async def create_key(self, db: AsyncSession, site_id: UUID, data: SiteKeyCreate) -> SiteKey:
        """
        Add a public key to a site.

        A primary key demotes the current primary of the same language in
        the same transaction.
        """
        await self.get(db, site_id)
        await self._ensure_key_free(db, site_id, data.lang, data.slug)
        if data.redirect_to_id is not None:
            await self.get_key(db, site_id, data.redirect_to_id)

        if data.is_primary:
            await self._unset_primary(db, site_id, data.lang)

        key = SiteKey(
            site_id=site_id,
            lang=data.lang,
            slug=data.slug,
            is_primary=data.is_primary,
            is_active=data.is_active,
            redirect_to_id=data.redirect_to_id,
        )
        db.add(key)
        await db.commit()

        logger.info(f"Site key {data.lang.value}/{data.slug} added to site {site_id}")
        return await self.get_key(db, site_id, key.id)

    async def update_key(self, db: AsyncSession, site_id: UUID, key_id: UUID, data: SiteKeyUpdate) -> SiteKey:
        key = await self.get_key(db, site_id, key_id)

        if data.slug is not None and data.slug != key.slug:
            await self._ensure_key_free(db, site_id, Lang(key.lang), data.slug)
            key.slug = data.slug
        if "redirect_to_id" in data.model_fields_set:
            if data.redirect_to_id == key_id:
                raise BadRequestError(ErrorCodeDictionary.SITE_008, entity_id=key_id)
            if data.redirect_to_id is not None:
                await self.get_key(db, site_id, data.redirect_to_id)
            key.redirect_to_id = data.redirect_to_id
        if data.is_active is not None:
            key.is_active = data.is_active

        if data.is_primary is True and not key.is_primary:
            await self._unset_primary(db, site_id, Lang(key.lang), exclude_id=key_id)
            key.is_primary = True
        elif data.is_primary is False:
            key.is_primary = False

        await db.commit()
        return await self.get_key(db, site_id, key_id)

    async def delete_key(self, db: AsyncSession, site_id: UUID, key_id: UUID) -> None:
        key = await self.get_key(db, site_id, key_id)
        await db.delete(key)
        await db.commit()

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    async def _ensure_slug_free(db: AsyncSession, slug: str) -> None:
        existing = await db.scalar(select(Site.id).where(Site.slug == slug))
        if existing is not None:
            raise BadRequestError(
                ErrorCodeDictionary.SITE_005.with_message(f'Site with slug "{slug}" already exists'),
                entity_id=existing,
            )

    @staticmethod
    async def _ensure_key_free(db: AsyncSession, site_id: UUID, lang: Lang, slug: str) -> None:
        existing = await db.scalar(
            select(SiteKey.id).where(SiteKey.site_id == site_id, SiteKey.lang == lang, SiteKey.slug == slug)
        )
        if existing is not None:
            raise BadRequestError(
                ErrorCodeDictionary.SITE_004, entity_id=existing, context={"lang": lang.value, "slug": slug}
            )

    @staticmethod
    async def _unset_primary(
        db: AsyncSession, site_id: UUID, lang: Lang, exclude_id: Optional[UUID] = None
    ) -> None:
        # Must run before the new primary is flushed (partial unique index)
        conditions = [SiteKey.site_id == site_id, SiteKey.lang == lang, SiteKey.is_primary.is_(True)]
        if exclude_id is not None:
            conditions.append(SiteKey.id != exclude_id)
        await db.execute(update(SiteKey).where(*conditions).values(is_primary=False))

    @staticmethod
    def _apply_translation(target: SiteTranslation, source: SiteTranslationInput) -> None:
        target.name = source.name
        target.short_description = source.short_description
        target.description = source.description
        target.hero_image = source.hero_image

    def _new_translation(self, source: SiteTranslationInput) -> SiteTranslation:
        translation = SiteTranslation(lang=source.lang)
        self._apply_translation(translation, source)
        return translation
