"""
Resolve Service - public URL ``/{lang}/{site_key}/{slug}`` to an entity.

Resolution returns the canonical address of the entity alongside the entity
itself; ``needs_redirect`` is set when the request used an outdated site
key, a non-canonical slug, or a slug that only matched after ASCII
normalization.
"""
import logging
from typing import Optional, Tuple

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from placehub.db.enums import Lang
from placehub.db.models import Slug
from placehub.decision.error_codes import ErrorCodeDictionary
from placehub.decision.redirects import RedirectTo, needs_primary_lookup, resolve_redirect
from placehub.exceptions import NotFoundError
from placehub.services.site_key_resolver import SiteKeyResolver
from placehub.types import CanonicalSlug, ResolvedSlug
from placehub.utils.text import ascii_slug

logger = logging.getLogger(__name__)


class ResolveService:
    """Site + slug resolution with canonical redirect computation"""

    def __init__(self, site_resolver: Optional[SiteKeyResolver] = None):
        self.site_resolver = site_resolver or SiteKeyResolver()

    async def resolve(
        self,
        db: AsyncSession,
        lang: str,
        site_key: str,
        slug: str,
    ) -> ResolvedSlug:
        """
        Resolve a public slug.

        Raises:
            BadRequestError: invalid language
            NotFoundError: unknown site key or slug
        """
        site = await self.site_resolver.resolve(db, lang, site_key)
        lang_value = Lang(site["lang"])

        record, normalized = await self._find_slug(db, site["site_id"], lang_value, slug)
        if record is None:
            raise NotFoundError(
                ErrorCodeDictionary.SLUG_001,
                context={"lang": lang_value.value, "slug": slug},
            )

        redirect_target = await db.get(Slug, record.redirect_to_id) if record.redirect_to_id else None
        primary = None
        if needs_primary_lookup(record, redirect_target):
            primary = await db.scalar(
                select(Slug)
                .where(
                    Slug.site_id == site["site_id"],
                    Slug.lang == lang_value,
                    Slug.entity_type == record.entity_type,
                    Slug.entity_id == record.entity_id,
                    Slug.is_primary.is_(True),
                    Slug.is_active.is_(True),
                )
                .limit(1)
            )

        decision = resolve_redirect(record, primary, redirect_target)
        slug_redirected = isinstance(decision, RedirectTo)

        return ResolvedSlug(
            site_id=site["site_id"],
            lang=lang_value.value,
            entity_type=record.entity_type.value,
            entity_id=record.entity_id,
            canonical=CanonicalSlug(
                lang=lang_value.value,
                site_key=site["canonical_site_key"] or site_key,
                slug=decision.record.slug,
            ),
            needs_redirect=bool(site["redirected"] or slug_redirected or normalized),
        )

    async def _find_slug(
        self,
        db: AsyncSession,
        site_id,
        lang: Lang,
        slug: str,
    ) -> Tuple[Optional[Slug], bool]:
        """Direct match first, then the ASCII-normalized form; the flag marks the latter"""
        record = await self._active_slug(db, site_id, lang, slug)
        if record is not None:
            return record, False

        normalized = ascii_slug(slug)
        if normalized and normalized != slug:
            record = await self._active_slug(db, site_id, lang, normalized)
            if record is not None:
                logger.debug(f"Slug {slug!r} matched after normalization as {normalized!r}")
                return record, True
        return None, False

    @staticmethod
    async def _active_slug(db: AsyncSession, site_id, lang: Lang, slug: str) -> Optional[Slug]:
        return await db.scalar(
            select(Slug).where(
                Slug.site_id == site_id,
                Slug.lang == lang,
                Slug.slug == slug,
                Slug.is_active.is_(True),
            )
        )
