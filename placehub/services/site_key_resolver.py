"""
Site Key Resolver - maps the public site key of a URL to an internal site.

A site key is the per-language public slug of a site (``/api/public/hu/etyek/...``).
Keys can be renamed: old keys stay active as non-primary aliases or point at
their successor through ``redirect_to_id``, and the resolver reports the
canonical key so callers can issue a redirect.
"""
import logging
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from placehub.core.config import settings
from placehub.core.languages import normalize_lang
from placehub.db.models import Site, SiteKey
from placehub.decision.error_codes import ErrorCodeDictionary
from placehub.decision.redirects import RedirectTo, needs_primary_lookup, resolve_redirect
from placehub.exceptions import NotFoundError
from placehub.types import ResolvedSite

logger = logging.getLogger(__name__)


class SiteKeyResolver:
    """
    Resolves ``(lang, site_key)`` to a site.

    Without a site key the configured default site is used (single-site
    deployments). Lookup order for a key is primary first, then oldest.
    """

    def __init__(self, default_site_slug: Optional[str] = None):
        self.default_site_slug = default_site_slug or settings.default_site_slug

    async def resolve(
        self,
        db: AsyncSession,
        lang: Optional[str],
        site_key: Optional[str] = None,
    ) -> ResolvedSite:
        """
        Resolve a site key.

        Args:
            db: Database session
            lang: Route language (hu|en|de)
            site_key: Public site key; None selects the default site

        Returns:
            ResolvedSite with the canonical key and whether it differs

        Raises:
            BadRequestError: invalid language
            NotFoundError: unknown key or missing default site
        """
        lang_value = normalize_lang(lang)

        if not site_key:
            site = await self._site_by_slug(db, self.default_site_slug)
            if site is None:
                raise NotFoundError(
                    ErrorCodeDictionary.SITE_001,
                    context={"default_site_slug": self.default_site_slug},
                )
            return ResolvedSite(
                site_id=site.id,
                site_internal_slug=site.slug,
                lang=lang_value.value,
                canonical_site_key=None,
                redirected=False,
            )

        hit = await db.scalar(
            select(SiteKey)
            .where(
                SiteKey.lang == lang_value,
                SiteKey.slug == site_key,
                SiteKey.is_active.is_(True),
            )
            .order_by(SiteKey.is_primary.desc(), SiteKey.created_at.asc())
            .limit(1)
        )

        if hit is None:
            # No key for this language: accept the internal site slug
            site = await self._site_by_slug(db, site_key)
            if site is None:
                raise NotFoundError(
                    ErrorCodeDictionary.SITE_002,
                    context={"lang": lang_value.value, "site_key": site_key},
                )
            return ResolvedSite(
                site_id=site.id,
                site_internal_slug=site.slug,
                lang=lang_value.value,
                canonical_site_key=site_key,
                redirected=False,
            )

        redirect_target = await db.get(SiteKey, hit.redirect_to_id) if hit.redirect_to_id else None
        primary = None
        if needs_primary_lookup(hit, redirect_target):
            primary = await db.scalar(
                select(SiteKey)
                .where(
                    SiteKey.site_id == hit.site_id,
                    SiteKey.lang == lang_value,
                    SiteKey.is_primary.is_(True),
                    SiteKey.is_active.is_(True),
                )
                .limit(1)
            )

        decision = resolve_redirect(hit, primary, redirect_target)
        target = decision.record
        site = await db.get(Site, target.site_id)
        if site is None:
            message = "Site not found (redirect target)" if target is not hit else "Site not found"
            raise NotFoundError(ErrorCodeDictionary.SITE_003.with_message(message), entity_id=target.site_id)

        redirected = isinstance(decision, RedirectTo)
        if redirected:
            logger.debug(f"Site key {lang_value.value}/{site_key} redirects to {target.slug}")

        return ResolvedSite(
            site_id=site.id,
            site_internal_slug=site.slug,
            lang=lang_value.value,
            canonical_site_key=target.slug,
            redirected=redirected,
        )

    @staticmethod
    async def _site_by_slug(db: AsyncSession, slug: str) -> Optional[Site]:
        return await db.scalar(select(Site).where(Site.slug == slug))
