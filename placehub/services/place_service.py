"""
Place Service - places of a site with their translations and slugs.

Each translation owns one primary slug in its language. Renaming a place
generates a new primary slug and demotes the previous one, which keeps
resolving and redirects to the new slug.
"""
import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import delete, select, update
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from placehub.core.billing.entitlements import EntitlementsService
from placehub.core.billing.feature_gates import get_featured_gate
from placehub.db.enums import Lang, SlugEntityType
from placehub.db.models import Place, PlaceTranslation, Site, Slug
from placehub.decision.error_codes import ErrorCodeDictionary
from placehub.exceptions import BadRequestError, NotFoundError
from placehub.schemas.places import PlaceCreate, PlaceTranslationInput, PlaceUpdate
from placehub.utils.database import get_or_404
from placehub.utils.text import ascii_slug

logger = logging.getLogger(__name__)

FALLBACK_SLUG = "place"


class PlaceService:
    """Admin CRUD for places; enforces the place and featured limits of the site plan"""

    def __init__(self, entitlements_service: Optional[EntitlementsService] = None):
        self.entitlements_service = entitlements_service or EntitlementsService()

    async def list_for_site(self, db: AsyncSession, site_id: UUID) -> List[Place]:
        result = await db.execute(
            select(Place).where(Place.site_id == site_id).order_by(Place.created_at.desc())
        )
        return list(result.scalars().all())

    async def get(self, db: AsyncSession, place_id: UUID, site_id: Optional[UUID] = None) -> Place:
        query = select(Place).where(Place.id == place_id)
        if site_id is not None:
            query = query.where(Place.site_id == site_id)
        place = await db.scalar(query.execution_options(populate_existing=True))
        if place is None:
            raise NotFoundError(
                ErrorCodeDictionary.PLACE_001.with_message(f"Place with id {place_id} not found"),
                entity_id=place_id,
            )
        return place

    async def create(
        self,
        db: AsyncSession,
        data: PlaceCreate,
        session_factory: Optional[async_sessionmaker] = None,
    ) -> Place:
        """
        Create a place and its slugs.

        Raises:
            NotFoundError: unknown site
            BadRequestError: place limit reached, or featuring not allowed
        """
        await get_or_404(db, Site, data.site_id, ErrorCodeDictionary.SITE_003, "Site")

        entitlements = await self.entitlements_service.get_by_site_id(
            db, data.site_id, session_factory=session_factory
        )
        if data.is_active:
            self._check_place_limit(entitlements)
        if data.is_featured:
            self._check_featured(entitlements, place_is_featured=False)

        place = Place(
            site_id=data.site_id,
            price_band_id=data.price_band_id,
            plan=data.plan,
            is_active=data.is_active,
            is_featured=data.is_featured,
            featured_until=data.featured_until,
            gallery_limit_override=data.gallery_limit_override,
            hero_image=data.hero_image,
            translations=[self._new_translation(t) for t in data.translations],
        )
        db.add(place)
        await db.flush()

        for translation in data.translations:
            await self._sync_slug(db, place, translation.lang, translation.name)

        await db.commit()
        logger.info(f"Place {place.id} created on site {data.site_id}")
        return await self.get(db, place.id)

    async def update(
        self,
        db: AsyncSession,
        place_id: UUID,
        site_id: UUID,
        data: PlaceUpdate,
        session_factory: Optional[async_sessionmaker] = None,
    ) -> Place:
        place = await self.get(db, place_id, site_id)

        activating = data.is_active is True and not place.is_active
        featuring = data.is_featured is True and not place.is_featured
        if activating or featuring:
            entitlements = await self.entitlements_service.get_by_site_id(
                db, site_id, session_factory=session_factory
            )
            if activating:
                self._check_place_limit(entitlements)
            if featuring:
                self._check_featured(entitlements, place_is_featured=False)

        for field, value in data.model_dump(exclude_unset=True, exclude={"translations"}).items():
            if value is None and field in ("plan", "is_active", "is_featured"):
                continue
            setattr(place, field, value)

        if data.translations:
            by_lang = {Lang(t.lang): t for t in place.translations}
            for incoming in data.translations:
                current = by_lang.get(incoming.lang)
                if current is None:
                    place.translations.append(self._new_translation(incoming))
                else:
                    self._apply_translation(current, incoming)
                await self._sync_slug(db, place, incoming.lang, incoming.name)

        await db.commit()
        return await self.get(db, place_id)

    async def delete(self, db: AsyncSession, place_id: UUID, site_id: UUID) -> None:
        """Delete a place together with its slugs"""
        place = await self.get(db, place_id, site_id)
        await db.execute(
            delete(Slug).where(Slug.entity_type == SlugEntityType.PLACE, Slug.entity_id == place_id)
        )
        await db.delete(place)
        await db.commit()
        logger.info(f"Place {place_id} deleted")

    # ------------------------------------------------------------------
    # Slugs
    # ------------------------------------------------------------------

    async def list_slugs(self, db: AsyncSession, place_id: UUID) -> List[Slug]:
        result = await db.execute(
            select(Slug)
            .where(Slug.entity_type == SlugEntityType.PLACE, Slug.entity_id == place_id)
            .order_by(Slug.lang.asc(), Slug.is_primary.desc(), Slug.created_at.desc())
        )
        return list(result.scalars().all())

    async def _sync_slug(self, db: AsyncSession, place: Place, lang: Lang, name: str) -> Slug:
        """Make the slug generated from ``name`` the primary slug of the place in ``lang``"""
        base = ascii_slug(name) or FALLBACK_SLUG
        candidate, owned = await self._available_slug(db, place, lang, base)

        if owned is not None and owned.is_primary and owned.is_active:
            return owned

        # Demote first: one primary slug per entity and language
        await db.execute(
            update(Slug)
            .where(
                Slug.site_id == place.site_id,
                Slug.lang == lang,
                Slug.entity_type == SlugEntityType.PLACE,
                Slug.entity_id == place.id,
                Slug.is_primary.is_(True),
            )
            .values(is_primary=False)
        )

        if owned is not None:
            owned.is_primary = True
            owned.is_active = True
            owned.redirect_to_id = None
            await db.flush()
            return owned

        slug = Slug(
            site_id=place.site_id,
            lang=lang,
            slug=candidate,
            entity_type=SlugEntityType.PLACE,
            entity_id=place.id,
            is_primary=True,
            is_active=True,
        )
        db.add(slug)
        await db.flush()
        logger.info(f"Place {place.id} slug {lang.value}/{candidate} is now primary")
        return slug

    @staticmethod
    async def _available_slug(db: AsyncSession, place: Place, lang: Lang, base: str):
        """
        First of ``base``, ``base-2``, ``base-3``... not taken by another entity.

        Returns the slug and the existing row when the place already owns it.
        """
        suffix = 1
        while True:
            candidate = base if suffix == 1 else f"{base}-{suffix}"
            existing = await db.scalar(
                select(Slug).where(
                    Slug.site_id == place.site_id, Slug.lang == lang, Slug.slug == candidate
                )
            )
            if existing is None:
                return candidate, None
            if existing.entity_type == SlugEntityType.PLACE and existing.entity_id == place.id:
                return candidate, existing
            suffix += 1

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _check_place_limit(entitlements) -> None:
        # Only active places count against places_max
        places_max = entitlements["limits"]["places_max"]
        places_count = entitlements["usage"]["places_count"]
        if places_max is not None and places_count >= places_max:
            raise BadRequestError(
                ErrorCodeDictionary.ENTITLEMENT_003.with_message(
                    f"Place limit reached ({places_count}/{places_max})."
                ),
                context={"used": places_count, "limit": places_max},
            )

    @staticmethod
    def _check_featured(entitlements, place_is_featured: bool) -> None:
        gate = get_featured_gate(entitlements, place_is_featured)
        if gate["state"] != "enabled":
            raise BadRequestError(
                ErrorCodeDictionary.ENTITLEMENT_002.with_message(gate["reason"]),
                context={"gate": dict(gate)},
            )

    @staticmethod
    def _apply_translation(target: PlaceTranslation, source: PlaceTranslationInput) -> None:
        target.name = source.name
        target.short_description = source.short_description
        target.description = source.description

    def _new_translation(self, source: PlaceTranslationInput) -> PlaceTranslation:
        translation = PlaceTranslation(lang=source.lang)
        self._apply_translation(translation, source)
        return translation
