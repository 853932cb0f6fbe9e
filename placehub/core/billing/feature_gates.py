"""Feature gates - what the admin UI may offer for a place

Each gate is a small decision over entitlement data:

- ``enabled``: the action is available;
- ``locked``: the plan does not include it (``upgrade_cta`` says what to show);
- ``limit_reached``: included, but the quota is used up.

Reasons are shown verbatim in the Hungarian admin console.
"""
import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from placehub.core.billing.entitlements import EntitlementsService, get_place_limits
from placehub.db.enums import PlacePlan, SubscriptionStatus
from placehub.db.models import Gallery, Place
from placehub.decision.error_codes import ErrorCodeDictionary
from placehub.exceptions import NotFoundError
from placehub.services.feature_subscription_service import FeatureSubscriptionService
from placehub.types import Entitlements, FeatureGate, PlaceUpsellState

logger = logging.getLogger(__name__)

FLOORPLANS_NOT_IN_PLAN = "Alaprajzok nem érhető el ebben a csomagban."


def enabled() -> FeatureGate:
    return FeatureGate(state="enabled")


def locked(reason: str, upgrade_cta: str) -> FeatureGate:
    return FeatureGate(state="locked", reason=reason, upgrade_cta=upgrade_cta)


def limit_reached(reason: str, alternative_cta: Optional[str] = None) -> FeatureGate:
    gate = FeatureGate(state="limit_reached", reason=reason, upgrade_cta="upgradePlan")
    if alternative_cta:
        gate["alternative_cta"] = alternative_cta
    return gate


def get_featured_gate(entitlements: Entitlements, place_is_featured: bool) -> FeatureGate:
    """Whether a place may be (or stay) featured"""
    if entitlements["status"] != SubscriptionStatus.ACTIVE.value:
        return locked("Az előfizetés nem aktív.", "contactAdmin")

    featured_max = entitlements["limits"]["featured_places_max"]
    if featured_max == 0:
        return locked("Kiemelt megjelenés nem érhető el ebben a csomagban.", "viewPlans")

    used = entitlements["usage"]["featured_places_count"]
    if featured_max is not None and used >= featured_max and not place_is_featured:
        return limit_reached(
            f"Elérted a kiemelések számát ({used}/{featured_max}).",
            alternative_cta="manageExisting",
        )
    return enabled()


def get_gallery_gate(
    base_limit: Optional[int],
    current_image_count: int,
    gallery_limit_override: Optional[int],
) -> FeatureGate:
    """
    Whether more gallery images may be uploaded.

    Args:
        base_limit: Image limit of the place plan (None = unlimited)
        current_image_count: Images the place has now
        gallery_limit_override: Extra images granted to this place
    """
    if base_limit is None:
        return enabled()

    effective_limit = base_limit + (gallery_limit_override or 0)
    if current_image_count >= effective_limit:
        shown_limit = effective_limit if gallery_limit_override else base_limit
        return limit_reached(f"Elérted a kép limitet ({current_image_count}/{shown_limit}).")
    return enabled()


class PlaceUpsellService:
    """Composes the featured, gallery and floorplan gates of a place"""

    def __init__(
        self,
        entitlements_service: Optional[EntitlementsService] = None,
        feature_subscriptions: Optional[FeatureSubscriptionService] = None,
    ):
        self.entitlements_service = entitlements_service or EntitlementsService()
        self.feature_subscriptions = feature_subscriptions or FeatureSubscriptionService()

    async def get_gallery_gate(
        self,
        db: AsyncSession,
        place_plan: PlacePlan,
        current_image_count: int,
        gallery_limit_override: Optional[int],
    ) -> FeatureGate:
        limits = await get_place_limits(db, PlacePlan(place_plan))
        return get_gallery_gate(limits.images, current_image_count, gallery_limit_override)

    async def get_floorplan_gate(
        self,
        db: AsyncSession,
        site_id: UUID,
        place_id: UUID,
        place_plan: Optional[PlacePlan] = None,
    ) -> FeatureGate:
        if place_plan is not None and PlacePlan(place_plan) == PlacePlan.FREE:
            return locked(FLOORPLANS_NOT_IN_PLAN, "viewPlans")

        entitlement = await self.feature_subscriptions.get_floorplan_entitlement(db, place_id, site_id)
        if not entitlement["entitled"]:
            # The console renders its own call to action for this case
            return locked("", "viewPlans")
        if entitlement["status"] == "limit_reached":
            return limit_reached(
                f"Elérted az alaprajz limitet ({entitlement['used']}/{entitlement['limit']})."
            )
        return enabled()

    async def get_place_upsell_state(
        self,
        db: AsyncSession,
        site_id: Optional[UUID],
        place_id: UUID,
        session_factory: Optional[async_sessionmaker] = None,
    ) -> PlaceUpsellState:
        """
        All gates of a place.

        Raises:
            NotFoundError: place missing or not on this site
        """
        place = await db.get(Place, place_id)
        if place is None or (site_id is not None and place.site_id != site_id):
            raise NotFoundError(
                ErrorCodeDictionary.PLACE_001.with_message(f"Place with id {place_id} not found"),
                entity_id=place_id,
            )
        site_id = place.site_id

        entitlements = await self.entitlements_service.get_by_site_id(
            db, site_id, session_factory=session_factory
        )
        image_count = await self.count_place_images(db, place_id)

        return PlaceUpsellState(
            featured=get_featured_gate(entitlements, bool(place.is_featured)),
            gallery=await self.get_gallery_gate(db, place.plan, image_count, place.gallery_limit_override),
            floorplans=await self.get_floorplan_gate(db, site_id, place_id, place.plan),
        )

    @staticmethod
    async def count_place_images(db: AsyncSession, place_id: UUID) -> int:
        """Images across the galleries attached to a place"""
        result = await db.execute(select(Gallery.images).where(Gallery.place_id == place_id))
        return sum(len(images or []) for images in result.scalars().all())
