"""Site plans, entitlements and feature gates"""
from placehub.core.billing.plans import (
    PLAN_DEFS,
    PLACE_PLAN_LIMITS,
    PlanDefinition,
    PlacePlanLimits,
    resolve_plan,
    resolve_place_plan,
)
from placehub.core.billing.entitlements import EntitlementsService
from placehub.core.billing.feature_gates import (
    PlaceUpsellService,
    get_featured_gate,
    get_gallery_gate,
)

__all__ = [
    "PLAN_DEFS",
    "PLACE_PLAN_LIMITS",
    "PlanDefinition",
    "PlacePlanLimits",
    "resolve_plan",
    "resolve_place_plan",
    "EntitlementsService",
    "PlaceUpsellService",
    "get_featured_gate",
    "get_gallery_gate",
]
