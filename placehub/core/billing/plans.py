"""Plan definitions and platform-level plan overrides

Limits use ``None`` for "unlimited" so they serialize as JSON ``null``.
Overrides saved by platform admins are validated with the models below and
merged one block at a time: an override's ``limits`` replaces only the limit
keys it names, likewise for ``features``.
"""
import logging
from typing import Any, Dict, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from placehub.db.enums import PlacePlan, SubscriptionPlan

logger = logging.getLogger(__name__)

Limit = Optional[int]


class PlanLimits(BaseModel):
    """Hard limits of a site plan; ``None`` means unlimited"""

    model_config = ConfigDict(extra="forbid", frozen=True)

    places_max: Limit = None
    featured_places_max: Limit = None
    gallery_images_per_place_max: Limit = None
    events_per_month_max: Limit = None
    site_members_max: Limit = None
    domain_aliases_max: Limit = None
    languages_max: Limit = None
    galleries_max: Limit = None
    images_per_gallery_max: Limit = None
    galleries_per_place_max: Limit = None
    galleries_per_event_max: Limit = None


class PlanFeatures(BaseModel):
    """Feature flags of a site plan"""

    model_config = ConfigDict(extra="forbid", frozen=True)

    events_enabled: bool = False
    place_seo_enabled: bool = False
    extras_enabled: bool = False
    custom_domain_enabled: bool = False
    event_log_enabled: bool = False


class PlanDefinition(BaseModel):
    model_config = ConfigDict(frozen=True)

    limits: PlanLimits
    features: PlanFeatures


class PlanLimitsOverride(BaseModel):
    """Partial limits; only keys present in the payload are applied"""

    model_config = ConfigDict(extra="forbid")

    places_max: Limit = Field(default=None, ge=0)
    featured_places_max: Limit = Field(default=None, ge=0)
    gallery_images_per_place_max: Limit = Field(default=None, ge=0)
    events_per_month_max: Limit = Field(default=None, ge=0)
    site_members_max: Limit = Field(default=None, ge=0)
    domain_aliases_max: Limit = Field(default=None, ge=0)
    languages_max: Limit = Field(default=None, ge=0)
    galleries_max: Limit = Field(default=None, ge=0)
    images_per_gallery_max: Limit = Field(default=None, ge=0)
    galleries_per_place_max: Limit = Field(default=None, ge=0)
    galleries_per_event_max: Limit = Field(default=None, ge=0)


class PlanFeaturesOverride(BaseModel):
    model_config = ConfigDict(extra="forbid")

    events_enabled: Optional[bool] = None
    place_seo_enabled: Optional[bool] = None
    extras_enabled: Optional[bool] = None
    custom_domain_enabled: Optional[bool] = None
    event_log_enabled: Optional[bool] = None


class PlanOverride(BaseModel):
    """Override of one site plan as stored in ``Brand.plan_overrides``"""

    model_config = ConfigDict(extra="forbid")

    limits: Optional[PlanLimitsOverride] = None
    features: Optional[PlanFeaturesOverride] = None


class PlacePlanLimits(BaseModel):
    """Per-place listing limits; ``None`` means unlimited"""

    model_config = ConfigDict(extra="forbid", frozen=True)

    images: Limit
    events: Limit
    featured: bool


class PlacePlanOverride(BaseModel):
    model_config = ConfigDict(extra="forbid")

    images: Limit = Field(default=None, ge=0)
    events: Limit = Field(default=None, ge=0)
    featured: Optional[bool] = None


_BASIC = PlanDefinition(
    limits=PlanLimits(
        featured_places_max=0,
        events_per_month_max=0,
        domain_aliases_max=0,
        languages_max=1,
    ),
    features=PlanFeatures(),
)

PLAN_DEFS: Dict[SubscriptionPlan, PlanDefinition] = {
    # FREE sites get the BASIC envelope
    SubscriptionPlan.FREE: _BASIC,
    SubscriptionPlan.BASIC: _BASIC,
    SubscriptionPlan.PRO: PlanDefinition(
        limits=PlanLimits(
            featured_places_max=15,
            gallery_images_per_place_max=30,
            events_per_month_max=200,
            site_members_max=20,
            domain_aliases_max=5,
            languages_max=3,
            images_per_gallery_max=100,
        ),
        features=PlanFeatures(
            events_enabled=True,
            place_seo_enabled=True,
            extras_enabled=True,
            custom_domain_enabled=False,
            event_log_enabled=True,
        ),
    ),
    SubscriptionPlan.BUSINESS: PlanDefinition(
        limits=PlanLimits(),
        features=PlanFeatures(
            events_enabled=True,
            place_seo_enabled=True,
            extras_enabled=True,
            custom_domain_enabled=True,
            event_log_enabled=True,
        ),
    ),
}

PLACE_PLAN_LIMITS: Dict[PlacePlan, PlacePlanLimits] = {
    PlacePlan.FREE: PlacePlanLimits(images=3, events=0, featured=False),
    PlacePlan.BASIC: PlacePlanLimits(images=15, events=3, featured=False),
    PlacePlan.PRO: PlacePlanLimits(images=None, events=None, featured=True),
}


def parse_plan_overrides(raw: Mapping[str, Any]) -> Dict[SubscriptionPlan, PlanOverride]:
    """
    Validate a ``plan_overrides`` document.

    Raises:
        ValidationError: unknown plan, unknown key or wrong value type
        ValueError: unknown plan name
    """
    parsed: Dict[SubscriptionPlan, PlanOverride] = {}
    for plan_name, body in (raw or {}).items():
        plan = SubscriptionPlan(plan_name)
        parsed[plan] = PlanOverride.model_validate(body or {})
    return parsed


def parse_place_plan_overrides(raw: Mapping[str, Any]) -> Dict[PlacePlan, PlacePlanOverride]:
    """Validate a ``place_plan_overrides`` document (same errors as above)"""
    parsed: Dict[PlacePlan, PlacePlanOverride] = {}
    for plan_name, body in (raw or {}).items():
        plan = PlacePlan(plan_name)
        parsed[plan] = PlacePlanOverride.model_validate(body or {})
    return parsed


def apply_plan_override(base: PlanDefinition, override: Optional[PlanOverride]) -> PlanDefinition:
    """Shallow merge of one override into a plan definition"""
    if override is None:
        return base
    limits = base.limits
    features = base.features
    if override.limits is not None:
        limits = limits.model_copy(update=override.limits.model_dump(exclude_unset=True))
    if override.features is not None:
        flags = override.features.model_dump(exclude_unset=True, exclude_none=True)
        features = features.model_copy(update=flags)
    return PlanDefinition(limits=limits, features=features)


def apply_place_plan_override(
    base: PlacePlanLimits, override: Optional[PlacePlanOverride]
) -> PlacePlanLimits:
    if override is None:
        return base
    update = override.model_dump(exclude_unset=True)
    if update.get("featured", False) is None:
        del update["featured"]
    return base.model_copy(update=update)


def resolve_plan(plan: SubscriptionPlan, raw_overrides: Optional[Mapping[str, Any]]) -> PlanDefinition:
    """
    Plan definition with the stored platform override applied.

    Stored overrides are validated on save; a document that no longer
    validates is logged and ignored rather than failing the request.
    """
    base = PLAN_DEFS[plan]
    body = (raw_overrides or {}).get(plan.value)
    if not body:
        return base
    try:
        override = PlanOverride.model_validate(body)
    except ValidationError as e:
        logger.warning(f"Ignoring invalid plan override for {plan.value}: {e.errors()}")
        return base
    return apply_plan_override(base, override)


def resolve_place_plan(plan: PlacePlan, raw_overrides: Optional[Mapping[str, Any]]) -> PlacePlanLimits:
    """Place plan limits with the stored platform override applied"""
    base = PLACE_PLAN_LIMITS[plan]
    body = (raw_overrides or {}).get(plan.value)
    if not body:
        return base
    try:
        override = PlacePlanOverride.model_validate(body)
    except ValidationError as e:
        logger.warning(f"Ignoring invalid place plan override for {plan.value}: {e.errors()}")
        return base
    return apply_place_plan_override(base, override)
