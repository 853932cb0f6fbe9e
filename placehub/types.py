"""Type definitions for PlaceHub - TypedDict classes for service results"""
from datetime import datetime
from typing import TypedDict, Optional, Dict, Literal
from uuid import UUID


# ============================================================================
# Entitlement Types
# ============================================================================

class UsageCounts(TypedDict):
    """Live usage of a site, recomputed on every entitlement read"""
    places_count: int
    featured_places_count: int
    events_this_month_count: int
    site_members_count: int
    domain_aliases_count: int
    languages_count: int
    galleries_count: int


class Entitlements(TypedDict):
    """Plan, limits, features and usage of one site"""
    site_id: UUID
    plan: str
    status: str
    valid_until: Optional[datetime]
    limits: Dict[str, Optional[int]]
    features: Dict[str, bool]
    usage: UsageCounts


GateState = Literal["enabled", "locked", "limit_reached"]


class FeatureGate(TypedDict, total=False):
    """UI-facing gate; ``reason``/CTAs are present only when not enabled"""
    state: GateState
    reason: str
    upgrade_cta: Literal["viewPlans", "contactAdmin", "upgradePlan"]
    alternative_cta: Literal["manageExisting"]


class PlaceUpsellState(TypedDict):
    featured: FeatureGate
    gallery: FeatureGate
    floorplans: FeatureGate


class FloorplanEntitlement(TypedDict, total=False):
    """Result of checking floorplan access for a place"""
    entitled: bool
    active_scope: Optional[Literal["place", "site"]]
    limit: int
    used: int
    status: Literal["locked", "active", "limit_reached"]
    subscription_id: Optional[UUID]
    current_period_end: Optional[datetime]


# ============================================================================
# Resolution Types
# ============================================================================

class ResolvedSite(TypedDict):
    """Site a public key resolved to"""
    site_id: UUID
    site_internal_slug: str
    lang: str
    canonical_site_key: Optional[str]
    redirected: bool


class CanonicalSlug(TypedDict):
    lang: str
    site_key: str
    slug: str


class ResolvedSlug(TypedDict):
    """Entity a public slug resolved to, with its canonical address"""
    site_id: UUID
    lang: str
    entity_type: str
    entity_id: UUID
    canonical: CanonicalSlug
    needs_redirect: bool
