"""Database enums and models"""
from placehub.db.enums import (
    Lang, SubscriptionPlan, SubscriptionStatus, PlacePlan,
    FeatureSubscriptionScope, FeatureSubscriptionStatus, FeatureKey, FloorplanPlanKey,
    BillingPeriod, SlugEntityType, LegalPageKey, SiteRole,
)
from placehub.db.models import (
    Brand, Site, SiteTranslation, SiteInstance, SiteDomain, SiteMembership,
    SiteSubscription, FeatureSubscription, SiteKey, Slug,
    PriceBand, PriceBandTranslation, Place, PlaceTranslation, Event, Gallery,
    PlaceFloorplan, FloorplanPin, LegalPage, LegalPageTranslation,
    Collection, CollectionTranslation, CollectionItem, CollectionItemTranslation,
)

__all__ = [
    # Enums
    "Lang", "SubscriptionPlan", "SubscriptionStatus", "PlacePlan",
    "FeatureSubscriptionScope", "FeatureSubscriptionStatus", "FeatureKey", "FloorplanPlanKey",
    "BillingPeriod", "SlugEntityType", "LegalPageKey", "SiteRole",
    # Models
    "Brand", "Site", "SiteTranslation", "SiteInstance", "SiteDomain", "SiteMembership",
    "SiteSubscription", "FeatureSubscription", "SiteKey", "Slug",
    "PriceBand", "PriceBandTranslation", "Place", "PlaceTranslation", "Event", "Gallery",
    "PlaceFloorplan", "FloorplanPin", "LegalPage", "LegalPageTranslation",
    "Collection", "CollectionTranslation", "CollectionItem", "CollectionItemTranslation",
]
