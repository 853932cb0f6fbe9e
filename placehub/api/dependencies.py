"""FastAPI dependency injection for PlaceHub services"""
from fastapi import Depends, Path

from placehub.core.billing.entitlements import EntitlementsService
from placehub.core.billing.feature_gates import PlaceUpsellService
from placehub.core.config import Settings, get_settings
from placehub.core.languages import normalize_lang
from placehub.db.enums import Lang
from placehub.services.collection_service import CollectionService
from placehub.services.feature_subscription_service import FeatureSubscriptionService
from placehub.services.floorplan_service import FloorplanPinService, FloorplanService
from placehub.services.legal_service import LegalService
from placehub.services.place_service import PlaceService
from placehub.services.platform_settings_service import PlatformSettingsService
from placehub.services.price_band_service import PriceBandService
from placehub.services.resolve_service import ResolveService
from placehub.services.site_key_resolver import SiteKeyResolver
from placehub.services.site_service import SiteService


def get_lang(lang: str = Path(..., description="hu, en or de")) -> Lang:
    """Validated route language"""
    return normalize_lang(lang)


# Resolution
def get_site_key_resolver(settings: Settings = Depends(get_settings)) -> SiteKeyResolver:
    """Resolver bound to the configured default site"""
    return SiteKeyResolver(default_site_slug=settings.default_site_slug)


def get_resolve_service(resolver: SiteKeyResolver = Depends(get_site_key_resolver)) -> ResolveService:
    return ResolveService(site_resolver=resolver)


# Billing
def get_entitlements_service(
    resolver: SiteKeyResolver = Depends(get_site_key_resolver),
) -> EntitlementsService:
    return EntitlementsService(site_resolver=resolver)


def get_feature_subscription_service() -> FeatureSubscriptionService:
    return FeatureSubscriptionService()


def get_place_upsell_service() -> PlaceUpsellService:
    return PlaceUpsellService()


def get_platform_settings_service() -> PlatformSettingsService:
    return PlatformSettingsService()


# Content
def get_site_service() -> SiteService:
    return SiteService()


def get_place_service() -> PlaceService:
    return PlaceService()


def get_floorplan_service() -> FloorplanService:
    return FloorplanService()


def get_floorplan_pin_service() -> FloorplanPinService:
    return FloorplanPinService()


def get_legal_service(resolver: SiteKeyResolver = Depends(get_site_key_resolver)) -> LegalService:
    return LegalService(site_resolver=resolver)


def get_collection_service() -> CollectionService:
    return CollectionService()


def get_price_band_service() -> PriceBandService:
    return PriceBandService()
