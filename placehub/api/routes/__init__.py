"""API route modules"""
from placehub.api.routes.collections import router as collections_router
from placehub.api.routes.collections import public_router as public_collections_router
from placehub.api.routes.entitlements import router as entitlements_router
from placehub.api.routes.feature_subscriptions import router as feature_subscriptions_router
from placehub.api.routes.floorplans import router as floorplans_router
from placehub.api.routes.floorplans import pins_router as floorplan_pins_router
from placehub.api.routes.floorplans import public_router as public_floorplans_router
from placehub.api.routes.legal import router as legal_router
from placehub.api.routes.legal import public_router as public_legal_router
from placehub.api.routes.places import router as places_router
from placehub.api.routes.platform import router as platform_router
from placehub.api.routes.price_bands import router as price_bands_router
from placehub.api.routes.resolve import router as resolve_router
from placehub.api.routes.sites import router as sites_router

__all__ = [
    "collections_router", "public_collections_router", "entitlements_router",
    "feature_subscriptions_router", "floorplans_router", "floorplan_pins_router",
    "public_floorplans_router", "legal_router", "public_legal_router", "places_router",
    "platform_router", "price_bands_router", "resolve_router", "sites_router",
]
