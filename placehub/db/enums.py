"""Database model enumerations"""
import enum


class Lang(str, enum.Enum):
    """Supported content languages"""
    HU = "hu"
    EN = "en"
    DE = "de"


class SubscriptionPlan(str, enum.Enum):
    """Site subscription tiers"""
    FREE = "FREE"
    BASIC = "BASIC"
    PRO = "PRO"
    BUSINESS = "BUSINESS"


class SubscriptionStatus(str, enum.Enum):
    """Site subscription status"""
    ACTIVE = "ACTIVE"
    SUSPENDED = "SUSPENDED"
    EXPIRED = "EXPIRED"


class PlacePlan(str, enum.Enum):
    """Per-place listing tiers"""
    FREE = "free"
    BASIC = "basic"
    PRO = "pro"


class FeatureSubscriptionScope(str, enum.Enum):
    """Whether a feature subscription covers one place or the whole site"""
    PLACE = "place"
    SITE = "site"


class FeatureSubscriptionStatus(str, enum.Enum):
    """Feature subscription status"""
    ACTIVE = "active"
    PAST_DUE = "past_due"
    CANCELED = "canceled"


class FeatureKey(str, enum.Enum):
    """Features sold as separate subscriptions"""
    FLOORPLANS = "FLOORPLANS"


class FloorplanPlanKey(str, enum.Enum):
    """Floorplan feature plans"""
    FP_1 = "FP_1"
    FP_5 = "FP_5"
    FP_CUSTOM = "FP_CUSTOM"


class BillingPeriod(str, enum.Enum):
    """Billing period for feature subscriptions"""
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"


class SlugEntityType(str, enum.Enum):
    """Entity kinds addressable through a public slug"""
    PLACE = "place"
    EVENT = "event"
    TOWN = "town"
    PAGE = "page"
    STATIC_PAGE = "static_page"


class LegalPageKey(str, enum.Enum):
    """Legal pages every site publishes"""
    IMPRINT = "imprint"
    TERMS = "terms"
    PRIVACY = "privacy"


class SiteRole(str, enum.Enum):
    """Role of a user on a site"""
    SITE_OWNER = "siteOwner"
    SITE_ADMIN = "siteAdmin"
    EDITOR = "editor"
