"""Database models for the PlaceHub directory"""
from sqlalchemy import (
    Column, Integer, String, Text, DateTime, Boolean, Float,
    ForeignKey, JSON, Enum, CheckConstraint, UniqueConstraint, Index, Uuid, text
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import uuid

from placehub.core.database import Base
from placehub.db.enums import (
    Lang, SubscriptionPlan, SubscriptionStatus, PlacePlan,
    FeatureSubscriptionScope, FeatureSubscriptionStatus, FeatureKey,
    BillingPeriod, SlugEntityType, LegalPageKey, SiteRole,
)
from placehub.utils.dates import utc_now

# JSONB on PostgreSQL, plain JSON elsewhere (SQLite in tests)
JSONType = JSON().with_variant(JSONB(), "postgresql")


def _enum(enum_cls, name: str) -> Enum:
    return Enum(enum_cls, name=name, values_callable=lambda x: [e.value for e in x])


def _created_at() -> Column:
    return Column(DateTime(timezone=True), default=utc_now, server_default=func.now(), nullable=False)


def _updated_at() -> Column:
    return Column(
        DateTime(timezone=True), default=utc_now, onupdate=utc_now,
        server_default=func.now(), nullable=False,
    )


class Brand(Base):
    """Platform-wide settings; the oldest row is authoritative"""
    __tablename__ = "brands"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    # {"PRO": {"limits": {...}, "features": {...}}}
    plan_overrides = Column(JSONType, nullable=False, default=lambda: {})
    # {"free": {"images": 5}}
    place_plan_overrides = Column(JSONType, nullable=False, default=lambda: {})
    created_at = _created_at()
    updated_at = _updated_at()


class Site(Base):
    """Tenant of the directory (one town, one website)"""
    __tablename__ = "sites"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    slug = Column(String, unique=True, nullable=False)
    primary_domain = Column(String, unique=True, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = _created_at()
    updated_at = _updated_at()

    # Relationships
    translations = relationship(
        "SiteTranslation", back_populates="site", cascade="all, delete-orphan", lazy="selectin"
    )
    keys = relationship("SiteKey", back_populates="site", cascade="all, delete-orphan", passive_deletes=True)
    subscription = relationship(
        "SiteSubscription", back_populates="site", uselist=False,
        cascade="all, delete-orphan", passive_deletes=True,
    )
    instances = relationship(
        "SiteInstance", back_populates="site", cascade="all, delete-orphan", passive_deletes=True
    )
    domains = relationship(
        "SiteDomain", back_populates="site", cascade="all, delete-orphan", passive_deletes=True
    )
    memberships = relationship(
        "SiteMembership", back_populates="site", cascade="all, delete-orphan", passive_deletes=True
    )
    places = relationship(
        "Place", back_populates="site", cascade="all, delete-orphan", passive_deletes=True
    )

    __table_args__ = (
        CheckConstraint("length(trim(slug)) > 0", name="chk_site_slug_not_empty"),
    )


class SiteTranslation(Base):
    """Per-language site name and presentation"""
    __tablename__ = "site_translations"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    site_id = Column(Uuid(as_uuid=True), ForeignKey("sites.id", ondelete="CASCADE"), nullable=False)
    lang = Column(_enum(Lang, "lang"), nullable=False)
    name = Column(String, nullable=False)
    short_description = Column(Text)
    description = Column(Text)
    hero_image = Column(String)

    site = relationship("Site", back_populates="translations")

    __table_args__ = (
        UniqueConstraint("site_id", "lang", name="uq_site_translation_lang"),
    )


class SiteInstance(Base):
    """A language the site is published in"""
    __tablename__ = "site_instances"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    site_id = Column(Uuid(as_uuid=True), ForeignKey("sites.id", ondelete="CASCADE"), nullable=False)
    lang = Column(_enum(Lang, "lang"), nullable=False)
    is_default = Column(Boolean, nullable=False, default=False)
    created_at = _created_at()

    site = relationship("Site", back_populates="instances")

    __table_args__ = (
        UniqueConstraint("site_id", "lang", name="uq_site_instance_lang"),
    )


class SiteDomain(Base):
    """Domain alias pointing at a site"""
    __tablename__ = "site_domains"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    site_id = Column(Uuid(as_uuid=True), ForeignKey("sites.id", ondelete="CASCADE"), nullable=False)
    domain = Column(String, unique=True, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = _created_at()

    site = relationship("Site", back_populates="domains")


class SiteMembership(Base):
    """A user's role on a site"""
    __tablename__ = "site_memberships"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    site_id = Column(Uuid(as_uuid=True), ForeignKey("sites.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(Uuid(as_uuid=True), nullable=False)
    role = Column(_enum(SiteRole, "site_role"), nullable=False, default=SiteRole.EDITOR)
    created_at = _created_at()

    site = relationship("Site", back_populates="memberships")

    __table_args__ = (
        UniqueConstraint("site_id", "user_id", name="uq_site_membership_user"),
    )


class SiteSubscription(Base):
    """Plan a site is on; at most one per site"""
    __tablename__ = "site_subscriptions"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    site_id = Column(
        Uuid(as_uuid=True), ForeignKey("sites.id", ondelete="CASCADE"), unique=True, nullable=False
    )
    plan = Column(_enum(SubscriptionPlan, "subscription_plan"), nullable=False)
    status = Column(_enum(SubscriptionStatus, "subscription_status"), nullable=False)
    valid_until = Column(DateTime(timezone=True))
    note = Column(Text)
    created_at = _created_at()
    updated_at = _updated_at()

    site = relationship("Site", back_populates="subscription")


class FeatureSubscription(Base):
    """Separately billed feature (floorplans) for a place or a whole site"""
    __tablename__ = "feature_subscriptions"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    site_id = Column(Uuid(as_uuid=True), ForeignKey("sites.id", ondelete="CASCADE"), nullable=False)
    scope = Column(_enum(FeatureSubscriptionScope, "feature_subscription_scope"), nullable=False)
    place_id = Column(Uuid(as_uuid=True), ForeignKey("places.id", ondelete="CASCADE"), nullable=True)
    feature_key = Column(_enum(FeatureKey, "feature_key"), nullable=False)
    plan_key = Column(String, nullable=False)
    billing_period = Column(_enum(BillingPeriod, "billing_period"), nullable=False)
    floorplan_limit = Column(Integer)
    status = Column(_enum(FeatureSubscriptionStatus, "feature_subscription_status"), nullable=False)
    stripe_subscription_id = Column(String)
    current_period_end = Column(DateTime(timezone=True))
    created_at = _created_at()
    updated_at = _updated_at()

    site = relationship("Site", lazy="selectin")
    place = relationship("Place", lazy="selectin")

    __table_args__ = (
        CheckConstraint(
            "(scope = 'place' AND place_id IS NOT NULL) OR (scope = 'site' AND place_id IS NULL)",
            name="chk_feature_subscription_scope_place",
        ),
        Index("idx_feature_subscriptions_scope_site", "scope", "site_id"),
        Index("idx_feature_subscriptions_scope_place", "scope", "place_id"),
        Index("idx_feature_subscriptions_status", "status"),
    )


class SiteKey(Base):
    """Public URL key of a site in one language"""
    __tablename__ = "site_keys"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    site_id = Column(Uuid(as_uuid=True), ForeignKey("sites.id", ondelete="CASCADE"), nullable=False)
    lang = Column(_enum(Lang, "lang"), nullable=False)
    slug = Column(String, nullable=False)
    is_primary = Column(Boolean, nullable=False, default=True)
    is_active = Column(Boolean, nullable=False, default=True)
    redirect_to_id = Column(Uuid(as_uuid=True), ForeignKey("site_keys.id", ondelete="SET NULL"))
    created_at = _created_at()
    updated_at = _updated_at()

    site = relationship("Site", back_populates="keys")
    redirect_to = relationship("SiteKey", remote_side=[id], lazy="selectin")

    __table_args__ = (
        UniqueConstraint("site_id", "lang", "slug", name="uq_site_key_slug"),
        Index("idx_site_keys_lang_slug", "lang", "slug"),
        Index(
            "uq_site_keys_primary",
            "site_id", "lang",
            unique=True,
            postgresql_where=text("is_primary"),
            sqlite_where=text("is_primary"),
        ),
    )


class Slug(Base):
    """Public URL slug of an entity in one language"""
    __tablename__ = "slugs"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    site_id = Column(Uuid(as_uuid=True), ForeignKey("sites.id", ondelete="CASCADE"), nullable=False)
    lang = Column(_enum(Lang, "lang"), nullable=False)
    slug = Column(String, nullable=False)
    entity_type = Column(_enum(SlugEntityType, "slug_entity_type"), nullable=False)
    entity_id = Column(Uuid(as_uuid=True), nullable=False)
    is_primary = Column(Boolean, nullable=False, default=True)
    is_active = Column(Boolean, nullable=False, default=True)
    redirect_to_id = Column(Uuid(as_uuid=True), ForeignKey("slugs.id", ondelete="SET NULL"))
    created_at = _created_at()
    updated_at = _updated_at()

    redirect_to = relationship("Slug", remote_side=[id], lazy="selectin")

    __table_args__ = (
        UniqueConstraint("site_id", "lang", "slug", name="uq_slug_site_lang"),
        Index("idx_slugs_entity", "entity_type", "entity_id"),
        Index(
            "uq_slugs_primary",
            "site_id", "lang", "entity_type", "entity_id",
            unique=True,
            postgresql_where=text("is_primary"),
            sqlite_where=text("is_primary"),
        ),
    )


class PriceBand(Base):
    """Price category of a site (e.g. budget, premium)"""
    __tablename__ = "price_bands"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    site_id = Column(Uuid(as_uuid=True), ForeignKey("sites.id", ondelete="CASCADE"), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = _created_at()
    updated_at = _updated_at()

    translations = relationship(
        "PriceBandTranslation", back_populates="price_band",
        cascade="all, delete-orphan", lazy="selectin",
    )


class PriceBandTranslation(Base):
    __tablename__ = "price_band_translations"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    price_band_id = Column(
        Uuid(as_uuid=True), ForeignKey("price_bands.id", ondelete="CASCADE"), nullable=False
    )
    lang = Column(_enum(Lang, "lang"), nullable=False)
    name = Column(String, nullable=False)
    description = Column(Text)

    price_band = relationship("PriceBand", back_populates="translations")

    __table_args__ = (
        UniqueConstraint("price_band_id", "lang", name="uq_price_band_translation_lang"),
    )


class Place(Base):
    """Business or point of interest listed on a site"""
    __tablename__ = "places"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    site_id = Column(Uuid(as_uuid=True), ForeignKey("sites.id", ondelete="CASCADE"), nullable=False)
    price_band_id = Column(Uuid(as_uuid=True), ForeignKey("price_bands.id", ondelete="SET NULL"))
    plan = Column(_enum(PlacePlan, "place_plan"), nullable=False, default=PlacePlan.FREE)
    is_active = Column(Boolean, nullable=False, default=True)
    is_featured = Column(Boolean, nullable=False, default=False)
    featured_until = Column(DateTime(timezone=True))
    gallery_limit_override = Column(Integer)
    hero_image = Column(String)
    created_at = _created_at()
    updated_at = _updated_at()

    site = relationship("Site", back_populates="places")
    translations = relationship(
        "PlaceTranslation", back_populates="place", cascade="all, delete-orphan", lazy="selectin"
    )
    floorplans = relationship(
        "PlaceFloorplan", back_populates="place", cascade="all, delete-orphan",
        order_by="PlaceFloorplan.sort_order", passive_deletes=True,
    )

    __table_args__ = (
        Index("idx_places_site_active", "site_id", "is_active"),
        CheckConstraint(
            "gallery_limit_override IS NULL OR gallery_limit_override >= 0",
            name="chk_place_gallery_override_non_negative",
        ),
    )


class PlaceTranslation(Base):
    __tablename__ = "place_translations"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    place_id = Column(Uuid(as_uuid=True), ForeignKey("places.id", ondelete="CASCADE"), nullable=False)
    lang = Column(_enum(Lang, "lang"), nullable=False)
    name = Column(String, nullable=False)
    short_description = Column(Text)
    description = Column(Text)

    place = relationship("Place", back_populates="translations")

    __table_args__ = (
        UniqueConstraint("place_id", "lang", name="uq_place_translation_lang"),
    )


class Event(Base):
    """Dated happening on a site, optionally hosted by a place"""
    __tablename__ = "events"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    site_id = Column(Uuid(as_uuid=True), ForeignKey("sites.id", ondelete="CASCADE"), nullable=False)
    place_id = Column(Uuid(as_uuid=True), ForeignKey("places.id", ondelete="SET NULL"))
    title = Column(String, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    start_date = Column(DateTime(timezone=True), nullable=False)
    end_date = Column(DateTime(timezone=True))
    created_at = _created_at()

    __table_args__ = (
        Index("idx_events_site_start", "site_id", "start_date"),
    )


class Gallery(Base):
    """Image set owned by a site, optionally attached to a place"""
    __tablename__ = "galleries"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    site_id = Column(Uuid(as_uuid=True), ForeignKey("sites.id", ondelete="CASCADE"), nullable=False)
    place_id = Column(Uuid(as_uuid=True), ForeignKey("places.id", ondelete="SET NULL"))
    name = Column(String, nullable=False)
    images = Column(JSONType, nullable=False, default=lambda: [])
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = _created_at()


class PlaceFloorplan(Base):
    """Floorplan image of a place"""
    __tablename__ = "place_floorplans"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    place_id = Column(Uuid(as_uuid=True), ForeignKey("places.id", ondelete="CASCADE"), nullable=False)
    title = Column(String, nullable=False, default="Floorplan")
    image_url = Column(String, nullable=False)
    sort_order = Column(Integer, nullable=False, default=0)
    is_primary = Column(Boolean, nullable=False, default=False)
    created_at = _created_at()
    updated_at = _updated_at()

    place = relationship("Place", back_populates="floorplans")
    pins = relationship(
        "FloorplanPin", back_populates="floorplan", cascade="all, delete-orphan",
        passive_deletes=True, order_by="FloorplanPin.sort_order", lazy="selectin",
    )

    __table_args__ = (
        Index("idx_place_floorplans_place_sort", "place_id", "sort_order"),
        Index(
            "uq_place_floorplans_primary",
            "place_id",
            unique=True,
            postgresql_where=text("is_primary"),
            sqlite_where=text("is_primary"),
        ),
    )


class FloorplanPin(Base):
    """Marker on a floorplan; coordinates are fractions of the image size"""
    __tablename__ = "floorplan_pins"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    floorplan_id = Column(
        Uuid(as_uuid=True), ForeignKey("place_floorplans.id", ondelete="CASCADE"), nullable=False
    )
    x = Column(Float, nullable=False)
    y = Column(Float, nullable=False)
    label = Column(String, nullable=False, default="")
    sort_order = Column(Integer, nullable=False, default=0)
    created_at = _created_at()
    updated_at = _updated_at()

    floorplan = relationship("PlaceFloorplan", back_populates="pins")

    __table_args__ = (
        CheckConstraint("x >= 0 AND x <= 1", name="chk_floorplan_pin_x_range"),
        CheckConstraint("y >= 0 AND y <= 1", name="chk_floorplan_pin_y_range"),
        Index("idx_floorplan_pins_floorplan_sort", "floorplan_id", "sort_order"),
    )


class LegalPage(Base):
    """Imprint, terms or privacy page of a site"""
    __tablename__ = "legal_pages"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    site_id = Column(Uuid(as_uuid=True), ForeignKey("sites.id", ondelete="CASCADE"), nullable=False)
    key = Column(_enum(LegalPageKey, "legal_page_key"), nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = _created_at()
    updated_at = _updated_at()

    translations = relationship(
        "LegalPageTranslation", back_populates="legal_page",
        cascade="all, delete-orphan", lazy="selectin",
    )

    __table_args__ = (
        UniqueConstraint("site_id", "key", name="uq_legal_page_site_key"),
    )


class LegalPageTranslation(Base):
    __tablename__ = "legal_page_translations"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    legal_page_id = Column(
        Uuid(as_uuid=True), ForeignKey("legal_pages.id", ondelete="CASCADE"), nullable=False
    )
    lang = Column(_enum(Lang, "lang"), nullable=False)
    title = Column(String, nullable=False)
    short_description = Column(Text)
    content = Column(Text)
    seo_title = Column(String)
    seo_description = Column(Text)
    seo_image = Column(String)
    seo_keywords = Column(JSONType, nullable=False, default=lambda: [])

    legal_page = relationship("LegalPage", back_populates="translations")

    __table_args__ = (
        UniqueConstraint("legal_page_id", "lang", name="uq_legal_page_translation_lang"),
    )


class Collection(Base):
    """Curated grouping of sites, served on its own slug or domain"""
    __tablename__ = "collections"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    slug = Column(String, unique=True, nullable=False)
    domain = Column(String, unique=True, nullable=True)
    is_active = Column(Boolean, nullable=False, default=False)
    is_crawlable = Column(Boolean, nullable=False, default=True)
    order = Column(Integer, nullable=False, default=0)
    created_at = _created_at()
    updated_at = _updated_at()

    translations = relationship(
        "CollectionTranslation", back_populates="collection",
        cascade="all, delete-orphan", lazy="selectin",
    )
    items = relationship(
        "CollectionItem", back_populates="collection",
        cascade="all, delete-orphan", order_by="CollectionItem.order", lazy="selectin",
    )

    __table_args__ = (
        Index("idx_collections_active", "is_active"),
        Index("idx_collections_order", "order"),
    )


class CollectionTranslation(Base):
    __tablename__ = "collection_translations"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    collection_id = Column(
        Uuid(as_uuid=True), ForeignKey("collections.id", ondelete="CASCADE"), nullable=False
    )
    lang = Column(_enum(Lang, "lang"), nullable=False)
    title = Column(String, nullable=False)
    description = Column(Text)
    hero_image = Column(String)
    seo_title = Column(String)
    seo_description = Column(Text)
    seo_image = Column(String)
    seo_keywords = Column(JSONType, nullable=False, default=lambda: [])

    collection = relationship("Collection", back_populates="translations")

    __table_args__ = (
        UniqueConstraint("collection_id", "lang", name="uq_collection_translation_lang"),
    )


class CollectionItem(Base):
    """Site listed in a collection"""
    __tablename__ = "collection_items"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    collection_id = Column(
        Uuid(as_uuid=True), ForeignKey("collections.id", ondelete="CASCADE"), nullable=False
    )
    site_id = Column(Uuid(as_uuid=True), ForeignKey("sites.id", ondelete="CASCADE"), nullable=False)
    order = Column(Integer, nullable=False, default=0)
    is_highlighted = Column(Boolean, nullable=False, default=False)

    collection = relationship("Collection", back_populates="items")
    site = relationship("Site", lazy="selectin")
    translations = relationship(
        "CollectionItemTranslation", back_populates="item",
        cascade="all, delete-orphan", lazy="selectin",
    )

    __table_args__ = (
        Index("idx_collection_items_collection_order", "collection_id", "order"),
    )


class CollectionItemTranslation(Base):
    __tablename__ = "collection_item_translations"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    collection_item_id = Column(
        Uuid(as_uuid=True), ForeignKey("collection_items.id", ondelete="CASCADE"), nullable=False
    )
    lang = Column(_enum(Lang, "lang"), nullable=False)
    title_override = Column(String)
    description_override = Column(Text)
    image_override = Column(String)

    item = relationship("CollectionItem", back_populates="translations")

    __table_args__ = (
        UniqueConstraint("collection_item_id", "lang", name="uq_collection_item_translation_lang"),
    )
