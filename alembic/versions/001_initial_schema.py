"""Initial PlaceHub schema

Revision ID: 001_initial_schema
Revises:
Create Date: 2026-01-15 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None


ENUMS = {
    'lang': ('hu', 'en', 'de'),
    'subscription_plan': ('FREE', 'BASIC', 'PRO', 'BUSINESS'),
    'subscription_status': ('ACTIVE', 'SUSPENDED', 'EXPIRED'),
    'place_plan': ('free', 'basic', 'pro'),
    'feature_subscription_scope': ('place', 'site'),
    'feature_subscription_status': ('active', 'past_due', 'canceled'),
    'feature_key': ('FLOORPLANS',),
    'billing_period': ('MONTHLY', 'YEARLY'),
    'slug_entity_type': ('place', 'event', 'town', 'page', 'static_page'),
    'legal_page_key': ('imprint', 'terms', 'privacy'),
    'site_role': ('siteOwner', 'siteAdmin', 'editor'),
}


def _enum(name):
    # Types are created once up front and shared between tables
    return postgresql.ENUM(*ENUMS[name], name=name, create_type=False)


def _id():
    return sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True, server_default=sa.text('gen_random_uuid()'))


def _fk(name, target, ondelete='CASCADE', nullable=False):
    return sa.Column(name, postgresql.UUID(as_uuid=True), sa.ForeignKey(target, ondelete=ondelete), nullable=nullable)


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def _created_at():
    return sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False)


def upgrade() -> None:
    bind = op.get_bind()
    for name, values in ENUMS.items():
        postgresql.ENUM(*values, name=name).create(bind, checkfirst=True)

    # Platform settings
    op.create_table(
        'brands',
        _id(),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('plan_overrides', postgresql.JSONB, nullable=False, server_default=sa.text("'{}'::jsonb")),
        sa.Column('place_plan_overrides', postgresql.JSONB, nullable=False, server_default=sa.text("'{}'::jsonb")),
        *_timestamps(),
    )

    # Sites
    op.create_table(
        'sites',
        _id(),
        sa.Column('slug', sa.String(), unique=True, nullable=False),
        sa.Column('primary_domain', sa.String(), unique=True, nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.CheckConstraint('length(trim(slug)) > 0', name='chk_site_slug_not_empty'),
    )

    op.create_table(
        'site_translations',
        _id(),
        _fk('site_id', 'sites.id'),
        sa.Column('lang', _enum('lang'), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('short_description', sa.Text(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('hero_image', sa.String(), nullable=True),
        sa.UniqueConstraint('site_id', 'lang', name='uq_site_translation_lang'),
    )

    op.create_table(
        'site_instances',
        _id(),
        _fk('site_id', 'sites.id'),
        sa.Column('lang', _enum('lang'), nullable=False),
        sa.Column('is_default', sa.Boolean(), nullable=False, server_default=sa.false()),
        _created_at(),
        sa.UniqueConstraint('site_id', 'lang', name='uq_site_instance_lang'),
    )

    op.create_table(
        'site_domains',
        _id(),
        _fk('site_id', 'sites.id'),
        sa.Column('domain', sa.String(), unique=True, nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        _created_at(),
    )

    op.create_table(
        'site_memberships',
        _id(),
        _fk('site_id', 'sites.id'),
        sa.Column('user_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('role', _enum('site_role'), nullable=False, server_default='editor'),
        _created_at(),
        sa.UniqueConstraint('site_id', 'user_id', name='uq_site_membership_user'),
    )

    op.create_table(
        'site_subscriptions',
        _id(),
        sa.Column('site_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('sites.id', ondelete='CASCADE'), unique=True, nullable=False),
        sa.Column('plan', _enum('subscription_plan'), nullable=False),
        sa.Column('status', _enum('subscription_status'), nullable=False),
        sa.Column('valid_until', sa.DateTime(timezone=True), nullable=True),
        sa.Column('note', sa.Text(), nullable=True),
        *_timestamps(),
    )

    # Site keys and slugs (self-referencing redirects)
    op.create_table(
        'site_keys',
        _id(),
        _fk('site_id', 'sites.id'),
        sa.Column('lang', _enum('lang'), nullable=False),
        sa.Column('slug', sa.String(), nullable=False),
        sa.Column('is_primary', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        _fk('redirect_to_id', 'site_keys.id', ondelete='SET NULL', nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('site_id', 'lang', 'slug', name='uq_site_key_slug'),
    )
    op.create_index('idx_site_keys_lang_slug', 'site_keys', ['lang', 'slug'])
    op.create_index(
        'uq_site_keys_primary', 'site_keys', ['site_id', 'lang'],
        unique=True, postgresql_where=sa.text('is_primary'),
    )

    op.create_table(
        'slugs',
        _id(),
        _fk('site_id', 'sites.id'),
        sa.Column('lang', _enum('lang'), nullable=False),
        sa.Column('slug', sa.String(), nullable=False),
        sa.Column('entity_type', _enum('slug_entity_type'), nullable=False),
        sa.Column('entity_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('is_primary', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        _fk('redirect_to_id', 'slugs.id', ondelete='SET NULL', nullable=True),
        *_timestamps(),
        sa.UniqueConstraint('site_id', 'lang', 'slug', name='uq_slug_site_lang'),
    )
    op.create_index('idx_slugs_entity', 'slugs', ['entity_type', 'entity_id'])
    op.create_index(
        'uq_slugs_primary', 'slugs', ['site_id', 'lang', 'entity_type', 'entity_id'],
        unique=True, postgresql_where=sa.text('is_primary'),
    )

    # Price bands
    op.create_table(
        'price_bands',
        _id(),
        _fk('site_id', 'sites.id'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )

    op.create_table(
        'price_band_translations',
        _id(),
        _fk('price_band_id', 'price_bands.id'),
        sa.Column('lang', _enum('lang'), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.UniqueConstraint('price_band_id', 'lang', name='uq_price_band_translation_lang'),
    )

    # Places
    op.create_table(
        'places',
        _id(),
        _fk('site_id', 'sites.id'),
        _fk('price_band_id', 'price_bands.id', ondelete='SET NULL', nullable=True),
        sa.Column('plan', _enum('place_plan'), nullable=False, server_default='free'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('is_featured', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('featured_until', sa.DateTime(timezone=True), nullable=True),
        sa.Column('gallery_limit_override', sa.Integer(), nullable=True),
        sa.Column('hero_image', sa.String(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            'gallery_limit_override IS NULL OR gallery_limit_override >= 0',
            name='chk_place_gallery_override_non_negative',
        ),
    )
    op.create_index('idx_places_site_active', 'places', ['site_id', 'is_active'])

    op.create_table(
        'place_translations',
        _id(),
        _fk('place_id', 'places.id'),
        sa.Column('lang', _enum('lang'), nullable=False),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('short_description', sa.Text(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.UniqueConstraint('place_id', 'lang', name='uq_place_translation_lang'),
    )

    op.create_table(
        'events',
        _id(),
        _fk('site_id', 'sites.id'),
        _fk('place_id', 'places.id', ondelete='SET NULL', nullable=True),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('start_date', sa.DateTime(timezone=True), nullable=False),
        sa.Column('end_date', sa.DateTime(timezone=True), nullable=True),
        _created_at(),
    )
    op.create_index('idx_events_site_start', 'events', ['site_id', 'start_date'])

    op.create_table(
        'galleries',
        _id(),
        _fk('site_id', 'sites.id'),
        _fk('place_id', 'places.id', ondelete='SET NULL', nullable=True),
        sa.Column('name', sa.String(), nullable=False),
        sa.Column('images', postgresql.JSONB, nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        _created_at(),
    )

    # Feature subscriptions
    op.create_table(
        'feature_subscriptions',
        _id(),
        _fk('site_id', 'sites.id'),
        sa.Column('scope', _enum('feature_subscription_scope'), nullable=False),
        _fk('place_id', 'places.id', nullable=True),
        sa.Column('feature_key', _enum('feature_key'), nullable=False),
        sa.Column('plan_key', sa.String(), nullable=False),
        sa.Column('billing_period', _enum('billing_period'), nullable=False),
        sa.Column('floorplan_limit', sa.Integer(), nullable=True),
        sa.Column('status', _enum('feature_subscription_status'), nullable=False),
        sa.Column('stripe_subscription_id', sa.String(), nullable=True),
        sa.Column('current_period_end', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "(scope = 'place' AND place_id IS NOT NULL) OR (scope = 'site' AND place_id IS NULL)",
            name='chk_feature_subscription_scope_place',
        ),
    )
    op.create_index('idx_feature_subscriptions_scope_site', 'feature_subscriptions', ['scope', 'site_id'])
    op.create_index('idx_feature_subscriptions_scope_place', 'feature_subscriptions', ['scope', 'place_id'])
    op.create_index('idx_feature_subscriptions_status', 'feature_subscriptions', ['status'])

    # Floorplans
    op.create_table(
        'place_floorplans',
        _id(),
        _fk('place_id', 'places.id'),
        sa.Column('title', sa.String(), nullable=False, server_default='Floorplan'),
        sa.Column('image_url', sa.String(), nullable=False),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_primary', sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
    )
    op.create_index('idx_place_floorplans_place_sort', 'place_floorplans', ['place_id', 'sort_order'])
    op.create_index(
        'uq_place_floorplans_primary', 'place_floorplans', ['place_id'],
        unique=True, postgresql_where=sa.text('is_primary'),
    )

    op.create_table(
        'floorplan_pins',
        _id(),
        _fk('floorplan_id', 'place_floorplans.id'),
        sa.Column('x', sa.Float(), nullable=False),
        sa.Column('y', sa.Float(), nullable=False),
        sa.Column('label', sa.String(), nullable=False, server_default=''),
        sa.Column('sort_order', sa.Integer(), nullable=False, server_default='0'),
        *_timestamps(),
        sa.CheckConstraint('x >= 0 AND x <= 1', name='chk_floorplan_pin_x_range'),
        sa.CheckConstraint('y >= 0 AND y <= 1', name='chk_floorplan_pin_y_range'),
    )
    op.create_index('idx_floorplan_pins_floorplan_sort', 'floorplan_pins', ['floorplan_id', 'sort_order'])

    # Legal pages
    op.create_table(
        'legal_pages',
        _id(),
        _fk('site_id', 'sites.id'),
        sa.Column('key', _enum('legal_page_key'), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.UniqueConstraint('site_id', 'key', name='uq_legal_page_site_key'),
    )

    op.create_table(
        'legal_page_translations',
        _id(),
        _fk('legal_page_id', 'legal_pages.id'),
        sa.Column('lang', _enum('lang'), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('short_description', sa.Text(), nullable=True),
        sa.Column('content', sa.Text(), nullable=True),
        sa.Column('seo_title', sa.String(), nullable=True),
        sa.Column('seo_description', sa.Text(), nullable=True),
        sa.Column('seo_image', sa.String(), nullable=True),
        sa.Column('seo_keywords', postgresql.JSONB, nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.UniqueConstraint('legal_page_id', 'lang', name='uq_legal_page_translation_lang'),
    )

    # Collections
    op.create_table(
        'collections',
        _id(),
        sa.Column('slug', sa.String(), unique=True, nullable=False),
        sa.Column('domain', sa.String(), unique=True, nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_crawlable', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('order', sa.Integer(), nullable=False, server_default='0'),
        *_timestamps(),
    )
    op.create_index('idx_collections_active', 'collections', ['is_active'])
    op.create_index('idx_collections_order', 'collections', ['order'])

    op.create_table(
        'collection_translations',
        _id(),
        _fk('collection_id', 'collections.id'),
        sa.Column('lang', _enum('lang'), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('hero_image', sa.String(), nullable=True),
        sa.Column('seo_title', sa.String(), nullable=True),
        sa.Column('seo_description', sa.Text(), nullable=True),
        sa.Column('seo_image', sa.String(), nullable=True),
        sa.Column('seo_keywords', postgresql.JSONB, nullable=False, server_default=sa.text("'[]'::jsonb")),
        sa.UniqueConstraint('collection_id', 'lang', name='uq_collection_translation_lang'),
    )

    op.create_table(
        'collection_items',
        _id(),
        _fk('collection_id', 'collections.id'),
        _fk('site_id', 'sites.id'),
        sa.Column('order', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_highlighted', sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.create_index('idx_collection_items_collection_order', 'collection_items', ['collection_id', 'order'])

    op.create_table(
        'collection_item_translations',
        _id(),
        _fk('collection_item_id', 'collection_items.id'),
        sa.Column('lang', _enum('lang'), nullable=False),
        sa.Column('title_override', sa.String(), nullable=True),
        sa.Column('description_override', sa.Text(), nullable=True),
        sa.Column('image_override', sa.String(), nullable=True),
        sa.UniqueConstraint('collection_item_id', 'lang', name='uq_collection_item_translation_lang'),
    )


def downgrade() -> None:
    # Drop tables in reverse order
    op.drop_table('collection_item_translations')
    op.drop_table('collection_items')
    op.drop_table('collection_translations')
    op.drop_table('collections')
    op.drop_table('legal_page_translations')
    op.drop_table('legal_pages')
    op.drop_table('floorplan_pins')
    op.drop_table('place_floorplans')
    op.drop_table('feature_subscriptions')
    op.drop_table('galleries')
    op.drop_table('events')
    op.drop_table('place_translations')
    op.drop_table('places')
    op.drop_table('price_band_translations')
    op.drop_table('price_bands')
    op.drop_table('slugs')
    op.drop_table('site_keys')
    op.drop_table('site_subscriptions')
    op.drop_table('site_memberships')
    op.drop_table('site_domains')
    op.drop_table('site_instances')
    op.drop_table('site_translations')
    op.drop_table('sites')
    op.drop_table('brands')

    for name in reversed(list(ENUMS)):
        op.execute(f'DROP TYPE IF EXISTS {name}')
