"""Unit tests for the entitlements service"""
import pytest
from datetime import timedelta
from uuid import uuid4

from placehub.core.billing.entitlements import EntitlementsService, normalize_status
from placehub.db.enums import Lang, SubscriptionPlan, SubscriptionStatus
from placehub.db.models import Brand, Event, Gallery, Place, SiteDomain, SiteInstance, SiteMembership
from placehub.exceptions import NotFoundError
from placehub.utils.dates import utc_now


class TestNormalizeStatus:
    """Tests for expiry handling"""

    def test_past_valid_until_is_expired(self):
        now = utc_now()
        assert normalize_status(SubscriptionStatus.ACTIVE, now - timedelta(days=1), now) == SubscriptionStatus.EXPIRED

    def test_future_valid_until_keeps_status(self):
        now = utc_now()
        assert normalize_status(SubscriptionStatus.SUSPENDED, now + timedelta(days=1), now) == SubscriptionStatus.SUSPENDED

    def test_naive_datetime_is_treated_as_utc(self):
        now = utc_now()
        naive = (now - timedelta(hours=1)).replace(tzinfo=None)
        assert normalize_status(SubscriptionStatus.ACTIVE, naive, now) == SubscriptionStatus.EXPIRED


class TestEntitlementsService:
    """Tests for plan resolution and usage counting"""

    @pytest.mark.asyncio
    async def test_site_without_subscription_gets_default_plan(self, test_db_session, make_site):
        site = await make_site()

        entitlements = await EntitlementsService().get_by_site_id(test_db_session, site.id)

        assert entitlements["plan"] == "BASIC"
        assert entitlements["status"] == "ACTIVE"
        assert entitlements["limits"]["featured_places_max"] == 0
        assert entitlements["limits"]["places_max"] is None

    @pytest.mark.asyncio
    async def test_stored_subscription(self, test_db_session, make_site):
        site = await make_site(plan=SubscriptionPlan.PRO)

        entitlements = await EntitlementsService().get_by_site_id(test_db_session, site.id)

        assert entitlements["plan"] == "PRO"
        assert entitlements["features"]["events_enabled"] is True
        assert entitlements["limits"]["featured_places_max"] == 15

    @pytest.mark.asyncio
    async def test_expired_subscription(self, test_db_session, make_site):
        site = await make_site()
        service = EntitlementsService()
        await service.upsert_subscription(
            test_db_session, site.id, SubscriptionPlan.PRO, SubscriptionStatus.ACTIVE,
            valid_until=utc_now() - timedelta(days=2),
        )

        entitlements = await service.get_by_site_id(test_db_session, site.id)

        assert entitlements["status"] == "EXPIRED"

    @pytest.mark.asyncio
    async def test_platform_override_applies(self, test_db_session, make_site):
        site = await make_site(plan=SubscriptionPlan.PRO)
        test_db_session.add(Brand(name="PlaceHub", plan_overrides={"PRO": {"limits": {"featured_places_max": 3}}}))
        await test_db_session.commit()

        entitlements = await EntitlementsService().get_by_site_id(test_db_session, site.id)

        assert entitlements["limits"]["featured_places_max"] == 3

    @pytest.mark.asyncio
    async def test_usage_counts(self, test_db_session, make_site):
        site = await make_site()
        now = utc_now()
        test_db_session.add_all([
            Place(site_id=site.id, is_active=True),
            Place(site_id=site.id, is_active=False),
            Place(site_id=site.id, is_active=True, is_featured=True),
            Place(site_id=site.id, is_active=True, is_featured=True, featured_until=now - timedelta(days=1)),
            Event(site_id=site.id, title="Szüreti fesztivál", start_date=now),
            SiteMembership(site_id=site.id, user_id=uuid4()),
            SiteDomain(site_id=site.id, domain="etyek.example", is_active=True),
            SiteDomain(site_id=site.id, domain="old-etyek.example", is_active=False),
            SiteInstance(site_id=site.id, lang=Lang.HU),
            SiteInstance(site_id=site.id, lang=Lang.EN),
            Gallery(site_id=site.id, name="Pincék", images=[]),
        ])
        await test_db_session.commit()

        usage = await EntitlementsService().count_usage(test_db_session, site.id, now=now)

        assert usage == {
            "places_count": 3,
            "featured_places_count": 1,
            "events_this_month_count": 1,
            "site_members_count": 1,
            "domain_aliases_count": 1,
            "languages_count": 2,
            "galleries_count": 1,
        }

    @pytest.mark.asyncio
    async def test_get_for_request_uses_default_site(self, test_db_session, make_site):
        site = await make_site(slug="etyek-budai")

        entitlements = await EntitlementsService().get_for_request(test_db_session, "hu")

        assert entitlements["site_id"] == site.id

    @pytest.mark.asyncio
    async def test_get_subscription_default(self, test_db_session, make_site):
        site = await make_site()

        subscription = await EntitlementsService().get_subscription(test_db_session, site.id)

        assert subscription["plan"] == "BASIC"
        assert subscription["valid_until"] is None

    @pytest.mark.asyncio
    async def test_upsert_subscription_replaces(self, test_db_session, make_site):
        site = await make_site(plan=SubscriptionPlan.BASIC)
        service = EntitlementsService()

        result = await service.upsert_subscription(
            test_db_session, site.id, SubscriptionPlan.BUSINESS, SubscriptionStatus.SUSPENDED, note="Számla késik"
        )

        assert result["plan"] == "BUSINESS"
        assert result["status"] == "SUSPENDED"
        assert result["note"] == "Számla késik"

    @pytest.mark.asyncio
    async def test_subscription_of_unknown_site(self, test_db_session):
        with pytest.raises(NotFoundError) as exc_info:
            await EntitlementsService().get_subscription(test_db_session, uuid4())

        assert exc_info.value.error_code.code == "SITE_003"
