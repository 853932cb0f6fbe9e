"""Unit tests for feature gate decisions"""
from uuid import uuid4

from placehub.core.billing.feature_gates import get_featured_gate, get_gallery_gate
from placehub.types import Entitlements, UsageCounts


def _entitlements(status="ACTIVE", featured_max=15, featured_used=0) -> Entitlements:
    usage = UsageCounts(
        places_count=0,
        featured_places_count=featured_used,
        events_this_month_count=0,
        site_members_count=0,
        domain_aliases_count=0,
        languages_count=0,
        galleries_count=0,
    )
    return Entitlements(
        site_id=uuid4(),
        plan="PRO",
        status=status,
        valid_until=None,
        limits={"featured_places_max": featured_max},
        features={},
        usage=usage,
    )


class TestFeaturedGate:
    """Tests for the featured placement gate"""

    def test_inactive_subscription_is_locked(self):
        gate = get_featured_gate(_entitlements(status="EXPIRED"), place_is_featured=False)

        assert gate["state"] == "locked"
        assert gate["upgrade_cta"] == "contactAdmin"

    def test_plan_without_featured_is_locked(self):
        gate = get_featured_gate(_entitlements(featured_max=0), place_is_featured=False)

        assert gate["state"] == "locked"
        assert gate["upgrade_cta"] == "viewPlans"
        assert gate["reason"] == "Kiemelt megjelenés nem érhető el ebben a csomagban."

    def test_limit_reached(self):
        gate = get_featured_gate(_entitlements(featured_max=2, featured_used=2), place_is_featured=False)

        assert gate["state"] == "limit_reached"
        assert gate["reason"] == "Elérted a kiemelések számát (2/2)."
        assert gate["upgrade_cta"] == "upgradePlan"
        assert gate["alternative_cta"] == "manageExisting"

    def test_already_featured_place_stays_enabled_at_limit(self):
        gate = get_featured_gate(_entitlements(featured_max=2, featured_used=2), place_is_featured=True)

        assert gate == {"state": "enabled"}

    def test_unlimited(self):
        gate = get_featured_gate(_entitlements(featured_max=None, featured_used=500), place_is_featured=False)

        assert gate["state"] == "enabled"


class TestGalleryGate:
    """Tests for the gallery image gate"""

    def test_unlimited_plan(self):
        assert get_gallery_gate(None, 1000, None)["state"] == "enabled"

    def test_under_limit(self):
        assert get_gallery_gate(3, 2, None)["state"] == "enabled"

    def test_limit_reached_shows_base_limit(self):
        gate = get_gallery_gate(3, 3, None)

        assert gate["state"] == "limit_reached"
        assert gate["reason"] == "Elérted a kép limitet (3/3)."

    def test_override_extends_limit(self):
        assert get_gallery_gate(3, 4, 2)["state"] == "enabled"

    def test_override_limit_reached_shows_effective_limit(self):
        gate = get_gallery_gate(3, 5, 2)

        assert gate["state"] == "limit_reached"
        assert gate["reason"] == "Elérted a kép limitet (5/5)."
