"""Unit tests for plan definitions and platform overrides"""
import pytest
from pydantic import ValidationError

from placehub.core.billing.plans import (
    PLACE_PLAN_LIMITS,
    PLAN_DEFS,
    parse_place_plan_overrides,
    parse_plan_overrides,
    resolve_place_plan,
    resolve_plan,
)
from placehub.db.enums import PlacePlan, SubscriptionPlan


class TestPlanDefinitions:
    """Tests for the built-in plan table"""

    def test_free_uses_basic_envelope(self):
        assert PLAN_DEFS[SubscriptionPlan.FREE] == PLAN_DEFS[SubscriptionPlan.BASIC]

    def test_basic_limits(self):
        basic = PLAN_DEFS[SubscriptionPlan.BASIC]

        assert basic.limits.places_max is None
        assert basic.limits.featured_places_max == 0
        assert basic.limits.languages_max == 1
        assert basic.features.events_enabled is False

    def test_pro_limits_and_features(self):
        pro = PLAN_DEFS[SubscriptionPlan.PRO]

        assert pro.limits.featured_places_max == 15
        assert pro.limits.events_per_month_max == 200
        assert pro.features.events_enabled is True
        assert pro.features.custom_domain_enabled is False

    def test_business_is_unlimited(self):
        business = PLAN_DEFS[SubscriptionPlan.BUSINESS]

        assert all(value is None for value in business.limits.model_dump().values())
        assert business.features.custom_domain_enabled is True

    def test_place_plans(self):
        assert PLACE_PLAN_LIMITS[PlacePlan.FREE].images == 3
        assert PLACE_PLAN_LIMITS[PlacePlan.BASIC].events == 3
        assert PLACE_PLAN_LIMITS[PlacePlan.PRO].images is None
        assert PLACE_PLAN_LIMITS[PlacePlan.PRO].featured is True


class TestResolvePlan:
    """Tests for applying stored overrides"""

    def test_no_overrides_returns_base(self):
        assert resolve_plan(SubscriptionPlan.PRO, None) is PLAN_DEFS[SubscriptionPlan.PRO]

    def test_override_replaces_only_named_limits(self):
        resolved = resolve_plan(SubscriptionPlan.PRO, {"PRO": {"limits": {"featured_places_max": 20}}})

        assert resolved.limits.featured_places_max == 20
        assert resolved.limits.events_per_month_max == 200
        assert resolved.features == PLAN_DEFS[SubscriptionPlan.PRO].features

    def test_null_limit_means_unlimited(self):
        resolved = resolve_plan(SubscriptionPlan.BASIC, {"BASIC": {"limits": {"featured_places_max": None}}})

        assert resolved.limits.featured_places_max is None

    def test_feature_override(self):
        resolved = resolve_plan(SubscriptionPlan.BASIC, {"BASIC": {"features": {"events_enabled": True}}})

        assert resolved.features.events_enabled is True
        assert resolved.features.place_seo_enabled is False

    def test_override_for_other_plan_is_ignored(self):
        resolved = resolve_plan(SubscriptionPlan.BASIC, {"PRO": {"limits": {"places_max": 1}}})

        assert resolved == PLAN_DEFS[SubscriptionPlan.BASIC]

    def test_invalid_stored_override_falls_back_to_base(self):
        resolved = resolve_plan(SubscriptionPlan.PRO, {"PRO": {"limits": {"unknown_limit": 3}}})

        assert resolved == PLAN_DEFS[SubscriptionPlan.PRO]

    def test_place_plan_override(self):
        resolved = resolve_place_plan(PlacePlan.FREE, {"free": {"images": 5}})

        assert resolved.images == 5
        assert resolved.events == 0
        assert resolved.featured is False


class TestParseOverrides:
    """Tests for validating override documents before they are saved"""

    def test_valid_document(self):
        parsed = parse_plan_overrides({"PRO": {"limits": {"places_max": 100}}})

        assert parsed[SubscriptionPlan.PRO].limits.places_max == 100

    def test_unknown_plan(self):
        with pytest.raises(ValueError):
            parse_plan_overrides({"GOLD": {}})

    def test_unknown_key(self):
        with pytest.raises(ValidationError):
            parse_plan_overrides({"PRO": {"limits": {"unicorns_max": 1}}})

    def test_negative_limit(self):
        with pytest.raises(ValidationError):
            parse_plan_overrides({"BASIC": {"limits": {"places_max": -1}}})

    def test_place_plan_wrong_type(self):
        with pytest.raises(ValidationError):
            parse_place_plan_overrides({"basic": {"featured": "sometimes"}})
