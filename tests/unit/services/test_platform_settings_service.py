"""Unit tests for the plan feature matrix"""
import pytest

from placehub.core.billing.entitlements import EntitlementsService, get_brand
from placehub.exceptions import BadRequestError
from placehub.schemas.platform import FeatureMatrixUpdate
from placehub.services.platform_settings_service import PlatformSettingsService


class TestPlatformSettingsService:

    @pytest.mark.asyncio
    async def test_matrix_without_brand(self, test_db_session):
        matrix = await PlatformSettingsService().get_feature_matrix(test_db_session)

        assert matrix["plan_overrides"] == {}
        assert set(matrix["plans"]) == {"FREE", "BASIC", "PRO", "BUSINESS"}
        assert matrix["plans"]["BASIC"]["limits"]["featured_places_max"] == 0
        assert matrix["place_plans"]["free"] == {"images": 3, "events": 0, "featured": False}

    @pytest.mark.asyncio
    async def test_update_creates_brand(self, test_db_session):
        matrix = await PlatformSettingsService().update_feature_matrix(
            test_db_session,
            FeatureMatrixUpdate(
                plan_overrides={"PRO": {"limits": {"places_max": 100}}},
                place_plan_overrides={"free": {"images": 5}},
            ),
        )

        brand = await get_brand(test_db_session)
        assert brand is not None
        assert brand.plan_overrides == {"PRO": {"limits": {"places_max": 100}}}
        assert matrix["plans"]["PRO"]["limits"]["places_max"] == 100
        assert matrix["place_plans"]["free"]["images"] == 5

    @pytest.mark.asyncio
    async def test_invalid_override_is_rejected(self, test_db_session):
        with pytest.raises(BadRequestError) as exc_info:
            await PlatformSettingsService().update_feature_matrix(
                test_db_session,
                FeatureMatrixUpdate(plan_overrides={"BASIC": {"limits": {"places_max": -1}}}),
            )

        assert exc_info.value.error_code.code == "ENTITLEMENT_001"
        assert exc_info.value.message.startswith("Invalid plan override: ")
        assert await get_brand(test_db_session) is None

    @pytest.mark.asyncio
    async def test_override_reaches_site_entitlements(self, test_db_session, make_site):
        site = await make_site()
        await PlatformSettingsService().update_feature_matrix(
            test_db_session,
            FeatureMatrixUpdate(plan_overrides={"BASIC": {"limits": {"featured_places_max": 2}}}),
        )

        entitlements = await EntitlementsService().get_by_site_id(test_db_session, site.id)

        assert entitlements["limits"]["featured_places_max"] == 2
