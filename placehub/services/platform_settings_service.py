"""
Platform Settings Service - the plan feature matrix.

Platform admins override plan limits and features per plan. Overrides live
on the platform settings row and are validated with the typed override
models before they are stored.
"""
import logging
from typing import Any, Dict

from pydantic import ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from placehub.core.billing.entitlements import get_brand
from placehub.core.billing.plans import (
    parse_place_plan_overrides, parse_plan_overrides, resolve_place_plan, resolve_plan,
)
from placehub.db.enums import PlacePlan, SubscriptionPlan
from placehub.db.models import Brand
from placehub.decision.error_codes import ErrorCodeDictionary
from placehub.exceptions import BadRequestError
from placehub.schemas.platform import FeatureMatrixUpdate

logger = logging.getLogger(__name__)

DEFAULT_BRAND_NAME = "PlaceHub"


def _validation_message(error: Exception) -> str:
    if isinstance(error, ValidationError):
        details = "; ".join(
            f"{'.'.join(str(part) for part in e['loc']) or 'body'}: {e['msg']}" for e in error.errors()
        )
        return f"Invalid plan override: {details}"
    return f"Invalid plan override: {error}"


class PlatformSettingsService:

    async def get_feature_matrix(self, db: AsyncSession) -> Dict[str, Any]:
        brand = await get_brand(db)
        plan_overrides = dict(brand.plan_overrides or {}) if brand else {}
        place_plan_overrides = dict(brand.place_plan_overrides or {}) if brand else {}

        plans = {}
        for plan in SubscriptionPlan:
            definition = resolve_plan(plan, plan_overrides)
            plans[plan.value] = {
                "limits": definition.limits.model_dump(),
                "features": definition.features.model_dump(),
            }

        return {
            "plan_overrides": plan_overrides,
            "place_plan_overrides": place_plan_overrides,
            "plans": plans,
            "place_plans": {
                plan.value: resolve_place_plan(plan, place_plan_overrides).model_dump()
                for plan in PlacePlan
            },
        }

    async def update_feature_matrix(self, db: AsyncSession, data: FeatureMatrixUpdate) -> Dict[str, Any]:
        """
        Replace the stored overrides.

        Raises:
            BadRequestError: unknown plan, unknown key, negative limit or wrong type
        """
        try:
            plan_overrides = parse_plan_overrides(data.plan_overrides)
            place_plan_overrides = parse_place_plan_overrides(data.place_plan_overrides)
        except (ValidationError, ValueError) as e:
            raise BadRequestError(
                ErrorCodeDictionary.ENTITLEMENT_001.with_message(_validation_message(e))
            )

        brand = await get_brand(db)
        if brand is None:
            brand = Brand(name=DEFAULT_BRAND_NAME)
            db.add(brand)

        brand.plan_overrides = {
            plan.value: override.model_dump(mode="json", exclude_unset=True)
            for plan, override in plan_overrides.items()
        }
        brand.place_plan_overrides = {
            plan.value: override.model_dump(mode="json", exclude_unset=True)
            for plan, override in place_plan_overrides.items()
        }
        await db.commit()

        logger.info(
            f"Feature matrix updated: plans {sorted(brand.plan_overrides)}, "
            f"place plans {sorted(brand.place_plan_overrides)}"
        )
        return await self.get_feature_matrix(db)
