"""
Feature Subscription Service - separately billed features (floorplans).

A subscription covers either one place (``scope=place``) or every place of
a site (``scope=site``). Cancelling does not revoke access immediately: a
canceled subscription keeps granting the feature until
``current_period_end``.
"""
import logging
from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from placehub.db.enums import (
    BillingPeriod, FeatureKey, FeatureSubscriptionScope, FeatureSubscriptionStatus, FloorplanPlanKey
)
from placehub.db.models import FeatureSubscription, PlaceFloorplan
from placehub.decision.error_codes import ErrorCodeDictionary
from placehub.exceptions import BadRequestError
from placehub.schemas.feature_subscriptions import FeatureSubscriptionCreate, FeatureSubscriptionUpdate
from placehub.types import FloorplanEntitlement
from placehub.utils.database import get_or_404
from placehub.utils.dates import add_months, utc_now

logger = logging.getLogger(__name__)

# Every floorplan plan allows one floorplan per place
FLOORPLAN_LIMIT = 1

DEFAULT_PAGE_SIZE = 10

_GRANTING_STATUSES = (FeatureSubscriptionStatus.ACTIVE, FeatureSubscriptionStatus.CANCELED)


def calculate_period_end(billing_period: BillingPeriod, now: Optional[datetime] = None) -> datetime:
    """End of the first billing period starting ``now``"""
    now = now or utc_now()
    if billing_period == BillingPeriod.YEARLY:
        return add_months(now, 12)
    return add_months(now, 1)


def _validate_scope(scope: FeatureSubscriptionScope, place_id: Optional[UUID]) -> None:
    if scope == FeatureSubscriptionScope.PLACE and place_id is None:
        raise BadRequestError(ErrorCodeDictionary.SUBSCRIPTION_002)
    if scope == FeatureSubscriptionScope.SITE and place_id is not None:
        raise BadRequestError(ErrorCodeDictionary.SUBSCRIPTION_003, entity_id=place_id)


class FeatureSubscriptionService:
    """CRUD, lifecycle and entitlement checks for feature subscriptions"""

    async def get_floorplan_entitlement(
        self,
        db: AsyncSession,
        place_id: UUID,
        site_id: UUID,
    ) -> FloorplanEntitlement:
        """
        Floorplan access of a place.

        A place-scope subscription takes precedence over a site-scope one;
        within a scope the newest unexpired subscription wins.
        """
        now = utc_now()
        granting = (
            FeatureSubscription.feature_key == FeatureKey.FLOORPLANS,
            FeatureSubscription.status.in_(_GRANTING_STATUSES),
            FeatureSubscription.current_period_end >= now,
        )

        subscription = await db.scalar(
            select(FeatureSubscription)
            .where(FeatureSubscription.place_id == place_id, *granting)
            .order_by(FeatureSubscription.created_at.desc())
            .limit(1)
        )
        if subscription is None:
            subscription = await db.scalar(
                select(FeatureSubscription)
                .where(
                    FeatureSubscription.site_id == site_id,
                    FeatureSubscription.scope == FeatureSubscriptionScope.SITE,
                    FeatureSubscription.place_id.is_(None),
                    *granting,
                )
                .order_by(FeatureSubscription.created_at.desc())
                .limit(1)
            )

        used = await db.scalar(
            select(func.count(PlaceFloorplan.id)).where(PlaceFloorplan.place_id == place_id)
        ) or 0

        if subscription is None:
            return FloorplanEntitlement(
                entitled=False,
                active_scope=None,
                limit=0,
                used=used,
                status="locked",
            )

        return FloorplanEntitlement(
            entitled=True,
            active_scope=FeatureSubscriptionScope(subscription.scope).value,
            limit=FLOORPLAN_LIMIT,
            used=used,
            status="limit_reached" if used >= FLOORPLAN_LIMIT else "active",
            subscription_id=subscription.id,
            current_period_end=subscription.current_period_end,
        )

    async def create(self, db: AsyncSession, data: FeatureSubscriptionCreate) -> FeatureSubscription:
        """
        Create an active subscription.

        Raises:
            BadRequestError: invalid scope/place combination, FP_CUSTOM
                without a limit, or an identical active subscription exists
        """
        _validate_scope(data.scope, data.place_id)
        if data.plan_key == FloorplanPlanKey.FP_CUSTOM and not data.floorplan_limit:
            raise BadRequestError(ErrorCodeDictionary.SUBSCRIPTION_004)

        place_filter = (
            FeatureSubscription.place_id == data.place_id
            if data.scope == FeatureSubscriptionScope.PLACE
            else FeatureSubscription.place_id.is_(None)
        )
        duplicate = await db.scalar(
            select(FeatureSubscription.id)
            .where(
                FeatureSubscription.site_id == data.site_id,
                FeatureSubscription.feature_key == data.feature_key,
                FeatureSubscription.plan_key == data.plan_key.value,
                FeatureSubscription.scope == data.scope,
                place_filter,
                FeatureSubscription.status == FeatureSubscriptionStatus.ACTIVE,
                FeatureSubscription.current_period_end >= utc_now(),
            )
            .limit(1)
        )
        if duplicate is not None:
            raise BadRequestError(ErrorCodeDictionary.SUBSCRIPTION_005, entity_id=duplicate)

        subscription = FeatureSubscription(
            site_id=data.site_id,
            scope=data.scope,
            place_id=data.place_id,
            feature_key=data.feature_key,
            plan_key=data.plan_key.value,
            billing_period=data.billing_period,
            floorplan_limit=data.floorplan_limit,
            status=FeatureSubscriptionStatus.ACTIVE,
            stripe_subscription_id=data.stripe_subscription_id,
            current_period_end=data.current_period_end or calculate_period_end(data.billing_period),
        )
        db.add(subscription)
        await db.commit()

        logger.info(
            f"Feature subscription {subscription.id} created: "
            f"{data.feature_key.value}/{data.plan_key.value} scope={data.scope.value}"
        )
        return await self.get(db, subscription.id)

    async def update(
        self,
        db: AsyncSession,
        subscription_id: UUID,
        data: FeatureSubscriptionUpdate,
    ) -> FeatureSubscription:
        """Apply the fields present in ``data``"""
        subscription = await self.get(db, subscription_id)
        provided = data.model_fields_set

        if "scope" in provided and data.scope is not None:
            _validate_scope(data.scope, data.place_id)
        if (
            data.plan_key == FloorplanPlanKey.FP_CUSTOM
            and "floorplan_limit" not in provided
            and not subscription.floorplan_limit
        ):
            raise BadRequestError(ErrorCodeDictionary.SUBSCRIPTION_004, entity_id=subscription_id)

        if data.plan_key is not None:
            subscription.plan_key = data.plan_key.value
        if data.billing_period is not None:
            subscription.billing_period = data.billing_period
        if "floorplan_limit" in provided:
            subscription.floorplan_limit = data.floorplan_limit
        if data.status is not None:
            subscription.status = data.status
        if "scope" in provided and data.scope is not None:
            subscription.scope = data.scope
            subscription.place_id = data.place_id if data.scope == FeatureSubscriptionScope.PLACE else None
        if "stripe_subscription_id" in provided:
            subscription.stripe_subscription_id = data.stripe_subscription_id
        if data.current_period_end is not None:
            subscription.current_period_end = data.current_period_end

        await db.commit()
        return await self.get(db, subscription_id)

    async def cancel(self, db: AsyncSession, subscription_id: UUID) -> FeatureSubscription:
        """Mark canceled; access continues until ``current_period_end``"""
        subscription = await self.get(db, subscription_id)
        if subscription.status == FeatureSubscriptionStatus.CANCELED:
            raise BadRequestError(ErrorCodeDictionary.SUBSCRIPTION_006, entity_id=subscription_id)
        return await self._set_status(db, subscription, FeatureSubscriptionStatus.CANCELED)

    async def suspend(self, db: AsyncSession, subscription_id: UUID) -> FeatureSubscription:
        """Suspension is stored as ``canceled`` (the status set has no suspended value)"""
        subscription = await self.get(db, subscription_id)
        if subscription.status == FeatureSubscriptionStatus.CANCELED:
            raise BadRequestError(
                ErrorCodeDictionary.SUBSCRIPTION_006.with_message("Subscription is already suspended/cancelled"),
                entity_id=subscription_id,
            )
        return await self._set_status(db, subscription, FeatureSubscriptionStatus.CANCELED)

    async def resume(self, db: AsyncSession, subscription_id: UUID) -> FeatureSubscription:
        subscription = await self.get(db, subscription_id)
        if subscription.status != FeatureSubscriptionStatus.CANCELED:
            raise BadRequestError(ErrorCodeDictionary.SUBSCRIPTION_007, entity_id=subscription_id)
        return await self._set_status(db, subscription, FeatureSubscriptionStatus.ACTIVE)

    async def delete(self, db: AsyncSession, subscription_id: UUID) -> None:
        subscription = await self.get(db, subscription_id)
        await db.delete(subscription)
        await db.commit()
        logger.info(f"Feature subscription {subscription_id} deleted")

    async def get(self, db: AsyncSession, subscription_id: UUID) -> FeatureSubscription:
        return await get_or_404(
            db, FeatureSubscription, subscription_id,
            ErrorCodeDictionary.SUBSCRIPTION_001, "Feature subscription",
            populate_existing=True,
        )

    async def get_by_site(self, db: AsyncSession, site_id: UUID):
        result = await db.execute(
            select(FeatureSubscription)
            .where(FeatureSubscription.site_id == site_id)
            .order_by(FeatureSubscription.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_by_place(self, db: AsyncSession, place_id: UUID):
        result = await db.execute(
            select(FeatureSubscription)
            .where(FeatureSubscription.place_id == place_id)
            .order_by(FeatureSubscription.created_at.desc())
        )
        return list(result.scalars().all())

    async def get_all(
        self,
        db: AsyncSession,
        scope: Optional[str] = None,
        status: Optional[str] = None,
        feature_key: Optional[str] = None,
        site_id: Optional[UUID] = None,
        place_id: Optional[UUID] = None,
        q: Optional[str] = None,
        take: Optional[int] = None,
        skip: Optional[int] = None,
    ) -> Dict[str, Any]:
        """
        Filtered admin listing.

        ``"all"`` (or None) disables the scope/status/feature filters; ``q``
        searches plan keys and Stripe ids case-insensitively.

        Returns:
            {"items": [...], "total": int}
        """
        conditions = []
        if scope and scope != "all":
            conditions.append(FeatureSubscription.scope == FeatureSubscriptionScope(scope))
        if status and status != "all":
            conditions.append(FeatureSubscription.status == FeatureSubscriptionStatus(status))
        if feature_key and feature_key != "all":
            conditions.append(FeatureSubscription.feature_key == FeatureKey(feature_key))
        if site_id:
            conditions.append(FeatureSubscription.site_id == site_id)
        if place_id:
            conditions.append(FeatureSubscription.place_id == place_id)
        if q:
            pattern = f"%{q.lower()}%"
            conditions.append(
                or_(
                    func.lower(FeatureSubscription.plan_key).like(pattern),
                    func.lower(FeatureSubscription.stripe_subscription_id).like(pattern),
                )
            )

        result = await db.execute(
            select(FeatureSubscription)
            .where(*conditions)
            .order_by(FeatureSubscription.created_at.desc())
            .limit(take or DEFAULT_PAGE_SIZE)
            .offset(skip or 0)
        )
        total = await db.scalar(select(func.count(FeatureSubscription.id)).where(*conditions))
        return {"items": list(result.scalars().all()), "total": total or 0}

    async def _set_status(
        self,
        db: AsyncSession,
        subscription: FeatureSubscription,
        status: FeatureSubscriptionStatus,
    ) -> FeatureSubscription:
        previous = subscription.status
        subscription.status = status
        await db.commit()
        logger.info(f"Feature subscription {subscription.id}: {previous.value} -> {status.value}")
        return await self.get(db, subscription.id)
