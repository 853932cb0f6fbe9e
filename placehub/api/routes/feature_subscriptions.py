"""Feature subscription admin routes"""
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from placehub.api.dependencies import get_feature_subscription_service, get_lang
from placehub.core.database import get_db
from placehub.db.enums import Lang
from placehub.schemas.feature_subscriptions import (
    FeatureSubscriptionCreate, FeatureSubscriptionList, FeatureSubscriptionResponse,
    FeatureSubscriptionUpdate, FloorplanEntitlementResponse,
)
from placehub.services.feature_subscription_service import FeatureSubscriptionService
from placehub.utils.responses import format_deleted_response

router = APIRouter(prefix="/api/{lang}/admin/feature-subscriptions", tags=["feature-subscriptions"])


@router.get("", response_model=FeatureSubscriptionList)
async def list_feature_subscriptions(
    scope: Optional[str] = Query(None, description="place, site or all"),
    status_filter: Optional[str] = Query(None, alias="status", description="active, past_due, canceled or all"),
    feature_key: Optional[str] = Query(None, alias="featureKey"),
    site_id: Optional[UUID] = Query(None, alias="siteId"),
    place_id: Optional[UUID] = Query(None, alias="placeId"),
    q: Optional[str] = Query(None),
    take: Optional[int] = Query(None, ge=1, le=100),
    skip: Optional[int] = Query(None, ge=0),
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: FeatureSubscriptionService = Depends(get_feature_subscription_service),
):
    """Filtered, paginated listing"""
    return await service.get_all(
        db,
        scope=scope,
        status=status_filter,
        feature_key=feature_key,
        site_id=site_id,
        place_id=place_id,
        q=q,
        take=take,
        skip=skip,
    )


@router.get("/floorplan-entitlement", response_model=FloorplanEntitlementResponse)
async def get_floorplan_entitlement(
    place_id: UUID = Query(..., alias="placeId"),
    site_id: UUID = Query(..., alias="siteId"),
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: FeatureSubscriptionService = Depends(get_feature_subscription_service),
):
    return await service.get_floorplan_entitlement(db, place_id, site_id)


@router.get("/by-site/{site_id}", response_model=List[FeatureSubscriptionResponse])
async def list_by_site(
    site_id: UUID,
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: FeatureSubscriptionService = Depends(get_feature_subscription_service),
):
    return await service.get_by_site(db, site_id)


@router.get("/by-place/{place_id}", response_model=List[FeatureSubscriptionResponse])
async def list_by_place(
    place_id: UUID,
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: FeatureSubscriptionService = Depends(get_feature_subscription_service),
):
    return await service.get_by_place(db, place_id)


@router.get("/{subscription_id}", response_model=FeatureSubscriptionResponse)
async def get_feature_subscription(
    subscription_id: UUID,
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: FeatureSubscriptionService = Depends(get_feature_subscription_service),
):
    return await service.get(db, subscription_id)


@router.post("", response_model=FeatureSubscriptionResponse, status_code=status.HTTP_201_CREATED)
async def create_feature_subscription(
    data: FeatureSubscriptionCreate,
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: FeatureSubscriptionService = Depends(get_feature_subscription_service),
):
    """
    Create an active subscription.

    Place scope requires ``place_id``; site scope forbids it. FP_CUSTOM
    requires ``floorplan_limit``.
    """
    return await service.create(db, data)


@router.patch("/{subscription_id}", response_model=FeatureSubscriptionResponse)
async def update_feature_subscription(
    subscription_id: UUID,
    data: FeatureSubscriptionUpdate,
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: FeatureSubscriptionService = Depends(get_feature_subscription_service),
):
    return await service.update(db, subscription_id, data)


@router.post("/{subscription_id}/cancel", response_model=FeatureSubscriptionResponse)
async def cancel_feature_subscription(
    subscription_id: UUID,
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: FeatureSubscriptionService = Depends(get_feature_subscription_service),
):
    return await service.cancel(db, subscription_id)


@router.post("/{subscription_id}/suspend", response_model=FeatureSubscriptionResponse)
async def suspend_feature_subscription(
    subscription_id: UUID,
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: FeatureSubscriptionService = Depends(get_feature_subscription_service),
):
    return await service.suspend(db, subscription_id)


@router.post("/{subscription_id}/resume", response_model=FeatureSubscriptionResponse)
async def resume_feature_subscription(
    subscription_id: UUID,
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: FeatureSubscriptionService = Depends(get_feature_subscription_service),
):
    return await service.resume(db, subscription_id)


@router.delete("/{subscription_id}")
async def delete_feature_subscription(
    subscription_id: UUID,
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: FeatureSubscriptionService = Depends(get_feature_subscription_service),
):
    await service.delete(db, subscription_id)
    return format_deleted_response("Feature subscription", subscription_id)
