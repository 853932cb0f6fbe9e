"""Pydantic schemas for feature subscriptions"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from placehub.db.enums import (
    BillingPeriod, FeatureKey, FeatureSubscriptionScope, FeatureSubscriptionStatus, FloorplanPlanKey,
)


class FeatureSubscriptionCreate(BaseModel):
    """Request model for creating a feature subscription"""
    site_id: UUID
    scope: FeatureSubscriptionScope
    place_id: Optional[UUID] = Field(None, description="Required when scope is 'place'")
    feature_key: FeatureKey = FeatureKey.FLOORPLANS
    plan_key: FloorplanPlanKey
    billing_period: BillingPeriod
    floorplan_limit: Optional[int] = Field(None, ge=1, description="Required for FP_CUSTOM")
    stripe_subscription_id: Optional[str] = None
    current_period_end: Optional[datetime] = None


class FeatureSubscriptionUpdate(BaseModel):
    """Partial update; only fields present in the payload are changed"""
    plan_key: Optional[FloorplanPlanKey] = None
    billing_period: Optional[BillingPeriod] = None
    floorplan_limit: Optional[int] = Field(None, ge=1)
    status: Optional[FeatureSubscriptionStatus] = None
    scope: Optional[FeatureSubscriptionScope] = None
    place_id: Optional[UUID] = None
    stripe_subscription_id: Optional[str] = None
    current_period_end: Optional[datetime] = None


class NamedTranslation(BaseModel):
    lang: str
    name: str

    model_config = ConfigDict(from_attributes=True)


class SubscriptionSiteSummary(BaseModel):
    id: UUID
    slug: str
    translations: List[NamedTranslation] = []

    model_config = ConfigDict(from_attributes=True)


class SubscriptionPlaceSummary(BaseModel):
    id: UUID
    translations: List[NamedTranslation] = []

    model_config = ConfigDict(from_attributes=True)


class FeatureSubscriptionResponse(BaseModel):
    """Response model for feature subscription data"""
    id: UUID
    site_id: UUID
    scope: FeatureSubscriptionScope
    place_id: Optional[UUID] = None
    feature_key: FeatureKey
    plan_key: str
    billing_period: BillingPeriod
    floorplan_limit: Optional[int] = None
    status: FeatureSubscriptionStatus
    stripe_subscription_id: Optional[str] = None
    current_period_end: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class FeatureSubscriptionListItem(FeatureSubscriptionResponse):
    site: Optional[SubscriptionSiteSummary] = None
    place: Optional[SubscriptionPlaceSummary] = None


class FeatureSubscriptionList(BaseModel):
    items: List[FeatureSubscriptionListItem]
    total: int


class FloorplanEntitlementResponse(BaseModel):
    entitled: bool
    active_scope: Optional[FeatureSubscriptionScope] = None
    limit: int
    used: int
    status: str
    subscription_id: Optional[UUID] = None
    current_period_end: Optional[datetime] = None
