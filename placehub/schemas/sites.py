"""Pydantic schemas for sites, site keys, site subscriptions and entitlements"""
from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from placehub.db.enums import Lang, SubscriptionPlan, SubscriptionStatus


class SiteTranslationInput(BaseModel):
    lang: Lang
    name: str = Field(..., min_length=1)
    short_description: Optional[str] = None
    description: Optional[str] = None
    hero_image: Optional[str] = None


class SiteCreate(BaseModel):
    """Request model for creating a site; the slug is normalized to ASCII"""
    slug: str = Field(..., min_length=1)
    primary_domain: Optional[str] = None
    is_active: bool = True
    translations: List[SiteTranslationInput] = []


class SiteUpdate(BaseModel):
    slug: Optional[str] = Field(None, min_length=1)
    primary_domain: Optional[str] = None
    is_active: Optional[bool] = None
    translations: Optional[List[SiteTranslationInput]] = None


class SiteTranslationResponse(BaseModel):
    lang: Lang
    name: str
    short_description: Optional[str] = None
    description: Optional[str] = None
    hero_image: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class SiteResponse(BaseModel):
    id: UUID
    slug: str
    primary_domain: Optional[str] = None
    is_active: bool
    created_at: datetime
    updated_at: datetime
    translations: List[SiteTranslationResponse] = []

    model_config = ConfigDict(from_attributes=True)


class SiteKeyCreate(BaseModel):
    lang: Lang
    slug: str = Field(..., min_length=1)
    is_primary: bool = True
    is_active: bool = True
    redirect_to_id: Optional[UUID] = None


class SiteKeyUpdate(BaseModel):
    """Partial update; ``redirect_to_id: null`` clears the redirect"""
    slug: Optional[str] = Field(None, min_length=1)
    is_primary: Optional[bool] = None
    is_active: Optional[bool] = None
    redirect_to_id: Optional[UUID] = None


class SiteKeyResponse(BaseModel):
    id: UUID
    site_id: UUID
    lang: Lang
    slug: str
    is_primary: bool
    is_active: bool
    redirect_to_id: Optional[UUID] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class SiteSubscriptionUpdate(BaseModel):
    plan: SubscriptionPlan
    status: SubscriptionStatus = SubscriptionStatus.ACTIVE
    valid_until: Optional[datetime] = None
    note: Optional[str] = None


class SiteSubscriptionResponse(BaseModel):
    site_id: UUID
    plan: SubscriptionPlan
    status: SubscriptionStatus
    valid_until: Optional[datetime] = None
    note: Optional[str] = None


class UsageResponse(BaseModel):
    places_count: int
    featured_places_count: int
    events_this_month_count: int
    site_members_count: int
    domain_aliases_count: int
    languages_count: int
    galleries_count: int


class EntitlementsResponse(BaseModel):
    """Plan, limits (null = unlimited), features and live usage of a site"""
    site_id: UUID
    plan: SubscriptionPlan
    status: SubscriptionStatus
    valid_until: Optional[datetime] = None
    limits: Dict[str, Optional[int]]
    features: Dict[str, bool]
    usage: UsageResponse
