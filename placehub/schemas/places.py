"""Pydantic schemas for places"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from placehub.db.enums import Lang, PlacePlan


class PlaceTranslationInput(BaseModel):
    lang: Lang
    name: str = Field(..., min_length=1)
    short_description: Optional[str] = None
    description: Optional[str] = None


class PlaceCreate(BaseModel):
    """Request model for creating a place; one slug is generated per translation"""
    site_id: UUID
    price_band_id: Optional[UUID] = None
    plan: PlacePlan = PlacePlan.FREE
    is_active: bool = True
    is_featured: bool = False
    featured_until: Optional[datetime] = None
    gallery_limit_override: Optional[int] = Field(None, ge=0)
    hero_image: Optional[str] = None
    translations: List[PlaceTranslationInput] = Field(..., min_length=1)


class PlaceUpdate(BaseModel):
    """Partial update; translations are upserted per language"""
    price_band_id: Optional[UUID] = None
    plan: Optional[PlacePlan] = None
    is_active: Optional[bool] = None
    is_featured: Optional[bool] = None
    featured_until: Optional[datetime] = None
    gallery_limit_override: Optional[int] = Field(None, ge=0)
    hero_image: Optional[str] = None
    translations: Optional[List[PlaceTranslationInput]] = None


class PlaceTranslationResponse(BaseModel):
    lang: Lang
    name: str
    short_description: Optional[str] = None
    description: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class PlaceResponse(BaseModel):
    id: UUID
    site_id: UUID
    price_band_id: Optional[UUID] = None
    plan: PlacePlan
    is_active: bool
    is_featured: bool
    featured_until: Optional[datetime] = None
    gallery_limit_override: Optional[int] = None
    hero_image: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    translations: List[PlaceTranslationResponse] = []

    model_config = ConfigDict(from_attributes=True)


class FeatureGateResponse(BaseModel):
    state: str
    reason: Optional[str] = None
    upgrade_cta: Optional[str] = None
    alternative_cta: Optional[str] = None


class PlaceUpsellResponse(BaseModel):
    featured: FeatureGateResponse
    gallery: FeatureGateResponse
    floorplans: FeatureGateResponse
