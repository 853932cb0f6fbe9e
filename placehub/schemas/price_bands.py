"""Pydantic schemas for price bands"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from placehub.db.enums import Lang


class PriceBandTranslationInput(BaseModel):
    lang: Lang
    name: str = Field(..., min_length=1)
    description: Optional[str] = None


class PriceBandCreate(BaseModel):
    site_id: UUID
    is_active: bool = True
    translations: List[PriceBandTranslationInput] = Field(..., min_length=1)


class PriceBandUpdate(BaseModel):
    is_active: Optional[bool] = None
    translations: Optional[List[PriceBandTranslationInput]] = None


class PriceBandTranslationResponse(BaseModel):
    lang: Lang
    name: str
    description: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class PriceBandResponse(BaseModel):
    id: UUID
    site_id: UUID
    is_active: bool
    created_at: datetime
    updated_at: datetime
    translations: List[PriceBandTranslationResponse] = []

    model_config = ConfigDict(from_attributes=True)
