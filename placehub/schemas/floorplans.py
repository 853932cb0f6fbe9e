"""Pydantic schemas for floorplans and floorplan pins"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class FloorplanCreate(BaseModel):
    """Request model for uploading a floorplan"""
    place_id: UUID
    title: Optional[str] = None
    image_url: str = Field(..., min_length=1)
    sort_order: Optional[int] = None
    is_primary: bool = False


class FloorplanUpdate(BaseModel):
    title: Optional[str] = None
    image_url: Optional[str] = Field(None, min_length=1)
    sort_order: Optional[int] = None
    is_primary: Optional[bool] = None


class PinCreate(BaseModel):
    """Pin coordinates are fractions of the image width/height"""
    floorplan_id: UUID
    x: float
    y: float
    label: Optional[str] = None
    sort_order: Optional[int] = None


class PinUpdate(BaseModel):
    x: Optional[float] = None
    y: Optional[float] = None
    label: Optional[str] = None
    sort_order: Optional[int] = None


class PinResponse(BaseModel):
    id: UUID
    floorplan_id: UUID
    x: float
    y: float
    label: str
    sort_order: int
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class FloorplanResponse(BaseModel):
    id: UUID
    place_id: UUID
    title: str
    image_url: str
    sort_order: int
    is_primary: bool
    created_at: datetime
    updated_at: datetime
    pins: List[PinResponse] = []

    model_config = ConfigDict(from_attributes=True)
