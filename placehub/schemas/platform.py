"""Pydantic schemas for platform settings (plan feature matrix)"""
from typing import Any, Dict, Optional

from pydantic import BaseModel


class FeatureMatrixUpdate(BaseModel):
    """Replaces the stored overrides; documents are validated before saving"""
    plan_overrides: Dict[str, Any] = {}
    place_plan_overrides: Dict[str, Any] = {}


class PlanMatrixEntry(BaseModel):
    limits: Dict[str, Optional[int]]
    features: Dict[str, bool]


class PlacePlanMatrixEntry(BaseModel):
    images: Optional[int] = None
    events: Optional[int] = None
    featured: bool


class FeatureMatrixResponse(BaseModel):
    """Stored overrides together with the effective plans they produce"""
    plan_overrides: Dict[str, Any]
    place_plan_overrides: Dict[str, Any]
    plans: Dict[str, PlanMatrixEntry]
    place_plans: Dict[str, PlacePlanMatrixEntry]
