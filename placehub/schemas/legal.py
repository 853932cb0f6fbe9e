"""Pydantic schemas for legal pages"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from placehub.db.enums import Lang, LegalPageKey


class LegalPageTranslationInput(BaseModel):
    lang: Lang
    title: str = Field(..., min_length=1)
    short_description: Optional[str] = None
    content: Optional[str] = None
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None
    seo_image: Optional[str] = None
    seo_keywords: List[str] = []


class LegalPageCreate(BaseModel):
    """Request model for creating a legal page of a site"""
    site_id: UUID
    key: str = Field(..., description="imprint, terms or privacy")
    is_active: bool = True
    translations: List[LegalPageTranslationInput] = []


class LegalPageUpdate(BaseModel):
    """Translations are upserted per language; omitted languages are kept"""
    is_active: Optional[bool] = None
    translations: Optional[List[LegalPageTranslationInput]] = None


class LegalPageTranslationResponse(BaseModel):
    id: UUID
    lang: Lang
    title: str
    short_description: Optional[str] = None
    content: Optional[str] = None
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None
    seo_image: Optional[str] = None
    seo_keywords: List[str] = []

    model_config = ConfigDict(from_attributes=True)


class LegalPageResponse(BaseModel):
    id: UUID
    site_id: UUID
    key: LegalPageKey
    is_active: bool
    created_at: datetime
    updated_at: datetime
    translations: List[LegalPageTranslationResponse] = []

    model_config = ConfigDict(from_attributes=True)


class OpenGraph(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None
    type: str = "website"


class TwitterCard(BaseModel):
    card: str = "summary_large_image"
    title: Optional[str] = None
    description: Optional[str] = None
    image: Optional[str] = None


class SeoPayload(BaseModel):
    title: str
    description: str
    image: Optional[str] = None
    keywords: List[str] = []
    canonical: Optional[str] = None
    robots: Optional[str] = None
    og: OpenGraph = OpenGraph()
    twitter: TwitterCard = TwitterCard()


class PublicLegalPage(BaseModel):
    """Public legal page rendered in one language"""
    key: LegalPageKey
    title: str
    short_description: Optional[str] = None
    content: str = ""
    seo: SeoPayload
