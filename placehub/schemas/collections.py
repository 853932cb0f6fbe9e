"""Pydantic schemas for collections"""
from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, model_validator

from placehub.db.enums import Lang


class CollectionTranslationInput(BaseModel):
    lang: Lang
    title: str = Field(..., min_length=1)
    description: Optional[str] = None
    hero_image: Optional[str] = None
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None
    seo_image: Optional[str] = None
    seo_keywords: List[str] = []


class CollectionItemTranslationInput(BaseModel):
    lang: Lang
    title_override: Optional[str] = None
    description_override: Optional[str] = None
    image_override: Optional[str] = None


class CollectionCreate(BaseModel):
    slug: str = Field(..., min_length=1)
    domain: Optional[str] = None
    is_active: bool = False
    is_crawlable: bool = True
    order: int = 0
    translations: List[CollectionTranslationInput] = []


class CollectionUpdate(BaseModel):
    """Translations, when given, replace the stored ones"""
    slug: Optional[str] = Field(None, min_length=1)
    domain: Optional[str] = None
    is_active: Optional[bool] = None
    is_crawlable: Optional[bool] = None
    order: Optional[int] = None
    translations: Optional[List[CollectionTranslationInput]] = None


class CollectionItemCreate(BaseModel):
    site_id: UUID
    order: int = 0
    is_highlighted: bool = False
    translations: Optional[List[CollectionItemTranslationInput]] = None


class CollectionItemUpdate(BaseModel):
    order: Optional[int] = None
    is_highlighted: Optional[bool] = None
    translations: Optional[List[CollectionItemTranslationInput]] = None


class CollectionItemBulkInput(BaseModel):
    """Item of a full-list save; ids starting with ``temp-`` are new items"""
    id: Optional[str] = None
    site_id: UUID
    is_highlighted: Optional[bool] = None
    translations: Optional[List[CollectionItemTranslationInput]] = None


class CollectionItemsBulkUpdate(BaseModel):
    items: List[CollectionItemBulkInput]


class CollectionReorder(BaseModel):
    item_ids: List[UUID]


class SiteTranslationSummary(BaseModel):
    lang: Lang
    name: str
    short_description: Optional[str] = None
    hero_image: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class ItemSiteSummary(BaseModel):
    id: UUID
    slug: str
    translations: List[SiteTranslationSummary] = []

    model_config = ConfigDict(from_attributes=True)


class CollectionItemTranslationResponse(BaseModel):
    lang: Lang
    title_override: Optional[str] = None
    description_override: Optional[str] = None
    image_override: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class CollectionItemResponse(BaseModel):
    id: UUID
    collection_id: UUID
    site_id: UUID
    order: int
    is_highlighted: bool
    site: Optional[ItemSiteSummary] = None
    translations: List[CollectionItemTranslationResponse] = []

    model_config = ConfigDict(from_attributes=True)


class CollectionTranslationResponse(BaseModel):
    lang: Lang
    title: str
    description: Optional[str] = None
    hero_image: Optional[str] = None
    seo_title: Optional[str] = None
    seo_description: Optional[str] = None
    seo_image: Optional[str] = None
    seo_keywords: List[str] = []

    model_config = ConfigDict(from_attributes=True)


class CollectionResponse(BaseModel):
    id: UUID
    slug: str
    domain: Optional[str] = None
    is_active: bool
    is_crawlable: bool
    order: int
    created_at: datetime
    updated_at: datetime
    translations: List[CollectionTranslationResponse] = []
    items: List[CollectionItemResponse] = []
    items_count: int = 0

    model_config = ConfigDict(from_attributes=True)

    @model_validator(mode="after")
    def count_items(self) -> "CollectionResponse":
        self.items_count = len(self.items)
        return self


class CollectionViewItem(BaseModel):
    id: UUID
    site_id: UUID
    site_slug: str
    order: int
    is_highlighted: bool
    title: str
    description: Optional[str] = None
    image: Optional[str] = None


class CollectionViewSeo(BaseModel):
    title: str
    description: Optional[str] = None
    image: Optional[str] = None
    keywords: List[str] = []


class CollectionView(BaseModel):
    """Public, language-specific rendering of a collection"""
    id: UUID
    slug: str
    domain: Optional[str] = None
    is_crawlable: bool
    title: str
    description: Optional[str] = None
    hero_image: Optional[str] = None
    seo: CollectionViewSeo
    items: List[CollectionViewItem]
