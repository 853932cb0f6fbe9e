"""Public slug resolution routes"""
from fastapi import APIRouter, Depends
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession
from uuid import UUID

from placehub.api.dependencies import get_lang, get_resolve_service
from placehub.core.database import get_db
from placehub.db.enums import Lang
from placehub.services.resolve_service import ResolveService

router = APIRouter(prefix="/api/public/{lang}/{site_key}", tags=["public"])


class CanonicalResponse(BaseModel):
    lang: str
    site_key: str
    slug: str


class ResolveResponse(BaseModel):
    """Entity behind a public slug and the address it should be served on"""
    site_id: UUID
    lang: str
    entity_type: str
    entity_id: UUID
    canonical: CanonicalResponse
    needs_redirect: bool


@router.get("/resolve/{slug}", response_model=ResolveResponse)
async def resolve_slug(
    site_key: str,
    slug: str,
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: ResolveService = Depends(get_resolve_service),
):
    """
    Resolve a public slug.

    ``needs_redirect`` is true when the site key or slug is not canonical,
    or when only the ASCII form of the slug matched.
    """
    return await service.resolve(db, lang.value, site_key, slug)
