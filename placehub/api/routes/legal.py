"""Legal page routes (imprint, terms, privacy)"""
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from placehub.api.dependencies import get_lang, get_legal_service
from placehub.core.database import get_db
from placehub.db.enums import Lang
from placehub.schemas.legal import (
    LegalPageCreate, LegalPageResponse, LegalPageUpdate, PublicLegalPage,
)
from placehub.services.legal_service import LegalService
from placehub.utils.responses import format_deleted_response

router = APIRouter(prefix="/api/{lang}/admin/legal", tags=["legal"])
public_router = APIRouter(prefix="/api/public/{lang}/{site_key}/legal", tags=["public"])


@router.get("", response_model=List[LegalPageResponse])
async def list_legal_pages(
    site_id: UUID = Query(..., alias="siteId"),
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: LegalService = Depends(get_legal_service),
):
    return await service.list_pages(db, site_id)


@router.get("/by-key/{key}", response_model=LegalPageResponse)
async def get_legal_page_by_key(
    key: str,
    site_id: UUID = Query(..., alias="siteId"),
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: LegalService = Depends(get_legal_service),
):
    return await service.get_by_key(db, key, site_id)


@router.get("/{page_id}", response_model=LegalPageResponse)
async def get_legal_page(
    page_id: UUID,
    site_id: UUID = Query(..., alias="siteId"),
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: LegalService = Depends(get_legal_service),
):
    return await service.get(db, page_id, site_id)


@router.post("", response_model=LegalPageResponse, status_code=status.HTTP_201_CREATED)
async def create_legal_page(
    data: LegalPageCreate,
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: LegalService = Depends(get_legal_service),
):
    """Create a legal page; each key exists at most once per site"""
    return await service.create(db, data)


@router.patch("/{page_id}", response_model=LegalPageResponse)
async def update_legal_page(
    page_id: UUID,
    data: LegalPageUpdate,
    site_id: UUID = Query(..., alias="siteId"),
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: LegalService = Depends(get_legal_service),
):
    return await service.update(db, page_id, site_id, data)


@router.delete("/{page_id}")
async def delete_legal_page(
    page_id: UUID,
    site_id: UUID = Query(..., alias="siteId"),
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: LegalService = Depends(get_legal_service),
):
    await service.delete(db, page_id, site_id)
    return format_deleted_response("Legal page", page_id)


@public_router.get("/by-id/{page_id}", response_model=PublicLegalPage)
async def get_public_legal_page_by_id(
    lang: str,
    site_key: str,
    page_id: UUID,
    db: AsyncSession = Depends(get_db),
    service: LegalService = Depends(get_legal_service),
):
    return await service.get_page_by_id(db, lang, page_id, site_key)


@public_router.get("/{page}", response_model=PublicLegalPage)
async def get_public_legal_page(
    lang: str,
    site_key: str,
    page: str,
    db: AsyncSession = Depends(get_db),
    service: LegalService = Depends(get_legal_service),
):
    """
    Legal page in the requested language, falling back to Hungarian.

    The SEO description is derived from the content when none was written.
    """
    return await service.get_page(db, lang, page, site_key)
