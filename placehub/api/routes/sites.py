"""Site and site key admin routes"""
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from placehub.api.dependencies import get_lang, get_site_service
from placehub.core.database import get_db
from placehub.db.enums import Lang
from placehub.schemas.sites import (
    SiteCreate, SiteKeyCreate, SiteKeyResponse, SiteKeyUpdate, SiteResponse, SiteUpdate,
)
from placehub.services.site_service import SiteService
from placehub.utils.responses import format_deleted_response

router = APIRouter(prefix="/api/{lang}/admin/sites", tags=["sites"])


@router.get("", response_model=List[SiteResponse])
async def list_sites(
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: SiteService = Depends(get_site_service),
):
    return await service.list_sites(db)


@router.get("/{site_id}", response_model=SiteResponse)
async def get_site(
    site_id: UUID,
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: SiteService = Depends(get_site_service),
):
    return await service.get(db, site_id)


@router.post("", response_model=SiteResponse, status_code=status.HTTP_201_CREATED)
async def create_site(
    data: SiteCreate,
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: SiteService = Depends(get_site_service),
):
    """
    Create a site.

    The slug is normalized to ASCII and a primary site key is created for
    every supported language.
    """
    return await service.create(db, data)


@router.patch("/{site_id}", response_model=SiteResponse)
async def update_site(
    site_id: UUID,
    data: SiteUpdate,
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: SiteService = Depends(get_site_service),
):
    return await service.update(db, site_id, data)


@router.delete("/{site_id}")
async def delete_site(
    site_id: UUID,
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: SiteService = Depends(get_site_service),
):
    await service.delete(db, site_id)
    return format_deleted_response("Site", site_id)


# ----------------------------------------------------------------------
# Site keys
# ----------------------------------------------------------------------

@router.get("/{site_id}/keys", response_model=List[SiteKeyResponse])
async def list_site_keys(
    site_id: UUID,
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: SiteService = Depends(get_site_service),
):
    return await service.list_keys(db, site_id)


@router.post("/{site_id}/keys", response_model=SiteKeyResponse, status_code=status.HTTP_201_CREATED)
async def create_site_key(
    site_id: UUID,
    data: SiteKeyCreate,
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: SiteService = Depends(get_site_service),
):
    """Add a public key; a primary key replaces the current primary of its language"""
    return await service.create_key(db, site_id, data)


@router.patch("/{site_id}/keys/{key_id}", response_model=SiteKeyResponse)
async def update_site_key(
    site_id: UUID,
    key_id: UUID,
    data: SiteKeyUpdate,
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: SiteService = Depends(get_site_service),
):
    return await service.update_key(db, site_id, key_id, data)


@router.delete("/{site_id}/keys/{key_id}")
async def delete_site_key(
    site_id: UUID,
    key_id: UUID,
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: SiteService = Depends(get_site_service),
):
    await service.delete_key(db, site_id, key_id)
    return format_deleted_response("Site key", key_id)
