"""Price band admin routes"""
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from placehub.api.dependencies import get_lang, get_price_band_service
from placehub.core.database import get_db
from placehub.db.enums import Lang
from placehub.schemas.price_bands import PriceBandCreate, PriceBandResponse, PriceBandUpdate
from placehub.services.price_band_service import PriceBandService
from placehub.utils.responses import format_deleted_response

router = APIRouter(prefix="/api/{lang}/admin/price-bands", tags=["price-bands"])


@router.get("", response_model=List[PriceBandResponse])
async def list_price_bands(
    site_id: UUID = Query(..., alias="siteId"),
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: PriceBandService = Depends(get_price_band_service),
):
    return await service.list_for_site(db, site_id)


@router.get("/{band_id}", response_model=PriceBandResponse)
async def get_price_band(
    band_id: UUID,
    site_id: UUID = Query(..., alias="siteId"),
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: PriceBandService = Depends(get_price_band_service),
):
    return await service.get(db, band_id, site_id)


@router.post("", response_model=PriceBandResponse, status_code=status.HTTP_201_CREATED)
async def create_price_band(
    data: PriceBandCreate,
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: PriceBandService = Depends(get_price_band_service),
):
    return await service.create(db, data)


@router.patch("/{band_id}", response_model=PriceBandResponse)
async def update_price_band(
    band_id: UUID,
    data: PriceBandUpdate,
    site_id: UUID = Query(..., alias="siteId"),
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: PriceBandService = Depends(get_price_band_service),
):
    return await service.update(db, band_id, site_id, data)


@router.delete("/{band_id}")
async def delete_price_band(
    band_id: UUID,
    site_id: UUID = Query(..., alias="siteId"),
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: PriceBandService = Depends(get_price_band_service),
):
    """Delete a price band; bands still used by places must be deactivated instead"""
    await service.delete(db, band_id, site_id)
    return format_deleted_response("Price band", band_id)
