"""Place admin routes"""
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from placehub.api.dependencies import get_lang, get_place_service, get_place_upsell_service
from placehub.core.billing.feature_gates import PlaceUpsellService
from placehub.core.database import get_db, get_session_factory
from placehub.db.enums import Lang
from placehub.schemas.places import PlaceCreate, PlaceResponse, PlaceUpdate, PlaceUpsellResponse
from placehub.services.place_service import PlaceService
from placehub.utils.responses import format_deleted_response

router = APIRouter(prefix="/api/{lang}/admin/places", tags=["places"])


@router.get("", response_model=List[PlaceResponse])
async def list_places(
    site_id: UUID = Query(..., alias="siteId"),
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: PlaceService = Depends(get_place_service),
):
    return await service.list_for_site(db, site_id)


@router.get("/{place_id}", response_model=PlaceResponse)
async def get_place(
    place_id: UUID,
    site_id: UUID = Query(..., alias="siteId"),
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: PlaceService = Depends(get_place_service),
):
    return await service.get(db, place_id, site_id)


@router.get("/{place_id}/upsell", response_model=PlaceUpsellResponse)
async def get_place_upsell(
    place_id: UUID,
    site_id: Optional[UUID] = Query(None, alias="siteId"),
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    session_factory: Optional[async_sessionmaker] = Depends(get_session_factory),
    service: PlaceUpsellService = Depends(get_place_upsell_service),
):
    """Featured, gallery and floorplan gates shown in the place editor"""
    return await service.get_place_upsell_state(db, site_id, place_id, session_factory=session_factory)


@router.post("", response_model=PlaceResponse, status_code=status.HTTP_201_CREATED)
async def create_place(
    data: PlaceCreate,
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    session_factory: Optional[async_sessionmaker] = Depends(get_session_factory),
    service: PlaceService = Depends(get_place_service),
):
    """Create a place; a slug is generated for each translation"""
    return await service.create(db, data, session_factory=session_factory)


@router.patch("/{place_id}", response_model=PlaceResponse)
async def update_place(
    place_id: UUID,
    data: PlaceUpdate,
    site_id: UUID = Query(..., alias="siteId"),
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    session_factory: Optional[async_sessionmaker] = Depends(get_session_factory),
    service: PlaceService = Depends(get_place_service),
):
    return await service.update(db, place_id, site_id, data, session_factory=session_factory)


@router.delete("/{place_id}")
async def delete_place(
    place_id: UUID,
    site_id: UUID = Query(..., alias="siteId"),
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: PlaceService = Depends(get_place_service),
):
    await service.delete(db, place_id, site_id)
    return format_deleted_response("Place", place_id)
