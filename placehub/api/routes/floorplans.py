"""Floorplan and floorplan pin routes"""
from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from placehub.api.dependencies import (
    get_floorplan_pin_service, get_floorplan_service, get_lang, get_site_key_resolver,
)
from placehub.core.database import get_db
from placehub.db.enums import Lang
from placehub.decision.error_codes import ErrorCodeDictionary
from placehub.exceptions import NotFoundError
from placehub.schemas.floorplans import (
    FloorplanCreate, FloorplanResponse, FloorplanUpdate, PinCreate, PinResponse, PinUpdate,
)
from placehub.services.floorplan_service import FloorplanPinService, FloorplanService
from placehub.services.site_key_resolver import SiteKeyResolver
from placehub.utils.responses import format_deleted_response

router = APIRouter(prefix="/api/{lang}/admin/floorplans", tags=["floorplans"])
pins_router = APIRouter(prefix="/api/{lang}/admin/floorplan-pins", tags=["floorplans"])
public_router = APIRouter(prefix="/api/public/{lang}/{site_key}/floorplans", tags=["public"])


# ----------------------------------------------------------------------
# Floorplans
# ----------------------------------------------------------------------

@router.get("/place/{place_id}", response_model=List[FloorplanResponse])
async def list_place_floorplans(
    place_id: UUID,
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: FloorplanService = Depends(get_floorplan_service),
):
    return await service.list_for_place(db, place_id)


@router.get("/{floorplan_id}", response_model=FloorplanResponse)
async def get_floorplan(
    floorplan_id: UUID,
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: FloorplanService = Depends(get_floorplan_service),
):
    return await service.get(db, floorplan_id)


@router.post("", response_model=FloorplanResponse, status_code=status.HTTP_201_CREATED)
async def create_floorplan(
    data: FloorplanCreate,
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: FloorplanService = Depends(get_floorplan_service),
):
    """Upload a floorplan; the place needs an active floorplan subscription"""
    return await service.create(db, data)


@router.patch("/{floorplan_id}", response_model=FloorplanResponse)
async def update_floorplan(
    floorplan_id: UUID,
    data: FloorplanUpdate,
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: FloorplanService = Depends(get_floorplan_service),
):
    return await service.update(db, floorplan_id, data)


@router.delete("/{floorplan_id}")
async def delete_floorplan(
    floorplan_id: UUID,
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: FloorplanService = Depends(get_floorplan_service),
):
    await service.delete(db, floorplan_id)
    return format_deleted_response("Floorplan", floorplan_id)


# ----------------------------------------------------------------------
# Pins
# ----------------------------------------------------------------------

@pins_router.get("/floorplan/{floorplan_id}", response_model=List[PinResponse])
async def list_floorplan_pins(
    floorplan_id: UUID,
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: FloorplanPinService = Depends(get_floorplan_pin_service),
):
    return await service.list_for_floorplan(db, floorplan_id)


@pins_router.get("/{pin_id}", response_model=PinResponse)
async def get_pin(
    pin_id: UUID,
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: FloorplanPinService = Depends(get_floorplan_pin_service),
):
    return await service.get(db, pin_id)


@pins_router.post("", response_model=PinResponse, status_code=status.HTTP_201_CREATED)
async def create_pin(
    data: PinCreate,
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: FloorplanPinService = Depends(get_floorplan_pin_service),
):
    return await service.create(db, data)


@pins_router.patch("/{pin_id}", response_model=PinResponse)
async def update_pin(
    pin_id: UUID,
    data: PinUpdate,
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: FloorplanPinService = Depends(get_floorplan_pin_service),
):
    return await service.update(db, pin_id, data)


@pins_router.delete("/{pin_id}")
async def delete_pin(
    pin_id: UUID,
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: FloorplanPinService = Depends(get_floorplan_pin_service),
):
    await service.delete(db, pin_id)
    return format_deleted_response("Pin", pin_id)


# ----------------------------------------------------------------------
# Public
# ----------------------------------------------------------------------

@public_router.get("/{place_id}", response_model=List[FloorplanResponse])
async def list_public_floorplans(
    site_key: str,
    place_id: UUID,
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    resolver: SiteKeyResolver = Depends(get_site_key_resolver),
    service: FloorplanService = Depends(get_floorplan_service),
):
    """Floorplans with pins; empty when the place has no floorplan entitlement"""
    site = await resolver.resolve(db, lang.value, site_key)
    place = await service.get_place(db, place_id)
    if place.site_id != site["site_id"]:
        raise NotFoundError(
            ErrorCodeDictionary.PLACE_001.with_message(f"Place with id {place_id} not found"),
            entity_id=place_id,
        )
    return await service.list_for_place(db, place_id, public=True)
