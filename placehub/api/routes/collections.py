"""Collection admin and public routes"""
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from placehub.api.dependencies import get_collection_service, get_lang
from placehub.core.database import get_db
from placehub.db.enums import Lang
from placehub.schemas.collections import (
    CollectionCreate, CollectionItemCreate, CollectionItemResponse, CollectionItemUpdate,
    CollectionItemsBulkUpdate, CollectionReorder, CollectionResponse, CollectionUpdate,
    CollectionView,
)
from placehub.services.collection_service import CollectionService
from placehub.utils.responses import format_deleted_response

router = APIRouter(prefix="/api/{lang}/admin/collections", tags=["collections"])
public_router = APIRouter(prefix="/api/public/{lang}/collections", tags=["public"])


@router.get("", response_model=List[CollectionResponse])
async def list_collections(
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: CollectionService = Depends(get_collection_service),
):
    return await service.list_collections(db)


@router.get("/{collection_id}", response_model=CollectionResponse)
async def get_collection(
    collection_id: UUID,
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: CollectionService = Depends(get_collection_service),
):
    return await service.get(db, collection_id)


@router.post("", response_model=CollectionResponse, status_code=status.HTTP_201_CREATED)
async def create_collection(
    data: CollectionCreate,
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: CollectionService = Depends(get_collection_service),
):
    return await service.create(db, data)


@router.patch("/{collection_id}", response_model=CollectionResponse)
async def update_collection(
    collection_id: UUID,
    data: CollectionUpdate,
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: CollectionService = Depends(get_collection_service),
):
    return await service.update(db, collection_id, data)


@router.delete("/{collection_id}")
async def delete_collection(
    collection_id: UUID,
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: CollectionService = Depends(get_collection_service),
):
    await service.delete(db, collection_id)
    return format_deleted_response("Collection", collection_id)


@router.post("/{collection_id}/items", response_model=CollectionItemResponse, status_code=status.HTTP_201_CREATED)
async def add_collection_item(
    collection_id: UUID,
    data: CollectionItemCreate,
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: CollectionService = Depends(get_collection_service),
):
    return await service.add_item(db, collection_id, data)


@router.put("/{collection_id}/items", response_model=CollectionResponse)
async def bulk_update_collection_items(
    collection_id: UUID,
    data: CollectionItemsBulkUpdate,
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: CollectionService = Depends(get_collection_service),
):
    """Save the full item list; items left out are removed"""
    return await service.bulk_update_items(db, collection_id, data)


@router.post("/{collection_id}/items/reorder", response_model=CollectionResponse)
async def reorder_collection_items(
    collection_id: UUID,
    data: CollectionReorder,
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: CollectionService = Depends(get_collection_service),
):
    return await service.reorder_items(db, collection_id, data.item_ids)


@router.patch("/{collection_id}/items/{item_id}", response_model=CollectionItemResponse)
async def update_collection_item(
    collection_id: UUID,
    item_id: UUID,
    data: CollectionItemUpdate,
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: CollectionService = Depends(get_collection_service),
):
    return await service.update_item(db, collection_id, item_id, data)


@router.delete("/{collection_id}/items/{item_id}")
async def delete_collection_item(
    collection_id: UUID,
    item_id: UUID,
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: CollectionService = Depends(get_collection_service),
):
    await service.delete_item(db, collection_id, item_id)
    return format_deleted_response("Collection item", item_id)


@public_router.get("/{slug}", response_model=CollectionView)
async def get_public_collection(
    lang: str,
    slug: str,
    domain: Optional[str] = Query(None),
    db: AsyncSession = Depends(get_db),
    service: CollectionService = Depends(get_collection_service),
):
    """
    Public collection view.

    A matching custom ``domain`` wins over the slug. Unknown languages fall
    back to Hungarian instead of failing.
    """
    return await service.get_collection_view(db, lang, domain=domain, slug=slug)
