"""Entitlement and site subscription routes"""
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from placehub.api.dependencies import get_entitlements_service, get_lang
from placehub.core.billing.entitlements import EntitlementsService
from placehub.core.database import get_db, get_session_factory
from placehub.db.enums import Lang
from placehub.schemas.sites import (
    EntitlementsResponse, SiteSubscriptionResponse, SiteSubscriptionUpdate,
)

router = APIRouter(prefix="/api/{lang}", tags=["entitlements"])


@router.get("/entitlements", response_model=EntitlementsResponse)
async def get_entitlements(
    site_key: Optional[str] = Query(None, alias="siteKey"),
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    session_factory: Optional[async_sessionmaker] = Depends(get_session_factory),
    service: EntitlementsService = Depends(get_entitlements_service),
):
    """
    Plan, limits, features and live usage of a site.

    Without ``siteKey`` the default site is used.
    """
    return await service.get_for_request(db, lang.value, site_key, session_factory=session_factory)


@router.get("/admin/sites/{site_id}/subscription", response_model=SiteSubscriptionResponse)
async def get_site_subscription(
    site_id: UUID,
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: EntitlementsService = Depends(get_entitlements_service),
):
    """Stored subscription of a site, or the configured default plan"""
    return await service.get_subscription(db, site_id)


@router.put("/admin/sites/{site_id}/subscription", response_model=SiteSubscriptionResponse)
async def update_site_subscription(
    site_id: UUID,
    data: SiteSubscriptionUpdate,
    lang: Lang = Depends(get_lang),
    db: AsyncSession = Depends(get_db),
    service: EntitlementsService = Depends(get_entitlements_service),
):
    return await service.upsert_subscription(
        db, site_id, data.plan, data.status, valid_until=data.valid_until, note=data.note
    )
