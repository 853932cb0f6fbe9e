"""Platform settings routes"""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from placehub.api.dependencies import get_platform_settings_service
from placehub.core.database import get_db
from placehub.schemas.platform import FeatureMatrixResponse, FeatureMatrixUpdate
from placehub.services.platform_settings_service import PlatformSettingsService

router = APIRouter(prefix="/api/admin/platform", tags=["platform"])


@router.get("/feature-matrix", response_model=FeatureMatrixResponse)
async def get_feature_matrix(
    db: AsyncSession = Depends(get_db),
    service: PlatformSettingsService = Depends(get_platform_settings_service),
):
    """Stored plan overrides and the effective plans"""
    return await service.get_feature_matrix(db)


@router.put("/feature-matrix", response_model=FeatureMatrixResponse)
async def update_feature_matrix(
    data: FeatureMatrixUpdate,
    db: AsyncSession = Depends(get_db),
    service: PlatformSettingsService = Depends(get_platform_settings_service),
):
    """Replace the plan overrides; invalid documents are rejected with 400"""
    return await service.update_feature_matrix(db, data)
