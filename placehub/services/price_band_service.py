"""Price Band Service - per-site price categories"""
import logging
from typing import List
from uuid import UUID

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from placehub.db.enums import Lang
from placehub.db.models import Place, PriceBand, PriceBandTranslation
from placehub.decision.error_codes import ErrorCodeDictionary
from placehub.exceptions import BadRequestError, NotFoundError
from placehub.schemas.price_bands import PriceBandCreate, PriceBandUpdate

logger = logging.getLogger(__name__)


class PriceBandService:

    async def list_for_site(self, db: AsyncSession, site_id: UUID) -> List[PriceBand]:
        result = await db.execute(
            select(PriceBand)
            .where(PriceBand.site_id == site_id)
            .order_by(PriceBand.created_at.desc())
        )
        return list(result.scalars().all())

    async def get(self, db: AsyncSession, band_id: UUID, site_id: UUID) -> PriceBand:
        band = await db.scalar(
            select(PriceBand)
            .where(PriceBand.id == band_id, PriceBand.site_id == site_id)
            .execution_options(populate_existing=True)
        )
        if band is None:
            raise NotFoundError(ErrorCodeDictionary.PRICEBAND_001, entity_id=band_id)
        return band

    async def create(self, db: AsyncSession, data: PriceBandCreate) -> PriceBand:
        band = PriceBand(
            site_id=data.site_id,
            is_active=data.is_active,
            translations=[
                PriceBandTranslation(lang=t.lang, name=t.name, description=t.description)
                for t in data.translations
            ],
        )
        db.add(band)
        await db.commit()
        return await self.get(db, band.id, data.site_id)

    async def update(self, db: AsyncSession, band_id: UUID, site_id: UUID, data: PriceBandUpdate) -> PriceBand:
        """Update a band; translations are upserted per language"""
        band = await self.get(db, band_id, site_id)

        if data.is_active is not None:
            band.is_active = data.is_active

        if data.translations:
            by_lang = {Lang(t.lang): t for t in band.translations}
            for incoming in data.translations:
                current = by_lang.get(incoming.lang)
                if current is None:
                    band.translations.append(PriceBandTranslation(
                        lang=incoming.lang, name=incoming.name, description=incoming.description
                    ))
                else:
                    current.name = incoming.name
                    current.description = incoming.description

        await db.commit()
        return await self.get(db, band_id, site_id)

    async def delete(self, db: AsyncSession, band_id: UUID, site_id: UUID) -> None:
        """
        Delete a price band.

        Raises:
            BadRequestError: the band is still assigned to places
        """
        band = await self.get(db, band_id, site_id)

        places_count = await db.scalar(
            select(func.count()).select_from(Place).where(Place.price_band_id == band_id)
        )
        if places_count:
            raise BadRequestError(
                ErrorCodeDictionary.PRICEBAND_002.with_message(
                    f"Cannot delete price band: it is used by {places_count} place(s). Deactivate it instead."
                ),
                entity_id=band_id,
                context={"places_count": places_count},
            )

        await db.delete(band)
        await db.commit()
        logger.info(f"Price band {band_id} deleted")
