"""Unit tests for price bands"""
import pytest
from uuid import uuid4

from placehub.db.enums import Lang
from placehub.exceptions import BadRequestError, NotFoundError
from placehub.schemas.price_bands import PriceBandCreate, PriceBandTranslationInput, PriceBandUpdate
from placehub.services.price_band_service import PriceBandService


def _band(site_id) -> PriceBandCreate:
    return PriceBandCreate(
        site_id=site_id,
        translations=[PriceBandTranslationInput(lang=Lang.HU, name="Közepes", description="5-10 ezer Ft")],
    )


class TestPriceBandService:

    @pytest.mark.asyncio
    async def test_update_upserts_translation(self, test_db_session, make_site):
        site = await make_site()
        service = PriceBandService()
        band = await service.create(test_db_session, _band(site.id))

        updated = await service.update(
            test_db_session,
            band.id,
            site.id,
            PriceBandUpdate(
                is_active=False,
                translations=[
                    PriceBandTranslationInput(lang=Lang.HU, name="Közép"),
                    PriceBandTranslationInput(lang=Lang.EN, name="Mid-range"),
                ],
            ),
        )

        assert updated.is_active is False
        assert {t.lang: t.name for t in updated.translations} == {Lang.HU: "Közép", Lang.EN: "Mid-range"}

    @pytest.mark.asyncio
    async def test_band_of_other_site(self, test_db_session, make_site):
        site = await make_site()
        other = await make_site(slug="balaton", name="Balaton")
        band = await PriceBandService().create(test_db_session, _band(site.id))

        with pytest.raises(NotFoundError) as exc_info:
            await PriceBandService().get(test_db_session, band.id, other.id)

        assert exc_info.value.error_code.code == "PRICEBAND_001"

    @pytest.mark.asyncio
    async def test_delete_unused(self, test_db_session, make_site):
        site = await make_site()
        service = PriceBandService()
        band = await service.create(test_db_session, _band(site.id))

        await service.delete(test_db_session, band.id, site.id)

        assert await service.list_for_site(test_db_session, site.id) == []

    @pytest.mark.asyncio
    async def test_delete_in_use(self, test_db_session, make_site, make_place):
        site = await make_site()
        service = PriceBandService()
        band = await service.create(test_db_session, _band(site.id))
        await make_place(site.id, price_band_id=band.id)
        await make_place(site.id, name="Szabó Borház", price_band_id=band.id)

        with pytest.raises(BadRequestError) as exc_info:
            await service.delete(test_db_session, band.id, site.id)

        assert exc_info.value.error_code.code == "PRICEBAND_002"
        assert exc_info.value.message == (
            "Cannot delete price band: it is used by 2 place(s). Deactivate it instead."
        )

    @pytest.mark.asyncio
    async def test_delete_unknown(self, test_db_session, make_site):
        site = await make_site()

        with pytest.raises(NotFoundError):
            await PriceBandService().delete(test_db_session, uuid4(), site.id)
