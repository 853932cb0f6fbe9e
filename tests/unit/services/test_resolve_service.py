"""Unit tests for public slug resolution"""
import pytest
from sqlalchemy import select

from placehub.db.enums import Lang, SlugEntityType
from placehub.db.models import Slug
from placehub.exceptions import NotFoundError
from placehub.schemas.places import PlaceTranslationInput, PlaceUpdate
from placehub.schemas.sites import SiteKeyCreate
from placehub.services.place_service import PlaceService
from placehub.services.resolve_service import ResolveService
from placehub.services.site_service import SiteService


class TestResolveService:
    """Tests for ResolveService"""

    @pytest.mark.asyncio
    async def test_canonical_slug(self, test_db_session, make_site, make_place):
        site = await make_site(slug="etyek")
        place = await make_place(site.id, name="Kovács Pincészet")

        resolved = await ResolveService().resolve(test_db_session, "hu", "etyek", "kovacs-pinceszet")

        assert resolved["entity_type"] == "place"
        assert resolved["entity_id"] == place.id
        assert resolved["canonical"] == {"lang": "hu", "site_key": "etyek", "slug": "kovacs-pinceszet"}
        assert resolved["needs_redirect"] is False

    @pytest.mark.asyncio
    async def test_old_slug_redirects_after_rename(self, test_db_session, make_site, make_place):
        site = await make_site(slug="etyek")
        place = await make_place(site.id, name="Kovács Pincészet")
        await PlaceService().update(
            test_db_session, place.id, site.id,
            PlaceUpdate(translations=[PlaceTranslationInput(lang=Lang.HU, name="Kovács Borház")]),
        )

        resolved = await ResolveService().resolve(test_db_session, "hu", "etyek", "kovacs-pinceszet")

        assert resolved["canonical"]["slug"] == "kovacs-borhaz"
        assert resolved["needs_redirect"] is True

    @pytest.mark.asyncio
    async def test_accented_slug_matches_after_normalization(self, test_db_session, make_site, make_place):
        site = await make_site(slug="etyek")
        await make_place(site.id, name="Kovács Pincészet")

        resolved = await ResolveService().resolve(test_db_session, "hu", "etyek", "Kovács-Pincészet")

        assert resolved["canonical"]["slug"] == "kovacs-pinceszet"
        assert resolved["needs_redirect"] is True

    @pytest.mark.asyncio
    async def test_outdated_site_key_redirects(self, test_db_session, make_site, make_place):
        site = await make_site(slug="etyek")
        await make_place(site.id, name="Kovács Pincészet")
        await SiteService().create_key(test_db_session, site.id, SiteKeyCreate(lang=Lang.HU, slug="etyek-budai"))

        resolved = await ResolveService().resolve(test_db_session, "hu", "etyek", "kovacs-pinceszet")

        assert resolved["canonical"]["site_key"] == "etyek-budai"
        assert resolved["needs_redirect"] is True

    @pytest.mark.asyncio
    async def test_explicit_slug_redirect(self, test_db_session, make_site, make_place):
        site = await make_site(slug="etyek")
        place = await make_place(site.id, name="Kovács Pincészet")
        primary_id = await test_db_session.scalar(select(Slug.id).where(Slug.entity_id == place.id))
        test_db_session.add(Slug(
            site_id=site.id,
            lang=Lang.HU,
            slug="kovacs",
            entity_type=SlugEntityType.PLACE,
            entity_id=place.id,
            is_primary=False,
            redirect_to_id=primary_id,
        ))
        await test_db_session.commit()

        resolved = await ResolveService().resolve(test_db_session, "hu", "etyek", "kovacs")

        assert resolved["canonical"]["slug"] == "kovacs-pinceszet"
        assert resolved["needs_redirect"] is True

    @pytest.mark.asyncio
    async def test_slug_in_other_language_is_not_found(self, test_db_session, make_site, make_place):
        site = await make_site(slug="etyek")
        await make_place(site.id, name="Kovács Pincészet")

        with pytest.raises(NotFoundError) as exc_info:
            await ResolveService().resolve(test_db_session, "en", "etyek", "kovacs-pinceszet")

        assert exc_info.value.error_code.code == "SLUG_001"
