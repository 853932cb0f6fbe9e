"""Unit tests for site key resolution"""
import pytest

from placehub.db.enums import Lang
from placehub.exceptions import BadRequestError, NotFoundError
from placehub.schemas.sites import SiteKeyCreate, SiteKeyUpdate
from placehub.services.site_key_resolver import SiteKeyResolver
from placehub.services.site_service import SiteService


class TestSiteKeyResolver:
    """Tests for SiteKeyResolver"""

    @pytest.mark.asyncio
    async def test_default_site_without_key(self, test_db_session, make_site):
        site = await make_site(slug="etyek-budai")

        resolved = await SiteKeyResolver(default_site_slug="etyek-budai").resolve(test_db_session, "hu")

        assert resolved["site_id"] == site.id
        assert resolved["canonical_site_key"] is None
        assert resolved["redirected"] is False

    @pytest.mark.asyncio
    async def test_missing_default_site(self, test_db_session):
        with pytest.raises(NotFoundError) as exc_info:
            await SiteKeyResolver(default_site_slug="nowhere").resolve(test_db_session, "hu")

        assert exc_info.value.error_code.code == "SITE_001"

    @pytest.mark.asyncio
    async def test_invalid_language(self, test_db_session):
        with pytest.raises(BadRequestError):
            await SiteKeyResolver().resolve(test_db_session, "xx", "etyek")

    @pytest.mark.asyncio
    async def test_primary_key(self, test_db_session, make_site):
        site = await make_site(slug="etyek")

        resolved = await SiteKeyResolver().resolve(test_db_session, "en", "etyek")

        assert resolved["site_id"] == site.id
        assert resolved["lang"] == "en"
        assert resolved["canonical_site_key"] == "etyek"
        assert resolved["redirected"] is False

    @pytest.mark.asyncio
    async def test_renamed_key_redirects_to_new_primary(self, test_db_session, make_site):
        site = await make_site(slug="etyek")
        await SiteService().create_key(test_db_session, site.id, SiteKeyCreate(lang=Lang.HU, slug="etyek-budai"))

        resolved = await SiteKeyResolver().resolve(test_db_session, "hu", "etyek")

        assert resolved["site_id"] == site.id
        assert resolved["canonical_site_key"] == "etyek-budai"
        assert resolved["redirected"] is True

    @pytest.mark.asyncio
    async def test_explicit_redirect(self, test_db_session, make_site):
        site = await make_site(slug="etyek")
        service = SiteService()
        target = await service.create_key(
            test_db_session, site.id, SiteKeyCreate(lang=Lang.DE, slug="etyek-de", is_primary=False)
        )
        keys = await service.list_keys(test_db_session, site.id)
        de_primary = next(k for k in keys if k.lang == Lang.DE and k.is_primary)
        await service.update_key(test_db_session, site.id, de_primary.id, SiteKeyUpdate(redirect_to_id=target.id))

        resolved = await SiteKeyResolver().resolve(test_db_session, "de", "etyek")

        assert resolved["canonical_site_key"] == "etyek-de"
        assert resolved["redirected"] is True

    @pytest.mark.asyncio
    async def test_internal_slug_fallback(self, test_db_session, make_site):
        site = await make_site(slug="etyek")
        service = SiteService()
        keys = await service.list_keys(test_db_session, site.id)
        en_key = next(k for k in keys if k.lang == Lang.EN)
        await service.delete_key(test_db_session, site.id, en_key.id)

        resolved = await SiteKeyResolver().resolve(test_db_session, "en", "etyek")

        assert resolved["site_id"] == site.id
        assert resolved["canonical_site_key"] == "etyek"
        assert resolved["redirected"] is False

    @pytest.mark.asyncio
    async def test_inactive_key_is_not_found(self, test_db_session, make_site):
        site = await make_site(slug="etyek")
        service = SiteService()
        await service.create_key(
            test_db_session, site.id, SiteKeyCreate(lang=Lang.HU, slug="regi-kulcs", is_primary=False, is_active=False)
        )

        with pytest.raises(NotFoundError) as exc_info:
            await SiteKeyResolver().resolve(test_db_session, "hu", "regi-kulcs")

        assert exc_info.value.error_code.code == "SITE_002"
