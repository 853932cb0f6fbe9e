"""Unit tests for collections and the public collection view"""
import pytest
from uuid import uuid4

from placehub.db.enums import Lang
from placehub.exceptions import BadRequestError, NotFoundError
from placehub.schemas.collections import (
    CollectionCreate, CollectionItemBulkInput, CollectionItemCreate, CollectionItemTranslationInput,
    CollectionItemsBulkUpdate, CollectionTranslationInput, CollectionUpdate,
)
from placehub.services.collection_service import CollectionService


def _collection(slug="borutak", **fields) -> CollectionCreate:
    translations = fields.pop("translations", None) or [
        CollectionTranslationInput(lang=Lang.HU, title="Borutak", description="Válogatott borvidékek"),
        CollectionTranslationInput(lang=Lang.EN, title="Wine routes"),
    ]
    return CollectionCreate(slug=slug, translations=translations, **fields)


class TestCollectionAdmin:
    """Tests for collection CRUD"""

    @pytest.mark.asyncio
    async def test_domain_is_lowercased(self, test_db_session):
        collection = await CollectionService().create(test_db_session, _collection(domain="Borutak.HU"))

        assert collection.domain == "borutak.hu"

    @pytest.mark.asyncio
    async def test_duplicate_slug(self, test_db_session):
        service = CollectionService()
        await service.create(test_db_session, _collection())

        with pytest.raises(BadRequestError) as exc_info:
            await service.create(test_db_session, _collection())

        assert exc_info.value.error_code.code == "COLLECTION_002"

    @pytest.mark.asyncio
    async def test_duplicate_domain_ignores_case(self, test_db_session):
        service = CollectionService()
        await service.create(test_db_session, _collection(domain="borutak.hu"))

        with pytest.raises(BadRequestError) as exc_info:
            await service.create(test_db_session, _collection(slug="masik", domain="BORUTAK.hu"))

        assert exc_info.value.error_code.code == "COLLECTION_003"

    @pytest.mark.asyncio
    async def test_update_replaces_translations(self, test_db_session):
        service = CollectionService()
        collection = await service.create(test_db_session, _collection())

        updated = await service.update(
            test_db_session,
            collection.id,
            CollectionUpdate(
                domain="",
                translations=[CollectionTranslationInput(lang=Lang.HU, title="Borutak 2026")],
            ),
        )

        assert [(t.lang, t.title) for t in updated.translations] == [(Lang.HU, "Borutak 2026")]
        assert updated.domain is None

    @pytest.mark.asyncio
    async def test_get_unknown(self, test_db_session):
        with pytest.raises(NotFoundError) as exc_info:
            await CollectionService().get(test_db_session, uuid4())

        assert exc_info.value.error_code.code == "COLLECTION_001"


class TestCollectionItems:
    """Tests for item management"""

    @pytest.mark.asyncio
    async def test_add_item_unknown_site(self, test_db_session):
        service = CollectionService()
        collection = await service.create(test_db_session, _collection())

        with pytest.raises(NotFoundError) as exc_info:
            await service.add_item(test_db_session, collection.id, CollectionItemCreate(site_id=uuid4()))

        assert exc_info.value.error_code.code == "SITE_003"

    @pytest.mark.asyncio
    async def test_item_of_other_collection(self, test_db_session, make_site):
        site = await make_site()
        service = CollectionService()
        first = await service.create(test_db_session, _collection())
        second = await service.create(test_db_session, _collection(slug="masik"))
        item = await service.add_item(test_db_session, first.id, CollectionItemCreate(site_id=site.id))

        with pytest.raises(BadRequestError) as exc_info:
            await service.get_item(test_db_session, second.id, item.id)

        assert exc_info.value.error_code.code == "COLLECTION_005"

    @pytest.mark.asyncio
    async def test_reorder(self, test_db_session, make_site):
        etyek = await make_site()
        balaton = await make_site(slug="balaton", name="Balaton")
        service = CollectionService()
        collection = await service.create(test_db_session, _collection())
        first = await service.add_item(test_db_session, collection.id, CollectionItemCreate(site_id=etyek.id))
        second = await service.add_item(
            test_db_session, collection.id, CollectionItemCreate(site_id=balaton.id, order=1)
        )

        reordered = await service.reorder_items(test_db_session, collection.id, [second.id, first.id])

        assert [item.id for item in reordered.items] == [second.id, first.id]

    @pytest.mark.asyncio
    async def test_reorder_rejects_foreign_item(self, test_db_session):
        service = CollectionService()
        collection = await service.create(test_db_session, _collection())

        with pytest.raises(BadRequestError) as exc_info:
            await service.reorder_items(test_db_session, collection.id, [uuid4()])

        assert exc_info.value.error_code.code == "COLLECTION_005"

    @pytest.mark.asyncio
    async def test_bulk_update(self, test_db_session, make_site):
        etyek = await make_site()
        balaton = await make_site(slug="balaton", name="Balaton")
        tokaj = await make_site(slug="tokaj", name="Tokaj")
        service = CollectionService()
        collection = await service.create(test_db_session, _collection())
        kept = await service.add_item(test_db_session, collection.id, CollectionItemCreate(site_id=etyek.id))
        await service.add_item(test_db_session, collection.id, CollectionItemCreate(site_id=balaton.id, order=1))

        saved = await service.bulk_update_items(
            test_db_session,
            collection.id,
            CollectionItemsBulkUpdate(items=[
                CollectionItemBulkInput(id="temp-1", site_id=tokaj.id, is_highlighted=True),
                CollectionItemBulkInput(id=str(kept.id), site_id=etyek.id),
            ]),
        )

        assert [(item.site_id, item.order) for item in saved.items] == [(tokaj.id, 0), (etyek.id, 1)]
        assert saved.items[0].is_highlighted is True
        assert saved.items[1].id == kept.id


class TestCollectionView:
    """Tests for the public rendering"""

    @pytest.mark.asyncio
    async def test_domain_then_slug(self, test_db_session):
        service = CollectionService()
        await service.create(test_db_session, _collection(domain="borutak.hu", is_active=True))

        by_domain = await service.get_collection_view(test_db_session, "hu", domain="BORUTAK.HU")
        by_slug = await service.get_collection_view(test_db_session, "hu", domain="other.hu", slug="borutak")

        assert by_domain.id == by_slug.id

    @pytest.mark.asyncio
    async def test_inactive_is_hidden(self, test_db_session):
        service = CollectionService()
        await service.create(test_db_session, _collection())

        with pytest.raises(NotFoundError) as exc_info:
            await service.get_collection_view(test_db_session, "hu", slug="borutak")

        assert exc_info.value.error_code.code == "COLLECTION_001"

    @pytest.mark.asyncio
    async def test_language_fallback_and_overrides(self, test_db_session, make_site):
        etyek = await make_site()
        balaton = await make_site(slug="balaton", name="Balaton")
        service = CollectionService()
        collection = await service.create(test_db_session, _collection(is_active=True))
        await service.add_item(test_db_session, collection.id, CollectionItemCreate(site_id=etyek.id))
        await service.add_item(
            test_db_session,
            collection.id,
            CollectionItemCreate(
                site_id=balaton.id,
                order=1,
                translations=[CollectionItemTranslationInput(lang=Lang.DE, title_override="Plattensee")],
            ),
        )

        view = await service.get_collection_view(test_db_session, "de", slug="borutak")

        assert view.title == "Borutak"
        assert view.seo.title == "Borutak"
        assert [item.title for item in view.items] == ["Etyek-Budai borvidék", "Plattensee"]
        assert view.items[0].description == "Etyek-Budai borvidék röviden"
        assert view.items[1].site_slug == "balaton"

    @pytest.mark.asyncio
    async def test_unknown_language_renders_hungarian(self, test_db_session):
        service = CollectionService()
        await service.create(test_db_session, _collection(is_active=True))

        view = await service.get_collection_view(test_db_session, "fr", slug="borutak")

        assert view.description == "Válogatott borvidékek"
