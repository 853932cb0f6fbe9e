"""
Collection Service - curated groupings of sites.

Admin operations manage collections and their items; the public view
renders one collection in a single language, resolved by custom domain
or slug.
"""
import logging
from typing import Dict, List, Optional, Sequence
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from placehub.core.languages import soft_lang
from placehub.db.enums import Lang
from placehub.db.models import (
    Collection, CollectionItem, CollectionItemTranslation, CollectionTranslation, Site,
)
from placehub.decision.error_codes import ErrorCodeDictionary
from placehub.exceptions import BadRequestError, NotFoundError
from placehub.schemas.collections import (
    CollectionCreate, CollectionItemCreate, CollectionItemTranslationInput,
    CollectionItemUpdate, CollectionItemsBulkUpdate, CollectionTranslationInput,
    CollectionUpdate, CollectionView, CollectionViewItem, CollectionViewSeo,
)
from placehub.utils.database import get_or_404

logger = logging.getLogger(__name__)

TEMP_ID_PREFIX = "temp-"


def _by_lang(translations: Sequence) -> Dict[Lang, object]:
    return {Lang(t.lang): t for t in translations}


def _pick(translations: Sequence, lang: Lang):
    by_lang = _by_lang(translations)
    return by_lang.get(lang) or by_lang.get(Lang.HU)


def _parse_item_id(raw: Optional[str]) -> Optional[UUID]:
    if not raw or raw.startswith(TEMP_ID_PREFIX):
        return None
    try:
        return UUID(raw)
    except ValueError:
        return None


class CollectionService:
    """Admin CRUD for collections and items plus the public collection view"""

    # ------------------------------------------------------------------
    # Collections
    # ------------------------------------------------------------------

    async def list_collections(self, db: AsyncSession) -> List[Collection]:
        result = await db.execute(
            select(Collection).order_by(Collection.order.asc(), Collection.created_at.desc())
        )
        return list(result.scalars().all())

    async def get(self, db: AsyncSession, collection_id: UUID) -> Collection:
        collection = await db.scalar(
            select(Collection)
            .where(Collection.id == collection_id)
            .execution_options(populate_existing=True)
        )
        if collection is None:
            raise NotFoundError(ErrorCodeDictionary.COLLECTION_001, entity_id=collection_id)
        return collection

    async def create(self, db: AsyncSession, data: CollectionCreate) -> Collection:
        """
        Create a collection.

        Raises:
            BadRequestError: slug or domain already used by another collection
        """
        await self._ensure_slug_free(db, data.slug)
        if data.domain:
            await self._ensure_domain_free(db, data.domain.lower())

        collection = Collection(
            slug=data.slug,
            domain=data.domain.lower() if data.domain else None,
            is_active=data.is_active,
            is_crawlable=data.is_crawlable,
            order=data.order,
            translations=[self._new_translation(t) for t in data.translations],
        )
        db.add(collection)
        await db.commit()

        logger.info(f"Collection {data.slug} created")
        return await self.get(db, collection.id)

    async def update(self, db: AsyncSession, collection_id: UUID, data: CollectionUpdate) -> Collection:
        collection = await self.get(db, collection_id)

        if data.slug is not None and data.slug != collection.slug:
            await self._ensure_slug_free(db, data.slug)
            collection.slug = data.slug
        if "domain" in data.model_fields_set and (data.domain or None) != collection.domain:
            if data.domain:
                await self._ensure_domain_free(db, data.domain.lower())
            collection.domain = data.domain.lower() if data.domain else None

        for field in ("is_active", "is_crawlable", "order"):
            value = getattr(data, field)
            if value is not None:
                setattr(collection, field, value)

        if data.translations is not None:
            self._replace_translations(
                collection.translations, data.translations, self._new_translation, self._apply_translation
            )

        await db.commit()
        return await self.get(db, collection_id)

    async def delete(self, db: AsyncSession, collection_id: UUID) -> None:
        collection = await self.get(db, collection_id)
        await db.delete(collection)
        await db.commit()
        logger.info(f"Collection {collection_id} deleted")

    # ------------------------------------------------------------------
    # Items
    # ------------------------------------------------------------------

    async def get_item(self, db: AsyncSession, collection_id: UUID, item_id: UUID) -> CollectionItem:
        item = await db.scalar(
            select(CollectionItem)
            .where(CollectionItem.id == item_id)
            .execution_options(populate_existing=True)
        )
        if item is None:
            raise NotFoundError(ErrorCodeDictionary.COLLECTION_004, entity_id=item_id)
        if item.collection_id != collection_id:
            raise BadRequestError(
                ErrorCodeDictionary.COLLECTION_005.with_message(
                    f"Item {item_id} does not belong to collection {collection_id}"
                ),
                entity_id=item_id,
            )
        return item

    async def add_item(self, db: AsyncSession, collection_id: UUID, data: CollectionItemCreate) -> CollectionItem:
        """
        Add a site to a collection.

        Raises:
            NotFoundError: unknown collection or site
        """
        await self.get(db, collection_id)
        await get_or_404(db, Site, data.site_id, ErrorCodeDictionary.SITE_003)

        item = CollectionItem(
            collection_id=collection_id,
            site_id=data.site_id,
            order=data.order,
            is_highlighted=data.is_highlighted,
            translations=[self._new_item_translation(t) for t in data.translations or []],
        )
        db.add(item)
        await db.commit()
        return await self.get_item(db, collection_id, item.id)

    async def update_item(
        self,
        db: AsyncSession,
        collection_id: UUID,
        item_id: UUID,
        data: CollectionItemUpdate,
    ) -> CollectionItem:
        item = await self.get_item(db, collection_id, item_id)

        if data.order is not None:
            item.order = data.order
        if data.is_highlighted is not None:
            item.is_highlighted = data.is_highlighted
        if data.translations is not None:
            self._replace_translations(
                item.translations, data.translations,
                self._new_item_translation, self._apply_item_translation,
            )

        await db.commit()
        return await self.get_item(db, collection_id, item_id)

    async def delete_item(self, db: AsyncSession, collection_id: UUID, item_id: UUID) -> None:
        item = await self.get_item(db, collection_id, item_id)
        await db.delete(item)
        await db.commit()

    async def reorder_items(self, db: AsyncSession, collection_id: UUID, item_ids: List[UUID]) -> Collection:
        """Set each item's order to its position in ``item_ids``"""
        collection = await self.get(db, collection_id)
        items = {item.id: item for item in collection.items}

        for item_id in item_ids:
            if item_id not in items:
                raise BadRequestError(
                    ErrorCodeDictionary.COLLECTION_005.with_message(
                        f"Item {item_id} does not belong to collection {collection_id}"
                    ),
                    entity_id=item_id,
                )

        for index, item_id in enumerate(item_ids):
            items[item_id].order = index

        await db.commit()
        return await self.get(db, collection_id)

    async def bulk_update_items(
        self,
        db: AsyncSession,
        collection_id: UUID,
        data: CollectionItemsBulkUpdate,
    ) -> Collection:
        """
        Save the full item list of a collection.

        Items missing from the payload are deleted. Entries without an id,
        with a ``temp-`` id or with an id that is not in the collection are
        created. Order follows the position in the payload.
        """
        collection = await self.get(db, collection_id)
        existing = {item.id: item for item in collection.items}

        keep_ids = {_parse_item_id(entry.id) for entry in data.items} - {None}
        removed = [item for item_id, item in existing.items() if item_id not in keep_ids]
        for item in removed:
            await db.delete(item)

        for index, entry in enumerate(data.items):
            item = existing.get(_parse_item_id(entry.id))
            if item is None:
                db.add(CollectionItem(
                    collection_id=collection_id,
                    site_id=entry.site_id,
                    order=index,
                    is_highlighted=bool(entry.is_highlighted),
                    translations=[self._new_item_translation(t) for t in entry.translations or []],
                ))
                continue

            item.order = index
            item.site_id = entry.site_id
            if entry.is_highlighted is not None:
                item.is_highlighted = entry.is_highlighted
            if entry.translations is not None:
                self._replace_translations(
                    item.translations, entry.translations,
                    self._new_item_translation, self._apply_item_translation,
                )

        await db.commit()
        logger.info(
            f"Collection {collection_id} items saved: {len(data.items)} kept or created, {len(removed)} removed"
        )
        return await self.get(db, collection_id)

    # ------------------------------------------------------------------
    # Public
    # ------------------------------------------------------------------

    async def resolve_collection(
        self,
        db: AsyncSession,
        domain: Optional[str] = None,
        slug: Optional[str] = None,
    ) -> Collection:
        """Active collection by custom domain first, then by slug"""
        if domain:
            collection = await db.scalar(
                select(Collection).where(Collection.domain == domain.lower(), Collection.is_active.is_(True))
                .execution_options(populate_existing=True)
            )
            if collection is not None:
                return collection

        if slug:
            collection = await db.scalar(
                select(Collection).where(Collection.slug == slug, Collection.is_active.is_(True))
                .execution_options(populate_existing=True)
            )
            if collection is not None:
                return collection

        raise NotFoundError(ErrorCodeDictionary.COLLECTION_001, context={"domain": domain, "slug": slug})

    async def get_collection_view(
        self,
        db: AsyncSession,
        lang: Optional[str],
        domain: Optional[str] = None,
        slug: Optional[str] = None,
    ) -> CollectionView:
        collection = await self.resolve_collection(db, domain=domain, slug=slug)
        view_lang = soft_lang(lang)

        translation = _pick(collection.translations, view_lang)
        if translation is None:
            raise NotFoundError(ErrorCodeDictionary.COLLECTION_006, entity_id=collection.id)

        items = [self._view_item(item, view_lang) for item in collection.items]

        return CollectionView(
            id=collection.id,
            slug=collection.slug,
            domain=collection.domain,
            is_crawlable=collection.is_crawlable,
            title=translation.title,
            description=translation.description,
            hero_image=translation.hero_image,
            seo=CollectionViewSeo(
                title=translation.seo_title or translation.title,
                description=translation.seo_description,
                image=translation.seo_image or translation.hero_image,
                keywords=list(translation.seo_keywords or []),
            ),
            items=items,
        )

    @staticmethod
    def _view_item(item: CollectionItem, lang: Lang) -> CollectionViewItem:
        override = _by_lang(item.translations).get(lang)
        site_translation = _pick(item.site.translations, lang)

        title = override.title_override if override else None
        description = override.description_override if override else None
        image = override.image_override if override else None

        return CollectionViewItem(
            id=item.id,
            site_id=item.site_id,
            site_slug=item.site.slug,
            order=item.order,
            is_highlighted=item.is_highlighted,
            title=title or (site_translation.name if site_translation else None) or f"Site {item.site_id}",
            description=description or (site_translation.short_description if site_translation else None),
            image=image or (site_translation.hero_image if site_translation else None),
        )

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @staticmethod
    async def _ensure_slug_free(db: AsyncSession, slug: str) -> None:
        existing = await db.scalar(select(Collection.id).where(Collection.slug == slug))
        if existing is not None:
            raise BadRequestError(
                ErrorCodeDictionary.COLLECTION_002.with_message(f'Collection with slug "{slug}" already exists'),
                entity_id=existing,
            )

    @staticmethod
    async def _ensure_domain_free(db: AsyncSession, domain: str) -> None:
        existing = await db.scalar(select(Collection.id).where(Collection.domain == domain))
        if existing is not None:
            raise BadRequestError(
                ErrorCodeDictionary.COLLECTION_003.with_message(f'Collection with domain "{domain}" already exists'),
                entity_id=existing,
            )

    @staticmethod
    def _replace_translations(current: List, incoming: Sequence, build, apply) -> None:
        # Rows are updated in place so the (parent, lang) unique key never collides
        by_lang = _by_lang(current)
        wanted = set()
        for source in incoming:
            wanted.add(source.lang)
            target = by_lang.get(source.lang)
            if target is None:
                current.append(build(source))
            else:
                apply(target, source)
        for lang, target in by_lang.items():
            if lang not in wanted:
                current.remove(target)

    @staticmethod
    def _apply_translation(target: CollectionTranslation, source: CollectionTranslationInput) -> None:
        target.title = source.title
        target.description = source.description
        target.hero_image = source.hero_image
        target.seo_title = source.seo_title
        target.seo_description = source.seo_description
        target.seo_image = source.seo_image
        target.seo_keywords = list(source.seo_keywords)

    def _new_translation(self, source: CollectionTranslationInput) -> CollectionTranslation:
        translation = CollectionTranslation(lang=source.lang)
        self._apply_translation(translation, source)
        return translation

    @staticmethod
    def _apply_item_translation(target: CollectionItemTranslation, source: CollectionItemTranslationInput) -> None:
        target.title_override = source.title_override
        target.description_override = source.description_override
        target.image_override = source.image_override

    def _new_item_translation(self, source: CollectionItemTranslationInput) -> CollectionItemTranslation:
        translation = CollectionItemTranslation(lang=source.lang)
        self._apply_item_translation(translation, source)
        return translation
