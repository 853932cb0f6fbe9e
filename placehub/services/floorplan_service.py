"""
Floorplan Service - floorplan images of a place and the pins placed on them.

Uploading a floorplan requires a floorplan feature subscription (see
FeatureSubscriptionService); public reads hide floorplans of places that
are no longer entitled.
"""
import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from placehub.db.models import FloorplanPin, Place, PlaceFloorplan
from placehub.decision.error_codes import ErrorCodeDictionary
from placehub.exceptions import BadRequestError, NotFoundError
from placehub.schemas.floorplans import FloorplanCreate, FloorplanUpdate, PinCreate, PinUpdate
from placehub.services.feature_subscription_service import FeatureSubscriptionService
from placehub.utils.database import get_or_404

logger = logging.getLogger(__name__)

DEFAULT_FLOORPLAN_TITLE = "Floorplan"


async def _next_sort_order(db: AsyncSession, column, *conditions) -> int:
    current = await db.scalar(select(func.max(column)).where(*conditions))
    return (current or 0) + 1


class FloorplanService:
    """Floorplan CRUD with entitlement and primary-flag rules"""

    def __init__(self, feature_subscriptions: Optional[FeatureSubscriptionService] = None):
        self.feature_subscriptions = feature_subscriptions or FeatureSubscriptionService()

    async def list_for_place(
        self,
        db: AsyncSession,
        place_id: UUID,
        public: bool = False,
    ) -> List[PlaceFloorplan]:
        """Floorplans of a place ordered by ``sort_order``; public reads need an entitlement"""
        place = await self.get_place(db, place_id)

        if public:
            entitlement = await self.feature_subscriptions.get_floorplan_entitlement(
                db, place_id, place.site_id
            )
            if not entitlement["entitled"]:
                return []

        result = await db.execute(
            select(PlaceFloorplan)
            .where(PlaceFloorplan.place_id == place_id)
            .order_by(PlaceFloorplan.sort_order.asc())
        )
        return list(result.scalars().all())

    async def get(self, db: AsyncSession, floorplan_id: UUID) -> PlaceFloorplan:
        floorplan = await db.scalar(
            select(PlaceFloorplan)
            .where(PlaceFloorplan.id == floorplan_id)
            .execution_options(populate_existing=True)
        )
        if floorplan is None:
            raise NotFoundError(
                ErrorCodeDictionary.FLOORPLAN_001.with_message(f"Floorplan with id {floorplan_id} not found"),
                entity_id=floorplan_id,
            )
        return floorplan

    async def create(self, db: AsyncSession, data: FloorplanCreate) -> PlaceFloorplan:
        """
        Add a floorplan to a place.

        Raises:
            NotFoundError: unknown place
            BadRequestError: no active floorplan subscription, or limit reached
        """
        place = await self.get_place(db, data.place_id)

        entitlement = await self.feature_subscriptions.get_floorplan_entitlement(
            db, data.place_id, place.site_id
        )
        if not entitlement["entitled"]:
            raise BadRequestError(ErrorCodeDictionary.FLOORPLAN_002, entity_id=data.place_id)
        if entitlement["used"] >= entitlement["limit"]:
            raise BadRequestError(
                ErrorCodeDictionary.FLOORPLAN_003.with_message(
                    f"Floorplan limit reached ({entitlement['used']}/{entitlement['limit']})."
                ),
                entity_id=data.place_id,
                context={"used": entitlement["used"], "limit": entitlement["limit"]},
            )

        if data.is_primary:
            await self._unset_primary(db, data.place_id)

        sort_order = data.sort_order
        if sort_order is None:
            sort_order = await _next_sort_order(
                db, PlaceFloorplan.sort_order, PlaceFloorplan.place_id == data.place_id
            )

        floorplan = PlaceFloorplan(
            place_id=data.place_id,
            title=data.title or DEFAULT_FLOORPLAN_TITLE,
            image_url=data.image_url,
            sort_order=sort_order,
            is_primary=data.is_primary,
        )
        db.add(floorplan)
        await db.commit()

        logger.info(f"Floorplan {floorplan.id} created for place {data.place_id}")
        return await self.get(db, floorplan.id)

    async def update(self, db: AsyncSession, floorplan_id: UUID, data: FloorplanUpdate) -> PlaceFloorplan:
        floorplan = await self.get(db, floorplan_id)

        if data.is_primary is True:
            await self._unset_primary(db, floorplan.place_id, exclude_id=floorplan_id)

        for field, value in data.model_dump(exclude_unset=True).items():
            if value is None and field in ("title", "image_url", "sort_order", "is_primary"):
                continue
            setattr(floorplan, field, value)

        await db.commit()
        return await self.get(db, floorplan_id)

    async def delete(self, db: AsyncSession, floorplan_id: UUID) -> None:
        """Delete a floorplan together with its pins"""
        floorplan = await self.get(db, floorplan_id)
        await db.delete(floorplan)
        await db.commit()
        logger.info(f"Floorplan {floorplan_id} deleted")

    @staticmethod
    async def _unset_primary(db: AsyncSession, place_id: UUID, exclude_id: Optional[UUID] = None) -> None:
        # Runs before the new primary is written; both commit together
        conditions = [PlaceFloorplan.place_id == place_id, PlaceFloorplan.is_primary.is_(True)]
        if exclude_id is not None:
            conditions.append(PlaceFloorplan.id != exclude_id)
        await db.execute(update(PlaceFloorplan).where(*conditions).values(is_primary=False))

    @staticmethod
    async def get_place(db: AsyncSession, place_id: UUID) -> Place:
        return await get_or_404(db, Place, place_id, ErrorCodeDictionary.PLACE_001, "Place")


class FloorplanPinService:
    """Pins on a floorplan; coordinates are validated to lie on the image"""

    async def list_for_floorplan(self, db: AsyncSession, floorplan_id: UUID) -> List[FloorplanPin]:
        await self._get_floorplan(db, floorplan_id)
        result = await db.execute(
            select(FloorplanPin)
            .where(FloorplanPin.floorplan_id == floorplan_id)
            .order_by(FloorplanPin.sort_order.asc())
        )
        return list(result.scalars().all())

    async def get(self, db: AsyncSession, pin_id: UUID) -> FloorplanPin:
        pin = await db.get(FloorplanPin, pin_id)
        if pin is None:
            raise NotFoundError(
                ErrorCodeDictionary.FLOORPLAN_004.with_message(f"Pin with id {pin_id} not found"),
                entity_id=pin_id,
            )
        return pin

    async def create(self, db: AsyncSession, data: PinCreate) -> FloorplanPin:
        """
        Place a pin.

        Raises:
            BadRequestError: x or y outside [0, 1]
            NotFoundError: unknown floorplan
        """
        if not (0 <= data.x <= 1 and 0 <= data.y <= 1):
            raise BadRequestError(
                ErrorCodeDictionary.FLOORPLAN_005, context={"x": data.x, "y": data.y}
            )
        await self._get_floorplan(db, data.floorplan_id)

        sort_order = data.sort_order
        if sort_order is None:
            sort_order = await _next_sort_order(
                db, FloorplanPin.sort_order, FloorplanPin.floorplan_id == data.floorplan_id
            )

        pin = FloorplanPin(
            floorplan_id=data.floorplan_id,
            x=data.x,
            y=data.y,
            label=data.label or "",
            sort_order=sort_order,
        )
        db.add(pin)
        await db.commit()
        return pin

    async def update(self, db: AsyncSession, pin_id: UUID, data: PinUpdate) -> FloorplanPin:
        pin = await self.get(db, pin_id)

        if data.x is not None and not 0 <= data.x <= 1:
            raise BadRequestError(
                ErrorCodeDictionary.FLOORPLAN_005.with_message("x must be between 0 and 1"),
                entity_id=pin_id,
            )
        if data.y is not None and not 0 <= data.y <= 1:
            raise BadRequestError(
                ErrorCodeDictionary.FLOORPLAN_005.with_message("y must be between 0 and 1"),
                entity_id=pin_id,
            )

        if data.x is not None:
            pin.x = data.x
        if data.y is not None:
            pin.y = data.y
        if data.label is not None:
            pin.label = data.label
        if data.sort_order is not None:
            pin.sort_order = data.sort_order

        await db.commit()
        return pin

    async def delete(self, db: AsyncSession, pin_id: UUID) -> None:
        pin = await self.get(db, pin_id)
        await db.delete(pin)
        await db.commit()

    @staticmethod
    async def _get_floorplan(db: AsyncSession, floorplan_id: UUID) -> PlaceFloorplan:
        return await get_or_404(
            db, PlaceFloorplan, floorplan_id, ErrorCodeDictionary.FLOORPLAN_001, "Floorplan"
        )
