"""Unit tests for floorplans, pins and the place upsell gates"""
import pytest
from uuid import uuid4

from sqlalchemy import func, select

from placehub.core.billing.feature_gates import FLOORPLANS_NOT_IN_PLAN, PlaceUpsellService
from placehub.db.enums import BillingPeriod, FeatureSubscriptionScope, PlacePlan
from placehub.db.models import FloorplanPin, Gallery, PlaceFloorplan
from placehub.exceptions import BadRequestError, NotFoundError
from placehub.schemas.feature_subscriptions import FeatureSubscriptionCreate
from placehub.schemas.floorplans import FloorplanCreate, FloorplanUpdate, PinCreate, PinUpdate
from placehub.services.feature_subscription_service import FeatureSubscriptionService
from placehub.services.floorplan_service import FloorplanPinService, FloorplanService


async def _subscribe(db, site_id, place_id=None):
    return await FeatureSubscriptionService().create(
        db,
        FeatureSubscriptionCreate(
            site_id=site_id,
            scope=FeatureSubscriptionScope.PLACE if place_id else FeatureSubscriptionScope.SITE,
            place_id=place_id,
            plan_key="FP_1",
            billing_period=BillingPeriod.MONTHLY,
        ),
    )


@pytest.fixture
def entitled_place(test_db_session, make_site, make_place):
    async def _make(plan: PlacePlan = PlacePlan.BASIC):
        site = await make_site()
        place = await make_place(site.id, plan=plan)
        await _subscribe(test_db_session, site.id, place.id)
        return place

    return _make


class TestFloorplanService:
    """Tests for floorplan creation rules"""

    @pytest.mark.asyncio
    async def test_requires_subscription(self, test_db_session, make_site, make_place):
        site = await make_site()
        place = await make_place(site.id)

        with pytest.raises(BadRequestError) as exc_info:
            await FloorplanService().create(
                test_db_session, FloorplanCreate(place_id=place.id, image_url="/uploads/fp.png")
            )

        assert exc_info.value.error_code.code == "FLOORPLAN_002"

    @pytest.mark.asyncio
    async def test_create_with_defaults(self, test_db_session, entitled_place):
        place = await entitled_place()

        floorplan = await FloorplanService().create(
            test_db_session, FloorplanCreate(place_id=place.id, image_url="/uploads/fp.png")
        )

        assert floorplan.title == "Floorplan"
        assert floorplan.sort_order == 1
        assert floorplan.is_primary is False

    @pytest.mark.asyncio
    async def test_limit_reached(self, test_db_session, entitled_place):
        place = await entitled_place()
        service = FloorplanService()
        await service.create(test_db_session, FloorplanCreate(place_id=place.id, image_url="/uploads/a.png"))

        with pytest.raises(BadRequestError) as exc_info:
            await service.create(test_db_session, FloorplanCreate(place_id=place.id, image_url="/uploads/b.png"))

        assert exc_info.value.error_code.code == "FLOORPLAN_003"
        assert exc_info.value.message == "Floorplan limit reached (1/1)."

    @pytest.mark.asyncio
    async def test_site_subscription_entitles_place(self, test_db_session, make_site, make_place):
        site = await make_site()
        place = await make_place(site.id)
        await _subscribe(test_db_session, site.id)

        floorplan = await FloorplanService().create(
            test_db_session, FloorplanCreate(place_id=place.id, image_url="/uploads/fp.png")
        )

        assert floorplan.place_id == place.id

    @pytest.mark.asyncio
    async def test_unknown_place(self, test_db_session):
        with pytest.raises(NotFoundError) as exc_info:
            await FloorplanService().create(
                test_db_session, FloorplanCreate(place_id=uuid4(), image_url="/uploads/fp.png")
            )

        assert exc_info.value.error_code.code == "PLACE_001"

    @pytest.mark.asyncio
    async def test_primary_moves_between_floorplans(self, test_db_session, entitled_place):
        place = await entitled_place()
        service = FloorplanService()
        first = await service.create(
            test_db_session, FloorplanCreate(place_id=place.id, image_url="/uploads/a.png", is_primary=True)
        )
        second = PlaceFloorplan(place_id=place.id, title="Pince", image_url="/uploads/b.png", sort_order=2)
        test_db_session.add(second)
        await test_db_session.commit()

        await service.update(test_db_session, second.id, FloorplanUpdate(is_primary=True))

        assert (await service.get(test_db_session, first.id)).is_primary is False
        assert (await service.get(test_db_session, second.id)).is_primary is True

    @pytest.mark.asyncio
    async def test_public_list_hidden_without_entitlement(self, test_db_session, make_site, make_place):
        site = await make_site()
        place = await make_place(site.id)
        service = FloorplanService()
        subscription = await _subscribe(test_db_session, site.id, place.id)
        await service.create(test_db_session, FloorplanCreate(place_id=place.id, image_url="/uploads/fp.png"))

        assert len(await service.list_for_place(test_db_session, place.id, public=True)) == 1

        await FeatureSubscriptionService().delete(test_db_session, subscription.id)

        assert await service.list_for_place(test_db_session, place.id, public=True) == []
        assert len(await service.list_for_place(test_db_session, place.id)) == 1


class TestFloorplanPinService:
    """Tests for pin coordinates and ordering"""

    @pytest.mark.asyncio
    async def test_pins_get_increasing_sort_order(self, test_db_session, entitled_place):
        place = await entitled_place()
        floorplan = await FloorplanService().create(
            test_db_session, FloorplanCreate(place_id=place.id, image_url="/uploads/fp.png")
        )
        pins = FloorplanPinService()

        first = await pins.create(test_db_session, PinCreate(floorplan_id=floorplan.id, x=0.1, y=0.2))
        second = await pins.create(
            test_db_session, PinCreate(floorplan_id=floorplan.id, x=1, y=0, label="Bejárat")
        )

        assert (first.sort_order, second.sort_order) == (1, 2)
        assert first.label == ""
        listed = await pins.list_for_floorplan(test_db_session, floorplan.id)
        assert [p.id for p in listed] == [first.id, second.id]

    @pytest.mark.asyncio
    async def test_coordinates_outside_image(self, test_db_session, entitled_place):
        place = await entitled_place()
        floorplan = await FloorplanService().create(
            test_db_session, FloorplanCreate(place_id=place.id, image_url="/uploads/fp.png")
        )

        with pytest.raises(BadRequestError) as exc_info:
            await FloorplanPinService().create(
                test_db_session, PinCreate(floorplan_id=floorplan.id, x=1.5, y=0.5)
            )

        assert exc_info.value.error_code.code == "FLOORPLAN_005"

    @pytest.mark.asyncio
    async def test_update_rejects_bad_y(self, test_db_session, entitled_place):
        place = await entitled_place()
        floorplan = await FloorplanService().create(
            test_db_session, FloorplanCreate(place_id=place.id, image_url="/uploads/fp.png")
        )
        pins = FloorplanPinService()
        pin = await pins.create(test_db_session, PinCreate(floorplan_id=floorplan.id, x=0.5, y=0.5))

        with pytest.raises(BadRequestError) as exc_info:
            await pins.update(test_db_session, pin.id, PinUpdate(y=-0.1))

        assert exc_info.value.message == "y must be between 0 and 1"

    @pytest.mark.asyncio
    async def test_deleting_floorplan_removes_pins(self, test_db_session, entitled_place):
        place = await entitled_place()
        service = FloorplanService()
        floorplan = await service.create(
            test_db_session, FloorplanCreate(place_id=place.id, image_url="/uploads/fp.png")
        )
        await FloorplanPinService().create(test_db_session, PinCreate(floorplan_id=floorplan.id, x=0.5, y=0.5))

        await service.delete(test_db_session, floorplan.id)

        remaining = await test_db_session.scalar(select(func.count(FloorplanPin.id)))
        assert remaining == 0


class TestPlaceUpsellService:
    """Tests for the combined gates of a place"""

    @pytest.mark.asyncio
    async def test_free_place(self, test_db_session, make_site, make_place):
        site = await make_site()
        place = await make_place(site.id, plan=PlacePlan.FREE)

        state = await PlaceUpsellService().get_place_upsell_state(test_db_session, site.id, place.id)

        assert state["floorplans"] == {"state": "locked", "reason": FLOORPLANS_NOT_IN_PLAN, "upgrade_cta": "viewPlans"}
        assert state["gallery"]["state"] == "enabled"
        # Default BASIC site plan has no featured places
        assert state["featured"]["state"] == "locked"

    @pytest.mark.asyncio
    async def test_paid_place_without_subscription(self, test_db_session, make_site, make_place):
        site = await make_site()
        place = await make_place(site.id, plan=PlacePlan.BASIC)

        gate = await PlaceUpsellService().get_floorplan_gate(test_db_session, site.id, place.id, place.plan)

        assert gate == {"state": "locked", "reason": "", "upgrade_cta": "viewPlans"}

    @pytest.mark.asyncio
    async def test_floorplan_limit_reached(self, test_db_session, entitled_place):
        place = await entitled_place()
        await FloorplanService().create(
            test_db_session, FloorplanCreate(place_id=place.id, image_url="/uploads/fp.png")
        )

        gate = await PlaceUpsellService().get_floorplan_gate(test_db_session, place.site_id, place.id, place.plan)

        assert gate["state"] == "limit_reached"
        assert gate["reason"] == "Elérted az alaprajz limitet (1/1)."

    @pytest.mark.asyncio
    async def test_gallery_images_counted(self, test_db_session, make_site, make_place):
        site = await make_site()
        place = await make_place(site.id, plan=PlacePlan.FREE)
        test_db_session.add(Gallery(site_id=site.id, place_id=place.id, name="Pince", images=["a.jpg", "b.jpg"]))
        test_db_session.add(Gallery(site_id=site.id, place_id=place.id, name="Terasz", images=["c.jpg"]))
        await test_db_session.commit()

        state = await PlaceUpsellService().get_place_upsell_state(test_db_session, site.id, place.id)

        assert state["gallery"]["state"] == "limit_reached"
        assert state["gallery"]["reason"] == "Elérted a kép limitet (3/3)."

    @pytest.mark.asyncio
    async def test_place_on_other_site(self, test_db_session, make_site, make_place):
        site = await make_site()
        other = await make_site(slug="balaton", name="Balaton")
        place = await make_place(site.id)

        with pytest.raises(NotFoundError):
            await PlaceUpsellService().get_place_upsell_state(test_db_session, other.id, place.id)
