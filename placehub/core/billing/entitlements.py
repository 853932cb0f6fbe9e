"""Entitlements - site plan, effective limits and live usage"""
import asyncio
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from sqlalchemy import Select, and_, distinct, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from placehub.core.billing.plans import resolve_plan, resolve_place_plan, PlacePlanLimits
from placehub.core.config import settings
from placehub.db.enums import PlacePlan, SubscriptionPlan, SubscriptionStatus
from placehub.db.models import (
    Brand, Event, Gallery, Place, Site, SiteDomain, SiteInstance, SiteMembership, SiteSubscription
)
from placehub.decision.error_codes import ErrorCodeDictionary
from placehub.exceptions import NotFoundError
from placehub.services.site_key_resolver import SiteKeyResolver
from placehub.types import Entitlements, UsageCounts
from placehub.utils.dates import as_utc, month_bounds, utc_now

logger = logging.getLogger(__name__)


async def get_brand(db: AsyncSession) -> Optional[Brand]:
    """Platform settings row (oldest brand)"""
    return await db.scalar(select(Brand).order_by(Brand.created_at.asc()).limit(1))


async def get_plan_overrides(db: AsyncSession) -> Dict[str, Any]:
    brand = await get_brand(db)
    return dict(brand.plan_overrides or {}) if brand else {}


async def get_place_plan_overrides(db: AsyncSession) -> Dict[str, Any]:
    brand = await get_brand(db)
    return dict(brand.place_plan_overrides or {}) if brand else {}


async def get_place_limits(db: AsyncSession, plan: PlacePlan) -> PlacePlanLimits:
    """Place plan limits after platform overrides"""
    return resolve_place_plan(plan, await get_place_plan_overrides(db))


def normalize_status(status: SubscriptionStatus, valid_until: Optional[datetime], now: datetime) -> SubscriptionStatus:
    """A subscription past ``valid_until`` is EXPIRED whatever was stored"""
    valid_until = as_utc(valid_until)
    if valid_until is not None and valid_until < now:
        return SubscriptionStatus.EXPIRED
    return status


class EntitlementsService:
    """
    Computes the entitlements of a site.

    Nothing is cached: usage is recounted on every call so admin screens
    always reflect the current state.
    """

    def __init__(self, site_resolver: Optional[SiteKeyResolver] = None):
        self.site_resolver = site_resolver or SiteKeyResolver()

    async def get_for_request(
        self,
        db: AsyncSession,
        lang: str,
        site_key: Optional[str] = None,
        session_factory: Optional[async_sessionmaker] = None,
    ) -> Entitlements:
        """Entitlements of the site addressed by a public request"""
        site = await self.site_resolver.resolve(db, lang, site_key)
        return await self.get_by_site_id(db, site["site_id"], session_factory=session_factory)

    async def get_by_site_id(
        self,
        db: AsyncSession,
        site_id: UUID,
        session_factory: Optional[async_sessionmaker] = None,
    ) -> Entitlements:
        """
        Entitlements of a site.

        Args:
            db: Database session
            site_id: Site UUID
            session_factory: When given, usage counts run concurrently,
                one session per query

        Returns:
            Entitlements with plan, normalized status, limits, features, usage
        """
        now = utc_now()
        subscription = await db.scalar(
            select(SiteSubscription).where(SiteSubscription.site_id == site_id)
        )
        if subscription is not None:
            plan = SubscriptionPlan(subscription.plan)
            stored_status = SubscriptionStatus(subscription.status)
            valid_until = as_utc(subscription.valid_until)
        else:
            plan = SubscriptionPlan(settings.default_plan)
            stored_status = SubscriptionStatus(settings.default_plan_status)
            valid_until = None

        definition = resolve_plan(plan, await get_plan_overrides(db))
        usage = await self.count_usage(db, site_id, now=now, session_factory=session_factory)

        return Entitlements(
            site_id=site_id,
            plan=plan.value,
            status=normalize_status(stored_status, valid_until, now).value,
            valid_until=valid_until,
            limits=definition.limits.model_dump(),
            features=definition.features.model_dump(),
            usage=usage,
        )

    async def count_usage(
        self,
        db: AsyncSession,
        site_id: UUID,
        now: Optional[datetime] = None,
        session_factory: Optional[async_sessionmaker] = None,
    ) -> UsageCounts:
        """Live usage counts of a site"""
        queries = self._usage_queries(site_id, now or utc_now())
        names = [name for name, _ in queries]

        if session_factory is not None:
            values = await asyncio.gather(
                *(self._count_in_new_session(session_factory, query) for _, query in queries)
            )
        else:
            # One AsyncSession cannot run statements concurrently
            values = [await db.scalar(query) for _, query in queries]

        return UsageCounts(**{name: int(value or 0) for name, value in zip(names, values)})

    @staticmethod
    async def _count_in_new_session(session_factory: async_sessionmaker, query: Select) -> int:
        async with session_factory() as session:
            return await session.scalar(query)

    @staticmethod
    def _usage_queries(site_id: UUID, now: datetime) -> List[Tuple[str, Select]]:
        month_start, month_end = month_bounds(now)
        return [
            (
                "places_count",
                select(func.count(Place.id)).where(Place.site_id == site_id, Place.is_active.is_(True)),
            ),
            (
                "featured_places_count",
                select(func.count(Place.id)).where(
                    Place.site_id == site_id,
                    Place.is_active.is_(True),
                    Place.is_featured.is_(True),
                    or_(Place.featured_until.is_(None), Place.featured_until > now),
                ),
            ),
            (
                "events_this_month_count",
                select(func.count(Event.id)).where(
                    Event.site_id == site_id,
                    Event.is_active.is_(True),
                    and_(Event.start_date >= month_start, Event.start_date < month_end),
                ),
            ),
            (
                "site_members_count",
                select(func.count(SiteMembership.id)).where(SiteMembership.site_id == site_id),
            ),
            (
                "domain_aliases_count",
                select(func.count(SiteDomain.id)).where(
                    SiteDomain.site_id == site_id, SiteDomain.is_active.is_(True)
                ),
            ),
            (
                "languages_count",
                select(func.count(distinct(SiteInstance.lang))).where(SiteInstance.site_id == site_id),
            ),
            (
                "galleries_count",
                select(func.count(Gallery.id)).where(Gallery.site_id == site_id),
            ),
        ]

    # ------------------------------------------------------------------
    # Site subscription (admin)
    # ------------------------------------------------------------------

    async def get_subscription(self, db: AsyncSession, site_id: UUID) -> Dict[str, Any]:
        """Stored subscription of a site, or the configured default"""
        await self._require_site(db, site_id)
        subscription = await db.scalar(
            select(SiteSubscription).where(SiteSubscription.site_id == site_id)
        )
        if subscription is None:
            return {
                "site_id": site_id,
                "plan": settings.default_plan,
                "status": settings.default_plan_status,
                "valid_until": None,
                "note": None,
            }
        return {
            "site_id": site_id,
            "plan": SubscriptionPlan(subscription.plan).value,
            "status": SubscriptionStatus(subscription.status).value,
            "valid_until": as_utc(subscription.valid_until),
            "note": subscription.note,
        }

    async def upsert_subscription(
        self,
        db: AsyncSession,
        site_id: UUID,
        plan: SubscriptionPlan,
        status: SubscriptionStatus,
        valid_until: Optional[datetime] = None,
        note: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Create or replace the subscription of a site"""
        await self._require_site(db, site_id)
        subscription = await db.scalar(
            select(SiteSubscription).where(SiteSubscription.site_id == site_id)
        )
        if subscription is None:
            subscription = SiteSubscription(site_id=site_id)
            db.add(subscription)
        subscription.plan = plan
        subscription.status = status
        subscription.valid_until = valid_until
        subscription.note = note
        await db.commit()

        logger.info(f"Site {site_id} subscription set to {plan.value}/{status.value}")
        return await self.get_subscription(db, site_id)

    @staticmethod
    async def _require_site(db: AsyncSession, site_id: UUID) -> Site:
        site = await db.get(Site, site_id)
        if site is None:
            raise NotFoundError(ErrorCodeDictionary.SITE_003, entity_id=site_id)
        return site
