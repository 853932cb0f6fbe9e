"""Database management commands for PlaceHub CLI."""
import asyncio
from pathlib import Path

import click
from alembic import command
from alembic.config import Config

from placehub.cli.utils import get_db_connection
from placehub.core.config import settings
from placehub.core.database import mask_url


def get_project_root() -> Path:
    """Get the project root directory."""
    return Path(__file__).parent.parent.parent


def get_alembic_config() -> Config:
    config = Config(str(get_project_root() / "alembic.ini"))
    config.set_main_option("script_location", str(get_project_root() / "alembic"))
    return config


@click.group()
def db_group() -> None:
    """Database management commands."""
    pass


@db_group.command()
@click.option("--revision", default="head", show_default=True, help="Target revision")
def migrate(revision: str) -> None:
    """Run Alembic migrations."""
    click.echo(click.style(f"Migrating {mask_url(settings.database_url_sync)} to {revision}...", fg="yellow"))
    command.upgrade(get_alembic_config(), revision)
    click.echo(click.style("✓ Migrations applied", fg="green"))


@db_group.command()
def check() -> None:
    """Check that the database is reachable."""
    conn = get_db_connection()
    try:
        cur = conn.cursor()
        cur.execute("SELECT version()")
        version = cur.fetchone()[0]
        cur.close()
    finally:
        conn.close()
    click.echo(click.style(f"✓ Connected: {version}", fg="green"))


@db_group.command()
def seed() -> None:
    """Create the default site with a BASIC subscription."""
    click.echo(click.style(f"Seeding default site {settings.default_site_slug}...", fg="yellow"))
    created = asyncio.run(seed_default_site())
    if created:
        click.echo(click.style("✓ Default site created", fg="green"))
    else:
        click.echo(click.style("Default site already exists, nothing to do", fg="yellow"))


async def seed_default_site() -> bool:
    """Create the default site unless it exists; returns whether it was created"""
    from sqlalchemy import select

    from placehub.core.billing.entitlements import EntitlementsService
    from placehub.core.database import AsyncSessionLocal, engine
    from placehub.db.enums import Lang, SubscriptionPlan, SubscriptionStatus
    from placehub.db.models import Site
    from placehub.schemas.sites import SiteCreate, SiteTranslationInput
    from placehub.services.site_service import SiteService

    try:
        async with AsyncSessionLocal() as db:
            existing = await db.scalar(select(Site).where(Site.slug == settings.default_site_slug))
            if existing is not None:
                return False

            site = await SiteService().create(
                db,
                SiteCreate(
                    slug=settings.default_site_slug,
                    translations=[
                        SiteTranslationInput(lang=Lang.HU, name=settings.default_site_slug.replace("-", " ").title())
                    ],
                ),
            )
            await EntitlementsService().upsert_subscription(
                db, site.id, SubscriptionPlan.BASIC, SubscriptionStatus.ACTIVE, note="Seeded default site"
            )
            return True
    finally:
        await engine.dispose()
