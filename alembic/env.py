"""Alembic environment for the PlaceHub schema (sync psycopg2 connection)"""
from logging.config import fileConfig

from alembic import context
from sqlalchemy import engine_from_config, pool

from placehub.core.config import settings
from placehub.core.database import Base, sync_database_url

# Register every table on Base.metadata
import placehub.db.models  # noqa: F401

config = context.config

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# alembic.ini carries no URL; DATABASE_URL_SYNC wins, async drivers are swapped out
config.set_main_option("sqlalchemy.url", sync_database_url(settings.database_url_sync))

target_metadata = Base.metadata

COMPARE_OPTIONS = {"compare_type": True, "compare_server_default": True}


def run_migrations_offline() -> None:
    """Emit the migration SQL without connecting"""
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        **COMPARE_OPTIONS,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    try:
        with connectable.connect() as connection:
            context.configure(connection=connection, target_metadata=target_metadata, **COMPARE_OPTIONS)
            with context.begin_transaction():
                context.run_migrations()
    finally:
        connectable.dispose()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
