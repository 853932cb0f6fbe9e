"""Database connection and session management"""
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy.orm import declarative_base
from urllib.parse import urlparse, parse_qs, urlencode, urlunparse
from typing import Any, Dict, Optional, Tuple
import ssl
import logging

from placehub.core.config import settings

logger = logging.getLogger(__name__)


def mask_url(url: str) -> str:
    """Mask the password part of a database URL for logging"""
    try:
        parsed = urlparse(url)
        if parsed.password:
            netloc = parsed.netloc.replace(f":{parsed.password}@", ":***@", 1)
            return urlunparse(parsed._replace(netloc=netloc))
        return url
    except ValueError:
        if len(url) > 20:
            return f"{url[:10]}...{url[-10:]}"
        return "***"


def _ssl_context_for(sslmode: str) -> Any:
    """Translate a libpq sslmode into an asyncpg ``ssl`` connect argument"""
    if sslmode == "disable":
        return False
    if sslmode in ("verify-ca", "verify-full"):
        return ssl.create_default_context()
    # require/prefer and unknown modes: encrypt, but managed databases
    # usually present certificates we cannot verify
    context = ssl.create_default_context()
    context.check_hostname = False
    context.verify_mode = ssl.CERT_NONE
    return context


def prepare_async_url(url: str) -> Tuple[str, Dict[str, Any]]:
    """
    Normalize a database URL for the async engine.

    Hosting platforms hand out ``postgresql://...?sslmode=require`` URLs.
    asyncpg rejects ``sslmode`` in the query string, so it is moved into
    ``connect_args`` and the driver is switched to ``postgresql+asyncpg``.

    Args:
        url: Database URL from settings

    Returns:
        Tuple of (url, connect_args)
    """
    connect_args: Dict[str, Any] = {}
    if not (url.startswith("postgresql://") or url.startswith("postgresql+asyncpg://")):
        return url, connect_args

    parsed = urlparse(url)
    query_params = parse_qs(parsed.query)
    sslmode: Optional[str] = None
    if "sslmode" in query_params:
        sslmode = query_params.pop("sslmode")[0]
        connect_args["ssl"] = _ssl_context_for(sslmode)
        if connect_args["ssl"]:
            connect_args["timeout"] = 10

    url = urlunparse(parsed._replace(query=urlencode(query_params, doseq=True)))
    if url.startswith("postgresql://"):
        url = url.replace("postgresql://", "postgresql+asyncpg://", 1)
    return url, connect_args


_SYNC_DRIVERS = (
    ("postgresql+asyncpg://", "postgresql://"),
    ("sqlite+aiosqlite://", "sqlite://"),
)


def sync_database_url(url: str) -> str:
    """URL for sync tooling (Alembic, psycopg2) with the async driver swapped out"""
    for async_prefix, sync_prefix in _SYNC_DRIVERS:
        if url.startswith(async_prefix):
            return sync_prefix + url[len(async_prefix):]
    return url


def engine_options(url: str) -> Dict[str, Any]:
    """Pool options; SQLite (tests) uses its own pool and rejects sizing arguments"""
    if url.startswith("sqlite"):
        return {}
    return {
        "pool_pre_ping": True,
        "pool_recycle": 3600,
        "pool_size": 5,
        "max_overflow": 10,
        "pool_timeout": 30,
    }


database_url, connect_args = prepare_async_url(settings.database_url)
logger.info(f"DATABASE_URL (async): {mask_url(database_url)}")
logger.info(f"SSL for database connection: {'enabled' if connect_args.get('ssl') else 'disabled'}")

engine = create_async_engine(
    database_url,
    echo=settings.environment == "development",
    connect_args=connect_args,
    **engine_options(database_url),
)

AsyncSessionLocal = async_sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False
)

# Base class for models
Base = declarative_base()


async def get_db() -> AsyncSession:
    """Dependency for getting database session"""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        finally:
            await session.close()


def get_session_factory() -> Optional[async_sessionmaker]:
    """Dependency for services that open extra sessions for concurrent reads"""
    return AsyncSessionLocal
