"""Utility functions for CLI commands"""
import os
from typing import Any, Dict
from urllib.parse import urlparse

import psycopg2
from psycopg2.extensions import connection

from placehub.core.config import settings
from placehub.core.database import sync_database_url


def connection_params(db_url: str) -> Dict[str, Any]:
    """
    psycopg2 keyword arguments for a PostgreSQL URL.

    Parts missing from the URL come from POSTGRES_USER, POSTGRES_PASSWORD,
    DB_HOST and DB_PORT (loaded from .env by the CLI entry point).
    """
    parsed = urlparse(sync_database_url(db_url))
    return {
        "user": parsed.username or os.getenv("POSTGRES_USER", "postgres"),
        "password": parsed.password or os.getenv("POSTGRES_PASSWORD", "postgres"),
        "host": parsed.hostname or os.getenv("DB_HOST", "localhost"),
        "port": parsed.port or int(os.getenv("DB_PORT", "5432")),
        "dbname": parsed.path.lstrip("/"),
    }


def get_db_connection() -> connection:
    """Synchronous connection to the configured database (``DATABASE_URL_SYNC``)"""
    return psycopg2.connect(**connection_params(settings.database_url_sync))
