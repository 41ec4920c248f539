"""
MongoDB connection for the API.

One client is opened at startup and shared by every request through
``app.state.database``. Startup is fail-fast: if the database cannot be
reached the process exits with status 1 before the HTTP listener binds.
"""

import sys
from typing import Optional
from urllib.parse import urlparse, urlunparse

import structlog
from pymongo import AsyncMongoClient
from pymongo.errors import PyMongoError

from .config import Settings

logger = structlog.get_logger()


def mask_uri(uri: str) -> str:
    """Mask password in URI for logging."""
    try:
        parsed = urlparse(uri)
        password = parsed.password
    except ValueError:
        return "<unparseable uri>"
    if not password:
        return uri
    userinfo, _, hosts = parsed.netloc.rpartition("@")
    username = userinfo.split(":", 1)[0]
    return urlunparse(parsed._replace(netloc=f"{username}:***@{hosts}"))


class Database:
    """
    Process-scoped MongoDB handle.

    The underlying client connects lazily; call `check()` to force a
    round trip to the server.
    """

    def __init__(self, uri: str, name: str = "suiquest", timeout_ms: int = 5000):
        self.uri = uri
        self._client = AsyncMongoClient(uri, serverSelectionTimeoutMS=timeout_ms)
        self._db = self._client.get_default_database(default=name)

    @property
    def db(self):
        """The selected database (from the URI, else the configured name)."""
        return self._db

    @property
    def name(self) -> str:
        return self._db.name

    async def check(self) -> None:
        """Run a ping command. Raises PyMongoError when unreachable."""
        await self._client.admin.command("ping")

    async def ping(self) -> bool:
        """Check if MongoDB is reachable."""
        try:
            await self.check()
            return True
        except PyMongoError:
            return False

    async def close(self) -> None:
        """Close the client."""
        await self._client.close()


async def connect_database(settings: Settings) -> Database:
    """
    Open the shared database connection.

    Logs and terminates the process (exit status 1) on any failure.
    No retry is attempted; this is meant for process startup only.
    """
    if not settings.db_uri:
        logger.error("database_connection_failed", error="DB_URI not configured")
        sys.exit(1)

    database: Optional[Database] = None
    try:
        database = Database(
            settings.db_uri,
            name=settings.db_name,
            timeout_ms=settings.db_timeout_ms,
        )
        await database.check()
    except (PyMongoError, ValueError) as e:
        logger.error(
            "database_connection_failed",
            uri=mask_uri(settings.db_uri),
            error=str(e),
        )
        if database is not None:
            await database.close()
        sys.exit(1)

    logger.info(
        "database_connected",
        uri=mask_uri(settings.db_uri),
        database=database.name,
    )
    return database
