"""Backend session capability and connection bootstrap.

Reconcilers only see the ``QuerySession`` protocol: run one Cypher
statement, get its records back as dicts.  ``GraphSession`` implements it
on top of a shared ``neo4j.AsyncDriver``; each call runs in its own
auto-commit transaction against the configured database.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any
from typing import Protocol

from neo4j import AsyncDriver
from neo4j import AsyncGraphDatabase
from neo4j import basic_auth
from neo4j.exceptions import DriverError
from neo4j.exceptions import Neo4jError

from neoform.config import ProviderConfig
from neoform.errors import BackendConnectionError
from neoform.errors import BackendError

logger = logging.getLogger(__name__)


class QuerySession(Protocol):
    """Capability handed to reconcilers by the provider."""

    async def run(self, query: str, **params: Any) -> list[dict[str, Any]]:
        """Execute *query* and return every record as a dict."""
        ...


class GraphSession:
    """``QuerySession`` backed by a Neo4j async driver."""

    def __init__(self, driver: AsyncDriver, database: str) -> None:
        self._driver = driver
        self._database = database

    @property
    def database(self) -> str:
        return self._database

    async def run(self, query: str, **params: Any) -> list[dict[str, Any]]:
        try:
            async with self._driver.session(database=self._database) as session:
                result = await session.run(query, params)
                return [record.data() async for record in result]
        except Neo4jError as exc:
            raise BackendError(getattr(exc, "message", None) or str(exc)) from exc
        except DriverError as exc:
            raise BackendError(str(exc)) from exc

    async def close(self) -> None:
        await self._driver.close()


async def verify_connectivity(
    driver: AsyncDriver, *, attempts: int, delay_seconds: float
) -> None:
    """Verify connectivity, retrying with a fixed delay between attempts."""
    attempts = max(attempts, 1)
    last_error: Exception | None = None
    for attempt in range(1, attempts + 1):
        try:
            await driver.verify_connectivity()
            return
        except (Neo4jError, DriverError, OSError) as exc:
            last_error = exc
            logger.debug(
                "Neo4j not ready (attempt %d/%d): %s",
                attempt,
                attempts,
                exc,
            )
            if attempt < attempts:
                await asyncio.sleep(delay_seconds)
    msg = f"failed to connect to database after {attempts} attempts: {last_error}"
    raise BackendConnectionError(msg) from last_error


async def connect(config: ProviderConfig) -> GraphSession:
    """Create a driver for *config*, verify it, and wrap it in a session."""
    try:
        driver = AsyncGraphDatabase.driver(
            config.db_uri,
            auth=basic_auth(config.db_user, config.db_password),
        )
    except (DriverError, ValueError) as exc:
        msg = f"invalid database URI {config.db_uri!r}: {exc}"
        raise BackendConnectionError(msg) from exc

    try:
        await verify_connectivity(
            driver,
            attempts=config.connect_attempts,
            delay_seconds=config.connect_retry_delay_seconds,
        )
    except BackendConnectionError:
        await driver.close()
        raise
    logger.debug("connected to %s (database=%s)", config.db_uri, config.db_name)
    return GraphSession(driver, config.db_name)
