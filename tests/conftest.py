"""Root conftest: suite markers and the session-scoped Neo4j container.

The container is only started when an integration test asks for it;
unit tests run without Docker.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
import time

import pytest
from dotenv import load_dotenv
from neo4j import AsyncGraphDatabase
from testcontainers.core.container import DockerContainer

logger = logging.getLogger(__name__)

# Load repository-root .env for test opt-ins (existing env vars stay authoritative).
load_dotenv(dotenv_path=Path(__file__).resolve().parents[1] / ".env", override=False)

NEO4J_IMAGE = "neo4j:5.26-community"
NEO4J_USER = "neo4j"
NEO4J_PASSWORD = "neoform-test-password"


def pytest_collection_modifyitems(items: list[pytest.Item]) -> None:
    """Attach suite markers from test path.

    - `tests/unit/*` -> `unit`
    - `tests/integration/*` -> `integration`
    """
    root = Path(__file__).resolve().parents[1]
    for item in items:
        item_path = Path(str(item.fspath)).resolve()
        try:
            rel = item_path.relative_to(root)
        except ValueError:
            continue

        parts = rel.parts
        if len(parts) < 2 or parts[0] != "tests":
            continue
        if parts[1] == "unit":
            item.add_marker(pytest.mark.unit)
        elif parts[1] == "integration":
            item.add_marker(pytest.mark.integration)


@pytest.fixture(scope="session")
def neo4j_container():
    """Spin up a Neo4j Community container and yield its bolt URI.

    Session-scoped: one container for the entire test run.
    """
    container = (
        DockerContainer(NEO4J_IMAGE)
        .with_exposed_ports(7687)
        .with_env("NEO4J_AUTH", f"{NEO4J_USER}/{NEO4J_PASSWORD}")
    )
    with container as c:
        host = c.get_container_host_ip()
        port = c.get_exposed_port(7687)
        uri = f"bolt://{host}:{port}"

        async def wait_for_neo4j():
            driver = AsyncGraphDatabase.driver(uri, auth=(NEO4J_USER, NEO4J_PASSWORD))
            max_attempts = 60
            try:
                for attempt in range(max_attempts):
                    try:
                        await driver.verify_connectivity()
                        return
                    except Exception as exc:
                        if attempt == max_attempts - 1:
                            raise
                        logger.debug(
                            "Neo4j not ready (attempt %d/%d): %s",
                            attempt + 1,
                            max_attempts,
                            exc,
                        )
                        time.sleep(1)
            finally:
                await driver.close()

        asyncio.run(wait_for_neo4j())
        yield uri


@pytest.fixture(scope="session")
def neo4j_credentials() -> tuple[str, str]:
    """User and password configured on the test container."""
    return NEO4J_USER, NEO4J_PASSWORD
