"""Integration fixtures: a provider wired to the Neo4j testcontainer."""

from __future__ import annotations

import pytest

from neoform.provider import Provider


@pytest.fixture()
async def provider(neo4j_container, neo4j_credentials):
    """Yield a configured provider; the graph is wiped before each test."""
    user, password = neo4j_credentials
    provider = Provider(version="test")
    await provider.configure(neo4j_container, user, password, environ={})
    await provider.session.run("MATCH (n) DETACH DELETE n")
    yield provider
    await provider.shutdown()


@pytest.fixture()
def nodes(provider):
    return provider.nodes


@pytest.fixture()
def relationships(provider):
    return provider.relationships


@pytest.fixture()
def graph(provider):
    """Raw query access for asserting on backend state."""
    return provider.session
