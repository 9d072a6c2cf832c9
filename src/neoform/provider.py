"""Provider: configuration, bootstrap and the resource registry.

``configure()`` resolves the connection settings, opens one backend
session and hands it to every reconciler.  Resources are looked up by
their type name (``neo4j_node``, ``neo4j_relationship``).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from neoform.config import ProviderConfig
from neoform.config import resolve_provider_config
from neoform.errors import ValidationError
from neoform.graph.session import connect
from neoform.graph.session import GraphSession
from neoform.graph.session import QuerySession
from neoform.resources.node import NodeResource
from neoform.resources.relationship import RelationshipResource
from neoform.resources.schema import NODE_SCHEMA
from neoform.resources.schema import RELATIONSHIP_SCHEMA
from neoform.resources.schema import ResourceSchema

logger = logging.getLogger(__name__)

PROVIDER_NAME = "neo4j"

_SCHEMAS: dict[str, ResourceSchema] = {
    NODE_SCHEMA.type_name: NODE_SCHEMA,
    RELATIONSHIP_SCHEMA.type_name: RELATIONSHIP_SCHEMA,
}


class Provider:
    """One provider configuration and the resources sharing its session."""

    def __init__(self, version: str = "dev") -> None:
        self.version = version
        self.config: ProviderConfig | None = None
        self._session: QuerySession | None = None
        self._resources: dict[str, NodeResource | RelationshipResource] = {}

    @staticmethod
    def schemas() -> dict[str, ResourceSchema]:
        """Declared schema of every resource type, keyed by type name."""
        return dict(_SCHEMAS)

    async def configure(
        self,
        db_uri: str | None = None,
        db_user: str | None = None,
        db_password: str | None = None,
        db_name: str | None = None,
        *,
        environ: Mapping[str, str] | None = None,
        **overrides: object,
    ) -> ProviderConfig:
        """Resolve settings, connect, and wire the resources.

        Blank settings fall back to ``DB_URI``, ``DB_USER``, ``DB_PASSWORD``
        and ``DB_NAME``.  Raises ``BackendConnectionError`` when the
        database cannot be reached.
        """
        config = resolve_provider_config(
            db_uri,
            db_user,
            db_password,
            db_name,
            environ=environ,
            **overrides,
        )
        session = await connect(config)
        await self.shutdown()
        self.config = config
        self.attach(session)
        return config

    def attach(self, session: QuerySession) -> None:
        """Wire every resource to *session*."""
        self._session = session
        self._resources = {
            NODE_SCHEMA.type_name: NodeResource(session),
            RELATIONSHIP_SCHEMA.type_name: RelationshipResource(session),
        }

    @property
    def configured(self) -> bool:
        return self._session is not None

    @property
    def session(self) -> QuerySession:
        """The shared backend session."""
        if self._session is None:
            raise RuntimeError("Provider not configured. Call configure() first.")
        return self._session

    def resource(self, type_name: str) -> NodeResource | RelationshipResource:
        """Return the reconciler registered for *type_name*."""
        if type_name not in _SCHEMAS:
            msg = f"unknown resource type: {type_name!r}"
            raise ValidationError(msg)
        if self._session is None:
            raise RuntimeError("Provider not configured. Call configure() first.")
        return self._resources[type_name]

    @property
    def nodes(self) -> NodeResource:
        return self.resource(NODE_SCHEMA.type_name)  # type: ignore[return-value]

    @property
    def relationships(self) -> RelationshipResource:
        return self.resource(RELATIONSHIP_SCHEMA.type_name)  # type: ignore[return-value]

    async def shutdown(self) -> None:
        """Close the backend session, if one is open."""
        session = self._session
        self._session = None
        self._resources = {}
        self.config = None
        if isinstance(session, GraphSession):
            await session.close()
            logger.debug("closed the database session")
