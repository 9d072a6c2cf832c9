"""``neo4j_node`` reconciler.

Each lifecycle call issues exactly one Cypher statement.  Vertices are
keyed by their hidden ``uuid`` property; labels and properties are applied
with dynamic-label syntax (``SET n:$(label)``, Neo4j 5.26+).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from neoform.errors import BackendError
from neoform.errors import NotFoundError
from neoform.errors import ValidationError
from neoform.graph.codec import decode_labels
from neoform.graph.codec import decode_properties
from neoform.graph.codec import encode_labels
from neoform.graph.codec import encode_properties
from neoform.graph.session import QuerySession
from neoform.identity import lookup
from neoform.identity import new_id
from neoform.identity import validate_id
from neoform.models.nodes import NodeModel
from neoform.observability import measure
from neoform.resources.base import model_from_payload
from neoform.resources.schema import NODE_SCHEMA
from neoform.resources.schema import plan_change
from neoform.resources.schema import PlanDiff

logger = logging.getLogger(__name__)

_KIND = "node"

# ---------------------------------------------------------------------------
# Cypher
# ---------------------------------------------------------------------------

_CREATE_NODE = (
    "MERGE (n {uuid: $uuid}) "
    "FOREACH (label IN $labels | SET n:$(label)) "
    "SET n += $properties"
)

_READ_NODE = (
    "MATCH (n {uuid: $uuid}) "
    "RETURN labels(n) AS labels, properties(n) AS properties"
)

# Clear, then reapply: every label and property is overwritten.
_UPDATE_NODE = (
    "MATCH (n {uuid: $uuid}) "
    "FOREACH (label IN labels(n) | REMOVE n:$(label)) "
    "SET n = $properties, n.uuid = $uuid "
    "FOREACH (label IN $labels | SET n:$(label)) "
    "RETURN count(n) AS matched"
)

_DELETE_NODE = "MATCH (n {uuid: $uuid}) DETACH DELETE n RETURN count(n) AS deleted"


class NodeResource:
    """Create, read, update, delete and import Neo4j nodes."""

    schema = NODE_SCHEMA

    def __init__(self, session: QuerySession) -> None:
        self._session = session

    @staticmethod
    def load_model(payload: Mapping[str, object]) -> NodeModel:
        return model_from_payload(NodeModel, payload)

    def plan(self, prior: NodeModel | None, desired: NodeModel | None) -> PlanDiff:
        return plan_change(self.schema, prior, desired)

    # ----- Lifecycle -----

    async def create(self, plan: NodeModel) -> NodeModel:
        """Create the vertex and return *plan* with its new ``id``."""
        with measure("node.create"):
            if plan.id is not None:
                msg = f"node id is computed and cannot be set: {plan.id!r}"
                raise ValidationError(msg)
            labels = encode_labels(plan.labels)
            properties = encode_properties(plan.properties)

            node_id = new_id()
            logger.debug("create a node uuid=%s", node_id)
            try:
                await self._session.run(
                    _CREATE_NODE,
                    uuid=node_id,
                    labels=labels,
                    properties=properties,
                )
            except BackendError:
                logger.warning(
                    "failed to create the node uuid=%s; "
                    "a partial commit may have left an orphan vertex",
                    node_id,
                )
                raise
            logger.debug("created a node uuid=%s", node_id)
            return plan.model_copy(update={"id": node_id})

    async def read(self, state: NodeModel) -> NodeModel:
        """Refresh *state* from the backend; raise ``NotFoundError`` if gone."""
        with measure("node.read"):
            node_id = validate_id(state.id, kind=_KIND)
            record = await lookup(self._session, _READ_NODE, node_id, kind=_KIND)
            return _node_from_record(node_id, record, prior=state)

    async def update(self, plan: NodeModel, state: NodeModel) -> NodeModel:
        """Overwrite labels and properties of an existing vertex."""
        with measure("node.update"):
            node_id = validate_id(state.id, kind=_KIND)
            if plan.id is not None and plan.id != node_id:
                msg = f"node id is immutable: {node_id!r} -> {plan.id!r}"
                raise ValidationError(msg)
            labels = encode_labels(plan.labels)
            properties = encode_properties(plan.properties)

            logger.debug("update the node uuid=%s", node_id)
            records = await self._session.run(
                _UPDATE_NODE,
                uuid=node_id,
                labels=labels,
                properties=properties,
            )
            if not records or not records[0]["matched"]:
                raise NotFoundError(_KIND, node_id)
            return plan.model_copy(update={"id": node_id})

    async def delete(self, state: NodeModel) -> NodeModel:
        """Detach-delete the vertex and return a fully nulled model."""
        with measure("node.delete"):
            node_id = validate_id(state.id, kind=_KIND)
            records = await self._session.run(_DELETE_NODE, uuid=node_id)
            if not records or not records[0]["deleted"]:
                logger.debug("node already absent uuid=%s", node_id)
            else:
                logger.debug("deleted the node uuid=%s", node_id)
            return NodeModel()

    async def import_state(self, resource_id: str) -> NodeModel:
        """Adopt an existing vertex by its ``uuid``."""
        with measure("node.import"):
            node_id = validate_id(resource_id, kind=_KIND)
            record = await lookup(self._session, _READ_NODE, node_id, kind=_KIND)
            logger.debug("imported the node uuid=%s", node_id)
            return _node_from_record(node_id, record, prior=None)


def _node_from_record(
    node_id: str, record: dict[str, Any], *, prior: NodeModel | None
) -> NodeModel:
    return NodeModel(
        id=node_id,
        labels=decode_labels(record["labels"], prior.labels if prior else None),
        properties=decode_properties(
            record["properties"], prior.properties if prior else None
        ),
    )
