"""``neo4j_relationship`` reconciler.

Edges are keyed by their hidden ``uuid`` property.  ``type`` and both
endpoints are immutable: the plan check reports a change to any of them
as a replacement and ``update`` refuses it.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from neoform.errors import BackendError
from neoform.errors import NotFoundError
from neoform.errors import ReplacementRequiredError
from neoform.errors import ValidationError
from neoform.graph.codec import decode_properties
from neoform.graph.codec import encode_properties
from neoform.graph.codec import validate_type
from neoform.graph.session import QuerySession
from neoform.identity import lookup
from neoform.identity import new_id
from neoform.identity import validate_id
from neoform.models.relations import RelationshipModel
from neoform.observability import measure
from neoform.resources.base import model_from_payload
from neoform.resources.schema import plan_change
from neoform.resources.schema import PlanDiff
from neoform.resources.schema import RELATIONSHIP_SCHEMA
from neoform.resources.schema import validate_required

logger = logging.getLogger(__name__)

_KIND = "relationship"

# ---------------------------------------------------------------------------
# Cypher
# ---------------------------------------------------------------------------

# Both endpoints must exist; no record comes back otherwise and nothing
# is written.
_CREATE_RELATIONSHIP = (
    "MATCH (s {uuid: $start_uuid}), (e {uuid: $end_uuid}) "
    "WITH s, e LIMIT 1 "
    "CREATE (s)-[r:$($type)]->(e) "
    "SET r += $properties, r.uuid = $uuid "
    "RETURN r.uuid AS uuid"
)

_READ_RELATIONSHIP = (
    "MATCH (s)-[r {uuid: $uuid}]->(e) "
    "RETURN type(r) AS type, properties(r) AS properties, "
    "s.uuid AS start_node_id, e.uuid AS end_node_id"
)

# Clear, then reapply.
_UPDATE_RELATIONSHIP = (
    "MATCH ()-[r {uuid: $uuid}]->() "
    "SET r = $properties, r.uuid = $uuid "
    "RETURN count(r) AS matched"
)

_DELETE_RELATIONSHIP = (
    "MATCH ()-[r {uuid: $uuid}]->() DELETE r RETURN count(r) AS deleted"
)


class RelationshipResource:
    """Create, read, update, delete and import Neo4j relationships."""

    schema = RELATIONSHIP_SCHEMA

    def __init__(self, session: QuerySession) -> None:
        self._session = session

    @staticmethod
    def load_model(payload: Mapping[str, object]) -> RelationshipModel:
        return model_from_payload(RelationshipModel, payload)

    def plan(
        self,
        prior: RelationshipModel | None,
        desired: RelationshipModel | None,
    ) -> PlanDiff:
        return plan_change(self.schema, prior, desired)

    # ----- Lifecycle -----

    async def create(self, plan: RelationshipModel) -> RelationshipModel:
        """Create the edge between two existing nodes.

        Raises ``NotFoundError`` when either endpoint does not exist.
        """
        with measure("relationship.create"):
            if plan.id is not None:
                msg = f"relationship id is computed and cannot be set: {plan.id!r}"
                raise ValidationError(msg)
            validate_required(self.schema, plan)
            rel_type = validate_type(plan.type)
            properties = encode_properties(plan.properties)

            rel_id = new_id()
            logger.debug(
                "create a relationship uuid=%s (%s)-[:%s]->(%s)",
                rel_id,
                plan.start_node_id,
                rel_type,
                plan.end_node_id,
            )
            try:
                records = await self._session.run(
                    _CREATE_RELATIONSHIP,
                    uuid=rel_id,
                    start_uuid=plan.start_node_id,
                    end_uuid=plan.end_node_id,
                    type=rel_type,
                    properties=properties,
                )
            except BackendError:
                logger.warning(
                    "failed to create the relationship uuid=%s; "
                    "a partial commit may have left an orphan edge",
                    rel_id,
                )
                raise
            if not records:
                missing = f"{plan.start_node_id} or {plan.end_node_id}"
                raise NotFoundError("endpoint node", missing)
            logger.debug("created a relationship uuid=%s", rel_id)
            return plan.model_copy(update={"id": rel_id})

    async def read(self, state: RelationshipModel) -> RelationshipModel:
        """Refresh *state*; raise ``NotFoundError`` if the edge is gone."""
        with measure("relationship.read"):
            rel_id = validate_id(state.id, kind=_KIND)
            record = await lookup(
                self._session, _READ_RELATIONSHIP, rel_id, kind=_KIND
            )
            return _relationship_from_record(rel_id, record, prior=state)

    async def update(
        self, plan: RelationshipModel, state: RelationshipModel
    ) -> RelationshipModel:
        """Overwrite the properties of an existing edge."""
        with measure("relationship.update"):
            rel_id = validate_id(state.id, kind=_KIND)
            if plan.id is not None and plan.id != rel_id:
                msg = f"relationship id is immutable: {rel_id!r} -> {plan.id!r}"
                raise ValidationError(msg)
            triggers = tuple(
                name
                for name in self.schema.replace_triggers
                if getattr(plan, name) != getattr(state, name)
            )
            if triggers:
                raise ReplacementRequiredError(_KIND, triggers)
            properties = encode_properties(plan.properties)

            logger.debug("update the relationship uuid=%s", rel_id)
            records = await self._session.run(
                _UPDATE_RELATIONSHIP, uuid=rel_id, properties=properties
            )
            if not records or not records[0]["matched"]:
                raise NotFoundError(_KIND, rel_id)
            return plan.model_copy(update={"id": rel_id})

    async def delete(self, state: RelationshipModel) -> RelationshipModel:
        """Delete only the edge; its endpoint nodes remain."""
        with measure("relationship.delete"):
            rel_id = validate_id(state.id, kind=_KIND)
            records = await self._session.run(_DELETE_RELATIONSHIP, uuid=rel_id)
            if not records or not records[0]["deleted"]:
                logger.debug("relationship already absent uuid=%s", rel_id)
            else:
                logger.debug("deleted the relationship uuid=%s", rel_id)
            return RelationshipModel()

    async def import_state(self, resource_id: str) -> RelationshipModel:
        """Adopt an existing edge, recovering its type and endpoints."""
        with measure("relationship.import"):
            rel_id = validate_id(resource_id, kind=_KIND)
            record = await lookup(
                self._session, _READ_RELATIONSHIP, rel_id, kind=_KIND
            )
            logger.debug("imported the relationship uuid=%s", rel_id)
            return _relationship_from_record(rel_id, record, prior=None)


def _relationship_from_record(
    rel_id: str, record: dict[str, Any], *, prior: RelationshipModel | None
) -> RelationshipModel:
    return RelationshipModel(
        id=rel_id,
        type=record["type"],
        start_node_id=record["start_node_id"],
        end_node_id=record["end_node_id"],
        properties=decode_properties(
            record["properties"], prior.properties if prior else None
        ),
    )
