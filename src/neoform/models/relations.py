"""Declared model of the ``neo4j_relationship`` resource."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import field_validator

from neoform.models.values import declared_properties


class RelationshipModel(BaseModel):
    """A typed, directed edge between two managed nodes.

    ``type``, ``start_node_id`` and ``end_node_id`` are immutable; the
    fields are optional here only because a destroyed resource is
    reported with every attribute nulled.
    """

    model_config = ConfigDict(extra="forbid")

    id: str | None = Field(
        default=None,
        description="Relationship unique identifier (version-4 UUID).",
    )
    type: str | None = Field(
        default=None,
        description="Relationship type.",
    )
    start_node_id: str | None = Field(
        default=None,
        description="ID of the node the relationship starts from.",
    )
    end_node_id: str | None = Field(
        default=None,
        description="ID of the node the relationship ends at.",
    )
    properties: dict[str, Any] | None = Field(
        default=None,
        description="Relationship properties, string-encoded.",
    )

    @field_validator("properties", mode="before")
    @classmethod
    def check_properties(cls, value: object) -> object:
        return declared_properties(value)
