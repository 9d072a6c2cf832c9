"""Declared model of the ``neo4j_node`` resource."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel
from pydantic import ConfigDict
from pydantic import Field
from pydantic import field_validator

from neoform.models.values import declared_labels
from neoform.models.values import declared_properties


class NodeModel(BaseModel):
    """A labeled, propertied vertex.

    ``labels`` and ``properties`` are optional, and ``None`` is kept apart
    from an empty collection.  ``id`` is computed on create.
    """

    model_config = ConfigDict(extra="forbid")

    id: str | None = Field(
        default=None,
        description="Node unique identifier (version-4 UUID).",
    )
    labels: list[Any] | None = Field(
        default=None,
        description="Node labels.",
    )
    properties: dict[str, Any] | None = Field(
        default=None,
        description="Node properties, string-encoded.",
    )

    @field_validator("labels", mode="before")
    @classmethod
    def check_labels(cls, value: object) -> object:
        return declared_labels(value)

    @field_validator("properties", mode="before")
    @classmethod
    def check_properties(cls, value: object) -> object:
        return declared_properties(value)
