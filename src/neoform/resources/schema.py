"""Declared resource schemas and the single-resource plan check.

A ``ResourceSchema`` lists the attributes a resource type accepts and how
each one behaves on change.  ``plan_change`` compares a prior and a
desired model against that schema and decides whether the resource is
created, updated in place, replaced, deleted, or left alone.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from pydantic import BaseModel

from neoform.errors import ValidationError


class AttributeKind(str, Enum):
    """Value shape of a declared attribute."""

    string = "string"
    list = "list"
    map = "map"


class PlanAction(str, Enum):
    """What applying a prior→desired change does to one resource."""

    create = "create"
    update = "update"
    replace = "replace"
    delete = "delete"
    noop = "noop"


@dataclass(frozen=True)
class Attribute:
    """One attribute of a resource schema."""

    name: str
    kind: AttributeKind
    description: str = ""
    required: bool = False
    optional: bool = False
    computed: bool = False
    requires_replace: bool = False
    # Lists compared as sets (order-insensitive)
    unordered: bool = False

    def normalize(self, value: object) -> object:
        if self.unordered and value is not None:
            return frozenset(value)  # type: ignore[arg-type]
        return value


@dataclass(frozen=True)
class ResourceSchema:
    """Attribute layout of a resource type."""

    type_name: str
    description: str
    attributes: tuple[Attribute, ...]

    def attribute(self, name: str) -> Attribute:
        for attribute in self.attributes:
            if attribute.name == name:
                return attribute
        raise KeyError(name)

    @property
    def required(self) -> tuple[str, ...]:
        return tuple(a.name for a in self.attributes if a.required)

    @property
    def replace_triggers(self) -> tuple[str, ...]:
        return tuple(a.name for a in self.attributes if a.requires_replace)


@dataclass(frozen=True)
class PlanDiff:
    """Outcome of ``plan_change``."""

    action: PlanAction
    changed: tuple[str, ...] = ()
    replace_triggers: tuple[str, ...] = ()


NODE_SCHEMA = ResourceSchema(
    type_name="neo4j_node",
    description="Neo4j Node.",
    attributes=(
        Attribute(
            name="labels",
            kind=AttributeKind.list,
            description="Node labels.",
            optional=True,
            unordered=True,
        ),
        Attribute(
            name="properties",
            kind=AttributeKind.map,
            description="Node properties.",
            optional=True,
        ),
        Attribute(
            name="id",
            kind=AttributeKind.string,
            description="Node unique identifier.",
            computed=True,
        ),
    ),
)

RELATIONSHIP_SCHEMA = ResourceSchema(
    type_name="neo4j_relationship",
    description="Neo4j Relationship.",
    attributes=(
        Attribute(
            name="id",
            kind=AttributeKind.string,
            description="Relationship unique identifier.",
            computed=True,
        ),
        Attribute(
            name="type",
            kind=AttributeKind.string,
            description="Relationship type.",
            required=True,
            requires_replace=True,
        ),
        Attribute(
            name="start_node_id",
            kind=AttributeKind.string,
            description="The ID of the Node where the Relationship starts from.",
            required=True,
            requires_replace=True,
        ),
        Attribute(
            name="end_node_id",
            kind=AttributeKind.string,
            description="The ID of the Node where the Relationship ends at.",
            required=True,
            requires_replace=True,
        ),
        Attribute(
            name="properties",
            kind=AttributeKind.map,
            description="Relationship properties.",
            optional=True,
        ),
    ),
)


def validate_required(schema: ResourceSchema, model: BaseModel) -> None:
    """Raise ``ValidationError`` if a required attribute is unset."""
    missing = [name for name in schema.required if getattr(model, name) is None]
    if missing:
        msg = f"{schema.type_name}: missing required attributes: {', '.join(missing)}"
        raise ValidationError(msg)


def plan_change(
    schema: ResourceSchema,
    prior: BaseModel | None,
    desired: BaseModel | None,
) -> PlanDiff:
    """Classify the change from *prior* to *desired* for one resource.

    Computed attributes never count as a change.  A change to any
    requires-replace attribute turns the whole change into a replacement.
    """
    if prior is None and desired is None:
        return PlanDiff(PlanAction.noop)
    if prior is None:
        return PlanDiff(PlanAction.create)
    if desired is None:
        return PlanDiff(PlanAction.delete)

    changed = tuple(
        attribute.name
        for attribute in schema.attributes
        if not attribute.computed
        and attribute.normalize(getattr(prior, attribute.name))
        != attribute.normalize(getattr(desired, attribute.name))
    )
    if not changed:
        return PlanDiff(PlanAction.noop)

    triggers = tuple(name for name in changed if name in schema.replace_triggers)
    if triggers:
        return PlanDiff(PlanAction.replace, changed, triggers)
    return PlanDiff(PlanAction.update, changed)
