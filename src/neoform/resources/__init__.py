"""Resource reconcilers, their schemas and capability interfaces."""

from __future__ import annotations

from neoform.resources.base import model_from_payload
from neoform.resources.base import Resource
from neoform.resources.base import ResourceWithImportState
from neoform.resources.base import ResourceWithSchema
from neoform.resources.node import NodeResource
from neoform.resources.relationship import RelationshipResource
from neoform.resources.schema import Attribute
from neoform.resources.schema import AttributeKind
from neoform.resources.schema import NODE_SCHEMA
from neoform.resources.schema import plan_change
from neoform.resources.schema import PlanAction
from neoform.resources.schema import PlanDiff
from neoform.resources.schema import RELATIONSHIP_SCHEMA
from neoform.resources.schema import ResourceSchema

__all__ = [
    "Attribute",
    "AttributeKind",
    "NODE_SCHEMA",
    "NodeResource",
    "PlanAction",
    "PlanDiff",
    "RELATIONSHIP_SCHEMA",
    "RelationshipResource",
    "Resource",
    "ResourceSchema",
    "ResourceWithImportState",
    "ResourceWithSchema",
    "model_from_payload",
    "plan_change",
]
