"""Declared resource models."""

from __future__ import annotations

from neoform.models.nodes import NodeModel
from neoform.models.relations import RelationshipModel

__all__ = [
    "NodeModel",
    "RelationshipModel",
]
