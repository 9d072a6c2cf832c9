"""neoform: declaratively managed Neo4j nodes and relationships."""

from __future__ import annotations

from neoform.config import ProviderConfig
from neoform.config import resolve_provider_config
from neoform.errors import BackendConnectionError
from neoform.errors import BackendError
from neoform.errors import NeoformError
from neoform.errors import NotFoundError
from neoform.errors import ReplacementRequiredError
from neoform.errors import ValidationError
from neoform.graph.codec import UNKNOWN
from neoform.models import NodeModel
from neoform.models import RelationshipModel
from neoform.provider import Provider

__all__ = [
    "BackendConnectionError",
    "BackendError",
    "NeoformError",
    "NodeModel",
    "NotFoundError",
    "Provider",
    "ProviderConfig",
    "RelationshipModel",
    "ReplacementRequiredError",
    "UNKNOWN",
    "ValidationError",
    "resolve_provider_config",
]

__version__ = "0.1.0"
