"""Before-validators shared by the declared resource models."""

from __future__ import annotations

from collections.abc import Mapping

from neoform.graph.codec import normalize_declared_value
from neoform.graph.codec import UNKNOWN


def declared_properties(value: object) -> object:
    """Normalise a declared property map to ``dict[str, str | None | UNKNOWN]``."""
    if value is None:
        return None
    if not isinstance(value, Mapping):
        msg = "properties must be a mapping"
        raise ValueError(msg)
    normalized: dict[str, object] = {}
    for key, item in value.items():
        if not isinstance(key, str):
            msg = f"property key must be a string, got {type(key).__name__}"
            raise ValueError(msg)
        normalized[key] = normalize_declared_value(item)
    return normalized


def declared_labels(value: object) -> object:
    """Accept a label sequence whose elements are strings, null or unknown."""
    if value is None:
        return None
    if isinstance(value, (str, bytes)) or not isinstance(value, (list, tuple)):
        msg = "labels must be a list of strings"
        raise ValueError(msg)
    for label in value:
        if label is not None and label is not UNKNOWN and not isinstance(label, str):
            msg = f"label must be a string, got {type(label).__name__}"
            raise ValueError(msg)
    return list(value)
