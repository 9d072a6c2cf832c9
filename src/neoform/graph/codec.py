"""Property and label codec between declared attributes and Neo4j.

Declared properties are a ``map<string, string>``.  On write each value is
type-inferred (integer, then float, then string) so that Neo4j stores a
typed scalar; on read every stored value is re-stringified with
``format_scalar``.  A parse is only accepted when formatting the parsed
value gives back the exact input, which keeps ``decode(encode(p)) == p``.

``None`` and empty collections are distinct declared states.  The backend
cannot tell them apart, so decoding takes the prior declared value as a
hint.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from collections.abc import Mapping
from datetime import date
from datetime import datetime
from datetime import time

from neo4j import time as neo4j_time

from neoform.errors import ValidationError

RESERVED_KEY = "uuid"

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1
_INT_RE = re.compile(r"[+-]?[0-9]+\Z")
# Digits in the widest int64 value; longer runs never parse as an integer.
_INT64_DIGITS = 19

Scalar = int | float | str


class _Unknown:
    """Marker for a value the framework does not know yet at plan time."""

    _instance: _Unknown | None = None

    def __new__(cls) -> _Unknown:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "UNKNOWN"


UNKNOWN = _Unknown()


# ---------------------------------------------------------------------------
# Scalars
# ---------------------------------------------------------------------------


def format_scalar(value: object) -> str:
    """Return the canonical string form of a stored or declared value."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (int, str)):
        return str(value)
    if isinstance(value, float):
        return repr(value)
    if isinstance(
        value,
        (neo4j_time.DateTime, neo4j_time.Date, neo4j_time.Time, neo4j_time.Duration),
    ):
        return value.iso_format()
    if isinstance(value, (datetime, date, time)):
        return value.isoformat()
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(format_scalar(item) for item in value) + "]"
    return str(value)


def infer_scalar(text: str) -> Scalar:
    """Parse *text* as a 64-bit integer, then a float, else keep the string."""
    if _INT_RE.match(text) and len(text.lstrip("+-")) <= _INT64_DIGITS:
        number = int(text)
        if _INT64_MIN <= number <= _INT64_MAX and str(number) == text:
            return number
    try:
        real = float(text)
    except ValueError:
        return text
    if repr(real) == text:
        return real
    return text


def normalize_declared_value(value: object) -> object:
    """Coerce a declared property value to its string form.

    ``None`` and ``UNKNOWN`` pass through untouched so that the codec can
    report them; containers are rejected.
    """
    if value is None or value is UNKNOWN:
        return value
    if isinstance(value, (bool, int, float, str)):
        return format_scalar(value)
    msg = f"unsupported property value type: {type(value).__name__}"
    raise ValueError(msg)


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------


def encode_properties(declared: Mapping[str, object] | None) -> dict[str, Scalar]:
    """Validate declared properties and convert them to a Neo4j property map.

    Absent properties encode to ``{}``.  Every problem found is reported in
    a single ``ValidationError``.
    """
    if declared is None:
        return {}
    if RESERVED_KEY in declared:
        msg = f"reserved key is set as property: {RESERVED_KEY} is reserved"
        raise ValidationError(msg)

    problems: list[str] = []
    encoded: dict[str, Scalar] = {}
    for key, value in declared.items():
        if not isinstance(key, str) or not key:
            problems.append(f"invalid property key: {key!r}")
        elif value is None:
            problems.append(f"property {key!r} is null")
        elif value is UNKNOWN:
            problems.append(f"property {key!r} is unknown")
        elif isinstance(value, (bool, int, float, str)):
            encoded[key] = infer_scalar(format_scalar(value))
        else:
            problems.append(
                f"property {key!r} has unsupported type {type(value).__name__}"
            )
    if problems:
        raise ValidationError("; ".join(problems))
    return encoded


def decode_properties(
    stored: Mapping[str, object] | None,
    prior: Mapping[str, object] | None,
    system_keys: Iterable[str] = (RESERVED_KEY,),
) -> dict[str, str] | None:
    """Rebuild declared properties from a stored property map.

    System keys are dropped.  An empty result stays ``None`` when the prior
    declared value was ``None``.
    """
    excluded = set(system_keys)
    observed = {
        key: format_scalar(value)
        for key, value in (stored or {}).items()
        if key not in excluded
    }
    if not observed and prior is None:
        return None
    return observed


# ---------------------------------------------------------------------------
# Labels and relationship types
# ---------------------------------------------------------------------------


def encode_labels(declared: Iterable[object] | None) -> list[str]:
    """Validate declared labels; absent labels encode to ``[]``."""
    if declared is None:
        return []
    problems: list[str] = []
    labels: list[str] = []
    for index, label in enumerate(declared):
        if label is None:
            problems.append(f"label {index} is null")
        elif label is UNKNOWN:
            problems.append(f"label {index} is unknown")
        elif not isinstance(label, str):
            problems.append(f"label {index} is not a string")
        elif not label.strip():
            problems.append(f"label {index} is empty")
        else:
            labels.append(label)
    if problems:
        raise ValidationError("; ".join(problems))
    return labels


def decode_labels(
    observed: Iterable[str] | None,
    prior: Iterable[object] | None,
) -> list[str] | None:
    """Rebuild declared labels from the labels found on a vertex.

    Labels compare as a set.  When the observed set matches the prior
    declaration, the prior order is returned unchanged.
    """
    found = list(dict.fromkeys(observed or ()))
    if prior is None:
        return found or None

    previous = [label for label in prior if isinstance(label, str)]
    if set(found) == set(previous):
        return previous
    kept = [label for label in dict.fromkeys(previous) if label in found]
    added = [label for label in found if label not in kept]
    return kept + added


def validate_type(rel_type: object) -> str:
    """Return *rel_type* if it is a usable relationship type."""
    if rel_type is None:
        raise ValidationError("relationship type is null")
    if rel_type is UNKNOWN:
        raise ValidationError("relationship type is unknown")
    if not isinstance(rel_type, str) or not rel_type.strip():
        msg = f"invalid relationship type: {rel_type!r}"
        raise ValidationError(msg)
    return rel_type
