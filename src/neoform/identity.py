"""Stable external identifiers.

Every managed node and relationship carries a hidden ``uuid`` property
equal to the resource ``id``.  Neo4j's own ``elementId`` is not reliable
beyond a single transaction, so lookups always go through ``uuid``.
"""

from __future__ import annotations

import logging
import re
import uuid
from typing import Any

from neoform.errors import NotFoundError
from neoform.errors import ValidationError
from neoform.graph.session import QuerySession

logger = logging.getLogger(__name__)

UUID_V4_PATTERN = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$"
)


def new_id() -> str:
    """Return a fresh hyphenated version-4 UUID."""
    return str(uuid.uuid4())


def validate_id(value: object, *, kind: str = "resource") -> str:
    """Return *value* if it is a well-formed resource identifier."""
    if value is None:
        msg = f"{kind} id is not set"
        raise ValidationError(msg)
    if not isinstance(value, str) or not UUID_V4_PATTERN.match(value):
        msg = f"invalid {kind} id: {value!r} is not a version-4 UUID"
        raise ValidationError(msg)
    return value


async def lookup(
    session: QuerySession,
    query: str,
    resource_id: str,
    *,
    kind: str,
) -> dict[str, Any]:
    """Run a ``$uuid``-keyed query and return its first record.

    Raises ``NotFoundError`` when nothing matched.  If several records
    share the identifier the first one wins.
    """
    records = await session.run(query, uuid=resource_id)
    if not records:
        raise NotFoundError(kind, resource_id)
    if len(records) > 1:
        logger.warning(
            "%d %ss share uuid=%s; using the first match",
            len(records),
            kind,
            resource_id,
        )
    return records[0]
