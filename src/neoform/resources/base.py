"""Capability interfaces implemented by the resource reconcilers.

The hosting framework dispatches on these protocols: every resource
supports the CRUD lifecycle, and may additionally support import and
schema introspection.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Protocol
from typing import TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from neoform.errors import ValidationError
from neoform.resources.schema import PlanDiff
from neoform.resources.schema import ResourceSchema

ModelT = TypeVar("ModelT", bound=BaseModel)


class Resource(Protocol[ModelT]):
    """CRUD lifecycle of a declared resource."""

    async def create(self, plan: ModelT) -> ModelT: ...

    async def read(self, state: ModelT) -> ModelT: ...

    async def update(self, plan: ModelT, state: ModelT) -> ModelT: ...

    async def delete(self, state: ModelT) -> ModelT: ...


class ResourceWithImportState(Resource[ModelT], Protocol[ModelT]):
    """Resource that can be adopted from an existing backend record."""

    async def import_state(self, resource_id: str) -> ModelT: ...


class ResourceWithSchema(Protocol[ModelT]):
    """Resource exposing its declared schema and a plan check."""

    schema: ResourceSchema

    def plan(self, prior: ModelT | None, desired: ModelT | None) -> PlanDiff: ...


def _validation_message(exc: PydanticValidationError) -> str:
    err = exc.errors()[0] if exc.errors() else {}
    location = ".".join(str(part) for part in err.get("loc", ()))
    message = str(err.get("msg", "Invalid input"))
    return f"{location}: {message}" if location else message


def model_from_payload(model_cls: type[ModelT], payload: Mapping[str, object]) -> ModelT:
    """Build a declared model from a raw framework payload.

    Pydantic errors are re-raised as ``neoform.errors.ValidationError``.
    """
    try:
        return model_cls.model_validate(dict(payload))
    except PydanticValidationError as exc:
        raise ValidationError(_validation_message(exc)) from exc
