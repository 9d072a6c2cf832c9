"""Error taxonomy shared by the codec, the reconcilers and the bootstrap."""

from __future__ import annotations


class NeoformError(Exception):
    """Base class for every error raised by neoform."""


class ValidationError(NeoformError, ValueError):
    """Declared input is invalid; raised before any backend call."""


class ReplacementRequiredError(ValidationError):
    """An immutable attribute changed and the resource must be replaced."""

    def __init__(self, kind: str, attributes: tuple[str, ...]) -> None:
        self.kind = kind
        self.attributes = attributes
        names = ", ".join(attributes)
        super().__init__(f"{kind} attributes require replacement: {names}")


class BackendError(NeoformError):
    """A query failed on the Neo4j side."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)


class NotFoundError(NeoformError, LookupError):
    """No record carries the requested identifier."""

    def __init__(self, kind: str, resource_id: str) -> None:
        self.kind = kind
        self.resource_id = resource_id
        super().__init__(f"no {kind} found: {resource_id}")


class BackendConnectionError(NeoformError, ConnectionError):
    """Connectivity could not be verified after the configured attempts."""
