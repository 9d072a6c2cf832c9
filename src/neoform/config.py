"""Provider configuration.

``ProviderConfig`` is a frozen dataclass with defaults for everything
except the credentials.  ``resolve_provider_config`` fills blank values
from the environment (``DB_URI``, ``DB_USER``, ``DB_PASSWORD``,
``DB_NAME``).
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from dataclasses import field
from dataclasses import fields

from neoform.errors import ValidationError

DEFAULT_DB_NAME = "neo4j"


@dataclass(frozen=True)
class ProviderConfig:
    """Connection settings shared by every resource of one provider."""

    db_uri: str
    db_user: str
    db_password: str = field(repr=False)
    db_name: str = DEFAULT_DB_NAME
    # Bootstrap retry policy
    connect_attempts: int = 3
    connect_retry_delay_seconds: float = 1.0


def _blank(value: str | None) -> bool:
    return value is None or not value.strip()


def _from_env(
    name: str, value: str | None, environ: Mapping[str, str]
) -> str | None:
    if not _blank(value):
        return value
    raw = environ.get(name.upper())
    if _blank(raw):
        return None
    return raw


def resolve_provider_config(
    db_uri: str | None = None,
    db_user: str | None = None,
    db_password: str | None = None,
    db_name: str | None = None,
    *,
    environ: Mapping[str, str] | None = None,
    **overrides: object,
) -> ProviderConfig:
    """Build a ``ProviderConfig``, falling back to environment variables.

    Explicit values win over the environment.  ``db_name`` defaults to
    ``"neo4j"`` when neither is set.  Extra keyword arguments override the
    remaining ``ProviderConfig`` defaults (e.g. ``connect_attempts``).
    """
    unknown = sorted(set(overrides) - {f.name for f in fields(ProviderConfig)})
    if unknown:
        msg = f"unknown provider configuration: {', '.join(unknown)}"
        raise ValidationError(msg)

    env = os.environ if environ is None else environ
    resolved = {
        "db_uri": _from_env("db_uri", db_uri, env),
        "db_user": _from_env("db_user", db_user, env),
        "db_password": _from_env("db_password", db_password, env),
    }
    missing = [name for name, value in resolved.items() if value is None]
    if missing:
        hints = ", ".join(f"{name} (or {name.upper()})" for name in missing)
        raise ValidationError(f"missing provider configuration: {hints}")

    name = _from_env("db_name", db_name, env) or DEFAULT_DB_NAME
    return ProviderConfig(db_name=name, **resolved, **overrides)  # type: ignore[arg-type]
