"""Unit test fixtures: scripted query session and metric cleanup."""

from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field
from typing import Any

import pytest

from neoform.observability import reset_latency_metrics


@dataclass
class FakeSession:
    """``QuerySession`` that records queries and replays queued results."""

    results: list[list[dict[str, Any]]] = field(default_factory=list)
    error: Exception | None = None
    calls: list[tuple[str, dict[str, Any]]] = field(default_factory=list)

    def queue(self, *records: dict[str, Any]) -> None:
        self.results.append(list(records))

    async def run(self, query: str, **params: Any) -> list[dict[str, Any]]:
        self.calls.append((query, params))
        if self.error is not None:
            raise self.error
        if self.results:
            return self.results.pop(0)
        return []

    @property
    def last_params(self) -> dict[str, Any]:
        return self.calls[-1][1]


@pytest.fixture()
def fake_session() -> FakeSession:
    return FakeSession()


@pytest.fixture(autouse=True)
def clean_latency_metrics():
    reset_latency_metrics()
    yield
    reset_latency_metrics()
