"""Shared fixtures and stubs for the test suite."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import pytest

from core.dispatcher import SkillDispatcher
from core.errors import UpstreamUnavailable
from skills import CalculatorSkill, DictionarySkill, WeatherSkill


@dataclass
class StubJSONClient:
    """Deterministic stand-in for :class:`~services.http_client.JSONClient`.

    ``responses`` maps a URL to either a payload or an exception instance that
    is raised when the URL is requested. Unknown URLs raise
    :class:`UpstreamUnavailable`, like an unreachable host would.
    """

    responses: Dict[str, Any] = field(default_factory=dict)
    calls: List[Dict[str, Any]] = field(default_factory=list)

    def get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        self.calls.append({"url": url, "params": dict(params or {})})
        if url not in self.responses:
            raise UpstreamUnavailable(f"No stubbed response for {url}")
        response = self.responses[url]
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture()
def json_client_stub() -> StubJSONClient:
    """Provide a fresh HTTP client stub for each test."""

    return StubJSONClient()


@pytest.fixture()
def dispatcher() -> SkillDispatcher:
    """Dispatcher wired with the built-in skills and no network access."""

    return SkillDispatcher(
        [
            WeatherSkill(clock=lambda: 1_700_000_000),
            CalculatorSkill(),
            DictionarySkill(),
        ]
    )
