from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest


def pytest_configure():
    # Ensure project root is on sys.path for absolute imports like 'pipelines.orchestrator'
    root = Path(__file__).resolve().parents[1]
    if str(root) not in sys.path:
        sys.path.insert(0, str(root))
    # Set test environment knobs
    os.environ.setdefault("RUN_ENV", "test")


class FakeProvider:
    """In-memory search provider; ``responses`` maps query -> list of results or an exception."""

    def __init__(self, name="fake", responses=None, default=None, healthy=True):
        self.name = name
        self.responses = responses or {}
        self.default = default if default is not None else []
        self.healthy = healthy
        self.calls = []

    def search_raw(self, query, max_results):
        self.calls.append((query, max_results))
        value = self.responses.get(query, self.default)
        if isinstance(value, Exception):
            raise value
        return list(value)[:max_results]

    def health_check(self):
        from models.discovery_result import HealthStatus

        return HealthStatus(healthy=self.healthy, latency_ms=1, error=None if self.healthy else "down")


class FakeExecutor:
    """Executor double; ``outcomes`` maps query -> SearchOutcome (or exception)."""

    def __init__(self, outcomes=None):
        self.outcomes = outcomes or {}
        self.queries = []

    def execute(self, platform, query, max_results):
        from models.search import SearchOutcome

        self.queries.append(query)
        value = self.outcomes.get(query)
        if isinstance(value, Exception):
            raise value
        return value if value is not None else SearchOutcome(provider="fake")


class FakeResponse:
    def __init__(self, status_code=200, payload=None, headers=None, text=""):
        self.status_code = status_code
        self._payload = payload
        self.headers = headers or {}
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("no json")
        return self._payload


class FakeSession:
    """requests.Session double returning queued responses in order."""

    def __init__(self, responses):
        self.responses = list(responses)
        self.requests = []

    def _next(self, method, url, **kwargs):
        self.requests.append((method, url, kwargs))
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    def get(self, url, **kwargs):
        return self._next("GET", url, **kwargs)

    def post(self, url, **kwargs):
        return self._next("POST", url, **kwargs)


@pytest.fixture
def fakes():
    return {
        "provider": FakeProvider,
        "executor": FakeExecutor,
        "response": FakeResponse,
        "session": FakeSession,
    }


@pytest.fixture
def hints():
    from models.hints import HintBundle

    return HintBundle(externalId="john-doe-1234", nameHint="John Doe", companyHint="Acme")


@pytest.fixture(autouse=True)
def _clear_settings_cache():
    from config.settings import get_settings

    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
