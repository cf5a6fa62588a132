"""Shared fixtures for all tests."""

import json

import httpx
import pytest
from fastapi.testclient import TestClient

from backend.agent.assistant import PortfolioAssistant
from backend.core.llm_adapter import CompletionClient
from backend.core.rate_limiter import RequestGovernor
from backend.main import app


class FakeClock:
    """Manually advanced stand-in for time.monotonic."""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class UpstreamStub:
    """Records completion requests and answers with a canned response."""

    def __init__(self):
        self.status_code = 200
        self.body: dict | str = completion_body("Hello!")
        self.error: Exception | None = None
        self.requests: list[httpx.Request] = []

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        if isinstance(self.body, str):
            return httpx.Response(self.status_code, text=self.body)
        return httpx.Response(self.status_code, json=self.body)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def last_payload(self) -> dict:
        return json.loads(self.requests[-1].content)


def completion_body(text: str) -> dict:
    return {"choices": [{"message": {"role": "assistant", "content": text}}]}


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def governor(clock) -> RequestGovernor:
    return RequestGovernor(max_requests=15, window_seconds=600, clock=clock)


@pytest.fixture
def portfolio_file(tmp_path):
    """Small knowledge payload on disk."""
    path = tmp_path / "portfolio.json"
    path.write_text(json.dumps({
        "personalInfo": {"name": "Test Owner", "title": "ML Engineer"},
        "portfolio": [{"title": "Fraud Scoring", "executiveSummary": "Realtime fraud model"}],
    }), encoding="utf-8")
    return path


@pytest.fixture
def upstream() -> UpstreamStub:
    return UpstreamStub()


@pytest.fixture
def completion_client(upstream) -> CompletionClient:
    return CompletionClient(api_key="sk-test", transport=upstream.transport)


@pytest.fixture
def assistant(completion_client, portfolio_file) -> PortfolioAssistant:
    return PortfolioAssistant(completion_client, owner="Test Owner", data_path=str(portfolio_file))


@pytest.fixture
def api_client(governor, assistant):
    """TestClient with the app's collaborators swapped for test doubles."""
    with TestClient(app) as client:
        app.state.governor = governor
        app.state.assistant = assistant
        yield client
