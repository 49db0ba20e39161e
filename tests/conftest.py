"""Shared fixtures: a recording httpx.MockTransport and test settings."""

import json

import httpx
import pytest

from crewcharge.config import Settings

ENDPOINT = "https://crewcharge.test"


class Recorder:
    """Collects every request and answers with a canned response."""

    def __init__(self, status_code=200, payload=None, exc=None):
        self.status_code = status_code
        self.payload = {"message": "All good! 👍"} if payload is None else payload
        self.exc = exc
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.exc is not None:
            raise self.exc
        return httpx.Response(self.status_code, json=self.payload)

    @property
    def last_json(self):
        return json.loads(self.requests[-1].content)


@pytest.fixture
def recorder():
    return Recorder()


@pytest.fixture
def test_settings():
    return Settings(
        CREWCHARGE_ENDPOINT=ENDPOINT,
        CREWCHARGE_API_KEY="key-123",
        CREWCHARGE_ANALYTICS_TAG="tag-1",
        CREWCHARGE_PROJECT_KEY="acme",
        _env_file=None,
    )
