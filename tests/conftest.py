"""Shared fixtures: settings, a mocked downstream and gateway factories."""

from typing import Callable, Optional

import httpx
import pytest

from shared.config import (
    AudioSettings,
    HubServerSettings,
    ImageSettings,
    Settings,
    TranslateSettings,
)

HUB_SECRET = "hub-secret"
TTS_ENDPOINT = "https://tts.example.com/speak/"
IMAGE_ENDPOINT = "https://images.example.com/generate"
TRANSLATE_ENDPOINT = "https://translate.example.com/"


class MockDownstream:
    """
    Stand-in for the three downstream services.

    Responses are keyed by host; every request is recorded.
    """

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._responses: dict[str, Callable[[httpx.Request], httpx.Response]] = {}

    def respond(self, host: str, response: httpx.Response) -> None:
        self._responses[host] = lambda request: response

    def fail(self, host: str, exc: Exception) -> None:
        def raise_error(request: httpx.Request) -> httpx.Response:
            raise exc
        self._responses[host] = raise_error

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        responder = self._responses.get(request.url.host)
        if responder is None:
            return httpx.Response(404, text="no mock configured")
        return responder(request)


@pytest.fixture
def settings() -> Settings:
    return Settings(
        hub=HubServerSettings(token=HUB_SECRET),
        tts=AudioSettings(endpoint=TTS_ENDPOINT, token="tts-token"),
        image=ImageSettings(endpoint=IMAGE_ENDPOINT, key="image-key"),
        translate=TranslateSettings(endpoint=TRANSLATE_ENDPOINT),
    )


@pytest.fixture
def downstream() -> MockDownstream:
    return MockDownstream()


@pytest.fixture
def http_client(downstream: MockDownstream) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(downstream))


@pytest.fixture
def registry(settings, http_client):
    from hub.registry import build_registry

    return build_registry(settings, http_client)


@pytest.fixture
def make_app(settings, http_client):
    """Factory for a gateway app with a fresh registry cache."""
    from hub.main import create_app
    from hub.registry import RegistryCache, build_registry

    def factory(cache: Optional[RegistryCache] = None):
        cache = cache or RegistryCache(lambda: build_registry(settings, http_client))
        return create_app(settings, cache), cache

    return factory
