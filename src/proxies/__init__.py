"""Downstream proxy tools.

Each tool forwards to its own downstream service with its own payload
shape and credential placement. Proxies share nothing but the HTTP client.
"""

from typing import TYPE_CHECKING

import httpx

from proxies.audio import AudioProxy
from proxies.base import DownstreamError, ProxyTool
from proxies.image import ImageProxy
from proxies.translate import TranslateProxy

if TYPE_CHECKING:
    from hub.registry import ToolRegistry
    from shared.config import Settings


def create_proxies(
    settings: "Settings",
    client: httpx.AsyncClient
) -> list[ProxyTool]:
    """Create the fixed set of proxies from configuration."""
    return [
        AudioProxy(settings.tts.endpoint, token=settings.tts.token, client=client),
        ImageProxy(settings.image.endpoint, key=settings.image.key, client=client),
        TranslateProxy(settings.translate.endpoint, client=client),
    ]


def load_all_tools(
    registry: "ToolRegistry",
    settings: "Settings",
    client: httpx.AsyncClient
) -> None:
    """Register every proxy tool in the registry."""
    for proxy in create_proxies(settings, client):
        registry.register(proxy.definition())


__all__ = [
    "AudioProxy",
    "DownstreamError",
    "ImageProxy",
    "ProxyTool",
    "TranslateProxy",
    "create_proxies",
    "load_all_tools",
]
