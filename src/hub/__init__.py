"""ToolHub gateway - authentication, tool registry, dispatch and MCP transports.

The gateway authenticates callers with a shared secret, builds its tool
registry once per process and routes protocol tool calls to the
downstream proxies.
"""

from hub.registry import RegistryCache, ToolRegistry, build_registry, get_registry_cache
from hub.router import ToolDispatcher
from hub.auth import AuthGate, is_authorized

__all__ = [
    "RegistryCache",
    "ToolRegistry",
    "build_registry",
    "get_registry_cache",
    "ToolDispatcher",
    "AuthGate",
    "is_authorized",
]
