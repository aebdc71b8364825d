"""Tool Registry for the ToolHub gateway.

Holds the fixed catalog of tools and the process-wide cache that builds
the registry lazily on the first request that needs it.
"""

from typing import Any, Callable, Optional

import httpx

from shared.config import Settings, get_settings
from shared.logging import get_logger
from shared.models import ToolDefinition

logger = get_logger(__name__)


class ToolRegistry:
    """
    Registry of the gateway's tools.

    Responsibilities:
    - Register tools at build time
    - Lookup tools by exact name
    - Describe the catalog to clients

    Once sealed the registry refuses new registrations.
    """

    def __init__(self, http_client: Optional[httpx.AsyncClient] = None) -> None:
        self._tools: dict[str, ToolDefinition] = {}
        self._sealed = False
        self._http_client = http_client

    def register(self, tool: ToolDefinition) -> None:
        """
        Register a tool in the registry.

        Args:
            tool: Tool definition to register

        Raises:
            ValueError: If tool name is already registered
            RuntimeError: If the registry is sealed
        """
        if self._sealed:
            raise RuntimeError("Tool registry is sealed")

        if tool.name in self._tools:
            raise ValueError(f"Tool '{tool.name}' is already registered")

        self._tools[tool.name] = tool
        logger.debug("Tool registered", tool=tool.name)

    def seal(self) -> None:
        """Freeze the catalog."""
        self._sealed = True

    @property
    def sealed(self) -> bool:
        return self._sealed

    def get(self, tool_name: str) -> Optional[ToolDefinition]:
        return self._tools.get(tool_name)

    def tool_names(self) -> list[str]:
        return list(self._tools)

    def catalog(self) -> list[dict[str, Any]]:
        """Get tool descriptions in the protocol's tools/list shape."""
        return [tool.to_catalog_entry() for tool in self._tools.values()]

    async def aclose(self) -> None:
        """Close the HTTP client shared by the proxies."""
        if self._http_client is not None and not self._http_client.is_closed:
            await self._http_client.aclose()


def build_registry(
    settings: Optional[Settings] = None,
    http_client: Optional[httpx.AsyncClient] = None
) -> ToolRegistry:
    """
    Build the gateway's registry with its fixed tool catalog.

    Construction only allocates; no I/O happens until a tool is called.
    """
    from proxies import load_all_tools

    settings = settings or get_settings()
    http_client = http_client or httpx.AsyncClient()

    registry = ToolRegistry(http_client=http_client)
    load_all_tools(registry, settings, http_client)
    registry.seal()

    logger.info("Tool registry built", tools=registry.tool_names())
    return registry


RegistryFactory = Callable[[], ToolRegistry]


class RegistryCache:
    """
    Lazily built, process-wide registry.

    Two states: unbuilt, and built with a cached registry. The first call to
    ``get_or_build`` builds; every later call reuses. There is no lock:
    check-then-build contains no await, so it is atomic within an event loop,
    and a double build across threads yields interchangeable registries.
    """

    def __init__(self, factory: Optional[RegistryFactory] = None) -> None:
        self._factory = factory or build_registry
        self._registry: Optional[ToolRegistry] = None

    @property
    def is_built(self) -> bool:
        return self._registry is not None

    @property
    def current(self) -> Optional[ToolRegistry]:
        """The cached registry, without building it."""
        return self._registry

    def get_or_build(self) -> ToolRegistry:
        if self._registry is None:
            self._registry = self._factory()
        return self._registry


# Global registry cache instance
_registry_cache: Optional[RegistryCache] = None


def get_registry_cache() -> RegistryCache:
    """Get the global registry cache instance."""
    global _registry_cache
    if _registry_cache is None:
        _registry_cache = RegistryCache()
    return _registry_cache
