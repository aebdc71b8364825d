"""ToolHub Gateway - FastAPI Application.

A single authenticated endpoint aggregating the text-to-speech, image
generation and translation tools. The MCP SDK serves the protocol over
streamable HTTP (``/`` and ``/mcp``) and SSE (``/sse``); the registry behind
it is built once per process, on the first authenticated request that
needs it.
"""

from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI

from shared.config import Settings, get_settings
from shared.logging import get_logger, setup_logging
from hub.auth import AuthGate
from hub.registry import RegistryCache, get_registry_cache
from hub.transport import (
    SERVER_VERSION,
    SSE_MESSAGE_PATH,
    SSEEndpoint,
    StreamableHTTPEndpoint,
    build_server,
)

logger = get_logger(__name__)

STREAMABLE_HTTP_PATHS = ("/", "/mcp")
SSE_PATH = "/sse"


def create_app(
    settings: Optional[Settings] = None,
    registry_cache: Optional[RegistryCache] = None
) -> FastAPI:
    """
    Create the gateway application.

    Args:
        settings: Application settings (defaults to the cached settings)
        registry_cache: Registry cache (defaults to the process-wide cache)
    """
    settings = settings or get_settings()
    cache = registry_cache or get_registry_cache()

    server = build_server(cache)
    streamable_http = StreamableHTTPEndpoint(server, json_response=settings.hub.json_response)
    sse = SSEEndpoint(server)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.log_level, json_output=settings.environment == "production")
        logger.info("Starting ToolHub gateway", environment=settings.environment)

        async with streamable_http.run():
            yield

        logger.info("Shutting down ToolHub gateway")
        if cache.current is not None:
            await cache.current.aclose()

    app = FastAPI(
        title="ToolHub",
        description="Shared-secret gateway for remote tools",
        version=SERVER_VERSION,
        lifespan=lifespan
    )
    app.add_middleware(AuthGate, secret=settings.hub.token)

    for path in STREAMABLE_HTTP_PATHS:
        app.add_route(path, streamable_http, include_in_schema=False)
    app.add_route(SSE_PATH, sse, methods=["GET"], include_in_schema=False)
    app.mount(SSE_MESSAGE_PATH, sse.transport.handle_post_message)

    @app.get("/health", tags=["System"])
    async def health_check():
        """Health check endpoint."""
        registry = cache.get_or_build()
        return {
            "status": "healthy",
            "version": SERVER_VERSION,
            "tools": registry.tool_names(),
        }

    return app


app = create_app()


def main():
    """Run the ToolHub gateway."""
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "hub.main:app",
        host=settings.hub.host,
        port=settings.hub.port,
        reload=settings.environment == "development"
    )


if __name__ == "__main__":
    main()
