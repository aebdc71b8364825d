"""MCP transports for the ToolHub gateway.

The MCP SDK's low-level server speaks the protocol. This module plugs the
lazily built registry and the dispatcher into it and exposes the two HTTP
transports the SDK ships: streamable HTTP and SSE.

Tool failures never surface as protocol errors. The dispatcher turns them
into results with ``isError`` set; this module only translates content.
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Optional

from mcp import types
from mcp.server.lowlevel import Server
from mcp.server.sse import SseServerTransport
from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from starlette.types import Receive, Scope, Send

from shared.logging import get_logger
from shared.models import ContentBlock, TextContent, ToolResult
from hub.registry import RegistryCache
from hub.router import ToolDispatcher

logger = get_logger(__name__)

SERVER_NAME = "ToolHub"
SERVER_VERSION = "1.0.0"

SSE_MESSAGE_PATH = "/messages/"


def to_mcp_content(block: ContentBlock) -> types.ContentBlock:
    """Audio and image blocks reference hosted files, so they become resource links."""
    if isinstance(block, TextContent):
        return types.TextContent(type="text", text=block.text)
    return types.ResourceLink(
        type="resource_link",
        uri=block.url,
        name=block.type,
        mimeType=block.mime_type,
    )


def to_call_tool_result(result: ToolResult) -> types.CallToolResult:
    """
    Render a dispatcher result for the protocol.

    The gateway's own blocks are kept verbatim as structured content, so a
    client can read the audio/image URLs in the shape the tools produce them.
    """
    return types.CallToolResult(
        content=[to_mcp_content(block) for block in result.content],
        structuredContent={"content": result.to_protocol()["content"]},
        isError=result.is_error,
    )


def build_server(cache: RegistryCache) -> Server:
    """
    Create the protocol server for a registry cache.

    Neither handler touches the registry until a client asks for it, so the
    registry is still built on the first request that needs it. Input
    validation is left to the dispatcher, which applies defaults first.
    """
    server: Server = Server(SERVER_NAME, version=SERVER_VERSION)

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return [types.Tool.model_validate(entry) for entry in cache.get_or_build().catalog()]

    @server.call_tool(validate_input=False)
    async def call_tool(name: str, arguments: dict[str, Any]) -> types.CallToolResult:
        result = await ToolDispatcher(cache.get_or_build()).call_tool(name, arguments)
        return to_call_tool_result(result)

    return server


class StreamableHTTPEndpoint:
    """
    ASGI endpoint for the streamable HTTP transport.

    Sessions are stateless: every POST carries a complete exchange. A session
    manager can only run once, so a fresh one is started for each
    application lifespan.
    """

    def __init__(self, server: Server, json_response: bool = True) -> None:
        self.server = server
        self.json_response = json_response
        self._session_manager: Optional[StreamableHTTPSessionManager] = None

    @asynccontextmanager
    async def run(self) -> AsyncIterator[None]:
        session_manager = StreamableHTTPSessionManager(
            app=self.server,
            json_response=self.json_response,
            stateless=True,
        )
        async with session_manager.run():
            self._session_manager = session_manager
            logger.info("Streamable HTTP transport started", json_response=self.json_response)
            try:
                yield
            finally:
                self._session_manager = None

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if self._session_manager is None:
            raise RuntimeError("Streamable HTTP transport is not running")
        await self._session_manager.handle_request(scope, receive, send)


class SSEEndpoint:
    """
    ASGI endpoint for the SSE transport.

    Each GET opens one event stream; the client posts its messages to
    ``message_path`` with the session id the stream announces.
    """

    def __init__(self, server: Server, message_path: str = SSE_MESSAGE_PATH) -> None:
        self.server = server
        self.transport = SseServerTransport(message_path)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        async with self.transport.connect_sse(scope, receive, send) as (read_stream, write_stream):
            await self.server.run(
                read_stream,
                write_stream,
                self.server.create_initialization_options()
            )
