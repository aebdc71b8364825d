"""Base class for downstream proxy tools.

Every proxy:
- Validated arguments in, exactly one outbound HTTP call, one result out
- Places its own credential the way its downstream expects
- Never retries and never returns a partial result
- Reports any downstream failure as a DownstreamError
"""

from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx

from shared.logging import get_logger
from shared.models import ContentBlock, ToolDefinition

logger = get_logger(__name__)


class DownstreamError(Exception):
    """A downstream service failed; the message is its response body or transport error."""

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    def __str__(self) -> str:
        return self.message


class ProxyTool(ABC):
    """
    Base class for a tool that forwards to one downstream HTTP service.

    The HTTP client is shared between proxies and owned by the registry,
    which closes it on shutdown.
    """

    name: str = ""
    description: str = ""

    def __init__(self, endpoint: str, client: httpx.AsyncClient) -> None:
        self.endpoint = endpoint
        self._client = client

    @property
    @abstractmethod
    def input_schema(self) -> dict[str, Any]:
        """Return the JSON Schema for this tool's arguments."""
        pass

    @abstractmethod
    async def handle(self, arguments: dict[str, Any]) -> list[ContentBlock]:
        """
        Execute the tool against its downstream.

        Args:
            arguments: Validated arguments

        Returns:
            Content blocks for the tool result

        Raises:
            DownstreamError: If the downstream call fails
        """
        pass

    def definition(self) -> ToolDefinition:
        """Build the registry entry for this tool."""
        return ToolDefinition(
            name=self.name,
            description=self.description,
            input_schema=self.input_schema,
            handler=self.handle,
        )

    async def _send(
        self,
        method: str,
        params: Optional[dict[str, str]] = None,
        **kwargs: Any
    ) -> httpx.Response:
        """
        Issue exactly one request to the endpoint.

        ``params`` are merged into the endpoint's own query string, so a
        pre-authenticated endpoint URL keeps its parameters.

        Raises:
            DownstreamError: On a malformed endpoint, a transport error or a non-2xx status
        """
        try:
            url = httpx.URL(self.endpoint)
            if params:
                url = url.copy_merge_params(params)
            response = await self._client.request(method, url, **kwargs)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            logger.warning("Downstream unreachable", error=type(e).__name__)
            raise DownstreamError(str(e) or type(e).__name__) from e

        if not response.is_success:
            logger.warning(
                "Downstream returned error status",
                status_code=response.status_code
            )
            raise DownstreamError(response.text, status_code=response.status_code)

        return response

    def _json_field(self, response: httpx.Response, field: str) -> Any:
        """Extract one field from a JSON response body."""
        try:
            payload = response.json()
        except ValueError as e:
            raise DownstreamError(f"Downstream returned invalid JSON: {response.text}") from e

        if not isinstance(payload, dict) or field not in payload:
            raise DownstreamError(f"Downstream response is missing '{field}'")
        return payload[field]
