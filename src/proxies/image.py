"""Image generation proxy (Stable Diffusion, DALL-E or a custom service)."""

from typing import Any, Optional

import httpx

from shared.models import ContentBlock, ImageContent
from shared.schema import create_tool_schema
from proxies.base import ProxyTool

DEFAULT_STEPS = 30


class ImageProxy(ProxyTool):
    """generate_image: prompt in, image URL out. Authenticates with a bearer key."""

    name = "generate_image"
    description = "Generate an image from a text prompt and return its URL."

    def __init__(
        self,
        endpoint: str,
        client: httpx.AsyncClient,
        key: Optional[str] = None
    ) -> None:
        super().__init__(endpoint, client)
        self.key = key

    @property
    def input_schema(self) -> dict[str, Any]:
        return create_tool_schema([
            {
                "name": "prompt",
                "type": "string",
                "description": "Image description",
                "min_length": 1,
                "max_length": 800,
            },
            {
                "name": "steps",
                "type": "integer",
                "description": "Number of diffusion steps",
                "minimum": 1,
                "maximum": 100,
                "default": DEFAULT_STEPS,
            },
        ])

    async def handle(self, arguments: dict[str, Any]) -> list[ContentBlock]:
        response = await self._send(
            "POST",
            headers={"Authorization": f"Bearer {self.key or ''}"},
            json={"prompt": arguments["prompt"], "steps": arguments["steps"]},
        )
        return [ImageContent(url=self._json_field(response, "url"))]
