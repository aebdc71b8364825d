"""Translation proxy.

The translator takes the raw text as the request body and the target
language as the ``lang`` query parameter, and answers with plain text.
"""

from typing import Any

from shared.models import ContentBlock, TextContent
from shared.schema import create_tool_schema
from proxies.base import ProxyTool


class TranslateProxy(ProxyTool):
    name = "translate_text"
    description = "Translate text into the language given by a two-letter code."

    @property
    def input_schema(self) -> dict[str, Any]:
        return create_tool_schema([
            {
                "name": "text",
                "type": "string",
                "description": "Text to translate",
                "min_length": 1,
                "max_length": 10000,
            },
            {
                "name": "targetLang",
                "type": "string",
                "description": "Two-letter target language code, e.g. 'fr'",
                "length": 2,
            },
        ])

    async def handle(self, arguments: dict[str, Any]) -> list[ContentBlock]:
        response = await self._send(
            "POST",
            params={"lang": arguments["targetLang"]},
            content=arguments["text"].encode("utf-8"),
            headers={"Content-Type": "text/plain; charset=utf-8"},
        )
        return [TextContent(text=response.text)]
