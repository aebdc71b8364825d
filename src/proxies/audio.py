"""Text-to-speech proxy.

Forwards to a TTS worker that answers with a hosted audio URL. The worker
expects its shared secret as the ``token`` query parameter.
"""

from typing import Any, Optional

import httpx

from shared.models import AudioContent, ContentBlock, TextContent
from shared.schema import create_tool_schema
from proxies.base import ProxyTool

DEFAULT_MODEL_ID = "eleven_turbo_v2"
AUDIO_MIME_TYPE = "audio/mpeg"


class AudioProxy(ProxyTool):
    """generate_audio: text in, audio URL out."""

    name = "generate_audio"
    description = "Convert text to speech and return a link to the generated audio."

    def __init__(
        self,
        endpoint: str,
        client: httpx.AsyncClient,
        token: Optional[str] = None
    ) -> None:
        super().__init__(endpoint, client)
        self.token = token

    @property
    def input_schema(self) -> dict[str, Any]:
        return create_tool_schema([
            {
                "name": "text",
                "type": "string",
                "description": "Text to speak",
                "min_length": 1,
                "max_length": 5000,
            },
            {
                "name": "voiceId",
                "type": "string",
                "description": "Voice identifier",
            },
            {
                "name": "modelId",
                "type": "string",
                "description": "Speech model identifier",
                "default": DEFAULT_MODEL_ID,
            },
        ])

    async def handle(self, arguments: dict[str, Any]) -> list[ContentBlock]:
        response = await self._send(
            "POST",
            params={"token": self.token or ""},
            json={
                "text": arguments["text"],
                "voiceId": arguments["voiceId"],
                "modelId": arguments["modelId"],
            },
        )
        audio_url = self._json_field(response, "audioUrl")

        return [
            TextContent(text="Audio created successfully."),
            AudioContent(url=audio_url, mime_type=AUDIO_MIME_TYPE),
        ]
