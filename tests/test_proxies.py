"""Tests for the downstream proxy tools."""

import json

import httpx
import pytest

from shared.models import AudioContent, ImageContent, TextContent
from proxies import AudioProxy, DownstreamError, ImageProxy, TranslateProxy, create_proxies

from tests.conftest import IMAGE_ENDPOINT, TRANSLATE_ENDPOINT, TTS_ENDPOINT


class TestAudioProxy:
    """Tests for generate_audio."""

    @pytest.mark.asyncio
    async def test_posts_json_with_token_query(self, downstream, http_client):
        downstream.respond(
            "tts.example.com",
            httpx.Response(200, json={"audioUrl": "https://x/a.mp3"})
        )
        proxy = AudioProxy(TTS_ENDPOINT, token="tts-token", client=http_client)

        await proxy.handle({"text": "hello", "voiceId": "v1", "modelId": "m1"})

        request = downstream.requests[0]
        assert request.method == "POST"
        assert request.url.path == "/speak/"
        assert request.url.params["token"] == "tts-token"
        assert json.loads(request.content) == {"text": "hello", "voiceId": "v1", "modelId": "m1"}

    @pytest.mark.asyncio
    async def test_success_returns_text_then_audio(self, downstream, http_client):
        downstream.respond(
            "tts.example.com",
            httpx.Response(200, json={"audioUrl": "https://x/a.mp3"})
        )
        proxy = AudioProxy(TTS_ENDPOINT, token="tts-token", client=http_client)

        blocks = await proxy.handle({"text": "hello", "voiceId": "v1", "modelId": "m1"})

        assert blocks == [
            TextContent(text="Audio created successfully."),
            AudioContent(url="https://x/a.mp3", mime_type="audio/mpeg"),
        ]

    @pytest.mark.asyncio
    async def test_error_status_carries_body(self, downstream, http_client):
        downstream.respond("tts.example.com", httpx.Response(500, text="boom"))
        proxy = AudioProxy(TTS_ENDPOINT, token="tts-token", client=http_client)

        with pytest.raises(DownstreamError) as exc_info:
            await proxy.handle({"text": "hello", "voiceId": "v1", "modelId": "m1"})

        assert str(exc_info.value) == "boom"
        assert exc_info.value.status_code == 500

    @pytest.mark.asyncio
    async def test_missing_audio_url(self, downstream, http_client):
        downstream.respond("tts.example.com", httpx.Response(200, json={"other": 1}))
        proxy = AudioProxy(TTS_ENDPOINT, token="tts-token", client=http_client)

        with pytest.raises(DownstreamError, match="audioUrl"):
            await proxy.handle({"text": "hello", "voiceId": "v1", "modelId": "m1"})

    @pytest.mark.asyncio
    async def test_endpoint_query_is_preserved(self, downstream, http_client):
        downstream.respond(
            "tts.example.com",
            httpx.Response(200, json={"audioUrl": "https://x/a.mp3"})
        )
        proxy = AudioProxy(f"{TTS_ENDPOINT}?region=eu", token="t", client=http_client)

        await proxy.handle({"text": "hello", "voiceId": "v1", "modelId": "m1"})

        params = downstream.requests[0].url.params
        assert params["region"] == "eu"
        assert params["token"] == "t"


class TestImageProxy:
    """Tests for generate_image."""

    @pytest.mark.asyncio
    async def test_posts_with_bearer_key(self, downstream, http_client):
        downstream.respond("images.example.com", httpx.Response(200, json={"url": "https://x/i.png"}))
        proxy = ImageProxy(IMAGE_ENDPOINT, key="image-key", client=http_client)

        blocks = await proxy.handle({"prompt": "a cat", "steps": 30})

        request = downstream.requests[0]
        assert request.headers["Authorization"] == "Bearer image-key"
        assert json.loads(request.content) == {"prompt": "a cat", "steps": 30}
        assert "token" not in request.url.params
        assert blocks == [ImageContent(url="https://x/i.png")]

    @pytest.mark.asyncio
    async def test_invalid_json(self, downstream, http_client):
        downstream.respond("images.example.com", httpx.Response(200, text="not json"))
        proxy = ImageProxy(IMAGE_ENDPOINT, key="image-key", client=http_client)

        with pytest.raises(DownstreamError, match="invalid JSON") as exc_info:
            await proxy.handle({"prompt": "a cat", "steps": 30})

        assert isinstance(exc_info.value.__cause__, ValueError)

    @pytest.mark.asyncio
    async def test_error_status(self, downstream, http_client):
        downstream.respond("images.example.com", httpx.Response(403, text="bad key"))
        proxy = ImageProxy(IMAGE_ENDPOINT, key="wrong", client=http_client)

        with pytest.raises(DownstreamError, match="bad key"):
            await proxy.handle({"prompt": "a cat", "steps": 30})


class TestTranslateProxy:
    """Tests for translate_text."""

    @pytest.mark.asyncio
    async def test_posts_raw_text_with_lang_query(self, downstream, http_client):
        downstream.respond("translate.example.com", httpx.Response(200, text="bonjour"))
        proxy = TranslateProxy(TRANSLATE_ENDPOINT, client=http_client)

        blocks = await proxy.handle({"text": "hello", "targetLang": "fr"})

        request = downstream.requests[0]
        assert request.url.params["lang"] == "fr"
        assert request.content == b"hello"
        assert "Authorization" not in request.headers
        assert blocks == [TextContent(text="bonjour")]

    @pytest.mark.asyncio
    async def test_network_error(self, downstream, http_client):
        downstream.fail("translate.example.com", httpx.ConnectError("connection refused"))
        proxy = TranslateProxy(TRANSLATE_ENDPOINT, client=http_client)

        with pytest.raises(DownstreamError, match="connection refused"):
            await proxy.handle({"text": "hello", "targetLang": "fr"})

    @pytest.mark.asyncio
    async def test_endpoint_query_is_preserved(self, downstream, http_client):
        downstream.respond("translate.example.com", httpx.Response(200, text="bonjour"))
        proxy = TranslateProxy(f"{TRANSLATE_ENDPOINT}?key=SECRET", client=http_client)

        await proxy.handle({"text": "hello", "targetLang": "fr"})

        params = downstream.requests[0].url.params
        assert params["key"] == "SECRET"
        assert params["lang"] == "fr"

    @pytest.mark.asyncio
    async def test_malformed_endpoint(self, downstream, http_client):
        proxy = TranslateProxy("https://translate.example.com:notaport/", client=http_client)

        with pytest.raises(DownstreamError):
            await proxy.handle({"text": "hello", "targetLang": "fr"})

        assert downstream.requests == []

    @pytest.mark.asyncio
    async def test_unconfigured_endpoint_fails(self, http_client):
        proxy = TranslateProxy("", client=http_client)

        with pytest.raises(DownstreamError):
            await proxy.handle({"text": "hello", "targetLang": "fr"})


class TestCreateProxies:
    """Tests for the fixed catalog."""

    def test_catalog_names(self, settings, http_client):
        proxies = create_proxies(settings, http_client)

        assert [p.name for p in proxies] == ["generate_audio", "generate_image", "translate_text"]

    def test_definitions_carry_schemas(self, settings, http_client):
        definitions = {p.name: p.definition() for p in create_proxies(settings, http_client)}

        audio = definitions["generate_audio"].input_schema
        assert audio["required"] == ["text", "voiceId"]
        assert audio["properties"]["modelId"]["default"] == "eleven_turbo_v2"
        assert audio["properties"]["text"]["maxLength"] == 5000

        image = definitions["generate_image"].input_schema
        assert image["properties"]["steps"]["maximum"] == 100

        translate = definitions["translate_text"].input_schema
        assert translate["required"] == ["text", "targetLang"]
