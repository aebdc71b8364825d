"""Shared-secret authentication for the ToolHub gateway.

Handles:
- CORS preflight requests, answered before any credential check
- Credential extraction (``?token=`` query parameter or ``X-Api-Token`` header)
- Rejection of every other request that does not carry the hub secret
"""

import hmac
from typing import Optional

from fastapi import Request, Response, status
from fastapi.responses import JSONResponse
from starlette.types import ASGIApp, Receive, Scope, Send

from shared.logging import bind_request_context, clear_request_context, get_logger

logger = get_logger(__name__)

TOKEN_QUERY_PARAM = "token"
TOKEN_HEADER = "X-Api-Token"

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type, X-Api-Token",
    "Access-Control-Max-Age": "86400",
}

UNAUTHORIZED_BODY = {"success": False, "error": "Unauthorized"}

def extract_token(request: Request) -> Optional[str]:
    """Return the caller's credential; the query parameter wins over the header."""
    if TOKEN_QUERY_PARAM in request.query_params:
        return request.query_params[TOKEN_QUERY_PARAM]
    return request.headers.get(TOKEN_HEADER)


def is_authorized(token: Optional[str], secret: Optional[str]) -> bool:
    """Compare a presented token with the hub secret, byte for byte."""
    if not token or not secret:
        return False
    return hmac.compare_digest(token.encode("utf-8"), secret.encode("utf-8"))


def preflight_response() -> Response:
    return Response(status_code=status.HTTP_204_NO_CONTENT, headers=CORS_HEADERS)


def unauthorized_response() -> JSONResponse:
    return JSONResponse(
        UNAUTHORIZED_BODY,
        status_code=status.HTTP_401_UNAUTHORIZED,
        headers=CORS_HEADERS,
    )


class AuthGate:
    """
    ASGI middleware guarding every route of the gateway.

    Unauthorized requests are answered here and never reach a route, so the
    tool registry is not built for them. Authorized requests are passed
    through untouched, which keeps SSE streams flowing.
    """

    def __init__(self, app: ASGIApp, secret: Optional[str]) -> None:
        self.app = app
        self._secret = secret
        if not secret:
            logger.warning("No hub secret configured; all requests will be rejected")

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope)
        if request.method == "OPTIONS":
            await preflight_response()(scope, receive, send)
            return

        bind_request_context(method=request.method, path=request.url.path)
        try:
            if not is_authorized(extract_token(request), self._secret):
                logger.warning("Unauthorized request rejected")
                await unauthorized_response()(scope, receive, send)
                return

            await self.app(scope, receive, send)
        finally:
            clear_request_context()
