"""Structured logging setup for the ToolHub gateway.

Uses structlog for consistent, machine-parseable log output. Credentials
pass through this process on every request (the hub secret, the TTS token,
the image key), so every log line is scrubbed before it is rendered.
"""

import logging
import re
import sys
from typing import Any, ContextManager

import structlog
from structlog.types import EventDict, Processor, WrappedLogger

REDACTED = "***"

SENSITIVE_KEYS = frozenset({
    "token",
    "key",
    "secret",
    "password",
    "authorization",
    "x-api-token",
})

_QUERY_CREDENTIAL = re.compile(r"([?&](?:token|key)=)[^&\s]*", re.IGNORECASE)


def _redact(value: Any) -> Any:
    if isinstance(value, dict):
        return {
            k: REDACTED if str(k).lower() in SENSITIVE_KEYS else _redact(v)
            for k, v in value.items()
        }
    return value


def redact_secrets(logger: WrappedLogger, method_name: str, event_dict: EventDict) -> EventDict:
    """Mask credential values in the event, including nested mappings such as headers."""
    return _redact(event_dict)


class QueryCredentialFilter(logging.Filter):
    """Mask ``token``/``key`` query values in request lines logged by uvicorn."""

    def filter(self, record: logging.LogRecord) -> bool:
        if isinstance(record.args, tuple):
            record.args = tuple(
                _QUERY_CREDENTIAL.sub(rf"\g<1>{REDACTED}", arg) if isinstance(arg, str) else arg
                for arg in record.args
            )
        return True


_query_credential_filter = QueryCredentialFilter()


def setup_logging(log_level: str = "INFO", json_output: bool = False) -> None:
    """
    Configure structured logging for the application.

    Args:
        log_level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        json_output: If True, output JSON; otherwise, use colored console output
    """
    level = getattr(logging, log_level.upper(), logging.INFO)

    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        redact_secrets,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if json_output:
        processors: list[Processor] = [
            *shared_processors,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]
    else:
        processors = [
            *shared_processors,
            structlog.dev.ConsoleRenderer(colors=True),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # uvicorn and httpx log through the standard library
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=level,
    )
    logging.getLogger("uvicorn.access").addFilter(_query_credential_filter)


def get_logger(name: str | None = None) -> structlog.BoundLogger:
    """Get a logger, typically named after the calling module."""
    return structlog.get_logger(name)


def bind_request_context(**context: Any) -> None:
    """Bind request-scoped values (method, path) to every log line of the request."""
    structlog.contextvars.bind_contextvars(**context)


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()


def tool_context(tool_name: str) -> ContextManager[None]:
    """Bind the tool name to every log line emitted while one tool call runs."""
    return structlog.contextvars.bound_contextvars(tool=tool_name)
