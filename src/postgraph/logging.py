"""
Logging setup: structlog over stdlib logging, with per-request context.

Every log line emitted while a request is handled carries its ``request_id``
and, for GraphQL requests, the ``graphql_operation`` being executed. Both are
bound in context variables by the HTTP middleware, so resolvers and the
database layer never pass them around explicitly.
"""

import logging
import secrets
import sys

import structlog
from structlog.contextvars import bind_contextvars, get_contextvars, unbind_contextvars

from .config import settings

REQUEST_CONTEXT_KEYS = ("request_id", "graphql_operation")


def _resolve_level(level: str | None) -> int:
    name = (level or settings.log_level).upper()
    return logging.getLevelNamesMapping().get(name, logging.INFO)


def configure_logging(debug: bool = False, level: str | None = None) -> None:
    """Configure structlog and the root stdlib logger.

    Args:
        debug: Render human-readable console output instead of JSON lines.
        level: Level name such as ``"info"``; defaults to ``settings.log_level``.
    """
    logging.basicConfig(
        level=_resolve_level(level),
        stream=sys.stdout,
        format="%(message)s",
        force=True,
    )

    processors = [
        structlog.stdlib.filter_by_level,
        # request_id / graphql_operation bound by the middleware
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="ISO", utc=True),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if debug:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors.append(structlog.processors.JSONRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.BoundLogger:
    return structlog.get_logger(name)


def generate_request_id() -> str:
    return secrets.token_hex(8)


def bind_request_context(request_id: str | None = None) -> str:
    """Start a request's log context, generating an id when none is given."""
    clear_request_context()
    request_id = request_id or generate_request_id()
    bind_contextvars(request_id=request_id)
    return request_id


def bind_operation(operation: str | None) -> None:
    """Tag the rest of the request's log lines with its GraphQL operation."""
    if operation:
        bind_contextvars(graphql_operation=operation)


def clear_request_context() -> None:
    unbind_contextvars(*REQUEST_CONTEXT_KEYS)


def get_request_id() -> str | None:
    return get_contextvars().get("request_id")


def get_operation() -> str | None:
    return get_contextvars().get("graphql_operation")
