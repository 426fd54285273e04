"""Loguru configuration for the API process.

Every record is emitted as one JSON object per line (or a readable console
line in development) carrying the service metadata, the active trace ids and
whatever keyword context the caller passed, e.g.
``logger.info("Dashboard submission saved", entity="branch")``.
"""

from __future__ import annotations

import json
import logging
import sys
from typing import Any, Callable, Dict

from loguru import logger
from opentelemetry import trace


# Attributes every LogRecord carries; anything else came from ``extra=``.
_STDLIB_RECORD_FIELDS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {
    "message",
    "asctime",
    "taskName",
}

_NOISY_LOGGERS = ("uvicorn.access", "aiosqlite", "multipart")

_CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss.SSS}</green> | <level>{level: <8}</level> | "
    "<cyan>{name}</cyan> | {message} | {extra}"
)


class InterceptHandler(logging.Handler):
    """Forward uvicorn, SQLAlchemy and Alembic records to Loguru."""

    def emit(self, record: logging.LogRecord) -> None:  # pragma: no cover - bridging glue
        try:
            level: str | int = logger.level(record.levelname).name
        except ValueError:
            level = record.levelno

        try:
            message = record.getMessage()
        except (TypeError, ValueError):  # pragma: no cover - malformed format strings
            message = str(record.msg)

        context = {key: value for key, value in vars(record).items() if key not in _STDLIB_RECORD_FIELDS}
        # Loguru formats the message again; literal braces must survive.
        message = message.replace("{", "{{").replace("}", "}}")
        logger.bind(**context).opt(depth=6, exception=record.exc_info).log(level, message)


def _trace_context() -> Dict[str, str]:
    span_context = trace.get_current_span().get_span_context()
    if not span_context.is_valid:
        return {}
    return {
        "trace_id": f"{span_context.trace_id:032x}",
        "span_id": f"{span_context.span_id:016x}",
    }


def _json_sink(metadata: Dict[str, str]) -> Callable[[Any], None]:
    def sink(message: Any) -> None:
        record = message.record
        payload: Dict[str, Any] = {
            "timestamp": record["time"].isoformat(),
            "level": record["level"].name.lower(),
            "message": record["message"],
            "logger": record["name"],
            **metadata,
            **_trace_context(),
            **record["extra"],
        }
        exception = record["exception"]
        if exception is not None and exception.type is not None:
            payload["exception"] = f"{exception.type.__name__}: {exception.value}"
        sys.stdout.write(json.dumps(payload, default=str) + "\n")

    return sink


def configure_logging(
    *,
    service_name: str,
    environment: str,
    version: str,
    level: str = "INFO",
    json_output: bool = True,
) -> None:
    """Replace Loguru's default sink and route stdlib logging through it."""

    logger.remove()
    if json_output:
        metadata = {"service": service_name, "environment": environment, "version": version}
        logger.add(_json_sink(metadata), level=level, backtrace=False, diagnose=False)
    else:
        logger.add(sys.stderr, level=level, format=_CONSOLE_FORMAT, colorize=True)

    logging.basicConfig(handlers=[InterceptHandler()], level=0, force=True)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


__all__ = ["InterceptHandler", "configure_logging"]
