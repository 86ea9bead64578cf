"""
gatekeeper_driver.observability.logging

Structured logging configuration for the driver.

Responsibilities:
- Configure `structlog` for JSON logs on stdout, plus an optional log file with
  its own threshold.
- Provide a small wrapper for obtaining bound loggers.
"""

from __future__ import annotations

import logging
import sys
from typing import Any

import structlog

# "OFF" silences a handler entirely; "FATAL"/"WARN" are accepted aliases.
_OFF = logging.CRITICAL + 10


def configure_logging(
    *,
    service_name: str,
    level: str,
    log_file: str | None = None,
    file_level: str = "INFO",
) -> None:
    """
    Structured JSON logs; called by applications (e.g. the CLI), never by the library itself.
    """

    console = logging.StreamHandler(sys.stdout)
    console.setLevel(_to_level(level))
    handlers: list[logging.Handler] = [console]

    if log_file:
        file_handler = logging.FileHandler(log_file, mode="a", encoding="utf-8")
        file_handler.setLevel(_to_level(file_level))
        handlers.append(file_handler)

    logging.basicConfig(
        format="%(message)s",
        handlers=handlers,
        level=min(h.level for h in handlers),
        force=True,
    )

    # structlog processors run on each log event; keep this list focused and stable.
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            _add_service_name(service_name),
            structlog.processors.dict_tracebacks,
            structlog.processors.JSONRenderer(),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def _to_level(name: str) -> int:
    name = name.strip().upper()
    if name == "OFF":
        return _OFF
    return logging.getLevelNamesMapping().get(name, logging.INFO)


def _add_service_name(service_name: str):
    # Adds a stable "service" field so driver logs can be told apart inside a host application.
    def processor(_: Any, __: str, event_dict: dict[str, Any]) -> dict[str, Any]:
        event_dict.setdefault("service", service_name)
        return event_dict

    return processor


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


# --- Module Notes -----------------------------------------------------------
# Per-operation metadata (operation name, attempt) is bound via contextvars in
# `client.resilient`, so every line emitted during a retry cycle carries it.
