"""
Diagnostic logging for the collector jobs.

Each event is a structlog event with a snake_case name, a level, an ISO 8601
UTC timestamp and the emitting module under "logger". Events go to stderr;
stdout belongs to the per-burn rows and run summaries the jobs print.

    LOG_FORMAT=json     one JSON object per line, name under "event_type" (default)
    LOG_FORMAT=console  key=value lines for local runs, name kept as the lead column
    LOG_LEVEL           DEBUG / INFO / WARNING / ERROR (default INFO)

A job calls bind_run() once it knows its configuration, so the job name and
mint travel with every event of the run, including those emitted by the
ledger, pricing and storage modules.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timezone
from typing import Any, TextIO

import structlog
from structlog._config import BoundLoggerLazyProxy

LOG_FORMATS = ("json", "console")


def _env_level() -> int:
    return getattr(logging, os.getenv("LOG_LEVEL", "INFO").strip().upper(), logging.INFO)


def _env_format() -> str:
    fmt = os.getenv("LOG_FORMAT", "json").strip().lower()
    return fmt if fmt in LOG_FORMATS else "json"


def _utc_timestamp(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    event_dict.setdefault("timestamp", datetime.now(timezone.utc).isoformat())
    return event_dict


def _event_type(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """JSON lines carry the event name as event_type."""
    if "event" in event_dict:
        event_dict.setdefault("event_type", event_dict.pop("event"))
    return event_dict


def build_processors(fmt: str, *, colors: bool = False) -> list[Any]:
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.format_exc_info,
        _utc_timestamp,
    ]
    if fmt == "console":
        # ConsoleRenderer reads the name from "event", so no rename here
        processors.append(structlog.dev.ConsoleRenderer(colors=colors))
    else:
        processors += [_event_type, structlog.processors.JSONRenderer()]
    return processors


def configure_structlog(
    *,
    fmt: str | None = None,
    level: int | None = None,
    stream: TextIO | None = None,
) -> None:
    """
    (Re)configure structlog. Arguments left as None come from LOG_FORMAT,
    LOG_LEVEL and the current sys.stderr. Loggers from get_logger() are lazy
    proxies, so module-level loggers follow a reconfiguration.
    """
    out = stream if stream is not None else sys.stderr
    structlog.configure(
        processors=build_processors(fmt or _env_format(), colors=out.isatty()),
        wrapper_class=structlog.make_filtering_bound_logger(level if level is not None else _env_level()),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=out),
        cache_logger_on_first_use=False,
    )


if not structlog.is_configured():
    configure_structlog()


def get_logger(name: str) -> Any:
    """
    Logger for one module:

        logger = get_logger(__name__)
        logger.warning("rpc_retry", method="getTransaction", attempt=2, delay_sec=2.0)
    """
    return BoundLoggerLazyProxy(None, logger_factory_args=(), initial_values={"logger": name})


def bind_run(job: str, **context: Any) -> None:
    """Replace the run context: every following event carries job=<job> plus `context`."""
    structlog.contextvars.clear_contextvars()
    structlog.contextvars.bind_contextvars(job=job, **context)
