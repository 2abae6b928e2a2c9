"""
dao.logging — structlog setup for the governance handlers.

Every module logs through ``get_logger(__name__)`` and emits event names rather than
sentences (``tally_applied``, ``tally_rejected``, ``global_msg_due`` ...). Fields bound
with `bind_tx_context` (tx id, tx type) ride along on every event until cleared.

Call `setup_logging` once per process (the CLI does it in its callback). Before that,
structlog's own defaults apply.

    LOG_LEVEL   DEBUG | INFO | WARNING | ERROR     (default INFO)
    LOG_FORMAT  json | console                     (default json)
"""

from __future__ import annotations

import logging
import os
from typing import Any, Callable, Dict, List, Optional, Union

import structlog
from structlog.contextvars import merge_contextvars
from structlog.processors import JSONRenderer

SERVICE_NAME = "dao"

EventDict = Dict[str, Any]


def _service_tagger(service_name: str) -> Callable[[Any, str, EventDict], EventDict]:
    def tag(_logger: Any, _method: str, event: EventDict) -> EventDict:
        event.setdefault("service", service_name)
        return event

    return tag


def _renderer(log_format: str) -> Callable[[Any, str, EventDict], Any]:
    if log_format == "console":
        return structlog.dev.ConsoleRenderer(colors=False)
    return JSONRenderer(sort_keys=True, default=str)


def setup_logging(
    *,
    service_name: str = SERVICE_NAME,
    level: Optional[Union[str, int]] = None,
    log_format: Optional[str] = None,
) -> None:
    """
    Route structlog through a single stderr handler on the root stdlib logger.

    `level` and `log_format` fall back to $LOG_LEVEL / $LOG_FORMAT, then INFO / json.
    Existing root handlers are replaced, so calling this again reconfigures cleanly.
    """
    level = level or os.getenv("LOG_LEVEL", "").upper() or "INFO"
    fmt = (log_format or os.getenv("LOG_FORMAT") or "json").lower()

    chain: List[Any] = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        merge_contextvars,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _service_tagger(service_name),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        _renderer(fmt),
    ]
    structlog.configure(
        processors=chain,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))
    root = logging.getLogger()
    for old in root.handlers[:]:
        root.removeHandler(old)
    root.addHandler(handler)
    root.setLevel(level)


def get_logger(name: Optional[str] = None) -> Any:
    """
    Logger named `name`. Binding is lazy: a module-level logger picks up whatever
    `setup_logging` configured after the module was imported.
    """
    return structlog.get_logger(name) if name else structlog.get_logger()


def bind_tx_context(**fields: Any) -> None:
    """Attach `fields` to every event logged from this context (tx_id, tx_type, ...)."""
    structlog.contextvars.bind_contextvars(**fields)


def clear_tx_context(*keys: str) -> None:
    """Drop the named context fields; with no names, drop them all."""
    if not keys:
        structlog.contextvars.clear_contextvars()
        return
    structlog.contextvars.unbind_contextvars(*keys)


__all__ = [
    "SERVICE_NAME",
    "setup_logging",
    "get_logger",
    "bind_tx_context",
    "clear_tx_context",
]
