"""
Log output for trend-search.

Two output shapes are supported: one JSON object per line for log shippers,
and a human-readable line for local runs. Both append the fields bound with
``log_context`` so that every line written during an update run can be
traced back to its ``run_id``.
"""

import json
import logging
import sys
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Iterator, List, Optional


log_context_var: ContextVar[Dict[str, Any]] = ContextVar("log_context", default={})

PLAIN_FORMAT = "[%(asctime)s] %(levelname)s [%(name)s:%(lineno)s] %(message)s"
PLAIN_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Third-party loggers that only matter at WARNING and above
QUIET_LOGGERS = ("asyncio", "apscheduler", "aiohttp.access")


def get_log_context() -> Dict[str, Any]:
    """Return a copy of the fields bound in the current context."""
    return dict(log_context_var.get())


@contextmanager
def log_context(**fields: Any) -> Iterator[Dict[str, Any]]:
    """
    Bind ``fields`` to every log line written inside the block.

    Blocks nest; inner fields are layered over the outer ones and the outer
    set is restored on exit::

        with log_context(run_id="a1b2c3"):
            logger.info("Collecting")
    """
    merged = {**log_context_var.get(), **fields}
    token = log_context_var.set(merged)
    try:
        yield merged
    finally:
        log_context_var.reset(token)


class JSONFormatter(logging.Formatter):
    """One JSON object per record.

    Keys: timestamp, level, logger, message, module, function, line; plus
    ``context`` when fields are bound and ``exception`` when the record
    carries exc_info.
    """

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        context = log_context_var.get()
        if context:
            payload["context"] = context

        if record.exc_info:
            exc_type, exc_value, _ = record.exc_info
            payload["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc_value),
                "traceback": self.formatException(record.exc_info),
            }

        return json.dumps(payload, default=str)


class ContextFormatter(logging.Formatter):
    """Plain-text formatter; bound fields are appended as ``[key=value ...]``."""

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = log_context_var.get()
        if not context:
            return line
        fields = " ".join(f"{key}={value}" for key, value in context.items())
        return f"{line} [{fields}]"


def _build_handlers(log_file: Optional[str]) -> List[logging.Handler]:
    handlers: List[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file))
    return handlers


def setup_logging(
    level: str = "INFO",
    log_file: Optional[str] = None,
    json_format: bool = False,
) -> None:
    """
    Install stdout (and optionally file) handlers on the root logger.

    Any handlers already on the root logger are replaced, so calling this
    twice does not duplicate output. Unknown level names fall back to INFO.
    """
    log_level = getattr(logging, level.upper(), logging.INFO)

    if json_format:
        formatter: logging.Formatter = JSONFormatter()
    else:
        formatter = ContextFormatter(PLAIN_FORMAT, datefmt=PLAIN_DATE_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    root_logger.handlers = []
    for handler in _build_handlers(log_file):
        handler.setLevel(log_level)
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    logging.info(f"Logging configured: level={level}, json={json_format}, file={log_file}")
