"""JSON logging for brokerhub.

Every controller call runs under a trace id (see ``set_trace_id``) which the
formatter stamps on each record, so one create/update/delete/poll can be
followed across controller, backend and store log lines.
"""

import logging
import sys
import time
from collections import defaultdict, deque
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any
from uuid import uuid4

from pythonjsonlogger.json import JsonFormatter

from brokerhub.app.config import get_settings

trace_id_ctx: ContextVar[str | None] = ContextVar("trace_id", default=None)


def get_trace_id() -> str | None:
    return trace_id_ctx.get()


def set_trace_id(trace_id: str | None = None) -> str:
    """Bind ``trace_id`` (or a fresh uuid4) to the current context."""
    tid = trace_id or str(uuid4())
    trace_id_ctx.set(tid)
    return tid


def clear_trace_context() -> None:
    trace_id_ctx.set(None)


class RateLimitFilter(logging.Filter):
    """Drop repeats from one log call site beyond ``rate_per_minute``.

    The first dropped record passes once, tagged ``[RATE LIMITED]``, so the
    suppression itself is visible. ERROR and above always pass.
    """

    def __init__(self, rate_per_minute: int = 100) -> None:
        super().__init__()
        self.rate_per_minute = rate_per_minute
        self._window: dict[tuple[str, int], deque[float]] = defaultdict(deque)
        self._marked: set[tuple[str, int]] = set()

    def filter(self, record: logging.LogRecord) -> bool:
        if record.levelno >= logging.ERROR:
            return True

        site = (record.name, record.lineno)
        now = time.monotonic()
        window = self._window[site]
        while window and now - window[0] >= 60:
            window.popleft()
        if not window:
            self._marked.discard(site)

        if len(window) < self.rate_per_minute:
            window.append(now)
            return True
        if site in self._marked:
            return False

        self._marked.add(site)
        record.msg = f"[RATE LIMITED] {record.msg}"
        return True


class CustomJsonFormatter(JsonFormatter):
    """JsonFormatter adding timestamp, level, logger, schema_version,
    service and (when bound) trace_id to every record."""

    def __init__(self, *args: Any, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        cfg = get_settings().logging
        self._static = {"schema_version": cfg.schema_version, "service": cfg.service_name}

    def add_fields(
        self,
        log_record: dict[str, Any],
        record: logging.LogRecord,
        message_dict: dict[str, Any],
    ) -> None:
        super().add_fields(log_record, record, message_dict)
        log_record.update(
            timestamp=datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            level=record.levelname,
            logger=record.name,
            **self._static,
        )
        if trace_id := get_trace_id():
            log_record["trace_id"] = trace_id
        if record.exc_info:
            log_record["exception"] = self.formatException(record.exc_info)


def setup_logging(level: int | None = None) -> None:
    """Install a single JSON stdout handler on the root logger.

    ``level`` overrides LOGGING_LEVEL.
    """
    cfg = get_settings().logging
    if level is None:
        level = getattr(logging, cfg.level.upper(), logging.INFO)

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(CustomJsonFormatter())
    handler.addFilter(RateLimitFilter(cfg.rate_limit_per_minute))

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    # Provisioner polling noise
    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.WARNING)
