#  Place Search - Logging Configuration
#
#  Configures structured logging with JSON or text format.
#  Provides context variables for request_id and client_id propagation,
#  and emits per-search mode, cache status and result count when passed as extras.
#
#  Depends on: (none)
#  Used by:    run.py, app.py, routes/search.py

import contextvars
import json
import logging
import sys
import time

# Context variables for request/client tracing
request_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar("request_id", default=None)
client_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar("client_id", default=None)

# Search context passed per call via logger.info(..., extra={...})
_EXTRA_FIELDS = ("mode", "cache", "results")


def set_request_id(rid: str | None):
    request_id_var.set(rid)


def set_client_id(cid: str | None):
    client_id_var.set(cid)


class JSONFormatter(logging.Formatter):
    """Emit log records as single-line JSON with context variables."""

    converter = time.gmtime

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": self.formatTime(record, "%Y-%m-%dT%H:%M:%S") + f".{int(record.msecs):03d}Z",
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        rid = request_id_var.get(None)
        if rid:
            entry["request_id"] = rid
        cid = client_id_var.get(None)
        if cid:
            entry["client_id"] = cid
        for field in _EXTRA_FIELDS:
            val = getattr(record, field, None)
            if val is not None:
                entry[field] = val
        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


_TEXT_FORMAT = "%(asctime)s [%(name)s] %(levelname)s: %(message)s"


def setup_logging(level: str = "INFO", fmt: str = "json"):
    """Configure structured logging for the search service.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
        fmt: Log format, "json" for structured output or "text" for human-readable.
    """
    root = logging.getLogger("placesearch")
    root.setLevel(getattr(logging, level.upper(), logging.INFO))

    if not root.handlers:
        handler = logging.StreamHandler(sys.stdout)
        if fmt == "json":
            handler.setFormatter(JSONFormatter())
        else:
            handler.setFormatter(logging.Formatter(_TEXT_FORMAT, datefmt="%H:%M:%S"))
        root.addHandler(handler)

    # Quiet noisy libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
