"""
CryptaLearn logging.

All engine modules log under the ``cryptalearn`` namespace. Two output
formats are available:

- JSON lines (``StructuredFormatter``), the default when
  ``CRYPTALEARN_ENVIRONMENT=production``
- a compact coloured line (``DevelopmentFormatter``) otherwise

Values passed through ``extra=`` or ``LogContext`` are scrubbed of Paillier
key material before formatting. Public key fingerprints are the only key
identifiers that should reach a log line.

Usage:
    from cryptalearn.logging import get_logger, configure_logging

    configure_logging(level="DEBUG", json_format=True)

    logger = get_logger(__name__)
    logger.info("Rotated keys", extra={"fingerprint": pk.get_fingerprint()})
"""

import json
import logging
import os
import sys
from contextvars import ContextVar
from datetime import datetime, timezone
from typing import Any, Dict, Optional

ROOT_LOGGER = "cryptalearn"
REDACTED = "[REDACTED]"

# Substrings that mark a field as sensitive
SENSITIVE_PATTERNS = frozenset(
    {
        "password",
        "secret",
        "token",
        "private_key",
        "privatekey",
        "credential",
        "lambda",
        "prime",
    }
)

# Paillier private key fields, matched exactly
SENSITIVE_NAMES = frozenset({"lam", "mu", "p", "q", "sk"})

# Attributes every LogRecord carries; anything else came from ``extra=``
_RECORD_ATTRS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", (), None))) | {"message", "asctime"}

_context: ContextVar[Dict[str, Any]] = ContextVar("cryptalearn_log_context", default={})


def _is_sensitive_key(key: str) -> bool:
    key_lower = key.lower()
    return key_lower in SENSITIVE_NAMES or any(pattern in key_lower for pattern in SENSITIVE_PATTERNS)


def _redact(value: Any) -> Any:
    """Replace sensitive entries in nested dicts and lists."""
    if isinstance(value, dict):
        return {k: REDACTED if _is_sensitive_key(str(k)) else _redact(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_redact(item) for item in value]
    return value


def _record_extra(record: logging.LogRecord) -> Dict[str, Any]:
    """Collect ``extra=`` fields and the active LogContext, redacted."""
    extra = {k: v for k, v in record.__dict__.items() if k not in _RECORD_ATTRS}
    context = LogContext.get_current()
    if context:
        extra.setdefault("context", context)
    return _redact(extra)


class StructuredFormatter(logging.Formatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry: Dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": {
                "file": os.path.basename(record.pathname),
                "line": record.lineno,
                "function": record.funcName,
            },
        }

        extra = _record_extra(record)
        if extra:
            entry["extra"] = extra
        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)


class DevelopmentFormatter(logging.Formatter):
    """``HH:MM:SS.mmm LEVEL module [request] message`` for terminals."""

    COLORS = {
        "DEBUG": "\033[36m",
        "INFO": "\033[32m",
        "WARNING": "\033[33m",
        "ERROR": "\033[31m",
        "CRITICAL": "\033[35m",
    }
    RESET = "\033[0m"

    def __init__(self, use_color: bool = True):
        super().__init__()
        self.use_color = use_color

    def format(self, record: logging.LogRecord) -> str:
        level = f"{record.levelname:8}"
        if self.use_color and record.levelname in self.COLORS:
            level = f"{self.COLORS[record.levelname]}{level}{self.RESET}"

        timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S.%f")[:-3]
        module = record.name.rsplit(".", 1)[-1][:15].ljust(15)
        message = record.getMessage()

        request_id = getattr(record, "request_id", None) or LogContext.get_current().get("request_id")
        if request_id:
            message = f"[{str(request_id)[:8]}] {message}"

        line = f"{timestamp} {level} {module} {message}"
        if record.exc_info:
            line += "\n" + self.formatException(record.exc_info)
        return line


def configure_logging(
    level: str = "INFO",
    json_format: Optional[bool] = None,
    stream: Any = None,
) -> None:
    """
    (Re)install the single handler on the ``cryptalearn`` logger.

    Args:
        level: Log level name
        json_format: JSON output; default depends on ``CRYPTALEARN_ENVIRONMENT``
        stream: Output stream (default: stderr, with colour)
    """
    if json_format is None:
        json_format = os.environ.get("CRYPTALEARN_ENVIRONMENT", "development") == "production"

    handler = logging.StreamHandler(stream or sys.stderr)
    if json_format:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(DevelopmentFormatter(use_color=stream is None))

    root = logging.getLogger(ROOT_LOGGER)
    root.setLevel(level.upper())
    root.handlers.clear()
    root.addHandler(handler)
    root.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Return ``name`` as a child of the ``cryptalearn`` logger."""
    if name != ROOT_LOGGER and not name.startswith(ROOT_LOGGER + "."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


class LogContext:
    """
    Attach fields such as a request id to every log line in a block.

    State lives in a ContextVar, so it is per thread and per asyncio task;
    worker threads started by a BatchEngine do not inherit it. Nested
    contexts merge over their parent.

    Usage:
        with LogContext(request_id="abc123"):
            logger.info("Processing")
    """

    def __init__(self, **fields: Any):
        self.fields = fields
        self._token = None

    def __enter__(self) -> "LogContext":
        self._token = _context.set({**_context.get(), **self.fields})
        return self

    def __exit__(self, *exc: Any) -> None:
        _context.reset(self._token)

    @staticmethod
    def get_current() -> Dict[str, Any]:
        """Fields of the innermost active context."""
        return dict(_context.get())


if not logging.getLogger(ROOT_LOGGER).handlers:
    configure_logging()


__all__ = [
    "configure_logging",
    "get_logger",
    "LogContext",
    "StructuredFormatter",
    "DevelopmentFormatter",
]
