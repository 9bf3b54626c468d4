"""
token_ledger.logging
--------------------

Structured logging for hosts and tools embedding the ledger:
- JSON or concise colored text formats
- Context-local fields via `contextvars` (trace_id, component, tx, ...)
- Safe JSON serialization (bytes → hex, AccountId → hex, dataclasses → dict)

Library modules only call `logging.getLogger(__name__)`; handlers are
installed by the process entrypoint:

    from token_ledger import logging as tlog

    tlog.configure(level="DEBUG")
    with tlog.trace_scope():
        tlog.bind(component="replay")
        ...
"""

from __future__ import annotations

import datetime as _dt
import io
import json
import logging
import os
import sys
import traceback
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import asdict, is_dataclass
from typing import Any, Dict, Optional

from .config import CFG

_LOG_CONTEXT: ContextVar[Dict[str, Any]] = ContextVar("_LOG_CONTEXT", default={})

DEFAULT_CONTEXT_KEYS = ("trace_id", "component", "tx")

# Attributes every LogRecord carries; anything else came in via `extra=`.
_RECORD_ATTRS = frozenset(
    (
        "name", "msg", "args", "levelname", "levelno", "pathname", "filename",
        "module", "exc_info", "exc_text", "stack_info", "lineno", "funcName",
        "created", "msecs", "relativeCreated", "thread", "threadName",
        "processName", "process", "taskName", "message", "asctime",
    )
)

# ----------------------------
# Context
# ----------------------------


def context() -> Dict[str, Any]:
    """Return a *copy* of the active logging context."""
    return dict(_LOG_CONTEXT.get())


def bind(**fields: Any) -> None:
    cur = dict(_LOG_CONTEXT.get())
    cur.update({k: _coerce_value(v) for k, v in fields.items()})
    _LOG_CONTEXT.set(cur)


def unbind(*keys: str) -> None:
    cur = dict(_LOG_CONTEXT.get())
    for k in keys:
        cur.pop(k, None)
    _LOG_CONTEXT.set(cur)


def clear_context() -> None:
    _LOG_CONTEXT.set({})


@contextmanager
def trace_scope(trace_id: Optional[str] = None):
    """Ensure a trace_id for the scope; restores the prior context on exit."""
    prev = dict(_LOG_CONTEXT.get())
    try:
        bind(trace_id=trace_id or uuid.uuid4().hex[:12])
        yield
    finally:
        _LOG_CONTEXT.set(prev)


# ----------------------------
# Formatters
# ----------------------------


def _utcnow_iso() -> str:
    return _dt.datetime.now(_dt.timezone.utc).isoformat(timespec="milliseconds")


def _coerce_value(v: Any) -> Any:
    if v is None or isinstance(v, (bool, int, float, str, list, dict)):
        return v
    if isinstance(v, (bytes, bytearray)):
        return v.hex()
    if is_dataclass(v) and not isinstance(v, type):
        if hasattr(v, "hex") and callable(v.hex):
            return v.hex()
        return asdict(v)
    return str(v)


def _extras(record: logging.LogRecord) -> Dict[str, Any]:
    return {
        k: _coerce_value(v)
        for k, v in record.__dict__.items()
        if not k.startswith("_") and k not in _RECORD_ATTRS
    }


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            "ts": _utcnow_iso(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
        }
        payload.update(context())
        for k, v in _extras(record).items():
            payload.setdefault(k, v)
        if record.exc_info:
            payload["err"] = "".join(traceback.format_exception(*record.exc_info)).rstrip()
        return json.dumps(payload, default=str, separators=(",", ":"))


_LEVEL_COLOR = {
    logging.DEBUG: "\x1b[90m",
    logging.INFO: "\x1b[32m",
    logging.WARNING: "\x1b[33m",
    logging.ERROR: "\x1b[31m",
    logging.CRITICAL: "\x1b[1m\x1b[35m",
}
_RESET = "\x1b[0m"


def _supports_color(stream: io.TextIOBase) -> bool:
    try:
        return stream.isatty() and os.environ.get("NO_COLOR") is None
    except (AttributeError, ValueError):
        return False


class TextFormatter(logging.Formatter):
    """
    One-liner:
      2026-01-05T12:34:56.789+00:00 | DEBUG | token_ledger.ledger | trace_id=abc amount=10 | transfer applied
    """

    def __init__(self, stream: io.TextIOBase):
        super().__init__()
        self._color = _supports_color(stream)

    def format(self, record: logging.LogRecord) -> str:
        ctx = context()
        fields = [f"{k}={ctx[k]}" for k in DEFAULT_CONTEXT_KEYS if ctx.get(k) is not None]
        fields += [f"{k}={v}" for k, v in _extras(record).items() if k not in ctx]

        lvl = f"{record.levelname:<5}"
        if self._color:
            lvl = f"{_LEVEL_COLOR.get(record.levelno, '')}{lvl}{_RESET}"

        line = f"{_utcnow_iso()} | {lvl} | {record.name}"
        if fields:
            line += " | " + " ".join(fields)
        line += f" | {record.getMessage()}"
        if record.exc_info:
            line += "\n" + "".join(traceback.format_exception(*record.exc_info)).rstrip()
        return line


# ----------------------------
# Public setup API
# ----------------------------


def configure(
    *,
    json: Optional[bool] = None,
    level: Optional[str | int] = None,
    stream: io.TextIOBase = sys.stderr,
) -> None:
    """
    Configure the root logger. `json`/`level` default to TOKEN_LEDGER_LOG_FORMAT
    and TOKEN_LEDGER_LOG_LEVEL; without a format, text is used on a TTY and
    JSON otherwise.
    """
    if json is None:
        json = CFG.log_format == "json" if CFG.log_format else not _supports_color(stream)
    lvl = _coerce_level(level if level is not None else CFG.log_level)

    root = logging.getLogger()
    root.setLevel(lvl)
    for h in list(root.handlers):
        root.removeHandler(h)

    console = logging.StreamHandler(stream)
    console.setLevel(lvl)
    console.setFormatter(JSONFormatter() if json else TextFormatter(stream))
    root.addHandler(console)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    return logging.getLogger(name or "token_ledger")


def _coerce_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.upper())
    return value if isinstance(value, int) else logging.INFO


__all__ = [
    "bind",
    "unbind",
    "clear_context",
    "context",
    "trace_scope",
    "configure",
    "get_logger",
    "JSONFormatter",
    "TextFormatter",
]
