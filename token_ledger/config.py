"""
token_ledger.config — numeric width, event retention and logging defaults.

Configuration precedence:
  1) Environment variables (TOKEN_LEDGER_*)
  2) Hardcoded safe defaults below

Key env vars:
  - TOKEN_LEDGER_AMOUNT_BITS   (int)          default: 128   (8..256)
  - TOKEN_LEDGER_MAX_EVENTS    (int)          default: 100_000
  - TOKEN_LEDGER_LOG_LEVEL     (str)          default: INFO
  - TOKEN_LEDGER_LOG_FORMAT    (json|text)    default: unset (auto by TTY)

Out-of-range integers are clamped; unparsable ones fall back to the default.

Usage:
    from token_ledger.config import load_config
    CFG = load_config()
    CFG.max_amount
"""

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from functools import lru_cache
from typing import Any, Dict, Optional

DEFAULT_AMOUNT_BITS = 128
DEFAULT_MAX_EVENTS = 100_000


# ----------------------------- helpers ---------------------------------------


def _env_int(name: str, default: int, *, min_v: int, max_v: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        v = int(raw, 0)
    except ValueError:
        return default
    if v < min_v:
        return min_v
    if v > max_v:
        return max_v
    return v


def _env_choice(name: str, choices: tuple) -> Optional[str]:
    raw = os.getenv(name)
    if raw is None:
        return None
    val = raw.strip().lower()
    return val if val in choices else None


# ------------------------------- config --------------------------------------


@dataclass(frozen=True)
class LedgerConfig:
    amount_bits: int = DEFAULT_AMOUNT_BITS
    max_events: int = DEFAULT_MAX_EVENTS
    log_level: str = "INFO"
    log_format: Optional[str] = None

    @property
    def max_amount(self) -> int:
        return (1 << self.amount_bits) - 1

    def with_overrides(self, **changes: Any) -> "LedgerConfig":
        return replace(self, **changes)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "amount_bits": self.amount_bits,
            "max_amount": self.max_amount,
            "max_events": self.max_events,
            "log_level": self.log_level,
            "log_format": self.log_format,
        }


@lru_cache(maxsize=1)
def load_config() -> LedgerConfig:
    """
    Build and cache a LedgerConfig from environment + safe defaults.
    """
    return LedgerConfig(
        amount_bits=_env_int("TOKEN_LEDGER_AMOUNT_BITS", DEFAULT_AMOUNT_BITS, min_v=8, max_v=256),
        max_events=_env_int("TOKEN_LEDGER_MAX_EVENTS", DEFAULT_MAX_EVENTS, min_v=1, max_v=10_000_000),
        log_level=(os.getenv("TOKEN_LEDGER_LOG_LEVEL") or "INFO").strip().upper(),
        log_format=_env_choice("TOKEN_LEDGER_LOG_FORMAT", ("json", "text")),
    )


# Module-level singleton for convenience; load_config() stays the canonical accessor.
CFG: LedgerConfig = load_config()

__all__ = ["LedgerConfig", "load_config", "CFG", "DEFAULT_AMOUNT_BITS", "DEFAULT_MAX_EVENTS"]
