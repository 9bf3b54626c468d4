"""
Root pytest configuration.

Pins a stable environment before `token_ledger` is imported: its config is
read from TOKEN_LEDGER_* variables once, at import time.
"""
from __future__ import annotations

import os

os.environ.setdefault("PYTHONHASHSEED", "0")
os.environ.setdefault("TZ", "UTC")

for _key in (
    "TOKEN_LEDGER_AMOUNT_BITS",
    "TOKEN_LEDGER_MAX_EVENTS",
    "TOKEN_LEDGER_LOG_LEVEL",
    "TOKEN_LEDGER_LOG_FORMAT",
    "TOKEN_LEDGER_VERSION",
):
    os.environ.pop(_key, None)
