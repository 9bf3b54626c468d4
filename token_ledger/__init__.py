"""
token_ledger — fungible-token ledger core (ERC-20 operation set).

A single in-memory `Ledger` owns total supply, balances and allowances and
enforces the supply invariant across every mutation:

    from token_ledger import Ledger, AccountId

    alice, bob = AccountId.from_seed("alice"), AccountId.from_seed("bob")
    ledger = Ledger.new(1_000, alice)
    ledger.transfer(alice, bob, 10)
    ledger.approve(alice, bob, 50)
    ledger.transfer_from(bob, alice, bob, 20)

Failures raise `InsufficientBalance` / `InsufficientApproval` with no state
change. Notifications go to `ledger.sink` (an in-memory log by default).
"""

from __future__ import annotations

from .config import CFG, LedgerConfig, load_config
from .errors import (AmountOverflow, AmountUnderflow, InsufficientApproval,
                     InsufficientBalance, InvalidAccount, InvalidAmount,
                     InvariantError, InvariantViolation, LedgerError)
from .events import (Approval, CallbackSink, EventSink, FanoutSink,
                     InMemoryEventSink, NullEventSink, Transfer)
from .ledger import Ledger, LedgerSnapshot
from .types import AccountId
from .version import __version__

__all__ = [
    "__version__",
    "CFG",
    "LedgerConfig",
    "load_config",
    "Ledger",
    "LedgerSnapshot",
    "AccountId",
    "Transfer",
    "Approval",
    "EventSink",
    "InMemoryEventSink",
    "CallbackSink",
    "FanoutSink",
    "NullEventSink",
    "LedgerError",
    "InsufficientBalance",
    "InsufficientApproval",
    "InvariantError",
    "AmountOverflow",
    "AmountUnderflow",
    "InvalidAmount",
    "InvalidAccount",
    "InvariantViolation",
]
