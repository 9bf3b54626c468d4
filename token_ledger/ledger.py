"""
token_ledger.ledger
===================

ERC-20–style fungible token ledger: balances, allowances and a total supply
that is fixed at construction.

Public interface
----------------
# construction
Ledger.new(initial_supply, creator) -> Ledger

# queries (pure)
total_supply() -> int
balance_of(account) -> int
allowance(owner, spender) -> int

# mutations (explicit caller; return True or raise LedgerError)
approve(caller, spender, amount) -> bool
transfer(caller, to, amount) -> bool
transfer_from(caller, from_, to, amount) -> bool

Notes
-----
- The caller is always an explicit argument; authentication is the host's job.
- Missing balance/allowance entries read as zero.
- Every operation is all-or-nothing: new values are computed and checked
  first, then written (allowance included), then the notification is emitted.
- A sink that raises propagates to the caller; the mutation stays applied.
- All operations, queries included, run under one re-entrant lock so a shared
  instance never exposes a half-applied mutation.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, Hashable, List, Optional, Tuple

from .config import CFG, LedgerConfig
from .errors import (InsufficientApproval, InsufficientBalance, LedgerError,
                     InvariantViolation)
from .events import (Approval, EventSink, InMemoryEventSink, LedgerEvent,
                     Transfer)
from .types import require_account
from .uint import checked_add, checked_sub, require_amount

log = logging.getLogger(__name__)

AllowanceKey = Tuple[Hashable, Hashable]


@dataclass(frozen=True)
class LedgerSnapshot:
    """Point-in-time copy of the ledger state."""

    total_supply: int
    balances: Dict[Hashable, int] = field(default_factory=dict)
    allowances: Dict[AllowanceKey, int] = field(default_factory=dict)

    def balance_sum(self) -> int:
        return sum(self.balances.values())


class Ledger:
    def __init__(
        self,
        initial_supply: int,
        creator: Hashable,
        *,
        sink: Optional[EventSink] = None,
        config: Optional[LedgerConfig] = None,
    ) -> None:
        self._cfg = config or CFG
        self._bits = self._cfg.amount_bits
        require_amount(initial_supply, self._bits)
        require_account(creator)

        self._lock = threading.RLock()
        self.sink: EventSink = sink if sink is not None else InMemoryEventSink(self._cfg.max_events)

        self._total_supply = initial_supply
        self._balances: Dict[Hashable, int] = {creator: initial_supply}
        self._allowances: Dict[AllowanceKey, int] = {}

        log.info("ledger created", extra={"initial_supply": initial_supply, "amount_bits": self._bits})
        self._emit(Transfer(None, creator, initial_supply))

    @classmethod
    def new(
        cls,
        initial_supply: int,
        creator: Hashable,
        *,
        sink: Optional[EventSink] = None,
        config: Optional[LedgerConfig] = None,
    ) -> "Ledger":
        return cls(initial_supply, creator, sink=sink, config=config)

    @property
    def config(self) -> LedgerConfig:
        return self._cfg

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def total_supply(self) -> int:
        return self._total_supply

    def balance_of(self, account: Hashable) -> int:
        with self._lock:
            return self._balances.get(account, 0)

    def allowance(self, owner: Hashable, spender: Hashable) -> int:
        with self._lock:
            return self._allowances.get((owner, spender), 0)

    def holders(self) -> List[Hashable]:
        """Accounts that have a balance entry (possibly zero)."""
        with self._lock:
            return list(self._balances)

    def snapshot(self) -> LedgerSnapshot:
        with self._lock:
            return LedgerSnapshot(
                total_supply=self._total_supply,
                balances=dict(self._balances),
                allowances=dict(self._allowances),
            )

    def check_invariants(self) -> None:
        """Raise InvariantViolation if balances no longer sum to total supply."""
        with self._lock:
            balance_sum = sum(self._balances.values())
            if balance_sum != self._total_supply:
                raise InvariantViolation(total_supply=self._total_supply, balance_sum=balance_sum)

    # ------------------------------------------------------------------
    # Mutations (explicit caller)
    # ------------------------------------------------------------------

    def approve(self, caller: Hashable, spender: Hashable, amount: int) -> bool:
        """Set (not add to) the allowance `spender` may draw from `caller`."""
        require_account(caller)
        require_account(spender)
        require_amount(amount, self._bits)
        with self._lock:
            self._allowances[(caller, spender)] = amount
            log.debug("approve applied", extra={"amount": amount})
            self._emit(Approval(caller, spender, amount))
        return True

    def transfer(self, caller: Hashable, to: Hashable, amount: int) -> bool:
        with self._lock:
            self._guarded("transfer", self._move_balance, caller, to, amount)
        return True

    def transfer_from(self, caller: Hashable, from_: Hashable, to: Hashable, amount: int) -> bool:
        """
        Spender (`caller`) moves `amount` from `from_` to `to` using its allowance.

        The allowance is checked before the balances are touched. It is written
        together with the balances, before the Transfer is emitted, so sinks
        see the decremented allowance.
        """
        require_account(caller)
        require_account(from_)
        require_account(to)
        require_amount(amount, self._bits)
        with self._lock:
            self._guarded("transfer_from", self._transfer_from_locked, caller, from_, to, amount)
        return True

    def _transfer_from_locked(self, caller: Hashable, from_: Hashable, to: Hashable, amount: int) -> None:
        key = (from_, caller)
        current = self._allowances.get(key, 0)
        if current < amount:
            raise InsufficientApproval(allowance=current, amount=amount)
        remaining = checked_sub(current, amount, self._bits)
        self._move_balance(from_, to, amount, spend=(key, remaining))

    # ------------------------------------------------------------------
    # Internal transfer primitive
    # ------------------------------------------------------------------

    def _move_balance(
        self,
        from_: Hashable,
        to: Hashable,
        amount: int,
        spend: Optional[Tuple[AllowanceKey, int]] = None,
    ) -> None:
        # spend: (allowance key, remaining) committed with the balances
        require_account(from_)
        require_account(to)
        require_amount(amount, self._bits)
        with self._lock:
            from_bal = self._balances.get(from_, 0)
            if from_bal < amount:
                raise InsufficientBalance(balance=from_bal, amount=amount)

            new_from = checked_sub(from_bal, amount, self._bits)
            to_bal = new_from if to == from_ else self._balances.get(to, 0)
            new_to = checked_add(to_bal, amount, self._bits)

            self._balances[from_] = new_from
            self._balances[to] = new_to
            if spend is not None:
                key, remaining = spend
                self._allowances[key] = remaining
            log.debug("transfer applied", extra={"amount": amount})
            self._emit(Transfer(from_, to, amount))

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _guarded(self, op: str, fn, *args) -> None:
        try:
            fn(*args)
        except LedgerError as e:
            log.debug("%s rejected", op, extra={"code": e.code})
            raise

    def _emit(self, event: LedgerEvent) -> None:
        self.sink.emit(event)

    def __repr__(self) -> str:
        return f"Ledger(total_supply={self._total_supply}, holders={len(self._balances)})"


__all__ = ["Ledger", "LedgerSnapshot"]
