"""
token_ledger.errors — typed exceptions raised by the ledger core.

Hosts translate these into receipts / rejected transactions. Every error is
raised *before* any state is touched, so catching a `LedgerError` always means
"nothing changed".

Hierarchy
---------
LedgerError (base)
 ├─ InsufficientBalance   : source balance below the requested amount
 ├─ InsufficientApproval  : spender allowance below the requested amount
 └─ InvariantError        : programming errors, never valid business outcomes
     ├─ AmountOverflow     : checked add exceeded the Amount width
     ├─ AmountUnderflow    : checked sub went below zero
     ├─ InvalidAmount      : not an integer in [0, max_amount]
     ├─ InvalidAccount     : None or unhashable account identifier
     └─ InvariantViolation : balance sum drifted from total supply

Only the first two are business outcomes. The rest signal a bug in the caller
(or in the ledger) and abort the operation.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional


@dataclass
class LedgerError(Exception):
    """
    Base ledger error.

    Attributes:
        message: Human-readable explanation.
        code:    Stable machine code string (e.g. 'INSUFFICIENT_BALANCE').
        data:    Optional structured details (kept JSON-serializable).
    """
    message: str = "ledger error"
    code: str = "LEDGER_ERROR"
    data: Optional[Dict[str, Any]] = field(default=None)

    def __str__(self) -> str:  # pragma: no cover - trivial
        if self.data:
            return f"{self.code}: {self.message} ({self.data})"
        return f"{self.code}: {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to a JSON-safe dict for receipts/logs."""
        out: Dict[str, Any] = {"code": self.code, "message": self.message}
        if self.data is not None:
            out["data"] = self.data
        return out


class InsufficientBalance(LedgerError):
    """The source account cannot cover the transfer."""

    def __init__(
        self,
        message: str = "insufficient balance",
        *,
        balance: Optional[int] = None,
        amount: Optional[int] = None,
        data: Optional[Dict[str, Any]] = None,
    ):
        d: Dict[str, Any] = dict(data or {})
        if balance is not None:
            d.setdefault("balance", balance)
        if amount is not None:
            d.setdefault("amount", amount)
        super().__init__(message=message, code="INSUFFICIENT_BALANCE", data=d or None)


class InsufficientApproval(LedgerError):
    """The spender's allowance from the owner is below the requested amount."""

    def __init__(
        self,
        message: str = "insufficient approval",
        *,
        allowance: Optional[int] = None,
        amount: Optional[int] = None,
        data: Optional[Dict[str, Any]] = None,
    ):
        d: Dict[str, Any] = dict(data or {})
        if allowance is not None:
            d.setdefault("allowance", allowance)
        if amount is not None:
            d.setdefault("amount", amount)
        super().__init__(message=message, code="INSUFFICIENT_APPROVAL", data=d or None)


class InvariantError(LedgerError):
    """Base for programming-invariant violations (not business outcomes)."""

    def __init__(
        self,
        message: str = "invariant violated",
        *,
        code: str = "INVARIANT",
        data: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, code=code, data=data)


class AmountOverflow(InvariantError):
    def __init__(self, message: str = "amount overflow", *, bits: Optional[int] = None):
        super().__init__(message, code="AMOUNT_OVERFLOW", data={"bits": bits} if bits is not None else None)


class AmountUnderflow(InvariantError):
    def __init__(self, message: str = "amount underflow"):
        super().__init__(message, code="AMOUNT_UNDERFLOW")


class InvalidAmount(InvariantError):
    def __init__(self, message: str = "invalid amount", *, value: Any = None):
        super().__init__(message, code="INVALID_AMOUNT", data={"value": repr(value)})


class InvalidAccount(InvariantError):
    def __init__(self, message: str = "invalid account", *, value: Any = None):
        super().__init__(message, code="INVALID_ACCOUNT", data={"value": repr(value)})


class InvariantViolation(InvariantError):
    """Sum of balances no longer equals total supply."""

    def __init__(self, *, total_supply: int, balance_sum: int):
        super().__init__(
            "balance sum differs from total supply",
            code="SUPPLY_MISMATCH",
            data={"total_supply": total_supply, "balance_sum": balance_sum},
        )


__all__ = [
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
