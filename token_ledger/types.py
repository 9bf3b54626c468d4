"""
token_ledger.types — account identifiers.

The ledger treats accounts as opaque hashable values. `AccountId` is the
concrete identifier used by the CLI and the test-suite: 32 raw bytes (the
width of a public-key-derived address), rendered as 0x-hex.
"""

from __future__ import annotations

import hashlib
from dataclasses import dataclass
from typing import Hashable

from .errors import InvalidAccount

ACCOUNT_ID_LEN = 32


def _h2b(h: str) -> bytes:
    if h.startswith("0x") or h.startswith("0X"):
        h = h[2:]
    return bytes.fromhex(h)


@dataclass(frozen=True, order=True)
class AccountId:
    """A 32-byte account identifier."""

    raw: bytes

    def __post_init__(self) -> None:
        if not isinstance(self.raw, (bytes, bytearray)) or len(self.raw) != ACCOUNT_ID_LEN:
            raise InvalidAccount(f"AccountId must be {ACCOUNT_ID_LEN} bytes", value=self.raw)
        object.__setattr__(self, "raw", bytes(self.raw))

    @classmethod
    def filled(cls, byte: int) -> "AccountId":
        """All 32 bytes set to `byte` (e.g. filled(0x01))."""
        return cls(bytes([byte]) * ACCOUNT_ID_LEN)

    @classmethod
    def from_hex(cls, h: str) -> "AccountId":
        try:
            raw = _h2b(h)
        except ValueError as e:
            raise InvalidAccount("account hex is not valid hex", value=h) from e
        return cls(raw)

    @classmethod
    def from_seed(cls, seed: str) -> "AccountId":
        """Deterministic id derived as sha3_256(seed). Handy for fixtures and scripts."""
        return cls(hashlib.sha3_256(seed.encode("utf-8")).digest())

    def hex(self) -> str:
        return "0x" + self.raw.hex()

    def __bytes__(self) -> bytes:
        return self.raw

    def __str__(self) -> str:
        return self.hex()


def require_account(account: object) -> Hashable:
    """Accounts may be any hashable value except None."""
    if account is None:
        raise InvalidAccount("account must not be None", value=account)
    try:
        hash(account)
    except TypeError as e:
        raise InvalidAccount("account must be hashable", value=account) from e
    return account  # type: ignore[return-value]


def render_account(account: object) -> object:
    """JSON-friendly projection of an account identifier."""
    if account is None:
        return None
    if isinstance(account, AccountId):
        return account.hex()
    if isinstance(account, (bytes, bytearray)):
        return "0x" + bytes(account).hex()
    if isinstance(account, (str, int)):
        return account
    return str(account)


__all__ = ["ACCOUNT_ID_LEN", "AccountId", "require_account", "render_account"]
