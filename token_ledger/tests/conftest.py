"""
Fixtures for ledger tests.

Accounts mirror the classic fixture ids: acct0 = [0x00; 32], acct1 = [0x01; 32].
"""
from __future__ import annotations

from typing import Callable

import pytest

from token_ledger import AccountId, InMemoryEventSink, Ledger

ACCT0 = AccountId.filled(0x00)
ACCT1 = AccountId.filled(0x01)
ALICE = AccountId.from_seed("alice")
BOB = AccountId.from_seed("bob")
CAROL = AccountId.from_seed("carol")


@pytest.fixture
def acct0() -> AccountId:
    return ACCT0


@pytest.fixture
def acct1() -> AccountId:
    return ACCT1


@pytest.fixture
def sink() -> InMemoryEventSink:
    return InMemoryEventSink()


@pytest.fixture
def make_ledger(sink: InMemoryEventSink) -> Callable[..., Ledger]:
    """Build a ledger wired to the shared `sink` fixture."""

    def _make(initial_supply: int = 100, creator: AccountId = ACCT1, **kw) -> Ledger:
        kw.setdefault("sink", sink)
        return Ledger.new(initial_supply, creator, **kw)

    return _make


@pytest.fixture
def ledger(make_ledger) -> Ledger:
    return make_ledger(100, ACCT1)
