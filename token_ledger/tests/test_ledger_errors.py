from __future__ import annotations

import pytest

from token_ledger import (AccountId, InsufficientApproval, InsufficientBalance,
                          InvalidAccount, InvalidAmount, InvariantError,
                          InvariantViolation, Ledger, LedgerConfig, LedgerError)


def test_business_errors_share_base_and_codes():
    for exc, code in ((InsufficientBalance(), "INSUFFICIENT_BALANCE"), (InsufficientApproval(), "INSUFFICIENT_APPROVAL")):
        assert isinstance(exc, LedgerError)
        assert not isinstance(exc, InvariantError)
        assert exc.code == code


def test_error_to_dict_is_json_safe():
    err = InsufficientBalance(balance=3, amount=9)
    assert err.to_dict() == {
        "code": "INSUFFICIENT_BALANCE",
        "message": "insufficient balance",
        "data": {"balance": 3, "amount": 9},
    }
    assert InsufficientApproval().to_dict() == {
        "code": "INSUFFICIENT_APPROVAL",
        "message": "insufficient approval",
    }


@pytest.mark.parametrize("amount", [-1, 1.5, "10", None, True])
def test_non_amounts_are_rejected_before_mutation(ledger, acct0, acct1, amount):
    before = ledger.snapshot()
    with pytest.raises(InvalidAmount):
        ledger.transfer(acct1, acct0, amount)
    with pytest.raises(InvalidAmount):
        ledger.approve(acct1, acct0, amount)
    with pytest.raises(InvalidAmount):
        ledger.transfer_from(acct0, acct1, acct0, amount)
    assert ledger.snapshot() == before


def test_amount_width_is_enforced():
    cfg = LedgerConfig(amount_bits=8)
    owner = AccountId.filled(0x01)
    ledger = Ledger.new(255, owner, config=cfg)
    assert ledger.config.max_amount == 255
    with pytest.raises(InvalidAmount):
        ledger.approve(owner, owner, 256)
    with pytest.raises(InvalidAmount):
        Ledger.new(256, owner, config=cfg)


def test_default_width_is_u128(acct1):
    ledger = Ledger.new((1 << 128) - 1, acct1)
    assert ledger.total_supply() == (1 << 128) - 1
    with pytest.raises(InvalidAmount):
        Ledger.new(1 << 128, acct1)


@pytest.mark.parametrize("bad", [None, ["not", "hashable"], {"a": 1}])
def test_invalid_accounts_are_rejected(ledger, acct1, bad):
    with pytest.raises(InvalidAccount):
        ledger.transfer(acct1, bad, 1)
    with pytest.raises(InvalidAccount):
        ledger.approve(acct1, bad, 1)
    with pytest.raises(InvalidAccount):
        ledger.transfer_from(bad, acct1, acct1, 1)
    assert ledger.balance_of(acct1) == 100


def test_creator_must_be_valid():
    with pytest.raises(InvalidAccount):
        Ledger.new(1, None)


def test_check_invariants_detects_drift(ledger, acct0):
    ledger.check_invariants()
    ledger._balances[acct0] = 1  # simulate corruption
    with pytest.raises(InvariantViolation) as ei:
        ledger.check_invariants()
    assert ei.value.data == {"total_supply": 100, "balance_sum": 101}


def test_account_id_validation():
    with pytest.raises(InvalidAccount):
        AccountId(b"\x01" * 31)
    with pytest.raises(InvalidAccount):
        AccountId.from_hex("0xzz")
    a = AccountId.filled(0xAB)
    assert AccountId.from_hex(a.hex()) == a
    assert a.hex() == "0x" + "ab" * 32
    assert AccountId.from_seed("alice") == AccountId.from_seed("alice")
    assert AccountId.from_seed("alice") != AccountId.from_seed("bob")
