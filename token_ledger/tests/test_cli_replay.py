from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest
from typer.testing import CliRunner

from token_ledger.cli import ENTRYPOINTS, resolve_entrypoint
from token_ledger.cli.replay import (ScriptError, app, main, replay_script,
                                     resolve_account)
from token_ledger.config import LedgerConfig
from token_ledger.types import AccountId

runner = CliRunner()

SCRIPT = {
    "initial_supply": 100,
    "creator": "acct1",
    "calls": [
        {"op": "transfer", "caller": "acct1", "to": "acct0", "amount": 10},
        {"op": "transfer", "caller": "acct1", "to": "acct0", "amount": 100},
        {"op": "approve", "caller": "acct1", "spender": "acct1", "amount": 20},
        {"op": "transfer_from", "caller": "acct1", "from": "acct1", "to": "acct0", "amount": 10},
        {"op": "transfer_from", "caller": "acct1", "from": "acct1", "to": "acct0", "amount": 200},
        {"op": "balance_of", "account": "acct0"},
        {"op": "allowance", "owner": "acct1", "spender": "acct1"},
        {"op": "total_supply"},
    ],
}


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def _write(tmp_path: Path, obj) -> Path:
    p = tmp_path / "script.json"
    p.write_text(json.dumps(obj), encoding="utf-8")
    return p


def test_resolve_account_by_seed_and_hex():
    assert resolve_account("alice") == AccountId.from_seed("alice")
    raw = AccountId.filled(0x01)
    assert resolve_account(raw.hex()) == raw
    with pytest.raises(ScriptError):
        resolve_account("")
    with pytest.raises(ScriptError):
        resolve_account("0x" + "zz" * 32)


def test_replay_script_produces_receipts_and_state():
    report, all_ok = replay_script(SCRIPT)
    assert not all_ok
    oks = [r["ok"] for r in report["receipts"]]
    assert oks == [True, False, True, True, False, True, True, True]
    assert report["receipts"][1]["error"]["code"] == "INSUFFICIENT_BALANCE"
    assert report["receipts"][4]["error"]["code"] == "INSUFFICIENT_APPROVAL"
    assert [r["return"] for r in report["receipts"][5:]] == [20, 10, 100]
    assert report["state"]["balances"] == {"acct1": 80, "acct0": 20}
    assert report["state"]["allowances"] == [{"owner": "acct1", "spender": "acct1", "amount": 10}]
    assert [e["event"] for e in report["events"]] == ["Transfer", "Transfer", "Approval", "Transfer"]
    assert report["events"][0]["from"] is None


def test_replay_strict_stops_at_first_failure():
    report, all_ok = replay_script(SCRIPT, strict=True)
    assert not all_ok
    assert len(report["receipts"]) == 2


@pytest.mark.parametrize(
    "script",
    [
        {"creator": "a", "initial_supply": 1, "calls": [{"op": "mint", "caller": "a"}]},
        {"creator": "a", "initial_supply": 1, "calls": [{"op": "transfer", "caller": "a"}]},
        {"creator": "a", "initial_supply": -5},
    ],
)
def test_malformed_scripts_raise_script_error(script):
    with pytest.raises(ScriptError):
        replay_script(script)


def test_cli_replay_prints_json(tmp_path):
    path = _write(tmp_path, SCRIPT)
    result = runner.invoke(app, ["replay", str(path), "--log-level", "WARNING"])
    assert result.exit_code == 0, result.output
    report = json.loads(result.stdout)
    assert report["state"]["total_supply"] == 100
    assert len(report["receipts"]) == len(SCRIPT["calls"])


def test_cli_strict_exit_code(tmp_path):
    path = _write(tmp_path, SCRIPT)
    result = runner.invoke(app, ["replay", str(path), "--strict", "--log-level", "WARNING"])
    assert result.exit_code == 1


def test_cli_malformed_script_exit_code(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text("{not json", encoding="utf-8")
    result = runner.invoke(app, ["replay", str(path), "--log-level", "WARNING"])
    assert result.exit_code == 2
    assert "cannot read script" in result.output


def test_cli_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert result.stdout.startswith("token-ledger ")


def test_entrypoint_resolution():
    assert set(ENTRYPOINTS) == {"replay"}
    assert callable(resolve_entrypoint("replay"))


def test_replay_reports_dropped_events():
    report, _ = replay_script(SCRIPT)
    assert report["events_dropped"] == 0

    report, _ = replay_script(SCRIPT, config=LedgerConfig().with_overrides(max_events=2))
    assert len(report["events"]) == 2
    assert report["events_dropped"] == 2
    assert [e["event"] for e in report["events"]] == ["Approval", "Transfer"]


def test_main_exits_through_system_exit(tmp_path, capsys):
    path = _write(tmp_path, SCRIPT)
    with pytest.raises(SystemExit) as exc:
        main(["replay", str(path), "--strict", "--log-level", "WARNING"])
    assert exc.value.code == 1
    with pytest.raises(SystemExit) as exc:
        main(["replay", str(path), "--log-level", "WARNING"])
    assert exc.value.code == 0
    capsys.readouterr()
