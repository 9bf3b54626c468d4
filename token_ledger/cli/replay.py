#!/usr/bin/env python3
"""
token_ledger.cli.replay
=======================

Replay a JSON call script against a fresh ledger and print one receipt per
call, the final state and every emitted notification as JSON.

Script shape:
  {
    "initial_supply": 100,
    "creator": "alice",
    "calls": [
      {"op": "transfer", "caller": "alice", "to": "bob", "amount": 10},
      {"op": "approve", "caller": "alice", "spender": "carol", "amount": 5},
      {"op": "transfer_from", "caller": "carol", "from": "alice", "to": "bob", "amount": 5},
      {"op": "balance_of", "account": "bob"}
    ]
  }

Account names are mapped with AccountId.from_seed(name); a 0x-prefixed
64-hex-char string is taken as a raw 32-byte id.

Examples:
  python -m token_ledger.cli.replay replay script.json
  token-ledger replay script.json --strict

Exit status: 0 ok, 1 a call failed under --strict, 2 malformed script.
"""
from __future__ import annotations

import json
import sys
from pathlib import Path
from typing import Any, Callable, Dict, List, Mapping, Optional, Tuple

import typer

from token_ledger import logging as tlog
from token_ledger.config import LedgerConfig
from token_ledger.errors import InvalidAccount, LedgerError
from token_ledger.ledger import Ledger
from token_ledger.types import AccountId
from token_ledger.version import __version__

log = tlog.get_logger(__name__)

# op -> script fields, in positional order
OPS: Dict[str, Tuple[str, ...]] = {
    "approve": ("caller", "spender", "amount"),
    "transfer": ("caller", "to", "amount"),
    "transfer_from": ("caller", "from", "to", "amount"),
    "balance_of": ("account",),
    "allowance": ("owner", "spender"),
    "total_supply": (),
}

_ACCOUNT_FIELDS = frozenset(("caller", "spender", "to", "from", "account", "owner", "creator"))


class ScriptError(ValueError):
    """The replay script is malformed."""


def _die(msg: str, code: int = 2) -> None:
    sys.stderr.write(msg.rstrip() + "\n")
    raise typer.Exit(code)


def resolve_account(name: Any) -> AccountId:
    if not isinstance(name, str) or not name:
        raise ScriptError(f"account must be a non-empty string, got {name!r}")
    if name.lower().startswith("0x") and len(name) == 66:
        try:
            return AccountId.from_hex(name)
        except InvalidAccount as e:
            raise ScriptError(f"bad account hex {name!r}") from e
    return AccountId.from_seed(name)


def load_script(path: Path) -> Dict[str, Any]:
    try:
        obj = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, ValueError) as e:
        raise ScriptError(f"cannot read script '{path}': {e}") from e
    if not isinstance(obj, dict):
        raise ScriptError("script must be a JSON object")
    if "creator" not in obj or "initial_supply" not in obj:
        raise ScriptError("script needs 'creator' and 'initial_supply'")
    calls = obj.get("calls", [])
    if not isinstance(calls, list):
        raise ScriptError("'calls' must be a list")
    return obj


def _call_args(call: Mapping[str, Any]) -> Tuple[str, List[Any]]:
    if not isinstance(call, Mapping):
        raise ScriptError(f"call must be an object, got {call!r}")
    op = call.get("op")
    if not isinstance(op, str) or op not in OPS:
        raise ScriptError(f"unknown op {op!r}; expected one of {sorted(OPS)}")
    fields = OPS[op]
    args: List[Any] = []
    for f in fields:
        if f not in call:
            raise ScriptError(f"op {op!r} is missing field {f!r}")
        v = call[f]
        args.append(resolve_account(v) if f in _ACCOUNT_FIELDS else v)
    return op, args


def replay_script(
    script: Mapping[str, Any],
    *,
    strict: bool = False,
    config: Optional[LedgerConfig] = None,
) -> Tuple[Dict[str, Any], bool]:
    """
    Run `script` and return (report, all_ok). With `strict`, stop at the first
    failed call. Raises ScriptError for malformed input; ledger errors from
    individual calls become error receipts.
    """
    creator = resolve_account(script["creator"])
    names: Dict[AccountId, str] = {creator: script["creator"]}
    try:
        ledger = Ledger.new(script["initial_supply"], creator, config=config)
    except LedgerError as e:
        raise ScriptError(f"cannot create ledger: {e}") from e

    receipts: List[Dict[str, Any]] = []
    all_ok = True
    for index, call in enumerate(script.get("calls", [])):
        op, args = _call_args(call)
        for f, a in zip(OPS[op], args):
            if isinstance(a, AccountId):
                names.setdefault(a, call[f])
        fn: Callable[..., Any] = getattr(ledger, op)
        with tlog.trace_scope():
            tlog.bind(tx=index)
            try:
                ret = fn(*args)
            except LedgerError as e:
                all_ok = False
                receipts.append({"index": index, "op": op, "ok": False, "error": e.to_dict()})
                log.info("call failed", extra={"op": op, "code": e.code})
                if strict:
                    break
                continue
        receipts.append({"index": index, "op": op, "ok": True, "return": ret})

    snap = ledger.snapshot()
    dropped = ledger.sink.dropped  # type: ignore[attr-defined]
    if dropped:
        log.warning("event log truncated", extra={"dropped": dropped})

    def label(acct: Any) -> str:
        return names.get(acct, str(acct))

    report = {
        "version": __version__,
        "receipts": receipts,
        "state": {
            "total_supply": snap.total_supply,
            "balances": {label(a): v for a, v in snap.balances.items()},
            "allowances": [
                {"owner": label(o), "spender": label(s), "amount": v}
                for (o, s), v in snap.allowances.items()
            ],
        },
        "events": [e.to_dict() for e in ledger.sink.events()],  # type: ignore[attr-defined]
        "events_dropped": dropped,
    }
    return report, all_ok


app = typer.Typer(
    name="token-ledger",
    help="Replay ERC-20 ledger call scripts and print receipts as JSON.",
    no_args_is_help=True,
    add_completion=False,
)


def _print_version(value: bool) -> None:
    if value:
        typer.echo(f"token-ledger {__version__}")
        raise typer.Exit(0)


@app.callback()
def _meta(
    version: bool = typer.Option(
        False, "--version", "-V", help="Print version and exit",
        callback=_print_version, is_eager=True,
    ),
) -> None:
    pass


@app.command("replay")
def replay_cmd(
    script: Path = typer.Argument(..., help="Path to a JSON call script"),
    strict: bool = typer.Option(False, "--strict", help="Stop and exit 1 on the first failed call"),
    log_level: Optional[str] = typer.Option(None, "--log-level", help="Override TOKEN_LEDGER_LOG_LEVEL"),
) -> None:
    """
    Build a ledger from SCRIPT and apply its calls in order.
    """
    tlog.configure(level=log_level, stream=sys.stderr)
    try:
        report, all_ok = replay_script(load_script(script), strict=strict)
    except ScriptError as e:
        _die(f"[replay] {script}: {e}", 2)
        return

    typer.echo(json.dumps(report, indent=2))
    if strict and not all_ok:
        raise typer.Exit(1)


def main(argv: Optional[List[str]] = None) -> None:
    app(args=argv)


if __name__ == "__main__":  # pragma: no cover
    main()
