"""
token_ledger.cli
----------------

Command-line entrypoints. Exposed as console scripts:
  - `token-ledger`  -> token_ledger.cli.replay:main
"""

from __future__ import annotations

from importlib import import_module
from typing import Callable, Dict

ENTRYPOINTS: Dict[str, str] = {
    "replay": "token_ledger.cli.replay:main",
}


def resolve_entrypoint(name: str) -> Callable[..., int]:
    """Resolve a CLI name to its `main()` without importing every submodule."""
    target = ENTRYPOINTS[name]
    module_path, _, attr = target.partition(":")
    return getattr(import_module(module_path), attr)


__all__ = ["ENTRYPOINTS", "resolve_entrypoint"]
