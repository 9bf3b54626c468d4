"""
token_ledger.events — ledger notifications and pluggable sinks.

The ledger emits one notification per applied mutation, synchronously, at
the moment the mutation is written:

- Transfer(from_, to, amount)   from_ is None only for the construction mint
- Approval(owner, spender, amount)

Sinks receive events through `emit(event)`. Delivery is fire-and-forget: the
ledger neither buffers nor retries, and a sink that raises propagates to the
caller of the mutating operation (after the mutation has been applied).

Backends
--------
- InMemoryEventSink: bounded append-only log; test/dev friendly.
- CallbackSink:      forwards to subscribed callables (host adapters, indexers).
- FanoutSink:        forwards to several sinks in order.
- NullEventSink:     discards everything.
"""

from __future__ import annotations

import threading
from collections import deque
from dataclasses import dataclass
from typing import (Any, Callable, ClassVar, Deque, Dict, Hashable, Iterable,
                    List, Optional, Protocol, Type, TypeVar, Union,
                    runtime_checkable)

from .config import DEFAULT_MAX_EVENTS
from .types import render_account

# =============================================================================
# Public data model
# =============================================================================


@dataclass(frozen=True)
class Transfer:
    name: ClassVar[str] = "Transfer"

    from_: Optional[Hashable]
    to: Optional[Hashable]
    amount: int

    @property
    def is_mint(self) -> bool:
        return self.from_ is None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": self.name,
            "from": render_account(self.from_),
            "to": render_account(self.to),
            "amount": self.amount,
        }


@dataclass(frozen=True)
class Approval:
    name: ClassVar[str] = "Approval"

    owner: Hashable
    spender: Hashable
    amount: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "event": self.name,
            "owner": render_account(self.owner),
            "spender": render_account(self.spender),
            "amount": self.amount,
        }


LedgerEvent = Union[Transfer, Approval]
E = TypeVar("E", Transfer, Approval)


# =============================================================================
# Sink interface
# =============================================================================


@runtime_checkable
class EventSink(Protocol):
    def emit(self, event: LedgerEvent) -> None:
        """Deliver a single event. Called while the ledger lock is held."""


# =============================================================================
# Implementations
# =============================================================================


class InMemoryEventSink:
    """
    Bounded append-only log. When `max_events` is exceeded the oldest events
    are dropped; `dropped` counts them.
    """

    def __init__(self, max_events: int = DEFAULT_MAX_EVENTS) -> None:
        if max_events < 1:
            raise ValueError("max_events must be >= 1")
        self._events: Deque[LedgerEvent] = deque(maxlen=max_events)
        self._lock = threading.RLock()
        self.dropped = 0

    def emit(self, event: LedgerEvent) -> None:
        with self._lock:
            if len(self._events) == self._events.maxlen:
                self.dropped += 1
            self._events.append(event)

    def events(self) -> List[LedgerEvent]:
        with self._lock:
            return list(self._events)

    def of_type(self, cls: Type[E]) -> List[E]:
        return [e for e in self.events() if isinstance(e, cls)]

    def clear(self) -> None:
        with self._lock:
            self._events.clear()
            self.dropped = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)


Callback = Callable[[LedgerEvent], None]


class CallbackSink:
    """Forward each event to subscribers, in subscription order."""

    def __init__(self, *callbacks: Callback) -> None:
        self._callbacks: List[Callback] = list(callbacks)
        self._lock = threading.RLock()

    def subscribe(self, callback: Callback) -> Callable[[], None]:
        with self._lock:
            self._callbacks.append(callback)

        def _unsubscribe() -> None:
            with self._lock:
                if callback in self._callbacks:
                    self._callbacks.remove(callback)

        return _unsubscribe

    def emit(self, event: LedgerEvent) -> None:
        with self._lock:
            callbacks = tuple(self._callbacks)
        for cb in callbacks:
            cb(event)


class FanoutSink:
    def __init__(self, sinks: Iterable[EventSink]) -> None:
        self._sinks = tuple(sinks)

    def emit(self, event: LedgerEvent) -> None:
        for sink in self._sinks:
            sink.emit(event)


class NullEventSink:
    def emit(self, event: LedgerEvent) -> None:
        return None


__all__ = [
    "Transfer",
    "Approval",
    "LedgerEvent",
    "EventSink",
    "InMemoryEventSink",
    "CallbackSink",
    "FanoutSink",
    "NullEventSink",
]
