# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Append-only event log for deployed ledger units.

Every state change produces an event. Events are immutable once appended and
are the only thing external collaborators (indexers, snapshot aggregators)
observe besides the read queries. Subscribers are called synchronously in
subscription order after the event is appended. A subscriber that raises is
logged and skipped; it never aborts the operation that emitted the event.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import StrEnum
from typing import Any

logger = logging.getLogger(__name__)


class EventKind(StrEnum):
    ROLE_GRANTED = "RoleGranted"
    ROLE_REVOKED = "RoleRevoked"
    ATTESTOR_ADDED = "AttestorAdded"
    ATTESTOR_REMOVED = "AttestorRemoved"
    PARTICIPANT_REGISTERED = "ParticipantRegistered"
    STAKED = "Staked"
    UNSTAKED = "Unstaked"
    ATTESTATION_SUBMITTED = "AttestationSubmitted"
    SNAPSHOT_COMMITTED = "SnapshotCommitted"
    TRANSFER = "Transfer"
    APPROVAL = "Approval"


@dataclass(frozen=True)
class LedgerEvent:
    """A single emitted event."""

    kind: EventKind
    emitter: str
    sequence: int
    args: dict[str, Any] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.kind.value

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "emitter": self.emitter,
            "sequence": self.sequence,
            "args": {k: (v.hex() if isinstance(v, bytes) else v) for k, v in self.args.items()},
        }


EventListener = Callable[[LedgerEvent], None]


class EventLog:
    """Ordered, append-only event record for one emitter address."""

    def __init__(self, emitter: str) -> None:
        self.emitter = emitter
        self._events: list[LedgerEvent] = []
        self._listeners: list[EventListener] = []
        self._lock = threading.Lock()

    def emit(self, kind: EventKind, **args: Any) -> LedgerEvent:
        with self._lock:
            event = LedgerEvent(kind=kind, emitter=self.emitter, sequence=len(self._events), args=args)
            self._events.append(event)
            listeners = list(self._listeners)

        logger.debug("Event %s #%d from %s", event.name, event.sequence, self.emitter)
        for listener in listeners:
            try:
                listener(event)
            except Exception:
                logger.exception("Listener error for %s #%d from %s", event.name, event.sequence, self.emitter)
        return event

    def subscribe(self, listener: EventListener) -> Callable[[], None]:
        """Register a listener. Returns a callable that unsubscribes it."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def events(self, kind: EventKind | str | None = None) -> list[LedgerEvent]:
        """Return emitted events, optionally filtered by kind."""
        with self._lock:
            snapshot = list(self._events)
        if kind is None:
            return snapshot
        kind = EventKind(kind)
        return [e for e in snapshot if e.kind == kind]

    def last(self, kind: EventKind | str | None = None) -> LedgerEvent | None:
        matching = self.events(kind)
        return matching[-1] if matching else None

    def __len__(self) -> int:
        with self._lock:
            return len(self._events)
