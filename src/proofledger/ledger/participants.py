# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Participant records and consumed-nonce tracking.

These are the plain state tables owned by ContributionLedger. They enforce
the record-level invariants:

- ``registered`` is set once and never unset; records are never deleted.
- ``staked`` never goes below zero.
- ``contribution_score`` only ever increases.
- A (user, nonce) pair is consumed at most once, ever.

Authorization, locking, asset custody and events live in the aggregate.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple

from ..core.exceptions import AlreadyRegistered, InsufficientStake, InvalidAmount, NotRegistered, ReplayedNonce
from ..crypto.addresses import UINT256_MAX


@dataclass
class Participant:
    """Mutable participant record. Never handed out directly."""

    identity: str
    staked: int = 0
    contribution_score: int = 0
    registered: bool = False

    def view(self) -> ParticipantView:
        return ParticipantView(self.staked, self.contribution_score, self.registered)


class ParticipantView(NamedTuple):
    """Read-only copy of a participant record."""

    staked: int
    contribution_score: int
    registered: bool

    def to_dict(self) -> dict:
        return {
            "staked": self.staked,
            "contribution_score": self.contribution_score,
            "registered": self.registered,
        }


EMPTY_PARTICIPANT = ParticipantView(0, 0, False)


def check_positive(amount: int, field: str = "amount") -> int:
    """Validate a strictly positive uint256 amount."""
    if isinstance(amount, bool) or not isinstance(amount, int) or not 0 < amount <= UINT256_MAX:
        raise InvalidAmount(amount, field=field)
    return amount


class ParticipantLedger:
    """Participant table indexed by identity, iterated in registration order."""

    def __init__(self) -> None:
        self._records: dict[str, Participant] = {}

    def is_registered(self, identity: str) -> bool:
        record = self._records.get(identity)
        return record is not None and record.registered

    def get(self, identity: str) -> ParticipantView:
        record = self._records.get(identity)
        return record.view() if record else EMPTY_PARTICIPANT

    def register(self, identity: str) -> ParticipantView:
        if self.is_registered(identity):
            raise AlreadyRegistered(identity)
        record = Participant(identity=identity, registered=True)
        self._records[identity] = record
        return record.view()

    def _require(self, identity: str) -> Participant:
        record = self._records.get(identity)
        if record is None or not record.registered:
            raise NotRegistered(identity)
        return record

    def add_stake(self, identity: str, amount: int) -> int:
        record = self._require(identity)
        check_positive(amount)
        if record.staked + amount > UINT256_MAX:
            raise InvalidAmount(amount)
        record.staked += amount
        return record.staked

    def remove_stake(self, identity: str, amount: int) -> int:
        record = self._require(identity)
        check_positive(amount)
        if amount > record.staked:
            raise InsufficientStake(identity, record.staked, amount)
        record.staked -= amount
        return record.staked

    def credit_contribution(self, identity: str, amount: int) -> int:
        record = self._require(identity)
        check_positive(amount)
        if record.contribution_score + amount > UINT256_MAX:
            raise InvalidAmount(amount)
        record.contribution_score += amount
        return record.contribution_score

    def stake_table(self) -> list[tuple[str, int]]:
        """(identity, staked) for every registered participant, registration order."""
        return [(r.identity, r.staked) for r in self._records.values() if r.registered]

    def identities(self) -> list[str]:
        return [r.identity for r in self._records.values() if r.registered]

    def total_staked(self) -> int:
        return sum(r.staked for r in self._records.values())

    def __len__(self) -> int:
        return len(self._records)

    def __contains__(self, identity: object) -> bool:
        return identity in self._records


class ReplayGuard:
    """Per-user set of consumed nonces."""

    def __init__(self) -> None:
        self._consumed: dict[str, set[int]] = {}

    def is_consumed(self, user: str, nonce: int) -> bool:
        return nonce in self._consumed.get(user, ())

    def check(self, user: str, nonce: int) -> None:
        """Raise ReplayedNonce if (user, nonce) has been consumed."""
        if self.is_consumed(user, nonce):
            raise ReplayedNonce(user, nonce)

    def consume(self, user: str, nonce: int) -> None:
        """Mark (user, nonce) consumed. Fails if it already was."""
        self.check(user, nonce)
        self._consumed.setdefault(user, set()).add(nonce)

    def consumed_count(self, user: str) -> int:
        return len(self._consumed.get(user, ()))
