"""Contribution ledger: participants, replay protection, snapshots."""

from .contract import ContributionLedger
from .participants import Participant, ParticipantLedger, ParticipantView, ReplayGuard
from .snapshots import SnapshotStore

__all__ = [
    "ContributionLedger",
    "Participant",
    "ParticipantLedger",
    "ParticipantView",
    "ReplayGuard",
    "SnapshotStore",
]
