# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""proofledger - proof-of-contribution ledger.

Participants stake a fungible asset and earn a contribution score through
attestations signed off-chain by authorized attestors. Governors commit one
snapshot root per epoch, and a stake-weighted lottery picks a proposer from
the registry given external randomness.

Architecture:
  AttestorDirectory  (who may sign claims)
    -> ContributionLedger.submit_attestation  (verify, replay-guard, credit)
  ContributionLedger.stake / unstake         (asset custody)
  ContributionLedger.commit_snapshot         (write-once epoch roots)
  ContributionLedger.select_proposer_*       (cumulative-sum lottery)

CLI entry point: ``proofledger``
"""

__version__ = "0.1.0"

from .access.roles import DEFAULT_ADMIN_ROLE, GOVERNOR_ROLE, MINTER_ROLE
from .asset.token import AssetToken
from .attestors.directory import AttestorDirectory
from .crypto.signing import AttestorSigner, SignedAttestation
from .deploy import Deployment, deploy
from .ledger.contract import ContributionLedger
from .ledger.participants import ParticipantView

__all__ = [
    "DEFAULT_ADMIN_ROLE",
    "GOVERNOR_ROLE",
    "MINTER_ROLE",
    "AssetToken",
    "AttestorDirectory",
    "AttestorSigner",
    "SignedAttestation",
    "ContributionLedger",
    "ParticipantView",
    "Deployment",
    "deploy",
]
