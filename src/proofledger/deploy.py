# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Deploy a complete ledger system: asset, attestor directory, ledger.

Usage:
    from proofledger.deploy import deploy
    system = deploy(deployer)
    system.directory.add_attestor(deployer, attestor_address)
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass

from .access.roles import GOVERNOR_ROLE
from .asset.token import AssetToken
from .attestors.directory import AttestorDirectory
from .core.config import LedgerSettings, get_config
from .crypto.addresses import to_address
from .ledger.contract import ContributionLedger

logger = logging.getLogger(__name__)


@dataclass
class Deployment:
    """Handles to the three deployed units."""

    deployer: str
    token: AssetToken
    directory: AttestorDirectory
    ledger: ContributionLedger

    def addresses(self) -> dict[str, str]:
        return {
            "deployer": self.deployer,
            "token": self.token.address,
            "directory": self.directory.address,
            "ledger": self.ledger.address,
        }


def deploy(
    deployer: str,
    *,
    settings: LedgerSettings | None = None,
    attestors: Iterable[str] = (),
    governors: Iterable[str] = (),
    require_registration: bool | None = None,
) -> Deployment:
    """Deploy token, directory and ledger in that order.

    The deployer receives the token's initial supply, admin + governor on
    the directory, and admin on the ledger. ``attestors`` are added to the
    directory and ``governors`` receive GOVERNOR_ROLE on the ledger.
    Unit addresses are derived from the deployer with salts 0, 1, 2.
    """
    settings = settings or get_config()
    deployer = to_address(deployer, field="deployer")
    logger.info("Deployer: %s", deployer)

    token = AssetToken(
        settings.token_name,
        settings.token_symbol,
        deployer,
        settings.token_initial_supply,
        salt=0,
    )
    logger.info("Token: %s", token.address)

    directory = AttestorDirectory(deployer, salt=1)
    logger.info("AttestorDirectory: %s", directory.address)

    if require_registration is None:
        require_registration = settings.require_registration_for_attestation
    ledger = ContributionLedger(token, directory, deployer, salt=2, require_registration=require_registration)
    logger.info("Ledger: %s", ledger.address)

    for attestor in attestors:
        directory.add_attestor(deployer, attestor)
    for governor in governors:
        ledger.grant_role(deployer, GOVERNOR_ROLE, governor)

    return Deployment(deployer=deployer, token=token, directory=directory, ledger=ledger)
