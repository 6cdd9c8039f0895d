"""Global test fixtures for the proofledger test suite."""

from __future__ import annotations

import logging
import os
from collections.abc import Callable

import pytest

from proofledger.core.config import clear_config_cache
from proofledger.core.logging import reset_logging
from proofledger.crypto.addresses import to_address
from proofledger.crypto.signing import AttestorSigner
from proofledger.deploy import Deployment, deploy

# Well-known development keys (hardhat accounts #0 and #1)
ATTESTOR_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
ATTESTOR_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
ROGUE_KEY = "0x59c6995e998f97a5a0044966f0945389dc9e86dae88c7a8412f4603b6b78690d"
ROGUE_ADDRESS = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"


# ============================================================================
# Environment Fixtures
# ============================================================================


@pytest.fixture(autouse=True)
def reset_config():
    """Drop the cached settings before and after every test."""
    clear_config_cache()
    yield
    clear_config_cache()


@pytest.fixture
def clean_env(monkeypatch):
    """Remove all PROOFLEDGER_ environment variables."""
    for key in list(os.environ.keys()):
        if key.startswith("PROOFLEDGER_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture
def restore_root_logger():
    """Remove handlers installed by configure_logging and restore the level."""
    root = logging.getLogger()
    level = root.level
    yield root
    reset_logging()
    root.setLevel(level)


# ============================================================================
# Identities
# ============================================================================


def _addr(byte: int) -> str:
    return to_address("0x" + f"{byte:02x}" * 20)


@pytest.fixture
def deployer() -> str:
    return _addr(0xD0)


@pytest.fixture
def alice() -> str:
    return _addr(0xA1)


@pytest.fixture
def bob() -> str:
    return _addr(0xB0)


@pytest.fixture
def carol() -> str:
    return _addr(0xC0)


@pytest.fixture
def relayer() -> str:
    return _addr(0xEE)


@pytest.fixture
def outsider() -> str:
    return _addr(0x0B)


@pytest.fixture
def attestor() -> AttestorSigner:
    """Signer whose address the deployed directory authorizes."""
    return AttestorSigner.from_hex(ATTESTOR_KEY)


@pytest.fixture
def rogue_signer() -> AttestorSigner:
    """Valid key that is never added to the directory."""
    return AttestorSigner.from_hex(ROGUE_KEY)


# ============================================================================
# Deployed system
# ============================================================================


@pytest.fixture
def system(clean_env, deployer, attestor) -> Deployment:
    """Token, directory and ledger with the deployer as admin and governor."""
    return deploy(deployer, attestors=[attestor.address], governors=[deployer])


@pytest.fixture
def ledger(system):
    return system.ledger


@pytest.fixture
def token(system):
    return system.token


@pytest.fixture
def fund(system, deployer) -> Callable[[str, int], None]:
    """Give ``user`` ``amount`` tokens and approve the ledger to pull them."""

    def _fund(user: str, amount: int) -> None:
        system.token.transfer(deployer, user, amount)
        system.token.approve(user, system.ledger.address, amount)

    return _fund


@pytest.fixture
def sign(attestor, system) -> Callable[..., bytes]:
    """Sign a claim against the deployed ledger with the authorized attestor."""

    def _sign(user: str, amount: int, nonce: int, signer: AttestorSigner | None = None, target: str | None = None):
        signer = signer or attestor
        return signer.sign_attestation(user, amount, nonce, target or system.ledger.address).signature

    return _sign
