"""Tests for proofledger.asset.token - the staked asset."""

from __future__ import annotations

import pytest

from proofledger.access.roles import MINTER_ROLE
from proofledger.asset.token import AssetToken
from proofledger.core.events import EventKind
from proofledger.core.exceptions import (
    InsufficientAllowance,
    InsufficientBalance,
    InvalidAmount,
    Unauthorized,
)
from proofledger.crypto.addresses import UINT256_MAX, ZERO_ADDRESS


@pytest.fixture
def asset(deployer):
    return AssetToken("PoC Token", "POC", deployer, 1_000)


class TestConstruction:
    def test_metadata(self, asset):
        assert asset.name == "PoC Token"
        assert asset.symbol == "POC"
        assert asset.decimals == 18

    def test_initial_supply_minted_to_owner(self, asset, deployer):
        assert asset.total_supply() == 1_000
        assert asset.balance_of(deployer) == 1_000
        mint = asset.events.last(EventKind.TRANSFER)
        assert mint.args == {"sender": ZERO_ADDRESS, "recipient": deployer, "value": 1_000}

    def test_owner_roles(self, asset, deployer):
        assert asset.roles.has_role(MINTER_ROLE, deployer)
        assert len(asset.events.events(EventKind.ROLE_GRANTED)) == 2

    def test_zero_supply_emits_no_transfer(self, deployer):
        asset = AssetToken("T", "T", deployer)
        assert asset.total_supply() == 0
        assert asset.events.events(EventKind.TRANSFER) == []


class TestTransfer:
    def test_transfer(self, asset, deployer, alice):
        assert asset.transfer(deployer, alice, 300) is True
        assert asset.balance_of(deployer) == 700
        assert asset.balance_of(alice) == 300
        assert asset.events.last(EventKind.TRANSFER).args["value"] == 300

    def test_insufficient_balance(self, asset, alice, bob):
        with pytest.raises(InsufficientBalance) as exc_info:
            asset.transfer(alice, bob, 1)
        assert exc_info.value.balance == 0

    def test_zero_transfer_allowed(self, asset, alice, bob):
        assert asset.transfer(alice, bob, 0) is True

    @pytest.mark.parametrize("amount", [-1, UINT256_MAX + 1, 1.0, True])
    def test_bad_amount(self, asset, deployer, alice, amount):
        with pytest.raises(InvalidAmount):
            asset.transfer(deployer, alice, amount)


class TestAllowance:
    """Test approve / transfer_from."""

    def test_approve(self, asset, deployer, alice):
        asset.approve(deployer, alice, 250)
        assert asset.allowance(deployer, alice) == 250
        assert asset.events.last(EventKind.APPROVAL).args == {"owner": deployer, "spender": alice, "value": 250}

    def test_transfer_from_spends_allowance(self, asset, deployer, alice, bob):
        asset.approve(deployer, alice, 250)

        asset.transfer_from(alice, deployer, bob, 100)

        assert asset.allowance(deployer, alice) == 150
        assert asset.balance_of(bob) == 100
        assert asset.balance_of(deployer) == 900

    def test_allowance_checked_first(self, asset, deployer, alice, bob):
        asset.approve(deployer, alice, 10)
        with pytest.raises(InsufficientAllowance) as exc_info:
            asset.transfer_from(alice, deployer, bob, 11)
        assert exc_info.value.allowance == 10
        assert asset.balance_of(deployer) == 1_000

    def test_balance_checked_after_allowance(self, asset, alice, bob, carol):
        asset.approve(alice, bob, 50)
        with pytest.raises(InsufficientBalance):
            asset.transfer_from(bob, alice, carol, 50)
        # Failed call leaves the allowance untouched
        assert asset.allowance(alice, bob) == 50

    def test_unlimited_allowance_not_decremented(self, asset, deployer, alice, bob):
        asset.approve(deployer, alice, UINT256_MAX)
        asset.transfer_from(alice, deployer, bob, 400)
        assert asset.allowance(deployer, alice) == UINT256_MAX


class TestMint:
    def test_mint(self, asset, deployer, alice):
        asset.mint(deployer, alice, 500)
        assert asset.balance_of(alice) == 500
        assert asset.total_supply() == 1_500

    def test_mint_requires_minter(self, asset, alice):
        with pytest.raises(Unauthorized):
            asset.mint(alice, alice, 500)
        assert asset.total_supply() == 1_000

    def test_supply_overflow(self, asset, deployer, alice):
        with pytest.raises(InvalidAmount):
            asset.mint(deployer, alice, UINT256_MAX)
