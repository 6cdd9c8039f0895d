# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Fungible asset staked into the ledger.

ERC-20 semantics: balances, allowances, ``transfer_from`` spending an
allowance. Minting is gated by MINTER_ROLE, which the deployer holds.
Every operation is checked in full before any balance moves, so a failed
call leaves no trace.
"""

from __future__ import annotations

import logging
import threading

from ..access.roles import MINTER_ROLE, RoleRegistry
from ..core.events import EventKind, EventLog
from ..core.exceptions import InsufficientAllowance, InsufficientBalance, InvalidAmount
from ..crypto.addresses import UINT256_MAX, ZERO_ADDRESS, derive_contract_address, to_address

logger = logging.getLogger(__name__)


def _check_value(amount: int) -> int:
    # Zero-value transfers are valid ERC-20 calls
    if isinstance(amount, bool) or not isinstance(amount, int) or not 0 <= amount <= UINT256_MAX:
        raise InvalidAmount(amount)
    return amount


class AssetToken:
    """In-process ERC-20 style token."""

    def __init__(
        self,
        name: str,
        symbol: str,
        owner: str,
        initial_supply: int = 0,
        *,
        decimals: int = 18,
        address: str | None = None,
        salt: int = 0,
    ) -> None:
        owner = to_address(owner, field="owner")
        self.name = name
        self.symbol = symbol
        self.decimals = decimals
        self.address = to_address(address) if address else derive_contract_address(owner, salt, type(self).__name__)
        self.events = EventLog(self.address)
        self.roles = RoleRegistry(self.events, admin=owner)
        self.roles.grant_role(owner, MINTER_ROLE, owner)
        self._balances: dict[str, int] = {}
        self._allowances: dict[tuple[str, str], int] = {}
        self._total_supply = 0
        self._lock = threading.RLock()
        if initial_supply:
            self._mint(owner, _check_value(initial_supply))

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def total_supply(self) -> int:
        return self._total_supply

    def balance_of(self, account: str) -> int:
        with self._lock:
            return self._balances.get(to_address(account), 0)

    def allowance(self, owner: str, spender: str) -> int:
        with self._lock:
            return self._allowances.get((to_address(owner), to_address(spender)), 0)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def approve(self, caller: str, spender: str, amount: int) -> bool:
        """Set ``spender``'s allowance over the caller's balance."""
        owner = to_address(caller, field="caller")
        spender = to_address(spender, field="spender")
        _check_value(amount)
        with self._lock:
            self._allowances[(owner, spender)] = amount
            self.events.emit(EventKind.APPROVAL, owner=owner, spender=spender, value=amount)
        return True

    def transfer(self, caller: str, recipient: str, amount: int) -> bool:
        sender = to_address(caller, field="caller")
        recipient = to_address(recipient, field="recipient")
        _check_value(amount)
        with self._lock:
            self._move(sender, recipient, amount)
        return True

    def transfer_from(self, caller: str, owner: str, recipient: str, amount: int) -> bool:
        """Move ``amount`` from ``owner`` to ``recipient`` using the caller's allowance.

        Raises:
            InsufficientAllowance: If the caller's allowance is below ``amount``.
            InsufficientBalance: If ``owner`` holds less than ``amount``.
        """
        spender = to_address(caller, field="caller")
        owner = to_address(owner, field="owner")
        recipient = to_address(recipient, field="recipient")
        _check_value(amount)
        with self._lock:
            current = self._allowances.get((owner, spender), 0)
            if current < amount:
                raise InsufficientAllowance(owner, spender, current, amount)
            balance = self._balances.get(owner, 0)
            if balance < amount:
                raise InsufficientBalance(owner, balance, amount)
            # Unlimited approvals are not drawn down
            if current != UINT256_MAX:
                self._allowances[(owner, spender)] = current - amount
            self._move(owner, recipient, amount)
        return True

    def mint(self, caller: str, recipient: str, amount: int) -> None:
        """Create ``amount`` new units for ``recipient``. MINTER_ROLE only."""
        recipient = to_address(recipient, field="recipient")
        _check_value(amount)
        with self._lock:
            self.roles.require_role(caller, MINTER_ROLE)
            self._mint(recipient, amount)

    # ------------------------------------------------------------------
    # Internals (lock held)
    # ------------------------------------------------------------------

    def _move(self, sender: str, recipient: str, amount: int) -> None:
        balance = self._balances.get(sender, 0)
        if balance < amount:
            raise InsufficientBalance(sender, balance, amount)
        self._balances[sender] = balance - amount
        self._balances[recipient] = self._balances.get(recipient, 0) + amount
        self.events.emit(EventKind.TRANSFER, sender=sender, recipient=recipient, value=amount)

    def _mint(self, recipient: str, amount: int) -> None:
        if self._total_supply + amount > UINT256_MAX:
            raise InvalidAmount(amount)
        self._total_supply += amount
        self._balances[recipient] = self._balances.get(recipient, 0) + amount
        logger.debug("Minted %d %s to %s", amount, self.symbol, recipient)
        self.events.emit(EventKind.TRANSFER, sender=ZERO_ADDRESS, recipient=recipient, value=amount)

    def __repr__(self) -> str:
        return f"AssetToken({self.symbol}, address={self.address})"
