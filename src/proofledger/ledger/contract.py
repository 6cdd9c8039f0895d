# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""The contribution ledger aggregate.

Owns every piece of mutable ledger state: participant records, consumed
nonces, snapshot roots and the role table. Callers only reach that state
through the operations below, each of which runs under a single writer
lock and is all-or-nothing. Every check that can fail runs before the first
mutation. The one external call that can fail after a mutation, returning
stake on unstake, is rolled back. Events go out only after the operation's
state is complete, and a failing event subscriber cannot undo it.

Attestation flow (``submit_attestation``):

    digest(user, amount, nonce, self.address)
      -> recover signer
      -> signer in AttestorDirectory?        else UnknownAttestor
      -> (user, nonce) unused?               else ReplayedNonce
      -> consume (user, nonce)
      -> credit amount to user's score

The nonce is consumed before the score moves, and both happen inside the
lock, so no caller ever observes one without the other.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Generator
from contextlib import contextmanager

from ..access.roles import DEFAULT_ADMIN_ROLE, GOVERNOR_ROLE, RoleRegistry
from ..asset.token import AssetToken
from ..attestors.directory import AttestorDirectory
from ..consensus.selection import WeightedSelector, derive_selection_seed
from ..core.config import get_config
from ..core.events import EventKind, EventLog
from ..core.exceptions import (
    InvalidAmount,
    LedgerException,
    NotRegistered,
    UnknownAttestor,
    ValidationException,
)
from ..core.logging import log_rejection, redact_signature
from ..crypto.addresses import UINT256_MAX, ZERO_DIGEST, derive_contract_address, to_address
from ..crypto.signing import attestation_digest, recover_signer
from .participants import ParticipantLedger, ParticipantView, ReplayGuard, check_positive
from .snapshots import SnapshotStore, check_epoch

logger = logging.getLogger(__name__)


class ContributionLedger:
    """Stake registry, attestation verifier and snapshot store in one unit.

    Args:
        asset: Token participants stake.
        directory: Attestor directory consulted on every attestation.
        admin: Seeded holder of DEFAULT_ADMIN_ROLE.
        address: Explicit ledger address. Derived from ``admin`` and
            ``salt`` when omitted.
        salt: Salt for address derivation.
        require_registration: If True, attestations for unregistered users
            fail with NotRegistered. If False, the first credit registers
            the user with zero stake. Defaults to the
            ``PROOFLEDGER_REQUIRE_REGISTRATION`` setting.
    """

    def __init__(
        self,
        asset: AssetToken,
        directory: AttestorDirectory,
        admin: str,
        *,
        address: str | None = None,
        salt: int = 0,
        require_registration: bool | None = None,
    ) -> None:
        admin = to_address(admin, field="admin")
        self.asset = asset
        self.directory = directory
        self.address = to_address(address) if address else derive_contract_address(admin, salt, type(self).__name__)
        self.events = EventLog(self.address)
        self.roles = RoleRegistry(self.events, admin=admin)
        if require_registration is None:
            require_registration = get_config().require_registration_for_attestation
        self.require_registration = require_registration

        self._participants = ParticipantLedger()
        self._nonces = ReplayGuard()
        self._snapshots = SnapshotStore()
        self._lock = threading.RLock()
        self._selector = WeightedSelector(self._stake_table)

        logger.info(
            "Ledger %s deployed (asset=%s, directory=%s, require_registration=%s)",
            self.address,
            asset.address,
            directory.address,
            require_registration,
        )

    @contextmanager
    def _operation(self, name: str) -> Generator[None, None, None]:
        """Serialize an operation and log its rejection, if any."""
        with self._lock:
            try:
                yield
            except LedgerException as exc:
                log_rejection(logger, name, exc)
                raise

    # ------------------------------------------------------------------
    # Roles
    # ------------------------------------------------------------------

    def grant_role(self, caller: str, role: bytes | str, account: str) -> bool:
        with self._operation("grant_role"):
            return self.roles.grant_role(caller, role, account)

    def revoke_role(self, caller: str, role: bytes | str, account: str) -> bool:
        with self._operation("revoke_role"):
            return self.roles.revoke_role(caller, role, account)

    def renounce_role(self, caller: str, role: bytes | str) -> bool:
        with self._operation("renounce_role"):
            return self.roles.renounce_role(caller, role)

    def has_role(self, role: bytes | str, account: str) -> bool:
        return self.roles.has_role(role, account)

    def get_role_members(self, role: bytes | str) -> list[str]:
        return self.roles.get_role_members(role)

    # ------------------------------------------------------------------
    # Participants
    # ------------------------------------------------------------------

    def register(self, caller: str) -> ParticipantView:
        """Register the caller with zero stake and zero score.

        Raises:
            AlreadyRegistered: On a second call by the same identity.
        """
        with self._operation("register"):
            caller = to_address(caller, field="caller")
            view = self._participants.register(caller)
            logger.info("Participant registered: %s", caller)
            self.events.emit(EventKind.PARTICIPANT_REGISTERED, participant=caller)
            return view

    def stake(self, caller: str, amount: int) -> ParticipantView:
        """Move ``amount`` of the asset from the caller into ledger custody.

        The caller must have approved the ledger's address for at least
        ``amount`` on the asset.

        Raises:
            NotRegistered: If the caller never registered.
            InvalidAmount: If ``amount`` is not positive.
            InsufficientAllowance: If the approval is too small.
            InsufficientBalance: If the caller holds too little.
        """
        with self._operation("stake"):
            caller = to_address(caller, field="caller")
            if not self._participants.is_registered(caller):
                raise NotRegistered(caller)
            check_positive(amount)
            self.asset.transfer_from(self.address, caller, self.address, amount)
            staked = self._participants.add_stake(caller, amount)
            logger.info("Staked %d for %s (total %d)", amount, caller, staked)
            self.events.emit(EventKind.STAKED, participant=caller, amount=amount, staked=staked)
            return self._participants.get(caller)

    def unstake(self, caller: str, amount: int) -> ParticipantView:
        """Return ``amount`` of the caller's stake to the caller.

        Raises:
            NotRegistered: If the caller never registered.
            InvalidAmount: If ``amount`` is not positive.
            InsufficientStake: If ``amount`` exceeds the current stake.
        """
        with self._operation("unstake"):
            caller = to_address(caller, field="caller")
            staked = self._participants.remove_stake(caller, amount)
            try:
                self.asset.transfer(self.address, caller, amount)
            except LedgerException:
                self._participants.add_stake(caller, amount)
                raise
            logger.info("Unstaked %d for %s (total %d)", amount, caller, staked)
            self.events.emit(EventKind.UNSTAKED, participant=caller, amount=amount, staked=staked)
            return self._participants.get(caller)

    def participants(self, identity: str) -> ParticipantView:
        """Read a participant record. Unknown identities read as all-zero."""
        with self._lock:
            return self._participants.get(to_address(identity, field="identity"))

    def registered_participants(self) -> list[str]:
        """Registered identities in registration order."""
        with self._lock:
            return self._participants.identities()

    def total_staked(self) -> int:
        with self._lock:
            return self._participants.total_staked()

    # ------------------------------------------------------------------
    # Attestations
    # ------------------------------------------------------------------

    def attestation_digest(self, user: str, amount: int, nonce: int) -> bytes:
        """The digest an attestor must sign for a claim against this ledger."""
        return attestation_digest(user, amount, nonce, self.address)

    def submit_attestation(
        self,
        caller: str,
        user: str,
        amount: int,
        nonce: int,
        signature: bytes | str,
    ) -> ParticipantView:
        """Apply a signed contribution claim. Any caller may relay it.

        Returns:
            The subject's record after crediting.

        Raises:
            InvalidAmount: If ``amount`` is not positive.
            InvalidSignature: If no signer can be recovered.
            UnknownAttestor: If the signer is not an authorized attestor.
            ReplayedNonce: If (user, nonce) was already applied.
            NotRegistered: If ``user`` is unregistered and registration is required.
        """
        with self._operation("submit_attestation"):
            caller = to_address(caller, field="caller")
            user = to_address(user, field="user")
            check_positive(amount)
            digest = attestation_digest(user, amount, nonce, self.address)
            signer = recover_signer(digest, signature)
            logger.debug(
                "Attestation from %s via %s: user=%s nonce=%d sig=%s",
                signer,
                caller,
                user,
                nonce,
                redact_signature(signature),
            )

            if not self.directory.is_attestor(signer):
                raise UnknownAttestor(signer)
            self._nonces.check(user, nonce)

            current = self._participants.get(user)
            if not current.registered and self.require_registration:
                raise NotRegistered(user)
            if current.contribution_score + amount > UINT256_MAX:
                raise InvalidAmount(amount)

            self._nonces.consume(user, nonce)
            if not current.registered:
                self._participants.register(user)
            score = self._credit_contribution(user, amount)

            if not current.registered:
                logger.info("Participant auto-registered by attestation: %s", user)
                self.events.emit(EventKind.PARTICIPANT_REGISTERED, participant=user)

            logger.info("Attestation applied: %s +%d (score %d, nonce %d)", user, amount, score, nonce)
            self.events.emit(
                EventKind.ATTESTATION_SUBMITTED,
                user=user,
                amount=amount,
                nonce=nonce,
                attestor=signer,
                relayer=caller,
            )
            return self._participants.get(user)

    def _credit_contribution(self, user: str, amount: int) -> int:
        # Only reachable from submit_attestation, lock held
        return self._participants.credit_contribution(user, amount)

    def is_nonce_used(self, user: str, nonce: int) -> bool:
        with self._lock:
            return self._nonces.is_consumed(to_address(user, field="user"), nonce)

    def is_attestor(self, identity: str) -> bool:
        return self.directory.is_attestor(identity)

    # ------------------------------------------------------------------
    # Snapshots
    # ------------------------------------------------------------------

    def commit_snapshot(self, caller: str, epoch: int, root: bytes | str) -> bytes:
        """Commit the snapshot root for ``epoch``. Governors only, once per epoch.

        Raises:
            Unauthorized: If the caller lacks GOVERNOR_ROLE.
            EpochAlreadyCommitted: If the epoch already has a root.
            InvalidSnapshotRoot: If ``root`` is not a non-zero 32-byte digest.
        """
        with self._operation("commit_snapshot"):
            self.roles.require_role(caller, GOVERNOR_ROLE)
            stored = self._snapshots.commit(epoch, root)
            logger.info("Snapshot committed for epoch %d: 0x%s", epoch, stored.hex())
            self.events.emit(EventKind.SNAPSHOT_COMMITTED, epoch=epoch, root=stored, sender=to_address(caller))
            return stored

    def snapshot_root(self, epoch: int) -> bytes:
        """Root for ``epoch``; 32 zero bytes when uncommitted."""
        with self._lock:
            return self._snapshots.root(epoch)

    def committed_epochs(self) -> list[int]:
        with self._lock:
            return self._snapshots.committed_epochs()

    # ------------------------------------------------------------------
    # Proposer selection
    # ------------------------------------------------------------------

    def _stake_table(self) -> list[tuple[str, int]]:
        with self._lock:
            return self._participants.stake_table()

    def select_proposer_with_random(self, randomness: int) -> str:
        """Pick a registered participant with probability proportional to stake.

        Raises:
            NoEligibleParticipants: If no participant has stake.
        """
        with self._operation("select_proposer"):
            return self._selector.select(randomness)

    def select_proposer_for_epoch(self, epoch: int) -> str:
        """Select using randomness derived from the epoch's committed root."""
        with self._operation("select_proposer"):
            check_epoch(epoch)
            root = self._snapshots.root(epoch)
            if root == ZERO_DIGEST:
                raise ValidationException(f"No snapshot committed for epoch {epoch}", field="epoch", value=epoch)
            return self._selector.select(derive_selection_seed(root, epoch))

    def __repr__(self) -> str:
        admins = len(self.roles.get_role_members(DEFAULT_ADMIN_ROLE))
        return f"ContributionLedger(address={self.address}, participants={len(self._participants)}, admins={admins})"
