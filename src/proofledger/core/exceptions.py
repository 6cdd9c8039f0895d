# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Exception hierarchy for proofledger.

Every ledger failure is synchronous and terminal for the call that raised it.
Each exception carries a stable ``code`` so relayers and CLI output can
branch on the error kind without matching message text.
"""

from __future__ import annotations

from typing import Any


class LedgerException(Exception):  # noqa: N818
    """Base exception for all proofledger errors."""

    code = "LedgerError"

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "error": self.__class__.__name__,
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


class ConfigException(LedgerException):
    """Raised when required configuration is missing or invalid."""

    code = "ConfigError"

    def __init__(self, message: str, missing_vars: list[str] | None = None):
        details = {}
        if missing_vars:
            details["missing_vars"] = missing_vars
        super().__init__(message, details)
        self.missing_vars = missing_vars or []


class ValidationException(LedgerException):
    """Raised when an argument is malformed or out of range."""

    code = "ValidationError"

    def __init__(self, message: str, field: str | None = None, value: Any = None):
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = str(value)
        super().__init__(message, details)
        self.field = field
        self.value = value


class InvalidAmount(ValidationException):
    """Amount is zero, negative, or not an integer."""

    code = "InvalidAmount"

    def __init__(self, amount: Any, field: str = "amount"):
        super().__init__(f"Amount must be a positive integer, got {amount!r}", field=field, value=amount)


class InvalidAddress(ValidationException):
    """Value is not a 20-byte address."""

    code = "InvalidAddress"

    def __init__(self, value: Any, field: str = "address"):
        super().__init__(f"Not a valid address: {value!r}", field=field, value=value)


class InvalidSignature(ValidationException):
    """Signature is malformed or no signer can be recovered from it."""

    code = "InvalidSignature"

    def __init__(self, reason: str):
        super().__init__(f"Invalid signature: {reason}", field="signature")


class InvalidSnapshotRoot(ValidationException):
    """Snapshot root is not a non-zero 32-byte digest."""

    code = "InvalidSnapshotRoot"

    def __init__(self, value: Any):
        super().__init__(f"Snapshot root must be a non-zero 32-byte digest, got {value!r}", field="root", value=value)


class Unauthorized(LedgerException):
    """Caller lacks the role required by the operation."""

    code = "Unauthorized"

    def __init__(self, caller: str, role: str):
        super().__init__(f"{caller} is missing role {role}", {"caller": caller, "role": role})
        self.caller = caller
        self.role = role


class LastAdminRevocation(LedgerException):
    """Refused to remove the only remaining holder of the admin role."""

    code = "LastAdminRevocation"

    def __init__(self, account: str):
        super().__init__(f"Cannot remove last admin {account}", {"account": account})
        self.account = account


class AlreadyRegistered(LedgerException):
    code = "AlreadyRegistered"

    def __init__(self, identity: str):
        super().__init__(f"Participant already registered: {identity}", {"identity": identity})
        self.identity = identity


class NotRegistered(LedgerException):
    code = "NotRegistered"

    def __init__(self, identity: str):
        super().__init__(f"Participant not registered: {identity}", {"identity": identity})
        self.identity = identity


class InsufficientStake(LedgerException):
    """Unstake would take a participant's stake below zero."""

    code = "InsufficientStake"

    def __init__(self, identity: str, staked: int, requested: int):
        super().__init__(
            f"{identity} has {staked} staked, cannot unstake {requested}",
            {"identity": identity, "staked": staked, "requested": requested},
        )
        self.identity = identity
        self.staked = staked
        self.requested = requested


class InsufficientAllowance(LedgerException):
    code = "InsufficientAllowance"

    def __init__(self, owner: str, spender: str, allowance: int, requested: int):
        super().__init__(
            f"Allowance of {spender} over {owner} is {allowance}, need {requested}",
            {"owner": owner, "spender": spender, "allowance": allowance, "requested": requested},
        )
        self.allowance = allowance
        self.requested = requested


class InsufficientBalance(LedgerException):
    code = "InsufficientBalance"

    def __init__(self, account: str, balance: int, requested: int):
        super().__init__(
            f"Balance of {account} is {balance}, need {requested}",
            {"account": account, "balance": balance, "requested": requested},
        )
        self.balance = balance
        self.requested = requested


class UnknownAttestor(LedgerException):
    """Recovered signer is not in the attestor directory."""

    code = "UnknownAttestor"

    def __init__(self, signer: str):
        super().__init__(f"Signer is not an authorized attestor: {signer}", {"signer": signer})
        self.signer = signer


class ReplayedNonce(LedgerException):
    """The (user, nonce) pair has already been consumed."""

    code = "ReplayedNonce"

    def __init__(self, user: str, nonce: int):
        super().__init__(f"replay: nonce {nonce} already used for {user}", {"user": user, "nonce": nonce})
        self.user = user
        self.nonce = nonce


class EpochAlreadyCommitted(LedgerException):
    code = "EpochAlreadyCommitted"

    def __init__(self, epoch: int):
        super().__init__(f"Snapshot already committed for epoch {epoch}", {"epoch": epoch})
        self.epoch = epoch


class NoEligibleParticipants(LedgerException):
    """Total stake across registered participants is zero."""

    code = "NoEligibleParticipants"

    def __init__(self, participant_count: int = 0):
        super().__init__(
            "No participant has a non-zero stake",
            {"participant_count": participant_count},
        )
        self.participant_count = participant_count
