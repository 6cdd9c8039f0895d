"""proofledger core - shared configuration, logging, errors and events."""

from .config import LedgerSettings, clear_config_cache, get_config
from .events import EventKind, EventLog, LedgerEvent
from .exceptions import (
    AlreadyRegistered,
    ConfigException,
    EpochAlreadyCommitted,
    InsufficientAllowance,
    InsufficientBalance,
    InsufficientStake,
    InvalidAddress,
    InvalidAmount,
    InvalidSignature,
    InvalidSnapshotRoot,
    LastAdminRevocation,
    LedgerException,
    NoEligibleParticipants,
    NotRegistered,
    ReplayedNonce,
    Unauthorized,
    UnknownAttestor,
    ValidationException,
)
from .logging import (
    configure_logging,
    correlation_context,
    get_logger,
    log_rejection,
)

__all__ = [
    # Config
    "LedgerSettings",
    "get_config",
    "clear_config_cache",
    # Events
    "EventKind",
    "EventLog",
    "LedgerEvent",
    # Exceptions
    "LedgerException",
    "ConfigException",
    "ValidationException",
    "InvalidAmount",
    "InvalidAddress",
    "InvalidSignature",
    "InvalidSnapshotRoot",
    "Unauthorized",
    "LastAdminRevocation",
    "AlreadyRegistered",
    "NotRegistered",
    "InsufficientStake",
    "InsufficientAllowance",
    "InsufficientBalance",
    "UnknownAttestor",
    "ReplayedNonce",
    "EpochAlreadyCommitted",
    "NoEligibleParticipants",
    # Logging
    "configure_logging",
    "correlation_context",
    "get_logger",
    "log_rejection",
]
