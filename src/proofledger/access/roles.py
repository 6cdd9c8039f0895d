# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Role-based permission sets.

Roles are explicit tagged sets of addresses checked at the entry of each
gated operation. Role ids follow the OpenZeppelin convention:
``keccak256(utf8(name))``, with the admin role being 32 zero bytes.

Rules:
- Only holders of DEFAULT_ADMIN_ROLE grant and revoke roles, the admin
  role included.
- The admin role is never left empty. Revoking or renouncing the last
  admin fails with LastAdminRevocation.
- Grant and revoke are idempotent and emit an event only when membership
  actually changes.
"""

from __future__ import annotations

import logging
import threading

from eth_utils import keccak

from ..core.events import EventKind, EventLog
from ..core.exceptions import LastAdminRevocation, Unauthorized, ValidationException
from ..crypto.addresses import to_address

logger = logging.getLogger(__name__)


def role_id(name: str) -> bytes:
    """Role identifier for a role name."""
    return keccak(text=name)


DEFAULT_ADMIN_ROLE = b"\x00" * 32
GOVERNOR_ROLE = role_id("GOVERNOR_ROLE")
MINTER_ROLE = role_id("MINTER_ROLE")

ROLE_NAMES: dict[bytes, str] = {
    DEFAULT_ADMIN_ROLE: "DEFAULT_ADMIN_ROLE",
    GOVERNOR_ROLE: "GOVERNOR_ROLE",
    MINTER_ROLE: "MINTER_ROLE",
}


def role_name(role: bytes) -> str:
    """Human-readable name for a role id (hex for unknown roles)."""
    return ROLE_NAMES.get(role, "0x" + role.hex())


def _check_role(role: bytes | str) -> bytes:
    if isinstance(role, str):
        # Accept a known name or a hex id
        for rid, name in ROLE_NAMES.items():
            if name == role:
                return rid
        try:
            role = bytes.fromhex(role.removeprefix("0x"))
        except ValueError as exc:
            raise ValidationException(f"Unknown role: {role}", field="role", value=role) from exc
    if not isinstance(role, bytes | bytearray) or len(role) != 32:
        raise ValidationException("Role id must be 32 bytes", field="role", value=role)
    return bytes(role)


class RoleRegistry:
    """Role membership table for one deployed unit.

    Example:
        >>> roles = RoleRegistry(events, admin=deployer)
        >>> roles.grant_role(deployer, GOVERNOR_ROLE, governor)
        >>> roles.require_role(governor, GOVERNOR_ROLE)
    """

    def __init__(self, events: EventLog, admin: str) -> None:
        self._events = events
        # role -> insertion-ordered member set
        self._members: dict[bytes, dict[str, None]] = {}
        self._lock = threading.RLock()
        self._grant(DEFAULT_ADMIN_ROLE, to_address(admin, field="admin"), sender=to_address(admin))

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def has_role(self, role: bytes | str, account: str) -> bool:
        role = _check_role(role)
        with self._lock:
            return to_address(account) in self._members.get(role, {})

    def get_role_members(self, role: bytes | str) -> list[str]:
        role = _check_role(role)
        with self._lock:
            return list(self._members.get(role, {}))

    def get_role_member_count(self, role: bytes | str) -> int:
        return len(self.get_role_members(role))

    def require_role(self, caller: str, role: bytes | str) -> None:
        """Raise Unauthorized unless ``caller`` holds ``role``."""
        role = _check_role(role)
        if not self.has_role(role, caller):
            raise Unauthorized(to_address(caller, field="caller"), role_name(role))

    # ------------------------------------------------------------------
    # Admin operations
    # ------------------------------------------------------------------

    def grant_role(self, caller: str, role: bytes | str, account: str) -> bool:
        """Grant ``role`` to ``account``. Returns True if membership changed."""
        role = _check_role(role)
        account = to_address(account, field="account")
        with self._lock:
            self.require_role(caller, DEFAULT_ADMIN_ROLE)
            return self._grant(role, account, sender=to_address(caller))

    def revoke_role(self, caller: str, role: bytes | str, account: str) -> bool:
        """Revoke ``role`` from ``account``. Returns True if membership changed."""
        role = _check_role(role)
        account = to_address(account, field="account")
        with self._lock:
            self.require_role(caller, DEFAULT_ADMIN_ROLE)
            return self._revoke(role, account, sender=to_address(caller))

    def renounce_role(self, caller: str, role: bytes | str) -> bool:
        """Drop ``role`` from the caller's own account."""
        role = _check_role(role)
        caller = to_address(caller, field="caller")
        with self._lock:
            return self._revoke(role, caller, sender=caller)

    # ------------------------------------------------------------------
    # Internals (caller holds the lock or is the constructor)
    # ------------------------------------------------------------------

    def _grant(self, role: bytes, account: str, sender: str) -> bool:
        members = self._members.setdefault(role, {})
        if account in members:
            return False
        members[account] = None
        logger.info("Role %s granted to %s by %s", role_name(role), account, sender)
        self._events.emit(EventKind.ROLE_GRANTED, role=role, account=account, sender=sender)
        return True

    def _revoke(self, role: bytes, account: str, sender: str) -> bool:
        members = self._members.get(role, {})
        if account not in members:
            return False
        if role == DEFAULT_ADMIN_ROLE and len(members) == 1:
            raise LastAdminRevocation(account)
        del members[account]
        logger.info("Role %s revoked from %s by %s", role_name(role), account, sender)
        self._events.emit(EventKind.ROLE_REVOKED, role=role, account=account, sender=sender)
        return True
