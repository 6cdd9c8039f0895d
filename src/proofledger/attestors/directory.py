# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Attestor directory - the permissioned set of claim signers.

Deployed as its own unit with its own address and role table. The admin
supplied at construction holds both DEFAULT_ADMIN_ROLE and GOVERNOR_ROLE;
only governors add or remove attestors. Attestors need not be participants.
"""

from __future__ import annotations

import logging
import threading

from ..access.roles import GOVERNOR_ROLE, RoleRegistry
from ..core.events import EventKind, EventLog
from ..crypto.addresses import derive_contract_address, to_address

logger = logging.getLogger(__name__)


class AttestorDirectory:
    """Set of addresses authorized to sign contribution claims."""

    def __init__(self, admin: str, *, address: str | None = None, salt: int = 0) -> None:
        admin = to_address(admin, field="admin")
        self.address = to_address(address) if address else derive_contract_address(admin, salt, type(self).__name__)
        self.events = EventLog(self.address)
        self.roles = RoleRegistry(self.events, admin=admin)
        self.roles.grant_role(admin, GOVERNOR_ROLE, admin)
        self._attestors: dict[str, None] = {}
        self._lock = threading.RLock()

    def add_attestor(self, caller: str, identity: str) -> bool:
        """Authorize ``identity`` as an attestor.

        Idempotent: adding a present attestor is a no-op and emits nothing.

        Returns:
            True if the directory changed.

        Raises:
            Unauthorized: If ``caller`` is not a governor.
        """
        identity = to_address(identity, field="identity")
        with self._lock:
            self.roles.require_role(caller, GOVERNOR_ROLE)
            if identity in self._attestors:
                return False
            self._attestors[identity] = None
            logger.info("Attestor added: %s", identity)
            self.events.emit(EventKind.ATTESTOR_ADDED, attestor=identity, sender=to_address(caller))
            return True

    def remove_attestor(self, caller: str, identity: str) -> bool:
        """Revoke ``identity``'s attestor status. Idempotent like add_attestor."""
        identity = to_address(identity, field="identity")
        with self._lock:
            self.roles.require_role(caller, GOVERNOR_ROLE)
            if identity not in self._attestors:
                return False
            del self._attestors[identity]
            logger.info("Attestor removed: %s", identity)
            self.events.emit(EventKind.ATTESTOR_REMOVED, attestor=identity, sender=to_address(caller))
            return True

    def is_attestor(self, identity: str) -> bool:
        with self._lock:
            return to_address(identity, field="identity") in self._attestors

    def attestors(self) -> list[str]:
        """Current attestors in the order they were added."""
        with self._lock:
            return list(self._attestors)

    def __len__(self) -> int:
        return len(self._attestors)

    def __repr__(self) -> str:
        return f"AttestorDirectory(address={self.address}, attestors={len(self)})"
