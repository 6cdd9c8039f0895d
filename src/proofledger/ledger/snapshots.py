# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Write-once epoch -> snapshot root store.

The root's contents are computed off-system; the store only guarantees
that each epoch is committed at most once and never overwritten.
"""

from __future__ import annotations

from ..core.exceptions import EpochAlreadyCommitted, InvalidSnapshotRoot, ValidationException
from ..crypto.addresses import UINT256_MAX, ZERO_DIGEST, to_bytes32


def check_epoch(epoch: int) -> int:
    if isinstance(epoch, bool) or not isinstance(epoch, int) or not 0 <= epoch <= UINT256_MAX:
        raise ValidationException("epoch must be a uint256", field="epoch", value=epoch)
    return epoch


class SnapshotStore:
    """Append-only mapping from epoch number to a 32-byte root."""

    def __init__(self) -> None:
        self._roots: dict[int, bytes] = {}

    def commit(self, epoch: int, root: bytes | str) -> bytes:
        """Store ``root`` for ``epoch``.

        Raises:
            InvalidSnapshotRoot: If the root is not a non-zero 32-byte digest.
            EpochAlreadyCommitted: If the epoch already holds a root.
        """
        check_epoch(epoch)
        raw = to_bytes32(root)
        # A zero root is indistinguishable from "uncommitted"
        if raw == ZERO_DIGEST:
            raise InvalidSnapshotRoot(root)
        if self.is_committed(epoch):
            raise EpochAlreadyCommitted(epoch)
        self._roots[epoch] = raw
        return raw

    def root(self, epoch: int) -> bytes:
        """Root for ``epoch``, or 32 zero bytes if uncommitted."""
        return self._roots.get(check_epoch(epoch), ZERO_DIGEST)

    def is_committed(self, epoch: int) -> bool:
        return self._roots.get(epoch, ZERO_DIGEST) != ZERO_DIGEST

    def committed_epochs(self) -> list[int]:
        return sorted(self._roots)

    def latest_epoch(self) -> int | None:
        return max(self._roots) if self._roots else None

    def __len__(self) -> int:
        return len(self._roots)
