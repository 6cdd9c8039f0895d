"""Tests for proofledger.ledger.snapshots - the write-once root store."""

from __future__ import annotations

import pytest

from proofledger.core.exceptions import EpochAlreadyCommitted, InvalidSnapshotRoot, ValidationException
from proofledger.crypto.addresses import UINT256_MAX, ZERO_DIGEST
from proofledger.ledger.snapshots import SnapshotStore, check_epoch

ROOT = b"\x42" * 32


class TestSnapshotStore:
    """Test commit and read semantics."""

    def test_uncommitted_reads_zero(self):
        store = SnapshotStore()
        assert store.root(1) == ZERO_DIGEST
        assert not store.is_committed(1)
        assert store.latest_epoch() is None

    def test_commit_and_read(self):
        store = SnapshotStore()
        assert store.commit(1, ROOT) == ROOT
        assert store.root(1) == ROOT
        assert store.is_committed(1)

    def test_hex_root(self):
        store = SnapshotStore()
        store.commit(0, "0x" + ROOT.hex())
        assert store.root(0) == ROOT

    def test_write_once(self):
        store = SnapshotStore()
        store.commit(1, ROOT)
        with pytest.raises(EpochAlreadyCommitted):
            store.commit(1, b"\x43" * 32)
        assert store.root(1) == ROOT

    def test_zero_root_rejected(self):
        store = SnapshotStore()
        with pytest.raises(InvalidSnapshotRoot):
            store.commit(1, ZERO_DIGEST)
        assert not store.is_committed(1)

    def test_wrong_length_rejected(self):
        with pytest.raises(InvalidSnapshotRoot):
            SnapshotStore().commit(1, b"\x01" * 16)

    def test_epochs_need_not_be_contiguous(self):
        store = SnapshotStore()
        for epoch in (5, 1, 100):
            store.commit(epoch, ROOT)
        assert store.committed_epochs() == [1, 5, 100]
        assert store.latest_epoch() == 100
        assert len(store) == 3
        assert store.root(2) == ZERO_DIGEST


class TestCheckEpoch:
    def test_bounds(self):
        assert check_epoch(0) == 0
        assert check_epoch(UINT256_MAX) == UINT256_MAX

    @pytest.mark.parametrize("epoch", [-1, UINT256_MAX + 1, "1", True])
    def test_rejects(self, epoch):
        with pytest.raises(ValidationException):
            check_epoch(epoch)
