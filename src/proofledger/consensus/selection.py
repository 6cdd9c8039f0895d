# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Stake-weighted proposer selection.

Closed-form cumulative-sum lottery:

1. Walk registered participants in registration order.
2. Each participant's weight is its current stake.
3. ``total`` is the sum of weights; zero total means nobody is eligible.
4. ``target = randomness mod total``.
5. Return the first participant whose running sum strictly exceeds ``target``.

Properties:
- Deterministic: same stake table + same randomness -> same proposer.
- Proportional: over uniform randomness, P(selected) = stake / total.
- Zero-stake participants never occupy any interval, so are never chosen.
- One linear scan, no sorting, no library shuffle.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from fractions import Fraction

from eth_utils import keccak

from ..core.exceptions import NoEligibleParticipants, ValidationException
from ..crypto.addresses import UINT256_MAX, to_bytes32

logger = logging.getLogger(__name__)

# Domain separator for epoch seed derivation
DOMAIN_SEPARATOR_SELECTION_SEED = b"proofledger-selection-seed-v1"

StakeTable = Sequence[tuple[str, int]]


# =============================================================================
# WEIGHTS
# =============================================================================


def compute_cumulative_weights(entries: StakeTable) -> list[tuple[str, int, int]]:
    """Running totals over a stake table.

    Returns:
        (identity, weight, cumulative) per entry, in input order.
    """
    running = 0
    result = []
    for identity, weight in entries:
        if weight < 0:
            raise ValidationException("stake weight cannot be negative", field="weight", value=weight)
        running += weight
        result.append((identity, weight, running))
    return result


def selection_probabilities(entries: StakeTable) -> dict[str, Fraction]:
    """Exact selection probability per identity (zero for zero stake).

    Raises:
        NoEligibleParticipants: If total stake is zero.
    """
    total = sum(weight for _, weight in entries)
    if total == 0:
        raise NoEligibleParticipants(len(entries))
    return {identity: Fraction(weight, total) for identity, weight in entries}


# =============================================================================
# SELECTION
# =============================================================================


def select_weighted(entries: StakeTable, randomness: int) -> str:
    """Pick one identity with probability proportional to its weight.

    Args:
        entries: (identity, weight) pairs in the fixed enumeration order.
        randomness: Externally supplied uint256.

    Returns:
        The selected identity.

    Raises:
        ValidationException: If randomness is not a uint256.
        NoEligibleParticipants: If the total weight is zero.
    """
    if isinstance(randomness, bool) or not isinstance(randomness, int) or not 0 <= randomness <= UINT256_MAX:
        raise ValidationException("randomness must be a uint256", field="randomness", value=randomness)

    cumulative = compute_cumulative_weights(entries)
    total = cumulative[-1][2] if cumulative else 0
    if total == 0:
        raise NoEligibleParticipants(len(entries))

    # target < total, the last running sum, so some entry always matches
    target = randomness % total
    return next(identity for identity, _weight, running in cumulative if running > target)


# =============================================================================
# EPOCH SEED DERIVATION
# =============================================================================


def derive_selection_seed(snapshot_root: bytes | str, epoch: int) -> int:
    """Derive selection randomness from a committed snapshot root.

    ``keccak256(separator ++ root ++ uint256(epoch))`` read as a big-endian
    integer.
    """
    root = to_bytes32(snapshot_root)
    if not 0 <= epoch <= UINT256_MAX:
        raise ValidationException("epoch must be a uint256", field="epoch", value=epoch)
    digest = keccak(DOMAIN_SEPARATOR_SELECTION_SEED + root + epoch.to_bytes(32, "big"))
    return int.from_bytes(digest, "big")


# =============================================================================
# SELECTOR CLASS
# =============================================================================


class WeightedSelector:
    """Selector bound to a live stake table.

    ``source`` returns the current (identity, stake) pairs in registration
    order. The ledger passes a callable that reads its table under its own
    lock, so each selection sees one consistent snapshot.

    Example:
        >>> selector = WeightedSelector(lambda: [("A", 100), ("B", 200), ("C", 0)])
        >>> selector.select(12345)
        'A'
    """

    def __init__(self, source: Callable[[], StakeTable]) -> None:
        self._source = source

    def select(self, randomness: int) -> str:
        entries = self._source()
        proposer = select_weighted(entries, randomness)
        logger.debug("Selected proposer %s from %d participants", proposer, len(entries))
        return proposer

    def probabilities(self) -> dict[str, Fraction]:
        return selection_probabilities(self._source())
