"""Stake-weighted proposer selection."""

from .selection import (
    WeightedSelector,
    compute_cumulative_weights,
    derive_selection_seed,
    select_weighted,
    selection_probabilities,
)

__all__ = [
    "WeightedSelector",
    "compute_cumulative_weights",
    "derive_selection_seed",
    "select_weighted",
    "selection_probabilities",
]
