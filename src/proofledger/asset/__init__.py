"""Staked asset."""

from .token import AssetToken

__all__ = ["AssetToken"]
