"""Attestor directory."""

from .directory import AttestorDirectory

__all__ = ["AttestorDirectory"]
