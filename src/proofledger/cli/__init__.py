# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""proofledger CLI - offline attestor tooling."""

from .main import app, main

__all__ = ["main", "app"]
