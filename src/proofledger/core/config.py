# SPDX-License-Identifier: MIT
# Copyright (c) 2026 Ourochronos Contributors

"""Core configuration - centralized config for the proofledger package.

All environment-based configuration flows through this module.

Usage:
    from proofledger.core.config import get_config
    config = get_config()

    log_level = config.log_level
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from .exceptions import ConfigException

if TYPE_CHECKING:
    from ..crypto.signing import AttestorSigner

# 1,000,000 whole tokens at 18 decimals
DEFAULT_TOKEN_SUPPLY = 1_000_000 * 10**18

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class LedgerSettings(BaseSettings):
    """Configuration settings for proofledger.

    Every setting reads from a ``PROOFLEDGER_`` environment variable, with
    ``.env`` in the working directory as a fallback source.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ==========================================================================
    # LOGGING SETTINGS
    # ==========================================================================

    log_level: str = Field(
        default="INFO",
        description="Log level (DEBUG, INFO, WARNING, ERROR)",
        validation_alias="PROOFLEDGER_LOG_LEVEL",
    )
    log_format: str = Field(
        default="",
        description="Log format: 'json', 'text', or '' (auto-detect)",
        validation_alias="PROOFLEDGER_LOG_FORMAT",
    )
    log_file: str | None = Field(
        default=None,
        description="Log file path (optional)",
        validation_alias="PROOFLEDGER_LOG_FILE",
    )

    # ==========================================================================
    # LEDGER SETTINGS
    # ==========================================================================

    require_registration_for_attestation: bool = Field(
        default=False,
        description="Reject attestations for unregistered users instead of auto-registering them",
        validation_alias="PROOFLEDGER_REQUIRE_REGISTRATION",
    )

    # ==========================================================================
    # ATTESTOR SETTINGS (off-chain signer)
    # ==========================================================================

    attestor_private_key: str | None = Field(
        default=None,
        description="secp256k1 private key hex used by the attestor signer",
        validation_alias="PROOFLEDGER_ATTESTOR_KEY",
    )

    # ==========================================================================
    # ASSET SETTINGS (used by deploy)
    # ==========================================================================

    token_name: str = Field(
        default="PoC Token",
        description="Name of the staked asset",
        validation_alias="PROOFLEDGER_TOKEN_NAME",
    )
    token_symbol: str = Field(
        default="POC",
        description="Symbol of the staked asset",
        validation_alias="PROOFLEDGER_TOKEN_SYMBOL",
    )
    token_initial_supply: int = Field(
        default=DEFAULT_TOKEN_SUPPLY,
        ge=0,
        description="Initial supply minted to the deployer, in base units",
        validation_alias="PROOFLEDGER_TOKEN_SUPPLY",
    )

    @field_validator("log_level", mode="before")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        level = str(value).strip().upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log level must be one of {', '.join(LOG_LEVELS)}")
        return level

    @field_validator("log_format", mode="before")
    @classmethod
    def _normalize_format(cls, value: str) -> str:
        fmt = str(value or "").strip().lower()
        if fmt not in ("", "json", "text"):
            raise ValueError("log format must be 'json', 'text' or empty")
        return fmt

    @field_validator("attestor_private_key", mode="before")
    @classmethod
    def _blank_key_is_none(cls, value: str | None) -> str | None:
        if value is None or not str(value).strip():
            return None
        return str(value).strip()

    # ==========================================================================
    # COMPUTED PROPERTIES
    # ==========================================================================

    @property
    def attestor_key_configured(self) -> bool:
        """Whether an attestor signing key is available."""
        return bool(self.attestor_private_key)

    def attestor_signer(self) -> AttestorSigner:
        """Load the configured attestor key.

        Raises:
            ConfigException: If PROOFLEDGER_ATTESTOR_KEY is not set.
        """
        from ..crypto.signing import AttestorSigner

        if not self.attestor_private_key:
            raise ConfigException(
                "No attestor key: pass --key or set PROOFLEDGER_ATTESTOR_KEY",
                missing_vars=["PROOFLEDGER_ATTESTOR_KEY"],
            )
        return AttestorSigner.from_hex(self.attestor_private_key)


# ==========================================================================
# GLOBAL CONFIG INSTANCE (lazy loaded)
# ==========================================================================

_config: LedgerSettings | None = None


def get_config() -> LedgerSettings:
    """Get the global configuration instance.

    Returns:
        The singleton LedgerSettings instance.
    """
    global _config
    if _config is None:
        _config = LedgerSettings()
    return _config


def clear_config_cache() -> None:
    """Clear the config cache. Useful for testing."""
    global _config
    _config = None
