"""Tests for proofledger.core.config - LedgerSettings and global config management.

Tests cover:
- Settings loading with defaults
- Environment variable overrides
- Singleton behavior (get_config / clear_config_cache)
"""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from proofledger.core.config import (
    DEFAULT_TOKEN_SUPPLY,
    LedgerSettings,
    clear_config_cache,
    get_config,
)
from proofledger.core.exceptions import ConfigException

ATTESTOR_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"
ATTESTOR_ADDRESS = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"

# ============================================================================
# LedgerSettings - Default Values
# ============================================================================


class TestLedgerSettingsDefaults:
    """Test that LedgerSettings loads with correct default values."""

    def test_logging_defaults(self, clean_env):
        """Test logging settings have correct defaults."""
        settings = LedgerSettings()

        assert settings.log_level == "INFO"
        assert settings.log_format == ""
        assert settings.log_file is None

    def test_ledger_defaults(self, clean_env):
        """Attestations auto-register by default."""
        settings = LedgerSettings()

        assert settings.require_registration_for_attestation is False

    def test_attestor_defaults(self, clean_env):
        settings = LedgerSettings()

        assert settings.attestor_private_key is None
        assert settings.attestor_key_configured is False

    def test_asset_defaults(self, clean_env):
        """Test asset settings have correct defaults."""
        settings = LedgerSettings()

        assert settings.token_name == "PoC Token"
        assert settings.token_symbol == "POC"
        assert settings.token_initial_supply == DEFAULT_TOKEN_SUPPLY == 10**24


# ============================================================================
# LedgerSettings - Environment Overrides
# ============================================================================


class TestLedgerSettingsEnvOverrides:
    """Test that environment variables override defaults."""

    def test_logging_overrides(self, clean_env, monkeypatch):
        monkeypatch.setenv("PROOFLEDGER_LOG_LEVEL", "DEBUG")
        monkeypatch.setenv("PROOFLEDGER_LOG_FORMAT", "json")
        monkeypatch.setenv("PROOFLEDGER_LOG_FILE", "/tmp/proofledger.log")

        settings = LedgerSettings()

        assert settings.log_level == "DEBUG"
        assert settings.log_format == "json"
        assert settings.log_file == "/tmp/proofledger.log"

    def test_require_registration_override(self, clean_env, monkeypatch):
        """Boolean env values are parsed."""
        monkeypatch.setenv("PROOFLEDGER_REQUIRE_REGISTRATION", "true")

        assert LedgerSettings().require_registration_for_attestation is True

    def test_attestor_key_override(self, clean_env, monkeypatch):
        monkeypatch.setenv("PROOFLEDGER_ATTESTOR_KEY", "0xabc")

        settings = LedgerSettings()

        assert settings.attestor_private_key == "0xabc"
        assert settings.attestor_key_configured is True

    def test_token_overrides(self, clean_env, monkeypatch):
        monkeypatch.setenv("PROOFLEDGER_TOKEN_NAME", "Test Token")
        monkeypatch.setenv("PROOFLEDGER_TOKEN_SYMBOL", "TST")
        monkeypatch.setenv("PROOFLEDGER_TOKEN_SUPPLY", "5000")

        settings = LedgerSettings()

        assert settings.token_name == "Test Token"
        assert settings.token_symbol == "TST"
        assert settings.token_initial_supply == 5000

    def test_negative_supply_rejected(self, clean_env, monkeypatch):
        """Test that a negative supply fails validation."""
        monkeypatch.setenv("PROOFLEDGER_TOKEN_SUPPLY", "-1")

        with pytest.raises(ValidationError):
            LedgerSettings()


# ============================================================================
# Singleton Behavior
# ============================================================================


class TestConfigSingleton:
    """Test get_config / clear_config_cache."""

    def test_get_config_returns_same_instance(self, clean_env):
        assert get_config() is get_config()

    def test_clear_config_cache_reloads(self, clean_env, monkeypatch):
        """Test that clearing the cache picks up new environment values."""
        first = get_config()
        assert first.token_symbol == "POC"

        monkeypatch.setenv("PROOFLEDGER_TOKEN_SYMBOL", "NEW")
        assert get_config().token_symbol == "POC"

        clear_config_cache()
        second = get_config()

        assert second is not first
        assert second.token_symbol == "NEW"


# ============================================================================
# Validation
# ============================================================================


class TestLedgerSettingsValidation:
    """Test value normalization and rejection."""

    def test_log_level_normalized(self, clean_env, monkeypatch):
        monkeypatch.setenv("PROOFLEDGER_LOG_LEVEL", " debug ")
        assert LedgerSettings().log_level == "DEBUG"

    def test_unknown_log_level(self, clean_env, monkeypatch):
        monkeypatch.setenv("PROOFLEDGER_LOG_LEVEL", "VERBOSE")
        with pytest.raises(ValidationError):
            LedgerSettings()

    def test_log_format_normalized(self, clean_env, monkeypatch):
        monkeypatch.setenv("PROOFLEDGER_LOG_FORMAT", "JSON")
        assert LedgerSettings().log_format == "json"

    def test_unknown_log_format(self, clean_env, monkeypatch):
        monkeypatch.setenv("PROOFLEDGER_LOG_FORMAT", "xml")
        with pytest.raises(ValidationError):
            LedgerSettings()

    def test_blank_attestor_key(self, clean_env, monkeypatch):
        monkeypatch.setenv("PROOFLEDGER_ATTESTOR_KEY", "   ")
        assert LedgerSettings().attestor_private_key is None


class TestAttestorSigner:
    """Test loading the attestor key from settings."""

    def test_loads_signer(self, clean_env, monkeypatch):
        monkeypatch.setenv("PROOFLEDGER_ATTESTOR_KEY", ATTESTOR_KEY)
        assert LedgerSettings().attestor_signer().address == ATTESTOR_ADDRESS

    def test_missing_key(self, clean_env):
        with pytest.raises(ConfigException) as exc_info:
            LedgerSettings().attestor_signer()
        assert exc_info.value.missing_vars == ["PROOFLEDGER_ATTESTOR_KEY"]
