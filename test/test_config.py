#!/usr/bin/env python3
"""Tests for the configuration module."""

import dataclasses
import logging
import os
from unittest.mock import patch

import pytest

from polymer_proof.config import DEFAULT_API_URL, ProofConfig
from polymer_proof.exceptions import ConfigurationError, InvalidArgument
from polymer_proof.models import PollPolicy

API_KEY = "test-api-key-1234"


class TestProofConfig:
    """Tests for ProofConfig."""

    def test_defaults(self):
        """Test the documented defaults."""
        config = ProofConfig(api_key=API_KEY)

        assert config.api_url == DEFAULT_API_URL == "https://proof.testnet.polymer.zone"
        assert config.max_attempts == 20
        assert config.interval == 3000
        assert config.timeout == 60000
        assert config.timeout_seconds == 60.0
        assert config.debug is False

    def test_missing_api_key(self):
        """Test that a missing API key fails at construction time."""
        with pytest.raises(ConfigurationError, match="API key is required"):
            ProofConfig(api_key="")

    def test_configuration_error_is_value_error(self):
        with pytest.raises(ValueError):
            ProofConfig(api_key="")

    @pytest.mark.parametrize("url", ["ftp://proof.polymer.zone", "proof.polymer.zone", "https://"])
    def test_invalid_api_url(self, url):
        """Test that non-http URLs are rejected."""
        with pytest.raises(ConfigurationError, match="Invalid API URL"):
            ProofConfig(api_key=API_KEY, api_url=url)

    @pytest.mark.parametrize(
        "field,value,message",
        [
            ("max_attempts", 0, "max_attempts"),
            ("interval", -1, "interval"),
            ("timeout", 0, "timeout"),
        ],
    )
    def test_invalid_numbers(self, field, value, message):
        with pytest.raises(ConfigurationError, match=message):
            ProofConfig(api_key=API_KEY, **{field: value})

    @pytest.mark.parametrize(
        "field,value",
        [
            ("interval", "3000"),
            ("max_attempts", 2.5),
            ("timeout", None),
            ("max_attempts", True),
        ],
    )
    def test_non_integer_numbers(self, field, value):
        """Test wrongly typed numbers raise ConfigurationError, not TypeError."""
        with pytest.raises(ConfigurationError, match=f"{field} must be an integer"):
            ProofConfig(api_key=API_KEY, **{field: value})

    def test_frozen(self):
        """Test the config cannot be mutated."""
        config = ProofConfig(api_key=API_KEY)
        with pytest.raises(dataclasses.FrozenInstanceError):
            config.max_attempts = 5

    def test_with_overrides(self):
        """Test overrides produce a new validated config."""
        config = ProofConfig(api_key=API_KEY)
        updated = config.with_overrides(max_attempts=5, debug=True)

        assert updated.max_attempts == 5
        assert updated.debug is True
        assert config.max_attempts == 20

        with pytest.raises(ConfigurationError):
            config.with_overrides(api_key="")

    def test_poll_policy_defaults(self):
        config = ProofConfig(api_key=API_KEY, max_attempts=7, interval=250)
        assert config.poll_policy() == PollPolicy(max_attempts=7, interval_ms=250)

    def test_poll_policy_overrides(self):
        """Test per-call overrides win over config defaults, including zero interval."""
        config = ProofConfig(api_key=API_KEY)
        assert config.poll_policy(max_attempts=3, interval=0) == PollPolicy(max_attempts=3, interval_ms=0)

    def test_poll_policy_invalid_override(self):
        config = ProofConfig(api_key=API_KEY)
        with pytest.raises(InvalidArgument):
            config.poll_policy(max_attempts=0)

    def test_repr_masks_api_key(self):
        config = ProofConfig(api_key=API_KEY)
        assert API_KEY not in repr(config)

    def test_log_config(self, caplog):
        """Test log_config logs settings without the API key."""
        config = ProofConfig(api_key=API_KEY)
        with caplog.at_level(logging.INFO, logger="polymer_proof.config"):
            config.log_config()

        assert "Max Attempts: 20" in caplog.text
        assert "[SET]" in caplog.text
        assert API_KEY not in caplog.text


class TestProofConfigFromEnv:
    """Tests for loading configuration from the environment."""

    @patch("polymer_proof.config.load_dotenv")
    def test_from_env_minimal(self, mock_load_dotenv):
        """Test loading with only the API key set."""
        with patch.dict(os.environ, {"POLYMER_API_KEY": API_KEY}, clear=True):
            config = ProofConfig.from_env()

        mock_load_dotenv.assert_called_once_with(None)
        assert config.api_key == API_KEY
        assert config.api_url == DEFAULT_API_URL
        assert config.max_attempts == 20
        assert config.interval == 3000

    @patch("polymer_proof.config.load_dotenv")
    def test_from_env_full(self, mock_load_dotenv):
        """Test loading every supported variable."""
        env = {
            "POLYMER_API_KEY": API_KEY,
            "POLYMER_API_URL": "https://proof.mainnet.polymer.zone",
            "POLYMER_MAX_ATTEMPTS": "15",
            "POLYMER_INTERVAL": "4000",
            "POLYMER_TIMEOUT": "30000",
            "POLYMER_DEBUG": "true",
        }
        with patch.dict(os.environ, env, clear=True):
            config = ProofConfig.from_env(env_file=".env.test")

        mock_load_dotenv.assert_called_once_with(".env.test")
        assert config.api_url == "https://proof.mainnet.polymer.zone"
        assert config.max_attempts == 15
        assert config.interval == 4000
        assert config.timeout == 30000
        assert config.debug is True

    @patch("polymer_proof.config.load_dotenv")
    def test_from_env_missing_key(self, mock_load_dotenv):
        with patch.dict(os.environ, {}, clear=True):
            with pytest.raises(ConfigurationError, match="POLYMER_API_KEY"):
                ProofConfig.from_env()

    @patch("polymer_proof.config.load_dotenv")
    def test_from_env_non_integer(self, mock_load_dotenv):
        env = {"POLYMER_API_KEY": API_KEY, "POLYMER_MAX_ATTEMPTS": "lots"}
        with patch.dict(os.environ, env, clear=True):
            with pytest.raises(ConfigurationError, match="POLYMER_MAX_ATTEMPTS"):
                ProofConfig.from_env()

    @patch("polymer_proof.config.load_dotenv")
    def test_from_env_blank_values_use_defaults(self, mock_load_dotenv):
        env = {"POLYMER_API_KEY": API_KEY, "POLYMER_INTERVAL": " ", "POLYMER_DEBUG": "0"}
        with patch.dict(os.environ, env, clear=True):
            config = ProofConfig.from_env()

        assert config.interval == 3000
        assert config.debug is False
