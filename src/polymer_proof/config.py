#!/usr/bin/env python3
"""Configuration management for polymer-proof.

This module provides a type-safe, immutable configuration dataclass for the
proof orchestrator. Configuration is loaded from environment variables (and an
optional .env file) with the same defaults the proof API documents.
"""

import dataclasses
import logging
import os
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlparse

from dotenv import load_dotenv

from .exceptions import ConfigurationError
from .models import PollPolicy

# Get logger for this module
logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://proof.testnet.polymer.zone"


@dataclass(frozen=True, slots=True)
class ProofConfig:
    """Configuration for the proof orchestrator.

    Attributes:
        api_key: Bearer credential for the proof API (required)
        api_url: JSON-RPC endpoint of the proof API
        max_attempts: Default number of status queries per wait
        interval: Default delay between status queries in milliseconds
        timeout: Per-request HTTP timeout in milliseconds
        debug: Emit debug logging for requests and polling. This lowers the
            process-wide "polymer_proof" logger to DEBUG and is not undone
            by later instances built with debug=False
    """

    api_key: str
    api_url: str = DEFAULT_API_URL
    max_attempts: int = 20
    interval: int = 3000
    timeout: int = 60000
    debug: bool = False

    def __post_init__(self) -> None:
        """Validate configuration."""
        if not self.api_key:
            raise ConfigurationError("Polymer API key is required (POLYMER_API_KEY)")

        parsed = urlparse(self.api_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise ConfigurationError(
                f"Invalid API URL: {self.api_url!r}. Expected an http or https URL"
            )

        for name in ("max_attempts", "interval", "timeout"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ConfigurationError(f"{name} must be an integer, got {value!r}")

        if self.max_attempts < 1:
            raise ConfigurationError(f"max_attempts must be at least 1, got {self.max_attempts}")
        if self.interval < 0:
            raise ConfigurationError(f"interval must be non-negative, got {self.interval}")
        if self.timeout <= 0:
            raise ConfigurationError(f"timeout must be positive, got {self.timeout}")

    @classmethod
    def from_env(cls, env_file: str | os.PathLike[str] | None = None) -> "ProofConfig":
        """Load configuration from environment variables.

        Variables already present in the environment win over the .env file.

        Args:
            env_file: Optional path to a .env file (defaults to searching for one)

        Returns:
            ProofConfig instance with loaded values

        Raises:
            ConfigurationError: If the API key is missing or a value is invalid
        """
        load_dotenv(env_file)

        api_key = os.environ.get("POLYMER_API_KEY", "")
        if not api_key:
            raise ConfigurationError(
                "POLYMER_API_KEY environment variable is required. "
                "Request one from the Polymer dashboard."
            )

        return cls(
            api_key=api_key,
            api_url=os.environ.get("POLYMER_API_URL", DEFAULT_API_URL),
            max_attempts=_env_int("POLYMER_MAX_ATTEMPTS", 20),
            interval=_env_int("POLYMER_INTERVAL", 3000),
            timeout=_env_int("POLYMER_TIMEOUT", 60000),
            debug=os.environ.get("POLYMER_DEBUG", "false").strip().lower() in ("1", "true", "yes", "on"),
        )

    @property
    def timeout_seconds(self) -> float:
        return self.timeout / 1000

    def with_overrides(self, **changes: Any) -> "ProofConfig":
        """Create a new config with some fields replaced.

        Since the config is frozen, overrides always produce a new,
        re-validated instance.
        """
        return dataclasses.replace(self, **changes)

    def poll_policy(self, max_attempts: int | None = None, interval: int | None = None) -> PollPolicy:
        """Resolve a poll policy from per-call overrides, falling back to config defaults."""
        return PollPolicy(
            max_attempts=self.max_attempts if max_attempts is None else max_attempts,
            interval_ms=self.interval if interval is None else interval,
        )

    def log_config(self) -> None:
        """Log the configuration in a readable format for debugging."""
        logger.info("=" * 60)
        logger.info("Polymer Proof Configuration")
        logger.info("=" * 60)
        logger.info(f"  API URL: {self.api_url}")
        logger.info(f"  API Key: {'[SET]' if self.api_key else '[NOT SET]'}")
        logger.info(f"  Max Attempts: {self.max_attempts}")
        logger.info(f"  Interval: {self.interval} ms")
        logger.info(f"  Timeout: {self.timeout} ms")
        logger.info(f"  Debug: {self.debug}")
        logger.info("=" * 60)

    def __repr__(self) -> str:
        return (
            f"ProofConfig(api_url={self.api_url!r}, api_key='***', "
            f"max_attempts={self.max_attempts}, interval={self.interval}, "
            f"timeout={self.timeout}, debug={self.debug})"
        )


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from None
