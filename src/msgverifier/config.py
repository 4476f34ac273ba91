"""
Configuration Management for msgverifier
=======================================

This module provides the verifier configuration dataclass, a factory for
building it with overrides, and loading from environment variables.
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union

from .error_handling import ConfigError
from .interfaces import KeyedHash, Serializer
from .security import DEFAULT_DIGEST, RECOMMENDED_SECRET_BYTES

logger = logging.getLogger(__name__)

ENV_PREFIX = "MSGVERIFIER_"


@dataclass
class VerifierConfig:
    """Configuration for a MessageVerifier."""

    secret: Optional[Union[str, bytes]] = field(default=None, repr=False)
    digest: Union[str, KeyedHash] = DEFAULT_DIGEST  # any hashlib name, or a KeyedHash
    serializer: Union[str, Serializer] = "json"  # "json", "pickle", "dill", or a Serializer
    serializer_options: Dict[str, Any] = field(default_factory=dict)
    min_secret_length: int = RECOMMENDED_SECRET_BYTES  # warn below this many bytes

    def __post_init__(self):
        """Validate verifier configuration."""
        if self.min_secret_length < 0:
            raise ConfigError(
                "min_secret_length must be non-negative",
                {"min_secret_length": self.min_secret_length},
            )

        if isinstance(self.digest, str) and not self.digest:
            raise ConfigError("digest must not be empty")

        if isinstance(self.serializer, str) and not self.serializer:
            raise ConfigError("serializer must not be empty")

        logger.debug(
            f"Verifier configured: digest={_describe(self.digest)}, "
            f"serializer={_describe(self.serializer)}, "
            f"secret={'set' if self.secret else 'unset'}"
        )

    @property
    def strict_base64(self) -> bool:
        """Verification always decodes base64 strictly."""
        return True


def _describe(value: Any) -> str:
    if isinstance(value, str):
        return value
    return getattr(value, "name", type(value).__name__)


def create_verifier_config(**overrides) -> VerifierConfig:
    """
    Factory function for creating a configuration with overrides.

    Args:
        **overrides: Values for any VerifierConfig field

    Returns:
        Configured VerifierConfig instance

    Raises:
        ConfigError: If an override does not name a VerifierConfig field
    """
    valid_fields = set(VerifierConfig.__dataclass_fields__)
    unknown = set(overrides) - valid_fields
    if unknown:
        raise ConfigError(
            f"Unknown configuration parameters: {sorted(unknown)}",
            {"valid": sorted(valid_fields)},
        )
    return VerifierConfig(**overrides)


def load_config_from_env(
    prefix: str = ENV_PREFIX, environ: Optional[Dict[str, str]] = None
) -> VerifierConfig:
    """
    Build a configuration from environment variables.

    Reads ``<prefix>SECRET``, ``<prefix>DIGEST``, ``<prefix>SERIALIZER`` and
    ``<prefix>MIN_SECRET_LENGTH``. Unset variables keep their defaults.

    Args:
        prefix: Variable name prefix
        environ: Mapping to read instead of os.environ

    Returns:
        Configured VerifierConfig instance
    """
    env = os.environ if environ is None else environ
    overrides: Dict[str, Any] = {}

    if env.get(f"{prefix}SECRET"):
        overrides["secret"] = env[f"{prefix}SECRET"]
    if env.get(f"{prefix}DIGEST"):
        overrides["digest"] = env[f"{prefix}DIGEST"]
    if env.get(f"{prefix}SERIALIZER"):
        overrides["serializer"] = env[f"{prefix}SERIALIZER"]

    raw_min_length = env.get(f"{prefix}MIN_SECRET_LENGTH")
    if raw_min_length:
        try:
            overrides["min_secret_length"] = int(raw_min_length)
        except ValueError as e:
            raise ConfigError(
                f"{prefix}MIN_SECRET_LENGTH must be an integer",
                {"value": raw_min_length},
            ) from e

    logger.debug(f"Loaded verifier config from environment: {sorted(overrides)}")
    return create_verifier_config(**overrides)
