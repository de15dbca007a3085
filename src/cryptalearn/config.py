"""
CryptaLearn HE configuration.

This module handles environment variables and engine defaults.
"""

from typing import Literal

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings

from .errors import ConfigValidationError


class HESettings(BaseSettings):
    """Defaults for the Paillier engine."""

    key_bits: int = Field(
        default=2048,
        ge=16,
        description="Modulus size in bits for generated key pairs",
    )
    primality_rounds: int = Field(
        default=20,
        ge=1,
        description="Miller-Rabin rounds used when testing prime candidates",
    )
    batch_workers: int = Field(
        default=4,
        ge=1,
        description="Number of workers used by parallel batch operations",
    )
    batch_executor: Literal["thread", "process"] = Field(
        default="thread",
        description="Pool type for parallel batch operations",
    )
    rotation_period_seconds: float = Field(
        default=86400.0,
        gt=0,
        description="Seconds a key pair stays active before rotation is due",
    )
    encoding_scale: int = Field(
        default=2**16,
        ge=1,
        description="Fixed-point scale applied when encoding real values",
    )

    model_config = {
        "env_prefix": "CRYPTALEARN_HE_",
        "env_file": ".env",
        "extra": "ignore",
    }


def get_settings(**overrides) -> HESettings:
    """
    Get HE configuration.

    Explicit keyword overrides take precedence over environment variables.
    Unknown keys are ignored.

    Raises:
        ConfigValidationError: If an override (or the environment) holds an invalid value
    """
    valid_fields = set(HESettings.model_fields.keys())
    updates = {k: v for k, v in overrides.items() if k in valid_fields and v is not None}

    try:
        # Init kwargs win over environment values
        settings = HESettings(**updates)
    except ValidationError as e:
        first = e.errors()[0]
        config_key = ".".join(str(part) for part in first.get("loc", ())) or "settings"
        raise ConfigValidationError(config_key, first.get("msg", "invalid value")) from e

    return settings


__all__ = ["HESettings", "get_settings"]
