"""Hashstamp settings and configuration.

Settings are loaded from ``HASHSTAMP_*`` environment variables (or an ``.env``
file) with defaults matching the classic hashcash parameters.
"""

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Minting and verification settings loaded from environment variables.

    Settings can be overridden via environment variables or .env files, or by
    passing an explicit instance to the minter and verifier.
    """

    # Difficulty (leading zero bits required)
    default_bits: int = Field(default=20, ge=0, alias="HASHSTAMP_DEFAULT_BITS")
    min_bits: int = Field(default=16, ge=0, alias="HASHSTAMP_MIN_BITS")
    max_bits: int = Field(default=32, ge=0, alias="HASHSTAMP_MAX_BITS")

    # Stamp layout
    minimum_random: int = Field(default=16, ge=1, alias="HASHSTAMP_MINIMUM_RANDOM")
    salt_length: int = Field(default=8, ge=1, alias="HASHSTAMP_SALT_LENGTH")
    counter_width_bits: int = Field(default=32, alias="HASHSTAMP_COUNTER_WIDTH_BITS")
    hash_algorithm: str = Field(default="sha1", alias="HASHSTAMP_HASH_ALGORITHM")

    # Search budget; unset means unbounded
    max_attempts: int | None = Field(default=None, ge=1, alias="HASHSTAMP_MAX_ATTEMPTS")
    timeout_seconds: float | None = Field(default=None, gt=0, alias="HASHSTAMP_TIMEOUT_SECONDS")

    log_level: str = Field(default="WARNING", alias="HASHSTAMP_LOG_LEVEL")

    model_config = SettingsConfigDict(
        env_file=".env",
        validate_assignment=True,
        populate_by_name=True,
        extra="ignore",
    )

    @model_validator(mode="after")
    def _check_ranges(self) -> "Settings":
        if self.min_bits > self.max_bits:
            raise ValueError("HASHSTAMP_MIN_BITS must not exceed HASHSTAMP_MAX_BITS")
        if self.counter_width_bits <= 0 or self.counter_width_bits % 8:
            raise ValueError("HASHSTAMP_COUNTER_WIDTH_BITS must be a positive multiple of 8")
        return self

    @property
    def bits_range(self) -> tuple[int, int]:
        """Return the accepted Grammar B difficulty range as ``(min, max)``."""
        return self.min_bits, self.max_bits


settings = Settings()
