"""Exception hierarchy for stamp minting and verification.

All exceptions inherit from HashstampError for easy catching.
"""

from __future__ import annotations

from typing import Any


class HashstampError(Exception):
    """Base exception for all hashstamp errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class InvalidArgumentError(HashstampError, ValueError):
    """Raised when a resource, difficulty or grammar is rejected before searching."""


class SearchExhaustedError(HashstampError):
    """Raised when a search runs out of counter space or budget."""

    @property
    def attempts(self) -> int:
        return int(self.details.get("attempts", 0))


class MalformedStampError(HashstampError, ValueError):
    """Raised when stamp text cannot be parsed."""
