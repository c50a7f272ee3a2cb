"""Schemas for reporting minted and verified stamps."""
from __future__ import annotations

from pydantic import BaseModel, Field


class MintOut(BaseModel):
    """Result of minting a single stamp."""

    stamp: str
    resource: str
    bits: int = Field(ge=0)
    grammar: str
    version: int
    attempts: int = Field(ge=1)


class VerifyOut(BaseModel):
    """Result of verifying a stamp."""

    stamp: str
    valid: bool
    version: int | None = None
    claimed_bits: int | None = None
    resource: str | None = None
    error: str | None = None


class BenchOut(BaseModel):
    """Summary of a benchmark run."""

    grammar: str
    bits: int
    iterations: int
    failures: int = 0
    mean_attempts: float
    mean_milliseconds: float
