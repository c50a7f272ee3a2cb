"""Proof-of-work difficulty predicate.

A digest meets a difficulty of ``bits`` when its first ``bits`` bits are zero.
Two formulations are provided and must agree on every input:

* the exact-prefix check compares whole leading bytes against zero and masks
  the remainder bits of the next byte;
* the count check counts leading zero bits and compares with ``>=``.

Minters and the verifier all go through this module.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal

from hashstamp.core.exceptions import InvalidArgumentError

PredicateStrategy = Literal["prefix", "count"]
BITS_PER_BYTE = 8


def _check_bits(bits: int) -> None:
    if isinstance(bits, bool) or not isinstance(bits, int):
        raise InvalidArgumentError("Difficulty must be an integer", {"bits": bits})
    if bits < 0:
        raise InvalidArgumentError("Difficulty must not be negative", {"bits": bits})


@dataclass(frozen=True)
class DifficultyTarget:
    """Precomputed exact-prefix check for a fixed number of zero bits."""

    bits: int
    full_zero_bytes: int = field(init=False)
    remainder_mask: int = field(init=False)

    def __post_init__(self) -> None:
        _check_bits(self.bits)
        remainder_bits = self.bits % BITS_PER_BYTE
        object.__setattr__(self, "full_zero_bytes", self.bits // BITS_PER_BYTE)
        # A shift by 8 would overflow the byte; no remainder means no mask at all
        mask = (0xFF << (BITS_PER_BYTE - remainder_bits)) & 0xFF if remainder_bits else 0
        object.__setattr__(self, "remainder_mask", mask)

    @classmethod
    def from_bits(cls, bits: int) -> DifficultyTarget:
        return cls(bits)

    def matches(self, digest: bytes | bytearray) -> bool:
        """Return True if ``digest`` starts with at least ``bits`` zero bits."""
        full = self.full_zero_bytes
        needed = full + 1 if self.remainder_mask else full
        if len(digest) < needed or any(digest[:full]):
            return False
        return not self.remainder_mask or digest[full] & self.remainder_mask == 0


def has_zero_prefix(digest: bytes | bytearray, bits: int) -> bool:
    """Exact-prefix formulation of the difficulty predicate."""
    return DifficultyTarget(bits).matches(digest)


def count_leading_zero_bits(digest: bytes | bytearray) -> int:
    """Count the number of leading zero bits in a digest.

    Args:
        digest: Digest bytes to analyze

    Returns:
        Number of leading zero bits
    """
    zeros = 0
    for byte in digest:
        if byte == 0:
            zeros += 8
            continue
        # Count bits in first non-zero byte
        for bit in range(7, -1, -1):
            if (byte >> bit) & 1 == 0:
                zeros += 1
            else:
                break  # Found first non-zero bit
        break  # Exit outer loop after processing the first non-zero byte
    return zeros


def meets_difficulty(
    digest: bytes | bytearray,
    bits: int,
    strategy: PredicateStrategy = "prefix",
) -> bool:
    """Return True if ``digest`` has at least ``bits`` leading zero bits.

    Args:
        digest: Digest to test.
        bits: Required number of leading zero bits.
        strategy: ``"prefix"`` for the byte/mask check, ``"count"`` for the
            count-and-compare check.

    Raises:
        InvalidArgumentError: If ``bits`` is negative or the strategy is unknown.
    """
    if strategy == "prefix":
        return has_zero_prefix(digest, bits)
    if strategy == "count":
        _check_bits(bits)
        return count_leading_zero_bits(digest) >= bits
    raise InvalidArgumentError(f"Unsupported predicate strategy: {strategy}")
