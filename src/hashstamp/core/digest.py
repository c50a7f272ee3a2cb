"""Hash primitive used by minters and the verifier.

Stamps are hashed with a fixed, publicly known 160-bit digest. SHA-1 is the
hashcash standard; BLAKE3 truncated to 160 bits is available for deployments
that agree on it out-of-band.
"""

from __future__ import annotations

import hashlib
from collections.abc import Callable
from typing import Literal

import blake3

from hashstamp.core.exceptions import InvalidArgumentError

HashAlgorithm = Literal["sha1", "blake3"]
DigestFunction = Callable[[bytes | bytearray], bytes]

DIGEST_BYTES = 20
DIGEST_BITS = DIGEST_BYTES * 8
# Internal block size of SHA-1; padded stamps are aligned to it
BLOCK_BYTES = 64
SUPPORTED_ALGORITHMS: tuple[HashAlgorithm, ...] = ("sha1", "blake3")


def _sha1(data: bytes | bytearray) -> bytes:
    return hashlib.sha1(data).digest()


def _blake3_160(data: bytes | bytearray) -> bytes:
    return blake3.blake3(data).digest(length=DIGEST_BYTES)


_DIGESTS: dict[str, DigestFunction] = {
    "sha1": _sha1,
    "blake3": _blake3_160,
}


def digest_function(algorithm: str = "sha1") -> DigestFunction:
    """Return the digest callable for ``algorithm``.

    Raises:
        InvalidArgumentError: If the algorithm is not supported.
    """
    try:
        return _DIGESTS[algorithm]
    except KeyError:
        raise InvalidArgumentError(
            f"Unsupported hash algorithm: {algorithm}",
            {"supported": ",".join(SUPPORTED_ALGORITHMS)},
        ) from None


def compute_digest(data: bytes | bytearray, algorithm: str = "sha1") -> bytes:
    """Return the 20-byte digest of ``data``."""
    return digest_function(algorithm)(data)
