"""Stamp verification.

:func:`verify` recomputes the digest of the full stamp text and applies the
exact-prefix difficulty check. Version 1 stamps state their own bit count;
version 0 stamps rely on a count agreed out-of-band: ``bits`` when given,
otherwise the configured ``default_bits``.

:func:`check_stamp` layers resource and minimum-difficulty policy on top.
Date windows and double-spend tracking belong to the caller.
"""

from __future__ import annotations

import logging

from hashstamp.core.codec import Stamp, StampVersion, parse_stamp
from hashstamp.core.digest import compute_digest
from hashstamp.core.exceptions import InvalidArgumentError, MalformedStampError
from hashstamp.core.pow import has_zero_prefix
from hashstamp.core.settings import Settings, settings

logger = logging.getLogger(__name__)


def _encode(stamp: str) -> bytes:
    try:
        return stamp.encode("utf-8")
    except UnicodeEncodeError:
        raise MalformedStampError("Stamp text is not encodable as UTF-8") from None


def required_bits(stamp: Stamp, bits: int | None = None, config: Settings | None = None) -> int:
    """Return the bit count a parsed stamp must satisfy.

    Version 0 stamps fall back to ``default_bits`` when ``bits`` is omitted.
    """
    if stamp.version is StampVersion.V1 and stamp.bits is not None:
        return stamp.bits
    if bits is None:
        return (config or settings).default_bits
    if isinstance(bits, bool) or not isinstance(bits, int) or bits < 0:
        raise InvalidArgumentError("Difficulty must be a non-negative integer", {"bits": bits})
    return bits


def verify(
    stamp: str,
    bits: int | None = None,
    *,
    hash_algorithm: str | None = None,
    strict: bool = False,
    config: Settings | None = None,
) -> bool:
    """Return True if ``stamp`` has as many leading zero bits as it requires.

    Args:
        stamp: Stamp text exactly as received.
        bits: Agreed difficulty for version 0 stamps, defaulting to
            ``default_bits``. Ignored for version 1, whose bits field is
            authoritative.
        hash_algorithm: Digest algorithm; defaults to the configured one.
        strict: Raise :class:`MalformedStampError` instead of returning False
            when the stamp cannot be parsed or encoded.
        config: Settings override for the default bits and algorithm.
    """
    config = config or settings
    try:
        parsed = parse_stamp(stamp)
        needed = required_bits(parsed, bits, config)
        payload = _encode(stamp)
    except MalformedStampError as exc:
        if strict:
            raise
        logger.debug("Rejecting malformed stamp: %s", exc)
        return False

    digest = compute_digest(payload, hash_algorithm or config.hash_algorithm)
    return has_zero_prefix(digest, needed)


def check_stamp(
    stamp: str,
    resource: str | None = None,
    min_bits: int | None = None,
    *,
    bits: int | None = None,
    hash_algorithm: str | None = None,
    config: Settings | None = None,
) -> bool:
    """Verify ``stamp`` and apply resource and minimum-difficulty policy.

    Args:
        stamp: Stamp text exactly as received.
        resource: When given, the stamp's resource field must equal it.
        min_bits: When given, a version 1 stamp must claim at least this many
            bits. For version 0 stamps it doubles as the agreed bit count.
        bits: Agreed difficulty for version 0 stamps.
        hash_algorithm: Digest algorithm; defaults to the configured one.
        config: Settings override, forwarded to :func:`verify`.
    """
    try:
        parsed = parse_stamp(stamp)
    except MalformedStampError as exc:
        logger.debug("Rejecting malformed stamp: %s", exc)
        return False

    if resource is not None and parsed.resource != resource:
        return False
    if parsed.version is StampVersion.V1:
        if min_bits is not None and (parsed.bits or 0) < min_bits:
            return False
    elif bits is None:
        bits = min_bits
    elif min_bits is not None and bits < min_bits:
        return False

    return verify(stamp, bits, hash_algorithm=hash_algorithm, config=config)
