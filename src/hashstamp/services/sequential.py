"""Sequential counter search (Grammar A).

A signed fixed-width counter is scanned from the smallest representable value
upwards. Each value is converted to little-endian bytes, base-64 encoded into
the last stamp field and hashed. Running past the largest value is fatal for
the call; the counter never wraps.
"""

from __future__ import annotations

import base64
import logging
import random
import string
from datetime import datetime

from hashstamp.core.codec import (
    DELIMITER,
    DatePrecision,
    StampVersion,
    build_prefix,
    counter_bounds,
    encode_counter,
    encode_counter_bytes,
    format_stamp_date,
)
from hashstamp.core.digest import digest_function
from hashstamp.core.exceptions import SearchExhaustedError
from hashstamp.core.pow import DifficultyTarget
from hashstamp.core.search import SearchBudget, SearchResult

logger = logging.getLogger(__name__)

SALT_SYMBOLS = string.ascii_uppercase + string.ascii_lowercase + string.digits


class SequentialEngine:
    """Monotonic counter scan over a fixed stamp prefix.

    Version 0 stamps carry ``base64(salt + counter)`` as their last field.
    Version 1 stamps carry ``base64(salt)`` and ``base64(counter)`` as separate
    ``rand`` and ``counter`` fields.
    """

    def __init__(
        self,
        width_bits: int = 32,
        salt_length: int = 8,
        hash_algorithm: str = "sha1",
        date_precision: DatePrecision = DatePrecision.SECOND,
    ) -> None:
        self.width_bits = width_bits
        self.salt_length = salt_length
        self.hash_algorithm = hash_algorithm
        self.date_precision = date_precision
        self._digest = digest_function(hash_algorithm)

    @property
    def counter_range(self) -> tuple[int, int]:
        return counter_bounds(self.width_bits)

    def random_salt(self, rng: random.Random) -> bytes:
        return "".join(rng.choice(SALT_SYMBOLS) for _ in range(self.salt_length)).encode("ascii")

    def search(
        self,
        resource: str,
        bits: int,
        timestamp: datetime,
        *,
        version: StampVersion = StampVersion.V0,
        rng: random.Random | None = None,
        budget: SearchBudget | None = None,
    ) -> SearchResult:
        """Scan the counter space until the stamp digest has ``bits`` zero bits.

        Raises:
            SearchExhaustedError: If every counter value fails or the budget
                runs out.
        """
        version = StampVersion(version)
        rng = rng or random.Random()
        salt = self.random_salt(rng)
        date_text = format_stamp_date(timestamp, self.date_precision)
        prefix = build_prefix(version, resource, date_text, bits).encode("utf-8")
        if version is StampVersion.V1:
            prefix += base64.b64encode(salt) + DELIMITER.encode("ascii")

        target = DifficultyTarget(bits)
        digest = self._digest
        width = self.width_bits
        tracker = (budget or SearchBudget()).start()
        low, high = self.counter_range
        logger.debug("Sequential search started: version=%s bits=%d", int(version), bits)

        attempts = 0
        for counter in range(low, high + 1):
            tracker.check(attempts)
            if version is StampVersion.V0:
                candidate = prefix + base64.b64encode(salt + encode_counter_bytes(counter, width))
            else:
                candidate = prefix + encode_counter(counter, width).encode("ascii")
            attempts += 1
            if target.matches(digest(candidate)):
                logger.debug("Sequential search finished after %d attempts", attempts)
                return SearchResult(candidate.decode("utf-8"), attempts)

        logger.warning("Sequential search exhausted %d counter values", attempts)
        raise SearchExhaustedError(
            "Failed to find solution",
            {"reason": "counter space exhausted", "attempts": attempts},
        )
