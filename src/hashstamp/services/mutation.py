"""Randomized mutation search (Grammar B).

The stamp prefix is copied into a buffer padded to a whole number of SHA-1
blocks. Each attempt overwrites one random byte after the prefix with a random
alphabet symbol and hashes the whole buffer. Writes accumulate: a byte changed
in one attempt stays changed in the next unless overwritten again.

Version 1 stamps also end with ``:counter``, the attempt index written in the
same alphabet. The counter is rewritten before every mutation and the
mutable range shrinks to stop just before its separator.
"""

from __future__ import annotations

import logging
import random
from datetime import datetime

from hashstamp.core.alphabet import FIELD_DELIMITER, StampAlphabet, default_alphabet
from hashstamp.core.codec import DatePrecision, StampVersion, build_prefix, format_stamp_date
from hashstamp.core.digest import BLOCK_BYTES, digest_function
from hashstamp.core.exceptions import SearchExhaustedError
from hashstamp.core.pow import count_leading_zero_bits
from hashstamp.core.search import SearchBudget, SearchResult

logger = logging.getLogger(__name__)


def padded_length(prefix_length: int, minimum_random: int) -> int:
    """Round ``prefix_length + minimum_random`` up to the next block boundary."""
    unpadded = prefix_length + minimum_random
    remainder = unpadded % BLOCK_BYTES
    if remainder:
        return unpadded + BLOCK_BYTES - remainder
    return unpadded


class MutationEngine:
    """Cumulative random-walk search over a padded stamp buffer."""

    def __init__(
        self,
        alphabet: StampAlphabet = default_alphabet,
        minimum_random: int = 16,
        hash_algorithm: str = "sha1",
        date_precision: DatePrecision = DatePrecision.DAY,
    ) -> None:
        self.alphabet = alphabet
        self.minimum_random = minimum_random
        self.hash_algorithm = hash_algorithm
        self.date_precision = date_precision
        self._digest = digest_function(hash_algorithm)

    def blank_stamp(self, prefix: bytes, rng: random.Random) -> bytearray:
        """Return ``prefix`` followed by random alphabet filler."""
        length = padded_length(len(prefix), self.minimum_random)
        buffer = bytearray(prefix)
        buffer += self.alphabet.random_text(rng, length - len(prefix))
        return buffer

    def search(
        self,
        resource: str,
        bits: int,
        timestamp: datetime,
        *,
        version: StampVersion = StampVersion.V1,
        rng: random.Random | None = None,
        budget: SearchBudget | None = None,
    ) -> SearchResult:
        """Mutate the padding until the digest has at least ``bits`` zero bits.

        Raises:
            SearchExhaustedError: If the budget runs out or the counter suffix
                leaves no mutable bytes.
        """
        rng = rng or random.Random()
        date_text = format_stamp_date(timestamp, self.date_precision)
        prefix = build_prefix(version, resource, date_text, bits).encode("utf-8")
        stamp = self.blank_stamp(prefix, rng)
        return self.search_buffer(stamp, len(prefix), bits, version=version, rng=rng, budget=budget)

    def search_buffer(
        self,
        stamp: bytearray,
        prefix_length: int,
        bits: int,
        *,
        version: StampVersion = StampVersion.V1,
        rng: random.Random,
        budget: SearchBudget | None = None,
    ) -> SearchResult:
        """Run the mutation loop on ``stamp`` in place, leaving the prefix untouched."""
        alphabet = self.alphabet
        digest = self._digest
        tracker = (budget or SearchBudget()).start()
        with_counter = StampVersion(version) is StampVersion.V1
        lower = prefix_length
        upper = len(stamp)
        logger.debug(
            "Mutation search started: version=%s bits=%d buffer=%d",
            int(version),
            bits,
            len(stamp),
        )

        attempts = 0
        while True:
            tracker.check(attempts)
            if with_counter:
                digits = alphabet.encode_counter(attempts)
                tail = len(stamp) - len(digits)
                stamp[tail:] = digits
                upper = tail - 1
                if upper <= lower:
                    logger.warning("Mutation search ran out of mutable bytes")
                    raise SearchExhaustedError(
                        "Counter suffix leaves no mutable bytes",
                        {"reason": "buffer exhausted", "attempts": attempts},
                    )
                stamp[upper] = FIELD_DELIMITER

            position = rng.randrange(lower, upper)
            stamp[position] = alphabet.random_symbol(rng)

            attempts += 1
            if count_leading_zero_bits(digest(stamp)) >= bits:
                logger.debug("Mutation search finished after %d attempts", attempts)
                return SearchResult(stamp.decode("utf-8"), attempts)
