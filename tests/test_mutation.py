# tests/test_mutation.py
"""Tests for the randomized mutation search (Grammar B)."""

import random

import pytest

from hashstamp.core.alphabet import DEFAULT_SYMBOLS, default_alphabet
from hashstamp.core.codec import StampVersion, parse_stamp
from hashstamp.core.exceptions import SearchExhaustedError
from hashstamp.core.search import SearchBudget
from hashstamp.services.mutation import MutationEngine, padded_length
from hashstamp.services.verification import verify
from tests.conftest import FIXED_TIME


class RecordingRandom(random.Random):
    """Random source that remembers every mutable-range request."""

    def __init__(self, seed: int) -> None:
        super().__init__(seed)
        self.ranges: list[tuple[int, int]] = []

    def randrange(self, start, stop=None, step=1):
        if stop is not None:
            self.ranges.append((start, stop))
        return super().randrange(start, stop, step)


class TestPaddedLength:
    def test_rounds_up_to_block(self):
        """Test rounding up to whole 64-byte blocks."""
        assert padded_length(10, 16) == 64
        assert padded_length(48, 16) == 64
        assert padded_length(49, 16) == 128

    def test_blank_stamp_is_printable(self):
        """Test that blank stamp padding is drawn from the alphabet."""
        engine = MutationEngine()
        buffer = engine.blank_stamp(b"1:20:130303:foo::", random.Random(1))
        assert len(buffer) == 64
        assert buffer.startswith(b"1:20:130303:foo::")
        assert set(buffer[17:]) <= set(DEFAULT_SYMBOLS)


class TestMutationEngine:
    def test_stamp_verifies(self):
        """Test that a found stamp verifies and fills whole blocks."""
        engine = MutationEngine()
        result = engine.search("foo.bar@foobar.com", 12, FIXED_TIME, rng=random.Random(2))

        assert verify(result.stamp)
        assert len(result.stamp) % 64 == 0

    def test_version_1_layout(self):
        """Test the version 1 field layout of a Grammar B stamp."""
        engine = MutationEngine()
        result = engine.search("foo.bar@foobar.com", 10, FIXED_TIME, rng=random.Random(8))
        stamp = parse_stamp(result.stamp)

        assert stamp.version is StampVersion.V1
        assert stamp.bits == 10
        assert stamp.date == "130303"
        assert stamp.extension == ""
        assert set(stamp.rand.encode("ascii")) <= set(DEFAULT_SYMBOLS)

    def test_counter_field_holds_last_attempt_index(self):
        """Test that the counter suffix encodes the final attempt index."""
        engine = MutationEngine()
        result = engine.search("foo", 10, FIXED_TIME, rng=random.Random(21))
        counter = parse_stamp(result.stamp).counter.encode("ascii")
        assert default_alphabet.decode_counter(counter) == result.attempts - 1

    def test_prefix_is_never_mutated(self):
        """Test that mutations stay between the prefix and the counter."""
        engine = MutationEngine()
        rng = RecordingRandom(13)
        prefix = "1:10:130303:foo.bar@foobar.com::"
        result = engine.search("foo.bar@foobar.com", 10, FIXED_TIME, rng=rng)

        assert result.stamp.startswith(prefix)
        assert len(rng.ranges) == result.attempts
        assert all(lower == len(prefix) for lower, _ in rng.ranges)
        # Each mutable range stops before the counter separator
        counter_start = len(result.stamp) - len(parse_stamp(result.stamp).counter)
        assert rng.ranges[-1][1] == counter_start - 1

    def test_mutation_is_cumulative(self):
        """Test that replaying the random choices reproduces the buffer."""
        engine = MutationEngine()
        prefix = b"0:130303:foo:"
        blank = engine.blank_stamp(prefix, random.Random(99))
        working = bytearray(blank)

        with pytest.raises(SearchExhaustedError):
            engine.search_buffer(
                working,
                len(prefix),
                160,
                version=StampVersion.V0,
                rng=random.Random(5),
                budget=SearchBudget(max_attempts=200),
            )

        replay = random.Random(5)
        expected = bytearray(blank)
        for _ in range(200):
            position = replay.randrange(len(prefix), len(expected))
            expected[position] = default_alphabet.random_symbol(replay)
        assert working == expected
        assert working[: len(prefix)] == prefix

    def test_version_0_has_no_counter(self):
        """Test that version 0 stamps carry no counter field."""
        engine = MutationEngine()
        result = engine.search(
            "foo",
            10,
            FIXED_TIME,
            version=StampVersion.V0,
            rng=random.Random(6),
        )
        stamp = parse_stamp(result.stamp)
        assert stamp.version is StampVersion.V0
        assert stamp.counter == ""
        assert verify(result.stamp, bits=10)

    def test_counter_suffix_can_exhaust_buffer(self):
        """Test exhaustion when the counter leaves no mutable byte."""
        engine = MutationEngine(minimum_random=1)
        prefix = b"1:32:130303:" + b"r" * 46 + b"::"
        stamp = engine.blank_stamp(prefix, random.Random(0))
        assert len(stamp) == 64

        with pytest.raises(SearchExhaustedError) as excinfo:
            engine.search_buffer(stamp, len(prefix), 160, rng=random.Random(0))
        assert excinfo.value.details["reason"] == "buffer exhausted"

    def test_cancel_stops_search(self):
        """Test that a set cancel signal stops the search."""

        class Cancelled:
            def is_set(self) -> bool:
                return True

        engine = MutationEngine()
        with pytest.raises(SearchExhaustedError) as excinfo:
            engine.search(
                "foo",
                32,
                FIXED_TIME,
                rng=random.Random(0),
                budget=SearchBudget(cancel=Cancelled()),
            )
        assert excinfo.value.details["reason"] == "search cancelled"
        assert excinfo.value.attempts == 0
