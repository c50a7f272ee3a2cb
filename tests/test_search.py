# tests/test_search.py
"""Tests for search budgets and cancellation."""

import random
import threading

import pytest

from hashstamp.core.exceptions import SearchExhaustedError
from hashstamp.core.search import BudgetTracker, SearchBudget
from hashstamp.services.minting import Grammar, Minter
from tests.conftest import FIXED_TIME


class TestBudgetTracker:
    def test_unbounded_never_stops(self):
        """Test that an empty budget never stops a search."""
        tracker = SearchBudget().start()
        for attempts in range(5000):
            tracker.check(attempts)

    def test_attempt_limit(self):
        """Test the attempt ceiling."""
        tracker = SearchBudget(max_attempts=3).start()
        tracker.check(2)
        with pytest.raises(SearchExhaustedError) as excinfo:
            tracker.check(3)
        assert excinfo.value.attempts == 3
        assert "attempts=3" in str(excinfo.value)

    def test_event_cancellation(self):
        """Test cancellation through a threading event."""
        cancel = threading.Event()
        tracker = SearchBudget(cancel=cancel).start()
        tracker.check(0)
        cancel.set()
        with pytest.raises(SearchExhaustedError, match="search cancelled"):
            tracker.check(BudgetTracker.CLOCK_INTERVAL)

    def test_deadline(self, monkeypatch):
        """Test that a timeout stops a hopeless search."""
        monkeypatch.setattr(BudgetTracker, "CLOCK_INTERVAL", 1)
        minter = Minter(rng=random.Random(0))
        with pytest.raises(SearchExhaustedError) as excinfo:
            minter.mint("foo", 32, FIXED_TIME, Grammar.B, budget=SearchBudget(timeout=0.05))
        assert excinfo.value.details["reason"] == "deadline reached"
