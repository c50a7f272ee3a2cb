# tests/test_cli.py
"""Tests for the command line entry point."""

import json

from hashstamp.cli import main
from hashstamp.services.verification import verify
from tests.conftest import GOLDEN_STAMP


class TestCli:
    def test_verify_golden(self, capsys):
        """Test verifying the published stamp."""
        assert main(["verify", GOLDEN_STAMP]) == 0
        assert capsys.readouterr().out.strip() == "Passed Verification"

    def test_verify_tampered(self, capsys):
        """Test verifying a stamp with a raised bits field."""
        assert main(["verify", GOLDEN_STAMP.replace(":20:", ":24:")]) == 1
        assert capsys.readouterr().out.strip() == "Failed Verification"

    def test_verify_json_malformed(self, capsys):
        """Test JSON output for a malformed stamp."""
        assert main(["verify", "nonsense", "--json"]) == 1
        payload = json.loads(capsys.readouterr().out)
        assert payload["valid"] is False
        assert payload["error"]

    def test_mint_json(self, capsys):
        """Test minting a Grammar A stamp with JSON output."""
        code = main(["mint", "foo.bar@foobar.com", "--bits", "8", "--grammar", "a", "--seed", "1", "--json"])
        assert code == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["grammar"] == "A"
        assert payload["version"] == 0
        assert payload["attempts"] >= 1
        assert verify(payload["stamp"], bits=8)

    def test_mint_plain(self, capsys):
        """Test minting with plain output."""
        assert main(["mint", "foo", "--bits", "16", "--seed", "3"]) == 0
        assert verify(capsys.readouterr().out.strip())

    def test_mint_invalid_difficulty(self, capsys):
        """Test the error exit for an out-of-range difficulty."""
        assert main(["mint", "foo", "--bits", "40"]) == 2
        assert "between 16 and 32" in capsys.readouterr().err

    def test_mint_budget(self, capsys):
        """Test the error exit when the attempt budget runs out."""
        assert main(["mint", "foo", "--bits", "32", "--max-attempts", "5"]) == 2
        assert "attempt budget exhausted" in capsys.readouterr().err

    def test_bench(self, capsys):
        """Test the benchmark summary."""
        code = main(["bench", "--iterations", "2", "--bits", "6", "--grammar", "A", "--seed", "5"])
        assert code == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["iterations"] == 2
        assert payload["failures"] == 0
        assert payload["mean_attempts"] >= 1
