"""hashstamp: hashcash proof-of-work stamps.

Mint a stamp bound to a resource and date, then verify it cheaply::

    from hashstamp import Grammar, mint, verify

    stamp = mint("foo.bar@foobar.com", 20, grammar=Grammar.B)
    assert verify(stamp)
"""

__version__ = "0.1.0"

from hashstamp.core.exceptions import (
    HashstampError,
    InvalidArgumentError,
    MalformedStampError,
    SearchExhaustedError,
)
from hashstamp.core.search import SearchBudget, SearchResult
from hashstamp.services import Grammar, Minter, check_stamp, mint, verify

__all__ = [
    "Grammar",
    "Minter",
    "SearchBudget",
    "SearchResult",
    "mint",
    "verify",
    "check_stamp",
    # Errors
    "HashstampError",
    "InvalidArgumentError",
    "MalformedStampError",
    "SearchExhaustedError",
]
