"""Stamp search engines, minting and verification."""

from .minting import Grammar, Minter, mint
from .mutation import MutationEngine
from .sequential import SequentialEngine
from .verification import check_stamp, verify

__all__ = [
    "Grammar",
    "Minter",
    "MutationEngine",
    "SequentialEngine",
    "check_stamp",
    "mint",
    "verify",
]
