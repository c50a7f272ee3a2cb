"""Symbol alphabet shared by random fill and counter encoding.

The mutation engine draws filler bytes from this alphabet and writes its
attempt counter in the same symbols, so both uses go through one mapping.
"""
from __future__ import annotations

import random

from hashstamp.core.exceptions import InvalidArgumentError

DEFAULT_SYMBOLS = b"0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ+/="
FIELD_DELIMITER = ord(":")


class StampAlphabet:
    """Injective mapping between ``0..N-1`` and printable ASCII symbols."""

    def __init__(self, symbols: bytes = DEFAULT_SYMBOLS) -> None:
        if len(symbols) < 2:
            raise InvalidArgumentError("Alphabet needs at least two symbols")
        if len(set(symbols)) != len(symbols):
            raise InvalidArgumentError("Alphabet symbols must be unique")
        if FIELD_DELIMITER in symbols:
            raise InvalidArgumentError("Alphabet must not contain the field delimiter")
        if not symbols.isascii():
            raise InvalidArgumentError("Alphabet symbols must be ASCII")
        self._symbols = bytes(symbols)
        self._indexes = {symbol: index for index, symbol in enumerate(self._symbols)}

    def __len__(self) -> int:
        return len(self._symbols)

    def __contains__(self, symbol: int) -> bool:
        return symbol in self._indexes

    @property
    def symbols(self) -> bytes:
        return self._symbols

    def symbol(self, index: int) -> int:
        """Return the symbol byte for ``index``."""
        return self._symbols[index]

    def index(self, symbol: int) -> int:
        """Return the index of ``symbol``."""
        try:
            return self._indexes[symbol]
        except KeyError:
            raise InvalidArgumentError(f"Symbol {symbol!r} is not in the alphabet") from None

    def random_symbol(self, rng: random.Random) -> int:
        return self._symbols[rng.randrange(len(self._symbols))]

    def random_text(self, rng: random.Random, length: int) -> bytes:
        return bytes(self.random_symbol(rng) for _ in range(length))

    def encode_counter(self, value: int) -> bytes:
        """Encode ``value`` in base-N, least-significant symbol first.

        Zero encodes as the empty string, so the counter field grows with the
        logarithm of the value.
        """
        if value < 0:
            raise InvalidArgumentError("Counter must not be negative", {"value": value})
        base = len(self._symbols)
        digits = bytearray()
        while value:
            value, remainder = divmod(value, base)
            digits.append(self._symbols[remainder])
        return bytes(digits)

    def decode_counter(self, digits: bytes) -> int:
        """Inverse of :meth:`encode_counter`."""
        base = len(self._symbols)
        value = 0
        for symbol in reversed(digits):
            value = value * base + self.index(symbol)
        return value


default_alphabet = StampAlphabet()
