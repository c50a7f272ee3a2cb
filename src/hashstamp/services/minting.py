"""Stamp minting facade.

Chooses a search engine from the requested grammar, validates inputs before
any work starts and hands back the finished stamp text.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum

from hashstamp.core.codec import DELIMITER, StampVersion
from hashstamp.core.digest import DIGEST_BITS
from hashstamp.core.exceptions import InvalidArgumentError
from hashstamp.core.search import SearchBudget, SearchResult
from hashstamp.core.settings import Settings
from hashstamp.core.settings import settings as default_settings
from hashstamp.services.mutation import MutationEngine
from hashstamp.services.sequential import SequentialEngine

logger = logging.getLogger(__name__)


class Grammar(str, Enum):
    """Stamp layout and search strategy pairs.

    ``A`` is the legacy sequential counter scan producing version 0 stamps;
    ``B`` is the randomized mutation search producing version 1 stamps.
    """

    A = "A"
    B = "B"

    @property
    def default_version(self) -> StampVersion:
        return StampVersion.V0 if self is Grammar.A else StampVersion.V1


@dataclass(frozen=True)
class MintRequest:
    resource: str
    bits: int
    timestamp: datetime
    grammar: Grammar
    version: StampVersion


class Minter:
    """Produces stamps using engines configured from :class:`Settings`.

    Args:
        config: Settings override; the module-level settings are used otherwise.
        rng: Random source shared by every call on this minter. When omitted
            each call constructs its own ``random.Random``.
    """

    def __init__(self, config: Settings | None = None, rng: random.Random | None = None) -> None:
        self._settings = config or default_settings
        self._rng = rng
        self._sequential = SequentialEngine(
            width_bits=self._settings.counter_width_bits,
            salt_length=self._settings.salt_length,
            hash_algorithm=self._settings.hash_algorithm,
        )
        self._mutation = MutationEngine(
            minimum_random=self._settings.minimum_random,
            hash_algorithm=self._settings.hash_algorithm,
        )

    @property
    def settings(self) -> Settings:
        return self._settings

    def bits_range(self, grammar: Grammar) -> tuple[int, int]:
        """Return the inclusive difficulty range accepted for ``grammar``."""
        if grammar is Grammar.B:
            return self._settings.bits_range
        return 0, DIGEST_BITS

    def validate(
        self,
        resource: str,
        bits: int | None = None,
        timestamp: datetime | None = None,
        grammar: Grammar | str = Grammar.B,
        version: StampVersion | int | None = None,
    ) -> MintRequest:
        """Check and normalise mint arguments.

        Raises:
            InvalidArgumentError: If any argument is unusable.
        """
        if not isinstance(resource, str) or not resource:
            raise InvalidArgumentError("The resource cannot be empty")
        if DELIMITER in resource:
            raise InvalidArgumentError("The resource cannot contain ':'", {"resource": resource})

        try:
            grammar = Grammar(grammar)
        except ValueError:
            raise InvalidArgumentError(f"Unsupported grammar: {grammar}") from None

        if bits is None:
            bits = self._settings.default_bits
        if isinstance(bits, bool) or not isinstance(bits, int):
            raise InvalidArgumentError("Difficulty must be an integer", {"bits": bits})
        low, high = self.bits_range(grammar)
        if not low <= bits <= high:
            raise InvalidArgumentError(
                f"The required difficulty must be between {low} and {high} inclusive",
                {"bits": bits, "grammar": grammar.value},
            )

        if version is None:
            version = grammar.default_version
        try:
            version = StampVersion(version)
        except ValueError:
            raise InvalidArgumentError("Only version 0 and version 1 stamps are supported") from None

        if timestamp is None:
            timestamp = datetime.now(UTC)
        elif not isinstance(timestamp, datetime):
            raise InvalidArgumentError("Timestamp must be a datetime")

        return MintRequest(resource, bits, timestamp, grammar, version)

    def mint_with_stats(
        self,
        resource: str,
        bits: int | None = None,
        timestamp: datetime | None = None,
        grammar: Grammar | str = Grammar.B,
        *,
        version: StampVersion | int | None = None,
        budget: SearchBudget | None = None,
        rng: random.Random | None = None,
    ) -> SearchResult:
        """Mint a stamp and report how many digests the search computed."""
        request = self.validate(resource, bits, timestamp, grammar, version)
        rng = rng or self._rng or random.Random()
        budget = budget or SearchBudget.from_settings(self._settings)
        logger.debug(
            "Minting grammar %s stamp: bits=%d version=%d",
            request.grammar.value,
            request.bits,
            int(request.version),
        )
        engine = self._sequential if request.grammar is Grammar.A else self._mutation
        return engine.search(
            request.resource,
            request.bits,
            request.timestamp,
            version=request.version,
            rng=rng,
            budget=budget,
        )

    def mint(
        self,
        resource: str,
        bits: int | None = None,
        timestamp: datetime | None = None,
        grammar: Grammar | str = Grammar.B,
        *,
        version: StampVersion | int | None = None,
        budget: SearchBudget | None = None,
        rng: random.Random | None = None,
    ) -> str:
        """Mint a stamp for ``resource``.

        Raises:
            InvalidArgumentError: If the resource, difficulty or grammar is rejected.
            SearchExhaustedError: If the search runs out of counter space or budget.
        """
        return self.mint_with_stats(
            resource,
            bits,
            timestamp,
            grammar,
            version=version,
            budget=budget,
            rng=rng,
        ).stamp


def mint(
    resource: str,
    bits: int | None = None,
    timestamp: datetime | None = None,
    grammar: Grammar | str = Grammar.B,
    *,
    version: StampVersion | int | None = None,
    budget: SearchBudget | None = None,
    rng: random.Random | None = None,
) -> str:
    """Mint a stamp with the default settings."""
    return Minter().mint(resource, bits, timestamp, grammar, version=version, budget=budget, rng=rng)
