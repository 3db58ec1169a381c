"""Token estimation: fixed 4-characters-per-token approximation."""

from __future__ import annotations

import math

CHARS_PER_TOKEN = 4


def estimate_tokens(text: str) -> int:
    """Estimate token count from text. ceil(len / 4)."""
    if not text:
        return 0
    return math.ceil(len(text) / CHARS_PER_TOKEN)


def token_ratio(text: str) -> float:
    """Unrounded token estimate used for budget comparisons."""
    return len(text) / CHARS_PER_TOKEN


def chars_for_tokens(tokens: float) -> int:
    """Character ceiling for a (possibly fractional) token allocation."""
    if tokens <= 0:
        return 0
    return math.floor(tokens * CHARS_PER_TOKEN)


def fits(text: str, max_tokens: float) -> bool:
    """Check whether *text* fits within *max_tokens*."""
    return token_ratio(text) <= max_tokens


class TokenBudget:
    """Tracks token consumption against a configured maximum."""

    def __init__(self, max_tokens: float) -> None:
        if max_tokens <= 0:
            msg = "max_tokens must be positive"
            raise ValueError(msg)
        self._max = max_tokens
        self._consumed = 0.0

    def consume(self, tokens: float) -> None:
        self._consumed += tokens

    def can_afford(self, tokens: float) -> bool:
        return self._consumed + tokens <= self._max

    def remaining(self) -> float:
        return self._max - self._consumed

    def is_within_budget(self) -> bool:
        return self._consumed <= self._max

    def overflow(self) -> float:
        return max(0.0, self._consumed - self._max)

    @property
    def max_tokens(self) -> float:
        return self._max

    @property
    def consumed(self) -> float:
        return self._consumed
