"""Token budget allocator — importance-weighted split with floors and caps.

Allocation runs in three passes:

1. **Floor**: every section gets ``min(original, max(floor_tokens,
   ideal * floor_ratio))`` so nothing disappears outright.
2. **Proportional**: the remainder is water-filled by importance among the
   sections still short of their original size, each capped at its original.
3. **Overflow**: whatever is left goes to the ``content`` section.

Allocations stay fractional throughout; a section is satisfied once its unmet
need drops below ``_EPSILON`` tokens.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from .config import EngineConfig
from .records import ContextSection, SectionType, TokenAllocation
from .tokens import token_ratio

logger = logging.getLogger(__name__)

_EPSILON = 1e-9


@dataclass
class _SectionBudget:
    section: ContextSection
    original: float
    allocated: float = 0.0

    @property
    def need(self) -> float:
        return self.original - self.allocated


class TokenBudgetAllocator:
    """Distributes a token budget across sections by declared importance."""

    def __init__(self, config: EngineConfig | None = None) -> None:
        self._config = config or EngineConfig()

    def allocate(self, sections: list[ContextSection], max_tokens: float) -> TokenAllocation:
        if not sections:
            return {}
        budgets = [_SectionBudget(s, token_ratio(s.text)) for s in sections]
        if max_tokens <= 0:
            return {b.section.type: 0.0 for b in budgets}

        remaining = self._floor_pass(budgets, max_tokens)
        remaining = self._proportional_pass(budgets, remaining)
        remaining = self._overflow_pass(budgets, remaining)

        allocation = {b.section.type: b.allocated for b in budgets}
        logger.debug(
            "allocated %.1f of %s tokens across %d sections (unused %.1f)",
            sum(allocation.values()),
            max_tokens,
            len(allocation),
            remaining,
        )
        return allocation

    # ------------------------------------------------------------------
    # Passes
    # ------------------------------------------------------------------

    def _floor_pass(self, budgets: list[_SectionBudget], max_tokens: float) -> float:
        cfg = self._config
        total_importance = sum(b.section.importance for b in budgets)
        for b in budgets:
            ideal = b.section.importance / total_importance * max_tokens
            b.allocated = min(b.original, max(cfg.floor_tokens, ideal * cfg.floor_ratio))

        floors = sum(b.allocated for b in budgets)
        if floors > max_tokens:
            # Tiny budgets: shrink the floors so they never exceed the total.
            scale = max_tokens / floors
            for b in budgets:
                b.allocated *= scale
            return 0.0
        return max_tokens - floors

    def _proportional_pass(self, budgets: list[_SectionBudget], remaining: float) -> float:
        active = [b for b in budgets if b.need > _EPSILON]
        while remaining > _EPSILON and active:
            total_importance = sum(b.section.importance for b in active)
            pool = remaining
            for b in active:
                grant = min(b.need, pool * b.section.importance / total_importance)
                b.allocated += grant
                remaining -= grant
            still_short = [b for b in active if b.need > _EPSILON]
            if len(still_short) == len(active):
                # Nobody hit a cap, so the whole pool was spent.
                break
            active = still_short
        return max(0.0, remaining)

    def _overflow_pass(self, budgets: list[_SectionBudget], remaining: float) -> float:
        if remaining <= _EPSILON:
            return remaining
        for b in budgets:
            if b.section.type is SectionType.CONTENT:
                grant = min(remaining, max(0.0, b.need))
                b.allocated += grant
                remaining -= grant
                break
        return remaining
