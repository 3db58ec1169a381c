"""Context compression — fit an assembled context into a token budget."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import StrEnum

from .allocation import TokenBudgetAllocator
from .config import EngineConfig
from .records import ContextSection, SectionType, TokenAllocation
from .segmenter import SectionSegmenter
from .tokens import CHARS_PER_TOKEN, TokenBudget, chars_for_tokens, estimate_tokens, token_ratio

logger = logging.getLogger(__name__)

SECTION_SEPARATOR = "\n\n"


class CompressionStrategy(StrEnum):
    """Per-section reduction strategies."""

    HEAD = "head"
    TAIL = "tail"
    LINES = "lines"
    BLOCKS = "blocks"


STRATEGY_BY_TYPE: dict[SectionType, CompressionStrategy] = {
    SectionType.PROJECT: CompressionStrategy.HEAD,
    SectionType.DOCUMENT_HEADER: CompressionStrategy.HEAD,
    SectionType.WORLD: CompressionStrategy.LINES,
    SectionType.CHARACTERS: CompressionStrategy.BLOCKS,
    SectionType.CONTENT: CompressionStrategy.TAIL,
}


@dataclass
class CompressedContext:
    """Result of compressing a context, with the budget decisions made."""

    original_tokens: int
    compressed_tokens: int
    content: str
    allocation: TokenAllocation = field(default_factory=dict)
    compressed_types: list[SectionType] = field(default_factory=list)


class SectionCompressor:
    """Applies the section-type-specific strategy to fit an allocation."""

    def compress(self, section: ContextSection, allocated_tokens: float) -> str:
        if allocated_tokens >= token_ratio(section.text):
            return section.text

        strategy = STRATEGY_BY_TYPE.get(section.type, CompressionStrategy.HEAD)
        if strategy == CompressionStrategy.TAIL:
            return self._tail(section.text, allocated_tokens)
        if strategy == CompressionStrategy.LINES:
            return self._lines(section.text, allocated_tokens)
        if strategy == CompressionStrategy.BLOCKS:
            return self._blocks(section.text, allocated_tokens)
        return self._head(section.text, allocated_tokens)

    # ------------------------------------------------------------------
    # Strategy implementations
    # ------------------------------------------------------------------

    def _head(self, text: str, tokens: float) -> str:
        """Keep the first ``tokens * 4`` characters."""
        return text[: chars_for_tokens(tokens)]

    def _tail(self, text: str, tokens: float) -> str:
        """Keep the last ``tokens * 4`` characters (text nearest the cursor)."""
        limit = chars_for_tokens(tokens)
        if limit <= 0:
            return ""
        return text[-limit:]

    def _lines(self, text: str, tokens: float) -> str:
        """First line always, then whole lines until one would overflow."""
        lines = text.split("\n")
        budget = TokenBudget(max(tokens, 1e-9))
        kept = [lines[0]]
        budget.consume(token_ratio(lines[0]))
        for line in lines[1:]:
            cost = (len(line) + 1) / CHARS_PER_TOKEN
            if not budget.can_afford(cost):
                break
            kept.append(line)
            budget.consume(cost)
        return "\n".join(kept)

    def _blocks(self, text: str, tokens: float) -> str:
        """Header, then whole character blocks in store order.

        The first block that does not fit contributes only its name line,
        and only when that line fits on its own.
        """
        lines = text.split("\n")
        header = lines[0]
        blocks: list[list[str]] = []
        for line in lines[1:]:
            if line.startswith("- ") or not blocks:
                blocks.append([line])
            elif line.strip():
                blocks[-1].append(line)

        budget = TokenBudget(max(tokens, 1e-9))
        budget.consume(token_ratio(header))
        kept = [header]
        for block in blocks:
            cost = (len("\n".join(block)) + 1) / CHARS_PER_TOKEN
            if budget.can_afford(cost):
                kept.extend(block)
                budget.consume(cost)
                continue
            name_cost = (len(block[0]) + 1) / CHARS_PER_TOKEN
            if budget.can_afford(name_cost):
                kept.append(block[0])
            break
        return "\n".join(kept)


class ContextCompressor:
    """Segments, allocates and compresses a context to fit a token budget."""

    def __init__(
        self,
        config: EngineConfig | None = None,
        segmenter: SectionSegmenter | None = None,
        allocator: TokenBudgetAllocator | None = None,
        section_compressor: SectionCompressor | None = None,
    ) -> None:
        self._config = config or EngineConfig()
        self._segmenter = segmenter or SectionSegmenter()
        self._allocator = allocator or TokenBudgetAllocator(self._config)
        self._sections = section_compressor or SectionCompressor()

    def fits(self, text: str, max_tokens: float) -> bool:
        return token_ratio(text) <= max_tokens

    def compress(self, context: str, max_tokens: float) -> str:
        """Fit a rendered *context* into *max_tokens*.

        Returns *context* itself when it already fits.
        """
        if self.fits(context, max_tokens):
            return context
        return self.compress_detailed(context, max_tokens).content

    def compress_detailed(self, context: str, max_tokens: float) -> CompressedContext:
        original = estimate_tokens(context)
        if self.fits(context, max_tokens):
            return CompressedContext(original, original, context)

        sections = self._segmenter.segment(context)
        if not sections:
            logger.info("no recognisable sections, head-truncating to %s tokens", max_tokens)
            content = context[: chars_for_tokens(max_tokens)]
            return CompressedContext(original, estimate_tokens(content), content)
        return self._compress(sections, max_tokens, original)

    def compress_sections(self, sections: list[ContextSection], max_tokens: float) -> str:
        """Compress structured sections and render them as one string."""
        rendered = SECTION_SEPARATOR.join(s.text for s in sections if s.text)
        if self.fits(rendered, max_tokens):
            return rendered
        return self._compress(sections, max_tokens, estimate_tokens(rendered)).content

    def _compress(
        self, sections: list[ContextSection], max_tokens: float, original: int
    ) -> CompressedContext:
        # Reserve the separators so the joined output honours the budget.
        separator_tokens = token_ratio(SECTION_SEPARATOR) * max(0, len(sections) - 1)
        section_budget = max(0.0, max_tokens - separator_tokens)

        allocation = self._allocator.allocate(sections, section_budget)
        parts: list[str] = []
        compressed_types: list[SectionType] = []
        for section in sections:
            text = self._sections.compress(section, allocation.get(section.type, 0.0))
            if text != section.text:
                compressed_types.append(section.type)
            if text:
                parts.append(text)

        content = SECTION_SEPARATOR.join(parts)
        result = CompressedContext(
            original_tokens=original,
            compressed_tokens=estimate_tokens(content),
            content=content,
            allocation=allocation,
            compressed_types=compressed_types,
        )
        logger.info(
            "compressed context %d -> %d tokens (budget %s, sections reduced: %s)",
            result.original_tokens,
            result.compressed_tokens,
            max_tokens,
            ", ".join(t.value for t in compressed_types) or "none",
        )
        return result
