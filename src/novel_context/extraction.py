"""Relevant content extraction — recent paragraphs plus keyword-ranked ones."""

from __future__ import annotations

import logging
import re

from .config import EngineConfig

logger = logging.getLogger(__name__)

_PARAGRAPH_BREAK = re.compile(r"\n\s*\n")

# Short spans inside paired quote brackets are treated as probable names.
_QUOTED_NAME = re.compile(
    r"「([^「」]{1,10})」"
    r"|『([^『』]{1,10})』"
    r"|“([^“”]{1,10})”"
    r"|‘([^‘’]{1,10})’"
    r'|"([^"\n]{1,10})"'
)


def split_paragraphs(text: str) -> list[str]:
    """Split text on blank lines, dropping empty paragraphs."""
    return [p for p in _PARAGRAPH_BREAK.split(text) if p.strip()]


def extract_key_terms(text: str, vocabulary: tuple[str, ...]) -> list[str]:
    """Quoted names first, then the vocabulary; duplicates removed."""
    names = [next(g for g in m.groups() if g is not None) for m in _QUOTED_NAME.finditer(text)]
    return list(dict.fromkeys([*names, *vocabulary]))


def score_paragraph(paragraph: str, key_terms: list[str]) -> int:
    """Number of distinct key terms contained in *paragraph*."""
    folded = paragraph.casefold()
    return sum(1 for term in key_terms if term.casefold() in folded)


class RelevantContentExtractor:
    """Reduces the text before the cursor to recent + relevant paragraphs."""

    def __init__(self, config: EngineConfig | None = None) -> None:
        self._config = config or EngineConfig()

    def extract(self, full_text: str, position: int, genre: str | None = None) -> str:
        """Return the excerpt of *full_text* preceding *position*.

        1. Empty when the cursor is at the start or the text is too short.
        2. Short prefixes (few paragraphs) are returned unchanged.
        3. Otherwise keep the most recent paragraphs plus the top-ranked
           keyword matches, in original order, always ending with the
           paragraph right before the cursor.
        """
        cfg = self._config
        if not full_text:
            return ""
        position = max(0, min(position, len(full_text)))
        if position == 0 or len(full_text) < cfg.min_content_length:
            return ""

        preceding = full_text[:position]
        paragraphs = split_paragraphs(preceding)
        if len(paragraphs) <= cfg.short_document_paragraphs:
            return preceding

        last = len(paragraphs) - 1
        recent = list(range(max(0, len(paragraphs) - cfg.recent_paragraphs), len(paragraphs)))

        key_terms = extract_key_terms(preceding, cfg.vocabulary.terms_for(genre))
        scored = [(score_paragraph(p, key_terms), i) for i, p in enumerate(paragraphs)]
        # sort() is stable: equal scores keep document order
        ranked = sorted((s for s in scored if s[0] > 0), key=lambda s: s[0], reverse=True)
        relevant = [i for _score, i in ranked[: cfg.relevant_paragraphs]]

        selected = sorted(set(recent) | set(relevant))
        if selected[-1] != last:
            selected.append(last)

        logger.debug(
            "extracted %d of %d paragraphs (%d key terms)",
            len(selected),
            len(paragraphs),
            len(key_terms),
        )
        return "\n\n".join(paragraphs[i] for i in selected)
