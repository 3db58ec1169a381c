"""Context quality analyzer — coarse, advisory completeness scores."""

from __future__ import annotations

import re

from .records import QualityReport
from .sections import CHARACTERS_HEADER, DOCUMENT_HEADER, WORLD_HEADER
from .tokens import estimate_tokens

_CHARACTER_LINE = re.compile(r"^- [^:\n]+: [^\n]+", re.MULTILINE)
_WORLD_ELEMENTS = ("magic", "technology", "school", "other world", "future", "modern")
_GOOD_THRESHOLD = 70


class ContextQualityAnalyzer:
    """Scores character, world and narrative coverage of a context (0-100)."""

    def analyze(self, context: str) -> QualityReport:
        character = self._character_info(context)
        world = self._world_building(context)
        narrative = self._narrative_coherence(context)
        return QualityReport(
            estimated_tokens=estimate_tokens(context),
            character_info_quality=character,
            world_building_quality=world,
            narrative_coherence_quality=narrative,
            overall_quality=round((character + world + narrative) / 3),
            suggestions=self._suggestions(character, world, narrative),
        )

    def _character_info(self, context: str) -> int:
        score = 0
        if CHARACTERS_HEADER in context:
            score += 30
        score += min(40, len(_CHARACTER_LINE.findall(context)) * 10)
        if "Relationships:" in context:
            score += 20
        if "Personality:" in context:
            score += 10
        return min(100, score)

    def _world_building(self, context: str) -> int:
        score = 0
        if WORLD_HEADER in context:
            score += 40
        if "Genre:" in context:
            score += 20
        folded = context.casefold()
        score += 10 * sum(1 for element in _WORLD_ELEMENTS if element in folded)
        return min(100, score)

    def _narrative_coherence(self, context: str) -> int:
        score = 50
        _before, found, after = context.partition(DOCUMENT_HEADER)
        if not found:
            return score
        score += 20
        _title, _sep, body = after.partition("\n\n")
        if body.strip():
            score += 20
            if 100 < len(body) < 2000:
                score += 10
        return min(100, score)

    def _suggestions(self, character: int, world: int, narrative: int) -> list[str]:
        suggestions: list[str] = []
        if character < _GOOD_THRESHOLD:
            suggestions.append("Add more detailed character descriptions and backgrounds")
            suggestions.append("Describe how the main characters relate to each other")
        if world < _GOOD_THRESHOLD:
            suggestions.append("Fill in more of the world-building settings")
            suggestions.append("Add concrete details about the story's setting")
        if narrative < _GOOD_THRESHOLD:
            suggestions.append("Provide more of the preceding story text as context")
            suggestions.append("Make sure the current document has a clear title")
        if not suggestions:
            suggestions.append("Context quality is good; ready to continue writing")
        return suggestions
