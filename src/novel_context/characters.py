"""Character analysis — mentions, new-name detection and detail blocks."""

from __future__ import annotations

import re
from collections.abc import Iterable

from .records import CharacterRecord
from .sections import UNKNOWN_CHARACTER, character_line

_CAPITALISED = re.compile(r"\b[A-Z][a-z]{1,}\b")
_INTRODUCED = re.compile(r"\b(?:named|called)\s+([A-Z][a-z]+)")
_CJK_SPEAKER = re.compile(r"([一-鿿]{2,4}?)(?=說|道|問|笑|喊|回答)")
_CJK_INTRODUCED = re.compile(r"(?:叫做|名為)([一-鿿]{2,4})")
_SENTENCE_END = ".!?。！？\"“「『"

_STOP_WORDS = frozenset(
    {
        "The", "A", "An", "And", "But", "Or", "If", "Then", "When", "While",
        "He", "She", "It", "They", "We", "You", "I", "His", "Her", "Their",
        "This", "That", "These", "Those", "There", "Here", "What", "Who",
        "Why", "How", "Where", "Yes", "No", "Not", "Chapter", "Mr", "Mrs", "Ms",
    }
)


def is_mentioned(character: CharacterRecord, content: str) -> bool:
    """True when the character's name or one of its aliases occurs in *content*."""
    return any(name and name in content for name in (character.name, *character.aliases))


def relevant_characters(
    characters: list[CharacterRecord], content: str
) -> list[CharacterRecord]:
    """Characters mentioned in *content*, in store order."""
    return [c for c in characters if is_mentioned(c, content)]


def detect_new_characters(content: str, known: Iterable[str] = ()) -> list[str]:
    """Guess names in *content* that are not among *known*.

    Candidates are names introduced with "named"/"called" (or 叫做/名為),
    CJK names right before a speech verb, and capitalised words that do not
    start a sentence. Results keep first-seen order.
    """
    known_names = set(known)
    found: list[str] = []

    def add(name: str) -> None:
        name = name.strip()
        if len(name) >= 2 and name not in known_names and name not in _STOP_WORDS and name not in found:
            found.append(name)

    for match in _INTRODUCED.finditer(content):
        add(match.group(1))
    for match in _CJK_INTRODUCED.finditer(content):
        add(match.group(1))
    for match in _CJK_SPEAKER.finditer(content):
        add(match.group(1))
    for match in _CAPITALISED.finditer(content):
        prefix = content[max(0, match.start() - 16) : match.start()].rstrip()
        if not prefix or prefix[-1] in _SENTENCE_END:
            continue
        add(match.group(0))
    return found


def integrate_characters(context: str, characters: list[CharacterRecord]) -> str:
    """Append a detailed character block (full backgrounds) to *context*."""
    if not characters:
        return context

    names = {c.id: c.name for c in characters}
    lines = ["Character details:"]
    for char in characters:
        lines.append(character_line(char))
        lines.append(f"  Appearance: {char.appearance}")
        lines.append(f"  Personality: {char.personality}")
        lines.append(f"  Background: {char.background}")
        if char.abilities:
            lines.append(f"  Abilities: {', '.join(char.abilities)}")
        if char.relationships:
            lines.append("  Relationships:")
            for rel in char.relationships:
                target = names.get(rel.target_id, UNKNOWN_CHARACTER)
                detail = f", {rel.description}" if rel.description else ""
                lines.append(f"    - with {target}: {rel.relation_type}{detail}")

    block = "\n".join(lines)
    return f"{context}\n\n{block}" if context else block
