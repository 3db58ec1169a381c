"""Shared fixtures: a small seeded fantasy project."""

from __future__ import annotations

import pytest

from novel_context.records import (
    CharacterRecord,
    DocumentRecord,
    ProjectSummary,
    Relationship,
)
from novel_context.store import InMemoryRecordStore

CHAPTER_PARAGRAPHS = [
    "The caravan left the oasis before dawn, camels groaning under the load.",
    "Aria walked at the front, one hand resting on the hilt of her sword.",
    "Kai trailed behind, complaining about the sand in his boots again.",
    "By noon the dunes shimmered and the guide refused to go any further.",
    "A shadow passed over the sun; something enormous circled above them.",
    "Aria drew her sword as the monster dove out of the glare.",
    "Kai shouted a word of magic and the air around them turned to glass.",
]

CHAPTER_TEXT = "\n\n".join(CHAPTER_PARAGRAPHS)


def make_project() -> ProjectSummary:
    return ProjectSummary(
        id="p1",
        name="Glass Desert",
        genre="fantasy",
        description="Two travellers cross a desert ruled by sky beasts.",
        settings={"magic_system": "spoken runes", "races": "humans and djinn"},
    )


def make_characters() -> list[CharacterRecord]:
    return [
        CharacterRecord(
            id="c1",
            project_id="p1",
            name="Aria",
            archetype="hero",
            age=19,
            gender="female",
            appearance="sun-bleached braid",
            personality="steady and blunt",
            background="A caravan guard who lost her company to the sky beasts.",
            abilities=["swordplay"],
            relationships=[Relationship(target_id="c2", relation_type="partner")],
            aliases=["the Guard"],
        ),
        CharacterRecord(
            id="c2",
            project_id="p1",
            name="Kai",
            archetype="trickster",
            age=22,
            gender="male",
            appearance="ink-stained hands",
            personality="restless",
            background="A failed scholar of runes.",
            abilities=["rune speech"],
        ),
    ]


@pytest.fixture
def store() -> InMemoryRecordStore:
    s = InMemoryRecordStore()
    s.add_project(make_project())
    for character in make_characters():
        s.add_character(character)
    s.add_document(
        DocumentRecord(id="d1", project_id="p1", title="Chapter 1", content=CHAPTER_TEXT, order=1)
    )
    s.add_document(
        DocumentRecord(id="d0", project_id="p1", title="Prologue", content="Sand.", order=0)
    )
    return s
