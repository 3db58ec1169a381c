"""Record and section types shared by the context engine."""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from pydantic import BaseModel, Field

# ---------------------------------------------------------------------------
# Store records
# ---------------------------------------------------------------------------


class ProjectGenre(StrEnum):
    """Narrative genre of a project."""

    ISEKAI = "isekai"
    SCHOOL = "school"
    SCIFI = "scifi"
    FANTASY = "fantasy"


class ProjectSummary(BaseModel, frozen=True):
    """Snapshot of a writing project."""

    id: str
    name: str
    genre: str
    description: str = ""
    settings: dict[str, str] = Field(default_factory=dict)


class Relationship(BaseModel, frozen=True):
    """Outgoing relationship from one character to another."""

    target_id: str
    relation_type: str
    description: str = ""


class CharacterRecord(BaseModel, frozen=True):
    """A character with its abilities and relationships pre-joined."""

    id: str
    project_id: str
    name: str
    archetype: str = ""
    age: int = 0
    gender: str = ""
    appearance: str = ""
    personality: str = ""
    background: str = ""
    abilities: list[str] = Field(default_factory=list)
    relationships: list[Relationship] = Field(default_factory=list)
    aliases: list[str] = Field(default_factory=list)


class DocumentRecord(BaseModel, frozen=True):
    """A chapter of a project."""

    id: str
    project_id: str
    title: str
    content: str = ""
    order: int = 0


# ---------------------------------------------------------------------------
# Transient section values
# ---------------------------------------------------------------------------


class SectionType(StrEnum):
    """Kinds of context section, in rendering order."""

    PROJECT = "project"
    WORLD = "world"
    CHARACTERS = "characters"
    DOCUMENT_HEADER = "document_header"
    CONTENT = "content"


SECTION_IMPORTANCE: dict[SectionType, int] = {
    SectionType.PROJECT: 10,
    SectionType.CHARACTERS: 9,
    SectionType.WORLD: 8,
    SectionType.DOCUMENT_HEADER: 7,
    SectionType.CONTENT: 6,
}

TokenAllocation = dict[SectionType, float]


@dataclass(frozen=True)
class ContextSection:
    """A typed, importance-weighted chunk of assembled context."""

    type: SectionType
    text: str
    importance: int

    @classmethod
    def of(cls, section_type: SectionType, text: str) -> ContextSection:
        return cls(type=section_type, text=text, importance=SECTION_IMPORTANCE[section_type])


def render_sections(sections: list[ContextSection]) -> str:
    """Serialize sections into a flat context string."""
    return "\n\n".join(s.text for s in sections if s.text)


# ---------------------------------------------------------------------------
# Reports
# ---------------------------------------------------------------------------


class QualityReport(BaseModel):
    """Advisory completeness scores for an assembled context (0-100)."""

    estimated_tokens: int
    character_info_quality: int
    world_building_quality: int
    narrative_coherence_quality: int
    overall_quality: int
    suggestions: list[str] = Field(default_factory=list)


class ContextStats(BaseModel):
    """Size figures for a project's stored material."""

    document_count: int
    character_count: int
    total_characters: int
    estimated_tokens: int
