"""Renders typed context sections from store records."""

from __future__ import annotations

from .config import EngineConfig
from .extraction import RelevantContentExtractor
from .records import (
    CharacterRecord,
    ContextSection,
    DocumentRecord,
    ProjectGenre,
    ProjectSummary,
    SectionType,
)

PROJECT_HEADER = "Project:"
WORLD_HEADER = "World:"
CHARACTERS_HEADER = "Main characters:"
DOCUMENT_HEADER = "Current document:"

GENRE_LABELS: dict[str, str] = {
    ProjectGenre.ISEKAI: "Isekai (other world)",
    ProjectGenre.SCHOOL: "School life",
    ProjectGenre.SCIFI: "Science fiction",
    ProjectGenre.FANTASY: "Fantasy",
}

# (world label, ordered (setting key, line label) pairs) per genre
WORLD_SETTINGS: dict[str, tuple[str, tuple[tuple[str, str], ...]]] = {
    ProjectGenre.ISEKAI: (
        "another world",
        (
            ("level_system", "Level system"),
            ("magic_system", "Magic system"),
            ("reincarnation", "Reincarnation"),
        ),
    ),
    ProjectGenre.SCHOOL: (
        "modern school",
        (("school_name", "School name"), ("school_type", "School type")),
    ),
    ProjectGenre.SCIFI: (
        "science-fiction future",
        (("tech_level", "Technology level"), ("world_setting", "World setting")),
    ),
    ProjectGenre.FANTASY: (
        "high fantasy",
        (("magic_system", "Magic system"), ("races", "Races")),
    ),
}

UNKNOWN_CHARACTER = "unknown character"


def genre_label(genre: str) -> str:
    return GENRE_LABELS.get(genre, genre)


def truncate_text(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


def character_line(character: CharacterRecord) -> str:
    """First line of a character block: name, age, gender, archetype."""
    return (
        f"- {character.name}: {character.age} years old, "
        f"{character.gender}, {character.archetype} archetype"
    )


def relationship_text(character: CharacterRecord, names: dict[str, str]) -> str:
    parts = []
    for rel in character.relationships:
        target = names.get(rel.target_id, UNKNOWN_CHARACTER)
        part = f"{rel.relation_type} of {target}"
        if rel.description:
            part += f" ({rel.description})"
        parts.append(part)
    return "; ".join(parts)


class SectionBuilder:
    """Renders project, world, character, document and content sections."""

    def __init__(
        self,
        config: EngineConfig | None = None,
        extractor: RelevantContentExtractor | None = None,
    ) -> None:
        self._config = config or EngineConfig()
        self._extractor = extractor or RelevantContentExtractor(self._config)

    def project_section(self, project: ProjectSummary) -> ContextSection:
        lines = [f"{PROJECT_HEADER} {project.name}", f"Genre: {genre_label(project.genre)}"]
        if project.description:
            lines.append(f"Description: {project.description}")
        return ContextSection.of(SectionType.PROJECT, "\n".join(lines))

    def world_section(self, project: ProjectSummary) -> ContextSection | None:
        """World lines from the genre settings; None without settings."""
        if not project.settings or project.genre not in WORLD_SETTINGS:
            return None
        world_label, keys = WORLD_SETTINGS[project.genre]
        lines = [f"{WORLD_HEADER} {world_label}"]
        for key, label in keys:
            value = project.settings.get(key)
            if value:
                lines.append(f"{label}: {value}")
        return ContextSection.of(SectionType.WORLD, "\n".join(lines))

    def characters_section(self, characters: list[CharacterRecord]) -> ContextSection | None:
        if not characters:
            return None
        names = {c.id: c.name for c in characters}
        preview = self._config.background_preview_chars
        lines = [CHARACTERS_HEADER]
        for char in characters:
            lines.append(character_line(char))
            lines.append(f"  Appearance: {char.appearance}")
            lines.append(f"  Personality: {char.personality}")
            if char.background:
                lines.append(f"  Background: {truncate_text(char.background, preview)}")
            if char.abilities:
                lines.append(f"  Abilities: {', '.join(char.abilities)}")
            if char.relationships:
                lines.append(f"  Relationships: {relationship_text(char, names)}")
        return ContextSection.of(SectionType.CHARACTERS, "\n".join(lines))

    def document_header_section(self, document: DocumentRecord) -> ContextSection:
        return ContextSection.of(SectionType.DOCUMENT_HEADER, f"{DOCUMENT_HEADER} {document.title}")

    def content_section(
        self, document: DocumentRecord, position: int, genre: str | None = None
    ) -> ContextSection | None:
        excerpt = self._extractor.extract(document.content, position, genre)
        if not excerpt:
            return None
        return ContextSection.of(SectionType.CONTENT, excerpt)

    def build_all(
        self,
        project: ProjectSummary,
        characters: list[CharacterRecord],
        document: DocumentRecord,
        position: int,
    ) -> list[ContextSection]:
        """All present sections in rendering order."""
        candidates = [
            self.project_section(project),
            self.world_section(project),
            self.characters_section(characters),
            self.document_header_section(document),
            self.content_section(document, position, project.genre),
        ]
        return [s for s in candidates if s is not None]
