"""Tests for SectionBuilder."""

from novel_context.records import (
    CharacterRecord,
    DocumentRecord,
    ProjectSummary,
    Relationship,
    SectionType,
)
from novel_context.sections import SectionBuilder, genre_label, truncate_text


def _character(**overrides) -> CharacterRecord:
    data = {
        "id": "c1",
        "project_id": "p1",
        "name": "Aria",
        "archetype": "hero",
        "age": 17,
        "gender": "female",
        "appearance": "silver hair",
        "personality": "stubborn",
        "background": "raised by wolves",
    }
    data.update(overrides)
    return CharacterRecord(**data)


def test_project_section_lines():
    project = ProjectSummary(id="p1", name="Demo", genre="fantasy", description="A tale.")
    section = SectionBuilder().project_section(project)
    assert section.type == SectionType.PROJECT
    assert section.importance == 10
    assert section.text == "Project: Demo\nGenre: Fantasy\nDescription: A tale."


def test_project_section_without_description():
    project = ProjectSummary(id="p1", name="Demo", genre="school")
    assert SectionBuilder().project_section(project).text == "Project: Demo\nGenre: School life"


def test_unknown_genre_label_falls_back_to_raw_value():
    assert genre_label("mystery") == "mystery"
    assert genre_label("isekai") == "Isekai (other world)"


def test_world_section_isekai_settings_in_order():
    project = ProjectSummary(
        id="p1",
        name="Demo",
        genre="isekai",
        settings={
            "reincarnation": "truck accident",
            "level_system": "levels 1-99",
            "magic_system": "mana circles",
            "unrelated": "ignored",
        },
    )
    section = SectionBuilder().world_section(project)
    assert section is not None
    assert section.importance == 8
    assert section.text.split("\n") == [
        "World: another world",
        "Level system: levels 1-99",
        "Magic system: mana circles",
        "Reincarnation: truck accident",
    ]


def test_world_section_omits_missing_settings():
    project = ProjectSummary(id="p1", name="Demo", genre="scifi", settings={"tech_level": "FTL"})
    section = SectionBuilder().world_section(project)
    assert section is not None
    assert section.text == "World: science-fiction future\nTechnology level: FTL"


def test_world_section_absent_without_settings_or_known_genre():
    builder = SectionBuilder()
    assert builder.world_section(ProjectSummary(id="p", name="n", genre="fantasy")) is None
    mystery = ProjectSummary(id="p", name="n", genre="mystery", settings={"clue": "x"})
    assert builder.world_section(mystery) is None


def test_characters_section_block_layout():
    section = SectionBuilder().characters_section([_character()])
    assert section is not None
    assert section.importance == 9
    assert section.text.split("\n") == [
        "Main characters:",
        "- Aria: 17 years old, female, hero archetype",
        "  Appearance: silver hair",
        "  Personality: stubborn",
        "  Background: raised by wolves",
    ]


def test_characters_background_truncated_to_100_chars():
    long_background = "b" * 150
    section = SectionBuilder().characters_section([_character(background=long_background)])
    assert section is not None
    assert f"  Background: {'b' * 100}..." in section.text.split("\n")


def test_characters_abilities_and_relationships():
    aria = _character(
        abilities=["swordplay", "healing"],
        relationships=[
            Relationship(target_id="c2", relation_type="rival", description="since childhood"),
            Relationship(target_id="ghost", relation_type="student"),
        ],
    )
    kai = _character(id="c2", name="Kai")
    section = SectionBuilder().characters_section([aria, kai])
    assert section is not None
    lines = section.text.split("\n")
    assert "  Abilities: swordplay, healing" in lines
    assert "  Relationships: rival of Kai (since childhood); student of unknown character" in lines
    # store order is preserved
    assert lines.index("- Aria: 17 years old, female, hero archetype") < lines.index(
        "- Kai: 17 years old, female, hero archetype"
    )


def test_characters_section_absent_for_empty_list():
    assert SectionBuilder().characters_section([]) is None


def test_document_header_and_content_sections():
    paragraphs = [f"Paragraph {i} of the draft, long enough to count." for i in range(3)]
    content = "\n\n".join(paragraphs)
    document = DocumentRecord(id="d1", project_id="p1", title="Chapter 1", content=content)
    builder = SectionBuilder()
    header = builder.document_header_section(document)
    assert header.type == SectionType.DOCUMENT_HEADER
    assert header.text == "Current document: Chapter 1"
    body = builder.content_section(document, len(content))
    assert body is not None
    assert body.importance == 6
    assert body.text == content


def test_content_section_absent_at_start_of_document():
    document = DocumentRecord(id="d1", project_id="p1", title="Chapter 1", content="x" * 200)
    assert SectionBuilder().content_section(document, 0) is None


def test_build_all_order():
    project = ProjectSummary(id="p1", name="Demo", genre="fantasy", settings={"races": "elves"})
    document = DocumentRecord(id="d1", project_id="p1", title="Chapter 1", content="y" * 150)
    sections = SectionBuilder().build_all(project, [_character()], document, 150)
    assert [s.type for s in sections] == [
        SectionType.PROJECT,
        SectionType.WORLD,
        SectionType.CHARACTERS,
        SectionType.DOCUMENT_HEADER,
        SectionType.CONTENT,
    ]


def test_truncate_text():
    assert truncate_text("short", 10) == "short"
    assert truncate_text("abcdefghij", 4) == "abcd..."
