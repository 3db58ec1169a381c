"""Tests for ContextAssembler — full context builds from a record store."""

from __future__ import annotations

import pytest
from conftest import CHAPTER_PARAGRAPHS, CHAPTER_TEXT

from novel_context.assembler import ContextAssembler
from novel_context.errors import ContextError, NotFoundError
from novel_context.prompts import CONTINUE_MARKER
from novel_context.records import SectionType
from novel_context.store import InMemoryRecordStore


def test_build_renders_sections_in_order(store: InMemoryRecordStore) -> None:
    context = ContextAssembler(store).build("p1", "d1", len(CHAPTER_TEXT))
    positions = [
        context.index("Project: Glass Desert"),
        context.index("World: high fantasy"),
        context.index("Main characters:"),
        context.index("Current document: Chapter 1"),
    ]
    assert positions == sorted(positions)
    assert "Relationships: partner of Kai" in context
    assert context.endswith(CHAPTER_PARAGRAPHS[-1])


def test_build_keeps_recent_and_relevant_paragraphs(store: InMemoryRecordStore) -> None:
    context = ContextAssembler(store).build("p1", "d1", len(CHAPTER_TEXT))
    # the opening paragraph has no key terms and is not recent
    assert CHAPTER_PARAGRAPHS[0] not in context
    # mentions a sword, so it is kept even though it is early
    assert CHAPTER_PARAGRAPHS[1] in context
    assert CHAPTER_PARAGRAPHS[4] in context


def test_build_sections_types(store: InMemoryRecordStore) -> None:
    sections = ContextAssembler(store).build_sections("p1", "d1", len(CHAPTER_TEXT))
    assert [s.type for s in sections] == list(SectionType)


def test_build_at_document_start_has_no_content(store: InMemoryRecordStore) -> None:
    context = ContextAssembler(store).build("p1", "d1", 0)
    assert context.endswith("Current document: Chapter 1")


def test_unknown_project_raises(store: InMemoryRecordStore) -> None:
    with pytest.raises(NotFoundError, match="project not found: nope") as exc_info:
        ContextAssembler(store).build("nope", "d1", 10)
    assert exc_info.value.kind == "project"
    assert exc_info.value.identifier == "nope"


def test_unknown_document_raises(store: InMemoryRecordStore) -> None:
    with pytest.raises(ContextError, match="document not found: missing"):
        ContextAssembler(store).build("p1", "missing", 10)


def test_build_separated(store: InMemoryRecordStore) -> None:
    system, user = ContextAssembler(store).build_separated("p1", "d1", len(CHAPTER_TEXT))
    assert "Fantasy style:" in system
    assert CONTINUE_MARKER in system
    assert user.startswith("Project: Glass Desert")
    assert user.endswith(f"{CHAPTER_PARAGRAPHS[-1]}\n\n{CONTINUE_MARKER}")


def test_build_separated_reads_project_once(store: InMemoryRecordStore) -> None:
    reads: list[str] = []
    original = store.get_project

    def counting_get_project(project_id: str):
        reads.append(project_id)
        return original(project_id)

    store.get_project = counting_get_project  # type: ignore[method-assign]
    ContextAssembler(store).build_separated("p1", "d1", len(CHAPTER_TEXT))
    assert reads == ["p1"]


def test_build_project_sections_returns_project(store: InMemoryRecordStore) -> None:
    project, sections = ContextAssembler(store).build_project_sections("p1", "d1", 0)
    assert project.name == "Glass Desert"
    assert sections[0].text.startswith("Project: Glass Desert")
