"""Tests for the NovelContextEngine facade."""

from __future__ import annotations

import math

import pytest
from conftest import CHAPTER_PARAGRAPHS, CHAPTER_TEXT

from novel_context.backend import StubCompletionBackend
from novel_context.config import EngineConfig
from novel_context.engine import NovelContextEngine
from novel_context.errors import NotFoundError
from novel_context.prompts import CONTINUE_MARKER
from novel_context.records import CharacterRecord
from novel_context.store import InMemoryRecordStore
from novel_context.tokens import token_ratio

END = len(CHAPTER_TEXT)


def test_build_and_compress(store: InMemoryRecordStore) -> None:
    engine = NovelContextEngine(store)
    context = engine.build_context("p1", "d1", END)
    assert engine.compress_context(context) is context
    compressed = engine.compress_context(context, 80)
    assert token_ratio(compressed) <= 80
    assert compressed.startswith("Project: Glass Desert")


def test_compress_uses_configured_default(store: InMemoryRecordStore) -> None:
    engine = NovelContextEngine(store, EngineConfig(default_max_tokens=60))
    context = engine.build_context("p1", "d1", END)
    assert token_ratio(engine.compress_context(context)) <= 60


def test_build_compressed_context_matches_string_path(store: InMemoryRecordStore) -> None:
    engine = NovelContextEngine(store)
    context = engine.build_context("p1", "d1", END)
    assert engine.build_compressed_context("p1", "d1", END, 90) == engine.compress_context(
        context, 90
    )


def test_extract_relevant_content(store: InMemoryRecordStore) -> None:
    engine = NovelContextEngine(store)
    excerpt = engine.extract_relevant_content(CHAPTER_TEXT, END)
    assert excerpt.endswith(CHAPTER_PARAGRAPHS[-1])
    assert engine.extract_relevant_content(CHAPTER_TEXT, 0) == ""


def test_analyze_context_quality(store: InMemoryRecordStore) -> None:
    engine = NovelContextEngine(store)
    report = engine.analyze_context_quality(engine.build_context("p1", "d1", END))
    assert report.overall_quality >= 70


def test_build_separated_context(store: InMemoryRecordStore) -> None:
    system, user = NovelContextEngine(store).build_separated_context("p1", "d1", END)
    assert "Fantasy style:" in system
    assert user.endswith(CONTINUE_MARKER)


def test_context_stats(store: InMemoryRecordStore) -> None:
    stats = NovelContextEngine(store).context_stats("p1")
    total = len(CHAPTER_TEXT) + len("Sand.")
    assert stats.document_count == 2
    assert stats.character_count == 2
    assert stats.total_characters == total
    assert stats.estimated_tokens == math.ceil(total / 4)


def test_context_stats_unknown_project(store: InMemoryRecordStore) -> None:
    with pytest.raises(NotFoundError):
        NovelContextEngine(store).context_stats("nope")


def test_character_operations(store: InMemoryRecordStore) -> None:
    store.add_character(
        CharacterRecord(id="c3", project_id="p1", name="Vesper", aliases=["Shade"])
    )
    engine = NovelContextEngine(store)
    assert [c.name for c in engine.relevant_characters("p1", "Vesper and Kai argued.")] == [
        "Kai",
        "Vesper",
    ]
    content = "Kai spoke with Aria, then with Shade and a stranger named Lina."
    assert engine.detect_new_characters("p1", content) == ["Lina"]
    merged = engine.integrate_characters("ctx", store.list_characters("p1")[:1])
    assert "Character details:" in merged


def test_continue_writing_with_stub(store: InMemoryRecordStore) -> None:
    backend = StubCompletionBackend()
    engine = NovelContextEngine(store)
    response = engine.continue_writing(
        backend, "p1", "d1", END, 100, model="tiny", completion_tokens=64, temperature=0.8
    )
    assert response.text == "The story continues. (model=tiny)"

    request = backend.requests[0]
    assert request.prompt.endswith(f"\n\n{CONTINUE_MARKER}")
    assert token_ratio(request.prompt.removesuffix(f"\n\n{CONTINUE_MARKER}")) <= 100
    assert "Fantasy style:" in request.system
    assert request.max_tokens == 64
    assert request.temperature == 0.8
    assert request.top_p is None


def test_continue_writing_unknown_document(store: InMemoryRecordStore) -> None:
    with pytest.raises(NotFoundError, match="document not found: d9"):
        NovelContextEngine(store).continue_writing(StubCompletionBackend(), "p1", "d9", 0)


def test_continue_writing_reads_project_once(store: InMemoryRecordStore) -> None:
    reads: list[str] = []
    original = store.get_project

    def counting_get_project(project_id: str):
        reads.append(project_id)
        return original(project_id)

    store.get_project = counting_get_project  # type: ignore[method-assign]
    NovelContextEngine(store).continue_writing(StubCompletionBackend(), "p1", "d1", END)
    assert reads == ["p1"]
