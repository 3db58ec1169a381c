"""novel-context Golden Path Demo.

Walks the full context pipeline end-to-end:
1. Seed an in-memory store with a project, two characters and a chapter
2. Build the full context at the end of the chapter
3. Score the context quality
4. Compress it into a small token budget
5. Continue the story through the stub completion backend

Uses the stub backend -- no real model needed.

Run: python examples/golden_path.py
"""

from __future__ import annotations

from novel_context import (
    CharacterRecord,
    DocumentRecord,
    InMemoryRecordStore,
    NovelContextEngine,
    ProjectSummary,
    Relationship,
    StubCompletionBackend,
    estimate_tokens,
)

CHAPTER = "\n\n".join(
    [
        "The academy gates closed at dusk, and Ren was still on the wrong side.",
        "He looked at the wall, then at the sword strapped to his back.",
        "Somewhere above, a bell rang out the curfew for the third time.",
        "Mei leaned over the parapet and laughed at him.",
        "\"Climb, or wait for the night patrol,\" she said.",
        "Ren decided the wall looked friendlier than the patrol.",
    ]
)


def _check(condition: bool, msg: str) -> None:  # noqa: FBT001
    """Raise RuntimeError if *condition* is False (demo validation)."""
    if not condition:
        raise RuntimeError(msg)


def _seed() -> InMemoryRecordStore:
    store = InMemoryRecordStore()
    store.add_project(
        ProjectSummary(
            id="demo",
            name="Night Academy",
            genre="isekai",
            description="A reincarnated swordsman enrols at a school for mages.",
            settings={"level_system": "ranks E to S", "magic_system": "contract spirits"},
        )
    )
    store.add_character(
        CharacterRecord(
            id="ren",
            project_id="demo",
            name="Ren",
            archetype="hero",
            age=16,
            gender="male",
            personality="reckless",
            background="A soldier in his former life, now a first-year with no magic.",
            relationships=[Relationship(target_id="mei", relation_type="classmate")],
        )
    )
    store.add_character(
        CharacterRecord(
            id="mei", project_id="demo", name="Mei", archetype="rival", age=16, gender="female"
        )
    )
    store.add_document(DocumentRecord(id="ch1", project_id="demo", title="Curfew", content=CHAPTER))
    return store


def run_demo() -> None:
    print("=" * 60)
    print("novel-context Golden Path Demo")
    print("=" * 60)

    engine = NovelContextEngine(_seed())

    print("\n[1/4] Building context...")
    context = engine.build_context("demo", "ch1", len(CHAPTER))
    print(f"  {len(context)} chars, ~{estimate_tokens(context)} tokens")
    _check(context.startswith("Project: Night Academy"), "Context should open with the project")

    print("\n[2/4] Scoring quality...")
    report = engine.analyze_context_quality(context)
    print(f"  Overall: {report.overall_quality}")
    for suggestion in report.suggestions:
        print(f"  - {suggestion}")

    print("\n[3/4] Compressing to 80 tokens...")
    compressed = engine.compress_context(context, 80)
    print(compressed)
    _check(len(compressed) <= 80 * 4, "Compressed context exceeds the budget")

    print("\n[4/4] Continuing with the stub backend...")
    response = engine.continue_writing(StubCompletionBackend(), "demo", "ch1", len(CHAPTER), 200)
    print(f"  {response.text}")

    print("\nDone.")


if __name__ == "__main__":
    run_demo()
