"""SQLite-backed record store."""

from __future__ import annotations

import json
import logging
import sqlite3
from pathlib import Path
from typing import Any

from .records import CharacterRecord, DocumentRecord, ProjectSummary, Relationship
from .store import RecordStore

logger = logging.getLogger(__name__)

_SCHEMA = """
CREATE TABLE IF NOT EXISTS projects (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL,
    type TEXT NOT NULL,
    description TEXT NOT NULL DEFAULT '',
    settings TEXT NOT NULL DEFAULT '{}'
);
CREATE TABLE IF NOT EXISTS chapters (
    id TEXT PRIMARY KEY,
    project_id TEXT NOT NULL,
    title TEXT NOT NULL,
    content TEXT NOT NULL DEFAULT '',
    order_num INTEGER NOT NULL DEFAULT 0
);
CREATE TABLE IF NOT EXISTS characters (
    seq INTEGER PRIMARY KEY AUTOINCREMENT,
    id TEXT NOT NULL UNIQUE,
    project_id TEXT NOT NULL,
    name TEXT NOT NULL,
    archetype TEXT NOT NULL DEFAULT '',
    age INTEGER NOT NULL DEFAULT 0,
    gender TEXT NOT NULL DEFAULT '',
    appearance TEXT NOT NULL DEFAULT '',
    personality TEXT NOT NULL DEFAULT '',
    background TEXT NOT NULL DEFAULT '',
    aliases TEXT NOT NULL DEFAULT '[]'
);
CREATE TABLE IF NOT EXISTS character_abilities (
    seq INTEGER PRIMARY KEY AUTOINCREMENT,
    character_id TEXT NOT NULL,
    name TEXT NOT NULL
);
CREATE TABLE IF NOT EXISTS character_relationships (
    seq INTEGER PRIMARY KEY AUTOINCREMENT,
    source_id TEXT NOT NULL,
    target_id TEXT NOT NULL,
    type TEXT NOT NULL,
    description TEXT NOT NULL DEFAULT ''
);
"""


def _parse_settings(raw: str | None) -> dict[str, str]:
    """Genre settings from the JSON column.

    Accepts a flat mapping or one nested under ``templateSettings``; non-scalar
    values are dropped.
    """
    if not raw:
        return {}
    try:
        data: Any = json.loads(raw)
    except json.JSONDecodeError:
        logger.warning("ignoring malformed project settings JSON")
        return {}
    if not isinstance(data, dict):
        return {}
    nested = data.get("templateSettings")
    if isinstance(nested, dict):
        data = nested
    return {
        str(k): str(v)
        for k, v in data.items()
        if isinstance(v, str | int | float) and not isinstance(v, bool)
    }


class SqliteRecordStore(RecordStore):
    """Reads projects, chapters and characters from a SQLite database."""

    def __init__(self, db_path: Path | str) -> None:
        self._db_path = str(db_path)
        self._conn = sqlite3.connect(self._db_path)
        self._conn.row_factory = sqlite3.Row
        self._conn.executescript(_SCHEMA)
        self._conn.commit()

    # -- reads ---------------------------------------------------------------

    def get_project(self, project_id: str) -> ProjectSummary | None:
        row = self._conn.execute(
            "SELECT id, name, type, description, settings FROM projects WHERE id = ?",
            (project_id,),
        ).fetchone()
        if row is None:
            return None
        return ProjectSummary(
            id=row["id"],
            name=row["name"],
            genre=row["type"],
            description=row["description"] or "",
            settings=_parse_settings(row["settings"]),
        )

    def get_document(self, document_id: str) -> DocumentRecord | None:
        row = self._conn.execute(
            "SELECT id, project_id, title, content, order_num FROM chapters WHERE id = ?",
            (document_id,),
        ).fetchone()
        if row is None:
            return None
        return self._document(row)

    def list_documents(self, project_id: str) -> list[DocumentRecord]:
        rows = self._conn.execute(
            "SELECT id, project_id, title, content, order_num FROM chapters "
            "WHERE project_id = ? ORDER BY order_num",
            (project_id,),
        ).fetchall()
        return [self._document(r) for r in rows]

    def list_characters(self, project_id: str) -> list[CharacterRecord]:
        rows = self._conn.execute(
            "SELECT * FROM characters WHERE project_id = ? ORDER BY seq",
            (project_id,),
        ).fetchall()
        return [self._character(r) for r in rows]

    # -- writes (seeding) ----------------------------------------------------

    def add_project(self, project: ProjectSummary) -> None:
        self._conn.execute(
            "INSERT OR REPLACE INTO projects VALUES (?, ?, ?, ?, ?)",
            (
                project.id,
                project.name,
                project.genre,
                project.description,
                json.dumps(project.settings, ensure_ascii=False),
            ),
        )
        self._conn.commit()

    def add_document(self, document: DocumentRecord) -> None:
        self._conn.execute(
            "INSERT OR REPLACE INTO chapters VALUES (?, ?, ?, ?, ?)",
            (document.id, document.project_id, document.title, document.content, document.order),
        )
        self._conn.commit()

    def add_character(self, character: CharacterRecord) -> None:
        self._conn.execute(
            "INSERT INTO characters (id, project_id, name, archetype, age, gender, "
            "appearance, personality, background, aliases) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                character.id,
                character.project_id,
                character.name,
                character.archetype,
                character.age,
                character.gender,
                character.appearance,
                character.personality,
                character.background,
                json.dumps(character.aliases, ensure_ascii=False),
            ),
        )
        self._conn.executemany(
            "INSERT INTO character_abilities (character_id, name) VALUES (?, ?)",
            [(character.id, name) for name in character.abilities],
        )
        self._conn.executemany(
            "INSERT INTO character_relationships (source_id, target_id, type, description) "
            "VALUES (?, ?, ?, ?)",
            [
                (character.id, rel.target_id, rel.relation_type, rel.description)
                for rel in character.relationships
            ],
        )
        self._conn.commit()

    def close(self) -> None:
        """Close the underlying database connection."""
        self._conn.close()

    # -- helpers -------------------------------------------------------------

    @staticmethod
    def _document(row: sqlite3.Row) -> DocumentRecord:
        return DocumentRecord(
            id=row["id"],
            project_id=row["project_id"],
            title=row["title"],
            content=row["content"] or "",
            order=row["order_num"] or 0,
        )

    def _character(self, row: sqlite3.Row) -> CharacterRecord:
        abilities = self._conn.execute(
            "SELECT name FROM character_abilities WHERE character_id = ? ORDER BY seq",
            (row["id"],),
        ).fetchall()
        relationships = self._conn.execute(
            "SELECT target_id, type, description FROM character_relationships "
            "WHERE source_id = ? ORDER BY seq",
            (row["id"],),
        ).fetchall()
        try:
            aliases = json.loads(row["aliases"] or "[]")
        except json.JSONDecodeError:
            aliases = []
        return CharacterRecord(
            id=row["id"],
            project_id=row["project_id"],
            name=row["name"],
            archetype=row["archetype"] or "",
            age=row["age"] or 0,
            gender=row["gender"] or "",
            appearance=row["appearance"] or "",
            personality=row["personality"] or "",
            background=row["background"] or "",
            abilities=[a["name"] for a in abilities],
            relationships=[
                Relationship(
                    target_id=r["target_id"],
                    relation_type=r["type"],
                    description=r["description"] or "",
                )
                for r in relationships
            ],
            aliases=[str(a) for a in aliases] if isinstance(aliases, list) else [],
        )
