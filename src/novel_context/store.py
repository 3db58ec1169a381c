"""Record store interface: projects, documents and characters by id."""

from __future__ import annotations

from abc import ABC, abstractmethod

from .records import CharacterRecord, DocumentRecord, ProjectSummary


class RecordStore(ABC):
    """Abstract read interface for the records the engine consumes."""

    @abstractmethod
    def get_project(self, project_id: str) -> ProjectSummary | None:
        """Return the project, or None when the id does not resolve."""

    @abstractmethod
    def get_document(self, document_id: str) -> DocumentRecord | None:
        """Return the document, or None when the id does not resolve."""

    @abstractmethod
    def list_characters(self, project_id: str) -> list[CharacterRecord]:
        """Characters of a project in creation order."""

    @abstractmethod
    def list_documents(self, project_id: str) -> list[DocumentRecord]:
        """Documents of a project ordered by their ordering index."""


class InMemoryRecordStore(RecordStore):
    """Dict-based in-memory implementation (for testing and development)."""

    def __init__(self) -> None:
        self._projects: dict[str, ProjectSummary] = {}
        self._documents: dict[str, DocumentRecord] = {}
        self._characters: dict[str, CharacterRecord] = {}

    def add_project(self, project: ProjectSummary) -> None:
        self._projects[project.id] = project

    def add_document(self, document: DocumentRecord) -> None:
        self._documents[document.id] = document

    def add_character(self, character: CharacterRecord) -> None:
        self._characters[character.id] = character

    def get_project(self, project_id: str) -> ProjectSummary | None:
        return self._projects.get(project_id)

    def get_document(self, document_id: str) -> DocumentRecord | None:
        return self._documents.get(document_id)

    def list_characters(self, project_id: str) -> list[CharacterRecord]:
        # dicts keep insertion order, which stands in for creation order
        return [c for c in self._characters.values() if c.project_id == project_id]

    def list_documents(self, project_id: str) -> list[DocumentRecord]:
        docs = [d for d in self._documents.values() if d.project_id == project_id]
        docs.sort(key=lambda d: d.order)
        return docs
