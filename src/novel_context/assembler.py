"""Context assembler — builds the full, uncompressed context for a cursor."""

from __future__ import annotations

import logging

from .config import EngineConfig
from .errors import NotFoundError
from .prompts import CONTINUE_MARKER, SystemPromptBuilder
from .records import ContextSection, DocumentRecord, ProjectSummary, render_sections
from .sections import SectionBuilder
from .store import RecordStore
from .telemetry import trace_context_build
from .tokens import estimate_tokens

logger = logging.getLogger(__name__)


class ContextAssembler:
    """Assembles project, world, character and document sections from a store."""

    def __init__(
        self,
        store: RecordStore,
        config: EngineConfig | None = None,
        builder: SectionBuilder | None = None,
    ) -> None:
        self._store = store
        self._config = config or EngineConfig()
        self._builder = builder or SectionBuilder(self._config)

    def build(self, project_id: str, document_id: str, position: int) -> str:
        """Build the full context string. No token budgeting is applied.

        Raises:
            NotFoundError: If the project or document does not resolve.
        """
        return render_sections(self.build_sections(project_id, document_id, position))

    def build_sections(
        self, project_id: str, document_id: str, position: int
    ) -> list[ContextSection]:
        """Same as :meth:`build` but keeps the typed sections."""
        return self.build_project_sections(project_id, document_id, position)[1]

    def build_project_sections(
        self, project_id: str, document_id: str, position: int
    ) -> tuple[ProjectSummary, list[ContextSection]]:
        """Typed sections plus the resolved project, read from the store once."""
        with trace_context_build(project_id, document_id) as span:
            project, document = self._resolve(project_id, document_id)
            characters = self._store.list_characters(project_id)
            sections = self._builder.build_all(project, characters, document, position)
            span.set_attribute("context.sections", len(sections))

        logger.info(
            "built context for project=%s document=%s position=%d: %d sections, ~%d tokens",
            project_id,
            document_id,
            position,
            len(sections),
            sum(estimate_tokens(s.text) for s in sections),
        )
        return project, sections

    def build_separated(
        self, project_id: str, document_id: str, position: int
    ) -> tuple[str, str]:
        """Return ``(system_prompt, user_context)``.

        The user context ends with the continuation marker so the backend
        knows where new text goes.
        """
        project, sections = self.build_project_sections(project_id, document_id, position)
        context = render_sections(sections)
        system_prompt = SystemPromptBuilder(project.genre).build()
        user_context = f"{context}\n\n{CONTINUE_MARKER}" if context else CONTINUE_MARKER
        return system_prompt, user_context

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _resolve(self, project_id: str, document_id: str) -> tuple[ProjectSummary, DocumentRecord]:
        project = self._require_project(project_id)
        document = self._store.get_document(document_id)
        if document is None:
            logger.warning("document not found: %s", document_id)
            raise NotFoundError("document", document_id)
        return project, document

    def _require_project(self, project_id: str) -> ProjectSummary:
        project = self._store.get_project(project_id)
        if project is None:
            logger.warning("project not found: %s", project_id)
            raise NotFoundError("project", project_id)
        return project
