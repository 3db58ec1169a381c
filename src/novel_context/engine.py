"""Engine facade — the operations exposed to the presentation layer."""

from __future__ import annotations

import logging
import math

from . import characters as character_analysis
from .assembler import ContextAssembler
from .backend import CompletionBackend, CompletionRequest, CompletionResponse
from .compression import ContextCompressor
from .config import EngineConfig
from .errors import NotFoundError
from .extraction import RelevantContentExtractor
from .prompts import CONTINUE_MARKER, SystemPromptBuilder
from .quality import ContextQualityAnalyzer
from .records import CharacterRecord, ContextStats, QualityReport, render_sections
from .store import RecordStore
from .telemetry import trace_completion, trace_context_compress
from .tokens import CHARS_PER_TOKEN, estimate_tokens

logger = logging.getLogger(__name__)


class NovelContextEngine:
    """Builds, compresses and scores continuation contexts for one store.

    Holds no per-call state, so one instance can serve concurrent callers as
    long as the store itself can.
    """

    def __init__(self, store: RecordStore, config: EngineConfig | None = None) -> None:
        self._store = store
        self._config = config or EngineConfig()
        self._extractor = RelevantContentExtractor(self._config)
        self._assembler = ContextAssembler(store, self._config)
        self._compressor = ContextCompressor(self._config)
        self._quality = ContextQualityAnalyzer()

    @property
    def config(self) -> EngineConfig:
        return self._config

    # ------------------------------------------------------------------
    # Core operations
    # ------------------------------------------------------------------

    def build_context(self, project_id: str, document_id: str, position: int) -> str:
        return self._assembler.build(project_id, document_id, position)

    def compress_context(self, context: str, max_tokens: int | None = None) -> str:
        budget = max_tokens if max_tokens is not None else self._config.default_max_tokens
        with trace_context_compress(budget):
            return self._compressor.compress(context, budget)

    def extract_relevant_content(self, full_text: str, position: int) -> str:
        return self._extractor.extract(full_text, position)

    def analyze_context_quality(self, context: str) -> QualityReport:
        return self._quality.analyze(context)

    # ------------------------------------------------------------------
    # Supporting operations
    # ------------------------------------------------------------------

    def build_compressed_context(
        self, project_id: str, document_id: str, position: int, max_tokens: int | None = None
    ) -> str:
        """Build and fit a context without re-parsing the rendered string."""
        budget = max_tokens if max_tokens is not None else self._config.default_max_tokens
        sections = self._assembler.build_sections(project_id, document_id, position)
        with trace_context_compress(budget):
            return self._compressor.compress_sections(sections, budget)

    def build_separated_context(
        self, project_id: str, document_id: str, position: int
    ) -> tuple[str, str]:
        return self._assembler.build_separated(project_id, document_id, position)

    def relevant_characters(self, project_id: str, content: str) -> list[CharacterRecord]:
        return character_analysis.relevant_characters(
            self._store.list_characters(project_id), content
        )

    def detect_new_characters(self, project_id: str, content: str) -> list[str]:
        known: list[str] = []
        for char in self._store.list_characters(project_id):
            known.append(char.name)
            known.extend(char.aliases)
        return character_analysis.detect_new_characters(content, known)

    def integrate_characters(self, context: str, characters: list[CharacterRecord]) -> str:
        return character_analysis.integrate_characters(context, characters)

    def context_stats(self, project_id: str) -> ContextStats:
        """Document/character counts and size of a project's stored text.

        Raises:
            NotFoundError: If the project does not resolve.
        """
        if self._store.get_project(project_id) is None:
            raise NotFoundError("project", project_id)
        documents = self._store.list_documents(project_id)
        total_chars = sum(len(d.content) for d in documents)
        return ContextStats(
            document_count=len(documents),
            character_count=len(self._store.list_characters(project_id)),
            total_characters=total_chars,
            estimated_tokens=math.ceil(total_chars / CHARS_PER_TOKEN),
        )

    def continue_writing(
        self,
        backend: CompletionBackend,
        project_id: str,
        document_id: str,
        position: int,
        max_tokens: int | None = None,
        *,
        model: str = "",
        completion_tokens: int | None = None,
        temperature: float | None = None,
        top_p: float | None = None,
    ) -> CompletionResponse:
        """Build and compress a context, then ask *backend* to continue it.

        *max_tokens* bounds the context; *completion_tokens* bounds the
        generated text.
        """
        budget = max_tokens if max_tokens is not None else self._config.default_max_tokens
        project, sections = self._assembler.build_project_sections(
            project_id, document_id, position
        )
        with trace_context_compress(budget):
            context = self._compressor.compress_sections(sections, budget)
        report = self._quality.analyze(render_sections(sections))
        logger.info(
            "continuation context ready: %d tokens (quality %d)",
            estimate_tokens(context),
            report.overall_quality,
        )

        request = CompletionRequest(
            prompt=f"{context}\n\n{CONTINUE_MARKER}" if context else CONTINUE_MARKER,
            system=SystemPromptBuilder(project.genre).build(),
            model=model,
            max_tokens=completion_tokens,
            temperature=temperature,
            top_p=top_p,
        )
        with trace_completion(backend.name()):
            return backend.generate(request)
