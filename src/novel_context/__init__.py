"""novel-context — context assembly and token-budget compression for fiction continuation."""

from __future__ import annotations

__version__ = "0.1.0"

from .allocation import TokenBudgetAllocator
from .assembler import ContextAssembler
from .backend import (
    CompletionBackend,
    CompletionRequest,
    CompletionResponse,
    OllamaCompletionBackend,
    StubCompletionBackend,
)
from .characters import detect_new_characters, integrate_characters, relevant_characters
from .compression import (
    CompressedContext,
    CompressionStrategy,
    ContextCompressor,
    SectionCompressor,
)
from .config import EngineConfig
from .engine import NovelContextEngine
from .errors import ContextError, NotFoundError
from .extraction import RelevantContentExtractor
from .keywords import DEFAULT_KEY_TERMS, KeyTermVocabulary
from .prompts import CONTINUE_MARKER, SystemPromptBuilder
from .quality import ContextQualityAnalyzer
from .records import (
    CharacterRecord,
    ContextSection,
    ContextStats,
    DocumentRecord,
    ProjectGenre,
    ProjectSummary,
    QualityReport,
    Relationship,
    SectionType,
    TokenAllocation,
)
from .sections import SectionBuilder
from .segmenter import SectionSegmenter
from .sqlite_store import SqliteRecordStore
from .store import InMemoryRecordStore, RecordStore
from .telemetry import (
    ContextTracer,
    TelemetryConfig,
    trace_completion,
    trace_context_build,
    trace_context_compress,
)
from .tokens import TokenBudget, estimate_tokens

__all__ = [
    "CONTINUE_MARKER",
    "CharacterRecord",
    "CompletionBackend",
    "CompletionRequest",
    "CompletionResponse",
    "CompressedContext",
    "CompressionStrategy",
    "ContextAssembler",
    "ContextCompressor",
    "ContextError",
    "ContextQualityAnalyzer",
    "ContextSection",
    "ContextStats",
    "ContextTracer",
    "DEFAULT_KEY_TERMS",
    "DocumentRecord",
    "EngineConfig",
    "InMemoryRecordStore",
    "KeyTermVocabulary",
    "NotFoundError",
    "NovelContextEngine",
    "OllamaCompletionBackend",
    "ProjectGenre",
    "ProjectSummary",
    "QualityReport",
    "RecordStore",
    "Relationship",
    "RelevantContentExtractor",
    "SectionBuilder",
    "SectionCompressor",
    "SectionSegmenter",
    "SectionType",
    "SqliteRecordStore",
    "StubCompletionBackend",
    "SystemPromptBuilder",
    "TelemetryConfig",
    "TokenAllocation",
    "TokenBudget",
    "TokenBudgetAllocator",
    "detect_new_characters",
    "estimate_tokens",
    "integrate_characters",
    "relevant_characters",
    "trace_completion",
    "trace_context_build",
    "trace_context_compress",
]
