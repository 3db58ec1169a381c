"""Engine configuration: tunable limits, overridable from the environment."""

from __future__ import annotations

import os
from dataclasses import dataclass, field

from .keywords import KeyTermVocabulary

_ENV_PREFIX = "NOVEL_CONTEXT_"


@dataclass
class EngineConfig:
    """Limits used by extraction, section building and allocation."""

    default_max_tokens: int = 2048
    recent_paragraphs: int = 3
    relevant_paragraphs: int = 5
    short_document_paragraphs: int = 5
    min_content_length: int = 100
    background_preview_chars: int = 100
    floor_tokens: float = 20.0
    floor_ratio: float = 0.1
    vocabulary: KeyTermVocabulary = field(default_factory=KeyTermVocabulary)

    def __post_init__(self) -> None:
        positive = {
            "default_max_tokens": self.default_max_tokens,
            "recent_paragraphs": self.recent_paragraphs,
            "relevant_paragraphs": self.relevant_paragraphs,
            "background_preview_chars": self.background_preview_chars,
        }
        for name, value in positive.items():
            if value <= 0:
                msg = f"{name} must be positive"
                raise ValueError(msg)
        if self.floor_tokens < 0 or not 0 <= self.floor_ratio <= 1:
            msg = "floor_tokens must be >= 0 and floor_ratio within [0, 1]"
            raise ValueError(msg)

    @classmethod
    def from_env(cls) -> EngineConfig:
        """Build a config from ``NOVEL_CONTEXT_*`` environment variables.

        Recognised variables: ``MAX_TOKENS``, ``RECENT_PARAGRAPHS``,
        ``RELEVANT_PARAGRAPHS`` and ``KEY_TERMS_FILE`` (JSON vocabulary).
        Unset variables keep their defaults.

        Raises:
            ValueError: If a numeric variable is not an integer.
        """
        kwargs: dict[str, object] = {}
        numeric = {
            "MAX_TOKENS": "default_max_tokens",
            "RECENT_PARAGRAPHS": "recent_paragraphs",
            "RELEVANT_PARAGRAPHS": "relevant_paragraphs",
        }
        for env_name, attr in numeric.items():
            raw = os.environ.get(_ENV_PREFIX + env_name, "").strip()
            if raw:
                try:
                    kwargs[attr] = int(raw)
                except ValueError as e:
                    msg = f"{_ENV_PREFIX}{env_name} must be an integer, got {raw!r}"
                    raise ValueError(msg) from e

        terms_file = os.environ.get(_ENV_PREFIX + "KEY_TERMS_FILE", "").strip()
        if terms_file:
            kwargs["vocabulary"] = KeyTermVocabulary.from_file(terms_file)

        return cls(**kwargs)  # type: ignore[arg-type]
