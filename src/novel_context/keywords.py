"""Key-term vocabulary used to rank paragraphs by relevance.

The vocabulary is plain data: the default list mixes Chinese and English
action and fantasy vocabulary, and can be replaced per genre or loaded from a
JSON file (either a list of terms or a ``{"default": [...], "<genre>": [...]}``
mapping).
"""

from __future__ import annotations

import json
from pathlib import Path

KEY_VERBS: tuple[str, ...] = (
    "說", "走", "看", "想", "決定", "發現", "戰鬥", "魔法", "攻擊", "防禦",
    "said", "walked", "looked", "thought", "decided", "discovered",
    "fought", "attacked", "defended",
)

KEY_NOUNS: tuple[str, ...] = (
    "劍", "魔法", "怪物", "城堡", "公主", "王子", "魔王", "勇者", "冒險",
    "sword", "magic", "monster", "castle", "princess", "prince",
    "demon lord", "hero", "adventure",
)

DEFAULT_KEY_TERMS: tuple[str, ...] = tuple(dict.fromkeys(KEY_VERBS + KEY_NOUNS))


class KeyTermVocabulary:
    """Default key terms with optional per-genre replacements."""

    def __init__(
        self,
        default: tuple[str, ...] | list[str] = DEFAULT_KEY_TERMS,
        by_genre: dict[str, list[str]] | None = None,
    ) -> None:
        self._default = tuple(default)
        self._by_genre = {k: tuple(v) for k, v in (by_genre or {}).items()}

    def terms_for(self, genre: str | None = None) -> tuple[str, ...]:
        if genre is not None and genre in self._by_genre:
            return self._by_genre[genre]
        return self._default

    @classmethod
    def from_file(cls, path: str | Path) -> KeyTermVocabulary:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
        if isinstance(data, list):
            return cls(default=[str(t) for t in data])
        if not isinstance(data, dict):
            msg = f"key term file must hold a list or an object: {path}"
            raise ValueError(msg)
        default = data.get("default", list(DEFAULT_KEY_TERMS))
        by_genre = {k: [str(t) for t in v] for k, v in data.items() if k != "default"}
        return cls(default=[str(t) for t in default], by_genre=by_genre)
