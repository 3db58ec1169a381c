"""Fixed continuation instructions, kept out of the context itself."""

from __future__ import annotations

from .records import ProjectGenre

CONTINUE_MARKER = "[CONTINUE HERE]"

_BASE_INSTRUCTIONS = f"""You are a professional fiction continuation assistant. \
Using the context provided, write new text to be inserted at the {CONTINUE_MARKER} marker.

Core requirements:
- Insert the continuation at the {CONTINUE_MARKER} marker
- Never repeat, copy or rewrite existing text
- Provide only new text that moves the story forward
- If the existing text reads as complete, write the next development of the plot
- Keep characters consistent in personality and voice
- Keep plot details and setting facts consistent
- Output only the continuation, with no explanation or commentary

Guidelines:
- If the text ends on dialogue or action, continue with the next reaction or scene
- If the text ends on description, continue with a character's thoughts, speech or action
- Every continuation should add new information or advance the story"""

_GENRE_GUIDANCE: dict[str, str] = {
    ProjectGenre.ISEKAI: (
        "Isekai style:\n"
        "- Respect the established level, skill and magic systems\n"
        "- Let the protagonist's knowledge of their former world colour their reactions"
    ),
    ProjectGenre.SCHOOL: (
        "School-life style:\n"
        "- Keep the rhythm light and the dialogue lively\n"
        "- Ground scenes in everyday school routines and relationships"
    ),
    ProjectGenre.SCIFI: (
        "Science-fiction style:\n"
        "- Keep technology consistent with the stated technology level\n"
        "- Prefer concrete, plausible detail over vague jargon"
    ),
    ProjectGenre.FANTASY: (
        "Fantasy style:\n"
        "- Keep magic within the rules already shown\n"
        "- Describe races and places consistently with earlier chapters"
    ),
}


class SystemPromptBuilder:
    """Builds the system prompt for a continuation request."""

    def __init__(self, genre: str | None = None) -> None:
        self._genre = genre

    def build(self) -> str:
        guidance = _GENRE_GUIDANCE.get(self._genre) if self._genre else None
        if guidance is None:
            return _BASE_INSTRUCTIONS
        return f"{_BASE_INSTRUCTIONS}\n\n{guidance}"
