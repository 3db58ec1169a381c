"""Error types raised by the context engine."""

from __future__ import annotations


class ContextError(Exception):
    """Base class for context engine errors."""


class NotFoundError(ContextError):
    """Raised when a project or document identifier does not resolve."""

    def __init__(self, kind: str, identifier: str) -> None:
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"{kind} not found: {identifier}")
