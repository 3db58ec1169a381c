"""Recover typed sections from a rendered context string."""

from __future__ import annotations

import logging
import re

from .records import ContextSection, SectionType
from .sections import CHARACTERS_HEADER, DOCUMENT_HEADER, PROJECT_HEADER, WORLD_HEADER

logger = logging.getLogger(__name__)

_HEADERS: dict[str, SectionType] = {
    PROJECT_HEADER: SectionType.PROJECT,
    WORLD_HEADER: SectionType.WORLD,
    CHARACTERS_HEADER: SectionType.CHARACTERS,
    DOCUMENT_HEADER: SectionType.DOCUMENT_HEADER,
}

# A header counts only at the very start or right after a blank line.
_HEADER_PATTERN = re.compile(
    r"(?:\A|(?<=\n\n))(" + "|".join(re.escape(h) for h in _HEADERS) + ")"
)


class SectionSegmenter:
    """Splits a flat context back into importance-weighted sections."""

    def segment(self, context: str) -> list[ContextSection]:
        """Return the sections found in *context*, in textual order.

        Missing headers are simply absent from the result. Everything after
        the document header's first blank line is the content section and is
        not searched for further headers. Text before the first header is
        not part of any section and is dropped.
        """
        sections: list[ContextSection] = []
        matches: list[re.Match[str]] = []
        seen: set[str] = set()
        for match in _HEADER_PATTERN.finditer(context):
            # a repeated header stays inside the preceding section
            if match.group(1) in seen:
                continue
            seen.add(match.group(1))
            matches.append(match)
            if match.group(1) == DOCUMENT_HEADER:
                break

        if matches and context[: matches[0].start()].strip():
            logger.debug(
                "segmenter: discarding %d chars before the first section header",
                matches[0].start(),
            )

        for idx, match in enumerate(matches):
            section_type = _HEADERS[match.group(1)]
            end = matches[idx + 1].start() if idx + 1 < len(matches) else len(context)
            region = context[match.start():end]

            if section_type is SectionType.DOCUMENT_HEADER:
                header, _sep, body = region.partition("\n\n")
                sections.append(ContextSection.of(section_type, header.rstrip("\n")))
                body = body.strip("\n")
                if body:
                    sections.append(ContextSection.of(SectionType.CONTENT, body))
                continue

            text = region.rstrip("\n")
            if text:
                sections.append(ContextSection.of(section_type, text))

        found = {s.type for s in sections}
        missing = [t.value for t in SectionType if t not in found]
        if missing:
            logger.debug("segmenter: sections absent from context: %s", ", ".join(missing))
        return sections
