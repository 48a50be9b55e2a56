"""Comment-block formatting and direct buffer insertion."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from diffcritic.exceptions import NoActiveTargetError
from diffcritic.review.prompt import is_clean_review

if TYPE_CHECKING:
    from diffcritic.host import EditorHost

logger = logging.getLogger(__name__)

COMMENT_MARKERS: dict[str, str] = {
    ".py": "#",
    ".sh": "#",
    ".bash": "#",
    ".rb": "#",
    ".yaml": "#",
    ".yml": "#",
    ".toml": "#",
    ".r": "#",
    ".pl": "#",
    ".sql": "--",
    ".lua": "--",
    ".hs": "--",
}
DEFAULT_COMMENT_MARKER = "//"


def comment_marker_for(extension: str) -> str:
    """Line-comment prefix for a file extension, "//" when unknown."""
    return COMMENT_MARKERS.get(extension.lower(), DEFAULT_COMMENT_MARKER)


def format_review(review: str, extension: str = "") -> str:
    """Wrap review text in a comment block suited to the file type."""
    marker = comment_marker_for(extension)
    if is_clean_review(review):
        return f"{marker} ✅ AI review: no critical issues found. Nice work!\n"

    lines = [f"{marker} ===== AI code review ====="]
    for line in review.splitlines():
        lines.append(f"{marker} {line}".rstrip())
    lines.append(f"{marker} ===== end of AI review =====")
    return "\n".join(lines) + "\n"


class BufferInjector:
    """Insert the formatted review at the host's cursor."""

    def deliver(self, host: EditorHost, review: str, extension: str = "") -> str:
        position = host.cursor_position()
        if position is None:
            raise NoActiveTargetError("No active editor to insert the review into")
        text = format_review(review, extension)
        host.insert_text(position, text)
        logger.debug("Inserted %d characters at line %d", len(text), position.line)
        return text
