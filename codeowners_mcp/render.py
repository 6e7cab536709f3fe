"""Render CODEOWNERS entries back to document text."""

from typing import Iterable, TextIO

from .config import COMMENT_PREFIX, ESCAPE_CHAR, PATTERN_COLUMN_WIDTH
from .models import Codeowner


def escape_pattern(pattern: str) -> str:
    """Escape a pattern so it parses back unchanged.

    A leading ``#`` would read as a comment and spaces would split the field.
    """
    if pattern.startswith(COMMENT_PREFIX):
        pattern = ESCAPE_CHAR + pattern
    return pattern.replace(" ", ESCAPE_CHAR + " ")


def escape_owner(owner: str) -> str:
    return owner.replace(" ", ESCAPE_CHAR + " ")


def render_line(entry: Codeowner) -> str:
    """Render one entry as ``<pattern padded to column> <owners>``."""
    pattern = escape_pattern(entry.pattern)
    owners = " ".join(escape_owner(owner) for owner in entry.owners)
    return f"{pattern:<{PATTERN_COLUMN_WIDTH}} {owners}\n"


def render_codeowners(entries: Iterable[Codeowner]) -> str:
    """Render entries as a CODEOWNERS document.

    Args:
        entries: Entries in declaration order

    Returns:
        Document text, one line per entry
    """
    return "".join(render_line(entry) for entry in entries)


def write_codeowners(entries: Iterable[Codeowner], stream: TextIO) -> None:
    """Write entries to an open text stream.

    Write errors propagate; the stream is flushed before returning.
    """
    for entry in entries:
        stream.write(render_line(entry))
    stream.flush()
