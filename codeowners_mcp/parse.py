"""Parse CODEOWNERS documents into ordered entries."""

from typing import Iterable, Optional, Union

from .config import COMMENT_PREFIX, ESCAPE_CHAR
from .models import Codeowner


def combine_escaped_spaces(fields: list[str]) -> list[str]:
    """Rejoin fields that were split on an escaped space.

    A field ending in a backslash was followed by an escaped space, so it is
    joined with the next field (trailing backslashes dropped). Repeats until
    the joined field no longer ends in a backslash or fields run out.

    Args:
        fields: Whitespace-separated fields of one line

    Returns:
        Fields with escaped spaces restored
    """
    combined = []
    i = 0
    while i < len(fields):
        field = fields[i]
        while fields[i].endswith(ESCAPE_CHAR) and i + 1 < len(fields):
            field = f"{field.rstrip(ESCAPE_CHAR)} {fields[i + 1]}"
            i += 1
        combined.append(field)
        i += 1
    return combined


def parse_line(line: str) -> Optional[Codeowner]:
    """Parse a single CODEOWNERS line.

    Returns:
        Codeowner, or None for blank lines, comments and lines without owners
    """
    fields = line.split()
    if not fields or fields[0].startswith(COMMENT_PREFIX):
        return None
    if len(fields) < 2:
        return None

    fields = combine_escaped_spaces(fields)
    pattern, *owners = fields
    if not owners:
        # Escaped spaces swallowed every owner
        return None
    return Codeowner(pattern=pattern, owners=owners)


def parse_codeowners(document: Union[str, Iterable[str]]) -> list[Codeowner]:
    """Parse a CODEOWNERS document.

    Args:
        document: Full document text, or an iterable of lines (e.g. an open file)

    Returns:
        Entries in declaration order
    """
    lines = document.splitlines() if isinstance(document, str) else document

    entries = []
    for line in lines:
        entry = parse_line(line)
        if entry is not None:
            entries.append(entry)
    return entries
