r"""Compile gitignore-style CODEOWNERS patterns into path matchers.

A pattern is tokenized into a small AST (a list of segments plus the
``rooted`` and ``directory`` flags) and the AST is lowered to a Python
regular expression that must match the whole normalized path.

Supported syntax, a subset of gitignore:
- ``*`` matches zero or more characters other than ``/``
- ``/**/`` matches one directory separator or any run of directories
- ``**/`` at the start matches in any directory
- ``/**`` at the end matches everything beneath
- ``[abc]`` character classes
- ``\x`` makes ``x`` literal (``\*``, ``\#``, ``\!``)
- ``?`` and ``.`` are literal characters
- a leading ``/`` anchors the pattern to the repository root
- a trailing ``/`` matches the directory and anything beneath it

Unlike plain gitignore, ``dir/*.ext`` is anchored to the repository root, and
``dir/*`` only matches direct children of ``dir/``.

Example:
    >>> matcher = compile_pattern("docs/*.md")
    >>> matcher.matches("docs/index.md")
    True
    >>> matcher.matches("docs/api/index.md")
    False
"""

import re
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict

from .config import ESCAPE_CHAR

SegmentKind = Literal[
    "LITERAL",
    "STAR",
    "DIRS",
    "LEADING_DIRS",
    "TRAILING",
    "CHAR_CLASS",
]

# Leading "\#" or "\!"
ESCAPED_PREFIX_PATTERN = re.compile(r"^\\[#!]")

# "dir/*.ext" somewhere in the pattern; such patterns get anchored to the root
SUFFIX_GLOB_PATTERN = re.compile(r"[^/+]/.*\*\.")

# Double-star tokens, tried in this order at each position
DOUBLE_STAR_TOKENS = [
    ("/**/", "DIRS"),
    ("**/", "LEADING_DIRS"),
    ("/**", "TRAILING"),
]

SEGMENT_EXPRESSIONS = {
    "STAR": "[^/]*",
    "DIRS": "(?:/|/.+/)",
    "LEADING_DIRS": "(?:|.*/)",
    "TRAILING": "(?:|/.*)",
}

ROOTED_PREFIX = "(?:|/)"
UNROOTED_PREFIX = "(?:|.*/)"
DIRECTORY_SUFFIX = "(?:|.*)"


class Segment(BaseModel):
    """One token of a compiled pattern."""

    model_config = ConfigDict(frozen=True)

    kind: SegmentKind
    text: str = ""  # Only set for LITERAL and CHAR_CLASS


class PatternAST(BaseModel):
    """Parsed form of a single CODEOWNERS pattern."""

    model_config = ConfigDict(frozen=True)

    segments: list[Segment]
    rooted: bool = False  # Pattern started with "/"
    directory: bool = False  # Pattern ended with "/"


def tokenize_pattern(pattern: str) -> list[Segment]:
    """Split a pattern into segments.

    Args:
        pattern: Raw pattern text (after prefix handling)

    Returns:
        List of segments, adjacent literal characters merged
    """
    segments: list[Segment] = []
    literal: list[str] = []

    def flush_literal() -> None:
        if literal:
            segments.append(Segment(kind="LITERAL", text="".join(literal)))
            literal.clear()

    i = 0
    while i < len(pattern):
        char = pattern[i]

        if char == ESCAPE_CHAR and i + 1 < len(pattern):
            literal.append(pattern[i + 1])
            i += 2
            continue

        double_star = next(
            ((token, kind) for token, kind in DOUBLE_STAR_TOKENS if pattern.startswith(token, i)),
            None,
        )
        if double_star:
            token, kind = double_star
            flush_literal()
            segments.append(Segment(kind=kind))
            i += len(token)
            continue

        if char == "*":
            flush_literal()
            segments.append(Segment(kind="STAR"))
            i += 1
            continue

        if char == "[":
            # A "]" right after the opening bracket is part of the class
            start = i + 2 if pattern[i + 1 : i + 2] == "]" else i + 1
            end = pattern.find("]", start)
            flush_literal()
            if end == -1:
                # Unterminated class: kept raw, the pattern won't compile
                segments.append(Segment(kind="CHAR_CLASS", text=pattern[i:]))
                break
            segments.append(Segment(kind="CHAR_CLASS", text=pattern[i : end + 1]))
            i = end + 1
            continue

        literal.append(char)
        i += 1

    flush_literal()
    return segments


def parse_pattern(pattern: str) -> PatternAST:
    """Parse a CODEOWNERS pattern into a PatternAST.

    Args:
        pattern: Pattern as written in the CODEOWNERS file

    Returns:
        PatternAST with rooted/directory flags resolved
    """
    if ESCAPED_PREFIX_PATTERN.match(pattern):
        pattern = pattern[1:]

    if pattern and not pattern.startswith("/") and SUFFIX_GLOB_PATTERN.search(pattern):
        pattern = "/" + pattern

    if pattern.startswith("/**/"):
        pattern = pattern[1:]

    segments = tokenize_pattern(pattern)

    directory = bool(segments) and segments[-1].kind == "LITERAL" and segments[-1].text.endswith("/")
    rooted = bool(segments) and segments[0].kind == "LITERAL" and segments[0].text.startswith("/")

    if rooted:
        head = segments[0].text[1:]
        segments = ([Segment(kind="LITERAL", text=head)] if head else []) + segments[1:]

    return PatternAST(segments=segments, rooted=rooted, directory=directory)


def lower_pattern(ast: PatternAST) -> str:
    """Lower a PatternAST to a regular expression for ``re.fullmatch``."""
    parts = [ROOTED_PREFIX if ast.rooted else UNROOTED_PREFIX]
    for segment in ast.segments:
        if segment.kind == "LITERAL":
            parts.append(re.escape(segment.text))
        elif segment.kind == "CHAR_CLASS":
            parts.append(segment.text)
        else:
            parts.append(SEGMENT_EXPRESSIONS[segment.kind])
    if ast.directory:
        parts.append(DIRECTORY_SUFFIX)
    return "".join(parts)


class PatternMatcher:
    """Path predicate for a single CODEOWNERS pattern.

    Malformed patterns (e.g. an unterminated character class) do not raise;
    the matcher is marked invalid and matches nothing.
    """

    def __init__(self, pattern: str):
        self.pattern = pattern
        self.ast = parse_pattern(pattern)
        self.expression = lower_pattern(self.ast)
        self._regex: Optional[re.Pattern]
        try:
            self._regex = re.compile(self.expression)
        except re.error:
            self._regex = None

    @property
    def is_valid(self) -> bool:
        return self._regex is not None

    def matches(self, path: str) -> bool:
        """Check whether a normalized path matches this pattern."""
        if self._regex is None:
            return False
        return self._regex.fullmatch(path) is not None

    __call__ = matches

    def __eq__(self, other: object) -> bool:
        # Derived from the pattern alone
        if not isinstance(other, PatternMatcher):
            return NotImplemented
        return self.pattern == other.pattern

    def __hash__(self) -> int:
        return hash(self.pattern)

    def __repr__(self) -> str:
        return f"PatternMatcher({self.pattern!r})"


def compile_pattern(pattern: str) -> PatternMatcher:
    """Compile a CODEOWNERS pattern into a PatternMatcher.

    Args:
        pattern: Pattern as written in the CODEOWNERS file

    Returns:
        PatternMatcher (never raises for malformed patterns)
    """
    return PatternMatcher(pattern)
