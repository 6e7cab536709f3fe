"""Pydantic models for CODEOWNERS entries and lookup results."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr

from .config import GLOBAL_PATTERN
from .patterns import PatternMatcher, compile_pattern


class Codeowner(BaseModel):
    """Owners for a given pattern.

    The matcher is derived from ``pattern`` when the entry is created, so
    entries are immutable.
    """

    model_config = ConfigDict(frozen=True)

    pattern: str
    owners: list[str] = Field(default_factory=list)  # e.g. ["@org/team", "dev@example.com"]

    _matcher: PatternMatcher = PrivateAttr()

    def model_post_init(self, __context: Any) -> None:
        self._matcher = compile_pattern(self.pattern)

    @property
    def matcher(self) -> PatternMatcher:
        return self._matcher

    def __hash__(self) -> int:
        return hash((self.pattern, tuple(self.owners)))

    def is_global(self) -> bool:
        """Whether this is the catch-all ``*`` entry."""
        return self.pattern == GLOBAL_PATTERN

    def matches(self, path: str) -> bool:
        return self._matcher.matches(path)

    def __str__(self) -> str:
        return f"{self.pattern}\t{', '.join(self.owners)}"


class LocatedFile(BaseModel):
    """A discovered CODEOWNERS file."""

    path: str  # Full path to the CODEOWNERS file
    repo_root: str  # Directory the search stopped in


class PathOwners(BaseModel):
    """Owners resolved for one path."""

    path: str
    owners: list[str]
    pattern: Optional[str] = None  # Winning pattern, None if nothing matched


class OwnersLookupResult(BaseModel):
    """Result from the owners lookup tool."""

    codeowners_path: str
    repo_root: str
    local_only: bool = False
    results: list[PathOwners]
    unowned: list[str]  # Paths with no matching pattern
