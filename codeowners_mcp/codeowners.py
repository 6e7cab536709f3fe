"""Pattern registry and ownership resolution for a repository."""

from pathlib import Path
from typing import Iterator, Optional, TextIO, Union

from .config import DEFAULT_REPO_ROOT
from .locate import FileSystem, LocalFileSystem, find_codeowners_file
from .models import Codeowner
from .parse import parse_codeowners
from .render import render_codeowners, write_codeowners


class Codeowners:
    """Patterns/owners mappings for a repository.

    Order matters: when several patterns match a path, the one declared last
    wins, regardless of how specific it is.

    Example:
        >>> co = Codeowners.empty()
        >>> _ = co.add_pattern("*", ["@everyone"])
        >>> _ = co.add_pattern("docs/", ["@writers"])
        >>> co.owners("docs/index.md")
        ['@writers']
        >>> co.local_owners("setup.py")
        []
    """

    def __init__(
        self,
        repo_root: str = DEFAULT_REPO_ROOT,
        patterns: Optional[list[Codeowner]] = None,
        path: Optional[str] = None,
    ):
        """Initialize registry.

        Args:
            repo_root: Prefix stripped from query paths before matching
            patterns: Initial entries in declaration order
            path: CODEOWNERS file the entries were read from, if any
        """
        self.repo_root = repo_root
        self.patterns: list[Codeowner] = list(patterns) if patterns else []
        self.path = path

    @classmethod
    def empty(cls) -> "Codeowners":
        """Create an empty registry for programmatic construction."""
        return cls()

    @classmethod
    def from_text(cls, text: str, repo_root: str) -> "Codeowners":
        """Create a registry from CODEOWNERS document text."""
        return cls(repo_root=repo_root, patterns=parse_codeowners(text))

    @classmethod
    def from_reader(cls, stream: TextIO, repo_root: str) -> "Codeowners":
        """Create a registry from an open text stream."""
        return cls(repo_root=repo_root, patterns=parse_codeowners(stream))

    @classmethod
    def from_file(
        cls, start_path: Union[str, Path], fs: Optional[FileSystem] = None
    ) -> "Codeowners":
        """Locate the CODEOWNERS file for a directory and parse it.

        Args:
            start_path: Directory inside the repository
            fs: Filesystem to read from (defaults to the local disk)

        Returns:
            Codeowners rooted at the directory the file was found in

        Raises:
            CodeownersNotFoundError: If no CODEOWNERS file is found
            OSError: If locating or reading the file fails
        """
        fs = fs or LocalFileSystem()
        located = find_codeowners_file(start_path, fs=fs)
        with fs.open(located.path) as f:
            patterns = parse_codeowners(f)
        return cls(repo_root=located.repo_root, patterns=patterns, path=located.path)

    def add_pattern(self, pattern: str, owners: list[str]) -> Codeowner:
        """Append a pattern; it takes precedence over everything before it."""
        entry = Codeowner(pattern=pattern, owners=owners)
        self.patterns.append(entry)
        return entry

    def _relative(self, path: Union[str, Path]) -> str:
        path = str(path)
        # Plain string prefix, first occurrence only
        if path.startswith(self.repo_root):
            path = path[len(self.repo_root):]
        return path

    def match(self, path: Union[str, Path], local_only: bool = False) -> Optional[Codeowner]:
        """Find the entry governing a path.

        Args:
            path: File path, absolute or relative to the repository root
            local_only: Skip the global ``*`` entry

        Returns:
            Last-declared matching entry, or None
        """
        path = self._relative(path)
        for entry in reversed(self.patterns):
            if local_only and entry.is_global():
                continue
            if entry.matches(path):
                return entry
        return None

    def owners(self, path: Union[str, Path]) -> list[str]:
        """Return the owners of a path, or an empty list."""
        entry = self.match(path)
        return list(entry.owners) if entry else []

    def local_owners(self, path: Union[str, Path]) -> list[str]:
        """Return the owners of a path ignoring the global ``*`` entry."""
        entry = self.match(path, local_only=True)
        return list(entry.owners) if entry else []

    def render(self) -> str:
        """Render the entries as CODEOWNERS document text."""
        return render_codeowners(self.patterns)

    def to_file(self, path: Union[str, Path], fs: Optional[FileSystem] = None) -> None:
        """Serialize the entries to a CODEOWNERS file.

        Raises:
            OSError: If the file cannot be opened or written
        """
        fs = fs or LocalFileSystem()
        with fs.open(str(path), "w") as f:
            write_codeowners(self.patterns, f)

    def __iter__(self) -> Iterator[Codeowner]:
        return iter(self.patterns)

    def __len__(self) -> int:
        return len(self.patterns)
