"""CODEOWNERS file discovery by walking parent directories."""

import os
import stat
from pathlib import Path
from typing import Optional, Protocol, TextIO, Union

from .config import CODEOWNERS_FILENAME, SEARCH_SUBDIRS
from .models import LocatedFile


class CodeownersError(Exception):
    """Base class for CODEOWNERS errors."""

    pass


class CodeownersNotFoundError(CodeownersError):
    """Raised when no CODEOWNERS file exists in or above a directory."""

    def __init__(self, start_path: str):
        self.start_path = start_path
        super().__init__(f"No CODEOWNERS found in {start_path}")


class FileSystem(Protocol):
    """Filesystem access used by the locator, reader and writer."""

    def is_dir(self, path: str) -> bool: ...

    def exists(self, path: str) -> bool: ...

    def open(self, path: str, mode: str = "r") -> TextIO: ...


class LocalFileSystem:
    """Filesystem access backed by the local disk.

    Any object with the same methods can be passed to the locator, the
    ``Codeowners`` constructors and ``Codeowners.to_file`` instead.
    """

    def is_dir(self, path: str) -> bool:
        """Check for a directory. Errors other than "missing" propagate."""
        try:
            return stat.S_ISDIR(os.stat(path).st_mode)
        except (FileNotFoundError, NotADirectoryError):
            return False

    def exists(self, path: str) -> bool:
        """Check for any file. Errors other than "missing" propagate."""
        try:
            os.stat(path)
        except (FileNotFoundError, NotADirectoryError):
            return False
        return True

    def open(self, path: str, mode: str = "r") -> TextIO:
        """Open a text file; undecodable bytes are carried through, not rejected."""
        return open(path, mode, encoding="utf-8", errors="surrogateescape")


def find_codeowners_file(
    start_path: Union[str, Path], fs: Optional[FileSystem] = None
) -> LocatedFile:
    """Find the CODEOWNERS file governing a directory.

    Checks ``start_path`` and then each parent directory. Within a directory,
    the candidate subdirectories are tried in order: ".", "docs", ".github",
    ".gitlab". The first existing CODEOWNERS file wins.

    Args:
        start_path: Directory to start searching from
        fs: Filesystem to search (defaults to the local disk)

    Returns:
        LocatedFile with the file path and the directory it was found in

    Raises:
        CodeownersNotFoundError: If no file exists up to the filesystem root
        OSError: If checking a candidate fails for any other reason
    """
    fs = fs or LocalFileSystem()
    directory = Path(start_path)

    while True:
        for subdir in SEARCH_SUBDIRS:
            candidate_dir = directory / subdir if subdir != "." else directory
            if not fs.is_dir(str(candidate_dir)):
                continue
            candidate = candidate_dir / CODEOWNERS_FILENAME
            if fs.exists(str(candidate)):
                return LocatedFile(path=str(candidate), repo_root=str(directory))

        parent = directory.parent
        # Filesystem (or drive) root reached
        if parent == directory:
            break
        directory = parent

    raise CodeownersNotFoundError(str(start_path))
