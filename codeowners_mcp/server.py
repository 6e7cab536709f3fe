"""MCP server for CODEOWNERS lookups."""

import logging
import os
from typing import Optional

from mcp.server.fastmcp import FastMCP

from .codeowners import Codeowners
from .config import REPO_PATH_ENV
from .locate import CodeownersError, find_codeowners_file
from .models import OwnersLookupResult, PathOwners

# stdout carries the MCP protocol, so log to stderr only
logger = logging.getLogger("codeowners_mcp.server")

# Initialize FastMCP server
mcp = FastMCP("CODEOWNERS")


def _resolve_start_path(start_path: Optional[str]) -> str:
    """Pick the directory to search from.

    Explicit argument first, then CODEOWNERS_REPO_PATH, then the working directory.
    """
    start = start_path or os.environ.get(REPO_PATH_ENV) or os.getcwd()
    # Relative paths would stop the parent walk at "."
    return os.path.abspath(start)


def _load(start_path: Optional[str]) -> Codeowners:
    start = _resolve_start_path(start_path)
    codeowners = Codeowners.from_file(start)
    logger.debug("Loaded %d patterns from %s", len(codeowners), codeowners.path)
    return codeowners


@mcp.tool(name="codeowners.find_file")
async def find_file(start_path: Optional[str] = None) -> dict:
    """Locate the CODEOWNERS file governing a directory.

    Args:
        start_path: Directory to search from (default: CODEOWNERS_REPO_PATH or cwd)

    Returns:
        Dict with codeowners_path and repo_root
    """
    try:
        located = find_codeowners_file(_resolve_start_path(start_path))
        return {"codeowners_path": located.path, "repo_root": located.repo_root}
    except (CodeownersError, OSError) as e:
        return {"error": str(e)}
    except Exception as e:
        return {"error": f"Unexpected error: {str(e)}"}


@mcp.tool(name="codeowners.owners")
async def lookup_owners(
    paths: list[str],
    start_path: Optional[str] = None,
    local_only: bool = False,
) -> dict:
    """Resolve the owners of one or more paths.

    The last matching pattern in the CODEOWNERS file wins.

    Args:
        paths: File paths, absolute or relative to the repository root
        start_path: Directory to search for CODEOWNERS from
        local_only: Ignore the global "*" pattern

    Returns:
        Dict with per-path owners and the list of unowned paths
    """
    try:
        codeowners = _load(start_path)
    except (CodeownersError, OSError) as e:
        return {"error": str(e)}
    except Exception as e:
        return {"error": f"Unexpected error: {str(e)}"}

    results = []
    unowned = []
    for path in paths:
        entry = codeowners.match(path, local_only=local_only)
        if entry is None:
            unowned.append(path)
            results.append(PathOwners(path=path, owners=[]))
        else:
            results.append(PathOwners(path=path, owners=list(entry.owners), pattern=entry.pattern))

    return OwnersLookupResult(
        codeowners_path=codeowners.path,
        repo_root=codeowners.repo_root,
        local_only=local_only,
        results=results,
        unowned=unowned,
    ).model_dump()


@mcp.tool(name="codeowners.list_patterns")
async def list_patterns(start_path: Optional[str] = None) -> dict:
    """List the patterns of the CODEOWNERS file in declaration order.

    Args:
        start_path: Directory to search for CODEOWNERS from

    Returns:
        Dict with codeowners_path and the ordered patterns
    """
    try:
        codeowners = _load(start_path)
    except (CodeownersError, OSError) as e:
        return {"error": str(e)}
    except Exception as e:
        return {"error": f"Unexpected error: {str(e)}"}

    return {
        "codeowners_path": codeowners.path,
        "patterns": [entry.model_dump() for entry in codeowners],
        "total_patterns": len(codeowners),
    }


@mcp.tool(name="codeowners.add_pattern")
async def add_pattern(
    pattern: str,
    owners: list[str],
    start_path: Optional[str] = None,
    write: bool = False,
) -> dict:
    """Append a pattern to the CODEOWNERS file.

    The new pattern takes precedence over every existing one. The file is only
    rewritten when write=True; the rewritten file uses normalized formatting
    and drops comments.

    Args:
        pattern: Pattern to add (e.g. "docs/*.md")
        owners: Owners for the pattern (e.g. ["@org/docs"])
        start_path: Directory to search for CODEOWNERS from
        write: Whether to rewrite the CODEOWNERS file

    Returns:
        Dict with the added entry and whether the file was written
    """
    if not owners:
        return {"error": "At least one owner is required"}

    try:
        codeowners = _load(start_path)
        entry = codeowners.add_pattern(pattern, owners)
        if write:
            codeowners.to_file(codeowners.path)
            logger.info("Wrote %d patterns to %s", len(codeowners), codeowners.path)
    except (CodeownersError, OSError) as e:
        return {"error": str(e)}
    except Exception as e:
        return {"error": f"Unexpected error: {str(e)}"}

    return {
        "codeowners_path": codeowners.path,
        "added": entry.model_dump(),
        "written": write,
        "total_patterns": len(codeowners),
    }


@mcp.tool(name="codeowners.render")
async def render(start_path: Optional[str] = None) -> dict:
    """Render the CODEOWNERS file in normalized form.

    Args:
        start_path: Directory to search for CODEOWNERS from

    Returns:
        Dict with codeowners_path and the rendered text
    """
    try:
        codeowners = _load(start_path)
    except (CodeownersError, OSError) as e:
        return {"error": str(e)}
    except Exception as e:
        return {"error": f"Unexpected error: {str(e)}"}

    return {"codeowners_path": codeowners.path, "text": codeowners.render()}


def main():
    """CLI entry point for running MCP server."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    repo_path_str = os.environ.get(REPO_PATH_ENV)
    if repo_path_str:
        logger.info("Using repo path: %s", repo_path_str)

    mcp.run()


if __name__ == "__main__":
    main()
