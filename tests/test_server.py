"""Tests for the MCP tool functions."""

import asyncio

import pytest

from codeowners_mcp import server
from codeowners_mcp.codeowners import Codeowners
from codeowners_mcp.config import REPO_PATH_ENV
from codeowners_mcp.locate import CodeownersNotFoundError

SAMPLE_CODEOWNERS = """\
# Global owners
*                @org/everyone
docs/            @org/docs
/src/**/*.py     @org/python
"""


@pytest.fixture
def repo(tmp_path):
    """Create a repository with a .github/CODEOWNERS file."""
    github = tmp_path / ".github"
    github.mkdir()
    (github / "CODEOWNERS").write_text(SAMPLE_CODEOWNERS)
    (tmp_path / "src" / "pkg").mkdir(parents=True)
    return tmp_path


@pytest.fixture
def missing_codeowners(monkeypatch):
    """Make every lookup fail as if no CODEOWNERS file existed."""

    def not_found(start_path, fs=None):
        raise CodeownersNotFoundError(str(start_path))

    monkeypatch.setattr(server.Codeowners, "from_file", not_found)


def test_find_file(repo):
    """Test locating the file from a nested directory."""
    result = asyncio.run(server.find_file(start_path=str(repo / "src" / "pkg")))

    assert result == {
        "codeowners_path": str(repo / ".github" / "CODEOWNERS"),
        "repo_root": str(repo),
    }


def test_lookup_owners(repo):
    """Test resolving absolute and relative paths."""
    paths = [str(repo / "src" / "pkg" / "mod.py"), "docs/index.md", "README.md"]

    result = asyncio.run(server.lookup_owners(paths=paths, start_path=str(repo)))

    assert result["repo_root"] == str(repo)
    assert result["local_only"] is False
    assert [r["owners"] for r in result["results"]] == [
        ["@org/python"],
        ["@org/docs"],
        ["@org/everyone"],
    ]
    assert result["results"][0]["pattern"] == "/src/**/*.py"
    assert result["unowned"] == []


def test_lookup_local_owners(repo):
    """Test that local_only reports globally-owned paths as unowned."""
    result = asyncio.run(
        server.lookup_owners(paths=["README.md", "docs/a.md"], start_path=str(repo), local_only=True)
    )

    assert result["unowned"] == ["README.md"]
    assert result["results"][0] == {"path": "README.md", "owners": [], "pattern": None}
    assert result["results"][1]["owners"] == ["@org/docs"]


def test_list_patterns_uses_env_var(repo, monkeypatch):
    """Test that CODEOWNERS_REPO_PATH is the default start directory."""
    monkeypatch.setenv(REPO_PATH_ENV, str(repo))

    result = asyncio.run(server.list_patterns())

    assert result["total_patterns"] == 3
    assert result["patterns"][0] == {"pattern": "*", "owners": ["@org/everyone"]}
    assert result["patterns"][-1]["pattern"] == "/src/**/*.py"


def test_add_pattern_without_write(repo):
    """Test that the file is untouched unless write=True."""
    result = asyncio.run(
        server.add_pattern(pattern="tools/", owners=["@org/tooling"], start_path=str(repo))
    )

    assert result["written"] is False
    assert result["added"] == {"pattern": "tools/", "owners": ["@org/tooling"]}
    assert (repo / ".github" / "CODEOWNERS").read_text() == SAMPLE_CODEOWNERS


def test_add_pattern_with_write(repo):
    """Test that the rewritten file includes the new pattern last."""
    result = asyncio.run(
        server.add_pattern(pattern="tools/", owners=["@org/tooling"], start_path=str(repo), write=True)
    )

    assert result["written"] is True
    assert result["total_patterns"] == 4

    reloaded = Codeowners.from_file(repo)
    assert reloaded.patterns[-1].pattern == "tools/"
    assert reloaded.owners(str(repo / "tools" / "lint.sh")) == ["@org/tooling"]


def test_add_pattern_requires_owners(repo):
    """Test that an owner list is required."""
    result = asyncio.run(server.add_pattern(pattern="tools/", owners=[], start_path=str(repo)))
    assert "error" in result


def test_render(repo):
    """Test the normalized document text."""
    result = asyncio.run(server.render(start_path=str(repo)))

    lines = result["text"].splitlines()
    assert len(lines) == 3
    assert lines[1].split() == ["docs/", "@org/docs"]


def test_tools_report_missing_file(missing_codeowners):
    """Test that a missing CODEOWNERS file is reported as an error dict."""
    for result in [
        asyncio.run(server.lookup_owners(paths=["a"], start_path="/nowhere")),
        asyncio.run(server.list_patterns(start_path="/nowhere")),
        asyncio.run(server.render(start_path="/nowhere")),
        asyncio.run(server.add_pattern(pattern="a", owners=["@b"], start_path="/nowhere")),
    ]:
        assert result == {"error": "No CODEOWNERS found in /nowhere"}


def test_relative_start_path_searches_ancestors(repo, monkeypatch):
    """Test that a relative start directory still walks up to the repo."""
    monkeypatch.chdir(repo / "src" / "pkg")

    result = asyncio.run(server.find_file(start_path="."))

    assert result == {
        "codeowners_path": str(repo / ".github" / "CODEOWNERS"),
        "repo_root": str(repo),
    }


def test_tools_report_unexpected_errors(monkeypatch):
    """Test that unexpected failures are returned as error dicts."""

    def broken(start_path, fs=None):
        raise ValueError("bad data")

    monkeypatch.setattr(server.Codeowners, "from_file", broken)

    result = asyncio.run(server.list_patterns(start_path="/nowhere"))

    assert result == {"error": "Unexpected error: bad data"}
