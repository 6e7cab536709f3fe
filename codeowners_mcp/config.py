"""Configuration constants for CODEOWNERS lookups."""

# Ownership file discovery
CODEOWNERS_FILENAME = "CODEOWNERS"
SEARCH_SUBDIRS = (".", "docs", ".github", ".gitlab")  # Checked in this order per directory

# Registry defaults
DEFAULT_REPO_ROOT = ""  # Registries built programmatically take paths as given
GLOBAL_PATTERN = "*"  # Matches every path; skipped by local-only lookups

# Document format
ESCAPE_CHAR = "\\"
COMMENT_PREFIX = "#"
PATTERN_COLUMN_WIDTH = 25  # Patterns are padded, never truncated

# Optional default start directory for the MCP server
# Can be set via CODEOWNERS_REPO_PATH environment variable
REPO_PATH_ENV = "CODEOWNERS_REPO_PATH"
