"""Directories never descended into when enumerating importable modules.

Tier 0 (HARDCODED_DIRS): VCS internals and tool state.
Tier 1 (DEFAULT_PRUNABLE_DIRS): dependencies, caches, build outputs.

Resource scanning does not prune; it walks every directory under a root.
"""

from __future__ import annotations

HARDCODED_DIRS: frozenset[str] = frozenset(
    (
        ".git",
        ".svn",
        ".hg",
        ".bzr",
    )
)

DEFAULT_PRUNABLE_DIRS: frozenset[str] = frozenset(
    (
        # Virtual environments and installed packages
        "venv",
        ".venv",
        ".virtualenv",
        "virtualenv",
        "env",
        ".env",
        "site-packages",
        "dist-packages",
        ".eggs",
        "eggs",
        # Caches
        "__pycache__",
        ".pytest_cache",
        ".mypy_cache",
        ".ruff_cache",
        ".hypothesis",
        ".tox",
        ".nox",
        ".ipynb_checkpoints",
        # Build outputs
        "build",
        "dist",
        "htmlcov",
        "node_modules",
    )
)

PRUNABLE_DIRS: frozenset[str] = HARDCODED_DIRS | DEFAULT_PRUNABLE_DIRS


def is_prunable(dirname: str) -> bool:
    """True for directories that cannot hold importable test modules."""
    return dirname in PRUNABLE_DIRS or not dirname.isidentifier()
