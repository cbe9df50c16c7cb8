"""Dot-path helpers shared by flattening and merging."""

from __future__ import annotations

PATH_SEPARATOR = "."


def join_path(parent: str | None, child: str) -> str:
    """Append ``child`` to ``parent`` using dot notation."""
    return child if not parent else f"{parent}{PATH_SEPARATOR}{child}"


def is_path_prefix(prefix: str, path: str) -> bool:
    """Return True when ``prefix`` names an ancestor of ``path``."""
    return path.startswith(f"{prefix}{PATH_SEPARATOR}")
