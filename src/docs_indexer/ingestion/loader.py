"""Markdown discovery and reading inside a working copy."""

from __future__ import annotations

import os
from collections.abc import Iterable
from pathlib import Path

from docs_indexer.errors import DocumentReadError
from docs_indexer.ingestion.models import SourceDocument

MARKDOWN_EXTENSIONS: tuple[str, ...] = (".md", ".mdx")


def _sorted_entries(directory: str | Path) -> list[os.DirEntry[str]]:
    with os.scandir(directory) as it:
        return sorted(it, key=lambda entry: entry.name)


def discover_files(root: str | Path, extensions: Iterable[str] = MARKDOWN_EXTENSIONS) -> list[Path]:
    """Recursively list files under *root* whose name ends with one of *extensions*.

    Directories whose name starts with ``.`` (``.git``, ``.github`` …) are
    skipped entirely.  Traversal is depth-first with entries visited in
    name order, using an explicit stack instead of recursion.

    Parameters
    ----------
    root:
        Directory to scan.
    extensions:
        File suffixes to accept, including the dot.

    Returns
    -------
    list[Path]
        Matching files in discovery order.
    """
    suffixes = tuple(extensions)
    found: list[Path] = []
    stack = [iter(_sorted_entries(root))]
    while stack:
        entry = next(stack[-1], None)
        if entry is None:
            stack.pop()
            continue
        if entry.is_dir(follow_symlinks=False):
            if not entry.name.startswith("."):
                stack.append(iter(_sorted_entries(entry.path)))
        elif entry.name.endswith(suffixes) and entry.is_file():
            found.append(Path(entry.path))
    return found


def read_document(path: str | Path, root: str | Path) -> SourceDocument:
    """Read *path* as UTF-8 and wrap it in a :class:`SourceDocument`.

    The stored path is relative to *root* and uses ``/`` separators.
    """
    path = Path(path)
    relative = path.relative_to(root).as_posix()
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise DocumentReadError(relative, str(exc)) from exc
    return SourceDocument(text=text, path=relative, extension=path.suffix.lstrip("."))
