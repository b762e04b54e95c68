"""Text chunking for Markdown documentation."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Literal

from langchain_text_splitters import RecursiveCharacterTextSplitter

# Paragraph, line, word, character.
DEFAULT_SEPARATORS: tuple[str, ...] = ("\n\n", "\n", " ", "")


def build_splitter(
    chunk_size: int = 1000,
    chunk_overlap: int = 200,
    *,
    separators: Sequence[str] = DEFAULT_SEPARATORS,
    keep_separator: bool | Literal["start", "end"] = "start",
    strip_whitespace: bool = True,
) -> RecursiveCharacterTextSplitter:
    """Return a recursive splitter that prefers natural Markdown boundaries.

    Parameters
    ----------
    chunk_size:
        Soft maximum number of characters per chunk.
    chunk_overlap:
        Approximate number of characters shared by consecutive chunks.
    separators:
        Split boundaries in priority order; the empty string splits
        between characters.
    keep_separator:
        ``"start"`` keeps a separator at the start of the following piece,
        ``"end"`` at the end of the preceding one, ``False`` drops it and
        re-inserts it when pieces are joined.
    strip_whitespace:
        Strip leading/trailing whitespace from every emitted chunk.

    Raises
    ------
    ValueError
        If the sizes are not positive or the overlap is not smaller than
        the chunk size.
    """
    if chunk_size <= 0:
        raise ValueError(f"chunk_size ({chunk_size}) must be > 0")
    if chunk_overlap < 0:
        raise ValueError(f"chunk_overlap ({chunk_overlap}) must be >= 0")
    if chunk_overlap >= chunk_size:
        raise ValueError(f"chunk_overlap ({chunk_overlap}) must be < chunk_size ({chunk_size})")

    return RecursiveCharacterTextSplitter(
        chunk_size=chunk_size,
        chunk_overlap=chunk_overlap,
        length_function=len,
        separators=list(separators) or [""],
        keep_separator=keep_separator,
        strip_whitespace=strip_whitespace,
    )
