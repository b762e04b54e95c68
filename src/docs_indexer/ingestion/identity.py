"""Content-addressed chunk identifiers."""

from __future__ import annotations

import hashlib


def chunk_id(text: str) -> str:
    """Return the hex MD5 digest of *text*'s UTF-8 bytes.

    Identical text always maps to the same id, so re-indexing unchanged
    content overwrites the existing record instead of duplicating it.
    """
    return hashlib.md5(text.encode("utf-8")).hexdigest()
