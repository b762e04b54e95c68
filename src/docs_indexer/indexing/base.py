"""Abstract base class for vector-store backends.

A backend receives plain records ``{"id", "metadata", "data", "vector"?}``
grouped by namespace.  Records without a ``vector`` key must be embedded
by the backend itself.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any


class VectorStoreBase(ABC):
    """Backend-agnostic write interface used by the indexing pipeline."""

    # -- required overrides ---------------------------------------------------

    @abstractmethod
    def upsert(self, namespace: str, records: list[dict[str, Any]]) -> None:
        """Insert or overwrite *records* (by ``id``) in *namespace*.

        Parameters
        ----------
        namespace:
            Logical partition holding one source repository's chunks.
        records:
            Chunk records; either all carry ``vector`` or none do.
        """
        ...

    @abstractmethod
    def info(self, namespace: str) -> dict[str, Any]:
        """Return diagnostic information about *namespace* (record count, …)."""
        ...

    # -- optional overrides ---------------------------------------------------

    def dimension(self, namespace: str) -> int | None:
        """Return the vector size already stored in *namespace*, if known."""
        return None

    def health_check(self) -> bool:
        """Return ``True`` when the backend is reachable and ready."""
        return True
