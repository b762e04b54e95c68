"""
Indexing: batched delivery of chunk records to a vector store.

Public surface
--------------
- :class:`VectorStoreBase` - abstract backend (subclass for other stores).
- :class:`ChromaVectorStore` - default Chroma backend.
- :func:`upsert_all` / :func:`iter_batches` - sequential batched upsert.
"""

from docs_indexer.indexing.base import VectorStoreBase
from docs_indexer.indexing.batching import iter_batches, upsert_all

__all__ = [
    "ChromaVectorStore",
    "VectorStoreBase",
    "iter_batches",
    "upsert_all",
]


def __getattr__(name: str):  # noqa: ANN001
    """Lazy-import ChromaVectorStore to avoid pulling in chromadb at import time."""
    if name == "ChromaVectorStore":
        from docs_indexer.indexing.chroma_store import ChromaVectorStore

        return ChromaVectorStore
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
