"""Turn one source document into chunk records."""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from docs_indexer.errors import DocsIndexerError, EmbeddingError
from docs_indexer.ingestion.identity import chunk_id
from docs_indexer.ingestion.models import Chunk, ChunkMetadata, SourceDocument
from docs_indexer.ingestion.splitter import build_splitter

if TYPE_CHECKING:
    from langchain_text_splitters import TextSplitter

    from docs_indexer.ingestion.embedder import EmbeddingProvider


def process_document(
    document: SourceDocument,
    *,
    splitter: TextSplitter | None = None,
    provider: EmbeddingProvider | None = None,
) -> list[Chunk]:
    """Split *document* and build one :class:`Chunk` per text fragment.

    Parameters
    ----------
    document:
        The file to chunk.
    splitter:
        Splitter to use; a default 1000/200 splitter when omitted.
    provider:
        Embedding provider for this run.  When ``None`` the chunks carry
        no vector and the store embeds their text.

    Returns
    -------
    list[Chunk]
        Chunks in document order.

    Raises
    ------
    EmbeddingError
        If the provider fails; no chunks of the document are returned.
    """
    splitter = splitter or build_splitter()
    texts = [d.page_content for d in splitter.split_documents([document.to_document()])]
    if not texts:
        return []

    metadata = ChunkMetadata(
        file_name=document.file_name,
        file_path=document.path,
        file_type=document.extension,
        timestamp=int(time.time() * 1000),
    )

    if provider is None:
        return [Chunk(id=chunk_id(t), text=t, metadata=metadata) for t in texts]

    try:
        vectors = provider.embed_documents(texts)
    except DocsIndexerError:
        raise
    except Exception as exc:
        raise EmbeddingError(f"embedding {document.path} failed: {exc}", provider.name) from exc
    if len(vectors) != len(texts):
        raise EmbeddingError(
            f"expected {len(texts)} vectors for {document.path}, got {len(vectors)}",
            provider.name,
        )
    return [
        Chunk(id=chunk_id(t), text=t, metadata=metadata, vector=v)
        for t, v in zip(texts, vectors)
    ]
