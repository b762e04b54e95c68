"""End-to-end indexing run for one source repository.

    preflight → namespace → clone → discover → chunk (+ embed) → upsert → cleanup

Every stage finishes before the next one starts.  The working copy is
removed on both the success and the failure path.

Usage::

    from docs_indexer.config import Settings
    from docs_indexer.pipeline import IndexingPipeline

    report = IndexingPipeline.from_settings(Settings()).run(
        "https://github.com/org/docs.git"
    )
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from pathlib import Path
from typing import TYPE_CHECKING

from pydantic import BaseModel, Field

from docs_indexer.errors import (
    ConfigurationError,
    DocsIndexerError,
    DocumentReadError,
    EmbeddingError,
)
from docs_indexer.indexing.batching import upsert_all
from docs_indexer.ingestion.embedder import build_embedding_provider
from docs_indexer.ingestion.loader import MARKDOWN_EXTENSIONS, discover_files, read_document
from docs_indexer.ingestion.models import Chunk
from docs_indexer.ingestion.processor import process_document
from docs_indexer.ingestion.repository import GitRepositorySource, RepositorySource, derive_namespace
from docs_indexer.ingestion.splitter import build_splitter

if TYPE_CHECKING:
    from langchain_text_splitters import TextSplitter

    from docs_indexer.config import Settings
    from docs_indexer.indexing.base import VectorStoreBase
    from docs_indexer.ingestion.embedder import EmbeddingProvider

logger = logging.getLogger(__name__)


class FileFailure(BaseModel):
    """A file skipped during a ``fail_fast=False`` run."""

    path: str
    error: str


class IndexingReport(BaseModel):
    """Outcome of one :meth:`IndexingPipeline.run`."""

    namespace: str
    files_discovered: int = 0
    files_indexed: int = 0
    chunks: int = 0
    batches: int = 0
    failures: list[FileFailure] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures


class IndexingPipeline:
    """Clone a repository, chunk its Markdown, and upsert the chunks.

    Parameters
    ----------
    store:
        Destination vector store.
    source:
        Provides the local working copy.
    provider:
        Embedding provider; ``None`` lets the store embed chunk text.
    splitter:
        Text splitter; defaults to 1000/200 recursive splitting.
    batch_size:
        Records per upsert call.
    extensions:
        File suffixes to index.
    fail_fast:
        When ``False``, unreadable files and embedding failures are
        recorded in the report and skipped instead of aborting the run.
    """

    def __init__(
        self,
        store: VectorStoreBase,
        source: RepositorySource,
        *,
        provider: EmbeddingProvider | None = None,
        splitter: TextSplitter | None = None,
        batch_size: int = 100,
        extensions: Sequence[str] = MARKDOWN_EXTENSIONS,
        fail_fast: bool = True,
    ) -> None:
        if batch_size < 1:
            raise ConfigurationError(f"batch_size ({batch_size}) must be >= 1")
        self._store = store
        self._source = source
        self._provider = provider
        self._splitter = splitter or build_splitter()
        self._batch_size = batch_size
        self._extensions = tuple(extensions)
        self._fail_fast = fail_fast

    @classmethod
    def from_settings(cls, settings: Settings) -> IndexingPipeline:
        """Wire the Chroma store, git source, provider and splitter from *settings*."""
        from docs_indexer.indexing.chroma_store import ChromaVectorStore

        provider = build_embedding_provider(settings)
        return cls(
            ChromaVectorStore.from_settings(settings),
            GitRepositorySource(
                settings.work_dir,
                token=settings.github_token.get_secret_value(),
                depth=settings.clone_depth,
            ),
            provider=provider,
            splitter=build_splitter(settings.chunk_size, settings.chunk_overlap),
            batch_size=settings.batch_size,
            extensions=settings.file_extensions,
            fail_fast=settings.fail_fast,
        )

    # -- public API -----------------------------------------------------------

    def run(self, source_ref: str) -> IndexingReport:
        """Index every Markdown file of *source_ref* into its namespace.

        Raises
        ------
        DocsIndexerError
            On any stage failure, after the working copy has been removed.
        """
        logger.info("Processing repository: %s", source_ref)
        logger.info(
            "Using %s embeddings",
            self._provider.name if self._provider else "store-managed",
        )
        succeeded = False
        try:
            namespace = derive_namespace(source_ref)
            logger.info("Using namespace: %s", namespace)
            self._preflight(namespace)
            report = self._index(source_ref, namespace)
            succeeded = True
        except Exception as exc:
            logger.error("Indexing %s failed: %s", source_ref, exc)
            raise
        finally:
            self._cleanup(raise_errors=succeeded)

        logger.info(
            "Processing completed: %d chunks from %d/%d files in %d batches",
            report.chunks,
            report.files_indexed,
            report.files_discovered,
            report.batches,
        )
        if report.failures:
            logger.warning("%d files were skipped:", len(report.failures))
            for failure in report.failures:
                logger.warning("  %s: %s", failure.path, failure.error)
        self._log_index_info(namespace)
        return report

    # -- stages ---------------------------------------------------------------

    def _preflight(self, namespace: str) -> None:
        if not self._store.health_check():
            raise ConfigurationError("Vector store is not reachable")
        if self._provider is None or self._provider.dimension is None:
            return
        existing = self._store.dimension(namespace)
        if existing is not None and existing != self._provider.dimension:
            raise ConfigurationError(
                f"Embedding provider {self._provider.name} produces "
                f"{self._provider.dimension}-dimensional vectors but namespace "
                f"{namespace!r} holds {existing}-dimensional vectors"
            )

    def _index(self, source_ref: str, namespace: str) -> IndexingReport:
        root = self._source.fetch(source_ref)
        files = discover_files(root, self._extensions)
        logger.info("Found %d markdown files", len(files))

        report = IndexingReport(namespace=namespace, files_discovered=len(files))
        chunks: list[Chunk] = []
        for path in files:
            logger.info("Processing file: %s", path)
            try:
                document = read_document(path, root)
                chunks.extend(
                    process_document(document, splitter=self._splitter, provider=self._provider)
                )
            except (DocumentReadError, EmbeddingError) as exc:
                if self._fail_fast:
                    raise
                logger.warning("Skipping %s: %s", path, exc)
                relative = Path(path).relative_to(root).as_posix()
                report.failures.append(FileFailure(path=relative, error=str(exc)))
                continue
            report.files_indexed += 1

        logger.info("Storing %d chunks in namespace %s", len(chunks), namespace)
        report.chunks = len(chunks)
        report.batches = upsert_all(chunks, namespace, self._store, self._batch_size)
        return report

    def _cleanup(self, *, raise_errors: bool) -> None:
        try:
            self._source.remove(self._source.work_dir)
        except DocsIndexerError as exc:
            logger.error("Cleanup failed: %s", exc)
            if raise_errors:
                raise

    def _log_index_info(self, namespace: str) -> None:
        try:
            info = self._store.info(namespace)
        except Exception:
            logger.warning("Could not read index information", exc_info=True)
            return
        logger.info("Index information: %s", info)
