"""Exception hierarchy for docs-indexer.

    DocsIndexerError          (base, anything raised by the pipeline)
    +-- ConfigurationError    (bad settings, missing credentials, vector-size mismatch)
    +-- AcquisitionError      (cloning / removing the working copy)
    +-- DocumentReadError     (a source file could not be read or decoded)
    +-- EmbeddingError        (the embedding provider failed)
    +-- UpsertError           (a vector-store batch call failed)
"""

from __future__ import annotations


class DocsIndexerError(Exception):
    """Base exception for all docs-indexer errors."""


class ConfigurationError(DocsIndexerError):
    """Raised when the run is misconfigured; detected before data is written."""


class AcquisitionError(DocsIndexerError):
    """Raised when the source repository cannot be fetched or cleaned up."""


class DocumentReadError(DocsIndexerError):
    """Raised when a discovered file cannot be read as UTF-8 text."""

    def __init__(self, path: str, reason: str) -> None:
        self.path = path
        super().__init__(f"Cannot read {path}: {reason}")


class EmbeddingError(DocsIndexerError):
    """Raised when the embedding provider fails or returns malformed vectors."""

    def __init__(self, message: str, provider_name: str | None = None) -> None:
        self.provider_name = provider_name
        super().__init__(f"[{provider_name}] {message}" if provider_name else message)


class UpsertError(DocsIndexerError):
    """Raised when a batch upsert fails.

    Batches before ``batch_number`` are already committed to the store;
    batches after it were never sent.
    """

    def __init__(
        self,
        namespace: str,
        batch_number: int,
        total_batches: int,
        committed: int,
        reason: str,
    ) -> None:
        self.namespace = namespace
        self.batch_number = batch_number
        self.total_batches = total_batches
        self.committed = committed
        super().__init__(
            f"Upsert of batch {batch_number} of {total_batches} into namespace "
            f"{namespace!r} failed ({committed} records already committed): {reason}"
        )
