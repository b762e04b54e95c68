"""Sequential batched upsert of chunk records.

Batches are sent one at a time, in order.  The first failing call aborts
the whole upsert: earlier batches stay committed, later ones are never
sent, and nothing is retried or rolled back.
"""

from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterator, Sequence
from typing import TYPE_CHECKING, TypeVar

from docs_indexer.errors import ConfigurationError, UpsertError

if TYPE_CHECKING:
    from docs_indexer.indexing.base import VectorStoreBase
    from docs_indexer.ingestion.models import Chunk

logger = logging.getLogger(__name__)

T = TypeVar("T")

ProgressCallback = Callable[[int, int], None]


def iter_batches(items: Sequence[T], batch_size: int) -> Iterator[list[T]]:
    """Yield consecutive slices of *items* holding at most *batch_size* entries."""
    if batch_size < 1:
        raise ValueError(f"batch_size ({batch_size}) must be >= 1")
    for start in range(0, len(items), batch_size):
        yield list(items[start : start + batch_size])


def _log_progress(batch_number: int, total_batches: int) -> None:
    logger.info("Processed batch %d of %d", batch_number, total_batches)


def _check_vectors(chunks: Sequence[Chunk]) -> None:
    """All chunks must share one embedding mode and one vector size."""
    sizes = {len(c.vector) for c in chunks if c.vector is not None}
    embedded = sum(1 for c in chunks if c.vector is not None)
    if embedded not in (0, len(chunks)):
        raise ConfigurationError(
            f"{embedded} of {len(chunks)} chunks carry vectors; a run must embed all or none"
        )
    if len(sizes) > 1:
        raise ConfigurationError(f"Chunks carry vectors of different sizes: {sorted(sizes)}")


def upsert_all(
    chunks: Sequence[Chunk],
    namespace: str,
    store: VectorStoreBase,
    batch_size: int = 100,
    on_progress: ProgressCallback | None = None,
) -> int:
    """Upsert *chunks* into *namespace* in batches of *batch_size*.

    Parameters
    ----------
    chunks:
        Chunk records in the order they should be written.
    namespace:
        Destination namespace.
    store:
        Vector-store backend.
    batch_size:
        Maximum records per store call.
    on_progress:
        Called with ``(batch_number, total_batches)`` after each successful
        call.  Defaults to an INFO log line.

    Returns
    -------
    int
        Number of batches sent.

    Raises
    ------
    ConfigurationError
        If the chunks mix embedding modes or vector sizes; nothing is sent.
    UpsertError
        If a store call fails; the remaining batches are not sent.
    """
    if batch_size < 1:
        raise ValueError(f"batch_size ({batch_size}) must be >= 1")
    _check_vectors(chunks)
    report = on_progress or _log_progress

    total_batches = math.ceil(len(chunks) / batch_size)
    committed = 0
    for number, batch in enumerate(iter_batches(chunks, batch_size), 1):
        try:
            store.upsert(namespace, [c.to_record() for c in batch])
        except Exception as exc:
            raise UpsertError(namespace, number, total_batches, committed, str(exc)) from exc
        committed += len(batch)
        report(number, total_batches)
    return total_batches
