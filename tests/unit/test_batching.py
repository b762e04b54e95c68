"""Unit tests for the sequential batched upsert."""

from __future__ import annotations

import logging
import math
from typing import Any

import pytest

from docs_indexer.errors import ConfigurationError, UpsertError
from docs_indexer.indexing.base import VectorStoreBase
from docs_indexer.indexing.batching import iter_batches, upsert_all
from docs_indexer.ingestion.identity import chunk_id
from docs_indexer.ingestion.models import Chunk, ChunkMetadata

_METADATA = ChunkMetadata(file_name="a.md", file_path="docs/a.md", file_type="md", timestamp=0)


def _chunks(n: int, vector: list[float] | None = None) -> list[Chunk]:
    return [
        Chunk(id=chunk_id(f"text {i}"), text=f"text {i}", metadata=_METADATA, vector=vector)
        for i in range(n)
    ]


class RecordingStore(VectorStoreBase):
    """Records every upsert; optionally fails on the N-th call."""

    def __init__(self, fail_on_call: int | None = None) -> None:
        self.calls: list[tuple[str, list[dict[str, Any]]]] = []
        self._fail_on_call = fail_on_call

    def upsert(self, namespace: str, records: list[dict[str, Any]]) -> None:
        self.calls.append((namespace, records))
        if len(self.calls) == self._fail_on_call:
            raise RuntimeError("429 Too Many Requests")

    def info(self, namespace: str) -> dict[str, Any]:
        return {"count": sum(len(r) for _, r in self.calls)}


# ── iter_batches ───────────────────────────────────────────────────────


class TestIterBatches:
    @pytest.mark.parametrize(("n", "batch_size"), [(1, 1), (7, 3), (100, 100), (250, 100), (5, 10)])
    def test_batch_count_and_order(self, n: int, batch_size: int) -> None:
        items = list(range(n))
        batches = list(iter_batches(items, batch_size))

        assert len(batches) == math.ceil(n / batch_size)
        assert all(len(b) == batch_size for b in batches[:-1])
        assert 1 <= len(batches[-1]) <= batch_size
        assert [x for b in batches for x in b] == items

    def test_empty_input(self) -> None:
        assert list(iter_batches([], 10)) == []

    def test_invalid_batch_size(self) -> None:
        with pytest.raises(ValueError, match="batch_size"):
            list(iter_batches([1, 2], 0))


# ── upsert_all ─────────────────────────────────────────────────────────


class TestUpsertAll:
    def test_sends_batches_in_order(self) -> None:
        chunks = _chunks(250)
        store = RecordingStore()
        progress: list[tuple[int, int]] = []

        sent = upsert_all(chunks, "docs", store, batch_size=100, on_progress=lambda i, n: progress.append((i, n)))

        assert sent == 3
        assert [len(records) for _, records in store.calls] == [100, 100, 50]
        assert {ns for ns, _ in store.calls} == {"docs"}
        assert [r["id"] for _, records in store.calls for r in records] == [c.id for c in chunks]
        assert progress == [(1, 3), (2, 3), (3, 3)]

    def test_failure_aborts_remaining_batches(self) -> None:
        store = RecordingStore(fail_on_call=2)
        progress: list[tuple[int, int]] = []

        with pytest.raises(UpsertError) as excinfo:
            upsert_all(_chunks(250), "docs", store, batch_size=100, on_progress=lambda i, n: progress.append((i, n)))

        assert len(store.calls) == 2
        assert progress == [(1, 3)]
        err = excinfo.value
        assert (err.batch_number, err.total_batches, err.committed) == (2, 3, 100)
        assert "429" in str(err)
        assert isinstance(err.__cause__, RuntimeError)

    def test_records_without_vectors(self) -> None:
        store = RecordingStore()
        upsert_all(_chunks(2), "docs", store)
        for record in store.calls[0][1]:
            assert set(record) == {"id", "metadata", "data"}

    def test_records_with_vectors(self) -> None:
        store = RecordingStore()
        upsert_all(_chunks(2, vector=[0.1, 0.2]), "docs", store)
        for record in store.calls[0][1]:
            assert set(record) == {"id", "metadata", "data", "vector"}

    def test_mixed_embedding_modes_rejected_before_sending(self) -> None:
        store = RecordingStore()
        chunks = _chunks(1, vector=[0.1]) + _chunks(1)

        with pytest.raises(ConfigurationError, match="embed all or none"):
            upsert_all(chunks, "docs", store)
        assert store.calls == []

    def test_mixed_vector_sizes_rejected_before_sending(self) -> None:
        store = RecordingStore()
        chunks = _chunks(1, vector=[0.1, 0.2]) + _chunks(1, vector=[0.1])

        with pytest.raises(ConfigurationError, match="different sizes"):
            upsert_all(chunks, "docs", store)
        assert store.calls == []

    def test_empty_list_sends_nothing(self) -> None:
        store = RecordingStore()
        assert upsert_all([], "docs", store) == 0
        assert store.calls == []

    def test_default_progress_is_logged(self, caplog: pytest.LogCaptureFixture) -> None:
        with caplog.at_level(logging.INFO, logger="docs_indexer.indexing.batching"):
            upsert_all(_chunks(3), "docs", RecordingStore(), batch_size=2)
        assert "Processed batch 1 of 2" in caplog.text
        assert "Processed batch 2 of 2" in caplog.text
