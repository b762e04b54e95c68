"""Chroma implementation of the vector-store abstraction."""

from __future__ import annotations

import hashlib
import logging
import re
from typing import TYPE_CHECKING, Any

from docs_indexer.indexing.base import VectorStoreBase

if TYPE_CHECKING:
    from docs_indexer.config import Settings

logger = logging.getLogger(__name__)

_INVALID_NAME_CHARS = re.compile(r"[^A-Za-z0-9._-]+")
_REPEATED_DOTS = re.compile(r"\.{2,}")
_MAX_NAME_LENGTH = 63
_DIGEST_LENGTH = 8


def collection_name_for(namespace: str) -> str:
    """Map *namespace* onto a valid Chroma collection name.

    Chroma requires 3-63 characters from ``[A-Za-z0-9._-]`` that start and
    end with an alphanumeric character and contain no ``..``.  A namespace
    that already satisfies this is used as is; any other namespace gets a
    short digest of its original spelling appended, so distinct namespaces
    never share a collection.

    >>> collection_name_for("docs")
    'docs'
    """
    name = _REPEATED_DOTS.sub(".", _INVALID_NAME_CHARS.sub("-", namespace)).strip("._-")
    if name == namespace and 3 <= len(name) <= _MAX_NAME_LENGTH:
        return name

    digest = hashlib.md5(namespace.encode("utf-8")).hexdigest()[:_DIGEST_LENGTH]
    base = name[: _MAX_NAME_LENGTH - _DIGEST_LENGTH - 1].rstrip("._-")
    return f"{base}-{digest}" if base else digest


class ChromaVectorStore(VectorStoreBase):
    """Chroma-backed vector store; one collection per namespace.

    Records without vectors are embedded by the collection's embedding
    function, which is Chroma's store-managed embedding mode.

    Parameters
    ----------
    host:
        Chroma server hostname.
    port:
        Chroma server port.
    ssl:
        Connect over HTTPS.
    auth_token:
        Optional bearer token for authenticated Chroma deployments.
    distance_metric:
        ``cosine`` | ``l2`` | ``ip``; applied when a collection is created.
    client:
        Pre-built Chroma client, mainly for tests.
    """

    def __init__(
        self,
        host: str = "localhost",
        port: int = 8000,
        *,
        ssl: bool = False,
        auth_token: str = "",
        distance_metric: str = "cosine",
        client: Any = None,
    ) -> None:
        if client is None:
            import chromadb

            headers = {"Authorization": f"Bearer {auth_token}"} if auth_token else None
            client = chromadb.HttpClient(host=host, port=port, ssl=ssl, headers=headers)
        self._host = host
        self._port = port
        self._client = client
        self._distance_metric = distance_metric
        self._collections: dict[str, Any] = {}

    @classmethod
    def from_settings(cls, settings: Settings) -> ChromaVectorStore:
        return cls(
            settings.chroma_host,
            settings.chroma_port,
            ssl=settings.chroma_ssl,
            auth_token=settings.chroma_auth_token.get_secret_value(),
            distance_metric=settings.distance_metric,
        )

    def _collection(self, namespace: str) -> Any:
        if namespace not in self._collections:
            self._collections[namespace] = self._client.get_or_create_collection(
                name=collection_name_for(namespace),
                metadata={"hnsw:space": self._distance_metric},
            )
        return self._collections[namespace]

    def _existing_collection(self, namespace: str) -> Any | None:
        """Return the collection for *namespace* without creating it."""
        if namespace in self._collections:
            return self._collections[namespace]
        name = collection_name_for(namespace)
        # Depending on the chromadb release, entries are names or Collection objects.
        existing = {getattr(c, "name", c) for c in self._client.list_collections()}
        if name not in existing:
            return None
        self._collections[namespace] = self._client.get_collection(name=name)
        return self._collections[namespace]

    # -- VectorStoreBase overrides --------------------------------------------

    def upsert(self, namespace: str, records: list[dict[str, Any]]) -> None:
        if not records:
            return
        # Chroma rejects duplicate ids within one call; keep the last one,
        # which is what overwrite-by-id would have stored anyway.
        unique = list({r["id"]: r for r in records}.values())
        if len(unique) != len(records):
            logger.debug("Collapsed %d duplicate ids in batch", len(records) - len(unique))

        with_vectors = sum(1 for r in unique if r.get("vector") is not None)
        if with_vectors not in (0, len(unique)):
            raise ValueError("Records in one upsert must either all carry vectors or none")

        kwargs: dict[str, Any] = {
            "ids": [r["id"] for r in unique],
            "documents": [r["data"] for r in unique],
            "metadatas": [r["metadata"] for r in unique],
        }
        if with_vectors:
            kwargs["embeddings"] = [r["vector"] for r in unique]
        self._collection(namespace).upsert(**kwargs)

    def info(self, namespace: str) -> dict[str, Any]:
        collection = self._collection(namespace)
        return {
            "host": f"{self._host}:{self._port}",
            "namespace": namespace,
            "collection": collection_name_for(namespace),
            "count": collection.count(),
            "dimension": self.dimension(namespace),
            "distance_metric": self._distance_metric,
        }

    def dimension(self, namespace: str) -> int | None:
        collection = self._existing_collection(namespace)
        if collection is None:
            return None
        result = collection.get(limit=1, include=["embeddings"])
        embeddings = result.get("embeddings")
        if embeddings is None or len(embeddings) == 0:
            return None
        return len(embeddings[0])

    def health_check(self) -> bool:
        try:
            self._client.heartbeat()
            return True
        except Exception:
            logger.warning("Chroma health-check failed", exc_info=True)
            return False
