"""Embedding providers.

A run either embeds chunks itself (OpenAI, HuggingFace) or leaves the
vector out and lets the vector store embed the chunk text server-side.
The second mode is represented by *no* provider (``None``).
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

from docs_indexer.config import Settings
from docs_indexer.errors import ConfigurationError, EmbeddingError

if TYPE_CHECKING:
    from langchain_core.embeddings import Embeddings

logger = logging.getLogger(__name__)

# Output sizes of well-known OpenAI embedding models.
_OPENAI_MODEL_DIMENSIONS: dict[str, int] = {
    "text-embedding-ada-002": 1536,
    "text-embedding-3-small": 1536,
    "text-embedding-3-large": 3072,
}


class EmbeddingProvider(ABC):
    """Converts chunk text into fixed-length vectors.

    Parameters
    ----------
    name:
        Short label used in logs and error messages.
    dimension:
        Expected vector length, or ``None`` when it is only known after
        the first call.
    """

    def __init__(self, name: str, dimension: int | None = None) -> None:
        self.name = name
        self.dimension = dimension

    @abstractmethod
    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        """Return one vector per entry of *texts*, in order."""
        ...

    def embed(self, text: str) -> list[float]:
        return self.embed_documents([text])[0]


class LangChainEmbeddingProvider(EmbeddingProvider):
    """Adapter around any LangChain ``Embeddings`` implementation."""

    def __init__(self, embeddings: Embeddings, *, name: str, dimension: int | None = None) -> None:
        super().__init__(name, dimension)
        self._embeddings = embeddings

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        if not texts:
            return []
        try:
            vectors = self._embeddings.embed_documents(texts)
        except Exception as exc:
            raise EmbeddingError(f"embedding {len(texts)} texts failed: {exc}", self.name) from exc

        if len(vectors) != len(texts):
            raise EmbeddingError(
                f"expected {len(texts)} vectors, got {len(vectors)}", self.name
            )
        for vector in vectors:
            if self.dimension is None:
                self.dimension = len(vector)
                logger.info("Embedding provider %s produces %d-dimensional vectors", self.name, self.dimension)
            elif len(vector) != self.dimension:
                raise ConfigurationError(
                    f"Embedding provider {self.name} returned a {len(vector)}-dimensional "
                    f"vector, expected {self.dimension}"
                )
        return [list(v) for v in vectors]


def openai_provider(settings: Settings) -> LangChainEmbeddingProvider:
    """Build the OpenAI embedding provider from *settings*."""
    api_key = settings.openai_api_key.get_secret_value()
    if not api_key:
        raise ConfigurationError("embedding_provider='openai' requires OPENAI_API_KEY")

    from langchain_openai import OpenAIEmbeddings

    kwargs: dict = {"model": settings.openai_embedding_model, "api_key": api_key}
    if settings.embedding_dimensions:
        kwargs["dimensions"] = settings.embedding_dimensions
    dimension = settings.embedding_dimensions or _OPENAI_MODEL_DIMENSIONS.get(
        settings.openai_embedding_model
    )
    return LangChainEmbeddingProvider(
        OpenAIEmbeddings(**kwargs),
        name=f"openai:{settings.openai_embedding_model}",
        dimension=dimension,
    )


def huggingface_provider(settings: Settings) -> LangChainEmbeddingProvider:
    """Build a local sentence-transformer provider from *settings*."""
    from langchain_huggingface import HuggingFaceEmbeddings

    return LangChainEmbeddingProvider(
        HuggingFaceEmbeddings(model_name=settings.embedding_model),
        name=f"huggingface:{settings.embedding_model}",
    )


def build_embedding_provider(settings: Settings) -> EmbeddingProvider | None:
    """Return the provider selected by ``settings.embedding_provider``.

    ``None`` means store-managed embeddings: chunk records are sent with
    their text only and the vector store computes the vectors.
    """
    choice = settings.embedding_provider
    if choice == "auto":
        choice = "openai" if settings.openai_api_key.get_secret_value() else "none"

    if choice == "openai":
        return openai_provider(settings)
    if choice == "huggingface":
        return huggingface_provider(settings)
    return None
