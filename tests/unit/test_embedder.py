"""Unit tests for embedding providers and provider selection."""

from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest

from docs_indexer.config import Settings
from docs_indexer.errors import ConfigurationError, EmbeddingError
from docs_indexer.ingestion.embedder import (
    LangChainEmbeddingProvider,
    build_embedding_provider,
)


def _settings(**overrides) -> Settings:
    overrides.setdefault("openai_api_key", "")
    return Settings(_env_file=None, **overrides)


# ── LangChainEmbeddingProvider ─────────────────────────────────────────


class TestLangChainEmbeddingProvider:
    def test_returns_vectors_and_learns_dimension(self) -> None:
        embeddings = MagicMock()
        embeddings.embed_documents.return_value = [[0.1, 0.2], [0.3, 0.4]]
        provider = LangChainEmbeddingProvider(embeddings, name="mock")

        assert provider.embed_documents(["a", "b"]) == [[0.1, 0.2], [0.3, 0.4]]
        assert provider.dimension == 2
        embeddings.embed_documents.assert_called_once_with(["a", "b"])

    def test_embed_single_text(self) -> None:
        embeddings = MagicMock()
        embeddings.embed_documents.return_value = [[1.0, 0.0]]
        provider = LangChainEmbeddingProvider(embeddings, name="mock")
        assert provider.embed("hello") == [1.0, 0.0]

    def test_empty_input_skips_backend(self) -> None:
        embeddings = MagicMock()
        provider = LangChainEmbeddingProvider(embeddings, name="mock")
        assert provider.embed_documents([]) == []
        embeddings.embed_documents.assert_not_called()

    def test_backend_failure_is_wrapped(self) -> None:
        embeddings = MagicMock()
        embeddings.embed_documents.side_effect = RuntimeError("rate limited")
        provider = LangChainEmbeddingProvider(embeddings, name="mock")

        with pytest.raises(EmbeddingError, match=r"\[mock\].*rate limited") as excinfo:
            provider.embed_documents(["a"])
        assert isinstance(excinfo.value.__cause__, RuntimeError)

    def test_wrong_vector_count(self) -> None:
        embeddings = MagicMock()
        embeddings.embed_documents.return_value = [[0.1]]
        provider = LangChainEmbeddingProvider(embeddings, name="mock")

        with pytest.raises(EmbeddingError, match="expected 2 vectors, got 1"):
            provider.embed_documents(["a", "b"])

    def test_dimension_mismatch_is_configuration_error(self) -> None:
        embeddings = MagicMock()
        embeddings.embed_documents.return_value = [[0.1, 0.2, 0.3]]
        provider = LangChainEmbeddingProvider(embeddings, name="mock", dimension=1536)

        with pytest.raises(ConfigurationError, match="3-dimensional"):
            provider.embed_documents(["a"])


# ── build_embedding_provider ───────────────────────────────────────────


class TestBuildEmbeddingProvider:
    def test_auto_without_key_is_store_managed(self) -> None:
        assert build_embedding_provider(_settings()) is None

    def test_none_ignores_key(self) -> None:
        settings = _settings(embedding_provider="none", openai_api_key="sk-test")
        assert build_embedding_provider(settings) is None

    def test_explicit_openai_without_key_raises(self) -> None:
        with pytest.raises(ConfigurationError, match="OPENAI_API_KEY"):
            build_embedding_provider(_settings(embedding_provider="openai"))

    def test_auto_with_key_selects_openai(self) -> None:
        with patch("langchain_openai.OpenAIEmbeddings") as openai_cls:
            provider = build_embedding_provider(_settings(openai_api_key="sk-test"))

        assert provider is not None
        assert provider.name == "openai:text-embedding-ada-002"
        assert provider.dimension == 1536
        openai_cls.assert_called_once_with(model="text-embedding-ada-002", api_key="sk-test")

    def test_openai_with_requested_dimensions(self) -> None:
        settings = _settings(
            openai_api_key="sk-test",
            openai_embedding_model="text-embedding-3-small",
            embedding_dimensions=256,
        )
        with patch("langchain_openai.OpenAIEmbeddings") as openai_cls:
            provider = build_embedding_provider(settings)

        assert provider.dimension == 256
        assert openai_cls.call_args.kwargs["dimensions"] == 256

    def test_huggingface(self) -> None:
        fake_module = MagicMock()
        settings = _settings(embedding_provider="huggingface")

        with patch.dict("sys.modules", {"langchain_huggingface": fake_module}):
            provider = build_embedding_provider(settings)

        assert provider.name == "huggingface:sentence-transformers/all-MiniLM-L6-v2"
        assert provider.dimension is None
        fake_module.HuggingFaceEmbeddings.assert_called_once_with(
            model_name="sentence-transformers/all-MiniLM-L6-v2"
        )
