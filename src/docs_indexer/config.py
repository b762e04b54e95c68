"""Run configuration loaded from environment / ``.env``."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings

EmbeddingProviderName = Literal["auto", "openai", "huggingface", "none"]


class Settings(BaseSettings):
    """Indexing settings, populated from env vars, a .env file, or CLI overrides."""

    # Chunking
    chunk_size: int = Field(default=1000, gt=0, description="Soft maximum chunk length in characters")
    chunk_overlap: int = Field(default=200, ge=0, description="Characters shared by consecutive chunks")
    file_extensions: list[str] = Field(default_factory=lambda: [".md", ".mdx"])

    # Upsert
    batch_size: int = Field(default=100, gt=0, description="Records per vector-store upsert call")

    # Embedding
    embedding_provider: EmbeddingProviderName = Field(
        default="auto",
        description=(
            "'auto' uses OpenAI when OPENAI_API_KEY is set and store-managed "
            "embeddings otherwise."
        ),
    )
    openai_api_key: SecretStr = SecretStr("")
    openai_embedding_model: str = "text-embedding-ada-002"
    embedding_dimensions: int | None = Field(
        default=None,
        gt=0,
        description="Requested output size for models that support it (text-embedding-3-*)",
    )
    embedding_model: str = "sentence-transformers/all-MiniLM-L6-v2"

    # Vector store
    chroma_host: str = "localhost"
    chroma_port: int = 8000
    chroma_ssl: bool = False
    chroma_auth_token: SecretStr = SecretStr("")
    distance_metric: Literal["cosine", "l2", "ip"] = "cosine"

    # Source repository
    github_token: SecretStr = SecretStr("")
    work_dir: Path = Path("temp_repo")
    clone_depth: int | None = Field(default=1, gt=0, description="Shallow-clone depth, None for full history")

    # Run behaviour
    fail_fast: bool = True
    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8", "extra": "ignore"}

    @model_validator(mode="after")
    def _check_overlap(self) -> Settings:
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError(
                f"chunk_overlap ({self.chunk_overlap}) must be < chunk_size ({self.chunk_size})"
            )
        return self
