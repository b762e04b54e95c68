"""Domain models for source documents and the chunk records sent to the store."""

from __future__ import annotations

from pathlib import PurePosixPath
from typing import Any

from langchain_core.documents import Document
from pydantic import BaseModel, ConfigDict, Field


class SourceDocument(BaseModel):
    """One Markdown/MDX file read from the working copy.

    Attributes
    ----------
    text:
        Full UTF-8 decoded file content.
    path:
        Path relative to the working-copy root, with ``/`` separators.
    extension:
        File extension without the leading dot (``"md"``, ``"mdx"``).
    """

    model_config = ConfigDict(frozen=True)

    text: str
    path: str
    extension: str

    @property
    def file_name(self) -> str:
        return PurePosixPath(self.path).name

    def to_document(self) -> Document:
        """Return the LangChain ``Document`` form consumed by text splitters."""
        return Document(page_content=self.text, metadata={"source": self.path})


class ChunkMetadata(BaseModel):
    """Metadata stored next to every chunk.

    Field aliases are the camelCase keys written to the index.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    file_name: str = Field(alias="fileName")
    file_path: str = Field(alias="filePath")
    file_type: str = Field(alias="fileType")
    timestamp: int = Field(description="Creation time in epoch milliseconds")


class Chunk(BaseModel):
    """The unit of storage: a text fragment, its id, metadata and optional vector."""

    model_config = ConfigDict(frozen=True)

    id: str
    text: str
    metadata: ChunkMetadata
    vector: list[float] | None = None

    def to_record(self) -> dict[str, Any]:
        """Return the ``{id, metadata, data, vector?}`` record for the store.

        The ``vector`` key is omitted entirely in store-managed embedding
        mode so the backend embeds ``data`` itself.
        """
        record: dict[str, Any] = {
            "id": self.id,
            "metadata": self.metadata.model_dump(by_alias=True),
            "data": self.text,
        }
        if self.vector is not None:
            record["vector"] = list(self.vector)
        return record
