"""docs-indexer: chunk Markdown documentation and upsert it into a vector index."""

__version__ = "0.1.0"
