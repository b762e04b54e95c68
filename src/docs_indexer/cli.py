"""Command-line entry point.

    docs-indexer https://github.com/org/docs.git
    docs-indexer https://github.com/org/docs.git --chunk-size 800 --embedding-provider none

Connection details and credentials come from the environment / ``.env``
(``CHROMA_HOST``, ``OPENAI_API_KEY``, ``GITHUB_TOKEN`` …); options given on
the command line override them.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import Any

from pydantic import ValidationError

from docs_indexer.config import Settings
from docs_indexer.errors import DocsIndexerError
from docs_indexer.pipeline import IndexingPipeline

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_PARTIAL = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="docs-indexer",
        description="Chunk a repository's Markdown documentation and upsert it into a vector index.",
    )
    parser.add_argument("source", help="Repository URL or path to clone")
    parser.add_argument("--chunk-size", type=int, help="Maximum characters per chunk (default 1000)")
    parser.add_argument("--chunk-overlap", type=int, help="Characters shared by consecutive chunks (default 200)")
    parser.add_argument("--batch-size", type=int, help="Records per upsert call (default 100)")
    parser.add_argument(
        "--embedding-provider",
        choices=["auto", "openai", "huggingface", "none"],
        help="Where vectors are computed (default auto)",
    )
    parser.add_argument("--work-dir", help="Directory for the temporary working copy")
    parser.add_argument(
        "--continue-on-error",
        action="store_true",
        help="Skip unreadable files and embedding failures instead of aborting",
    )
    parser.add_argument("--log-level", help="Logging level (default INFO)")
    return parser


def _overrides(args: argparse.Namespace) -> dict[str, Any]:
    values: dict[str, Any] = {
        "chunk_size": args.chunk_size,
        "chunk_overlap": args.chunk_overlap,
        "batch_size": args.batch_size,
        "embedding_provider": args.embedding_provider,
        "work_dir": args.work_dir,
        "log_level": args.log_level,
    }
    if args.continue_on_error:
        values["fail_fast"] = False
    return {k: v for k, v in values.items() if v is not None}


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = Settings(**_overrides(args))
    except ValidationError as exc:
        print(f"Error: invalid configuration: {exc.errors()[0]['msg']}", file=sys.stderr)
        return EXIT_FAILED

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        report = IndexingPipeline.from_settings(settings).run(args.source)
    except DocsIndexerError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return EXIT_FAILED
    except Exception as exc:  # noqa: BLE001
        logging.getLogger(__name__).debug("Unexpected failure", exc_info=True)
        print(f"Error: {type(exc).__name__}: {exc}", file=sys.stderr)
        return EXIT_FAILED

    if not report.ok:
        print(
            f"Indexed {report.files_indexed} of {report.files_discovered} files; "
            f"{len(report.failures)} skipped",
            file=sys.stderr,
        )
        return EXIT_PARTIAL
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
