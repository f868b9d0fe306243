"""
insert-markdown-to-doc: append a markdown file to an existing Google Doc.

Usage:
  insert-markdown-to-doc <document_id> <markdown_file> [options]

The status record is printed to stdout as JSON; progress goes to stderr.

Exit codes:
  0  every chunk was inserted
  1  bad input, missing credentials or an unrecoverable API error
  2  the run finished but at least one chunk failed
"""

import argparse
import asyncio
import json
import logging
import os
import sys

from auth.credentials import build_services
from core.config import InsertConfig
from core.errors import DocInsertError
from core.utils import TransientNetworkError
from gdocs.writing import MarkdownInserter

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_PARTIAL = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="insert-markdown-to-doc",
        description="Append a markdown file to an existing Google Doc.",
    )
    parser.add_argument("document_id", help="ID of the target Google Doc")
    parser.add_argument("markdown_file", help="Path of the markdown file to insert")
    parser.add_argument("--code-font", default=None, help="Font family for inline code and code blocks")
    parser.add_argument("--start-index", type=int, default=None, help="Template boundary; never cleared")
    parser.add_argument(
        "--clear-after", type=int, default=None, help="Delete everything from this index before inserting"
    )
    parser.add_argument(
        "--insert-images", action="store_true", help="Upload local images to Drive and insert them inline"
    )
    parser.add_argument(
        "--image-base-dir", default=None, help="Directory for relative image paths (default: markdown file's dir)"
    )
    parser.add_argument("--chunk-size", type=int, default=None, help="Maximum chunk size in UTF-8 bytes")
    parser.add_argument("--token-file", default=None, help="Authorized-user token JSON file")
    parser.add_argument("--dry-run", action="store_true", help="Plan every chunk without writing")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        stream=sys.stderr,
    )
    # googleapiclient logs every discovery/request at INFO
    logging.getLogger("googleapiclient").setLevel(logging.WARNING)


def config_from_args(args: argparse.Namespace) -> InsertConfig:
    image_base_dir = args.image_base_dir or os.path.dirname(os.path.abspath(args.markdown_file))
    return InsertConfig.from_env(
        code_font=args.code_font,
        start_index=args.start_index,
        clear_after=args.clear_after,
        insert_images=args.insert_images,
        image_base_dir=image_base_dir,
        chunk_size=args.chunk_size,
        dry_run=args.dry_run,
    )


async def run(args: argparse.Namespace) -> int:
    config = config_from_args(args)
    config.validate()

    with open(args.markdown_file, encoding="utf-8") as f:
        markdown = f.read()

    docs_service, drive_service = build_services(args.token_file, insert_images=config.insert_images)
    inserter = MarkdownInserter(docs_service, args.document_id, config=config, drive_service=drive_service)
    result = await inserter.run(markdown)

    print(json.dumps(result.to_dict(), indent=2))
    return EXIT_PARTIAL if result.chunks_failed else EXIT_OK


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(args.verbose)

    if not os.path.isfile(args.markdown_file):
        parser.print_usage(sys.stderr)
        logger.error(f"Markdown file not found: {args.markdown_file}")
        return EXIT_ERROR

    try:
        return asyncio.run(run(args))
    except (DocInsertError, TransientNetworkError) as e:
        logger.error(f"Error: {e}")
        return EXIT_ERROR


if __name__ == "__main__":
    sys.exit(main())
