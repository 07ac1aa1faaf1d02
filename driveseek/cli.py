"""CLI interface for driveseek - search and read Google Drive files from the terminal."""

import argparse
import asyncio
import json
import logging
import sys

from driveseek.config import get_settings
from driveseek.drive import DriveClient
from driveseek.drive.mime import FILE_TYPES
from driveseek.errors import ConfigurationError
from driveseek.indexer import CrawlProgress
from driveseek.tools import create_crawler, create_tool_registry


# ANSI color codes
class Colors:
    RESET = "\033[0m"
    BOLD = "\033[1m"
    DIM = "\033[2m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    RED = "\033[31m"


def setup_logging(verbose: bool = False) -> None:
    """Configure logging for CLI."""
    logging.basicConfig(
        format="%(message)s",
        level=logging.DEBUG if verbose else logging.INFO,
        stream=sys.stderr,
    )
    # Reduce noise from libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)
    logging.getLogger("googleapiclient").setLevel(logging.WARNING)


def print_json(data: object) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def print_progress(progress: CrawlProgress) -> None:
    print(f"{Colors.DIM}{progress.message} [{progress.progress:.0f}%]{Colors.RESET}", file=sys.stderr)


async def run_tool(registry, name: str, **kwargs) -> int:
    result = await registry.execute(name, **kwargs)
    if not result.success:
        print(f"{Colors.RED}Error: {result.message}{Colors.RESET}", file=sys.stderr)
        return 1
    print(f"{Colors.GREEN}{result.message}{Colors.RESET}", file=sys.stderr)
    print_json(result.data)
    return 0


async def run_cache_command(args, settings) -> int:
    if not settings.google_drive_folder_id and args.action in ("rebuild", "update"):
        print(f"{Colors.RED}GOOGLE_DRIVE_FOLDER_ID is required for this command.{Colors.RESET}")
        return 1

    client = DriveClient.from_service_account(settings.google_service_account_key_path)
    crawler = create_crawler(settings, client)

    if args.action == "stats":
        print_json(crawler.cache.stats().to_dict())
    elif args.action == "clear":
        crawler.cache.clear()
        print(f"{Colors.GREEN}Folder cache cleared.{Colors.RESET}")
    elif args.action == "rebuild":
        result = await crawler.crawl(settings.google_drive_folder_id, on_progress=print_progress)
        status = " (incomplete)" if result.incomplete else ""
        print(f"{Colors.GREEN}Cached {len(result.folder_ids)} folders{status}.{Colors.RESET}")
    elif args.action == "update":
        if not args.folder_ids:
            print(f"{Colors.YELLOW}No folder IDs given.{Colors.RESET}")
            return 1
        updated = await crawler.incremental_update(args.folder_ids, on_progress=print_progress)
        print(f"{Colors.GREEN}Updated {updated} folders.{Colors.RESET}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="driveseek",
        description="Search and read Google Drive files without overflowing a context window.",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    search = subparsers.add_parser("search", help="Search for files")
    search.add_argument("query", help="Text to look for in file names and content")
    search.add_argument("--type", dest="file_types", action="append", choices=FILE_TYPES)
    search.add_argument("--mime", dest="mime_type", help="Exact MIME type filter")
    search.add_argument("--since", dest="modified_since", help="Modified on or after (YYYY-MM-DD)")
    search.add_argument("--name-only", action="store_true", help="Match file names only")
    search.add_argument("--no-recursive", action="store_true", help="Do not search subfolders")
    search.add_argument("--page-size", type=int, default=10)
    search.add_argument("--page-token", help="Continuation token from a previous global search")

    read = subparsers.add_parser("read", help="Read and summarize a file")
    read.add_argument("file_id")
    read.add_argument("--context", required=True, help="What you are looking for")
    read.add_argument("--findings", help="Cumulative summary from the previous read")
    read.add_argument("--export-format", help="Export MIME type for Google Workspace files")

    cache = subparsers.add_parser("cache", help="Manage the folder tree cache")
    cache.add_argument("action", choices=["stats", "rebuild", "clear", "update"])
    cache.add_argument("folder_ids", nargs="*", help="Folders to refresh (update only)")

    return parser


def cli() -> None:
    """Main CLI entry point."""
    args = build_parser().parse_args()

    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    try:
        settings = get_settings()
    except Exception as e:
        logger.error(f"{Colors.RED}Failed to load settings: {e}{Colors.RESET}")
        logger.error(
            f"{Colors.RED}Make sure you have a .env file with GOOGLE_SERVICE_ACCOUNT_KEY_PATH "
            f"and OPENAI_API_KEY.{Colors.RESET}"
        )
        sys.exit(1)

    if args.command == "cache":
        sys.exit(asyncio.run(run_cache_command(args, settings)))

    try:
        registry = create_tool_registry(settings)
    except ConfigurationError as e:
        logger.error(f"{Colors.RED}{e}{Colors.RESET}")
        sys.exit(1)

    if args.command == "search":
        code = asyncio.run(
            run_tool(
                registry,
                "search_files",
                query=args.query,
                pageToken=args.page_token,
                pageSize=args.page_size,
                mimeType=args.mime_type,
                recursive=not args.no_recursive,
                nameOnly=args.name_only,
                modifiedSince=args.modified_since,
                fileTypes=args.file_types,
            )
        )
    else:
        code = asyncio.run(
            run_tool(
                registry,
                "read_file",
                fileId=args.file_id,
                searchContext=args.context,
                exportFormat=args.export_format,
                cumulativeFindings=args.findings,
            )
        )
    sys.exit(code)


if __name__ == "__main__":
    cli()
