"""
Main CLI entry point for the game catalog package.
"""

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, List, Optional

from ..config import DATABASE_PATH
from ..error_handling import CatalogError
from ..logging_config import setup_logging
from ..models import CatalogRecord
from ..service import CatalogService
from ..sources import SOURCES

logger = logging.getLogger(__name__)


def to_jsonable(value: Any) -> Any:
    """Convert service results into JSON-serialisable data."""
    if isinstance(value, (CatalogRecord, CatalogError)):
        return value.to_dict()
    if isinstance(value, list):
        return [to_jsonable(item) for item in value]
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Fetch, reconcile and cache board game catalog data")
    parser.add_argument("--db", type=Path, default=DATABASE_PATH, help="Cache database file path")
    parser.add_argument("--log-file", type=str, default=None, help="Custom log file name or absolute path")
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", required=True)
    sources = sorted(SOURCES)

    get_parser = subparsers.add_parser("get", help="Resolve a record from the source, the cache, or both")
    get_parser.add_argument("source", choices=sources, help="External source")
    get_parser.add_argument("id", type=int, help="Source identifier")
    get_parser.add_argument("--mode", default=None,
                            help="Source name or 'remote' (default), 'db' for the cache, or 'hybrid'")
    get_parser.add_argument("--batch", type=int, default=1, help="Number of sequential ids to resolve")
    get_parser.add_argument("--sync", default="n", help="'y' to write changed records back in hybrid mode")

    put_parser = subparsers.add_parser("put", help="Update a cached record from a JSON file")
    put_parser.add_argument("source", choices=sources)
    put_parser.add_argument("id", type=int)
    put_parser.add_argument("file", type=Path, help="JSON file holding the record")

    post_parser = subparsers.add_parser("post", help="Insert a cached record from a JSON file")
    post_parser.add_argument("source", choices=sources)
    post_parser.add_argument("file", type=Path, help="JSON file holding the record")

    delete_parser = subparsers.add_parser("delete", help="Delete a cached record")
    delete_parser.add_argument("source", choices=sources)
    delete_parser.add_argument("id", type=int)
    return parser


def run(args: argparse.Namespace, service: CatalogService) -> Any:
    if args.command == "get":
        return service.get(args.source, args.id, args.mode, args.batch, args.sync)
    if args.command == "delete":
        return service.delete(args.source, args.id)

    payload = json.loads(args.file.read_text())
    if args.command == "put":
        return service.put(args.source, args.id, payload)
    return service.post(args.source, payload)


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    args = build_parser().parse_args(argv)

    # Build a default per-run log filename when not provided
    if args.log_file:
        log_file = args.log_file
    else:
        ts = datetime.now().strftime("%Y%m%d_%H%M%S")
        log_file = f"run_{ts}_{args.command}_{args.source}.log"
    setup_logging(log_file, logging.DEBUG if args.verbose else logging.INFO)

    try:
        result = run(args, CatalogService(args.db))
    except KeyboardInterrupt:
        print("\nProcess interrupted by user", file=sys.stderr)
        return 130
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Could not read input: {e}")
        return 2

    print(json.dumps(to_jsonable(result), indent=2))
    return 1 if isinstance(result, CatalogError) else 0


if __name__ == "__main__":
    sys.exit(main())
