"""CLI entrypoint for mediashelf (read-only library browser)."""

import argparse
import json
import sys
from pathlib import Path
from typing import Any, Dict, List

from pydantic import BaseModel

from mediashelf.api.library_api import (
    get_folder_cover,
    list_folders,
    list_items,
    random_cover,
    suggest_tags,
)
from mediashelf.config.loader import (
    DEFAULT_CONFIG_PATH,
    get_folder_sort,
    get_global_sort,
    get_library_id,
    get_log_level,
    get_sqlite_path,
    get_tag_suggestion_limit,
    load_config,
)
from mediashelf.database.errors import DataAccessFailure
from mediashelf.database.item_repo import ItemScope
from mediashelf.database.schema_check import verify_schema
from mediashelf.database.sqlite_client import session_context
from mediashelf.sorting.models import GlobalSortSelection, GlobalSortType
from mediashelf.utils.logging import configure_logging, get_logger

logger = get_logger(__name__)

EXIT_DATA_ACCESS_FAILURE = 2


def _load_settings(args: argparse.Namespace) -> Dict[str, Any]:
    """Config file (optional unless --config is given) with command-line overrides."""
    if args.config:
        config = load_config(Path(args.config))
    elif DEFAULT_CONFIG_PATH.exists():
        config = load_config(DEFAULT_CONFIG_PATH)
    else:
        config = {}

    configure_logging(args.log_level or get_log_level(config))
    return {
        "sqlite_path": args.db or get_sqlite_path(config),
        "library_id": args.library if args.library is not None else get_library_id(config),
        "global_sort": get_global_sort(config),
        "folder_sort": get_folder_sort(config),
        "tag_limit": get_tag_suggestion_limit(config),
    }


def _global_sort(args: argparse.Namespace, settings: Dict[str, Any]) -> GlobalSortSelection:
    configured: GlobalSortSelection = settings["global_sort"]
    sort_type = GlobalSortType(args.sort) if getattr(args, "sort", None) else configured.type
    ascending = False if getattr(args, "desc", False) else configured.ascending
    return GlobalSortSelection(type=sort_type, ascending=ascending)


def _emit(records: List[BaseModel], fmt: str, columns: List[str]) -> None:
    if fmt == "json":
        print(json.dumps([r.model_dump() for r in records], indent=2))
        return
    if not records:
        print("No results.")
        return
    print("  ".join(f"{c:<24}" for c in columns))
    print("-" * (26 * len(columns)))
    for record in records:
        values = record.model_dump()
        print("  ".join(f"{str(values.get(c, '')):<24}" for c in columns))


def cmd_items(args: argparse.Namespace) -> None:
    """List items (all, uncategorized, or one random cover)."""
    settings = _load_settings(args)
    with session_context(settings["sqlite_path"]) as session:
        if args.random:
            cover = random_cover(session, settings["library_id"], search_text=args.search)
            records = [cover] if cover else []
        else:
            scope = ItemScope.uncategorized() if args.uncategorized else ItemScope.all()
            records = list_items(
                session,
                settings["library_id"],
                _global_sort(args, settings),
                search_text=args.search,
                scope=scope,
            )
    _emit(records, args.format, ["item_id", "name", "ext", "width", "height"])


def cmd_folders(args: argparse.Namespace) -> None:
    """List root folders or the children of a folder."""
    settings = _load_settings(args)
    with session_context(settings["sqlite_path"]) as session:
        records = list_folders(
            session,
            settings["library_id"],
            settings["folder_sort"],
            parent_id=args.parent,
            search_text=args.search,
        )
    _emit(records, args.format, ["folder_id", "name", "parent_id", "sort_type"])


def cmd_folder_items(args: argparse.Namespace) -> None:
    """List the items of one folder."""
    settings = _load_settings(args)
    with session_context(settings["sqlite_path"]) as session:
        records = list_items(
            session,
            settings["library_id"],
            _global_sort(args, settings),
            search_text=args.search,
            scope=ItemScope.folder(args.folder_id),
        )
    _emit(records, args.format, ["item_id", "name", "ext", "width", "height"])


def cmd_cover(args: argparse.Namespace) -> None:
    """Show the cover item of a folder."""
    settings = _load_settings(args)
    with session_context(settings["sqlite_path"]) as session:
        result = get_folder_cover(session, settings["library_id"], args.folder_id, settings["global_sort"])

    if result is None:
        print(f"Folder not found: {args.folder_id}")
        return
    if args.format == "json":
        print(json.dumps(result.model_dump(), indent=2))
    elif result.cover is None:
        print(f"{result.folder.name}: no cover")
    else:
        print(f"{result.folder.name}: {result.cover.item_id} ({result.cover.thumbnail_path})")


def cmd_tags(args: argparse.Namespace) -> None:
    """Suggest tags for the current search."""
    settings = _load_settings(args)
    if args.folder:
        scope = ItemScope.folder(args.folder)
    elif args.uncategorized:
        scope = ItemScope.uncategorized()
    else:
        scope = ItemScope.all()

    with session_context(settings["sqlite_path"]) as session:
        records = suggest_tags(
            session,
            settings["library_id"],
            scope,
            item_search_text=args.search,
            tag_search_text=args.tag,
            limit=args.limit or settings["tag_limit"],
        )
    _emit(records, args.format, ["tag", "count"])


def cmd_doctor(args: argparse.Namespace) -> None:
    """Check that the database matches the schema this tool reads."""
    settings = _load_settings(args)
    verify_schema(settings["sqlite_path"])
    print(f"OK: {settings['sqlite_path']} matches the expected schema")


def _add_search(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--search",
        type=str,
        default="",
        help="Free text; every whitespace-separated word must match",
    )


def _add_item_sort(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--sort",
        type=str,
        choices=[t.value for t in GlobalSortType],
        help="Item order (default: from config)",
    )
    parser.add_argument(
        "--desc",
        action="store_true",
        help="Reverse the item order",
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mediashelf",
        description="Read-only browser for a media library database",
    )
    parser.add_argument("--config", type=str, help=f"Config file (default: {DEFAULT_CONFIG_PATH})")
    parser.add_argument("--db", type=str, help="SQLite database path (overrides config)")
    parser.add_argument("--library", type=int, help="Library ID (overrides config)")
    parser.add_argument(
        "--format",
        type=str,
        choices=["table", "json"],
        default="table",
        help="Output format (default: table)",
    )
    parser.add_argument("--log-level", type=str, help="Log level (default: from config or INFO)")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # items command
    items_parser = subparsers.add_parser("items", help="List items")
    _add_search(items_parser)
    _add_item_sort(items_parser)
    items_group = items_parser.add_mutually_exclusive_group()
    items_group.add_argument("--uncategorized", action="store_true", help="Only items in no folder")
    items_group.add_argument("--random", action="store_true", help="Pick one random item")
    items_parser.set_defaults(func=cmd_items)

    # folders command
    folders_parser = subparsers.add_parser("folders", help="List folders")
    folders_parser.add_argument("--parent", type=str, help="List children of this folder ID")
    _add_search(folders_parser)
    folders_parser.set_defaults(func=cmd_folders)

    # folder-items command
    folder_items_parser = subparsers.add_parser("folder-items", help="List items in a folder")
    folder_items_parser.add_argument("folder_id", type=str)
    _add_search(folder_items_parser)
    _add_item_sort(folder_items_parser)
    folder_items_parser.set_defaults(func=cmd_folder_items)

    # cover command
    cover_parser = subparsers.add_parser("cover", help="Show a folder's cover item")
    cover_parser.add_argument("folder_id", type=str)
    cover_parser.set_defaults(func=cmd_cover)

    # tags command
    tags_parser = subparsers.add_parser("tags", help="Suggest tags")
    tags_group = tags_parser.add_mutually_exclusive_group()
    tags_group.add_argument("--folder", type=str, help="Only items in this folder ID")
    tags_group.add_argument("--uncategorized", action="store_true", help="Only items in no folder")
    _add_search(tags_parser)
    tags_parser.add_argument("--tag", type=str, default="", help="Only tags containing this text")
    tags_parser.add_argument("--limit", type=int, help="Maximum number of tags (default: from config)")
    tags_parser.set_defaults(func=cmd_tags)

    # doctor command
    doctor_parser = subparsers.add_parser("doctor", help="Check the database schema")
    doctor_parser.set_defaults(func=cmd_doctor)

    return parser


def main(argv: List[str] | None = None) -> int:
    """Main CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)

    if not args.command:
        parser.print_help()
        return 0

    try:
        args.func(args)
    except DataAccessFailure as e:
        logger.error(f"Error running command '{args.command}': {e}")
        print(f"Error: {e}", file=sys.stderr)
        return EXIT_DATA_ACCESS_FAILURE
    except Exception as e:
        logger.error(f"Error running command '{args.command}': {e}", exc_info=True)
        raise
    return 0


if __name__ == "__main__":
    sys.exit(main())
