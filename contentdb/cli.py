"""
ContentDB CLI — Inspect and edit a site's content from the shell.

Commands:
- contentdb list   — List the front-matter records of a collection
- contentdb show   — Print one front-matter record
- contentdb data   — Print the entries of a YAML data file
- contentdb set    — Change fields of one data file entry
- contentdb id     — Print the base64 id of a path

Every command takes the site's base path first; ``--folder`` selects the
collection directory under it.
"""

from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional, Tuple

import yaml

from contentdb.decorators.core import define_model
from contentdb.engine.config import load_store_config
from contentdb.engine.errors import ContentDBError, ContentDBValidationError
from contentdb.engine.logging import init_logging
from contentdb.models import paths
from contentdb.models.collection import SortKey, SortOrder, by_field

logger = logging.getLogger("contentdb.cli")


def main(argv: Optional[list] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="contentdb",
        description="ContentDB — records backed by static site files",
    )
    parser.add_argument("--config", help="Path to contentdb.yaml (default: auto-discover)")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # contentdb list
    list_parser = subparsers.add_parser("list", help="List a collection's records")
    list_parser.add_argument("base", help="Site base path")
    list_parser.add_argument("--folder", default="", help="Collection folder under the base path")
    list_parser.add_argument("--subfolder", help="Only list records under this subfolder")
    list_parser.add_argument(
        "--order-by",
        default=SortKey.POSTED_DATETIME.value,
        help="posted_datetime, file_name, title or any field name (default: posted_datetime)",
    )
    list_parser.add_argument("--asc", action="store_true", help="Oldest / smallest first")
    list_parser.add_argument("--unsorted", action="store_true", help="Keep file system order")

    # contentdb show
    show_parser = subparsers.add_parser("show", help="Print one front-matter record")
    show_parser.add_argument("base", help="Site base path")
    show_parser.add_argument("record_id", help="Relative path or base64 id")
    show_parser.add_argument("--folder", default="", help="Collection folder under the base path")

    # contentdb data
    data_parser = subparsers.add_parser("data", help="Print the entries of a data file")
    data_parser.add_argument("base", help="Site base path")
    data_parser.add_argument("file", help="Data file, relative path or base64 id")
    data_parser.add_argument("key", nargs="?", help="Only print this key / index")
    data_parser.add_argument("--folder", default="", help="Data folder under the base path")

    # contentdb set
    set_parser = subparsers.add_parser("set", help="Change fields of a data file entry")
    set_parser.add_argument("base", help="Site base path")
    set_parser.add_argument("file", help="Data file, relative path or base64 id")
    set_parser.add_argument("key", help="Key / index of the entry")
    set_parser.add_argument("assignments", nargs="+", metavar="FIELD=VALUE",
                            help="Values are parsed as YAML")
    set_parser.add_argument("--folder", default="", help="Data folder under the base path")

    # contentdb id
    id_parser = subparsers.add_parser("id", help="Print the base64 id of a path")
    id_parser.add_argument("base", help="Site base path")
    id_parser.add_argument("path", help="Path relative to the collection folder")
    id_parser.add_argument("--folder", default="", help="Collection folder under the base path")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        config = load_store_config(args.config)
        if config.logging.enabled:
            init_logging(config.logging.directory, config.logging.level)

        if args.command == "list":
            return cmd_list(args)
        elif args.command == "show":
            return cmd_show(args)
        elif args.command == "data":
            return cmd_data(args)
        elif args.command == "set":
            return cmd_set(args)
        elif args.command == "id":
            return cmd_id(args)
    except ContentDBError as e:
        logger.debug(repr(e))
        print(f"[ERROR] {e}", file=sys.stderr)
        return 1
    except FileNotFoundError as e:
        print(f"[ERROR] File not found: {e.filename}", file=sys.stderr)
        return 1

    parser.print_help()
    return 0


# ---------------------------------------------------------------------------
# contentdb list / show
# ---------------------------------------------------------------------------

def cmd_list(args: argparse.Namespace) -> int:
    """One line per record: id, relative path, posted date, title."""
    model = define_model("CliDocument", "content", base_path=args.base, folder=args.folder)

    try:
        order_by = SortKey(args.order_by)
    except ValueError:
        order_by = by_field(args.order_by)

    records = model.all(
        sorted=not args.unsorted,
        order_by=order_by,
        order_direction=SortOrder.ASC if args.asc else SortOrder.DESC,
        subfolder=args.subfolder,
    )
    for record in records:
        posted = record.posted_datetime
        print("\t".join([
            record.id or "",
            record.relative_path or "",
            posted.isoformat() if posted else "",
            str(record.get("title") or ""),
        ]))
    print(f"\n{len(records)} record(s)")
    return 0


def cmd_show(args: argparse.Namespace) -> int:
    """Print a record the way it would be written back."""
    model = define_model("CliDocument", "content", base_path=args.base, folder=args.folder)
    record = model.find(args.record_id)
    sys.stdout.write(record.generate_file_output())
    if record.content and not record.content.endswith("\n"):
        sys.stdout.write("\n")
    return 0


# ---------------------------------------------------------------------------
# contentdb data / set
# ---------------------------------------------------------------------------

def cmd_data(args: argparse.Namespace) -> int:
    """Print entries keyed by their key path."""
    model = define_model("CliEntry", "datafile", base_path=args.base, folder=args.folder)
    if args.key is not None:
        records = [model.find(args.file, args.key)]
    else:
        records = model.all(args.file)

    output = {record.key_path: record.to_dict() for record in records}
    print(yaml.safe_dump(output, sort_keys=False, allow_unicode=True, default_flow_style=False), end="")
    return 0


def _parse_assignment(assignment: str) -> Tuple[str, object]:
    field, sep, raw = assignment.partition("=")
    if not sep or not field:
        raise ContentDBValidationError(f"Expected FIELD=VALUE, got '{assignment}'")
    try:
        return field, yaml.safe_load(raw) if raw else None
    except yaml.YAMLError as e:
        raise ContentDBValidationError(f"Value for '{field}' is not valid YAML: {e}") from e


def cmd_set(args: argparse.Namespace) -> int:
    """Assign fields to one entry and save the data file."""
    assignments: List[Tuple[str, object]] = [_parse_assignment(a) for a in args.assignments]

    model = define_model("CliEntry", "datafile", base_path=args.base, folder=args.folder)
    record = model.find(args.file, args.key)
    for field, value in assignments:
        record.set(field, value)

    if not record.save():
        print(f"[ERROR] Save of {record.relative_path}#{record.key_path} was halted", file=sys.stderr)
        return 1
    print(f"[OK] Saved {record.relative_path}#{record.key_path}")
    return 0


# ---------------------------------------------------------------------------
# contentdb id
# ---------------------------------------------------------------------------

def cmd_id(args: argparse.Namespace) -> int:
    path = paths.resolve(args.base, args.folder.strip("/"), args.path)
    print(paths.encode_id(path, args.base, args.folder.strip("/")))
    return 0


if __name__ == "__main__":
    sys.exit(main())
