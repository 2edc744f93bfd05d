"""CLI utilities for database operations."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .errors import StoreError, BulkLoadError


def init_db(profile: Optional[str] = None):
    """Initialize the database (create all tables)."""
    from .database import init_database

    db_url = init_database(profile)
    print(f"Database initialized at: {db_url}")


def import_file(kind: str, path: Path, encoding: str, profile: Optional[str] = None):
    """Load a delimited file and save its entities."""
    from .services.db_worker import DbWorker

    worker = DbWorker(profile)
    try:
        if kind == "localities":
            saved = worker.load_and_save_localities(path, encoding)
        else:
            saved = worker.load_and_save_departments(path, encoding)
    finally:
        worker.close()

    if saved < 0:
        print(f"No {kind} found in {path}")
    else:
        print(f"Imported {saved} {kind} from {path}")


def show_stats(profile: Optional[str] = None):
    """Show database statistics."""
    from .services.db_worker import DbWorker

    worker = DbWorker(profile)
    try:
        print("\nDatabase Statistics:")
        print(f"  Persons: {worker.count_persons()}")
        print(f"  Localities: {worker.count_localities()}")
        print(f"  Departments: {worker.count_departments()}")
    finally:
        worker.close()


def show_persons(profile: Optional[str] = None):
    """List persons ordered by name."""
    from .services.db_worker import DbWorker

    worker = DbWorker(profile)
    try:
        for person in worker.list_persons():
            first_name = person.first_name or ""
            print(f"{person.id:>6}  {person.name} {first_name}".rstrip())
    finally:
        worker.close()


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(description="dbworker database CLI")
    parser.add_argument(
        "--profile",
        type=str,
        default=None,
        help="Connection profile name or database URL"
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable debug logging"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # init command
    subparsers.add_parser("init", help="Initialize the database")

    # import commands
    for kind, separator in (("localities", "tab"), ("departments", "';'")):
        import_parser = subparsers.add_parser(
            f"import-{kind}",
            help=f"Import {kind} from a {separator}-separated text file"
        )
        import_parser.add_argument("file", type=Path, help="Text file to import")
        import_parser.add_argument(
            "--encoding",
            type=str,
            default="utf-8",
            help="Text encoding of the file"
        )

    # stats command
    subparsers.add_parser("stats", help="Show database statistics")

    # persons command
    subparsers.add_parser("persons", help="List persons ordered by name")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )

    try:
        if args.command == "init":
            init_db(args.profile)
        elif args.command in ("import-localities", "import-departments"):
            import_file(args.command.split("-", 1)[1], args.file, args.encoding, args.profile)
        elif args.command == "stats":
            show_stats(args.profile)
        elif args.command == "persons":
            show_persons(args.profile)
        else:
            parser.print_help()
            return 1
    except (StoreError, BulkLoadError, KeyError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 2

    return 0


if __name__ == "__main__":
    sys.exit(main())
