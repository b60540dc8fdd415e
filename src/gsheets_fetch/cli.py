"""CLI for gsheets-fetch.

Usage:
    gsheets-fetch status                              # Show credential status
    gsheets-fetch import-key <path>                   # Import service account key
    gsheets-fetch list                                # List visible spreadsheets
    gsheets-fetch worksheets <spreadsheet>            # List worksheets of a spreadsheet
    gsheets-fetch fetch <spreadsheet> <worksheet>     # Print a worksheet as JSON
    gsheets-fetch fetch <spreadsheet> <worksheet> --format csv
"""

from __future__ import annotations

import argparse
import csv
import json
import logging
import shutil
import sys
from pathlib import Path


def cmd_status() -> int:
    """Show status of the configured credentials."""
    from gsheets_fetch.config import get_credential_status

    status = get_credential_status()

    print("=" * 60)
    print("GSHEETS-FETCH CREDENTIAL STATUS")
    print("=" * 60)
    print()
    print(f"Repository: {status['repo_root']}")
    print()
    print(f"  .env:              {'[x]' if status['env_file'] else '[ ]'}")
    print(
        f"  service account:   {'[x]' if status['service_account']['exists'] else '[ ]'} "
        f"{status['service_account']['path']}"
    )
    print(f"  application name:  {status['application_name']}")
    print(f"  scope:             {status['scope']}")
    print()
    return 0


def import_key(source_path: str) -> int:
    """Import service account key from a file."""
    from gsheets_fetch.config import service_account_path

    source = Path(source_path).expanduser()

    if not source.exists():
        print(f"Error: File not found: {source}")
        return 1

    try:
        with open(source) as f:
            data = json.load(f)

        if not isinstance(data, dict):
            print("Error: Invalid service account key format")
            return 1

        if data.get("type") != "service_account":
            print("Error: Invalid service account key format")
            print(f"Expected type 'service_account', got '{data.get('type')}'")
            return 1

        email = data.get("client_email", "unknown")
        project = data.get("project_id", "unknown")

    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        print(f"Error: Invalid JSON: {e}")
        return 1
    except OSError as e:
        print(f"Error: Cannot read {source}: {e}")
        return 1

    destination = service_account_path()
    destination.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(source, destination)

    print("Imported service account key")
    print(f"  From: {source}")
    print(f"  To:   {destination}")
    print(f"  Email: {email}")
    print(f"  Project: {project}")
    print()
    print("Remember to share your spreadsheets with the service account email!")
    return 0


def _connect(key_path: str | None):
    """Create a session and fetcher from configuration."""
    from gsheets_fetch.config import FetcherConfig
    from gsheets_fetch.google import GoogleServiceAccount
    from gsheets_fetch.sheets import WorksheetFetcher

    config = FetcherConfig.from_env()
    auth = GoogleServiceAccount(
        key_path=key_path,
        scope=config.scope,
        application_name=config.application_name,
    )
    return auth.session, WorksheetFetcher(config=config)


def list_spreadsheets(key_path: str | None) -> int:
    """Print the titles of all visible spreadsheets."""
    from gsheets_fetch.exceptions import GSheetsFetchError

    try:
        session, fetcher = _connect(key_path)
        spreadsheets = fetcher.list_spreadsheets(session)
    except GSheetsFetchError as e:
        print(f"Error: {e}")
        return 1

    if not spreadsheets:
        print(f"No spreadsheets shared with {session.email}")
        return 0

    for spreadsheet in sorted(spreadsheets, key=lambda s: s.title):
        print(f"{spreadsheet.title}\t{spreadsheet.id}")
    return 0


def list_worksheets(key_path: str | None, spreadsheet_title: str) -> int:
    """Print the titles of a spreadsheet's worksheets."""
    from gsheets_fetch.exceptions import GSheetsFetchError

    try:
        session, fetcher = _connect(key_path)
        spreadsheet = fetcher.find_spreadsheet(session, spreadsheet_title)
        worksheets = fetcher.list_worksheets(session, spreadsheet)
    except GSheetsFetchError as e:
        print(f"Error: {e}")
        return 1

    for worksheet in worksheets:
        print(worksheet.title)
    return 0


def fetch(key_path: str | None, spreadsheet_title: str, worksheet_title: str, fmt: str) -> int:
    """Print a worksheet's values to stdout."""
    from gsheets_fetch.exceptions import GSheetsFetchError

    try:
        session, fetcher = _connect(key_path)
        grid = fetcher.fetch_worksheet(session, spreadsheet_title, worksheet_title)
    except GSheetsFetchError as e:
        print(f"Error: {e}")
        return 1

    if fmt == "csv":
        writer = csv.writer(sys.stdout)
        writer.writerows(grid)
    else:
        print(json.dumps(grid, indent=2, ensure_ascii=False))
    return 0


def main(argv: list[str] | None = None) -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="gsheets-fetch",
        description="Fetch Google Sheets worksheets by title using a service account",
    )
    parser.add_argument(
        "--key",
        type=str,
        default=None,
        help="Path to service account JSON key (default: configured location)",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Log feed requests to stderr",
    )
    subparsers = parser.add_subparsers(dest="command", help="Command")

    # status command
    subparsers.add_parser("status", help="Show credential status")

    # import-key command
    import_key_parser = subparsers.add_parser("import-key", help="Import service account key")
    import_key_parser.add_argument("path", help="Path to service account JSON key file")

    # list command
    subparsers.add_parser("list", help="List visible spreadsheets")

    # worksheets command
    worksheets_parser = subparsers.add_parser("worksheets", help="List worksheets")
    worksheets_parser.add_argument("spreadsheet", help="Spreadsheet title")

    # fetch command
    fetch_parser = subparsers.add_parser("fetch", help="Print a worksheet")
    fetch_parser.add_argument("spreadsheet", help="Spreadsheet title")
    fetch_parser.add_argument("worksheet", help="Worksheet title")
    fetch_parser.add_argument(
        "--format",
        choices=["json", "csv"],
        default="json",
        help="Output format (default: json)",
    )

    args = parser.parse_args(argv if argv is not None else sys.argv[1:])

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if args.command is None:
        parser.print_help()
        return 0

    if args.command == "status":
        return cmd_status()

    if args.command == "import-key":
        return import_key(args.path)

    if args.command == "list":
        return list_spreadsheets(args.key)

    if args.command == "worksheets":
        return list_worksheets(args.key, args.spreadsheet)

    if args.command == "fetch":
        return fetch(args.key, args.spreadsheet, args.worksheet, args.format)

    return 0


if __name__ == "__main__":
    sys.exit(main())
