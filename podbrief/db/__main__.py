#!/usr/bin/env python3
"""
Database maintenance CLI.

Usage:
    python -m podbrief.db init      # Create the database file and tables
    python -m podbrief.db info      # Show database location and episode counts
"""

import argparse
import sys

from podbrief.logger import setup_logging
from .database import configure_database, get_database_info, init_database
from .repository import count_episodes_by_status


def parse_arguments() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="podbrief database maintenance")
    parser.add_argument("command", choices=["init", "info"])
    parser.add_argument(
        "--database-url",
        metavar="URL",
        help="SQLite URL (default: DATABASE_URL or sqlite:///data/podbrief.db)",
    )
    parser.add_argument("-v", "--verbose", action="store_true")
    return parser.parse_args()


def main():
    args = parse_arguments()
    setup_logging(logger_name="database", log_file="database.log", verbose=args.verbose)

    try:
        configure_database(args.database_url, create_dirs=args.command == "init")
        if args.command == "init":
            init_database()
            print("✓ Database initialized")
        else:
            for key, value in get_database_info().items():
                print(f"{key}: {value}")
            print("Episodes by status:")
            for status, count in count_episodes_by_status().items():
                print(f"  {status}: {count}")
    except Exception as e:
        print(f"✗ Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
