"""Stockroom database management CLI.

Creates and drops the relational schema for the stockroom domain using the
providers selected by PROTEAN_ENV.

Usage:
    PROTEAN_ENV=production python src/manage.py setup-db   # Create all tables
    PROTEAN_ENV=production python src/manage.py drop-db    # Drop all tables
"""

import argparse
import sys


def setup_database():
    from stockroom.domain import stockroom
    from stockroom.utils.db import setup_db

    print("Initializing stockroom domain...")
    stockroom.init()
    print("Creating stockroom database schema...")
    setup_db(stockroom)
    print("  stockroom schema ready.")


def drop_database():
    from stockroom.domain import stockroom
    from stockroom.utils.db import drop_db

    print("Initializing stockroom domain...")
    stockroom.init()
    print("Dropping stockroom database schema...")
    drop_db(stockroom)
    print("  stockroom schema dropped.")


def main():
    parser = argparse.ArgumentParser(description="Stockroom database management")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    args = parser.parse_args()

    if args.command == "setup-db":
        setup_database()
    elif args.command == "drop-db":
        drop_database()
    else:
        parser.print_help()
        sys.exit(1)


if __name__ == "__main__":
    main()
