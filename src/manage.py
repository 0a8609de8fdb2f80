"""BB Brewery database management CLI.

Usage:
    python src/manage.py setup-db   # Create all tables
    python src/manage.py drop-db    # Drop all tables
"""

import argparse
import sys


def setup_database():
    from brewery.domain import brewery
    from brewery.utils.db import setup_db

    print("Initializing brewery domain...")
    brewery.init()
    print("Creating brewery database schema...")
    setup_db(brewery)
    print("Done.")


def drop_database():
    from brewery.domain import brewery
    from brewery.utils.db import drop_db

    print("Initializing brewery domain...")
    brewery.init()
    print("Dropping brewery database schema...")
    drop_db(brewery)
    print("Done.")


COMMANDS = {
    "setup-db": setup_database,
    "drop-db": drop_database,
}


def main(argv=None):
    parser = argparse.ArgumentParser(description="BB Brewery database management")
    subparsers = parser.add_subparsers(dest="command", required=True)
    subparsers.add_parser("setup-db", help="Create all database tables")
    subparsers.add_parser("drop-db", help="Drop all database tables")

    args = parser.parse_args(argv)

    handler = COMMANDS.get(args.command)
    if handler is None:
        parser.print_help()
        sys.exit(1)
    handler()


if __name__ == "__main__":
    main()
