"""Storefront database management CLI.

Creates and drops the database schema for the storefront domain using
the setup_db/drop_db utilities.

Usage:
    PROTEAN_ENV=production python src/manage.py setup-db   # Create all tables
    PROTEAN_ENV=production python src/manage.py drop-db    # Drop all tables
"""

import argparse
import sys

from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def _domain():
    from storefront.domain import load_elements, storefront

    load_elements()
    storefront.init()
    return storefront


def setup_database():
    from storefront.utils.db import setup_db

    domain = _domain()
    logger.info("creating_schema", domain=domain.name)
    setup_db(domain)


def drop_database():
    from storefront.utils.db import drop_db

    domain = _domain()
    logger.info("dropping_schema", domain=domain.name)
    drop_db(domain)


def main():
    parser = argparse.ArgumentParser(description="Storefront database management")
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
