#!/usr/bin/env python3
"""Create the database schema (and seed data, for SQLite) and exit.

Usage:
    python scripts/init_db.py
    python scripts/init_db.py --db-file /tmp/tasks.db

Environment variables:
    DATABASE_URL: PostgreSQL URL; selects the networked backend when set
    DB_FILE: SQLite file used otherwise (default: database/app.db)
    SEED_FILE: SQL applied to an empty SQLite database (default: database/seed.sql)
"""

import argparse
import asyncio
import logging
import os
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from tasklist.config import get_settings
from tasklist.db import close_database, get_database
from tasklist.logging_config import configure_logging

logger = logging.getLogger("tasklist.scripts.init_db")


async def initialize() -> None:
    try:
        database = await get_database()
        logger.info("Bootstrapped %s database", database.backend_name)
    finally:
        await close_database()


def main() -> int:
    """Main entrypoint for database initialization."""
    parser = argparse.ArgumentParser(
        description="Initialize the Tasklist database",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "--db-file",
        type=str,
        default=None,
        help="SQLite file to initialize (overrides DB_FILE)",
    )
    parser.add_argument(
        "--seed-file",
        type=str,
        default=None,
        help="Seed script for an empty SQLite database (overrides SEED_FILE)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    args = parser.parse_args()

    if args.db_file:
        os.environ["DB_FILE"] = args.db_file
    if args.seed_file:
        os.environ["SEED_FILE"] = args.seed_file
    get_settings.cache_clear()

    configure_logging(logging.DEBUG if args.verbose else logging.INFO)

    try:
        asyncio.run(initialize())
    except Exception:
        logger.exception("Database initialization failed")
        return 1

    logger.info("Database initialized successfully.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
