#!/usr/bin/env python3
"""
Database schema management script.
Creates, drops or resets the tables for the configured database, or checks connectivity.
"""

import asyncio
import sys
import argparse
import logging
from pathlib import Path

# Add the app directory to the Python path
sys.path.insert(0, str(Path(__file__).parent))

from app.config import Settings, get_settings
from app.database import Database

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


class MigrationManager:
    """Manages the database schema for the configured DATABASE_URL."""

    def __init__(self, settings: Settings):
        self.settings = settings
        self.database = Database(settings.database_url)

    def _ensure_destructive_allowed(self, action: str) -> None:
        if self.settings.is_production:
            raise RuntimeError(f"Database {action} is not allowed in production")

    async def create_tables(self) -> None:
        """Create any missing tables."""
        logger.info("Creating database tables")
        await self.database.create_tables()

    async def drop_tables(self) -> None:
        """Drop all tables."""
        self._ensure_destructive_allowed("drop")
        logger.warning("Dropping database tables - all data will be lost!")
        await self.database.drop_tables()

    async def reset_database(self) -> None:
        """Reset the database by dropping and recreating all tables."""
        self._ensure_destructive_allowed("reset")
        logger.warning("Resetting database - all data will be lost!")
        await self.database.drop_tables()
        await self.database.create_tables()
        logger.info("Database reset completed")

    async def check_connection(self) -> bool:
        """Check that the database is reachable."""
        connected = await self.database.ping()
        if connected:
            logger.info("Database connection OK")
        else:
            logger.error("Database connection failed")
        return connected

    async def close(self) -> None:
        await self.database.dispose()


async def run_command(manager: MigrationManager, command: str) -> bool:
    """Run one CLI command; returns False when it did not succeed."""
    try:
        if command == "create":
            await manager.create_tables()
        elif command == "drop":
            await manager.drop_tables()
        elif command == "reset":
            await manager.reset_database()
        elif command == "check":
            return await manager.check_connection()
        return True
    finally:
        await manager.close()


def main():
    """Main CLI interface for schema management."""
    parser = argparse.ArgumentParser(description="Database schema management")
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    subparsers.add_parser("create", help="Create missing tables")

    drop_parser = subparsers.add_parser("drop", help="Drop all tables (not in production)")
    drop_parser.add_argument("--confirm", action="store_true", help="Confirm dropping all tables")

    reset_parser = subparsers.add_parser("reset", help="Drop and recreate all tables (not in production)")
    reset_parser.add_argument("--confirm", action="store_true", help="Confirm database reset")

    subparsers.add_parser("check", help="Check database connectivity")

    args = parser.parse_args()

    if not args.command:
        parser.print_help()
        return

    if args.command in ("drop", "reset") and not args.confirm:
        print(f"Database {args.command} requires --confirm flag")
        return

    manager = MigrationManager(get_settings())

    try:
        ok = asyncio.run(run_command(manager, args.command))
    except Exception as e:
        logger.error(f"Command failed: {e}")
        sys.exit(1)

    if not ok:
        sys.exit(1)


if __name__ == "__main__":
    main()
