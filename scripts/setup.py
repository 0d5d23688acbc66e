#!/usr/bin/env python3
"""Setup script for the TravelPod API: run migrations and load sample data."""

import asyncio
import logging
from pathlib import Path

from alembic import command
from alembic.config import Config

from travelpod.core.database import async_session_factory, close_db
from travelpod.services.admin_service import AdminService
from travelpod.services.seed_service import SeedService

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

server_dir = Path(__file__).parent.parent / "server"


def setup_database():
    """Bring the database schema up to the latest revision."""
    logger.info("Setting up database...")

    alembic_cfg = Config(str(server_dir / "db" / "alembic.ini"))
    alembic_cfg.set_main_option("script_location", str(server_dir / "db" / "alembic"))

    logger.info("Running database migrations...")
    command.upgrade(alembic_cfg, "head")
    logger.info("Database migrations completed")


async def create_sample_data():
    """Load sample reference data, travels and the bootstrap admin."""
    logger.info("Creating sample data...")

    async with async_session_factory() as db:
        created = await SeedService(db).seed()
        logger.info(f"Seeded reference data: {created}")

        created = await SeedService(db).add_travel_records()
        logger.info(f"Added travel records: {created}")

        admin = await AdminService(db).ensure_bootstrap_admin()
        logger.info(f"Bootstrap admin ready for user {admin.user_id}")

    await close_db()
    logger.info("Sample data created successfully!")


def main():
    """Main setup function."""
    logger.info("Starting TravelPod API setup...")

    setup_database()

    asyncio.run(create_sample_data())

    logger.info("Setup completed successfully!")
    logger.info("You can now start the API server with: uvicorn travelpod.main:app --reload")


if __name__ == "__main__":
    main()
