#!/usr/bin/env python3
"""
Standalone database initialization script.
Creates the registration store schema and seeds the default classes.
Can be run from host machine (outside Docker) or inside container.
"""

import sys
import logging
from pathlib import Path

# Add parent directory to path to import app modules
sys.path.insert(0, str(Path(__file__).parent.parent))

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("init_db")


def init_schema() -> bool:
    """Create all tables"""
    logger.info("=" * 60)
    logger.info("Initializing registration store...")
    logger.info("=" * 60)

    from sqlalchemy import inspect
    from sqlalchemy.exc import SQLAlchemyError
    from domain.models.database import engine, init_database

    try:
        init_database()
        tables = inspect(engine).get_table_names()
        logger.info(f"✓ {len(tables)} tables ready: {', '.join(sorted(tables))}")
        return True
    except SQLAlchemyError as e:
        logger.error(f"✗ Failed to initialize schema: {e}")
        return False


def seed_classes() -> bool:
    """Insert the default classes when the class table is empty"""
    from adapters.record_store import RecordStore
    from app.exceptions import AppError
    from domain.models.database import SessionLocal
    from services import ClassService, DataVersionChannel

    service = ClassService(RecordStore(SessionLocal), DataVersionChannel())
    try:
        added = service.ensure_default_classes()
    except AppError as e:
        logger.error(f"✗ Failed to seed classes: {e}")
        return False

    if added:
        logger.info(f"✓ Seeded {added} default classes")
    else:
        logger.info("✓ Classes already present, nothing seeded")
    return True


def main() -> int:
    if not init_schema():
        return 1
    if not seed_classes():
        return 1
    return 0


if __name__ == "__main__":
    print("\n" + "=" * 60)
    print("MealCount Database Initialization (Standalone)")
    print("=" * 60 + "\n")

    exit_code = main()

    if exit_code == 0:
        print("\n" + "=" * 60)
        print("SUCCESS! The registration store is ready to use.")
        print("=" * 60 + "\n")
    else:
        print("\n" + "=" * 60)
        print("FAILED! Check the errors above.")
        print("=" * 60 + "\n")

    sys.exit(exit_code)
