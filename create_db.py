# create_db.py - Create database tables
import sys
from pathlib import Path

# Add backend directory to Python path
backend_dir = Path(__file__).parent / "backend"
sys.path.insert(0, str(backend_dir))

from sqlalchemy import inspect

from storyboard.core.config import settings
from storyboard.core.logging import get_logger, setup_logging
from storyboard.db import Base, make_engine
from storyboard import models  # noqa: F401  registers all models


def main():
    setup_logging()
    logger = get_logger("create_db")

    engine = make_engine(settings.SQLALCHEMY_DATABASE_URI)
    logger.info("Creating database tables...")
    Base.metadata.create_all(bind=engine)

    tables = inspect(engine).get_table_names()
    logger.info(f"Created {len(tables)} tables: {', '.join(sorted(tables))}")
    engine.dispose()


if __name__ == "__main__":
    main()
