"""
Create all tables directly from the ORM metadata.

Used for local development against SQLite; deployed databases are managed by
Alembic (see app/db/migrate.py).
"""
import logging

from app.db.session import engine
from app.db.base import Base
import app.db.models  # noqa: F401  (registers every model on Base.metadata)

logger = logging.getLogger(__name__)


def init_db() -> None:
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables created: %s", ", ".join(sorted(Base.metadata.tables)))


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_db()
