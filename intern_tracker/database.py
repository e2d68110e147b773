# intern_tracker/database.py
import logging

from sqlalchemy import create_engine, text
from sqlalchemy.ext.declarative import declarative_base
from sqlalchemy.orm import sessionmaker

from .config import DATABASE_URL, SQL_ECHO

logger = logging.getLogger(__name__)

IS_SQLITE = DATABASE_URL.startswith("sqlite")

logger.debug("Creating database engine with URL: %s", DATABASE_URL)
engine = create_engine(
    DATABASE_URL,
    connect_args={"check_same_thread": False} if IS_SQLITE else {},
    echo=SQL_ECHO,
)
SessionLocal = sessionmaker(
    bind=engine,
    autoflush=False,
    autocommit=False,
    expire_on_commit=False  # Prevent detached instance errors
)
Base = declarative_base()


def get_db():
    db = SessionLocal()
    try:
        if IS_SQLITE:
            # Cascade order on account deletion relies on enforced foreign keys
            db.execute(text("PRAGMA foreign_keys=ON"))
        yield db
    finally:
        db.close()
