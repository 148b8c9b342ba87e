import logging
import time
from typing import Optional

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from compliance_checker.config import Settings
from compliance_checker.db.models import Base

logger = logging.getLogger(__name__)

#Initialized at global scope so unit tests can bind their own engine without a new connection here.
engine = None
SessionLocal = sessionmaker(autocommit=False, autoflush=False)


def get_db_url() -> str:
    url = Settings.from_env().database_url
    if not url:
        raise ValueError('DATABASE_URL is not set in .env')
    return url


def make_engine(db_url: str):
    connect_args = {}
    if db_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False  # FastAPI runs sync deps in a threadpool
    return create_engine(db_url, pool_pre_ping=True, connect_args=connect_args)


def init_db_connection(db_url: Optional[str] = None, retries: int = 5):
    """
    initializes the db connection, opens the session pool & creates missing tables
    """
    global engine

    if engine is not None:
        return  # already initialized

    db_url = db_url or get_db_url()

    while retries > 0:
        try:
            candidate = make_engine(db_url)
            #quick connection test
            connection = candidate.connect()
            connection.close()

            engine = candidate
            logger.info("Successfully connected to the database.")

            SessionLocal.configure(bind=engine)
            Base.metadata.create_all(bind=engine)

            logger.info("Database Schema Synchronized.")
            return

        except Exception as e:
            logger.warning(f'Waiting for database....(retries left: {retries}). Error: {e}')
            time.sleep(2)
            retries -= 1

    raise ConnectionError("Failed to connect to the database after multiple retries.")


def get_db():
    """
    request scoped session for FastAPI
    """
    if engine is None:
        init_db_connection()
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
