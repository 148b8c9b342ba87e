from pathlib import Path

import pytest
from sqlalchemy.orm import sessionmaker

from compliance_checker.db.models import Base
from compliance_checker.db.session import make_engine
from compliance_checker.ingest import ingest_country_guides

DATA_DIR = Path(__file__).resolve().parent.parent / "data"
COUNTRY_GUIDES_DIR = DATA_DIR / "country_guides"
SAMPLE_CONTRACTS_DIR = DATA_DIR / "sample_contracts"


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def db_session(tmp_path):
    engine = make_engine(f"sqlite:///{tmp_path / 'guides.db'}")
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()

    yield session

    session.close()
    engine.dispose()


@pytest.fixture
def seeded_session(db_session):
    ingest_country_guides(db_session, str(COUNTRY_GUIDES_DIR))
    db_session.commit()
    return db_session
