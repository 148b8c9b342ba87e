import json
import logging
import os
import sys

from pydantic import ValidationError
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from compliance_checker.config import Settings
from compliance_checker.db import session as db_session
from compliance_checker.db.models import CountryGuide
from compliance_checker.schemas.compliance import RegulationProfile

logger = logging.getLogger(__name__)


def ingest_country_guides(session: Session, directory: str) -> int:
    """
    reads country guide files (<code>.json) & stages them for db commit.
    returns head count of successfully staged valid files
    """
    if not os.path.exists(directory):
        logger.warning(f'directory not found: {directory}')
        return 0

    files_processed = 0

    files = sorted(f for f in os.listdir(directory) if f.endswith('.json'))  # same order on re-runs

    for filename in files:
        code = filename.replace(".json", "").lower()
        filepath = os.path.join(directory, filename)

        try:
            with open(filepath, "r", encoding="utf-8") as f:
                profile = RegulationProfile.model_validate(json.load(f))
        except (json.JSONDecodeError, ValidationError) as e:
            logger.error(f'invalid country guide {filename}: {e}')
            raise

        #check then insert (idempotency)
        existing = session.get(CountryGuide, code)

        if existing:
            logger.info(f'{code} already exists, skipping...')
            continue

        session.add(
            CountryGuide(
                code=code,
                name=profile.name,
                description=profile.description,
                key_features=list(profile.key_features),
                regulations=dict(profile.regulations),
            )
        )
        logger.info(f'Staged country guide: {code} ({profile.name})')
        files_processed += 1

    return files_processed


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - [%(levelname)s] - %(message)s")
    settings = Settings.from_env()

    try:
        db_session.init_db_connection(settings.database_url)
    except Exception as e:
        logger.critical(f'failed to connect to db: {e}')
        sys.exit(1)

    session = db_session.SessionLocal()

    try:
        logger.info("Starting country guide ingestion..")
        count = ingest_country_guides(session, settings.country_guides_dir)

        #single commit at the end, a bad file leaves the table untouched
        if count > 0:
            session.commit()
            logger.info(f'Commit Success: Written {count} country guides to DB.')
        else:
            logger.info("No new data found, DB is up to date.")

    except IntegrityError as ie:
        session.rollback()
        logger.critical(f'Data integrity error - constraint violation: {ie}')
        sys.exit(1)

    except Exception as e:
        session.rollback()
        logger.critical(f'Pipeline Failure: {e}')
        sys.exit(1)

    finally:
        session.close()


if __name__ == "__main__":
    main()
