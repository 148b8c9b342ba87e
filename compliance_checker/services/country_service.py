import logging
from typing import List, Optional

from sqlalchemy.orm import Session

from compliance_checker.db.models import CountryGuide
from compliance_checker.schemas.compliance import CountrySummary, RegulationProfile

logger = logging.getLogger(__name__)


def _to_profile(guide: CountryGuide) -> RegulationProfile:
    return RegulationProfile(
        name=guide.name,
        description=guide.description or "",
        key_features=guide.key_features or [],
        regulations=guide.regulations or {},
    )


def get_country_guide(session: Session, code: str) -> Optional[RegulationProfile]:
    """
    returns the regulation profile for a country code (case insensitive) or None
    """
    guide = session.get(CountryGuide, code.strip().lower())

    if guide is None:
        logger.warning(f'Country guide not found for: {code}')
        return None

    return _to_profile(guide)


def list_countries(session: Session) -> List[CountrySummary]:
    guides = session.query(CountryGuide).order_by(CountryGuide.code).all()

    return [
        CountrySummary(
            code=g.code.upper(),
            name=g.name,
            description=g.description or "",
            key_features=g.key_features or [],
        )
        for g in guides
    ]
