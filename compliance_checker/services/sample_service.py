import logging
import os
from typing import List

from compliance_checker.schemas.compliance import SampleContract

logger = logging.getLogger(__name__)


def format_description(filename: str) -> str:
    stem = filename.replace(".txt", "")
    return " ".join(word[:1].upper() + word[1:] for word in stem.split("_"))


def parse_sample_filename(filename: str) -> SampleContract:
    """
    sample contracts are named HINT_COUNTRY_description.txt,
    eg. non-compliant_usa_missing-overtime.txt
    """
    parts = filename.replace(".txt", "").split("_")
    compliance = parts[0]
    country = parts[1].upper() if len(parts) > 1 and parts[1] else "UNKNOWN"

    return SampleContract(
        filename=filename,
        download_url=f'/samples/{filename}',
        compliance_hint=compliance.replace("-", "_"),
        target_country=country,
        description=format_description(filename),
    )


def list_sample_contracts(directory: str) -> List[SampleContract]:
    if not os.path.isdir(directory):
        logger.error(f'samples directory not found: {directory}')
        return []

    files = sorted(f for f in os.listdir(directory) if f.endswith(".txt"))  # stable order across runs

    return [parse_sample_filename(f) for f in files]
