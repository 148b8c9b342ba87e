import json

import pytest
from pydantic import ValidationError

from compliance_checker.ingest import ingest_country_guides
from compliance_checker.services.country_service import get_country_guide, list_countries

from conftest import COUNTRY_GUIDES_DIR


def test_ingest_stages_every_guide(db_session):
    assert ingest_country_guides(db_session, str(COUNTRY_GUIDES_DIR)) == 3


def test_ingest_is_idempotent(seeded_session):
    assert ingest_country_guides(seeded_session, str(COUNTRY_GUIDES_DIR)) == 0


def test_ingest_missing_directory(db_session, tmp_path):
    assert ingest_country_guides(db_session, str(tmp_path / "missing")) == 0


def test_ingest_rejects_invalid_guide(db_session, tmp_path):
    (tmp_path / "atlantis.json").write_text(json.dumps({"name": "Atlantis"}), encoding="utf-8")

    with pytest.raises(ValidationError):
        ingest_country_guides(db_session, str(tmp_path))


def test_lookup_is_case_insensitive(seeded_session):
    profile = get_country_guide(seeded_session, "GERMANY")

    assert profile.name == "Germany"
    assert "terminationNotice" in profile.regulations
    assert profile.key_features


def test_unknown_country_returns_none(seeded_session):
    assert get_country_guide(seeded_session, "atlantis") is None


def test_list_countries(seeded_session):
    countries = list_countries(seeded_session)

    assert [c.code for c in countries] == ["GERMANY", "UK", "USA"]
    assert countries[2].name == "United States"
