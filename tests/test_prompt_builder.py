import json

from compliance_checker.schemas.compliance import RegulationProfile
from compliance_checker.services.prompt_builder import (
    SYSTEM_PROMPT,
    build_prompts,
    build_user_prompt,
)

GERMANY = RegulationProfile(name="Germany", regulations={"terminationNotice": "30 days"})
DOCUMENT = "Employee may be dismissed without notice."


def test_user_prompt_contains_jurisdiction_regulations_and_document():
    _, user_prompt = build_prompts(DOCUMENT, GERMANY)

    assert "Germany" in user_prompt
    assert "terminationNotice" in user_prompt
    assert "30 days" in user_prompt
    assert DOCUMENT in user_prompt


def test_regulations_are_serialized_as_indented_json():
    profile = RegulationProfile(
        name="United Kingdom",
        regulations={"annualLeave": "5.6 weeks", "pension": {"autoEnrolment": True}},
    )

    user_prompt = build_user_prompt(DOCUMENT, profile)

    assert json.dumps(profile.regulations, indent=2) in user_prompt


def test_user_prompt_has_five_numbered_instructions():
    user_prompt = build_user_prompt(DOCUMENT, GERMANY)
    instructions = user_prompt.split("=== INSTRUCTIONS ===")[1]

    for n in range(1, 6):
        assert f"\n{n}. " in instructions
    assert "\n6. " not in instructions


def test_system_prompt_is_stable_and_input_independent():
    first, _ = build_prompts(DOCUMENT, GERMANY)
    second, _ = build_prompts("another contract", RegulationProfile(name="USA", regulations={}))

    assert first == second == SYSTEM_PROMPT


def test_system_prompt_defines_vocabulary_and_schema():
    for status in ("COMPLIANT", "NON_COMPLIANT", "PARTIALLY_COMPLIANT", "NOT_ADDRESSED"):
        assert f"- {status}:" in SYSTEM_PROMPT

    for field in (
        "overallScore",
        "overallStatus",
        "summary",
        "findings",
        "category",
        "requirement",
        "contractClause",
        "analysis",
        "severity",
        "recommendation",
        "criticalIssues",
        "positiveAspects",
    ):
        assert f'"{field}"' in SYSTEM_PROMPT


def test_document_is_not_truncated():
    long_document = "Clause. " * 50000

    assert long_document in build_user_prompt(long_document, GERMANY)


def test_empty_document_passes_through():
    user_prompt = build_user_prompt("", GERMANY)

    assert "=== EMPLOYMENT CONTRACT TO ANALYZE ===\n\n\n=== INSTRUCTIONS ===" in user_prompt
