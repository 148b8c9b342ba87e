from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

#wire format (LLM reply & HTTP JSON) is camelCase, python side is snake_case
class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


#Input contract, sourced from the country guide store

class RegulationProfile(CamelModel):
    name: str
    description: str = ""
    key_features: List[str] = []
    regulations: Dict[str, Any]

    model_config = ConfigDict(frozen=True)


#LLM output contract - replies that don't match are rejected, never patched up

class Finding(CamelModel):
    category: str
    requirement: str
    status: Literal["COMPLIANT", "NON_COMPLIANT", "PARTIALLY_COMPLIANT", "NOT_ADDRESSED"]
    contract_clause: str
    analysis: str
    severity: Literal["HIGH", "MEDIUM", "LOW"]
    recommendation: str = ""


class ComplianceReport(CamelModel):
    overall_score: int = Field(ge=0, le=100)
    overall_status: Literal["COMPLIANT", "PARTIALLY_COMPLIANT", "NON_COMPLIANT"]
    summary: str
    findings: List[Finding]
    critical_issues: List[str] = []
    positive_aspects: List[str] = []


#HTTP contracts

class AnalysisResponse(CamelModel):
    success: bool = True
    file_name: str
    country_code: str
    country_name: str
    analysis: ComplianceReport


class CountrySummary(CamelModel):
    code: str
    name: str
    description: str = ""
    key_features: List[str] = []


class CountryList(CamelModel):
    countries: List[CountrySummary]


class SampleContract(CamelModel):
    filename: str
    download_url: str
    compliance_hint: str
    target_country: str
    description: str


class SampleList(CamelModel):
    samples: List[SampleContract]


class ErrorResponse(BaseModel):
    error: str
    details: Optional[str] = None
