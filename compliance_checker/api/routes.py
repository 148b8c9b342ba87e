import logging
import math
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, HTTPException, Request, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from compliance_checker.db.session import get_db
from compliance_checker.exceptions import (
    DocumentParseError,
    MalformedResponse,
    RateLimitExhausted,
    UnsupportedDocumentType,
    UpstreamError,
)
from compliance_checker.schemas.compliance import (
    AnalysisResponse,
    CountryList,
    RegulationProfile,
    SampleList,
)
from compliance_checker.services import country_service
from compliance_checker.services.document_parser import ALLOWED_MIME_TYPES, parse_document
from compliance_checker.services.sample_service import list_sample_contracts

logger = logging.getLogger("API")

router = APIRouter()


def _error(status_code: int, error: str, details: Optional[str] = None, headers: Optional[dict] = None):
    return JSONResponse(
        status_code=status_code,
        content={"error": error, "details": details},
        headers=headers,
    )


@router.post("/analyze", response_model=AnalysisResponse)
async def analyze_document(
    request: Request,
    document: Optional[UploadFile] = File(None),
    country_code: Optional[str] = Form(None, alias="countryCode"),
    db: Session = Depends(get_db),
):
    settings = request.app.state.settings
    analyzer = request.app.state.analyzer  # built once in lifespan, shared by all requests

    if document is None:
        return _error(400, "No document uploaded")

    if not country_code:
        return _error(400, "Country code is required")

    mime_type = (document.content_type or "").split(";")[0].strip()
    if mime_type not in ALLOWED_MIME_TYPES:
        return _error(415, "Invalid file type. Allowed: PDF, DOCX, TXT", mime_type)

    data = await document.read(settings.max_upload_bytes + 1)  # never buffer more than the limit
    if len(data) > settings.max_upload_bytes:
        return _error(413, "File too large", f'limit is {settings.max_upload_bytes} bytes')

    guide = await run_in_threadpool(country_service.get_country_guide, db, country_code)
    if guide is None:
        return _error(404, f'Country guide not found for: {country_code}')

    if analyzer is None:
        return _error(503, "Compliance analyzer is not configured", "Set GROQ_API_KEY in your .env configuration.")

    try:
        logger.info(f'Parsing document: {document.filename}')
        document_text = await run_in_threadpool(parse_document, data, mime_type)

        logger.info(f'Analyzing compliance against {country_code.upper()} regulations...')
        report = await analyzer.analyze(document_text, guide)

    except UnsupportedDocumentType as e:
        return _error(415, "Invalid file type. Allowed: PDF, DOCX, TXT", str(e))

    except DocumentParseError as e:
        logger.error(f'Document parsing failed: {e}')
        return _error(422, "Failed to parse document", str(e))

    except RateLimitExhausted as e:
        headers = None
        if e.retry_after_ms:
            headers = {"Retry-After": str(math.ceil(e.retry_after_ms / 1000))}
        return _error(429, "LLM provider is rate limiting requests, please retry later", str(e), headers)

    except UpstreamError as e:
        if e.is_auth_error:
            return _error(502, "Failed to analyze document", "Invalid LLM API key. Please check your .env configuration.")
        return _error(502, "Failed to analyze document", f'LLM analysis failed: {e}')

    except MalformedResponse as e:
        logger.error(f'Malformed LLM payload: {e.raw_payload!r}')
        return _error(502, "Failed to analyze document", str(e))

    return AnalysisResponse(
        file_name=document.filename or "document",
        country_code=country_code.upper(),
        country_name=guide.name,
        analysis=report,
    )


@router.get("/countries", response_model=CountryList)
def get_countries(db: Session = Depends(get_db)):
    try:
        return CountryList(countries=country_service.list_countries(db))
    except Exception as e:
        logger.error(f"Failed to list countries: {e}")
        raise HTTPException(status_code=500, detail="Failed to fetch countries")


@router.get("/country/{code}", response_model=RegulationProfile)
def get_country(code: str, db: Session = Depends(get_db)):
    guide = country_service.get_country_guide(db, code)
    if guide is None:
        raise HTTPException(status_code=404, detail="Country not found")
    return guide


@router.get("/samples", response_model=SampleList)
def get_samples(request: Request):
    return SampleList(samples=list_sample_contracts(request.app.state.settings.sample_contracts_dir))
