import io
import logging

import docx
import pdfplumber

from compliance_checker.exceptions import DocumentParseError, UnsupportedDocumentType

logger = logging.getLogger(__name__)

PDF_MIME = "application/pdf"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"
TEXT_MIME = "text/plain"

ALLOWED_MIME_TYPES = (PDF_MIME, DOCX_MIME, TEXT_MIME)


def parse_document(data: bytes, mime_type: str) -> str:
    """
    extracts plain text from an uploaded contract (PDF, DOCX or TXT).
    """
    if mime_type == PDF_MIME:
        return parse_pdf(data)
    if mime_type == DOCX_MIME:
        return parse_docx(data)
    if mime_type == TEXT_MIME:
        return data.decode("utf-8", errors="replace")

    raise UnsupportedDocumentType(mime_type)


def parse_pdf(data: bytes) -> str:
    try:
        with pdfplumber.open(io.BytesIO(data)) as pdf:
            pages = [page.extract_text() or "" for page in pdf.pages]
    except Exception as e:
        logger.error(f'PDF extraction failed: {e}')
        raise DocumentParseError(f'Failed to parse PDF: {e}') from e

    logger.info(f'Extracted {len(pages)} PDF pages')
    return "\n".join(pages)


def parse_docx(data: bytes) -> str:
    try:
        document = docx.Document(io.BytesIO(data))
    except Exception as e:
        logger.error(f'DOCX extraction failed: {e}')
        raise DocumentParseError(f'Failed to parse DOCX: {e}') from e

    return "\n".join(p.text for p in document.paragraphs)
