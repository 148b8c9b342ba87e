import io

import docx
import pytest

from compliance_checker.exceptions import DocumentParseError, UnsupportedDocumentType
from compliance_checker.services.document_parser import (
    DOCX_MIME,
    PDF_MIME,
    TEXT_MIME,
    parse_document,
)


def make_docx(*paragraphs):
    document = docx.Document()
    for p in paragraphs:
        document.add_paragraph(p)
    buffer = io.BytesIO()
    document.save(buffer)
    return buffer.getvalue()


def test_plain_text_is_decoded_as_utf8():
    text = "Arbeitsvertrag: Kündigungsfrist 4 Wochen"

    assert parse_document(text.encode("utf-8"), TEXT_MIME) == text


def test_invalid_utf8_bytes_are_replaced():
    assert parse_document(b"notice \xff period", TEXT_MIME) == "notice � period"


def test_docx_paragraphs_are_joined():
    data = make_docx("1. Working hours: 40 per week.", "2. Notice: 4 weeks.")

    assert parse_document(data, DOCX_MIME) == "1. Working hours: 40 per week.\n2. Notice: 4 weeks."


def test_corrupt_docx_raises_parse_error():
    with pytest.raises(DocumentParseError, match="Failed to parse DOCX"):
        parse_document(b"definitely not a zip archive", DOCX_MIME)


def test_corrupt_pdf_raises_parse_error():
    with pytest.raises(DocumentParseError, match="Failed to parse PDF"):
        parse_document(b"this is not a pdf", PDF_MIME)


def test_unsupported_type():
    with pytest.raises(UnsupportedDocumentType) as exc_info:
        parse_document(b"\x89PNG", "image/png")

    assert exc_info.value.mime_type == "image/png"
    assert isinstance(exc_info.value, DocumentParseError)
