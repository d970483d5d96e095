"""
PDF upload validation and plain-text extraction.

One string for the whole document: each page's text is whitespace-collapsed,
pages are joined with newlines in page order. No headings, no tables.
"""

import io
import logging
import re
from dataclasses import dataclass
from typing import Optional

from fastapi import UploadFile
from pypdf import PdfReader

from quizgen import config
from quizgen.errors import ExtractionError, FileValidationError

# pypdf is chatty about malformed xref tables
logging.getLogger("pypdf").setLevel(logging.ERROR)

log = logging.getLogger(__name__)


@dataclass
class ExtractedDocument:
    text: str
    page_count: int


def validate_document(content_type: Optional[str], size: int, max_bytes: Optional[int] = None) -> None:
    """Reject anything that is not a PDF or is larger than the upload cap (2 MiB)."""
    limit = config.MAX_DOCUMENT_BYTES if max_bytes is None else max_bytes
    if (content_type or "").split(";")[0].strip().lower() != config.PDF_MIME_TYPE:
        raise FileValidationError("Please upload a PDF file", status_code=415)
    if size > limit:
        raise FileValidationError(
            f"File size exceeds {limit // (1024 * 1024)}MB limit", status_code=413
        )


async def read_upload(file: UploadFile, max_bytes: Optional[int] = None) -> bytes:
    """Read a PDF upload, never buffering more than one byte past the cap."""
    limit = config.MAX_DOCUMENT_BYTES if max_bytes is None else max_bytes
    if file.size is not None:
        validate_document(file.content_type, file.size, limit)
    content = await file.read(limit + 1)
    validate_document(file.content_type, len(content), limit)
    return content


def _normalize_page(text: str) -> str:
    return re.sub(r"\s+", " ", text or "").strip()


def extract_document(pdf_bytes: bytes) -> ExtractedDocument:
    """Extract page-ordered text from a PDF byte stream using pypdf."""
    try:
        reader = PdfReader(io.BytesIO(pdf_bytes))
        pages = [_normalize_page(page.extract_text()) for page in reader.pages]
    except Exception as e:
        log.warning("PDF extraction failed: %s", e)
        raise ExtractionError(f"Failed to extract text from PDF: {e}") from e

    text = "\n".join(p for p in pages if p)
    if not text:
        raise ExtractionError("No extractable text found in PDF")

    log.info("Extracted %s characters from %s page(s)", len(text), len(pages))
    return ExtractedDocument(text=text, page_count=len(pages))


def extract_pdf_text(pdf_bytes: bytes) -> str:
    return extract_document(pdf_bytes).text
