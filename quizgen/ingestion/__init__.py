"""
Document ingestion: PDF upload validation and text extraction.
"""

from .pdf_extractor import extract_pdf_text, read_upload, validate_document, ExtractedDocument

__all__ = [
    "extract_pdf_text",
    "read_upload",
    "validate_document",
    "ExtractedDocument",
]
