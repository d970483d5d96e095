"""
Document upload preview.
Returns the text that /questions/generate/document would send to the model.
"""

from fastapi import APIRouter, Depends, File, UploadFile
from pydantic import BaseModel

from quizgen.database.models import Teacher
from quizgen.ingestion.pdf_extractor import extract_document, read_upload
from quizgen.routers.auth_teacher import get_current_teacher

router = APIRouter(prefix="/documents", tags=["documents"])


class ExtractResponse(BaseModel):
    filename: str
    page_count: int
    characters: int
    text: str


@router.post("/extract", response_model=ExtractResponse)
async def extract_text(file: UploadFile = File(...), teacher: Teacher = Depends(get_current_teacher)):
    """Validate a PDF upload (max 2MB) and return its extracted text."""
    content = await read_upload(file)
    document = extract_document(content)
    return ExtractResponse(
        filename=file.filename or "upload.pdf",
        page_count=document.page_count,
        characters=len(document.text),
        text=document.text,
    )
