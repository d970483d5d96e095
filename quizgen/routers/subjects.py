"""
Subject API endpoints
Questions and exams always belong to a subject
"""

from typing import List

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from quizgen.database import crud, schemas
from quizgen.database.database import get_db
from quizgen.database.models import Teacher
from quizgen.routers.auth_teacher import get_current_teacher

router = APIRouter(prefix="/subjects", tags=["subjects"])


@router.post("/", response_model=schemas.SubjectResponse, status_code=status.HTTP_201_CREATED)
def create_subject(
    subject: schemas.SubjectCreate,
    teacher: Teacher = Depends(get_current_teacher),
    db: Session = Depends(get_db),
):
    """
    Create a new subject
    Subject names must be unique
    """
    if crud.get_subject_by_name(db, subject.name):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Subject with name '{subject.name}' already exists"
        )
    return crud.create_subject(db, subject)


@router.get("/", response_model=List[schemas.SubjectResponse])
def list_subjects(skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    return crud.get_subjects(db, skip=skip, limit=limit)


@router.get("/{subject_id}", response_model=schemas.SubjectResponse)
def get_subject(subject_id: int, db: Session = Depends(get_db)):
    subject = crud.get_subject(db, subject_id)
    if not subject:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Subject with ID {subject_id} not found"
        )
    return subject
