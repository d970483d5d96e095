"""
CRUD operations for subjects, the question pool and exams
"""

from typing import List, Optional

from sqlalchemy.orm import Session, joinedload

from quizgen.database import models, schemas


# ==========================================
# SUBJECT CRUD
# ==========================================

def create_subject(db: Session, subject: schemas.SubjectCreate) -> models.Subject:
    db_subject = models.Subject(name=subject.name, description=subject.description)
    db.add(db_subject)
    db.commit()
    db.refresh(db_subject)
    return db_subject


def get_subject(db: Session, subject_id: int) -> Optional[models.Subject]:
    return db.query(models.Subject).filter(models.Subject.id == subject_id).first()


def get_subject_by_name(db: Session, name: str) -> Optional[models.Subject]:
    return db.query(models.Subject).filter(models.Subject.name == name).first()


def get_subjects(db: Session, skip: int = 0, limit: int = 100) -> List[models.Subject]:
    return db.query(models.Subject).order_by(models.Subject.name).offset(skip).limit(limit).all()


# ==========================================
# QUESTION POOL CRUD
# ==========================================

def get_question(db: Session, question_id: int) -> Optional[models.Question]:
    return db.query(models.Question).filter(models.Question.id == question_id).first()


def list_questions(
    db: Session,
    subject_id: Optional[int] = None,
    difficulty: Optional[str] = None,
    search: Optional[str] = None,
    skip: int = 0,
    limit: int = 100,
) -> List[models.Question]:
    """Pool questions, oldest first, with optional filters"""
    q = db.query(models.Question)
    if subject_id:
        q = q.filter(models.Question.subject_id == subject_id)
    if difficulty:
        q = q.filter(models.Question.difficulty == difficulty)
    if search:
        q = q.filter(models.Question.text.ilike(f"%{search}%"))
    return q.order_by(models.Question.id).offset(skip).limit(limit).all()


def subject_pool(db: Session, subject_id: int) -> List[models.Question]:
    """Every question of a subject, in pool (id) order"""
    return (
        db.query(models.Question)
        .filter(models.Question.subject_id == subject_id)
        .order_by(models.Question.id)
        .all()
    )


def delete_question(db: Session, question_id: int) -> bool:
    db_question = get_question(db, question_id)
    if not db_question:
        return False
    db.delete(db_question)
    db.commit()
    return True


# ==========================================
# EXAM CRUD
# ==========================================

def create_exam(db: Session, exam: schemas.ExamCreate, teacher_id: int) -> models.Exam:
    db_exam = models.Exam(
        title=exam.title,
        subject_id=exam.subject_id,
        teacher_id=teacher_id,
        duration_minutes=exam.duration_minutes,
    )
    db.add(db_exam)
    db.commit()
    db.refresh(db_exam)
    return db_exam


def get_exam(db: Session, exam_id: int, teacher_id: Optional[int] = None) -> Optional[models.Exam]:
    """Exam with its selected questions loaded; scoped to the owner when teacher_id is given"""
    q = db.query(models.Exam).options(
        joinedload(models.Exam.questions).joinedload(models.ExamQuestion.question)
    ).filter(models.Exam.id == exam_id)
    if teacher_id is not None:
        q = q.filter(models.Exam.teacher_id == teacher_id)
    return q.first()


def list_exams(db: Session, teacher_id: int) -> List[models.Exam]:
    return (
        db.query(models.Exam)
        .options(joinedload(models.Exam.questions))
        .filter(models.Exam.teacher_id == teacher_id)
        .order_by(models.Exam.created_at.desc(), models.Exam.id.desc())
        .all()
    )
