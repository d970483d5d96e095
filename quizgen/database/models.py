"""
SQLAlchemy models.

Teacher ─┬─ Question (pool)   ← Subject
         └─ Exam ── ExamQuestion ── Question
"""

from sqlalchemy import Boolean, Column, DateTime, ForeignKey, Integer, JSON, String, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from quizgen.database.database import Base


class Teacher(Base):
    __tablename__ = "teachers"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    hashed_password = Column(String(255), nullable=False)
    full_name = Column(String(255), nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)
    is_admin = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Teacher(id={self.id}, email='{self.email}')>"


class Subject(Base):
    __tablename__ = "subjects"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), unique=True, nullable=False, index=True)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Subject(id={self.id}, name='{self.name}')>"


class Question(Base):
    """
    Pool question. Generated from a topic or document, or added manually.
    correct_answer is a zero-based index into options.
    """
    __tablename__ = "questions"

    id = Column(Integer, primary_key=True, index=True)
    subject_id = Column(Integer, ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False, index=True)
    teacher_id = Column(Integer, ForeignKey("teachers.id", ondelete="SET NULL"), nullable=True, index=True)
    text = Column(Text, nullable=False)
    options = Column(JSON, nullable=False)  # ["...", "...", "...", "..."]
    correct_answer = Column(Integer, nullable=False)  # 0-3
    difficulty = Column(String(10), nullable=False, default="medium", index=True)  # easy, medium, hard
    marks = Column(Integer, nullable=False, default=1)
    source = Column(String(20), nullable=False, default="topic")  # topic, document, manual
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    subject = relationship("Subject", backref="questions")
    teacher = relationship("Teacher", foreign_keys=[teacher_id])
    # deleting a pool question also removes it from every exam
    exam_entries = relationship("ExamQuestion", back_populates="question", cascade="all, delete")

    def __repr__(self):
        return f"<Question(id={self.id}, subject_id={self.subject_id}, difficulty='{self.difficulty}')>"


class Exam(Base):
    """Exam assembled by a teacher from the subject's question pool."""
    __tablename__ = "exams"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String(255), nullable=False)
    subject_id = Column(Integer, ForeignKey("subjects.id", ondelete="CASCADE"), nullable=False, index=True)
    teacher_id = Column(Integer, ForeignKey("teachers.id", ondelete="SET NULL"), nullable=True, index=True)
    duration_minutes = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    subject = relationship("Subject", backref="exams")
    teacher = relationship("Teacher", foreign_keys=[teacher_id])
    questions = relationship(
        "ExamQuestion",
        back_populates="exam",
        cascade="all, delete-orphan",
        order_by="ExamQuestion.position",
    )

    def __repr__(self):
        return f"<Exam(id={self.id}, title='{self.title}')>"


class ExamQuestion(Base):
    """
    One selected question in an exam.
    position = selection order; marks = per-exam marks for this question.
    """
    __tablename__ = "exam_questions"
    __table_args__ = (UniqueConstraint("exam_id", "question_id", name="uq_exam_question"),)

    id = Column(Integer, primary_key=True, index=True)
    exam_id = Column(Integer, ForeignKey("exams.id", ondelete="CASCADE"), nullable=False, index=True)
    question_id = Column(Integer, ForeignKey("questions.id", ondelete="CASCADE"), nullable=False, index=True)
    position = Column(Integer, nullable=False)
    marks = Column(Integer, nullable=False, default=1)

    exam = relationship("Exam", back_populates="questions")
    question = relationship("Question", back_populates="exam_entries")

    def __repr__(self):
        return f"<ExamQuestion(exam_id={self.exam_id}, question_id={self.question_id}, position={self.position})>"
