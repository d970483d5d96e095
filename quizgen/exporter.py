"""
Exam Export Service - PDF Generation

Exports an assembled exam in printable form:
- Header (title, subject, duration, total marks)
- Instructions to candidates
- Numbered MCQs with lettered options, in selection order
- Separate answer key with the correct option marked
"""

import logging
from io import BytesIO
from typing import List, Optional, Sequence

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_JUSTIFY, TA_LEFT
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import Flowable, KeepTogether, Paragraph, SimpleDocTemplate, Spacer

from quizgen.generation.answer_key import option_letter
from quizgen.selection import SelectedQuestion

log = logging.getLogger(__name__)


# ─── Configuration ──────────────────────────────────────────────────────────────

DEFAULT_INSTRUCTIONS = [
    "All questions are compulsory.",
    "Each question has exactly one correct option.",
    "Figures to the right indicate full marks.",
]


def _escape_html(text: str) -> str:
    """Escape HTML special characters so ReportLab Paragraph treats them as literal text."""
    if not text:
        return ""
    return text.replace("&", "&amp;").replace("<", "&lt;").replace(">", "&gt;")


# ─── Custom Flowables ───────────────────────────────────────────────────────────

class HorizontalLine(Flowable):
    """Draw a horizontal line across the page."""

    def __init__(self, width, thickness=1, color=colors.black):
        Flowable.__init__(self)
        self.width = width
        self.thickness = thickness
        self.color = color

    def draw(self):
        self.canv.setStrokeColor(self.color)
        self.canv.setLineWidth(self.thickness)
        self.canv.line(0, 0, self.width, 0)


# ─── Style Definitions ──────────────────────────────────────────────────────────

def get_custom_styles():
    styles = getSampleStyleSheet()

    styles.add(ParagraphStyle(
        name='ExamTitle',
        parent=styles['Heading1'],
        fontSize=16,
        alignment=TA_CENTER,
        spaceAfter=6,
        fontName='Helvetica-Bold',
    ))
    styles.add(ParagraphStyle(
        name='SubjectName',
        parent=styles['Heading2'],
        fontSize=13,
        alignment=TA_CENTER,
        spaceAfter=4,
        fontName='Helvetica-Bold',
    ))
    styles.add(ParagraphStyle(
        name='ExamDetails',
        parent=styles['Normal'],
        fontSize=11,
        alignment=TA_CENTER,
        spaceAfter=12,
        fontName='Helvetica',
    ))
    styles.add(ParagraphStyle(
        name='QuestionText',
        parent=styles['Normal'],
        fontSize=11,
        alignment=TA_JUSTIFY,
        spaceAfter=6,
        fontName='Helvetica',
        leading=14,
    ))
    styles.add(ParagraphStyle(
        name='MCQOption',
        parent=styles['Normal'],
        fontSize=10,
        alignment=TA_LEFT,
        leftIndent=20,
        spaceAfter=3,
        fontName='Helvetica',
    ))
    styles.add(ParagraphStyle(
        name='CorrectOption',
        parent=styles['MCQOption'],
        textColor=colors.HexColor("#1a7a1a"),
        fontName='Helvetica-Bold',
    ))
    styles.add(ParagraphStyle(
        name='Instructions',
        parent=styles['Normal'],
        fontSize=10,
        alignment=TA_LEFT,
        leftIndent=30,
        spaceAfter=4,
        fontName='Helvetica',
    ))
    return styles


def _header(story: list, styles, title: str, subject_name: str, total_marks: int,
            duration_minutes: Optional[int], answer_key: bool) -> None:
    heading = _escape_html(title) + (" - ANSWER KEY" if answer_key else "")
    story.append(Paragraph(heading, styles['ExamTitle']))
    if subject_name:
        story.append(Paragraph(f"<b>{_escape_html(subject_name)}</b>", styles['SubjectName']))
    details = f"Total Marks: {total_marks}"
    if duration_minutes:
        details = f"Duration: {duration_minutes} minutes &nbsp;&nbsp;&nbsp; " + details
    story.append(Paragraph(details, styles['ExamDetails']))
    story.append(HorizontalLine(width=17*cm, thickness=1.5))
    story.append(Spacer(1, 0.4*cm))


def _question_block(number: int, entry: SelectedQuestion, styles, show_answer: bool) -> List:
    q = entry.question
    block = [Paragraph(
        f"<b>Q{number}.</b> {_escape_html(q.text)} <b>({entry.marks} mark{'s' if entry.marks != 1 else ''})</b>",
        styles['QuestionText'],
    )]
    for idx, option in enumerate(q.options):
        letter = option_letter(idx)
        if show_answer and idx == q.correct_answer:
            block.append(Paragraph(f"✓ {letter}. {_escape_html(option)}", styles['CorrectOption']))
        else:
            block.append(Paragraph(f"<b>{letter}.</b> {_escape_html(option)}", styles['MCQOption']))
    if show_answer:
        block.append(Spacer(1, 0.1*cm))
        block.append(Paragraph(f"<b>Correct Answer: {option_letter(q.correct_answer)}</b>", styles['MCQOption']))
    block.append(Spacer(1, 0.4*cm))
    return block


# ─── Generators ─────────────────────────────────────────────────────────────────

def _build(title, subject_name, entries, duration_minutes, answer_key: bool) -> BytesIO:
    buffer = BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        rightMargin=2*cm,
        leftMargin=2*cm,
        topMargin=2*cm,
        bottomMargin=2*cm,
        title=title,
    )
    styles = get_custom_styles()
    story = []

    total_marks = sum(e.marks for e in entries)
    _header(story, styles, title, subject_name, total_marks, duration_minutes, answer_key)

    if not answer_key:
        story.append(Paragraph("<b>Instructions to Candidates:</b>", styles['Normal']))
        story.append(Spacer(1, 0.2*cm))
        for i, instruction in enumerate(DEFAULT_INSTRUCTIONS, 1):
            story.append(Paragraph(f"{i}) {instruction}", styles['Instructions']))
        story.append(Spacer(1, 0.3*cm))
        story.append(HorizontalLine(width=17*cm, thickness=1.5))
        story.append(Spacer(1, 0.5*cm))

    for number, entry in enumerate(entries, 1):
        story.append(KeepTogether(_question_block(number, entry, styles, show_answer=answer_key)))

    doc.build(story)
    buffer.seek(0)
    log.info("Exported %s for '%s' (%d questions, %d marks)",
             "answer key" if answer_key else "question paper", title, len(entries), total_marks)
    return buffer


def generate_question_paper(title: str, subject_name: str, entries: Sequence[SelectedQuestion],
                            duration_minutes: Optional[int] = None) -> BytesIO:
    """Question paper PDF (no answers). Returns a BytesIO positioned at 0."""
    return _build(title, subject_name, list(entries), duration_minutes, answer_key=False)


def generate_answer_key(title: str, subject_name: str, entries: Sequence[SelectedQuestion],
                        duration_minutes: Optional[int] = None) -> BytesIO:
    """Answer key PDF: every question with the correct option highlighted."""
    return _build(title, subject_name, list(entries), duration_minutes, answer_key=True)


def export_exam_pdf(title: str, subject_name: str, entries: Sequence[SelectedQuestion],
                    duration_minutes: Optional[int] = None, answers: bool = False) -> BytesIO:
    if answers:
        return generate_answer_key(title, subject_name, entries, duration_minutes)
    return generate_question_paper(title, subject_name, entries, duration_minutes)
