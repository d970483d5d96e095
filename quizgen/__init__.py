"""
quizgen: MCQ generation and exam assembly for teachers.

Topic or PDF text → LLM prompt → normalized questions → question pool → exam.
"""

__version__ = "1.0.0"
