"""
Quiz module - branching questions inside dialogue.

Provides:
- Declarative branch tables validated at load time
- Multiple-choice answer links with tried/hover coloring
- Fill-in-blank checking with a retry budget
"""

from lingua.quiz.branching import BranchTable, QuizBook, validate_definition
from lingua.quiz.resolver import QuizResolver, answers_markup, color_for, normalize_answer

__all__ = [
    "BranchTable",
    "QuizBook",
    "validate_definition",
    "QuizResolver",
    "answers_markup",
    "color_for",
    "normalize_answer",
]
