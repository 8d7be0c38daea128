"""
Vocabulary module - dictionary, annotation and journal.

Provides:
- Dictionary loading with case-insensitive form resolution
- Translatable-span annotation with guess/final popups
- The learned-words journal
"""

from lingua.vocabulary.index import VocabularyIndex, normalize_form
from lingua.vocabulary.annotator import TextAnnotator, Popup
from lingua.vocabulary.journal import Journal, JournalMode, format_row

__all__ = [
    "VocabularyIndex",
    "normalize_form",
    "TextAnnotator",
    "Popup",
    "Journal",
    "JournalMode",
    "format_row",
]
