"""
Data-only components.

All components are pydantic models (or plain dataclasses for runtime-only
state). Logic lives in the stores, players and resolvers.
"""

from lingua.components.vocabulary import VocabularyEntry
from lingua.components.dialogue import (
    DialogueEntry,
    DialogueLine,
    DialogueSession,
    DialogueState,
    SpeakerSide,
    SpeakerView,
)
from lingua.components.quiz import QuizDefinition, QuizKind, QuizOutcome
from lingua.components.progress import GameState, SaveSlotSummary, START_SCENE

__all__ = [
    "VocabularyEntry",
    "DialogueEntry",
    "DialogueLine",
    "DialogueSession",
    "DialogueState",
    "SpeakerSide",
    "SpeakerView",
    "QuizDefinition",
    "QuizKind",
    "QuizOutcome",
    "GameState",
    "SaveSlotSummary",
    "START_SCENE",
]
