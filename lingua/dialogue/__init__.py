"""
Dialogue module - scripted conversation playback.

Provides:
- Dialogue database loading per scene
- Typewriter reveal that keeps markup tags whole
- Advance/skip with input debouncing and external veto gates
- Speaker display names
"""

from lingua.dialogue.database import DialogueDatabase
from lingua.dialogue.speakers import SpeakerRoster
from lingua.dialogue.typewriter import reveal, split_markup, visible_length
from lingua.dialogue.player import DialoguePlayer, QuizHandler

__all__ = [
    "DialogueDatabase",
    "SpeakerRoster",
    "reveal",
    "split_markup",
    "visible_length",
    "DialoguePlayer",
    "QuizHandler",
]
