"""
Dialogue components - scripted entries, lines and playback state.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Optional

from pydantic import Field, field_validator

from narrative.core.component import Component


class SpeakerSide(str, Enum):
    """Which portrait slot the speaker occupies."""
    LEFT = "left"
    RIGHT = "right"
    NONE = "none"


class DialogueState(Enum):
    """State of the dialogue player."""
    IDLE = auto()
    TYPING = auto()
    LINE_COMPLETE = auto()
    ENDED = auto()


class DialogueLine(Component):
    """
    One line of script.

    Attributes:
        text: Raw text, possibly containing translatable spans
        quiz: Id of the quiz this line asks, if any
    """
    text: str = ""
    quiz: Optional[str] = None

    @property
    def is_quiz(self) -> bool:
        return self.quiz is not None


class DialogueEntry(Component):
    """
    A named, ordered sequence of lines spoken by one speaker.

    Attributes:
        id: Unique dialogue id, e.g. "base.letterman.quiz"
        speaker: Speaker/portrait id
        speaker_side: left, right or none
        lines: Lines in playback order
        unlocks: Vocabulary tokens unlocked when the entry completes
    """
    id: str
    speaker: str = ""
    speaker_side: SpeakerSide = Field(default=SpeakerSide.NONE, alias="speakerSide")
    lines: list[DialogueLine] = Field(default_factory=list)
    unlocks: list[str] = Field(default_factory=list)

    @field_validator("lines", mode="before")
    @classmethod
    def _coerce_lines(cls, value: Any) -> Any:
        if isinstance(value, list):
            return [{"text": line} if isinstance(line, str) else line for line in value]
        return value

    @property
    def is_empty(self) -> bool:
        return not self.lines


@dataclass
class SpeakerView:
    """Presentation data for the speaker of the current line."""
    side: SpeakerSide
    speaker: str
    display_name: str

    @property
    def show_left(self) -> bool:
        return self.side == SpeakerSide.LEFT

    @property
    def show_right(self) -> bool:
        return self.side == SpeakerSide.RIGHT

    @property
    def portrait(self) -> Optional[str]:
        """Portrait asset id, None when both speakers are hidden."""
        if self.side == SpeakerSide.NONE or not self.speaker:
            return None
        return self.speaker


@dataclass
class DialogueSession:
    """
    Runtime playback state, owned by the DialoguePlayer.

    Attributes:
        entry: Entry being played
        line_index: Index of the current line
        state: TYPING or LINE_COMPLETE while the session lives
        full_text: Fully resolved markup of the current line
        revealed: Visible characters revealed so far
        awaiting_quiz: Current line hands input to the quiz resolver
        speaker: Speaker view for the current line
    """
    entry: DialogueEntry
    line_index: int = 0
    state: DialogueState = DialogueState.IDLE
    full_text: str = ""
    revealed: int = 0
    awaiting_quiz: bool = False
    speaker: Optional[SpeakerView] = None
    history: list[str] = field(default_factory=list)

    @property
    def dialogue_id(self) -> str:
        return self.entry.id

    @property
    def current_line(self) -> DialogueLine:
        return self.entry.lines[self.line_index]

    @property
    def is_last_line(self) -> bool:
        return self.line_index >= len(self.entry.lines) - 1
