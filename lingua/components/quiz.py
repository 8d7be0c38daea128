"""
Quiz components - multiple-choice and fill-in-blank definitions.
"""

from __future__ import annotations

from enum import Enum

from pydantic import Field

from narrative.core.component import Component


class QuizKind(str, Enum):
    MULTIPLE_CHOICE = "multiple_choice"
    FILL_IN_BLANK = "fill_in_blank"


class QuizOutcome(str, Enum):
    """Branch keys of a fill-in-blank table."""
    CORRECT = "correct"
    WRONG = "wrong"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self is not QuizOutcome.WRONG


class QuizDefinition(Component):
    """
    A quiz attached to a dialogue line.

    Attributes:
        dialogue_id: Key for attempt tracking and branch lookup
        kind: Multiple choice or fill-in-blank
        answers: Ordered answer texts (multiple choice)
        accepted: Accepted answers (fill-in-blank)
        branches: Choice key ("0", "1", ... or an outcome) -> next dialogue id
        unlocks: Choice key -> vocabulary tokens unlocked when taken
    """
    dialogue_id: str = Field(alias="id")
    kind: QuizKind
    answers: list[str] = Field(default_factory=list)
    accepted: list[str] = Field(default_factory=list)
    branches: dict[str, str] = Field(default_factory=dict)
    unlocks: dict[str, list[str]] = Field(default_factory=dict)

    @property
    def is_multiple_choice(self) -> bool:
        return self.kind == QuizKind.MULTIPLE_CHOICE
