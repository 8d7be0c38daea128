"""
Progress components - the persisted player state.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from narrative.core.component import Component

START_SCENE = "Base"


def _unique(items: list[str]) -> list[str]:
    return list(dict.fromkeys(items))


class GameState(Component):
    """
    Everything written to a save slot.

    The id collections are insertion-ordered and hold each member once;
    ProgressStore is the only writer during play.
    """
    player_name: str = Field(default="", alias="playerName")
    current_scene: str = Field(default=START_SCENE, alias="currentSceneId")
    save_slot: int = Field(default=0, alias="saveSlot")
    last_saved: str = Field(default="", alias="lastSavedTimestamp")
    completed_dialogues: list[str] = Field(default_factory=list, alias="completedDialogueIds")
    completed_interactables: list[str] = Field(default_factory=list, alias="completedInteractableIds")
    unlocked_words: list[str] = Field(default_factory=list, alias="unlockedVocabularyTokens")
    puzzle_attempts: dict[str, list[str]] = Field(default_factory=dict, alias="puzzleAttempts")

    @field_validator("completed_dialogues", "completed_interactables", "unlocked_words")
    @classmethod
    def _dedupe(cls, items: list[str]) -> list[str]:
        return _unique(items)

    @field_validator("puzzle_attempts")
    @classmethod
    def _dedupe_attempts(cls, attempts: dict[str, list[str]]) -> dict[str, list[str]]:
        return {key: _unique(values) for key, values in attempts.items()}

    @classmethod
    def new_game(cls, player_name: str, now: Optional[datetime] = None) -> GameState:
        """Fresh state for a new game, starting in the first scene."""
        now = now or datetime.now()
        return cls(
            player_name=player_name,
            current_scene=START_SCENE,
            last_saved=now.isoformat(timespec="seconds"),
        )

    def to_document(self) -> dict:
        """Flat JSON-ready dict using the on-disk field names."""
        return self.model_dump(mode="json", by_alias=True)


@dataclass
class SaveSlotSummary:
    """What the load-game screen shows for one occupied slot."""
    slot: int
    player_name: str
    scene: str
    timestamp: str

    @property
    def saved_at(self) -> Optional[datetime]:
        try:
            return datetime.fromisoformat(self.timestamp)
        except ValueError:
            return None

    @property
    def display_time(self) -> str:
        """Short "d/M/yy HH:mm" form, or the raw timestamp if unparsable."""
        saved = self.saved_at
        if saved is None:
            return self.timestamp
        return f"{saved.day}/{saved.month}/{saved:%y %H:%M}"
