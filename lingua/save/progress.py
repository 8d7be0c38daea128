"""
Progress store - the single writer of the player's GameState.

All "mark" operations are idempotent: an id enters its collection once and
keeps its first-insertion position, which the journal and history views
rely on for chronological display.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Optional

from narrative.core.events import EventBus, ProgressEvent
from lingua.components.progress import GameState

if TYPE_CHECKING:
    from lingua.vocabulary.index import VocabularyIndex

logger = logging.getLogger(__name__)


class ProgressStore:
    """
    Mutation and query API over a GameState.

    Usage:
        progress = ProgressStore.new_game("Anna", events=bus)
        progress.mark_dialogue_complete("base.intro")
        progress.unlock_words("dopis", "tady")
        progress.record_attempt("base.letterman.quiz", "1")
    """

    def __init__(self, state: Optional[GameState] = None, events: Optional[EventBus] = None):
        self._state = state or GameState()
        self.events = events

    @classmethod
    def new_game(cls, player_name: str, events: Optional[EventBus] = None) -> ProgressStore:
        return cls(GameState.new_game(player_name), events)

    @property
    def state(self) -> GameState:
        return self._state

    def replace(self, state: GameState) -> None:
        """Swap in a loaded state (continue / load game)."""
        self._state = state
        logger.info(f"Progress replaced with save of {state.player_name!r} (slot {state.save_slot})")

    def set_scene(self, scene_id: str) -> None:
        self._state.current_scene = scene_id

    # Completion sets

    def mark_dialogue_complete(self, dialogue_id: str) -> bool:
        """Returns True if the id was newly added."""
        if self._add_unique(self._state.completed_dialogues, dialogue_id):
            self._publish(ProgressEvent.DIALOGUE_COMPLETED, dialogue_id=dialogue_id)
            return True
        return False

    def mark_interactable_complete(self, interactable_id: str) -> bool:
        if self._add_unique(self._state.completed_interactables, interactable_id):
            self._publish(ProgressEvent.INTERACTABLE_COMPLETED, interactable_id=interactable_id)
            return True
        return False

    def is_dialogue_complete(self, dialogue_id: str) -> bool:
        return dialogue_id in self._state.completed_dialogues

    def is_interactable_complete(self, interactable_id: str) -> bool:
        return interactable_id in self._state.completed_interactables

    @property
    def completed_dialogues(self) -> tuple[str, ...]:
        return tuple(self._state.completed_dialogues)

    @property
    def completed_interactables(self) -> tuple[str, ...]:
        return tuple(self._state.completed_interactables)

    # Vocabulary

    def unlock_word(self, token: str) -> Optional[str]:
        """
        Unlock a vocabulary token (a base key or any of its forms).

        Returns:
            The stored (trimmed, lowercase) token, or None if it was blank
            or already unlocked
        """
        token = token.strip().lower()
        if not token:
            return None
        if self._add_unique(self._state.unlocked_words, token):
            self._publish(ProgressEvent.WORD_UNLOCKED, token=token)
            return token
        return None

    def unlock_words(self, *tokens: str) -> list[str]:
        """Unlock several tokens; returns the stored form of the ones that were new."""
        unlocked = []
        for token in tokens:
            stored = self.unlock_word(token)
            if stored is not None:
                unlocked.append(stored)
        return unlocked

    @property
    def unlocked_words(self) -> tuple[str, ...]:
        return tuple(self._state.unlocked_words)

    def is_unlocked_in(self, index: VocabularyIndex) -> Callable[[str], bool]:
        """``is_unlocked(key)`` predicate resolving stored tokens through ``index``."""
        return index.unlock_predicate(self._state.unlocked_words)

    # Puzzle attempts

    def record_attempt(self, dialogue_id: str, attempt: str) -> bool:
        """Record an answer for a quiz; duplicates per quiz are ignored."""
        attempts = self._state.puzzle_attempts.setdefault(dialogue_id, [])
        if self._add_unique(attempts, attempt):
            self._publish(ProgressEvent.ATTEMPT_RECORDED, dialogue_id=dialogue_id, attempt=attempt)
            return True
        return False

    def attempts_for(self, dialogue_id: str) -> frozenset[str]:
        return frozenset(self._state.puzzle_attempts.get(dialogue_id, ()))

    def has_attempted(self, dialogue_id: str, attempt: str) -> bool:
        return attempt in self._state.puzzle_attempts.get(dialogue_id, ())

    # Helpers

    @staticmethod
    def _add_unique(items: list[str], value: str) -> bool:
        if value in items:
            return False
        items.append(value)
        return True

    def _publish(self, event_type: ProgressEvent, **data) -> None:
        if self.events:
            self.events.publish(event_type, **data)
