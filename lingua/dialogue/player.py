"""
Dialogue player - plays annotated lines with a typewriter effect.

State machine:

    IDLE -> TYPING -> LINE_COMPLETE -> (next line) TYPING
                                    -> (last line) ENDED

Advance while TYPING shows the whole line at once and opens a debounce
window so one click is never counted twice. Advance while LINE_COMPLETE
moves on. Lines that ask a quiz hand input to the quiz handler until it
releases them.

The host loop drives time through ``tick(dt)``; nothing here sleeps.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional, Protocol

from narrative.core.config import CoreConfig
from narrative.core.errors import EmptyEntryError, InvalidInput
from narrative.core.events import DialogueEvent, EventBus
from narrative.core.timer import Countdown, Ticker
from lingua.components.dialogue import (
    DialogueEntry,
    DialogueSession,
    DialogueState,
    SpeakerView,
)
from lingua.dialogue.database import DialogueDatabase
from lingua.dialogue.speakers import SpeakerRoster
from lingua.dialogue.typewriter import reveal, visible_length
from lingua.save.progress import ProgressStore
from lingua.vocabulary.annotator import TextAnnotator

logger = logging.getLogger(__name__)


class QuizHandler(Protocol):
    """Takes over input for lines that ask a quiz."""

    def begin_quiz(self, quiz_id: str, question_markup: str) -> Optional[str]:
        """Start a quiz; return markup appended to the question, or None if unknown."""
        ...


class DialoguePlayer:
    """
    Plays one dialogue entry at a time.

    Starting a new entry replaces any session in flight and cancels its
    timers; whatever was already recorded in progress stays recorded.

    Usage:
        player = DialoguePlayer(annotator, progress, database, config, events)
        player.on_dialogue_complete(scene_flow.on_dialogue_complete)
        player.play_id("base.intro")

        # every frame
        player.tick(dt)
        if advance_pressed:
            player.advance()
    """

    def __init__(
        self,
        annotator: TextAnnotator,
        progress: ProgressStore,
        database: Optional[DialogueDatabase] = None,
        config: Optional[CoreConfig] = None,
        events: Optional[EventBus] = None,
        roster: Optional[SpeakerRoster] = None,
    ):
        self.annotator = annotator
        self.progress = progress
        self.database = database
        self.config = config or CoreConfig()
        self.events = events
        self.roster = roster or SpeakerRoster()

        self._session: Optional[DialogueSession] = None
        self._idle_state = DialogueState.IDLE
        self._ticker = Ticker(self.config.typing_interval)
        self._cooldown = Countdown()

        self._gates: list[Callable[[], bool]] = []
        self._on_complete: list[Callable[[str], None]] = []
        self._quiz_handler: Optional[QuizHandler] = None

    # Collaborators

    def set_quiz_handler(self, handler: Optional[QuizHandler]) -> None:
        self._quiz_handler = handler

    def add_advance_gate(self, gate: Callable[[], bool]) -> None:
        """Register a veto: advance is ignored while any gate returns False."""
        self._gates.append(gate)

    def remove_advance_gate(self, gate: Callable[[], bool]) -> None:
        if gate in self._gates:
            self._gates.remove(gate)

    def on_dialogue_complete(self, callback: Callable[[str], None]) -> None:
        """Call ``callback(dialogue_id)`` whenever an entry plays to its end."""
        self._on_complete.append(callback)

    def remove_dialogue_complete(self, callback: Callable[[str], None]) -> None:
        if callback in self._on_complete:
            self._on_complete.remove(callback)

    # Queries

    @property
    def state(self) -> DialogueState:
        return self._session.state if self._session else self._idle_state

    @property
    def is_active(self) -> bool:
        return self._session is not None

    @property
    def is_typing(self) -> bool:
        return self.state == DialogueState.TYPING

    @property
    def is_complete(self) -> bool:
        """True when the current line is fully shown."""
        return self.state == DialogueState.LINE_COMPLETE

    @property
    def awaiting_quiz(self) -> bool:
        return self._session is not None and self._session.awaiting_quiz

    @property
    def is_debouncing(self) -> bool:
        return self._cooldown.active

    @property
    def current_dialogue_id(self) -> Optional[str]:
        return self._session.dialogue_id if self._session else None

    @property
    def line_index(self) -> Optional[int]:
        return self._session.line_index if self._session else None

    @property
    def speaker(self) -> Optional[SpeakerView]:
        return self._session.speaker if self._session else None

    @property
    def full_text(self) -> str:
        return self._session.full_text if self._session else ""

    @property
    def displayed_text(self) -> str:
        if not self._session:
            return ""
        return reveal(self._session.full_text, self._session.revealed)

    def gates_open(self) -> bool:
        """True while no registered gate vetoes input."""
        return all(gate() for gate in self._gates)

    def can_advance(self) -> bool:
        if self._session is None or self._cooldown.active:
            return False
        return self.gates_open()

    # Playback

    def play(self, entry: DialogueEntry) -> None:
        """
        Start playing an entry from its first line.

        Raises:
            EmptyEntryError: If the entry has no lines (state is unchanged)
        """
        if entry.is_empty:
            raise EmptyEntryError(entry.id)

        if self._session is not None:
            logger.debug(f"Replacing dialogue {self._session.dialogue_id!r} with {entry.id!r}")

        self._cooldown.cancel()
        self._session = DialogueSession(entry=entry)
        logger.info(f"Dialogue started: {entry.id}")
        self._publish(DialogueEvent.STARTED, dialogue_id=entry.id)
        self._enter_line(0)

    def play_id(self, dialogue_id: str) -> bool:
        """
        Look up and play an entry by id.

        Unknown ids and empty entries are logged and leave the current
        session untouched.

        Returns:
            True if playback started
        """
        if self.database is None:
            logger.warning(f"Cannot play {dialogue_id!r}: no dialogue database")
            return False

        entry = self.database.get(dialogue_id)
        if entry is None:
            return False

        try:
            self.play(entry)
        except InvalidInput as e:
            logger.warning(f"Rejected dialogue: {e}")
            return False
        return True

    def advance(self) -> bool:
        """
        Handle one advance input (click, key press).

        Returns:
            True if the input was accepted
        """
        if not self.can_advance():
            logger.debug("Advance ignored")
            return False

        session = self._session
        if session.state == DialogueState.TYPING:
            self._cooldown.start(self.config.advance_cooldown)
            self._finish_line()
            return True

        if session.state == DialogueState.LINE_COMPLETE:
            if session.awaiting_quiz:
                logger.debug("Advance ignored: waiting for a quiz answer")
                return False

            self._cooldown.start(self.config.advance_cooldown)
            if session.is_last_line:
                self._end()
            else:
                self._enter_line(session.line_index + 1)
            return True

        return False

    def tick(self, dt: float) -> None:
        """Advance timers by ``dt`` seconds."""
        self._cooldown.tick(dt)

        session = self._session
        if session is None or session.state != DialogueState.TYPING:
            return

        session.revealed += self._ticker.tick(dt)
        if session.revealed >= visible_length(session.full_text):
            self._finish_line()

    def stop(self) -> None:
        """Drop the current session without firing completion."""
        if self._session is not None:
            logger.debug(f"Dialogue {self._session.dialogue_id!r} stopped")
        self._session = None
        self._idle_state = DialogueState.IDLE
        self._cooldown.cancel()

    # Quiz integration

    def refresh_line(self, markup: str) -> None:
        """
        Replace the current line's markup (quiz hover/attempt recoloring).

        A finished line shows the new markup at once; a line still typing
        keeps its reveal position.
        """
        session = self._session
        if session is None:
            return

        session.full_text = markup
        if session.state == DialogueState.LINE_COMPLETE:
            session.revealed = visible_length(markup)

    def release_quiz(self) -> None:
        """Let advance input through again after a quiz gives up control."""
        if self._session is not None:
            self._session.awaiting_quiz = False

    # Internals

    def _enter_line(self, index: int) -> None:
        session = self._session
        session.line_index = index
        line = session.current_line

        is_unlocked = self.progress.is_unlocked_in(self.annotator.index)
        markup = self.annotator.annotate(line.text, is_unlocked)

        session.awaiting_quiz = False
        if line.quiz:
            markup = self._begin_quiz(line.quiz, markup)

        session.full_text = markup
        session.revealed = 0
        session.state = DialogueState.TYPING
        session.speaker = self.roster.view_for(session.entry)
        session.history.append(markup)
        self._ticker.reset()

        self._publish(
            DialogueEvent.LINE_STARTED,
            dialogue_id=session.dialogue_id,
            line_index=index,
            speaker=session.speaker,
            text=markup,
        )

        if visible_length(markup) == 0:
            self._finish_line()

    def _begin_quiz(self, quiz_id: str, markup: str) -> str:
        if self._quiz_handler is None:
            logger.warning(f"Line asks quiz {quiz_id!r} but no quiz handler is attached")
            return markup

        suffix = self._quiz_handler.begin_quiz(quiz_id, markup)
        if suffix is None:
            return markup

        self._session.awaiting_quiz = True
        return markup + suffix

    def _finish_line(self) -> None:
        session = self._session
        session.revealed = visible_length(session.full_text)
        session.state = DialogueState.LINE_COMPLETE
        self._publish(
            DialogueEvent.LINE_COMPLETED,
            dialogue_id=session.dialogue_id,
            line_index=session.line_index,
        )

    def _end(self) -> None:
        entry = self._session.entry
        self._session = None
        self._idle_state = DialogueState.ENDED

        if entry.unlocks:
            self.progress.unlock_words(*entry.unlocks)
        if self.config.mark_dialogue_complete:
            self.progress.mark_dialogue_complete(entry.id)

        logger.info(f"Dialogue ended: {entry.id}")
        self._publish(DialogueEvent.ENDED, dialogue_id=entry.id)
        for callback in list(self._on_complete):
            callback(entry.id)

    def _publish(self, event_type: DialogueEvent, **data) -> None:
        if self.events:
            self.events.publish(event_type, **data)
