"""
Quiz resolver - answer markup, attempt tracking and branching.

Multiple choice:
    Answers are appended to the question as links ``a:<index>`` colored by
    whether the player already tried them. Hovering recolors one answer;
    clicking records the attempt and plays the branch for that index.

Fill-in-blank:
    Typed answers are normalized (trimmed, whitespace collapsed, lowercase)
    and compared to the accepted set. Wrong answers route to the "wrong"
    branch until the retry budget runs out, then to "failed". Once a quiz
    reaches "correct" or "failed" that outcome sticks for its dialogue id
    until a different quiz is set up.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Iterable, Optional, Sequence, Union

from narrative.core.config import CoreConfig
from narrative.core.events import EventBus, QuizEvent
from lingua.components.quiz import QuizKind, QuizOutcome
from lingua.quiz.branching import QuizBook
from lingua.save.progress import ProgressStore

if TYPE_CHECKING:
    from lingua.dialogue.player import DialoguePlayer

logger = logging.getLogger(__name__)

AnswerId = Union[int, str]


def normalize_answer(text: str) -> str:
    return " ".join(text.split()).lower()


def color_for(
    index: int,
    attempted: Iterable[str],
    hovered: Optional[int] = None,
    config: Optional[CoreConfig] = None,
) -> str:
    """Color of one answer link; hover wins over the tried state."""
    config = config or CoreConfig()
    if hovered == index:
        return config.color_hover
    if str(index) in attempted:
        return config.color_tried
    return config.color_not_tried


def answers_markup(
    answers: Sequence[str],
    attempted: Iterable[str],
    hovered: Optional[int] = None,
    config: Optional[CoreConfig] = None,
) -> str:
    """Full answer list markup, one line per answer."""
    config = config or CoreConfig()
    attempted = frozenset(attempted)
    return "".join(
        f'\n<link="{config.answer_link_prefix}{i}">'
        f"<color={color_for(i, attempted, hovered, config)}>{answer}</color></link>"
        for i, answer in enumerate(answers)
    )


class QuizResolver:
    """
    Runs the quiz attached to the current dialogue line.

    Attaches itself to the player as its quiz handler, so quiz lines set
    themselves up when they are played.

    Usage:
        resolver = QuizResolver(progress, player, book, config, events)

        # UI link callbacks
        resolver.hover("a:2", True)
        resolver.click("a:2")

        # text field submit
        resolver.submit(input_text)
    """

    def __init__(
        self,
        progress: ProgressStore,
        player: Optional[DialoguePlayer] = None,
        book: Optional[QuizBook] = None,
        config: Optional[CoreConfig] = None,
        events: Optional[EventBus] = None,
    ):
        self.progress = progress
        self.player = player
        self.book = book
        self.config = config or CoreConfig()
        self.events = events

        # Active quiz
        self._dialogue_id: Optional[str] = None
        self._kind: Optional[QuizKind] = None
        self._question = ""
        self._answers: list[str] = []
        self._accepted: frozenset[str] = frozenset()
        self._hovered: Optional[int] = None

        # Fill-in-blank retry state, kept across setups of the same id
        self._tracked_id: Optional[str] = None
        self._wrong_attempts = 0
        self._terminal: Optional[QuizOutcome] = None

        if player is not None:
            player.set_quiz_handler(self)

    # Queries

    @property
    def is_active(self) -> bool:
        return self._dialogue_id is not None

    @property
    def dialogue_id(self) -> Optional[str]:
        return self._dialogue_id

    @property
    def kind(self) -> Optional[QuizKind]:
        return self._kind

    @property
    def wrong_attempts(self) -> int:
        return self._wrong_attempts

    @property
    def terminal_outcome(self) -> Optional[QuizOutcome]:
        return self._terminal

    @property
    def markup(self) -> str:
        """Question plus the answer list as currently colored."""
        return self._question + self.build_answers_markup(self._hovered)

    # Setup

    def begin_quiz(self, quiz_id: str, question_markup: str) -> Optional[str]:
        """Set up a quiz from the book for a dialogue line; returns the answers markup."""
        if self.book is None:
            logger.warning(f"Cannot start quiz {quiz_id!r}: no quiz book")
            return None

        quiz = self.book.get(quiz_id)
        if quiz is None:
            return None

        if quiz.kind == QuizKind.MULTIPLE_CHOICE:
            self.setup_multiple_choice(quiz.dialogue_id, quiz.answers, question_markup)
            return self.build_answers_markup()

        self.setup_fill_in_blank(quiz.dialogue_id, quiz.accepted, question_markup)
        return ""

    def setup_multiple_choice(
        self, dialogue_id: str, answers: Sequence[str], question: str = ""
    ) -> str:
        """Make a multiple-choice quiz active; returns question plus answers markup."""
        self._track(dialogue_id)
        self._activate(dialogue_id, QuizKind.MULTIPLE_CHOICE, question)
        self._answers = list(answers)
        self._publish(QuizEvent.STARTED, dialogue_id=dialogue_id, kind=self._kind)
        return self.markup

    def setup_fill_in_blank(
        self, dialogue_id: str, accepted: Iterable[str], question: str = ""
    ) -> None:
        """
        Make a fill-in-blank quiz active.

        The wrong-attempt counter only resets when ``dialogue_id`` differs
        from the last quiz set up.
        """
        self._track(dialogue_id)
        self._activate(dialogue_id, QuizKind.FILL_IN_BLANK, question)
        self._accepted = frozenset(normalize_answer(a) for a in accepted)
        self._publish(QuizEvent.STARTED, dialogue_id=dialogue_id, kind=self._kind)

    # Multiple choice

    def build_answers_markup(self, hovered: Optional[int] = None) -> str:
        if self._kind != QuizKind.MULTIPLE_CHOICE or not self._answers:
            return ""
        attempted = self.progress.attempts_for(self._dialogue_id)
        return answers_markup(self._answers, attempted, hovered, self.config)

    def hover(self, answer_id: AnswerId, is_hovering: bool) -> Optional[str]:
        """
        Recolor one answer for hover enter/exit.

        Returns:
            The rebuilt markup, or None if the id is not a current answer
            or input is blocked

        A hover exit on any answer clears the highlight.
        """
        if self._input_blocked():
            return None

        index = self._parse_answer_id(answer_id)
        if index is None:
            return None

        self._hovered = index if is_hovering else None

        markup = self.markup
        if self.player is not None:
            self.player.refresh_line(markup)
        self._publish(QuizEvent.MARKUP_CHANGED, dialogue_id=self._dialogue_id, markup=markup)
        return markup

    def click(self, answer_id: AnswerId) -> bool:
        """
        Answer the active multiple-choice quiz.

        Malformed and out-of-range ids are ignored, as is any click while
        an input gate (popup, modal) is closed.

        Returns:
            True if the click was accepted
        """
        if self._input_blocked():
            logger.debug(f"Ignoring quiz click {answer_id!r}: input blocked")
            return False

        index = self._parse_answer_id(answer_id)
        if index is None:
            logger.debug(f"Ignoring quiz click {answer_id!r}")
            return False

        dialogue_id = self._dialogue_id
        choice = str(index)
        self.progress.record_attempt(dialogue_id, choice)
        self._finish(dialogue_id, choice)
        return True

    # Fill-in-blank

    def submit(self, text: str) -> Optional[QuizOutcome]:
        """
        Answer the active fill-in-blank quiz.

        Returns:
            The outcome taken, or None if no fill-in-blank quiz is active
            or input is blocked
        """
        if self._input_blocked():
            logger.debug("Ignoring submit: input blocked")
            return None

        if self._kind != QuizKind.FILL_IN_BLANK:
            logger.debug("Ignoring submit: no fill-in-blank quiz active")
            return None

        dialogue_id = self._dialogue_id
        answer = normalize_answer(text)
        self.progress.record_attempt(dialogue_id, answer)

        if self._terminal is not None:
            outcome = self._terminal
        elif answer in self._accepted:
            outcome = QuizOutcome.CORRECT
        else:
            self._wrong_attempts += 1
            if self._wrong_attempts > self.config.max_wrong_attempts:
                outcome = QuizOutcome.FAILED
            else:
                outcome = QuizOutcome.WRONG

        if outcome.is_terminal:
            self._terminal = outcome
            self._finish(dialogue_id, outcome.value, outcome=outcome)
        else:
            self._route(dialogue_id, outcome.value, outcome=outcome)
        return outcome

    # Teardown

    def clear(self) -> None:
        """Drop the active quiz; fill-in-blank retry state is kept."""
        dialogue_id = self._dialogue_id
        self._dialogue_id = None
        self._kind = None
        self._question = ""
        self._answers = []
        self._accepted = frozenset()
        self._hovered = None

        if self.player is not None:
            self.player.release_quiz()
        if dialogue_id is not None:
            self._publish(QuizEvent.CLEARED, dialogue_id=dialogue_id)

    # Internals

    def _input_blocked(self) -> bool:
        return self.player is not None and not self.player.gates_open()

    def _track(self, dialogue_id: str) -> None:
        if dialogue_id != self._tracked_id:
            self._tracked_id = dialogue_id
            self._wrong_attempts = 0
            self._terminal = None

    def _activate(self, dialogue_id: str, kind: QuizKind, question: str) -> None:
        self._dialogue_id = dialogue_id
        self._kind = kind
        self._question = question
        self._answers = []
        self._accepted = frozenset()
        self._hovered = None

    def _parse_answer_id(self, answer_id: AnswerId) -> Optional[int]:
        if self._kind != QuizKind.MULTIPLE_CHOICE:
            return None

        if isinstance(answer_id, bool):
            return None
        if isinstance(answer_id, int):
            index = answer_id
        elif isinstance(answer_id, str) and answer_id.startswith(self.config.answer_link_prefix):
            try:
                index = int(answer_id[len(self.config.answer_link_prefix):])
            except ValueError:
                return None
        else:
            return None

        if 0 <= index < len(self._answers):
            return index
        return None

    def _finish(self, dialogue_id: str, choice: str, outcome: Optional[QuizOutcome] = None) -> None:
        """Resolve, clear the quiz, then play the branch."""
        next_id = self._resolve(dialogue_id, choice)
        self._publish(
            QuizEvent.ANSWERED,
            dialogue_id=dialogue_id,
            choice=choice,
            outcome=outcome,
            next_id=next_id,
        )
        self.clear()
        self._play(next_id)

    def _route(self, dialogue_id: str, choice: str, outcome: Optional[QuizOutcome] = None) -> None:
        """Resolve and play the branch, leaving the quiz armed for another try."""
        next_id = self._resolve(dialogue_id, choice)
        self._publish(
            QuizEvent.ANSWERED,
            dialogue_id=dialogue_id,
            choice=choice,
            outcome=outcome,
            next_id=next_id,
        )
        if next_id is None and self.player is not None:
            self.player.release_quiz()
        self._play(next_id)

    def _resolve(self, dialogue_id: str, choice: str) -> Optional[str]:
        if self.book is None:
            logger.warning(f"No quiz book to resolve {dialogue_id!r} choice {choice!r}")
            return None

        unlocked = self.progress.unlock_words(*self.book.unlocks_for(dialogue_id, choice))
        if unlocked:
            logger.debug(f"Quiz {dialogue_id!r} unlocked {unlocked}")
        return self.book.table.resolve(dialogue_id, choice)

    def _play(self, next_id: Optional[str]) -> None:
        if next_id is None or self.player is None:
            return
        self.player.play_id(next_id)

    def _publish(self, event_type: QuizEvent, **data) -> None:
        if self.events:
            self.events.publish(event_type, **data)
