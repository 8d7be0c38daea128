"""
Narrative session - builds and wires the core once per game session.

Every collaborator is constructed here and passed explicitly; nothing in
the core reaches for a global instance.

Content directory layout:

    content/
        vocabulary.json      {wordClass: {key: {forms, journal, translation, guess?}}}
        dialogue/*.json      {"entries": [...]}, one file per scene
        quizzes.json         {"quizzes": [...]}
        speakers.json        {speakerId: displayName} (optional)
        config.json          CoreConfig overrides (optional)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from narrative.core.config import CoreConfig
from narrative.core.errors import DataFormatError, MissingCollaboratorError
from narrative.core.events import Event, EventBus, ProgressEvent
from narrative.resources.content import ContentLoader
from lingua.components.progress import GameState
from lingua.dialogue.database import DialogueDatabase
from lingua.dialogue.player import DialoguePlayer
from lingua.dialogue.speakers import SpeakerRoster
from lingua.quiz.branching import QuizBook
from lingua.quiz.resolver import QuizResolver
from lingua.save.manager import SaveManager
from lingua.save.progress import ProgressStore
from lingua.vocabulary.annotator import Popup, TextAnnotator
from lingua.vocabulary.index import VocabularyIndex
from lingua.vocabulary.journal import Journal

logger = logging.getLogger(__name__)

VOCABULARY_FILE = "vocabulary.json"
DIALOGUE_DIR = "dialogue"
QUIZ_FILE = "quizzes.json"
SPEAKER_FILE = "speakers.json"
CONFIG_FILE = "config.json"


class NarrativeSession:
    """
    Composition root for the narrative core.

    Usage:
        session = NarrativeSession.from_content_dir("content", player_name="Anna")
        session.player.on_dialogue_complete(scene_flow.on_dialogue_complete)
        session.play("base.intro")

        # every frame
        session.tick(dt)
    """

    def __init__(
        self,
        progress: Optional[ProgressStore],
        index: Optional[VocabularyIndex] = None,
        database: Optional[DialogueDatabase] = None,
        book: Optional[QuizBook] = None,
        config: Optional[CoreConfig] = None,
        events: Optional[EventBus] = None,
        roster: Optional[SpeakerRoster] = None,
        saves: Optional[SaveManager] = None,
    ):
        if progress is None:
            raise MissingCollaboratorError("NarrativeSession requires a ProgressStore")

        self.config = config or CoreConfig()
        self.events = events or EventBus()

        self.progress = progress
        if self.progress.events is None:
            self.progress.events = self.events

        self.index = index or VocabularyIndex()
        self.database = database or DialogueDatabase()
        self.book = book or QuizBook(max_wrong_attempts=self.config.max_wrong_attempts)
        self.roster = roster or SpeakerRoster()

        self.annotator = TextAnnotator(self.index, self.config)
        self.player = DialoguePlayer(
            self.annotator,
            self.progress,
            self.database,
            self.config,
            self.events,
            self.roster,
        )
        self.resolver = QuizResolver(
            self.progress,
            self.player,
            self.book,
            self.config,
            self.events,
        )
        self.journal = Journal(self.index, self.config)
        self.saves = saves or SaveManager(self.config, self.events)

        self.events.subscribe(ProgressEvent.WORD_UNLOCKED, self._on_word_unlocked)
        self.refresh_journal()

    @classmethod
    def from_content_dir(
        cls,
        content_dir: Path | str,
        config: Optional[CoreConfig] = None,
        player_name: str = "",
        state: Optional[GameState] = None,
        events: Optional[EventBus] = None,
    ) -> NarrativeSession:
        """
        Load all content under ``content_dir`` and build a session.

        Bad content is logged and skipped; a missing or broken vocabulary
        file leaves the session with an empty dictionary.
        """
        content_dir = Path(content_dir)
        if config is None:
            config_path = content_dir / CONFIG_FILE
            config = CoreConfig.from_file(config_path) if config_path.exists() else CoreConfig()

        events = events or EventBus()
        loader = ContentLoader()

        try:
            index = VocabularyIndex.load(content_dir / VOCABULARY_FILE, loader)
        except DataFormatError as e:
            logger.error(f"Vocabulary unavailable: {e}")
            index = VocabularyIndex()

        database = DialogueDatabase(content_dir / DIALOGUE_DIR, loader)
        database.load_directory()

        book = QuizBook(loader, max_wrong_attempts=config.max_wrong_attempts)
        quiz_path = content_dir / QUIZ_FILE
        if quiz_path.exists():
            book.load_file(quiz_path)

        roster = SpeakerRoster(cls._read_speakers(content_dir / SPEAKER_FILE, loader))

        if state is None:
            state = GameState.new_game(player_name)
        progress = ProgressStore(state, events)

        return cls(progress, index, database, book, config, events, roster)

    @staticmethod
    def _read_speakers(path: Path, loader: ContentLoader) -> dict[str, str]:
        if not path.exists():
            return {}
        try:
            data = loader.read_json(path)
        except DataFormatError as e:
            logger.error(f"Speaker names unavailable: {e}")
            return {}
        if not isinstance(data, dict):
            logger.error(f"Speaker names in {path} must be an object")
            return {}
        return {str(k): str(v) for k, v in data.items()}

    # Game lifecycle

    def new_game(self, player_name: str) -> None:
        """Start fresh progress for a new player."""
        self._reset_playback()
        self.progress.replace(GameState.new_game(player_name))
        self.refresh_journal()

    def save(self, slot: Optional[int] = None) -> Optional[int]:
        return self.saves.save(self.progress.state, slot)

    def load(self, slot: int) -> bool:
        """Replace progress with a saved slot; an empty slot changes nothing."""
        state = self.saves.load(slot)
        if state is None:
            return False

        self._reset_playback()
        self.progress.replace(state)
        self.refresh_journal()
        return True

    def continue_game(self) -> bool:
        """Load the most recently saved slot."""
        slot = self.saves.latest_slot()
        if slot is None:
            logger.info("No save to continue from")
            return False
        return self.load(slot)

    # Playback

    def play(self, dialogue_id: str) -> bool:
        return self.player.play_id(dialogue_id)

    def advance(self) -> bool:
        return self.player.advance()

    def tick(self, dt: float) -> None:
        self.player.tick(dt)

    def popup_for(self, link_id: str) -> Optional[Popup]:
        return self.annotator.popup_for(link_id)

    # Journal

    def refresh_journal(self) -> None:
        self.journal.rebuild(self.progress.unlocked_words)

    def _on_word_unlocked(self, event: Event) -> None:
        self.refresh_journal()

    def _reset_playback(self) -> None:
        self.player.stop()
        self.resolver.clear()
