import copy
import json
import os
import sys

import pytest

# Ensure narrative/lingua modules can be imported
sys.path.append(os.getcwd())

VOCABULARY = {
    "noun": {
        "dopis": {
            "forms": ["dopis", "dopise", "dopisu"],
            "journal": "dopis (m • sg.)",
            "translation": "letter",
            "guess": "letter?",
        },
        "teta": {
            "forms": ["teta", "tetu", "teto"],
            "journal": "teta (f • sg.)",
            "translation": "aunt",
        },
    },
    "phrase": {
        "dobrý den": {
            "forms": ["dobrý den"],
            "journal": "dobrý den",
            "translation": "good day",
            "guess": "hello?",
        },
    },
    "adverb": {
        "tady": {
            "forms": ["tady"],
            "journal": "tady",
            "translation": "here",
        },
    },
}

DIALOGUE = {
    "entries": [
        {
            "id": "base.intro",
            "speaker": "detective_happy",
            "speakerSide": "left",
            "lines": ["<tr>Dobrý den</tr>!", "Tady je <tr>dopis</tr>."],
            "unlocks": ["dobrý den"],
        },
        {
            "id": "base.letterman.quiz",
            "speaker": "letterman",
            "speakerSide": "right",
            "lines": [{"text": "Co je <tr>dopis</tr>?", "quiz": "base.letterman.quiz"}],
        },
        {"id": "base.letterman.q_correct1", "speaker": "letterman", "speakerSide": "right",
         "lines": ["Ano, správně!"]},
        {"id": "base.letterman.q_wrong1", "speaker": "letterman", "speakerSide": "right",
         "lines": ["Ne, to ne."]},
        {
            "id": "villaoutside.teta.fill_in_blank",
            "speaker": "teta",
            "speakerSide": "right",
            "lines": [{"text": "To je moje ___.", "quiz": "villaoutside.teta.fill_in_blank"}],
        },
        {"id": "villaoutside.teta.fib_correct1", "speaker": "teta", "lines": ["Výborně!"]},
        {"id": "villaoutside.teta.fib_wrong1", "speaker": "teta", "lines": ["Zkus to znovu."]},
        {"id": "villaoutside.teta.fib_failed1", "speaker": "teta", "lines": ["To je teta."]},
        {"id": "base.empty", "lines": []},
    ]
}

QUIZZES = {
    "quizzes": [
        {
            "id": "base.letterman.quiz",
            "kind": "multiple_choice",
            "answers": ["A parcel", "A letter", "A postcard", "A newspaper"],
            "branches": {
                "0": "base.letterman.q_wrong1",
                "1": "base.letterman.q_correct1",
                "2": "base.letterman.q_wrong1",
                "3": "base.letterman.q_wrong1",
            },
            "unlocks": {"1": ["dopis"]},
        },
        {
            "id": "villaoutside.teta.fill_in_blank",
            "kind": "fill_in_blank",
            "accepted": ["Teta", " tetu "],
            "branches": {
                "correct": "villaoutside.teta.fib_correct1",
                "wrong": "villaoutside.teta.fib_wrong1",
                "failed": "villaoutside.teta.fib_failed1",
            },
            "unlocks": {"correct": ["teta"]},
        },
    ]
}

SPEAKERS = {"detective": "Detective", "letterman": "Listonoš", "teta": "Teta Věra"}


@pytest.fixture
def vocabulary_data():
    return copy.deepcopy(VOCABULARY)


@pytest.fixture
def dialogue_data():
    return copy.deepcopy(DIALOGUE)


@pytest.fixture
def quiz_data():
    return copy.deepcopy(QUIZZES)


@pytest.fixture
def event_bus():
    """Fresh EventBus for each test."""
    from narrative.core.events import EventBus
    return EventBus()


@pytest.fixture
def config(tmp_path):
    """Power-of-two timings so tick arithmetic is exact."""
    from narrative.core.config import CoreConfig
    return CoreConfig(
        typing_interval=0.25,
        advance_cooldown=0.5,
        save_path=str(tmp_path / "saves"),
    )


@pytest.fixture
def vocabulary_index(vocabulary_data):
    from lingua.vocabulary.index import VocabularyIndex
    return VocabularyIndex.load(vocabulary_data)


@pytest.fixture
def annotator(vocabulary_index, config):
    from lingua.vocabulary.annotator import TextAnnotator
    return TextAnnotator(vocabulary_index, config)


@pytest.fixture
def progress(event_bus):
    from lingua.components.progress import GameState
    from lingua.save.progress import ProgressStore
    return ProgressStore(GameState(player_name="Anna"), event_bus)


@pytest.fixture
def dialogue_database(dialogue_data):
    from lingua.dialogue.database import DialogueDatabase
    database = DialogueDatabase()
    database.load_records(dialogue_data, source="fixture")
    return database


@pytest.fixture
def quiz_book(quiz_data, config):
    from lingua.quiz.branching import QuizBook
    book = QuizBook(max_wrong_attempts=config.max_wrong_attempts)
    book.load_records(quiz_data, source="fixture")
    return book


@pytest.fixture
def player(annotator, progress, dialogue_database, config, event_bus):
    from lingua.dialogue.player import DialoguePlayer
    from lingua.dialogue.speakers import SpeakerRoster
    return DialoguePlayer(
        annotator,
        progress,
        dialogue_database,
        config,
        event_bus,
        SpeakerRoster(SPEAKERS),
    )


@pytest.fixture
def resolver(progress, player, quiz_book, config, event_bus):
    from lingua.quiz.resolver import QuizResolver
    return QuizResolver(progress, player, quiz_book, config, event_bus)


@pytest.fixture
def content_dir(tmp_path, vocabulary_data, dialogue_data, quiz_data):
    """A complete content directory on disk."""
    root = tmp_path / "content"
    (root / "dialogue").mkdir(parents=True)

    with open(root / "vocabulary.json", "w", encoding="utf-8") as f:
        json.dump(vocabulary_data, f, ensure_ascii=False)
    with open(root / "dialogue" / "Base.json", "w", encoding="utf-8") as f:
        json.dump(dialogue_data, f, ensure_ascii=False)
    with open(root / "quizzes.json", "w", encoding="utf-8") as f:
        json.dump(quiz_data, f, ensure_ascii=False)
    with open(root / "speakers.json", "w", encoding="utf-8") as f:
        json.dump(SPEAKERS, f, ensure_ascii=False)
    return root
