import json

import pytest

from narrative.core.config import CoreConfig
from narrative.core.errors import MissingCollaboratorError
from lingua.components.dialogue import DialogueState
from lingua.components.quiz import QuizOutcome
from lingua.session import NarrativeSession


@pytest.fixture
def session(content_dir, config):
    return NarrativeSession.from_content_dir(content_dir, config=config, player_name="Anna")


def test_missing_progress_is_fatal():
    with pytest.raises(MissingCollaboratorError):
        NarrativeSession(None)


def test_from_content_dir_loads_everything(session):
    assert len(session.index) == 4
    assert len(session.database) == 9
    assert len(session.book) == 2
    assert session.roster.display_name("letterman") == "Listonoš"
    assert session.progress.state.player_name == "Anna"
    assert session.progress.state.current_scene == "Base"


def test_config_file_in_content_dir(content_dir, tmp_path):
    (content_dir / "config.json").write_text(
        json.dumps({"typing_interval": 0.5, "save_path": str(tmp_path / "other")}),
        encoding="utf-8",
    )
    session = NarrativeSession.from_content_dir(content_dir)
    assert session.config.typing_interval == 0.5
    assert session.saves.save_path == tmp_path / "other"


def test_broken_vocabulary_leaves_empty_index(content_dir, config, caplog):
    (content_dir / "vocabulary.json").write_text("{", encoding="utf-8")

    session = NarrativeSession.from_content_dir(content_dir, config=config)

    assert len(session.index) == 0
    assert "Vocabulary unavailable" in caplog.text
    assert session.play("base.intro")
    assert session.player.full_text == "Dobrý den!"


def test_quiz_flow_updates_journal(session):
    assert session.play("base.letterman.quiz")
    session.tick(100.0)
    assert not session.advance()

    assert session.resolver.click("a:1")

    assert session.player.current_dialogue_id == "base.letterman.q_correct1"
    assert [entry.key for entry in session.journal.entries] == ["dopis"]


def test_fill_in_blank_flow(session):
    session.play("villaoutside.teta.fill_in_blank")
    assert session.resolver.submit("teta") == QuizOutcome.CORRECT
    assert session.player.current_dialogue_id == "villaoutside.teta.fib_correct1"


def test_save_and_load(session):
    session.progress.mark_dialogue_complete("base.intro")
    session.progress.unlock_word("dopis")
    slot = session.save()
    assert slot == 1

    session.new_game("Petr")
    assert session.progress.state.player_name == "Petr"
    assert session.progress.completed_dialogues == ()
    assert len(session.journal) == 0

    assert session.load(slot)
    assert session.progress.state.player_name == "Anna"
    assert session.progress.is_dialogue_complete("base.intro")
    assert len(session.journal) == 1


def test_load_empty_slot_changes_nothing(session):
    session.play("base.intro")
    assert not session.load(4)
    assert session.player.current_dialogue_id == "base.intro"


def test_load_unreadable_slot_changes_nothing(session):
    session.saves.save_path.mkdir(parents=True, exist_ok=True)
    (session.saves.save_path / "save_slot2.json").write_text("[1, 2]", encoding="utf-8")
    session.play("base.intro")

    assert not session.load(2)
    assert session.player.current_dialogue_id == "base.intro"


def test_load_stops_playback(session):
    session.save(slot=2)
    session.play("base.intro")

    assert session.load(2)
    assert session.player.state == DialogueState.IDLE


def test_continue_game(session):
    assert not session.continue_game()

    session.save(slot=3)
    session.progress.replace(session.progress.state.model_copy(update={"player_name": "Other"}))
    assert session.continue_game()
    assert session.progress.state.player_name == "Anna"


def test_popup_for(session):
    assert session.popup_for("dopis_guess").text == "letter?"


def test_explicit_construction(progress, vocabulary_index, dialogue_database, quiz_book, tmp_path):
    config = CoreConfig(save_path=str(tmp_path / "saves"))
    session = NarrativeSession(progress, vocabulary_index, dialogue_database, quiz_book, config)

    assert session.player.database is dialogue_database
    assert session.resolver.book is quiz_book
    assert session.play("base.intro")
