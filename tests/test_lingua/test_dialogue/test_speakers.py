from lingua.components.dialogue import DialogueEntry, SpeakerSide
from lingua.dialogue.speakers import SpeakerRoster


def test_display_name_prefix_match():
    roster = SpeakerRoster({"detective": "Detective", "detective_boss": "Chief"})

    assert roster.display_name("detective") == "Detective"
    assert roster.display_name("detective_happy") == "Detective"
    assert roster.display_name("detective_boss_angry") == "Chief"
    assert roster.display_name("letterman") == "letterman"


def test_register():
    roster = SpeakerRoster()
    roster.register("teta", "Teta Věra")
    assert roster.display_name("teta_smile") == "Teta Věra"


def test_view_for_entry():
    roster = SpeakerRoster({"detective": "Detective"})

    view = roster.view_for(DialogueEntry(id="a", speaker="detective_sad", speaker_side="left"))
    assert view.side == SpeakerSide.LEFT
    assert view.display_name == "Detective"
    assert view.show_left and not view.show_right

    hidden = roster.view_for(DialogueEntry(id="b", speaker="detective_sad", speaker_side="none"))
    assert hidden.display_name == ""
    assert not hidden.show_left and not hidden.show_right
