"""
Speaker roster - display names for speaker/portrait ids.
"""

from __future__ import annotations

from typing import Optional

from lingua.components.dialogue import DialogueEntry, SpeakerSide, SpeakerView


class SpeakerRoster:
    """
    Maps speaker ids to display names.

    Exact ids win; otherwise the longest matching prefix is used, so portrait
    variants such as "detective_happy" and "detective_angry" share the
    "detective" name. Unknown ids display as themselves.
    """

    def __init__(self, names: Optional[dict[str, str]] = None):
        self._names = dict(names or {})

    def register(self, speaker_id: str, display_name: str) -> None:
        self._names[speaker_id] = display_name

    def display_name(self, speaker_id: str) -> str:
        if speaker_id in self._names:
            return self._names[speaker_id]

        prefixes = [p for p in self._names if speaker_id.startswith(p)]
        if prefixes:
            return self._names[max(prefixes, key=len)]
        return speaker_id

    def view_for(self, entry: DialogueEntry) -> SpeakerView:
        """Presentation data for an entry; side "none" hides both portraits."""
        if entry.speaker_side == SpeakerSide.NONE:
            return SpeakerView(SpeakerSide.NONE, entry.speaker, "")
        return SpeakerView(entry.speaker_side, entry.speaker, self.display_name(entry.speaker))
