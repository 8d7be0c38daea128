"""
Dialogue database - scripted entries loaded from JSON.

File format (one file per scene):

```
{
  "entries": [
    {"id": "base.letterman.one", "speaker": "letterman", "speakerSide": "right",
     "lines": ["Dobrý den!", {"text": "Co je <tr>dopis</tr>?", "quiz": "base.letterman.quiz"}],
     "unlocks": ["dopis"]}
  ]
}
```
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Iterator, Optional

from pydantic import ValidationError

from narrative.core.errors import DataFormatError, LookupMiss
from narrative.resources.content import ContentLoader
from lingua.components.dialogue import DialogueEntry

logger = logging.getLogger(__name__)


class DialogueDatabase:
    """
    Id -> DialogueEntry lookup.

    Usage:
        database = DialogueDatabase(dialogue_dir="content/dialogue")
        database.load_scene("Base")
        entry = database.get("base.intro")
    """

    def __init__(
        self,
        dialogue_dir: Path | str | None = None,
        loader: Optional[ContentLoader] = None,
    ):
        self.dialogue_dir = Path(dialogue_dir) if dialogue_dir else None
        self.loader = loader or ContentLoader()
        self._entries: dict[str, DialogueEntry] = {}
        self._loaded_files: list[Path] = []

    # Loading

    def add(self, entry: DialogueEntry) -> None:
        if entry.id in self._entries:
            logger.warning(f"Dialogue id {entry.id!r} redefined; keeping the last definition")
        self._entries[entry.id] = entry

    def load_records(self, records: Any, source: str = "") -> int:
        """
        Add entries from a parsed document.

        Accepts ``{"entries": [...]}`` or a bare list. Invalid entries are
        logged and skipped.

        Returns:
            Number of entries added
        """
        if isinstance(records, dict):
            records = records.get("entries")
        if not isinstance(records, list):
            raise DataFormatError("expected a list of dialogue entries", source=source or None)

        count = 0
        for record in self.loader.iter_valid(records, "dialogue", source):
            try:
                entry = DialogueEntry.model_validate(record)
            except ValidationError as e:
                logger.warning(f"Skipping dialogue entry in {source}: {e}")
                continue
            self.add(entry)
            count += 1
        return count

    def load_file(self, path: Path | str) -> int:
        """
        Load one dialogue file, adding to the current entries.

        Returns:
            Number of entries added (0 if the file was unusable)
        """
        path = Path(path)
        try:
            count = self.load_records(self.loader.read_json(path), source=str(path))
        except DataFormatError as e:
            logger.error(f"Failed to load dialogue file: {e}")
            return 0

        if path not in self._loaded_files:
            self._loaded_files.append(path)
        logger.info(f"Loaded {count} dialogues from {path}")
        return count

    def load_scene(self, scene_name: str) -> int:
        """Replace current entries with the scene's dialogue file."""
        if self.dialogue_dir is None:
            logger.warning("No dialogue directory configured")
            return 0

        path = self.dialogue_dir / f"{scene_name}.json"
        if not path.exists():
            logger.warning(f"No dialogue file found at {path}")
            return 0

        self.clear()
        return self.load_file(path)

    def load_directory(self, path: Path | str | None = None) -> int:
        """Load every ``*.json`` file in a directory."""
        directory = Path(path) if path else self.dialogue_dir
        if directory is None or not directory.exists():
            logger.warning(f"Dialogue directory not found: {directory}")
            return 0
        return sum(self.load_file(file) for file in sorted(directory.glob("*.json")))

    def reload(self) -> int:
        """Re-read every file loaded so far."""
        files = list(self._loaded_files)
        self.clear()
        return sum(self.load_file(file) for file in files)

    def clear(self) -> None:
        self._entries.clear()
        self._loaded_files.clear()

    # Queries

    def get(self, dialogue_id: str) -> Optional[DialogueEntry]:
        """Entry for an id; logs a warning and returns None when unknown."""
        entry = self._entries.get(dialogue_id)
        if entry is None:
            logger.warning(f"Dialogue ID not found: {dialogue_id}")
        return entry

    def require(self, dialogue_id: str) -> DialogueEntry:
        entry = self._entries.get(dialogue_id)
        if entry is None:
            raise LookupMiss("dialogue id", dialogue_id)
        return entry

    def ids(self) -> list[str]:
        return list(self._entries)

    def __iter__(self) -> Iterator[DialogueEntry]:
        return iter(self._entries.values())

    def __contains__(self, dialogue_id: object) -> bool:
        return dialogue_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)
