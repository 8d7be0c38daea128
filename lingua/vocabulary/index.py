"""
Vocabulary index - dictionary loading and form-to-key resolution.

The dictionary is a nested JSON object:

```
{
  "noun": {
    "dopis": {"forms": ["dopis", "dopise"], "journal": "dopis (m • sg.)",
              "translation": "letter", "guess": "letter?"}
  }
}
```

The index is immutable after loading. Unlock state is not stored here; it is
derived per query from the player's unlocked tokens.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Callable, Iterable, Iterator, Optional

from pydantic import ValidationError

from narrative.core.errors import DataFormatError, LookupMiss
from narrative.resources.content import ContentLoader
from lingua.components.vocabulary import VocabularyEntry

logger = logging.getLogger(__name__)


def normalize_form(token: str) -> str:
    """Lower-case and trim a surface form for lookup."""
    return token.strip().lower()


class VocabularyIndex:
    """
    Maps surface forms to dictionary entries.

    Usage:
        index = VocabularyIndex.load("content/translations.json")
        index.resolve_token("Dopise")   # -> "dopis"
        index.get("dopis").translation  # -> "letter"
    """

    def __init__(self, entries: Iterable[VocabularyEntry] = ()):
        self._entry_by_key: dict[str, VocabularyEntry] = {}
        self._key_by_form: dict[str, str] = {}

        for entry in entries:
            self._add(entry)

    def _add(self, entry: VocabularyEntry, strict: bool = False) -> bool:
        if entry.key in self._entry_by_key:
            message = f"duplicate vocabulary key {entry.key!r}"
            if strict:
                raise DataFormatError(message)
            logger.warning(f"Skipping {message}")
            return False

        conflicts = [
            form for form in entry.forms
            if self._key_by_form.get(form, entry.key) != entry.key
        ]
        if conflicts and strict:
            raise DataFormatError(
                f"forms {sorted(conflicts)} of {entry.key!r} already belong to other entries"
            )
        for form in conflicts:
            logger.warning(
                f"Form {form!r} of {entry.key!r} already maps to "
                f"{self._key_by_form[form]!r}; keeping the first"
            )

        self._entry_by_key[entry.key] = entry
        for form in entry.forms:
            self._key_by_form.setdefault(form, entry.key)
        return True

    # Loading

    @staticmethod
    def parse_entry(
        word_class: str,
        key: str,
        data: Any,
        loader: Optional[ContentLoader] = None,
    ) -> VocabularyEntry:
        """
        Build one entry from its dictionary record.

        Raises:
            DataFormatError: If translation or forms are missing
        """
        source = f"{word_class}/{key}"
        loader = loader or ContentLoader()
        loader.check(data, "vocabulary", source=source)

        forms = {normalize_form(form) for form in data["forms"]}
        forms.add(normalize_form(key))
        try:
            return VocabularyEntry(
                key=key,
                word_class=word_class,
                journal_label=data.get("journal") or "",
                translation=data["translation"],
                guess=data.get("guess") or None,
                forms=frozenset(forms),
            )
        except ValidationError as e:
            raise DataFormatError(str(e), source=source) from e

    @classmethod
    def from_dict(
        cls,
        data: Any,
        loader: Optional[ContentLoader] = None,
        strict: bool = False,
    ) -> VocabularyIndex:
        """
        Build an index from the nested dictionary object.

        Invalid entries are logged and skipped unless ``strict`` is set.

        Raises:
            DataFormatError: If the document is not a nested object, or in
                strict mode on the first invalid entry
        """
        if not isinstance(data, dict):
            raise DataFormatError("vocabulary root must be an object")

        loader = loader or ContentLoader()
        index = cls()
        skipped = 0

        for word_class, group in data.items():
            if not isinstance(group, dict):
                if strict:
                    raise DataFormatError(f"word class {word_class!r} must be an object")
                logger.error(f"Skipping word class {word_class!r}: not an object")
                continue

            for key, record in group.items():
                try:
                    entry = cls.parse_entry(word_class, key, record, loader)
                except DataFormatError as e:
                    if strict:
                        raise
                    logger.error(f"Skipping vocabulary entry: {e}")
                    skipped += 1
                    continue

                if not index._add(entry, strict=strict):
                    skipped += 1

        logger.info(f"Loaded {len(index)} vocabulary entries ({skipped} skipped)")
        return index

    @classmethod
    def load(
        cls,
        source: Path | str | dict,
        loader: Optional[ContentLoader] = None,
        strict: bool = False,
    ) -> VocabularyIndex:
        """Load from a JSON file path or an already parsed dictionary."""
        loader = loader or ContentLoader()
        if isinstance(source, dict):
            return cls.from_dict(source, loader, strict)
        return cls.from_dict(loader.read_json(source), loader, strict)

    # Queries

    def resolve_token(self, token: str) -> Optional[str]:
        """Resolve a surface form to its key, case-insensitively."""
        return self._key_by_form.get(normalize_form(token))

    def get(self, key: str) -> Optional[VocabularyEntry]:
        return self._entry_by_key.get(key)

    def require(self, key: str) -> VocabularyEntry:
        entry = self._entry_by_key.get(key)
        if entry is None:
            raise LookupMiss("vocabulary key", key)
        return entry

    def entry_for_token(self, token: str) -> Optional[VocabularyEntry]:
        key = self.resolve_token(token)
        return self._entry_by_key.get(key) if key else None

    def keys(self) -> list[str]:
        return list(self._entry_by_key)

    def entries(self) -> Iterator[VocabularyEntry]:
        return iter(self._entry_by_key.values())

    def unlocked_keys(self, tokens: Iterable[str]) -> list[str]:
        """
        Resolve unlock tokens (base keys or any form) to base keys.

        Order follows first appearance; unresolvable tokens are dropped.
        """
        keys: dict[str, None] = {}
        for token in tokens:
            key = self.resolve_token(token)
            if key is not None:
                keys.setdefault(key, None)
        return list(keys)

    def unlock_predicate(self, tokens: Iterable[str]) -> Callable[[str], bool]:
        """Snapshot of unlocked keys as an ``is_unlocked(key)`` callable."""
        unlocked = frozenset(self.unlocked_keys(tokens))
        return unlocked.__contains__

    def __contains__(self, key: object) -> bool:
        return key in self._entry_by_key

    def __len__(self) -> int:
        return len(self._entry_by_key)
