"""
Vocabulary journal - the player's list of learned words.

Two orderings:
- Chronological: the order words were unlocked
- Alphabetical: A-Z by journal label
Rows are paged for display.
"""

from __future__ import annotations

from enum import Enum, auto
from typing import Iterable, Optional

from narrative.core.config import CoreConfig
from lingua.components.vocabulary import VocabularyEntry
from lingua.vocabulary.index import VocabularyIndex


class JournalMode(Enum):
    CHRONOLOGICAL = auto()
    ALPHABETICAL = auto()


def format_row(entry: VocabularyEntry) -> str:
    return f"{entry.journal_label}[{entry.word_class}]  -  {entry.translation}"


class Journal:
    """
    Paged view over unlocked vocabulary.

    Usage:
        journal = Journal(index, config)
        journal.rebuild(progress.unlocked_words)
        journal.page_rows()
        journal.toggle_mode()
    """

    def __init__(self, index: VocabularyIndex, config: Optional[CoreConfig] = None):
        self.index = index
        self.page_size = (config or CoreConfig()).journal_page_size
        self.mode = JournalMode.CHRONOLOGICAL
        self.current_page = 0

        self._chronological: list[VocabularyEntry] = []
        self._alphabetical: list[VocabularyEntry] = []

    def rebuild(self, unlocked_tokens: Iterable[str]) -> None:
        """Re-derive both orderings from the unlocked tokens (forms fold into their key)."""
        self._chronological = [
            self.index.get(key) for key in self.index.unlocked_keys(unlocked_tokens)
        ]
        self._alphabetical = sorted(
            self._chronological, key=lambda entry: entry.sort_label.casefold()
        )
        self.current_page = min(self.current_page, self.max_page)

    @property
    def entries(self) -> list[VocabularyEntry]:
        if self.mode == JournalMode.CHRONOLOGICAL:
            return list(self._chronological)
        return list(self._alphabetical)

    @property
    def max_page(self) -> int:
        return max(0, (len(self._chronological) - 1) // self.page_size)

    @property
    def can_page_up(self) -> bool:
        return self.current_page > 0

    @property
    def can_page_down(self) -> bool:
        return self.current_page < self.max_page

    def page_up(self) -> None:
        if self.can_page_up:
            self.current_page -= 1

    def page_down(self) -> None:
        if self.can_page_down:
            self.current_page += 1

    def toggle_mode(self) -> JournalMode:
        """Switch ordering and return to the first page."""
        if self.mode == JournalMode.CHRONOLOGICAL:
            self.mode = JournalMode.ALPHABETICAL
        else:
            self.mode = JournalMode.CHRONOLOGICAL
        self.current_page = 0
        return self.mode

    def page(self, number: int) -> list[VocabularyEntry]:
        """Entries on a page; out-of-range pages are clamped."""
        number = min(max(number, 0), self.max_page)
        start = number * self.page_size
        return self.entries[start:start + self.page_size]

    def page_rows(self, number: Optional[int] = None) -> list[str]:
        if number is None:
            number = self.current_page
        return [format_row(entry) for entry in self.page(number)]

    def __len__(self) -> int:
        return len(self._chronological)
