"""
Vocabulary components - dictionary headwords and their surface forms.
"""

from __future__ import annotations

from typing import Optional

from pydantic import ConfigDict, field_validator

from narrative.core.component import Component


class VocabularyEntry(Component):
    """
    One dictionary headword.

    Attributes:
        key: Canonical dictionary id, e.g. "dopis"
        word_class: Tag string, e.g. "noun"
        journal_label: Label shown in the journal, e.g. "dopis (m • sg.)"
        translation: Final translation shown once unlocked
        guess: Optional pre-unlock meaning
        forms: Lower-cased surface strings resolving to this key (includes key)
    """
    model_config = ConfigDict(frozen=True)

    key: str
    word_class: str = ""
    journal_label: str = ""
    translation: str
    guess: Optional[str] = None
    forms: frozenset[str] = frozenset()

    @field_validator("forms", mode="after")
    @classmethod
    def _lowercase_forms(cls, forms: frozenset[str]) -> frozenset[str]:
        return frozenset(form.strip().lower() for form in forms if form.strip())

    @property
    def has_guess(self) -> bool:
        return bool(self.guess)

    @property
    def sort_label(self) -> str:
        """Journal label, falling back to the key."""
        return self.journal_label.strip() or self.key
