"""
Component base class for data-only records.

Components are pure data containers. Logic lives in the stores, players and
resolvers that operate on them, which keeps serialization trivial and tests
simple.

Usage:
    class VocabularyEntry(Component):
        key: str
        translation: str
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Component(BaseModel):
    """
    Base class for all data records.

    Pydantic provides:
    - Validation of loaded content
    - JSON serialization for save slots
    - Default values
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        validate_assignment=True,
        # Content files may carry authoring-only fields
        extra='ignore',
        populate_by_name=True,
    )

    def clone(self) -> Component:
        """Create a deep copy of this component."""
        return self.model_copy(deep=True)
