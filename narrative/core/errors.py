"""
Exception taxonomy for the narrative core.

Content errors are recovered locally by the loaders (log and skip). Only a
missing collaborator at session start is allowed to be fatal.
"""

from __future__ import annotations


class NarrativeError(Exception):
    """Base class for all narrative core errors."""


class DataFormatError(NarrativeError):
    """Malformed vocabulary, dialogue or quiz content."""

    def __init__(self, message: str, source: str | None = None):
        self.source = source
        if source:
            message = f"{source}: {message}"
        super().__init__(message)


class BranchTableError(DataFormatError):
    """A quiz branch table is missing branches or has unreachable ones."""


class LookupMiss(NarrativeError):
    """An id (dialogue, quiz, vocabulary token) did not resolve."""

    def __init__(self, kind: str, key: str):
        self.kind = kind
        self.key = key
        super().__init__(f"Unknown {kind}: {key!r}")


class InvalidInput(NarrativeError):
    """Caller input that is rejected without changing state."""


class EmptyEntryError(InvalidInput):
    """A dialogue entry with no lines was handed to the player."""

    def __init__(self, dialogue_id: str):
        self.dialogue_id = dialogue_id
        super().__init__(f"Dialogue entry {dialogue_id!r} has no lines")


class ConfigError(NarrativeError):
    """A configuration value has the wrong type or range."""


class MissingCollaboratorError(NarrativeError):
    """A required collaborator was not provided at session start."""
