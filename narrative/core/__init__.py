"""
Core engine module.

Exports:
- Component: data-only record base
- CoreConfig: runtime configuration
- Countdown, Ticker: frame-driven timers
- EventBus, Event and the event enums
- The exception taxonomy
"""

from narrative.core.component import Component
from narrative.core.config import CoreConfig
from narrative.core.timer import Countdown, Ticker
from narrative.core.events import (
    EventBus,
    Event,
    DialogueEvent,
    QuizEvent,
    ProgressEvent,
    SaveEvent,
)
from narrative.core.errors import (
    NarrativeError,
    DataFormatError,
    BranchTableError,
    LookupMiss,
    InvalidInput,
    EmptyEntryError,
    ConfigError,
    MissingCollaboratorError,
)

__all__ = [
    "Component",
    "CoreConfig",
    "Countdown",
    "Ticker",
    # Events
    "EventBus",
    "Event",
    "DialogueEvent",
    "QuizEvent",
    "ProgressEvent",
    "SaveEvent",
    # Errors
    "NarrativeError",
    "DataFormatError",
    "BranchTableError",
    "LookupMiss",
    "InvalidInput",
    "EmptyEntryError",
    "ConfigError",
    "MissingCollaboratorError",
]
