"""
Narrative engine tier.

Generic building blocks for the language-learning adventure core:
typed events, data-only components, frame-driven timers, configuration,
the error taxonomy and schema-validated content loading.

Quick Start:
    from narrative import CoreConfig, EventBus

    config = CoreConfig(typing_interval=0.02)
    bus = EventBus()
"""

__version__ = "0.1.0"

from narrative.core import (
    Component,
    CoreConfig,
    Countdown,
    Ticker,
    EventBus,
    Event,
    DialogueEvent,
    QuizEvent,
    ProgressEvent,
    SaveEvent,
    NarrativeError,
    DataFormatError,
    BranchTableError,
    LookupMiss,
    InvalidInput,
    EmptyEntryError,
    ConfigError,
    MissingCollaboratorError,
)
from narrative.resources import ContentLoader

__all__ = [
    "Component",
    "CoreConfig",
    "Countdown",
    "Ticker",
    "EventBus",
    "Event",
    "DialogueEvent",
    "QuizEvent",
    "ProgressEvent",
    "SaveEvent",
    "NarrativeError",
    "DataFormatError",
    "BranchTableError",
    "LookupMiss",
    "InvalidInput",
    "EmptyEntryError",
    "ConfigError",
    "MissingCollaboratorError",
    "ContentLoader",
]
