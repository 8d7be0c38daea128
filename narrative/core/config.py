"""
Runtime configuration for the narrative core.
"""

from __future__ import annotations

import inspect
import json
import logging
from pathlib import Path
from typing import Any

from narrative.core.errors import ConfigError

logger = logging.getLogger(__name__)


class CoreConfig:
    """Configuration for dialogue playback, quizzes and save slots."""

    def __init__(
        self,
        typing_interval: float = 0.03,
        advance_cooldown: float = 0.3,
        save_path: str = "saves",
        first_slot: int = 1,
        last_slot: int = 8,
        translatable_tag: str = "tr",
        guess_suffix: str = "_guess",
        answer_link_prefix: str = "a:",
        color_not_tried: str = "#4B4B4B",
        color_tried: str = "#7F0000",
        color_hover: str = "#000000",
        max_wrong_attempts: int = 2,
        journal_page_size: int = 8,
        mark_dialogue_complete: bool = True,
    ):
        self.typing_interval = typing_interval    # seconds per visible character
        self.advance_cooldown = advance_cooldown
        self.save_path = save_path
        self.first_slot = first_slot
        self.last_slot = last_slot
        self.translatable_tag = translatable_tag
        self.guess_suffix = guess_suffix
        self.answer_link_prefix = answer_link_prefix
        self.color_not_tried = color_not_tried
        self.color_tried = color_tried
        self.color_hover = color_hover
        self.max_wrong_attempts = max_wrong_attempts
        self.journal_page_size = journal_page_size
        self.mark_dialogue_complete = mark_dialogue_complete

        self._validate()

    def _validate(self) -> None:
        if self.typing_interval < 0 or self.advance_cooldown < 0:
            raise ConfigError("typing_interval and advance_cooldown must be >= 0")
        if self.first_slot < 1 or self.last_slot < self.first_slot:
            raise ConfigError(
                f"Invalid slot range {self.first_slot}..{self.last_slot}"
            )
        if self.max_wrong_attempts < 0:
            raise ConfigError("max_wrong_attempts must be >= 0")
        if self.journal_page_size < 1:
            raise ConfigError("journal_page_size must be >= 1")
        if not self.translatable_tag.isalnum():
            raise ConfigError(f"translatable_tag must be alphanumeric: {self.translatable_tag!r}")

    @property
    def slot_range(self) -> range:
        return range(self.first_slot, self.last_slot + 1)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> CoreConfig:
        """Build a config from a mapping, ignoring unknown keys."""
        defaults = cls()
        known = inspect.signature(cls.__init__).parameters
        kwargs = {}
        for key, value in data.items():
            if key == 'self' or key not in known:
                logger.warning(f"Unknown config key ignored: {key}")
                continue

            expected = type(getattr(defaults, key))
            if expected is float and isinstance(value, int) and not isinstance(value, bool):
                value = float(value)
            if not isinstance(value, expected) or (expected is int and isinstance(value, bool)):
                raise ConfigError(
                    f"Config key {key!r} expects {expected.__name__}, got {type(value).__name__}"
                )
            kwargs[key] = value

        return cls(**kwargs)

    @classmethod
    def from_file(cls, path: str | Path) -> CoreConfig:
        """Load a config from a JSON file."""
        path = Path(path)
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Cannot read config {path}: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError(f"Config {path} must contain a JSON object")
        return cls.from_dict(data)
