"""
Save/Load system - GameState persistence in numbered slots.

Provides:
- One pretty-printed JSON file per slot
- Automatic slot selection (first empty slot, else the last slot)
- Checksum validation on load
- Slot summaries for the load-game screen
"""

from __future__ import annotations

import base64
import hashlib
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from pydantic import ValidationError

from narrative.core.config import CoreConfig
from narrative.core.events import EventBus, SaveEvent
from lingua.components.progress import GameState, SaveSlotSummary

logger = logging.getLogger(__name__)


class SaveManager:
    """
    Manages saving and loading GameState snapshots.

    Loading a slot that does not exist (or fails validation) returns None;
    it is never an error for the caller.

    Usage:
        saves = SaveManager(config, events=bus)
        slot = saves.save(progress.state)          # auto-select
        saves.save(progress.state, slot=3, scene="VillaOutside")
        state = saves.load(slot)
    """

    def __init__(
        self,
        config: Optional[CoreConfig] = None,
        events: Optional[EventBus] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self.config = config or CoreConfig()
        self.save_path = Path(self.config.save_path)
        self.save_path.mkdir(parents=True, exist_ok=True)
        self.events = events
        self._clock = clock

    def _get_slot_path(self, slot: int) -> Path:
        return self.save_path / f"save_slot{slot}.json"

    def exists(self, slot: int) -> bool:
        return self._get_slot_path(slot).exists()

    def choose_slot(self) -> int:
        """First empty slot in range; the last slot when all are full."""
        for slot in self.config.slot_range:
            if not self.exists(slot):
                return slot
        return self.config.last_slot

    def save(
        self,
        state: GameState,
        slot: Optional[int] = None,
        scene: Optional[str] = None,
    ) -> Optional[int]:
        """
        Write a state to a slot.

        Stamps the save time and slot (and the scene, when given) on the
        state before writing.

        Returns:
            The slot written, or None if the write failed
        """
        if slot is None:
            slot = self.choose_slot()

        state.last_saved = self._clock().isoformat(timespec="seconds")
        state.save_slot = slot
        if scene:
            state.current_scene = scene

        document = state.to_document()
        document['checksum'] = self._calculate_checksum(document)

        path = self._get_slot_path(slot)
        try:
            with open(path, 'w', encoding='utf-8') as f:
                json.dump(document, f, indent=2, ensure_ascii=False)
        except OSError as e:
            logger.error(f"Save to {path} failed: {e}")
            self._publish(SaveEvent.SAVE_FAILED, slot=slot, error=str(e))
            return None

        logger.info(f"Game saved to {path}")
        self._publish(SaveEvent.SAVE_COMPLETED, slot=slot)
        return slot

    def load(self, slot: int, validate: bool = True) -> Optional[GameState]:
        """
        Read the state stored in a slot.

        Returns:
            The GameState, or None if the slot is empty or unreadable
        """
        path = self._get_slot_path(slot)
        if not path.exists():
            logger.warning(f"No save file found at {path}")
            return None

        try:
            with open(path, 'r', encoding='utf-8') as f:
                document = json.load(f)

            if not isinstance(document, dict):
                logger.error(f"Save file {path} is not a JSON object")
                self._publish(SaveEvent.LOAD_FAILED, slot=slot, error="Save data must be an object")
                return None

            checksum = document.pop('checksum', None)
            if validate and checksum and self._calculate_checksum(document) != checksum:
                logger.error(f"Save file {path} corrupted: checksum mismatch")
                self._publish(SaveEvent.LOAD_FAILED, slot=slot, error="Checksum validation failed")
                return None

            state = GameState.model_validate(document)
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            logger.error(f"Load from {path} failed: {e}")
            self._publish(SaveEvent.LOAD_FAILED, slot=slot, error=str(e))
            return None

        logger.info(f"Game loaded from {path}")
        self._publish(SaveEvent.LOAD_COMPLETED, slot=slot)
        return state

    def delete(self, slot: int) -> bool:
        """Delete a slot file. Returns True if a file was removed."""
        path = self._get_slot_path(slot)
        if not path.exists():
            return False

        try:
            path.unlink()
        except OSError as e:
            logger.error(f"Delete of {path} failed: {e}")
            return False

        logger.info(f"Save file at {path} deleted.")
        self._publish(SaveEvent.DELETED, slot=slot)
        return True

    def list_slots(self) -> dict[int, Optional[SaveSlotSummary]]:
        """Summary per slot in range; None marks an empty or unreadable slot."""
        summaries: dict[int, Optional[SaveSlotSummary]] = {}
        for slot in self.config.slot_range:
            summaries[slot] = self._read_summary(slot)
        return summaries

    def latest_slot(self) -> Optional[int]:
        """The slot saved most recently, for "Continue"."""
        newest: Optional[SaveSlotSummary] = None
        for summary in self.list_slots().values():
            if summary is None or summary.saved_at is None:
                continue
            if newest is None or summary.saved_at > newest.saved_at:
                newest = summary
        return newest.slot if newest else None

    def validate_save(self, slot: int) -> bool:
        """True if the slot exists and its checksum (when present) matches."""
        path = self._get_slot_path(slot)
        if not path.exists():
            return False

        try:
            with open(path, 'r', encoding='utf-8') as f:
                document = json.load(f)
        except (OSError, json.JSONDecodeError):
            return False

        if not isinstance(document, dict):
            return False

        checksum = document.pop('checksum', None)
        if not checksum:
            return True
        return self._calculate_checksum(document) == checksum

    def _read_summary(self, slot: int) -> Optional[SaveSlotSummary]:
        path = self._get_slot_path(slot)
        if not path.exists():
            return None

        try:
            with open(path, 'r', encoding='utf-8') as f:
                document = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Unreadable save slot {slot}: {e}")
            return None

        if not isinstance(document, dict):
            logger.warning(f"Unreadable save slot {slot}: not a JSON object")
            return None

        return SaveSlotSummary(
            slot=slot,
            player_name=document.get('playerName', ''),
            scene=document.get('currentSceneId', ''),
            timestamp=document.get('lastSavedTimestamp', ''),
        )

    @staticmethod
    def _calculate_checksum(document: dict) -> str:
        payload = json.dumps(document, sort_keys=True, separators=(',', ':'))
        digest = hashlib.sha256(payload.encode('utf-8')).digest()
        return base64.b64encode(digest).decode('ascii')

    def _publish(self, event_type: SaveEvent, **data) -> None:
        if self.events:
            self.events.publish(event_type, **data)
