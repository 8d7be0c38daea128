"""
Save module - player progress and its persistence.

Provides:
- ProgressStore: idempotent completion/unlock/attempt bookkeeping
- SaveManager: numbered JSON save slots with checksum validation
"""

from lingua.save.progress import ProgressStore
from lingua.save.manager import SaveManager

__all__ = [
    "ProgressStore",
    "SaveManager",
]
