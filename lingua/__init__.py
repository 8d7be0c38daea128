"""
Lingua framework tier.

Language-learning narrative systems built on the narrative engine tier:
- Components (data-only pydantic models)
- Vocabulary (dictionary, annotation, journal)
- Dialogue (database, typewriter playback, speakers)
- Quiz (branch tables, multiple choice, fill-in-blank)
- Save (progress store, save slots)
- Session (wires everything together)
"""

from lingua.session import NarrativeSession

__all__ = [
    "NarrativeSession",
]
