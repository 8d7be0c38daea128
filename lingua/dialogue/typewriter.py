"""
Typewriter reveal of rich-text markup.

Visible characters appear one at a time while tags (``<link=...>``, ``<u>``,
``<color=...>``) are emitted whole, so links and underlines render correctly
mid-type. A ``<`` with no closing ``>`` counts as a visible character.
"""

from __future__ import annotations

from functools import lru_cache

from lingua.vocabulary.annotator import TAG_PATTERN


@lru_cache(maxsize=64)
def split_markup(markup: str) -> tuple[tuple[bool, str], ...]:
    """Split into (is_tag, piece) units: whole tags or single characters."""
    units: list[tuple[bool, str]] = []
    cursor = 0
    for tag in TAG_PATTERN.finditer(markup):
        units.extend((False, ch) for ch in markup[cursor:tag.start()])
        units.append((True, tag.group(0)))
        cursor = tag.end()
    units.extend((False, ch) for ch in markup[cursor:])
    return tuple(units)


def visible_length(markup: str) -> int:
    return sum(1 for is_tag, _ in split_markup(markup) if not is_tag)


def reveal(markup: str, count: int) -> str:
    """
    Markup as displayed after ``count`` visible characters.

    Tags before the ``count``-th character are included, so leading tags
    show up at ``count == 0``. Trailing tags are added once every character
    is visible, so a full reveal equals the input exactly.
    """
    if count >= visible_length(markup):
        return markup

    out = []
    shown = 0
    for is_tag, piece in split_markup(markup):
        if not is_tag:
            if shown == count:
                break
            shown += 1
        out.append(piece)
    return "".join(out)
