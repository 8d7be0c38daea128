"""
Text annotator - turns raw script lines into interactive markup.

Only text inside translatable spans (``<tr>...</tr>`` by default) is eligible
for linking, so narration and UI chrome never pick up false positives:

    "Tady je <tr>dopis</tr> pro vás."
    -> 'Tady je <link="dopis"><u>dopis</u></link> pro vás.'   (unlocked)
    -> 'Tady je <link="dopis_guess"><u>dopis</u></link> pro vás.'   (locked, has guess)
    -> 'Tady je dopis pro vás.'   (locked, no guess)
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Callable, Optional

from narrative.core.config import CoreConfig
from lingua.components.vocabulary import VocabularyEntry
from lingua.vocabulary.index import VocabularyIndex

logger = logging.getLogger(__name__)

# Markup tags are never tokenized; the typewriter reveals them whole
TAG_PATTERN = re.compile(r"<[^<>]*>")
WORD_PATTERN = re.compile(r"(?:[^\W\d_]|['’])+")
LINK_PATTERN = re.compile(r'<link="([^"]+)">(.*?)</link>', re.DOTALL)
APOSTROPHES = "'’"


@dataclass(frozen=True)
class Popup:
    """Hover payload for one link."""
    key: str
    text: str
    word_class: str = ""
    is_guess: bool = False

    def render(self) -> str:
        """Rich-text body for the popup widget."""
        if self.is_guess:
            return f"<i>{self.text}</i>\n(guess)"
        if self.word_class:
            return f"<b>{self.text}</b>\n{self.word_class}"
        return f"<b>{self.text}</b>"


class TextAnnotator:
    """
    Resolves words inside translatable spans and injects link markup.

    Usage:
        annotator = TextAnnotator(index, config)
        markup = annotator.annotate(line, progress.is_unlocked_in(index))
        popup = annotator.popup_for("dopis_guess")
    """

    def __init__(self, index: VocabularyIndex, config: Optional[CoreConfig] = None):
        self.index = index
        self.config = config or CoreConfig()

        tag = re.escape(self.config.translatable_tag)
        self._span_pattern = re.compile(rf"<{tag}>(.*?)</{tag}>", re.DOTALL)
        self._marker_pattern = re.compile(rf"</?{tag}>")
        self._max_phrase = max(
            (len(form.split()) for entry in index.entries() for form in entry.forms),
            default=1,
        )

    # Annotation

    def annotate(self, raw_line: str, is_unlocked: Callable[[str], bool]) -> str:
        """
        Produce interactive markup for one line.

        Text outside translatable spans passes through untouched; the span
        markers themselves are removed from the output.
        """
        if not self._marker_pattern.search(raw_line):
            return raw_line

        parts = []
        cursor = 0
        for match in self._span_pattern.finditer(raw_line):
            parts.append(self._strip_markers(raw_line[cursor:match.start()]))
            parts.append(self._annotate_span(match.group(1), is_unlocked))
            cursor = match.end()
        parts.append(self._strip_markers(raw_line[cursor:]))
        return "".join(parts)

    def _strip_markers(self, text: str) -> str:
        return self._marker_pattern.sub("", text)

    def _annotate_span(self, span: str, is_unlocked: Callable[[str], bool]) -> str:
        # Existing tags inside a span are copied verbatim
        parts = []
        cursor = 0
        for tag in TAG_PATTERN.finditer(span):
            parts.append(self._annotate_text(span[cursor:tag.start()], is_unlocked))
            parts.append(tag.group(0))
            cursor = tag.end()
        parts.append(self._annotate_text(span[cursor:], is_unlocked))
        return "".join(parts)

    def _annotate_text(self, text: str, is_unlocked: Callable[[str], bool]) -> str:
        runs = self._tokenize(text)
        out = []
        i = 0
        while i < len(runs):
            is_word, run = runs[i]
            if not is_word:
                out.append(run)
                i += 1
                continue

            consumed, key = self._match_at(runs, i)
            if key is None:
                out.append(run)
                i += 1
                continue

            surface = "".join(r for _, r in runs[i:i + consumed])
            out.append(self._render(surface, self.index.get(key), is_unlocked(key)))
            i += consumed
        return "".join(out)

    @staticmethod
    def _tokenize(text: str) -> list[tuple[bool, str]]:
        """Split into alternating (is_word, run) pieces; apostrophes edging a word are punctuation."""
        runs: list[tuple[bool, str]] = []
        cursor = 0
        for match in WORD_PATTERN.finditer(text):
            word = match.group(0)
            core = word.strip(APOSTROPHES)
            lead = len(word) - len(word.lstrip(APOSTROPHES))

            if match.start() > cursor:
                runs.append((False, text[cursor:match.start()]))
            if not core:
                runs.append((False, word))
            else:
                if lead:
                    runs.append((False, word[:lead]))
                runs.append((True, core))
                if lead + len(core) < len(word):
                    runs.append((False, word[lead + len(core):]))
            cursor = match.end()

        if cursor < len(text):
            runs.append((False, text[cursor:]))
        return TextAnnotator._merge_punctuation(runs)

    @staticmethod
    def _merge_punctuation(runs: list[tuple[bool, str]]) -> list[tuple[bool, str]]:
        merged: list[tuple[bool, str]] = []
        for is_word, run in runs:
            if merged and not is_word and not merged[-1][0]:
                merged[-1] = (False, merged[-1][1] + run)
            else:
                merged.append((is_word, run))
        return merged

    def _match_at(self, runs: list[tuple[bool, str]], start: int) -> tuple[int, Optional[str]]:
        """Longest phrase starting at ``start`` that resolves; returns (runs consumed, key)."""
        words = [runs[start][1]]
        candidates = [(1, words[0])]
        j = start + 1
        while len(words) < self._max_phrase and j + 1 < len(runs):
            separator = runs[j][1]
            if runs[j][0] or not separator.isspace() or not runs[j + 1][0]:
                break
            words.append(runs[j + 1][1])
            candidates.append((j + 2 - start, " ".join(words)))
            j += 2

        for consumed, phrase in reversed(candidates):
            key = self.index.resolve_token(phrase)
            if key is not None:
                return consumed, key

        logger.debug(f"No vocabulary entry for {words[0]!r}")
        return 1, None

    def _render(self, surface: str, entry: Optional[VocabularyEntry], unlocked: bool) -> str:
        if entry is None:
            return surface
        if unlocked and entry.translation:
            return self._link(entry.key, surface)
        if not unlocked and entry.has_guess:
            return self._link(entry.key + self.config.guess_suffix, surface)
        return surface

    @staticmethod
    def _link(link_id: str, surface: str) -> str:
        return f'<link="{link_id}"><u>{surface}</u></link>'

    # Popups

    def popup_for(self, link_id: str) -> Optional[Popup]:
        """
        Payload for a hovered link, or None when there is nothing to show.

        Guess links (``key`` + guess suffix) show the guess label; plain links
        show the final translation.
        """
        suffix = self.config.guess_suffix
        if link_id.endswith(suffix) and link_id[:-len(suffix)] in self.index:
            entry = self.index.get(link_id[:-len(suffix)])
            if entry.has_guess:
                return Popup(entry.key, entry.guess, entry.word_class, is_guess=True)
            return None

        entry = self.index.get(link_id)
        if entry is None or not entry.translation:
            logger.warning(f"No translation for link {link_id!r}")
            return None
        return Popup(entry.key, entry.translation, entry.word_class)

    @staticmethod
    def links(markup: str) -> list[tuple[str, str]]:
        """(link id, inner markup) pairs in reading order."""
        return [(m.group(1), m.group(2)) for m in LINK_PATTERN.finditer(markup)]
