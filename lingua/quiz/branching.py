"""
Quiz branching - declarative (dialogue id, choice key) -> next dialogue id.

Choice keys are answer indices ("0", "1", ...) for multiple choice and the
outcomes "correct", "wrong" and "failed" for fill-in-blank. Tables are
validated when loaded so the dialogue graph cannot dead-end:

- every multiple-choice answer has a branch, and no branch points at an
  answer that does not exist
- every fill-in-blank quiz can reach both terminal outcomes
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterator, Optional

from pydantic import ValidationError

from narrative.core.errors import BranchTableError, DataFormatError, LookupMiss
from narrative.resources.content import ContentLoader
from lingua.components.quiz import QuizDefinition, QuizKind, QuizOutcome

if TYPE_CHECKING:
    from lingua.dialogue.database import DialogueDatabase

logger = logging.getLogger(__name__)


def validate_definition(definition: QuizDefinition, max_wrong_attempts: int = 2) -> None:
    """
    Check that a quiz's branches cover every reachable choice and nothing else.

    Raises:
        BranchTableError: On a missing or unreachable branch
    """
    quiz_id = definition.dialogue_id
    keys = set(definition.branches)

    if definition.kind == QuizKind.MULTIPLE_CHOICE:
        if not definition.answers:
            raise BranchTableError("multiple choice quiz has no answers", source=quiz_id)
        expected = {str(i) for i in range(len(definition.answers))}
    else:
        if not definition.accepted:
            raise BranchTableError("fill-in-blank quiz has no accepted answers", source=quiz_id)
        expected = {QuizOutcome.CORRECT.value, QuizOutcome.FAILED.value}
        if max_wrong_attempts > 0:
            expected.add(QuizOutcome.WRONG.value)

    missing = expected - keys
    if missing:
        raise BranchTableError(f"missing branches for {sorted(missing)}", source=quiz_id)

    unreachable = keys - expected
    if unreachable:
        raise BranchTableError(f"unreachable branches {sorted(unreachable)}", source=quiz_id)

    stray_unlocks = set(definition.unlocks) - keys
    if stray_unlocks:
        raise BranchTableError(f"unlocks for unknown branches {sorted(stray_unlocks)}", source=quiz_id)


class BranchTable:
    """
    Lookup of next dialogue ids.

    Usage:
        table = BranchTable()
        table.add("base.letterman.quiz", {"0": "q_wrong1", "1": "q_correct1"})
        table.resolve("base.letterman.quiz", "1")  # -> "q_correct1"
    """

    validate = staticmethod(validate_definition)

    def __init__(self):
        self._routes: dict[str, dict[str, str]] = {}

    def add(self, dialogue_id: str, branches: dict[str, str]) -> None:
        self._routes[dialogue_id] = dict(branches)

    def resolve(self, dialogue_id: str, choice_key: str) -> Optional[str]:
        """Next dialogue id, or None (logged) when the table has no such branch."""
        target = self._routes.get(dialogue_id, {}).get(choice_key)
        if target is None:
            logger.warning(f"No branch for {dialogue_id!r} choice {choice_key!r}")
        return target

    def require(self, dialogue_id: str, choice_key: str) -> str:
        target = self._routes.get(dialogue_id, {}).get(choice_key)
        if target is None:
            raise LookupMiss("quiz branch", f"{dialogue_id}:{choice_key}")
        return target

    def routes(self, dialogue_id: str) -> dict[str, str]:
        return dict(self._routes.get(dialogue_id, {}))

    def targets(self) -> Iterator[tuple[str, str, str]]:
        """(dialogue id, choice key, target) for every branch."""
        for dialogue_id, branches in self._routes.items():
            for key, target in branches.items():
                yield dialogue_id, key, target

    def __contains__(self, dialogue_id: object) -> bool:
        return dialogue_id in self._routes


class QuizBook:
    """
    Quiz definitions and their branch table.

    File format:

    ```
    {
      "quizzes": [
        {"id": "base.letterman.quiz", "kind": "multiple_choice",
         "answers": ["Dopis", "Letter", "Balík", "Pohled"],
         "branches": {"0": "...q_wrong1", "1": "...q_correct1", "2": "...q_wrong1", "3": "...q_wrong1"},
         "unlocks": {"1": ["dopis"]}},
        {"id": "villaoutside.teta.fill_in_blank", "kind": "fill_in_blank",
         "accepted": ["teta"],
         "branches": {"correct": "...", "wrong": "...", "failed": "..."}}
      ]
    }
    ```
    """

    def __init__(self, loader: Optional[ContentLoader] = None, max_wrong_attempts: int = 2):
        self.loader = loader or ContentLoader()
        self.max_wrong_attempts = max_wrong_attempts
        self.table = BranchTable()
        self._quizzes: dict[str, QuizDefinition] = {}

    def add(self, definition: QuizDefinition) -> None:
        """
        Register a quiz.

        Raises:
            BranchTableError: If its branch table is invalid
        """
        self.table.validate(definition, self.max_wrong_attempts)
        self._quizzes[definition.dialogue_id] = definition
        self.table.add(definition.dialogue_id, definition.branches)

    def load_records(self, records: Any, source: str = "") -> int:
        """Add quizzes from a parsed document; invalid ones are logged and skipped."""
        if isinstance(records, dict):
            records = records.get("quizzes")
        if not isinstance(records, list):
            raise DataFormatError("expected a list of quizzes", source=source or None)

        count = 0
        for record in self.loader.iter_valid(records, "quiz", source):
            try:
                self.add(QuizDefinition.model_validate(record))
            except BranchTableError as e:
                logger.error(f"Skipping quiz: {e}")
                continue
            except ValidationError as e:
                logger.warning(f"Skipping quiz in {source}: {e}")
                continue
            count += 1
        return count

    def load_file(self, path: Path | str) -> int:
        path = Path(path)
        try:
            count = self.load_records(self.loader.read_json(path), source=str(path))
        except DataFormatError as e:
            logger.error(f"Failed to load quiz file: {e}")
            return 0

        logger.info(f"Loaded {count} quizzes from {path}")
        return count

    def get(self, quiz_id: str) -> Optional[QuizDefinition]:
        quiz = self._quizzes.get(quiz_id)
        if quiz is None:
            logger.warning(f"Quiz ID not found: {quiz_id}")
        return quiz

    def unlocks_for(self, quiz_id: str, choice_key: str) -> list[str]:
        quiz = self._quizzes.get(quiz_id)
        return list(quiz.unlocks.get(choice_key, [])) if quiz else []

    def missing_targets(self, database: DialogueDatabase) -> list[tuple[str, str, str]]:
        """Branches whose target dialogue id is not in ``database``."""
        return [
            (quiz_id, key, target)
            for quiz_id, key, target in self.table.targets()
            if target not in database
        ]

    def ids(self) -> list[str]:
        return list(self._quizzes)

    def __contains__(self, quiz_id: object) -> bool:
        return quiz_id in self._quizzes

    def __len__(self) -> int:
        return len(self._quizzes)
