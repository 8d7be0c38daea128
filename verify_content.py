import sys
import logging
from pathlib import Path

# Add project root to path
sys.path.append(str(Path(__file__).parent))

from narrative.resources import ContentLoader
from lingua.dialogue.database import DialogueDatabase
from lingua.quiz.branching import QuizBook
from lingua.vocabulary.index import VocabularyIndex


def verify(content_dir: Path) -> list[str]:
    """Load all content; return a list of problems (empty when clean)."""
    logger = logging.getLogger("ContentVerification")
    loader = ContentLoader()
    problems = []

    index = VocabularyIndex.load(content_dir / "vocabulary.json", loader, strict=True)
    logger.info(f"Vocabulary: {len(index)} entries")

    database = DialogueDatabase(content_dir / "dialogue", loader)
    database.load_directory()
    logger.info(f"Dialogue: {len(database)} entries")
    if not len(database):
        problems.append("no dialogue entries loaded")

    for entry in database:
        if entry.is_empty:
            problems.append(f"dialogue {entry.id!r} has no lines")
        for token in entry.unlocks:
            if index.resolve_token(token) is None:
                problems.append(f"dialogue {entry.id!r} unlocks unknown word {token!r}")

    book = QuizBook(loader)
    quiz_path = content_dir / "quizzes.json"
    if quiz_path.exists():
        book.load_file(quiz_path)
    logger.info(f"Quizzes: {len(book)} valid")

    for entry in database:
        for line in entry.lines:
            if line.quiz and line.quiz not in book:
                problems.append(f"dialogue {entry.id!r} asks unknown or invalid quiz {line.quiz!r}")

    for quiz_id, key, target in book.missing_targets(database):
        problems.append(f"quiz {quiz_id!r} branch {key!r} targets unknown dialogue {target!r}")

    return problems


def main():
    logging.basicConfig(level=logging.INFO)
    logger = logging.getLogger("ContentVerification")

    content_dir = Path(sys.argv[1]) if len(sys.argv) > 1 else Path("content")

    try:
        problems = verify(content_dir)
    except Exception as e:
        logger.error(f"VERIFICATION FAILED: {e}")
        sys.exit(1)

    if problems:
        for problem in problems:
            logger.error(problem)
        logger.error(f"VERIFICATION FAILED: {len(problems)} problem(s) in {content_dir}")
        sys.exit(1)

    logger.info("VERIFICATION SUCCESSFUL: All content loaded and validated.")


if __name__ == "__main__":
    main()
