"""
Content loader.

Reads static JSON content (vocabulary, dialogue, quizzes) and validates each
record against the bundled JSON schemas. Invalid records are logged and
skipped so one bad line of script never takes the game down.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Iterable, Iterator

import jsonschema

from narrative.core.errors import DataFormatError

logger = logging.getLogger(__name__)

SCHEMA_DIR = Path(__file__).parent / "schemas"


class ContentLoader:
    """
    Schema-validating reader for content files.

    Usage:
        loader = ContentLoader()
        data = loader.read_json("content/dialogue/Base.json")
        for record in loader.iter_valid(data["entries"], "dialogue", source="Base.json"):
            ...
    """

    def __init__(self, schema_dir: Path | str | None = None):
        self._schema_dir = Path(schema_dir) if schema_dir else SCHEMA_DIR
        self._schemas: dict[str, Any] = {}
        self._load_schemas()

    def _load_schemas(self) -> None:
        if not self._schema_dir.exists():
            logger.warning(f"Schema directory not found: {self._schema_dir}")
            return

        for schema_file in self._schema_dir.glob("*.schema.json"):
            name = schema_file.name[:-len(".schema.json")]
            try:
                with open(schema_file, 'r', encoding='utf-8') as f:
                    self._schemas[name] = json.load(f)
            except (OSError, json.JSONDecodeError) as e:
                logger.error(f"Failed to load schema {schema_file}: {e}")

    def has_schema(self, name: str) -> bool:
        return name in self._schemas

    def read_json(self, path: Path | str) -> Any:
        """
        Read one JSON document.

        Raises:
            DataFormatError: If the file is missing or not valid JSON
        """
        path = Path(path)
        try:
            with open(path, 'r', encoding='utf-8') as f:
                return json.load(f)
        except FileNotFoundError as e:
            raise DataFormatError("file not found", source=str(path)) from e
        except json.JSONDecodeError as e:
            raise DataFormatError(f"invalid JSON ({e.msg}, line {e.lineno})", source=str(path)) from e
        except OSError as e:
            raise DataFormatError(str(e), source=str(path)) from e

    def check(self, record: Any, schema_name: str, source: str = "") -> None:
        """
        Validate a record.

        Raises:
            DataFormatError: If the record violates the schema
        """
        schema = self._schemas.get(schema_name)
        if schema is None:
            raise DataFormatError(f"no schema named {schema_name!r}", source=source or None)

        try:
            jsonschema.validate(instance=record, schema=schema)
        except jsonschema.ValidationError as e:
            location = "/".join(str(p) for p in e.absolute_path)
            detail = f"{e.message} at /{location}" if location else e.message
            raise DataFormatError(detail, source=source or None) from e

    def is_valid(self, record: Any, schema_name: str, source: str = "") -> bool:
        """Validate a record, logging instead of raising."""
        try:
            self.check(record, schema_name, source)
        except DataFormatError as e:
            logger.warning(f"Skipping invalid {schema_name} record: {e}")
            return False
        return True

    def iter_valid(
        self,
        records: Iterable[Any],
        schema_name: str,
        source: str = "",
    ) -> Iterator[Any]:
        """Yield only the records that pass validation."""
        for record in records:
            if self.is_valid(record, schema_name, source):
                yield record
