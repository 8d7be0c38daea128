"""Static content loading."""

from narrative.resources.content import ContentLoader, SCHEMA_DIR

__all__ = ["ContentLoader", "SCHEMA_DIR"]
