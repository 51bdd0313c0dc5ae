"""Ingestion error taxonomy.

Everything deriving from ``IngestionError`` is scoped to a single post and
is collected by the orchestrator instead of aborting the batch.
``SourceDirectoryError`` is the one batch-fatal condition.
"""


class IngestionError(Exception):
    """A single post could not be ingested."""

    def __init__(self, slug: str, message: str) -> None:
        super().__init__(f"{slug}: {message}" if slug else message)
        self.slug = slug
        self.reason = message


class MalformedFrontmatterError(IngestionError):
    """Frontmatter block is missing, not YAML, or fails schema validation."""


class InvalidDateError(IngestionError):
    """Frontmatter ``date`` is present but not a valid calendar date."""


class RenderError(IngestionError):
    """Markdown body could not be rendered to HTML."""


class PostReadError(IngestionError):
    """The post's index.md could not be read."""


class SourceDirectoryError(Exception):
    """The posts directory itself is missing or unreadable."""
