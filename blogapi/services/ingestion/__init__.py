"""Ingestion services for reading, rendering, and indexing markdown posts."""

from blogapi.services.ingestion.assembler import assemble_post
from blogapi.services.ingestion.errors import (
    IngestionError,
    InvalidDateError,
    MalformedFrontmatterError,
    PostReadError,
    RenderError,
    SourceDirectoryError,
)
from blogapi.services.ingestion.frontmatter import (
    ExtractedDocument,
    FrontMatter,
    extract_frontmatter,
)
from blogapi.services.ingestion.indexer import (
    filter_published,
    link_posts,
    organize_posts,
    sort_posts,
)
from blogapi.services.ingestion.orchestrator import (
    IngestionFailure,
    IngestionResult,
    run_ingestion,
)
from blogapi.services.ingestion.reading_time import compute_reading_time
from blogapi.services.ingestion.renderer import render_markdown

__all__ = [
    "ExtractedDocument",
    "FrontMatter",
    "IngestionError",
    "IngestionFailure",
    "IngestionResult",
    "InvalidDateError",
    "MalformedFrontmatterError",
    "PostReadError",
    "RenderError",
    "SourceDirectoryError",
    "assemble_post",
    "compute_reading_time",
    "extract_frontmatter",
    "filter_published",
    "link_posts",
    "organize_posts",
    "render_markdown",
    "run_ingestion",
    "sort_posts",
]
