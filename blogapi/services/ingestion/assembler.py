"""Builds one Post record from a slug and its raw markdown."""

from blogapi.models.post import Post, PostContent, PostStats
from blogapi.services.ingestion.frontmatter import extract_frontmatter
from blogapi.services.ingestion.reading_time import (
    DEFAULT_WORDS_PER_MINUTE,
    compute_reading_time,
)
from blogapi.services.ingestion.renderer import render_markdown


def assemble_post(
    slug: str,
    raw: str,
    *,
    words_per_minute: int = DEFAULT_WORDS_PER_MINUTE,
    escape_raw_html: bool = False,
) -> Post:
    """Extract, render, and measure a single post.

    The returned record has no ``context``; linkage is assigned by the
    indexer once the whole collection is known.

    Raises:
        IngestionError: Any per-post failure (see ``errors``), tagged with
            *slug*.
    """
    document = extract_frontmatter(raw, slug)
    frontmatter = document.frontmatter

    return Post(
        slug=slug,
        content=PostContent(
            title=frontmatter.title,
            description=frontmatter.description,
            html=render_markdown(document.body, slug, escape_raw_html=escape_raw_html),
        ),
        stats=PostStats(
            date=frontmatter.date,
            published=frontmatter.published,
            time_to_read=compute_reading_time(raw, words_per_minute),
        ),
    )
