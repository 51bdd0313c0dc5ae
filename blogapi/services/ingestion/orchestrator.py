"""Post ingestion orchestrator — ties read, extract, render, measure, and index together."""

import asyncio
import logging
from dataclasses import dataclass, field

from blogapi.models.post import Post
from blogapi.services.ingestion.assembler import assemble_post
from blogapi.services.ingestion.errors import IngestionError
from blogapi.services.ingestion.indexer import organize_posts
from blogapi.services.ingestion.reading_time import DEFAULT_WORDS_PER_MINUTE
from blogapi.services.ingestion.sources import list_slugs, read_raw_post

logger = logging.getLogger(__name__)

# Cap on posts read and rendered at the same time
DEFAULT_MAX_CONCURRENCY = 8


@dataclass(frozen=True)
class IngestionFailure:
    """One post that could not be ingested."""

    slug: str
    error: str
    reason: str


@dataclass
class IngestionResult:
    """Outcome of an ingestion run.

    ``posts`` is the ordered, filtered, linked collection. ``succeeded``
    counts every post that ingested cleanly, including drafts hidden by the
    publication filter.
    """

    posts: list[Post]
    succeeded: int
    failures: list[IngestionFailure] = field(default_factory=list)

    @property
    def failed(self) -> int:
        return len(self.failures)

    @property
    def failed_slugs(self) -> list[str]:
        return [f.slug for f in self.failures]

    def to_dict(self) -> dict:
        return {
            "succeeded": self.succeeded,
            "failed": self.failed,
            "failed_slugs": self.failed_slugs,
            "published": len(self.posts),
        }


def ingest_post(
    posts_dir: str,
    slug: str,
    *,
    words_per_minute: int = DEFAULT_WORDS_PER_MINUTE,
    escape_raw_html: bool = False,
) -> Post:
    """Read and assemble a single post. Runs in a worker thread."""
    raw = read_raw_post(posts_dir, slug)
    return assemble_post(
        slug,
        raw,
        words_per_minute=words_per_minute,
        escape_raw_html=escape_raw_html,
    )


async def run_ingestion(
    posts_dir: str,
    *,
    words_per_minute: int = DEFAULT_WORDS_PER_MINUTE,
    include_drafts: bool = False,
    escape_raw_html: bool = False,
    max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
) -> IngestionResult:
    """Run a full ingestion pass over *posts_dir*: list -> read -> assemble -> index.

    Posts are processed in parallel; the gather below is the only point
    where the run waits for all of them. A failing post is logged and
    reported, never fatal to the batch.

    Args:
        posts_dir: Directory holding one ``<slug>/index.md`` per post.
        words_per_minute: Reading speed for reading-time estimates.
        include_drafts: Keep unpublished posts (development mode).
        escape_raw_html: Escape raw HTML in markdown instead of passing it through.
        max_concurrency: Maximum posts processed at once.

    Returns:
        The indexed collection plus success/failure counts.

    Raises:
        SourceDirectoryError: *posts_dir* itself cannot be read.
    """
    logger.info("Starting ingestion run for %s", posts_dir)
    slugs = list_slugs(posts_dir)
    logger.info("Found %d post directories", len(slugs))

    semaphore = asyncio.Semaphore(max_concurrency)

    async def _ingest(slug: str) -> Post | IngestionFailure:
        async with semaphore:
            try:
                return await asyncio.to_thread(
                    ingest_post,
                    posts_dir,
                    slug,
                    words_per_minute=words_per_minute,
                    escape_raw_html=escape_raw_html,
                )
            except IngestionError as e:
                logger.error("Failed to ingest '%s': %s", slug, e.reason)
                return IngestionFailure(slug=slug, error=type(e).__name__, reason=e.reason)

    # gather keeps results in slug order, which is the tie-break order for sorting
    results = await asyncio.gather(*[_ingest(slug) for slug in slugs])

    posts: list[Post] = []
    failures: list[IngestionFailure] = []
    for result in results:
        if isinstance(result, IngestionFailure):
            failures.append(result)
        else:
            posts.append(result)

    organized = organize_posts(posts, include_drafts=include_drafts)

    logger.info(
        "Ingestion complete: %d succeeded, %d failed, %d published",
        len(posts),
        len(failures),
        len(organized),
    )

    return IngestionResult(posts=organized, succeeded=len(posts), failures=failures)
