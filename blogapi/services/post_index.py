"""Read-only post index shared by the API and the CLI.

The index holds one immutable ``PostCollection`` at a time. ``rebuild()``
ingests the posts directory from scratch and swaps the new collection in
with a single assignment, so readers always see either the old or the new
collection, never a mix.
"""

import asyncio
import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from blogapi.config import Settings, get_settings
from blogapi.models.post import Post
from blogapi.services.ingestion.indexer import organize_posts
from blogapi.services.ingestion.orchestrator import IngestionResult, run_ingestion
from blogapi.services.snapshot import load_snapshot, save_snapshot

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PostCollection:
    """An ordered, filtered, linked set of posts plus a slug lookup over the same view."""

    posts: tuple[Post, ...] = ()
    by_slug: Mapping[str, Post] = field(default_factory=lambda: MappingProxyType({}))
    generation: int = 0

    @classmethod
    def build(cls, posts: Iterable[Post], generation: int) -> "PostCollection":
        ordered = tuple(posts)
        return cls(
            posts=ordered,
            by_slug=MappingProxyType({post.slug: post for post in ordered}),
            generation=generation,
        )


class PostIndex:
    """Owns the current ``PostCollection`` and rebuilds it on demand.

    Usage::

        index = PostIndex("public/blog")
        await index.rebuild()
        index.list_posts()
        index.get_post("hello-world")  # Post or None
    """

    def __init__(
        self,
        posts_dir: str,
        *,
        words_per_minute: int = 250,
        include_drafts: bool = False,
        escape_raw_html: bool = False,
        max_concurrency: int = 8,
    ) -> None:
        self.posts_dir = posts_dir
        self.words_per_minute = words_per_minute
        self.include_drafts = include_drafts
        self.escape_raw_html = escape_raw_html
        self.max_concurrency = max_concurrency

        self._collection = PostCollection()
        self._last_result: IngestionResult | None = None
        # Each rebuild takes a ticket; only a newer ticket may replace the collection
        self._tickets = 0
        self._published_ticket = 0
        self._build_lock = asyncio.Lock()

    @classmethod
    def from_settings(cls, settings: Settings) -> "PostIndex":
        return cls(
            settings.posts_dir,
            words_per_minute=settings.reading_speed_wpm,
            include_drafts=settings.include_drafts,
            escape_raw_html=settings.escape_raw_html,
            max_concurrency=settings.max_concurrency,
        )

    @property
    def generation(self) -> int:
        """Number of collections published so far (0 = nothing loaded yet)."""
        return self._collection.generation

    @property
    def is_built(self) -> bool:
        return self._collection.generation > 0

    @property
    def last_result(self) -> IngestionResult | None:
        return self._last_result

    def list_posts(self) -> list[Post]:
        """All visible posts, newest first."""
        return list(self._collection.posts)

    def get_post(self, slug: str) -> Post | None:
        """The post with *slug* from the same view as ``list_posts``, or None."""
        return self._collection.by_slug.get(slug)

    def _publish(self, posts: Iterable[Post]) -> None:
        self._collection = PostCollection.build(posts, self._collection.generation + 1)

    async def rebuild(self) -> IngestionResult:
        """Re-ingest every post and publish the result.

        If another rebuild started later and has already published, this
        run's result is discarded.

        Raises:
            SourceDirectoryError: The posts directory is unreadable. The
                current collection stays in place.
        """
        self._tickets += 1
        ticket = self._tickets

        result = await run_ingestion(
            self.posts_dir,
            words_per_minute=self.words_per_minute,
            include_drafts=self.include_drafts,
            escape_raw_html=self.escape_raw_html,
            max_concurrency=self.max_concurrency,
        )

        if ticket < self._published_ticket:
            logger.info("Discarding superseded rebuild #%d", ticket)
            return result

        self._published_ticket = ticket
        self._last_result = result
        self._publish(result.posts)
        logger.info(
            "Published post collection generation %d (%d posts)",
            self.generation,
            len(result.posts),
        )
        return result

    async def ensure_built(self) -> None:
        """Build once if nothing has been published yet."""
        if self.is_built:
            return
        async with self._build_lock:
            if not self.is_built:
                await self.rebuild()

    async def startup_rebuild(self) -> IngestionResult:
        """Rebuild while holding the first-build lock.

        Requests arriving during the startup build either get the snapshot
        already published or wait in ``ensure_built`` for this run.
        """
        async with self._build_lock:
            return await self.rebuild()

    def load_snapshot(self, path: str) -> bool:
        """Warm-start from a saved snapshot if no rebuild has published yet.

        Snapshot posts are re-filtered and re-linked under this index's
        draft setting. Any later rebuild replaces them.
        """
        if self._published_ticket > 0:
            return False
        posts = load_snapshot(path)
        if posts is None:
            return False
        self._publish(organize_posts(posts, include_drafts=self.include_drafts))
        logger.info("Loaded %d posts from snapshot %s", len(self._collection.posts), path)
        return True

    def save_snapshot(self, path: str) -> None:
        save_snapshot(path, self.list_posts())


# Process-wide index, created on first use
_post_index: PostIndex | None = None


def get_post_index() -> PostIndex:
    """Return the shared post index (lazy singleton)."""
    global _post_index
    if _post_index is None:
        _post_index = PostIndex.from_settings(get_settings())
    return _post_index
