"""Polling change detection for the posts directory.

Compares ``index.md`` modification times between scans and reports which
slugs were added, modified, or removed. Consumers react by rebuilding the
whole index; events are never applied to the collection piecemeal.
"""

import asyncio
import logging
import os
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import StrEnum

from blogapi.services.ingestion.errors import SourceDirectoryError
from blogapi.services.ingestion.sources import list_slugs, post_path

logger = logging.getLogger(__name__)


class ChangeKind(StrEnum):
    ADDED = "added"
    MODIFIED = "modified"
    REMOVED = "removed"


@dataclass(frozen=True)
class ChangeEvent:
    kind: ChangeKind
    slug: str


def scan_sources(posts_dir: str) -> dict[str, float]:
    """Map each slug with a readable index.md to its mtime."""
    mtimes: dict[str, float] = {}
    for slug in list_slugs(posts_dir):
        try:
            mtimes[slug] = os.path.getmtime(post_path(posts_dir, slug))
        except OSError:
            continue
    return mtimes


def diff_scans(before: dict[str, float], after: dict[str, float]) -> list[ChangeEvent]:
    """Events turning *before* into *after*, ordered by slug."""
    events = []
    for slug in sorted(before.keys() | after.keys()):
        if slug not in before:
            events.append(ChangeEvent(ChangeKind.ADDED, slug))
        elif slug not in after:
            events.append(ChangeEvent(ChangeKind.REMOVED, slug))
        elif before[slug] != after[slug]:
            events.append(ChangeEvent(ChangeKind.MODIFIED, slug))
    return events


async def watch_posts(
    posts_dir: str,
    on_change: Callable[[list[ChangeEvent]], Awaitable[None]],
    *,
    interval: float = 1.0,
    max_cycles: int | None = None,
) -> None:
    """Poll *posts_dir* every *interval* seconds and report changes.

    The first scan establishes the baseline and emits nothing. Errors from
    *on_change* are logged and polling continues. Runs until cancelled, or
    for *max_cycles* polls when given.
    """
    try:
        previous = await asyncio.to_thread(scan_sources, posts_dir)
    except SourceDirectoryError as e:
        logger.warning("Cannot watch posts directory: %s", e)
        previous = {}

    cycles = 0
    while max_cycles is None or cycles < max_cycles:
        await asyncio.sleep(interval)
        cycles += 1

        try:
            current = await asyncio.to_thread(scan_sources, posts_dir)
        except SourceDirectoryError as e:
            logger.warning("Cannot scan posts directory: %s", e)
            continue

        events = diff_scans(previous, current)
        previous = current
        if not events:
            continue

        logger.info(
            "Detected %d post change(s): %s",
            len(events),
            ", ".join(f"{e.kind} {e.slug}" for e in events),
        )
        try:
            await on_change(events)
        except Exception:
            logger.exception("Post change handler failed")
