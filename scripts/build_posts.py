"""Build the post index from the command line.

Usage:
    python -m scripts.build_posts            # Build once and write the snapshot
    python -m scripts.build_posts --watch    # Build, then rebuild on every change
"""

import asyncio
import logging
import sys
from datetime import datetime

from blogapi.config import get_settings
from blogapi.services.ingestion.errors import SourceDirectoryError
from blogapi.services.ingestion.orchestrator import IngestionResult
from blogapi.services.post_index import PostIndex
from blogapi.services.watcher import ChangeEvent, watch_posts

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)


def _print_result(result: IngestionResult) -> None:
    print("\nBuild complete:")
    print(f"  Succeeded: {result.succeeded}")
    print(f"  Published: {len(result.posts)}")
    print(f"  Failed:    {result.failed}")
    for failure in result.failures:
        print(f"    {failure.slug}: {failure.error} — {failure.reason}")


async def build(index: PostIndex, cache_path: str) -> IngestionResult:
    result = await index.rebuild()
    if cache_path:
        index.save_snapshot(cache_path)
        print(f"Wrote {len(result.posts)} posts to {cache_path}")
    return result


async def watch(index: PostIndex, cache_path: str, interval: float) -> None:
    async def _on_change(events: list[ChangeEvent]) -> None:
        await build(index, cache_path)
        stamp = datetime.now().strftime("%H:%M:%S")
        for event in events:
            print(f"{event.slug} — {event.kind} at {stamp}")

    print(f"Watching {index.posts_dir} for changes (Ctrl+C to stop)...")
    await watch_posts(index.posts_dir, _on_change, interval=interval)


async def main(argv: list[str] | None = None) -> int:
    args = sys.argv[1:] if argv is None else argv
    watch_mode = "--watch" in args or "-w" in args

    settings = get_settings()
    index = PostIndex.from_settings(settings)

    print(f"Building posts from {settings.posts_dir}...")
    try:
        result = await build(index, settings.posts_cache_path)
    except SourceDirectoryError as e:
        print(f"ERROR: {e}")
        return 1
    _print_result(result)

    if watch_mode:
        await watch(index, settings.posts_cache_path, settings.watch_interval)
        return 0

    # Fail if there were failures and nothing built
    if result.failed > 0 and result.succeeded == 0:
        return 1

    return 0


if __name__ == "__main__":
    try:
        sys.exit(asyncio.run(main()))
    except KeyboardInterrupt:
        sys.exit(0)
