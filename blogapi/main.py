"""
Brownie Blog API

Thin FastAPI backend serving markdown blog posts as indexed JSON records.
"""

import asyncio
import contextlib
import logging
import os
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Any

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from blogapi.config import get_settings
from blogapi.middleware import PostsGenerationMiddleware, RequestIDMiddleware
from blogapi.routers import posts, site
from blogapi.services.ingestion.errors import SourceDirectoryError
from blogapi.services.post_index import PostIndex, get_post_index
from blogapi.services.watcher import ChangeEvent, watch_posts

logger = logging.getLogger(__name__)

settings = get_settings()

VERSION = "0.1.0"


async def _rebuild_on_change(index: PostIndex, events: list[ChangeEvent]) -> None:
    await index.rebuild()
    cache_path = get_settings().posts_cache_path
    if cache_path:
        index.save_snapshot(cache_path)


async def _initial_build(index: PostIndex) -> None:
    try:
        await index.startup_rebuild()
    except SourceDirectoryError as e:
        logger.error("Initial post build failed: %s", e)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan: warm start, background build, optional watcher.

    A saved snapshot is published before the first request so the API can
    serve it while the fresh ingestion runs.
    """
    s = get_settings()
    index = get_post_index()

    if s.posts_cache_path:
        index.load_snapshot(s.posts_cache_path)
    app.state.initial_build = asyncio.create_task(_initial_build(index))

    watcher: asyncio.Task | None = None
    if s.watch_posts:
        watcher = asyncio.create_task(
            watch_posts(
                s.posts_dir,
                lambda events: _rebuild_on_change(index, events),
                interval=s.watch_interval,
            )
        )
        logger.info("Watching %s for post changes", s.posts_dir)

    yield

    for task in (app.state.initial_build, watcher):
        if task is None:
            continue
        task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task


app = FastAPI(
    title="Brownie Blog API",
    description="Markdown blog posts with reading time and previous/next navigation",
    version=VERSION,
    lifespan=lifespan,
)

# Response headers: request ID, post collection generation
app.add_middleware(RequestIDMiddleware)
app.add_middleware(PostsGenerationMiddleware)

# Browser clients read posts and trigger refreshes
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

app.include_router(posts.router, prefix="/api/blog")
app.include_router(site.router, prefix="/api/blog")


def _check_config() -> str:
    """Posts location and reading speed are configured."""
    s = get_settings()
    if s.posts_dir and s.reading_speed_wpm > 0:
        return "ok"
    return "fail"


def _check_posts() -> str:
    """The posts directory exists and the index has published at least once."""
    if not os.path.isdir(get_settings().posts_dir):
        return "fail"
    return "ok" if get_post_index().is_built else "pending"


def _run_health_checks() -> dict[str, Any]:
    """Run all health checks, returning the full response body."""
    checks = {"config": _check_config(), "posts": _check_posts()}
    failed = [k for k, v in checks.items() if v == "fail"]

    if failed:
        overall = "degraded"
        logger.warning("Health degraded, failing checks: %s", ", ".join(failed))
    else:
        overall = "ok"

    return {
        "status": overall,
        "service": "brownie-blog-api",
        "version": VERSION,
        "checks": checks,
    }


@app.get("/api/blog/health")
async def health_check() -> JSONResponse:
    """Health check verifying the posts source and index."""
    result = _run_health_checks()
    return JSONResponse(content=result, status_code=200)
