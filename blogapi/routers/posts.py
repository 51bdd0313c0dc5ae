"""Blog post endpoints."""

import logging

from fastapi import APIRouter, Header, HTTPException, Path, Query

from blogapi.config import get_settings
from blogapi.middleware import request_id_var
from blogapi.models.post import Post, PostList
from blogapi.services.ingestion.errors import SourceDirectoryError
from blogapi.services.post_index import PostIndex, get_post_index

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/posts", tags=["posts"])

SLUG_PATTERN = r"^[A-Za-z0-9][A-Za-z0-9._-]*$"


async def _ready_index() -> PostIndex:
    """Return the shared index, building it on first use."""
    index = get_post_index()
    try:
        await index.ensure_built()
    except SourceDirectoryError as exc:
        logger.error("Post index build failed: %s", exc)
        raise HTTPException(status_code=503, detail="Posts directory unavailable") from exc
    return index


@router.get("", response_model=PostList)
async def list_posts(
    limit: int | None = Query(
        default=None,
        ge=1,
        le=1000,
        description="Maximum number of posts to return (default: all)",
    ),
    offset: int = Query(default=0, ge=0, description="Number of posts to skip"),
):
    """Get every visible post, newest first."""
    index = await _ready_index()
    posts = index.list_posts()
    end = None if limit is None else offset + limit
    return PostList(posts=posts[offset:end], total=len(posts))


@router.post("/refresh")
async def refresh_posts(x_refresh_key: str = Header()):
    """Re-ingest the posts directory. Protected by API key."""
    settings = get_settings()
    if not settings.refresh_api_key or x_refresh_key != settings.refresh_api_key:
        raise HTTPException(status_code=403, detail="Invalid refresh key")

    logger.info("Post refresh requested [request %s]", request_id_var.get())
    index = get_post_index()
    try:
        result = await index.rebuild()
    except SourceDirectoryError as exc:
        logger.error("Post refresh failed: %s", exc)
        raise HTTPException(status_code=503, detail="Posts directory unavailable") from exc

    if settings.posts_cache_path:
        index.save_snapshot(settings.posts_cache_path)
    return {**result.to_dict(), "generation": index.generation}


@router.get("/{slug}", response_model=Post)
async def get_post(
    slug: str = Path(..., pattern=SLUG_PATTERN, max_length=200),
):
    """Get a single post by its slug."""
    index = await _ready_index()
    post = index.get_post(slug)
    if post is None:
        raise HTTPException(status_code=404, detail="Post not found")
    return post
