"""Filesystem access for post sources.

Layout: ``<posts_dir>/<slug>/index.md``. The directory name is the slug.
"""

import logging
import os
import re

from blogapi.services.ingestion.errors import PostReadError, SourceDirectoryError

logger = logging.getLogger(__name__)

POST_FILENAME = "index.md"

_SAFE_SLUG_RE = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]*$")


def is_valid_slug(slug: str) -> bool:
    """True if *slug* is a safe single path segment (no dots-first, slashes, or traversal)."""
    return bool(slug) and _SAFE_SLUG_RE.match(slug) is not None


def list_slugs(posts_dir: str) -> list[str]:
    """Return the slugs of every post directory, sorted by name.

    Hidden directories and names that are not safe path segments are
    skipped.

    Raises:
        SourceDirectoryError: *posts_dir* is missing or unreadable.
    """
    try:
        with os.scandir(posts_dir) as entries:
            names = [entry.name for entry in entries if entry.is_dir()]
    except OSError as e:
        raise SourceDirectoryError(f"Cannot read posts directory {posts_dir}: {e}") from e

    slugs = []
    for name in sorted(names):
        if not is_valid_slug(name):
            logger.debug("Skipping non-post directory %s", name)
            continue
        slugs.append(name)
    return slugs


def post_path(posts_dir: str, slug: str) -> str:
    return os.path.join(posts_dir, slug, POST_FILENAME)


def read_raw_post(posts_dir: str, slug: str) -> str:
    """Read a post's markdown source.

    Raises:
        PostReadError: The file is missing, unreadable, or not UTF-8.
    """
    path = post_path(posts_dir, slug)
    try:
        with open(path, encoding="utf-8") as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise PostReadError(slug, f"cannot read {path}: {e}") from e
