"""JSON snapshot of the indexed post collection.

Lets the API serve the last good build immediately on startup while a
fresh ingestion runs, and gives the CLI's build mode an artifact to write.
"""

import logging
import os
import tempfile

from pydantic import BaseModel, ValidationError

from blogapi.models.post import Post

logger = logging.getLogger(__name__)


class PostSnapshot(BaseModel):
    posts: list[Post]


def save_snapshot(path: str, posts: list[Post]) -> None:
    """Write *posts* to *path*, replacing any previous snapshot atomically."""
    payload = PostSnapshot(posts=posts).model_dump_json(indent=2)
    directory = os.path.dirname(os.path.abspath(path))
    fd, tmp_path = tempfile.mkstemp(dir=directory, prefix=".posts-", suffix=".json")
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(payload)
        os.replace(tmp_path, path)
    except BaseException:
        if os.path.exists(tmp_path):
            os.unlink(tmp_path)
        raise
    logger.info("Wrote %d posts to %s", len(posts), path)


def load_snapshot(path: str) -> list[Post] | None:
    """Return the posts stored at *path*, or None if there is no usable snapshot."""
    try:
        with open(path, encoding="utf-8") as f:
            content = f.read()
    except FileNotFoundError:
        return None
    except OSError as e:
        logger.warning("Could not read post snapshot %s: %s", path, e)
        return None

    try:
        return PostSnapshot.model_validate_json(content).posts
    except ValidationError as e:
        logger.warning("Ignoring invalid post snapshot %s: %s", path, e)
        return None
