"""Ordering, publication filtering, and previous/next linkage.

Every function returns a new list of new records; inputs are never mutated.
Linkage is always recomputed over the whole view being published, since one
added or removed post can shift the neighbours of posts far from it.
"""

from collections.abc import Iterable

from blogapi.models.post import Post, PostContext


def sort_posts(posts: Iterable[Post]) -> list[Post]:
    """Newest first. Posts sharing a date keep their incoming order."""
    return sorted(posts, key=lambda post: post.stats.date, reverse=True)


def filter_published(posts: Iterable[Post], *, include_drafts: bool) -> list[Post]:
    """Drop unpublished posts unless *include_drafts* (development mode) is set."""
    if include_drafts:
        return list(posts)
    return [post for post in posts if post.stats.published]


def link_posts(posts: list[Post]) -> list[Post]:
    """Attach previous/next references to each post's adjacent neighbours."""
    last = len(posts) - 1
    linked = []
    for i, post in enumerate(posts):
        context = PostContext(
            previous=posts[i - 1].to_ref() if i > 0 else None,
            next=posts[i + 1].to_ref() if i < last else None,
        )
        linked.append(post.model_copy(update={"context": context}))
    return linked


def organize_posts(posts: Iterable[Post], *, include_drafts: bool) -> list[Post]:
    """Sort, filter, then link.

    Filtering before linking keeps the previous/next chain inside the
    published view, so no post links to a draft that readers cannot open.
    """
    ordered = sort_posts(posts)
    visible = filter_published(ordered, include_drafts=include_drafts)
    return link_posts(visible)
