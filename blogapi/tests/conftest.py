"""Shared fixtures for blog API tests."""

from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def _reset_global_state():
    """Reset all module-level singletons and caches between tests."""
    yield

    # 1. Settings LRU cache
    from blogapi.config import get_settings

    get_settings.cache_clear()

    # 2. Post index singleton
    import blogapi.services.post_index as index_mod

    index_mod._post_index = None


def write_post(
    posts_dir: Path,
    slug: str,
    *,
    title: str | None = None,
    date: str = "2020-01-01",
    published: bool | None = True,
    description: str | None = None,
    body: str = "Hello world.",
) -> Path:
    """Create ``<posts_dir>/<slug>/index.md`` with frontmatter and *body*."""
    lines = ["---", f"title: {title or slug.title()}", f"date: {date}"]
    if published is not None:
        lines.append(f"published: {'true' if published else 'false'}")
    if description is not None:
        lines.append(f"description: {description}")
    lines.append("---")
    text = "\n".join(lines) + "\n" + body + "\n"

    post_dir = posts_dir / slug
    post_dir.mkdir(parents=True, exist_ok=True)
    path = post_dir / "index.md"
    path.write_text(text, encoding="utf-8")
    return path


@pytest.fixture
def posts_dir(tmp_path):
    """An empty posts directory."""
    directory = tmp_path / "blog"
    directory.mkdir()
    return directory


@pytest.fixture
def make_post(posts_dir):
    """Write a post into the test posts directory: make_post(slug, **fields)."""

    def _make(slug: str, **fields) -> Path:
        return write_post(posts_dir, slug, **fields)

    return _make


@pytest.fixture
def scenario_posts(posts_dir):
    """Three posts: a and c published, b a newer draft."""
    write_post(posts_dir, "a", date="2020-01-01", published=True)
    write_post(posts_dir, "b", date="2020-06-01", published=False)
    write_post(posts_dir, "c", date="2020-03-01", published=True)
    return posts_dir


@pytest.fixture
def mock_settings(monkeypatch, posts_dir, tmp_path):
    """Provide a Settings object with safe test defaults."""
    from blogapi.config import Settings, get_settings

    test_settings = Settings(
        environment="production",
        posts_dir=str(posts_dir),
        posts_cache_path=str(tmp_path / "posts-cache.json"),
        refresh_api_key="test-refresh-key",
        site_title="Test Blog",
        site_author="Test Author",
        site_description="A test blog",
        site_url="https://blog.test",
        twitter_handle="testbird",
        github_handle="testhub",
    )

    get_settings.cache_clear()
    monkeypatch.setattr("blogapi.config.get_settings", lambda: test_settings)

    # Patch get_settings in all modules that import it directly
    # (from blogapi.config import get_settings creates a local binding that
    # the blogapi.config monkeypatch above does not affect)
    for mod_path in [
        "blogapi.main",
        "blogapi.services.post_index",
        "blogapi.routers.posts",
        "blogapi.routers.site",
    ]:
        monkeypatch.setattr(f"{mod_path}.get_settings", lambda: test_settings)

    return test_settings
