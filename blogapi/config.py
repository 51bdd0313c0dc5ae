"""Application configuration via environment variables."""

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    # App
    debug: bool = False
    # "development" shows unpublished drafts; anything else hides them
    environment: str = "production"

    # CORS
    cors_origins: list[str] = [
        "http://localhost:3000",
        "http://localhost:8000",
    ]

    # Post sources: one <slug>/index.md per immediate subdirectory
    posts_dir: str = "public/blog"
    reading_speed_wpm: int = 250
    escape_raw_html: bool = False
    max_concurrency: int = 8

    # JSON snapshot of the indexed collection (empty string disables it)
    posts_cache_path: str = "posts-cache.json"

    # Poll the posts directory and rebuild on change
    watch_posts: bool = False
    watch_interval: float = 1.0

    # Refresh API key (protects POST /api/blog/posts/refresh)
    refresh_api_key: str = ""

    # Site metadata
    site_title: str = "The Brownie Blog"
    site_author: str = "Christopher Brown"
    site_description: str = "A blog about front-end web development and my personal life."
    site_url: str = "https://chrisbrownie.dev"
    twitter_handle: str = ""
    github_handle: str = ""

    model_config = {"env_file": ".env", "extra": "ignore"}

    @field_validator("reading_speed_wpm", "max_concurrency")
    @classmethod
    def _positive(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("must be greater than zero")
        return value

    @property
    def include_drafts(self) -> bool:
        return self.environment == "development"


@lru_cache
def get_settings() -> Settings:
    return Settings()
