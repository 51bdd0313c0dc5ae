"""Blog post data models."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict


class ReadingTime(BaseModel):
    """Word-count based reading estimate."""

    model_config = ConfigDict(frozen=True)

    text: str
    minutes: float
    words: int


class PostContent(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str
    # Left as None when absent; pages fall back to a site default at render time
    description: str | None = None
    html: str


class PostStats(BaseModel):
    model_config = ConfigDict(frozen=True)

    date: datetime
    published: bool = False
    time_to_read: ReadingTime


class PostRefContent(BaseModel):
    model_config = ConfigDict(frozen=True)

    title: str


class PostRef(BaseModel):
    """Reduced projection of a neighbouring post (slug + title only)."""

    model_config = ConfigDict(frozen=True)

    slug: str
    content: PostRefContent


class PostContext(BaseModel):
    model_config = ConfigDict(frozen=True)

    previous: PostRef | None = None
    next: PostRef | None = None


class Post(BaseModel):
    """A single ingested post.

    ``context`` is None until the collection has been ordered and linked.
    """

    model_config = ConfigDict(frozen=True)

    slug: str
    content: PostContent
    stats: PostStats
    context: PostContext | None = None

    def to_ref(self) -> PostRef:
        return PostRef(slug=self.slug, content=PostRefContent(title=self.content.title))


class PostList(BaseModel):
    """Post listing response."""

    posts: list[Post]
    total: int
