"""Frontmatter extraction — splits a post into typed metadata and markdown body.

A post starts with a ``---`` delimited YAML block::

    ---
    title: Hello
    date: 2020-01-01
    published: true
    ---
    Body text...

The block is validated against ``FrontMatter`` and stripped from the body so
it never reaches the renderer.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime, timezone
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from blogapi.services.ingestion.errors import (
    InvalidDateError,
    MalformedFrontmatterError,
)

_FRONTMATTER_RE = re.compile(
    r"\A\ufeff?---[ \t]*\r?\n(.*?)\r?\n---[ \t]*(?:\r?\n|\Z)",
    re.DOTALL,
)

_TIMESTAMP_TAG = "tag:yaml.org,2002:timestamp"


class _FrontmatterLoader(yaml.SafeLoader):
    """SafeLoader that leaves timestamps as strings.

    PyYAML raises a bare ValueError for out-of-range dates such as
    2020-13-45; keeping them as strings lets ``FrontMatter`` report them as
    date errors instead of YAML errors.
    """


_FrontmatterLoader.yaml_implicit_resolvers = {
    first_char: [
        (tag, regexp) for tag, regexp in resolvers if tag != _TIMESTAMP_TAG
    ]
    for first_char, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}


def parse_post_date(value: Any) -> datetime:
    """Coerce a frontmatter date value into a UTC-aware datetime.

    Accepts ``date``/``datetime`` objects and ISO-8601 strings. Naive values
    are taken to be UTC.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, date):
        parsed = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        try:
            parsed = datetime.fromisoformat(value.strip())
        except ValueError as e:
            raise ValueError(f"not a valid calendar date: {value!r}") from e
    else:
        raise ValueError(f"not a valid calendar date: {value!r}")

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


class FrontMatter(BaseModel):
    """Validated frontmatter fields. Unknown keys are ignored."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    title: str = Field(..., min_length=1)
    description: str | None = None
    date: datetime
    published: bool = False

    @field_validator("title", "description", mode="before")
    @classmethod
    def _scalar_to_text(cls, value: Any) -> Any:
        # Unquoted "title: 1984" or "title: yes" loads as int/bool
        if isinstance(value, bool):
            return str(value).lower()
        if isinstance(value, (int, float)):
            return str(value)
        return value

    @field_validator("date", mode="before")
    @classmethod
    def _coerce_date(cls, value: Any) -> datetime:
        return parse_post_date(value)

    @field_validator("published", mode="before")
    @classmethod
    def _empty_published(cls, value: Any) -> Any:
        # "published:" with no value loads as None
        return False if value is None else value


@dataclass(frozen=True)
class ExtractedDocument:
    frontmatter: FrontMatter
    body: str


def _describe(errors: list[dict[str, Any]]) -> str:
    parts = []
    for err in errors:
        field = ".".join(str(p) for p in err["loc"]) or "frontmatter"
        parts.append(f"{field}: {err['msg']}")
    return "; ".join(parts)


def extract_frontmatter(raw: str, slug: str = "") -> ExtractedDocument:
    """Split *raw* into validated frontmatter and the remaining markdown body.

    Raises:
        MalformedFrontmatterError: No leading block, invalid YAML, not a
            mapping, or a schema violation other than a bad date.
        InvalidDateError: ``date`` is present but unparsable.
    """
    match = _FRONTMATTER_RE.match(raw)
    if not match:
        raise MalformedFrontmatterError(slug, "missing leading '---' frontmatter block")

    try:
        data = yaml.load(match.group(1), Loader=_FrontmatterLoader)
    except yaml.YAMLError as e:
        raise MalformedFrontmatterError(slug, f"invalid YAML: {e}") from e

    if not isinstance(data, dict):
        raise MalformedFrontmatterError(slug, "frontmatter is not a key/value mapping")

    try:
        frontmatter = FrontMatter.model_validate(data)
    except ValidationError as e:
        errors = e.errors()
        date_errors = [
            err
            for err in errors
            if err["loc"] and err["loc"][0] == "date" and err["type"] != "missing"
        ]
        if date_errors and len(date_errors) == len(errors):
            raise InvalidDateError(slug, _describe(date_errors)) from e
        raise MalformedFrontmatterError(slug, _describe(errors)) from e

    return ExtractedDocument(frontmatter=frontmatter, body=raw[match.end():])
