"""Site metadata model."""

from pydantic import BaseModel


class SocialHandles(BaseModel):
    twitter: str = ""
    github: str = ""


class SiteMetadata(BaseModel):
    """Site-wide metadata shared by every page."""

    title: str
    author: str
    description: str
    site_url: str
    social: SocialHandles
