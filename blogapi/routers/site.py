"""Site metadata endpoint."""

from fastapi import APIRouter

from blogapi.config import get_settings
from blogapi.models.site import SiteMetadata, SocialHandles

router = APIRouter(prefix="/site", tags=["site"])


@router.get("", response_model=SiteMetadata)
async def get_site_metadata():
    """Site title, author, and social handles for page headers."""
    settings = get_settings()
    return SiteMetadata(
        title=settings.site_title,
        author=settings.site_author,
        description=settings.site_description,
        site_url=settings.site_url,
        social=SocialHandles(
            twitter=settings.twitter_handle,
            github=settings.github_handle,
        ),
    )
