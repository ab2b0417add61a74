from typing import Optional

from fastapi import Depends, Request

from app.db.prismic import PrismicClient, get_prismic
from app.repos.posts_repo import PrismicPostsRepo
from app.security import get_settings
from app.services.posts_service import PostsService
from app.services.static_pages import open_posts_service
from app.settings import Settings


def get_posts_repo(client=Depends(get_prismic)):
    return PrismicPostsRepo(client)


def get_posts_service(
    repo=Depends(get_posts_repo),
    current_settings: Settings = Depends(get_settings),
):
    return PostsService(
        repo=repo,
        page_size=current_settings.POSTS_PAGE_SIZE,
        cursor_host=current_settings.prismic_host,
    )


def get_preview_ref(
    request: Request, current_settings: Settings = Depends(get_settings)
) -> Optional[str]:
    """The CMS ref stored by /api/preview, if preview mode is on."""
    return request.cookies.get(current_settings.PREVIEW_COOKIE_NAME) or None


def get_page_service_factory(current_settings: Settings = Depends(get_settings)):
    """Opens posts services for cached page generation, each with its own client."""

    def client_factory():
        return PrismicClient.from_settings(current_settings)

    return lambda: open_posts_service(client_factory, current_settings)
