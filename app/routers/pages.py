import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import HTMLResponse, RedirectResponse

from app import dependencies as deps
from app.security import get_settings
from app.services.page_cache import PageCache, PageState, get_page_cache
from app.services.posts_service import PostsService
from app.services.renderer import PageRenderer, get_renderer
from app.services.static_pages import (
    HOME_PATH,
    ServiceFactory,
    resolve_home_page,
    resolve_post_page,
)
from app.settings import Settings

logger = logging.getLogger(__name__)

router = APIRouter()


def _redirect_home() -> RedirectResponse:
    # 307: not permanent, the post may be published later
    return RedirectResponse(url=HOME_PATH, status_code=307)


@router.get("/", response_class=HTMLResponse)
async def home(
    pages: int = Query(1, ge=1, description="How many pages of posts to show"),
    service: PostsService = Depends(deps.get_posts_service),
    service_factory: ServiceFactory = Depends(deps.get_page_service_factory),
    cache: PageCache = Depends(get_page_cache),
    renderer: PageRenderer = Depends(get_renderer),
    preview_ref: Optional[str] = Depends(deps.get_preview_ref),
    current_settings: Settings = Depends(get_settings),
):
    """Home page: post summaries with a "load more" control."""
    pages = min(pages, current_settings.MAX_LOAD_MORE_PAGES)
    try:
        if preview_ref or pages > 1:
            state = await service.load_pages(pages, ref=preview_ref)
            html = renderer.home(state, preview=bool(preview_ref), pages=pages)
        else:
            html = await resolve_home_page(
                service_factory, cache, renderer, current_settings
            )
        return HTMLResponse(html)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error rendering home page: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve posts")


@router.get("/post/{slug}", response_class=HTMLResponse)
async def post_detail(
    slug: str,
    service: PostsService = Depends(deps.get_posts_service),
    service_factory: ServiceFactory = Depends(deps.get_page_service_factory),
    cache: PageCache = Depends(get_page_cache),
    renderer: PageRenderer = Depends(get_renderer),
    preview_ref: Optional[str] = Depends(deps.get_preview_ref),
    current_settings: Settings = Depends(get_settings),
):
    """A single post with links to the previous and next posts."""
    try:
        if preview_ref:
            post = await service.get_post(slug, ref=preview_ref)
            if post is None:
                return _redirect_home()
            return HTMLResponse(renderer.post(post, preview=True))

        state, html = await resolve_post_page(
            slug, service_factory, cache, renderer, current_settings
        )
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error rendering post {slug}: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve post")

    if state is PageState.NOT_FOUND_REDIRECT:
        logger.info(f"Post {slug} not found, redirecting to {HOME_PATH}")
        return _redirect_home()
    return HTMLResponse(html)
