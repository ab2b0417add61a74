import logging
from contextlib import asynccontextmanager
from typing import AsyncContextManager, AsyncIterator, Callable, Optional, Tuple

from app.db.prismic import PrismicClient
from app.repos.posts_repo import PrismicPostsRepo
from app.services.page_cache import PageCache, PageState
from app.services.post_list import PostListState
from app.services.posts_service import PostsService
from app.services.renderer import PageRenderer
from app.settings import Settings, settings

logger = logging.getLogger(__name__)

HOME_PATH = "/"

ServiceFactory = Callable[[], AsyncContextManager[PostsService]]


def post_path(uid: str) -> str:
    return f"/post/{uid}"


@asynccontextmanager
async def open_posts_service(
    client_factory: Callable[[], PrismicClient] = PrismicClient.from_settings,
    current: Settings = settings,
) -> AsyncIterator[PostsService]:
    """
    A posts service over a content client of its own, closed on exit.

    Cached pages are generated with one of these rather than with the
    request's service: the generation is shared by every request waiting on
    the path and outlives whichever request started it.
    """
    async with client_factory() as client:
        yield PostsService(
            PrismicPostsRepo(client),
            page_size=current.POSTS_PAGE_SIZE,
            cursor_host=current.prismic_host,
        )


async def generate_home(service: PostsService, renderer: PageRenderer) -> str:
    state = PostListState(await service.home_page())
    return renderer.home(state)


async def generate_post(
    service: PostsService, renderer: PageRenderer, slug: str
) -> Optional[str]:
    post = await service.get_post(slug)
    if post is None:
        return None
    return renderer.post(post)


async def resolve_home_page(
    service_factory: ServiceFactory,
    cache: PageCache,
    renderer: PageRenderer,
    current: Settings = settings,
) -> str:
    async def generate():
        async with service_factory() as service:
            return await generate_home(service, renderer)

    return await cache.render(HOME_PATH, generate, current.HOME_REVALIDATE_SECONDS)


async def resolve_post_page(
    slug: str,
    service_factory: ServiceFactory,
    cache: PageCache,
    renderer: PageRenderer,
    current: Settings = settings,
) -> Tuple[PageState, Optional[str]]:
    """
    Resolve ``/post/{slug}`` to a page state and its HTML.

    A path with no generated page yet, whose generation another request has
    already started, gets the fallback placeholder instead of waiting.
    """
    path = post_path(slug)
    if cache.get(path) is None and cache.is_generating(path):
        return PageState.LOADING_FALLBACK, renderer.fallback()

    async def generate():
        async with service_factory() as service:
            return await generate_post(service, renderer, slug)

    html = await cache.render(path, generate, current.POST_REVALIDATE_SECONDS)
    if html is None:
        return PageState.NOT_FOUND_REDIRECT, None
    return PageState.RESOLVED, html


async def prerender(
    cache: PageCache,
    renderer: PageRenderer,
    client_factory: Callable[[], PrismicClient] = PrismicClient.from_settings,
    current: Settings = settings,
) -> int:
    """
    Generate the home page and the first ``PREBUILT_POSTS`` posts.
    Returns how many pages were generated; failures are logged, not raised.
    """

    def service_factory():
        return open_posts_service(client_factory, current)

    generated = 0
    try:
        await resolve_home_page(service_factory, cache, renderer, current)
        generated += 1
    except Exception as e:
        logger.error(f"Failed to pre-render {HOME_PATH}: {e}")

    try:
        async with service_factory() as service:
            uids = await service.post_uids(current.PREBUILT_POSTS)
    except Exception as e:
        logger.error(f"Failed to list posts to pre-render: {e}")
        uids = []

    for uid in uids:
        try:
            state, _html = await resolve_post_page(
                uid, service_factory, cache, renderer, current
            )
        except Exception as e:
            logger.error(f"Failed to pre-render {post_path(uid)}: {e}")
            continue
        if state is PageState.RESOLVED:
            generated += 1

    logger.info(f"Pre-rendered {generated} page(s)")
    return generated
