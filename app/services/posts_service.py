import logging
from typing import Awaitable, Callable, List, Optional, TypeVar
from urllib.parse import urlparse

from app.db.prismic import InvalidRefError
from app.repos.posts_repo import POST_TYPE
from app.schemas.blog import PostDetail, PostPagination
from app.schemas.prismic import RawDocument
from app.services.adjacency import find_adjacent, sort_by_publication
from app.services.post_list import PostListState
from app.services.post_mapper import (
    DocumentDecodeError,
    decode_document,
    to_pagination,
    to_post_detail,
)
from app.settings import settings

logger = logging.getLogger(__name__)

T = TypeVar("T")


class UnknownCursorError(ValueError):
    """A pagination cursor that does not point at the content repository."""


class PostsService:
    def __init__(
        self,
        repo,
        *,
        page_size: int = settings.POSTS_PAGE_SIZE,
        cursor_host: str = settings.prismic_host,
    ):
        self.repo = repo
        self.page_size = page_size
        self.cursor_host = cursor_host

    async def home_page(self, ref: Optional[str] = None) -> PostPagination:
        """First page of post summaries."""
        raw = await self._with_ref(
            lambda r: self.repo.first_page(self.page_size, ref=r), ref
        )
        return to_pagination(raw)

    async def continue_page(self, cursor: str) -> PostPagination:
        """The page behind a ``next_page`` cursor."""
        self._check_cursor(cursor)
        raw = await self.repo.next_page(cursor)
        return to_pagination(raw)

    async def load_pages(
        self, pages: int, ref: Optional[str] = None
    ) -> PostListState:
        """
        The home list as it looks after ``pages - 1`` clicks on "load more".
        Stops early at the last page or at the first failed fetch.
        """
        state = PostListState(await self.home_page(ref))
        for _ in range(pages - 1):
            if not await state.load_more(self.continue_page):
                break
        return state

    async def get_post(
        self, slug: str, ref: Optional[str] = None
    ) -> Optional[PostDetail]:
        raw = await self._with_ref(lambda r: self.repo.get_post(slug, ref=r), ref)
        if not raw:
            return None

        ordered = await self._with_ref(lambda r: self.repo.all_posts_by_date(ref=r), ref)
        prev_doc, next_doc = find_adjacent(
            sort_by_publication(_decodable(ordered)), raw.get("uid") or slug
        )
        return to_post_detail(raw, prev_doc, next_doc)

    async def post_uids(self, limit: int) -> List[str]:
        return await self.repo.post_uids(limit)

    async def preview_path(self, document_id: Optional[str], ref: str) -> str:
        """Where to land after entering preview: the previewed post, else the list."""
        if not document_id:
            return "/"
        doc = await self._with_ref(
            lambda r: self.repo.get_document(document_id, ref=r), ref
        )
        if doc and doc.get("type") == POST_TYPE and doc.get("uid"):
            return f"/post/{doc['uid']}"
        return "/"

    async def _with_ref(
        self, call: Callable[[Optional[str]], Awaitable[T]], ref: Optional[str]
    ) -> T:
        """Run a query with a preview ref, falling back to published content if the ref is rejected."""
        if not ref:
            return await call(None)
        try:
            return await call(ref)
        except InvalidRefError as e:
            logger.warning(f"Preview ref rejected ({e}); using published content")
            return await call(None)

    def _check_cursor(self, cursor: str) -> None:
        parsed = urlparse(cursor or "")
        if parsed.scheme not in ("http", "https") or parsed.netloc != self.cursor_host:
            raise UnknownCursorError(f"Refusing to follow cursor {cursor!r}")


def _decodable(raw_docs) -> List[RawDocument]:
    docs = []
    for raw in raw_docs:
        try:
            docs.append(decode_document(raw))
        except DocumentDecodeError as e:
            logger.warning(f"Leaving post out of navigation: {e}")
    return docs
