import logging
from typing import Awaitable, Callable, List, Optional

from app.schemas.blog import PostPagination, PostSummary

logger = logging.getLogger(__name__)

PageFetcher = Callable[[str], Awaitable[PostPagination]]


class PostListState:
    """
    State of one rendering of the post list: the posts loaded so far, the
    cursor of the next page and the outcome of the last "load more".

    ``append`` is the only mutation of ``posts``/``next_page``. ``load_more``
    ignores calls made while a fetch is outstanding, so overlapping clicks
    never append out of order.
    """

    def __init__(self, first_page: Optional[PostPagination] = None):
        self.posts: List[PostSummary] = []
        self.next_page: Optional[str] = None
        self.is_loading = False
        self.error: Optional[str] = None
        if first_page is not None:
            self.append(first_page)

    @property
    def has_more(self) -> bool:
        return bool(self.next_page)

    @property
    def uids(self) -> List[str]:
        return [post.uid for post in self.posts]

    def append(self, page: PostPagination) -> int:
        """Add a page of results, skipping uids already listed. Returns how many were added."""
        seen = set(self.uids)
        added = 0
        for post in page.results:
            if post.uid in seen:
                logger.debug(f"Skipping duplicate post {post.uid}")
                continue
            seen.add(post.uid)
            self.posts.append(post)
            added += 1
        self.next_page = page.next_page or None
        return added

    async def load_more(self, fetch_page: PageFetcher) -> bool:
        """
        Fetch the page behind ``next_page`` and append it.

        Returns True when a page was appended. A failed fetch sets ``error``
        and leaves the loaded posts and the cursor as they were, so the same
        page can be retried.
        """
        if not self.has_more or self.is_loading:
            return False

        self.is_loading = True
        cursor = self.next_page
        try:
            page = await fetch_page(cursor)
        except Exception as e:
            logger.warning(f"Failed to load more posts from {cursor}: {e}")
            self.error = "Não foi possível carregar mais posts."
            return False
        finally:
            self.is_loading = False

        self.error = None
        self.append(page)
        return True
