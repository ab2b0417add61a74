import asyncio
import enum
import logging
import time
from dataclasses import dataclass
from typing import Awaitable, Callable, Dict, Optional

logger = logging.getLogger(__name__)

Generator = Callable[[], Awaitable[Optional[str]]]


class PageState(str, enum.Enum):
    LOADING_FALLBACK = "loading-fallback"
    RESOLVED = "resolved"
    NOT_FOUND_REDIRECT = "not-found-redirect"


@dataclass
class CachedPage:
    html: str
    generated_at: float
    revalidate: float

    def is_stale(self, now: float) -> bool:
        return now - self.generated_at >= self.revalidate


class PageCache:
    """
    Generated HTML per path, regenerated at most once per ``revalidate``
    seconds.

    A stale page is regenerated on the next request; if regeneration fails
    the stale page keeps being served. Concurrent requests for a path that is
    being generated share one generation. A generation that was already
    running when its path got invalidated still answers its waiters, but its
    page is not kept.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self.clock = clock
        self._pages: Dict[str, CachedPage] = {}
        self._inflight: Dict[str, asyncio.Future] = {}
        self._versions: Dict[str, int] = {}

    def get(self, path: str) -> Optional[CachedPage]:
        return self._pages.get(path)

    def is_generating(self, path: str) -> bool:
        return path in self._inflight

    def invalidate(self, path: Optional[str] = None) -> int:
        paths = list(self._inflight) if path is None else [path]
        for stale in paths:
            self._versions[stale] = self._versions.get(stale, 0) + 1

        if path is None:
            count = len(self._pages)
            self._pages.clear()
            return count
        return 1 if self._pages.pop(path, None) is not None else 0

    async def render(
        self, path: str, generate: Generator, revalidate: float
    ) -> Optional[str]:
        """
        Return the HTML for ``path``. ``generate`` returns None when the page
        does not exist; nothing is cached then.
        """
        cached = self._pages.get(path)
        if cached and not cached.is_stale(self.clock()):
            return cached.html

        try:
            return await self._generate(path, generate, revalidate)
        except Exception as e:
            if cached is None:
                raise
            logger.warning(f"Regenerating {path} failed, serving stale page: {e}")
            return cached.html

    async def _generate(
        self, path: str, generate: Generator, revalidate: float
    ) -> Optional[str]:
        pending = self._inflight.get(path)
        if pending is None:
            version = self._versions.get(path, 0)
            pending = asyncio.ensure_future(
                self._run(path, generate, revalidate, version)
            )
            self._inflight[path] = pending
        return await asyncio.shield(pending)

    async def _run(
        self, path: str, generate: Generator, revalidate: float, version: int
    ) -> Optional[str]:
        try:
            started = self.clock()
            html = await generate()
            if html is None:
                self._pages.pop(path, None)
                logger.info(f"No page for {path}")
                return None
            if self._versions.get(path, 0) != version:
                logger.info(f"{path} was invalidated while generating, not caching it")
                return html
            self._pages[path] = CachedPage(html, self.clock(), revalidate)
            logger.info(f"Generated {path} in {self.clock() - started:.3f}s")
            return html
        finally:
            self._inflight.pop(path, None)


page_cache = PageCache()


def get_page_cache() -> PageCache:
    """Small wrapper to allow dependency overrides in tests."""
    return page_cache
