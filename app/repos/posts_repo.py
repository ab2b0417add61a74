import logging
from typing import Any, Dict, List, Optional

from app.db.prismic import PrismicClient, at

logger = logging.getLogger(__name__)

POST_TYPE = "posts"
SUMMARY_FIELDS = ["posts.title", "posts.subtitle", "posts.author"]
BY_PUBLICATION_DATE = "[document.first_publication_date]"
# API maximum; keeps the walk over every post to a few requests
MAX_PAGE_SIZE = 100


class PrismicPostsRepo:
    def __init__(self, client: PrismicClient):
        self.client = client

    async def first_page(
        self, page_size: int, ref: Optional[str] = None
    ) -> Dict[str, Any]:
        return await self.client.query(
            [at("document.type", POST_TYPE)],
            fetch=SUMMARY_FIELDS,
            page_size=page_size,
            ref=ref,
        )

    async def next_page(self, cursor: str) -> Dict[str, Any]:
        return await self.client.fetch_url(cursor)

    async def get_post(
        self, uid: str, ref: Optional[str] = None
    ) -> Optional[Dict[str, Any]]:
        return await self.client.get_by_uid(POST_TYPE, uid, ref=ref)

    async def all_posts_by_date(self, ref: Optional[str] = None) -> List[dict]:
        """Every post (uid, title, dates), oldest first, following next_page."""
        response = await self.client.query(
            [at("document.type", POST_TYPE)],
            fetch=["posts.title"],
            page_size=MAX_PAGE_SIZE,
            orderings=BY_PUBLICATION_DATE,
            ref=ref,
        )
        docs = list(response.get("results") or [])
        while response.get("next_page"):
            response = await self.client.fetch_url(response["next_page"])
            docs.extend(response.get("results") or [])

        logger.debug(f"Loaded {len(docs)} posts for adjacency")
        return docs

    async def post_uids(self, limit: int) -> List[str]:
        if limit <= 0:
            return []
        response = await self.client.query(
            [at("document.type", POST_TYPE)], page_size=limit
        )
        return [doc["uid"] for doc in response.get("results") or [] if doc.get("uid")]

    async def get_document(
        self, document_id: str, ref: Optional[str] = None
    ) -> Optional[Dict[str, Any]]:
        return await self.client.get_by_id(document_id, ref=ref)
