from contextlib import asynccontextmanager
from typing import Dict, List, Optional

from app.db.prismic import InvalidRefError
from app.schemas.blog import PostPagination
from app.services.post_list import PostListState

CMS = "https://blog.cdn.prismic.io/api/v2"


def make_doc(
    uid: Optional[str],
    first_publication_date: Optional[str] = "2021-03-25T19:25:28+0000",
    *,
    doc_id: Optional[str] = None,
    last_publication_date: Optional[str] = None,
    **data,
) -> dict:
    """Raw Prismic document as returned by the search endpoint."""
    data.setdefault("title", f"Title {uid}")
    return {
        "id": doc_id or f"id-{uid}",
        "uid": uid,
        "type": "posts",
        "first_publication_date": first_publication_date,
        "last_publication_date": last_publication_date or first_publication_date,
        "data": data,
    }


def service_factory(service, events=None):
    """
    Page-generation service factory handing out ``service``.
    Appends "open"/"close" to ``events`` around each use.
    """

    @asynccontextmanager
    async def open_service():
        if events is not None:
            events.append("open")
        try:
            yield service
        finally:
            if events is not None:
                events.append("close")

    return open_service


def make_response(results: List[dict], next_page: Optional[str] = None) -> dict:
    return {
        "page": 1,
        "results_per_page": len(results),
        "results": results,
        "next_page": next_page,
        "prev_page": None,
    }


class FakeContentClient:
    """
    Minimal content client stand-in. Records every call in ``calls``.
    ``responses`` maps cursor URLs to the JSON fetch_url returns.
    """

    def __init__(self, query_response=None, responses=None, docs_by_uid=None):
        self.query_response = query_response or make_response([])
        self.responses = responses or {}
        self.docs_by_uid = docs_by_uid or {}
        self.calls = []

    async def query(self, predicates, **kwargs):
        self.calls.append(("query", list(predicates), kwargs))
        return self.query_response

    async def fetch_url(self, url):
        self.calls.append(("fetch_url", url))
        return self.responses[url]

    async def get_by_uid(self, doc_type, uid, *, ref=None):
        self.calls.append(("get_by_uid", doc_type, uid, ref))
        return self.docs_by_uid.get(uid)

    async def get_by_id(self, document_id, *, ref=None):
        self.calls.append(("get_by_id", document_id, ref))
        return next(
            (d for d in self.docs_by_uid.values() if d["id"] == document_id), None
        )

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc_info):
        return None


class FakeRepo:
    """
    Minimal repo stand-in used in service tests.
    ``pages`` maps cursors to raw responses; ``bad_refs`` are rejected like
    an expired preview ref.
    """

    def __init__(
        self,
        docs: List[dict],
        first_response: Optional[dict] = None,
        pages: Optional[Dict[str, dict]] = None,
        bad_refs=(),
    ):
        self.docs = docs
        self.first_response = first_response or make_response(docs)
        self.pages = pages or {}
        self.bad_refs = set(bad_refs)
        self.calls = []

    def _check_ref(self, ref):
        if ref in self.bad_refs:
            raise InvalidRefError(f"ref {ref} expired", status_code=404)

    async def first_page(self, page_size, ref=None):
        self.calls.append(("first_page", page_size, ref))
        self._check_ref(ref)
        return self.first_response

    async def next_page(self, cursor):
        self.calls.append(("next_page", cursor))
        page = self.pages[cursor]
        if isinstance(page, Exception):
            raise page
        return page

    async def get_post(self, uid, ref=None):
        self.calls.append(("get_post", uid, ref))
        self._check_ref(ref)
        return next((d for d in self.docs if d.get("uid") == uid), None)

    async def all_posts_by_date(self, ref=None):
        self.calls.append(("all_posts_by_date", ref))
        self._check_ref(ref)
        return list(self.docs)

    async def post_uids(self, limit):
        return [d["uid"] for d in self.docs[:limit]]

    async def get_document(self, document_id, ref=None):
        self.calls.append(("get_document", document_id, ref))
        self._check_ref(ref)
        return next((d for d in self.docs if d["id"] == document_id), None)


class FakePostsService:
    """
    Minimal posts service stand-in for router tests.
    """

    def __init__(
        self,
        home_page_return: Optional[PostPagination] = None,
        get_post_return=None,
        continue_page_return: Optional[PostPagination] = None,
        preview_path_return: str = "/",
    ):
        self._home = home_page_return or PostPagination()
        self._post = get_post_return
        self._continue = continue_page_return or PostPagination()
        self._preview_path = preview_path_return
        self.calls = []

    async def home_page(self, ref=None):
        self.calls.append(("home_page", ref))
        return self._home

    async def load_pages(self, pages, ref=None):
        self.calls.append(("load_pages", pages, ref))
        return PostListState(self._home)

    async def continue_page(self, cursor):
        self.calls.append(("continue_page", cursor))
        return self._continue

    async def get_post(self, slug, ref=None):
        self.calls.append(("get_post", slug, ref))
        return self._post

    async def post_uids(self, limit):
        return []

    async def preview_path(self, document_id, ref):
        self.calls.append(("preview_path", document_id, ref))
        return self._preview_path
