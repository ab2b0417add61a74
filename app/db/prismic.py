import logging
from typing import Any, Dict, Iterable, List, Optional

import httpx

from app.settings import Settings, settings

logger = logging.getLogger(__name__)

SEARCH_PATH = "/documents/search"


class ContentClientError(Exception):
    """Raised when the content repository cannot answer a query."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class InvalidRefError(ContentClientError):
    """The ref passed with a query (usually a preview ref) was rejected."""


def at(path: str, value: str) -> str:
    """Render an ``at`` predicate, e.g. ``[at(document.type, "posts")]``."""
    return f'[at({path}, "{value}")]'


class PrismicClient:
    """
    Minimal async client for the Prismic REST API v2.

    Only what the blog pages need: the master ref, document search with
    predicates/projection/ordering/paging, lookup by uid and plain GETs of
    the ``next_page`` cursor URLs the API hands out.
    """

    def __init__(
        self,
        api_url: str,
        access_token: Optional[str] = None,
        *,
        http_client: Optional[httpx.AsyncClient] = None,
        timeout: float = 10.0,
    ):
        self.api_url = api_url.rstrip("/")
        self.access_token = access_token or None
        self.http = http_client or httpx.AsyncClient(timeout=timeout)
        self._master_ref: Optional[str] = None

    @classmethod
    def from_settings(cls, current: Settings = settings) -> "PrismicClient":
        return cls(
            current.PRISMIC_API_URL,
            current.PRISMIC_ACCESS_TOKEN,
            timeout=current.HTTP_TIMEOUT_SECONDS,
        )

    async def __aenter__(self) -> "PrismicClient":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self.http.aclose()

    async def get_master_ref(self) -> str:
        if self._master_ref:
            return self._master_ref

        body = await self._get_json(self.api_url, self._auth_params())
        refs: List[dict] = body.get("refs") or []
        master = next((r for r in refs if r.get("isMasterRef")), None)
        if not master or not master.get("ref"):
            raise ContentClientError("Content repository did not report a master ref")

        self._master_ref = master["ref"]
        return self._master_ref

    async def query(
        self,
        predicates: Iterable[str],
        *,
        fetch: Optional[Iterable[str]] = None,
        page_size: int = 20,
        page: int = 1,
        orderings: Optional[str] = None,
        after: Optional[str] = None,
        ref: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Search documents. Returns the raw response (``results``, ``next_page``...)."""
        params: Dict[str, Any] = {
            "ref": ref or await self.get_master_ref(),
            "q": "[" + "".join(predicates) + "]",
            "pageSize": page_size,
            "page": page,
        }
        if fetch:
            params["fetch"] = ",".join(fetch)
        if orderings:
            params["orderings"] = orderings
        if after:
            params["after"] = after
        params.update(self._auth_params())

        logger.debug(f"Querying content repository: {params}")
        return await self._get_json(
            f"{self.api_url}{SEARCH_PATH}", params, explicit_ref=bool(ref)
        )

    async def get_by_uid(
        self, doc_type: str, uid: str, *, ref: Optional[str] = None
    ) -> Optional[Dict[str, Any]]:
        response = await self.query(
            [at(f"my.{doc_type}.uid", uid)], page_size=1, ref=ref
        )
        results = response.get("results") or []
        return results[0] if results else None

    async def get_by_id(
        self, document_id: str, *, ref: Optional[str] = None
    ) -> Optional[Dict[str, Any]]:
        response = await self.query([at("document.id", document_id)], page_size=1, ref=ref)
        results = response.get("results") or []
        return results[0] if results else None

    async def fetch_url(self, url: str) -> Dict[str, Any]:
        """GET an opaque cursor URL (``next_page``) returned by a previous query."""
        return await self._get_json(url, None)

    def _auth_params(self) -> Dict[str, str]:
        return {"access_token": self.access_token} if self.access_token else {}

    async def _get_json(
        self, url: str, params: Optional[dict], *, explicit_ref: bool = False
    ) -> Dict[str, Any]:
        try:
            response = await self.http.get(url, params=params)
        except httpx.HTTPError as e:
            raise ContentClientError(f"Request to {url} failed: {e}") from e

        if response.status_code >= 400:
            message = f"Content repository answered {response.status_code} for {url}"
            if explicit_ref and response.status_code in (400, 404):
                raise InvalidRefError(message, status_code=response.status_code)
            raise ContentClientError(message, status_code=response.status_code)

        try:
            return response.json()
        except ValueError as e:
            raise ContentClientError(f"Invalid JSON from {url}: {e}") from e


async def get_prismic():
    """
    Create a content client for the current request.
    Called at runtime to avoid import-time connections.
    """
    client = PrismicClient.from_settings(settings)
    try:
        yield client
    finally:
        await client.aclose()
