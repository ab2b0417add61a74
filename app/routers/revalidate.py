import logging
from typing import Optional

from fastapi import APIRouter, Depends

from app.schemas.blog import RevalidateRequest
from app.services.page_cache import PageCache, get_page_cache

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


@router.post("/revalidate")
async def revalidate(
    body: Optional[RevalidateRequest] = None,
    cache: PageCache = Depends(get_page_cache),
):
    """Drop generated pages so the next request regenerates them (CMS webhook target)."""
    path = body.path if body else None
    dropped = cache.invalidate(path)
    logger.info(f"Revalidated {path or 'all pages'}: {dropped} page(s) dropped")
    return {"revalidated": dropped}
