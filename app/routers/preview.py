import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import RedirectResponse

from app import dependencies as deps
from app.db.prismic import ContentClientError
from app.security import get_settings
from app.services.posts_service import PostsService
from app.settings import Settings

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


@router.get("/preview")
async def enter_preview(
    token: str = Query(..., description="Preview ref issued by the CMS"),
    document_id: Optional[str] = Query(None, alias="documentId"),
    service: PostsService = Depends(deps.get_posts_service),
    current_settings: Settings = Depends(get_settings),
):
    """Switch the browser to preview mode and land on the previewed post."""
    try:
        destination = await service.preview_path(document_id, token)
    except ContentClientError as e:
        logger.warning(f"Could not resolve preview document {document_id}: {e}")
        destination = "/"
    except Exception as e:
        logger.error(f"Unexpected error entering preview: {e}")
        raise HTTPException(status_code=500, detail="Failed to enter preview")

    response = RedirectResponse(url=destination, status_code=307)
    response.set_cookie(
        current_settings.PREVIEW_COOKIE_NAME, token, httponly=True, samesite="lax"
    )
    return response


@router.get("/exit-preview")
def exit_preview(current_settings: Settings = Depends(get_settings)):
    response = RedirectResponse(url="/", status_code=307)
    response.delete_cookie(current_settings.PREVIEW_COOKIE_NAME)
    return response
