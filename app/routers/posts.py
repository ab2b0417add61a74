import logging

from fastapi import APIRouter, Depends, HTTPException, Query

from app import dependencies as deps
from app.db.prismic import ContentClientError
from app.schemas.blog import PostPagination
from app.services.post_mapper import DocumentDecodeError
from app.services.posts_service import PostsService, UnknownCursorError

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")


@router.get("/posts", response_model=PostPagination)
async def more_posts(
    cursor: str = Query(..., description="next_page URL of the previous page"),
    service: PostsService = Depends(deps.get_posts_service),
):
    """Next page of post summaries, for the "load more" control."""
    try:
        return await service.continue_page(cursor)
    except HTTPException:
        raise
    except UnknownCursorError as e:
        raise HTTPException(status_code=400, detail=str(e))
    except (ContentClientError, DocumentDecodeError) as e:
        logger.error(f"Failed to load posts page {cursor}: {e}")
        raise HTTPException(status_code=502, detail="Failed to retrieve posts")
    except Exception as e:
        logger.error(f"Unexpected error loading posts page {cursor}: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve posts")
