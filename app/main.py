import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI

from app.routers import pages, posts, preview, revalidate
from app.security import get_api_key
from app.services.page_cache import page_cache
from app.services.renderer import renderer
from app.services.static_pages import prerender
from app.settings import settings

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper()),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="spacetraveling", description="Blog pages over Prismic")


@asynccontextmanager
async def lifespan(app: FastAPI):
    generated = await prerender(page_cache, renderer)
    logger.info(f"Startup pre-render finished ({generated} page(s))")

    try:
        yield
    finally:
        page_cache.invalidate()
        logger.info("Page cache cleared")


app.router.lifespan_context = lifespan

app.include_router(pages.router)
app.include_router(posts.router)
app.include_router(preview.router)
app.include_router(revalidate.router, dependencies=[Depends(get_api_key)])


@app.get("/healthz")
async def healthz():
    return {"message": "Blog is running"}
