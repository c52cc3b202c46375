import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI

from postmatter.dependencies import build_posts_service
from postmatter.routers import posts
from postmatter.security import get_api_key
from postmatter.settings import settings

# Configure logging
logging.basicConfig(
    level=getattr(logging, settings.LOG_LEVEL.upper()),
    format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="postmatter API", description="Front matter parsing for static posts"
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    service = build_posts_service()
    report = service.report()
    logger.info(
        f"Loaded {len(report.posts)} posts from {settings.POSTS_DIR}"
        f" ({len(report.failures)} failed)"
    )
    app.state.posts_service = service

    try:
        yield
    finally:
        app.state.posts_service = None
        logger.info("postmatter API shut down")


app.router.lifespan_context = lifespan

app.include_router(posts.router, dependencies=[Depends(get_api_key)])


@app.get("/")
async def root():
    return {"message": "postmatter API is running"}
