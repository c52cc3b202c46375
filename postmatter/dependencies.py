import logging

from fastapi import HTTPException, Request
from starlette.status import HTTP_503_SERVICE_UNAVAILABLE

from postmatter.repos.posts_repo import FilesystemPostsRepo
from postmatter.services.posts_service import PostsService

logger = logging.getLogger(__name__)


def build_posts_service() -> PostsService:
    return PostsService(repo=FilesystemPostsRepo())


def get_posts_service(request: Request) -> PostsService:
    # Set by the lifespan handler; posts are static, so they are parsed once
    service = getattr(request.app.state, "posts_service", None)
    if service is None:
        logger.warning("Posts requested before they were loaded")
        raise HTTPException(
            status_code=HTTP_503_SERVICE_UNAVAILABLE, detail="Posts are not loaded"
        )
    return service
