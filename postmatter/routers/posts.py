import logging
from typing import Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException

from postmatter import dependencies as deps
from postmatter.schemas.blog import BatchReportOut, PostDetail, PostSummary
from postmatter.services.posts_service import PostsService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/posts", response_model=List[PostSummary])
def list_posts(
    tag: Optional[str] = None,
    service: PostsService = Depends(deps.get_posts_service),
):
    """Get all posts metadata, optionally only those carrying a tag."""
    try:
        return service.list_posts(tag=tag)
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error listing posts: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve posts")


@router.get("/posts/{slug}", response_model=PostDetail)
def get_post(
    slug: str,
    service: PostsService = Depends(deps.get_posts_service),
):
    """Get a single post by slug."""
    try:
        post = service.get_post(slug)
        if not post:
            raise HTTPException(status_code=404, detail="Post not found")
        return post
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Unexpected error retrieving post {slug}: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve post")


@router.get("/tags", response_model=Dict[str, int])
def list_tags(service: PostsService = Depends(deps.get_posts_service)):
    try:
        return service.list_tags()
    except Exception as e:
        logger.error(f"Unexpected error listing tags: {e}")
        raise HTTPException(status_code=500, detail="Failed to retrieve tags")


@router.get("/report", response_model=BatchReportOut)
def get_report(service: PostsService = Depends(deps.get_posts_service)):
    """Parse results for the whole collection, including failed files."""
    try:
        return service.summarize_report()
    except Exception as e:
        logger.error(f"Unexpected error building report: {e}")
        raise HTTPException(status_code=500, detail="Failed to build report")
