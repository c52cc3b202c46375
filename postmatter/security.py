import logging
import secrets

from fastapi import Depends, HTTPException, Security
from fastapi.security.api_key import APIKeyHeader
from starlette.status import HTTP_403_FORBIDDEN

from postmatter.settings import Settings, settings

logger = logging.getLogger(__name__)

API_KEY_NAME = "X-Postmatter-Key"
api_key_header = APIKeyHeader(name=API_KEY_NAME, auto_error=False)


def get_settings() -> Settings:
    """Small wrapper to allow dependency overrides in tests."""
    return settings


def get_api_key(
    api_key: str | None = Security(api_key_header),
    current_settings: Settings = Depends(get_settings),
) -> str:
    """
    Guard for the posts API. Closed by default: with no POSTMATTER_API_KEY
    configured every request is refused rather than matched against "".
    """
    expected = current_settings.POSTMATTER_API_KEY
    if not expected:
        logger.warning("POSTMATTER_API_KEY is not set; refusing posts API request")
        raise HTTPException(
            status_code=HTTP_403_FORBIDDEN,
            detail="API key is not configured on this server",
        )
    if not api_key:
        raise HTTPException(
            status_code=HTTP_403_FORBIDDEN,
            detail=f"Missing {API_KEY_NAME} header",
        )
    if not secrets.compare_digest(api_key.encode(), expected.encode()):
        raise HTTPException(status_code=HTTP_403_FORBIDDEN, detail="Invalid API key")
    return api_key
