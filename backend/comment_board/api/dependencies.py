import logging
from typing import Optional

from fastapi import Depends, HTTPException, Query, Request, status
from pydantic import BaseModel

from comment_board.config import Settings
from comment_board.services.comment_service import CommentService

logger = logging.getLogger(__name__)


class Pagination(BaseModel):
    page: int
    per_page: int


def get_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_comment_service(request: Request) -> CommentService:
    """Get the comment service created at application startup."""
    service = getattr(request.app.state, "comment_service", None)
    if not service:
        logger.error("Comment service not initialized or unavailable.")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Database service unavailable",
        )
    return service


def get_visitor_token(request: Request) -> str:
    """Get the ownership token issued to the current visitor."""
    token = getattr(request.state, "visitor_token", None)
    if not token:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="Missing token"
        )
    return token


def get_pagination(
    page: int = Query(1, ge=1),
    per_page: Optional[int] = Query(None, ge=1, alias="perPage"),
    settings: Settings = Depends(get_settings),
) -> Pagination:
    if per_page is None:
        per_page = settings.default_per_page
    if per_page > settings.max_per_page:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=f"perPage must be at most {settings.max_per_page}",
        )
    return Pagination(page=page, per_page=per_page)
