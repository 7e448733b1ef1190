from fastapi import APIRouter, Depends, status

from comment_board.api.dependencies import (
    Pagination,
    get_comment_service,
    get_pagination,
    get_visitor_token,
)
from comment_board.models.comment import (
    CommentCreate,
    CommentDelete,
    CommentPage,
    CommentUpdate,
)
from comment_board.services.comment_service import CommentService

router = APIRouter()


@router.get("", response_model=CommentPage)
async def list_comments(
    pagination: Pagination = Depends(get_pagination),
    service: CommentService = Depends(get_comment_service),
):
    """List one page of comments, oldest first."""
    result = await service.list(pagination.page, pagination.per_page)
    return CommentPage.build(
        result.items, result.total_count, pagination.page, pagination.per_page
    )


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_comment(
    payload: CommentCreate,
    token: str = Depends(get_visitor_token),
    service: CommentService = Depends(get_comment_service),
):
    """Create a comment owned by the current visitor."""
    await service.create(payload.author, payload.content, token)
    return {"message": "Comment created"}


@router.put("")
async def update_comment(
    payload: CommentUpdate,
    token: str = Depends(get_visitor_token),
    service: CommentService = Depends(get_comment_service),
):
    """Update a comment's content on behalf of its owner."""
    await service.edit(payload.id, payload.content, token)
    return {"message": "Comment updated"}


@router.delete("")
async def delete_comment(
    payload: CommentDelete,
    token: str = Depends(get_visitor_token),
    service: CommentService = Depends(get_comment_service),
):
    """Delete a comment on behalf of its owner"""
    await service.delete(payload.id, token)
    return {"message": "Comment deleted"}
