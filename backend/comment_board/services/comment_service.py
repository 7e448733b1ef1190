import logging

from comment_board.db.store import StoreGateway
from comment_board.exceptions import (
    InvalidInputError,
    NotFoundError,
    PermissionDeniedError,
)
from comment_board.models import RangeResult
from comment_board.models.comment import Comment

logger = logging.getLogger(__name__)


class CommentService:
    def __init__(self, store: StoreGateway[Comment]):
        self.store = store

    async def health_check(self) -> bool:
        return await self.store.health_check()

    async def list(self, page: int, per_page: int) -> RangeResult[Comment]:
        """List one page of comments. Listing is public."""
        return await self.store.get_range(page, per_page)

    async def create(self, author: str, content: str, token: str) -> None:
        """Create a comment owned by the visitor holding `token`."""
        if not author:
            raise InvalidInputError("No author provided")
        if not content:
            raise InvalidInputError("No comment provided")
        await self.store.insert({"author": author, "content": content, "uuid": token})

    async def edit(self, comment_id: int, content: str, token: str) -> Comment:
        """Replace a comment's content on behalf of its owner.

        Returns the updated comment as held in memory, without re-reading it.
        """
        if not content:
            raise InvalidInputError("No comment provided")
        comment = await self._get_owned(comment_id, token)
        comment = comment.model_copy(update={"content": content})
        await self.store.update({"id": comment.id, "content": comment.content})
        return comment

    async def delete(self, comment_id: int, token: str) -> Comment:
        """Soft-delete a comment on behalf of its owner.

        Returns the comment as it was before the deleted flag was set.
        """
        comment = await self._get_owned(comment_id, token)
        await self.store.soft_delete(comment.id)
        return comment

    async def _get_owned(self, comment_id: int, token: str) -> Comment:
        comment = await self.store.get_by_field("id", comment_id)
        if not comment:
            raise NotFoundError()
        if comment.uuid != token:
            logger.info(f"Rejected mutation of comment {comment_id}: token mismatch")
            raise PermissionDeniedError()
        return comment
