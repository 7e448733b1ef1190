import math
from typing import List, Optional
from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from comment_board.models import BaseDBModel


class CommentBase(BaseModel):
    author: str = Field(..., min_length=1, max_length=255)
    content: str = Field(..., min_length=1)


class CommentCreate(CommentBase):
    pass


class CommentUpdate(BaseModel):
    id: int
    content: str = Field(..., min_length=1)


class CommentDelete(BaseModel):
    id: int


class CommentPublic(BaseDBModel, CommentBase):
    updated_at: Optional[datetime] = None
    deleted: bool = False


class Comment(CommentPublic):
    # Ownership token, compared by the service and never serialized.
    uuid: str = Field(..., exclude=True)


class CommentPage(BaseModel):
    data: List[CommentPublic]
    total: int
    page: int
    per_page: int = Field(..., alias="perPage")
    pages: int

    model_config = ConfigDict(populate_by_name=True)

    @classmethod
    def build(cls, data: List[CommentPublic], total: int, page: int, per_page: int):
        return cls(
            data=data,
            total=total,
            page=page,
            per_page=per_page,
            pages=math.ceil(total / per_page),
        )
