from enum import Enum
from typing import Optional


class PersistenceOperation(str, Enum):
    STORE = "store"
    GET = "get"
    UPDATE = "update"
    DELETE = "delete"


class CommentBoardError(Exception):
    """Base class for errors raised by the comment board core."""


class NotFoundError(CommentBoardError):
    def __init__(self, message: str = "Not found"):
        super().__init__(message)


class PermissionDeniedError(CommentBoardError):
    def __init__(self, message: str = "Permission denied"):
        super().__init__(message)


class InvalidInputError(CommentBoardError):
    pass


class PersistenceError(CommentBoardError):
    """The underlying store or connection failed while running `operation`.

    The original exception is available as ``cause`` and as ``__cause__``
    when raised with ``raise ... from``.
    """

    def __init__(
        self, operation: PersistenceOperation, cause: Optional[BaseException] = None
    ):
        self.operation = PersistenceOperation(operation)
        self.cause = cause
        message = f"Failed to {self.operation.value} data"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
