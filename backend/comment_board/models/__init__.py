from datetime import datetime
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


class BaseDBModel(BaseModel):
    id: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(
        from_attributes=True,
        ser_json_timedelta="iso8601",
    )


class RangeResult(BaseModel, Generic[T]):
    """One page of rows plus the total row count of the table."""

    items: List[T]
    total_count: int
