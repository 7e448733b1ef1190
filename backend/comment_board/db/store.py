import logging
from dataclasses import dataclass
from typing import Any, Dict, Generic, List, Type, TypeVar, Union

from pydantic import BaseModel
from sqlalchemy import Column, Table, false, func, insert, select, text, true, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from comment_board.exceptions import (
    InvalidInputError,
    PersistenceError,
    PersistenceOperation,
)
from comment_board.models import RangeResult

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

INFRASTRUCTURE_ERRORS = (SQLAlchemyError, OSError)


@dataclass(frozen=True)
class TableConfig:
    table: Table
    identity_field: str = "id"
    deleted_field: str = "deleted"
    updated_at_field: str = "updated_at"
    # Hide soft-deleted rows from get_by_field and get_range.
    exclude_deleted: bool = False

    @property
    def name(self) -> str:
        return self.table.name


class StoreGateway(Generic[T]):
    """Data access for a single table over a shared connection pool.

    Every operation checks a connection out of the pool on entry and
    returns it on exit, whatever the outcome. Infrastructure failures are
    re-raised as PersistenceError tagged with the operation that failed;
    absence is reported as None and left for the caller to interpret.
    """

    def __init__(self, engine: AsyncEngine, config: TableConfig, model: Type[T]):
        self.engine = engine
        self.config = config
        self.model = model

    async def health_check(self) -> bool:
        """Ping the database and create the table if needed. Never raises."""
        try:
            async with self.engine.begin() as conn:
                await conn.execute(text("SELECT 1"))
                await conn.run_sync(self.config.table.create, checkfirst=True)
            return True
        except Exception as e:
            logger.error(f"Database health check failed for {self.config.name}: {e}")
            return False

    async def get_by_field(self, field: str, value: Any) -> Union[T, List[T], None]:
        """Fetch rows where `field` equals `value`.

        The identity field yields a single entity or None, any other field
        a non-empty list or None.
        """
        column = self._column(field)
        is_identity = field == self.config.identity_field

        stmt = self._visible(select(self.config.table).where(column == value))
        if is_identity:
            stmt = stmt.limit(1)

        try:
            async with self.engine.connect() as conn:
                rows = (await conn.execute(stmt)).mappings().all()
        except INFRASTRUCTURE_ERRORS as e:
            logger.exception(
                f"Failed to get data from {self.config.name} by {field}: {e}"
            )
            raise PersistenceError(PersistenceOperation.GET, e) from e

        entities = [self.model.model_validate(dict(row)) for row in rows]
        if is_identity:
            return entities[0] if entities else None
        return entities or None

    async def get_range(self, page: int, per_page: int) -> RangeResult[T]:
        """Return one 1-based page of rows and the total row count.

        Both come from a single statement: the count is left-joined with
        the page slice, so an out-of-range page still reports the total.
        """
        if page < 1 or per_page < 1:
            raise InvalidInputError("page and per_page must both be at least 1")

        table = self.config.table
        identity_field = self.config.identity_field
        offset = (page - 1) * per_page

        total = self._visible(
            select(func.count().label("total_count")).select_from(table)
        ).subquery("total")
        page_rows = (
            self._visible(select(table))
            .order_by(self._column(identity_field))
            .limit(per_page)
            .offset(offset)
            .subquery("page_rows")
        )
        stmt = (
            select(total.c.total_count, page_rows)
            .select_from(total.outerjoin(page_rows, true()))
            .order_by(page_rows.c[identity_field])
        )

        try:
            async with self.engine.connect() as conn:
                rows = (await conn.execute(stmt)).mappings().all()
        except INFRASTRUCTURE_ERRORS as e:
            logger.exception(f"Failed to get part of data from {self.config.name}: {e}")
            raise PersistenceError(PersistenceOperation.GET, e) from e

        total_count = rows[0]["total_count"] if rows else 0
        items = [
            self.model.model_validate(
                {key: value for key, value in row.items() if key != "total_count"}
            )
            for row in rows
            if row[identity_field] is not None
        ]
        return RangeResult[self.model](items=items, total_count=total_count)

    async def insert(self, values: Dict[str, Any]) -> None:
        if not values:
            raise InvalidInputError("No data provided to insert")
        self._check_fields(values)

        stmt = insert(self.config.table).values(values)
        try:
            async with self.engine.begin() as conn:
                await conn.execute(stmt)
        except INFRASTRUCTURE_ERRORS as e:
            logger.exception(f"Failed to insert data into {self.config.name}: {e}")
            raise PersistenceError(PersistenceOperation.STORE, e) from e

    async def update(self, values: Dict[str, Any]) -> None:
        """Set every given field on the row matching the identity field.

        The updated-at column is always stamped with the database clock.
        """
        identity_field = self.config.identity_field
        if values.get(identity_field) is None:
            raise InvalidInputError(f"Missing {identity_field} to update")

        fields = {
            field: value for field, value in values.items() if field != identity_field
        }
        if not fields:
            raise InvalidInputError("No data provided to update")
        self._check_fields(fields)
        fields[self.config.updated_at_field] = func.current_timestamp()

        stmt = (
            update(self.config.table)
            .where(self._column(identity_field) == values[identity_field])
            .values(fields)
        )
        try:
            async with self.engine.begin() as conn:
                await conn.execute(stmt)
        except INFRASTRUCTURE_ERRORS as e:
            logger.exception(f"Failed to update data of {self.config.name}: {e}")
            raise PersistenceError(PersistenceOperation.UPDATE, e) from e

    async def soft_delete(self, identity: Any) -> None:
        stmt = (
            update(self.config.table)
            .where(self._column(self.config.identity_field) == identity)
            .values({self.config.deleted_field: True})
        )
        try:
            async with self.engine.begin() as conn:
                await conn.execute(stmt)
        except INFRASTRUCTURE_ERRORS as e:
            logger.exception(f"Failed to delete data from {self.config.name}: {e}")
            raise PersistenceError(PersistenceOperation.DELETE, e) from e

    def _column(self, field: str) -> Column:
        try:
            return self.config.table.c[field]
        except KeyError:
            raise InvalidInputError(
                f"Unknown field '{field}' for table {self.config.name}"
            ) from None

    def _check_fields(self, values: Dict[str, Any]) -> None:
        for field in values:
            self._column(field)

    def _visible(self, stmt):
        if not self.config.exclude_deleted:
            return stmt
        return stmt.where(self._column(self.config.deleted_field).is_(false()))
