from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Integer,
    MetaData,
    String,
    Table,
    Text,
    false,
    func,
)

metadata = MetaData()


def comments_table(name: str = "comments") -> Table:
    """Return the comments table, defining it on first use."""
    if name in metadata.tables:
        return metadata.tables[name]

    return Table(
        name,
        metadata,
        Column("id", Integer, primary_key=True, autoincrement=True),
        Column("content", Text, nullable=False),
        Column("author", String(255), nullable=False),
        Column(
            "created_at",
            DateTime(timezone=True),
            nullable=False,
            server_default=func.current_timestamp(),
        ),
        Column("updated_at", DateTime(timezone=True), nullable=True),
        Column("deleted", Boolean, nullable=False, server_default=false()),
        Column("uuid", String(64), nullable=False, index=True),
    )
