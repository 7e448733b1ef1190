import pytest

from comment_board.config import Settings
from comment_board.db.database import create_engine, dispose_engine
from comment_board.db.store import StoreGateway, TableConfig
from comment_board.db.tables import comments_table
from comment_board.models.comment import Comment
from comment_board.services.comment_service import CommentService


@pytest.fixture
def settings(tmp_path):
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'comments.db'}",
        db_pool_size=2,
        db_pool_timeout=2,
        cookie_domain="",
    )


@pytest.fixture
def unreachable_settings(tmp_path):
    return Settings(
        _env_file=None,
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'missing' / 'comments.db'}",
        db_pool_size=1,
        db_pool_timeout=1,
    )


@pytest.fixture
async def engine(settings):
    engine = create_engine(settings)
    yield engine
    await dispose_engine(engine)


@pytest.fixture
async def store(engine):
    store = StoreGateway(engine, TableConfig(comments_table()), Comment)
    assert await store.health_check()
    return store


@pytest.fixture
async def broken_store(unreachable_settings):
    engine = create_engine(unreachable_settings)
    yield StoreGateway(engine, TableConfig(comments_table()), Comment)
    await dispose_engine(engine)


@pytest.fixture
def service(store):
    return CommentService(store)
