import pytest

from comment_board.exceptions import (
    InvalidInputError,
    NotFoundError,
    PermissionDeniedError,
    PersistenceError,
)
from comment_board.services.comment_service import CommentService


async def test_create_then_list(service):
    await service.create("alice", "first", "tok1")
    await service.create("bob", "second", "tok2")

    result = await service.list(1, 10)

    assert result.total_count == 2
    assert [(c.author, c.content) for c in result.items] == [
        ("alice", "first"),
        ("bob", "second"),
    ]
    assert len({c.id for c in result.items}) == 2


async def test_create_records_owner_token(service, store):
    await service.create("a", "hi", "tok1")

    comment = await store.get_by_field("id", 1)

    assert comment.uuid == "tok1"


async def test_edit_by_owner_then_rejected_for_other_token(service, store):
    await service.create("a", "hi", "tok1")

    edited = await service.edit(1, "bye", "tok1")
    assert edited.content == "bye"

    with pytest.raises(PermissionDeniedError):
        await service.edit(1, "x", "tok2")

    stored = await store.get_by_field("id", 1)
    assert stored.content == "bye"
    assert stored.updated_at is not None


async def test_edit_returns_in_memory_entity(service):
    await service.create("a", "hi", "tok1")

    edited = await service.edit(1, "bye", "tok1")

    assert edited.id == 1
    assert edited.author == "a"
    assert edited.updated_at is None


@pytest.mark.parametrize("token", ["tok1", "tok2", ""])
async def test_missing_comment_is_not_found_for_any_token(service, token):
    await service.create("a", "hi", "tok1")

    with pytest.raises(NotFoundError):
        await service.edit(99, "bye", token)
    with pytest.raises(NotFoundError):
        await service.delete(99, token)


async def test_delete_returns_snapshot_before_deletion(service, store):
    await service.create("a", "hi", "tok1")

    deleted = await service.delete(1, "tok1")

    assert deleted.content == "hi"
    assert deleted.author == "a"
    assert deleted.deleted is False
    assert (await store.get_by_field("id", 1)).deleted is True


async def test_delete_by_other_token_is_denied(service, store):
    await service.create("a", "hi", "tok1")

    with pytest.raises(PermissionDeniedError):
        await service.delete(1, "tok2")

    assert (await store.get_by_field("id", 1)).deleted is False


async def test_deleted_comment_is_still_listed_and_editable(service):
    await service.create("a", "hi", "tok1")
    await service.delete(1, "tok1")

    edited = await service.edit(1, "again", "tok1")

    assert edited.content == "again"
    assert (await service.list(1, 10)).total_count == 1


async def test_health_check(service):
    assert await service.health_check() is True


async def test_health_check_reports_unreachable_store(broken_store):
    assert await CommentService(broken_store).health_check() is False


async def test_persistence_failures_propagate(broken_store):
    service = CommentService(broken_store)

    with pytest.raises(PersistenceError):
        await service.create("a", "hi", "tok1")
    with pytest.raises(PersistenceError):
        await service.edit(1, "bye", "tok1")


@pytest.mark.parametrize("author,content", [("", "hi"), ("a", ""), ("", "")])
async def test_create_rejects_empty_author_or_content(service, author, content):
    with pytest.raises(InvalidInputError):
        await service.create(author, content, "tok1")

    assert (await service.list(1, 10)).total_count == 0


async def test_edit_rejects_empty_content(service, store):
    await service.create("a", "hi", "tok1")

    with pytest.raises(InvalidInputError):
        await service.edit(1, "", "tok1")

    assert (await store.get_by_field("id", 1)).content == "hi"
    assert [c.content for c in (await service.list(1, 10)).items] == ["hi"]
    deleted = await service.delete(1, "tok1")
    assert deleted.content == "hi"


async def test_empty_content_is_rejected_before_lookup(broken_store):
    service = CommentService(broken_store)

    with pytest.raises(InvalidInputError):
        await service.edit(1, "", "tok1")
    with pytest.raises(InvalidInputError):
        await service.create("a", "", "tok1")
