"""Unit tests for BatchDeleter."""

from unittest.mock import AsyncMock, call
from uuid import uuid4

import pytest

from hive.retention.batch_deleter import BatchDeleter
from hive.retention.retention_models import RetentionTarget
from hive.retention.retention_repo import RetentionRepository


@pytest.fixture
def mock_repo():
    repo = AsyncMock()
    repo.delete_ids.side_effect = lambda target, ids: len(ids)
    return repo


async def test_empty_input_does_not_touch_the_store(mock_repo):
    deleter = BatchDeleter(mock_repo, chunk_size=2)

    assert await deleter.delete_by_ids(RetentionTarget.MESSAGES, []) == 0
    mock_repo.delete_ids.assert_not_awaited()
    mock_repo.commit.assert_not_awaited()


async def test_ids_are_deleted_in_chunks_and_committed_per_chunk(mock_repo):
    deleter = BatchDeleter(mock_repo, chunk_size=2)
    ids = [uuid4() for _ in range(5)]

    deleted = await deleter.delete_by_ids(RetentionTarget.MESSAGES, ids)

    assert deleted == 5
    assert mock_repo.delete_ids.await_args_list == [
        call(RetentionTarget.MESSAGES, ids[0:2]),
        call(RetentionTarget.MESSAGES, ids[2:4]),
        call(RetentionTarget.MESSAGES, ids[4:5]),
    ]
    assert mock_repo.commit.await_count == 3


async def test_reports_what_the_store_deleted(mock_repo):
    mock_repo.delete_ids.side_effect = [2, 0]
    deleter = BatchDeleter(mock_repo, chunk_size=2)

    deleted = await deleter.delete_by_ids(
        RetentionTarget.THREADS, [uuid4() for _ in range(4)]
    )

    assert deleted == 2


async def test_a_failing_chunk_keeps_earlier_chunks_committed(mock_repo):
    mock_repo.delete_ids.side_effect = [2, RuntimeError("connection lost")]
    deleter = BatchDeleter(mock_repo, chunk_size=2)

    with pytest.raises(RuntimeError):
        await deleter.delete_by_ids(RetentionTarget.MESSAGES, [uuid4() for _ in range(4)])

    assert mock_repo.commit.await_count == 1


async def test_deletes_rows_in_sqlite(session, seed, days_ago):
    org_id = await seed.org()
    thread_id = await seed.thread(org_id, days_ago(100))
    ids = await seed.messages(org_id, thread_id, days_ago(100), count=3)
    await seed.commit()

    repo = RetentionRepository(session)
    deleter = BatchDeleter(repo, chunk_size=2)

    deleted = await deleter.delete_by_ids(RetentionTarget.MESSAGES, ids + [uuid4()])

    assert deleted == 3
    assert await repo.page_ids_created_before(
        RetentionTarget.MESSAGES, org_id, days_ago(0), offset=0, limit=10
    ) == []
