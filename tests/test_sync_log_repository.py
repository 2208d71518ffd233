"""
Tests for sync log bookkeeping.
"""

from datetime import timedelta

from sqlalchemy import update

from legisync.db.models import SyncLogModel
from legisync.db.repositories import SyncLogRepository
from legisync.models.sync_models import SyncLogStatus
from legisync.utils.time_utils import utc_now


async def test_start_and_complete(database) -> None:
    repo = SyncLogRepository(database)

    entry = await repo.start("congress.gov")
    assert entry.status == SyncLogStatus.IN_PROGRESS.value
    assert entry.completed_at is None

    await repo.complete(entry.id, bills_synced=8, failed_records=["congress-119-hr-9"])

    stored = await repo.get(entry.id)
    assert stored.status == SyncLogStatus.COMPLETED.value
    assert stored.bills_synced == 8
    assert stored.failed_records == ["congress-119-hr-9"]
    assert stored.completed_at >= stored.started_at


async def test_fail_records_zero_bills(database) -> None:
    repo = SyncLogRepository(database)
    entry = await repo.start("openstates")

    await repo.fail(entry.id, "OPENSTATES_API_KEY not configured")

    stored = await repo.get(entry.id)
    assert stored.status == SyncLogStatus.FAILED.value
    assert stored.bills_synced == 0
    assert stored.error_message == "OPENSTATES_API_KEY not configured"


async def test_terminal_entry_is_not_reopened(database) -> None:
    repo = SyncLogRepository(database)
    entry = await repo.start("govtrack")
    await repo.complete(entry.id, bills_synced=3)

    await repo.fail(entry.id, "late failure")

    stored = await repo.get(entry.id)
    assert stored.status == SyncLogStatus.COMPLETED.value
    assert stored.bills_synced == 3
    assert stored.error_message is None


async def test_get_recent_newest_first(database) -> None:
    repo = SyncLogRepository(database)
    first = await repo.start("congress.gov")
    second = await repo.start("govtrack")
    third = await repo.start("congress.gov")

    recent = await repo.get_recent(limit=2)
    assert [entry.id for entry in recent] == [third.id, second.id]

    congress = await repo.get_recent(source="congress.gov")
    assert [entry.id for entry in congress] == [third.id, first.id]


async def test_stale_entries_marked_failed(database) -> None:
    repo = SyncLogRepository(database)
    stale = await repo.start("congress.gov")
    fresh = await repo.start("govtrack")

    async with database.session() as session:
        await session.execute(
            update(SyncLogModel)
            .where(SyncLogModel.id == stale.id)
            .values(started_at=utc_now() - timedelta(hours=2))
        )

    assert [entry.id for entry in await repo.find_stale(60)] == [stale.id]
    assert await repo.mark_stale_failed(60) == 1

    stale_after = await repo.get(stale.id)
    fresh_after = await repo.get(fresh.id)
    assert stale_after.status == SyncLogStatus.FAILED.value
    assert "Abandoned" in stale_after.error_message
    assert fresh_after.status == SyncLogStatus.IN_PROGRESS.value
    assert await repo.mark_stale_failed(60) == 0
