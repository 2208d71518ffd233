"""
Tests for the bill store: idempotent upsert, ownership and queries.
"""

from datetime import date

import pytest

from legisync.db.repositories import BillPersistenceStatus, BillRepository
from legisync.errors import NotFoundError, PersistenceError
from legisync.models.bill import Bill, BillSource, BillStatus


def _make_bill(
    external_id: str = "congress-119-hr-1",
    source: BillSource = BillSource.NATIONAL_LEGISLATIVE,
    **overrides,
) -> Bill:
    values = {
        "external_id": external_id,
        "source": source,
        "bill_number": "H.R. 1",
        "title": "Lower Energy Costs Act",
        "short_description": "Lower Energy Costs Act",
        "full_text": "Lower Energy Costs Act",
        "status": BillStatus.INTRODUCED,
        "introduced_date": date(2025, 1, 3),
        "category": "House",
    }
    values.update(overrides)
    return Bill(**values)


async def test_upsert_creates_then_updates(database) -> None:
    async with database.session() as session:
        created = await BillRepository(session).upsert(_make_bill())

    async with database.session() as session:
        updated = await BillRepository(session).upsert(
            _make_bill(status=BillStatus.PASSED_HOUSE, title="Lower Energy Costs Act (amended)")
        )

    assert created.status == BillPersistenceStatus.CREATED
    assert updated.status == BillPersistenceStatus.UPDATED
    assert created.bill_id == updated.bill_id

    async with database.session() as session:
        repo = BillRepository(session)
        assert await repo.count_bills() == 1
        stored = await repo.get_by_external_id("congress-119-hr-1")

    assert stored.status == BillStatus.PASSED_HOUSE.value
    assert stored.title == "Lower Energy Costs Act (amended)"


async def test_upsert_is_idempotent(database) -> None:
    bill = _make_bill()
    for _ in range(3):
        async with database.session() as session:
            await BillRepository(session).upsert(bill)

    async with database.session() as session:
        assert await BillRepository(session).count_bills() == 1


async def test_same_bill_number_from_two_sources_is_two_rows(database) -> None:
    congress = _make_bill()
    govtrack = _make_bill(external_id="govtrack-1", source=BillSource.BILL_TRACKER)
    assert congress.bill_number == govtrack.bill_number

    async with database.session() as session:
        repo = BillRepository(session)
        await repo.upsert(congress)
        await repo.upsert(govtrack)

    async with database.session() as session:
        assert await BillRepository(session).count_bills() == 2


async def test_upsert_keeps_insight_fields(database) -> None:
    async with database.session() as session:
        outcome = await BillRepository(session).upsert(_make_bill())

    async with database.session() as session:
        await BillRepository(session).update_insights(
            outcome.bill_id,
            impact_data={"timeline": "2026"},
            stages=[{"name": "Introduced", "status": "completed"}],
        )

    async with database.session() as session:
        await BillRepository(session).upsert(_make_bill(status=BillStatus.ENACTED))

    async with database.session() as session:
        stored = await BillRepository(session).get_by_id(outcome.bill_id)

    assert stored.status == BillStatus.ENACTED.value
    assert stored.impact_data == {"timeline": "2026"}
    assert stored.stages == [{"name": "Introduced", "status": "completed"}]


async def test_upsert_rejects_other_source(database) -> None:
    async with database.session() as session:
        await BillRepository(session).upsert(_make_bill(external_id="shared-1"))

    with pytest.raises(PersistenceError):
        async with database.session() as session:
            await BillRepository(session).upsert(
                _make_bill(external_id="shared-1", source=BillSource.BILL_TRACKER, title="Hijacked")
            )

    async with database.session() as session:
        stored = await BillRepository(session).get_by_external_id("shared-1")

    assert stored.source == BillSource.NATIONAL_LEGISLATIVE.value
    assert stored.title == "Lower Energy Costs Act"


async def test_update_insights_unknown_bill(database) -> None:
    with pytest.raises(NotFoundError):
        async with database.session() as session:
            await BillRepository(session).update_insights(999, impact_data={"timeline": "never"})


async def test_list_and_count_filters(database) -> None:
    bills = [
        _make_bill("congress-119-hr-1", status=BillStatus.ENACTED, introduced_date=date(2025, 1, 3)),
        _make_bill(
            "congress-119-s-2",
            bill_number="S. 2",
            title="Rural Hospitals Act",
            category="Senate",
            introduced_date=date(2025, 2, 1),
        ),
        _make_bill(
            "openstates-ocd-bill/1",
            source=BillSource.STATE_LEGISLATIVE,
            bill_number="AB 12",
            title="School Meals",
            category="State: CA",
            introduced_date=date(2025, 3, 1),
        ),
    ]
    async with database.session() as session:
        repo = BillRepository(session)
        for bill in bills:
            await repo.upsert(bill)

    async with database.session() as session:
        repo = BillRepository(session)

        latest_first = await repo.list_bills()
        assert [bill.bill_number for bill in latest_first] == ["AB 12", "S. 2", "H.R. 1"]

        enacted = await repo.list_bills(status=BillStatus.ENACTED.value)
        assert [bill.external_id for bill in enacted] == ["congress-119-hr-1"]

        state = await repo.list_bills(source=BillSource.STATE_LEGISLATIVE.value)
        assert [bill.category for bill in state] == ["State: CA"]

        assert await repo.count_bills(search="hospital") == 1
        assert await repo.count_bills(category="Senate") == 1

        page = await repo.list_bills(limit=1, offset=1)
        assert [bill.bill_number for bill in page] == ["S. 2"]


async def test_create_submission_rejects_duplicate(database) -> None:
    bill = _make_bill("submission-abc", source=BillSource.USER_SUBMISSION)

    async with database.session() as session:
        model = await BillRepository(session).create_submission(bill)
        assert model.id is not None

    with pytest.raises(PersistenceError):
        async with database.session() as session:
            await BillRepository(session).create_submission(bill)


async def test_to_domain(database) -> None:
    async with database.session() as session:
        repo = BillRepository(session)
        outcome = await repo.upsert(_make_bill())
        stored = repo.to_domain(await repo.get_by_id(outcome.bill_id))

    assert stored.id == outcome.bill_id
    assert stored.source == BillSource.NATIONAL_LEGISLATIVE
    assert stored.status == BillStatus.INTRODUCED
    assert stored.last_synced is not None
