"""
Tests for in-run record deduplication.
"""

from datetime import date

from legisync.models.bill import Bill, BillSource
from legisync.utils.dedupe import dedupe_by_key


def _make_bill(external_id: str, title: str = "Test bill") -> Bill:
    return Bill(
        external_id=external_id,
        source=BillSource.BILL_TRACKER,
        bill_number="H.R. 1",
        title=title,
        introduced_date=date(2025, 1, 3),
    )


def test_dedupe_keeps_first_occurrence() -> None:
    first = _make_bill("govtrack-1", title="First copy")
    second = _make_bill("govtrack-1", title="Second copy")
    other = _make_bill("govtrack-2")

    unique, duplicates = dedupe_by_key([first, other, second], lambda bill: bill.external_id)

    assert duplicates == 1
    assert [bill.title for bill in unique] == ["First copy", "Test bill"]


def test_dedupe_preserves_order() -> None:
    bills = [_make_bill(f"govtrack-{i}") for i in (3, 1, 2)]

    unique, duplicates = dedupe_by_key(bills, lambda bill: bill.external_id)

    assert duplicates == 0
    assert [bill.external_id for bill in unique] == ["govtrack-3", "govtrack-1", "govtrack-2"]


def test_dedupe_drops_records_without_key() -> None:
    records = [{"id": None}, {"id": "a"}, {"id": None}]

    unique, duplicates = dedupe_by_key(records, lambda record: record["id"])

    assert unique == [{"id": "a"}]
    assert duplicates == 0
