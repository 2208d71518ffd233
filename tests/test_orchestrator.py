"""
Tests for multi-source orchestration and failure isolation.
"""

from datetime import timedelta

import httpx
from sqlalchemy import update

from legisync.adapters.base_adapter import BaseAdapter
from legisync.db.models import SyncLogModel
from legisync.db.repositories import BillRepository, SyncLogRepository
from legisync.errors import PersistenceError
from legisync.models.sync_models import SyncLogStatus
from legisync.orchestration import SyncOrchestrator
from legisync.orchestration.sync_orchestrator import default_adapters
from legisync.utils.time_utils import utc_now

from .factories import (
    congress_bill,
    govtrack_bill,
    json_response,
    make_settings,
    mock_client,
    openstates_bill,
)


def _upstream(congress_status: int = 200, govtrack_status: int = 200, openstates_status: int = 200):
    def handler(request: httpx.Request) -> httpx.Response:
        host = request.url.host
        if host == "api.congress.gov":
            if congress_status != 200:
                return httpx.Response(congress_status, text="error")
            return json_response({"bills": [congress_bill(number=str(n)) for n in range(1, 4)]})
        if host == "www.govtrack.us":
            if govtrack_status != 200:
                return httpx.Response(govtrack_status, text="error")
            return json_response({"objects": [govtrack_bill(1), govtrack_bill(2)]})
        if host == "v3.openstates.org":
            if openstates_status != 200:
                return httpx.Response(openstates_status, text="error")
            jurisdiction = request.url.params["jurisdiction"]
            return json_response({"results": [openstates_bill(f"ocd-bill/{jurisdiction}")]})
        return httpx.Response(404)

    return handler


def _orchestrator(settings, database, handler) -> SyncOrchestrator:
    adapters = default_adapters(settings, database, client=mock_client(handler))
    return SyncOrchestrator(settings, database, adapters=adapters)


async def test_all_sources_succeed(database) -> None:
    settings = make_settings(openstates_jurisdictions=["ca", "ny"])

    report = await _orchestrator(settings, database, _upstream()).run()

    assert report.success is True
    assert report.total_bills_synced == 3 + 2 + 2
    assert {key: result.count for key, result in report.sources.items()} == {
        "congress": 3,
        "govtrack": 2,
        "openstates": 2,
    }
    assert report.failed_sources == []


async def test_failing_source_does_not_stop_others(database) -> None:
    settings = make_settings(openstates_jurisdictions=["ca"])

    report = await _orchestrator(settings, database, _upstream(congress_status=500)).run()

    assert report.success is True
    assert report.sources["congress"].success is False
    assert report.sources["congress"].count == 0
    assert "500" in report.sources["congress"].error
    assert report.sources["govtrack"].count == 2
    assert report.sources["openstates"].count == 1
    assert report.total_bills_synced == 3
    assert report.failed_sources == ["congress"]

    logs = await SyncLogRepository(database).get_recent()
    statuses = {entry.source: entry.status for entry in logs}
    assert statuses == {
        "congress.gov": SyncLogStatus.FAILED.value,
        "govtrack": SyncLogStatus.COMPLETED.value,
        "openstates": SyncLogStatus.COMPLETED.value,
    }


async def test_missing_keys_only_affect_their_sources(database) -> None:
    settings = make_settings(congress_api_key=None, openstates_api_key=None)

    report = await _orchestrator(settings, database, _upstream()).run()

    assert report.sources["congress"].success is False
    assert "CONGRESS_GOV_API_KEY" in report.sources["congress"].error
    assert report.sources["openstates"].success is False
    assert report.sources["govtrack"].success is True
    assert report.total_bills_synced == 2
    assert not report.all_failed


async def test_every_source_failing_still_reports(database) -> None:
    settings = make_settings()
    handler = _upstream(congress_status=500, govtrack_status=500, openstates_status=500)

    report = await _orchestrator(settings, database, handler).run()

    assert report.success is True
    assert report.all_failed
    assert report.total_bills_synced == 0

    async with database.session() as session:
        assert await BillRepository(session).count_bills() == 0


async def test_unexpected_adapter_error_is_isolated(settings, database) -> None:
    class ExplodingAdapter(BaseAdapter):
        source_key = "exploding"
        source_label = "exploding"

        def build_requests(self):
            raise RuntimeError("kaboom")

        def extract_records(self, payload):
            return []

        def normalize(self, raw, synced_at, request):
            raise NotImplementedError

    adapters = [ExplodingAdapter(settings, database)] + default_adapters(
        settings, database, client=mock_client(_upstream())
    )[1:2]

    report = await SyncOrchestrator(settings, database, adapters=adapters).run()

    assert report.sources["exploding"].error == "kaboom"
    assert report.sources["govtrack"].success is True


async def test_stale_runs_closed_before_sync(settings, database) -> None:
    repo = SyncLogRepository(database)
    stale = await repo.start("congress.gov")
    async with database.session() as session:
        await session.execute(
            update(SyncLogModel)
            .where(SyncLogModel.id == stale.id)
            .values(started_at=utc_now() - timedelta(hours=3))
        )

    report = await _orchestrator(settings, database, _upstream()).run()

    assert report.abandoned_runs == 1
    assert (await repo.get(stale.id)).status == SyncLogStatus.FAILED.value


async def test_stale_sweep_failure_does_not_abort_run(settings, database, monkeypatch) -> None:
    async def locked(self, older_than_minutes):
        raise PersistenceError("sync_log locked")

    monkeypatch.setattr(SyncLogRepository, "mark_stale_failed", locked)

    report = await _orchestrator(settings, database, _upstream()).run()

    assert report.abandoned_runs == 0
    assert report.sources["govtrack"].success is True
    assert report.sources["govtrack"].count == 2


async def test_report_serializes_camel_case(settings, database) -> None:
    report = await _orchestrator(settings, database, _upstream(govtrack_status=502)).run()
    payload = report.model_dump(mode="json", by_alias=True)

    assert set(payload) == {"success", "totalBillsSynced", "sources", "abandonedRuns", "timestamp"}
    assert payload["sources"]["govtrack"]["success"] is False
    assert "failedRecords" in payload["sources"]["congress"]
