"""
Tests for the scheduled sync entry points.
"""

import httpx

from legisync.config import DatabaseConfig
from legisync.flows.migration_flow import make_alembic_config
from legisync.flows.sync_flow import run_sync

from .factories import govtrack_bill, json_response, make_settings, mock_client


def _govtrack_only(request: httpx.Request) -> httpx.Response:
    if request.url.host == "www.govtrack.us":
        return json_response({"objects": [govtrack_bill(11), govtrack_bill(12), govtrack_bill(13)]})
    return httpx.Response(503, text="unavailable")


async def test_run_sync_returns_camel_case_report(database) -> None:
    settings = make_settings(openstates_jurisdictions=["ca"])

    report = await run_sync(settings, database, client=mock_client(_govtrack_only))

    assert report["success"] is True
    assert report["totalBillsSynced"] == 3
    assert report["abandonedRuns"] == 0
    assert sorted(report["sources"]) == ["congress", "govtrack", "openstates"]
    assert report["sources"]["congress"]["success"] is False


async def test_run_sync_leaves_passed_database_open(database) -> None:
    settings = make_settings(openstates_jurisdictions=["ca"])

    await run_sync(settings, database, client=mock_client(_govtrack_only))

    assert database.is_initialized


def test_alembic_config_uses_runtime_url() -> None:
    database = DatabaseConfig(database_url="postgres://user:pw@db.internal:5432/legisync")

    config = make_alembic_config("alembic.ini", database)

    assert config.get_main_option("sqlalchemy.url") == "postgresql+asyncpg://user:pw@db.internal:5432/legisync"
