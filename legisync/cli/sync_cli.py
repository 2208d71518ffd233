"""
Command-line interface for running and inspecting LegiSync syncs.

Usage:
    python -m legisync.cli.sync_cli sync
    python -m legisync.cli.sync_cli sync --source govtrack --output report.json
    python -m legisync.cli.sync_cli logs --limit 20
    python -m legisync.cli.sync_cli init-db
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from ..config import Settings, get_settings
from ..db.repositories import SyncLogRepository
from ..db.session import Database
from ..orchestration.sync_orchestrator import SyncOrchestrator, default_adapters


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)

logger = logging.getLogger(__name__)


async def run_sync(
    settings: Settings,
    sources: Optional[List[str]],
    output_file: Optional[str],
) -> int:
    """
    Run the orchestrator and print the report.

    Returns:
        Exit code: 0 unless every source failed
    """
    database = Database(settings.db)
    await database.initialize()

    try:
        adapters = default_adapters(settings, database)
        if sources:
            adapters = [adapter for adapter in adapters if adapter.source_key in sources]

        print("\n" + "=" * 60)
        print("LegiSync - Legislative Data Sync")
        print("=" * 60)
        print(f"Sources: {', '.join(adapter.source_key for adapter in adapters)}")
        print("=" * 60 + "\n")

        report = await SyncOrchestrator(settings, database, adapters=adapters).run()

        print("\n" + "=" * 60)
        print("RESULTS")
        print("=" * 60)
        print(f"Total bills synced: {report.total_bills_synced}")
        if report.abandoned_runs:
            print(f"Abandoned runs closed: {report.abandoned_runs}")
        for key, result in report.sources.items():
            mark = "✅" if result.success else "❌"
            line = f"  {mark} {key}: {result.count} bills"
            if result.error:
                line += f" ({result.error})"
            if result.failed_records:
                line += f", {len(result.failed_records)} records skipped"
            print(line)

        if output_file:
            output_path = Path(output_file)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_text(
                json.dumps(report.model_dump(mode="json", by_alias=True), indent=2),
                encoding="utf-8",
            )
            print(f"\n💾 Report saved to: {output_path.absolute()}")

        print("=" * 60 + "\n")
        return 1 if report.all_failed else 0

    finally:
        await database.close()


async def show_logs(settings: Settings, source: Optional[str], limit: int) -> int:
    """Print the most recent sync log entries."""
    database = Database(settings.db)
    await database.initialize()

    try:
        entries = await SyncLogRepository(database).get_recent(limit=limit, source=source)

        if not entries:
            print("No sync runs recorded")
            return 0

        for entry in entries:
            completed = entry.completed_at.isoformat(timespec="seconds") if entry.completed_at else "-"
            synced = entry.bills_synced if entry.bills_synced is not None else "-"
            print(
                f"#{entry.id:<5} {entry.source:<14} {entry.status:<12} "
                f"started={entry.started_at.isoformat(timespec='seconds')} "
                f"completed={completed} bills={synced}"
            )
            if entry.error_message:
                print(f"       error: {entry.error_message}")
        return 0

    finally:
        await database.close()


async def init_db(settings: Settings) -> int:
    """Create tables directly (local SQLite runs; deployed databases use Alembic)."""
    database = Database(settings.db)
    await database.initialize()
    try:
        await database.create_tables()
        print("✅ Database tables created")
        return 0
    finally:
        await database.close()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Run and inspect LegiSync legislative data syncs",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  # Sync every source
  python -m legisync.cli.sync_cli sync

  # Sync GovTrack only and save the report
  python -m legisync.cli.sync_cli sync --source govtrack --output report.json

  # Show the 10 most recent Open States runs
  python -m legisync.cli.sync_cli logs --source openstates --limit 10
        """
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable debug logging"
    )

    subparsers = parser.add_subparsers(dest="command", required=True)

    sync_parser = subparsers.add_parser("sync", help="Run a sync across sources")
    sync_parser.add_argument(
        "--source",
        action="append",
        choices=["congress", "govtrack", "openstates"],
        help="Limit the run to this source (repeatable)"
    )
    sync_parser.add_argument(
        "--output",
        type=str,
        help="Save the report to a JSON file"
    )

    logs_parser = subparsers.add_parser("logs", help="Show recent sync log entries")
    logs_parser.add_argument(
        "--source",
        type=str,
        help="Filter by sync log source label (e.g., congress.gov)"
    )
    logs_parser.add_argument(
        "--limit",
        type=int,
        default=20,
        help="Number of entries to show (default: 20)"
    )

    subparsers.add_parser("init-db", help="Create database tables")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point"""
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    settings = get_settings()

    if args.command == "sync":
        return asyncio.run(run_sync(settings, args.source, args.output))
    if args.command == "logs":
        return asyncio.run(show_logs(settings, args.source, args.limit))
    return asyncio.run(init_db(settings))


if __name__ == "__main__":
    sys.exit(main())
