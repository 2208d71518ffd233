"""
Base adapter for legislative sources.

Every source runs through the same `sync()` routine: open a sync log entry,
fetch one or more pages, normalize each record into a Bill, upsert it, and
close the log entry. Subclasses only describe their requests and how one raw
record maps to a Bill.

Responsibility: Generic fetch-normalize-upsert routine shared by all sources
"""

from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, AsyncIterator, Dict, List, Optional
import logging
import time

import httpx

from ..config import Settings
from ..db.repositories import BillRepository, SyncLogRepository
from ..db.session import Database
from ..errors import (
    ConfigurationError,
    LegiSyncError,
    PersistenceError,
    UpstreamFetchError,
    UpstreamParseError,
)
from ..models.bill import Bill, BillSource
from ..models.sync_models import AdapterRunResult, RecordError
from ..utils.dedupe import dedupe_by_key
from ..utils.rate_limiter import RateLimiter
from ..utils.time_utils import utc_now


@dataclass
class PageRequest:
    """One GET the adapter issues during a run."""

    url: str
    params: Dict[str, Any] = field(default_factory=dict)
    headers: Dict[str, str] = field(default_factory=dict)
    label: str = ""


class BaseAdapter(ABC):
    """
    Abstract base class for all legislative source adapters.

    Subclasses set three class attributes and implement three methods:

        source_key    key used in external ids and the sync report ("congress")
        source_label  value written to sync_log.source ("congress.gov")
        bill_source   provenance tag stored on every bill

        build_requests()   the page requests for one run
        extract_records()  raw records from one decoded page
        normalize()        one raw record to a Bill

    A run never writes a partially normalized record, and a record that
    fails normalization or persistence is skipped without aborting the page.
    """

    source_key: str = ""
    source_label: str = ""
    bill_source: BillSource = BillSource.NATIONAL_LEGISLATIVE

    def __init__(
        self,
        settings: Settings,
        database: Database,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """
        Initialize base adapter.

        Args:
            settings: Application settings
            database: Initialized database
            client: HTTP client to use instead of creating one per run
        """
        self.settings = settings
        self.config = settings.sources
        self.database = database
        self.sync_log = SyncLogRepository(database)
        self._client = client

        # burst=1 means no bursting, strict rate limiting
        self.rate_limiter = RateLimiter(
            rate=self.config.rate_limit_per_second,
            burst=1
        )

        self.logger = logging.getLogger(f"adapter.{self.source_key}")

    def validate_config(self) -> None:
        """Raise ConfigurationError when a required credential is missing."""

    @abstractmethod
    def build_requests(self) -> List[PageRequest]:
        """Page requests for one run, in the order they are fetched."""

    @abstractmethod
    def extract_records(self, payload: Any) -> List[Dict[str, Any]]:
        """
        Pull the raw record list out of one decoded response.

        Raises:
            UpstreamParseError: If the payload does not have the expected shape
        """

    @abstractmethod
    def normalize(
        self,
        raw: Dict[str, Any],
        synced_at: datetime,
        request: PageRequest,
    ) -> Bill:
        """
        Convert one raw record to a Bill.

        Raises:
            UpstreamParseError: If a required field is missing or malformed
        """

    def native_id(self, raw: Any) -> Optional[str]:
        """Best-effort identifier for error reporting when normalize() fails."""
        if isinstance(raw, dict) and raw.get("id") is not None:
            return f"{self.source_key}-{raw['id']}"
        return None

    async def sync(self) -> AdapterRunResult:
        """
        Run one full sync for this source.

        Returns:
            AdapterRunResult with the number of records upserted

        Raises:
            ConfigurationError: If a required credential is missing
            UpstreamFetchError: If the fetch fails (or every page fails)
            UpstreamParseError: If the response shape is wrong
        """
        start = time.monotonic()
        self.rate_limiter.reset()

        entry = await self.sync_log.start(self.source_label)
        self.logger.info(f"Starting {self.source_label} sync (log_id={entry.id})")

        try:
            self.validate_config()
            result = await self._run(entry.id)
        except Exception as e:
            message = e.message if isinstance(e, LegiSyncError) else str(e)
            self.logger.error(f"{self.source_label} sync failed: {message}")
            await self.sync_log.fail(entry.id, message)
            raise

        result.duration_seconds = time.monotonic() - start
        result.rate_limit_hits = self.rate_limiter.hits

        await self.sync_log.complete(
            entry.id,
            bills_synced=result.count,
            failed_records=result.failed_records,
        )

        self.logger.info(
            f"{self.source_label} sync completed: {result.count} bills synced, "
            f"{len(result.record_errors)} skipped, "
            f"{result.duplicates_skipped} duplicates "
            f"in {result.duration_seconds:.2f}s"
        )
        return result

    async def _run(self, log_id: int) -> AdapterRunResult:
        requests = self.build_requests()
        synced_at = utc_now()

        bills: List[Bill] = []
        record_errors: List[RecordError] = []
        page_errors: List[RecordError] = []
        fetched = 0

        async with self._client_context() as client:
            for request in requests:
                try:
                    payload = await self._fetch(client, request)
                    raw_records = self.extract_records(payload)
                except (UpstreamFetchError, UpstreamParseError) as e:
                    # A single-page source has nothing else to fall back on
                    if len(requests) == 1:
                        raise
                    self.logger.error(f"Page {request.label or request.url} failed: {e.message}")
                    page_errors.append(self._record_error(e, record_id=request.label or None))
                    continue

                fetched += len(raw_records)
                self.logger.info(
                    f"Fetched {len(raw_records)} records"
                    + (f" from {request.label}" if request.label else "")
                )

                for raw in raw_records:
                    try:
                        if not isinstance(raw, dict):
                            raise UpstreamParseError(f"Record is not a JSON object ({type(raw).__name__})")
                        bills.append(self.normalize(raw, synced_at, request))
                    except (UpstreamParseError, ValueError, TypeError, KeyError, AttributeError) as e:
                        record_id = self.native_id(raw)
                        self.logger.warning(f"Skipping malformed record {record_id}: {e}")
                        record_errors.append(self._record_error(e, record_id=record_id))

        if requests and len(page_errors) == len(requests):
            raise UpstreamFetchError(
                f"All {len(requests)} {self.source_label} requests failed",
                source=self.source_key,
                context={"pages": [err.message for err in page_errors]},
            )

        unique, duplicates = dedupe_by_key(bills, lambda bill: bill.external_id)
        if duplicates:
            self.logger.info(f"Dropped {duplicates} duplicate records")

        count = 0
        for bill in unique:
            try:
                async with self.database.session() as session:
                    await BillRepository(session).upsert(bill)
                count += 1
            except PersistenceError as e:
                self.logger.error(f"Failed to persist {bill.external_id}: {e.message}")
                record_errors.append(self._record_error(e, record_id=bill.external_id))

        return AdapterRunResult(
            source=self.source_key,
            log_id=log_id,
            count=count,
            fetched=fetched,
            duplicates_skipped=duplicates,
            record_errors=record_errors,
            page_errors=page_errors,
        )

    async def _fetch(self, client: httpx.AsyncClient, request: PageRequest) -> Any:
        """GET one page and decode it as JSON."""
        await self.rate_limiter.acquire()
        self.logger.debug(f"GET {request.url} {request.label}".rstrip())

        try:
            response = await client.get(
                request.url,
                params=request.params or None,
                headers=request.headers or None,
            )
        except httpx.TimeoutException as e:
            raise UpstreamFetchError(
                f"{self.source_label} request timed out after {self.config.fetch_timeout_seconds}s",
                source=self.source_key,
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamFetchError(
                f"{self.source_label} request failed: {e}",
                source=self.source_key,
            ) from e

        if not response.is_success:
            raise UpstreamFetchError(
                f"{self.source_label} API error: {response.status_code} {response.reason_phrase}",
                source=self.source_key,
                upstream_status=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamParseError(
                f"{self.source_label} returned a non-JSON response",
                context={"source": self.source_key},
            ) from e

    @asynccontextmanager
    async def _client_context(self) -> AsyncIterator[httpx.AsyncClient]:
        """Use the injected client as-is, or own a fresh one for the run."""
        if self._client is not None:
            yield self._client
            return

        async with self._new_client() as client:
            yield client

    def _new_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=self.config.fetch_timeout_seconds,
            headers={
                "User-Agent": self.config.user_agent,
                "Accept": "application/json",
            },
            follow_redirects=True,
        )

    def _require(self, value: Optional[str], name: str) -> str:
        """Return a configured credential or raise ConfigurationError."""
        if not value:
            raise ConfigurationError(f"{name} not configured", context={"source": self.source_key})
        return value

    @staticmethod
    def _record_error(error: Exception, record_id: Optional[str] = None) -> RecordError:
        return RecordError(
            timestamp=utc_now(),
            error_type=type(error).__name__,
            message=error.message if isinstance(error, LegiSyncError) else str(error),
            record_id=record_id,
        )

    @staticmethod
    def _require_field(raw: Dict[str, Any], name: str) -> Any:
        """Fetch a required field from a raw record."""
        value = raw.get(name)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise UpstreamParseError(f"Missing required field '{name}'")
        return value


    @staticmethod
    def _parse_date(value: Any, synced_at: datetime, name: str) -> date:
        """Parse an ISO date, falling back to the run date when absent."""
        if not value:
            return synced_at.date()
        try:
            return date.fromisoformat(str(value)[:10])
        except ValueError as e:
            raise UpstreamParseError(f"Invalid {name} '{value}'") from e
