"""
Sync run result models.

Defines what one adapter run produces and what the orchestrator reports
back for a whole sync run. The report shape is consumed by the browsing
UI, so it serializes with camelCase keys.

Responsibility: Data transfer objects for adapter runs and sync reports
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SyncLogStatus(str, Enum):
    """Lifecycle of one SyncLogEntry: in_progress → completed | failed."""
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"


class RecordError(BaseModel):
    """
    Why a single record or page was skipped.

    Captured per record so a run can report which items were dropped
    without aborting the rest of the page.
    """
    timestamp: datetime = Field(description="When the error occurred (UTC)")
    error_type: str = Field(description="Exception class name")
    message: str = Field(description="Human-readable error message")
    record_id: Optional[str] = Field(
        default=None,
        description="External id, or source-native id when normalization failed"
    )
    context: Dict[str, Any] = Field(default_factory=dict)


class AdapterRunResult(BaseModel):
    """Outcome of one successful adapter invocation."""
    source: str = Field(description="Adapter source key (e.g., 'congress')")
    log_id: int = Field(description="SyncLogEntry id for this run")
    count: int = Field(ge=0, description="Records upserted successfully")
    fetched: int = Field(ge=0, default=0, description="Raw records received from upstream")
    duplicates_skipped: int = Field(ge=0, default=0)
    record_errors: List[RecordError] = Field(default_factory=list)
    page_errors: List[RecordError] = Field(default_factory=list)
    duration_seconds: float = Field(ge=0.0, default=0.0)
    rate_limit_hits: int = Field(ge=0, default=0)

    @property
    def failed_records(self) -> List[str]:
        """Identifiers of records skipped during this run."""
        return [err.record_id for err in self.record_errors if err.record_id]


class SourceSyncResult(BaseModel):
    """Per-source entry in the sync report."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool
    count: int = Field(ge=0, default=0)
    error: Optional[str] = None
    failed_records: List[str] = Field(default_factory=list)


class SyncReport(BaseModel):
    """
    Combined result of one orchestrator run.

    `success` describes the orchestrator itself; individual source
    failures live in `sources` and never flip it.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    success: bool = True
    total_bills_synced: int = Field(ge=0, default=0)
    sources: Dict[str, SourceSyncResult] = Field(default_factory=dict)
    abandoned_runs: int = Field(
        ge=0,
        default=0,
        description="Stale in-progress log entries closed as failed before this run"
    )
    timestamp: datetime

    @property
    def failed_sources(self) -> List[str]:
        """Source keys that did not complete."""
        return [name for name, result in self.sources.items() if not result.success]

    @property
    def all_failed(self) -> bool:
        """True when every source failed (distinguishes total from partial failure)."""
        return bool(self.sources) and all(not result.success for result in self.sources.values())
