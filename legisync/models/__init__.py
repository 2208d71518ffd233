"""
Models package for LegiSync.

Pydantic models for:
- The canonical Bill record and its vocabularies
- Adapter run results and sync reports
- AI insight payloads
"""

from .bill import Bill, BillSource, BillStatus, StoredBill
from .sync_models import (
    AdapterRunResult,
    RecordError,
    SourceSyncResult,
    SyncLogStatus,
    SyncReport,
)
from .insight_models import (
    BillArgument,
    BillContext,
    BillStage,
    ChatMessage,
    ImpactAnalysis,
    ReadingLevel,
    Representative,
)

__all__ = [
    "Bill",
    "BillSource",
    "BillStatus",
    "StoredBill",
    "AdapterRunResult",
    "RecordError",
    "SourceSyncResult",
    "SyncLogStatus",
    "SyncReport",
    "BillArgument",
    "BillContext",
    "BillStage",
    "ChatMessage",
    "ImpactAnalysis",
    "ReadingLevel",
    "Representative",
]
