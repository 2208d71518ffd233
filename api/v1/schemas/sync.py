"""
Pydantic schemas for sync endpoints.

Responsibility: Sync log response schemas
"""

from typing import List, Optional
from datetime import datetime

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class SyncLogResponse(BaseModel):
    """One sync log entry."""

    model_config = ConfigDict(from_attributes=True, alias_generator=to_camel, populate_by_name=True)

    id: int
    source: str
    status: str
    started_at: datetime
    completed_at: Optional[datetime] = None
    bills_synced: Optional[int] = None
    error_message: Optional[str] = None
    failed_records: Optional[List[str]] = None


class SyncLogListResponse(BaseModel):
    logs: List[SyncLogResponse]
