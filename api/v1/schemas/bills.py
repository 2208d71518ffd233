"""
Pydantic schemas for Bill API requests and responses.

Responsibility: Bill browsing and submission schemas
"""

from typing import Any, Dict, List, Optional
from datetime import date, datetime
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, HttpUrl

from legisync.models.bill import Bill, BillSource, BillStatus


class BillResponse(BaseModel):
    """Basic bill response model."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    external_id: str
    source: str
    bill_number: str
    title: str
    short_description: str
    status: str
    introduced_date: date
    category: str
    sponsor: Optional[str] = None
    official_url: Optional[str] = None
    last_synced: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime


class BillDetailResponse(BillResponse):
    """Detailed bill response with text, source lists and AI-derived fields."""

    full_text: str
    cosponsors: Optional[List[Any]] = None
    committees: Optional[List[Any]] = None
    impact_data: Optional[Dict[str, Any]] = None
    stages: Optional[List[Dict[str, Any]]] = None
    arguments: Optional[List[Dict[str, Any]]] = None


class BillListResponse(BaseModel):
    """Paginated list of bills."""

    bills: List[BillResponse]
    total: int
    limit: int
    offset: int
    has_more: bool


class BillSubmissionRequest(BaseModel):
    """A bill entered by a user rather than synced from a source."""

    bill_number: str = Field(min_length=1, max_length=50)
    title: str = Field(min_length=1, max_length=200)
    short_description: str = Field(min_length=1, max_length=500)
    full_text: str = Field(min_length=1)
    category: str = Field(min_length=1, max_length=100)
    sponsor: Optional[str] = Field(default=None, max_length=100)
    official_url: Optional[HttpUrl] = None
    introduced_date: date
    status: BillStatus = BillStatus.INTRODUCED

    def to_bill(self) -> Bill:
        """Build the canonical record; submissions get a random native id."""
        return Bill(
            external_id=f"submission-{uuid4().hex}",
            source=BillSource.USER_SUBMISSION,
            bill_number=self.bill_number,
            title=self.title,
            short_description=self.short_description,
            full_text=self.full_text,
            status=self.status,
            introduced_date=self.introduced_date,
            category=self.category,
            sponsor=self.sponsor or None,
            official_url=str(self.official_url) if self.official_url else None,
        )
