"""
Bill domain model.

Canonical legislative bill record shared by every source adapter, the
bill store, and the insight services. Sources differ wildly in shape and
vocabulary; by the time a record becomes a Bill those differences are gone.

Responsibility: Single bill entity plus its source and status vocabularies
"""

from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class BillSource(str, Enum):
    """Provenance tag stored on every bill."""
    NATIONAL_LEGISLATIVE = "national-legislative"
    BILL_TRACKER = "bill-tracker"
    STATE_LEGISLATIVE = "state-legislative"
    USER_SUBMISSION = "user-submission"


class BillStatus(str, Enum):
    """Canonical legislative stage vocabulary used for display and filtering."""
    INTRODUCED = "Introduced"
    COMMITTEE_REVIEW = "Committee Review"
    PASSED_HOUSE = "Passed House"
    PASSED_SENATE = "Passed Senate"
    ENACTED = "Enacted"
    VETOED = "Vetoed"
    FAILED = "Failed"


class Bill(BaseModel):
    """
    Canonical bill record.

    Natural key: external_id, formatted "{source_key}-{native_id}"
    Example: "congress-119-hr-1234", "govtrack-812345"
    """

    model_config = ConfigDict(use_enum_values=False)

    # MARK: - Identity
    external_id: str = Field(
        min_length=1,
        max_length=255,
        description="Source-scoped natural key used for upsert matching"
    )
    source: BillSource = Field(description="Provenance tag")
    bill_number: str = Field(
        min_length=1,
        max_length=100,
        description="Human-readable designation (e.g., 'H.R. 1234', 'AB 12')"
    )

    # MARK: - Content
    title: str = Field(description="Full bill title")
    short_description: str = Field(default="", description="Short description, at most 200 chars from sources")
    full_text: str = Field(
        default="",
        description="Bill text; adapters fall back to the title when the source has none"
    )
    status: BillStatus = Field(default=BillStatus.INTRODUCED)
    introduced_date: date = Field(description="Date introduced; run date when the source omits it")
    category: str = Field(default="Other", description="Chamber, jurisdiction, or user-chosen topic")

    sponsor: Optional[str] = Field(default=None, description="Primary sponsor display name")
    official_url: Optional[str] = Field(default=None, description="Link to the authoritative source page")

    # MARK: - Opaque source lists
    cosponsors: Optional[List[Any]] = Field(default=None)
    committees: Optional[List[Any]] = Field(default=None)

    # MARK: - Metadata
    last_synced: Optional[datetime] = Field(
        default=None,
        description="When this record was last upserted by a sync run"
    )


class StoredBill(Bill):
    """Bill as read back from the store, including AI-derived fields."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    impact_data: Optional[Dict[str, Any]] = None
    stages: Optional[List[Dict[str, Any]]] = None
    arguments: Optional[List[Dict[str, Any]]] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
