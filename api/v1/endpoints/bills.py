"""
Bills API endpoints.

Provides REST endpoints for browsing stored bills and submitting new ones.

Responsibility: Bill endpoints for API v1
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_db
from api.v1.schemas.bills import (
    BillDetailResponse,
    BillListResponse,
    BillResponse,
    BillSubmissionRequest,
)
from legisync.db.repositories import BillRepository
from legisync.errors import NotFoundError
from legisync.models.bill import BillSource, BillStatus

router = APIRouter()


@router.get("/bills", response_model=BillListResponse)
async def list_bills(
    status: Optional[BillStatus] = Query(None, description="Filter by canonical status"),
    source: Optional[BillSource] = Query(None, description="Filter by provenance"),
    category: Optional[str] = Query(None, description="Filter by category (e.g., 'House', 'State: CA')"),
    search: Optional[str] = Query(None, min_length=1, description="Match title or bill number"),
    limit: int = Query(50, ge=1, le=100, description="Number of results"),
    offset: int = Query(0, ge=0, description="Pagination offset"),
    db: AsyncSession = Depends(get_db)
):
    """
    List bills with optional filters and pagination, latest introduced first.

    Returns:
        BillListResponse with bills and metadata
    """
    repo = BillRepository(db)
    filters = {
        "status": status.value if status else None,
        "source": source.value if source else None,
        "category": category,
        "search": search,
    }

    bills = await repo.list_bills(limit=limit, offset=offset, **filters)
    total = await repo.count_bills(**filters)

    return {
        "bills": [BillResponse.model_validate(bill) for bill in bills],
        "total": total,
        "limit": limit,
        "offset": offset,
        "has_more": (offset + len(bills)) < total
    }


@router.get("/bills/{bill_id}", response_model=BillDetailResponse)
async def get_bill(
    bill_id: int,
    db: AsyncSession = Depends(get_db)
):
    """
    Get detailed information about a specific bill.

    Raises:
        NotFoundError: 404 if bill not found
    """
    bill = await BillRepository(db).get_by_id(bill_id)
    if not bill:
        raise NotFoundError(f"Bill {bill_id} not found")

    return BillDetailResponse.model_validate(bill)


@router.post("/bills", response_model=BillDetailResponse, status_code=201)
async def submit_bill(
    body: BillSubmissionRequest,
    db: AsyncSession = Depends(get_db)
):
    """Store a user-submitted bill. Its status is whatever the submitter chose."""
    model = await BillRepository(db).create_submission(body.to_bill())
    await db.refresh(model)
    return BillDetailResponse.model_validate(model)
