"""
Repository for bill data operations.

The upsert here is the only way sync runs write bills. It is a single
INSERT ... ON CONFLICT (external_id) DO UPDATE statement, so two concurrent
writes of the same record can never produce two rows, and there is no
read-then-write window.

Responsibility: Abstract database operations for bills
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional
import logging

from sqlalchemy import Select, desc, func, or_, select, update
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..models import BillModel
from ...errors import NotFoundError, PersistenceError
from ...models.bill import Bill, StoredBill
from ...utils.time_utils import utc_now

logger = logging.getLogger(__name__)


# Fields a later sync may overwrite. Identity (id, external_id, source),
# created_at and the AI-derived fields are never touched by the upsert.
MUTABLE_FIELDS = (
    "bill_number",
    "title",
    "short_description",
    "full_text",
    "status",
    "introduced_date",
    "category",
    "sponsor",
    "official_url",
    "cosponsors",
    "committees",
    "last_synced",
)


class BillPersistenceStatus(Enum):
    """Outcome classification for bill persistence operations."""

    CREATED = "created"
    UPDATED = "updated"


@dataclass(slots=True)
class BillPersistenceOutcome:
    """Represents the result of persisting a single bill."""

    bill_id: int
    external_id: str
    status: BillPersistenceStatus


class BillRepository:
    """
    Repository for bill persistence.

    Example:
        async with db.session() as session:
            repo = BillRepository(session)
            outcome = await repo.upsert(bill)
            bills = await repo.list_bills(status="Enacted", limit=20)
    """

    def __init__(self, session: AsyncSession):
        """
        Initialize repository with database session.

        Args:
            session: Active database session
        """
        self.session = session

    async def upsert(self, bill: Bill) -> BillPersistenceOutcome:
        """
        Insert a bill or refresh its mutable fields.

        The conflict update only applies when the stored row has the same
        source as the incoming record, so a record can never change owner.

        Raises:
            PersistenceError: If the write fails or the external_id belongs
                to another source
        """
        now = utc_now()
        values = self._domain_to_dict(bill, now=now)

        insert = pg_insert if self._dialect_name() == "postgresql" else sqlite_insert
        stmt = insert(BillModel).values(**values)
        set_ = {field: getattr(stmt.excluded, field) for field in MUTABLE_FIELDS}
        set_["updated_at"] = now

        stmt = stmt.on_conflict_do_update(
            index_elements=[BillModel.external_id],
            set_=set_,
            where=(BillModel.source == stmt.excluded.source),
        ).returning(BillModel.id, BillModel.external_id, BillModel.created_at)

        try:
            result = await self.session.execute(stmt)
            row = result.one_or_none()
        except SQLAlchemyError as e:
            raise PersistenceError(
                f"Failed to upsert bill {bill.external_id}: {e}",
                context={"external_id": bill.external_id},
            ) from e

        if row is None:
            raise PersistenceError(
                f"Bill {bill.external_id} is owned by a different source",
                context={"external_id": bill.external_id, "source": bill.source.value},
            )

        status = (
            BillPersistenceStatus.CREATED
            if row.created_at == now
            else BillPersistenceStatus.UPDATED
        )
        logger.debug(f"Upserted bill {row.external_id} ({status.value})")

        return BillPersistenceOutcome(
            bill_id=row.id,
            external_id=row.external_id,
            status=status,
        )

    async def create_submission(self, bill: Bill) -> BillModel:
        """
        Insert a new bill, failing on an existing external_id.

        Used for user submissions, which are never re-synced.
        """
        model = BillModel(**self._domain_to_dict(bill, now=utc_now()))
        self.session.add(model)

        try:
            await self.session.flush()
        except SQLAlchemyError as e:
            raise PersistenceError(
                f"Failed to create bill {bill.external_id}: {e}",
                context={"external_id": bill.external_id},
            ) from e

        logger.info(f"Created bill {model.external_id} (id={model.id})")
        return model

    async def get_by_id(self, bill_id: int) -> Optional[BillModel]:
        """Get bill by database ID"""
        result = await self.session.execute(
            select(BillModel).where(BillModel.id == bill_id)
        )
        return result.scalar_one_or_none()

    async def get_by_external_id(self, external_id: str) -> Optional[BillModel]:
        """Get bill by its natural key"""
        result = await self.session.execute(
            select(BillModel).where(BillModel.external_id == external_id)
        )
        return result.scalar_one_or_none()

    async def list_bills(
        self,
        status: Optional[str] = None,
        source: Optional[str] = None,
        category: Optional[str] = None,
        search: Optional[str] = None,
        limit: int = 50,
        offset: int = 0,
    ) -> List[BillModel]:
        """
        List bills, latest introduced first.

        Args:
            status: Canonical status filter
            source: Provenance filter
            category: Exact category filter
            search: Case-insensitive match on title or bill number
            limit: Maximum results
            offset: Results offset for pagination
        """
        query = self._filtered(select(BillModel), status, source, category, search)
        query = query.order_by(desc(BillModel.introduced_date), desc(BillModel.id))
        query = query.limit(limit).offset(offset)

        result = await self.session.execute(query)
        return list(result.scalars().all())

    async def count_bills(
        self,
        status: Optional[str] = None,
        source: Optional[str] = None,
        category: Optional[str] = None,
        search: Optional[str] = None,
    ) -> int:
        """Count bills matching the same filters as list_bills()"""
        query = self._filtered(
            select(func.count()).select_from(BillModel),
            status,
            source,
            category,
            search,
        )
        result = await self.session.execute(query)
        return int(result.scalar_one())

    async def update_insights(
        self,
        bill_id: int,
        *,
        impact_data: Optional[Dict[str, Any]] = None,
        stages: Optional[List[Dict[str, Any]]] = None,
        arguments: Optional[List[Dict[str, Any]]] = None,
    ) -> None:
        """
        Persist AI-derived fields onto one bill.

        Only the fields passed are written; sync-owned fields are untouched.

        Raises:
            NotFoundError: If no bill has this id
            PersistenceError: If the write fails
        """
        values: Dict[str, Any] = {}
        if impact_data is not None:
            values["impact_data"] = impact_data
        if stages is not None:
            values["stages"] = stages
        if arguments is not None:
            values["arguments"] = arguments
        if not values:
            return

        values["updated_at"] = utc_now()
        stmt = (
            update(BillModel)
            .where(BillModel.id == bill_id)
            .values(**values)
            .returning(BillModel.id)
        )

        try:
            result = await self.session.execute(stmt)
            updated_id = result.scalar_one_or_none()
        except SQLAlchemyError as e:
            raise PersistenceError(f"Failed to update bill {bill_id}: {e}") from e

        if updated_id is None:
            raise NotFoundError(f"Bill {bill_id} not found")

        logger.info(f"Stored {', '.join(sorted(values.keys() - {'updated_at'}))} for bill {bill_id}")

    @staticmethod
    def to_domain(model: BillModel) -> StoredBill:
        """Convert BillModel ORM model to StoredBill domain model"""
        return StoredBill.model_validate(model)

    def _dialect_name(self) -> str:
        return self.session.bind.dialect.name

    @staticmethod
    def _filtered(
        query: Select,
        status: Optional[str],
        source: Optional[str],
        category: Optional[str],
        search: Optional[str],
    ) -> Select:
        if status:
            query = query.where(BillModel.status == status)
        if source:
            query = query.where(BillModel.source == source)
        if category:
            query = query.where(BillModel.category == category)
        if search:
            pattern = f"%{search}%"
            query = query.where(
                or_(
                    BillModel.title.ilike(pattern),
                    BillModel.bill_number.ilike(pattern),
                )
            )
        return query

    @staticmethod
    def _domain_to_dict(bill: Bill, now: datetime) -> Dict[str, Any]:
        """Convert Bill domain model to column values"""
        return {
            "external_id": bill.external_id,
            "source": bill.source.value,
            "bill_number": bill.bill_number,
            "title": bill.title,
            "short_description": bill.short_description,
            "full_text": bill.full_text,
            "status": bill.status.value,
            "introduced_date": bill.introduced_date,
            "category": bill.category,
            "sponsor": bill.sponsor,
            "official_url": bill.official_url,
            "cosponsors": bill.cosponsors,
            "committees": bill.committees,
            "last_synced": bill.last_synced or now,
            "created_at": now,
            "updated_at": now,
        }
