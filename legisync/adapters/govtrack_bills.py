"""
GovTrack API adapter for the bill tracker feed.

Pulls bills introduced in the last N days (30 by default) from the GovTrack
v2 API. GovTrack needs no API key and reports progress as enum codes such as
"pass_over_house" or "enacted_signed".

Responsibility: Fetch and normalize bills from GovTrack
"""

from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from .base_adapter import BaseAdapter, PageRequest
from ..errors import UpstreamParseError
from ..models.bill import Bill, BillSource
from ..normalization.status import normalize_govtrack_status
from ..utils.time_utils import utc_today

GOVTRACK_SITE = "https://www.govtrack.us"


class GovTrackBillsAdapter(BaseAdapter):
    """
    Adapter for the GovTrack bill list.

    Example:
        adapter = GovTrackBillsAdapter(settings, database)
        result = await adapter.sync()
    """

    source_key = "govtrack"
    source_label = "govtrack"
    bill_source = BillSource.BILL_TRACKER

    def build_requests(self) -> List[PageRequest]:
        since = utc_today() - timedelta(days=self.config.govtrack_lookback_days)
        return [
            PageRequest(
                url=f"{self.config.govtrack_base_url}/bill",
                params={
                    "introduced_date__gte": since.isoformat(),
                    "limit": self.config.govtrack_page_size,
                },
            )
        ]

    def extract_records(self, payload: Any) -> List[Dict[str, Any]]:
        if not isinstance(payload, dict):
            raise UpstreamParseError("GovTrack response is not a JSON object")

        objects = payload.get("objects", [])
        if not isinstance(objects, list):
            raise UpstreamParseError("GovTrack 'objects' is not a list")
        return objects

    def normalize(
        self,
        raw: Dict[str, Any],
        synced_at: datetime,
        request: PageRequest,
    ) -> Bill:
        """
        Normalize one GovTrack bill object.

        Required: `id`. The display number falls back to the raw number.
        """
        native_id = self._require_field(raw, "id")

        bill_number = raw.get("display_number") or raw.get("number")
        if not bill_number:
            raise UpstreamParseError("Missing required field 'display_number'")

        title = raw.get("title") or "Untitled Bill"
        short_source = raw.get("title_without_number") or title
        sponsor = raw.get("sponsor") if isinstance(raw.get("sponsor"), dict) else {}

        return Bill(
            external_id=f"govtrack-{native_id}",
            source=self.bill_source,
            bill_number=str(bill_number),
            title=title,
            short_description=short_source[:200],
            full_text=title,
            status=normalize_govtrack_status(raw.get("current_status")),
            introduced_date=self._parse_date(raw.get("introduced_date"), synced_at, "introduced_date"),
            category=self._category(raw.get("bill_type")),
            sponsor=sponsor.get("name") or None,
            official_url=self._official_url(raw.get("link")),
            cosponsors=raw.get("cosponsors") or [],
            committees=raw.get("committees") or [],
            last_synced=synced_at,
        )

    @staticmethod
    def _category(bill_type: Any) -> str:
        """house_bill, house_resolution, ... → House; senate_* → Senate."""
        value = str(bill_type or "").lower()
        if value.startswith("house") or value.startswith("h."):
            return "House"
        if value.startswith("senate") or value.startswith("s."):
            return "Senate"
        return "Other"

    @staticmethod
    def _official_url(link: Any) -> Optional[str]:
        if not link:
            return None
        link = str(link)
        if link.startswith("http://") or link.startswith("https://"):
            return link
        return f"{GOVTRACK_SITE}{link if link.startswith('/') else '/' + link}"
