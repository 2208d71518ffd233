"""
Congress.gov API adapter for national legislative records.

Pulls the latest page of bills for the current congress from the
Congress.gov v3 API (api.congress.gov). The list endpoint only carries
summary fields, so the bill text falls back to the title.

Responsibility: Fetch and normalize bills from Congress.gov
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from .base_adapter import BaseAdapter, PageRequest
from ..errors import UpstreamParseError
from ..models.bill import Bill, BillSource
from ..normalization.status import normalize_congress_status


# Congress.gov bill type → (display prefix, congress.gov URL segment)
BILL_TYPES: Dict[str, tuple] = {
    "HR": ("H.R.", "house-bill"),
    "S": ("S.", "senate-bill"),
    "HRES": ("H.Res.", "house-resolution"),
    "SRES": ("S.Res.", "senate-resolution"),
    "HJRES": ("H.J.Res.", "house-joint-resolution"),
    "SJRES": ("S.J.Res.", "senate-joint-resolution"),
    "HCONRES": ("H.Con.Res.", "house-concurrent-resolution"),
    "SCONRES": ("S.Con.Res.", "senate-concurrent-resolution"),
}


def ordinal(n: int) -> str:
    """119 -> '119th', 101 -> '101st', 112 -> '112th'."""
    if 10 <= n % 100 <= 20:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(n % 10, "th")
    return f"{n}{suffix}"


class CongressBillsAdapter(BaseAdapter):
    """
    Adapter for the Congress.gov bill list.

    Example:
        adapter = CongressBillsAdapter(settings, database)
        result = await adapter.sync()
    """

    source_key = "congress"
    source_label = "congress.gov"
    bill_source = BillSource.NATIONAL_LEGISLATIVE

    def validate_config(self) -> None:
        self._require(self.config.congress_api_key, "CONGRESS_GOV_API_KEY")

    def build_requests(self) -> List[PageRequest]:
        congress = self.config.congress_number
        return [
            PageRequest(
                url=f"{self.config.congress_base_url}/bill/{congress}",
                params={
                    "api_key": self.config.congress_api_key,
                    "format": "json",
                    "limit": self.config.congress_page_size,
                },
            )
        ]

    def extract_records(self, payload: Any) -> List[Dict[str, Any]]:
        if not isinstance(payload, dict):
            raise UpstreamParseError("Congress.gov response is not a JSON object")

        bills = payload.get("bills", [])
        if not isinstance(bills, list):
            raise UpstreamParseError("Congress.gov 'bills' is not a list")
        return bills

    def native_id(self, raw: Any) -> Optional[str]:
        if isinstance(raw, dict) and raw.get("type") and raw.get("number"):
            return self._external_id(raw["type"], raw["number"])
        return None

    def normalize(
        self,
        raw: Dict[str, Any],
        synced_at: datetime,
        request: PageRequest,
    ) -> Bill:
        """
        Normalize one Congress.gov bill list item.

        Required: `number` and `type`. Everything else has a fallback.
        """
        number = str(self._require_field(raw, "number")).strip()
        bill_type = str(self._require_field(raw, "type")).strip().upper()

        title = raw.get("title") or "Untitled Bill"
        latest_action = raw.get("latestAction") if isinstance(raw.get("latestAction"), dict) else {}
        prefix, url_segment = BILL_TYPES.get(bill_type, (bill_type, None))

        return Bill(
            external_id=self._external_id(bill_type, number),
            source=self.bill_source,
            bill_number=f"{prefix} {number}",
            title=title,
            short_description=title[:200],
            full_text=title,
            status=normalize_congress_status(latest_action.get("text")),
            introduced_date=self._parse_date(raw.get("introducedDate"), synced_at, "introducedDate"),
            category=self._category(bill_type, raw.get("originChamber")),
            sponsor=self._sponsor(raw.get("sponsors")),
            official_url=self._official_url(url_segment, number),
            cosponsors=raw.get("cosponsors") if isinstance(raw.get("cosponsors"), list) else None,
            committees=None,
            last_synced=synced_at,
        )

    def _external_id(self, bill_type: str, number: Any) -> str:
        return f"congress-{self.config.congress_number}-{str(bill_type).lower()}-{number}"

    def _official_url(self, url_segment: Optional[str], number: str) -> Optional[str]:
        if not url_segment:
            return None
        congress = ordinal(self.config.congress_number)
        return f"https://www.congress.gov/bill/{congress}-congress/{url_segment}/{number}"

    @staticmethod
    def _category(bill_type: str, origin_chamber: Optional[str]) -> str:
        chamber = (origin_chamber or "").lower()
        if bill_type.startswith("H") or chamber == "house":
            return "House"
        if bill_type.startswith("S") or chamber == "senate":
            return "Senate"
        return "Other"

    @staticmethod
    def _sponsor(sponsors: Any) -> Optional[str]:
        if isinstance(sponsors, list) and sponsors and isinstance(sponsors[0], dict):
            return sponsors[0].get("fullName") or None
        return None
