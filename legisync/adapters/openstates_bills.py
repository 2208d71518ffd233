"""
Open States API adapter for state legislation.

Pulls the first page of bills for each configured jurisdiction from the
Open States v3 API. One jurisdiction failing does not stop the others; the
run only fails when every jurisdiction does.

Responsibility: Fetch and normalize state bills from Open States
"""

from datetime import datetime
from typing import Any, Dict, List, Optional

from .base_adapter import BaseAdapter, PageRequest
from ..errors import UpstreamParseError
from ..models.bill import Bill, BillSource
from ..normalization.status import normalize_openstates_status


class OpenStatesBillsAdapter(BaseAdapter):
    """
    Adapter for Open States bill search, one request per jurisdiction.

    Example:
        adapter = OpenStatesBillsAdapter(settings, database)
        result = await adapter.sync()
    """

    source_key = "openstates"
    source_label = "openstates"
    bill_source = BillSource.STATE_LEGISLATIVE

    def validate_config(self) -> None:
        self._require(self.config.openstates_api_key, "OPENSTATES_API_KEY")

    def build_requests(self) -> List[PageRequest]:
        return [
            PageRequest(
                url=f"{self.config.openstates_base_url}/bills",
                params={
                    "jurisdiction": jurisdiction,
                    "page": 1,
                    "per_page": self.config.openstates_page_size,
                    "include": "sponsorships",
                },
                headers={"X-API-Key": self.config.openstates_api_key or ""},
                label=jurisdiction,
            )
            for jurisdiction in self.config.openstates_jurisdictions
        ]

    def extract_records(self, payload: Any) -> List[Dict[str, Any]]:
        if not isinstance(payload, dict):
            raise UpstreamParseError("Open States response is not a JSON object")

        results = payload.get("results", [])
        if not isinstance(results, list):
            raise UpstreamParseError("Open States 'results' is not a list")
        return results

    def normalize(
        self,
        raw: Dict[str, Any],
        synced_at: datetime,
        request: PageRequest,
    ) -> Bill:
        """
        Normalize one Open States bill.

        Required: `id` and `identifier`. The jurisdiction comes from the
        request the record arrived on.
        """
        native_id = self._require_field(raw, "id")
        identifier = str(self._require_field(raw, "identifier")).strip()
        jurisdiction = request.label

        title = raw.get("title") or "Untitled Bill"
        sponsorships = raw.get("sponsorships") if isinstance(raw.get("sponsorships"), list) else []

        return Bill(
            external_id=f"openstates-{native_id}",
            source=self.bill_source,
            bill_number=identifier,
            title=title,
            short_description=title[:200],
            full_text=title,
            status=normalize_openstates_status(
                raw.get("latest_action_description"),
                # Bill type (["bill"], ["resolution"]), not an action classification.
                raw.get("classification"),
            ),
            introduced_date=self._parse_date(raw.get("first_action_date"), synced_at, "first_action_date"),
            category=f"State: {jurisdiction.upper()}",
            sponsor=self._sponsor(sponsorships),
            official_url=raw.get("openstates_url") or self._fallback_url(jurisdiction, raw.get("session"), identifier),
            cosponsors=sponsorships[1:],
            committees=None,
            last_synced=synced_at,
        )

    @staticmethod
    def _sponsor(sponsorships: List[Any]) -> Optional[str]:
        if sponsorships and isinstance(sponsorships[0], dict):
            return sponsorships[0].get("name") or None
        return None

    @staticmethod
    def _fallback_url(jurisdiction: str, session: Any, identifier: str) -> Optional[str]:
        if not session:
            return None
        return f"https://openstates.org/{jurisdiction}/bills/{session}/{identifier.replace(' ', '')}/"
