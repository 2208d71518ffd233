"""
House representative lookup by ZIP code.

Resolves a 5-digit ZIP to its U.S. House member through the Google Civic
Information API. Missing contact details fall back to the House switchboard.

Responsibility: Query the civic lookup API and shape a Representative
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional, Tuple
import logging
import re

import httpx

from ..config import CivicConfig
from ..errors import (
    ConfigurationError,
    NotFoundError,
    UpstreamFetchError,
    UpstreamParseError,
    ValidationError,
)
from ..models.insight_models import Representative

logger = logging.getLogger(__name__)

ZIP_PATTERN = re.compile(r"^\d{5}$")
STATE_PATTERN = re.compile(r"state:([a-z]{2})", re.IGNORECASE)
DISTRICT_PATTERN = re.compile(r"cd:(\d{1,2})", re.IGNORECASE)

DEFAULT_EMAIL = "contact@house.gov"
DEFAULT_PHONE = "(202) 225-3121"
DEFAULT_WEBSITE = "https://www.house.gov"


def derive_district(division_id: Optional[str], zip_code: str) -> str:
    """
    "ocd-division/country:us/state:ma/cd:2" -> "MA-02".

    Falls back to "ZIP {zip_code}" when the division has no state or
    congressional district component.
    """
    if division_id:
        state = STATE_PATTERN.search(division_id)
        district = DISTRICT_PATTERN.search(division_id)
        if state and district:
            return f"{state.group(1).upper()}-{district.group(1).zfill(2)}"
    return f"ZIP {zip_code}"


class RepresentativeService:
    """
    Representative lookup service.

    Example:
        service = RepresentativeService(settings.civic)
        rep = await service.lookup("02139")
    """

    def __init__(self, config: CivicConfig, client: Optional[httpx.AsyncClient] = None):
        self.config = config
        self._client = client

    async def lookup(self, zip_code: str) -> Representative:
        """
        Find the House representative for a ZIP code.

        Raises:
            ValidationError: If the ZIP code is not 5 digits
            ConfigurationError: If no civic API key is configured
            NotFoundError: If the API knows no official for the ZIP
            UpstreamFetchError: If the API is unreachable or answers non-2xx
        """
        zip_code = (zip_code or "").strip()
        if not ZIP_PATTERN.match(zip_code):
            raise ValidationError("Invalid ZIP code. Please provide a 5-digit ZIP code.")

        if not self.config.api_key:
            raise ConfigurationError("Civic information API key not configured")

        logger.info(f"Looking up representative for ZIP code: {zip_code}")
        data = await self._fetch(zip_code)

        offices = data.get("offices") or []
        officials = data.get("officials") or []
        if not isinstance(offices, list) or not isinstance(officials, list):
            raise UpstreamParseError("Civic API response has unexpected shape")

        if not officials:
            logger.warning(f"No officials found for ZIP: {zip_code}")
            raise NotFoundError("No representative found for this ZIP code.")

        official_index, division_id = self._pick_official(offices, officials)
        official = officials[official_index] if isinstance(officials[official_index], dict) else {}

        representative = Representative(
            name=official.get("name") or "Unknown",
            party=(official.get("party") or "Unknown").replace(" Party", ""),
            district=derive_district(division_id, zip_code),
            email=self._first(official.get("emails")) or DEFAULT_EMAIL,
            phone=self._first(official.get("phones")) or DEFAULT_PHONE,
            website=self._first(official.get("urls")) or DEFAULT_WEBSITE,
        )
        logger.info(f"Resolved representative: {representative.name} ({representative.district})")
        return representative

    async def _fetch(self, zip_code: str) -> Dict[str, Any]:
        params = {
            "address": zip_code,
            "levels": "country",
            "roles": "legislatorLowerBody",
            "key": self.config.api_key,
        }

        async with self._client_context() as client:
            try:
                response = await client.get(f"{self.config.base_url}/representatives", params=params)
            except httpx.TimeoutException as e:
                raise UpstreamFetchError("Civic API request timed out", source="civic") from e
            except httpx.HTTPError as e:
                raise UpstreamFetchError(f"Civic API request failed: {e}", source="civic") from e

        if not response.is_success:
            logger.error(f"Civic API error: {response.status_code} {response.text[:500]}")
            raise UpstreamFetchError(
                "Failed to lookup representative information (Civic API error).",
                source="civic",
                upstream_status=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise UpstreamParseError("Civic API returned a non-JSON response") from e

        if not isinstance(data, dict):
            raise UpstreamParseError("Civic API response is not a JSON object")
        return data

    @staticmethod
    def _pick_official(offices: List[Any], officials: List[Any]) -> Tuple[int, Optional[str]]:
        """Prefer the first official linked from an office; default to the first official."""
        for office in offices:
            if not isinstance(office, dict):
                continue
            for index in office.get("officialIndices") or []:
                if isinstance(index, int) and 0 <= index < len(officials):
                    return index, office.get("divisionId")

        first_division = offices[0].get("divisionId") if offices and isinstance(offices[0], dict) else None
        return 0, first_division

    @staticmethod
    def _first(values: Any) -> Optional[str]:
        if isinstance(values, list) and values:
            return values[0] or None
        return None

    @asynccontextmanager
    async def _client_context(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._client is not None:
            yield self._client
            return

        async with httpx.AsyncClient(timeout=self.config.timeout_seconds) as client:
            yield client
