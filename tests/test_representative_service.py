"""
Tests for ZIP code representative lookup.
"""

import httpx
import pytest

from legisync.config import CivicConfig
from legisync.errors import ConfigurationError, NotFoundError, UpstreamFetchError, ValidationError
from legisync.services import RepresentativeService
from legisync.services.representative_service import DEFAULT_EMAIL, derive_district

from .factories import json_response, mock_client

CIVIC_RESPONSE = {
    "offices": [
        {
            "name": "U.S. Representative",
            "divisionId": "ocd-division/country:us/state:ma/cd:7",
            "officialIndices": [0],
        }
    ],
    "officials": [
        {
            "name": "Ayanna Pressley",
            "party": "Democratic Party",
            "phones": ["(202) 225-5111"],
            "urls": ["https://pressley.house.gov/"],
        }
    ],
}


def _service(handler, api_key: str = "civic-key") -> RepresentativeService:
    return RepresentativeService(CivicConfig(api_key=api_key), client=mock_client(handler))


@pytest.mark.parametrize(
    "division_id, expected",
    [
        ("ocd-division/country:us/state:ma/cd:7", "MA-07"),
        ("ocd-division/country:us/state:ca/cd:12", "CA-12"),
        ("ocd-division/country:us/state:vt", "ZIP 05401"),
        (None, "ZIP 05401"),
    ],
)
def test_derive_district(division_id, expected) -> None:
    assert derive_district(division_id, "05401") == expected


async def test_lookup_representative() -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["params"] = dict(request.url.params)
        return json_response(CIVIC_RESPONSE)

    rep = await _service(handler).lookup("02139")

    assert rep.name == "Ayanna Pressley"
    assert rep.party == "Democratic"
    assert rep.district == "MA-07"
    assert rep.phone == "(202) 225-5111"
    assert rep.email == DEFAULT_EMAIL
    assert seen["params"]["address"] == "02139"
    assert seen["params"]["roles"] == "legislatorLowerBody"


@pytest.mark.parametrize("zip_code", ["", "1234", "123456", "abcde", "02139-1234"])
async def test_invalid_zip(zip_code: str) -> None:
    with pytest.raises(ValidationError):
        await _service(lambda request: json_response(CIVIC_RESPONSE)).lookup(zip_code)


async def test_no_officials_is_not_found() -> None:
    handler = lambda request: json_response({"offices": [], "officials": []})

    with pytest.raises(NotFoundError):
        await _service(handler).lookup("00000")


async def test_upstream_error() -> None:
    with pytest.raises(UpstreamFetchError):
        await _service(lambda request: httpx.Response(500, text="error")).lookup("02139")


async def test_missing_key() -> None:
    with pytest.raises(ConfigurationError):
        await _service(lambda request: json_response(CIVIC_RESPONSE), api_key="").lookup("02139")
