"""
Representative lookup API endpoint.

Responsibility: ZIP code to House representative endpoint for API v1
"""

from fastapi import APIRouter, Depends

from api.dependencies import get_representative_service
from api.v1.schemas.representatives import RepresentativeRequest, RepresentativeResponse
from legisync.services.representative_service import RepresentativeService

router = APIRouter()


@router.post("/lookup-representative", response_model=RepresentativeResponse)
async def lookup_representative(
    body: RepresentativeRequest,
    service: RepresentativeService = Depends(get_representative_service),
):
    """
    Resolve a 5-digit ZIP code to its House representative.

    400 on a malformed ZIP, 404 when no representative matches, 502 when the
    civic lookup API fails.
    """
    representative = await service.lookup(body.zip_code)
    return {"representative": representative}
