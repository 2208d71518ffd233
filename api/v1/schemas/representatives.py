"""
Pydantic schemas for representative lookup.

Responsibility: Representative lookup request/response schemas
"""

from pydantic import BaseModel, ConfigDict, Field

from legisync.models.insight_models import Representative


class RepresentativeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    zip_code: str = Field(alias="zipCode")


class RepresentativeResponse(BaseModel):
    representative: Representative
