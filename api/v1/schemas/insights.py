"""
Pydantic schemas for the AI insight endpoints.

Request and response bodies use the camelCase keys the browsing UI sends.

Responsibility: Insight request/response schemas
"""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from legisync.models.insight_models import (
    BillArgument,
    BillContext,
    BillStage,
    ChatMessage,
    ImpactAnalysis,
    ReadingLevel,
)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SummarizeRequest(CamelModel):
    bill_text: str = Field(min_length=1)
    reading_level: ReadingLevel = ReadingLevel.COLLEGE


class SummarizeResponse(BaseModel):
    summary: str


class ArgumentsRequest(CamelModel):
    bill_text: str = Field(min_length=1)
    bill_title: str = Field(min_length=1)
    bill_id: Optional[int] = None


class ArgumentsResponse(BaseModel):
    arguments: List[BillArgument]


class ImpactRequest(CamelModel):
    bill_id: int
    bill_title: str = Field(min_length=1)
    bill_number: str = ""
    short_description: str = ""
    full_text: str = ""


class ImpactResponse(BaseModel):
    impact: ImpactAnalysis


class StagesRequest(CamelModel):
    bill_id: int
    bill_title: str = Field(min_length=1)
    bill_number: str = ""
    status: str = ""


class StagesResponse(BaseModel):
    stages: List[BillStage]


class ChatRequest(CamelModel):
    messages: List[ChatMessage] = Field(min_length=1, max_length=50)
    bill_context: Optional[BillContext] = None


class ChatResponse(BaseModel):
    response: str
