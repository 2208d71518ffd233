"""
AI insight API endpoints.

Responsibility: Summary, argument, impact, stage and chat endpoints for API v1
"""

from fastapi import APIRouter, Depends

from api.dependencies import get_insight_service
from api.v1.schemas.insights import (
    ArgumentsRequest,
    ArgumentsResponse,
    ChatRequest,
    ChatResponse,
    ImpactRequest,
    ImpactResponse,
    StagesRequest,
    StagesResponse,
    SummarizeRequest,
    SummarizeResponse,
)
from legisync.services.insight_service import InsightService

router = APIRouter()


@router.post("/summarize", response_model=SummarizeResponse)
async def summarize_bill(
    body: SummarizeRequest,
    service: InsightService = Depends(get_insight_service),
):
    """Plain-language summary for a middle school, high school or college reader."""
    summary = await service.summarize(body.bill_text, body.reading_level)
    return {"summary": summary}


@router.post("/generate-arguments", response_model=ArgumentsResponse)
async def generate_arguments(
    body: ArgumentsRequest,
    service: InsightService = Depends(get_insight_service),
):
    """Three arguments for and three against a bill."""
    arguments = await service.generate_arguments(body.bill_text, body.bill_title, bill_id=body.bill_id)
    return {"arguments": arguments}


@router.post("/analyze-impact", response_model=ImpactResponse)
async def analyze_impact(
    body: ImpactRequest,
    service: InsightService = Depends(get_insight_service),
):
    """Generate an impact analysis and store it on the bill."""
    impact = await service.analyze_impact(
        bill_id=body.bill_id,
        bill_title=body.bill_title,
        bill_number=body.bill_number,
        short_description=body.short_description,
        full_text=body.full_text,
    )
    return {"impact": impact}


@router.post("/generate-stages", response_model=StagesResponse)
async def generate_stages(
    body: StagesRequest,
    service: InsightService = Depends(get_insight_service),
):
    """Generate progress stages and store them on the bill."""
    stages = await service.generate_stages(
        bill_id=body.bill_id,
        bill_title=body.bill_title,
        bill_number=body.bill_number,
        status=body.status,
    )
    return {"stages": stages}


@router.post("/chat", response_model=ChatResponse)
async def bill_buddy_chat(
    body: ChatRequest,
    service: InsightService = Depends(get_insight_service),
):
    """Answer the latest message of a bill-assistant conversation."""
    response = await service.chat(body.messages, body.bill_context)
    return {"response": response}
