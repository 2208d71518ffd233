"""
Tests for AI insight generation against a fake AI gateway.
"""

import json
from datetime import date

import httpx
import pytest

from legisync.db.repositories import BillRepository
from legisync.errors import (
    AIGatewayError,
    ConfigurationError,
    NotFoundError,
    UpstreamParseError,
    ValidationError,
)
from legisync.models.bill import Bill, BillSource
from legisync.models.insight_models import BillContext, ChatMessage, ReadingLevel
from legisync.services import AIGatewayClient, InsightService

from .factories import (
    SAMPLE_IMPACT,
    SAMPLE_STAGES,
    ai_text_response,
    ai_tool_response,
    balanced_arguments,
    make_settings,
    mock_client,
)


def _service(settings, database, handler) -> InsightService:
    gateway = AIGatewayClient(settings.ai, client=mock_client(handler))
    return InsightService(settings, database, gateway=gateway)


async def _seed_bill(database) -> int:
    bill = Bill(
        external_id="govtrack-1",
        source=BillSource.BILL_TRACKER,
        bill_number="H.R. 1",
        title="Rural Broadband Act",
        introduced_date=date(2025, 3, 10),
    )
    async with database.session() as session:
        outcome = await BillRepository(session).upsert(bill)
    return outcome.bill_id


async def test_summarize_sends_reading_level(settings, database) -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["body"] = json.loads(request.content)
        seen["auth"] = request.headers["Authorization"]
        return ai_text_response("Main Goal: faster internet for rural areas.")

    summary = await _service(settings, database, handler).summarize(
        "A bill to expand broadband.", ReadingLevel.COLLEGE
    )

    assert summary == "Main Goal: faster internet for rural areas."
    assert seen["auth"] == "Bearer ai-key"
    assert seen["body"]["model"] == settings.ai.model
    assert "college level" in seen["body"]["messages"][0]["content"]
    assert "A bill to expand broadband." in seen["body"]["messages"][1]["content"]


async def test_summarize_rejects_empty_text(settings, database) -> None:
    service = _service(settings, database, lambda request: ai_text_response("unused"))

    with pytest.raises(ValidationError):
        await service.summarize("   ", ReadingLevel.HIGH)


async def test_generate_arguments_balanced(settings, database) -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["body"] = json.loads(request.content)
        return ai_tool_response("return_arguments", balanced_arguments())

    arguments = await _service(settings, database, handler).generate_arguments(
        "Bill text", "Rural Broadband Act"
    )

    assert len(arguments) == 6
    assert [arg.side for arg in arguments].count("for") == 3
    assert seen["body"]["tool_choice"] == {"type": "function", "function": {"name": "return_arguments"}}


async def test_generate_arguments_unbalanced(settings, database) -> None:
    handler = lambda request: ai_tool_response("return_arguments", balanced_arguments(4, 2))

    with pytest.raises(UpstreamParseError):
        await _service(settings, database, handler).generate_arguments("Bill text", "Title")


async def test_generate_arguments_stored_on_bill(settings, database) -> None:
    bill_id = await _seed_bill(database)
    handler = lambda request: ai_tool_response("return_arguments", balanced_arguments())

    await _service(settings, database, handler).generate_arguments("Bill text", "Title", bill_id=bill_id)

    async with database.session() as session:
        stored = await BillRepository(session).get_by_id(bill_id)
    assert len(stored.arguments) == 6


async def test_analyze_impact_persists(settings, database) -> None:
    bill_id = await _seed_bill(database)
    handler = lambda request: ai_tool_response("return_impact", SAMPLE_IMPACT)

    impact = await _service(settings, database, handler).analyze_impact(
        bill_id, "Rural Broadband Act", "H.R. 1", "Expands broadband", "x" * 5000
    )

    assert impact.sectors == ["Telecommunications", "Agriculture"]
    async with database.session() as session:
        stored = await BillRepository(session).get_by_id(bill_id)
    assert stored.impact_data == SAMPLE_IMPACT


async def test_analyze_impact_unknown_bill(settings, database) -> None:
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return ai_tool_response("return_impact", SAMPLE_IMPACT)

    with pytest.raises(NotFoundError):
        await _service(settings, database, handler).analyze_impact(404, "Title", "H.R. 404")
    assert calls == []


async def test_analyze_impact_malformed_payload(settings, database) -> None:
    bill_id = await _seed_bill(database)
    handler = lambda request: ai_tool_response("return_impact", {"timeline": "soon"})

    with pytest.raises(UpstreamParseError):
        await _service(settings, database, handler).analyze_impact(bill_id, "Title", "H.R. 1")

    async with database.session() as session:
        assert (await BillRepository(session).get_by_id(bill_id)).impact_data is None


async def test_generate_stages_persists(settings, database) -> None:
    bill_id = await _seed_bill(database)
    handler = lambda request: ai_tool_response("return_stages", SAMPLE_STAGES)

    stages = await _service(settings, database, handler).generate_stages(
        bill_id, "Rural Broadband Act", "H.R. 1", "Committee Review"
    )

    assert [stage.status for stage in stages] == ["completed", "current", "pending"]
    async with database.session() as session:
        stored = await BillRepository(session).get_by_id(bill_id)
    assert stored.stages[1] == {"name": "Committee Review", "status": "current", "date": None}


async def test_generate_stages_empty(settings, database) -> None:
    bill_id = await _seed_bill(database)
    handler = lambda request: ai_tool_response("return_stages", {"stages": []})

    with pytest.raises(UpstreamParseError):
        await _service(settings, database, handler).generate_stages(bill_id, "Title", "H.R. 1", "Introduced")


async def test_chat_includes_bill_context(settings, database) -> None:
    seen = {}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["body"] = json.loads(request.content)
        return ai_text_response("A committee reviews the bill first.")

    context = BillContext(billNumber="H.R. 1", title="Rural Broadband Act", fullText="y" * 20000)
    reply = await _service(settings, database, handler).chat(
        [ChatMessage(role="user", content="What happens next?")],
        bill_context=context,
    )

    body = seen["body"]
    assert reply == "A committee reviews the bill first."
    assert body["temperature"] == 0.7
    assert body["max_tokens"] == 1000
    assert body["messages"][0]["role"] == "system"
    assert "Bill Number: H.R. 1" in body["messages"][0]["content"]
    assert "y" * 15000 + "..." in body["messages"][0]["content"]
    assert body["messages"][1] == {"role": "user", "content": "What happens next?"}


async def test_chat_rejects_too_many_messages(settings, database) -> None:
    service = _service(settings, database, lambda request: ai_text_response("unused"))
    messages = [ChatMessage(role="user", content="hi")] * 51

    with pytest.raises(ValidationError):
        await service.chat(messages)


async def test_gateway_retries_once_then_fails(settings, database, no_retry_sleep) -> None:
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(503, text="overloaded")

    with pytest.raises(AIGatewayError):
        await _service(settings, database, handler).summarize("text", ReadingLevel.MIDDLE)
    assert len(calls) == 2


async def test_gateway_recovers_after_transient_error(settings, database, no_retry_sleep) -> None:
    responses = [httpx.Response(429, text="slow down"), ai_text_response("Recovered")]

    summary = await _service(settings, database, lambda request: responses.pop(0)).summarize(
        "text", ReadingLevel.MIDDLE
    )
    assert summary == "Recovered"


async def test_gateway_client_error_not_retried(settings, database) -> None:
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(400, text="bad request")

    with pytest.raises(AIGatewayError):
        await _service(settings, database, handler).summarize("text", ReadingLevel.MIDDLE)
    assert len(calls) == 1


async def test_gateway_missing_key(database) -> None:
    settings = make_settings()
    settings.ai.api_key = None
    service = _service(settings, database, lambda request: ai_text_response("unused"))

    with pytest.raises(ConfigurationError):
        await service.summarize("text", ReadingLevel.MIDDLE)
