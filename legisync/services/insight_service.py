"""
AI insight generation for bills.

Turns bill text into plain-language summaries, balanced arguments, impact
analyses and progress stages via the AI gateway. Impact analyses and stages
(and arguments, when a bill id is given) are written back onto the bill so
the browsing UI can show them without regenerating.

Responsibility: Validate insight requests, call the AI gateway, persist results
"""

from typing import List, Optional, Sequence
import logging

from pydantic import ValidationError as PydanticValidationError

from ..config import Settings
from ..db.repositories import BillRepository
from ..db.session import Database
from ..errors import NotFoundError, UpstreamParseError, ValidationError
from ..models.insight_models import (
    BillArgument,
    BillContext,
    BillStage,
    ChatMessage,
    ImpactAnalysis,
    ReadingLevel,
)
from . import ai_contracts
from .ai_gateway import AIGatewayClient

logger = logging.getLogger(__name__)

ARGUMENTS_PER_SIDE = 3
MAX_CHAT_MESSAGES = 50


class InsightService:
    """
    Service for AI-generated bill insights.

    Example:
        service = InsightService(settings, db)
        summary = await service.summarize(text, ReadingLevel.HIGH)
        impact = await service.analyze_impact(bill_id=1, bill_title="...", ...)
    """

    def __init__(
        self,
        settings: Settings,
        database: Database,
        gateway: Optional[AIGatewayClient] = None,
    ):
        """
        Initialize insight service.

        Args:
            settings: Application settings
            database: Initialized database
            gateway: AI gateway client (defaults to one built from settings.ai)
        """
        self.settings = settings
        self.database = database
        self.gateway = gateway or AIGatewayClient(settings.ai)

    async def summarize(self, bill_text: str, reading_level: ReadingLevel) -> str:
        """
        Summarize bill text for a target reading level.

        Raises:
            ValidationError: If the bill text is empty
        """
        if not bill_text or not bill_text.strip():
            raise ValidationError("Bill text is required")

        logger.info(f"Summarizing bill at reading level: {reading_level.value}")
        summary = await self.gateway.chat(
            ai_contracts.summary_messages(bill_text, reading_level)
        )
        logger.info("Generated summary successfully")
        return summary

    async def generate_arguments(
        self,
        bill_text: str,
        bill_title: str,
        bill_id: Optional[int] = None,
    ) -> List[BillArgument]:
        """
        Generate three arguments for and three against a bill.

        Args:
            bill_text: Bill text to argue about
            bill_title: Bill title
            bill_id: When given, the arguments are stored on this bill

        Raises:
            ValidationError: If text or title is missing
            UpstreamParseError: If the model did not return exactly 3 + 3
        """
        if not bill_text or not bill_text.strip() or not bill_title or not bill_title.strip():
            raise ValidationError("Missing billText or billTitle")

        if bill_id is not None:
            await self._require_bill(bill_id)

        logger.info(f"Generating arguments for bill: {bill_title}")
        payload = await self.gateway.call_tool(
            ai_contracts.arguments_messages(bill_text, bill_title),
            ai_contracts.RETURN_ARGUMENTS_TOOL,
        )

        try:
            arguments = [BillArgument.model_validate(item) for item in payload.get("arguments") or []]
        except PydanticValidationError as e:
            raise UpstreamParseError(f"Malformed return_arguments payload: {e}") from e

        self._check_argument_balance(arguments)

        if bill_id is not None:
            await self._store(bill_id, arguments=[arg.model_dump() for arg in arguments])

        return arguments

    async def analyze_impact(
        self,
        bill_id: int,
        bill_title: str,
        bill_number: str,
        short_description: str = "",
        full_text: str = "",
    ) -> ImpactAnalysis:
        """
        Generate and store an impact analysis for a bill.

        Raises:
            NotFoundError: If the bill does not exist
        """
        await self._require_bill(bill_id)

        logger.info(f"Analyzing impact for bill: {bill_title}")
        payload = await self.gateway.call_tool(
            ai_contracts.impact_messages(bill_title, bill_number, short_description, full_text),
            ai_contracts.RETURN_IMPACT_TOOL,
        )

        try:
            impact = ImpactAnalysis.model_validate(payload)
        except PydanticValidationError as e:
            raise UpstreamParseError(f"Malformed return_impact payload: {e}") from e

        await self._store(bill_id, impact_data=impact.model_dump())
        return impact

    async def generate_stages(
        self,
        bill_id: int,
        bill_title: str,
        bill_number: str,
        status: str,
    ) -> List[BillStage]:
        """
        Generate and store legislative progress stages for a bill.

        Raises:
            NotFoundError: If the bill does not exist
        """
        await self._require_bill(bill_id)

        logger.info(f"Generating stages for bill: {bill_title}")
        payload = await self.gateway.call_tool(
            ai_contracts.stages_messages(bill_title, bill_number, status),
            ai_contracts.RETURN_STAGES_TOOL,
        )

        try:
            stages = [BillStage.model_validate(item) for item in payload.get("stages") or []]
        except PydanticValidationError as e:
            raise UpstreamParseError(f"Malformed return_stages payload: {e}") from e

        if not stages:
            raise UpstreamParseError("return_stages payload has no stages")

        await self._store(bill_id, stages=[stage.model_dump() for stage in stages])
        return stages

    async def chat(
        self,
        messages: Sequence[ChatMessage],
        bill_context: Optional[BillContext] = None,
    ) -> str:
        """
        Answer the latest turn of a bill-assistant conversation.

        Raises:
            ValidationError: If there are no messages or more than 50
        """
        if not messages or len(messages) > MAX_CHAT_MESSAGES:
            raise ValidationError("Invalid input parameters")

        logger.info(f"Sending request to AI with {len(messages)} messages")
        conversation = [{"role": "system", "content": ai_contracts.chat_system_prompt(bill_context)}]
        conversation.extend(message.model_dump() for message in messages)

        response = await self.gateway.chat(
            conversation,
            temperature=ai_contracts.CHAT_TEMPERATURE,
            max_tokens=ai_contracts.CHAT_MAX_TOKENS,
        )
        logger.info("Generated response successfully")
        return response

    @staticmethod
    def _check_argument_balance(arguments: List[BillArgument]) -> None:
        for_count = sum(1 for arg in arguments if arg.side == "for")
        against_count = sum(1 for arg in arguments if arg.side == "against")

        if for_count != ARGUMENTS_PER_SIDE or against_count != ARGUMENTS_PER_SIDE:
            raise UpstreamParseError(
                f"Expected {ARGUMENTS_PER_SIDE} arguments per side, "
                f"got {for_count} for and {against_count} against",
                context={"for": for_count, "against": against_count},
            )

    async def _require_bill(self, bill_id: int) -> None:
        async with self.database.session() as session:
            if await BillRepository(session).get_by_id(bill_id) is None:
                raise NotFoundError(f"Bill {bill_id} not found")

    async def _store(self, bill_id: int, **fields) -> None:
        async with self.database.session() as session:
            await BillRepository(session).update_insights(bill_id, **fields)
