"""
AI insight payload models.

Field names and enums match the structured-output tool schemas sent to the
AI gateway; these objects are persisted onto bills as JSON and rendered by
the UI, so they must not drift from the tool contracts.

Responsibility: Typed views of AI-generated summaries, arguments, impact and stages
"""

from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field


class ReadingLevel(str, Enum):
    """Target audience for plain-language summaries."""
    MIDDLE = "middle"
    HIGH = "high"
    COLLEGE = "college"

    @property
    def description(self) -> str:
        return {
            ReadingLevel.MIDDLE: "middle school (ages 11-14)",
            ReadingLevel.HIGH: "high school (ages 14-18)",
            ReadingLevel.COLLEGE: "college level (ages 18+)",
        }[self]


class BillArgument(BaseModel):
    """One for/against argument."""

    model_config = ConfigDict(extra="ignore")

    side: Literal["for", "against"]
    text: str = Field(min_length=1)
    source: str = Field(min_length=1, description="Perspective or stakeholder group")


class ImpactAnalysis(BaseModel):
    """Structured impact analysis persisted as bills.impact_data."""

    model_config = ConfigDict(extra="ignore")

    affected_population: str
    cost_estimate: str
    geographic_scope: str
    timeline: str
    sectors: List[str]


class BillStage(BaseModel):
    """One progress stage persisted in bills.stages."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(min_length=1)
    status: Literal["completed", "current", "pending"]
    date: Optional[str] = None


class Representative(BaseModel):
    """House representative resolved from a ZIP code."""

    name: str
    party: str
    district: str
    email: str
    phone: str
    website: str


class ChatMessage(BaseModel):
    """One turn in a bill-assistant conversation."""

    role: Literal["user", "assistant"]
    content: str = Field(min_length=1, max_length=2000)


class BillContext(BaseModel):
    """Bill the assistant is currently discussing."""

    model_config = ConfigDict(populate_by_name=True)

    bill_number: str = Field(max_length=50, alias="billNumber")
    title: str = Field(max_length=500)
    description: str = Field(default="", max_length=1000)
    full_text: str = Field(default="", max_length=50000, alias="fullText")
    status: str = Field(default="", max_length=100)
    category: str = Field(default="", max_length=100)
