"""
Prompts and structured-output tool contracts for the AI gateway.

The tool schemas are sent verbatim as OpenAI-style `tools` with a forced
`tool_choice`; the UI and the stored JSON columns depend on their exact
field names, so edit them only together with models/insight_models.py.

Responsibility: Prompt text and tool schemas for insight generation
"""

from typing import Any, Dict, List, Optional

from ..models.insight_models import BillContext, ReadingLevel

# Truncation limits applied to bill text before it is sent to the model
IMPACT_TEXT_LIMIT = 2000
CHAT_TEXT_LIMIT = 15000

CHAT_TEMPERATURE = 0.7
CHAT_MAX_TOKENS = 1000


# MARK: - Tool schemas

RETURN_ARGUMENTS_TOOL: Dict[str, Any] = {
    "type": "function",
    "function": {
        "name": "return_arguments",
        "description": "Return the for and against arguments for a bill",
        "parameters": {
            "type": "object",
            "properties": {
                "arguments": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "side": {
                                "type": "string",
                                "enum": ["for", "against"],
                                "description": "Whether this argument supports or opposes the bill",
                            },
                            "text": {
                                "type": "string",
                                "description": "The argument text, 2-3 sentences max",
                            },
                            "source": {
                                "type": "string",
                                "description": (
                                    "The perspective or stakeholder group this represents "
                                    "(e.g., 'Education advocates', 'Fiscal conservatives', "
                                    "'Healthcare providers')"
                                ),
                            },
                        },
                        "required": ["side", "text", "source"],
                        "additionalProperties": False,
                    },
                    "minItems": 6,
                    "maxItems": 6,
                },
            },
            "required": ["arguments"],
            "additionalProperties": False,
        },
    },
}

RETURN_IMPACT_TOOL: Dict[str, Any] = {
    "type": "function",
    "function": {
        "name": "return_impact",
        "description": "Return the bill impact analysis",
        "parameters": {
            "type": "object",
            "properties": {
                "affected_population": {"type": "string"},
                "cost_estimate": {"type": "string"},
                "geographic_scope": {"type": "string"},
                "timeline": {"type": "string"},
                "sectors": {
                    "type": "array",
                    "items": {"type": "string"},
                },
            },
            "required": ["affected_population", "cost_estimate", "geographic_scope", "timeline", "sectors"],
        },
    },
}

RETURN_STAGES_TOOL: Dict[str, Any] = {
    "type": "function",
    "function": {
        "name": "return_stages",
        "description": "Return the bill stages",
        "parameters": {
            "type": "object",
            "properties": {
                "stages": {
                    "type": "array",
                    "items": {
                        "type": "object",
                        "properties": {
                            "name": {"type": "string"},
                            "status": {"type": "string", "enum": ["completed", "current", "pending"]},
                            "date": {"type": "string"},
                        },
                        "required": ["name", "status"],
                    },
                },
            },
            "required": ["stages"],
        },
    },
}


def tool_name(tool: Dict[str, Any]) -> str:
    return tool["function"]["name"]


# MARK: - Prompts

def summary_messages(bill_text: str, reading_level: ReadingLevel) -> List[Dict[str, str]]:
    level = reading_level.description
    return [
        {
            "role": "system",
            "content": (
                "You are an expert at explaining complex legislation in plain English for students. "
                f"Create summaries appropriate for {level}. Use emojis to make it engaging. "
                "Format your response with clear sections: Main Goal, Budget Impact, Who It Affects, "
                "Timeline, and Key Points (as bullet points)."
            ),
        },
        {
            "role": "user",
            "content": f"Please summarize this bill in plain English appropriate for {level}:\n\n{bill_text}",
        },
    ]


def arguments_messages(bill_text: str, bill_title: str) -> List[Dict[str, str]]:
    return [
        {
            "role": "system",
            "content": (
                "You are an expert policy analyst who provides balanced, fact-based arguments for and "
                "against legislative bills. Generate 3 arguments supporting the bill and 3 arguments "
                "opposing it. Each argument should be clear, concise, and cite a credible perspective "
                "or source."
            ),
        },
        {
            "role": "user",
            "content": (
                "Generate balanced arguments for and against this bill:\n\n"
                f"Title: {bill_title}\n\n"
                f"Bill Text: {bill_text}\n\n"
                "Provide 3 supporting arguments and 3 opposing arguments. Each should be factual, "
                "balanced, and represent real stakeholder perspectives."
            ),
        },
    ]


def impact_messages(
    bill_title: str,
    bill_number: str,
    short_description: str,
    full_text: str,
) -> List[Dict[str, str]]:
    return [
        {
            "role": "system",
            "content": "You are a policy analyst expert. Analyze the bill and provide comprehensive impact analysis.",
        },
        {
            "role": "user",
            "content": (
                "Analyze the impact of this bill:\n\n"
                f"Bill Number: {bill_number}\n"
                f"Title: {bill_title}\n"
                f"Description: {short_description}\n"
                f"Full Text: {full_text[:IMPACT_TEXT_LIMIT]}\n\n"
                "Provide analysis including:\n"
                "- Affected population (who this impacts)\n"
                "- Cost estimate (financial implications)\n"
                "- Geographic scope (where this applies)\n"
                "- Timeline (implementation timeframe)\n"
                "- Affected sectors (industries/areas impacted)"
            ),
        },
    ]


def stages_messages(bill_title: str, bill_number: str, status: str) -> List[Dict[str, str]]:
    return [
        {
            "role": "system",
            "content": (
                "You are a legislative expert. Generate realistic bill progress stages based on the "
                "bill information and current status."
            ),
        },
        {
            "role": "user",
            "content": (
                "Generate legislative progress stages for this bill:\n\n"
                f"Bill Number: {bill_number}\n"
                f"Title: {bill_title}\n"
                f"Current Status: {status}\n\n"
                "Return stages with these statuses:\n"
                '- "completed" for stages already done\n'
                '- "current" for the active stage\n'
                '- "pending" for future stages\n\n'
                "Include typical congressional stages like: Introduced, Committee Review, House Vote, "
                "Senate Vote, Presidential Action, etc."
            ),
        },
    ]


CHAT_SYSTEM_PROMPT = """You are Bill Buddy, a friendly AI assistant designed to help students understand legislation and civic processes. Your role is to:
- Explain bills and legislative concepts in clear, simple language appropriate for middle and high school students
- Answer questions about how government works
- Break down complex legal language into easy-to-understand terms
- Encourage civic engagement and understanding
- Be encouraging and educational

Keep responses concise and engaging. Use examples when helpful."""


def chat_system_prompt(bill_context: Optional[BillContext] = None) -> str:
    """System prompt for the bill assistant, with the bill under discussion appended."""
    if bill_context is None:
        return CHAT_SYSTEM_PROMPT

    full_text = bill_context.full_text
    excerpt = full_text[:CHAT_TEXT_LIMIT] + ("..." if len(full_text) > CHAT_TEXT_LIMIT else "")

    return (
        f"{CHAT_SYSTEM_PROMPT}\n\n"
        "You are currently discussing this bill:\n"
        f"Bill Number: {bill_context.bill_number}\n"
        f"Title: {bill_context.title}\n"
        f"Description: {bill_context.description}\n"
        f"Status: {bill_context.status}\n"
        f"Category: {bill_context.category}\n\n"
        "Full Bill Text:\n"
        f"{excerpt}\n\n"
        "Use this context to answer questions about this specific bill."
    )
