"""
Client for the OpenAI-compatible AI gateway.

Wraps POST {base_url}/chat/completions for free-text answers and for
forced tool calls that return structured JSON. Transient failures (timeouts,
429, 5xx) get one retry; everything else surfaces as a typed LegiSyncError.

Responsibility: Talk to the AI gateway and decode its responses
"""

from contextlib import asynccontextmanager
from typing import Any, AsyncIterator, Dict, List, Optional
import json
import logging

import httpx

from ..config import AIConfig
from ..errors import AIGatewayError, ConfigurationError, UpstreamParseError
from ..utils.retry import RetryError, retry_async
from .ai_contracts import tool_name

logger = logging.getLogger(__name__)


class AIGatewayClient:
    """
    Chat-completions client.

    Example:
        gateway = AIGatewayClient(settings.ai)
        text = await gateway.chat(messages)
        payload = await gateway.call_tool(messages, RETURN_IMPACT_TOOL)
    """

    def __init__(self, config: AIConfig, client: Optional[httpx.AsyncClient] = None):
        """
        Initialize gateway client.

        Args:
            config: AI gateway configuration
            client: HTTP client to use instead of creating one per call
        """
        self.config = config
        self._client = client

    async def chat(
        self,
        messages: List[Dict[str, str]],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> str:
        """
        Return the assistant's text reply.

        Raises:
            UpstreamParseError: If the reply has no content
        """
        body: Dict[str, Any] = {"messages": messages}
        if temperature is not None:
            body["temperature"] = temperature
        if max_tokens is not None:
            body["max_tokens"] = max_tokens

        data = await self.complete(body)

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise UpstreamParseError("AI gateway response has no message content") from e

        if not content:
            raise UpstreamParseError("AI gateway returned an empty response")
        return content

    async def call_tool(
        self,
        messages: List[Dict[str, str]],
        tool: Dict[str, Any],
    ) -> Dict[str, Any]:
        """
        Force one tool call and return its decoded arguments.

        Raises:
            UpstreamParseError: If no tool call came back or its arguments
                are not a JSON object
        """
        name = tool_name(tool)
        data = await self.complete({
            "messages": messages,
            "tools": [tool],
            "tool_choice": {"type": "function", "function": {"name": name}},
        })

        try:
            raw_arguments = data["choices"][0]["message"]["tool_calls"][0]["function"]["arguments"]
        except (KeyError, IndexError, TypeError) as e:
            raise UpstreamParseError(f"No {name} tool call in AI gateway response") from e

        if isinstance(raw_arguments, dict):
            return raw_arguments

        try:
            arguments = json.loads(raw_arguments)
        except (TypeError, ValueError) as e:
            raise UpstreamParseError(f"{name} arguments are not valid JSON") from e

        if not isinstance(arguments, dict):
            raise UpstreamParseError(f"{name} arguments are not a JSON object")
        return arguments

    async def complete(self, body: Dict[str, Any]) -> Dict[str, Any]:
        """
        POST one chat-completions request and return the decoded response.

        Raises:
            ConfigurationError: If no API key is configured
            AIGatewayError: If the gateway is unreachable or rejects the request
        """
        if not self.config.api_key:
            raise ConfigurationError("AI gateway API key not configured")

        payload = {"model": self.config.model, **body}

        async with self._client_context() as client:
            async def post() -> httpx.Response:
                response = await client.post(
                    f"{self.config.base_url}/chat/completions",
                    json=payload,
                    headers={"Authorization": f"Bearer {self.config.api_key}"},
                )
                response.raise_for_status()
                return response

            try:
                response = await retry_async(
                    post,
                    max_attempts=self.config.max_attempts,
                    logger_instance=logger,
                )
            except RetryError as e:
                raise AIGatewayError(
                    f"AI gateway unavailable: {e.last_exception}",
                    context={"model": self.config.model},
                ) from e
            except httpx.HTTPStatusError as e:
                logger.error(f"AI gateway error: {e.response.status_code} {e.response.text[:500]}")
                raise AIGatewayError(
                    f"AI gateway rejected the request ({e.response.status_code})",
                    context={"status": e.response.status_code},
                ) from e
            except httpx.HTTPError as e:
                raise AIGatewayError(f"AI gateway request failed: {e}") from e

        try:
            return response.json()
        except ValueError as e:
            raise UpstreamParseError("AI gateway returned a non-JSON response") from e

    @asynccontextmanager
    async def _client_context(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._client is not None:
            yield self._client
            return

        async with httpx.AsyncClient(timeout=self.config.timeout_seconds) as client:
            yield client
