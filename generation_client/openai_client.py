"""OpenAI client wrapper - handles LLM calls."""
import logging
from typing import List, Dict, Any, Optional

import openai
from openai import AsyncOpenAI

from nutrisnap_core.errors import UpstreamCallFailure

logger = logging.getLogger(__name__)


class OpenAIClient:
    """Async wrapper for OpenAI chat completions.

    SDK retries are switched off: one call here is one request upstream.
    """

    def __init__(
        self,
        model: str = "gpt-4o-mini",
        temperature: float = 0.2,
        timeout: float = 60.0,
        base_url: Optional[str] = None,
        client: Optional[AsyncOpenAI] = None,
    ):
        """
        Initialize OpenAI client.

        Args:
            model: OpenAI model to use
            temperature: Sampling temperature for every request
            timeout: Per-request timeout in seconds
            base_url: Alternative API endpoint (defaults to the SDK's)
            client: Preconfigured SDK client (defaults to one built from env)
        """
        try:
            self.client = client or AsyncOpenAI(max_retries=0, timeout=timeout, base_url=base_url)
        except openai.OpenAIError as e:
            raise UpstreamCallFailure(str(e)) from e
        self.model = model
        self.temperature = temperature

    async def chat(
        self,
        messages: List[Dict[str, Any]],
        tools: Optional[List[Dict[str, Any]]] = None,
        tool_choice: str = "auto",
        response_format: Optional[Dict[str, Any]] = None,
    ):
        """
        Send chat completion request to OpenAI.

        Args:
            messages: Conversation messages
            tools: Available tools (optional)
            tool_choice: Tool choice strategy ("auto", "none", "required", or tool dict)
            response_format: Structured output format (optional)

        Returns:
            OpenAI response object
        """
        kwargs = {
            "model": self.model,
            "messages": messages,
            "temperature": self.temperature,
        }

        if tools:
            kwargs["tools"] = tools
            kwargs["tool_choice"] = tool_choice

        if response_format:
            kwargs["response_format"] = response_format

        try:
            return await self.client.chat.completions.create(**kwargs)
        except openai.OpenAIError as e:
            logger.error("OpenAI request failed: %s", e)
            raise UpstreamCallFailure(str(e)) from e

    async def close(self):
        """Release the HTTP connection pool, before its event loop closes."""
        await self.client.close()

    def get_message_from_response(self, response) -> Any:
        """Extract message from OpenAI response."""
        if not response.choices:
            return None
        return response.choices[0].message
