"""Routes model tool calls to the in-process tools registered for a call."""
import json
import logging
from typing import List, Dict, Any, Iterable

from nutrisnap_core.tools import Tool

logger = logging.getLogger(__name__)

EMPTY_RESULT = "[]"


class ToolRouter:
    """Routes tool calls from OpenAI to registered tools.

    A failing tool never aborts the generation: the model receives an empty
    result list instead and carries on.
    """

    def __init__(self, tools: Iterable[Tool] = ()):
        """
        Initialize tool router.

        Args:
            tools: Tools the model may call during this generation
        """
        self.tools: Dict[str, Tool] = {tool.name: tool for tool in tools}

    def definitions(self) -> List[Dict[str, Any]]:
        """Tool definitions to offer the model."""
        return [tool.definition() for tool in self.tools.values()]

    async def call_tool(self, name: str, raw_arguments: str) -> str:
        tool = self.tools.get(name)
        if tool is None:
            logger.warning("Model called unknown tool %r", name)
            return EMPTY_RESULT
        try:
            arguments = json.loads(raw_arguments or "{}")
            if not isinstance(arguments, dict):
                raise ValueError(f"tool arguments must be a JSON object, got {type(arguments).__name__}")
            logger.info("Calling tool %s with %s", name, arguments)
            return await tool.invoke(arguments)
        except Exception:
            logger.warning("Tool %s failed; reporting an empty result", name, exc_info=True)
            return EMPTY_RESULT

    async def handle_tool_calls(
        self,
        tool_calls: List[Any]
    ) -> List[Dict[str, Any]]:
        """
        Handle tool calls from OpenAI.

        Args:
            tool_calls: List of tool call objects from OpenAI

        Returns:
            List of tool result messages to add to conversation
        """
        logger.info("Model requested %d tool call(s)", len(tool_calls))

        tool_results = []

        for tool_call in tool_calls:
            content = await self.call_tool(
                tool_call.function.name,
                tool_call.function.arguments
            )

            tool_results.append({
                "role": "tool",
                "tool_call_id": tool_call.id,
                "content": content
            })

        return tool_results
