"""Generation client - one structured model call, with tools."""
import logging
from typing import Any, Dict, Sequence, Type, TypeVar

from pydantic import BaseModel

from nutrisnap_core.errors import EmptyGenerationError
from nutrisnap_core.prompts import RenderedPrompt
from nutrisnap_core.tools import Tool
from nutrisnap_core.validation import parse_json_output
from .conversation import Conversation
from .openai_client import OpenAIClient
from .tool_router import ToolRouter

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)

SYSTEM_MESSAGE = (
    "You are NutriSnap, a nutrition assistant. "
    "Always answer with a single JSON object that matches the requested schema. "
    "No markdown."
)


def response_format_for(output_model: Type[BaseModel]) -> Dict[str, Any]:
    """JSON schema response format describing ``output_model``."""
    return {
        "type": "json_schema",
        "json_schema": {
            "name": output_model.__name__,
            "schema": output_model.model_json_schema(by_alias=True),
            "strict": False,
        },
    }


class GenerationClient:
    """Runs a rendered prompt against the model and validates the reply.

    The model may call the offered tools for up to ``max_tool_rounds`` rounds;
    after that it is asked for its final answer with tools disabled. There is
    exactly one attempt per ``run``: errors propagate to the caller.
    """

    def __init__(self, openai_client: OpenAIClient, max_tool_rounds: int = 3):
        self.openai_client = openai_client
        self.max_tool_rounds = max_tool_rounds

    async def run(
        self,
        prompt: RenderedPrompt,
        output_model: Type[ModelT],
        tools: Sequence[Tool] = (),
    ) -> ModelT:
        conversation = Conversation(SYSTEM_MESSAGE)
        conversation.add_user_prompt(prompt)
        router = ToolRouter(tools)
        tool_definitions = router.definitions() or None
        response_format = response_format_for(output_model)

        rounds = 0
        while True:
            tools_open = bool(tool_definitions) and rounds < self.max_tool_rounds
            response = await self.openai_client.chat(
                messages=conversation.get_messages(),
                tools=tool_definitions,
                tool_choice="auto" if tools_open else "none",
                response_format=response_format,
            )
            message = self.openai_client.get_message_from_response(response)
            if message is None:
                raise EmptyGenerationError("Model returned no message")

            if tools_open and getattr(message, "tool_calls", None):
                conversation.add_assistant_message(message)
                conversation.add_tool_results(await router.handle_tool_calls(message.tool_calls))
                rounds += 1
                continue
            break

        refusal = getattr(message, "refusal", None)
        if refusal:
            raise EmptyGenerationError(f"Model refused to answer: {refusal}")
        content = (message.content or "").strip()
        if not content:
            raise EmptyGenerationError(f"Model returned no {output_model.__name__}")

        logger.info("Model answered after %d tool round(s)", rounds)
        return parse_json_output(output_model, content)
