"""Model-facing layer: OpenAI wrapper, transcript, tool routing, generation."""

from .openai_client import OpenAIClient
from .tool_router import ToolRouter
from .conversation import Conversation
from .generation_client import GenerationClient

__all__ = [
    "OpenAIClient",
    "ToolRouter",
    "Conversation",
    "GenerationClient",
]
