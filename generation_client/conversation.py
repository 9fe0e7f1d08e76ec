"""Per-call message transcript sent to the model."""
from typing import List, Dict, Any, Optional

from nutrisnap_core.prompts import RenderedPrompt


class Conversation:
    """Messages exchanged during a single generation call."""

    def __init__(self, system_message: Optional[str] = None):
        """
        Initialize conversation.

        Args:
            system_message: System message to start conversation with
        """
        self.messages: List[Dict[str, Any]] = []

        if system_message:
            self.add_system_message(system_message)

    def add_system_message(self, content: str):
        """Add system message to conversation."""
        self.messages.append({
            "role": "system",
            "content": content
        })

    def add_user_prompt(self, prompt: RenderedPrompt):
        """
        Add the rendered prompt as the user turn.

        Plain text when there is no image, otherwise a multimodal content list
        with one image part per attached image.
        """
        if not prompt.media:
            self.messages.append({"role": "user", "content": prompt.text})
            return

        content: List[Dict[str, Any]] = [{"type": "text", "text": prompt.text}]
        for part in prompt.media:
            content.append({
                "type": "image_url",
                "image_url": {"url": part.to_data_uri()}
            })
        self.messages.append({"role": "user", "content": content})

    def add_assistant_message(self, message: Any):
        """
        Add assistant message to conversation.

        Args:
            message: OpenAI message object (can have content, tool_calls, etc.)
        """
        message_dict = {
            "role": "assistant",
        }

        if getattr(message, "content", None):
            message_dict["content"] = message.content

        if getattr(message, "tool_calls", None):
            message_dict["tool_calls"] = [
                {
                    "id": tc.id,
                    "type": tc.type,
                    "function": {
                        "name": tc.function.name,
                        "arguments": tc.function.arguments
                    }
                }
                for tc in message.tool_calls
            ]

        self.messages.append(message_dict)

    def add_tool_results(self, tool_results: list):
        """Add tool result messages produced by the ToolRouter."""
        self.messages.extend(tool_results)

    def get_messages(self) -> List[Dict[str, Any]]:
        """Get all conversation messages."""
        return self.messages.copy()
