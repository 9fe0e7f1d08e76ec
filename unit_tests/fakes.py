"""Scripted stand-ins for the model used across the unit tests."""
import json
from types import SimpleNamespace

from generation_client import OpenAIClient

# 1x1 transparent PNG
PNG_BYTES = bytes.fromhex(
    "89504e470d0a1a0a0000000d4948445200000001000000010806000000"
    "1f15c4890000000d49444154789c6360000002000154a24f5d0000000049454e44ae426082"
)


def message_reply(content=None, tool_calls=None, refusal=None):
    message = SimpleNamespace(content=content, tool_calls=tool_calls, refusal=refusal)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])


def json_reply(payload):
    return message_reply(content=json.dumps(payload))


def tool_call(name, arguments, call_id="call_1"):
    raw = arguments if isinstance(arguments, str) else json.dumps(arguments)
    return SimpleNamespace(id=call_id, type="function", function=SimpleNamespace(name=name, arguments=raw))


def tool_reply(*calls):
    return message_reply(tool_calls=list(calls))


class FakeOpenAIClient(OpenAIClient):
    """Scripted stand-in for the OpenAI wrapper.

    Each reply is a response object, an exception to raise, or a callable that
    receives the messages sent and returns a response.
    """

    def __init__(self, replies=()):
        super().__init__(client=SimpleNamespace())
        self.replies = list(replies)
        self.calls = []

    def script(self, *replies):
        self.replies.extend(replies)

    async def chat(self, messages, tools=None, tool_choice="auto", response_format=None):
        self.calls.append({
            "messages": messages,
            "tools": tools,
            "tool_choice": tool_choice,
            "response_format": response_format,
        })
        if not self.replies:
            raise AssertionError("model called more often than scripted")
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        if callable(reply):
            return reply(messages)
        return reply

    async def close(self):
        pass
