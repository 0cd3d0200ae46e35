from __future__ import annotations

import asyncio
import inspect
from types import SimpleNamespace

from openai.resources.chat.completions import AsyncCompletions

from docinsightbot.backend import OpenAIBackend, PromptPayload

PAYLOAD = PromptPayload(
    name="offer_letter_analysis",
    system="You are an analyst.",
    user="Analyze this.",
    max_output_tokens=3000,
    temperature=0.3,
)


class FakeCompletions:
    def __init__(self, completion) -> None:
        self.completion = completion
        self.kwargs = {}

    async def create(self, **kwargs):
        self.kwargs = kwargs
        return self.completion


def _client(completion) -> SimpleNamespace:
    return SimpleNamespace(chat=SimpleNamespace(completions=FakeCompletions(completion)))


def test_installed_openai_accepts_max_completion_tokens() -> None:
    assert "max_completion_tokens" in inspect.signature(AsyncCompletions.create).parameters


def test_complete_sends_limits_and_reads_usage() -> None:
    completion = SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content='{"summary": "ok"}'))],
        usage=SimpleNamespace(total_tokens=812),
    )
    client = _client(completion)

    reply = asyncio.run(OpenAIBackend(model="gpt-4o-mini", client=client).complete(PAYLOAD))

    assert reply.text == '{"summary": "ok"}'
    assert reply.tokens_used == 812
    sent = client.chat.completions.kwargs
    assert sent["model"] == "gpt-4o-mini"
    assert sent["max_completion_tokens"] == 3000
    assert sent["temperature"] == 0.3
    assert sent["response_format"] == {"type": "json_object"}
    assert [m["role"] for m in sent["messages"]] == ["system", "user"]


def test_complete_without_choices_or_usage() -> None:
    client = _client(SimpleNamespace(choices=[], usage=None))

    reply = asyncio.run(OpenAIBackend(model="gpt-4o-mini", client=client).complete(PAYLOAD))

    assert reply.text == ""
    assert reply.tokens_used == 0
