"""Reasoning backend seam.

The pipeline only needs "send this prompt, get text back". Anything that
implements :class:`ReasoningBackend` can be plugged in; the default wraps
the OpenAI chat completions API through the shared async client.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Protocol

from openai import AsyncOpenAI

from .client import DEFAULT_MODEL, shared_client


@dataclass(frozen=True)
class PromptPayload:
    """A fully composed request: instructions, content and sampling limits."""

    name: str
    system: str
    user: str
    max_output_tokens: int
    temperature: float
    response_format: Dict[str, Any] = field(default_factory=lambda: {"type": "json_object"})


@dataclass(frozen=True)
class BackendReply:
    text: str
    tokens_used: int = 0


class ReasoningBackend(Protocol):
    """Minimal interface expected by the invoker and the opportunity lookup."""

    async def complete(self, payload: PromptPayload) -> BackendReply:  # pragma: no cover - interface only
        ...


class OpenAIBackend:
    """Chat-completions backend. The client is resolved on first use."""

    def __init__(self, model: Optional[str] = None, client: Optional[AsyncOpenAI] = None) -> None:
        self.model = model or DEFAULT_MODEL
        self._client = client

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = shared_client()
        return self._client

    async def complete(self, payload: PromptPayload) -> BackendReply:
        completion = await self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": payload.system},
                {"role": "user", "content": payload.user},
            ],
            response_format=payload.response_format,
            temperature=payload.temperature,
            max_completion_tokens=payload.max_output_tokens,
        )

        text = ""
        if completion.choices:
            text = completion.choices[0].message.content or ""
        usage = getattr(completion, "usage", None)
        tokens = getattr(usage, "total_tokens", None) or 0
        return BackendReply(text=text, tokens_used=int(tokens))
