"""Single-attempt invocation of the reasoning backend."""

from __future__ import annotations

import asyncio
import logging

import httpx
import openai

from ..backend import BackendReply, PromptPayload, ReasoningBackend
from ..errors import InvocationError

logger = logging.getLogger(__name__)


class AnalysisInvoker:
    def __init__(self, backend: ReasoningBackend) -> None:
        self.backend = backend

    async def invoke(self, payload: PromptPayload) -> BackendReply:
        """Send ``payload`` exactly once. Any failure becomes :class:`InvocationError`."""

        try:
            reply = await self.backend.complete(payload)
        except openai.OpenAIError as e:
            raise InvocationError(f"{payload.name}: provider error: {e}") from e
        except httpx.HTTPError as e:
            raise InvocationError(f"{payload.name}: transport error: {e}") from e
        except asyncio.TimeoutError as e:
            raise InvocationError(f"{payload.name}: timed out") from e
        except Exception as e:
            raise InvocationError(f"{payload.name}: {type(e).__name__}: {e}") from e

        logger.info("%s returned %d chars, %d tokens", payload.name, len(reply.text), reply.tokens_used)
        return reply
