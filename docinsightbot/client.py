"""OpenAI client factory and model configuration.

This keeps the dependency on the OpenAI SDK in one place, which makes
it easy to swap the backend or hand a fake one to the pipeline in tests.

Environment variables (e.g. ``OPENAI_API_KEY``) are loaded from a
``.env`` file if present, using ``python-dotenv``.
"""

from __future__ import annotations

import functools
import os
from typing import Optional

from dotenv import load_dotenv
import httpx
from openai import AsyncOpenAI


# Load environment variables from a .env file if it exists.
load_dotenv()


DEFAULT_MODEL = os.getenv("DOCINSIGHTBOT_MODEL", "gpt-4o")
LOOKUP_MODEL = os.getenv("DOCINSIGHTBOT_LOOKUP_MODEL", DEFAULT_MODEL)

# Default request timeout (seconds) to avoid hanging forever.
DEFAULT_TIMEOUT_S = float(os.getenv("DOCINSIGHTBOT_TIMEOUT_S", "60"))


def get_async_openai_client(api_key: Optional[str] = None, max_retries: int = 0) -> AsyncOpenAI:
    """Return an async OpenAI client configured from environment or explicit key.

    Retries are disabled by default: every pipeline stage makes a single
    attempt and relies on the fallback generator instead.
    """

    http_client = httpx.AsyncClient(timeout=httpx.Timeout(DEFAULT_TIMEOUT_S))

    if api_key is not None:
        return AsyncOpenAI(api_key=api_key, http_client=http_client, max_retries=max_retries)

    # Fallback to env configuration (OPENAI_API_KEY, etc.).
    return AsyncOpenAI(http_client=http_client, max_retries=max_retries)


@functools.lru_cache(maxsize=1)
def shared_client() -> AsyncOpenAI:
    """Process-wide client, built on first use and reused by every analysis."""
    return get_async_openai_client()
