"""Strict-but-forgiving JSON object parsing for model output."""

from __future__ import annotations

import json
from typing import Any, Dict

from .errors import ParseError


def _strip_fences(raw: str) -> str:
    if "```json" in raw:
        return raw.split("```json", 1)[1].split("```", 1)[0].strip()
    if raw.startswith("```"):
        return raw.strip("`").strip()
    return raw


def parse_json_object(raw: str) -> Dict[str, Any]:
    """Parse ``raw`` as a single JSON object or raise :class:`ParseError`."""

    raw = _strip_fences((raw or "").strip())
    if not raw:
        raise ParseError("Empty model output (expected JSON).")

    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        # Fallback: try to salvage the first {...} block if extra text leaked in.
        start = raw.find("{")
        end = raw.rfind("}")
        if not 0 <= start < end:
            raise ParseError("Model output is not JSON.") from None
        try:
            data = json.loads(raw[start : end + 1])
        except json.JSONDecodeError as e:
            raise ParseError(f"Model output is not valid JSON: {e.msg}") from e

    if not isinstance(data, dict):
        raise ParseError(f"Expected a JSON object, got {type(data).__name__}.")
    return data
