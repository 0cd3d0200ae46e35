"""Lenient field types shared by every model that decodes model output.

Values coming back from the reasoning backend are untrusted: strings may be
missing or null, lists may arrive as scalars and enums are spelled freely.
The annotated types below repair those values before pydantic validates
them, so a decoded model always has every field present and typed.
"""

from __future__ import annotations

import logging
from typing import Annotated, Any, Callable, Dict, List, Optional, Sequence

from pydantic import BaseModel, BeforeValidator, ConfigDict
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)

SENTINEL = "Not specified in document"


def coerce_text(value: Any) -> str:
    if isinstance(value, str):
        return value.strip() or SENTINEL
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    if value is not None:
        logger.debug("Coerced %s to sentinel text", type(value).__name__)
    return SENTINEL


def coerce_text_list(value: Any) -> List[str]:
    if not isinstance(value, list):
        if value is not None:
            logger.debug("Coerced %s to empty list", type(value).__name__)
        return []
    out: List[str] = []
    for item in value:
        if isinstance(item, str) and item.strip():
            out.append(item.strip())
        elif isinstance(item, (int, float)) and not isinstance(item, bool):
            out.append(str(item))
    return out


def coerce_object(value: Any) -> Dict[str, Any]:
    if isinstance(value, BaseModel):
        return value.model_dump()
    return value if isinstance(value, dict) else {}


def object_list(text_key: Optional[str] = None) -> Callable[[Any], List[Any]]:
    """Build a coercer for lists of objects.

    Non-list input becomes ``[]`` and non-object items are dropped, except
    that a plain string is wrapped as ``{text_key: item}`` when ``text_key``
    is given (the backend sometimes answers with bare sentences).
    """

    def _coerce(value: Any) -> List[Any]:
        if not isinstance(value, list):
            return []
        out: List[Any] = []
        for item in value:
            if isinstance(item, (dict, BaseModel)):
                out.append(item)
            elif text_key and isinstance(item, str) and item.strip():
                out.append({text_key: item.strip()})
        return out

    return _coerce


def choice(allowed: Sequence[str], default: str) -> Callable[[Any], str]:
    """Build a coercer mapping free-form text onto one of ``allowed``."""

    lookup = {a.lower(): a for a in allowed}

    def _coerce(value: Any) -> str:
        if isinstance(value, str):
            return lookup.get(value.strip().lower(), default)
        return default

    return _coerce


Text = Annotated[str, BeforeValidator(coerce_text)]
TextList = Annotated[List[str], BeforeValidator(coerce_text_list)]
Priority = Annotated[str, BeforeValidator(choice(["High", "Medium", "Low"], "Medium"))]


class WireModel(BaseModel):
    """Base model: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
