"""Turn raw backend text into a complete :class:`AnalysisResult`.

Only a structurally unusable reply is a failure. Everything else is
repaired: the lenient field types fill gaps with the sentinel or empty
lists, pre-extracted entities fill sentinel institution facts, and the
opportunity list is always replaced by the researched one.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Sequence, Union

from pydantic import ValidationError

from ..augmentation.schemas import OpportunityRecord
from ..errors import ParseError
from ..extraction.schemas import ExtractedEntities
from ..fields import SENTINEL
from ..jsonutil import parse_json_object
from .schemas import AnalysisResult

logger = logging.getLogger(__name__)

# Keys the pipeline owns; whatever the model puts there is discarded.
_OVERRIDDEN_KEYS = ("opportunities", "scholarshipOpportunities", "scholarships", "documentType", "document_type")
_SNIPPET_CHARS = 200


@dataclass(frozen=True)
class Parsed:
    result: AnalysisResult


@dataclass(frozen=True)
class ParseFailed:
    reason: str
    snippet: str


ValidationOutcome = Union[Parsed, ParseFailed]


def backfill_entities(result: AnalysisResult, entities: ExtractedEntities) -> AnalysisResult:
    """Replace sentinel institution name/program/location with extracted values."""

    institution = result.institution
    updates = {}
    for attr, value in (
        ("name", entities.institution_name),
        ("program", entities.program),
        ("location", entities.location),
    ):
        if value and getattr(institution, attr) == SENTINEL:
            updates[attr] = value
    if not updates:
        return result
    logger.debug("Backfilled institution fields from document: %s", sorted(updates))
    return result.model_copy(update={"institution": institution.model_copy(update=updates)})


def validate(
    raw: str,
    entities: ExtractedEntities,
    opportunities: Sequence[OpportunityRecord],
    document_type: str = "offer_letter",
) -> ValidationOutcome:
    try:
        data = parse_json_object(raw)
    except ParseError as e:
        return ParseFailed(reason=str(e), snippet=(raw or "")[:_SNIPPET_CHARS])

    for key in _OVERRIDDEN_KEYS:
        data.pop(key, None)

    try:
        result = AnalysisResult.model_validate(data)
    except ValidationError as e:
        return ParseFailed(reason=f"Reply does not fit the result shape: {e.error_count()} errors",
                           snippet=(raw or "")[:_SNIPPET_CHARS])

    result = backfill_entities(result, entities)
    result = result.model_copy(update={"opportunities": list(opportunities), "document_type": document_type})
    return Parsed(result=result)
