"""Opportunity lookup collaborators.

The augmentation service treats the lookup as a black box: anything with an
async ``find(entities)`` returning :class:`OpportunityCandidate` objects will
do. :class:`LLMOpportunityLookup` asks the reasoning backend for candidates
and, optionally, checks their official pages.
"""

from __future__ import annotations

import logging
from typing import List, Optional, Protocol

import httpx
from pydantic import ValidationError

from ..backend import OpenAIBackend, ReasoningBackend
from ..client import LOOKUP_MODEL
from ..errors import AugmentationError, ParseError
from ..extraction.schemas import ExtractedEntities
from ..jsonutil import parse_json_object
from .links import verify_candidates
from .prompts import compose_lookup
from .schemas import LookupReply, OpportunityCandidate

logger = logging.getLogger(__name__)


class OpportunityLookup(Protocol):
    async def find(self, entities: ExtractedEntities) -> List[OpportunityCandidate]:  # pragma: no cover - interface only
        ...


class NullOpportunityLookup:
    """Lookup that never finds anything (augmentation switched off)."""

    async def find(self, entities: ExtractedEntities) -> List[OpportunityCandidate]:
        return []


class LLMOpportunityLookup:
    def __init__(
        self,
        backend: Optional[ReasoningBackend] = None,
        verify_links: bool = False,
        max_candidates: int = 12,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.backend = backend or OpenAIBackend(model=LOOKUP_MODEL)
        self.verify_links = verify_links
        self.max_candidates = max_candidates
        self.http_client = http_client

    async def find(self, entities: ExtractedEntities) -> List[OpportunityCandidate]:
        if not entities.institution_name and not entities.program:
            logger.info("Skipping opportunity lookup: no institution or program found")
            return []

        payload = compose_lookup(entities, self.max_candidates)
        try:
            reply = await self.backend.complete(payload)
            data = parse_json_object(reply.text)
            candidates = LookupReply.model_validate(data).opportunities
        except (ParseError, ValidationError) as e:
            raise AugmentationError(f"Unusable lookup reply: {e}") from e

        candidates = candidates[: self.max_candidates]
        if self.verify_links:
            candidates = await verify_candidates(candidates, self.http_client)
        return candidates
