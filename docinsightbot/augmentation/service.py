"""Bounded-time knowledge augmentation.

The lookup races a deadline timer; whichever settles first decides the
outcome. A timeout or any lookup failure yields an empty opportunity list,
never an exception.
"""

from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass
from typing import Awaitable, List, Optional, TypeVar

from ..errors import AugmentationTimeout
from ..extraction.schemas import ExtractedEntities
from .lookup import LLMOpportunityLookup, OpportunityLookup
from .schemas import OpportunityRecord
from .scoring import rank

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_DEADLINE_S = float(os.getenv("DOCINSIGHTBOT_AUGMENT_DEADLINE_S", "20"))


@dataclass(frozen=True)
class AugmentationConfig:
    deadline_s: float = DEFAULT_DEADLINE_S
    max_opportunities: int = 8


async def bounded_wait(awaitable: Awaitable[T], deadline_s: float) -> T:
    """Await ``awaitable`` for at most ``deadline_s`` seconds.

    Raises :class:`AugmentationTimeout` when the deadline wins. The losing
    task is abandoned with a best-effort cancel.
    """

    task = asyncio.ensure_future(awaitable)
    done, _ = await asyncio.wait({task}, timeout=deadline_s)
    if task not in done:
        task.cancel()
        raise AugmentationTimeout(f"Lookup did not finish within {deadline_s:g}s")
    return task.result()


class AugmentationService:
    def __init__(
        self,
        lookup: Optional[OpportunityLookup] = None,
        config: Optional[AugmentationConfig] = None,
    ) -> None:
        self.lookup = lookup or LLMOpportunityLookup()
        self.config = config or AugmentationConfig()

    async def augment(self, entities: ExtractedEntities) -> List[OpportunityRecord]:
        try:
            candidates = await bounded_wait(self.lookup.find(entities), self.config.deadline_s)
            records = rank(candidates, entities.student_profile, self.config.max_opportunities)
        except AugmentationTimeout as e:
            logger.warning("Opportunity research timed out, continuing without it: %s", e)
            return []
        except Exception as e:
            logger.warning("Opportunity research failed, continuing without it: %s: %s", type(e).__name__, e)
            return []

        logger.info("Found %d opportunities", len(records))
        return records
