from __future__ import annotations

import asyncio
import json
from typing import List, Optional

import pytest

from docinsightbot.augmentation.schemas import OpportunityCandidate
from docinsightbot.backend import BackendReply, PromptPayload
from docinsightbot.extraction.schemas import ExtractedEntities

OFFER_TEXT = """Dear Applicant,

We are pleased to offer you a place in the Master of Data Science at the University of Springfield.
The campus is located in Springfield, Illinois.
Nationality: Indian
GPA: 3.6
This is a conditional offer. Tuition is USD 42,000 per year.
"""

GOOD_REPLY = {
    "summary": "A conditional offer for a two-year master's degree.",
    "institution": {"name": None, "tuition": "USD 42,000 per year", "startDate": "September 2026"},
    "profileAnalysis": {"academicStanding": "Conditional offer", "strengths": ["Strong GPA"]},
    "costSavingStrategies": [{"strategy": "Apply for merit scholarships", "difficulty": "Low"}],
    "recommendations": [
        {"category": "Financial", "priority": "High", "recommendation": "Budget for tuition"},
        "Accept the offer before the deadline",
    ],
    "nextSteps": [{"step": "Sign the acceptance form", "priority": "High"}],
    "opportunities": [{"name": "Invented Scholarship"}],
}


class FakeBackend:
    """Records every payload and answers with a fixed reply (or raises)."""

    def __init__(self, text: str = "", tokens: int = 0, error: Optional[Exception] = None) -> None:
        self.text = text
        self.tokens = tokens
        self.error = error
        self.payloads: List[PromptPayload] = []

    async def complete(self, payload: PromptPayload) -> BackendReply:
        self.payloads.append(payload)
        if self.error is not None:
            raise self.error
        return BackendReply(text=self.text, tokens_used=self.tokens)


class StaticLookup:
    def __init__(self, candidates: List[OpportunityCandidate]) -> None:
        self.candidates = candidates
        self.calls = 0

    async def find(self, entities: ExtractedEntities) -> List[OpportunityCandidate]:
        self.calls += 1
        return list(self.candidates)


class SlowLookup:
    def __init__(self, delay_s: float = 5.0) -> None:
        self.delay_s = delay_s
        self.cancelled = False

    async def find(self, entities: ExtractedEntities) -> List[OpportunityCandidate]:
        try:
            await asyncio.sleep(self.delay_s)
        except asyncio.CancelledError:
            self.cancelled = True
            raise
        return []


class FailingLookup:
    async def find(self, entities: ExtractedEntities) -> List[OpportunityCandidate]:
        raise RuntimeError("lookup service down")


def candidate(name: str, **requirements) -> OpportunityCandidate:
    return OpportunityCandidate.model_validate(
        {
            "name": name,
            "amount": "USD 5,000",
            "applicationDeadline": "March 1, 2026",
            "sourceUrl": f"https://example.edu/{name.lower().replace(' ', '-')}",
            "requirements": requirements,
        }
    )


@pytest.fixture
def offer_text() -> str:
    return OFFER_TEXT


@pytest.fixture
def good_reply() -> str:
    return json.dumps(GOOD_REPLY)
