"""Safe results for when the real analysis cannot be used.

Tier 1 (the reply could not be parsed) still knows what the document is
about: it keeps the extracted names and the researched opportunities.
Tier 2 (the backend could not be reached) knows nothing and says so.
Both always advise contacting the institution directly.
"""

from __future__ import annotations

from typing import List, Sequence

from ..augmentation.schemas import OpportunityRecord
from ..extraction.schemas import ExtractedEntities
from ..fields import SENTINEL
from .schemas import (
    AnalysisResult,
    InstitutionInfo,
    NextStep,
    ProfileAnalysis,
    Recommendation,
)

_THE_INSTITUTION = "the institution"


def _contact_recommendation(institution: str, program: str) -> Recommendation:
    about = f" about the {program}" if program != SENTINEL else ""
    return Recommendation(
        category="Application",
        priority="High",
        recommendation=f"Contact the admissions office of {institution} directly{about}",
        rationale="The document could not be analysed automatically, so the terms need to be confirmed with the issuer.",
        implementation_steps=[
            "Find the admissions contact details on the document or the official website",
            "Ask for written confirmation of fees, conditions and deadlines",
            "Keep copies of all correspondence",
        ],
        timeline="Within the next week",
        expected_outcome="Confirmed terms and deadlines for your offer",
    )


def _financial_aid_recommendation(institution: str, opportunities: Sequence[OpportunityRecord]) -> Recommendation:
    steps = [f"Check eligibility for {o.name}" for o in opportunities[:3]]
    steps.append("Ask which scholarships can be combined and when each application closes")
    return Recommendation(
        category="Financial",
        priority="High" if opportunities else "Medium",
        recommendation=f"Speak to the financial aid office of {institution} about scholarships and payment plans",
        rationale="Funding options are easiest to secure before fees fall due.",
        implementation_steps=steps,
        timeline="Before the first payment deadline",
        expected_outcome="A clear picture of the funding available to you",
    )


def _next_steps(institution: str) -> List[NextStep]:
    return [
        NextStep(
            step="Review the document in full",
            description="Read every condition and deadline in the document yourself.",
            priority="High",
        ),
        NextStep(
            step=f"Contact {institution}",
            description="Confirm fees, conditions and acceptance deadlines with the admissions office.",
            priority="High",
        ),
    ]


def parse_failure_result(
    entities: ExtractedEntities,
    opportunities: Sequence[OpportunityRecord],
    document_type: str = "offer_letter",
) -> AnalysisResult:
    """Tier 1: the backend answered, but not with a usable analysis."""

    profile = entities.student_profile
    name = entities.institution_name or SENTINEL
    program = entities.program or SENTINEL
    institution = entities.institution_name or _THE_INSTITUTION

    if entities.institution_name and entities.program:
        summary = (
            f"This document concerns the {program} at {name}. A detailed analysis could not be "
            "produced, so confirm its terms directly with the institution."
        )
    elif entities.institution_name:
        summary = (
            f"This document was issued by {name}. A detailed analysis could not be produced, "
            "so confirm its terms directly with the institution."
        )
    else:
        summary = "A detailed analysis could not be produced. Confirm the document's terms directly with the issuer."

    return AnalysisResult(
        document_type=document_type,
        summary=summary,
        institution=InstitutionInfo(name=name, program=program, location=entities.location or SENTINEL),
        profile_analysis=ProfileAnalysis(
            academic_standing=profile.academic_standing or SENTINEL,
            gpa=f"{profile.gpa:g}" if profile.gpa is not None else SENTINEL,
        ),
        opportunities=list(opportunities),
        recommendations=[
            _contact_recommendation(institution, program),
            _financial_aid_recommendation(institution, opportunities),
        ],
        next_steps=_next_steps(institution),
    )


def invocation_failure_result(document_type: str = "offer_letter") -> AnalysisResult:
    """Tier 2: nothing is known beyond the fact that analysis failed."""

    return AnalysisResult(
        document_type=document_type,
        summary=(
            "The analysis service is currently unavailable. Review the document carefully and "
            "contact the institution directly to confirm its terms."
        ),
        recommendations=[
            _contact_recommendation(_THE_INSTITUTION, SENTINEL),
            _financial_aid_recommendation(_THE_INSTITUTION, []),
        ],
        next_steps=_next_steps(_THE_INSTITUTION),
    )
