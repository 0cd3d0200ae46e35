"""Per-document-type parameters for the analysis pipeline.

The pipeline shape is the same for every document; only the analyst role,
the focus areas and the size/sampling limits change.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Tuple


@dataclass(frozen=True)
class DocumentType:
    key: str
    label: str
    analyst_role: str
    focus_areas: Tuple[str, ...]
    max_input_chars: int = 32000
    max_output_tokens: int = 3000
    temperature: float = 0.3


OFFER_LETTER = DocumentType(
    key="offer_letter",
    label="University offer letter",
    analyst_role=(
        "You are an expert education consultant specializing in university offer letter "
        "analysis and strategic enrollment guidance."
    ),
    focus_areas=(
        "Terms and conditions: academic requirements, financial obligations, enrollment conditions, "
        "compliance requirements, hidden clauses, critical deadlines and penalties",
        "Risk assessment with a mitigation strategy for every risk found",
        "Complete cost analysis: tuition, other fees, living expenses, payment schedule, funding gaps",
        "Cost-saving strategies with concrete implementation steps",
        "Prioritized recommendations and next steps for accepting the offer",
    ),
)

ENROLLMENT_CONFIRMATION = DocumentType(
    key="enrollment_confirmation",
    label="Confirmation of Enrollment",
    analyst_role=(
        "You are an expert international education counselor and visa specialist reviewing "
        "a confirmation of enrollment."
    ),
    focus_areas=(
        "All financial amounts: pre-paid tuition, non-tuition fees, total course fees, scholarships",
        "Student health cover: provider, cover type, start and end dates",
        "Course codes, provider registration and course start/end dates",
        "English language test type, score and date",
        "Visa-related obligations and compliance requirements",
    ),
    max_output_tokens=2000,
)

VISA_LETTER = DocumentType(
    key="visa_letter",
    label="Student visa letter",
    analyst_role=(
        "You are an expert visa consultant analyzing a student visa decision letter."
    ),
    focus_areas=(
        "Whether the visa was granted or refused, and the stated reasons",
        "Visa conditions: validity dates, work rights, study conditions, travel restrictions",
        "Compliance obligations and the consequences of breaching them",
        "For refusals, what to address before reapplying",
    ),
    max_output_tokens=2000,
)

DOCUMENT_TYPES: Dict[str, DocumentType] = {
    d.key: d for d in (OFFER_LETTER, ENROLLMENT_CONFIRMATION, VISA_LETTER)
}


def get_document_type(key: str) -> DocumentType:
    """Return the profile for ``key``; unknown keys fall back to offer letters."""
    return DOCUMENT_TYPES.get((key or "").strip().lower(), OFFER_LETTER)
