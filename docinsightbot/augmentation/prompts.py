"""Instructions for the funding-opportunity lookup."""

from __future__ import annotations

import json

from ..backend import PromptPayload
from ..extraction.schemas import ExtractedEntities

LOOKUP_SYSTEM_INSTRUCTIONS = """
You are a scholarship research specialist.

Constraints:
- Return only real scholarships, bursaries and fee waivers that actually exist.
- Prefer scholarships offered by the named institution, then government and
  external scholarships commonly used by its students.
- Include the official page URL for each opportunity. If you cannot name an
  official page, leave the opportunity out.
- Describe eligibility as requirements; do NOT score or rank the student.
- If a detail is unknown, use "Not specified in document".

Output MUST be a single JSON object matching the requested shape.
""".strip()

LOOKUP_OUTPUT_SHAPE = {
    "opportunities": [
        {
            "name": "Official scholarship name",
            "amount": "Amount with currency and period",
            "criteria": ["Eligibility requirement as written by the provider"],
            "applicationDeadline": "Deadline with year, or Not specified in document",
            "applicationProcess": "How to apply",
            "sourceUrl": "Official URL",
            "scholarshipType": "Merit | Need-based | International | Research | Program-specific",
            "requirements": {
                "academicLevels": ["undergraduate | postgraduate | doctoral | vocational"],
                "fieldsOfStudy": ["Eligible fields, empty if any field"],
                "nationalities": ["Eligible nationalities or regions, empty if any"],
                "minGpa": "number or null",
                "otherCriteria": ["Any other requirement"],
            },
        }
    ]
}

LOOKUP_MAX_OUTPUT_TOKENS = 2000
LOOKUP_TEMPERATURE = 0.2


def compose_lookup(entities: ExtractedEntities, max_candidates: int) -> PromptPayload:
    profile = entities.student_profile
    lines = [
        f"Institution: {entities.institution_name or 'Unknown institution'}",
        f"Program: {entities.program or 'Unknown program'}",
        f"Location: {entities.location or 'Unknown location'}",
        f"Academic level: {profile.academic_level or 'Unknown'}",
        f"Field of study: {profile.field_of_study or 'Unknown'}",
        f"Student nationality: {profile.nationality or 'Unknown'}",
    ]
    user = (
        "Research funding opportunities for this student.\n\n"
        + "\n".join(lines)
        + f"\n\nReturn at most {max_candidates} opportunities as JSON shaped like:\n"
        + json.dumps(LOOKUP_OUTPUT_SHAPE, indent=2)
    )
    return PromptPayload(
        name="opportunity_lookup",
        system=LOOKUP_SYSTEM_INSTRUCTIONS,
        user=user,
        max_output_tokens=LOOKUP_MAX_OUTPUT_TOKENS,
        temperature=LOOKUP_TEMPERATURE,
    )
