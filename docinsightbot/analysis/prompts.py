"""Prompt composition for the document analysis call.

``compose`` is pure: the same document, entities and opportunities always
produce the same payload.
"""

from __future__ import annotations

import json
from typing import List, Sequence

from ..augmentation.schemas import OpportunityRecord
from ..backend import PromptPayload
from ..extraction.schemas import ExtractedEntities
from ..fields import SENTINEL
from .doc_types import DocumentType, get_document_type

HEAD_SHARE = 0.7
TRUNCATION_MARKER = "\n\n[... document truncated: middle section omitted ...]\n\n"

ANALYSIS_RULES = f"""
RULES:
1. **Document first**: Every fact must come from the document text. Do NOT invent
   institutions, amounts, dates or conditions.
2. **Missing data**: If a detail is not in the document, use exactly "{SENTINEL}"
   for text fields and an empty list for list fields. Never omit a key.
3. **Be specific**: Quote amounts with currency and dates with the year.
4. **Opportunities are given**: The funding opportunities below were researched
   separately. Use them in your cost analysis and recommendations, but do NOT
   add, rename or re-score opportunities.
5. **Enums**: difficulty, priority and importance are High, Medium or Low; category
   is Financial, Academic, Application or Compliance; severity is Critical,
   Moderate or Minor.
6. **Document details**: Fill documentDetails with the facts specific to this
   document type. Details that do not apply use "{SENTINEL}".

OUTPUT:
Return a single JSON object with exactly the keys of the schema below.
""".strip()

ANALYSIS_OUTPUT_SHAPE = {
    "summary": "Two or three sentence overview of the document and its implications",
    "institution": {
        "name": "Institution name",
        "location": "City, country",
        "program": "Program or course name",
        "tuition": "Tuition with currency and period",
        "duration": "Program duration",
        "startDate": "Start date",
        "campus": "Campus",
        "studyMode": "Full-time | Part-time | Online",
    },
    "profileAnalysis": {
        "academicStanding": "Offer or enrollment status",
        "gpa": "GPA or academic result",
        "financialStatus": "What the document says about funding",
        "relevantSkills": ["Skill"],
        "strengths": ["Strength"],
        "weaknesses": ["Weakness"],
        "improvementAreas": ["Area to improve"],
    },
    "costSavingStrategies": [
        {
            "strategy": "Strategy name",
            "description": "What it involves",
            "potentialSavings": "Estimated savings",
            "implementationSteps": ["Step"],
            "timeline": "When to act",
            "difficulty": "Low | Medium | High",
        }
    ],
    "financialBreakdown": {
        "totalCost": "Total cost",
        "tuitionFees": "Tuition fees",
        "otherFees": "Other fees",
        "livingExpenses": "Living expenses",
        "scholarshipSummary": "Scholarships already awarded",
        "netCost": "Cost after scholarships",
        "paymentSchedule": ["Payment due with date"],
        "fundingGaps": ["Unfunded amount or risk"],
    },
    "recommendations": [
        {
            "category": "Financial | Academic | Application | Compliance",
            "priority": "High | Medium | Low",
            "recommendation": "What to do",
            "rationale": "Why, citing the document",
            "implementationSteps": ["Step"],
            "timeline": "When",
            "expectedOutcome": "Result",
        }
    ],
    "nextSteps": [
        {
            "step": "Action",
            "description": "Details",
            "deadline": "Deadline from the document",
            "priority": "High | Medium | Low",
        }
    ],
    "documentAnalysis": {
        "termsAndConditions": {
            "academicRequirements": ["Requirement"],
            "financialObligations": ["Obligation"],
            "enrollmentConditions": ["Condition"],
            "complianceRequirements": ["Requirement"],
            "hiddenClauses": ["Easily missed clause"],
            "criticalDeadlines": ["Deadline"],
            "penalties": ["Penalty"],
        },
        "riskAssessment": {
            "highRiskFactors": ["Risk"],
            "financialRisks": ["Risk"],
            "academicRisks": ["Risk"],
            "complianceRisks": ["Risk"],
            "mitigationStrategies": ["Mitigation"],
        },
    },
    "documentDetails": {
        "courseCode": "Course code or provider registration code",
        "endDate": "Program end date",
        "visaType": "Visa subclass or category",
        "healthCover": "Health cover provider, cover type and dates",
        "englishTestScore": "English test type, score and date",
        "institutionContact": "Phone, email or office to contact",
        "visaObligations": "Visa conditions and obligations",
        "keyFindings": [
            {"title": "Finding", "description": "Details with amounts and dates", "importance": "High | Medium | Low"}
        ],
        "missingInformation": [
            {"field": "Missing detail", "description": "What is missing", "impact": "Why it matters"}
        ],
        "complianceIssues": [
            {"issue": "Issue", "severity": "Critical | Moderate | Minor", "resolution": "How to resolve it"}
        ],
    },
}


def truncate(text: str, max_chars: int) -> str:
    """Keep the head and tail of an oversized document, marking the cut."""

    if len(text) <= max_chars:
        return text
    head = int(max_chars * HEAD_SHARE)
    tail = max_chars - head
    return text[:head] + TRUNCATION_MARKER + text[-tail:]


def _system_instructions(doc_type: DocumentType) -> str:
    focus = "\n".join(f"- {area}" for area in doc_type.focus_areas)
    return f"{doc_type.analyst_role}\n\nFOCUS AREAS:\n{focus}\n\n{ANALYSIS_RULES}"


def _entity_lines(entities: ExtractedEntities) -> List[str]:
    profile = entities.student_profile
    pairs = [
        ("Institution", entities.institution_name),
        ("Program", entities.program),
        ("Location", entities.location),
        ("Academic level", profile.academic_level),
        ("Field of study", profile.field_of_study),
        ("Academic standing", profile.academic_standing),
        ("GPA", profile.gpa),
        ("Nationality", profile.nationality),
    ]
    return [f"- {label}: {value}" for label, value in pairs if value is not None]


def compose(
    raw_text: str,
    entities: ExtractedEntities,
    opportunities: Sequence[OpportunityRecord],
    document_type: str = "offer_letter",
) -> PromptPayload:
    doc_type = get_document_type(document_type)
    entity_lines = _entity_lines(entities) or ["- (none found)"]
    opportunities_json = json.dumps([o.to_wire() for o in opportunities], indent=2, sort_keys=True)

    user = (
        f"DOCUMENT TYPE: {doc_type.label}\n\n"
        "DOCUMENT TEXT:\n"
        f"{truncate(raw_text, doc_type.max_input_chars)}\n\n"
        "PRE-EXTRACTED DETAILS (verify against the document):\n"
        + "\n".join(entity_lines)
        + "\n\nRESEARCHED FUNDING OPPORTUNITIES (authoritative):\n"
        + opportunities_json
        + "\n\nOUTPUT SCHEMA:\n"
        + json.dumps(ANALYSIS_OUTPUT_SHAPE, indent=2)
    )
    return PromptPayload(
        name=f"{doc_type.key}_analysis",
        system=_system_instructions(doc_type),
        user=user,
        max_output_tokens=doc_type.max_output_tokens,
        temperature=doc_type.temperature,
    )
