"""Pydantic schemas for funding opportunities."""

from __future__ import annotations

import re
from typing import Annotated, Any, List, Optional

from pydantic import BeforeValidator, Field

from ..fields import SENTINEL, Text, TextList, WireModel, choice, coerce_object, object_list


ScholarshipType = Annotated[
    str,
    BeforeValidator(
        choice(["Merit", "Need-based", "International", "Research", "Program-specific"], "Merit")
    ),
]


def _optional_number(value: Any) -> Optional[float]:
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return float(value)
    if isinstance(value, str):
        m = re.search(r"\d+(?:\.\d+)?", value)
        return float(m.group(0)) if m else None
    return None


class OpportunityRequirements(WireModel):
    """Eligibility requirements of one candidate, before scoring.

    Empty lists / ``None`` mean the opportunity does not impose that
    requirement.
    """

    academic_levels: TextList = Field(
        default_factory=list, description="undergraduate | postgraduate | doctoral | vocational"
    )
    fields_of_study: TextList = Field(default_factory=list)
    nationalities: TextList = Field(default_factory=list, description="Eligible nationalities or regions")
    min_gpa: Annotated[Optional[float], BeforeValidator(_optional_number)] = None
    other_criteria: TextList = Field(default_factory=list)


class OpportunityCandidate(WireModel):
    """An opportunity as reported by the lookup, not yet matched to a profile."""

    name: Text = SENTINEL
    amount: Text = SENTINEL
    criteria: TextList = Field(default_factory=list)
    application_deadline: Text = SENTINEL
    application_process: Text = SENTINEL
    source_url: Text = SENTINEL
    scholarship_type: ScholarshipType = "Merit"
    requirements: Annotated[OpportunityRequirements, BeforeValidator(coerce_object)] = Field(
        default_factory=OpportunityRequirements
    )


class LookupReply(WireModel):
    opportunities: Annotated[List[OpportunityCandidate], BeforeValidator(object_list())] = Field(default_factory=list)


class ProfileMatch(WireModel):
    """How one opportunity lines up with the student profile."""

    level_requirement: Text = "Open to all levels"
    matches_level: bool = False
    field_requirement: Text = "Open to all fields"
    matches_field: bool = False
    nationality_requirement: Text = "Open to all nationalities"
    matches_nationality: bool = False
    gpa_requirement: Text = "No minimum GPA"
    matches_gpa: bool = False
    other_requirements: TextList = Field(default_factory=list)
    matches_other: bool = False
    overall_match: int = Field(0, ge=0, le=100)


class OpportunityRecord(WireModel):
    """Authoritative funding opportunity handed to the analysis stages."""

    name: Text = SENTINEL
    amount: Text = SENTINEL
    criteria: TextList = Field(default_factory=list)
    application_deadline: Text = SENTINEL
    application_process: Text = SENTINEL
    source_url: Text = SENTINEL
    scholarship_type: ScholarshipType = "Merit"
    match_type: Annotated[str, BeforeValidator(choice(["High", "Medium", "Low"], "Low"))] = "Low"
    profile_match: ProfileMatch = Field(default_factory=ProfileMatch)
