"""Pydantic schemas for pre-extracted document entities."""

from __future__ import annotations

from typing import Optional

from pydantic import ConfigDict, Field

from ..fields import WireModel


class StudentProfile(WireModel):
    """Coarse student attributes used for opportunity matching."""

    model_config = ConfigDict(frozen=True)

    gpa: Optional[float] = None
    nationality: Optional[str] = None
    academic_standing: Optional[str] = None
    academic_level: Optional[str] = Field(
        None, description="undergraduate | postgraduate | doctoral | vocational"
    )
    field_of_study: Optional[str] = None


class ExtractedEntities(WireModel):
    """Heuristic facts found in the raw text. Every field may be absent."""

    model_config = ConfigDict(frozen=True)

    institution_name: Optional[str] = None
    program: Optional[str] = None
    location: Optional[str] = None
    student_profile: StudentProfile = Field(default_factory=StudentProfile)
