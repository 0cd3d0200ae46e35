"""Deterministic opportunity/profile match scoring.

Weights follow a fixed precedence: academic level first, then field of
study, then nationality/geography, then everything else (minimum GPA and
free-form criteria). A requirement the opportunity does not impose counts
as satisfied; a requirement the profile cannot be shown to meet earns
nothing. Because every check can only flip from unmet to met as the profile
gains information, the score never drops when one more criterion is
satisfied.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional

from ..extraction.schemas import StudentProfile
from .schemas import OpportunityCandidate, OpportunityRecord, OpportunityRequirements, ProfileMatch

LEVEL_WEIGHT = 40
FIELD_WEIGHT = 30
NATIONALITY_WEIGHT = 20
OTHER_WEIGHT = 10

HIGH_MATCH = 70
MEDIUM_MATCH = 40

_LEVEL_SYNONYMS = {
    "undergraduate": ("undergraduate", "bachelor", "bachelors"),
    "postgraduate": ("postgraduate", "graduate", "master", "masters"),
    "doctoral": ("doctoral", "doctorate", "phd", "ph.d"),
    "vocational": ("vocational", "diploma", "certificate"),
}

# An entry meaning "no restriction" as a whole, e.g. "Any", "Open to all nationalities".
_OPEN_TO_ALL = re.compile(
    r"(?:open(?:\s+to)?\s+)?(?:any|all)"
    r"(?:\s+(?:levels?|fields?(?:\s+of\s+study)?|subjects?|disciplines?|majors?|"
    r"nationalit(?:y|ies)|countr(?:y|ies)|students?|applicants?))?"
    r"|open|unrestricted|no restrictions?",
    re.IGNORECASE,
)


def _norm(s: Optional[str]) -> str:
    return (s or "").strip().lower()


def canonical_level(value: Optional[str]) -> Optional[str]:
    v = _norm(value)
    if not v:
        return None
    for level, words in _LEVEL_SYNONYMS.items():
        if any(w in v for w in words):
            return level
    return None


def _is_open(values: List[str]) -> bool:
    return not values or any(_OPEN_TO_ALL.fullmatch(" ".join(_norm(v).rstrip(".").split())) for v in values)


def _overlaps(a: str, b: str) -> bool:
    a, b = _norm(a), _norm(b)
    return bool(a and b) and (a in b or b in a)


def _level_ok(req: OpportunityRequirements, profile: StudentProfile) -> bool:
    if _is_open(req.academic_levels):
        return True
    mine = canonical_level(profile.academic_level)
    return mine is not None and any(canonical_level(lv) == mine for lv in req.academic_levels)


def _field_ok(req: OpportunityRequirements, profile: StudentProfile) -> bool:
    if _is_open(req.fields_of_study):
        return True
    return any(_overlaps(f, profile.field_of_study or "") for f in req.fields_of_study)


def _nationality_ok(req: OpportunityRequirements, profile: StudentProfile) -> bool:
    if _is_open(req.nationalities):
        return True
    if not profile.nationality:
        return False
    for n in req.nationalities:
        # "International students" style requirements accept any known nationality.
        if "international" in _norm(n) or _overlaps(n, profile.nationality):
            return True
    return False


def _mentions_profile(criterion: str, profile: StudentProfile) -> bool:
    known = [
        profile.nationality,
        profile.field_of_study,
        profile.academic_level,
        profile.academic_standing,
    ]
    return any(v and _norm(v) in _norm(criterion) for v in known)


def _other_points(req: OpportunityRequirements, profile: StudentProfile) -> int:
    checks: List[bool] = []
    if req.min_gpa is not None:
        checks.append(profile.gpa is not None and profile.gpa >= req.min_gpa)
    checks.extend(_mentions_profile(c, profile) for c in req.other_criteria)
    if not checks:
        return OTHER_WEIGHT
    return OTHER_WEIGHT * sum(checks) // len(checks)


def _describe(values: Iterable[str], open_text: str) -> str:
    values = [v for v in values if v]
    return ", ".join(values) if values else open_text


def score_profile(req: OpportunityRequirements, profile: StudentProfile) -> ProfileMatch:
    """Score how well ``profile`` meets ``req`` (0-100)."""

    level = _level_ok(req, profile)
    field = _field_ok(req, profile)
    nationality = _nationality_ok(req, profile)
    other = _other_points(req, profile)

    total = (
        LEVEL_WEIGHT * level
        + FIELD_WEIGHT * field
        + NATIONALITY_WEIGHT * nationality
        + other
    )

    return ProfileMatch(
        level_requirement=_describe(req.academic_levels, "Open to all levels"),
        matches_level=level,
        field_requirement=_describe(req.fields_of_study, "Open to all fields"),
        matches_field=field,
        nationality_requirement=_describe(req.nationalities, "Open to all nationalities"),
        matches_nationality=nationality,
        gpa_requirement=f"Minimum GPA {req.min_gpa:g}" if req.min_gpa is not None else "No minimum GPA",
        matches_gpa=req.min_gpa is None or (profile.gpa is not None and profile.gpa >= req.min_gpa),
        other_requirements=list(req.other_criteria),
        matches_other=other == OTHER_WEIGHT,
        overall_match=max(0, min(100, total)),
    )


def match_type(score: int) -> str:
    if score >= HIGH_MATCH:
        return "High"
    if score >= MEDIUM_MATCH:
        return "Medium"
    return "Low"


def to_record(candidate: OpportunityCandidate, profile: StudentProfile) -> OpportunityRecord:
    match = score_profile(candidate.requirements, profile)
    criteria = list(candidate.criteria) or list(candidate.requirements.other_criteria)
    return OpportunityRecord(
        name=candidate.name,
        amount=candidate.amount,
        criteria=criteria,
        application_deadline=candidate.application_deadline,
        application_process=candidate.application_process,
        source_url=candidate.source_url,
        scholarship_type=candidate.scholarship_type,
        match_type=match_type(match.overall_match),
        profile_match=match,
    )


def rank(candidates: Iterable[OpportunityCandidate], profile: StudentProfile, limit: int) -> List[OpportunityRecord]:
    """Score every candidate and return the best ``limit`` records, best first."""
    records = [to_record(c, profile) for c in candidates]
    records.sort(key=lambda r: r.profile_match.overall_match, reverse=True)
    return records[:limit]
