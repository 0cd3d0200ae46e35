"""Regex-based pre-extraction of institution, program and profile facts.

Each field has an ordered list of rules. Rules are tried top to bottom and
the first match wins; when nothing matches the field stays ``None``. The
rules are pure, so ``extract(text)`` always returns the same entities for
the same text.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from .schemas import ExtractedEntities, StudentProfile

logger = logging.getLogger(__name__)


# Runs of capitalized words joined by short connectors. Repetition is capped
# so a long line of capitalized words costs linear time. Never crosses a newline.
_WORD = r"[A-Z][A-Za-z&'\-]*"
_NAME = rf"{_WORD}(?:[ \t]+(?:(?:of|the|for|&)[ \t]+)?{_WORD}){{0,7}}"
_PLACE = rf"{_NAME}(?:,[ \t]*{_NAME}){{0,3}}"
_SUBJECT_CORE = rf"{_WORD}(?:[ \t]+(?:(?:and|&)[ \t]+)?{_WORD}){{0,5}}"
_NUMBER = r"\d+(?:\.\d+)?"

# "Master of Science in Data Analytics": "in" continues the subject only after
# a broad discipline. "Master of Data Science in Melbourne" stops before "in".
_BROAD_DISCIPLINES = (
    "Applied Science", "Business Administration", "Information Technology", "Fine Arts",
    "Sciences", "Science", "Arts", "Engineering", "Business", "Laws", "Law",
    "Education", "Commerce", "Technology",
)
_SUBJECT = (
    rf"(?P<subject>(?:{'|'.join(_BROAD_DISCIPLINES)})[ \t]+in[ \t]+(?P<focus>{_SUBJECT_CORE})"
    rf"|{_SUBJECT_CORE})"
)

# Only the head of very large inputs is scanned.
MAX_SCAN_CHARS = 100_000

_TRAILING_NOISE = {"program", "programme", "degree", "course"}


@dataclass(frozen=True)
class Rule:
    """One extraction pattern. ``tag`` carries rule-specific meaning (e.g. level)."""

    name: str
    pattern: re.Pattern
    group: str = "value"
    tag: Optional[str] = None


def _rule(name: str, pattern: str, tag: Optional[str] = None) -> Rule:
    return Rule(name=name, pattern=re.compile(pattern), tag=tag)


INSTITUTION_RULES: Tuple[Rule, ...] = (
    _rule("university_of", rf"(?P<value>\bUniversity of {_NAME})"),
    _rule("x_university", rf"(?P<value>\b{_NAME}[ \t]+University)\b"),
    _rule("institute_of", rf"(?P<value>\bInstitute of {_NAME})"),
    _rule("x_institute", rf"(?P<value>\b{_NAME}[ \t]+Institute)\b"),
    _rule("x_college", rf"(?P<value>\b{_NAME}[ \t]+College)\b"),
)

# Program rules capture the whole degree name as ``value`` and the subject
# as ``subject`` (``focus`` when a broad discipline is narrowed with "in");
# ``tag`` is the academic level implied by the degree.
PROGRAM_RULES: Tuple[Rule, ...] = (
    _rule("master_of", rf"(?P<value>\bMaster(?:'s|s)? of {_SUBJECT})", "postgraduate"),
    _rule("bachelor_of", rf"(?P<value>\bBachelor(?:'s|s)? of {_SUBJECT})", "undergraduate"),
    _rule("phd_in", rf"(?P<value>\bPh\.?D\.? in {_SUBJECT})", "doctoral"),
    _rule("doctor_of_philosophy", rf"(?P<value>\bDoctor of Philosophy in {_SUBJECT})", "doctoral"),
    _rule("diploma_of", rf"(?P<value>\bDiploma of {_SUBJECT})", "vocational"),
    _rule("x_program", rf"(?P<value>\b(?P<subject>{_SUBJECT_CORE})[ \t]+Program(?:me)?)\b"),
)

LOCATION_RULES: Tuple[Rule, ...] = (
    _rule("located_in", rf"(?i:\blocated in)[ \t]+(?P<value>{_PLACE})"),
    _rule("campus", r"(?i:\bcampus)[ \t]*:[ \t]*(?P<value>[^\n.;]+)"),
    _rule("address", r"(?i:\baddress)[ \t]*:[ \t]*(?P<value>[^\n;]+)"),
)

GPA_RULES: Tuple[Rule, ...] = (
    _rule("gpa", rf"(?i:\bGPA\b)[ \t]*(?:of|:)?[ \t]*(?P<value>{_NUMBER})"),
    _rule("grade_point_average", rf"(?i:\bgrade point average\b)[ \t]*(?:of|:)?[ \t]*(?P<value>{_NUMBER})"),
)

NATIONALITY_RULES: Tuple[Rule, ...] = (
    _rule("nationality", rf"(?i:\bnationality)[ \t]*:[ \t]*(?P<value>{_NAME})"),
    _rule("country_of_citizenship", rf"(?i:\bcountry of citizenship)[ \t]*:[ \t]*(?P<value>{_NAME})"),
    _rule("citizenship", rf"(?i:\bcitizenship)[ \t]*:[ \t]*(?P<value>{_NAME})"),
)

STANDING_RULES: Tuple[Rule, ...] = (
    _rule("unconditional_offer", r"(?P<value>(?i:\bunconditional offer\b))", "Unconditional offer"),
    _rule("conditional_offer", r"(?P<value>(?i:\bconditional offer\b))", "Conditional offer"),
)


def first_match(rules: Sequence[Rule], text: str) -> Optional[Tuple[Rule, re.Match]]:
    """Return the first rule (in order) that matches ``text``, or None."""
    for rule in rules:
        m = rule.pattern.search(text)
        if m:
            return rule, m
    return None


def _clean(value: str) -> str:
    words = " ".join(value.split()).strip(" ,;:-").split(" ")
    while len(words) > 1 and words[-1].lower() in _TRAILING_NOISE:
        words.pop()
    return " ".join(words)


def _first_value(rules: Sequence[Rule], text: str, field: str) -> Optional[str]:
    hit = first_match(rules, text)
    if hit is None:
        logger.debug("No %s rule matched", field)
        return None
    rule, m = hit
    return _clean(m.group(rule.group)) or None


def extract(text: str) -> ExtractedEntities:
    """Pre-extract entities from raw document text. Never raises."""

    text = text[:MAX_SCAN_CHARS] if isinstance(text, str) else ""

    program: Optional[str] = None
    level: Optional[str] = None
    subject: Optional[str] = None
    hit = first_match(PROGRAM_RULES, text)
    if hit is not None:
        rule, m = hit
        program = _clean(m.group("value")) or None
        subject = _clean(m.groupdict().get("focus") or m.group("subject")) or None
        level = rule.tag

    gpa: Optional[float] = None
    gpa_text = _first_value(GPA_RULES, text, "gpa")
    if gpa_text is not None:
        gpa = float(gpa_text)

    standing: Optional[str] = None
    standing_hit = first_match(STANDING_RULES, text)
    if standing_hit is not None:
        standing = standing_hit[0].tag

    return ExtractedEntities(
        institution_name=_first_value(INSTITUTION_RULES, text, "institution"),
        program=program,
        location=_first_value(LOCATION_RULES, text, "location"),
        student_profile=StudentProfile(
            gpa=gpa,
            nationality=_first_value(NATIONALITY_RULES, text, "nationality"),
            academic_standing=standing,
            academic_level=level,
            field_of_study=subject,
        ),
    )
