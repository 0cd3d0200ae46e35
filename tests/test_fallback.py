from __future__ import annotations

from conftest import OFFER_TEXT, candidate

from docinsightbot.analysis.fallback import invocation_failure_result, parse_failure_result
from docinsightbot.augmentation.scoring import rank
from docinsightbot.extraction import extract
from docinsightbot.extraction.schemas import ExtractedEntities
from docinsightbot.fields import SENTINEL


def _mentions_contact(recommendations) -> bool:
    return any("contact" in r.recommendation.lower() or "speak to" in r.recommendation.lower() for r in recommendations)


def test_parse_failure_keeps_real_names_and_opportunities() -> None:
    entities = extract(OFFER_TEXT)
    opportunities = rank([candidate("Springfield Merit Award")], entities.student_profile, limit=8)

    result = parse_failure_result(entities, opportunities, "offer_letter")

    assert result.institution.name == "University of Springfield"
    assert result.institution.program == "Master of Data Science"
    assert result.institution.location == "Springfield, Illinois"
    assert result.profile_analysis.gpa == "3.6"
    assert "University of Springfield" in result.summary
    assert [o.name for o in result.opportunities] == ["Springfield Merit Award"]
    assert _mentions_contact(result.recommendations)
    assert any("Springfield Merit Award" in s for r in result.recommendations for s in r.implementation_steps)


def test_parse_failure_with_nothing_known_still_recommends_contact() -> None:
    result = parse_failure_result(ExtractedEntities(), [])

    assert result.institution.name == SENTINEL
    assert result.opportunities == []
    assert result.recommendations
    assert _mentions_contact(result.recommendations)
    assert result.next_steps


def test_invocation_failure_is_generic() -> None:
    result = invocation_failure_result("enrollment_confirmation")

    assert result.document_type == "enrollment_confirmation"
    assert result.institution.name == SENTINEL
    assert result.opportunities == []
    assert result.cost_saving_strategies == []
    assert _mentions_contact(result.recommendations)


def test_both_tiers_fill_document_details_with_sentinels() -> None:
    for result in (
        parse_failure_result(extract(OFFER_TEXT), [], "enrollment_confirmation"),
        invocation_failure_result("visa_letter"),
    ):
        details = result.to_wire()["documentDetails"]
        assert details["healthCover"] == SENTINEL
        assert details["englishTestScore"] == SENTINEL
        assert details["visaObligations"] == SENTINEL
        assert details["keyFindings"] == []
        assert details["missingInformation"] == []
        assert details["complianceIssues"] == []
