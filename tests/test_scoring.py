from __future__ import annotations

from conftest import candidate

from docinsightbot.augmentation.schemas import OpportunityRequirements
from docinsightbot.augmentation.scoring import canonical_level, match_type, rank, score_profile
from docinsightbot.extraction.schemas import StudentProfile

STRICT = OpportunityRequirements(
    academic_levels=["postgraduate"],
    fields_of_study=["Data Science"],
    nationalities=["India"],
    min_gpa=3.0,
)


def test_open_requirements_score_full_marks() -> None:
    match = score_profile(OpportunityRequirements(), StudentProfile())

    assert match.overall_match == 100
    assert match.matches_level and match.matches_field and match.matches_nationality and match.matches_other
    assert match.level_requirement == "Open to all levels"
    assert match_type(match.overall_match) == "High"


def test_score_never_drops_as_more_criteria_are_met() -> None:
    profiles = [
        StudentProfile(),
        StudentProfile(academic_level="postgraduate"),
        StudentProfile(academic_level="postgraduate", field_of_study="Data Science"),
        StudentProfile(academic_level="postgraduate", field_of_study="Data Science", nationality="India"),
        StudentProfile(academic_level="postgraduate", field_of_study="Data Science", nationality="India", gpa=3.5),
    ]

    scores = [score_profile(STRICT, p).overall_match for p in profiles]

    assert scores == sorted(scores)
    assert scores == [0, 40, 70, 90, 100]


def test_weights_follow_level_field_nationality_other_precedence() -> None:
    level_only = score_profile(STRICT, StudentProfile(academic_level="Masters"))
    field_only = score_profile(STRICT, StudentProfile(field_of_study="data science"))
    nationality_only = score_profile(STRICT, StudentProfile(nationality="India"))
    gpa_only = score_profile(STRICT, StudentProfile(gpa=3.9))

    assert level_only.overall_match > field_only.overall_match > nationality_only.overall_match > gpa_only.overall_match
    assert gpa_only.matches_gpa and not gpa_only.matches_level


def test_international_requirement_accepts_any_known_nationality() -> None:
    req = OpportunityRequirements(nationalities=["International students"])

    assert score_profile(req, StudentProfile(nationality="Brazilian")).matches_nationality
    assert not score_profile(req, StudentProfile()).matches_nationality


def test_free_form_criteria_earn_partial_other_points() -> None:
    req = OpportunityRequirements(other_criteria=["Applicants from India", "Demonstrated leadership"])

    match = score_profile(req, StudentProfile(nationality="India"))

    assert match.overall_match == 95
    assert not match.matches_other


def test_match_type_thresholds() -> None:
    assert match_type(70) == "High"
    assert match_type(69) == "Medium"
    assert match_type(40) == "Medium"
    assert match_type(39) == "Low"


def test_canonical_level_synonyms() -> None:
    assert canonical_level("Master's degree") == "postgraduate"
    assert canonical_level("Bachelors") == "undergraduate"
    assert canonical_level("PhD") == "doctoral"
    assert canonical_level("unknown") is None


def test_rank_sorts_best_first_and_caps() -> None:
    profile = StudentProfile(academic_level="postgraduate", field_of_study="Data Science")
    candidates = [
        candidate("Undergraduate Award", academicLevels=["undergraduate"]),
        candidate("Open Award"),
        candidate("Engineering Award", fieldsOfStudy=["Mechanical Engineering"]),
    ]

    records = rank(candidates, profile, limit=2)

    assert [r.name for r in records] == ["Open Award", "Engineering Award"]
    assert records[0].match_type == "High"
    assert records[0].profile_match.overall_match >= records[1].profile_match.overall_match


def test_restricted_entries_starting_with_open_or_all_are_not_open() -> None:
    brazilian = StudentProfile(academic_level="postgraduate", nationality="Brazilian")

    kenya_only = score_profile(OpportunityRequirements(nationalities=["Open to citizens of Kenya only"]), brazilian)
    assert not kenya_only.matches_nationality
    assert kenya_only.overall_match == 80
    assert match_type(kenya_only.overall_match) == "High"

    commonwealth = score_profile(OpportunityRequirements(nationalities=["All Commonwealth countries"]), brazilian)
    assert not commonwealth.matches_nationality

    undergraduate_only = score_profile(
        OpportunityRequirements(academic_levels=["Open to undergraduate students only"]), brazilian
    )
    assert not undergraduate_only.matches_level


def test_entries_meaning_no_restriction_are_open() -> None:
    profile = StudentProfile(nationality="Brazilian")

    for entry in ("Open to all nationalities", "Any", "all countries.", "Open", "any field of study"):
        req = OpportunityRequirements(nationalities=[entry], fields_of_study=[entry])
        match = score_profile(req, profile)
        assert match.matches_nationality, entry
        assert match.matches_field, entry
