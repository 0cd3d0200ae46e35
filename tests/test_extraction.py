from __future__ import annotations

import time

from conftest import OFFER_TEXT

from docinsightbot.extraction import ExtractedEntities, extract
from docinsightbot.extraction.extractor import MAX_SCAN_CHARS


def test_extract_offer_letter_finds_institution_program_and_profile() -> None:
    entities = extract(OFFER_TEXT)

    assert entities.institution_name == "University of Springfield"
    assert entities.program == "Master of Data Science"
    assert entities.location == "Springfield, Illinois"

    profile = entities.student_profile
    assert profile.academic_level == "postgraduate"
    assert profile.field_of_study == "Data Science"
    assert profile.gpa == 3.6
    assert profile.nationality == "Indian"
    assert profile.academic_standing == "Conditional offer"


def test_extract_is_idempotent() -> None:
    assert extract(OFFER_TEXT) == extract(OFFER_TEXT)


def test_extract_without_matches_leaves_every_field_unset() -> None:
    entities = extract("thanks for your email, we will be in touch.")

    assert entities == ExtractedEntities()
    assert entities.student_profile.gpa is None


def test_extract_tolerates_non_string_input() -> None:
    assert extract(None) == ExtractedEntities()  # type: ignore[arg-type]


def test_program_rules_map_degree_to_academic_level() -> None:
    cases = {
        "Admission to the Bachelor of Commerce starts in July.": ("Bachelor of Commerce", "undergraduate", "Commerce"),
        "You are admitted to the PhD in Physics.": ("PhD in Physics", "doctoral", "Physics"),
        "Enrolment in the Diploma of Nursing is confirmed.": ("Diploma of Nursing", "vocational", "Nursing"),
    }
    for text, (program, level, subject) in cases.items():
        entities = extract(text)
        assert entities.program == program
        assert entities.student_profile.academic_level == level
        assert entities.student_profile.field_of_study == subject


def test_institution_suffix_rule_and_unconditional_offer() -> None:
    entities = extract("Welcome to Monash University. This is an unconditional offer.")

    assert entities.institution_name == "Monash University"
    assert entities.student_profile.academic_standing == "Unconditional offer"


def test_university_of_rule_wins_over_suffix_rules() -> None:
    entities = extract("Harbour College, in partnership with the University of Leeds.")

    assert entities.institution_name == "University of Leeds"


def test_citizenship_and_grade_point_average_variants() -> None:
    entities = extract("Country of citizenship: Kenya\nCumulative grade point average of 3.25 achieved.")

    assert entities.student_profile.nationality == "Kenya"
    assert entities.student_profile.gpa == 3.25


def test_long_run_of_capitalized_words_is_scanned_quickly() -> None:
    text = " ".join(["OFFER"] * 8000)

    started = time.monotonic()
    entities = extract(text)
    elapsed = time.monotonic() - started

    assert entities == ExtractedEntities()
    assert elapsed < 2.0


def test_only_the_head_of_huge_input_is_scanned() -> None:
    text = "x " * MAX_SCAN_CHARS + "Welcome to Monash University."

    assert extract(text).institution_name is None


def test_in_and_and_do_not_extend_names() -> None:
    entities = extract(
        "You studied at the University of Melbourne in Australia.\n"
        "Your offer is for the Master of Data Science in Melbourne."
    )

    assert entities.institution_name == "University of Melbourne"
    assert entities.program == "Master of Data Science"
    assert entities.student_profile.field_of_study == "Data Science"

    assert extract("University of Springfield and Master of Data Science").institution_name == (
        "University of Springfield"
    )


def test_broad_discipline_narrowed_with_in_keeps_the_focus_as_field() -> None:
    entities = extract("Offer of admission: Master of Science in Data Analytics, full time.")

    assert entities.program == "Master of Science in Data Analytics"
    assert entities.student_profile.field_of_study == "Data Analytics"
    assert entities.student_profile.academic_level == "postgraduate"
