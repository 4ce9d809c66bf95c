"""
Tests for runtime form rendering: field normalization, answer lookup,
formatting and validation.
"""
import json

import pytest

from jobforms.services.form_builder import default_fields
from jobforms.schemas.form import dump_fields
from jobforms.services.form_renderer import (
    NOT_ANSWERED,
    candidate_keys,
    format_answer,
    lookup_answer,
    normalize_fields,
    render_answers,
    validate_answers,
)

DEFAULT_FIELDS = dump_fields(default_fields())

VALID_DEFAULT_ANSWERS = {
    "full_name": "Ada Lovelace",
    "email": "ada@example.com",
    "phone": "+63 917 123 4567",
    "resume": {"filename": "ada_cv.pdf", "size": 1024, "type": "application/pdf"},
}


# ============================================================
# NORMALIZATION
# ============================================================

def test_normalize_accepts_json_string():
    raw = json.dumps([{"id": "q1", "label": "First", "type": "select", "options": ["a", "b"]}])
    fields = normalize_fields(raw)

    assert len(fields) == 1
    assert fields[0].id == "q1"
    assert fields[0].options == ("a", "b")


def test_label_fallback_chain():
    fields = normalize_fields([
        {"id": "a", "label": "Label"},
        {"id": "b", "question": "Question text"},
        {"id": "c", "name": "some_name"},
        {"id": "d"},
    ])
    assert [f.label for f in fields] == ["Label", "Question text", "some_name", "Question 4"]


def test_missing_id_falls_back_to_name_then_position():
    fields = normalize_fields([{"name": "city", "label": "City"}, {"label": "Anything"}])
    assert [f.id for f in fields] == ["city", "question_2"]


@pytest.mark.parametrize("raw", [None, "", "not json", 42, {"id": "x"}])
def test_unusable_field_data_yields_no_fields(raw):
    assert normalize_fields(raw) == []


def test_non_object_entries_are_skipped():
    fields = normalize_fields(["junk", {"id": "ok", "label": "OK"}])
    assert [f.id for f in fields] == ["ok"]


# ============================================================
# LOOKUP & FORMATTING
# ============================================================

def test_candidate_keys():
    assert candidate_keys("years_experience") == ["years_experience", "yearsExperience"]
    assert candidate_keys("yearsExperience") == ["yearsExperience", "years_experience"]
    assert candidate_keys("email") == ["email"]


def test_lookup_tries_each_spelling():
    answers = {"yearsExperience": "3-5 years"}
    assert lookup_answer(answers, *candidate_keys("years_experience")) == "3-5 years"


def test_lookup_skips_blank_values():
    answers = {"years_experience": "", "yearsExperience": "1-2 years"}
    assert lookup_answer(answers, *candidate_keys("years_experience")) == "1-2 years"
    assert lookup_answer({"a": "   "}, "a") is None
    assert lookup_answer(None, "a") is None


@pytest.mark.parametrize("value,expected", [
    (None, NOT_ANSWERED),
    ("", NOT_ANSWERED),
    ([], NOT_ANSWERED),
    (["Python", "SQL"], "Python, SQL"),
    (True, "Yes"),
    (False, "No"),
    (5, "5"),
    ({"filename": "cv.pdf", "size": 10}, "cv.pdf"),
])
def test_format_answer(value, expected):
    assert format_answer(value) == expected


# ============================================================
# RENDERING
# ============================================================

def test_render_answers_in_field_order_with_placeholder_for_missing():
    fields = [
        {"id": "years_experience", "question": "Years of experience?"},
        {"id": "salary_expectation", "question": "Salary?"},
        {"id": "skills", "label": "Skills", "type": "checkbox"},
    ]
    answers = {"skills": ["Go", "Rust"], "yearsExperience": "6-10 years"}

    rendered = render_answers(fields, answers)

    assert [(r.label, r.answer) for r in rendered] == [
        ("Years of experience?", "6-10 years"),
        ("Salary?", NOT_ANSWERED),
        ("Skills", "Go, Rust"),
    ]


def test_render_answers_accepts_json_strings():
    fields = json.dumps([{"id": "city", "label": "City"}])
    answers = json.dumps({"city": "Davao"})
    assert render_answers(fields, answers)[0].answer == "Davao"


def test_render_answers_with_corrupt_data_shows_not_answered():
    rendered = render_answers([{"id": "city", "label": "City"}], "{broken")
    assert rendered[0].answer == NOT_ANSWERED


# ============================================================
# VALIDATION
# ============================================================

def test_valid_default_answers_pass():
    assert validate_answers(DEFAULT_FIELDS, VALID_DEFAULT_ANSWERS) == {}


def test_required_fields_reported():
    errors = validate_answers(DEFAULT_FIELDS, {"full_name": "Ada Lovelace"})
    assert set(errors) == {"email", "phone", "resume"}
    assert errors["email"] == "Email Address is required"


def test_blank_required_answer_is_missing():
    errors = validate_answers(DEFAULT_FIELDS, {**VALID_DEFAULT_ANSWERS, "full_name": "  "})
    assert errors == {"full_name": "Full Name is required"}


def test_min_length():
    errors = validate_answers(DEFAULT_FIELDS, {**VALID_DEFAULT_ANSWERS, "full_name": "A"})
    assert errors == {"full_name": "Minimum 2 characters required"}


def test_max_length():
    fields = [{"id": "bio", "type": "textarea", "validation": {"maxLength": 5}}]
    assert validate_answers(fields, {"bio": "too long"}) == {"bio": "Maximum 5 characters allowed"}


def test_invalid_email_and_phone():
    errors = validate_answers(
        DEFAULT_FIELDS,
        {**VALID_DEFAULT_ANSWERS, "email": "not-an-email", "phone": "call me"},
    )
    assert errors == {"email": "Invalid email format", "phone": "Invalid phone number"}


def test_file_type_restriction():
    errors = validate_answers(DEFAULT_FIELDS, {**VALID_DEFAULT_ANSWERS, "resume": "cv.exe"})
    assert errors == {"resume": "Supported formats: .pdf, .doc, .docx"}


def test_option_membership():
    fields = [
        {"id": "shift", "type": "radio", "options": ["Day", "Night"], "required": True},
        {"id": "langs", "type": "checkbox", "options": ["Go", "Rust"]},
    ]
    assert validate_answers(fields, {"shift": "Day", "langs": ["Go"]}) == {}
    errors = validate_answers(fields, {"shift": "Swing", "langs": ["Go", "COBOL"]})
    assert set(errors) == {"shift", "langs"}


def test_option_field_without_options_accepts_anything():
    fields = [{"id": "pick", "type": "select", "options": []}]
    assert validate_answers(fields, {"pick": "whatever"}) == {}


def test_invalid_date():
    fields = [{"id": "start", "type": "date"}]
    assert validate_answers(fields, {"start": "2026-02-30"}) == {"start": "Invalid date"}
    assert validate_answers(fields, {"start": "2026-03-01"}) == {}


def test_custom_regex_pattern():
    fields = [{"id": "zip", "label": "ZIP", "validation": {"pattern": r"\d{4}"}}]
    assert validate_answers(fields, {"zip": "1200"}) == {}
    assert validate_answers(fields, {"zip": "12a0"}) == {"zip": "ZIP has an invalid format"}


def test_unknown_answer_keys_ignored():
    assert validate_answers([{"id": "a"}], {"a": "x", "extra": "y"}) == {}


def test_camel_case_answers_satisfy_snake_case_fields():
    fields = [{"id": "years_experience", "type": "select", "options": ["1-2 years"], "required": True}]
    assert validate_answers(fields, {"yearsExperience": "1-2 years"}) == {}


@pytest.mark.parametrize("validation", [
    {"minLength": "two"},
    {"maxLength": [5]},
    {"minLength": None, "maxLength": "lots"},
    {"pattern": 5},
    {"pattern": ["\\d+"]},
])
def test_malformed_validation_rules_are_skipped(validation):
    fields = [{"id": "q", "label": "Q", "validation": validation}]
    assert validate_answers(fields, {"q": "hi"}) == {}


def test_numeric_string_length_limits_still_apply():
    fields = [{"id": "q", "label": "Q", "validation": {"minLength": "3"}}]
    assert validate_answers(fields, {"q": "hi"}) == {"q": "Minimum 3 characters required"}


def test_single_file_type_string():
    fields = [{"id": "r", "type": "file", "validation": {"fileTypes": ".pdf"}}]
    assert validate_answers(fields, {"r": "cv.pdf"}) == {}
    assert validate_answers(fields, {"r": "cv.txt"}) == {"r": "Supported formats: .pdf"}


@pytest.mark.parametrize("raw,required", [
    (True, True),
    ("true", True),
    (False, False),
    ("false", False),
    ("", False),
    (None, False),
])
def test_required_flag_parsing(raw, required):
    [field] = normalize_fields([{"id": "q", "label": "Q", "required": raw}])
    assert field.required is required
