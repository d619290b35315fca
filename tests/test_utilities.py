import pytest
from tutorhunt.database.database import BookedTutor
from fastapi import HTTPException
from tutorhunt.utilities import parse_positive_int, parse_tutor_id, normalize_category, booking_to_dict, MAX_ID

@pytest.mark.parametrize("value, expected", [
    (None, 10),
    ("", 10),
    ("abc", 10),
    ("0", 10),
    ("-3", 10),
    ("4", 4),
    ("500", 100),
])
def test_parse_positive_int(value, expected):
    assert parse_positive_int(value, 10, 100) == expected

def test_parse_positive_int_without_maximum():
    assert parse_positive_int("500", 1) == 500

@pytest.mark.parametrize("category, expected", [
    ("english", "English"),
    ("ENGLISH", "English"),
    ("eN-uS", "En-us"),
    ("sign language", "Sign language"),
])
def test_normalize_category(category, expected):
    assert normalize_category(category) == expected

def test_booking_to_dict_keeps_details_but_not_over_columns():
    booking = BookedTutor(
        id=7,
        tutor_id=3,
        user_email="student@example.com",
        has_reviewed=False,
        details={"notes": "mornings", "id": 99},
    )
    data = booking_to_dict(booking)
    assert data["notes"] == "mornings"
    assert data["id"] == 7
    assert data["tutor_id"] == 3
    assert data["language"] is None

def test_parse_tutor_id():
    assert parse_tutor_id("42") == 42
    assert parse_tutor_id(str(MAX_ID)) == MAX_ID

@pytest.mark.parametrize("tutor_id", ["abc", "", "0", "-1", "1.5", str(MAX_ID + 1), str(10**20)])
def test_parse_tutor_id_rejects_impossible_ids(tutor_id):
    with pytest.raises(HTTPException) as exc_info:
        parse_tutor_id(tutor_id)
    assert exc_info.value.status_code == 404
    assert exc_info.value.detail == "Tutor not found"
