import pytest

from src.timeclock.timeclock.core.exceptions import ValidationError
from src.timeclock.timeclock.timesheets.model import DayRecord, RecordKey, check_mergeable


def test_record_key_text():
    assert str(RecordKey("2024-03-04", "Ana", "Acme")) == "2024-03-04__Ana__Acme"


def test_empty_record_gets_weekday():
    record = DayRecord.empty(RecordKey("2024-03-04", "Ana", "Acme"), user_id="u1")
    assert record.day == "Mon"
    assert record.user_id == "u1"
    assert record.clock_in is None
    assert record.notes == ""


def test_document_uses_stored_field_names():
    record = DayRecord(date="2024-03-04", person="Ana", organization="Acme", day="Mon", clock_in="09:00:00")
    doc = record.to_document()
    assert doc == {
        "date": "2024-03-04",
        "day": "Mon",
        "name": "Ana",
        "company": "Acme",
        "clockIn": "09:00:00",
        "lunchOut": "",
        "endLunch": "",
        "clockOut": "",
        "notes": "",
        "uid": None,
    }


def test_from_document_treats_empty_stamps_as_absent():
    record = DayRecord.from_document(
        {"date": "2024-03-05", "name": "Ana", "company": "Acme", "clockIn": "", "clockOut": "17:00:00"}
    )
    assert record.clock_in is None
    assert record.clock_out == "17:00:00"
    assert record.day == "Tue"


@pytest.mark.parametrize(
    "doc",
    [
        {"name": "Ana", "company": "Acme"},
        {"date": "03/04/2024", "name": "Ana", "company": "Acme"},
        {"date": "2024-03-04", "name": "", "company": "Acme"},
        {"date": "2024-03-04", "name": "Ana", "company": "Acme", "clockIn": 900},
        ["not", "a", "mapping"],
    ],
)
def test_from_document_rejects_malformed(doc):
    with pytest.raises(ValidationError):
        DayRecord.from_document(doc)


def test_merged_keeps_siblings():
    record = DayRecord(date="2024-03-04", person="Ana", organization="Acme", clock_in="09:00:00", notes="x")
    merged = record.merged({"clock_out": "17:00:00"})
    assert merged.clock_in == "09:00:00"
    assert merged.clock_out == "17:00:00"
    assert merged.notes == "x"


def test_key_fields_are_not_mergeable():
    with pytest.raises(ValueError):
        check_mergeable({"person": "Bob"})
