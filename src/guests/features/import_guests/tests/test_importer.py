"""Tests for the row parsing rules used by the guest import."""

import pytest

from src.guests.features.import_guests.dtos import CsvRow
from src.guests.features.import_guests.importer import (
    build_address_key,
    invitation_fields_from_row,
    map_header,
    parse_boolean,
    parse_guest_name,
    parse_row,
    parse_table_number,
    rows_from_csv,
)


@pytest.mark.parametrize(
    "full_name, expected",
    [
        ("John Smith", ("John", "Smith")),
        ("Mary Ann Van Der Berg", ("Mary", "Ann Van Der Berg")),
        ("  Cher  ", ("Cher", "")),
        ("Jean   Luc\tPicard", ("Jean", "Luc Picard")),
    ],
)
def test_parse_guest_name(full_name, expected):
    assert parse_guest_name(full_name) == expected


def test_parse_guest_name_blank():
    with pytest.raises(ValueError, match="Guest name is empty."):
        parse_guest_name("   ")


@pytest.mark.parametrize("value", ["yes", "YES", "true", "True", "y", "Y", "1", " yes "])
def test_parse_boolean_truthy(value):
    assert parse_boolean(value) is True


@pytest.mark.parametrize("value", [None, "", "no", "false", "0", "maybe", "sent"])
def test_parse_boolean_falsy(value):
    assert parse_boolean(value) is False


@pytest.mark.parametrize(
    "value, expected",
    [
        (None, None),
        ("", None),
        ("  ", None),
        ("7", 7),
        (" 12 ", 12),
        ("7b", 7),
    ],
)
def test_parse_table_number(value, expected):
    assert parse_table_number(value) == expected


def test_parse_table_number_invalid():
    with pytest.raises(ValueError, match="Invalid table number"):
        parse_table_number("head table")


def test_address_key_normalizes_case_and_whitespace():
    first = CsvRow(address1="1 Main St", city="Springfield", state="IL", zip_code="62704")
    second = CsvRow(address1="  1 MAIN ST ", city="springfield", state="il", zip_code=" 62704")

    assert build_address_key(first) == "1 main st|springfield|il|62704"
    assert build_address_key(first) == build_address_key(second)


def test_address_key_keeps_address2_apart():
    first = CsvRow(address1="10 Elm St", address2="Apt 1", city="Boston")
    second = CsvRow(address1="10 Elm St", address2="Apt 2", city="Boston")

    assert build_address_key(first) != build_address_key(second)


def test_address_key_empty_without_address():
    assert build_address_key(CsvRow(guest_name="No Address")) == ""
    assert build_address_key(CsvRow(address1="  ", city="")) == ""


def test_address_key_ignores_country():
    first = CsvRow(address1="1 Main St", country="USA")
    second = CsvRow(address1="1 Main St", country="Canada")

    assert build_address_key(first) == build_address_key(second)


def test_invitation_fields_from_row():
    row = CsvRow(
        address1="1 Main St",
        city="Springfield",
        state="IL",
        zip_code="62704",
        country="USA",
        phone_number="555-0100",
        save_the_date_sent="Yes",
        invite_sent="no",
        table_number="4",
        notes="Near the band",
    )

    fields = invitation_fields_from_row(row)

    assert fields == {
        "address": "1 Main St",
        "address2": None,
        "city": "Springfield",
        "state": "IL",
        "zip": "62704",
        "country": "USA",
        "phone_number": "555-0100",
        "save_the_date_sent": True,
        "invite_sent": False,
        "table_number": 4,
        "notes": "Near the band",
        "plus_one": False,
    }


def test_csv_row_accepts_camel_case_and_numbers():
    row = CsvRow.model_validate({"guestName": "John Smith", "zipCode": 62704, "tableNumber": 3})

    assert row.guest_name == "John Smith"
    assert row.zip_code == "62704"
    assert row.table_number == "3"
    assert row.as_submitted() == {"guestName": "John Smith", "zipCode": "62704", "tableNumber": "3"}


@pytest.mark.parametrize(
    "header, expected",
    [
        ("WEDDING GUEST NAME(S)", "guest_name"),
        ("Guest Name", "guest_name"),
        ("Address", "address1"),
        ("Address 1", "address1"),
        ("Address Line 2", None),
        ("ADDRESS 2", "address2"),
        ("State/Province", "state"),
        ("Postal Code", "zip_code"),
        ("Phone #", "phone_number"),
        ("Save the Date Sent?", "save_the_date_sent"),
        ("Invite Sent", "invite_sent"),
        ("Table", "table_number"),
        ("Dietary Restrictions", "dietary_restrictions"),
        ("Notes", "notes"),
        ("RSVP", None),
    ],
)
def test_map_header(header, expected):
    assert map_header(header) == expected


def test_rows_from_csv():
    records = [
        ["Guest Name", "Address 1", "City", "Zip", "Table", "Unknown"],
        ["John Smith", " 1 Main St ", "Springfield", "62704", "", "ignored"],
        ["", "2 Main St", "", "", "", ""],
        ["Ann Lee"],
    ]

    rows = rows_from_csv(records)

    assert len(rows) == 2
    assert rows[0].guest_name == "John Smith"
    assert rows[0].address1 == "1 Main St"
    assert rows[0].zip_code == "62704"
    assert rows[0].table_number is None
    assert rows[1].as_submitted() == {"guestName": "Ann Lee"}


def test_rows_from_csv_empty():
    assert rows_from_csv([]) == []


def test_parse_row_reports_field():
    with pytest.raises(ValueError, match="Invalid row: inviteSent"):
        parse_row({"guestName": "Bad Flag", "inviteSent": True})


def test_parse_row_rejects_non_objects():
    with pytest.raises(ValueError, match="Invalid row: "):
        parse_row(None)


def test_parse_row_keeps_rows():
    row = CsvRow(guest_name="Ann Lee")

    assert parse_row(row) is row
