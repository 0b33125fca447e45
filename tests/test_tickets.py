from __future__ import annotations

from datetime import datetime, timezone

import pytest

from hubspot_dashboard.tickets import TicketRecord, parse_amount, parse_birthday, parse_timestamp

from conftest import make_payload, make_ticket


def test_from_api_classifies_stage_and_keeps_properties() -> None:
    payload = make_payload("77", stage="999098012", service_provided="Rent")
    record = TicketRecord.from_api(payload)

    assert record.id == "77"
    assert record.status == "IN_PROCESS_OSW"
    assert record.created_at == "2024-01-08T10:00:00Z"
    assert record.prop("service_provided") == "Rent"


def test_from_api_tolerates_missing_properties() -> None:
    record = TicketRecord.from_api({"id": 5})
    assert record.id == "5"
    assert record.status == "UNKNOWN"
    assert record.created_at is None
    assert record.created_datetime is None


def test_from_api_ignores_non_object_properties() -> None:
    record = TicketRecord.from_api({"id": "9", "properties": ["hs_pipeline_stage", "3"]})
    assert record.status == "UNKNOWN"
    assert record.properties == {}


def test_parse_timestamp_assumes_utc_for_naive_values() -> None:
    assert parse_timestamp("2024-01-08T10:00:00") == datetime(2024, 1, 8, 10, tzinfo=timezone.utc)
    assert parse_timestamp("2024-01-08T10:00:00.123Z").microsecond == 123000


@pytest.mark.parametrize("value", [None, "", "yesterday", "2024-13-45"])
def test_parse_timestamp_rejects_bad_values(value) -> None:
    assert parse_timestamp(value) is None


@pytest.mark.parametrize(
    "value, expected",
    [
        ("100", 100.0),
        (" 42.5 ", 42.5),
        ("1250.50", 1250.5),
        (".5", 0.5),
        ("-20", -20.0),
    ],
)
def test_parse_amount_accepts_decimal_text(value: str, expected: float) -> None:
    assert parse_amount(value) == expected


@pytest.mark.parametrize(
    "value",
    [None, "", "abc", "12 dollars", "nan", "inf", "$", "$1,250.50", "1,250", "$100", "1_000", "1e400"],
)
def test_parse_amount_rejects_non_numeric_text(value) -> None:
    assert parse_amount(value) is None


def test_parse_birthday_accepts_dates_and_epoch_millis() -> None:
    assert parse_birthday("1990-05-01") == datetime(1990, 5, 1, tzinfo=timezone.utc)
    assert parse_birthday("631152000000") == datetime(1990, 1, 1, tzinfo=timezone.utc)
    assert parse_birthday("garbage") is None
    assert parse_birthday(None) is None


def test_service_provided_ignores_placeholders() -> None:
    assert make_ticket(service_provided="Food").service_provided == "Food"
    assert make_ticket(service_provided="").service_provided is None
    assert make_ticket(service_provided="null").service_provided is None
    assert make_ticket().service_provided is None


@pytest.mark.parametrize(
    "birthday, expected",
    [
        ("2007-01-01", 17),
        ("2006-01-01", 18),
        ("1904-01-01", 120),
        ("unknown", None),
        (None, None),
    ],
)
def test_age_in_years(birthday, expected) -> None:
    reference = datetime(2024, 6, 1, tzinfo=timezone.utc)
    assert make_ticket(birthday=birthday).age_in_years(reference) == expected
