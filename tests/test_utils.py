"""Unit tests for derived-field math and request helpers."""

from datetime import date, datetime

import pytest

from coachdesk.api.utils import (
	FEE_STATUS_OVERDUE,
	FEE_STATUS_PAID,
	FEE_STATUS_PARTIAL,
	FEE_STATUS_PENDING,
	build_query,
	compact,
	compute_amount_due,
	compute_percentage,
	derive_fee_status,
	format_date,
	format_number,
	parse_date,
	parse_number,
	split_mobile_numbers,
)

TODAY = date(2025, 1, 15)


@pytest.mark.parametrize("value,expected", [
	("42", 42.0),
	(" 7.5 ", 7.5),
	(3, 3.0),
	("", None),
	("  ", None),
	(None, None),
	("abc", None),
	("nan", None),
	(True, None),
])
def test_parse_number(value, expected):
	assert parse_number(value) == expected


def test_percentage_is_rounded_to_two_decimals():
	assert compute_percentage(2, 3) == 66.67
	assert compute_percentage("45", "50") == 90.0


def test_percentage_without_total_is_zero():
	assert compute_percentage(10, 0) == 0.0
	assert compute_percentage("", "100") == 0.0


def test_amount_due_never_negative():
	assert compute_amount_due(500, None) == 500.0
	assert compute_amount_due(500, 200) == 300.0
	assert compute_amount_due(500, 700) == 0.0


def test_fee_without_payment_is_pending_before_due_date():
	assert derive_fee_status(500, None, date(2025, 1, 31), TODAY) == FEE_STATUS_PENDING


def test_fee_status_paid_partial_overdue():
	assert derive_fee_status(500, 500, date(2025, 1, 1), TODAY) == FEE_STATUS_PAID
	assert derive_fee_status(500, 200, date(2025, 1, 31), TODAY) == FEE_STATUS_PARTIAL
	assert derive_fee_status(500, 200, date(2025, 1, 10), TODAY) == FEE_STATUS_OVERDUE
	assert derive_fee_status(500, 0, date(2025, 1, 10), TODAY) == FEE_STATUS_OVERDUE


def test_zero_fee_with_nothing_paid_is_not_paid():
	assert derive_fee_status(0, 0, None, TODAY) == FEE_STATUS_PENDING


def test_parse_and_format_dates():
	assert parse_date("2025-01-10T00:00:00.000Z") == date(2025, 1, 10)
	assert parse_date(datetime(2025, 1, 10, 8, 30)) == date(2025, 1, 10)
	assert parse_date("garbage") is None
	assert parse_date("") is None
	assert format_date("2025-01-10T12:00:00Z") == "2025-01-10"
	assert format_date(date(2025, 2, 3)) == "2025-02-03"


def test_format_date_rejects_garbage():
	with pytest.raises(ValueError):
		format_date("not a date")


def test_build_query_drops_empty_values():
	query = build_query(page=1, search="", status=None, isActive=False, **{"class": "Class 8"})
	assert query == {"page": "1", "isActive": "false", "class": "Class 8"}


def test_compact_drops_none_only():
	assert compact({"a": None, "b": 0, "c": "", "d": False}) == {"b": 0, "c": "", "d": False}


def test_split_mobile_numbers_on_commas_and_newlines():
	text = "01711000000, 01811000000\n01911000000,,\n "
	assert split_mobile_numbers(text) == ["01711000000", "01811000000", "01911000000"]
	assert split_mobile_numbers("") == []


@pytest.mark.parametrize("value,text", [
	(33.333333, "33.333333"),
	(1234567, "1234567"),
	(0.1, "0.1"),
	(500.0, "500"),
	(None, ""),
])
def test_format_number_reads_back_exactly(value, text):
	assert format_number(value) == text
	if value is not None:
		assert parse_number(text) == float(value)
