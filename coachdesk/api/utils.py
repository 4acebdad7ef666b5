"""Helpers shared by the coachdesk client and views."""

import logging
import re
from datetime import date, datetime
from typing import Any, Dict, List, Optional, Union

_LOGGER = logging.getLogger(__name__)

FEE_STATUS_PENDING = "pending"
FEE_STATUS_PAID = "paid"
FEE_STATUS_PARTIAL = "partial"
FEE_STATUS_OVERDUE = "overdue"

_MOBILE_SPLIT = re.compile(r"[,\n]")


def parse_number(value: Any) -> Optional[float]:
	"""Parse a staged form value into a float.
	
	Returns None for empty strings, None and anything non-numeric, so callers
	can treat "not filled in" and "garbage" the same way.
	"""
	if value is None or isinstance(value, bool):
		return None
	if isinstance(value, (int, float)):
		return float(value)
	text = str(value).strip()
	if not text:
		return None
	try:
		number = float(text)
	except ValueError:
		return None
	if number != number:  # NaN
		return None
	return number


def format_number(value: Any) -> str:
	"""Render a persisted number for a form field without losing digits.

	Whole numbers drop the trailing ``.0``; ``parse_number`` reads the text
	back to the same float.
	"""
	number = parse_number(value)
	if number is None:
		return ""
	text = repr(number)
	return text[:-2] if text.endswith(".0") else text


def compute_percentage(marks: Any, total_marks: Any) -> float:
	"""Percentage of marks over total marks, rounded to 2 decimals."""
	obtained = parse_number(marks)
	total = parse_number(total_marks)
	if obtained is None or not total:
		return 0.0
	return round(obtained / total * 100, 2)


def compute_amount_due(monthly_fee: Any, amount_paid: Any) -> float:
	"""Outstanding amount for a billing period, never negative."""
	fee = parse_number(monthly_fee) or 0.0
	paid = parse_number(amount_paid) or 0.0
	return max(fee - paid, 0.0)


def derive_fee_status(
	monthly_fee: Any,
	amount_paid: Any,
	due_date: Optional[date] = None,
	today: Optional[date] = None,
) -> str:
	"""Derive the fee status from its inputs.
	
	Fully paid wins, then an unpaid balance past the due date is overdue,
	then any payment makes it partial, otherwise it is pending.
	"""
	fee = parse_number(monthly_fee) or 0.0
	paid = parse_number(amount_paid) or 0.0
	today = today or date.today()
	
	if paid >= fee and (fee > 0 or paid > 0):
		return FEE_STATUS_PAID
	if due_date is not None and due_date < today:
		return FEE_STATUS_OVERDUE
	if paid > 0:
		return FEE_STATUS_PARTIAL
	return FEE_STATUS_PENDING


def parse_date(value: Union[str, date, datetime, None]) -> Optional[date]:
	"""Parse the backend's ISO dates ("2025-01-10" or full timestamps)."""
	if value is None or value == "":
		return None
	if isinstance(value, datetime):
		return value.date()
	if isinstance(value, date):
		return value
	text = str(value).strip()
	try:
		return date.fromisoformat(text[:10])
	except ValueError:
		_LOGGER.debug(f"Could not parse date value {value!r}")
		return None


def format_date(value: Union[date, datetime, str]) -> str:
	"""Format a date the way the backend expects it (YYYY-MM-DD)."""
	if isinstance(value, str):
		parsed = parse_date(value)
		if parsed is None:
			raise ValueError(f"Invalid date: {value!r}")
		value = parsed
	if isinstance(value, datetime):
		value = value.date()
	return value.isoformat()


def build_query(**params: Any) -> Dict[str, str]:
	"""Build query parameters, dropping empty values.
	
	Booleans are sent as "true"/"false", everything else with str().
	"""
	query: Dict[str, str] = {}
	for key, value in params.items():
		if value is None or value == "":
			continue
		if isinstance(value, bool):
			query[key] = "true" if value else "false"
		else:
			query[key] = str(value)
	return query


def compact(payload: Dict[str, Any]) -> Dict[str, Any]:
	"""Drop None values from a JSON body."""
	return {key: value for key, value in payload.items() if value is not None}


def split_mobile_numbers(text: str) -> List[str]:
	"""Split a free-text list of mobile numbers on commas and newlines."""
	if not text:
		return []
	return [number.strip() for number in _MOBILE_SPLIT.split(text) if number.strip()]
