"""Form schemas checked before any request is sent."""

import logging
from datetime import date
from typing import Any, Dict, Mapping

import voluptuous as vol

from .api.exceptions import CoachDeskValidationError
from .api.utils import format_date
from .const import (
	ADMISSION_STATUSES,
	ATTENDANCE_STATUSES,
	EXAM_TYPES,
	PAYMENT_METHODS,
	QR_TYPES,
)

_LOGGER = logging.getLogger(__name__)

MSG_REQUIRED = "This field is required"


def RequiredText(value: Any) -> str:
	"""Non-blank string, stripped."""
	if value is None or not str(value).strip():
		raise vol.Invalid(MSG_REQUIRED)
	return str(value).strip()


def OptionalText(value: Any) -> Any:
	"""Stripped string, or None when blank."""
	if value is None:
		return None
	text = str(value).strip()
	return text or None


def IsoDate(value: Any) -> str:
	"""Accept a date or an ISO string, return YYYY-MM-DD."""
	if isinstance(value, date):
		return format_date(value)
	if value is None or not str(value).strip():
		raise vol.Invalid(MSG_REQUIRED)
	try:
		return format_date(str(value))
	except ValueError:
		raise vol.Invalid("Invalid date")


def OptionalIsoDate(value: Any) -> Any:
	if value is None or (isinstance(value, str) and not value.strip()):
		return None
	return IsoDate(value)


def Number(minimum: float = 0, exclusive: bool = False, msg: str = "Must be a number"):
	"""Coerce to float and check the lower bound."""
	def validator(value: Any) -> float:
		if value is None or (isinstance(value, str) and not value.strip()):
			raise vol.Invalid(MSG_REQUIRED)
		if isinstance(value, bool):
			raise vol.Invalid(msg)
		try:
			number = float(value)
		except (TypeError, ValueError):
			raise vol.Invalid(msg)
		if number < minimum or (exclusive and number == minimum):
			bound = "greater than" if exclusive else "at least"
			raise vol.Invalid(f"Must be {bound} {minimum:g}")
		return number
	return validator


def OptionalPositiveInt(value: Any) -> Any:
	if value is None or (isinstance(value, str) and not value.strip()):
		return None
	try:
		number = int(float(value))
	except (TypeError, ValueError):
		raise vol.Invalid("Must be a whole number")
	if number <= 0:
		raise vol.Invalid("Must be greater than 0")
	return number


MobileNumber = vol.All(RequiredText, vol.Match(r"^\+?[0-9][0-9 -]{5,19}$", msg="Invalid mobile number"))
OptionalMobileNumber = vol.Any(None, vol.All(OptionalText, vol.Any(None, MobileNumber)))


def _text_list(value: Any) -> list:
	if value is None:
		return []
	if isinstance(value, str):
		value = [value]
	return [str(item).strip() for item in value if item is not None and str(item).strip()]


ADMISSION_FORM_SCHEMA = vol.Schema({
	vol.Required("student_name"): RequiredText,
	vol.Required("father_name"): RequiredText,
	vol.Required("mother_name"): RequiredText,
	vol.Required("school_name"): RequiredText,
	vol.Required("father_mobile"): MobileNumber,
	vol.Optional("mother_mobile", default=None): OptionalMobileNumber,
	vol.Optional("student_mobile", default=None): OptionalMobileNumber,
	vol.Required("class_name"): RequiredText,
	vol.Optional("subjects", default=list): _text_list,
	vol.Required("batch_name"): RequiredText,
	vol.Required("batch_time"): RequiredText,
	vol.Required("admission_date"): IsoDate,
	vol.Required("monthly_fee"): Number(0),
	vol.Optional("alarm_mobile", default=list): vol.All(_text_list, [MobileNumber]),
	vol.Optional("student_signature", default=None): OptionalText,
	vol.Optional("director_signature", default=None): OptionalText,
	vol.Optional("notes", default=None): OptionalText,
	vol.Optional("status", default=None): vol.Any(None, vol.In(ADMISSION_STATUSES)),
}, extra=vol.REMOVE_EXTRA)

ATTENDANCE_SCHEMA = vol.Schema({
	vol.Required("admission_id"): RequiredText,
	vol.Required("status"): vol.In(ATTENDANCE_STATUSES),
	vol.Optional("notes", default=None): OptionalText,
}, extra=vol.REMOVE_EXTRA)

EXAM_FORM_SCHEMA = vol.Schema({
	vol.Required("exam_name"): RequiredText,
	vol.Optional("exam_type", default="quiz"): vol.In(EXAM_TYPES, msg="Unknown exam type"),
	vol.Required("subject"): RequiredText,
	vol.Required("class_name"): RequiredText,
	vol.Optional("batch_name", default=None): OptionalText,
	vol.Optional("description", default=None): OptionalText,
	vol.Required("exam_date"): IsoDate,
	vol.Required("exam_time"): RequiredText,
	vol.Optional("duration", default=None): OptionalPositiveInt,
}, extra=vol.REMOVE_EXTRA)


def _marks_within_total(values: Dict[str, Any]) -> Dict[str, Any]:
	if values["marks"] > values["total_marks"]:
		raise vol.Invalid("Marks cannot exceed total marks", path=["marks"])
	return values


RESULT_ENTRY_SCHEMA = vol.All(
	vol.Schema({
		vol.Required("marks"): Number(0),
		vol.Required("total_marks"): Number(0, exclusive=True),
		vol.Optional("grade", default=None): OptionalText,
		vol.Optional("present", default=True): bool,
	}, extra=vol.REMOVE_EXTRA),
	_marks_within_total,
)

FEE_FORM_SCHEMA = vol.Schema({
	vol.Required("admission_id"): RequiredText,
	vol.Required("monthly_fee"): Number(0, exclusive=True),
	vol.Required("due_date"): IsoDate,
	vol.Required("month"): vol.All(vol.Coerce(int), vol.Range(min=1, max=12)),
	vol.Required("year"): vol.All(vol.Coerce(int), vol.Range(min=2000, max=2100)),
	vol.Optional("notes", default=None): OptionalText,
}, extra=vol.REMOVE_EXTRA)

BULK_FEE_SCHEMA = vol.Schema({
	vol.Required("month"): vol.All(vol.Coerce(int), vol.Range(min=1, max=12)),
	vol.Required("year"): vol.All(vol.Coerce(int), vol.Range(min=2000, max=2100)),
	vol.Required("due_date"): IsoDate,
	vol.Optional("class_name", default=None): OptionalText,
	vol.Optional("batch_name", default=None): OptionalText,
}, extra=vol.REMOVE_EXTRA)

PAYMENT_SCHEMA = vol.Schema({
	vol.Required("amount_paid"): Number(0),
	vol.Optional("payment_date", default=None): OptionalIsoDate,
	vol.Optional("payment_method", default="cash"): vol.In(PAYMENT_METHODS, msg="Unknown payment method"),
	vol.Optional("transaction_id", default=None): OptionalText,
	vol.Optional("notes", default=None): OptionalText,
	vol.Optional("send_sms", default=True): bool,
}, extra=vol.REMOVE_EXTRA)

QR_FORM_SCHEMA = vol.Schema({
	vol.Required("name"): RequiredText,
	vol.Optional("type", default="custom"): vol.In(QR_TYPES, msg="Unknown QR code type"),
	vol.Required("content"): RequiredText,
	vol.Optional("description", default=None): OptionalText,
	vol.Optional("student_id", default=None): OptionalText,
	vol.Optional("admission_id", default=None): OptionalText,
	vol.Optional("exam_id", default=None): OptionalText,
	vol.Optional("expires_at", default=None): OptionalIsoDate,
	vol.Optional("is_active", default=True): bool,
	vol.Optional("metadata", default=None): vol.Any(None, dict),
}, extra=vol.REMOVE_EXTRA)

SINGLE_SMS_SCHEMA = vol.Schema({
	vol.Required("mobile_number"): MobileNumber,
	vol.Required("message"): RequiredText,
	vol.Optional("sender_id", default=None): OptionalText,
	vol.Optional("api_key", default=None): OptionalText,
}, extra=vol.REMOVE_EXTRA)

BULK_SMS_SCHEMA = vol.Schema({
	vol.Required("mobile_numbers"): vol.All([MobileNumber], vol.Length(min=1, msg=MSG_REQUIRED)),
	vol.Required("message"): RequiredText,
	vol.Optional("sender_id", default=None): OptionalText,
	vol.Optional("api_key", default=None): OptionalText,
}, extra=vol.REMOVE_EXTRA)

CUSTOM_SMS_SCHEMA = vol.Schema({
	vol.Required("messages"): vol.All(
		[vol.Schema({vol.Required("number"): MobileNumber, vol.Required("message"): RequiredText})],
		vol.Length(min=1, msg=MSG_REQUIRED),
	),
	vol.Optional("sender_id", default=None): OptionalText,
	vol.Optional("api_key", default=None): OptionalText,
}, extra=vol.REMOVE_EXTRA)

STUDENTS_SMS_SCHEMA = vol.Schema({
	vol.Required("message"): RequiredText,
	vol.Optional("class_name", default=None): OptionalText,
	vol.Optional("batch_name", default=None): OptionalText,
	vol.Optional("sender_id", default=None): OptionalText,
	vol.Optional("api_key", default=None): OptionalText,
}, extra=vol.REMOVE_EXTRA)


def validate(schema, data: Mapping[str, Any]) -> Dict[str, Any]:
	"""Run ``schema`` over ``data``.
	
	Raises:
		CoachDeskValidationError: with one message per offending field
	"""
	try:
		return schema(dict(data))
	except vol.MultipleInvalid as err:
		errors: Dict[str, str] = {}
		for error in err.errors:
			field = ".".join(str(part) for part in error.path) or "form"
			msg = MSG_REQUIRED if error.msg == "required key not provided" else error.msg
			errors.setdefault(field, msg)
		_LOGGER.debug(f"Validation failed: {errors}")
		raise CoachDeskValidationError(errors) from err
	except vol.Invalid as err:
		field = ".".join(str(part) for part in err.path) or "form"
		raise CoachDeskValidationError({field: err.msg}) from err
