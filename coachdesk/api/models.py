"""Data models for coachdesk entities."""

from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional, Union

from .exceptions import CoachDeskDataError
from .utils import (
	compute_amount_due,
	compute_percentage,
	derive_fee_status,
	parse_date,
	parse_number,
)


def _record_id(data: Dict[str, Any]) -> str:
	record_id = data.get("_id") or data.get("id")
	if not record_id:
		raise CoachDeskDataError(f"Record without id: {data!r}")
	return str(record_id)


@dataclass
class Pagination:
	"""Pagination block returned by list endpoints."""
	page: int = 1
	limit: int = 0
	total: int = 0
	total_pages: int = 0
	has_next: bool = False
	has_prev: bool = False
	
	@classmethod
	def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional["Pagination"]:
		if not data:
			return None
		return cls(
			page=int(data.get("page", 1)),
			limit=int(data.get("limit", 0)),
			total=int(data.get("total", 0)),
			total_pages=int(data.get("totalPages", 0)),
			has_next=bool(data.get("hasNext", False)),
			has_prev=bool(data.get("hasPrev", False)),
		)


@dataclass
class ApiResult:
	"""Uniform response envelope: ``{success, data, message, error, pagination}``."""
	success: bool
	data: Any = None
	message: Optional[str] = None
	error: Optional[str] = None
	pagination: Optional[Pagination] = None
	code: Optional[int] = None
	
	@classmethod
	def failure(cls, error: str) -> "ApiResult":
		return cls(success=False, error=error)
	
	def __bool__(self) -> bool:
		return self.success


@dataclass
class BatchOutcome:
	"""How many rows of a batch write the server accepted.
	
	``failed_ids`` lists the admission ids of rejected rows when the server
	names them; it is empty when only counts are reported.
	"""
	accepted: int
	failed: int = 0
	failed_ids: List[str] = field(default_factory=list)
	
	@property
	def is_partial(self) -> bool:
		return self.failed > 0
	
	def committed(self, keys: List[str]) -> List[str]:
		"""The submitted ``keys`` the server is known to have stored."""
		if not self.is_partial:
			return list(keys)
		if not self.failed_ids:
			# unnamed rejections keep every row staged
			return []
		rejected = set(self.failed_ids)
		return [key for key in keys if key not in rejected]
	
	@classmethod
	def from_response(cls, data: Any, submitted: int) -> "BatchOutcome":
		"""Read the per-row counts a batch endpoint reports, if any.
		
		Without counts in the payload the whole batch counts as accepted.
		"""
		if isinstance(data, dict):
			for ok_key, failed_key in (
				("successCount", "failedCount"),
				("succeeded", "failed"),
				("created", "errors"),
			):
				if ok_key in data or failed_key in data:
					accepted = _count(data.get(ok_key))
					failed = _count(data.get(failed_key))
					if ok_key not in data:
						accepted = max(submitted - failed, 0)
					return cls(accepted=accepted, failed=failed, failed_ids=_row_ids(data.get(failed_key)))
		return cls(accepted=submitted, failed=0)


def _row_ids(value: Any) -> List[str]:
	if not isinstance(value, (list, tuple)):
		return []
	ids = []
	for item in value:
		if isinstance(item, dict):
			item = item.get("admissionId") or item.get("admission")
		if isinstance(item, str) and item:
			ids.append(item)
	return ids


def _count(value: Any) -> int:
	if isinstance(value, bool) or value is None:
		return 0
	if isinstance(value, (list, tuple)):
		return len(value)
	number = parse_number(value)
	return int(number) if number is not None else 0


@dataclass
class RosterMember:
	"""A student's admission record."""
	id: str
	name: str
	student_id: Optional[str] = None
	class_name: Optional[str] = None
	batch_name: Optional[str] = None
	batch_time: Optional[str] = None
	father_mobile: Optional[str] = None
	mother_mobile: Optional[str] = None
	student_mobile: Optional[str] = None
	alarm_mobile: List[str] = field(default_factory=list)
	monthly_fee: Optional[float] = None
	status: str = "active"
	
	@property
	def notification_targets(self) -> List[str]:
		"""Numbers notified about this student, in order."""
		if self.alarm_mobile:
			return list(self.alarm_mobile)
		return [n for n in (self.father_mobile, self.mother_mobile, self.student_mobile) if n]
	
	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> "RosterMember":
		return cls(
			id=_record_id(data),
			name=data.get("studentName") or data.get("name") or "",
			student_id=data.get("studentId"),
			class_name=data.get("class"),
			batch_name=data.get("batchName") or data.get("batch"),
			batch_time=data.get("batchTime"),
			father_mobile=data.get("fatherMobile"),
			mother_mobile=data.get("motherMobile"),
			student_mobile=data.get("studentMobile"),
			alarm_mobile=list(data.get("alarmMobile") or []),
			monthly_fee=parse_number(data.get("monthlyFee")),
			status=data.get("status") or "active",
		)
	
	def __str__(self) -> str:
		return f"{self.name} ({self.class_name or '-'}/{self.batch_name or '-'})"


@dataclass(frozen=True)
class Reference:
	"""An admission referenced by id only."""
	id: str


@dataclass(frozen=True)
class Populated:
	"""An admission the backend returned inline."""
	member: RosterMember
	
	@property
	def id(self) -> str:
		return self.member.id


AdmissionRef = Union[Reference, Populated]


def parse_admission_ref(value: Any) -> AdmissionRef:
	"""Read ``admissionId``, which is either a bare id or a populated admission."""
	if isinstance(value, (Reference, Populated)):
		return value
	if isinstance(value, str) and value:
		return Reference(value)
	if isinstance(value, dict):
		return Populated(RosterMember.from_dict(value))
	raise CoachDeskDataError(f"Unexpected admissionId value: {value!r}")


@dataclass
class AttendanceRecord:
	"""A persisted attendance mark for one student on one date."""
	id: str
	admission: AdmissionRef
	date: Optional[date]
	status: str  # "present" or "absent"
	sms_sent: bool = False
	sms_recipients: List[str] = field(default_factory=list)
	notes: Optional[str] = None
	student_name: Optional[str] = None
	
	@property
	def admission_id(self) -> str:
		return self.admission.id
	
	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> "AttendanceRecord":
		return cls(
			id=_record_id(data),
			admission=parse_admission_ref(data.get("admissionId")),
			date=parse_date(data.get("date")),
			status=data.get("status", "present"),
			sms_sent=bool(data.get("smsSent", False)),
			sms_recipients=list(data.get("smsRecipients") or []),
			notes=data.get("notes"),
			student_name=data.get("studentName"),
		)


@dataclass
class Exam:
	"""A scheduled exam."""
	id: str
	exam_name: str
	exam_type: str
	subject: str
	class_name: str
	exam_date: Optional[date]
	exam_time: str = ""
	batch_name: Optional[str] = None
	description: Optional[str] = None
	duration: Optional[int] = None
	status: str = "scheduled"
	schedule_sms_sent: bool = False
	result_sms_sent: bool = False
	
	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> "Exam":
		duration = parse_number(data.get("duration"))
		return cls(
			id=_record_id(data),
			exam_name=data.get("examName", ""),
			exam_type=data.get("examType", "other"),
			subject=data.get("subject", ""),
			class_name=data.get("class", ""),
			exam_date=parse_date(data.get("examDate")),
			exam_time=data.get("examTime", ""),
			batch_name=data.get("batchName") or None,
			description=data.get("description"),
			duration=int(duration) if duration is not None else None,
			status=data.get("status", "scheduled"),
			schedule_sms_sent=bool(data.get("scheduleSmsSent", False)),
			result_sms_sent=bool(data.get("resultSmsSent", False)),
		)
	
	def __str__(self) -> str:
		when = self.exam_date.isoformat() if self.exam_date else "TBD"
		return f"{self.exam_name} ({self.subject}) - {when}"


@dataclass
class ExamResult:
	"""A persisted result of one student in one exam."""
	id: str
	exam_id: str
	admission: AdmissionRef
	marks: float
	total_marks: float
	grade: Optional[str] = None
	present: bool = True
	absent_sms_sent: bool = False
	result_sms_sent: bool = False
	student_name: Optional[str] = None
	
	@property
	def admission_id(self) -> str:
		return self.admission.id
	
	@property
	def percentage(self) -> float:
		return compute_percentage(self.marks, self.total_marks)
	
	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> "ExamResult":
		exam = data.get("examId")
		exam_id = exam.get("_id") if isinstance(exam, dict) else exam
		return cls(
			id=_record_id(data),
			exam_id=str(exam_id or ""),
			admission=parse_admission_ref(data.get("admissionId")),
			marks=parse_number(data.get("marks")) or 0.0,
			total_marks=parse_number(data.get("totalMarks")) or 0.0,
			grade=data.get("grade") or None,
			present=bool(data.get("present", True)),
			absent_sms_sent=bool(data.get("absentSmsSent", False)),
			result_sms_sent=bool(data.get("resultSmsSent", False)),
			student_name=data.get("studentName"),
		)


@dataclass
class FeeRecord:
	"""Tuition fee for one student in one billing period."""
	id: str
	admission: AdmissionRef
	monthly_fee: float
	month: int
	year: int
	due_date: Optional[date] = None
	amount_paid: float = 0.0
	payment_date: Optional[date] = None
	payment_method: Optional[str] = None
	transaction_id: Optional[str] = None
	notes: Optional[str] = None
	payment_sms_sent: bool = False
	reminder_sms_sent: bool = False
	overdue_sms_sent: bool = False
	student_name: Optional[str] = None
	
	@property
	def admission_id(self) -> str:
		return self.admission.id
	
	@property
	def amount_due(self) -> float:
		return compute_amount_due(self.monthly_fee, self.amount_paid)
	
	def status_on(self, today: Optional[date] = None) -> str:
		return derive_fee_status(self.monthly_fee, self.amount_paid, self.due_date, today)
	
	@property
	def status(self) -> str:
		return self.status_on()
	
	@property
	def period(self) -> tuple:
		return (self.month, self.year)
	
	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> "FeeRecord":
		return cls(
			id=_record_id(data),
			admission=parse_admission_ref(data.get("admissionId")),
			monthly_fee=parse_number(data.get("monthlyFee")) or 0.0,
			month=int(data.get("month", 0)),
			year=int(data.get("year", 0)),
			due_date=parse_date(data.get("dueDate")),
			amount_paid=parse_number(data.get("amountPaid")) or 0.0,
			payment_date=parse_date(data.get("paymentDate")),
			payment_method=data.get("paymentMethod"),
			transaction_id=data.get("transactionId"),
			notes=data.get("notes"),
			payment_sms_sent=bool(data.get("paymentSmsSent", False)),
			reminder_sms_sent=bool(data.get("reminderSmsSent", False)),
			overdue_sms_sent=bool(data.get("overdueSmsSent", False)),
			student_name=data.get("studentName"),
		)


@dataclass
class QRCode:
	"""A stored QR code."""
	id: str
	name: str
	type: str
	content: str
	description: Optional[str] = None
	student_id: Optional[str] = None
	admission_id: Optional[str] = None
	exam_id: Optional[str] = None
	expires_at: Optional[date] = None
	is_active: bool = True
	metadata: Dict[str, Any] = field(default_factory=dict)
	
	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> "QRCode":
		return cls(
			id=_record_id(data),
			name=data.get("name", ""),
			type=data.get("type", "custom"),
			content=data.get("content", ""),
			description=data.get("description"),
			student_id=data.get("studentId"),
			admission_id=data.get("admissionId"),
			exam_id=data.get("examId"),
			expires_at=parse_date(data.get("expiresAt")),
			is_active=bool(data.get("isActive", True)),
			metadata=dict(data.get("metadata") or {}),
		)


@dataclass
class SmsLog:
	"""One entry of the SMS history."""
	id: str
	mobile_number: str
	message: str
	type: Optional[str] = None
	status: Optional[str] = None
	created_at: Optional[str] = None
	
	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> "SmsLog":
		return cls(
			id=_record_id(data),
			mobile_number=data.get("mobileNumber") or data.get("number") or "",
			message=data.get("message", ""),
			type=data.get("type"),
			status=data.get("status"),
			created_at=data.get("createdAt"),
		)
