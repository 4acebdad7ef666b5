"""Exam list and result entry view."""

import logging
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Mapping, Optional

from ..api.exceptions import CoachDeskValidationError
from ..api.models import BatchOutcome, Exam, ExamResult, Pagination
from ..api.utils import compact, compute_percentage, format_number, parse_number
from ..const import DEFAULT_PAGE_SIZE, EXAM_STATUSES
from ..reconcile import StatusBoard
from ..validation import EXAM_FORM_SCHEMA, RESULT_ENTRY_SCHEMA, validate
from .base import BaseView, RosterFilter, ViewContext

_LOGGER = logging.getLogger(__name__)


@dataclass
class ResultDraft:
	"""Marks as typed by the operator; strings until validated."""
	marks: str = ""
	total_marks: str = ""
	grade: str = ""
	present: bool = True

	@property
	def is_complete(self) -> bool:
		"""Both marks and total marks hold a number."""
		return parse_number(self.marks) is not None and parse_number(self.total_marks) is not None

	@property
	def percentage(self) -> Optional[float]:
		if not self.is_complete:
			return None
		return compute_percentage(parse_number(self.marks), parse_number(self.total_marks))

	@classmethod
	def from_result(cls, result: ExamResult) -> "ResultDraft":
		return cls(
			marks=format_number(result.marks),
			total_marks=format_number(result.total_marks),
			grade=result.grade or "",
			present=result.present,
		)

	def to_form(self) -> Dict[str, Any]:
		return {
			"marks": self.marks,
			"total_marks": self.total_marks,
			"grade": self.grade,
			"present": self.present,
		}


def exam_payload(values: Mapping[str, Any]) -> Dict[str, Any]:
	"""Validated exam form -> request body."""
	return compact({
		"examName": values["exam_name"],
		"examType": values["exam_type"],
		"subject": values["subject"],
		"class": values["class_name"],
		"batchName": values.get("batch_name"),
		"description": values.get("description"),
		"examDate": values["exam_date"],
		"examTime": values["exam_time"],
		"duration": values.get("duration"),
	})


class ExamView(BaseView):
	"""Exam scheduling plus per-student result entry for one selected exam."""

	def __init__(self, client, context: Optional[ViewContext] = None):
		super().__init__(client, context)
		self.exams: List[Exam] = []
		self.pagination: Optional[Pagination] = None
		self.page = 1
		self.page_size = DEFAULT_PAGE_SIZE
		self.filters: Dict[str, Optional[str]] = {}
		self.selected_exam: Optional[Exam] = None
		self.board: StatusBoard[ResultDraft] = StatusBoard(ResultDraft)
		self.results: Dict[str, ExamResult] = {}
		self.stats: Optional[Dict[str, Any]] = None

	async def load_exams(self, page: Optional[int] = None) -> bool:
		if page is not None:
			self.page = max(page, 1)
		async with self._transition():
			result = await self.client.exam.list(page=self.page, limit=self.page_size, **self.filters)
		if not result.success:
			self.notifier.error(result.error or self.t("load_failed"))
			return False
		self.exams = result.data or []
		self.pagination = result.pagination
		return True

	async def set_filters(
		self,
		class_name: Optional[str] = None,
		batch_name: Optional[str] = None,
		subject: Optional[str] = None,
		exam_type: Optional[str] = None,
		status: Optional[str] = None,
	) -> bool:
		if status and status not in EXAM_STATUSES:
			raise ValueError(f"Unknown exam status {status!r}")
		self.filters = {
			key: value or None
			for key, value in (
				("class_name", class_name),
				("batch_name", batch_name),
				("subject", subject),
				("exam_type", exam_type),
				("status", status),
			)
		}
		return await self.load_exams(page=1)

	async def create_exam(self, form: Mapping[str, Any]) -> bool:
		if not self._can_write("create_exam"):
			return False
		values = self._validate(EXAM_FORM_SCHEMA, form)
		if values is None:
			return False
		async with self._transition():
			result = await self.client.exam.create(exam_payload(values))
		if not self._report(result, "exam_create_failed", "exam_created"):
			return False
		await self.load_exams()
		return True

	async def update_exam(self, exam_id: str, form: Mapping[str, Any]) -> bool:
		if not self._can_write("update_exam"):
			return False
		values = self._validate(EXAM_FORM_SCHEMA, form)
		if values is None:
			return False
		async with self._transition():
			result = await self.client.exam.update(exam_id, exam_payload(values))
		if not self._report(result, "exam_update_failed", "exam_updated"):
			return False
		await self.load_exams()
		return True

	async def delete_exam(self, exam_id: str) -> bool:
		if not self._can_write("delete_exam"):
			return False
		if not await self._confirm("exam_delete_confirm"):
			return False
		async with self._transition():
			result = await self.client.exam.delete(exam_id)
		if not self._report(result, "exam_delete_failed", "exam_deleted"):
			return False
		if self.selected_exam is not None and self.selected_exam.id == exam_id:
			self.close_results()
		await self.load_exams()
		return True

	async def send_schedule_sms(self, exam: Exam) -> bool:
		"""Announce the exam schedule to the guardians, once per exam."""
		if not self._can_write("send_schedule_sms"):
			return False
		if exam.schedule_sms_sent:
			self.notifier.info(self.t("sms_already_sent"))
			return False
		async with self._transition():
			result = await self.client.exam.send_schedule_sms(exam.id)
		if not self._report(result, "sms_failed", "exam_schedule_sms_sent"):
			return False
		await self.load_exams()
		return True

	# Results mode

	async def open_results(self, exam: Exam) -> bool:
		"""Switch to result entry for ``exam``; drafts of another exam are dropped."""
		self.selected_exam = exam
		self.board.change_context(exam.id)
		self.results = {}
		self.stats = None
		filters = RosterFilter(class_name=exam.class_name or None, batch=exam.batch_name)
		if not await self._load_roster(self.board, filters):
			return False
		loaded = await self.load_results()
		await self.load_stats()
		return loaded

	def close_results(self) -> None:
		self.selected_exam = None
		self.board.change_context(None)
		self.results = {}
		self.stats = None

	async def load_results(self) -> bool:
		if self.selected_exam is None:
			return False
		requested = self.selected_exam.id
		async with self._transition():
			result = await self.client.exam.results(exam_id=requested, limit=self.context.roster_limit)
		if self.board.context != requested:
			_LOGGER.debug(f"Dropping results of exam {requested}, another exam is open")
			return False
		if not result.success:
			self.notifier.error(result.error or self.t("load_failed"))
			return False
		self.results = {item.admission_id: item for item in result.data or []}
		self.board.merge_snapshot({key: ResultDraft.from_result(item) for key, item in self.results.items()})
		return True

	async def load_stats(self) -> bool:
		if self.selected_exam is None:
			return False
		async with self._transition():
			result = await self.client.exam.stats(self.selected_exam.id)
		if result.success:
			self.stats = result.data
		return result.success

	def draft_of(self, admission_id: str) -> ResultDraft:
		return self.board.get(admission_id) or ResultDraft()

	def stage_result(
		self,
		admission_id: str,
		marks: Optional[Any] = None,
		total_marks: Optional[Any] = None,
		grade: Optional[str] = None,
		present: Optional[bool] = None,
	) -> ResultDraft:
		"""Stage one student's marks; unspecified fields keep their shown value."""
		changes: Dict[str, Any] = {}
		if marks is not None:
			changes["marks"] = str(marks)
		if total_marks is not None:
			changes["total_marks"] = str(total_marks)
		if grade is not None:
			changes["grade"] = grade
		if present is not None:
			changes["present"] = present
		draft = replace(self.draft_of(admission_id), **changes)
		self.board.stage(admission_id, draft)
		return draft

	def percentage_of(self, admission_id: str) -> Optional[float]:
		return self.draft_of(admission_id).percentage

	async def commit_results(self) -> bool:
		"""Send every complete draft of the open exam in one batch.

		Drafts missing marks or total marks are skipped. A complete draft
		that fails validation blocks the whole send; its messages land in
		``field_errors`` under ``"<admission id>.<field>"``.
		"""
		if not self._can_write("commit_results"):
			return False
		if self.selected_exam is None:
			self.notifier.error(self.t("no_results"))
			return False
		entries = self.board.committable(lambda draft: draft.is_complete)
		if not entries:
			self.notifier.error(self.t("no_results"))
			return False

		errors: Dict[str, str] = {}
		rows = []
		for member, draft in entries:
			try:
				values = validate(RESULT_ENTRY_SCHEMA, draft.to_form())
			except CoachDeskValidationError as err:
				for field_name, message in err.errors.items():
					errors[f"{member.id}.{field_name}"] = message
				continue
			rows.append({
				"admissionId": member.id,
				"marks": values["marks"],
				"totalMarks": values["total_marks"],
				"grade": values["grade"],
				"present": values["present"],
			})
		if errors:
			self.field_errors = errors
			self.notifier.error(self.t("validation_failed"))
			return False
		self.field_errors = {}

		async with self._transition():
			result = await self.client.exam.create_results_batch(self.selected_exam.id, rows)
		if not self._report(result, "results_failed"):
			return False
		outcome = BatchOutcome.from_response(result.data, len(rows))
		self.board.mark_committed(outcome.committed([member.id for member, _ in entries]))
		if outcome.is_partial:
			self.notifier.warning(self.t("batch_partial", accepted=outcome.accepted, failed=outcome.failed))
		else:
			self.notifier.success(self.t("results_saved", count=len(rows)))
		await self.load_results()
		await self.load_stats()
		return True

	async def send_result_sms(self, admission_id: str) -> bool:
		"""Send a saved result to the guardians, once per result."""
		if not self._can_write("send_result_sms"):
			return False
		saved = self.results.get(admission_id)
		if self.selected_exam is None or saved is None:
			self.notifier.error(self.t("no_results"))
			return False
		if saved.result_sms_sent:
			self.notifier.info(self.t("sms_already_sent"))
			return False
		async with self._transition():
			result = await self.client.exam.send_result_sms(self.selected_exam.id, admission_id=admission_id)
		if not self._report(result, "sms_failed", "result_sms_sent"):
			return False
		await self.load_results()
		return True
