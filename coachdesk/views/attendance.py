"""Daily attendance view."""

import logging
from datetime import date
from typing import Any, Dict, List, Optional, Tuple, Union

from ..api.models import AttendanceRecord, BatchOutcome, RosterMember
from ..api.utils import parse_date
from ..const import ATTENDANCE_ABSENT, ATTENDANCE_PRESENT, REPORT_PERIODS
from ..reconcile import StatusBoard
from ..validation import ATTENDANCE_SCHEMA
from .base import BaseView, RosterFilter, ViewContext, matches_search

_LOGGER = logging.getLogger(__name__)


class AttendanceView(BaseView):
	"""Marks a class/batch present or absent for one date."""

	def __init__(self, client, context: Optional[ViewContext] = None, on: Union[date, str, None] = None):
		super().__init__(client, context)
		self.selected_date: date = parse_date(on) or date.today()
		self.filters = RosterFilter()
		self.search = ""
		self.board: StatusBoard[str] = StatusBoard(lambda: ATTENDANCE_PRESENT, context=self.selected_date)
		self.records: Dict[str, AttendanceRecord] = {}
		self.stats: Optional[Dict[str, Any]] = None
		self.report: Optional[Dict[str, Any]] = None
		self.report_period = "month"
		self.selected_student: Optional[str] = None

	@property
	def roster(self) -> List[RosterMember]:
		return self.board.roster

	async def refresh(self) -> None:
		"""Load roster, persisted marks and totals for the selected date."""
		await self.load_roster()
		await self.load_snapshot()
		await self.load_stats()

	async def load_roster(self) -> bool:
		# search only narrows rows(); the whole roster is committed
		return await self._load_roster(self.board, self.filters)

	async def load_snapshot(self) -> bool:
		"""Fetch persisted marks for the selected date and merge them."""
		requested = self.selected_date
		async with self._transition():
			result = await self.client.attendance.list(
				page=1,
				limit=self.context.roster_limit,
				start_date=requested,
				end_date=requested,
				class_name=self.filters.class_name,
				batch_name=self.filters.batch,
			)
		if requested != self.selected_date:
			_LOGGER.debug(f"Dropping attendance snapshot for {requested}, date changed to {self.selected_date}")
			return False
		if not result.success:
			self.notifier.error(result.error or self.t("load_failed"))
			return False
		records = {record.admission_id: record for record in result.data or []}
		self.records = records
		self.board.merge_snapshot({key: record.status for key, record in records.items()})
		return True

	async def load_stats(self) -> bool:
		async with self._transition():
			result = await self.client.attendance.stats(
				start_date=self.selected_date,
				end_date=self.selected_date,
				class_name=self.filters.class_name,
				batch_name=self.filters.batch,
			)
		if result.success:
			self.stats = result.data
		return result.success

	async def set_date(self, on: Union[date, str]) -> None:
		"""Switch to another day; staged marks of the previous day are dropped."""
		new_date = parse_date(on)
		if new_date is None:
			raise ValueError(f"Invalid date: {on!r}")
		self.selected_date = new_date
		self.board.change_context(new_date)
		self.records = {}
		self.stats = None
		await self.load_snapshot()
		await self.load_stats()

	async def set_filters(self, class_name: Optional[str] = None, batch: Optional[str] = None, status: Optional[str] = None) -> None:
		self.filters = RosterFilter(class_name=class_name or None, batch=batch or None, status=status or "active")
		await self.refresh()

	def status_of(self, admission_id: str) -> str:
		return self.board.get(admission_id) or ATTENDANCE_PRESENT

	def stage(self, admission_id: str, status: str) -> None:
		"""Stage a mark locally; nothing is sent until :meth:`commit`."""
		values = self._validate(ATTENDANCE_SCHEMA, {"admission_id": admission_id, "status": status})
		if values is None:
			raise ValueError(f"Invalid attendance status {status!r}")
		self.board.stage(values["admission_id"], values["status"])

	def toggle(self, admission_id: str) -> str:
		status = ATTENDANCE_ABSENT if self.status_of(admission_id) == ATTENDANCE_PRESENT else ATTENDANCE_PRESENT
		self.stage(admission_id, status)
		return status

	def mark_all(self, status: str) -> None:
		for member in self.roster:
			self.stage(member.id, status)

	async def mark(self, admission_id: str, status: str) -> bool:
		"""Write one student's mark immediately.

		The mark is shown at once; if the write fails, the staged value is
		dropped and the day's marks are reloaded from the server.
		"""
		if not self._can_write("mark"):
			return False
		self.stage(admission_id, status)
		async with self._transition():
			result = await self.client.attendance.mark(admission_id, self.selected_date, status)
		if not self._report(result, "attendance_failed", "attendance_marked"):
			self.board.discard(admission_id)
			await self.load_snapshot()
			return False
		self.board.mark_committed([admission_id])
		await self.load_snapshot()
		await self.load_stats()
		return True

	async def commit(self) -> bool:
		"""Send every roster member's shown mark in one batch request."""
		if not self._can_write("commit"):
			return False
		entries = self.board.committable()
		if not entries:
			self.notifier.error(self.t("no_students_selected"))
			return False
		rows = [{"admissionId": member.id, "status": status} for member, status in entries]
		async with self._transition():
			result = await self.client.attendance.mark_batch(self.selected_date, rows)
		if not self._report(result, "attendance_failed"):
			return False

		outcome = BatchOutcome.from_response(result.data, len(rows))
		self.board.mark_committed(outcome.committed([member.id for member, _ in entries]))
		if outcome.is_partial:
			self.notifier.warning(self.t("batch_partial", accepted=outcome.accepted, failed=outcome.failed))
		else:
			self.notifier.success(self.t("attendance_batch_marked", count=len(rows)))
		await self.load_snapshot()
		await self.load_stats()
		return True

	def sms_sent(self, admission_id: str) -> bool:
		record = self.records.get(admission_id)
		return bool(record and record.sms_sent)

	async def load_report(self, admission_id: str, period: Optional[str] = None) -> bool:
		period = period or self.report_period
		if period not in REPORT_PERIODS:
			raise ValueError(f"Unknown report period {period!r}")
		self.report_period = period
		async with self._transition():
			result = await self.client.attendance.report(admission_id=admission_id, period=period)
		if not result.success or not result.data:
			self.notifier.error(result.error or self.t("report_failed"))
			return False
		self.report = result.data
		self.selected_student = admission_id
		return True

	async def send_report_sms(self, admission_id: str) -> bool:
		"""Send the attendance report to the guardians, once per record."""
		if not self._can_write("send_report_sms"):
			return False
		if self.sms_sent(admission_id):
			self.notifier.info(self.t("sms_already_sent"))
			return False
		async with self._transition():
			result = await self.client.attendance.send_report_sms(admission_id=admission_id, period=self.report_period)
		if not self._report(result, "sms_failed", "sms_sent"):
			return False
		await self.load_snapshot()
		return True

	def rows(self) -> List[Tuple[RosterMember, str, Optional[AttendanceRecord]]]:
		"""Roster rows matching the search box: member, shown status, persisted record."""
		return [
			(member, self.status_of(member.id), self.records.get(member.id))
			for member in self.roster
			if matches_search(member, self.search)
		]
