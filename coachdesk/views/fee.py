"""Tuition fee view: billing period, payments and fee SMS."""

import asyncio
import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Any, Dict, List, Mapping, Optional, Tuple

from ..api.exceptions import CoachDeskValidationError
from ..api.models import BatchOutcome, FeeRecord, RosterMember
from ..api.utils import (
	FEE_STATUS_OVERDUE,
	FEE_STATUS_PAID,
	compact,
	compute_amount_due,
	derive_fee_status,
	format_number,
	parse_number,
)
from ..const import FEE_STATUSES
from ..reconcile import StatusBoard
from ..validation import BULK_FEE_SCHEMA, FEE_FORM_SCHEMA, PAYMENT_SCHEMA, validate
from .base import BaseView, RosterFilter, ViewContext, matches_search

_LOGGER = logging.getLogger(__name__)


@dataclass
class PaymentDraft:
	"""A payment as typed by the operator, not yet recorded."""
	amount_paid: str = ""
	payment_date: Optional[str] = None
	payment_method: str = "cash"
	transaction_id: str = ""
	notes: str = ""
	send_sms: bool = True

	@property
	def is_complete(self) -> bool:
		return parse_number(self.amount_paid) is not None

	@classmethod
	def from_fee(cls, fee: FeeRecord) -> "PaymentDraft":
		return cls(
			amount_paid=format_number(fee.amount_paid),
			payment_date=fee.payment_date.isoformat() if fee.payment_date else None,
			payment_method=fee.payment_method or "cash",
			transaction_id=fee.transaction_id or "",
			notes=fee.notes or "",
		)

	def to_form(self) -> Dict[str, Any]:
		return {
			"amount_paid": self.amount_paid,
			"payment_date": self.payment_date,
			"payment_method": self.payment_method,
			"transaction_id": self.transaction_id,
			"notes": self.notes,
			"send_sms": self.send_sms,
		}


def payment_payload(values: Mapping[str, Any]) -> Dict[str, Any]:
	return compact({
		"amountPaid": values["amount_paid"],
		"paymentDate": values.get("payment_date"),
		"paymentMethod": values.get("payment_method"),
		"transactionId": values.get("transaction_id"),
		"notes": values.get("notes"),
		"sendSms": values.get("send_sms"),
	})


class FeeView(BaseView):
	"""Fee records of one billing period (month, year)."""

	def __init__(
		self,
		client,
		context: Optional[ViewContext] = None,
		month: Optional[int] = None,
		year: Optional[int] = None,
		today: Optional[date] = None,
	):
		super().__init__(client, context)
		current = today or date.today()
		self.today = today
		self.month = month or current.month
		self.year = year or current.year
		self.filters = RosterFilter()
		self.status_filter: Optional[str] = None
		self.search = ""
		# No record, no default: students without a fee get no draft
		self.board: StatusBoard[PaymentDraft] = StatusBoard(lambda: None, context=(self.month, self.year))
		self.fees: List[FeeRecord] = []
		self.fee_by_admission: Dict[str, FeeRecord] = {}
		self.stats: Optional[Dict[str, Any]] = None

	@property
	def period(self) -> Tuple[int, int]:
		return (self.month, self.year)

	async def refresh(self) -> None:
		await self._load_roster(self.board, self.filters)
		await self.load_fees()
		await self.load_stats()

	async def load_roster(self) -> bool:
		return await self._load_roster(self.board, self.filters)

	async def load_fees(self) -> bool:
		"""Fetch the period's fee records and merge their payments as the snapshot."""
		requested = self.period
		async with self._transition():
			result = await self.client.fee.list(
				page=1,
				limit=self.context.roster_limit,
				month=requested[0],
				year=requested[1],
				status=self.status_filter,
				class_name=self.filters.class_name,
			)
		if self.board.context != requested:
			_LOGGER.debug(f"Dropping fees of {requested}, period changed to {self.board.context}")
			return False
		if not result.success:
			self.notifier.error(result.error or self.t("load_failed"))
			return False
		self.fees = result.data or []
		self.fee_by_admission = {fee.admission_id: fee for fee in self.fees}
		self.board.merge_snapshot({key: PaymentDraft.from_fee(fee) for key, fee in self.fee_by_admission.items()})
		return True

	async def load_stats(self) -> bool:
		async with self._transition():
			result = await self.client.fee.stats(month=self.month, year=self.year, class_name=self.filters.class_name)
		if result.success:
			self.stats = result.data
		return result.success

	async def set_period(self, month: int, year: int) -> None:
		"""Switch billing period; staged payments of the old period are dropped."""
		self.month, self.year = int(month), int(year)
		self.board.change_context(self.period)
		self.fees = []
		self.fee_by_admission = {}
		self.stats = None
		await self.load_fees()
		await self.load_stats()

	async def set_filters(
		self,
		class_name: Optional[str] = None,
		batch: Optional[str] = None,
		status: Optional[str] = None,
	) -> None:
		if status and status not in FEE_STATUSES:
			raise ValueError(f"Unknown fee status {status!r}")
		self.filters = RosterFilter(class_name=class_name or None, batch=batch or None)
		self.status_filter = status or None
		await self.refresh()

	def status_of(self, fee: FeeRecord) -> str:
		return fee.status_on(self.today)

	def draft_of(self, admission_id: str) -> Optional[PaymentDraft]:
		return self.board.get(admission_id)

	def preview(self, admission_id: str) -> Optional[Tuple[float, str]]:
		"""Amount due and status the fee would have once the shown payment is recorded."""
		fee = self.fee_by_admission.get(admission_id)
		if fee is None:
			return None
		draft = self.draft_of(admission_id)
		paid = parse_number(draft.amount_paid) if draft else None
		if paid is None:
			paid = fee.amount_paid
		return (
			compute_amount_due(fee.monthly_fee, paid),
			derive_fee_status(fee.monthly_fee, paid, fee.due_date, self.today),
		)

	async def create_fee(self, form: Mapping[str, Any]) -> bool:
		if not self._can_write("create_fee"):
			return False
		values = self._validate(FEE_FORM_SCHEMA, form)
		if values is None:
			return False
		body = {
			"admissionId": values["admission_id"],
			"monthlyFee": values["monthly_fee"],
			"dueDate": values["due_date"],
			"month": values["month"],
			"year": values["year"],
			"notes": values["notes"],
		}
		async with self._transition():
			result = await self.client.fee.create(body)
		if not self._report(result, "fee_create_failed", "fee_created"):
			return False
		await self.load_fees()
		await self.load_stats()
		return True

	async def create_bulk(self, form: Mapping[str, Any]) -> bool:
		"""Create the period's fee for every active student matching the filter."""
		if not self._can_write("create_bulk"):
			return False
		values = self._validate(BULK_FEE_SCHEMA, form)
		if values is None:
			return False
		async with self._transition():
			result = await self.client.fee.create_bulk(
				values["month"],
				values["year"],
				values["due_date"],
				class_name=values["class_name"],
				batch_name=values["batch_name"],
			)
		if not self._report(result, "bulk_fee_failed", "bulk_fee_created"):
			return False
		await self.load_fees()
		await self.load_stats()
		return True

	def stage_payment(self, admission_id: str, **changes: Any) -> PaymentDraft:
		"""Stage a payment for a student who has a fee record this period."""
		current = self.draft_of(admission_id)
		if current is None:
			if admission_id not in self.fee_by_admission:
				raise KeyError(f"No fee record for {admission_id} in {self.month}/{self.year}")
			current = PaymentDraft()
		if "amount_paid" in changes and changes["amount_paid"] is not None:
			changes["amount_paid"] = str(changes["amount_paid"])
		draft = replace(current, **changes)
		self.board.stage(admission_id, draft)
		return draft

	async def record_payment(self, fee_id: str, form: Mapping[str, Any]) -> bool:
		"""Record one payment straight away."""
		if not self._can_write("record_payment"):
			return False
		values = self._validate(PAYMENT_SCHEMA, form)
		if values is None:
			return False
		async with self._transition():
			result = await self.client.fee.update(fee_id, payment_payload(values))
		if not self._report(result, "payment_failed", "payment_updated"):
			return False
		admission_ids = [fee.admission_id for fee in self.fees if fee.id == fee_id]
		self.board.mark_committed(admission_ids)
		await self.load_fees()
		await self.load_stats()
		return True

	async def commit_payments(self) -> bool:
		"""Send every staged, complete payment of the period, one request per fee record.

		Rows that fail stay staged so they can be sent again.
		"""
		if not self._can_write("commit_payments"):
			return False
		entries = [
			(member, draft)
			for member, draft in self.board.committable(lambda draft: draft.is_complete)
			if self.board.is_touched(member.id) and member.id in self.fee_by_admission
		]
		if not entries:
			self.notifier.error(self.t("no_payments"))
			return False

		errors: Dict[str, str] = {}
		updates: List[Tuple[str, FeeRecord, Dict[str, Any]]] = []
		for member, draft in entries:
			try:
				values = validate(PAYMENT_SCHEMA, draft.to_form())
			except CoachDeskValidationError as err:
				for field_name, message in err.errors.items():
					errors[f"{member.id}.{field_name}"] = message
				continue
			updates.append((member.id, self.fee_by_admission[member.id], payment_payload(values)))
		if errors:
			self.field_errors = errors
			self.notifier.error(self.t("validation_failed"))
			return False
		self.field_errors = {}

		async with self._transition():
			results = await asyncio.gather(*(self.client.fee.update(fee.id, body) for _, fee, body in updates))
		succeeded = [key for (key, _, _), result in zip(updates, results) if result.success]
		failures = [result for result in results if not result.success]
		outcome = BatchOutcome(accepted=len(succeeded), failed=len(failures))
		_LOGGER.debug(f"Payments for {self.month}/{self.year}: {outcome}")

		if not succeeded:
			self.notifier.error(failures[0].error or self.t("payment_failed"))
			return False
		self.board.mark_committed(succeeded)
		if outcome.is_partial:
			self.notifier.warning(self.t("batch_partial", accepted=outcome.accepted, failed=outcome.failed))
		else:
			self.notifier.success(self.t("payments_saved", count=outcome.accepted))
		await self.load_fees()
		await self.load_stats()
		return not outcome.is_partial

	async def delete_fee(self, fee_id: str) -> bool:
		if not self._can_write("delete_fee"):
			return False
		if not await self._confirm("fee_delete_confirm"):
			return False
		async with self._transition():
			result = await self.client.fee.delete(fee_id)
		if not self._report(result, "fee_delete_failed", "fee_deleted"):
			return False
		await self.load_fees()
		await self.load_stats()
		return True

	async def send_reminder_sms(self, fee: FeeRecord) -> bool:
		if not self._can_write("send_reminder_sms"):
			return False
		if fee.reminder_sms_sent:
			self.notifier.info(self.t("sms_already_sent"))
			return False
		async with self._transition():
			result = await self.client.fee.send_reminder_sms(fee_id=fee.id)
		if not self._report(result, "sms_failed", "reminder_sms_sent"):
			return False
		await self.load_fees()
		return True

	async def send_overdue_sms(self, fee: FeeRecord) -> bool:
		if not self._can_write("send_overdue_sms"):
			return False
		if fee.overdue_sms_sent:
			self.notifier.info(self.t("sms_already_sent"))
			return False
		if self.status_of(fee) != FEE_STATUS_OVERDUE:
			self.notifier.info(self.t("fee_not_overdue"))
			return False
		async with self._transition():
			result = await self.client.fee.send_overdue_sms(fee_id=fee.id)
		if not self._report(result, "sms_failed", "overdue_sms_sent"):
			return False
		await self.load_fees()
		return True

	async def send_payment_sms(self, fee: FeeRecord) -> bool:
		if not self._can_write("send_payment_sms"):
			return False
		if fee.payment_sms_sent:
			self.notifier.info(self.t("sms_already_sent"))
			return False
		if self.status_of(fee) != FEE_STATUS_PAID:
			self.notifier.info(self.t("fee_not_paid"))
			return False
		async with self._transition():
			result = await self.client.fee.send_payment_sms(fee.id)
		if not self._report(result, "sms_failed", "payment_sms_sent"):
			return False
		await self.load_fees()
		return True

	def rows(self) -> List[Tuple[RosterMember, Optional[FeeRecord], Optional[PaymentDraft]]]:
		"""Roster rows matching the search box: member, fee record of the period, shown payment."""
		return [
			(member, self.fee_by_admission.get(member.id), self.draft_of(member.id))
			for member in self.board.roster
			if matches_search(member, self.search)
		]
