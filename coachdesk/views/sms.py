"""Bulk SMS view: compose forms, history and statistics."""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from ..api.models import ApiResult, Pagination, SmsLog
from ..api.utils import split_mobile_numbers
from ..validation import BULK_SMS_SCHEMA, CUSTOM_SMS_SCHEMA, SINGLE_SMS_SCHEMA, STUDENTS_SMS_SCHEMA
from .base import BaseView, ViewContext

_LOGGER = logging.getLogger(__name__)


class BulkSmsView(BaseView):

	def __init__(self, client, context: Optional[ViewContext] = None, page_size: int = 20):
		super().__init__(client, context)
		self.history: List[SmsLog] = []
		self.pagination: Optional[Pagination] = None
		self.page = 1
		self.page_size = page_size
		self.history_filters: Dict[str, Any] = {}
		self.stats: Optional[Dict[str, Any]] = None
		self.last_result: Optional[ApiResult] = None

	def _sent(self, result: ApiResult, failure_key: str, success_key: str) -> bool:
		# the backend's own message wins, it carries the recipient count
		self.last_result = result
		if result.success:
			self.notifier.success(result.message or self.t(success_key))
			return True
		self.notifier.error(result.error or self.t(failure_key))
		return False

	async def send_single(self, form: Mapping[str, Any]) -> bool:
		if not self._can_write("send_single"):
			return False
		values = self._validate(SINGLE_SMS_SCHEMA, form, "sms_number_message_required")
		if values is None:
			return False
		async with self._transition():
			result = await self.client.sms.send(
				values["mobile_number"],
				values["message"],
				sender_id=values["sender_id"],
				api_key=values["api_key"],
			)
		return await self._after_send(self._sent(result, "sms_failed", "sms_sent"))

	async def send_bulk(self, form: Mapping[str, Any]) -> bool:
		"""Send one message to numbers typed one per line or comma separated."""
		if not self._can_write("send_bulk"):
			return False
		data = dict(form)
		numbers = data.get("mobile_numbers")
		if isinstance(numbers, str):
			data["mobile_numbers"] = split_mobile_numbers(numbers)
		values = self._validate(BULK_SMS_SCHEMA, data, "sms_numbers_message_required")
		if values is None:
			return False
		async with self._transition():
			result = await self.client.sms.send_bulk(
				values["mobile_numbers"],
				values["message"],
				sender_id=values["sender_id"],
				api_key=values["api_key"],
			)
		return await self._after_send(self._sent(result, "bulk_sms_failed", "bulk_sms_sent"))

	async def send_custom(
		self,
		rows: Iterable[Mapping[str, Any]],
		sender_id: Optional[str] = None,
		api_key: Optional[str] = None,
	) -> bool:
		"""Send a different message per number; rows missing either part are left out."""
		if not self._can_write("send_custom"):
			return False
		messages = [
			{"number": str(row.get("number") or "").strip(), "message": str(row.get("message") or "").strip()}
			for row in rows
		]
		messages = [row for row in messages if row["number"] and row["message"]]
		values = self._validate(
			CUSTOM_SMS_SCHEMA,
			{"messages": messages, "sender_id": sender_id, "api_key": api_key},
			"sms_one_message_required",
		)
		if values is None:
			return False
		async with self._transition():
			result = await self.client.sms.send_bulk_custom(
				values["messages"],
				sender_id=values["sender_id"],
				api_key=values["api_key"],
			)
		return await self._after_send(self._sent(result, "bulk_sms_failed", "bulk_sms_sent"))

	async def send_to_students(self, form: Mapping[str, Any]) -> bool:
		"""Message the guardians of every student in a class and/or batch."""
		if not self._can_write("send_to_students"):
			return False
		values = self._validate(STUDENTS_SMS_SCHEMA, form, "sms_message_required")
		if values is None:
			return False
		async with self._transition():
			result = await self.client.sms.send_to_students(
				values["message"],
				class_name=values["class_name"],
				batch_name=values["batch_name"],
				sender_id=values["sender_id"],
				api_key=values["api_key"],
			)
		return await self._after_send(self._sent(result, "bulk_sms_failed", "bulk_sms_sent"))

	async def _after_send(self, sent: bool) -> bool:
		if sent:
			await self.load_stats()
		return sent

	async def load_history(self, page: Optional[int] = None, **filters: Any) -> bool:
		if page is not None:
			self.page = max(page, 1)
		if filters:
			self.history_filters = {key: value for key, value in filters.items() if value not in (None, "")}
		async with self._transition():
			result = await self.client.sms.history(page=self.page, limit=self.page_size, **self.history_filters)
		if not result.success:
			self.notifier.error(result.error or self.t("load_failed"))
			return False
		self.history = result.data or []
		self.pagination = result.pagination
		return True

	async def next_page(self) -> bool:
		if self.pagination is None or not self.pagination.has_next:
			return False
		return await self.load_history(page=self.page + 1)

	async def prev_page(self) -> bool:
		if self.page <= 1:
			return False
		return await self.load_history(page=self.page - 1)

	async def load_stats(self) -> bool:
		async with self._transition():
			result = await self.client.sms.stats()
		if result.success:
			self.stats = result.data
		return result.success
