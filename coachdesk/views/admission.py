"""Admission (student roster) management view."""

import logging
from typing import Any, Dict, List, Mapping, Optional

from ..api.models import Pagination, RosterMember
from ..const import DEFAULT_PAGE_SIZE
from ..validation import ADMISSION_FORM_SCHEMA
from .base import BaseView, ViewContext

_LOGGER = logging.getLogger(__name__)


class AdmissionView(BaseView):
	"""Paginated admission list with search, filters and CRUD."""

	def __init__(self, client, context: Optional[ViewContext] = None, page_size: int = DEFAULT_PAGE_SIZE):
		super().__init__(client, context)
		self.admissions: List[RosterMember] = []
		self.pagination: Optional[Pagination] = None
		self.page = 1
		self.page_size = page_size
		self.search = ""
		self.class_name: Optional[str] = None
		self.batch: Optional[str] = None
		self.status: Optional[str] = None
		self.stats: Optional[Dict[str, Any]] = None

	async def load(self, page: Optional[int] = None) -> bool:
		if page is not None:
			self.page = max(page, 1)
		async with self._transition():
			result = await self.client.admission.list(
				page=self.page,
				limit=self.page_size,
				search=self.search,
				class_name=self.class_name,
				batch=self.batch,
				status=self.status,
			)
		if not result.success:
			self.notifier.error(result.error or self.t("load_failed"))
			return False
		self.admissions = result.data or []
		self.pagination = result.pagination
		return True

	async def set_search(self, search: str) -> bool:
		self.search = search.strip()
		return await self.load(page=1)

	async def set_filters(self, class_name: Optional[str] = None, batch: Optional[str] = None, status: Optional[str] = None) -> bool:
		self.class_name = class_name or None
		self.batch = batch or None
		self.status = status or None
		return await self.load(page=1)

	async def next_page(self) -> bool:
		if self.pagination is None or not self.pagination.has_next:
			return False
		return await self.load(page=self.page + 1)

	async def prev_page(self) -> bool:
		if self.page <= 1:
			return False
		return await self.load(page=self.page - 1)

	async def load_stats(self) -> bool:
		async with self._transition():
			result = await self.client.admission.stats()
		if result.success:
			self.stats = result.data
		return result.success

	async def create(self, form: Mapping[str, Any]) -> bool:
		if not self._can_write("create"):
			return False
		values = self._validate(ADMISSION_FORM_SCHEMA, form)
		if values is None:
			return False
		async with self._transition():
			result = await self.client.admission.create(values)
		if not self._report(result, "admission_create_failed", "admission_created"):
			return False
		await self.load()
		await self.load_stats()
		return True

	async def update(self, admission_id: str, form: Mapping[str, Any]) -> bool:
		if not self._can_write("update"):
			return False
		values = self._validate(ADMISSION_FORM_SCHEMA, form)
		if values is None:
			return False
		async with self._transition():
			result = await self.client.admission.update(admission_id, values)
		if not self._report(result, "admission_update_failed", "admission_updated"):
			return False
		await self.load()
		await self.load_stats()
		return True

	async def delete(self, admission_id: str) -> bool:
		if not self._can_write("delete"):
			return False
		if not await self._confirm("admission_delete_confirm"):
			return False
		async with self._transition():
			result = await self.client.admission.delete(admission_id)
		if not self._report(result, "admission_delete_failed", "admission_deleted"):
			return False
		# the last row of a page may be gone
		if len(self.admissions) <= 1 and self.page > 1:
			self.page -= 1
		await self.load()
		await self.load_stats()
		return True
