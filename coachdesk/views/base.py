"""Shared plumbing for the dashboard views."""

import inspect
import logging
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

from ..api.exceptions import CoachDeskValidationError
from ..api.models import ApiResult, RosterMember
from ..const import ADMISSION_ACTIVE, DEFAULT_ROSTER_LIMIT
from ..i18n import LanguageContext
from ..notify import ConfirmPrompt, Notifier, deny_all
from ..validation import validate

_LOGGER = logging.getLogger(__name__)


@dataclass
class ViewContext:
	"""Everything a view needs from the composition root."""
	language: LanguageContext = field(default_factory=LanguageContext)
	notifier: Notifier = field(default_factory=Notifier)
	confirm: ConfirmPrompt = deny_all
	dark_mode: bool = False
	roster_limit: int = DEFAULT_ROSTER_LIMIT
	
	@classmethod
	def from_settings(
		cls,
		settings,
		notifier: Optional[Notifier] = None,
		confirm: Optional[ConfirmPrompt] = None,
		dark_mode: bool = False,
	) -> "ViewContext":
		return cls(
			language=LanguageContext(settings.language),
			notifier=notifier or Notifier(),
			confirm=confirm or deny_all,
			dark_mode=dark_mode,
			roster_limit=settings.roster_limit,
		)


@dataclass
class RosterFilter:
	"""Which students are under consideration, independent of date/exam/period."""
	class_name: Optional[str] = None
	batch: Optional[str] = None
	status: Optional[str] = ADMISSION_ACTIVE


def matches_search(member: RosterMember, search: Optional[str]) -> bool:
	"""Case-insensitive match on name, student id, class and batch."""
	if not search:
		return True
	needle = search.lower()
	haystack = (member.name, member.student_id, member.class_name, member.batch_name)
	return any(needle in value.lower() for value in haystack if value)


class BaseView:
	"""Base class for views: pending flag, toasts, confirm prompts, validation."""
	
	def __init__(self, client, context: Optional[ViewContext] = None):
		self.client = client
		self.context = context or ViewContext()
		self.field_errors: Dict[str, str] = {}
		self._inflight = 0
		
	@property
	def is_pending(self) -> bool:
		"""True while any request of this view is in flight; write controls are disabled."""
		return self._inflight > 0
		
	@property
	def notifier(self) -> Notifier:
		return self.context.notifier
		
	def t(self, key: str, **kwargs) -> str:
		return self.context.language.t(key, **kwargs)
		
	@asynccontextmanager
	async def _transition(self):
		self._inflight += 1
		try:
			yield
		finally:
			self._inflight -= 1
			
	def _can_write(self, action: str) -> bool:
		if self.is_pending:
			_LOGGER.warning(f"{type(self).__name__}: {action} ignored, a request is already in flight")
			return False
		return True
		
	async def _confirm(self, key: str) -> bool:
		answer = self.context.confirm(self.t(key))
		if inspect.isawaitable(answer):
			answer = await answer
		if not answer:
			_LOGGER.debug(f"{type(self).__name__}: operator declined {key}")
		return bool(answer)
		
	def _report(self, result: ApiResult, failure_key: str, success_key: Optional[str] = None, **kwargs) -> bool:
		"""Toast the outcome of a request; returns ``result.success``."""
		if result.success:
			if success_key:
				self.notifier.success(self.t(success_key, **kwargs))
			return True
		self.notifier.error(result.error or self.t(failure_key))
		return False
		
	def _validate(self, schema, data: Mapping[str, Any], failure_key: str = "validation_failed") -> Optional[Dict[str, Any]]:
		"""Validate a form; on failure fill ``field_errors``, toast once and return None."""
		try:
			values = validate(schema, data)
		except CoachDeskValidationError as err:
			self.field_errors = err.errors
			self.notifier.error(self.t(failure_key))
			return None
		self.field_errors = {}
		return values
			
	async def _load_roster(self, board, filters: RosterFilter, search: Optional[str] = None) -> bool:
		"""Fetch the roster in one page and seed ``board``; all or nothing."""
		async with self._transition():
			result = await self.client.admission.list(
				page=1,
				limit=self.context.roster_limit,
				search=search,
				class_name=filters.class_name,
				batch=filters.batch,
				status=filters.status or ADMISSION_ACTIVE,
			)
		if not result.success:
			self.notifier.error(result.error or self.t("load_failed"))
			return False
		board.seed_roster(result.data or [])
		return True
