"""Per-student view state: roster, server snapshot and staged edits.

A :class:`StatusBoard` tracks one temporal context at a time (a date for
attendance, an exam for results, a billing period for fees). What the
operator sees for a student is, in order of precedence:

1. a value staged since the last successful commit (``touched``),
2. the value in the last loaded server snapshot,
3. the default seeded from the roster.
"""

import copy
import logging
from typing import Any, Callable, Dict, Generic, Hashable, Iterable, Iterator, List, Optional, Set, Tuple, TypeVar

from .api.models import RosterMember

_LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


class StatusBoard(Generic[T]):
	"""Overlay of staged edits on top of the last server snapshot."""

	def __init__(self, default_factory: Callable[[], Optional[T]], context: Hashable = None):
		"""Create an empty board.

		Args:
			default_factory: value for a roster member with no persisted record,
				or None when such members should have no entry at all
			context: the initial temporal context key
		"""
		self._default_factory = default_factory
		self.context = context
		self.roster: List[RosterMember] = []
		self._overlay: Dict[str, T] = {}
		self._snapshot: Dict[str, T] = {}
		self._touched: Set[str] = set()

	def _default(self) -> Optional[T]:
		return self._default_factory()

	def seed_roster(self, members: Iterable[RosterMember]) -> None:
		"""Replace the roster and give defaults to members with no entry yet.

		Existing overlay entries win over defaults, so a background roster
		refresh never clobbers what the operator is editing.
		"""
		self.roster = list(members)
		added = 0
		for member in self.roster:
			if member.id in self._overlay:
				continue
			default = self._default()
			if default is None:
				continue
			self._overlay[member.id] = default
			added += 1
		_LOGGER.debug(f"Roster seeded with {len(self.roster)} member(s), {added} new default(s)")

	def merge_snapshot(self, records: Dict[str, T]) -> None:
		"""Merge persisted values for the current context.

		Persisted values replace defaults and earlier snapshots; keys the
		operator touched since the last commit keep their staged value.
		"""
		self._snapshot = {key: copy.deepcopy(value) for key, value in records.items()}
		kept = 0
		for key, value in records.items():
			if key in self._touched:
				kept += 1
				continue
			self._overlay[key] = copy.deepcopy(value)
		if kept:
			_LOGGER.debug(f"Snapshot merged, {kept} staged edit(s) kept over server values")

	def change_context(self, context: Hashable) -> None:
		"""Switch to another date/exam/period: drop snapshot and staged edits."""
		if context == self.context:
			return
		self.context = context
		self._snapshot = {}
		self._touched.clear()
		self._overlay = {}
		for member in self.roster:
			default = self._default()
			if default is not None:
				self._overlay[member.id] = default

	def stage(self, key: str, value: T) -> None:
		"""Record an operator edit that is not yet persisted."""
		self._overlay[key] = value
		self._touched.add(key)

	def discard(self, key: str) -> None:
		"""Drop a staged edit and show the persisted (or default) value again."""
		self._touched.discard(key)
		if key in self._snapshot:
			self._overlay[key] = copy.deepcopy(self._snapshot[key])
			return
		default = self._default()
		if default is None:
			self._overlay.pop(key, None)
		else:
			self._overlay[key] = default

	def mark_committed(self, keys: Optional[Iterable[str]] = None) -> None:
		"""Forget that ``keys`` (default: all) were edited, after the server confirmed them."""
		if keys is None:
			self._touched.clear()
		else:
			self._touched.difference_update(keys)

	def get(self, key: str) -> Optional[T]:
		"""Value shown to the operator for ``key``."""
		if key in self._overlay:
			return self._overlay[key]
		return self._default()

	def snapshot_value(self, key: str) -> Optional[T]:
		return self._snapshot.get(key)

	def is_touched(self, key: str) -> bool:
		return key in self._touched

	@property
	def touched(self) -> Set[str]:
		return set(self._touched)

	@property
	def has_pending_edits(self) -> bool:
		return bool(self._touched)

	def overlay(self) -> Dict[str, T]:
		"""A copy of the merged overlay."""
		return dict(self._overlay)

	def committable(self, includable: Callable[[T], bool] = lambda value: True) -> List[Tuple[RosterMember, T]]:
		"""Roster members, in roster order, whose shown value passes ``includable``."""
		entries = []
		for member in self.roster:
			value = self._overlay.get(member.id)
			if value is None:
				continue
			if includable(value):
				entries.append((member, value))
		return entries

	def __iter__(self) -> Iterator[Tuple[RosterMember, Optional[T]]]:
		for member in self.roster:
			yield member, self.get(member.id)

	def __len__(self) -> int:
		return len(self.roster)
