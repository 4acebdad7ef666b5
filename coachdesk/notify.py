"""Toast notifications and confirm prompts for the views."""

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Awaitable, Callable, List, Optional, Union

from .const import TOAST_ERROR, TOAST_INFO, TOAST_SUCCESS, TOAST_WARNING

_LOGGER = logging.getLogger(__name__)

# Answers a yes/no question put to the operator before a destructive action.
ConfirmPrompt = Callable[[str], Union[bool, Awaitable[bool]]]


@dataclass
class Toast:
	"""A short user-visible notification."""
	level: str
	message: str
	created: datetime = field(default_factory=datetime.now)
	
	def __str__(self) -> str:
		return f"[{self.level}] {self.message}"


class Notifier:
	"""Collects toasts and mirrors them to the log.
	
	A front end subscribes with ``listener`` to render them; tests read
	``toasts`` directly.
	"""
	
	def __init__(self, listener: Optional[Callable[[Toast], None]] = None):
		self.toasts: List[Toast] = []
		self._listener = listener
		
	def _emit(self, level: str, message: str) -> Toast:
		toast = Toast(level, message)
		self.toasts.append(toast)
		if level == TOAST_ERROR:
			_LOGGER.warning(f"Toast: {message}")
		else:
			_LOGGER.info(f"Toast: {message}")
		if self._listener is not None:
			self._listener(toast)
		return toast
		
	def success(self, message: str) -> Toast:
		return self._emit(TOAST_SUCCESS, message)
		
	def error(self, message: str) -> Toast:
		return self._emit(TOAST_ERROR, message)
		
	def warning(self, message: str) -> Toast:
		return self._emit(TOAST_WARNING, message)
		
	def info(self, message: str) -> Toast:
		return self._emit(TOAST_INFO, message)
		
	@property
	def last(self) -> Optional[Toast]:
		return self.toasts[-1] if self.toasts else None
		
	def clear(self) -> None:
		self.toasts.clear()


def deny_all(_question: str) -> bool:
	"""Confirm prompt used when none is injected: destructive actions stay blocked."""
	return False
