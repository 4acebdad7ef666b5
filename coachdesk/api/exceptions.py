"""Custom exceptions for the coachdesk backend client."""

from typing import Dict, Optional


class CoachDeskError(Exception):
	"""Base exception for coachdesk errors."""
	pass


class CoachDeskAuthError(CoachDeskError):
	"""Authentication rejected by the backend."""
	pass


class CoachDeskAPIError(CoachDeskError):
	"""API request failed."""
	
	def __init__(self, message: str, status: Optional[int] = None):
		super().__init__(message)
		self.status = status


class CoachDeskConnectionError(CoachDeskError):
	"""Connection to the backend failed."""
	pass


class CoachDeskDataError(CoachDeskError):
	"""Data parsing or validation error."""
	pass


class CoachDeskValidationError(CoachDeskError):
	"""Client-side form validation failed.
	
	``errors`` maps each offending field to a message.
	"""
	
	def __init__(self, errors: Dict[str, str]):
		self.errors = dict(errors)
		summary = ", ".join(f"{field}: {msg}" for field, msg in self.errors.items())
		super().__init__(summary or "Validation failed")
