"""Runtime configuration loaded from the environment and an optional .env file."""

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Union

import voluptuous as vol
from dotenv import load_dotenv

from .api.exceptions import CoachDeskValidationError
from .const import (
	CONF_API_TOKEN,
	CONF_API_URL,
	CONF_LANGUAGE,
	CONF_LOG_LEVEL,
	CONF_REQUEST_TIMEOUT,
	CONF_RETRY_ATTEMPTS,
	CONF_RETRY_BACKOFF,
	CONF_ROSTER_LIMIT,
	DEFAULT_API_URL,
	DEFAULT_LANGUAGE,
	DEFAULT_LOG_LEVEL,
	DEFAULT_RETRY_ATTEMPTS,
	DEFAULT_RETRY_BACKOFF,
	DEFAULT_ROSTER_LIMIT,
	LANGUAGES,
)

_LOGGER = logging.getLogger(__name__)

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _blank_to_none(value):
	if isinstance(value, str) and not value.strip():
		return None
	return value


SETTINGS_SCHEMA = vol.Schema({
	vol.Optional(CONF_API_URL, default=DEFAULT_API_URL): vol.All(str, vol.Length(min=1), vol.Match(r"^https?://")),
	vol.Optional(CONF_API_TOKEN, default=None): vol.All(_blank_to_none, vol.Any(None, str)),
	vol.Optional(CONF_LANGUAGE, default=DEFAULT_LANGUAGE): vol.All(vol.Lower, vol.In(LANGUAGES)),
	vol.Optional(CONF_REQUEST_TIMEOUT, default=None): vol.All(_blank_to_none, vol.Any(None, vol.All(vol.Coerce(float), vol.Range(min=0, min_included=False)))),
	vol.Optional(CONF_RETRY_ATTEMPTS, default=DEFAULT_RETRY_ATTEMPTS): vol.All(vol.Coerce(int), vol.Range(min=0, max=10)),
	vol.Optional(CONF_RETRY_BACKOFF, default=DEFAULT_RETRY_BACKOFF): vol.All(vol.Coerce(float), vol.Range(min=0)),
	vol.Optional(CONF_ROSTER_LIMIT, default=DEFAULT_ROSTER_LIMIT): vol.All(vol.Coerce(int), vol.Range(min=1)),
	vol.Optional(CONF_LOG_LEVEL, default=DEFAULT_LOG_LEVEL): vol.All(vol.Upper, vol.In(_LOG_LEVELS)),
}, extra=vol.REMOVE_EXTRA)


@dataclass
class Settings:
	"""Validated runtime settings."""
	api_url: str = DEFAULT_API_URL
	api_token: Optional[str] = None
	language: str = DEFAULT_LANGUAGE
	request_timeout: Optional[float] = None
	retry_attempts: int = DEFAULT_RETRY_ATTEMPTS
	retry_backoff: float = DEFAULT_RETRY_BACKOFF
	roster_limit: int = DEFAULT_ROSTER_LIMIT
	log_level: str = DEFAULT_LOG_LEVEL


def load_settings(
	env: Optional[Mapping[str, str]] = None,
	dotenv_path: Union[str, Path, None] = None,
) -> Settings:
	"""Load settings from ``env`` (default: ``os.environ`` after reading .env).
	
	Raises:
		CoachDeskValidationError: a value is present but invalid
	"""
	if env is None:
		load_dotenv(dotenv_path)
		env = os.environ
		
	keys = [str(key) for key in SETTINGS_SCHEMA.schema]
	raw = {key: env[key] for key in keys if key in env}
	try:
		values = SETTINGS_SCHEMA(raw)
	except vol.MultipleInvalid as err:
		errors = {str(e.path[0]) if e.path else "settings": e.msg for e in err.errors}
		raise CoachDeskValidationError(errors) from err
		
	settings = Settings(
		api_url=values[CONF_API_URL].rstrip("/"),
		api_token=values[CONF_API_TOKEN],
		language=values[CONF_LANGUAGE],
		request_timeout=values[CONF_REQUEST_TIMEOUT],
		retry_attempts=values[CONF_RETRY_ATTEMPTS],
		retry_backoff=values[CONF_RETRY_BACKOFF],
		roster_limit=values[CONF_ROSTER_LIMIT],
		log_level=values[CONF_LOG_LEVEL],
	)
	_LOGGER.debug(f"Loaded settings for {settings.api_url} (token {'set' if settings.api_token else 'missing'})")
	return settings


def setup_logging(settings: Settings) -> None:
	"""Apply the configured log level to the package loggers."""
	logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
	logging.getLogger("coachdesk").setLevel(settings.log_level)
