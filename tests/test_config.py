"""Tests for settings loading and wiring."""

import pytest

from coachdesk.api.client import CoachDeskClient
from coachdesk.api.exceptions import CoachDeskValidationError
from coachdesk.config import Settings, load_settings
from coachdesk.const import CONF_API_URL, CONF_LANGUAGE, CONF_RETRY_ATTEMPTS
from coachdesk.views.base import ViewContext


def test_defaults():
	settings = load_settings(env={})
	assert settings == Settings()
	assert settings.api_url == "http://localhost:5000"
	assert settings.retry_attempts == 0


def test_values_are_coerced():
	settings = load_settings(env={
		"COACHDESK_API_URL": "https://api.example.com/",
		"COACHDESK_API_TOKEN": "  ",
		"COACHDESK_LANGUAGE": "BN",
		"COACHDESK_REQUEST_TIMEOUT": "7.5",
		"COACHDESK_RETRY_ATTEMPTS": "2",
		"COACHDESK_LOG_LEVEL": "debug",
		"UNRELATED": "ignored",
	})
	assert settings.api_url == "https://api.example.com"
	assert settings.api_token is None
	assert settings.language == "bn"
	assert settings.request_timeout == 7.5
	assert settings.retry_attempts == 2
	assert settings.log_level == "DEBUG"


@pytest.mark.parametrize("key,value", [
	(CONF_API_URL, "ftp://example.com"),
	(CONF_LANGUAGE, "fr"),
	(CONF_RETRY_ATTEMPTS, "many"),
])
def test_invalid_values_are_rejected(key, value):
	with pytest.raises(CoachDeskValidationError) as err:
		load_settings(env={key: value})
	assert key in err.value.errors


def test_client_and_context_from_settings():
	settings = Settings(api_url="https://api.example.com", api_token="abc", language="bn", retry_attempts=1, roster_limit=200)

	client = CoachDeskClient.from_settings(settings)
	context = ViewContext.from_settings(settings)

	assert client.base_url == "https://api.example.com"
	assert client.retry.attempts == 1
	assert context.roster_limit == 200
	assert context.language.t("no_students_selected") == "কোন ছাত্র নির্বাচন করা হয়নি"
