"""Tests for envelope normalisation, auth headers and retry in the client."""

import asyncio

import aiohttp
import pytest

from coachdesk.api.auth import BearerAuth
from coachdesk.api.client import CoachDeskClient, RetryPolicy
from coachdesk.api.models import RosterMember

from conftest import BASE_URL, FakeResponse


def test_success_envelope_is_parsed(backend, client, make_admission):
	backend.ok(
		"GET", "/api/admission",
		[make_admission("s1", "Alice")],
		message="Admissions fetched",
		pagination={"page": 1, "limit": 10, "total": 1, "totalPages": 1, "hasNext": False, "hasPrev": False},
	)

	result = asyncio.run(client.admission.list(page=1, search="", class_name="Class 8"))

	assert result.success
	assert isinstance(result.data[0], RosterMember)
	assert result.data[0].name == "Alice"
	assert result.message == "Admissions fetched"
	assert result.pagination.total == 1
	call = backend.calls[0]
	assert call.params == {"page": "1", "limit": "10", "class": "Class 8"}


def test_error_status_uses_body_message(backend, client):
	backend.fail("POST", "/api/attendance", status=400, message="Attendance already marked")

	result = asyncio.run(client.attendance.mark("s1", "2025-01-10", "present"))

	assert not result.success
	assert result.error == "Attendance already marked"


def test_error_status_without_message_uses_default(backend, client):
	backend.add("DELETE", "/api/exam/e1", FakeResponse(500, {}))

	result = asyncio.run(client.exam.delete("e1"))

	assert not result.success
	assert result.error == "Failed to delete exam"


def test_success_false_envelope_is_a_failure(backend, client):
	backend.add("GET", "/api/fee/stats", FakeResponse(200, {"success": False, "error": "No data"}))

	result = asyncio.run(client.fee.stats(month=1, year=2025))

	assert not result.success
	assert result.error == "No data"


def test_html_page_means_endpoint_missing(backend, client):
	result = asyncio.run(client.sms.send("01711000000", "Hello"))

	assert not result.success
	assert result.error.startswith("API endpoint not found. Status: 404")


def test_json_body_with_wrong_content_type_is_parsed(backend, client):
	backend.add("GET", "/api/dashboard/quick-stats", FakeResponse(200, '{"success": true, "data": {"active": 4}}', "text/html"))

	result = asyncio.run(client.dashboard.quick_stats())

	assert result.success
	assert result.data == {"active": 4}


def test_unauthorized_is_reported(backend, client):
	backend.add("GET", "/api/admission/stats", FakeResponse(401, {"message": "Token expired"}))

	result = asyncio.run(client.admission.stats())

	assert not result.success
	assert result.error == "Token expired"


def test_unparseable_data_is_a_failure(backend, client):
	backend.ok("GET", "/api/exam", [{"examName": "no id"}])

	result = asyncio.run(client.exam.list())

	assert not result.success
	assert result.error.startswith("Invalid response from server")


def test_bearer_token_is_sent_when_available(backend):
	client = CoachDeskClient(BASE_URL, session=backend, auth=BearerAuth(token="abc123"))
	backend.ok("GET", "/api/dashboard/overview", {})

	asyncio.run(client.dashboard.overview())

	headers = backend.calls[0].headers
	assert headers["Authorization"] == "Bearer abc123"
	assert headers["Content-Type"] == "application/json"


def test_async_token_source_and_anonymous_requests(backend, client):
	async def token():
		return "from-session"

	backend.ok("GET", "/api/dashboard/overview", {})
	asyncio.run(client.dashboard.overview())
	assert "Authorization" not in backend.calls[0].headers

	authed = CoachDeskClient(BASE_URL, session=backend, auth=BearerAuth(token_source=token))
	asyncio.run(authed.dashboard.overview())
	assert backend.calls[1].headers["Authorization"] == "Bearer from-session"


def test_transport_failure_is_not_retried_by_default(backend, client):
	backend.add("GET", "/api/sms/stats", aiohttp.ClientConnectionError("refused"))

	result = asyncio.run(client.sms.stats())

	assert not result.success
	assert result.error == "Failed to fetch SMS statistics"
	assert len(backend.calls) == 1


def test_transport_failure_is_retried_when_configured(backend):
	client = CoachDeskClient(BASE_URL, session=backend, retry=RetryPolicy(attempts=2, backoff=0))
	backend.add(
		"GET", "/api/sms/stats",
		aiohttp.ClientConnectionError("refused"),
		asyncio.TimeoutError(),
		FakeResponse(200, {"success": True, "data": {"total": 3}}),
	)

	result = asyncio.run(client.sms.stats())

	assert result.success
	assert result.data == {"total": 3}
	assert len(backend.calls) == 3


def test_server_errors_are_never_retried(backend):
	client = CoachDeskClient(BASE_URL, session=backend, retry=RetryPolicy(attempts=3, backoff=0))
	backend.fail("POST", "/api/sms/send", status=500, message="Gateway down")

	result = asyncio.run(client.sms.send("01711000000", "Hello"))

	assert result.error == "Gateway down"
	assert len(backend.calls) == 1


def test_retry_delay_doubles():
	policy = RetryPolicy(attempts=3, backoff=0.5)
	assert [policy.delay(n) for n in range(3)] == [0.5, 1.0, 2.0]


def test_request_without_session_fails_cleanly():
	client = CoachDeskClient(BASE_URL)
	result = asyncio.run(client.dashboard.overview())
	assert not result.success
	assert result.error == "Client not properly initialised"


@pytest.mark.parametrize("form,alarm", [
	({"father_mobile": "01711000000", "student_mobile": "01911000000"}, ["01711000000", "01911000000"]),
	({"father_mobile": "01711000000", "alarm_mobile": ["01811000000"]}, ["01811000000"]),
])
def test_admission_payload_alarm_fallback(form, alarm):
	from coachdesk.api.admission import build_admission_payload

	payload = build_admission_payload(dict(form, student_name="Alice", class_name="Class 8", monthly_fee="500"))

	assert payload["alarmMobile"] == alarm
	assert payload["studentName"] == "Alice"
	assert payload["class"] == "Class 8"
	assert payload["monthlyFee"] == 500.0
