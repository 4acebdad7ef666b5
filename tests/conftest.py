"""Shared fixtures: an in-memory stand-in for the backend's HTTP session."""

import asyncio
import json
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlsplit

import pytest

from coachdesk.api.client import CoachDeskClient
from coachdesk.notify import Notifier
from coachdesk.views.base import ViewContext

BASE_URL = "http://backend.test"


class FakeResponse:
	"""Just enough of ``aiohttp.ClientResponse`` for the client."""

	def __init__(self, status: int = 200, body: Any = None, content_type: str = "application/json"):
		self.status = status
		self._body = body
		self.headers = {"content-type": content_type} if content_type else {}

	async def json(self):
		if isinstance(self._body, str):
			return json.loads(self._body)
		return self._body

	async def text(self):
		if isinstance(self._body, str):
			return self._body
		return json.dumps(self._body)


@dataclass
class Call:
	method: str
	path: str
	params: Optional[Dict[str, str]]
	json: Any
	headers: Dict[str, str]


class _RequestContext:
	def __init__(self, session: "FakeSession", call: Call, handler: Any):
		self._session = session
		self._call = call
		self._handler = handler

	async def __aenter__(self):
		gate = self._session.gates.get((self._call.method, self._call.path))
		if gate is not None:
			await gate.wait()
		response = self._handler(self._call) if callable(self._handler) else self._handler
		if isinstance(response, BaseException):
			raise response
		return response

	async def __aexit__(self, exc_type, exc, tb):
		return False


class FakeSession:
	"""Routes ``(method, path)`` to canned responses and records every call.

	Several responses registered for one route are served in order; the last
	one keeps being served. Unknown routes answer with an HTML 404 page.
	"""

	def __init__(self):
		self.routes: Dict[Tuple[str, str], List[Any]] = {}
		self.gates: Dict[Tuple[str, str], asyncio.Event] = {}
		self.calls: List[Call] = []

	def add(self, method: str, path: str, *responses: Any) -> None:
		self.routes.setdefault((method, path), []).extend(responses)

	def ok(self, method: str, path: str, data: Any = None, **extra: Any) -> None:
		body = {"success": True, "data": data}
		body.update(extra)
		self.add(method, path, FakeResponse(200, body))

	def fail(self, method: str, path: str, status: int = 400, message: str = "Bad request") -> None:
		self.add(method, path, FakeResponse(status, {"success": False, "message": message}))

	def hold(self, method: str, path: str, gate: asyncio.Event) -> None:
		"""Keep requests to this route in flight until ``gate`` is set."""
		self.gates[(method, path)] = gate

	def request(self, method: str, url: str, **kwargs: Any) -> _RequestContext:
		path = urlsplit(url).path
		call = Call(method, path, kwargs.get("params"), kwargs.get("json"), kwargs.get("headers") or {})
		self.calls.append(call)
		queue = self.routes.get((method, path))
		if not queue:
			handler = FakeResponse(404, "<!DOCTYPE html><html><body>Not Found</body></html>", "text/html")
		elif len(queue) > 1:
			handler = queue.pop(0)
		else:
			handler = queue[0]
		return _RequestContext(self, call, handler)

	def calls_to(self, method: str, path: str) -> List[Call]:
		return [call for call in self.calls if call.method == method and call.path == path]

	async def close(self):
		pass


def admission(admission_id: str, name: str, **extra: Any) -> Dict[str, Any]:
	"""An admission as the backend returns it."""
	row = {
		"_id": admission_id,
		"studentName": name,
		"studentId": f"STU-{admission_id}",
		"class": "Class 8",
		"batchName": "Morning",
		"fatherMobile": "01711000000",
		"monthlyFee": 500,
		"status": "active",
	}
	row.update(extra)
	return row


@pytest.fixture
def backend():
	return FakeSession()


@pytest.fixture
def client(backend):
	return CoachDeskClient(BASE_URL, session=backend)


@pytest.fixture
def notifier():
	return Notifier()


@pytest.fixture
def context(notifier):
	return ViewContext(notifier=notifier)


@pytest.fixture
def approving_context(notifier):
	return ViewContext(notifier=notifier, confirm=lambda question: True)


@pytest.fixture
def roster():
	return [admission("s1", "Alice"), admission("s2", "Bob")]


@pytest.fixture
def make_admission():
	return admission
