"""Main client for the coaching center backend API."""

import asyncio
import json
import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

import aiohttp

from .auth import BearerAuth
from .exceptions import (
	CoachDeskAPIError,
	CoachDeskAuthError,
	CoachDeskConnectionError,
	CoachDeskDataError,
)
from .models import ApiResult, Pagination
from .admission import AdmissionAPI
from .attendance import AttendanceAPI
from .dashboard import DashboardAPI
from .exam import ExamAPI
from .fee import FeeAPI
from .qrcode import QRCodeAPI
from .sms import SmsAPI

_LOGGER = logging.getLogger(__name__)

DEFAULT_API_URL = "http://localhost:5000"


@dataclass
class RetryPolicy:
	"""Bounded retry for transport failures only.
	
	``attempts`` is the number of extra tries after the first one; 0 disables
	retrying. The delay doubles after every failed try.
	"""
	attempts: int = 0
	backoff: float = 0.5
	
	def delay(self, attempt: int) -> float:
		return self.backoff * (2 ** attempt)


class CoachDeskClient:
	"""Client for interacting with the coaching center backend."""
	
	def __init__(
		self,
		base_url: str = DEFAULT_API_URL,
		session: Optional[aiohttp.ClientSession] = None,
		auth: Optional[BearerAuth] = None,
		timeout: Optional[float] = None,
		retry: Optional[RetryPolicy] = None,
	):
		"""Initialise the client.
		
		Args:
			base_url: Backend root, e.g. http://localhost:5000
			session: Optional aiohttp session. If None, one is created on enter.
			auth: Token provider. Without one, requests go out unauthenticated.
			timeout: Total request timeout in seconds (aiohttp default when None).
			retry: Retry policy for transport failures (no retry when None).
		"""
		self.base_url = base_url.rstrip("/")
		self._session = session
		self._own_session = session is None
		self.auth = auth or BearerAuth()
		self.timeout = timeout
		self.retry = retry or RetryPolicy()
		
		self.admission = AdmissionAPI(self)
		self.attendance = AttendanceAPI(self)
		self.exam = ExamAPI(self)
		self.fee = FeeAPI(self)
		self.sms = SmsAPI(self)
		self.qrcode = QRCodeAPI(self)
		self.dashboard = DashboardAPI(self)
		
	@classmethod
	def from_settings(cls, settings, session: Optional[aiohttp.ClientSession] = None) -> "CoachDeskClient":
		"""Build a client from :class:`coachdesk.config.Settings`."""
		return cls(
			base_url=settings.api_url,
			session=session,
			auth=BearerAuth(token=settings.api_token),
			timeout=settings.request_timeout,
			retry=RetryPolicy(attempts=settings.retry_attempts, backoff=settings.retry_backoff),
		)
		
	async def __aenter__(self):
		"""Async context manager entry."""
		if self._own_session and self._session is None:
			self._session = aiohttp.ClientSession()
		return self
		
	async def __aexit__(self, exc_type, exc_val, exc_tb):
		"""Async context manager exit."""
		if self._own_session and self._session:
			await self._session.close()
			self._session = None
			
	async def request(
		self,
		method: str,
		path: str,
		*,
		params: Optional[Dict[str, str]] = None,
		json_body: Any = None,
		default_error: str = "Request failed",
		default_message: Optional[str] = None,
		parse: Optional[Callable[[Any], Any]] = None,
	) -> ApiResult:
		"""Send a request and normalise every outcome into an :class:`ApiResult`.
		
		Nothing raised below this point reaches the caller: transport errors,
		non-JSON bodies, non-2xx statuses and ``success: false`` envelopes all
		come back as ``ApiResult(success=False, error=...)``.
		"""
		attempt = 0
		while True:
			try:
				status, payload = await self._send(method, path, params=params, json_body=json_body)
				break
			except CoachDeskConnectionError as e:
				if attempt < self.retry.attempts:
					delay = self.retry.delay(attempt)
					attempt += 1
					_LOGGER.warning(f"{method} {path} failed ({e}), retry {attempt}/{self.retry.attempts} in {delay:.2f}s")
					await asyncio.sleep(delay)
					continue
				_LOGGER.error(f"{method} {path} connection error: {e}")
				return ApiResult.failure(default_error)
			except CoachDeskAuthError as e:
				_LOGGER.warning(f"{method} {path} rejected by backend: {e}")
				return ApiResult.failure(str(e) or default_error)
			except CoachDeskAPIError as e:
				_LOGGER.error(f"{method} {path} failed with HTTP {e.status}: {e}")
				return ApiResult.failure(str(e) or default_error)
			except CoachDeskDataError as e:
				_LOGGER.error(f"{method} {path} returned unusable data: {e}")
				return ApiResult.failure(str(e))
				
		if not isinstance(payload, dict):
			payload = {"data": payload}
			
		if payload.get("success") is False:
			return ApiResult.failure(payload.get("message") or payload.get("error") or default_error)
			
		data = payload.get("data")
		if parse is not None:
			try:
				data = parse(data)
			except (CoachDeskDataError, KeyError, TypeError, ValueError) as e:
				_LOGGER.error(f"Failed to parse {method} {path} response: {e}")
				return ApiResult.failure(f"Invalid response from server: {e}")
				
		return ApiResult(
			success=True,
			data=data,
			message=payload.get("message") or default_message,
			pagination=Pagination.from_dict(payload.get("pagination")),
			code=payload.get("code"),
		)
		
	async def _send(
		self,
		method: str,
		path: str,
		params: Optional[Dict[str, str]] = None,
		json_body: Any = None,
	) -> Tuple[int, Any]:
		"""Perform one HTTP round trip and decode the JSON body.
		
		Raises:
			CoachDeskConnectionError: the request never got a response
			CoachDeskAuthError: HTTP 401
			CoachDeskAPIError: any other non-2xx status
			CoachDeskDataError: the body is not JSON
		"""
		if self._session is None:
			raise CoachDeskAPIError("Client not properly initialised")
			
		url = f"{self.base_url}{path}"
		headers = await self.auth.headers()
		kwargs: Dict[str, Any] = {"headers": headers}
		if params:
			kwargs["params"] = params
		if json_body is not None:
			kwargs["json"] = json_body
		if self.timeout:
			kwargs["timeout"] = aiohttp.ClientTimeout(total=self.timeout)
			
		_LOGGER.debug(f"{method} {url} params={params}")
		try:
			async with self._session.request(method, url, **kwargs) as resp:
				payload = await self._read_json(resp)
				status = resp.status
		except aiohttp.ClientError as e:
			raise CoachDeskConnectionError(f"Connection error: {e}") from e
		except asyncio.TimeoutError as e:
			raise CoachDeskConnectionError("Request timed out") from e
			
		if 200 <= status < 300:
			return status, payload
			
		message = ""
		if isinstance(payload, dict):
			message = payload.get("message") or payload.get("error") or ""
		if status == 401:
			raise CoachDeskAuthError(message or "Unauthorized")
		raise CoachDeskAPIError(message, status=status)
		
	async def _read_json(self, resp: aiohttp.ClientResponse) -> Any:
		"""Decode a JSON body, tolerating a wrong content-type header."""
		content_type = resp.headers.get("content-type", "").lower()
		if "application/json" in content_type:
			try:
				return await resp.json()
			except (aiohttp.ContentTypeError, json.JSONDecodeError) as e:
				raise CoachDeskDataError(f"Invalid JSON response: {e}") from e
				
		text = await resp.text()
		stripped = text.strip()
		if stripped.startswith("{") or stripped.startswith("["):
			_LOGGER.warning(f"Content-type {content_type!r} for JSON-looking body, parsing manually")
			try:
				return json.loads(stripped)
			except json.JSONDecodeError as e:
				raise CoachDeskDataError(f"Invalid JSON response: {e}") from e
				
		_LOGGER.error(f"Non-JSON response: {text[:200]}")
		raise CoachDeskDataError(
			f"API endpoint not found. Status: {resp.status}. Please ensure the backend API is implemented."
		)
