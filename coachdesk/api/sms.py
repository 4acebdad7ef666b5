"""Bulk SMS endpoints."""

from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Union

from .models import ApiResult, SmsLog
from .utils import build_query, compact, format_date


def _parse_logs(data: Any) -> List[SmsLog]:
	return [SmsLog.from_dict(item) for item in (data if isinstance(data, list) else [])]


class SmsAPI:
	"""Proxy for ``/api/sms``."""
	
	def __init__(self, client):
		self._client = client
		
	async def send(
		self,
		mobile_number: str,
		message: str,
		sender_id: Optional[str] = None,
		api_key: Optional[str] = None,
	) -> ApiResult:
		"""Send one message to one number."""
		body = compact({
			"mobileNumber": mobile_number,
			"message": message,
			"senderId": sender_id or None,
			"apiKey": api_key or None,
		})
		return await self._client.request(
			"POST", "/api/sms/send",
			json_body=body,
			default_error="Failed to send SMS",
			default_message="SMS sent successfully",
		)
		
	async def send_bulk(
		self,
		mobile_numbers: Iterable[str],
		message: str,
		sender_id: Optional[str] = None,
		api_key: Optional[str] = None,
	) -> ApiResult:
		"""Send the same message to many numbers."""
		body = compact({
			"mobileNumbers": list(mobile_numbers),
			"message": message,
			"senderId": sender_id or None,
			"apiKey": api_key or None,
		})
		return await self._client.request(
			"POST", "/api/sms/bulk",
			json_body=body,
			default_error="Failed to send bulk SMS",
			default_message="Bulk SMS sent successfully",
		)
		
	async def send_bulk_custom(
		self,
		messages: Iterable[Dict[str, str]],
		sender_id: Optional[str] = None,
		api_key: Optional[str] = None,
	) -> ApiResult:
		"""Send a different message to each number (``{"number", "message"}`` rows)."""
		body = compact({
			"messages": list(messages),
			"senderId": sender_id or None,
			"apiKey": api_key or None,
		})
		return await self._client.request(
			"POST", "/api/sms/bulk/custom",
			json_body=body,
			default_error="Failed to send custom bulk SMS",
			default_message="SMS sent successfully",
		)
		
	async def send_to_students(
		self,
		message: str,
		class_name: Optional[str] = None,
		batch_name: Optional[str] = None,
		sender_id: Optional[str] = None,
		api_key: Optional[str] = None,
	) -> ApiResult:
		"""Send a message to the guardians of every student matching the filter."""
		body = compact({
			"message": message,
			"filters": compact({"class": class_name or None, "batchName": batch_name or None}),
			"senderId": sender_id or None,
			"apiKey": api_key or None,
		})
		return await self._client.request(
			"POST", "/api/sms/send/students",
			json_body=body,
			default_error="Failed to send SMS to students",
			default_message="SMS sent successfully",
		)
		
	async def history(
		self,
		page: int = 1,
		limit: int = 50,
		type: Optional[str] = None,
		status: Optional[str] = None,
		start_date: Union[date, str, None] = None,
		end_date: Union[date, str, None] = None,
		search: Optional[str] = None,
	) -> ApiResult:
		"""Get sent messages; ``data`` is a list of :class:`SmsLog`."""
		params = build_query(
			page=page,
			limit=limit,
			type=type,
			status=status,
			startDate=format_date(start_date) if start_date else None,
			endDate=format_date(end_date) if end_date else None,
			search=search,
		)
		return await self._client.request(
			"GET", "/api/sms",
			params=params,
			default_error="Failed to fetch SMS history",
			parse=_parse_logs,
		)
		
	async def stats(
		self,
		start_date: Union[date, str, None] = None,
		end_date: Union[date, str, None] = None,
	) -> ApiResult:
		params = build_query(
			startDate=format_date(start_date) if start_date else None,
			endDate=format_date(end_date) if end_date else None,
		)
		return await self._client.request(
			"GET", "/api/sms/stats",
			params=params,
			default_error="Failed to fetch SMS statistics",
		)
