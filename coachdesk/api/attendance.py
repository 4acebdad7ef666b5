"""Attendance endpoints."""

from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Union

from .models import ApiResult, AttendanceRecord
from .utils import build_query, compact, format_date


def _parse_records(data: Any) -> List[AttendanceRecord]:
	return [AttendanceRecord.from_dict(item) for item in (data if isinstance(data, list) else [])]


class AttendanceAPI:
	"""Proxy for ``/api/attendance``."""
	
	def __init__(self, client):
		self._client = client
		
	async def mark(
		self,
		admission_id: str,
		on: Union[date, str],
		status: str,
		notes: Optional[str] = None,
	) -> ApiResult:
		"""Mark attendance for a single student."""
		body = compact({
			"admissionId": admission_id,
			"date": format_date(on),
			"status": status,
			"notes": notes,
		})
		return await self._client.request(
			"POST", "/api/attendance",
			json_body=body,
			default_error="Failed to mark attendance",
			default_message="Attendance marked successfully",
		)
		
	async def mark_batch(self, on: Union[date, str], attendances: Iterable[Dict[str, Any]]) -> ApiResult:
		"""Mark attendance for many students in one request.
		
		``attendances`` holds ``{"admissionId", "status"[, "notes"]}`` rows.
		"""
		body = {"date": format_date(on), "attendances": [compact(row) for row in attendances]}
		return await self._client.request(
			"POST", "/api/attendance/batch",
			json_body=body,
			default_error="Failed to mark batch attendance",
			default_message="Batch attendance marked successfully",
		)
		
	async def list(
		self,
		page: int = 1,
		limit: int = 50,
		admission_id: Optional[str] = None,
		student_id: Optional[str] = None,
		start_date: Union[date, str, None] = None,
		end_date: Union[date, str, None] = None,
		status: Optional[str] = None,
		class_name: Optional[str] = None,
		batch_name: Optional[str] = None,
	) -> ApiResult:
		"""Get attendance records; ``data`` is a list of :class:`AttendanceRecord`."""
		params = build_query(
			page=page,
			limit=limit,
			admissionId=admission_id,
			studentId=student_id,
			startDate=format_date(start_date) if start_date else None,
			endDate=format_date(end_date) if end_date else None,
			status=status,
			**{"class": class_name},
			batchName=batch_name,
		)
		return await self._client.request(
			"GET", "/api/attendance",
			params=params,
			default_error="Failed to fetch attendances",
			parse=_parse_records,
		)
		
	async def stats(
		self,
		admission_id: Optional[str] = None,
		student_id: Optional[str] = None,
		start_date: Union[date, str, None] = None,
		end_date: Union[date, str, None] = None,
		class_name: Optional[str] = None,
		batch_name: Optional[str] = None,
	) -> ApiResult:
		"""Get present/absent totals for a date range."""
		params = build_query(
			admissionId=admission_id,
			studentId=student_id,
			startDate=format_date(start_date) if start_date else None,
			endDate=format_date(end_date) if end_date else None,
			**{"class": class_name},
			batchName=batch_name,
		)
		return await self._client.request(
			"GET", "/api/attendance/stats",
			params=params,
			default_error="Failed to fetch attendance statistics",
		)
		
	async def report(
		self,
		admission_id: Optional[str] = None,
		student_id: Optional[str] = None,
		period: str = "month",
	) -> ApiResult:
		"""Get a student's weekly or monthly attendance report."""
		params = build_query(period=period, admissionId=admission_id, studentId=student_id)
		return await self._client.request(
			"GET", "/api/attendance/report",
			params=params,
			default_error="Failed to fetch attendance report",
		)
		
	async def send_report_sms(
		self,
		admission_id: Optional[str] = None,
		student_id: Optional[str] = None,
		period: str = "month",
	) -> ApiResult:
		"""Send a student's attendance report to the guardians by SMS."""
		body = compact({"admissionId": admission_id, "studentId": student_id, "period": period})
		return await self._client.request(
			"POST", "/api/attendance/report/sms",
			json_body=body,
			default_error="Failed to send attendance report SMS",
			default_message="Attendance report SMS sent successfully",
		)
		
	async def delete(self, record_id: str) -> ApiResult:
		"""Delete one attendance record."""
		return await self._client.request(
			"DELETE", f"/api/attendance/{record_id}",
			default_error="Failed to delete attendance",
			default_message="Attendance deleted successfully",
		)
