"""Tuition fee endpoints."""

from datetime import date
from typing import Any, Dict, List, Optional, Union

from .models import ApiResult, FeeRecord
from .utils import build_query, compact, format_date


def _parse_fees(data: Any) -> List[FeeRecord]:
	return [FeeRecord.from_dict(item) for item in (data if isinstance(data, list) else [])]


class FeeAPI:
	"""Proxy for ``/api/fee``."""
	
	def __init__(self, client):
		self._client = client
		
	async def create(self, fee: Dict[str, Any]) -> ApiResult:
		"""Create a fee record (``admissionId``, ``monthlyFee``, ``dueDate``, ``month``, ``year``)."""
		return await self._client.request(
			"POST", "/api/fee",
			json_body=compact(fee),
			default_error="Failed to create fee record",
			default_message="Fee record created successfully",
			parse=lambda data: FeeRecord.from_dict(data) if isinstance(data, dict) else data,
		)
		
	async def create_bulk(
		self,
		month: int,
		year: int,
		due_date: Union[date, str],
		class_name: Optional[str] = None,
		batch_name: Optional[str] = None,
	) -> ApiResult:
		"""Create fee records for every active student matching the filter."""
		body = compact({
			"month": month,
			"year": year,
			"dueDate": format_date(due_date),
			"class": class_name or None,
			"batchName": batch_name or None,
		})
		return await self._client.request(
			"POST", "/api/fee/bulk",
			json_body=body,
			default_error="Failed to create bulk fees",
			default_message="Bulk fees created successfully",
		)
		
	async def list(
		self,
		page: int = 1,
		limit: int = 50,
		admission_id: Optional[str] = None,
		student_id: Optional[str] = None,
		month: Optional[int] = None,
		year: Optional[int] = None,
		status: Optional[str] = None,
		class_name: Optional[str] = None,
		start_date: Union[date, str, None] = None,
		end_date: Union[date, str, None] = None,
	) -> ApiResult:
		"""Get fee records; ``data`` is a list of :class:`FeeRecord`."""
		params = build_query(
			page=page,
			limit=limit,
			admissionId=admission_id,
			studentId=student_id,
			month=month,
			year=year,
			status=status,
			**{"class": class_name},
			startDate=format_date(start_date) if start_date else None,
			endDate=format_date(end_date) if end_date else None,
		)
		return await self._client.request(
			"GET", "/api/fee",
			params=params,
			default_error="Failed to fetch fees",
			parse=_parse_fees,
		)
		
	async def get(self, fee_id: str) -> ApiResult:
		return await self._client.request(
			"GET", f"/api/fee/{fee_id}",
			default_error="Failed to fetch fee",
			parse=lambda data: FeeRecord.from_dict(data) if data else None,
		)
		
	async def update(self, fee_id: str, update: Dict[str, Any]) -> ApiResult:
		"""Record a payment (``amountPaid``, ``paymentDate``, ``paymentMethod``, ``sendSms``...)."""
		return await self._client.request(
			"PUT", f"/api/fee/{fee_id}",
			json_body=compact(update),
			default_error="Failed to update fee",
			default_message="Fee updated successfully",
		)
		
	async def delete(self, fee_id: str) -> ApiResult:
		return await self._client.request(
			"DELETE", f"/api/fee/{fee_id}",
			default_error="Failed to delete fee",
			default_message="Fee deleted successfully",
		)
		
	async def send_reminder_sms(
		self,
		fee_id: Optional[str] = None,
		admission_id: Optional[str] = None,
		student_id: Optional[str] = None,
	) -> ApiResult:
		body = compact({"feeId": fee_id, "admissionId": admission_id, "studentId": student_id})
		return await self._client.request(
			"POST", "/api/fee/reminder/sms",
			json_body=body,
			default_error="Failed to send payment reminder SMS",
			default_message="Payment reminder SMS sent successfully",
		)
		
	async def send_overdue_sms(
		self,
		fee_id: Optional[str] = None,
		admission_id: Optional[str] = None,
		student_id: Optional[str] = None,
	) -> ApiResult:
		body = compact({"feeId": fee_id, "admissionId": admission_id, "studentId": student_id})
		return await self._client.request(
			"POST", "/api/fee/overdue/sms",
			json_body=body,
			default_error="Failed to send overdue SMS",
			default_message="Overdue SMS sent successfully",
		)
		
	async def send_payment_sms(self, fee_id: str) -> ApiResult:
		return await self._client.request(
			"POST", "/api/fee/payment/sms",
			json_body={"feeId": fee_id},
			default_error="Failed to send payment confirmation SMS",
			default_message="Payment confirmation SMS sent successfully",
		)
		
	async def stats(
		self,
		month: Optional[int] = None,
		year: Optional[int] = None,
		class_name: Optional[str] = None,
	) -> ApiResult:
		params = build_query(month=month, year=year, **{"class": class_name})
		return await self._client.request(
			"GET", "/api/fee/stats",
			params=params,
			default_error="Failed to fetch fee statistics",
		)
