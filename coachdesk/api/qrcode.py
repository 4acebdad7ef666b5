"""QR code endpoints."""

from typing import Any, Dict, Iterable, List, Optional

from .models import ApiResult, QRCode
from .utils import build_query, compact


def _parse_codes(data: Any) -> List[QRCode]:
	return [QRCode.from_dict(item) for item in (data if isinstance(data, list) else [])]


class QRCodeAPI:
	"""Proxy for ``/api/qrcode``."""
	
	def __init__(self, client):
		self._client = client
		
	async def create(self, qr: Dict[str, Any]) -> ApiResult:
		return await self._client.request(
			"POST", "/api/qrcode",
			json_body=compact(qr),
			default_error="Failed to create QR code",
			default_message="QR code created successfully",
		)
		
	async def list(
		self,
		page: int = 1,
		limit: int = 50,
		type: Optional[str] = None,
		student_id: Optional[str] = None,
		admission_id: Optional[str] = None,
		exam_id: Optional[str] = None,
		is_active: Optional[bool] = None,
		search: Optional[str] = None,
	) -> ApiResult:
		"""Get QR codes; ``data`` is a list of :class:`QRCode`."""
		params = build_query(
			page=page,
			limit=limit,
			type=type,
			studentId=student_id,
			admissionId=admission_id,
			examId=exam_id,
			isActive=is_active,
			search=search,
		)
		return await self._client.request(
			"GET", "/api/qrcode",
			params=params,
			default_error="Failed to fetch QR codes",
			parse=_parse_codes,
		)
		
	async def get(self, qr_id: str) -> ApiResult:
		return await self._client.request(
			"GET", f"/api/qrcode/{qr_id}",
			default_error="Failed to fetch QR code",
			parse=lambda data: QRCode.from_dict(data) if data else None,
		)
		
	async def update(self, qr_id: str, qr: Dict[str, Any]) -> ApiResult:
		return await self._client.request(
			"PUT", f"/api/qrcode/{qr_id}",
			json_body=compact(qr),
			default_error="Failed to update QR code",
			default_message="QR code updated successfully",
		)
		
	async def delete(self, qr_id: str) -> ApiResult:
		return await self._client.request(
			"DELETE", f"/api/qrcode/{qr_id}",
			default_error="Failed to delete QR code",
			default_message="QR code deleted successfully",
		)
		
	async def bulk_create(self, codes: Iterable[Dict[str, Any]]) -> ApiResult:
		return await self._client.request(
			"POST", "/api/qrcode/bulk",
			json_body={"qrCodes": [compact(qr) for qr in codes]},
			default_error="Failed to generate QR codes",
			default_message="QR codes generated successfully",
		)
		
	async def verify(self, content: str) -> ApiResult:
		"""Check scanned content against the stored codes."""
		return await self._client.request(
			"POST", "/api/qrcode/verify",
			json_body={"content": content},
			default_error="Failed to verify QR code",
		)
