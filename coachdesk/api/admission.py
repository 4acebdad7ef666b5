"""Admission (student roster) endpoints."""

from typing import Any, Dict, List, Mapping, Optional

from .models import ApiResult, RosterMember
from .utils import build_query, compact, parse_number

# form field -> JSON key, in the order the backend documents them
_TEXT_FIELDS = {
	"student_name": "studentName",
	"father_name": "fatherName",
	"mother_name": "motherName",
	"school_name": "schoolName",
	"father_mobile": "fatherMobile",
	"mother_mobile": "motherMobile",
	"student_mobile": "studentMobile",
	"class_name": "class",
	"batch_name": "batchName",
	"batch_time": "batchTime",
	"admission_date": "admissionDate",
	"student_signature": "studentSignature",
	"director_signature": "directorSignature",
	"notes": "notes",
}


def _parse_members(data: Any) -> List[RosterMember]:
	return [RosterMember.from_dict(item) for item in (data if isinstance(data, list) else [])]


def build_admission_payload(form: Mapping[str, Any]) -> Dict[str, Any]:
	"""Shape an admission form into the JSON body the backend expects.
	
	Blank optional fields are omitted. When no alarm numbers are given, the
	father's, mother's and student's numbers are used, in that order.
	"""
	payload: Dict[str, Any] = {}
	for field_name, key in _TEXT_FIELDS.items():
		value = form.get(field_name)
		if isinstance(value, str):
			value = value.strip()
		if value:
			payload[key] = value
	
	payload["subjects"] = [s for s in (form.get("subjects") or []) if s]
	monthly_fee = parse_number(form.get("monthly_fee"))
	if monthly_fee is not None:
		payload["monthlyFee"] = monthly_fee
	
	alarm = [n.strip() for n in (form.get("alarm_mobile") or []) if n and n.strip()]
	if not alarm:
		alarm = [payload[k] for k in ("fatherMobile", "motherMobile", "studentMobile") if payload.get(k)]
	payload["alarmMobile"] = alarm
	return payload


class AdmissionAPI:
	"""Proxy for ``/api/admission``."""
	
	def __init__(self, client):
		self._client = client
		
	async def list(
		self,
		page: int = 1,
		limit: int = 10,
		search: str = "",
		class_name: Optional[str] = None,
		batch: Optional[str] = None,
		status: Optional[str] = None,
	) -> ApiResult:
		"""Get admissions; ``data`` is a list of :class:`RosterMember`."""
		params = build_query(
			page=page,
			limit=limit,
			search=search,
			**{"class": class_name},
			batch=batch,
			status=status,
		)
		return await self._client.request(
			"GET", "/api/admission",
			params=params,
			default_error="Failed to fetch admissions",
			parse=_parse_members,
		)
		
	async def get(self, admission_id: str) -> ApiResult:
		return await self._client.request(
			"GET", f"/api/admission/{admission_id}",
			default_error="Failed to fetch admission",
			parse=lambda data: RosterMember.from_dict(data) if data else None,
		)
		
	async def create(self, form: Mapping[str, Any]) -> ApiResult:
		return await self._client.request(
			"POST", "/api/admission",
			json_body=build_admission_payload(form),
			default_error="Failed to create admission",
			default_message="Admission created successfully",
		)
		
	async def update(self, admission_id: str, form: Mapping[str, Any]) -> ApiResult:
		body = build_admission_payload(form)
		if form.get("status"):
			body["status"] = form["status"]
		return await self._client.request(
			"PUT", f"/api/admission/{admission_id}",
			json_body=compact(body),
			default_error="Failed to update admission",
			default_message="Admission updated successfully",
		)
		
	async def delete(self, admission_id: str) -> ApiResult:
		return await self._client.request(
			"DELETE", f"/api/admission/{admission_id}",
			default_error="Failed to delete admission",
			default_message="Admission deleted successfully",
		)
		
	async def stats(self) -> ApiResult:
		return await self._client.request(
			"GET", "/api/admission/stats",
			default_error="Failed to fetch admission statistics",
		)
