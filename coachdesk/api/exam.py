"""Exam and exam-result endpoints."""

from datetime import date
from typing import Any, Dict, Iterable, List, Optional, Union

from .models import ApiResult, Exam, ExamResult
from .utils import build_query, compact, format_date


def _parse_exams(data: Any) -> List[Exam]:
	return [Exam.from_dict(item) for item in (data if isinstance(data, list) else [])]


def _parse_results(data: Any) -> List[ExamResult]:
	return [ExamResult.from_dict(item) for item in (data if isinstance(data, list) else [])]


class ExamAPI:
	"""Proxy for ``/api/exam``."""
	
	def __init__(self, client):
		self._client = client
		
	async def create(self, exam: Dict[str, Any]) -> ApiResult:
		"""Create an exam from a validated ``examName``/``examType``/... mapping."""
		return await self._client.request(
			"POST", "/api/exam",
			json_body=compact(exam),
			default_error="Failed to create exam",
			default_message="Exam created successfully",
			parse=lambda data: Exam.from_dict(data) if isinstance(data, dict) else data,
		)
		
	async def list(
		self,
		page: int = 1,
		limit: int = 50,
		class_name: Optional[str] = None,
		batch_name: Optional[str] = None,
		subject: Optional[str] = None,
		exam_type: Optional[str] = None,
		status: Optional[str] = None,
		start_date: Union[date, str, None] = None,
		end_date: Union[date, str, None] = None,
	) -> ApiResult:
		params = build_query(
			page=page,
			limit=limit,
			**{"class": class_name},
			batchName=batch_name,
			subject=subject,
			examType=exam_type,
			status=status,
			startDate=format_date(start_date) if start_date else None,
			endDate=format_date(end_date) if end_date else None,
		)
		return await self._client.request(
			"GET", "/api/exam",
			params=params,
			default_error="Failed to fetch exams",
			parse=_parse_exams,
		)
		
	async def get(self, exam_id: str) -> ApiResult:
		return await self._client.request(
			"GET", f"/api/exam/{exam_id}",
			default_error="Failed to fetch exam",
			parse=lambda data: Exam.from_dict(data) if data else None,
		)
		
	async def update(self, exam_id: str, exam: Dict[str, Any]) -> ApiResult:
		return await self._client.request(
			"PUT", f"/api/exam/{exam_id}",
			json_body=compact(exam),
			default_error="Failed to update exam",
			default_message="Exam updated successfully",
		)
		
	async def delete(self, exam_id: str) -> ApiResult:
		return await self._client.request(
			"DELETE", f"/api/exam/{exam_id}",
			default_error="Failed to delete exam",
			default_message="Exam deleted successfully",
		)
		
	async def send_schedule_sms(self, exam_id: str) -> ApiResult:
		return await self._client.request(
			"POST", "/api/exam/schedule/sms",
			json_body={"examId": exam_id},
			default_error="Failed to send exam schedule SMS",
			default_message="Exam schedule SMS sent successfully",
		)
		
	async def create_result(self, result: Dict[str, Any]) -> ApiResult:
		"""Create a single result (``examId``, ``admissionId``, ``marks``, ``totalMarks``...)."""
		return await self._client.request(
			"POST", "/api/exam/results",
			json_body=compact(result),
			default_error="Failed to create exam result",
			default_message="Exam result created successfully",
		)
		
	async def create_results_batch(self, exam_id: str, results: Iterable[Dict[str, Any]]) -> ApiResult:
		return await self._client.request(
			"POST", "/api/exam/results/batch",
			json_body={"examId": exam_id, "results": [compact(row) for row in results]},
			default_error="Failed to create batch exam results",
			default_message="Batch exam results created successfully",
		)
		
	async def results(
		self,
		exam_id: Optional[str] = None,
		admission_id: Optional[str] = None,
		student_id: Optional[str] = None,
		page: int = 1,
		limit: int = 50,
	) -> ApiResult:
		"""Get results; ``data`` is a list of :class:`ExamResult`."""
		params = build_query(
			page=page,
			limit=limit,
			examId=exam_id,
			admissionId=admission_id,
			studentId=student_id,
		)
		return await self._client.request(
			"GET", "/api/exam/results",
			params=params,
			default_error="Failed to fetch exam results",
			parse=_parse_results,
		)
		
	async def send_result_sms(
		self,
		exam_id: str,
		admission_id: Optional[str] = None,
		student_id: Optional[str] = None,
	) -> ApiResult:
		body = compact({"examId": exam_id, "admissionId": admission_id, "studentId": student_id})
		return await self._client.request(
			"POST", "/api/exam/results/sms",
			json_body=body,
			default_error="Failed to send exam result SMS",
			default_message="Exam result SMS sent successfully",
		)
		
	async def stats(self, exam_id: str) -> ApiResult:
		return await self._client.request(
			"GET", "/api/exam/stats",
			params={"examId": exam_id},
			default_error="Failed to fetch exam statistics",
		)
