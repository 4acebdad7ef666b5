"""QR code management view and SVG preview rendering."""

import base64
import io
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

import qrcode
import qrcode.image.svg

from ..api.exceptions import CoachDeskValidationError
from ..api.models import Pagination, QRCode
from ..validation import QR_FORM_SCHEMA, validate
from .base import BaseView, ViewContext

_LOGGER = logging.getLogger(__name__)

# Rendering settings for previews
QR_SETTINGS = {
	"error_correction": qrcode.constants.ERROR_CORRECT_M,  # ~15% error correction
	"box_size": 10,
	"border": 4,
}


def render_svg(content: str, dark_mode: bool = False) -> str:
	"""Render ``content`` as an SVG document.

	Dark mode puts the code on a white background so it stays readable on a
	dark page.
	"""
	if not content:
		raise ValueError("Cannot render an empty QR code")
	qr = qrcode.QRCode(version=None, **QR_SETTINGS)
	qr.add_data(content)
	qr.make(fit=True)
	factory = qrcode.image.svg.SvgPathFillImage if dark_mode else qrcode.image.svg.SvgPathImage
	img = qr.make_image(image_factory=factory)
	buffer = io.BytesIO()
	img.save(buffer)
	return buffer.getvalue().decode("utf-8")


def svg_data_uri(content: str, dark_mode: bool = False) -> str:
	"""Render ``content`` as a base64 ``data:`` URI usable in an <img> tag."""
	encoded = base64.b64encode(render_svg(content, dark_mode).encode("utf-8")).decode("ascii")
	return f"data:image/svg+xml;base64,{encoded}"


def qr_payload(values: Mapping[str, Any]) -> Dict[str, Any]:
	return {
		"name": values["name"],
		"type": values["type"],
		"content": values["content"],
		"description": values.get("description"),
		"studentId": values.get("student_id"),
		"admissionId": values.get("admission_id"),
		"examId": values.get("exam_id"),
		"expiresAt": values.get("expires_at"),
		"isActive": values.get("is_active", True),
		"metadata": values.get("metadata"),
	}


class QRCodeView(BaseView):
	"""QR code list, create/edit form, bulk generation and verification."""

	def __init__(self, client, context: Optional[ViewContext] = None, page_size: int = 20):
		super().__init__(client, context)
		self.codes: List[QRCode] = []
		self.pagination: Optional[Pagination] = None
		self.page = 1
		self.page_size = page_size
		self.filters: Dict[str, Any] = {}
		self.form: Dict[str, Any] = {}
		self.editing: Optional[str] = None
		self.verification: Optional[Dict[str, Any]] = None
		self.load_error: Optional[str] = None

	@property
	def can_submit(self) -> bool:
		"""Name and content are both filled in."""
		return bool(str(self.form.get("name") or "").strip() and str(self.form.get("content") or "").strip())

	def edit(self, code: Optional[QRCode] = None) -> None:
		"""Open the form, empty or prefilled from ``code``."""
		self.field_errors = {}
		if code is None:
			self.editing = None
			self.form = {"type": "custom", "is_active": True}
			return
		self.editing = code.id
		self.form = {
			"name": code.name,
			"type": code.type,
			"content": code.content,
			"description": code.description,
			"student_id": code.student_id,
			"admission_id": code.admission_id,
			"exam_id": code.exam_id,
			"expires_at": code.expires_at.isoformat() if code.expires_at else None,
			"is_active": code.is_active,
			"metadata": code.metadata or None,
		}

	def preview(self) -> Optional[str]:
		"""Data URI of the form's content, or None while it is blank."""
		content = str(self.form.get("content") or "").strip()
		return svg_data_uri(content, self.context.dark_mode) if content else None

	async def load(self, page: Optional[int] = None, **filters: Any) -> bool:
		if page is not None:
			self.page = max(page, 1)
		if filters:
			self.filters = {key: value for key, value in filters.items() if value not in (None, "")}
		async with self._transition():
			result = await self.client.qrcode.list(page=self.page, limit=self.page_size, **self.filters)
		if not result.success:
			self.load_error = result.error or self.t("load_failed")
			self.notifier.error(self.load_error)
			return False
		self.load_error = None
		self.codes = result.data or []
		self.pagination = result.pagination
		return True

	async def submit(self) -> bool:
		"""Create or update from the form; nothing is sent unless name and content are set."""
		if not self._can_write("submit"):
			return False
		values = self._validate(QR_FORM_SCHEMA, self.form, "qr_name_content_required")
		if values is None:
			return False
		async with self._transition():
			if self.editing:
				result = await self.client.qrcode.update(self.editing, qr_payload(values))
			else:
				result = await self.client.qrcode.create(qr_payload(values))
		if self.editing:
			ok = self._report(result, "qr_update_failed", "qr_updated")
		else:
			ok = self._report(result, "qr_create_failed", "qr_created")
		if not ok:
			return False
		self.editing = None
		self.form = {}
		await self.load()
		return True

	async def create(self, form: Mapping[str, Any]) -> bool:
		self.edit()
		self.form.update(form)
		return await self.submit()

	async def update(self, code: QRCode, changes: Mapping[str, Any]) -> bool:
		self.edit(code)
		self.form.update(changes)
		return await self.submit()

	async def delete(self, qr_id: str) -> bool:
		if not self._can_write("delete"):
			return False
		if not await self._confirm("qr_delete_confirm"):
			return False
		async with self._transition():
			result = await self.client.qrcode.delete(qr_id)
		if not self._report(result, "qr_delete_failed", "qr_deleted"):
			return False
		await self.load()
		return True

	async def bulk_create(self, forms: Iterable[Mapping[str, Any]]) -> bool:
		"""Generate many codes at once; one invalid entry blocks the whole batch."""
		if not self._can_write("bulk_create"):
			return False
		errors: Dict[str, str] = {}
		codes = []
		for index, form in enumerate(forms):
			try:
				codes.append(qr_payload(validate(QR_FORM_SCHEMA, form)))
			except CoachDeskValidationError as err:
				for field_name, message in err.errors.items():
					errors[f"{index}.{field_name}"] = message
		if errors or not codes:
			self.field_errors = errors
			self.notifier.error(self.t("qr_name_content_required"))
			return False
		self.field_errors = {}
		async with self._transition():
			result = await self.client.qrcode.bulk_create(codes)
		count = len(result.data) if isinstance(result.data, list) else len(codes)
		if not self._report(result, "qr_create_failed", "qr_bulk_created", count=count):
			return False
		await self.load()
		return True

	async def verify(self, content: str) -> bool:
		"""Look up scanned content; the backend's answer lands in ``verification``."""
		self.verification = None
		async with self._transition():
			result = await self.client.qrcode.verify(content)
		if not result.success:
			self.notifier.error(result.error or self.t("qr_verify_failed"))
			return False
		self.verification = result.data
		return True
