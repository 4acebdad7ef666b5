"""Tests for QR code form handling and SVG rendering."""

import asyncio
import base64

import pytest

from coachdesk.api.models import QRCode
from coachdesk.views.qrcode import QRCodeView, render_svg, svg_data_uri

CODE = {
	"_id": "q1",
	"name": "Alice ID card",
	"type": "student",
	"content": "STU-s1",
	"isActive": True,
}


def test_blank_content_blocks_submission(backend, client, context):
	view = QRCodeView(client, context)
	view.edit()
	view.form.update({"name": "Library pass", "content": "   "})

	assert view.can_submit is False
	assert asyncio.run(view.submit()) is False
	assert backend.calls == []
	assert view.field_errors == {"content": "This field is required"}
	assert context.notifier.last.message == "Name and content are required"


def test_create_sends_camel_case_payload(backend, client, context):
	backend.ok("POST", "/api/qrcode", CODE)
	backend.ok("GET", "/api/qrcode", [CODE])
	view = QRCodeView(client, context)

	ok = asyncio.run(view.create({"name": "Alice ID card", "type": "student", "content": "STU-s1", "student_id": "STU-s1"}))

	assert ok is True
	assert backend.calls_to("POST", "/api/qrcode")[0].json == {
		"name": "Alice ID card",
		"type": "student",
		"content": "STU-s1",
		"studentId": "STU-s1",
		"isActive": True,
	}
	assert view.form == {}
	assert view.codes[0].name == "Alice ID card"
	assert context.notifier.last.message == "QR code created successfully"


def test_update_goes_to_the_edited_code(backend, client, context):
	backend.ok("PUT", "/api/qrcode/q1", CODE)
	backend.ok("GET", "/api/qrcode", [CODE])
	view = QRCodeView(client, context)

	assert asyncio.run(view.update(QRCode.from_dict(CODE), {"is_active": False})) is True
	assert backend.calls_to("PUT", "/api/qrcode/q1")[0].json["isActive"] is False


def test_delete_declined_sends_nothing(backend, client, context):
	view = QRCodeView(client, context)
	assert asyncio.run(view.delete("q1")) is False
	assert backend.calls == []


def test_bulk_create_validates_every_entry(backend, client, context):
	backend.ok("POST", "/api/qrcode/bulk", [CODE, CODE])
	backend.ok("GET", "/api/qrcode", [])
	view = QRCodeView(client, context)

	bad = [{"name": "A", "content": "a"}, {"name": "B", "content": ""}]
	assert asyncio.run(view.bulk_create(bad)) is False
	assert view.field_errors == {"1.content": "This field is required"}
	assert backend.calls_to("POST", "/api/qrcode/bulk") == []

	good = [{"name": "A", "content": "a"}, {"name": "B", "content": "b"}]
	assert asyncio.run(view.bulk_create(good)) is True
	assert len(backend.calls_to("POST", "/api/qrcode/bulk")[0].json["qrCodes"]) == 2
	assert context.notifier.last.message == "2 QR code(s) generated successfully"


def test_load_failure_is_kept_for_display(backend, client, context):
	view = QRCodeView(client, context)
	assert asyncio.run(view.load()) is False
	assert view.load_error.startswith("API endpoint not found")


def test_verify_stores_backend_answer(backend, client, context):
	backend.ok("POST", "/api/qrcode/verify", {"valid": True, "qrCode": CODE})
	view = QRCodeView(client, context)

	assert asyncio.run(view.verify("STU-s1")) is True
	assert view.verification["valid"] is True


def test_render_svg():
	svg = render_svg("https://example.com/student/s1")
	assert "<svg" in svg
	assert "path" in svg


def test_svg_data_uri_round_trips():
	uri = svg_data_uri("STU-s1")
	prefix = "data:image/svg+xml;base64,"
	assert uri.startswith(prefix)
	assert "<svg" in base64.b64decode(uri[len(prefix):]).decode("utf-8")


def test_render_rejects_empty_content():
	with pytest.raises(ValueError):
		render_svg("")


def test_preview_only_with_content(client, context):
	view = QRCodeView(client, context)
	view.edit()
	assert view.preview() is None
	view.form["content"] = "STU-s1"
	assert view.preview().startswith("data:image/svg+xml;base64,")


def test_dark_mode_preview_has_white_background(client, notifier):
	from coachdesk.views.base import ViewContext

	light = render_svg("STU-s1")
	dark = render_svg("STU-s1", dark_mode=True)
	assert 'fill="white"' not in light
	assert 'fill="white"' in dark

	view = QRCodeView(client, ViewContext(notifier=notifier, dark_mode=True))
	view.edit()
	view.form["content"] = "STU-s1"
	prefix = "data:image/svg+xml;base64,"
	assert 'fill="white"' in base64.b64decode(view.preview()[len(prefix):]).decode("utf-8")
