"""Tests for billing-period fees, payments and fee SMS."""

import asyncio
from datetime import date

import pytest

from coachdesk.api.models import FeeRecord
from coachdesk.views.fee import FeeView, PaymentDraft

from conftest import FakeResponse

TODAY = date(2025, 1, 15)


def fee_row(fee_id, admission_id, paid=None, due="2025-01-31", **extra):
	row = {
		"_id": fee_id,
		"admissionId": admission_id,
		"monthlyFee": 500,
		"month": 1,
		"year": 2025,
		"dueDate": f"{due}T00:00:00.000Z",
	}
	if paid is not None:
		row["amountPaid"] = paid
	row.update(extra)
	return row


def prepare(backend, roster, fees=()):
	backend.ok("GET", "/api/admission", roster)
	backend.ok("GET", "/api/fee", list(fees))
	backend.ok("GET", "/api/fee/stats", {"totalCollected": 0})


def make_view(client, context):
	return FeeView(client, context, month=1, year=2025, today=TODAY)


def test_new_fee_without_payment_is_pending(backend, client, context, roster):
	created = fee_row("f1", "s1")
	backend.ok("GET", "/api/admission", roster)
	backend.add(
		"GET", "/api/fee",
		FakeResponse(200, {"success": True, "data": []}),
		FakeResponse(200, {"success": True, "data": [created]}),
	)
	backend.ok("GET", "/api/fee/stats", {})
	backend.ok("POST", "/api/fee", created)
	view = make_view(client, context)

	async def scenario():
		await view.refresh()
		return await view.create_fee({
			"admission_id": "s1",
			"monthly_fee": "500",
			"due_date": "2025-01-31",
			"month": 1,
			"year": 2025,
		})

	assert asyncio.run(scenario()) is True

	assert backend.calls_to("POST", "/api/fee")[0].json == {
		"admissionId": "s1",
		"monthlyFee": 500.0,
		"dueDate": "2025-01-31",
		"month": 1,
		"year": 2025,
	}
	fee = view.fee_by_admission["s1"]
	assert view.status_of(fee) == "pending"
	assert fee.amount_due == 500.0
	assert context.notifier.last.message == "Fee record created successfully"


def test_create_fee_rejects_non_positive_fee(backend, client, context):
	view = make_view(client, context)

	ok = asyncio.run(view.create_fee({"admission_id": "s1", "monthly_fee": "0", "due_date": "2025-01-31", "month": 1, "year": 2025}))

	assert ok is False
	assert view.field_errors == {"monthly_fee": "Must be greater than 0"}
	assert backend.calls_to("POST", "/api/fee") == []


def test_preview_derives_due_and_status(backend, client, context, roster):
	prepare(backend, roster, [fee_row("f1", "s1")])
	view = make_view(client, context)
	asyncio.run(view.refresh())

	assert view.preview("s1") == (500.0, "pending")
	view.stage_payment("s1", amount_paid=200)
	assert view.preview("s1") == (300.0, "partial")
	view.stage_payment("s1", amount_paid="500")
	assert view.preview("s1") == (0.0, "paid")
	assert view.preview("s2") is None


def test_payment_needs_a_fee_record(backend, client, context, roster):
	prepare(backend, roster, [fee_row("f1", "s1")])
	view = make_view(client, context)
	asyncio.run(view.refresh())

	assert view.draft_of("s2") is None
	with pytest.raises(KeyError):
		view.stage_payment("s2", amount_paid=100)


def test_commit_sends_one_update_per_staged_payment(backend, client, context, roster):
	prepare(backend, roster, [fee_row("f1", "s1"), fee_row("f2", "s2")])
	backend.ok("PUT", "/api/fee/f1", {})
	view = make_view(client, context)

	async def scenario():
		await view.refresh()
		view.stage_payment("s1", amount_paid=500, payment_method="bank", transaction_id="TX-1")
		return await view.commit_payments()

	assert asyncio.run(scenario()) is True

	assert backend.calls_to("PUT", "/api/fee/f2") == []
	puts = backend.calls_to("PUT", "/api/fee/f1")
	assert len(puts) == 1
	assert puts[0].json == {"amountPaid": 500.0, "paymentMethod": "bank", "transactionId": "TX-1", "sendSms": True}
	assert context.notifier.last.message == "Payments saved for 1 student(s)"


def test_partial_payment_commit_keeps_failed_rows_staged(backend, client, context, roster):
	prepare(backend, roster, [fee_row("f1", "s1"), fee_row("f2", "s2")])
	backend.ok("PUT", "/api/fee/f1", {})
	backend.fail("PUT", "/api/fee/f2", status=404, message="Fee record not found")
	view = make_view(client, context)

	async def scenario():
		await view.refresh()
		view.stage_payment("s1", amount_paid=500)
		view.stage_payment("s2", amount_paid=200)
		return await view.commit_payments()

	assert asyncio.run(scenario()) is False

	assert not view.board.is_touched("s1")
	assert view.board.is_touched("s2")
	assert view.draft_of("s2").amount_paid == "200"
	assert context.notifier.last.level == "warning"
	assert context.notifier.last.message == "Saved 1 record(s), 1 failed"


def test_no_staged_payments(backend, client, context, roster):
	prepare(backend, roster, [fee_row("f1", "s1", paid=500)])
	view = make_view(client, context)

	async def scenario():
		await view.refresh()
		return await view.commit_payments()

	assert asyncio.run(scenario()) is False
	assert context.notifier.last.message == "No payments to save"


def test_invalid_payment_method_blocks_commit(backend, client, context, roster):
	prepare(backend, roster, [fee_row("f1", "s1")])
	view = make_view(client, context)

	async def scenario():
		await view.refresh()
		view.stage_payment("s1", amount_paid=100, payment_method="cheque")
		return await view.commit_payments()

	assert asyncio.run(scenario()) is False
	assert view.field_errors == {"s1.payment_method": "Unknown payment method"}
	assert backend.calls_to("PUT", "/api/fee/f1") == []


def test_changing_period_drops_staged_payments(backend, client, context, roster):
	prepare(backend, roster, [fee_row("f1", "s1")])
	view = make_view(client, context)

	async def scenario():
		await view.refresh()
		view.stage_payment("s1", amount_paid=100)
		await view.set_period(2, 2025)

	asyncio.run(scenario())

	assert view.period == (2, 2025)
	assert not view.board.has_pending_edits
	assert backend.calls_to("GET", "/api/fee")[-1].params["month"] == "2"


def test_overdue_sms_requires_overdue_status(backend, client, context):
	backend.ok("POST", "/api/fee/overdue/sms", {})
	backend.ok("GET", "/api/fee", [])
	view = make_view(client, context)

	pending = FeeRecord.from_dict(fee_row("f1", "s1"))
	assert asyncio.run(view.send_overdue_sms(pending)) is False
	assert context.notifier.last.message == "This fee is not overdue"

	overdue = FeeRecord.from_dict(fee_row("f2", "s2", due="2025-01-10"))
	assert asyncio.run(view.send_overdue_sms(overdue)) is True
	assert backend.calls_to("POST", "/api/fee/overdue/sms")[0].json == {"feeId": "f2"}

	already = FeeRecord.from_dict(fee_row("f3", "s3", due="2025-01-10", overdueSmsSent=True))
	assert asyncio.run(view.send_overdue_sms(already)) is False
	assert len(backend.calls_to("POST", "/api/fee/overdue/sms")) == 1


def test_payment_sms_requires_paid_status(backend, client, context):
	backend.ok("POST", "/api/fee/payment/sms", {})
	backend.ok("GET", "/api/fee", [])
	view = make_view(client, context)

	partial = FeeRecord.from_dict(fee_row("f1", "s1", paid=200))
	assert asyncio.run(view.send_payment_sms(partial)) is False
	assert context.notifier.last.message == "This fee has not been paid"

	paid = FeeRecord.from_dict(fee_row("f2", "s2", paid=500))
	assert asyncio.run(view.send_payment_sms(paid)) is True
	assert context.notifier.last.message == "Payment confirmation SMS sent successfully"


def test_reminder_sms_only_once(backend, client, context):
	backend.ok("POST", "/api/fee/reminder/sms", {})
	backend.ok("GET", "/api/fee", [])
	view = make_view(client, context)

	sent = FeeRecord.from_dict(fee_row("f1", "s1", reminderSmsSent=True))
	assert asyncio.run(view.send_reminder_sms(sent)) is False
	assert backend.calls_to("POST", "/api/fee/reminder/sms") == []


def test_delete_fee_asks_first(backend, client, approving_context):
	backend.ok("DELETE", "/api/fee/f1", None)
	backend.ok("GET", "/api/fee", [])
	backend.ok("GET", "/api/fee/stats", {})
	view = make_view(client, approving_context)

	assert asyncio.run(view.delete_fee("f1")) is True
	assert approving_context.notifier.last.message == "Fee record deleted successfully"


def test_payment_draft_from_fee():
	fee = FeeRecord.from_dict(fee_row("f1", "s1", paid=250, paymentMethod="mobile_banking", paymentDate="2025-01-05"))
	draft = PaymentDraft.from_fee(fee)
	assert draft.amount_paid == "250"
	assert draft.payment_method == "mobile_banking"
	assert draft.payment_date == "2025-01-05"
	assert draft.is_complete


def test_unknown_status_filter_is_rejected(backend, client, context):
	view = make_view(client, context)
	with pytest.raises(ValueError):
		asyncio.run(view.set_filters(status="refunded"))
	assert backend.calls == []


def test_persisted_payment_keeps_full_precision(backend, client, context, make_admission):
	prepare(backend, [make_admission("s1", "Alice")], [fee_row("f1", "s1", paid=1234567, monthlyFee=2000000)])
	backend.ok("PUT", "/api/fee/f1", {})
	view = make_view(client, context)

	async def scenario():
		await view.refresh()
		view.stage_payment("s1", payment_method="bank")
		return await view.commit_payments()

	assert asyncio.run(scenario()) is True
	assert view.draft_of("s1").amount_paid == "1234567"
	assert backend.calls_to("PUT", "/api/fee/f1")[0].json["amountPaid"] == 1234567
