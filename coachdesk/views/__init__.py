"""Headless view-state controllers for the coachdesk dashboard."""

from .admission import AdmissionView
from .attendance import AttendanceView
from .base import BaseView, RosterFilter, ViewContext
from .dashboard import DashboardView
from .exam import ExamView, ResultDraft
from .fee import FeeView, PaymentDraft
from .qrcode import QRCodeView
from .sms import BulkSmsView

__all__ = [
	"AdmissionView",
	"AttendanceView",
	"BaseView",
	"BulkSmsView",
	"DashboardView",
	"ExamView",
	"FeeView",
	"PaymentDraft",
	"QRCodeView",
	"ResultDraft",
	"RosterFilter",
	"ViewContext",
]
