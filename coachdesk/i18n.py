"""Bilingual (English/Bengali) interface messages."""

import logging
from dataclasses import dataclass
from typing import Dict

from .const import DEFAULT_LANGUAGE, LANGUAGE_BN, LANGUAGE_EN, LANGUAGES

_LOGGER = logging.getLogger(__name__)

MESSAGES: Dict[str, Dict[str, str]] = {
	# Generic
	"load_failed": {
		LANGUAGE_EN: "Failed to load data",
		LANGUAGE_BN: "ডেটা লোড করতে ব্যর্থ",
	},
	"sms_sent": {
		LANGUAGE_EN: "SMS sent successfully",
		LANGUAGE_BN: "এসএমএস সফলভাবে পাঠানো হয়েছে",
	},
	"sms_failed": {
		LANGUAGE_EN: "Failed to send SMS",
		LANGUAGE_BN: "এসএমএস পাঠাতে ব্যর্থ",
	},
	"sms_already_sent": {
		LANGUAGE_EN: "SMS has already been sent",
		LANGUAGE_BN: "এসএমএস ইতিমধ্যে পাঠানো হয়েছে",
	},
	"validation_failed": {
		LANGUAGE_EN: "Please fix the highlighted fields",
		LANGUAGE_BN: "চিহ্নিত ঘরগুলো সংশোধন করুন",
	},
	"batch_partial": {
		LANGUAGE_EN: "Saved {accepted} record(s), {failed} failed",
		LANGUAGE_BN: "{accepted} টি রেকর্ড সংরক্ষিত, {failed} টি ব্যর্থ",
	},
	# Attendance
	"attendance_marked": {
		LANGUAGE_EN: "Attendance marked successfully",
		LANGUAGE_BN: "হাজিরা সফলভাবে রেকর্ড করা হয়েছে",
	},
	"attendance_failed": {
		LANGUAGE_EN: "Failed to mark attendance",
		LANGUAGE_BN: "হাজিরা রেকর্ড করতে ব্যর্থ",
	},
	"attendance_batch_marked": {
		LANGUAGE_EN: "Attendance marked for {count} student(s)",
		LANGUAGE_BN: "{count} জন ছাত্রের হাজিরা রেকর্ড করা হয়েছে",
	},
	"no_students_selected": {
		LANGUAGE_EN: "No students selected",
		LANGUAGE_BN: "কোন ছাত্র নির্বাচন করা হয়নি",
	},
	"report_failed": {
		LANGUAGE_EN: "Failed to load report",
		LANGUAGE_BN: "রিপোর্ট লোড করতে ব্যর্থ",
	},
	# Exams
	"exam_created": {
		LANGUAGE_EN: "Exam created successfully",
		LANGUAGE_BN: "পরীক্ষা সফলভাবে তৈরি করা হয়েছে",
	},
	"exam_create_failed": {
		LANGUAGE_EN: "Failed to create exam",
		LANGUAGE_BN: "পরীক্ষা তৈরি করতে ব্যর্থ",
	},
	"exam_updated": {
		LANGUAGE_EN: "Exam updated successfully",
		LANGUAGE_BN: "পরীক্ষা সফলভাবে আপডেট করা হয়েছে",
	},
	"exam_update_failed": {
		LANGUAGE_EN: "Failed to update exam",
		LANGUAGE_BN: "পরীক্ষা আপডেট করতে ব্যর্থ",
	},
	"exam_delete_confirm": {
		LANGUAGE_EN: "Are you sure you want to delete this exam?",
		LANGUAGE_BN: "আপনি কি এই পরীক্ষা মুছে ফেলতে চান?",
	},
	"exam_deleted": {
		LANGUAGE_EN: "Exam deleted successfully",
		LANGUAGE_BN: "পরীক্ষা সফলভাবে মুছে ফেলা হয়েছে",
	},
	"exam_delete_failed": {
		LANGUAGE_EN: "Failed to delete exam",
		LANGUAGE_BN: "পরীক্ষা মুছতে ব্যর্থ",
	},
	"exam_schedule_sms_sent": {
		LANGUAGE_EN: "Exam schedule SMS sent successfully",
		LANGUAGE_BN: "পরীক্ষার সময়সূচী এসএমএস সফলভাবে পাঠানো হয়েছে",
	},
	"results_saved": {
		LANGUAGE_EN: "Results saved for {count} student(s)",
		LANGUAGE_BN: "{count} জন ছাত্রের ফলাফল সফলভাবে সংরক্ষণ করা হয়েছে",
	},
	"results_failed": {
		LANGUAGE_EN: "Failed to save results",
		LANGUAGE_BN: "ফলাফল সংরক্ষণ করতে ব্যর্থ",
	},
	"no_results": {
		LANGUAGE_EN: "No results to save",
		LANGUAGE_BN: "কোন ফলাফল নেই",
	},
	"result_sms_sent": {
		LANGUAGE_EN: "Result SMS sent successfully",
		LANGUAGE_BN: "ফলাফল এসএমএস সফলভাবে পাঠানো হয়েছে",
	},
	# Fees
	"fee_created": {
		LANGUAGE_EN: "Fee record created successfully",
		LANGUAGE_BN: "ফি রেকর্ড সফলভাবে তৈরি করা হয়েছে",
	},
	"fee_create_failed": {
		LANGUAGE_EN: "Failed to create fee record",
		LANGUAGE_BN: "ফি রেকর্ড তৈরি করতে ব্যর্থ",
	},
	"bulk_fee_created": {
		LANGUAGE_EN: "Bulk fee records created successfully",
		LANGUAGE_BN: "বাল্ক ফি রেকর্ড সফলভাবে তৈরি করা হয়েছে",
	},
	"bulk_fee_failed": {
		LANGUAGE_EN: "Failed to create bulk fee records",
		LANGUAGE_BN: "বাল্ক ফি রেকর্ড তৈরি করতে ব্যর্থ",
	},
	"payment_updated": {
		LANGUAGE_EN: "Payment updated successfully",
		LANGUAGE_BN: "পেমেন্ট সফলভাবে আপডেট করা হয়েছে",
	},
	"payment_failed": {
		LANGUAGE_EN: "Failed to update payment",
		LANGUAGE_BN: "পেমেন্ট আপডেট করতে ব্যর্থ",
	},
	"payments_saved": {
		LANGUAGE_EN: "Payments saved for {count} student(s)",
		LANGUAGE_BN: "{count} জন ছাত্রের পেমেন্ট সংরক্ষণ করা হয়েছে",
	},
	"no_payments": {
		LANGUAGE_EN: "No payments to save",
		LANGUAGE_BN: "কোন পেমেন্ট নেই",
	},
	"fee_delete_confirm": {
		LANGUAGE_EN: "Are you sure you want to delete this fee record?",
		LANGUAGE_BN: "আপনি কি এই ফি রেকর্ড মুছে ফেলতে চান?",
	},
	"fee_deleted": {
		LANGUAGE_EN: "Fee record deleted successfully",
		LANGUAGE_BN: "ফি রেকর্ড সফলভাবে মুছে ফেলা হয়েছে",
	},
	"fee_delete_failed": {
		LANGUAGE_EN: "Failed to delete fee record",
		LANGUAGE_BN: "ফি রেকর্ড মুছতে ব্যর্থ",
	},
	"reminder_sms_sent": {
		LANGUAGE_EN: "Payment reminder SMS sent successfully",
		LANGUAGE_BN: "পেমেন্ট অনুস্মারক এসএমএস সফলভাবে পাঠানো হয়েছে",
	},
	"overdue_sms_sent": {
		LANGUAGE_EN: "Overdue SMS sent successfully",
		LANGUAGE_BN: "বকেয়া এসএমএস সফলভাবে পাঠানো হয়েছে",
	},
	"payment_sms_sent": {
		LANGUAGE_EN: "Payment confirmation SMS sent successfully",
		LANGUAGE_BN: "পেমেন্ট কনফার্মেশন এসএমএস সফলভাবে পাঠানো হয়েছে",
	},
	"fee_not_overdue": {
		LANGUAGE_EN: "This fee is not overdue",
		LANGUAGE_BN: "এই ফি বকেয়া নয়",
	},
	"fee_not_paid": {
		LANGUAGE_EN: "This fee has not been paid",
		LANGUAGE_BN: "এই ফি পরিশোধ করা হয়নি",
	},
	# Admissions
	"admission_created": {
		LANGUAGE_EN: "Admission created successfully",
		LANGUAGE_BN: "ভর্তি সফলভাবে সম্পন্ন হয়েছে",
	},
	"admission_create_failed": {
		LANGUAGE_EN: "Failed to create admission",
		LANGUAGE_BN: "ভর্তি করতে ব্যর্থ",
	},
	"admission_updated": {
		LANGUAGE_EN: "Admission updated successfully",
		LANGUAGE_BN: "ভর্তি তথ্য সফলভাবে আপডেট করা হয়েছে",
	},
	"admission_update_failed": {
		LANGUAGE_EN: "Failed to update admission",
		LANGUAGE_BN: "ভর্তি তথ্য আপডেট করতে ব্যর্থ",
	},
	"admission_delete_confirm": {
		LANGUAGE_EN: "Are you sure you want to delete this admission?",
		LANGUAGE_BN: "আপনি কি এই ভর্তি মুছে ফেলতে চান?",
	},
	"admission_deleted": {
		LANGUAGE_EN: "Admission deleted successfully",
		LANGUAGE_BN: "ভর্তি সফলভাবে মুছে ফেলা হয়েছে",
	},
	"admission_delete_failed": {
		LANGUAGE_EN: "Failed to delete admission",
		LANGUAGE_BN: "ভর্তি মুছতে ব্যর্থ",
	},
	# SMS
	"sms_number_message_required": {
		LANGUAGE_EN: "Mobile number and message are required",
		LANGUAGE_BN: "মোবাইল নম্বর এবং বার্তা প্রয়োজন",
	},
	"sms_numbers_message_required": {
		LANGUAGE_EN: "Mobile numbers and message are required",
		LANGUAGE_BN: "মোবাইল নম্বর এবং বার্তা প্রয়োজন",
	},
	"sms_one_message_required": {
		LANGUAGE_EN: "At least one message is required",
		LANGUAGE_BN: "কমপক্ষে একটি বার্তা প্রয়োজন",
	},
	"sms_message_required": {
		LANGUAGE_EN: "Message is required",
		LANGUAGE_BN: "বার্তা প্রয়োজন",
	},
	"bulk_sms_sent": {
		LANGUAGE_EN: "Bulk SMS sent successfully",
		LANGUAGE_BN: "Bulk SMS সফলভাবে পাঠানো হয়েছে",
	},
	"bulk_sms_failed": {
		LANGUAGE_EN: "Failed to send bulk SMS",
		LANGUAGE_BN: "Bulk SMS পাঠাতে ব্যর্থ",
	},
	# QR codes
	"qr_name_content_required": {
		LANGUAGE_EN: "Name and content are required",
		LANGUAGE_BN: "নাম এবং কনটেন্ট প্রয়োজন",
	},
	"qr_created": {
		LANGUAGE_EN: "QR code created successfully",
		LANGUAGE_BN: "QR কোড সফলভাবে তৈরি করা হয়েছে",
	},
	"qr_create_failed": {
		LANGUAGE_EN: "Failed to create QR code",
		LANGUAGE_BN: "QR কোড তৈরি করতে ব্যর্থ",
	},
	"qr_updated": {
		LANGUAGE_EN: "QR code updated successfully",
		LANGUAGE_BN: "QR কোড সফলভাবে আপডেট করা হয়েছে",
	},
	"qr_update_failed": {
		LANGUAGE_EN: "Failed to update QR code",
		LANGUAGE_BN: "QR কোড আপডেট করতে ব্যর্থ",
	},
	"qr_delete_confirm": {
		LANGUAGE_EN: "Are you sure you want to delete this QR code?",
		LANGUAGE_BN: "আপনি কি এই QR কোড মুছে ফেলতে চান?",
	},
	"qr_deleted": {
		LANGUAGE_EN: "QR code deleted successfully",
		LANGUAGE_BN: "QR কোড সফলভাবে মুছে ফেলা হয়েছে",
	},
	"qr_delete_failed": {
		LANGUAGE_EN: "Failed to delete QR code",
		LANGUAGE_BN: "QR কোড মুছতে ব্যর্থ",
	},
	"qr_bulk_created": {
		LANGUAGE_EN: "{count} QR code(s) generated successfully",
		LANGUAGE_BN: "{count} টি QR কোড সফলভাবে তৈরি করা হয়েছে",
	},
	"qr_verify_failed": {
		LANGUAGE_EN: "QR code could not be verified",
		LANGUAGE_BN: "QR কোড যাচাই করা যায়নি",
	},
}


@dataclass
class LanguageContext:
	"""The operator's interface language, passed explicitly to every view."""
	language: str = DEFAULT_LANGUAGE
	
	def __post_init__(self):
		if self.language not in LANGUAGES:
			_LOGGER.warning(f"Unsupported language {self.language!r}, falling back to {DEFAULT_LANGUAGE}")
			self.language = DEFAULT_LANGUAGE
			
	def t(self, key: str, **kwargs) -> str:
		"""Translate ``key`` and fill in ``kwargs``.
		
		Unknown keys come back unchanged so a missing entry never hides a toast.
		"""
		entry = MESSAGES.get(key)
		if entry is None:
			_LOGGER.warning(f"Missing translation for {key!r}")
			return key
		text = entry.get(self.language) or entry[LANGUAGE_EN]
		return text.format(**kwargs) if kwargs else text
