"""Constants for the coachdesk dashboard."""

# Configuration (environment variable names)
CONF_API_URL = "COACHDESK_API_URL"
CONF_API_TOKEN = "COACHDESK_API_TOKEN"
CONF_LANGUAGE = "COACHDESK_LANGUAGE"
CONF_REQUEST_TIMEOUT = "COACHDESK_REQUEST_TIMEOUT"
CONF_RETRY_ATTEMPTS = "COACHDESK_RETRY_ATTEMPTS"
CONF_RETRY_BACKOFF = "COACHDESK_RETRY_BACKOFF"
CONF_ROSTER_LIMIT = "COACHDESK_ROSTER_LIMIT"
CONF_LOG_LEVEL = "COACHDESK_LOG_LEVEL"

# Default values
DEFAULT_API_URL = "http://localhost:5000"
DEFAULT_LANGUAGE = "en"
DEFAULT_RETRY_ATTEMPTS = 0  # Transport failures are not retried unless configured
DEFAULT_RETRY_BACKOFF = 0.5
DEFAULT_ROSTER_LIMIT = 1000  # Roster and snapshot loads fetch one big page
DEFAULT_PAGE_SIZE = 10
DEFAULT_LOG_LEVEL = "INFO"

# Interface languages
LANGUAGE_EN = "en"
LANGUAGE_BN = "bn"
LANGUAGES = (LANGUAGE_EN, LANGUAGE_BN)

# Attendance
ATTENDANCE_PRESENT = "present"
ATTENDANCE_ABSENT = "absent"
ATTENDANCE_STATUSES = (ATTENDANCE_PRESENT, ATTENDANCE_ABSENT)
REPORT_PERIODS = ("week", "month")

# Admissions
ADMISSION_ACTIVE = "active"
ADMISSION_STATUSES = ("active", "inactive", "completed")

# Exams
EXAM_TYPES = ("quiz", "midterm", "final", "assignment", "other")
EXAM_STATUSES = ("scheduled", "completed", "cancelled")

# Fees
FEE_STATUSES = ("pending", "paid", "partial", "overdue")
PAYMENT_METHODS = ("cash", "bank", "mobile_banking", "other")

# QR codes
QR_TYPES = ("student", "exam", "admission", "custom", "url", "text")

# Toast levels
TOAST_SUCCESS = "success"
TOAST_ERROR = "error"
TOAST_WARNING = "warning"
TOAST_INFO = "info"
