#!/usr/bin/env python3
"""
CoachDesk Debug Script

This script checks the connection to the coaching center backend and prints
what each read endpoint returns, so configuration problems show up quickly.

Usage:
    python3 debug_coachdesk.py [YYYY-MM-DD]

Settings are read from the environment and a .env file:
    COACHDESK_API_URL=http://localhost:5000
    COACHDESK_API_TOKEN=your_access_token
"""

import asyncio
import json
import logging
import sys
from datetime import date

from dotenv import load_dotenv

from coachdesk.api.client import CoachDeskClient
from coachdesk.api.exceptions import CoachDeskValidationError
from coachdesk.config import load_settings

load_dotenv()

# Set up detailed logging
logging.basicConfig(
	level=logging.DEBUG,
	format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)


def show(label: str, result) -> None:
	if not result.success:
		print(f"   ❌ {label}: {result.error}")
		return
	data = result.data
	if isinstance(data, list):
		print(f"   ✅ {label}: {len(data)} item(s)")
		for item in data[:3]:
			print(f"      - {item}")
	else:
		print(f"   ✅ {label}: {json.dumps(data, default=str)[:200]}")
	if result.pagination:
		print(f"      page {result.pagination.page}/{result.pagination.total_pages} ({result.pagination.total} total)")


async def main(on: str):
	"""Walk the read endpoints one by one."""
	print("CoachDesk Debug Script")
	try:
		settings = load_settings()
	except CoachDeskValidationError as e:
		print(f"❌ Invalid settings: {e}")
		return
	print(f"Backend: {settings.api_url} (token {'set' if settings.api_token else 'missing'})\n")

	async with CoachDeskClient.from_settings(settings) as client:
		print("1️⃣ Dashboard")
		show("Overview", await client.dashboard.overview())
		show("Quick stats", await client.dashboard.quick_stats())

		print("\n2️⃣ Admissions")
		show("Active roster", await client.admission.list(limit=settings.roster_limit, status="active"))
		show("Statistics", await client.admission.stats())

		print(f"\n3️⃣ Attendance on {on}")
		show("Records", await client.attendance.list(start_date=on, end_date=on, limit=settings.roster_limit))
		show("Statistics", await client.attendance.stats(start_date=on, end_date=on))

		print("\n4️⃣ Exams")
		show("Exams", await client.exam.list())

		print("\n5️⃣ Fees")
		day = date.fromisoformat(on)
		show("Fee records", await client.fee.list(month=day.month, year=day.year, limit=settings.roster_limit))

		print("\n6️⃣ SMS and QR codes")
		show("SMS statistics", await client.sms.stats())
		show("QR codes", await client.qrcode.list())

	print("\n✅ Debug complete! Check the output above for any issues.")


if __name__ == "__main__":
	try:
		asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else date.today().isoformat()))
	except KeyboardInterrupt:
		print("\n\n⚠️ Debug interrupted by user.")
		sys.exit(1)
