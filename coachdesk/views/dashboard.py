"""Landing page statistics."""

import asyncio
import logging
from typing import Any, Dict, Optional

from .base import BaseView

_LOGGER = logging.getLogger(__name__)


class DashboardView(BaseView):
	"""Overview totals and quick stats, fetched together."""

	overview: Optional[Dict[str, Any]] = None
	quick_stats: Optional[Dict[str, Any]] = None

	async def refresh(self) -> bool:
		async with self._transition():
			overview, quick = await asyncio.gather(
				self.client.dashboard.overview(),
				self.client.dashboard.quick_stats(),
			)
		if overview.success:
			self.overview = overview.data
		if quick.success:
			self.quick_stats = quick.data
		if not overview.success:
			self.notifier.error(overview.error or self.t("load_failed"))
			return False
		return True
