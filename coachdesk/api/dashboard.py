"""Dashboard statistics endpoints."""

from .models import ApiResult


class DashboardAPI:
	"""Proxy for ``/api/dashboard``."""
	
	def __init__(self, client):
		self._client = client
		
	async def overview(self) -> ApiResult:
		"""Totals, growth, class/batch distribution, recent admissions and monthly trends."""
		return await self._client.request(
			"GET", "/api/dashboard/overview",
			default_error="Failed to fetch dashboard data",
		)
		
	async def quick_stats(self) -> ApiResult:
		"""Active, pending and teacher counts."""
		return await self._client.request(
			"GET", "/api/dashboard/quick-stats",
			default_error="Failed to fetch stats",
		)
