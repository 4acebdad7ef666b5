"""Bearer-token handling for backend requests.

The session and its access token are owned by an external auth provider;
this module only turns whatever token is available into request headers.
"""

import inspect
import logging
from typing import Awaitable, Callable, Dict, Optional, Union

_LOGGER = logging.getLogger(__name__)

TokenSource = Callable[[], Union[Optional[str], Awaitable[Optional[str]]]]

DEFAULT_HEADERS = {
	"Accept": "application/json, text/plain, */*",
	"Content-Type": "application/json",
}


class BearerAuth:
	"""Supplies the ``Authorization`` header from a static token or a callable."""
	
	def __init__(self, token: Optional[str] = None, token_source: Optional[TokenSource] = None):
		"""Initialise with either a fixed token or a (sync or async) token source."""
		self._token = token
		self._token_source = token_source
		
	async def get_token(self) -> Optional[str]:
		"""Return the current access token, or None when there is no session."""
		if self._token_source is not None:
			token = self._token_source()
			if inspect.isawaitable(token):
				token = await token
			return token or None
		return self._token or None
		
	async def headers(self) -> Dict[str, str]:
		"""Build request headers, adding the bearer token when available."""
		headers = DEFAULT_HEADERS.copy()
		token = await self.get_token()
		if token:
			headers["Authorization"] = f"Bearer {token}"
		else:
			_LOGGER.debug("No access token available, sending unauthenticated request")
		return headers
