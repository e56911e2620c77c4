"""HTTP client for fetching public store pages."""

from __future__ import annotations

import logging

import requests

from tracklist_renamer.exceptions import FetchError

logger = logging.getLogger(__name__)

# Stores serve stripped-down markup to unknown agents
DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Macintosh; Intel Mac OS X 10_15_7) "
    "AppleWebKit/537.36 (KHTML, like Gecko) Chrome/120.0.0.0 Safari/537.36"
)
DEFAULT_TIMEOUT = 30.0


class StoreClient:
    """Fetches release pages with a browser User-Agent.

    Args:
        user_agent: Value for the User-Agent header.
        timeout: Per-request timeout in seconds.
        session: Optional pre-built session (mainly for tests).
    """

    def __init__(
        self,
        user_agent: str = DEFAULT_USER_AGENT,
        timeout: float = DEFAULT_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self.timeout = timeout
        self._session = session if session is not None else requests.Session()
        self._session.headers.update({"User-Agent": user_agent})

    def get_page(self, url: str) -> str:
        """GET *url* and return the body text.

        Raises:
            FetchError: On transport failure or a non-200 status.
        """
        logger.debug("GET %s", url)
        try:
            resp = self._session.get(url, timeout=self.timeout)
        except requests.RequestException as e:
            raise FetchError(url, str(e)) from e

        if resp.status_code != 200:
            raise FetchError(url, f"HTTP {resp.status_code}", status_code=resp.status_code)
        return resp.text
