import logging
from typing import List, Optional

import requests

from config.settings import settings
from schemas.users import RosterEntry

logger = logging.getLogger(__name__)


class RosterAPIClient:
    """Read-only client for the student directory the roster is imported from."""

    def __init__(self, base_url: Optional[str] = None, token: Optional[str] = None,
                 timeout: Optional[int] = None, session: Optional[requests.Session] = None):
        self.base_url = (base_url or settings.ROSTER_API_BASE_URL or "").rstrip("/")
        self.token = token if token is not None else settings.ROSTER_API_TOKEN
        self.timeout = timeout or settings.ROSTER_API_TIMEOUT
        self.session = session or requests.Session()

    def _headers(self) -> dict:
        headers = {"Accept": "application/json"}
        if self.token:
            headers["Authorization"] = f"Bearer {self.token}"
        return headers

    def fetch_students(self, section: Optional[str] = None, year: Optional[int] = None) -> List[RosterEntry]:
        if not self.base_url:
            raise RuntimeError("ROSTER_API_BASE_URL is not configured")

        params = {}
        if section:
            params["section"] = section
        if year:
            params["year"] = year

        url = f"{self.base_url}/students"
        response = self.session.get(url, params=params, headers=self._headers(), timeout=self.timeout)
        response.raise_for_status()
        payload = response.json()
        # accepts a bare list or {"data": [...]}
        rows = payload.get("data", []) if isinstance(payload, dict) else payload
        logger.info(f"Roster API returned {len(rows)} student(s)")
        return [RosterEntry.model_validate(row) for row in rows]


roster_client = RosterAPIClient()
