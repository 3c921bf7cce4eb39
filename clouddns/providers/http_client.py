"""
HTTP client shared by the REST-based providers (Cloudflare, DigitalOcean).
"""

import logging
from typing import Any, Dict, Optional

import requests

from ..exceptions import ProviderApiError, ProviderConfigError

logger = logging.getLogger(__name__)


class ApiClient:
    """Bearer-token JSON API client on top of a requests session."""

    PROVIDER = ""
    BASE_URL = ""

    def __init__(self, api_token: str, timeout: int = 30, session: Optional[requests.Session] = None):
        if not api_token:
            raise ProviderConfigError(f"{self.PROVIDER} API token not configured")

        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(
            {
                "Authorization": f"Bearer {api_token}",
                "Content-Type": "application/json",
            }
        )

    def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Send a request and return the decoded JSON body."""
        url = path if path.startswith("http") else f"{self.BASE_URL}{path}"
        logger.debug(f"{self.PROVIDER}: {method} {url} params={params}")

        try:
            response = self.session.request(
                method, url, params=params, json=json, timeout=self.timeout
            )
        except requests.RequestException as e:
            raise ProviderApiError(self.PROVIDER, f"Request failed: {e}") from e

        body = self._decode(response)
        self.check_response(response, body)
        return body

    def _decode(self, response) -> Dict[str, Any]:
        if response.status_code == 204 or not response.content:
            return {}
        try:
            body = response.json()
        except ValueError as e:
            raise ProviderApiError(
                self.PROVIDER,
                f"Invalid JSON response (HTTP {response.status_code})",
                response.status_code,
            ) from e
        return body if isinstance(body, dict) else {}

    def check_response(self, response, body: Dict[str, Any]) -> None:
        """Raise ProviderApiError for error responses."""
        if response.status_code >= 400:
            message = body.get("message") or response.reason or "Unknown error"
            raise ProviderApiError(self.PROVIDER, message, response.status_code)
