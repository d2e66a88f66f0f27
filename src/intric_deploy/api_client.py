"""Base class for the JSON-over-HTTPS API clients."""

import logging
from typing import Any, Dict, Optional

import requests

from intric_deploy.errors import ApiError

logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = 30


class ApiClient:
    """Thin wrapper around a requests session with fatal non-2xx handling."""

    def __init__(self, base_url: str, headers: Dict[str, str], verify: bool = True):
        self.base_url = base_url.rstrip('/')
        self.session = requests.Session()
        self.session.headers.update(headers)
        self.session.verify = verify

    def _make_request(
        self,
        method: str,
        endpoint: str,
        action: str,
        data: Optional[Any] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Any:
        """
        Issue a request and return the decoded JSON body.

        Args:
            method: HTTP method
            endpoint: Path appended to the base URL
            action: Short description used in error messages ("create tenant")
            data: JSON payload
            params: Query string parameters

        Raises:
            ApiError: on transport failure, non-2xx status or a non-JSON body
        """
        url = f"{self.base_url}{endpoint}"
        logger.debug("%s %s", method, url)

        try:
            response = self.session.request(
                method=method,
                url=url,
                json=data,
                params=params,
                timeout=REQUEST_TIMEOUT,
            )
        except requests.RequestException as e:
            raise ApiError(action, body=str(e)) from e

        logger.debug("%s %s -> %s", method, url, response.status_code)

        if not 200 <= response.status_code < 300:
            raise ApiError(action, response.status_code, response.text)

        if not response.text.strip():
            return {}

        try:
            return response.json()
        except ValueError as e:
            raise ApiError(action, response.status_code, response.text) from e
