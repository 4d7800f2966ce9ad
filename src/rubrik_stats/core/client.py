import threading
from typing import Any

import requests
import urllib3
from loguru import logger

from rubrik_stats.core.config import settings
from rubrik_stats.core.exceptions import DecodeError, HTTPStatusError, TransportError
from rubrik_stats.services.auth_service import AuthService

QueryParams = dict[str, str | list[str]]


class RubrikClient:
    """HTTP Client for the Rubrik internal REST API.

    Logs in on construction and attaches the session token to every request.
    A single ``requests.Session`` is shared by all calls.

    Args:
        base_url (str): Cluster base URL. Defaults to ``RUBRIK_BASE_URL``.
        username (str): Rubrik username. Defaults to ``RUBRIK_USERNAME``.
        password (str): Rubrik password. Defaults to ``RUBRIK_PASSWORD``.
        verify_ssl (bool): Verify the cluster certificate. Defaults to ``RUBRIK_VERIFY_SSL``.
        timeout (float): Per-request timeout in seconds. Defaults to ``RUBRIK_TIMEOUT``.

    Raises:
        AuthenticationError: If the initial login fails.
    """

    def __init__(
        self,
        base_url: str | None = None,
        username: str | None = None,
        password: str | None = None,
        verify_ssl: bool | None = None,
        timeout: float | None = None,
    ):
        self.url = (base_url or settings.RUBRIK_BASE_URL).rstrip("/")
        self.username = username if username is not None else settings.RUBRIK_USERNAME
        self.password = password if password is not None else settings.RUBRIK_PASSWORD
        self.verify_ssl = settings.RUBRIK_VERIFY_SSL if verify_ssl is None else verify_ssl
        self.timeout = settings.RUBRIK_TIMEOUT if timeout is None else timeout

        self.session_token = ""
        self.is_logged_in = False
        self.session = requests.Session()
        self.auth_service = AuthService(self.url, verify_ssl=self.verify_ssl, timeout=self.timeout)

        self._login_lock = threading.Lock()

        if not self.verify_ssl:
            logger.warning(f"TLS certificate verification is disabled for {self.url}")
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)

        logger.debug("Create new API Instance")
        self.connect()

    def connect(self):
        """Logs in to the cluster and stores the session token.

        A token held from an earlier login is closed on the cluster first, so
        reconnecting never leaves an orphaned session behind.

        Raises:
            AuthenticationError: If authentication fails.
        """
        with self._login_lock:
            if self.is_logged_in:
                self.auth_service.logout(self.session, self.session_token)
            logger.debug(f"Connecting to Rubrik at {self.url} as user: {self.username}")
            self.is_logged_in = False
            self.session_token = ""
            self.session_token = self.auth_service.login(self.session, self.username, self.password)
            self.is_logged_in = True

    def _headers(self, extra: dict[str, str] | None = None) -> dict[str, str]:
        headers = {
            "Content-Type": settings.RUBRIK_CONTENT_TYPE,
            "Authorization": f"Bearer {self.session_token}",
        }
        if extra:
            headers.update(extra)
        return headers

    def _send(self, method: str, url: str, params, body, headers) -> requests.Response:
        try:
            return self.session.request(
                method,
                url,
                params=params,
                data=body,
                headers=self._headers(headers),
                verify=self.verify_ssl,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"API {method.upper()} Request Failed: {url} | Error: {e}")
            raise TransportError(f"{method.upper()} {url} failed: {e}") from e

    def make_request(
        self,
        method: str,
        path: str,
        params: QueryParams | None = None,
        body: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> Any:
        """Executes an authenticated request against the Rubrik API.

        Args:
            method (str): HTTP method (GET, POST, ...).
            path (str): API path, e.g. ``/api/internal/stats/system_storage``.
            params (dict): Query parameters; values may be lists for repeated keys.
            body (str): Raw request body.
            headers (dict): Extra headers merged over the defaults.

        Returns:
            The decoded JSON body, or None for 204 No Content.

        Raises:
            TransportError: On network-level failures.
            HTTPStatusError: If the API returns a non-2xx status.
            DecodeError: If the body is not valid JSON.
        """
        url = f"{self.url}{path}"
        logger.debug(f"Is logged in: {self.is_logged_in} | Requested action: {method.upper()} {path} {params or ''}")

        response = self._send(method, url, params, body, headers)

        if response.status_code == 401 and settings.RUBRIK_RELOGIN_ON_EXPIRY:
            logger.warning("Session token rejected (Status: 401). Re-authenticating...")
            self.connect()
            response = self._send(method, url, params, body, headers)

        if not 200 <= response.status_code < 300:
            logger.error(f"API Error: HTTP {response.status_code} from {path}")
            response.close()
            raise HTTPStatusError(response.status_code, path)

        if response.status_code == 204 or not response.content:
            return None

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Invalid JSON from {path}: {e}")
            raise DecodeError(f"Invalid JSON from {path}: {e}") from e

    def get(self, path: str, params: QueryParams | None = None) -> Any:
        return self.make_request("GET", path, params=params)

    def close(self):
        """Closes the cluster session (best effort) and releases the HTTP connection pool."""
        if self.is_logged_in:
            self.auth_service.logout(self.session, self.session_token)
        self.session.close()
        self.session_token = ""
        self.is_logged_in = False

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
