import requests
from loguru import logger

from rubrik_stats.core.exceptions import AuthenticationError
from rubrik_stats.core.logging import mask_token


class AuthService:
    """Service responsible for obtaining and releasing Rubrik session tokens.

    Args:
        base_url (str): Cluster base URL, e.g. ``https://rubrik.example.com``.
        verify_ssl (bool): Whether to verify the cluster certificate.
        timeout (float): Per-request timeout in seconds.
    """

    def __init__(self, base_url: str, verify_ssl: bool = True, timeout: float = 20):
        self.login_url = f"{base_url}/api/v1/session"
        self.logout_url = f"{base_url}/api/v1/session/me"
        self.verify_ssl = verify_ssl
        self.timeout = timeout

    def login(self, session: requests.Session, username: str, password: str) -> str:
        """Creates a session with HTTP basic auth and returns its bearer token.

        Args:
            session (requests.Session): HTTP session used for the call.
            username (str): Rubrik username.
            password (str): Rubrik password.

        Returns:
            str: The session token.

        Raises:
            AuthenticationError: If the cluster is unreachable, rejects the
                credentials, or answers without a token.
        """
        logger.info(f"Attempting login for user: {username}")
        try:
            response = session.post(
                self.login_url,
                auth=(username, password),
                verify=self.verify_ssl,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Error during login POST: {e}")
            raise AuthenticationError(f"Could not reach {self.login_url}: {e}") from e

        if not 200 <= response.status_code < 300:
            logger.error(f"Login failed with HTTP {response.status_code}")
            raise AuthenticationError(f"Login rejected with HTTP {response.status_code}")

        try:
            payload = response.json()
        except ValueError as e:
            raise AuthenticationError("Login response is not JSON") from e

        token = payload.get("token") if isinstance(payload, dict) else None
        if not token:
            logger.error("Login response did not contain a session token.")
            raise AuthenticationError("Login response did not contain a session token")

        logger.info(f"Login successful, session token: {mask_token(token)}")
        return token

    def logout(self, session: requests.Session, token: str):
        """Deletes the current session on the cluster. Failures are only logged."""
        try:
            response = session.delete(
                self.logout_url,
                headers={"Authorization": f"Bearer {token}"},
                verify=self.verify_ssl,
                timeout=self.timeout,
            )
            if not 200 <= response.status_code < 300:
                logger.warning(f"Logout answered HTTP {response.status_code}")
            else:
                logger.info("Session closed on the cluster.")
        except requests.RequestException as e:
            logger.warning(f"Failed to close session: {e}")
