"""HTTP client for the catalogue backend."""

from typing import Any, Dict, List, Optional, Tuple

import requests  # type: ignore[import-untyped]

from catalog_admin.config import (
    API_BASE_URL,
    API_PATH,
    AUTH_BASE_URL,
    AUTH_HEADER,
    HEADERS,
    REQUEST_TIMEOUT,
)
from catalog_admin.errors import ApiResponseError, TransportError, extract_server_message
from catalog_admin.logging_config import get_logger
from catalog_admin.session import SessionStore

__all__ = ["ApiClient", "create_session", "FilesList"]

logger = get_logger("http")

# Multipart parts as accepted by requests: (field, (filename, content[, mime])).
# Text fields use a None filename so they are sent without one.
FilesList = List[Tuple[str, Tuple[Any, ...]]]


def create_session() -> requests.Session:
    """Create a requests Session with the default headers applied."""
    session = requests.Session()
    session.headers.update(HEADERS)
    session.headers.setdefault("Accept-Encoding", "gzip, deflate")
    return session


class ApiClient:
    """Thin wrapper around ``requests`` that speaks the backend's conventions.

    - API endpoints live under ``<base_url>/api``; auth endpoints do not
    - the session token is replayed on every request in the ``access_token`` header
    - non-2xx responses raise ``ApiResponseError`` with the server's message
    - connection failures and timeouts raise ``TransportError``
    - successful responses return decoded JSON (``None`` for an empty body)

    No retries: each call maps to exactly one request.
    """

    def __init__(
        self,
        store: Optional[SessionStore] = None,
        base_url: Optional[str] = None,
        auth_base_url: Optional[str] = None,
        session: Optional[requests.Session] = None,
        timeout: float = REQUEST_TIMEOUT,
    ):
        self.store = store
        self.base_url = (base_url or API_BASE_URL).rstrip("/")
        self.auth_base_url = (auth_base_url or base_url or AUTH_BASE_URL).rstrip("/")
        self.session = session or create_session()
        self.timeout = timeout

    def api_url(self, endpoint: str) -> str:
        return f"{self.base_url}{API_PATH}{endpoint}"

    def auth_url(self, endpoint: str) -> str:
        return f"{self.auth_base_url}{endpoint}"

    def _auth_headers(self) -> Dict[str, str]:
        token = self.store.token if self.store else None
        return {AUTH_HEADER: token} if token else {}

    def request(self, method: str, url: str, **kwargs: Any) -> Any:
        """Issue one request and decode the response.

        Raises:
            TransportError: If no response was received
            ApiResponseError: If the response status is not 2xx
        """
        headers = dict(kwargs.pop("headers", None) or {})
        headers.update(self._auth_headers())

        logger.debug(f"{method} {url}")
        try:
            resp = self.session.request(method, url, headers=headers, timeout=self.timeout, **kwargs)
        except requests.exceptions.Timeout as e:
            logger.error(f"Timeout on {method} {url}: {e}")
            raise TransportError(f"Timed out contacting {url}") from e
        except requests.exceptions.RequestException as e:
            logger.error(f"Request error on {method} {url}: {e}")
            raise TransportError(f"Could not reach {url}: {e}") from e

        if not 200 <= resp.status_code < 300:
            try:
                body = resp.json()
            except ValueError:
                body = None
            message = extract_server_message(body)
            logger.warning(f"{method} {url} returned {resp.status_code}: {message or 'no message'}")
            raise ApiResponseError(resp.status_code, message, url)

        if not resp.content:
            return None
        try:
            return resp.json()
        except ValueError:
            return resp.text

    def get(self, endpoint: str, params: Optional[Dict[str, str]] = None) -> Any:
        return self.request("GET", self.api_url(endpoint), params=params or None)

    def post_json(self, endpoint: str, body: Dict[str, Any]) -> Any:
        return self.request("POST", self.api_url(endpoint), json=body)

    def put_json(self, endpoint: str, body: Dict[str, Any]) -> Any:
        return self.request("PUT", self.api_url(endpoint), json=body)

    def post_multipart(self, endpoint: str, parts: FilesList) -> Any:
        return self.request("POST", self.api_url(endpoint), files=parts)

    def put_multipart(self, endpoint: str, parts: FilesList) -> Any:
        return self.request("PUT", self.api_url(endpoint), files=parts)

    def delete(self, endpoint: str) -> Any:
        return self.request("DELETE", self.api_url(endpoint))

    def post_auth(self, endpoint: str, body: Dict[str, Any]) -> Any:
        return self.request("POST", self.auth_url(endpoint), json=body)

    def close(self) -> None:
        self.session.close()
