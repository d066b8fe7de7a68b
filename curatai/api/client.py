"""HTTP client for communicating with the CuratAI backend."""

import logging
from typing import Any, Callable, Dict, Optional

import requests

from curatai.config import get_config, AppConfig
from curatai.core.exceptions import ApiError, RequestCancelled
from curatai.storage import get_storage, MemoryStorage, ACCESS_TOKEN_KEY

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int], None]


class CancelToken:
    """Cooperative cancellation flag shared by the requests of one owner."""

    def __init__(self):
        self._cancelled = False

    def cancel(self) -> None:
        self._cancelled = True

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def raise_if_cancelled(self) -> None:
        if self._cancelled:
            raise RequestCancelled("Request cancelled")


class ProgressReader:
    """Read-only request body that reports upload progress.

    requests hands file-like bodies to the transport, which pulls them in
    blocks; every block read is one progress tick.
    """

    def __init__(
        self,
        body: bytes,
        on_progress: Optional[ProgressCallback] = None,
        cancel_token: Optional[CancelToken] = None,
    ):
        self._body = body
        self._offset = 0
        self._on_progress = on_progress
        self._cancel_token = cancel_token
        self._last_percent = -1

    def __len__(self) -> int:
        return len(self._body)

    @property
    def bytes_sent(self) -> int:
        return self._offset

    def read(self, size: int = -1) -> bytes:
        if self._cancel_token is not None:
            self._cancel_token.raise_if_cancelled()

        if size is None or size < 0:
            size = len(self._body) - self._offset
        chunk = self._body[self._offset:self._offset + size]
        self._offset += len(chunk)

        if chunk:
            self._report()
        return chunk

    def _report(self) -> None:
        if self._on_progress is None or not self._body:
            return
        percent = progress_percent(self._offset, len(self._body))
        if percent != self._last_percent:
            self._last_percent = percent
            self._on_progress(percent)


def progress_percent(loaded: int, total: int) -> int:
    """Bytes-loaded/bytes-total as a 0-100 integer."""
    if total <= 0:
        return 0
    return max(0, min(100, round(loaded * 100 / total)))


class ApiClient:
    """Synchronous HTTP client for the CuratAI backend.

    The bearer token is re-read from storage on every call, so a login in one
    place is visible to every client without restarting it.
    """

    def __init__(
        self,
        config: Optional[AppConfig] = None,
        storage: Optional[MemoryStorage] = None,
        session: Optional[requests.Session] = None,
    ):
        self.config = config or get_config()
        self.base_url = self.config.api_base_url
        self.timeout = self.config.api_timeout_sec
        self.storage = storage if storage is not None else get_storage()
        self.session = session or requests.Session()
        self.session.headers.update({"Content-Type": "application/json"})

    def _url(self, path: str) -> str:
        """Build full URL from path."""
        return f"{self.base_url}{path}"

    def auth_headers(self) -> Dict[str, str]:
        """Authorization header for the stored access token."""
        token = self.storage.get_item(ACCESS_TOKEN_KEY)
        if not token:
            logger.error("No access token found in storage")
            return {}
        return {"Authorization": f"Bearer {token}"}

    def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict] = None,
        json: Optional[Any] = None,
        data: Optional[Any] = None,
        files: Optional[Dict] = None,
        headers: Optional[Dict[str, Optional[str]]] = None,
        auth: bool = True,
        cancel_token: Optional[CancelToken] = None,
        timeout: Optional[float] = None,
    ) -> Any:
        """Make HTTP request and return the decoded JSON body."""
        if cancel_token is not None:
            cancel_token.raise_if_cancelled()

        request_headers: Dict[str, Optional[str]] = {}
        if auth:
            request_headers.update(self.auth_headers())
        if files is not None or data is not None:
            # Let requests pick multipart/form-encoded content types
            request_headers["Content-Type"] = None
        if headers:
            request_headers.update(headers)

        url = self._url(path)
        try:
            response = self.session.request(
                method=method,
                url=url,
                params=params,
                json=json,
                data=data,
                files=files,
                headers=request_headers,
                timeout=timeout or self.timeout,
            )
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            detail = _error_detail(e.response)
            raise ApiError(e.response.status_code, detail or str(e), detail) from e
        except requests.exceptions.RequestException as e:
            if cancel_token is not None:
                cancel_token.raise_if_cancelled()
            raise ApiError(0, f"Connection error: {e}") from e

        if cancel_token is not None and cancel_token.cancelled:
            logger.debug(f"Discarding response for cancelled request {method} {path}")
            raise RequestCancelled(f"{method} {path} cancelled")

        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise ApiError(response.status_code, "Invalid JSON in response") from e

    def get(self, path: str, params: Optional[Dict] = None, **kwargs) -> Any:
        """HTTP GET request."""
        return self.request("GET", path, params=params, **kwargs)

    def post(self, path: str, json: Optional[Any] = None, **kwargs) -> Any:
        """HTTP POST request."""
        return self.request("POST", path, json=json, **kwargs)

    def delete(self, path: str, json: Optional[Any] = None, **kwargs) -> Any:
        """HTTP DELETE request."""
        return self.request("DELETE", path, json=json, **kwargs)

    def fetch_bytes(self, url: str, cancel_token: Optional[CancelToken] = None) -> bytes:
        """Download a resource by absolute URL (image storage links)."""
        if cancel_token is not None:
            cancel_token.raise_if_cancelled()
        try:
            response = self.session.request(method="GET", url=url, timeout=self.timeout)
            response.raise_for_status()
        except requests.exceptions.HTTPError as e:
            raise ApiError(e.response.status_code, f"Could not fetch {url}") from e
        except requests.exceptions.RequestException as e:
            raise ApiError(0, f"Connection error: {e}") from e
        if cancel_token is not None:
            cancel_token.raise_if_cancelled()
        return response.content


def _error_detail(response: Optional[requests.Response]) -> Optional[str]:
    """Extract the backend's error text from a failed response."""
    if response is None:
        return None
    try:
        payload = response.json()
    except ValueError:
        return None
    if not isinstance(payload, dict):
        return None
    detail = payload.get("detail") or payload.get("message")
    if detail is None:
        return None
    return detail if isinstance(detail, str) else str(detail)


# Global client instance
_client: Optional[ApiClient] = None


def get_client() -> ApiClient:
    """Get the global API client instance."""
    global _client
    if _client is None:
        _client = ApiClient()
    return _client


def set_client(client: Optional[ApiClient]) -> None:
    """Set the global API client instance."""
    global _client
    _client = client
