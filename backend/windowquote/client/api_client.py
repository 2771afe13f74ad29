"""Synchronous HTTP client for the quote and admin API."""

import logging
from datetime import date
from typing import Any, Dict, List, Optional, Union

import httpx

from ..schemas.booking import coerce_calendar_date

logger = logging.getLogger(__name__)


class ApiError(Exception):
    """Non-2xx response from the API, carrying its ``{message, field}`` body."""

    def __init__(self, status_code: int, message: str, field: Optional[str] = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.field = field


class WindowQuoteClient:
    """Thin wrapper around ``httpx.Client``.

    Pass ``base_url`` to talk to a running server, or an existing
    ``httpx.Client`` (e.g. FastAPI's ``TestClient``) to reuse its transport.
    """

    def __init__(
        self,
        base_url: Union[str, httpx.Client] = "http://localhost:8000",
        timeout: float = 10.0,
    ) -> None:
        if isinstance(base_url, httpx.Client):
            self._http = base_url
            self._owns_http = False
        else:
            self._http = httpx.Client(base_url=base_url, timeout=timeout)
            self._owns_http = True
        self._token: Optional[str] = None

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "WindowQuoteClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def _headers(self) -> Dict[str, str]:
        if self._token:
            return {"Authorization": f"Bearer {self._token}"}
        return {}

    def _request(self, method: str, path: str, **kwargs: Any) -> Any:
        try:
            resp = self._http.request(method, path, headers=self._headers(), **kwargs)
        except httpx.HTTPError as exc:
            logger.error("%s %s failed: %s", method, path, exc)
            raise ApiError(0, "Service unreachable") from exc

        if resp.is_error:
            message, field = _error_detail(resp)
            logger.warning("%s %s -> %s: %s", method, path, resp.status_code, message)
            raise ApiError(resp.status_code, message, field)
        if resp.status_code == 204 or not resp.content:
            return None
        return resp.json()

    def login(self, email: str, password: str) -> str:
        """Sign in as an admin; later admin calls send the bearer token."""
        data = self._request("POST", "/auth/login", data={"username": email, "password": password})
        self._token = data["access_token"]
        return self._token

    def logout(self) -> None:
        self._request("POST", "/auth/logout")
        self._token = None

    def get_settings(self) -> Dict[str, Any]:
        return self._request("GET", "/api/settings")

    def update_settings(self, changes: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/api/settings", json=changes)

    def create_booking(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "/api/bookings", json=payload)

    def list_bookings(self) -> List[Dict[str, Any]]:
        return self._request("GET", "/api/bookings")

    def booking_stats(self) -> Dict[str, Any]:
        return self._request("GET", "/api/bookings/stats")

    def get_availability(self, start: Optional[date] = None, end: Optional[date] = None) -> List[date]:
        params = {}
        if start is not None:
            params["start"] = start.isoformat()
        if end is not None:
            params["end"] = end.isoformat()
        return [coerce_calendar_date(d) for d in self._request("GET", "/api/availability", params=params)]


def _error_detail(resp: httpx.Response) -> tuple[str, Optional[str]]:
    try:
        body = resp.json()
    except ValueError:
        return resp.text or resp.reason_phrase, None
    if not isinstance(body, dict):
        return str(body), None
    message = body.get("message") or body.get("detail") or resp.reason_phrase
    return str(message), body.get("field")
