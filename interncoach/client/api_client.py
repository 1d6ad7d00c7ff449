"""HTTP client for the /api/internships resource."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Optional

import httpx

from interncoach.core.config import get_settings

logger = logging.getLogger(__name__)

API_PATH = "/api/internships"


class ClientError(Exception):
    """Raised when the store service answers with an unexpected status."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class NotFoundError(ClientError):
    """Raised on 404 for a single-record call."""


class InternshipClient:
    """
    Thin wrapper over httpx.Client.

    Pass http= to reuse an existing client (FastAPI's TestClient is one).
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        timeout: Optional[float] = None,
        http: Optional[httpx.Client] = None,
    ) -> None:
        if http is not None:
            self._http = http
            self._owns_http = False
        else:
            settings = get_settings()
            self._http = httpx.Client(
                base_url=base_url or settings.api_url,
                timeout=timeout if timeout is not None else settings.http_timeout,
            )
            self._owns_http = True

    def close(self) -> None:
        if self._owns_http:
            self._http.close()

    def __enter__(self) -> "InternshipClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # -------------------------- calls --------------------------
    def list(self) -> list[dict]:
        return self._send("GET", API_PATH)

    def get(self, internship_id: str) -> dict:
        return self._send("GET", f"{API_PATH}/{internship_id}")

    def create(self, fields: Mapping[str, Any]) -> dict:
        return self._send("POST", API_PATH, json=dict(fields))

    def update(self, internship_id: str, fields: Mapping[str, Any]) -> dict:
        return self._send("PATCH", f"{API_PATH}/{internship_id}", json=dict(fields))

    def update_status(self, internship_id: str, status: str) -> dict:
        return self.update(internship_id, {"status": status})

    def delete(self, internship_id: str) -> str:
        return self._send("DELETE", f"{API_PATH}/{internship_id}").get("message", "")

    def clear(self) -> str:
        return self._send("DELETE", API_PATH).get("message", "")

    def _send(self, method: str, path: str, **kwargs) -> Any:
        try:
            response = self._http.request(method, path, **kwargs)
        except httpx.HTTPError as exc:
            logger.error("%s %s failed: %s", method, path, exc)
            raise ClientError(f"Network error: {exc}") from exc
        if response.is_success:
            return response.json()
        message = _error_message(response)
        logger.warning("%s %s -> %s %s", method, path, response.status_code, message)
        if response.status_code == 404:
            raise NotFoundError(message, 404)
        raise ClientError(message, response.status_code)


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase
    if isinstance(body, dict):
        message = body.get("error") or body.get("detail") or ""
        details = body.get("details")
        if details:
            message = f"{message}: {'; '.join(str(d) for d in details)}"
        return str(message) or response.reason_phrase
    return response.reason_phrase
