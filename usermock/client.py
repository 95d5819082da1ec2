"""HTTP client for a running mock user service."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from .service import API_PREFIX


class MockServiceError(RuntimeError):
    """Raised when the mock user service cannot fulfil a request."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass
class _ClientConfig:
    base_url: str
    api_token: Optional[str]
    timeout: float


def _normalize_base_url(base_url: str) -> str:
    cleaned = (base_url or "").strip()
    if not cleaned:
        raise ValueError("Service base URL must not be empty")
    return cleaned.rstrip("/")


def _extract_error_message(payload: object, default: str) -> str:
    if isinstance(payload, dict):
        for key in ("detail", "message", "error"):
            value = payload.get(key)
            if isinstance(value, str) and value.strip():
                return value.strip()
    if isinstance(payload, str) and payload.strip():
        return payload.strip()
    return default


class MockUserClient:
    """Call the ``/api/mock/users`` endpoints of a running service."""

    def __init__(
        self,
        base_url: str,
        *,
        api_token: Optional[str] = None,
        timeout: float = 10.0,
    ) -> None:
        token = api_token.strip() if api_token else None
        self._config = _ClientConfig(
            base_url=_normalize_base_url(base_url),
            api_token=token or None,
            timeout=timeout,
        )

    def list_users(self) -> List[Dict[str, Any]]:
        return self._request("GET", "")

    def get_stats(self) -> Dict[str, int]:
        return self._request("GET", "/stats")

    def generate(self, count: int = 1) -> List[Dict[str, Any]]:
        if count == 1:
            return [self._request("POST", "/generate")]
        return self._request("POST", f"/generate/{count}")

    def username_exists(self, username: str) -> bool:
        path = f"/check/username/{quote(username, safe='')}"
        return bool(self._request("GET", path)["exists"])

    def email_exists(self, email: str) -> bool:
        path = f"/check/email/{quote(email, safe='')}"
        return bool(self._request("GET", path)["exists"])

    def create_user(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return self._request("POST", "", json=payload)

    def validate_login(self, username: str, password: str) -> bool:
        result = self._request(
            "POST",
            "/validate-login",
            json={"username": username, "password": password},
        )
        return bool(result["valid"])

    def reset(self) -> str:
        return self._request("POST", "/reset")["message"]

    def clear(self) -> str:
        return self._request("DELETE", "/clear")["message"]

    def _request(self, method: str, path: str, *, json: Any = None) -> Any:
        url = f"{self._config.base_url}{API_PREFIX}{path}"
        headers = {}
        if self._config.api_token:
            headers["Authorization"] = f"Bearer {self._config.api_token}"

        try:
            response = httpx.request(
                method,
                url,
                json=json,
                headers=headers,
                timeout=self._config.timeout,
            )
        except httpx.RequestError as exc:
            raise MockServiceError(f"Failed to contact mock user service: {exc}") from exc

        if response.status_code >= 400:
            try:
                parsed = response.json()
            except ValueError:
                parsed = response.text
            message = _extract_error_message(
                parsed,
                f"Mock user service request failed with status {response.status_code}",
            )
            if response.status_code == 401:
                message = "Authentication with the mock user service failed"
            elif response.status_code == 403:
                message = "The mock user service rejected the API token"
            raise MockServiceError(message, status_code=response.status_code)

        try:
            return response.json()
        except ValueError as exc:
            raise MockServiceError("Mock user service returned an invalid response") from exc


__all__ = ["MockServiceError", "MockUserClient"]
