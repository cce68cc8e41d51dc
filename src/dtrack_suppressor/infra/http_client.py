from __future__ import annotations

from typing import Any, Mapping, Optional, TYPE_CHECKING

import httpx

if TYPE_CHECKING:
    from ..core.ports.rate_limiter_port import RateLimiterPort


class ResponseShapeError(TypeError):
    """The response body parsed as JSON but not as the expected object or array."""


class HttpClient:
    def __init__(
        self,
        base_url: str = "",
        base_headers: Optional[Mapping[str, str]] = None,
        timeout_seconds: Optional[float] = None,
        rate_limiter: Optional["RateLimiterPort"] = None
    ) -> None:
        self._client = httpx.Client(
            base_url=base_url,
            timeout=timeout_seconds,
            headers=dict(base_headers or {}),
            follow_redirects=True,
            max_redirects=10
        )
        self._rate_limiter = rate_limiter

    def _send(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        if self._rate_limiter:
            self._rate_limiter.acquire()
        resp = self._client.request(method, url, **kwargs)
        resp.raise_for_status()
        return resp

    def get_json(
        self,
        url: str,
        *,
        params: Optional[Mapping[str, str]] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> dict:
        data = self._send("GET", url, params=params, headers=headers).json()
        if not isinstance(data, dict):
            raise ResponseShapeError("HttpClient invariant violated: expected JSON object")
        return data

    def get_json_list(
        self,
        url: str,
        *,
        params: Optional[Mapping[str, str]] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> list:
        data = self._send("GET", url, params=params, headers=headers).json()
        if not isinstance(data, list):
            raise ResponseShapeError("HttpClient invariant violated: expected JSON array")
        return data

    def put_json(self, url: str, payload: dict, *, headers: Optional[Mapping[str, str]] = None) -> dict:
        resp = self._send("PUT", url, json=payload, headers=headers)
        if not resp.content:
            return {}
        data = resp.json()
        if not isinstance(data, dict):
            raise ResponseShapeError("HttpClient invariant violated: expected JSON object")
        return data

    def close(self) -> None:
        self._client.close()
