from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Mapping

import requests

DEFAULT_BASE_URL = "http://localhost:5289"
DEFAULT_TIMEOUT_SECONDS = 10.0

_JSON_HEADERS = {"Content-Type": "application/json"}


@dataclass
class TransportResult:
    method: str
    url: str
    status_code: int | None = None
    text: str = ""
    headers: Mapping[str, str] = field(default_factory=dict)
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.status_code is not None and 200 <= self.status_code < 300

    def header(self, name: str) -> str | None:
        value = self.headers.get(name)
        if value is not None:
            return value
        lowered = name.lower()
        for key, candidate in self.headers.items():
            if key.lower() == lowered:
                return candidate
        return None


@dataclass
class HttpTransport:
    """Single-attempt JSON requests against the score API.

    Every call resolves to a :class:`TransportResult`; connection errors and
    timeouts are reported through ``error`` instead of being raised.
    """
    base_url: str = DEFAULT_BASE_URL
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    log_requests: bool = False
    session: Any | None = None

    def __post_init__(self) -> None:
        if self.session is None:
            self.session = requests.Session()
        self.logger = logging.getLogger(__name__)

    def url_for(self, path: str) -> str:
        return f"{self.base_url.rstrip('/')}{path}"

    def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        json_body: Mapping[str, Any] | None = None,
    ) -> TransportResult:
        method = method.upper()
        url = self.url_for(path)
        kwargs: dict[str, Any] = {"timeout": self.timeout_seconds}
        if params:
            kwargs["params"] = dict(params)
        if json_body is not None:
            kwargs["json"] = dict(json_body)
            kwargs["headers"] = dict(_JSON_HEADERS)

        if self.log_requests:
            self.logger.info("%s %s params=%s", method, url, kwargs.get("params"))

        try:
            response = self.session.request(method, url, **kwargs)
        except requests.Timeout as exc:
            self.logger.warning("request timed out after %ss: %s %s (%s)", self.timeout_seconds, method, url, exc)
            return TransportResult(method=method, url=url, error=f"timeout: {exc}")
        except requests.RequestException as exc:
            self.logger.warning("request failed: %s %s (%s)", method, url, exc)
            return TransportResult(method=method, url=url, error=str(exc))

        result = TransportResult(
            method=method,
            url=url,
            status_code=response.status_code,
            text=response.text or "",
            headers=response.headers or {},
        )

        if not result.ok:
            self.logger.warning("request error: %s %s -> %s", method, url, result.status_code)
        elif self.log_requests:
            self.logger.info("%s %s -> %s", method, url, result.status_code)

        return result

    async def send(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, Any] | None = None,
        json_body: Mapping[str, Any] | None = None,
    ) -> TransportResult:
        return await asyncio.to_thread(self.request, method, path, params=params, json_body=json_body)

    def close(self) -> None:
        close = getattr(self.session, "close", None)
        if callable(close):
            close()
