"""HTTP plumbing: requests, responses, errors and rate-limit headers."""

from __future__ import annotations

import json
import re
import urllib.error
import urllib.parse
import urllib.request
from abc import ABC, abstractmethod
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from datetime import datetime, timedelta
from typing import Any

_UNIT_SECONDS = {
    "ns": 1e-9,
    "us": 1e-6,
    "µs": 1e-6,
    "μs": 1e-6,
    "ms": 1e-3,
    "s": 1.0,
    "m": 60.0,
    "h": 3600.0,
}
_DURATION_PART = re.compile(r"(\d+(?:\.\d*)?|\.\d+)(ns|us|µs|μs|ms|s|m|h)")
_INT = re.compile(r"[+-]?\d+")


def _parse_duration(text: str) -> timedelta:
    sign = 1
    if text[:1] in "+-" and text:
        sign = -1 if text[0] == "-" else 1
        text = text[1:]
    if text == "0":
        return timedelta(0)
    if not text:
        raise ValueError("invalid duration")
    pos = 0
    total = 0.0
    for match in _DURATION_PART.finditer(text):
        if match.start() != pos:
            raise ValueError("invalid duration")
        total += float(match.group(1)) * _UNIT_SECONDS[match.group(2)]
        pos = match.end()
    if pos != len(text):
        raise ValueError("invalid duration")
    return timedelta(seconds=sign * total)


class ResetTime(str):
    """A rate-limit reset value such as ``"6m0s"``."""

    def time(self) -> datetime:
        """Return the moment of reset; an unreadable value means now."""
        try:
            delta = _parse_duration(str(self))
        except ValueError:
            delta = timedelta(0)
        return datetime.now() + delta


def _atoi(value: str | None) -> int:
    if value and _INT.fullmatch(value):
        return int(value)
    return 0


@dataclass
class RateLimitHeaders:
    """The rate-limit headers of a response."""

    limit_requests: int = 0
    limit_tokens: int = 0
    remaining_requests: int = 0
    remaining_tokens: int = 0
    reset_requests: ResetTime = ResetTime("")
    reset_tokens: ResetTime = ResetTime("")

    @classmethod
    def from_headers(cls, headers: Mapping[str, str]) -> RateLimitHeaders:
        """Read the ``x-ratelimit-*`` headers, case-insensitively."""
        lowered = {k.lower(): v for k, v in headers.items()}
        return cls(
            limit_requests=_atoi(lowered.get("x-ratelimit-limit-requests")),
            limit_tokens=_atoi(lowered.get("x-ratelimit-limit-tokens")),
            remaining_requests=_atoi(lowered.get("x-ratelimit-remaining-requests")),
            remaining_tokens=_atoi(lowered.get("x-ratelimit-remaining-tokens")),
            reset_requests=ResetTime(lowered.get("x-ratelimit-reset-requests", "")),
            reset_tokens=ResetTime(lowered.get("x-ratelimit-reset-tokens", "")),
        )


class APIError(Exception):
    """An error reported by the API."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int = 0,
        type: str = "",
        code: Any = None,
        param: Any = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.type = type
        self.code = code
        self.param = param


@dataclass
class Request:
    """An outgoing HTTP request."""

    method: str
    url: str
    headers: dict[str, str] = field(default_factory=dict)
    body: Any = None

    def encoded_body(self) -> bytes | None:
        """Return the body as bytes, JSON-encoding non-byte values."""
        if self.body is None or isinstance(self.body, bytes):
            return self.body
        return json.dumps(self.body).encode()


@dataclass
class Response:
    """A received HTTP response."""

    status_code: int
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    def json(self) -> Any:
        """Decode the body; an error status raises :class:`APIError`."""
        if self.status_code >= 400:
            raise self._error()
        return json.loads(self.body) if self.body.strip() else None

    def _error(self) -> APIError:
        try:
            payload = json.loads(self.body)
            err = payload["error"]
            return APIError(
                str(err.get("message", "")),
                status_code=self.status_code,
                type=err.get("type") or "",
                code=err.get("code"),
                param=err.get("param"),
            )
        except (ValueError, KeyError, TypeError, AttributeError):
            text = self.body.decode(errors="replace")
            return APIError(
                f"error, status code: {self.status_code}, message: {text}",
                status_code=self.status_code,
            )

    def iter_lines(self) -> Iterator[bytes]:
        """Yield the body line by line, each keeping its newline."""
        yield from self.body.splitlines(keepends=True)

    def rate_limit_headers(self) -> RateLimitHeaders:
        """Return the rate-limit headers of this response."""
        return RateLimitHeaders.from_headers(self.headers)


class Transport(ABC):
    """Something that sends a request and returns its response."""

    @abstractmethod
    def send(self, request: Request) -> Response:
        """Send ``request`` and return the response."""


class HTTPTransport(Transport):
    """A transport over the standard library's HTTP client."""

    def __init__(self, timeout: float | None = None) -> None:
        self.timeout = timeout

    def send(self, request: Request) -> Response:
        body = request.encoded_body()
        headers = dict(request.headers)
        if body is not None and not isinstance(request.body, bytes):
            headers.setdefault("Content-Type", "application/json")
        raw = urllib.request.Request(
            request.url, data=body, headers=headers, method=request.method
        )
        try:
            with urllib.request.urlopen(raw, timeout=self.timeout) as resp:
                return Response(resp.status, dict(resp.headers.items()), resp.read())
        except urllib.error.HTTPError as exc:
            return Response(exc.code, dict(exc.headers.items()), exc.read())


def encode_query(params: Mapping[str, Any]) -> str:
    """Encode parameters sorted by key, skipping ``None`` values."""
    items = sorted((k, str(v)) for k, v in params.items() if v is not None)
    return urllib.parse.urlencode(items)