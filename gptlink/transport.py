"""HTTP transports that carry requests to the service and bring back responses."""

from __future__ import annotations

import urllib.error
import urllib.request
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable, Optional

HTTP_OK = 200

ProgressCallback = Callable[["HttpResponse"], None]


class TransportError(ConnectionError):
    """Raised when a request could not be completed at all (no HTTP response)."""


@dataclass
class HttpRequest:
    """An outgoing HTTP request."""

    url: str = ""
    method: str = "GET"
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    def set_content_as_string(self, content: str) -> None:
        """Replace the body with UTF-8 encoded text."""
        self.body = content.encode("utf-8")


@dataclass
class HttpResponse:
    """A received HTTP response, possibly partial while streaming."""

    status: int = HTTP_OK
    content: bytes = b""
    url: str = ""
    headers: dict[str, str] = field(default_factory=dict)

    @property
    def text(self) -> str:
        """The body decoded as UTF-8."""
        return self.content.decode("utf-8", errors="replace")

    @property
    def ok(self) -> bool:
        """True for a 2xx status code."""
        return 200 <= self.status < 300


class Transport(ABC):
    """Sends an HttpRequest and returns the HttpResponse."""

    @abstractmethod
    def send(self, request: HttpRequest, on_progress: Optional[ProgressCallback] = None) -> HttpResponse:
        """Perform the request.

        ``on_progress`` is called with the response received so far each time
        more of the body arrives. Raises TransportError when no response could
        be obtained.
        """


class UrllibTransport(Transport):
    """Transport built on urllib from the standard library."""

    def __init__(self, timeout: Optional[float] = None, chunk_size: int = 8192) -> None:
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self.timeout = timeout
        self.chunk_size = chunk_size

    def send(self, request: HttpRequest, on_progress: Optional[ProgressCallback] = None) -> HttpResponse:
        native = urllib.request.Request(
            request.url,
            data=request.body or None,
            headers=dict(request.headers),
            method=request.method,
        )
        try:
            with urllib.request.urlopen(native, timeout=self.timeout) as raw:
                return self._read(raw, raw.status, request.url, on_progress)
        except urllib.error.HTTPError as exc:
            with exc:
                return self._read(exc, exc.code, request.url, on_progress)
        except (urllib.error.URLError, OSError) as exc:
            reason = getattr(exc, "reason", exc)
            raise TransportError(f"request to {request.url} failed: {reason}") from exc

    def _read(self, raw, status: int, url: str, on_progress: Optional[ProgressCallback]) -> HttpResponse:
        headers = dict(raw.headers.items()) if raw.headers is not None else {}
        response = HttpResponse(status=status, url=url, headers=headers)
        received = bytearray()
        while chunk := raw.read(self.chunk_size):
            received.extend(chunk)
            if on_progress is not None:
                on_progress(HttpResponse(status=status, content=bytes(received), url=url, headers=headers))
        response.content = bytes(received)
        return response


class FakeTransport(Transport):
    """Answers every request with a preset body and status 200; records what was sent."""

    def __init__(self, content: str = "") -> None:
        self._content = content
        self.requests: list[HttpRequest] = []

    def set_response(self, content: str) -> None:
        """Set the body returned for the following requests."""
        self._content = content

    def send(self, request: HttpRequest, on_progress: Optional[ProgressCallback] = None) -> HttpResponse:
        self.requests.append(request)
        return HttpResponse(status=HTTP_OK, content=self._content.encode("utf-8"))