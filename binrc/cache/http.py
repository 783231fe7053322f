"""HTTP access to release artifacts.

This module provides:
- HttpClient: Protocol for opening a download stream (injectable for tests)
- RealHttpClient: Real implementation using urllib
- MockHttpClient: Canned responses for testing
"""

from __future__ import annotations

import io
import ssl
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import BinaryIO, Protocol, cast, runtime_checkable

from binrc import __version__
from binrc.core.result import Err, Ok, Result

__all__ = [
    "HttpClient",
    "RealHttpClient",
    "MockHttpClient",
    "HttpError",
]


@dataclass(frozen=True, slots=True)
class HttpError:
    """HTTP error details.

    Attributes:
        url: The URL that failed
        status: HTTP status code (0 for network errors)
        message: Human-readable error message
    """

    url: str
    status: int
    message: str

    def __str__(self) -> str:
        if self.status:
            return f"HTTP {self.status}: {self.message} ({self.url})"
        return f"{self.message} ({self.url})"


@runtime_checkable
class HttpClient(Protocol):
    """Protocol for fetching release artifacts."""

    def open(self, url: str) -> Result[BinaryIO, HttpError]:
        """Issue a GET and return the response body as a stream.

        The caller owns the stream and must close it (it is a context
        manager).

        Args:
            url: URL to fetch

        Returns:
            Ok with a readable binary stream, or Err with HttpError for any
            non-2xx status or network failure
        """
        ...


class RealHttpClient:
    """HTTP client using urllib.

    One GET per call: redirects are followed (release downloads redirect to
    a storage host), nothing is retried.
    """

    def __init__(
        self,
        timeout: float | None = 30.0,
        user_agent: str = f"binrc/{__version__}",
    ) -> None:
        """Initialize HTTP client.

        Args:
            timeout: Socket inactivity timeout in seconds, None to block
            user_agent: User-Agent header value
        """
        self.timeout = timeout
        self.user_agent = user_agent
        self._ssl_context = ssl.create_default_context()

    def open(self, url: str) -> Result[BinaryIO, HttpError]:
        try:
            req = urllib.request.Request(url, headers={"User-Agent": self.user_agent})
            response = urllib.request.urlopen(
                req,
                timeout=self.timeout,
                context=self._ssl_context,
            )
        except urllib.error.HTTPError as e:
            e.close()
            return Err(HttpError(url=url, status=e.code, message=str(e.reason)))
        except urllib.error.URLError as e:
            return Err(HttpError(url=url, status=0, message=str(e.reason)))
        except TimeoutError:
            return Err(HttpError(url=url, status=0, message="Request timed out"))
        except ValueError as e:
            return Err(HttpError(url=url, status=0, message=str(e)))
        except OSError as e:
            return Err(HttpError(url=url, status=0, message=str(e)))

        status = response.status
        if not 200 <= status < 300:
            response.close()
            reason = response.reason or "Unexpected status"
            return Err(HttpError(url=url, status=status, message=reason))
        return Ok(cast(BinaryIO, response))


class MockHttpClient:
    """Mock HTTP client for testing.

    Unknown URLs answer 404. Every call is recorded in ``calls`` so tests can
    assert that no network access happened.

    Usage:
        client = MockHttpClient()
        client.set_response("https://github.com/o/n/releases/download/v1/n.tar.gz", data)
        result = client.open("https://github.com/o/n/releases/download/v1/n.tar.gz")
    """

    def __init__(self) -> None:
        self._responses: dict[str, bytes | HttpError] = {}
        self.calls: list[str] = []

    def set_response(self, url: str, response: bytes | HttpError) -> None:
        self._responses[url] = response

    def open(self, url: str) -> Result[BinaryIO, HttpError]:
        self.calls.append(url)

        if url not in self._responses:
            return Err(HttpError(url=url, status=404, message="Not found (mock)"))

        response = self._responses[url]
        if isinstance(response, HttpError):
            return Err(response)
        return Ok(io.BytesIO(response))
