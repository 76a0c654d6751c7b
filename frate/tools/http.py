"""HTTP client abstraction.

- HttpClient: protocol used by the registry client and the installer
- RealHttpClient: urllib implementation
- MockHttpClient: canned responses for tests

Requests block until the server answers or the configured timeout expires;
there are no retries.
"""

from __future__ import annotations

import json
import ssl
import urllib.error
import urllib.request
from dataclasses import dataclass
from typing import Any, Protocol, cast, runtime_checkable

from frate.core.result import Err, Ok, Result
from frate.core.structured import as_str_dict

__all__ = [
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "RealHttpClient",
]


@dataclass(frozen=True, slots=True)
class HttpError:
    """HTTP failure.

    Attributes:
        url: The URL that failed
        status: HTTP status code (0 for network and decoding errors)
        message: Human-readable reason
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
    """Injectable HTTP GET operations."""

    def get_json(self, url: str) -> Result[dict[str, Any], HttpError]:
        """Fetch ``url`` and parse the body as a JSON object."""
        ...

    def get_bytes(self, url: str) -> Result[bytes, HttpError]:
        """Fetch ``url`` and return the full body.

        Non-2xx responses are errors.
        """
        ...


class RealHttpClient:
    """HTTP client using urllib with the system certificate store."""

    def __init__(self, timeout: float = 30.0, user_agent: str = "frate") -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self._ssl_context = ssl.create_default_context()

    def get_bytes(self, url: str) -> Result[bytes, HttpError]:
        try:
            req = urllib.request.Request(url, headers={"User-Agent": self.user_agent})
            with urllib.request.urlopen(
                req,
                timeout=self.timeout,
                context=self._ssl_context,
            ) as response:
                status = getattr(response, "status", 200)
                if not 200 <= status < 300:
                    return Err(HttpError(url=url, status=status, message="Unexpected status"))
                return Ok(response.read())
        except urllib.error.HTTPError as e:
            return Err(HttpError(url=url, status=e.code, message=str(e.reason)))
        except urllib.error.URLError as e:
            return Err(HttpError(url=url, status=0, message=str(e.reason)))
        except TimeoutError:
            return Err(HttpError(url=url, status=0, message="Request timed out"))
        except ValueError as e:
            return Err(HttpError(url=url, status=0, message=str(e)))
        except OSError as e:
            return Err(HttpError(url=url, status=0, message=str(e)))

    def get_json(self, url: str) -> Result[dict[str, Any], HttpError]:
        result = self.get_bytes(url)
        if isinstance(result, Err):
            return result

        try:
            data = as_str_dict(json.loads(result.value.decode("utf-8")))
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            return Err(HttpError(url=url, status=0, message=f"JSON parse error: {e}"))
        if data is None:
            return Err(HttpError(url=url, status=0, message="Expected JSON object"))
        return Ok(cast(dict[str, Any], data))


class MockHttpClient:
    """Mock HTTP client for testing.

    Unknown URLs answer 404. Every call is recorded in ``calls``.

    Usage:
        client = MockHttpClient()
        client.set_bytes("https://example.com/tool.tar.gz", archive_bytes)
    """

    def __init__(self) -> None:
        self._json_responses: dict[str, dict[str, Any] | HttpError] = {}
        self._bytes_responses: dict[str, bytes | HttpError] = {}
        self.calls: list[tuple[str, str]] = []

    def set_json(self, url: str, response: dict[str, Any] | HttpError) -> None:
        self._json_responses[url] = response

    def set_bytes(self, url: str, response: bytes | HttpError) -> None:
        self._bytes_responses[url] = response

    def get_json(self, url: str) -> Result[dict[str, Any], HttpError]:
        self.calls.append(("get_json", url))

        if url not in self._json_responses:
            return Err(HttpError(url=url, status=404, message="Not found (mock)"))
        response = self._json_responses[url]
        if isinstance(response, HttpError):
            return Err(response)
        return Ok(response)

    def get_bytes(self, url: str) -> Result[bytes, HttpError]:
        self.calls.append(("get_bytes", url))

        if url not in self._bytes_responses:
            return Err(HttpError(url=url, status=404, message="Not found (mock)"))
        response = self._bytes_responses[url]
        if isinstance(response, HttpError):
            return Err(response)
        return Ok(response)

    def urls(self, method: str) -> list[str]:
        """URLs requested through ``method`` ("get_json" or "get_bytes")."""
        return [url for name, url in self.calls if name == method]
