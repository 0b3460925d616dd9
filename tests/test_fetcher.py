from __future__ import annotations

import httpx
import pytest

from mockup_preview.errors import FetchError
from mockup_preview.media.fetcher import DEFAULT_ACCEPT, ImageFetcher


def _client(handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler), follow_redirects=True)


def test_fetch_sends_browser_identity() -> None:
    seen: list[httpx.Request] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, content=b"image-bytes")

    fetcher = ImageFetcher(client=_client(handler))
    assert fetcher.fetch("https://cdn.example.com/art.png") == b"image-bytes"

    assert len(seen) == 1
    assert seen[0].headers["User-Agent"].startswith("Mozilla/5.0")
    assert "Chrome" in seen[0].headers["User-Agent"]
    assert seen[0].headers["Accept"] == DEFAULT_ACCEPT


def test_fetch_follows_redirects() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/old.png":
            return httpx.Response(301, headers={"Location": "https://cdn.example.com/new.png"})
        return httpx.Response(200, content=b"moved")

    fetcher = ImageFetcher(client=_client(handler))
    assert fetcher.fetch("https://cdn.example.com/old.png") == b"moved"


@pytest.mark.parametrize("status", [403, 404, 500])
def test_error_status_raises_fetch_error(status: int) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status)

    fetcher = ImageFetcher(client=_client(handler))
    with pytest.raises(FetchError) as excinfo:
        fetcher.fetch("https://cdn.example.com/missing.png")

    assert excinfo.value.status_code == status
    assert excinfo.value.url == "https://cdn.example.com/missing.png"
    assert f"HTTP {status}" in str(excinfo.value)


def test_transport_failure_raises_fetch_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection reset", request=request)

    fetcher = ImageFetcher(client=_client(handler))
    with pytest.raises(FetchError) as excinfo:
        fetcher.fetch("https://cdn.example.com/art.png")

    assert excinfo.value.status_code is None
    assert "connection reset" in str(excinfo.value)


def test_no_retry_after_failure() -> None:
    attempts: list[str] = []

    def handler(request: httpx.Request) -> httpx.Response:
        attempts.append(str(request.url))
        return httpx.Response(503)

    fetcher = ImageFetcher(client=_client(handler))
    with pytest.raises(FetchError):
        fetcher.fetch("https://cdn.example.com/art.png")
    assert len(attempts) == 1


def test_unsupported_scheme_raises_fetch_error() -> None:
    fetcher = ImageFetcher(timeout=1.0)
    with pytest.raises(FetchError):
        fetcher.fetch("ftp://example.com/art.png")


def test_injected_client_is_not_closed() -> None:
    client = _client(lambda request: httpx.Response(200, content=b"ok"))
    fetcher = ImageFetcher(client=client)
    fetcher.fetch("https://cdn.example.com/a.png")
    assert not client.is_closed


def test_negative_timeout_is_rejected() -> None:
    with pytest.raises(ValueError, match="negative"):
        ImageFetcher(timeout=-1.0)
