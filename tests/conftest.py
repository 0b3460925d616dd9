from __future__ import annotations

import threading
from io import BytesIO
from typing import Callable, Collection, Dict, List, Optional

import pytest
from PIL import Image

from mockup_preview.errors import FetchError
from mockup_preview.media.fetcher import ImageFetcher


def encode_image(size: tuple[int, int], color, mode: str = "RGB", fmt: str = "PNG") -> bytes:
    buffer = BytesIO()
    Image.new(mode, size, color).save(buffer, format=fmt)
    return buffer.getvalue()


class FakeFetcher(ImageFetcher):
    """Serves canned bytes per URL and records every request.

    Fetches of ``barrier_urls`` wait on ``barrier`` so tests can hold several
    threads inside the same cold-cache request.
    """

    def __init__(
        self,
        responses: Dict[str, bytes],
        barrier: Optional[threading.Barrier] = None,
        barrier_urls: Collection[str] = (),
    ) -> None:
        super().__init__(timeout=None)
        self.responses = responses
        self.barrier = barrier
        self.barrier_urls = set(barrier_urls)
        self.calls: List[str] = []
        self._lock = threading.Lock()

    def fetch(self, url: str) -> bytes:  # type: ignore[override]
        with self._lock:
            self.calls.append(url)
        if self.barrier is not None and url in self.barrier_urls:
            self.barrier.wait(timeout=10)
        if url not in self.responses:
            raise FetchError(url, f"Image could not be loaded: {url} (HTTP 404)", status_code=404)
        return self.responses[url]


@pytest.fixture
def make_image() -> Callable[..., bytes]:
    return encode_image


@pytest.fixture
def fake_fetcher() -> Callable[..., FakeFetcher]:
    return FakeFetcher
