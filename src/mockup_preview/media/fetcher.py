from __future__ import annotations

import logging
from typing import Optional

import httpx

from ..errors import FetchError

logger = logging.getLogger(__name__)

DEFAULT_USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/120.0 Safari/537.36"
)
DEFAULT_ACCEPT = "image/avif,image/webp,image/png,image/*,*/*"


class ImageFetcher:
    """Download raw image bytes with a browser-like request identity.

    Some CDNs (Shopify's among them) refuse requests without a desktop
    user agent and an image ``Accept`` header. A single attempt is made per
    call; failures surface as :class:`FetchError`.
    """

    __slots__ = ("timeout", "user_agent", "accept", "client")

    def __init__(
        self,
        timeout: Optional[float] = 30.0,
        *,
        user_agent: str = DEFAULT_USER_AGENT,
        accept: str = DEFAULT_ACCEPT,
        client: Optional[httpx.Client] = None,
    ) -> None:
        if timeout is not None and timeout < 0:
            raise ValueError(f"Fetch timeout must not be negative, got {timeout}")
        self.timeout = timeout
        self.user_agent = user_agent
        self.accept = accept
        self.client = client

    def fetch(self, url: str) -> bytes:
        should_close = False
        client = self.client
        if client is None:
            client = httpx.Client(follow_redirects=True, timeout=self.timeout)
            should_close = True

        try:
            logger.debug("Fetching image %s", url)
            response = client.get(url, headers=self._build_headers())
            response.raise_for_status()
            return response.content
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            logger.warning("Image request %s returned status %s", url, status)
            raise FetchError(
                url, f"Image could not be loaded: {url} (HTTP {status})", status_code=status
            ) from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            logger.warning("Failed to fetch %s: %s", url, exc)
            raise FetchError(url, f"Image could not be loaded: {url} ({exc})") from exc
        finally:
            if should_close:
                client.close()

    def _build_headers(self) -> dict[str, str]:
        return {"User-Agent": self.user_agent, "Accept": self.accept}
