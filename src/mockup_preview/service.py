from __future__ import annotations

import logging

from .cache import InMemoryPreviewCache, PreviewCache
from .errors import CompositionError, InvalidRequest, PreviewError
from .image_processing.compositor import Compositor
from .media.fetcher import ImageFetcher
from .models import ArtworkRequest, ProductMockup

logger = logging.getLogger(__name__)


class PreviewService:
    """Fetch, compose and cache product previews.

    Mockup and overlay images are fetched again on every cache miss; only the
    final composed bytes are cached.
    """

    def __init__(
        self,
        fetcher: ImageFetcher,
        compositor: Compositor | None = None,
        cache: PreviewCache | None = None,
    ) -> None:
        self.fetcher = fetcher
        self.compositor = compositor or Compositor()
        self.cache = cache if cache is not None else InMemoryPreviewCache()

    def render(self, product: ProductMockup, artwork_url: str) -> tuple[bytes, bool]:
        """Return ``(image_bytes, cache_hit)`` for *artwork_url* on *product*."""

        if not isinstance(artwork_url, str) or not artwork_url:
            raise InvalidRequest("Parameter 'url' is missing or invalid.")

        request = ArtworkRequest(artwork_url=artwork_url, product=product)
        cached = self.cache.get(request.cache_key)
        if cached is not None:
            return cached, True

        image = self._generate(request)
        self.cache.put(request.cache_key, image)
        logger.info("Generated %s preview for %s (%s bytes)", product.id, artwork_url, len(image))
        return image, False

    def _generate(self, request: ArtworkRequest) -> bytes:
        product = request.product
        artwork = self.fetcher.fetch(request.artwork_url)
        mockup = self.fetcher.fetch(product.mockup_url)
        overlay = self.fetcher.fetch(product.overlay_url) if product.overlay_url else None
        try:
            return self.compositor.compose(
                artwork,
                mockup,
                scale=product.scale,
                offset_x=product.offset_x,
                offset_y=product.offset_y,
                overlay=overlay,
            )
        except PreviewError:
            raise
        except Exception as exc:  # noqa: BLE001 - any compose failure is a composition error
            raise CompositionError(str(exc) or exc.__class__.__name__) from exc
