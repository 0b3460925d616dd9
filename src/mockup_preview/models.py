from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from .cache import build_cache_key


@dataclass(frozen=True, slots=True)
class ProductMockup:
    """Static placement settings for one product photo."""

    id: str
    cache_prefix: str
    mockup_url: str
    scale: float
    offset_x: float
    offset_y: float
    overlay_url: Optional[str] = None

    def __post_init__(self) -> None:
        if not self.id or not self.id.strip():
            raise ValueError("Product id must be a non-empty string")
        if not self.cache_prefix:
            raise ValueError(f"Product {self.id!r} needs a cache prefix")
        if not self.mockup_url:
            raise ValueError(f"Product {self.id!r} needs a mockup URL")
        if not 0 < self.scale <= 1:
            raise ValueError(f"Product {self.id!r} scale must be in (0, 1], got {self.scale}")

    @property
    def route(self) -> str:
        return f"/{self.id}-preview"


@dataclass(frozen=True, slots=True)
class ArtworkRequest:
    """A single preview request: which artwork goes onto which product."""

    artwork_url: str
    product: ProductMockup

    @property
    def cache_key(self) -> str:
        return build_cache_key(self.product.cache_prefix, self.artwork_url)


@dataclass(frozen=True, slots=True)
class Placement:
    target_width: int
    left: int
    top: int
