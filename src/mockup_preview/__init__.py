from .cache import InMemoryPreviewCache, PreviewCache, build_cache_key
from .config import Settings
from .errors import (
    CompositionError,
    FetchError,
    InvalidRequest,
    MockupMetadataError,
    PreviewError,
)
from .image_processing.compositor import CompositionConfig, Compositor, compute_placement
from .media.fetcher import ImageFetcher
from .models import ArtworkRequest, Placement, ProductMockup
from .products import DEFAULT_PRODUCTS, ProductRegistry, load_products
from .service import PreviewService

__all__ = [
    "ArtworkRequest",
    "CompositionConfig",
    "CompositionError",
    "Compositor",
    "DEFAULT_PRODUCTS",
    "FetchError",
    "ImageFetcher",
    "InMemoryPreviewCache",
    "InvalidRequest",
    "MockupMetadataError",
    "Placement",
    "PreviewCache",
    "PreviewError",
    "PreviewService",
    "ProductMockup",
    "ProductRegistry",
    "Settings",
    "build_cache_key",
    "compute_placement",
    "load_products",
]
