"""
Preview HTTP API

Endpoints:
- GET /                   liveness text
- GET /<product>-preview  artwork composed onto the product mockup

Every preview route takes the artwork address as ``?url=``. Successful
responses declare ``image/png`` while the body is JPEG encoded.
"""

from __future__ import annotations

import logging
from typing import Callable, Optional

from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response

from ..cache import InMemoryPreviewCache
from ..config import Settings
from ..errors import InvalidRequest, PreviewError
from ..image_processing.compositor import Compositor
from ..media.fetcher import ImageFetcher
from ..models import ProductMockup
from ..products import DEFAULT_PRODUCTS, ProductRegistry, load_products
from ..service import PreviewService

logger = logging.getLogger(__name__)

PREVIEW_MEDIA_TYPE = "image/png"
INVALID_URL_MESSAGE = "Parameter 'url' is missing or invalid."


def create_app(
    service: Optional[PreviewService] = None,
    registry: Optional[ProductRegistry] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """Wire a FastAPI app around one preview service and one product table.

    Anything not passed in is built from *settings* (or the environment), so
    the process holds exactly one cache shared by every route.
    """

    if service is None or registry is None:
        settings = settings or Settings.from_env()
    if registry is None:
        products = load_products(settings.products_file) if settings.products_file else DEFAULT_PRODUCTS
        registry = ProductRegistry(products)
    if service is None:
        service = PreviewService(
            fetcher=ImageFetcher(timeout=settings.fetch_timeout),
            compositor=Compositor(),
            cache=InMemoryPreviewCache(),
        )

    app = FastAPI(title="Mockup Preview Service")
    app.state.preview_service = service
    app.state.product_registry = registry

    health_text = f"mockup-preview (no background removal; products: {', '.join(registry.ids())}) is running."

    @app.get("/", response_class=PlainTextResponse)
    def health() -> str:
        return health_text

    app.include_router(build_preview_router(service, registry))
    return app


def build_preview_router(service: PreviewService, registry: ProductRegistry) -> APIRouter:
    router = APIRouter(tags=["Previews"])
    for product in registry:
        router.add_api_route(
            product.route,
            _preview_endpoint(service, product),
            methods=["GET"],
            name=f"{product.id}_preview",
            response_class=Response,
        )
    return router


def _preview_endpoint(service: PreviewService, product: ProductMockup) -> Callable[[Request], Response]:
    # Sync handler: FastAPI runs it in the threadpool, so blocking fetches
    # and image work overlap across requests.
    def preview(request: Request) -> Response:
        values = request.query_params.getlist("url")
        try:
            if len(values) != 1 or not values[0]:
                raise InvalidRequest(INVALID_URL_MESSAGE)
            image, cache_hit = service.render(product, values[0])
        except InvalidRequest as exc:
            return JSONResponse(status_code=400, content={"error": str(exc)})
        except PreviewError as exc:
            logger.exception("Error in %s", product.route)
            return JSONResponse(
                status_code=500,
                content={"error": f"Internal error in {product.route}", "detail": str(exc)},
            )

        return Response(
            content=image,
            media_type=PREVIEW_MEDIA_TYPE,
            headers={"X-Cache": "HIT" if cache_hit else "MISS"},
        )

    preview.__name__ = f"{product.id.replace('-', '_')}_preview"
    return preview
