from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional, Sequence

from ..config import Settings
from ..errors import PreviewError
from ..image_processing.compositor import CompositionConfig, Compositor
from ..media.fetcher import ImageFetcher
from ..products import DEFAULT_PRODUCTS, ProductRegistry, load_products
from ..service import PreviewService


logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Render one product preview to a file")
    parser.add_argument("product", help="Product id, e.g. tote, mug, tee-white, tee-black")
    parser.add_argument("url", help="Artwork image URL")
    parser.add_argument(
        "--output", type=Path, default=Path("preview.jpg"), help="File to write the preview to"
    )
    parser.add_argument(
        "--products", type=Path, default=None, help="Optional JSON file replacing the built-in product table"
    )
    parser.add_argument(
        "--keep-alpha",
        action="store_true",
        help="Keep artwork transparency instead of flattening it to an opaque layer",
    )
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> None:
    args = parse_args(argv)
    try:
        settings = Settings.from_env()
        products_file = args.products or settings.products_file
        registry = ProductRegistry(load_products(products_file) if products_file else DEFAULT_PRODUCTS)
    except (ValueError, OSError) as exc:
        logger.error("Invalid configuration: %s", exc)
        raise SystemExit(1) from exc

    product = registry.get(args.product)
    if product is None:
        logger.error("Unknown product %r; choose one of: %s", args.product, ", ".join(registry.ids()))
        raise SystemExit(1)

    service = PreviewService(
        fetcher=ImageFetcher(timeout=settings.fetch_timeout),
        compositor=Compositor(CompositionConfig(flatten_artwork=not args.keep_alpha)),
    )
    try:
        image, _ = service.render(product, args.url)
    except PreviewError as exc:
        logger.error("Preview generation failed: %s", exc)
        raise SystemExit(2) from exc

    args.output.parent.mkdir(parents=True, exist_ok=True)
    args.output.write_bytes(image)
    logger.info("Stored %s preview at %s", product.id, args.output)


if __name__ == "__main__":
    main()
