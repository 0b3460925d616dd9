from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict, Iterable, Iterator, Optional

from .models import ProductMockup

logger = logging.getLogger(__name__)

_CDN_BASE = "https://cdn.shopify.com/s/files/1/0958/7346/6743/files"

DEFAULT_PRODUCTS: tuple[ProductMockup, ...] = (
    ProductMockup(
        id="tote",
        cache_prefix="TOTE",
        mockup_url=f"{_CDN_BASE}/IMG_1902.jpg?v=1765218360",
        scale=0.34,
        offset_x=0.295,
        offset_y=0.41,
    ),
    ProductMockup(
        id="mug",
        cache_prefix="MUG",
        mockup_url=f"{_CDN_BASE}/IMG_1901.jpg?v=1765218358",
        scale=0.30,
        offset_x=0.34,
        offset_y=0.39,
    ),
    ProductMockup(
        id="tee-white",
        cache_prefix="TEE_WHITE",
        mockup_url=f"{_CDN_BASE}/IMG_1926.jpg?v=1765367168",
        scale=0.36,
        offset_x=0.31,
        offset_y=0.26,
        overlay_url=f"{_CDN_BASE}/ber_wei_e_Shirt.png?v=1765367191",
    ),
    ProductMockup(
        id="tee-black",
        cache_prefix="TEE_BLACK",
        mockup_url=f"{_CDN_BASE}/IMG_1924.jpg?v=1765367167",
        scale=0.36,
        offset_x=0.31,
        offset_y=0.26,
        overlay_url=f"{_CDN_BASE}/ber_schwarze_Shirt.png?v=1765367224",
    ),
)


class ProductRegistry:
    """Read-only lookup of product mockups, kept in declaration order."""

    __slots__ = ("_products",)

    def __init__(self, products: Iterable[ProductMockup] = DEFAULT_PRODUCTS) -> None:
        self._products: Dict[str, ProductMockup] = {}
        for product in products:
            if product.id in self._products:
                raise ValueError(f"Duplicate product id: {product.id}")
            self._products[product.id] = product
        if not self._products:
            raise ValueError("At least one product mockup is required")

    def get(self, product_id: str) -> Optional[ProductMockup]:
        return self._products.get(product_id)

    def ids(self) -> list[str]:
        return list(self._products)

    def __iter__(self) -> Iterator[ProductMockup]:
        return iter(self._products.values())

    def __len__(self) -> int:
        return len(self._products)


def load_products(path: Path) -> tuple[ProductMockup, ...]:
    """Read a product table from a JSON list of mockup objects.

    Each object takes the :class:`ProductMockup` field names; ``cache_prefix``
    defaults to the upper-cased id with dashes turned into underscores.
    """

    raw = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(raw, list):
        raise ValueError(f"{path}: expected a JSON list of product mockups")

    products = []
    for index, item in enumerate(raw):
        if not isinstance(item, dict):
            raise ValueError(f"{path}: entry {index} is not an object")
        try:
            product_id = str(item["id"])
            products.append(
                ProductMockup(
                    id=product_id,
                    cache_prefix=str(item.get("cache_prefix") or product_id.upper().replace("-", "_")),
                    mockup_url=str(item["mockup_url"]),
                    scale=float(item["scale"]),
                    offset_x=float(item.get("offset_x", 0.0)),
                    offset_y=float(item.get("offset_y", 0.0)),
                    overlay_url=item.get("overlay_url") or None,
                )
            )
        except KeyError as exc:
            raise ValueError(f"{path}: entry {index} is missing {exc.args[0]!r}") from exc
        except (TypeError, ValueError) as exc:
            raise ValueError(f"{path}: entry {index} is invalid: {exc}") from exc
    logger.info("Loaded %s product mockups from %s", len(products), path)
    return tuple(products)
