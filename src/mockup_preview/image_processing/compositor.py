from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from io import BytesIO
from typing import List, Optional, Tuple

from PIL import Image

from ..errors import CompositionError, MockupMetadataError
from ..models import Placement

logger = logging.getLogger(__name__)

Layer = Tuple[Image.Image, Tuple[int, int]]


@dataclass(slots=True)
class CompositionConfig:
    quality: int = 90
    output_format: str = "JPEG"
    # Artwork is flattened to an opaque JPEG before resizing, dropping any
    # transparency it had. Overlay layering relies on the opaque artwork.
    flatten_artwork: bool = True
    resample: Image.Resampling = Image.Resampling.LANCZOS


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def compute_placement(
    mockup_size: Tuple[int, int], scale: float, offset_x: float, offset_y: float
) -> Placement:
    """Translate fractional scale/offsets into pixels of a given mockup.

    ``scale`` and ``offset_x`` are fractions of the mockup width, ``offset_y``
    of its height, so one product definition fits any photo resolution.
    """

    width, height = mockup_size
    return Placement(
        target_width=round_half_up(width * scale),
        left=round_half_up(width * offset_x),
        top=round_half_up(height * offset_y),
    )


class Compositor:
    def __init__(self, config: CompositionConfig | None = None) -> None:
        self.config = config or CompositionConfig()

    def compose(
        self,
        artwork: bytes,
        mockup: bytes,
        scale: float,
        offset_x: float,
        offset_y: float,
        overlay: Optional[bytes] = None,
    ) -> bytes:
        """Place *artwork* on *mockup*, add *overlay* on top, return encoded bytes."""

        if not 0 < scale <= 1:
            raise CompositionError(f"Scale must be in (0, 1], got {scale}")
        try:
            art = self._normalize_artwork(artwork)
            base = self._open_mockup(mockup)
            placement = compute_placement(base.size, scale, offset_x, offset_y)
            logger.debug(
                "Placing artwork %sx%s on mockup %sx%s: width=%s left=%s top=%s",
                art.width,
                art.height,
                base.width,
                base.height,
                placement.target_width,
                placement.left,
                placement.top,
            )
            layers: List[Layer] = [
                (self.resize_artwork(art, placement.target_width), (placement.left, placement.top))
            ]
            if overlay is not None:
                layers.append((self._normalize_overlay(overlay), (0, 0)))
            return self._flatten(base, layers)
        except CompositionError:
            raise
        except (OSError, ValueError, Image.DecompressionBombError) as exc:
            raise CompositionError(str(exc) or exc.__class__.__name__) from exc

    def resize_artwork(self, artwork: Image.Image, target_width: int) -> Image.Image:
        """Scale to *target_width* keeping the aspect ratio; height follows."""

        if target_width < 1:
            raise CompositionError(f"Artwork target width must be positive, got {target_width}")
        width, height = artwork.size
        target_height = max(round_half_up(height * target_width / width), 1)
        if (target_width, target_height) == artwork.size:
            return artwork.convert("RGBA")
        resized = artwork.resize((target_width, target_height), self.config.resample)
        return resized.convert("RGBA")

    def _normalize_artwork(self, data: bytes) -> Image.Image:
        with Image.open(BytesIO(data)) as source:
            rgba = source.convert("RGBA")
        if not self.config.flatten_artwork:
            return rgba

        # JPEG carries no alpha: transparent areas end up on black.
        backdrop = Image.new("RGBA", rgba.size, (0, 0, 0, 255))
        opaque = Image.alpha_composite(backdrop, rgba).convert("RGB")
        with Image.open(BytesIO(self._encode(opaque))) as reencoded:
            return reencoded.convert("RGBA")

    def _open_mockup(self, data: bytes) -> Image.Image:
        try:
            image = Image.open(BytesIO(data))
        except (OSError, ValueError, Image.DecompressionBombError) as exc:
            raise MockupMetadataError(f"Could not read mockup dimensions: {exc}") from exc
        width, height = image.size
        if width <= 0 or height <= 0:
            raise MockupMetadataError("Could not read mockup dimensions.")
        return image

    def _normalize_overlay(self, data: bytes) -> Image.Image:
        with Image.open(BytesIO(data)) as source:
            return source.convert("RGBA")

    def _flatten(self, base: Image.Image, layers: List[Layer]) -> bytes:
        canvas = base.convert("RGBA")
        for layer, dest in layers:
            if layer.width > canvas.width or layer.height > canvas.height:
                raise CompositionError(
                    f"Layer {layer.width}x{layer.height} exceeds mockup {canvas.width}x{canvas.height}"
                )
            # Pixels past the mockup edges are clipped.
            canvas.alpha_composite(layer, dest=dest)
        return self._encode(canvas.convert("RGB"))

    def _encode(self, image: Image.Image) -> bytes:
        buffer = BytesIO()
        image.save(buffer, format=self.config.output_format, quality=self.config.quality)
        return buffer.getvalue()
