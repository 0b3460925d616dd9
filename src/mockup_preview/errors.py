from __future__ import annotations

from typing import Optional


class PreviewError(Exception):
    """Base class for every failure raised while building a preview."""


class InvalidRequest(PreviewError):
    """The inbound request did not carry a usable artwork URL."""


class FetchError(PreviewError):
    """A remote image could not be retrieved."""

    def __init__(self, url: str, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code


class CompositionError(PreviewError):
    """Normalizing, resizing, layering or encoding an image failed."""


class MockupMetadataError(CompositionError):
    """The mockup's intrinsic width/height could not be determined."""
