from __future__ import annotations

import logging
from typing import Dict, Optional, Protocol

logger = logging.getLogger(__name__)


def build_cache_key(prefix: str, artwork_url: str) -> str:
    """Join *prefix* and *artwork_url* verbatim; URLs are never normalized."""

    return f"{prefix}_{artwork_url}"


class PreviewCache(Protocol):
    def get(self, key: str) -> Optional[bytes]: ...

    def put(self, key: str, value: bytes) -> None: ...


class InMemoryPreviewCache:
    """Process-lifetime preview store.

    Entries are never evicted or expired. Single-key ``get``/``put`` on a
    dict are atomic under the GIL, so concurrent handlers need no lock; two
    requests racing on the same cold key both store equal bytes.
    """

    def __init__(self) -> None:
        self._entries: Dict[str, bytes] = {}

    def get(self, key: str) -> Optional[bytes]:
        value = self._entries.get(key)
        if value is not None:
            logger.debug("Preview cache hit for %s", key)
        return value

    def put(self, key: str, value: bytes) -> None:
        self._entries[key] = value
        logger.debug("Stored preview %s (%s bytes, %s entries)", key, len(value), len(self._entries))

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)
