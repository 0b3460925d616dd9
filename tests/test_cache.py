from __future__ import annotations

from mockup_preview.cache import InMemoryPreviewCache, build_cache_key
from mockup_preview.models import ArtworkRequest
from mockup_preview.products import DEFAULT_PRODUCTS


def test_cache_key_is_literal_concatenation() -> None:
    assert build_cache_key("TOTE", "https://example.com/art.png") == "TOTE_https://example.com/art.png"


def test_cache_key_does_not_normalize_urls() -> None:
    keys = {
        build_cache_key("MUG", "https://example.com/a.png?x=1&y=2"),
        build_cache_key("MUG", "https://example.com/a.png?y=2&x=1"),
        build_cache_key("MUG", "https://example.com/a.png?x=1&y=2 "),
        build_cache_key("MUG", "HTTPS://example.com/a.png?x=1&y=2"),
    }
    assert len(keys) == 4


def test_artwork_request_uses_product_prefix() -> None:
    tee_black = next(p for p in DEFAULT_PRODUCTS if p.id == "tee-black")
    request = ArtworkRequest(artwork_url="https://example.com/art.png", product=tee_black)
    assert request.cache_key == "TEE_BLACK_https://example.com/art.png"


def test_get_returns_none_for_unknown_key() -> None:
    cache = InMemoryPreviewCache()
    assert cache.get("TOTE_https://example.com/missing.png") is None
    assert len(cache) == 0


def test_put_then_get_returns_stored_buffer() -> None:
    cache = InMemoryPreviewCache()
    payload = b"\xff\xd8preview"
    cache.put("TOTE_x", payload)

    assert cache.get("TOTE_x") is payload
    assert "TOTE_x" in cache
    assert len(cache) == 1


def test_overwrite_keeps_single_entry() -> None:
    cache = InMemoryPreviewCache()
    cache.put("MUG_x", b"first")
    cache.put("MUG_x", b"first")
    assert len(cache) == 1
    assert cache.get("MUG_x") == b"first"
