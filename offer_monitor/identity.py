"""Stable identity derivation for listings."""
from __future__ import annotations

import hashlib
import re
from typing import Optional

_TRAILING_ID_PATTERN = re.compile(r"-(\d+)/?(?:\?.*)?$")
_LONG_NUMBER_PATTERN = re.compile(r"(\d{6,})")


def extract_id_from_url(url: Optional[str]) -> Optional[str]:
    """Return the numeric listing id embedded in an offer URL, if any."""

    if not isinstance(url, str):
        return None
    match = _TRAILING_ID_PATTERN.search(url)
    if match:
        return match.group(1)
    match = _LONG_NUMBER_PATTERN.search(url)
    return match.group(1) if match else None


def hash_offer(title: str, price: str, location: str) -> str:
    """Content fingerprint used when the URL carries no usable id."""

    payload = f"{title}|{price}|{location}"
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def resolve_id(
    existing_id: Optional[str],
    url: Optional[str],
    title: Optional[str],
    price: Optional[str],
    location: Optional[str],
) -> str:
    """Pick the identity of a listing: explicit id, URL id, then fingerprint.

    Listings with identical title, price and location collapse onto the same
    fingerprint even when their URLs differ.
    """

    if isinstance(existing_id, str) and existing_id.strip():
        return existing_id
    url_id = extract_id_from_url(url)
    if url_id:
        return url_id
    return hash_offer(title or "", price or "", location or "")
