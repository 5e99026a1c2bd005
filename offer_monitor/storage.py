"""JSON snapshots of offer batches."""
from __future__ import annotations

import json
import logging
from pathlib import Path
import time
from typing import Callable, Iterable, Optional

from .models import Offer

LOGGER = logging.getLogger(__name__)


def snapshot_path(directory: str | Path, prefix: str, timestamp_ms: int) -> Path:
    return Path(directory) / f"{prefix}_{timestamp_ms}.json"


def save_offers_to_file(
    offers: Iterable[Offer],
    prefix: str,
    directory: str | Path = "data",
    clock: Optional[Callable[[], float]] = None,
) -> Path:
    """Write one batch of offers as an indented JSON array and return its path."""

    payload = [offer.to_dict() for offer in offers]
    target_dir = Path(directory)
    target_dir.mkdir(parents=True, exist_ok=True)
    timestamp_ms = int((clock or time.time)() * 1000)
    path = snapshot_path(target_dir, prefix, timestamp_ms)
    path.write_text(json.dumps(payload, indent=2, ensure_ascii=False), encoding="utf-8")
    LOGGER.info("Offers saved to file (path=%s, count=%d)", path, len(payload))
    return path
