"""Validation and tabular processing of scraped offers."""
from __future__ import annotations

from datetime import datetime
import logging
from typing import Dict, Iterable, List, Optional, Tuple, Union
from urllib.parse import urlparse

import pandas as pd

from .models import Offer, RawCandidate, RejectedCandidate

LOGGER = logging.getLogger(__name__)

_REQUIRED_TEXT_FIELDS = ("title", "price", "location")
_OFFER_COLUMNS = ["id", "title", "price", "location", "url", "date"]


def _is_absolute_url(value: str) -> bool:
    try:
        parsed = urlparse(value)
    except ValueError:
        return False
    return parsed.scheme in {"http", "https"} and bool(parsed.hostname)


def validate_candidate(
    candidate: RawCandidate, now: Optional[datetime] = None
) -> Union[Offer, RejectedCandidate]:
    """Turn a candidate into an :class:`Offer` or explain why it was rejected."""

    for field_name in _REQUIRED_TEXT_FIELDS:
        value = getattr(candidate, field_name)
        if not isinstance(value, str) or not value.strip():
            return RejectedCandidate(candidate, field_name, "must not be empty")

    url = candidate.url.strip() if isinstance(candidate.url, str) else ""
    if not _is_absolute_url(url):
        return RejectedCandidate(candidate, "url", f"is not an absolute URL: {candidate.url!r}")

    offer_id = candidate.id.strip() if isinstance(candidate.id, str) else ""
    if not offer_id:
        return RejectedCandidate(candidate, "id", f"must be a non-empty string: {candidate.id!r}")

    date = candidate.date
    if date is None:
        date = now if now is not None else datetime.now()
    elif not isinstance(date, datetime):
        return RejectedCandidate(candidate, "date", f"is not a timestamp: {date!r}")

    return Offer(
        id=offer_id,
        title=candidate.title.strip(),
        price=candidate.price.strip(),
        location=candidate.location,
        url=url,
        date=date,
    )


def validate_candidates(
    candidates: Iterable[RawCandidate], now: Optional[datetime] = None
) -> Tuple[List[Offer], List[str]]:
    """Validate every candidate independently, collecting reject diagnostics."""

    offers: List[Offer] = []
    warnings: List[str] = []
    total = 0
    for candidate in candidates:
        total += 1
        result = validate_candidate(candidate, now)
        if isinstance(result, RejectedCandidate):
            message = result.describe()
            LOGGER.warning(message)
            warnings.append(message)
            continue
        offers.append(result)

    if warnings:
        LOGGER.warning(
            "Some scraped offers failed validation and were ignored (expected=%d, valid=%d)",
            total,
            len(offers),
        )
    return offers, warnings


def offers_to_dataframe(offers: Iterable[Offer]) -> pd.DataFrame:
    """Convert offers into a :class:`~pandas.DataFrame` keeping input order."""

    records = [
        {
            "id": offer.id,
            "title": offer.title,
            "price": offer.price,
            "location": offer.location,
            "url": offer.url,
            "date": offer.date,
        }
        for offer in offers
    ]
    return pd.DataFrame.from_records(records, columns=_OFFER_COLUMNS)


def sort_offers_for_display(offers: Iterable[Offer]) -> List[Offer]:
    """Return offers newest first; ties keep their original order."""

    offer_list = list(offers)
    if not offer_list:
        return []
    df = offers_to_dataframe(offer_list)
    df["position"] = range(len(offer_list))
    df = df.sort_values(by="date", ascending=False, kind="mergesort")
    return [offer_list[position] for position in df["position"]]


def summarise_offers(offers: Iterable[Offer]) -> Dict[str, object]:
    """Return simple statistics across a batch of offers."""

    df = offers_to_dataframe(offers)
    if df.empty:
        return {"count": 0, "newest": None, "oldest": None}
    return {
        "count": int(len(df)),
        "newest": df["date"].max().to_pydatetime(),
        "oldest": df["date"].min().to_pydatetime(),
    }
