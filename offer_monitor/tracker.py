"""Incremental detection of offers that appeared since the previous pass."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import FrozenSet, Iterable, List, Optional, Set, Tuple

from .models import Offer


@dataclass(frozen=True)
class TrackerState:
    """Identities seen so far plus the newest listing date observed.

    Instances are immutable; :func:`compute_new_offers` returns a new state.
    """

    seen_ids: FrozenSet[str] = field(default_factory=frozenset)
    latest_date: Optional[datetime] = None

    @classmethod
    def initial(cls) -> "TrackerState":
        return cls()

    def to_dict(self) -> dict:
        return {
            "seen_ids": sorted(self.seen_ids),
            "latest_date": self.latest_date.isoformat() if self.latest_date else None,
        }


def filter_recent(offers: Iterable[Offer], since: Optional[datetime]) -> List[Offer]:
    """Keep offers dated at or after ``since`` (all of them when unset)."""

    if since is None:
        return list(offers)
    return [offer for offer in offers if offer.date >= since]


def compute_new_offers(
    offers: Iterable[Offer], state: TrackerState
) -> Tuple[List[Offer], TrackerState]:
    """Return offers not seen before and the state that includes them.

    The recency filter runs first against the high-water mark, then ids are
    checked against everything seen so far. Input order is preserved.
    """

    recent = filter_recent(offers, state.latest_date)

    new_offers: List[Offer] = []
    emitted: Set[str] = set()
    for offer in recent:
        if offer.id in state.seen_ids or offer.id in emitted:
            continue
        emitted.add(offer.id)
        new_offers.append(offer)

    if not new_offers:
        return new_offers, state

    latest = state.latest_date
    for offer in new_offers:
        if latest is None or offer.date > latest:
            latest = offer.date

    updated = TrackerState(seen_ids=state.seen_ids | emitted, latest_date=latest)
    return new_offers, updated
