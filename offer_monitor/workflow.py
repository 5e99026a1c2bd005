"""High level orchestration of a single scan cycle."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
import logging
from typing import Callable, Dict, Iterable, List, Optional

from .identity import resolve_id
from .models import Offer, RawCandidate
from .parsing import parse_date_from_location
from .processor import validate_candidates
from .tracker import TrackerState, compute_new_offers

LOGGER = logging.getLogger(__name__)

STATUS_OK = "ok"
STATUS_EMPTY = "empty"


@dataclass
class CycleResult:
    """Result returned by :func:`run_cycle`."""

    status: str
    state: TrackerState
    offers: List[Offer] = field(default_factory=list)
    new_offers: List[Offer] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return self.status == STATUS_EMPTY

    def to_dict(self) -> Dict[str, object]:
        return {
            "status": self.status,
            "offers": [offer.to_dict() for offer in self.offers],
            "new_offers": [offer.to_dict() for offer in self.new_offers],
            "warnings": list(self.warnings),
            "state": self.state.to_dict(),
        }


def prepare_candidate(candidate: RawCandidate, now: datetime) -> RawCandidate:
    """Fill in the parsed date and the resolved id of a raw candidate."""

    date = candidate.date
    if not isinstance(date, datetime):
        date = parse_date_from_location(candidate.location, now)
    offer_id = resolve_id(
        candidate.id, candidate.url, candidate.title, candidate.price, candidate.location
    )
    return replace(candidate, date=date, id=offer_id)


def run_cycle(
    raw_candidates: Iterable[RawCandidate],
    state: TrackerState,
    now: Optional[Callable[[], datetime]] = None,
) -> CycleResult:
    """Parse, validate and diff one page snapshot against the tracker state."""

    candidates = list(raw_candidates)
    if not candidates:
        LOGGER.info("No listings found on the page")
        return CycleResult(status=STATUS_EMPTY, state=state)

    reference_now = (now or datetime.now)()
    prepared = [prepare_candidate(candidate, reference_now) for candidate in candidates]
    offers, warnings = validate_candidates(prepared, reference_now)
    new_offers, updated_state = compute_new_offers(offers, state)

    LOGGER.info(
        "Scan cycle finished: %d listings, %d valid, %d new",
        len(candidates),
        len(offers),
        len(new_offers),
    )
    return CycleResult(
        status=STATUS_OK,
        state=updated_state,
        offers=offers,
        new_offers=new_offers,
        warnings=warnings,
    )
