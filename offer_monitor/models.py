"""Shared data structures used across scraping, validation and tracking."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional


@dataclass
class RawCandidate:
    """An unvalidated listing exactly as extracted from a results page."""

    title: Optional[str] = None
    price: Optional[str] = None
    location: Optional[str] = None
    url: Optional[str] = None
    id: Optional[str] = None
    date: Optional[datetime] = None


@dataclass
class Offer:
    """Canonical listing record emitted by a scan cycle."""

    id: str
    title: str
    price: str
    location: str
    url: str
    date: datetime

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serialisable version of the offer."""

        return {
            "id": self.id,
            "title": self.title,
            "price": self.price,
            "location": self.location,
            "url": self.url,
            "date": self.date.isoformat(),
        }


@dataclass
class RejectedCandidate:
    """A candidate dropped by validation together with the failing field."""

    candidate: RawCandidate
    field: str
    reason: str

    def describe(self) -> str:
        title = self.candidate.title if isinstance(self.candidate.title, str) else ""
        title = title.strip() or "<no title>"
        return f"Skipping invalid offer {title!r}: {self.field} {self.reason}"
