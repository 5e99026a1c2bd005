"""Reporting helpers for the terminal."""
from __future__ import annotations

from datetime import datetime
from typing import Iterable, List, Optional, Sequence

from .models import Offer
from .parsing import LOCATION_SEPARATOR
from .processor import sort_offers_for_display, summarise_offers
from .workflow import CycleResult

_HEADERS = ["Tytuł", "Cena", "Lokalizacja", "Data", "Link"]


def _format_date(value: Optional[datetime]) -> str:
    if value is None:
        return "–"
    return value.strftime("%d.%m.%Y %H:%M")


def _place(location: str) -> str:
    return location.split(LOCATION_SEPARATOR)[0]


def _cell(value: str) -> str:
    return value.replace("|", "/").replace("\n", " ")


def generate_offer_table(offers: Iterable[Offer]) -> str:
    """Return a markdown-style table of offers, newest first."""

    header_row = "| " + " | ".join(_HEADERS) + " |"
    separator_row = "| " + " | ".join(["---"] * len(_HEADERS)) + " |"
    rows: List[str] = [header_row, separator_row]

    sorted_offers = sort_offers_for_display(offers)
    if not sorted_offers:
        rows.append("| Brak ofert |" + " |" * (len(_HEADERS) - 1))
        return "\n".join(rows)

    for offer in sorted_offers:
        columns = [
            _cell(offer.title),
            _cell(offer.price),
            _cell(_place(offer.location)),
            _format_date(offer.date),
            offer.url,
        ]
        rows.append("| " + " | ".join(columns) + " |")
    return "\n".join(rows)


def build_report(
    result: CycleResult, title: str = "Nowe oferty", warnings: Sequence[str] | None = None
) -> str:
    """Create a text report for the new offers of one scan cycle."""

    lines: List[str] = [title, "=" * len(title)]
    if result.is_empty:
        lines.append("Nie znaleziono żadnych ofert.")
        return "\n".join(lines)

    summary = summarise_offers(result.new_offers)
    lines.append(f"Oferty na stronie: {len(result.offers)}")
    lines.append(f"Nowe oferty: {summary['count']}")
    if summary["count"]:
        lines.append(f"Najnowsza: {_format_date(summary['newest'])}")

    rejected = list(warnings if warnings is not None else result.warnings)
    if rejected:
        lines.append(f"Odrzucone rekordy: {len(rejected)}")

    if not result.new_offers:
        lines.append("")
        lines.append("Brak nowych ofert tym razem.")
        return "\n".join(lines)

    lines.append("")
    lines.append(generate_offer_table(result.new_offers))
    return "\n".join(lines)
