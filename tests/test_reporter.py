from datetime import datetime
import unittest

from offer_monitor.models import Offer
from offer_monitor.reporter import build_report, generate_offer_table
from offer_monitor.tracker import TrackerState
from offer_monitor.workflow import STATUS_EMPTY, STATUS_OK, CycleResult


def _offer(offer_id: str, date: datetime, location: str = "Kraków, Podgórze - Dzisiaj o 10:00") -> Offer:
    return Offer(
        id=offer_id,
        title=f"Oferta {offer_id}",
        price="99 zł",
        location=location,
        url=f"https://www.olx.pl/oferta/{offer_id}",
        date=date,
    )


class OfferTableTests(unittest.TestCase):
    def test_empty_table_has_placeholder_row(self) -> None:
        table = generate_offer_table([])
        self.assertIn("| Brak ofert |", table)

    def test_rows_are_newest_first_and_show_place_only(self) -> None:
        table = generate_offer_table(
            [_offer("old", datetime(2024, 1, 1, 8, 0)), _offer("new", datetime(2024, 2, 1, 9, 30))]
        )
        rows = table.splitlines()

        self.assertIn("Oferta new", rows[2])
        self.assertIn("| Kraków, Podgórze |", rows[2])
        self.assertIn("01.02.2024 09:30", rows[2])
        self.assertIn("Oferta old", rows[3])


class BuildReportTests(unittest.TestCase):
    def test_empty_cycle_report(self) -> None:
        report = build_report(CycleResult(status=STATUS_EMPTY, state=TrackerState()))
        self.assertIn("Nie znaleziono żadnych ofert.", report)

    def test_report_lists_new_offers_and_rejects(self) -> None:
        offer = _offer("1", datetime(2024, 5, 10, 10, 0))
        result = CycleResult(
            status=STATUS_OK,
            state=TrackerState(),
            offers=[offer],
            new_offers=[offer],
            warnings=["Skipping invalid offer '': title must not be empty"],
        )

        report = build_report(result)

        self.assertIn("Nowe oferty: 1", report)
        self.assertIn("Odrzucone rekordy: 1", report)
        self.assertIn("https://www.olx.pl/oferta/1", report)


if __name__ == "__main__":
    unittest.main()
