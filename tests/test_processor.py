from datetime import datetime
import unittest

from offer_monitor.models import Offer, RawCandidate, RejectedCandidate
from offer_monitor.processor import (
    sort_offers_for_display,
    summarise_offers,
    validate_candidate,
    validate_candidates,
)

NOW = datetime(2024, 5, 10, 12, 0)


def _candidate(**overrides) -> RawCandidate:
    values = dict(
        title="Rower górski",
        price="1 200 zł",
        location="Kraków - Dzisiaj o 10:00",
        url="https://www.olx.pl/d/oferta/rower-gorski-123456.html",
        id="123456",
        date=datetime(2024, 5, 10, 10, 0),
    )
    values.update(overrides)
    return RawCandidate(**values)


def _offer(offer_id: str, date: datetime) -> Offer:
    return Offer(
        id=offer_id,
        title=f"Oferta {offer_id}",
        price="10 zł",
        location="Kraków - Dzisiaj",
        url=f"https://www.olx.pl/oferta/{offer_id}",
        date=date,
    )


class ValidateCandidateTests(unittest.TestCase):
    def test_valid_candidate_becomes_trimmed_offer(self) -> None:
        offer = validate_candidate(_candidate(title="  Rower górski  "), NOW)

        self.assertIsInstance(offer, Offer)
        self.assertEqual(offer.title, "Rower górski")
        self.assertEqual(offer.id, "123456")

    def test_location_is_kept_verbatim_for_display(self) -> None:
        offer = validate_candidate(_candidate(location=" Kraków - Dzisiaj o 10:00 "), NOW)

        self.assertIsInstance(offer, Offer)
        self.assertEqual(offer.location, " Kraków - Dzisiaj o 10:00 ")

    def test_missing_date_defaults_to_now(self) -> None:
        offer = validate_candidate(_candidate(date=None), NOW)

        self.assertIsInstance(offer, Offer)
        self.assertEqual(offer.date, NOW)

    def test_rejections_name_the_failing_field(self) -> None:
        cases = [
            ({"title": "   "}, "title"),
            ({"price": None}, "price"),
            ({"location": ""}, "location"),
            ({"url": "invalid"}, "url"),
            ({"url": "/oferta/relative-1"}, "url"),
            ({"url": "ftp://www.olx.pl/oferta/1"}, "url"),
            ({"id": ""}, "id"),
            ({"id": 42}, "id"),
            ({"url": 123}, "url"),
            ({"url": "https://:80/oferta/1"}, "url"),
            ({"title": 7}, "title"),
            ({"date": "2024-01-01"}, "date"),
        ]
        for overrides, field_name in cases:
            with self.subTest(overrides=overrides):
                result = validate_candidate(_candidate(**overrides), NOW)
                self.assertIsInstance(result, RejectedCandidate)
                self.assertEqual(result.field, field_name)
                self.assertIn(field_name, result.describe())


class ValidateCandidatesTests(unittest.TestCase):
    def test_one_invalid_record_does_not_abort_the_batch(self) -> None:
        candidates = [_candidate(), _candidate(title="", url="invalid", id="2", date=None)]

        with self.assertLogs("offer_monitor.processor", level="WARNING") as logs:
            offers, warnings = validate_candidates(candidates, NOW)

        self.assertEqual(len(offers), 1)
        self.assertEqual(offers[0].id, "123456")
        self.assertEqual(len(warnings), 1)
        self.assertIn("title", warnings[0])
        self.assertTrue(any("expected=2, valid=1" in line for line in logs.output))

    def test_all_valid_records_produce_no_warnings(self) -> None:
        offers, warnings = validate_candidates([_candidate(), _candidate(id="7")], NOW)

        self.assertEqual([offer.id for offer in offers], ["123456", "7"])
        self.assertEqual(warnings, [])


class DisplayHelperTests(unittest.TestCase):
    def test_sort_for_display_is_newest_first_and_stable(self) -> None:
        offers = [
            _offer("a", datetime(2024, 1, 1)),
            _offer("b", datetime(2024, 3, 1)),
            _offer("c", datetime(2024, 1, 1)),
        ]

        ordered = sort_offers_for_display(offers)

        self.assertEqual([offer.id for offer in ordered], ["b", "a", "c"])
        self.assertEqual([offer.id for offer in offers], ["a", "b", "c"])

    def test_summary_of_empty_batch(self) -> None:
        self.assertEqual(summarise_offers([]), {"count": 0, "newest": None, "oldest": None})

    def test_summary_reports_date_range(self) -> None:
        summary = summarise_offers(
            [_offer("a", datetime(2024, 1, 1)), _offer("b", datetime(2024, 3, 1))]
        )

        self.assertEqual(summary["count"], 2)
        self.assertEqual(summary["newest"], datetime(2024, 3, 1))
        self.assertEqual(summary["oldest"], datetime(2024, 1, 1))


if __name__ == "__main__":
    unittest.main()
