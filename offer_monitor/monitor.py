"""Long running monitoring session and command line entry point."""
from __future__ import annotations

import argparse
from datetime import datetime
import logging
import threading
from typing import Callable, List, Optional, Sequence

from .config import (
    MonitorConfig,
    add_sorting_to_url,
    create_config_from_env,
    validate_target_url,
)
from .errors import handle_error
from .models import RawCandidate
from .notify import TelegramNotifier, notify_new_offers
from .reporter import build_report
from .scraper import ScraperSettings, scrape_candidates
from .storage import save_offers_to_file
from .tracker import TrackerState
from .workflow import CycleResult, run_cycle

LOGGER = logging.getLogger(__name__)

Extractor = Callable[[str], List[RawCandidate]]

INITIAL_SNAPSHOT_PREFIX = "olx_offers"
NEW_SNAPSHOT_PREFIX = "olx_new_offers"


class OfferMonitor:
    """Owns the tracker state of one monitored URL and runs cycles serially."""

    def __init__(
        self,
        config: MonitorConfig,
        extractor: Optional[Extractor] = None,
        now: Callable[[], datetime] = datetime.now,
        telegram_notifier: Optional[TelegramNotifier] = None,
        output: Callable[[str], None] = print,
    ) -> None:
        self.config = config
        self.extractor = extractor or self._default_extractor
        self.now = now
        self.telegram_notifier = telegram_notifier or TelegramNotifier(
            config.telegram_token, config.telegram_chat_id
        )
        self.output = output
        self.state = TrackerState.initial()
        self.cycles = 0
        self._lock = threading.Lock()

    def _default_extractor(self, url: str) -> List[RawCandidate]:
        settings = ScraperSettings(headless=self.config.headless, timeout_ms=self.config.timeout_ms)
        return scrape_candidates(url, settings)

    def run_once(self) -> Optional[CycleResult]:
        """Run one scan cycle; returns ``None`` when extraction failed."""

        with self._lock:
            initial = self.cycles == 0
            try:
                candidates = self.extractor(self.config.url)
                result = run_cycle(candidates, self.state, now=self.now)
            except Exception as exc:
                handle_error(exc)
                return None

            self.state = result.state
            self.cycles += 1

        self._publish(result, initial)
        return result

    def _publish(self, result: CycleResult, initial: bool) -> None:
        if result.is_empty:
            self.output(build_report(result))
            return

        title = "Pierwsze skanowanie" if initial else "Nowe oferty"
        self.output(build_report(result, title=title))
        if not result.new_offers:
            LOGGER.info("No new offers this time")
            return
        LOGGER.info("Found %d new offers", len(result.new_offers))

        if not initial:
            try:
                notify_new_offers(
                    result.new_offers,
                    discord_webhook_url=self.config.discord_webhook_url,
                    telegram_notifier=self.telegram_notifier,
                )
            except Exception as exc:  # pragma: no cover - notifier already logs its failures
                handle_error(exc)

        if self.config.save_to_file:
            prefix = INITIAL_SNAPSHOT_PREFIX if initial else NEW_SNAPSHOT_PREFIX
            try:
                save_offers_to_file(result.new_offers, prefix, self.config.output_dir)
            except OSError as exc:
                handle_error(exc)

    def run_forever(
        self, stop_event: Optional[threading.Event] = None, max_cycles: Optional[int] = None
    ) -> None:
        """Run cycles every ``interval_seconds`` until stopped."""

        stop = stop_event or threading.Event()
        completed = 0
        LOGGER.info("Offer monitor started for %s", self.config.url)
        while not stop.is_set():
            if completed:
                LOGGER.info("Running scheduled scan...")
            self.run_once()
            completed += 1
            if max_cycles is not None and completed >= max_cycles:
                break
            stop.wait(self.config.interval_seconds)
        LOGGER.info("Offer monitor stopped after %d cycles", completed)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="offer-monitor", description="Watch an OLX search page and report new listings."
    )
    parser.add_argument("url", nargs="?", help="OLX search results URL (or OLX_MONITOR_URL)")
    parser.add_argument("--interval", type=int, help="Seconds between scans")
    parser.add_argument("--save", action="store_true", help="Write each batch to a JSON file")
    parser.add_argument("--output-dir", help="Directory for JSON snapshots")
    parser.add_argument("--show-browser", action="store_true", help="Run the browser with a window")
    parser.add_argument(
        "--keep-order", action="store_true", help="Do not force newest-first sorting on the URL"
    )
    parser.add_argument("--once", action="store_true", help="Run a single scan and exit")
    return parser


def config_from_args(args: argparse.Namespace, environ=None) -> MonitorConfig:
    """Overlay command line options on top of the environment configuration."""

    config = create_config_from_env(environ)
    if args.url:
        config.url = args.url
    if args.interval and args.interval > 0:
        config.interval_seconds = args.interval
    if args.save:
        config.save_to_file = True
    if args.output_dir:
        config.output_dir = args.output_dir
    if args.show_browser:
        config.headless = False

    config.url = validate_target_url(config.url)
    if not args.keep_order:
        config.url = add_sorting_to_url(config.url)
    return config


def main(argv: Optional[Sequence[str]] = None) -> int:
    logging.basicConfig(level=logging.INFO, format="[%(asctime)s] [%(levelname)s] %(message)s")
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = config_from_args(args)
    except ValueError as exc:
        LOGGER.error("Invalid configuration: %s", exc)
        return 2

    monitor = OfferMonitor(config)
    if args.once:
        return 0 if monitor.run_once() is not None else 1
    try:
        monitor.run_forever()
    except KeyboardInterrupt:
        LOGGER.info("Interrupted, shutting down")
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
