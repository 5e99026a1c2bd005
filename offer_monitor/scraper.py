"""Listing extraction from classifieds result pages via Playwright."""
from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
import logging
from typing import Any, List, Sequence
from urllib.parse import urljoin

try:  # pragma: no cover - optional dependency during development
    from playwright.async_api import Page, async_playwright  # type: ignore
except Exception:  # pragma: no cover
    Page = Any  # type: ignore
    async_playwright = None  # type: ignore

from .errors import ScrapingError
from .models import RawCandidate
from .sources.playwright_common import (
    collect_cards,
    dismiss_common_banners,
    extract_attribute,
    extract_text,
)

LOGGER = logging.getLogger(__name__)

BASE_URL = "https://www.olx.pl"
USER_AGENT = (
    "Mozilla/5.0 (Windows NT 10.0; Win64; x64) AppleWebKit/537.36 "
    "(KHTML, like Gecko) Chrome/117.0.0.0 Safari/537.36"
)
HIDE_WEBDRIVER_SCRIPT = (
    "Object.defineProperty(navigator, 'webdriver', { get: () => undefined });"
)


@dataclass(frozen=True)
class CardSelectors:
    """Selectors describing how to read a listing card."""

    cards: Sequence[str] = ('[data-testid="listing-grid"] [data-testid="l-card"]',)
    title: Sequence[str] = ('[data-cy="ad-card-title"] h4', '[data-cy="ad-card-title"] h6')
    price: Sequence[str] = ('[data-testid="ad-price"]',)
    location: Sequence[str] = ('[data-testid="location-date"]',)
    link: Sequence[str] = ('[data-cy="ad-card-title"] a', "a[href]")


@dataclass(frozen=True)
class ScraperSettings:
    """Browser options for a single page snapshot."""

    viewport_width: int = 1080
    viewport_height: int = 1024
    timeout_ms: int = 30000
    headless: bool = True
    selectors: CardSelectors = field(default_factory=CardSelectors)


def absolute_offer_url(href: str, base_url: str = BASE_URL) -> str:
    if href.startswith("http"):
        return href
    return urljoin(base_url, href)


async def extract_candidates(page: Page, selectors: CardSelectors) -> List[RawCandidate]:
    """Read every listing card on an already loaded page."""

    cards = await collect_cards(page, selectors.cards)
    candidates: List[RawCandidate] = []
    for card in cards:
        title = await extract_text(card, selectors.title)
        price = await extract_text(card, selectors.price)
        location = await extract_text(card, selectors.location)
        href = await extract_attribute(card, selectors.link, "href")
        candidates.append(
            RawCandidate(
                title=title or "",
                price=price or "",
                location=location or "",
                url=absolute_offer_url(href) if href else "",
            )
        )
    return candidates


async def _scrape_with_playwright(url: str, settings: ScraperSettings) -> List[RawCandidate]:
    """Open the results page in a browser and extract the listing cards."""

    if async_playwright is None:
        raise ScrapingError(
            "Playwright is not installed. Install playwright and run 'playwright install'.",
            code="playwright-missing",
        )

    async with async_playwright() as p:  # pragma: no cover - network heavy
        browser = await p.chromium.launch(
            headless=settings.headless,
            args=["--no-sandbox", "--disable-setuid-sandbox", "--disable-infobars"],
        )
        try:
            context = await browser.new_context(
                user_agent=USER_AGENT,
                viewport={"width": settings.viewport_width, "height": settings.viewport_height},
                locale="pl-PL",
            )
            await context.add_init_script(HIDE_WEBDRIVER_SCRIPT)
            page = await context.new_page()
            try:
                await page.goto(url, wait_until="networkidle", timeout=settings.timeout_ms)
            except Exception as exc:
                raise ScrapingError(
                    f"Failed to open results page: {exc}",
                    code="navigation-failed",
                    context={"url": url},
                ) from exc
            await dismiss_common_banners(page)
            try:
                await page.wait_for_selector(
                    settings.selectors.cards[0], timeout=settings.timeout_ms
                )
            except Exception as exc:
                raise ScrapingError(
                    f"Listing grid did not appear: {exc}",
                    code="listing-grid-missing",
                    context={"url": url},
                ) from exc
            candidates = await extract_candidates(page, settings.selectors)
        finally:
            await browser.close()

    LOGGER.info("Successfully extracted %d raw offers", len(candidates))
    return candidates


def scrape_candidates(url: str, settings: ScraperSettings | None = None) -> List[RawCandidate]:
    """Run the async Playwright scraper from synchronous code."""

    options = settings or ScraperSettings()

    async def runner() -> List[RawCandidate]:
        return await _scrape_with_playwright(url, options)

    try:
        return list(asyncio.run(runner()))
    except ScrapingError:
        raise
    except RuntimeError as exc:
        if "asyncio.run() cannot be called" not in str(exc):
            raise ScrapingError(f"Failed to scrape offers: {exc}", context={"url": url}) from exc
        loop = asyncio.new_event_loop()
        try:
            asyncio.set_event_loop(loop)
            return list(loop.run_until_complete(runner()))
        finally:
            asyncio.set_event_loop(None)
            loop.close()
    except Exception as exc:  # pragma: no cover - depends on network/Playwright
        raise ScrapingError(f"Failed to scrape offers: {exc}", context={"url": url}) from exc
