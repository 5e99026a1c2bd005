"""Reusable Playwright helpers for reading listing cards."""
from __future__ import annotations

import logging
from typing import Any, List, Optional, Sequence

try:  # pragma: no cover - optional dependency during development
    from playwright.async_api import Page
except Exception:  # pragma: no cover
    Page = Any  # type: ignore

LOGGER = logging.getLogger(__name__)

CONSENT_SELECTORS = (
    "#onetrust-accept-btn-handler",
    "button:has-text('Akceptuję')",
    "button:has-text('Accept')",
)


async def dismiss_common_banners(page: Page, selectors: Sequence[str] = CONSENT_SELECTORS) -> bool:
    """Click the first consent button found; a missing banner is not an error."""

    for selector in selectors:
        try:
            await page.locator(selector).first.click(timeout=1500)
        except Exception as exc:
            LOGGER.debug("Consent button %s not clickable: %s", selector, exc)
            continue
        return True
    return False


async def _matching_elements(handle: Any, selectors: Sequence[str]) -> List[Any]:
    """Return the elements found under ``handle`` in selector priority order."""

    found: List[Any] = []
    for selector in selectors:
        try:
            element = await handle.query_selector(selector)
        except Exception as exc:
            LOGGER.debug("Selector %s failed on card: %s", selector, exc)
            continue
        if element is not None:
            found.append(element)
    return found


async def _element_text(element: Any) -> str:
    try:
        text = await element.inner_text()
    except Exception:
        # Detached or hidden nodes have no rendered text; fall back to the DOM.
        text = await element.text_content()
    return (text or "").strip()


async def extract_text(handle: Any, selectors: Sequence[str]) -> Optional[str]:
    """First non-blank text among the selectors, e.g. a card title."""

    for element in await _matching_elements(handle, selectors):
        try:
            text = await _element_text(element)
        except Exception as exc:
            LOGGER.debug("Could not read text of card element: %s", exc)
            continue
        if text:
            return text
    return None


async def extract_attribute(
    handle: Any, selectors: Sequence[str], attribute: str
) -> Optional[str]:
    """First non-empty ``attribute`` value among the selectors, e.g. a link href."""

    for element in await _matching_elements(handle, selectors):
        try:
            value = await element.get_attribute(attribute)
        except Exception as exc:
            LOGGER.debug("Could not read %s of card element: %s", attribute, exc)
            continue
        if value:
            return value
    return None


async def collect_cards(page: Page, selectors: Sequence[str]) -> List[Any]:
    """Listing cards for the first selector that yields any."""

    for selector in selectors:
        try:
            cards = await page.query_selector_all(selector)
        except Exception as exc:
            LOGGER.debug("Card selector %s failed: %s", selector, exc)
            continue
        if cards:
            LOGGER.debug("Found %d cards with %s", len(cards), selector)
            return cards
    return []
