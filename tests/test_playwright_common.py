from __future__ import annotations

import logging
from typing import Dict, List, Optional

import pytest

from offer_monitor.sources.playwright_common import (
    collect_cards,
    dismiss_common_banners,
    extract_attribute,
    extract_text,
)


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


class _HiddenElement:
    """Element whose rendered text is unavailable, like a collapsed node."""

    def __init__(self, text: Optional[str]) -> None:
        self._text = text

    async def inner_text(self) -> str:
        raise RuntimeError("element is not visible")

    async def text_content(self) -> Optional[str]:
        return self._text


class _Element:
    def __init__(self, text: str = "", href: Optional[str] = None) -> None:
        self._text = text
        self._href = href

    async def inner_text(self) -> str:
        return self._text

    async def get_attribute(self, name: str) -> Optional[str]:
        if self._href is None:
            raise RuntimeError("element was detached")
        return self._href if name == "href" else None


class _Card:
    def __init__(self, elements: Dict[str, object], broken: tuple[str, ...] = ()) -> None:
        self._elements = elements
        self._broken = broken

    async def query_selector(self, selector: str):
        if selector in self._broken:
            raise ValueError(f"malformed selector {selector}")
        return self._elements.get(selector)


class _Locator:
    def __init__(self, clickable: bool) -> None:
        self._clickable = clickable

    @property
    def first(self) -> "_Locator":
        return self

    async def click(self, timeout: int | None = None) -> None:
        if not self._clickable:
            raise TimeoutError("no such button")


class _Page:
    def __init__(self, cards: Dict[str, List[object]], clickable: tuple[str, ...] = ()) -> None:
        self._cards = cards
        self._clickable = clickable

    def locator(self, selector: str) -> _Locator:
        return _Locator(selector in self._clickable)

    async def query_selector_all(self, selector: str) -> List[object]:
        if selector not in self._cards:
            raise ValueError(f"malformed selector {selector}")
        return self._cards[selector]


@pytest.mark.anyio
async def test_extract_text_falls_back_to_text_content() -> None:
    card = _Card({"h4": _HiddenElement("  Rower górski \n")})

    assert await extract_text(card, ["h4"]) == "Rower górski"


@pytest.mark.anyio
async def test_extract_text_skips_blank_and_broken_selectors(caplog: pytest.LogCaptureFixture) -> None:
    card = _Card({"h4": _HiddenElement(None), "h6": _Element("Szafa")}, broken=("h5",))

    with caplog.at_level(logging.DEBUG, logger="offer_monitor.sources.playwright_common"):
        text = await extract_text(card, ["h4", "h5", "h6"])

    assert text == "Szafa"
    assert any("h5" in record.getMessage() for record in caplog.records)


@pytest.mark.anyio
async def test_extract_attribute_uses_next_element_when_one_is_detached() -> None:
    card = _Card({"a.stale": _Element(), "a[href]": _Element(href="/d/oferta/rower-123456.html")})

    href = await extract_attribute(card, ["a.stale", "a[href]"], "href")

    assert href == "/d/oferta/rower-123456.html"


@pytest.mark.anyio
async def test_extract_helpers_return_none_when_nothing_matches() -> None:
    card = _Card({})

    assert await extract_text(card, ["h4"]) is None
    assert await extract_attribute(card, ["a[href]"], "href") is None


@pytest.mark.anyio
async def test_collect_cards_tries_selectors_in_order() -> None:
    page = _Page({"div.empty": [], "div.card": ["first", "second"]})

    cards = await collect_cards(page, ["div.broken", "div.empty", "div.card"])

    assert cards == ["first", "second"]
    assert await collect_cards(page, ["div.broken"]) == []


@pytest.mark.anyio
async def test_dismiss_common_banners_reports_whether_a_button_was_clicked() -> None:
    assert await dismiss_common_banners(_Page({}, clickable=("#accept",)), ["#missing", "#accept"])
    assert not await dismiss_common_banners(_Page({}), ["#missing"])
