"""Delivery of new-offer alerts to Discord and Telegram."""
from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Protocol
from urllib.parse import urlparse

import requests

LOGGER = logging.getLogger(__name__)

MAX_LISTED_OFFERS = 5
REQUEST_TIMEOUT = 10


class NotifiableOffer(Protocol):
    title: str
    url: str


class TelegramNotifier:
    def __init__(self, token: Optional[str], chat_id: Optional[str] = None) -> None:
        self.token = token
        self.chat_id = chat_id

    @property
    def enabled(self) -> bool:
        return bool(self.token and self.chat_id)

    def send_message(self, text: str, chat_id: Optional[str] = None) -> bool:
        target = chat_id or self.chat_id
        if not self.token or not target:
            LOGGER.info("Skipping Telegram notification (token or chat id missing).")
            return False
        url = f"https://api.telegram.org/bot{self.token}/sendMessage"
        try:
            response = requests.post(
                url, json={"chat_id": target, "text": text}, timeout=REQUEST_TIMEOUT
            )
            response.raise_for_status()
        except requests.RequestException as exc:  # pragma: no cover - network safeguard
            LOGGER.error("Failed to deliver Telegram message: %s", exc)
            return False
        return True


def _is_webhook_url(value: str) -> bool:
    parsed = urlparse(value)
    return parsed.scheme in {"http", "https"} and bool(parsed.netloc)


def format_summary(count: int) -> str:
    return f"{count} new OLX offer(s)"


def format_offer_lines(offers: Iterable[NotifiableOffer]) -> str:
    return "\n".join(
        f"{offer.title} - {offer.url}" for offer in list(offers)[:MAX_LISTED_OFFERS]
    )


def send_discord_webhook(webhook_url: str, content: str) -> bool:
    """Post a message to a Discord webhook; failures are logged, not raised."""

    if not _is_webhook_url(webhook_url):
        LOGGER.warning("Invalid Discord webhook URL provided, skipping notification")
        return False
    try:
        response = requests.post(webhook_url, json={"content": content}, timeout=REQUEST_TIMEOUT)
        response.raise_for_status()
    except requests.RequestException as exc:
        LOGGER.warning("Failed to send Discord webhook: %s", exc)
        return False
    return True


def notify_new_offers(
    offers: Iterable[NotifiableOffer],
    discord_webhook_url: Optional[str] = None,
    telegram_notifier: Optional[TelegramNotifier] = None,
) -> List[str]:
    """Announce new offers on every configured channel.

    Returns the names of the channels that accepted the message.
    """

    offer_list = list(offers)
    if not offer_list:
        return []

    summary = format_summary(len(offer_list))
    body = format_offer_lines(offer_list)
    delivered: List[str] = []

    if discord_webhook_url:
        if send_discord_webhook(discord_webhook_url, f"**{summary}**\n{body}"):
            delivered.append("discord")

    if telegram_notifier is not None and telegram_notifier.enabled:
        if telegram_notifier.send_message(f"{summary}\n{body}"):
            delivered.append("telegram")

    return delivered
