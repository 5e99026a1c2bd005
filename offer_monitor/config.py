"""Configuration helpers for the offer monitor."""
from __future__ import annotations

from dataclasses import dataclass
import os
from typing import Any, Dict, Mapping, Optional
from urllib.parse import parse_qsl, urlencode, urlparse, urlunparse

DEFAULT_INTERVAL_SECONDS = 300
DEFAULT_OUTPUT_DIR = "data"
DEFAULT_TIMEOUT_MS = 30000
DEFAULT_SORTING = "created_at:desc"
SORT_PARAMETER = "search[order]"
ALLOWED_DOMAIN = "olx.pl"

_TRUE_VALUES = {"1", "true", "yes", "y", "on", "tak"}
_FALSE_VALUES = {"0", "false", "no", "n", "off", "nie"}


@dataclass
class MonitorConfig:
    """Canonical configuration used by the monitoring session."""

    url: str
    interval_seconds: int = DEFAULT_INTERVAL_SECONDS
    save_to_file: bool = False
    output_dir: str = DEFAULT_OUTPUT_DIR
    headless: bool = True
    timeout_ms: int = DEFAULT_TIMEOUT_MS
    discord_webhook_url: Optional[str] = None
    telegram_token: Optional[str] = None
    telegram_chat_id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-serialisable version without secrets."""

        return {
            "url": self.url,
            "interval_seconds": self.interval_seconds,
            "save_to_file": self.save_to_file,
            "output_dir": self.output_dir,
            "headless": self.headless,
            "timeout_ms": self.timeout_ms,
            "discord_webhook": bool(self.discord_webhook_url),
            "telegram": bool(self.telegram_token and self.telegram_chat_id),
        }


def validate_target_url(url: str) -> str:
    """Return the trimmed URL or raise :class:`ValueError` explaining the problem."""

    value = (url or "").strip()
    if not value:
        raise ValueError("URL is required")
    parsed = urlparse(value)
    if parsed.scheme not in {"http", "https"} or not parsed.netloc:
        raise ValueError(f"Invalid URL format: {value}")
    host = parsed.hostname or ""
    if host != ALLOWED_DOMAIN and not host.endswith("." + ALLOWED_DOMAIN):
        raise ValueError(f"URL must point to the {ALLOWED_DOMAIN} domain")
    return value


def has_sorting(url: str) -> bool:
    return "search%5Border%5D" in url or SORT_PARAMETER in url


def add_sorting_to_url(url: str, sorting: str = DEFAULT_SORTING) -> str:
    """Ask the site for a specific ordering unless the URL already has one."""

    if not sorting or has_sorting(url):
        return url
    parsed = urlparse(url)
    query = [(key, value) for key, value in parse_qsl(parsed.query, keep_blank_values=True)]
    query.append((SORT_PARAMETER, sorting))
    return urlunparse(parsed._replace(query=urlencode(query)))


def _parse_bool(value: Any, default: bool) -> bool:
    if value is None or value == "":
        return default
    if isinstance(value, bool):
        return value
    lowered = str(value).strip().lower()
    if lowered in _TRUE_VALUES:
        return True
    if lowered in _FALSE_VALUES:
        return False
    return default


def _parse_int(value: Any, default: int) -> int:
    if value is None or value == "":
        return default
    try:
        parsed = int(str(value).strip())
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _optional_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def create_config_from_mapping(data: Mapping[str, Any]) -> MonitorConfig:
    """Create a configuration from a plain mapping (CLI options, JSON, ...)."""

    return MonitorConfig(
        url=str(data.get("url") or "").strip(),
        interval_seconds=_parse_int(data.get("interval_seconds"), DEFAULT_INTERVAL_SECONDS),
        save_to_file=_parse_bool(data.get("save_to_file"), False),
        output_dir=_optional_str(data.get("output_dir")) or DEFAULT_OUTPUT_DIR,
        headless=_parse_bool(data.get("headless"), True),
        timeout_ms=_parse_int(data.get("timeout_ms"), DEFAULT_TIMEOUT_MS),
        discord_webhook_url=_optional_str(data.get("discord_webhook_url")),
        telegram_token=_optional_str(data.get("telegram_token")),
        telegram_chat_id=_optional_str(data.get("telegram_chat_id")),
    )


def create_config_from_env(environ: Optional[Mapping[str, str]] = None) -> MonitorConfig:
    """Create a configuration from ``OLX_MONITOR_*`` and notifier variables."""

    env = os.environ if environ is None else environ
    return create_config_from_mapping(
        {
            "url": env.get("OLX_MONITOR_URL"),
            "interval_seconds": env.get("OLX_MONITOR_INTERVAL"),
            "save_to_file": env.get("OLX_MONITOR_SAVE"),
            "output_dir": env.get("OLX_MONITOR_OUTPUT_DIR"),
            "headless": env.get("OLX_MONITOR_HEADLESS"),
            "timeout_ms": env.get("OLX_MONITOR_TIMEOUT_MS"),
            "discord_webhook_url": env.get("DISCORD_WEBHOOK"),
            "telegram_token": env.get("TELEGRAM_BOT_TOKEN"),
            "telegram_chat_id": env.get("TELEGRAM_CHAT_ID"),
        }
    )


def create_config(data: Mapping[str, Any] | None = None) -> MonitorConfig:
    """Unified helper: mapping data when given, otherwise the environment."""

    if data is None:
        return create_config_from_env()
    if isinstance(data, Mapping):
        return create_config_from_mapping(data)
    raise TypeError("Unsupported configuration payload type: expected a mapping")
