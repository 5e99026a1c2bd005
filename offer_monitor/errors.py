"""Error types and reporting helpers."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

LOGGER = logging.getLogger(__name__)


class ScrapingError(Exception):
    """Raised when a results page cannot be loaded or read."""

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.context = context or {}

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": type(self).__name__,
            "message": self.message,
            "code": self.code,
            "context": self.context,
        }


def normalise_error(error: BaseException) -> Dict[str, Any]:
    """Return a loggable description of any exception."""

    if isinstance(error, ScrapingError):
        return {"type": "ScrapingError", **error.to_dict()}
    return {
        "type": "Error",
        "name": type(error).__name__,
        "message": str(error),
        "code": None,
        "context": {},
    }


def handle_error(error: BaseException) -> Dict[str, Any]:
    """Log an exception that ended a scan cycle and return its description."""

    normalised = normalise_error(error)
    LOGGER.error(
        "%s (code=%s, context=%s)",
        normalised["message"] or "Unexpected error",
        normalised["code"],
        normalised["context"],
        exc_info=(type(error), error, error.__traceback__),
    )
    return normalised
