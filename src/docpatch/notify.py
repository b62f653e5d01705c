"""Outbound notification: one POST with a single text field to the request's callback URL"""

from __future__ import annotations

import logging
from typing import Optional

import httpx

logger = logging.getLogger(__name__)


class Notifier:
    """Posts ``{"text": ...}`` to a callback URL (a Slack response_url). Never raises."""

    def __init__(self, timeout: float = 30.0, client: Optional[httpx.Client] = None):
        self.client = client or httpx.Client(timeout=timeout)

    def notify(self, url: str, text: str) -> bool:
        if not url:
            logger.info("No callback URL; result: %s", text)
            return False
        try:
            self.client.post(url, json={"text": text}).raise_for_status()
        except httpx.HTTPError as exc:
            logger.error("Callback to %s failed: %s: %s", url, type(exc).__name__, exc)
            return False
        return True
