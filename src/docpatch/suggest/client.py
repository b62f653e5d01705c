"""Content-generation client for an OpenAI-compatible chat completions API"""

from __future__ import annotations

import logging
import re
from typing import Optional, Protocol

import httpx

from docpatch.config import Settings
from docpatch.errors import EmptySuggestion, UpstreamUnavailable

logger = logging.getLogger(__name__)

FENCE_RE = re.compile(r'^\s*(`{3,}|~{3,})[\w-]*[ \t]*\n(.*)\n\1\s*$', re.DOTALL)


class Suggester(Protocol):
    def suggest(self, instruction: str, source: str) -> str:
        """Return replacement text for source, following instruction."""
        ...


def unwrap_fence(text: str) -> str:
    """Strip one code fence wrapping the entire reply, if present."""
    m = FENCE_RE.match(text)
    return m.group(2) if m else text


class SuggestionClient:
    """Calls ``POST {api_url}/chat/completions`` with a system instruction and the section as user text.

    Args:
        api_url: API base URL (``.../v1``).
        api_key: Bearer token; sent only when non-empty.
        model: Model name.
        timeout: Per-request timeout in seconds.
        client: Preconfigured httpx client (tests pass one with a MockTransport).
    """

    def __init__(
        self,
        api_url: str,
        api_key: str = "",
        model: str = "gpt-4o-mini",
        timeout: float = 30.0,
        client: Optional[httpx.Client] = None,
    ):
        self.api_url = api_url.rstrip("/")
        self.model = model
        headers = {"Authorization": f"Bearer {api_key}"} if api_key else {}
        self.client = client or httpx.Client(headers=headers, timeout=timeout)

    @classmethod
    def from_settings(cls, settings: Settings) -> "SuggestionClient":
        return cls(settings.llm_api_url, settings.llm_api_key, settings.llm_model, settings.http_timeout)

    def suggest(self, instruction: str, source: str) -> str:
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": instruction},
                {"role": "user", "content": source},
            ],
        }
        try:
            response = self.client.post(f"{self.api_url}/chat/completions", json=payload)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as exc:
            logger.warning("Suggestion request failed: %s: %s", type(exc).__name__, exc)
            raise UpstreamUnavailable(f"content generation failed ({type(exc).__name__})") from exc
        except ValueError as exc:
            raise EmptySuggestion("content generation returned invalid JSON") from exc

        try:
            text = data["choices"][0]["message"]["content"] or ""
        except (KeyError, IndexError, TypeError) as exc:
            raise EmptySuggestion("content generation returned no choices") from exc

        text = unwrap_fence(text)
        if not text.strip():
            raise EmptySuggestion("content generation returned an empty reply")
        logger.info("Received suggestion (%d chars)", len(text))
        return text


class StaticSuggester:
    """Returns a fixed replacement, for dry runs with hand-written text."""

    def __init__(self, text: str):
        self.text = text

    def suggest(self, instruction: str, source: str) -> str:
        if not self.text.strip():
            raise EmptySuggestion("the supplied replacement is empty")
        return self.text
