from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, TYPE_CHECKING
import time
import logging

from proofreader.llm.prompts import SYSTEM_PROMPT, build_prompt
from proofreader.normalize import parse_response

if TYPE_CHECKING:
    import anthropic

logger = logging.getLogger(__name__)


@dataclass
class LLMConfig:
    """Configuration for Claude API client."""
    api_key: str
    model: str = "claude-sonnet-4-20250514"
    max_tokens: int = 8192
    temperature: float = 0.2  # Low temp for consistent corrections
    max_retries: int = 3  # Max retries for rate limit errors
    min_request_interval: float = 0.3  # Min seconds between requests


def _is_rate_limit(error: Exception) -> bool:
    error_str = str(error).lower()
    return (
        "rate" in error_str or
        "429" in error_str or
        "too many requests" in error_str or
        "overloaded" in error_str
    )


class ClaudeClient:
    """Thin wrapper around Anthropic's Claude API for proofreading chunks."""

    def __init__(self, config: LLMConfig):
        self.config = config
        self._client: Optional["anthropic.Anthropic"] = None

    @property
    def client(self) -> "anthropic.Anthropic":
        """Lazy initialization of Anthropic client."""
        if self._client is None:
            try:
                import anthropic
                self._client = anthropic.Anthropic(api_key=self.config.api_key)
            except ImportError:
                raise ImportError(
                    "anthropic library not installed. "
                    "Run: pip install anthropic"
                )
        return self._client

    def complete(self, user_prompt: str) -> str:
        """Send one prompt, retrying rate-limit errors with exponential backoff."""
        for attempt in range(self.config.max_retries + 1):
            try:
                if self.config.min_request_interval:
                    time.sleep(self.config.min_request_interval)

                message = self.client.messages.create(
                    model=self.config.model,
                    max_tokens=self.config.max_tokens,
                    temperature=self.config.temperature,
                    system=SYSTEM_PROMPT,
                    messages=[{"role": "user", "content": user_prompt}],
                )

                result = ""
                for block in message.content:
                    if hasattr(block, "text"):
                        result += block.text
                return result.strip()

            except Exception as e:
                if _is_rate_limit(e) and attempt < self.config.max_retries:
                    # Exponential backoff: 2s, 4s, 8s
                    backoff = 2 ** (attempt + 1)
                    logger.warning(f"Rate limit hit, retry {attempt+1}/{self.config.max_retries} in {backoff}s")
                    time.sleep(backoff)
                    continue
                raise


class LLMChecker:
    """Checker backed by Claude; returns raw finding records for a chunk."""

    name = "llm"

    def __init__(self, client: ClaudeClient):
        self.client = client

    def check(self, text: str, level: int, start_line: int) -> List[Dict[str, Any]]:
        response = self.client.complete(build_prompt(text, level, start_line))
        return parse_response(response)
