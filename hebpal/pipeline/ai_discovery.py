"""
AI discovery - ask an LLM for Tanakh palindromes and verse sources.

The model's answers are not checked against any text; they are parsed
into typed records and handed to the caller as suggestions.
"""
import logging
from typing import Callable, Optional

import httpx
from pydantic import ValidationError

from ..common.errors import DiscoveryError, LlmError
from ..common.schemas import DiscoveryResult, SourceLookup
from ..llm.ollama_client import chat_json

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are an expert in the Hebrew Bible (Tanakh). "
    "Answer with valid JSON only, no commentary."
)

DISCOVER_IN_TEXT_PROMPT = """Find interesting palindromic sequences in this Hebrew text: "{text}".
Letters are compared without vowel points, and final letters (ך ם ן ף ץ) count as their standard forms.
Focus on the Tanakh.
Return JSON: {{"palindromes": [{{"text": ..., "book": ..., "chapter": ..., "verse": ..., "meaning": ...}}]}}"""

DISCOVER_ANY_PROMPT = """Discover interesting palindromic sequences in the Hebrew Tanakh.
Letters are compared without vowel points, and final letters (ך ם ן ף ץ) count as their standard forms.
Return JSON: {"palindromes": [{"text": ..., "book": ..., "chapter": ..., "verse": ..., "meaning": ...}]}"""

IDENTIFY_SOURCE_PROMPT = """Identify the exact source in the Hebrew Tanakh for this text snippet: "{original}".
Return JSON: {{"found": true|false, "book": ..., "chapter": ..., "verse": ...}}"""


class DiscoveryService:
    """LLM-backed palindrome discovery and source identification."""

    def __init__(self, chat: Optional[Callable[..., dict]] = None, temperature: float = 0.4):
        """
        Args:
            chat: Function with the signature of ``chat_json``; defaults to it
            temperature: Sampling temperature for discovery prompts
        """
        self.chat = chat or chat_json
        self.temperature = temperature

    def _ask(self, prompt: str, temperature: float) -> dict:
        try:
            return self.chat(
                prompt=prompt,
                system=SYSTEM_PROMPT,
                temperature=temperature,
                json_only=True,
            )
        except (httpx.HTTPError, LlmError) as e:
            logger.warning("LLM call failed: %s", e)
            raise DiscoveryError(f"LLM call failed: {e}") from e

    def discover_palindromes(self, text: Optional[str] = None) -> DiscoveryResult:
        """
        Ask the model for palindromes, in ``text`` or anywhere in the Tanakh.

        Args:
            text: Hebrew text to search; blank means no restriction

        Returns:
            DiscoveryResult with zero or more suggestions
        """
        if text and text.strip():
            prompt = DISCOVER_IN_TEXT_PROMPT.format(text=text.strip())
        else:
            prompt = DISCOVER_ANY_PROMPT
        data = self._ask(prompt, self.temperature)
        try:
            result = DiscoveryResult.model_validate(data)
        except ValidationError as e:
            raise DiscoveryError(f"Unexpected discovery payload: {e}") from e
        logger.debug("LLM suggested %d palindromes", len(result.palindromes))
        return result

    def identify_source(self, original: str) -> SourceLookup:
        """Ask the model where a snippet appears in the Tanakh."""
        if not original or not original.strip():
            raise DiscoveryError("Nothing to identify: empty snippet")
        data = self._ask(IDENTIFY_SOURCE_PROMPT.format(original=original.strip()), 0.1)
        try:
            return SourceLookup.model_validate(data)
        except ValidationError as e:
            raise DiscoveryError(f"Unexpected source payload: {e}") from e


# Convenience functions for direct use
def discover_palindromes(text: Optional[str] = None) -> DiscoveryResult:
    return DiscoveryService().discover_palindromes(text)


def identify_source(original: str) -> SourceLookup:
    return DiscoveryService().identify_source(original)


__all__ = ["DiscoveryService", "discover_palindromes", "identify_source"]
