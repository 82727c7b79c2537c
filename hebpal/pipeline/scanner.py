"""
Palindrome scanner over the normalized Hebrew letter stream.
"""
import logging
from typing import Iterable, List, Tuple

from ..common.errors import InvalidArgument
from ..common.schemas import PalindromeResult
from .letters import build_stream, is_palindrome

logger = logging.getLogger(__name__)

DEFAULT_MIN_LENGTH = 3
DEFAULT_MAX_LENGTH = 50


class PalindromeScanner:
    """Exhaustive palindrome search bounded by letter count."""

    def __init__(self, min_length: int = DEFAULT_MIN_LENGTH, max_length: int = DEFAULT_MAX_LENGTH):
        self._check_bounds(min_length, max_length)
        self.min_length = min_length
        self.max_length = max_length

    @staticmethod
    def _check_bounds(min_length: int, max_length: int) -> None:
        if min_length < 1:
            raise InvalidArgument(f"min_length must be >= 1, got {min_length}")
        if max_length < min_length:
            raise InvalidArgument(
                f"max_length ({max_length}) must be >= min_length ({min_length})"
            )

    def scan(self, text: str) -> List[PalindromeResult]:
        """
        Find every palindromic run of letters within the length bounds.

        Nested and overlapping palindromes are all reported. Results are
        ordered by length descending, then by start offset ascending.

        Args:
            text: Raw input text

        Returns:
            List of PalindromeResult; empty when the text has no Hebrew letters
        """
        if not isinstance(text, str):
            raise TypeError("text must be a string")

        stream = build_stream(text)
        letters, positions = stream.letters, stream.positions
        results: List[PalindromeResult] = []

        for length in range(self.max_length, self.min_length - 1, -1):
            for start in range(0, len(letters) - length + 1):
                sub = letters[start:start + length]
                if not is_palindrome(sub):
                    continue
                orig_start = positions[start]
                orig_end = positions[start + length - 1] + 1
                results.append(PalindromeResult(
                    normalized=sub,
                    original=text[orig_start:orig_end],
                    length=length,
                    start=start,
                    span=(orig_start, orig_end),
                ))

        logger.debug(
            "scanned %d letters in [%d, %d]: %d palindromes",
            len(letters), self.min_length, self.max_length, len(results),
        )
        return results


def scan_palindromes(
    text: str,
    min_length: int = DEFAULT_MIN_LENGTH,
    max_length: int = DEFAULT_MAX_LENGTH,
) -> List[PalindromeResult]:
    """
    Scan text for palindromes.

    Args:
        text: Input text
        min_length: Fewest letters in a reported palindrome
        max_length: Most letters in a reported palindrome

    Returns:
        List of PalindromeResult, longest first
    """
    scanner = PalindromeScanner(min_length, max_length)
    return scanner.scan(text)


def select_maximal(results: Iterable[PalindromeResult]) -> List[PalindromeResult]:
    """
    Keep only results whose letters do not overlap an earlier kept result.

    Fed with scanner output (longest first), this yields the greedy set of
    longest non-overlapping palindromes in the same order.
    """
    kept: List[PalindromeResult] = []
    taken: List[Tuple[int, int]] = []
    for res in results:
        if any(res.start < end and start < res.end for start, end in taken):
            continue
        kept.append(res)
        taken.append((res.start, res.end))
    return kept


__all__ = [
    "PalindromeScanner",
    "scan_palindromes",
    "select_maximal",
    "DEFAULT_MIN_LENGTH",
    "DEFAULT_MAX_LENGTH",
]
