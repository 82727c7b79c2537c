"""
Hebrew letter filtering and final-form folding.

Only the 27 base letters (U+05D0 alef through U+05EA tav) count as
letters. Vowel points, cantillation marks, maqaf, geresh and gershayim
fall outside that range and are dropped from the normalized stream along
with spaces, digits and Latin text.
"""
from typing import List

from ..common.schemas import NormalizedStream

ALEF = "א"
TAV = "ת"

FINAL_FORMS = {
    "ך": "כ",
    "ם": "מ",
    "ן": "נ",
    "ף": "פ",
    "ץ": "צ",
}


def is_hebrew_letter(ch: str) -> bool:
    """Return True if the character is a Hebrew base letter (not a mark)."""
    return ALEF <= ch <= TAV


def fold_final(ch: str) -> str:
    """Map a final letter to its standard form; other characters are returned unchanged."""
    return FINAL_FORMS.get(ch, ch)


def normalize_letters(text: str) -> str:
    """Keep Hebrew letters only, with final forms folded."""
    return "".join(fold_final(ch) for ch in text if is_hebrew_letter(ch))


def build_stream(text: str) -> NormalizedStream:
    """
    Build the normalized stream and its position map in one pass.

    Args:
        text: Raw input text

    Returns:
        NormalizedStream where ``positions[i]`` is the index in ``text``
        of ``letters[i]``
    """
    letters: List[str] = []
    positions: List[int] = []
    for idx, ch in enumerate(text):
        if is_hebrew_letter(ch):
            letters.append(fold_final(ch))
            positions.append(idx)
    return NormalizedStream(letters="".join(letters), positions=tuple(positions))


def is_palindrome(s: str) -> bool:
    n = len(s)
    for i in range(n // 2):
        if s[i] != s[n - 1 - i]:
            return False
    return True


__all__ = [
    "FINAL_FORMS",
    "is_hebrew_letter",
    "fold_final",
    "normalize_letters",
    "build_stream",
    "is_palindrome",
]
