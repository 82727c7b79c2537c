"""
Pydantic schemas for palindrome scanning and AI discovery.
"""
from typing import Any, List, Optional, Tuple
from pydantic import BaseModel, ConfigDict, Field, field_validator


def _as_text(value: Any) -> Any:
    # Models often answer chapter/verse as numbers
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return value


class NormalizedStream(BaseModel):
    """Letters-only, final-folded projection of a text plus its position map."""
    model_config = ConfigDict(frozen=True)

    letters: str = Field("", description="Hebrew letters with final forms folded")
    positions: Tuple[int, ...] = Field((), description="Original index of each letter")

    def __len__(self) -> int:
        return len(self.letters)


class PalindromeResult(BaseModel):
    """A palindrome found in the normalized stream."""
    model_config = ConfigDict(frozen=True)

    normalized: str = Field(..., description="Palindromic run of normalized letters")
    original: str = Field(..., description="Matching slice of the input text")
    length: int = Field(..., ge=1, description="Number of letters in the palindrome")
    start: int = Field(0, ge=0, description="Start offset in the normalized stream")
    span: Tuple[int, int] = Field((0, 0),
                                  description="Start and end positions in the original text")

    @property
    def end(self) -> int:
        """Exclusive end offset in the normalized stream."""
        return self.start + self.length


class ScanReport(BaseModel):
    """Scan output for one input line."""
    text: str
    min_length: int
    max_length: int
    results: List[PalindromeResult] = Field(default_factory=list)


class DiscoveredPalindrome(BaseModel):
    """Palindrome suggested by the LLM, with its claimed location."""
    text: str = Field(..., description="Hebrew sequence")
    book: str = ""
    chapter: str = ""
    verse: str = ""
    meaning: Optional[str] = Field(None, description="Short gloss, when the model offers one")

    @field_validator("book", "chapter", "verse", mode="before")
    @classmethod
    def _coerce_ref(cls, v: Any) -> Any:
        return "" if v is None else _as_text(v)


class DiscoveryResult(BaseModel):
    palindromes: List[DiscoveredPalindrome] = Field(default_factory=list)


class SourceLookup(BaseModel):
    """Where in the Tanakh a snippet comes from."""
    found: bool = False
    book: Optional[str] = None
    chapter: Optional[str] = None
    verse: Optional[str] = None

    @field_validator("book", "chapter", "verse", mode="before")
    @classmethod
    def _coerce_ref(cls, v: Any) -> Any:
        return _as_text(v)

    def reference(self) -> str:
        if not self.found:
            return ""
        parts = [p for p in (self.book, self.chapter, self.verse) if p]
        return " ".join(parts)


__all__ = [
    "NormalizedStream",
    "PalindromeResult",
    "ScanReport",
    "DiscoveredPalindrome",
    "DiscoveryResult",
    "SourceLookup",
]
