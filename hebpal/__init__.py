"""
Hebrew palindrome finder.

Scans Hebrew text for letter sequences that read the same in both
directions, ignoring non-letters and folding final-letter forms.
"""
from .pipeline.scanner import PalindromeScanner, scan_palindromes, select_maximal
from .common.schemas import PalindromeResult
from .common.errors import InvalidArgument

__version__ = "0.1.0"

__all__ = [
    "PalindromeScanner",
    "PalindromeResult",
    "InvalidArgument",
    "scan_palindromes",
    "select_maximal",
]
