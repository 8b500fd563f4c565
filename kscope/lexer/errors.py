"""
Error handling for the kscope lexer.

Lexing is fail-fast: the first byte that starts no token aborts the scan.
Errors carry a Diagnostic with the source location and, where it helps,
a hint at what was probably meant.
"""

from typing import Optional, List
from dataclasses import dataclass

from .tokens import SourceLocation, KEYWORDS


@dataclass
class Diagnostic:
    """Base class for front-end diagnostics."""
    message: str
    location: SourceLocation
    severity: str  # "error", "warning"
    code: Optional[str] = None
    help_text: Optional[str] = None
    suggestions: Optional[List[str]] = None

    def __str__(self) -> str:
        severity_prefix = self.severity.upper()
        result = f"{severity_prefix}: {self.message}\n"
        result += f"  --> {self.location}\n"

        if self.help_text:
            result += f"  help: {self.help_text}\n"

        if self.suggestions:
            result += "  suggestions:\n"
            for suggestion in self.suggestions:
                result += f"    - {suggestion}\n"

        return result


class LexerError(Exception):
    """
    Exception raised when the lexer meets a byte it cannot tokenize.

    ``byte`` holds the offending byte value when there is a single one.
    """

    def __init__(
        self,
        message: str,
        location: SourceLocation,
        code: Optional[str] = None,
        help_text: Optional[str] = None,
        suggestions: Optional[List[str]] = None,
        byte: Optional[int] = None
    ):
        super().__init__(message)
        self.diagnostic = Diagnostic(
            message=message,
            location=location,
            severity="error",
            code=code,
            help_text=help_text,
            suggestions=suggestions
        )
        self.byte = byte

    @property
    def location(self) -> SourceLocation:
        return self.diagnostic.location

    @property
    def code(self) -> Optional[str]:
        return self.diagnostic.code

    @property
    def category(self) -> Optional[str]:
        """Short title for ``code``, e.g. "Invalid character"."""
        return ERROR_CODES.get(self.code)

    def __str__(self) -> str:
        return str(self.diagnostic)


def suggest_keyword_corrections(word: str) -> List[str]:
    """Suggest keywords within edit distance 2 of ``word``."""
    suggestions = []
    for keyword in KEYWORDS:
        if keyword == word:
            continue
        if _edit_distance(word.lower(), keyword) <= 2:
            suggestions.append(keyword)

    return sorted(suggestions, key=lambda k: _edit_distance(word.lower(), k))[:3]


def _edit_distance(s1: str, s2: str) -> int:
    """Calculate Levenshtein distance between two strings."""
    if len(s1) < len(s2):
        return _edit_distance(s2, s1)

    if len(s2) == 0:
        return len(s1)

    previous_row = list(range(len(s2) + 1))
    for i, c1 in enumerate(s1):
        current_row = [i + 1]
        for j, c2 in enumerate(s2):
            insertions = previous_row[j + 1] + 1
            deletions = current_row[j] + 1
            substitutions = previous_row[j] + (c1 != c2)
            current_row.append(min(insertions, deletions, substitutions))
        previous_row = current_row

    return previous_row[-1]


# Error codes for categorization
ERROR_CODES = {
    "L001": "Invalid character",
    "L007": "Number literal overflow",
}


def create_invalid_character_error(byte: int, location: SourceLocation) -> LexerError:
    """Create an error for a byte that starts no token."""
    char = chr(byte)
    if byte < 0x80 and char.isprintable():
        shown = f"'{char}' (byte {byte})"
        help_text = "Valid punctuation is one of: ( ) , + - * / <"
    else:
        shown = f"byte {byte} (0x{byte:02X})"
        help_text = "Only ASCII letters, digits, punctuation and space/CR/LF are allowed."

    suggestions = []
    if char == "\t":
        suggestions.append("Replace tabs with spaces")

    return LexerError(
        message=f"{ERROR_CODES['L001']}: {shown}",
        location=location,
        code="L001",
        help_text=help_text,
        suggestions=suggestions or None,
        byte=byte
    )


def create_number_overflow_error(lexeme: str, bits: int, location: SourceLocation) -> LexerError:
    """Create an error for an integer literal that does not fit the configured width."""
    return LexerError(
        message=f"{ERROR_CODES['L007']}: '{lexeme}'",
        location=location,
        code="L007",
        help_text=f"Integer literals must fit in {bits} unsigned bits (max {2 ** bits - 1}).",
    )
