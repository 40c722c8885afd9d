"""
Expression Lexer (Scanner)
==========================

This module converts the raw input text into a list of tokens for the
parser. The token set is deliberately small:

- Numbers: runs of ASCII decimal digits, checked against the signed
  32-bit range
- Punctuation: the two-character operators == != <= >= and any single
  ASCII punctuation character

Whitespace (any Unicode whitespace) is skipped. Every other character is
an error; the lexer never skips or loops over input it does not
understand.

The parser decides which punctuation it accepts, so '%' or '&' scan
cleanly here and are rejected one stage later with a parse error that
points at them.

Example Usage
-------------
>>> from exprc.compiler.lexer import scan
>>> for token in scan("2+2 / 3"):
...     print(token)
Token(NUMBER, 2, 1:1)
Token(PUNCT, '+', 1:2)
Token(NUMBER, 2, 1:3)
Token(PUNCT, '/', 1:5)
Token(NUMBER, 3, 1:7)
"""

import logging
import string
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterator, Optional

from exprc.errors import SourceLocation
from exprc.compiler.errors import NumericOverflowError, UnexpectedCharacterError

logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

INT32_MAX = 2**31 - 1
INT32_MIN = -(2**31)

DIGITS = "0123456789"

# Checked before single-character punctuation
TWO_CHAR_PUNCT = ("==", "!=", "<=", ">=")


# =============================================================================
# Token Types
# =============================================================================

class TokenType(Enum):
    """
    Token categories.

    EOF is never produced by scan(); the parser uses it as the sentinel
    returned when it looks past the last token.
    """
    NUMBER = auto()     # Integer literal, value is an int
    PUNCT = auto()      # Punctuation, value is the punctuation text
    EOF = auto()        # End of input (parser sentinel)


@dataclass(frozen=True)
class Token:
    """
    A single lexical unit.

    Attributes:
        type: NUMBER or PUNCT (EOF only as the parser sentinel)
        value: The integer value for NUMBER, the punctuation text for PUNCT
        text: The exact source substring the token was scanned from
        line: Line number in source (1-indexed)
        column: Column number in source (1-indexed)
        filename: Name of the input for error messages
    """
    type: TokenType
    value: str | int | None
    text: str
    line: int
    column: int
    filename: str = "<input>"

    def __repr__(self) -> str:
        """Format token for debugging output."""
        if isinstance(self.value, int):
            return f"Token({self.type.name}, {self.value}, {self.line}:{self.column})"
        if self.value is not None:
            return f"Token({self.type.name}, {self.value!r}, {self.line}:{self.column})"
        return f"Token({self.type.name}, {self.line}:{self.column})"

    @property
    def location(self) -> SourceLocation:
        """Return a SourceLocation for error reporting."""
        return SourceLocation(self.filename, self.line, self.column)

    def is_punct(self, text: str) -> bool:
        """Return True if this is the punctuation token `text`."""
        return self.type == TokenType.PUNCT and self.value == text


# =============================================================================
# Lexer Implementation
# =============================================================================

class Lexer:
    """
    Tokenizes an expression.

    Usage:
        lexer = Lexer("1 + 2", "<input>")
        tokens = list(lexer.tokenize())

    Attributes:
        source: The text being tokenized
        filename: Name of the input (for error reporting)
    """

    def __init__(self, source: str, filename: str = "<input>"):
        self.source = source
        self.filename = filename

        self._pos = 0
        self._line = 1
        self._column = 1
        self._line_start_pos = 0

    def tokenize(self) -> Iterator[Token]:
        """
        Generate tokens from the source text.

        Yields:
            Token objects in source order

        Raises:
            UnexpectedCharacterError: On a character that cannot begin a token
            NumericOverflowError: On a literal outside the 32-bit range
        """
        while not self._at_end():
            char = self._peek()

            if char.isspace():
                self._advance()
                continue

            if char in DIGITS:
                yield self._scan_number()
                continue

            token = self._scan_punct()
            if token is None:
                raise UnexpectedCharacterError(
                    char,
                    SourceLocation(self.filename, self._line, self._column),
                    self._get_current_line(),
                )
            yield token

    # =========================================================================
    # Character Access Methods
    # =========================================================================

    def _at_end(self) -> bool:
        return self._pos >= len(self.source)

    def _peek(self, offset: int = 0) -> str:
        """Look at a character without advancing; empty string past the end."""
        pos = self._pos + offset
        if pos >= len(self.source):
            return ""
        return self.source[pos]

    def _advance(self) -> str:
        """Consume and return the current character, tracking line/column."""
        char = self.source[self._pos]
        self._pos += 1

        if char == "\n":
            self._line += 1
            self._column = 1
            self._line_start_pos = self._pos
        else:
            self._column += 1

        return char

    # =========================================================================
    # Token Scanning
    # =========================================================================

    def _scan_number(self) -> Token:
        """Scan a run of ASCII digits as one signed 32-bit literal."""
        start_line = self._line
        start_column = self._column

        chars = []
        while self._peek() and self._peek() in DIGITS:
            chars.append(self._advance())

        text = "".join(chars)
        value = int(text)
        if value > INT32_MAX:
            raise NumericOverflowError(
                text,
                SourceLocation(self.filename, start_line, start_column),
                self._get_current_line(),
            )

        return Token(TokenType.NUMBER, value, text, start_line, start_column, self.filename)

    def _scan_punct(self) -> Optional[Token]:
        """
        Scan a punctuation token.

        Two-character operators win over their one-character prefixes.

        Returns:
            The token, or None if the current character is not punctuation
        """
        start_line = self._line
        start_column = self._column

        pair = self._peek() + self._peek(1)
        if pair in TWO_CHAR_PUNCT:
            self._advance()
            self._advance()
            return Token(TokenType.PUNCT, pair, pair, start_line, start_column, self.filename)

        char = self._peek()
        if char in string.punctuation:
            self._advance()
            return Token(TokenType.PUNCT, char, char, start_line, start_column, self.filename)

        return None

    def _get_current_line(self) -> str:
        """Get the current line of source text for error reporting."""
        line_end = self.source.find("\n", self._line_start_pos)
        if line_end == -1:
            line_end = len(self.source)
        return self.source[self._line_start_pos:line_end]


# =============================================================================
# Convenience Functions
# =============================================================================

def scan(source: str, filename: str = "<input>") -> list[Token]:
    """
    Tokenize an expression into a list of tokens.

    Args:
        source: The expression text
        filename: Name of the input for error messages

    Returns:
        The tokens in source order (no end-of-input token)

    Raises:
        UnexpectedCharacterError: On a character that cannot begin a token
        NumericOverflowError: On a literal outside the 32-bit range
    """
    tokens = list(Lexer(source, filename).tokenize())
    logger.debug(f"Scanned {len(tokens)} tokens from {filename}")
    return tokens
