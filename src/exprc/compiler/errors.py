"""
Expression Compiler Error Hierarchy
===================================

This module defines the exceptions raised by the scanner, parser and the
two emitters. Every stage fails fast: the first error aborts the pipeline
and nothing is emitted.

Exception Hierarchy
-------------------
CompilerError (base for all compiler errors)
├── ExprSyntaxError - errors in the input text
│   ├── UnexpectedCharacterError - character that cannot begin a token
│   ├── NumericOverflowError - literal does not fit in 32 bits
│   ├── UnexpectedTokenError - token where an expression was required
│   ├── MissingTokenError - required token (such as ')') not found
│   ├── ExtraTokenError - tokens left over after a complete expression
│   └── NestingTooDeepError - parentheses nested past the parser limit
└── CodeGenError - code generation errors
    └── InternalInvariantError - emitter bookkeeping went wrong

Error Message Format
--------------------
    <input>:1:4: error: expected ')'
        (1+2
           ^
    hint: add ')' to close the group opened at column 1
"""

from typing import Optional

from exprc.errors import ExprcError, SourceLocation


# =============================================================================
# Base Compiler Exception
# =============================================================================

class CompilerError(ExprcError):
    """
    Base exception for all expression compiler errors.

    Attributes:
        message: The error description
        location: Where in the input the error occurred
        hint: A suggestion for fixing the error
        source_line: The input text at the error location
    """

    def __init__(
        self,
        message: str,
        location: Optional[SourceLocation] = None,
        hint: Optional[str] = None,
        source_line: Optional[str] = None,
    ):
        self.message = message
        self.location = location
        self.hint = hint
        self.source_line = source_line
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """
        Format the error message with location, source context, and hint.

            <input>:1:3: error: unexpected character 'x' (U+0078)
                1 x 2
                  ^
        """
        parts = []

        # Location prefix: filename:line:column: error: message
        if self.location:
            parts.append(f"{self.location}: error: {self.message}")
        else:
            parts.append(f"error: {self.message}")

        # Source context with caret pointer
        if self.source_line is not None and self.location is not None:
            parts.append(f"    {self.source_line}")
            if self.location.column > 0:
                padding = " " * (4 + self.location.column - 1)
                parts.append(f"{padding}^")

        if self.hint:
            parts.append(f"hint: {self.hint}")

        return "\n".join(parts)


# =============================================================================
# Syntax Errors (Lexer and Parser)
# =============================================================================

class ExprSyntaxError(CompilerError):
    """
    Error in the input expression text.

    Raised by the lexer when the text cannot be split into tokens and by
    the parser when the tokens do not form an expression.
    """
    pass


class UnexpectedCharacterError(ExprSyntaxError):
    """
    Character that cannot begin any token.

    Only whitespace, ASCII digits and ASCII punctuation are accepted.
    """

    def __init__(
        self,
        char: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.char = char
        super().__init__(
            f"unexpected character '{char}' (U+{ord(char):04X})",
            location=location,
            source_line=source_line,
        )


class NumericOverflowError(ExprSyntaxError):
    """
    Integer literal outside the signed 32-bit range.
    """

    def __init__(
        self,
        literal: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.literal = literal
        super().__init__(
            f"integer literal '{literal}' does not fit in 32 bits",
            location=location,
            hint="literals must be at most 2147483647",
            source_line=source_line,
        )


class UnexpectedTokenError(ExprSyntaxError):
    """
    Unexpected token during parsing.

    Raised when the parser needs a primary expression (a number or a
    parenthesized group) and finds something else.
    """

    def __init__(
        self,
        found: str,
        expected: Optional[str] = None,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.found = found
        self.expected = expected

        hint = None
        if expected:
            hint = f"expected {expected}"

        super().__init__(
            f"unexpected {found}",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class MissingTokenError(ExprSyntaxError):
    """
    Required token is missing.

    Raised when a closing ')' is not found where expected.
    """

    def __init__(
        self,
        expected: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
        hint: Optional[str] = None,
    ):
        self.expected = expected
        super().__init__(
            f"expected '{expected}'",
            location=location,
            hint=hint,
            source_line=source_line,
        )


class ExtraTokenError(ExprSyntaxError):
    """
    Input continues after a complete expression.

    Example:
        1+2)    // the ')' has no matching '('
    """

    def __init__(
        self,
        found: str,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.found = found
        super().__init__(
            f"extra token '{found}'",
            location=location,
            hint="the expression is complete before this point",
            source_line=source_line,
        )


class NestingTooDeepError(ExprSyntaxError):
    """
    Parenthesized groups nested deeper than the parser accepts.

    Raised at the '(' that opens one level too many.
    """

    def __init__(
        self,
        limit: int,
        location: Optional[SourceLocation] = None,
        source_line: Optional[str] = None,
    ):
        self.limit = limit
        super().__init__(
            f"parentheses nested more than {limit} levels deep",
            location=location,
            hint="split the expression or remove redundant parentheses",
            source_line=source_line,
        )


# =============================================================================
# Code Generation Errors
# =============================================================================

class CodeGenError(CompilerError):
    """
    Error during code generation.

    The emitters are total over well-formed trees, so these only signal
    bugs in the compiler itself.
    """
    pass


class InternalInvariantError(CodeGenError):
    """
    Emitter bookkeeping is inconsistent after emission.

    Raised when the assembly generator's simulated stack depth is not zero
    once the whole tree has been emitted.
    """

    def __init__(self, message: str):
        super().__init__(
            f"internal compiler error: {message}",
            hint="this is a bug in exprc, not in the input expression",
        )
