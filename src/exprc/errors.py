"""
exprc Error Base
================

This module defines the root of the exception hierarchy for exprc and the
source location type shared by every stage of the pipeline. All exceptions
inherit from ExprcError, allowing callers to catch every exprc failure with
a single except clause.

Exception Hierarchy
-------------------
ExprcError (base)
└── CompilerError (exprc.compiler.errors)
    ├── ExprSyntaxError - lexer and parser errors
    └── CodeGenError - emitter errors

Error messages follow this format:
    filename:line:column: error: description
        source_line_text
        ^ (pointer to error location)
    hint: suggestion for fixing (when available)
"""

from dataclasses import dataclass


# =============================================================================
# Base Exception Class
# =============================================================================

class ExprcError(Exception):
    """
    Base exception for all exprc errors.

        try:
            compile_expression("1 +")
        except ExprcError as e:
            print(f"Error: {e}")
    """
    pass


# =============================================================================
# Source Location Tracking
# =============================================================================

@dataclass(frozen=True)
class SourceLocation:
    """
    Represents a location in the input expression for error reporting.

    Attributes:
        filename: Name of the input (or "<input>" for string input)
        line: Line number (1-indexed)
        column: Column number (1-indexed)
    """
    filename: str
    line: int
    column: int

    def __str__(self) -> str:
        """Format as 'filename:line:column' for error messages."""
        return f"{self.filename}:{self.line}:{self.column}"
