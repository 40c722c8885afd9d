"""
exprc - A Minimal Arithmetic Expression Compiler
================================================

exprc translates one arithmetic expression into low-level output: x86-64
assembly for the GNU toolchain, or an LLVM IR module built with llvmlite.

Main Components
---------------
- **compiler**: lexer, parser, expression tree and the two generators
- **cli**: the `exprcc` command-line tool

Quick Start
-----------
    >>> from exprc import compile_expression
    >>> print(compile_expression("1 + 2 * 3"))

Or from the shell:
    $ exprcc "1 + 2 * 3" -o prog.s && cc prog.s -o prog && ./prog; echo $?
    7
"""

__version__ = "1.0.0"

# =============================================================================
# Public API Exports
# =============================================================================

from exprc.errors import ExprcError, SourceLocation
from exprc.compiler import (
    Compiler,
    CompilerOptions,
    CompilerResult,
    compile_expression,
    compile_to_module,
    CompilerError,
    ExprSyntaxError,
    CodeGenError,
)

__all__ = [
    "__version__",
    "ExprcError",
    "SourceLocation",
    "Compiler",
    "CompilerOptions",
    "CompilerResult",
    "compile_expression",
    "compile_to_module",
    "CompilerError",
    "ExprSyntaxError",
    "CodeGenError",
]
