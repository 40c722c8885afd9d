"""
exprc Expression Compiler
=========================

This package compiles a single arithmetic expression to either x86-64
assembly text or an LLVM IR module.

The language is deliberately tiny:

- Non-negative integer literals (signed 32-bit range)
- Unary + and -
- Binary + - * / (signed, truncating division)
- Comparisons == != < <= > >= yielding 0 or 1
- Parentheses

Pipeline
--------
    Text → Lexer → Parser → Expression tree → AsmGenerator | IRGenerator

Both generators consume the same tree and are independent of each other.

Usage
-----
>>> from exprc.compiler import compile_expression, compile_to_module
>>> print(compile_expression("(1 + 2) * 3"))
>>> print(compile_to_module("7 / 2 == 3"))
"""

from exprc.compiler.compiler import (
    Compiler,
    CompilerOptions,
    CompilerResult,
    compile_expression,
    compile_to_module,
)
from exprc.compiler.errors import (
    CompilerError,
    ExprSyntaxError,
    UnexpectedCharacterError,
    NumericOverflowError,
    UnexpectedTokenError,
    MissingTokenError,
    ExtraTokenError,
    NestingTooDeepError,
    CodeGenError,
    InternalInvariantError,
)
from exprc.compiler.lexer import Lexer, Token, TokenType, scan
from exprc.compiler.parser import Parser, parse, parse_source
from exprc.compiler.codegen import AsmGenerator, emit_asm
from exprc.compiler.irgen import IRGenerator, emit_ir, verify_module, module_to_bitcode
from exprc.compiler.ast import (
    Expression,
    NumberLiteral,
    UnaryExpression,
    BinaryExpression,
    BinaryOperator,
    UnaryOperator,
    format_expression,
    dump_tree,
)

__all__ = [
    # Main API
    "Compiler",
    "CompilerOptions",
    "CompilerResult",
    "compile_expression",
    "compile_to_module",
    # Errors
    "CompilerError",
    "ExprSyntaxError",
    "UnexpectedCharacterError",
    "NumericOverflowError",
    "UnexpectedTokenError",
    "MissingTokenError",
    "ExtraTokenError",
    "NestingTooDeepError",
    "CodeGenError",
    "InternalInvariantError",
    # Lexer
    "Lexer",
    "Token",
    "TokenType",
    "scan",
    # Parser
    "Parser",
    "parse",
    "parse_source",
    # Generators
    "AsmGenerator",
    "emit_asm",
    "IRGenerator",
    "emit_ir",
    "verify_module",
    "module_to_bitcode",
    # Tree
    "Expression",
    "NumberLiteral",
    "UnaryExpression",
    "BinaryExpression",
    "BinaryOperator",
    "UnaryOperator",
    "format_expression",
    "dump_tree",
]
