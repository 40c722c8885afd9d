"""
Expression Compiler Main Module
===============================

This module provides the main compiler interface. It runs the complete
pipeline for one expression:

    Text → Lex → Parse → (Assembly | LLVM IR)

Usage
-----
Command line:
    $ exprcc "1 + 2 * 3" -o out.s
    $ exprcc -b llvm "1 + 2 * 3" -o out.bc

Programmatic:
    >>> from exprc.compiler import compile_expression
    >>> asm = compile_expression("1 + 2 * 3")

Error Handling
--------------
Every stage fails fast. The first error propagates to the caller as a
CompilerError subclass and no output is produced.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional

from llvmlite import ir

from exprc.compiler.lexer import Token, scan
from exprc.compiler.parser import parse
from exprc.compiler.ast import Expression
from exprc.compiler.codegen import AsmGenerator
from exprc.compiler.irgen import IRGenerator, verify_module

logger = logging.getLogger(__name__)


BACKENDS = ("asm", "llvm")


@dataclass
class CompilerOptions:
    """
    Compiler configuration options.

    Attributes:
        backend: "asm" for x86-64 assembly text, "llvm" for an LLVM IR module
        entry_point: Name of the generated entry symbol / function
        module_name: Name of the LLVM module (llvm backend only)
        verify: Run the LLVM verifier on the generated module (llvm backend only)
    """
    backend: str = "asm"
    entry_point: str = "main"
    module_name: str = "main"
    verify: bool = True

    def __post_init__(self):
        self.backend = self.backend.lower()
        if self.backend not in BACKENDS:
            raise ValueError(
                f"unknown backend '{self.backend}', expected one of: {', '.join(BACKENDS)}"
            )


@dataclass
class CompilerResult:
    """
    Result of a compilation.

    Attributes:
        filename: Input name
        success: True if compilation succeeded
        backend: Backend that produced the output
        tokens: Tokens produced by the lexer
        ast: Expression tree
        assembly: Generated assembly (asm backend)
        module: Generated LLVM module (llvm backend)
    """
    filename: str = ""
    success: bool = False
    backend: str = ""
    tokens: list[Token] = field(default_factory=list)
    ast: Optional[Expression] = None
    assembly: str = ""
    module: Optional[ir.Module] = None

    @property
    def token_count(self) -> int:
        return len(self.tokens)

    @property
    def output(self) -> str:
        """Textual form of whichever artifact the backend produced."""
        if self.module is not None:
            return str(self.module)
        return self.assembly


class Compiler:
    """
    Expression compiler.

    Example:
        compiler = Compiler(CompilerOptions(backend="llvm"))
        result = compiler.compile_source("(1 + 2) * 3")
        print(result.module)

    Attributes:
        options: Compiler configuration options
    """

    def __init__(self, options: Optional[CompilerOptions] = None):
        self.options = options or CompilerOptions()

    def compile_source(self, source: str, filename: str = "<input>") -> CompilerResult:
        """
        Compile one expression.

        Args:
            source: Expression text
            filename: Input name for error messages

        Returns:
            CompilerResult with the tokens, tree and generated output

        Raises:
            CompilerError: If any stage fails
        """
        result = CompilerResult(filename=filename, backend=self.options.backend)

        # Stage 1: Lexical analysis
        result.tokens = scan(source, filename)

        # Stage 2: Parsing
        result.ast = parse(result.tokens, source, filename)

        # Stage 3: Code generation
        if self.options.backend == "llvm":
            result.module = self._generate_module(result.ast)
        else:
            result.assembly = self._generate_assembly(result.ast)

        result.success = True
        logger.debug(f"Compiled {filename} with the {self.options.backend} backend")
        return result

    def _generate_assembly(self, ast: Expression) -> str:
        generator = AsmGenerator(entry_point=self.options.entry_point)
        return generator.generate(ast)

    def _generate_module(self, ast: Expression) -> ir.Module:
        generator = IRGenerator(
            module_name=self.options.module_name,
            entry_point=self.options.entry_point,
        )
        module = generator.generate(ast)
        if self.options.verify:
            verify_module(module)
        return module


# =============================================================================
# Convenience Functions
# =============================================================================

def compile_expression(source: str, filename: str = "<input>") -> str:
    """
    Compile an expression to x86-64 assembly text.

    Raises:
        CompilerError: If compilation fails

    Example:
        >>> print(compile_expression("42"))
          .global main
        main:
          mov $42, %rax
          ret
    """
    compiler = Compiler(CompilerOptions(backend="asm"))
    return compiler.compile_source(source, filename).assembly


def compile_to_module(source: str, filename: str = "<input>") -> ir.Module:
    """
    Compile an expression to a verified LLVM IR module.

    Raises:
        CompilerError: If compilation fails
    """
    compiler = Compiler(CompilerOptions(backend="llvm"))
    return compiler.compile_source(source, filename).module
