"""
x86-64 Assembly Generator
=========================

This module lowers an expression tree to GNU assembler (AT&T syntax)
text for x86-64.

Code Generation Strategy
------------------------
The generator simulates a two-register accumulator machine:

1. Every expression leaves its result in %rax
2. For a binary node the right operand is evaluated first and pushed,
   then the left operand is evaluated into %rax, and the pushed value
   is popped into %rdi
3. The operator combines %rax and %rdi and leaves the result in %rax

Register Usage
--------------
| Register | Usage                                   |
|----------|-----------------------------------------|
| %rax     | Accumulator, result of every expression |
| %rdi     | Right operand of a binary operator      |
| %rdx     | High half of the dividend (cqo / idiv)  |
| %rsp     | Operand stack for pending right values  |

Every push is matched by exactly one pop, so the simulated stack depth
is back to zero when the tree is done. A non-zero depth is a compiler
bug and raises InternalInvariantError.

Generated Assembly Format
-------------------------
    .global main
  main:
    mov $2, %rax
    push %rax
    mov $1, %rax
    pop %rdi
    add %rdi, %rax
    ret

The program's exit status is the low 8 bits of the expression value.

Usage
-----
>>> from exprc.compiler.parser import parse_source
>>> from exprc.compiler.codegen import AsmGenerator
>>> print(AsmGenerator().generate(parse_source("1 + 2")))
"""

import logging
from functools import partial

from exprc.compiler.ast import (
    Expression,
    NumberLiteral,
    UnaryExpression,
    BinaryExpression,
    BinaryOperator,
    UnaryOperator,
)
from exprc.compiler.errors import CodeGenError, InternalInvariantError

logger = logging.getLogger(__name__)


# Condition-code suffixes for setCC after `cmp %rdi, %rax`
SET_INSTRUCTIONS = {
    BinaryOperator.EQUAL: "sete",
    BinaryOperator.NOT_EQUAL: "setne",
    BinaryOperator.LESS: "setl",
    BinaryOperator.LESS_EQ: "setle",
}

ARITHMETIC_INSTRUCTIONS = {
    BinaryOperator.ADD: "add",
    BinaryOperator.SUBTRACT: "sub",
    BinaryOperator.MULTIPLY: "imul",
}


class AsmGenerator:
    """
    Generates x86-64 assembly from an expression tree.

    Attributes:
        entry_point: Name of the global entry symbol
        depth: Current simulated operand stack depth
    """

    def __init__(self, entry_point: str = "main"):
        self.entry_point = entry_point

        # Assembly output lines
        self._output: list[str] = []

        # Simulated operand stack depth
        self.depth = 0

    def generate(self, expr: Expression) -> str:
        """
        Generate a complete assembly program for an expression.

        Args:
            expr: The root of the expression tree

        Returns:
            Assembly source text, newline terminated

        Raises:
            InternalInvariantError: If pushes and pops did not balance
        """
        self._output = []
        self.depth = 0

        self._emit(f"  .global {self.entry_point}")
        self._emit_label(self.entry_point)

        self._generate_expression(expr)
        self._emit_instruction("ret")

        if self.depth != 0:
            raise InternalInvariantError(
                f"operand stack depth is {self.depth} after emission, expected 0"
            )

        logger.debug(f"Generated {len(self._output)} lines of assembly")
        return "\n".join(self._output) + "\n"

    # =========================================================================
    # Assembly Output Methods
    # =========================================================================

    def _emit(self, line: str) -> None:
        self._output.append(line)

    def _emit_label(self, label: str) -> None:
        self._emit(f"{label}:")

    def _emit_instruction(self, mnemonic: str, operands: str = "") -> None:
        """Emit an instruction with optional operands."""
        if operands:
            self._emit(f"  {mnemonic} {operands}")
        else:
            self._emit(f"  {mnemonic}")

    def _push(self) -> None:
        """Push the accumulator onto the operand stack."""
        self._emit_instruction("push", "%rax")
        self.depth += 1

    def _pop(self, register: str) -> None:
        """Pop the top of the operand stack into `register`."""
        self._emit_instruction("pop", register)
        self.depth -= 1

    # =========================================================================
    # Expression Code Generation
    # =========================================================================

    def _generate_expression(self, expr: Expression) -> None:
        """
        Generate code for an expression.

        The result is left in %rax. The tree is walked with an explicit work
        list, not recursion. A work item is either a node still to be
        generated or a callable that emits the instructions following an
        already generated operand.
        """
        work: list = [expr]

        while work:
            item = work.pop()

            if callable(item):
                item()
            elif isinstance(item, NumberLiteral):
                self._emit_instruction("mov", f"${item.value}, %rax")
            elif isinstance(item, UnaryExpression):
                work.append(partial(self._generate_unary, item.operator))
                work.append(item.operand)
            elif isinstance(item, BinaryExpression):
                # Right operand is parked on the stack while the left one is
                # computed; items run in reverse order of appending
                work.append(partial(self._generate_binary, item.operator))
                work.append(partial(self._pop, "%rdi"))
                work.append(item.left)
                work.append(self._push)
                work.append(item.right)
            else:
                raise CodeGenError(f"cannot generate code for {type(item).__name__}")

    def _generate_unary(self, op: UnaryOperator) -> None:
        """Apply a unary operator to %rax."""
        if op == UnaryOperator.NEGATE:
            self._emit_instruction("neg", "%rax")

    def _generate_binary(self, op: BinaryOperator) -> None:
        """Combine %rax (left) and %rdi (right) into %rax."""
        if op in ARITHMETIC_INSTRUCTIONS:
            self._emit_instruction(ARITHMETIC_INSTRUCTIONS[op], "%rdi, %rax")
        elif op == BinaryOperator.DIVIDE:
            # Sign-extend %rax into %rdx:%rax, quotient lands in %rax
            self._emit_instruction("cqo")
            self._emit_instruction("idiv", "%rdi")
        elif op in SET_INSTRUCTIONS:
            self._generate_comparison(op)
        else:
            raise CodeGenError(f"unsupported operator {op}")

    def _generate_comparison(self, op: BinaryOperator) -> None:
        """Compare %rax with %rdi and leave 0 or 1 in %rax."""
        self._emit_instruction("cmp", "%rdi, %rax")
        self._emit_instruction(SET_INSTRUCTIONS[op], "%al")
        self._emit_instruction("movzb", "%al, %rax")


# =============================================================================
# Convenience Functions
# =============================================================================

def emit_asm(expr: Expression, entry_point: str = "main") -> str:
    """
    Lower an expression tree to x86-64 assembly text.

    Args:
        expr: The root of the expression tree
        entry_point: Name of the global entry symbol

    Returns:
        Assembly source text
    """
    return AsmGenerator(entry_point).generate(expr)
