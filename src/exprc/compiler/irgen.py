"""
LLVM IR Generator
=================

This module lowers an expression tree to an LLVM IR module using
llvmlite. It is the alternative to the assembly generator and consumes
the same tree.

Module Layout
-------------
    ; ModuleID = "main"
    define i32 @"main"()
    {
    entry:
      %".2" = add i32 1, 2
      ret i32 %".2"
    }

One function, no parameters, one basic block, one `ret`.

Lowering Rules
--------------
| Node            | Instructions                          |
|-----------------|---------------------------------------|
| NumberLiteral   | i32 constant                          |
| NEGATE          | neg                                   |
| ADD/SUB/MUL     | add / sub / mul                       |
| DIVIDE          | sdiv                                  |
| comparisons     | icmp (eq, ne, slt, sle) + zext to i32 |

Intermediate values are SSA references, so no spill stack is needed.
Operands are lowered left before right.

The IRGenerator itself touches nothing outside the module it builds.
verify_module() and module_to_bitcode() go through llvmlite.binding for
the caller that needs a checked module or bytes to write out.
"""

import logging
from functools import partial
from typing import Optional

from llvmlite import ir
import llvmlite.binding as llvm

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


INT32 = ir.IntType(32)

# icmp_signed takes C-style predicate strings
COMPARISON_PREDICATES = {
    BinaryOperator.EQUAL: "==",
    BinaryOperator.NOT_EQUAL: "!=",
    BinaryOperator.LESS: "<",
    BinaryOperator.LESS_EQ: "<=",
}


class IRGenerator:
    """
    Generates an LLVM IR module from an expression tree.

    Attributes:
        module_name: Name given to the generated module
        entry_point: Name of the generated function
    """

    def __init__(self, module_name: str = "main", entry_point: str = "main"):
        self.module_name = module_name
        self.entry_point = entry_point
        self._builder: Optional[ir.IRBuilder] = None

    def generate(self, expr: Expression) -> ir.Module:
        """
        Build a module whose entry function returns the expression value.

        Args:
            expr: The root of the expression tree

        Returns:
            The llvmlite module
        """
        module = ir.Module(name=self.module_name)
        func_type = ir.FunctionType(INT32, [])
        func = ir.Function(module, func_type, name=self.entry_point)
        block = func.append_basic_block(name="entry")

        self._builder = ir.IRBuilder(block)
        result = self._generate_expression(expr)
        self._builder.ret(result)

        logger.debug(f"Generated {len(block.instructions)} instructions in @{self.entry_point}")
        return module

    # =========================================================================
    # Expression Lowering
    # =========================================================================

    def _generate_expression(self, expr: Expression) -> ir.Value:
        """
        Lower an expression and return the i32 value holding its result.

        The tree is walked with an explicit work list, not recursion.
        Lowered operands collect on a value stack; a callable work item
        pops its operands from that stack and pushes the combined value.
        """
        work: list = [expr]
        values: list[ir.Value] = []

        while work:
            item = work.pop()

            if callable(item):
                values.append(item(values))
            elif isinstance(item, NumberLiteral):
                values.append(ir.Constant(INT32, item.value))
            elif isinstance(item, UnaryExpression):
                work.append(partial(self._generate_unary, item.operator))
                work.append(item.operand)
            elif isinstance(item, BinaryExpression):
                # Items run in reverse order of appending: left, right, operator
                work.append(partial(self._generate_binary, item.operator))
                work.append(item.right)
                work.append(item.left)
            else:
                raise CodeGenError(f"cannot generate code for {type(item).__name__}")

        return values.pop()

    def _generate_unary(self, op: UnaryOperator, values: list[ir.Value]) -> ir.Value:
        operand = values.pop()
        if op == UnaryOperator.NEGATE:
            return self._builder.neg(operand)
        return operand

    def _generate_binary(self, op: BinaryOperator, values: list[ir.Value]) -> ir.Value:
        rhs = values.pop()
        lhs = values.pop()

        if op == BinaryOperator.ADD:
            return self._builder.add(lhs, rhs)
        if op == BinaryOperator.SUBTRACT:
            return self._builder.sub(lhs, rhs)
        if op == BinaryOperator.MULTIPLY:
            return self._builder.mul(lhs, rhs)
        if op == BinaryOperator.DIVIDE:
            return self._builder.sdiv(lhs, rhs)
        if op in COMPARISON_PREDICATES:
            # i1 result widened to the function's return type
            flag = self._builder.icmp_signed(COMPARISON_PREDICATES[op], lhs, rhs)
            return self._builder.zext(flag, INT32)
        raise CodeGenError(f"unsupported operator {op}")


# =============================================================================
# Module Handling
# =============================================================================

def verify_module(module: ir.Module) -> llvm.ModuleRef:
    """
    Parse a module with LLVM and run the verifier on it.

    Returns:
        The parsed module reference

    Raises:
        InternalInvariantError: If LLVM rejects the module
    """
    try:
        parsed = llvm.parse_assembly(str(module))
        parsed.verify()
    except RuntimeError as e:
        raise InternalInvariantError(f"LLVM rejected the generated module: {e}") from e
    return parsed


def module_to_bitcode(module: ir.Module) -> bytes:
    """Verify a module and return its LLVM bitcode."""
    bitcode = verify_module(module).as_bitcode()
    logger.debug(f"Encoded module '{module.name}' as {len(bitcode)} bytes of bitcode")
    return bitcode


# =============================================================================
# Convenience Functions
# =============================================================================

def emit_ir(
    expr: Expression,
    module_name: str = "main",
    entry_point: str = "main",
) -> ir.Module:
    """
    Lower an expression tree to an LLVM IR module.

    Args:
        expr: The root of the expression tree
        module_name: Name given to the module
        entry_point: Name of the generated function

    Returns:
        The llvmlite module
    """
    return IRGenerator(module_name, entry_point).generate(expr)
