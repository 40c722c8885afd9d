"""
Expression Tree Definitions
===========================

This module defines the tree the parser builds and both emitters consume.

Node Hierarchy
--------------
Expression (base)
├── NumberLiteral - signed 32-bit constant
├── UnaryExpression - negation
└── BinaryExpression - arithmetic and comparison operators

Design Notes
------------
- The node set is closed. Each emitter walks the tree with an explicit
  work list and dispatches on the node class, so adding a node means
  touching both.
- There are no GREATER / GREATER_EQ operators. The parser rewrites
  `a > b` as `b < a` and `a >= b` as `b <= a`, swapping the operands.
- Nodes are frozen dataclasses; every child belongs to exactly one parent.
- `location` is excluded from equality, so two trees compare equal when
  they have the same shape, operators and values.
"""

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Optional

from exprc.errors import SourceLocation


# =============================================================================
# Operators
# =============================================================================

class BinaryOperator(Enum):
    """Binary operator types."""
    # Arithmetic
    ADD = auto()        # +
    SUBTRACT = auto()   # -
    MULTIPLY = auto()   # *
    DIVIDE = auto()     # / (signed, truncating)

    # Comparison (result is 0 or 1)
    EQUAL = auto()      # ==
    NOT_EQUAL = auto()  # !=
    LESS = auto()       # <  (also a > b with operands swapped)
    LESS_EQ = auto()    # <= (also a >= b with operands swapped)


class UnaryOperator(Enum):
    """Unary operator types."""
    NEGATE = auto()     # -x


COMPARISON_OPERATORS = frozenset({
    BinaryOperator.EQUAL,
    BinaryOperator.NOT_EQUAL,
    BinaryOperator.LESS,
    BinaryOperator.LESS_EQ,
})

OPERATOR_SYMBOLS = {
    BinaryOperator.ADD: "+",
    BinaryOperator.SUBTRACT: "-",
    BinaryOperator.MULTIPLY: "*",
    BinaryOperator.DIVIDE: "/",
    BinaryOperator.EQUAL: "==",
    BinaryOperator.NOT_EQUAL: "!=",
    BinaryOperator.LESS: "<",
    BinaryOperator.LESS_EQ: "<=",
}


# =============================================================================
# Nodes
# =============================================================================

@dataclass(frozen=True)
class Expression:
    """
    Base class for all expression nodes.

    Attributes:
        location: Source location of the token that started this node
    """
    location: SourceLocation = field(compare=False)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}@{self.location.line}:{self.location.column}"


@dataclass(frozen=True, repr=False)
class NumberLiteral(Expression):
    """
    Integer literal.

    Attributes:
        value: The integer value (fits in a signed 32-bit integer)
    """
    value: int = 0


@dataclass(frozen=True, repr=False)
class UnaryExpression(Expression):
    """
    Unary operation (-x). Unary plus never reaches the tree.

    Attributes:
        operator: The unary operator
        operand: The operand expression
    """
    operator: UnaryOperator = UnaryOperator.NEGATE
    operand: Optional[Expression] = None


@dataclass(frozen=True, repr=False)
class BinaryExpression(Expression):
    """
    Binary operation (left op right).

    Attributes:
        operator: The binary operator
        left: Left operand expression
        right: Right operand expression
    """
    operator: Optional[BinaryOperator] = None
    left: Optional[Expression] = None
    right: Optional[Expression] = None


# =============================================================================
# Debug Printing
# =============================================================================

def format_expression(expr: Expression) -> str:
    """
    Render an expression as fully parenthesized infix text.

    >>> format_expression(parse_source("1 + 2 * -3"))
    '(1 + (2 * (-3)))'
    """
    # Work items are nodes or literal text, consumed left to right
    work: list = [expr]
    parts: list[str] = []

    while work:
        item = work.pop()
        if isinstance(item, str):
            parts.append(item)
        elif isinstance(item, NumberLiteral):
            parts.append(str(item.value))
        elif isinstance(item, UnaryExpression):
            work.extend([")", item.operand, "(-"])
        elif isinstance(item, BinaryExpression):
            op_str = OPERATOR_SYMBOLS[item.operator]
            work.extend([")", item.right, f" {op_str} ", item.left, "("])
        else:
            parts.append(f"<{type(item).__name__}>")

    return "".join(parts)


def dump_tree(expr: Expression) -> str:
    """
    Render an expression as an indented tree, one node per line.

        Binary ADD
          Number 1
          Unary NEGATE
            Number 3
    """
    lines: list[str] = []
    work: list[tuple[Expression, int]] = [(expr, 0)]

    while work:
        node, level = work.pop()
        indent = "  " * level
        if isinstance(node, NumberLiteral):
            lines.append(f"{indent}Number {node.value}")
        elif isinstance(node, UnaryExpression):
            lines.append(f"{indent}Unary {node.operator.name}")
            work.append((node.operand, level + 1))
        elif isinstance(node, BinaryExpression):
            lines.append(f"{indent}Binary {node.operator.name}")
            work.append((node.right, level + 1))
            work.append((node.left, level + 1))
        else:
            lines.append(f"{indent}<{type(node).__name__}>")

    return "\n".join(lines)
