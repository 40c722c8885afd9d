"""
Expression Recursive Descent Parser
===================================

This module builds an expression tree from the token list produced by
the lexer.

Grammar (EBNF)
--------------
expr            ::= equality
equality        ::= relational (('==' | '!=') relational)*
relational      ::= additive (('<' | '<=' | '>' | '>=') additive)*
additive        ::= multiplicative (('+' | '-') multiplicative)*
multiplicative  ::= unary (('*' | '/') unary)*
unary           ::= ('+' | '-') unary | primary
primary         ::= '(' expr ')' | NUMBER

Expression Precedence (lowest to highest)
-----------------------------------------
1. equality        == !=
2. relational      < <= > >=
3. additive        + -
4. multiplicative  * /
5. unary           + -
6. primary         NUMBER, '(' expr ')'

All binary levels are left-associative. The parser needs one token of
lookahead and never backtracks.

`>` and `>=` do not get their own tree nodes: `a > b` is built as
`b < a` and `a >= b` as `b <= a`.

Parenthesized groups nest at most MAX_NESTING_DEPTH levels; one more
raises NestingTooDeepError at the offending `(`. Operator chains and runs
of unary signs are folded in loops and have no length limit.

Example Usage
-------------
>>> from exprc.compiler.parser import parse_source
>>> from exprc.compiler.ast import format_expression
>>> format_expression(parse_source("1 + 2 * 3"))
'(1 + (2 * 3))'
"""

import logging
from typing import Callable, Optional

from exprc.compiler.lexer import Token, TokenType, scan
from exprc.compiler.ast import (
    Expression,
    NumberLiteral,
    UnaryExpression,
    BinaryExpression,
    BinaryOperator,
    UnaryOperator,
)
from exprc.compiler.errors import (
    UnexpectedTokenError,
    MissingTokenError,
    ExtraTokenError,
    NestingTooDeepError,
)

logger = logging.getLogger(__name__)

# Deepest parenthesized group accepted; each level costs a fixed number
# of Python frames in the recursive descent
MAX_NESTING_DEPTH = 63


class Parser:
    """
    Recursive descent parser for arithmetic expressions.

    Parsing stops at the first error; there is no recovery.

    Attributes:
        tokens: List of tokens to parse
        filename: Input name for error reporting
    """

    def __init__(
        self,
        tokens: list[Token],
        filename: str = "<input>",
        source_lines: Optional[list[str]] = None,
    ):
        """
        Initialize the parser.

        Args:
            tokens: Tokens from the lexer
            filename: Input name for error messages
            source_lines: Original source lines for error context
        """
        self.tokens = tokens
        self.filename = filename
        self.source_lines = source_lines or []

        self._pos = 0
        self._depth = 0
        self._eof = self._make_eof()

    def parse(self) -> Expression:
        """
        Parse the whole token list as one expression.

        Returns:
            The root of the expression tree

        Raises:
            ExprSyntaxError: If the tokens do not form exactly one expression
        """
        expr = self._parse_expression()

        if not self._at_end():
            token = self._peek()
            raise ExtraTokenError(
                token.text,
                token.location,
                self._get_source_line(token.line),
            )

        return expr

    # =========================================================================
    # Token Access Methods
    # =========================================================================

    def _make_eof(self) -> Token:
        """Build the end-of-input sentinel just past the last token."""
        if self.tokens:
            last = self.tokens[-1]
            return Token(
                TokenType.EOF, None, "", last.line,
                last.column + len(last.text), self.filename,
            )
        return Token(TokenType.EOF, None, "", 1, 1, self.filename)

    def _at_end(self) -> bool:
        return self._pos >= len(self.tokens)

    def _peek(self) -> Token:
        """Look at the current token (the EOF sentinel past the end)."""
        if self._at_end():
            return self._eof
        return self.tokens[self._pos]

    def _advance(self) -> Token:
        """Consume and return the current token."""
        token = self._peek()
        if not self._at_end():
            self._pos += 1
        return token

    def _match(self, text: str) -> Optional[Token]:
        """Consume the current token if it is the punctuation `text`."""
        if self._peek().is_punct(text):
            return self._advance()
        return None

    def _get_source_line(self, line: int) -> Optional[str]:
        """Get source line for error reporting."""
        if 0 < line <= len(self.source_lines):
            return self.source_lines[line - 1]
        return None

    # =========================================================================
    # Expression Parsing (Operator Precedence)
    # =========================================================================

    def _parse_expression(self) -> Expression:
        """Parse expression (top level)."""
        return self._parse_equality()

    def _parse_equality(self) -> Expression:
        """Parse equality expression (== !=)."""
        return self._parse_binary(
            self._parse_relational,
            {
                "==": BinaryOperator.EQUAL,
                "!=": BinaryOperator.NOT_EQUAL,
            },
        )

    def _parse_relational(self) -> Expression:
        """
        Parse relational expression (< <= > >=).

        `>` and `>=` swap their operands and reuse LESS / LESS_EQ.
        """
        operators = {
            "<": (BinaryOperator.LESS, False),
            "<=": (BinaryOperator.LESS_EQ, False),
            ">": (BinaryOperator.LESS, True),
            ">=": (BinaryOperator.LESS_EQ, True),
        }

        expr = self._parse_additive()

        while self._peek().type == TokenType.PUNCT and self._peek().value in operators:
            op_token = self._advance()
            operator, swapped = operators[op_token.value]
            right = self._parse_additive()
            if swapped:
                expr = BinaryExpression(
                    location=expr.location,
                    operator=operator,
                    left=right,
                    right=expr,
                )
            else:
                expr = BinaryExpression(
                    location=expr.location,
                    operator=operator,
                    left=expr,
                    right=right,
                )

        return expr

    def _parse_additive(self) -> Expression:
        """Parse additive expression (+ -)."""
        return self._parse_binary(
            self._parse_multiplicative,
            {
                "+": BinaryOperator.ADD,
                "-": BinaryOperator.SUBTRACT,
            },
        )

    def _parse_multiplicative(self) -> Expression:
        """Parse multiplicative expression (* /)."""
        return self._parse_binary(
            self._parse_unary,
            {
                "*": BinaryOperator.MULTIPLY,
                "/": BinaryOperator.DIVIDE,
            },
        )

    def _parse_binary(
        self,
        operand_parser: Callable[[], Expression],
        operators: dict[str, BinaryOperator],
    ) -> Expression:
        """
        Generic left-associative binary expression parser.

        Args:
            operand_parser: Function to parse operands
            operators: Map of punctuation text to binary operators
        """
        expr = operand_parser()

        while self._peek().type == TokenType.PUNCT and self._peek().value in operators:
            op_token = self._advance()
            right = operand_parser()
            expr = BinaryExpression(
                location=expr.location,
                operator=operators[op_token.value],
                left=expr,
                right=right,
            )

        return expr

    def _parse_unary(self) -> Expression:
        """
        Parse unary expression (+ -). Unary plus is dropped.

        Prefix operators are collected in a loop and applied innermost first.
        """
        negations: list[Token] = []
        while True:
            if self._match("+"):
                continue
            token = self._match("-")
            if token is None:
                break
            negations.append(token)

        expr = self._parse_primary()
        for token in reversed(negations):
            expr = UnaryExpression(
                location=token.location,
                operator=UnaryOperator.NEGATE,
                operand=expr,
            )
        return expr

    def _parse_primary(self) -> Expression:
        """Parse primary expression (number or parenthesized group)."""
        token = self._peek()

        if token.type == TokenType.NUMBER:
            self._advance()
            return NumberLiteral(location=token.location, value=token.value)

        if token.is_punct("("):
            self._advance()
            if self._depth >= MAX_NESTING_DEPTH:
                raise NestingTooDeepError(
                    MAX_NESTING_DEPTH,
                    token.location,
                    self._get_source_line(token.line),
                )
            self._depth += 1
            expr = self._parse_expression()
            self._depth -= 1
            if not self._match(")"):
                current = self._peek()
                raise MissingTokenError(
                    ")",
                    current.location,
                    self._get_source_line(current.line),
                    hint=f"add ')' to close the group opened at column {token.column}",
                )
            return expr

        found = "end of input" if token.type == TokenType.EOF else f"'{token.text}'"
        raise UnexpectedTokenError(
            found,
            expected="a number or '('",
            location=token.location,
            source_line=self._get_source_line(token.line),
        )


# =============================================================================
# Convenience Functions
# =============================================================================

def parse(
    tokens: list[Token],
    source: Optional[str] = None,
    filename: str = "<input>",
) -> Expression:
    """
    Parse a token list into an expression tree.

    Args:
        tokens: Tokens from scan()
        source: Original text, used only to quote it in error messages
        filename: Input name for error messages

    Returns:
        The root of the expression tree

    Raises:
        ExprSyntaxError: If the tokens do not form exactly one expression
    """
    source_lines = source.splitlines() if source is not None else None
    expr = Parser(tokens, filename, source_lines).parse()
    logger.debug(f"Parsed {len(tokens)} tokens into {type(expr).__name__}")
    return expr


def parse_source(source: str, filename: str = "<input>") -> Expression:
    """
    Scan and parse an expression in one step.

    Raises:
        ExprSyntaxError: If scanning or parsing fails
    """
    return parse(scan(source, filename), source, filename)
