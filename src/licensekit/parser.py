# Copyright 2026 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
# SPDX-License-Identifier: Apache-2.0

r"""Recursive descent parser for license expressions.

Grammar, loosest to tightest binding::

    or_expr    = and_expr ("OR" and_expr)*
    and_expr   = with_expr ("AND" with_expr)*
    with_expr  = primary ("WITH" primary)?
    primary    = identifier / "(" or_expr ")"

``OR`` and ``AND`` chains fold left: ``a OR b OR c`` is
``OR(OR(a, b), c)``. ``WITH`` does not chain: ``a WITH b WITH c`` is
rejected. Parentheses only group, so ``(E)`` and ``((E))`` parse to the
same tree as ``E``.

:func:`parse` is total. Any syntax error (a missing operand, an operator
where an operand belongs, unbalanced parentheses, trailing tokens, or
nesting deeper than :attr:`ParserOptions.max_depth`) yields
:data:`~licensekit.expression.INVALID`. :func:`parse_strict` raises
:class:`ExpressionSyntaxError` instead, for diagnostics.

Usage::

    from licensekit.parser import parse
    from licensekit.expression import is_invalid, render

    expr = parse('LGPL-2.1-only WITH CPE AND MIT OR BSD-3-Clause')
    assert render(expr) == 'OR(AND(WITH(LGPL-2.1-only, CPE), MIT), BSD-3-Clause)'
    assert is_invalid(parse('MIT )(OR BSD-3-Clause'))
"""

from __future__ import annotations

from dataclasses import dataclass

from licensekit.expression import INVALID, Compound, Expression, Identifier, Operator
from licensekit.logging import get_logger
from licensekit.tokenizer import Token, TokenKind, tokenize

__all__ = [
    'DEFAULT_MAX_DEPTH',
    'MAX_DEPTH_LIMIT',
    'ExpressionSyntaxError',
    'ParserOptions',
    'parse',
    'parse_strict',
]

logger = get_logger(__name__)

DEFAULT_MAX_DEPTH = 64

# Each nesting level costs a handful of Python frames; stay well inside
# the interpreter's recursion limit.
MAX_DEPTH_LIMIT = 100

_Node = Identifier | Compound


@dataclass(frozen=True)
class ParserOptions:
    """Tunables for :func:`parse`.

    Attributes:
        max_depth: Maximum parenthesis nesting depth. Deeper input is
            rejected as invalid. Values above :data:`MAX_DEPTH_LIMIT`
            are capped.
        case_insensitive_operators: Accept ``or``, ``and``, ``with`` in
            any casing as operators.
    """

    max_depth: int = DEFAULT_MAX_DEPTH
    case_insensitive_operators: bool = False


_DEFAULT_OPTIONS = ParserOptions()


class ExpressionSyntaxError(ValueError):
    """Raised by :func:`parse_strict` for a malformed expression.

    Attributes:
        expression: The original expression string.
        index: Index of the token where the error was detected. Equal to
            the token count when the input ended too early.
        detail: Human-readable description of the problem.
    """

    def __init__(self, expression: str, index: int, detail: str) -> None:
        """Initialize with expression text, token index, and detail message."""
        self.expression = expression
        self.index = index
        self.detail = detail
        super().__init__(f'license expression syntax error at token {index}: {detail}: {expression!r}')


def _describe(token: Token) -> str:
    if token.kind is TokenKind.IDENTIFIER:
        return f'identifier {token.text!r}'
    return f'{token.kind.value!r}'


class _Parser:
    """Grammar over an immutable token list.

    Holds no cursor. Every production takes the current position and
    returns the parsed node together with the position after it.
    """

    def __init__(self, expression: str, tokens: list[Token], max_depth: int) -> None:
        self._expression = expression
        self._tokens = tokens
        self._max_depth = max_depth

    def _peek(self, pos: int) -> Token | None:
        return self._tokens[pos] if pos < len(self._tokens) else None

    def _at(self, pos: int, kind: TokenKind) -> bool:
        tok = self._peek(pos)
        return tok is not None and tok.kind is kind

    def _error(self, pos: int, detail: str) -> ExpressionSyntaxError:
        return ExpressionSyntaxError(self._expression, pos, detail)

    def parse(self) -> _Node:
        node, pos = self._or_expr(0, 0)
        tok = self._peek(pos)
        if tok is not None:
            if tok.kind is TokenKind.RPAREN:
                raise self._error(pos, 'unmatched ")"')
            raise self._error(pos, f'unexpected {_describe(tok)} after complete expression')
        return node

    # or_expr = and_expr ("OR" and_expr)*
    def _or_expr(self, pos: int, depth: int) -> tuple[_Node, int]:
        left, pos = self._and_expr(pos, depth)
        while self._at(pos, TokenKind.OR):
            right, pos = self._and_expr(pos + 1, depth)
            left = Compound(Operator.OR, left, right)
        return left, pos

    # and_expr = with_expr ("AND" with_expr)*
    def _and_expr(self, pos: int, depth: int) -> tuple[_Node, int]:
        left, pos = self._with_expr(pos, depth)
        while self._at(pos, TokenKind.AND):
            right, pos = self._with_expr(pos + 1, depth)
            left = Compound(Operator.AND, left, right)
        return left, pos

    # with_expr = primary ("WITH" primary)?
    def _with_expr(self, pos: int, depth: int) -> tuple[_Node, int]:
        node, pos = self._primary(pos, depth)
        if not self._at(pos, TokenKind.WITH):
            return node, pos
        exception, pos = self._primary(pos + 1, depth)
        if self._at(pos, TokenKind.WITH):
            raise self._error(pos, '"WITH" cannot be chained')
        return Compound(Operator.WITH, node, exception), pos

    # primary = identifier / "(" or_expr ")"
    def _primary(self, pos: int, depth: int) -> tuple[_Node, int]:
        tok = self._peek(pos)
        if tok is None:
            raise self._error(pos, 'unexpected end of expression, expected identifier or "("')
        if tok.kind is TokenKind.IDENTIFIER:
            return Identifier(tok.text), pos + 1
        if tok.kind is TokenKind.LPAREN:
            if depth >= self._max_depth:
                raise self._error(pos, f'parentheses nested deeper than {self._max_depth}')
            node, end = self._or_expr(pos + 1, depth + 1)
            closing = self._peek(end)
            if closing is None:
                raise self._error(pos, 'unclosed "("')
            if closing.kind is not TokenKind.RPAREN:
                raise self._error(end, f'expected ")", got {_describe(closing)}')
            return node, end + 1
        if tok.kind is TokenKind.RPAREN:
            raise self._error(pos, 'unmatched ")"')
        raise self._error(pos, f'unexpected operator {_describe(tok)}, expected identifier or "("')


def parse_strict(raw: str, options: ParserOptions | None = None) -> Identifier | Compound:
    """Parse a license expression, raising on syntax errors.

    Args:
        raw: The license expression string.
        options: Parser tunables. Defaults to :class:`ParserOptions()`.

    Returns:
        The root node of the parsed tree.

    Raises:
        ExpressionSyntaxError: If *raw* is not a well-formed expression.
    """
    opts = options or _DEFAULT_OPTIONS
    tokens = tokenize(raw, case_insensitive_operators=opts.case_insensitive_operators)
    return _Parser(raw, tokens, min(opts.max_depth, MAX_DEPTH_LIMIT)).parse()


def parse(raw: str, options: ParserOptions | None = None) -> Expression:
    """Parse a license expression.

    Never raises for any string input.

    Args:
        raw: The license expression string
            (e.g. ``"MIT OR (LGPL-2.1-only WITH CPE)"``).
        options: Parser tunables. Defaults to :class:`ParserOptions()`.

    Returns:
        The parsed tree, or :data:`~licensekit.expression.INVALID` if
        *raw* is malformed.

    Examples::

        >>> parse('MIT')
        Identifier(text='MIT')

        >>> parse('MIT OR Apache-2.0')
        Compound(operator=<Operator.OR: 'OR'>,
                 left=Identifier(text='MIT'),
                 right=Identifier(text='Apache-2.0'))

        >>> parse('MIT (OR BSD-3-Clause')
        Invalid()
    """
    try:
        return parse_strict(raw, options)
    except ExpressionSyntaxError as exc:
        logger.debug(
            'license_expression_invalid',
            expression=raw,
            token=exc.index,
            detail=exc.detail,
        )
        return INVALID
