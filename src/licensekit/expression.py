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

r"""License expression AST and canonical renderer.

A parsed expression is one of three immutable variants:

- :class:`Identifier` — a license or exception name, kept verbatim.
- :class:`Compound` — a binary ``OR`` / ``AND`` / ``WITH`` node.
- :class:`Invalid` — the childless result of a failed parse.

``Invalid`` never appears inside a tree. Callers branch on it with
:func:`is_invalid` (or ``isinstance``) before touching the tree.

The canonical rendering is a prefix form used for logging, display and
structural comparison::

    >>> render(Compound(Operator.OR, Identifier('MIT'), Identifier('Apache-2.0')))
    'OR(MIT, Apache-2.0)'

It is **not** valid input to the parser.

Operator chains fold left, so a tree can be as deep as the number of
operands in the input. Every traversal in this module therefore uses an
explicit stack instead of recursion.
"""

from __future__ import annotations

import enum
from collections.abc import Iterator
from dataclasses import dataclass

__all__ = [
    'INVALID',
    'INVALID_TEXT',
    'Compound',
    'Expression',
    'Identifier',
    'Invalid',
    'Operator',
    'identifiers',
    'is_invalid',
    'license_ids',
    'render',
]

# Starts with "(", which no identifier and no compound rendering can.
INVALID_TEXT = '(INVALID)'


class Operator(enum.Enum):
    """Binary operators, loosest-binding first."""

    OR = 'OR'
    AND = 'AND'
    WITH = 'WITH'


@dataclass(frozen=True)
class Identifier:
    """A license or exception identifier exactly as written in the input.

    Attributes:
        text: The raw identifier (e.g. ``"GPL-2.0-or-later"``).
    """

    text: str

    def __str__(self) -> str:
        """Return the identifier text."""
        return self.text


@dataclass(frozen=True, eq=False, repr=False)
class Compound:
    """A binary operator node.

    For ``WITH`` the right operand is the exception. It may be any
    expression, since parentheses can put a whole sub-expression there.

    Attributes:
        operator: The connective.
        left: Left operand.
        right: Right operand.
    """

    operator: Operator
    left: Identifier | Compound
    right: Identifier | Compound

    def __str__(self) -> str:
        """Return the canonical ``OP(left, right)`` rendering."""
        return render(self)

    # Operator chains make trees as deep as their operand count, so the
    # dataclass-generated (recursive) comparison, hash and repr are
    # replaced with stack-based versions.

    def __eq__(self, other: object) -> bool:
        """Compare two trees structurally."""
        if not isinstance(other, Compound):
            return NotImplemented
        stack: list[tuple[Identifier | Compound, Identifier | Compound]] = [(self, other)]
        while stack:
            a, b = stack.pop()
            if a is b:
                continue
            if isinstance(a, Compound) and isinstance(b, Compound):
                if a.operator is not b.operator:
                    return False
                stack.append((a.right, b.right))
                stack.append((a.left, b.left))
            elif not (isinstance(a, Identifier) and isinstance(b, Identifier) and a.text == b.text):
                return False
        return True

    def __hash__(self) -> int:
        """Hash the canonical rendering."""
        return hash((Compound, render(self)))

    def __repr__(self) -> str:
        """Return a constructor-style representation."""
        parts: list[str] = []
        stack: list[Identifier | Compound | str] = [self]
        while stack:
            item = stack.pop()
            if isinstance(item, str):
                parts.append(item)
            elif isinstance(item, Identifier):
                parts.append(repr(item))
            else:
                parts.append(f'Compound(operator={item.operator!r}, left=')
                stack.extend((')', item.right, ', right=', item.left))
        return ''.join(parts)


@dataclass(frozen=True)
class Invalid:
    """Result of parsing a malformed expression."""

    def __str__(self) -> str:
        """Return the invalid sentinel text."""
        return INVALID_TEXT


INVALID = Invalid()

# Union of all parse results.
Expression = Identifier | Compound | Invalid


def is_invalid(expr: Expression) -> bool:
    """Return ``True`` if *expr* is the result of a failed parse."""
    return isinstance(expr, Invalid)


def render(expr: Expression) -> str:
    """Render *expr* in canonical prefix form.

    Args:
        expr: Any parse result.

    Returns:
        ``text`` for an identifier, ``OP(left, right)`` for a compound
        node and :data:`INVALID_TEXT` for :class:`Invalid`.

    Examples::

        >>> render(parse('MIT OR BSD-3-Clause AND Apache-2.0'))
        'OR(MIT, AND(BSD-3-Clause, Apache-2.0))'
        >>> render(parse('MIT ('))
        '(INVALID)'
    """
    parts: list[str] = []
    # Pending work: either a node to expand or literal text to emit.
    stack: list[Expression | str] = [expr]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            parts.append(item)
        elif isinstance(item, Identifier):
            parts.append(item.text)
        elif isinstance(item, Compound):
            parts.append(f'{item.operator.value}(')
            stack.extend((')', item.right, ', ', item.left))
        else:
            parts.append(INVALID_TEXT)
    return ''.join(parts)


def _leaves(expr: Expression, *, skip_exceptions: bool) -> Iterator[Identifier]:
    """Yield leaf identifiers left to right."""
    if isinstance(expr, Invalid):
        return
    stack: list[Identifier | Compound] = [expr]
    while stack:
        node = stack.pop()
        if isinstance(node, Identifier):
            yield node
            continue
        if not (skip_exceptions and node.operator is Operator.WITH):
            stack.append(node.right)
        stack.append(node.left)


def identifiers(expr: Expression) -> list[str]:
    """Return every identifier in *expr*, in order of appearance.

    Exceptions named after ``WITH`` are included. Duplicates are kept.
    """
    return [leaf.text for leaf in _leaves(expr, skip_exceptions=False)]


def license_ids(expr: Expression) -> set[str]:
    """Collect the license identifiers referenced by *expr*.

    The right operand of ``WITH`` names an exception, not a license, and
    is skipped. An invalid expression has no license ids.

    Examples::

        >>> license_ids(parse('MIT OR GPL-2.0 WITH Classpath-exception-2.0'))
        {'MIT', 'GPL-2.0'}
    """
    return {leaf.text for leaf in _leaves(expr, skip_exceptions=True)}
