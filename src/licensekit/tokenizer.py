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

"""Tokenizer for license expressions.

Parentheses are always single-character tokens. Everything else is split
on whitespace into maximal runs; a run that is exactly ``OR``, ``AND`` or
``WITH`` is an operator and any other run is an identifier kept verbatim.
``"(MIT)AND(LGPL)"`` and ``"( MIT ) AND ( LGPL )"`` tokenize identically,
and ``FOO-OR-BAR`` stays a single identifier.

Tokenizing never fails. Any string reduces to some token sequence, which
the parser may then reject.
"""

from __future__ import annotations

import enum
import re
from dataclasses import dataclass

__all__ = [
    'Token',
    'TokenKind',
    'tokenize',
]


class TokenKind(enum.Enum):
    """Kinds of lexical tokens."""

    IDENTIFIER = 'IDENTIFIER'
    OR = 'OR'
    AND = 'AND'
    WITH = 'WITH'
    LPAREN = '('
    RPAREN = ')'


@dataclass(frozen=True)
class Token:
    """A single lexical token.

    Attributes:
        kind: The token kind.
        text: The identifier text. Empty for operators and parentheses.
    """

    kind: TokenKind
    text: str = ''


_KEYWORDS: dict[str, TokenKind] = {
    'OR': TokenKind.OR,
    'AND': TokenKind.AND,
    'WITH': TokenKind.WITH,
}

# A lone parenthesis, or a maximal run of anything but whitespace and parens.
_TOKEN_RE = re.compile(r'[()]|[^\s()]+')

_LPAREN = Token(TokenKind.LPAREN)
_RPAREN = Token(TokenKind.RPAREN)


def tokenize(raw: str, *, case_insensitive_operators: bool = False) -> list[Token]:
    """Split *raw* into tokens.

    Args:
        raw: The license expression string.
        case_insensitive_operators: Also treat ``or``, ``And``, ``with``
            and other casings as operators.

    Returns:
        The tokens in input order. Empty for empty or all-whitespace input.
    """
    tokens: list[Token] = []
    for run in _TOKEN_RE.findall(raw):
        if run == '(':
            tokens.append(_LPAREN)
        elif run == ')':
            tokens.append(_RPAREN)
        else:
            key = run.upper() if case_insensitive_operators else run
            kind = _KEYWORDS.get(key)
            tokens.append(Token(kind) if kind is not None else Token(TokenKind.IDENTIFIER, run))
    return tokens
