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

"""License expression parsing.

Turns strings such as ``"MIT OR (LGPL-2.1-only WITH CPE)"`` into an
immutable tree, or :data:`INVALID` when the string is malformed.

Usage::

    from licensekit import is_invalid, license_ids, parse, render

    expr = parse('LGPL-2.1-only OR BSD-3-Clause AND MIT')
    assert render(expr) == 'OR(LGPL-2.1-only, AND(BSD-3-Clause, MIT))'
    assert license_ids(expr) == {'LGPL-2.1-only', 'BSD-3-Clause', 'MIT'}

    assert is_invalid(parse('MIT (OR BSD-3-Clause'))
"""

from licensekit.expression import (
    INVALID,
    INVALID_TEXT,
    Compound,
    Expression,
    Identifier,
    Invalid,
    Operator,
    identifiers,
    is_invalid,
    license_ids,
    render,
)
from licensekit.parser import ExpressionSyntaxError, ParserOptions, parse, parse_strict
from licensekit.tokenizer import Token, TokenKind, tokenize

__all__ = [
    'INVALID',
    'INVALID_TEXT',
    'Compound',
    'Expression',
    'ExpressionSyntaxError',
    'Identifier',
    'Invalid',
    'Operator',
    'ParserOptions',
    'Token',
    'TokenKind',
    'identifiers',
    'is_invalid',
    'license_ids',
    'parse',
    'parse_strict',
    'render',
    'tokenize',
]
