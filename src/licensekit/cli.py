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

"""Command-line interface for licensekit.

Subcommands::

    licensekit parse 'MIT OR Apache-2.0' 'GPL-2.0 WITH (Classpath'
    licensekit parse --tree '(MIT)AND(LGPL-2.1-or-later WITH(CC0 OR GPL-2))'
    licensekit parse --json 'MIT AND BSD-3-Clause'
    licensekit ids 'MIT OR GPL-2.0-only WITH Classpath-exception-2.0'

Exit codes:
    0  Every expression parsed.
    1  At least one expression was invalid.
    2  Configuration error.
"""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path

from rich.console import Console
from rich.text import Text
from rich.tree import Tree

from licensekit.config import ConfigError, LicenseKitConfig, find_config, load_config, resolve_parser_options
from licensekit.expression import INVALID_TEXT, Compound, Expression, Identifier, is_invalid, license_ids, render
from licensekit.logging import configure_logging, get_logger
from licensekit.parser import ParserOptions, parse

logger = get_logger(__name__)

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_CONFIG = 2


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='licensekit',
        description='Parse license expressions into canonical form.',
    )
    parser.add_argument('--config', type=Path, help='Path to licensekit.toml or pyproject.toml.')
    parser.add_argument('--max-depth', type=int, help='Maximum parenthesis nesting depth.')
    parser.add_argument(
        '--case-insensitive-operators',
        action='store_true',
        default=None,
        help='Accept or/and/with in any casing.',
    )
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable debug logging.')
    parser.add_argument('-q', '--quiet', action='store_true', help='Only log warnings and errors.')
    parser.add_argument('--json-log', action='store_true', help='Emit logs as JSON lines.')

    sub = parser.add_subparsers(dest='command', required=True)

    parse_cmd = sub.add_parser('parse', help='Parse and render expressions.')
    parse_cmd.add_argument('expressions', nargs='+', metavar='EXPR')
    output = parse_cmd.add_mutually_exclusive_group()
    output.add_argument('--tree', action='store_true', help='Draw each expression as a tree.')
    output.add_argument('--json', action='store_true', help='Print results as JSON.')

    ids_cmd = sub.add_parser('ids', help='List the license ids of an expression.')
    ids_cmd.add_argument('expression', metavar='EXPR')
    return parser


def _load(args: argparse.Namespace) -> ParserOptions:
    path = args.config or find_config(Path.cwd())
    config = load_config(path) if path is not None else LicenseKitConfig()
    if config.path is not None:
        logger.debug('config_loaded', path=str(config.path))
    return resolve_parser_options(
        config.parser,
        max_depth=args.max_depth,
        case_insensitive_operators=args.case_insensitive_operators,
    )


def _print(console: Console, text: Text) -> None:
    # Identifier text must come out verbatim: no emoji codes, no highlighting.
    console.print(text, soft_wrap=True, emoji=False, highlight=False)


def build_tree(expr: Expression) -> Tree:
    """Build a Rich :class:`Tree` for *expr*."""
    if is_invalid(expr):
        return Tree(Text(INVALID_TEXT, style='bold red'))
    root: Tree | None = None
    stack: list[tuple[Identifier | Compound, Tree | None]] = [(expr, None)]  # type: ignore[list-item]
    while stack:
        node, parent = stack.pop()
        if isinstance(node, Compound):
            label = Text(node.operator.value, style='bold cyan')
        else:
            label = Text(node.text)
        branch = Tree(label) if parent is None else parent.add(label)
        if root is None:
            root = branch
        if isinstance(node, Compound):
            stack.append((node.right, branch))
            stack.append((node.left, branch))
    return root  # type: ignore[return-value]


def _cmd_parse(args: argparse.Namespace, options: ParserOptions, console: Console) -> int:
    results = [(raw, parse(raw, options)) for raw in args.expressions]

    if args.json:
        console.print_json(
            data=[
                {
                    'expression': raw,
                    'valid': not is_invalid(expr),
                    'rendered': render(expr),
                    'license_ids': sorted(license_ids(expr)),
                }
                for raw, expr in results
            ],
        )
    elif args.tree:
        for _raw, expr in results:
            console.print(build_tree(expr))
    else:
        for _raw, expr in results:
            style = 'red' if is_invalid(expr) else 'green'
            _print(console, Text(render(expr), style=style))

    invalid = sum(1 for _raw, expr in results if is_invalid(expr))
    logger.info('expressions_parsed', total=len(results), invalid=invalid)
    return EXIT_INVALID if invalid else EXIT_OK


def _cmd_ids(args: argparse.Namespace, options: ParserOptions, console: Console) -> int:
    expr = parse(args.expression, options)
    if is_invalid(expr):
        _print(console, Text.assemble(('error', 'bold red'), ': invalid license expression: ', args.expression))
        return EXIT_INVALID
    for license_id in sorted(license_ids(expr)):
        _print(console, Text(license_id))
    return EXIT_OK


def main(argv: Sequence[str] | None = None, *, console: Console | None = None) -> int:
    """Run the licensekit CLI and return the exit code."""
    args = _build_parser().parse_args(argv)
    configure_logging(verbose=args.verbose, quiet=args.quiet, json_log=args.json_log)
    if console is None:
        console = Console()

    try:
        options = _load(args)
    except ConfigError as exc:
        _print(console, Text.assemble(('error', 'bold red'), ': ', str(exc)))
        return EXIT_CONFIG

    if args.command == 'parse':
        return _cmd_parse(args, options, console)
    return _cmd_ids(args, options, console)


if __name__ == '__main__':
    sys.exit(main())
