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

"""Configuration loading for licensekit.

Settings live in a ``[parser]`` table of ``licensekit.toml``, or in
``[tool.licensekit.parser]`` of a ``pyproject.toml``::

    [parser]
    max_depth = 32
    case_insensitive_operators = false

Every key is optional. Environment variables and CLI flags are layered on
top by :func:`resolve_parser_options`.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any

import tomlkit
import tomlkit.exceptions

from licensekit.parser import MAX_DEPTH_LIMIT, ParserOptions

__all__ = [
    'CONFIG_FILENAME',
    'ConfigError',
    'LicenseKitConfig',
    'find_config',
    'load_config',
    'resolve_parser_options',
]

CONFIG_FILENAME = 'licensekit.toml'

_ENV_MAX_DEPTH = 'LICENSEKIT_MAX_DEPTH'
_ENV_CASE_INSENSITIVE = 'LICENSEKIT_CASE_INSENSITIVE_OPERATORS'

_PARSER_KEYS = frozenset({'max_depth', 'case_insensitive_operators'})
_TOP_LEVEL_KEYS = frozenset({'parser'})


class ConfigError(Exception):
    """Raised when configuration fails validation.

    Attributes:
        errors: List of human-readable error strings.
    """

    def __init__(self, errors: list[str]) -> None:
        self.errors = errors
        bullet_list = '\n'.join(f'  - {e}' for e in errors)
        super().__init__(f'licensekit configuration has {len(errors)} error(s):\n{bullet_list}')


@dataclass(frozen=True)
class LicenseKitConfig:
    """Top-level licensekit configuration.

    Attributes:
        parser: Options passed to the expression parser.
        path: The file the configuration was read from, if any.
    """

    parser: ParserOptions = field(default_factory=ParserOptions)
    path: Path | None = None


def _check_max_depth(value: object, where: str, errors: list[str]) -> int | None:
    # bool is an int subclass; reject it explicitly.
    if isinstance(value, bool) or not isinstance(value, int):
        errors.append(f'{where}: max_depth must be an integer, got {value!r}')
        return None
    if not 1 <= value <= MAX_DEPTH_LIMIT:
        errors.append(f'{where}: max_depth must be between 1 and {MAX_DEPTH_LIMIT}, got {value}')
        return None
    return value


def _parser_options(table: dict[str, Any], where: str) -> ParserOptions:
    """Validate a ``[parser]`` table and build :class:`ParserOptions`."""
    errors: list[str] = []
    for key in sorted(set(table) - _PARSER_KEYS):
        errors.append(f'{where}: unknown key {key!r}')

    options = ParserOptions()
    if 'max_depth' in table:
        max_depth = _check_max_depth(table['max_depth'], where, errors)
        if max_depth is not None:
            options = replace(options, max_depth=max_depth)
    if 'case_insensitive_operators' in table:
        value = table['case_insensitive_operators']
        if isinstance(value, bool):
            options = replace(options, case_insensitive_operators=value)
        else:
            errors.append(f'{where}: case_insensitive_operators must be a boolean, got {value!r}')

    if errors:
        raise ConfigError(errors)
    return options


def load_config(path: Path) -> LicenseKitConfig:
    """Read configuration from *path*.

    ``pyproject.toml`` files are read from ``[tool.licensekit]``; a file
    without that table yields the defaults. Any other file is read from
    the top level.

    Args:
        path: Path to ``licensekit.toml`` or ``pyproject.toml``.

    Returns:
        The validated :class:`LicenseKitConfig`.

    Raises:
        ConfigError: If the file cannot be read or fails validation.
    """
    try:
        text = path.read_text(encoding='utf-8')
    except OSError as exc:
        raise ConfigError([f'{path}: cannot read file: {exc}']) from exc
    try:
        data: dict[str, Any] = tomlkit.parse(text).unwrap()
    except tomlkit.exceptions.ParseError as exc:
        raise ConfigError([f'{path}: invalid TOML: {exc}']) from exc

    where = str(path)
    if path.name == 'pyproject.toml':
        data = data.get('tool', {}).get('licensekit', {})
        where = f'{path} [tool.licensekit]'

    unknown = sorted(set(data) - _TOP_LEVEL_KEYS)
    if unknown:
        raise ConfigError([f'{where}: unknown key {key!r}' for key in unknown])

    table = data.get('parser', {})
    if not isinstance(table, dict):
        raise ConfigError([f'{where}: "parser" must be a table'])
    return LicenseKitConfig(parser=_parser_options(table, f'{where} [parser]'), path=path)


def find_config(start: Path) -> Path | None:
    """Find the nearest ``licensekit.toml`` at or above *start*.

    Returns:
        The path of the first file found, or ``None``.
    """
    start = start.resolve()
    for directory in (start, *start.parents):
        candidate = directory / CONFIG_FILENAME
        if candidate.is_file():
            return candidate
    return None


def resolve_parser_options(
    base: ParserOptions,
    *,
    max_depth: int | None = None,
    case_insensitive_operators: bool | None = None,
) -> ParserOptions:
    """Merge CLI flags and env vars into the final parser options.

    Priority order (highest wins):
    1. ``--max-depth`` / ``--case-insensitive-operators`` CLI flags
    2. ``LICENSEKIT_MAX_DEPTH`` / ``LICENSEKIT_CASE_INSENSITIVE_OPERATORS``
       env vars
    3. ``licensekit.toml`` ``[parser]`` section (the ``base`` param)

    Args:
        base: Options from the configuration file.
        max_depth: Value of the ``--max-depth`` CLI flag.
        case_insensitive_operators: ``True`` if the CLI flag was passed.

    Returns:
        Resolved :class:`ParserOptions`.

    Raises:
        ConfigError: If an env var or CLI value is out of range.
    """
    errors: list[str] = []
    depth = base.max_depth
    case_insensitive = base.case_insensitive_operators

    env_depth = os.environ.get(_ENV_MAX_DEPTH, '').strip()
    if env_depth:
        try:
            parsed = _check_max_depth(int(env_depth), _ENV_MAX_DEPTH, errors)
        except ValueError:
            errors.append(f'{_ENV_MAX_DEPTH}: max_depth must be an integer, got {env_depth!r}')
        else:
            if parsed is not None:
                depth = parsed

    env_case = os.environ.get(_ENV_CASE_INSENSITIVE, '').strip().lower()
    if env_case in ('1', 'true', 'yes'):
        case_insensitive = True
    elif env_case in ('0', 'false', 'no'):
        case_insensitive = False

    if max_depth is not None:
        parsed = _check_max_depth(max_depth, '--max-depth', errors)
        if parsed is not None:
            depth = parsed
    if case_insensitive_operators is not None:
        case_insensitive = case_insensitive_operators

    if errors:
        raise ConfigError(errors)
    return replace(base, max_depth=depth, case_insensitive_operators=case_insensitive)
