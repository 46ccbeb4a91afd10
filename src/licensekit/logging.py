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

"""Structured logging for licensekit.

Configures `structlog <https://www.structlog.org/>`_ with two output modes:

- **Console** (default when TTY): Rich-colored, human-readable output.
- **JSON** (``--json-log``): Machine-readable, one JSON object per line.

Both modes write to stderr so stdout remains clean for piped output
(e.g., ``licensekit parse --json 'MIT OR Apache-2.0' | jq``).

Expressions usually come from uploaded SBOM documents and may be
arbitrarily long. String fields are truncated before rendering unless
truncation is disabled.

Usage::

    from licensekit.logging import configure_logging, get_logger

    configure_logging(verbose=True, json_log=False)
    log = get_logger()
    log.debug('license_expression_invalid', detail='unmatched ")"')
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog

# String fields longer than this are truncated.
MAX_VALUE_LENGTH = 200

_TRUNCATION_ENV_VAR = 'LICENSEKIT_TRUNCATE_LOG_VALUES'

# Set by configure_logging(); read by the processor.
_truncation_enabled: bool = True


def configure_logging(
    *,
    verbose: bool = False,
    quiet: bool = False,
    json_log: bool = False,
    truncate_values: bool = True,
) -> None:
    """Configure structlog for licensekit.

    Should be called once at startup, before any logging calls.

    Args:
        verbose: Enable debug-level output.
        quiet: Suppress info-level output (only warnings and errors).
        json_log: Use JSON output instead of colored console output.
        truncate_values: Shorten long string fields in log events.
            Defaults to ``True``. Can also be disabled via the
            ``LICENSEKIT_TRUNCATE_LOG_VALUES=0`` env var.
    """
    if quiet:
        level = logging.WARNING
    elif verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    # Configure the standard library root logger so structlog can
    # forward events to it.
    logging.basicConfig(
        format='%(message)s',
        stream=sys.stderr,
        level=level,
        force=True,
    )

    global _truncation_enabled  # noqa: PLW0603
    _truncation_enabled = truncate_values and os.environ.get(_TRUNCATION_ENV_VAR, '1') != '0'

    shared_processors: list[structlog.types.Processor] = [  # type: ignore[assignment]
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt='iso'),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
        truncate_long_values,
    ]

    if json_log:
        renderer: structlog.types.Processor = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(
            colors=sys.stderr.isatty(),
        )

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            renderer,
        ],
    )
    for handler in logging.root.handlers:
        handler.setFormatter(formatter)


def get_logger(name: str = 'licensekit') -> structlog.stdlib.BoundLogger:
    """Return a bound structlog logger.

    Events always go to the stdlib logger *name*. Until
    :func:`configure_logging` runs, stdlib defaults apply, so library
    callers see nothing below WARNING and nothing on stdout.

    Args:
        name: Logger name, used for filtering and identification.

    Returns:
        A :class:`structlog.stdlib.BoundLogger` instance.
    """
    return structlog.wrap_logger(logging.getLogger(name))


def _truncate(value: object) -> object:
    """Shorten a string value to :data:`MAX_VALUE_LENGTH` characters."""
    if not isinstance(value, str) or len(value) <= MAX_VALUE_LENGTH:
        return value
    dropped = len(value) - MAX_VALUE_LENGTH
    return f'{value[:MAX_VALUE_LENGTH]}...[+{dropped} chars]'


def truncate_long_values(
    logger: Any,  # noqa: ANN401
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Structlog processor: truncate long string fields.

    The ``event`` name itself is left untouched.
    """
    if not _truncation_enabled:
        return event_dict
    return {k: v if k == 'event' else _truncate(v) for k, v in event_dict.items()}


__all__ = [
    'MAX_VALUE_LENGTH',
    'configure_logging',
    'get_logger',
    'truncate_long_values',
]
