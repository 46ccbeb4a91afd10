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

"""Tests for licensekit.logging module."""

from __future__ import annotations

import logging
import os
import subprocess
import sys
from unittest.mock import patch

import licensekit.logging as lk_logging
from licensekit.logging import (
    MAX_VALUE_LENGTH,
    _truncate,
    configure_logging,
    get_logger,
    truncate_long_values,
)


class TestConfigureLogging:
    """Tests for configure_logging()."""

    def test_default_level_is_info(self) -> None:
        """Default logging level should be INFO."""
        configure_logging()
        assert logging.root.level == logging.INFO

    def test_verbose_sets_debug(self) -> None:
        """Verbose flag should set DEBUG level."""
        configure_logging(verbose=True)
        assert logging.root.level == logging.DEBUG

    def test_quiet_sets_warning(self) -> None:
        """Quiet flag should set WARNING level."""
        configure_logging(quiet=True)
        assert logging.root.level == logging.WARNING

    def test_quiet_wins_over_verbose(self) -> None:
        """Quiet should take precedence when both flags are set."""
        configure_logging(verbose=True, quiet=True)
        assert logging.root.level == logging.WARNING

    def test_json_log_does_not_crash(self) -> None:
        """JSON log mode should configure without errors."""
        configure_logging(json_log=True)
        log = get_logger()
        log.info('test_json', key='value')

    def test_logger_can_log(self) -> None:
        """Logger should be able to emit messages without crashing."""
        configure_logging(quiet=True)
        log = get_logger('test')
        log.info('test message', expression='MIT OR ' * 100)
        log.debug('debug message')
        log.warning('warning message')


class TestTruncateLongValues:
    """Tests for the structlog truncation processor."""

    def test_long_value_truncated(self) -> None:
        """String fields over the limit are shortened."""
        old = lk_logging._truncation_enabled
        try:
            lk_logging._truncation_enabled = True
            value = 'x' * (MAX_VALUE_LENGTH + 50)
            result = truncate_long_values(None, 'debug', {'event': 'e', 'expression': value})
            assert result['expression'] == 'x' * MAX_VALUE_LENGTH + '...[+50 chars]'
        finally:
            lk_logging._truncation_enabled = old

    def test_short_value_untouched(self) -> None:
        """String fields at or under the limit are kept."""
        old = lk_logging._truncation_enabled
        try:
            lk_logging._truncation_enabled = True
            value = 'y' * MAX_VALUE_LENGTH
            result = truncate_long_values(None, 'debug', {'event': 'e', 'expression': value})
            assert result['expression'] == value
        finally:
            lk_logging._truncation_enabled = old

    def test_event_name_untouched(self) -> None:
        """The event name is never truncated."""
        old = lk_logging._truncation_enabled
        try:
            lk_logging._truncation_enabled = True
            event = 'z' * (MAX_VALUE_LENGTH + 1)
            result = truncate_long_values(None, 'info', {'event': event})
            assert result['event'] == event
        finally:
            lk_logging._truncation_enabled = old

    def test_noop_when_disabled(self) -> None:
        """Processor returns the same dict when truncation is off."""
        old = lk_logging._truncation_enabled
        try:
            lk_logging._truncation_enabled = False
            event = {'event': 'e', 'expression': 'x' * (MAX_VALUE_LENGTH * 2)}
            assert truncate_long_values(None, 'info', event) is event
        finally:
            lk_logging._truncation_enabled = old

    def test_truncate_returns_non_strings_unchanged(self) -> None:
        """_truncate passes through non-string types."""
        assert _truncate(42) == 42
        assert _truncate(None) is None
        assert _truncate(['x' * 1000]) == ['x' * 1000]


class TestTruncationConfig:
    """Tests for truncation configurability."""

    def test_enabled_by_default(self) -> None:
        """Truncation is on unless disabled."""
        with patch.dict('os.environ', {}, clear=True):
            configure_logging(quiet=True)
            assert lk_logging._truncation_enabled is True

    def test_param_disables(self) -> None:
        """truncate_values=False turns truncation off."""
        with patch.dict('os.environ', {}, clear=True):
            configure_logging(quiet=True, truncate_values=False)
            assert lk_logging._truncation_enabled is False

    def test_env_var_disables(self) -> None:
        """LICENSEKIT_TRUNCATE_LOG_VALUES=0 disables even if param is True."""
        with patch.dict('os.environ', {'LICENSEKIT_TRUNCATE_LOG_VALUES': '0'}, clear=True):
            configure_logging(quiet=True, truncate_values=True)
            assert lk_logging._truncation_enabled is False
        configure_logging(quiet=True)


class TestUnconfiguredLibraryUse:
    """Library callers that never configure logging get no output."""

    def test_invalid_parse_is_silent(self) -> None:
        """A rejected expression writes nothing to stdout or stderr."""
        env = {k: v for k, v in os.environ.items() if not k.startswith('LICENSEKIT_')}
        code = (
            'from licensekit import is_invalid, parse\n'
            "assert is_invalid(parse('MIT ('))\n"
            "assert is_invalid(parse('MIT (OR BSD-3-Clause'))\n"
        )
        result = subprocess.run(
            [sys.executable, '-c', code],
            capture_output=True,
            text=True,
            env=env,
            check=False,
        )
        assert result.returncode == 0, result.stderr
        assert result.stdout == ''
        assert result.stderr == ''

    def test_logger_wraps_stdlib_logger(self) -> None:
        """Events are routed through the stdlib logger of the same name."""
        log = get_logger('licensekit.test')
        assert log.bind()._logger is logging.getLogger('licensekit.test')
