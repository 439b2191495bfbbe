# /*
# Copyright 2026 The CITF Authors.
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
# */


"""Logging helpers for test code driven by citf.

Test frameworks hand citf something that can report messages and failures
(a :class:`TestReporter`). :class:`TestLogger` routes messages to it when one
is set and to the ``citf`` logger and console otherwise.
"""

from __future__ import annotations

import logging
from typing import Any, Protocol

from citf import console, logger
from citf.exceptions import CitfError


class TestReporter(Protocol):
    """Anything that can report test messages and test failures."""

    def log(self, *args: Any) -> None: ...

    def logf(self, fmt: str, *args: Any) -> None: ...

    def error(self, *args: Any) -> None: ...

    def errorf(self, fmt: str, *args: Any) -> None: ...


class LoggingReporter:
    """Reports through a standard library logger."""

    def __init__(self, log: logging.Logger | None = None) -> None:
        self._log = log if log is not None else logger

    def log(self, *args: Any) -> None:
        self._log.info(" ".join(str(a) for a in args))

    def logf(self, fmt: str, *args: Any) -> None:
        self._log.info(fmt, *args)

    def error(self, *args: Any) -> None:
        self._log.error(" ".join(str(a) for a in args))

    def errorf(self, fmt: str, *args: Any) -> None:
        self._log.error(fmt, *args)


class ConsoleReporter:
    """Reports on the shared rich console."""

    def log(self, *args: Any) -> None:
        console.print(*args)

    def logf(self, fmt: str, *args: Any) -> None:
        console.print(fmt % args if args else fmt)

    def error(self, *args: Any) -> None:
        console.print(f"[red]\u274c {' '.join(str(a) for a in args)}[/red]")

    def errorf(self, fmt: str, *args: Any) -> None:
        console.print(f"[red]\u274c {fmt % args if args else fmt}[/red]")


def error_message(err: BaseException, message: str) -> str:
    """Uniform ``message: error`` text used by every error helper."""
    return f"{message.strip()}: {err}"


class TestLogger:
    """Routes test messages to a reporter, or to logging when there is none.

    Args:
        reporter: Test reporter, or None.
        verbose: Emit debug messages.
    """

    def __init__(self, reporter: TestReporter | None = None, verbose: bool = False) -> None:
        self.reporter = reporter
        self.verbose = verbose

    def log(self, *args: Any) -> None:
        if self.reporter is not None:
            self.reporter.log(*args)
        elif self.verbose:
            console.print(*args)

    def logf(self, fmt: str, *args: Any) -> None:
        if self.reporter is not None:
            self.reporter.logf(fmt, *args)
        elif self.verbose:
            console.print(fmt % args if args else fmt)

    def debug(self, fmt: str, *args: Any) -> None:
        if self.verbose:
            self.logf(fmt, *args)

    def log_error(self, err: BaseException | None, message: str) -> None:
        """Log *err* with *message* if there is an error."""
        if err is not None:
            logger.error("%s", error_message(err, message))

    def log_non_error(self, err: BaseException | None, message: str) -> None:
        """Log *message* if there is no error."""
        if err is None:
            logger.info("%s", message)

    def log_fatal(self, err: BaseException | None, message: str) -> None:
        """Log and raise if there is an error.

        Raises:
            CitfError: Wrapping *err*.
        """
        if err is None:
            return
        text = error_message(err, message)
        logger.critical("%s", text)
        raise CitfError(text) from err

    def log_test_error(self, err: BaseException | None, message: str) -> None:
        """Report a test failure if there is an error.

        Without a reporter there is nothing to fail, so the error is fatal.

        Raises:
            CitfError: If there is an error and no reporter.
        """
        if err is None:
            return
        if self.reporter is None:
            self.log_fatal(err, message)
            return
        self.reporter.error(error_message(err, message))

    def log_test_non_error(self, err: BaseException | None, *args: Any) -> None:
        if err is None:
            self.log(*args)
