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

"""Exceptions raised by citf."""

from __future__ import annotations

from typing import Any


class CitfError(Exception):
    """Base exception for all citf errors."""

    def __init__(self, message: str, details: str | None = None):
        """Initialize the exception.

        Args:
            message: Main error message.
            details: Additional details or suggestions.
        """
        self.message = message
        self.details = details
        super().__init__(self.format_message())

    def format_message(self) -> str:
        """Format the complete error message.

        Returns:
            Formatted error message with details.
        """
        if self.details:
            return f"{self.message}\n\nDetails: {self.details}"
        return self.message


class CommandError(CitfError):
    """An external command could not be spawned or exited non-zero."""

    def __init__(
        self,
        command: str,
        exit_code: int | None = None,
        stdout: str = "",
        stderr: str = "",
    ):
        self.command = command
        self.exit_code = exit_code
        self.stdout = stdout
        self.stderr = stderr
        if exit_code is None:
            message = f"Running {command!r} failed: command could not be started"
        else:
            message = f"Running {command!r} failed with exit code {exit_code}"
        super().__init__(message, (stderr or stdout).strip() or None)


class ExecError(CitfError):
    """Exec into a pod through the API returned a failure."""


class ProbeError(CitfError):
    """A status probe could not be completed."""


class WaitTimeoutError(CitfError):
    """A bounded wait ran out before its condition held.

    The last value observed by the poll is kept on ``last_value`` so callers
    can inspect what the resource looked like when the wait gave up.
    """

    def __init__(
        self,
        resource: str,
        elapsed: float,
        allowed: str,
        last_value: Any = None,
        last_error: BaseException | None = None,
        message: str | None = None,
    ):
        self.resource = resource
        self.elapsed = elapsed
        self.allowed = allowed
        self.last_value = last_value
        self.last_error = last_error
        if message is None:
            message = f"Timed out waiting for {resource} after {elapsed:.1f}s (allowed {allowed})"
        super().__init__(message, str(last_error) if last_error is not None else None)


class WaitCancelledError(CitfError):
    """A wait was aborted through its cancel event."""

    def __init__(self, resource: str, elapsed: float):
        self.resource = resource
        self.elapsed = elapsed
        super().__init__(f"Wait for {resource} cancelled after {elapsed:.1f}s")


class UnknownStateError(CitfError):
    """The cluster reports a state with no known corrective action."""

    def __init__(self, state: str):
        self.state = state
        super().__init__(
            f"minikube is in unknown state {state!r}. Aborting...",
            "Inspect the cluster with 'minikube status' and clean it up manually.",
        )


class UnsupportedPlatformError(CitfError):
    """The configured platform has no environment driver."""


class ConfigurationError(CitfError):
    """A configuration file could not be read or parsed."""
