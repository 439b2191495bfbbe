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

"""Bounded, cancellable polling.

Every "wait for X to become Y" in citf goes through :class:`Waiter`. A wait
polls, checks the result, and sleeps a fixed interval until the result is
accepted or the :class:`RetryPolicy` bound is reached. Errors raised by the
poll are treated as transient: they are logged and the loop carries on. Only
if every single attempt failed is the last poll error re-raised; otherwise a
:class:`~citf.exceptions.WaitTimeoutError` carrying the last observed value is
raised.
"""

from __future__ import annotations

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from tenacity import RetryCallState, RetryError, Retrying, retry_if_exception, retry_if_result, wait_fixed

from citf import logger
from citf.exceptions import WaitCancelledError, WaitTimeoutError

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """Bounds for a wait.

    Attributes:
        timeout: Seconds after which no new poll is started, or None.
        interval: Seconds to sleep between polls. Must be positive.
        max_attempts: Maximum number of polls, or None.

    At least one of ``timeout`` and ``max_attempts`` must be set.
    """

    timeout: float | None = None
    interval: float = 1.0
    max_attempts: int | None = None

    def __post_init__(self) -> None:
        if not self.interval > 0:
            raise ValueError(f"interval must be positive, got {self.interval!r}")
        if self.timeout is None and self.max_attempts is None:
            raise ValueError("either timeout or max_attempts must bound the wait")
        if self.timeout is not None and self.timeout < 0:
            raise ValueError(f"timeout must not be negative, got {self.timeout!r}")
        if self.max_attempts is not None and self.max_attempts < 1:
            raise ValueError(f"max_attempts must be at least 1, got {self.max_attempts!r}")

    def describe(self) -> str:
        """Human readable bound, e.g. ``60s`` or ``10 attempts every 2s``."""
        parts = []
        if self.timeout is not None:
            parts.append(f"{self.timeout:g}s")
        if self.max_attempts is not None:
            parts.append(f"{self.max_attempts} attempts every {self.interval:g}s")
        return " or ".join(parts)


class _Observation:
    """What the poll returned or raised most recently."""

    def __init__(self) -> None:
        self.value: Any = None
        self.error: BaseException | None = None
        self.polled = False


def _is_transient(err: BaseException) -> bool:
    return isinstance(err, Exception) and not isinstance(err, WaitCancelledError)


class Waiter:
    """Runs bounded polling loops.

    Args:
        clock: Monotonic clock used to measure elapsed time.
        sleep: Sleep function. When None, the waiter sleeps on the cancel
            event if there is one, so setting it wakes the wait up at once.
        cancel: Default cancel event for every wait run by this waiter.
    """

    def __init__(
        self,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], None] | None = None,
        cancel: threading.Event | None = None,
    ) -> None:
        self.clock = clock
        self.sleep = sleep
        self.cancel = cancel

    def until(
        self,
        poll: Callable[[], T],
        accept: Callable[[T], bool],
        policy: RetryPolicy,
        resource: str = "resource",
        cancel: threading.Event | None = None,
    ) -> T:
        """Poll until ``accept(poll())`` holds or the policy bound is reached.

        Args:
            poll: Produces the current value; may raise on transient failures.
            accept: Decides whether a polled value ends the wait.
            policy: Timeout, interval and attempt bounds.
            resource: What is being waited for; used in logs and errors.
            cancel: Event that aborts the wait when set. Defaults to the
                waiter's own cancel event.

        Returns:
            The first accepted value.

        Raises:
            WaitTimeoutError: If the bound is reached without an accepted value.
            WaitCancelledError: If the cancel event is set.
            Exception: The last poll error, if every attempt raised.
        """
        cancel = cancel if cancel is not None else self.cancel
        started = self.clock()
        seen = _Observation()

        def attempt() -> T:
            if cancel is not None and cancel.is_set():
                raise WaitCancelledError(resource, self.clock() - started)
            try:
                value = poll()
            except Exception as err:
                seen.error = err
                raise
            seen.value = value
            seen.polled = True
            return value

        def stop(retry_state: RetryCallState) -> bool:
            if cancel is not None and cancel.is_set():
                return True
            if policy.max_attempts is not None and retry_state.attempt_number >= policy.max_attempts:
                return True
            # No new poll may start once the timeout has elapsed.
            return policy.timeout is not None and self.clock() - started + policy.interval >= policy.timeout

        def sleeper(seconds: float) -> None:
            if self.sleep is not None:
                self.sleep(seconds)
            elif cancel is not None:
                cancel.wait(seconds)
            else:
                time.sleep(seconds)

        def before_sleep(retry_state: RetryCallState) -> None:
            outcome = retry_state.outcome
            if outcome is not None and outcome.failed:
                logger.warning(
                    "Polling %s failed (attempt %d), retrying: %s",
                    resource, retry_state.attempt_number, outcome.exception(),
                )
            else:
                logger.debug("%s not ready yet (attempt %d)", resource, retry_state.attempt_number)

        retrying = Retrying(
            stop=stop,
            wait=wait_fixed(policy.interval),
            retry=retry_if_exception(_is_transient) | retry_if_result(lambda value: not accept(value)),
            sleep=sleeper,
            before_sleep=before_sleep,
        )
        try:
            return retrying(attempt)
        except RetryError:
            pass

        elapsed = self.clock() - started
        if cancel is not None and cancel.is_set():
            raise WaitCancelledError(resource, elapsed)
        if not seen.polled and seen.error is not None:
            raise seen.error
        raise WaitTimeoutError(resource, elapsed, policy.describe(), seen.value, seen.error)


def wait_until(
    poll: Callable[[], T],
    accept: Callable[[T], bool],
    policy: RetryPolicy,
    resource: str = "resource",
    cancel: threading.Event | None = None,
) -> T:
    """Poll with a real clock; see :meth:`Waiter.until`."""
    return Waiter(cancel=cancel).until(poll, accept, policy, resource=resource)
