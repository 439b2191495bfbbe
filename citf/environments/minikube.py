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

"""minikube lifecycle: decide between teardown, start or nothing, then do it.

The observed cluster state maps to exactly one plan:

=========  ==========================
Observed   Plan
=========  ==========================
Absent     start
Stopped    teardown, then start
Running    nothing
Unknown    abort with UnknownStateError
=========  ==========================
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from rich.panel import Panel

from citf import console, logger
from citf.config import MinikubeConfig, RuntimeOptions
from citf.constants import (
    KUBE_DIR,
    MINIKUBE,
    MINIKUBE_DIR,
    STATUS_ABSENT,
    STATUS_RUNNING,
    STATUS_STOPPED,
)
from citf.exceptions import CitfError, UnknownStateError, WaitTimeoutError
from citf.models import ClusterStatus
from citf.status import StatusProber, cluster_component
from citf.system import CommandRunner
from citf.wait import RetryPolicy, Waiter


class ObservedState(str, Enum):
    """Cluster state as reported by the status probe."""

    ABSENT = "Absent"
    STOPPED = "Stopped"
    RUNNING = "Running"
    UNKNOWN = "Unknown"


class Plan(str, Enum):
    """Corrective action for an observed state."""

    START = "start"
    RESTART = "restart"
    NOOP = "noop"
    ABORT = "abort"

    @property
    def teardown_required(self) -> bool:
        return self is Plan.RESTART

    @property
    def start_required(self) -> bool:
        return self in (Plan.START, Plan.RESTART)


TRANSITIONS: dict[ObservedState, Plan] = {
    ObservedState.ABSENT: Plan.START,
    ObservedState.STOPPED: Plan.RESTART,
    ObservedState.RUNNING: Plan.NOOP,
    ObservedState.UNKNOWN: Plan.ABORT,
}


def observe(status: str) -> ObservedState:
    """Classify a cluster status string."""
    if status == STATUS_ABSENT:
        return ObservedState.ABSENT
    if status == STATUS_STOPPED:
        return ObservedState.STOPPED
    if status == STATUS_RUNNING:
        return ObservedState.RUNNING
    return ObservedState.UNKNOWN


class Minikube:
    """Drives a local minikube cluster (``--vm-driver=none``) to Running.

    Args:
        runner: Runs minikube and the post-start ownership commands.
        prober: Reports the cluster status.
        options: Runtime options (sudo use, user, home directories).
        config: minikube timeouts and driver.
        waiter: Polls for the directories minikube creates on start.
    """

    def __init__(
        self,
        runner: CommandRunner,
        prober: StatusProber,
        options: RuntimeOptions | None = None,
        config: MinikubeConfig | None = None,
        waiter: Waiter | None = None,
    ) -> None:
        self.runner = runner
        self.prober = prober
        self.options = options if options is not None else runner.options
        self.config = config if config is not None else MinikubeConfig()
        self.waiter = waiter if waiter is not None else Waiter()

    def status(self) -> ClusterStatus:
        return self.prober.cluster_status()

    def plan(self) -> tuple[ObservedState, str, Plan]:
        """Probe the cluster and decide what to do.

        A failed probe is logged and treated as an absent cluster.

        Returns:
            Tuple of (observed state, raw status string, plan).
        """
        try:
            status = self.status()
        except CitfError as err:
            logger.error("Error occurred while checking minikube status. Error: %s", err)
            status = {}
        raw = cluster_component(status)
        state = observe(raw)
        return state, raw, TRANSITIONS[state]

    def setup(self) -> Plan:
        """Bring minikube to Running, tearing down a stopped cluster first.

        Returns:
            The plan that was carried out.

        Raises:
            UnknownStateError: If minikube reports a state with no known fix.
                Nothing is deleted or started in that case.
            CommandError: If ``minikube start`` fails.
        """
        state, raw, plan = self.plan()
        if plan is Plan.ABORT:
            raise UnknownStateError(raw)

        if state is ObservedState.ABSENT:
            console.print("[yellow]\u2139\ufe0f  Cluster is not up, will start the machine[/yellow]")
        elif state is ObservedState.STOPPED:
            console.print(
                "[yellow]\u2139\ufe0f  minikube cluster is present but not Running, "
                "tearing down the machine and starting it again[/yellow]"
            )
        else:
            console.print("[green]\u2705 minikube is already Running[/green]")

        if plan.teardown_required:
            # Start runs against whatever delete left behind; see DESIGN.md.
            try:
                self.teardown()
                console.print("[green]\u2705 minikube deleted[/green]")
            except CitfError as err:
                logger.error("Error while deleting machine. Error: %s", err)
                console.print(f"[yellow]\u26a0\ufe0f  Deleting minikube failed, starting anyway: {err.message}[/yellow]")

        if plan.start_required:
            self.start()
        return plan

    def start(self) -> None:
        """Start minikube and hand its files over to the invoking user.

        Raises:
            CommandError: If ``minikube start`` fails.
        """
        console.print(Panel.fit(f"Starting minikube (--vm-driver={self.config.vm_driver})", style="bold blue"))
        self.runner.run([MINIKUBE, "start", f"--vm-driver={self.config.vm_driver}"], stream=True)

        logger.debug("CHANGE_MINIKUBE_NONE_USER = %s", self.options.change_minikube_none_user)
        if self.options.change_minikube_none_user:
            # minikube fixes ownership itself in this mode.
            logger.debug("Returning from setup.")
            return

        for path in (self.options.home / KUBE_DIR, self.options.home / MINIKUBE_DIR):
            self._wait_for_directory(path)
        self._run_post_start_commands()
        console.print("[green]\u2705 minikube started[/green]")

    def teardown(self) -> None:
        """Delete the minikube cluster.

        The caller must hold whatever privilege the delete needs. No status
        check is made first.

        Raises:
            CommandError: If ``minikube delete`` fails.
        """
        self.runner.run([MINIKUBE, "delete"])

    def _wait_for_directory(self, path: Path) -> None:
        policy = RetryPolicy(timeout=self.config.timeout, interval=self.config.wait_time_unit)
        console.print(f"[yellow]\u2139\ufe0f  Waiting for {path} to be created...[/yellow]")
        try:
            self.waiter.until(path.exists, bool, policy, resource=f"directory {path}")
        except WaitTimeoutError as err:
            logger.error("%s", err)

    def post_start_commands(self) -> list[list[str]]:
        """Commands moving minikube's files to the user's home and chowning them."""
        user = self.options.user
        commands: list[list[str]] = []
        for name in (KUBE_DIR, MINIKUBE_DIR):
            target = str(self.options.home / name)
            commands += [
                ["mv", str(self.options.root_home / name), target],
                ["chown", "-R", user, target],
                ["chgrp", "-R", user, target],
            ]
        return commands

    def _run_post_start_commands(self) -> None:
        for command in self.post_start_commands():
            console.print(f"Running {' '.join(command)!r}")
            try:
                output = self.runner.run(command)
            except CitfError as err:
                logger.error("Running %r failed. Error: %s", " ".join(command), err)
                continue
            logger.debug("Ran %r successfully. Output: %s", " ".join(command), output)
