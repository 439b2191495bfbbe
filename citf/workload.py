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


"""Working with what runs in the cluster: exec, logs and readiness waits.

Exec and log retrieval try the Kubernetes API first and fall back to the
kubectl binary when the API path fails for any reason.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path
from typing import TypeVar

from citf import console, logger
from citf.config import RuntimeOptions
from citf.constants import (
    CONTAINER_POLL_INTERVAL_SECONDS,
    KUBECTL,
    NODE_LOOKUP_MAX_ATTEMPTS,
    NODE_LOOKUP_POLL_INTERVAL_SECONDS,
    NS_DEFAULT,
    POD_LOOKUP_MAX_ATTEMPTS,
    POD_LOOKUP_POLL_INTERVAL_SECONDS,
)
from citf.exceptions import CitfError, CommandError, ProbeError, WaitTimeoutError
from citf.k8s import KubeClient
from citf.models import ContainerState, NodeRecord, PodRecord
from citf.status import StatusProber
from citf.system import CommandRunner, split_command
from citf.wait import RetryPolicy, Waiter

T = TypeVar("T")


def with_fallback(primary: Callable[[], T], fallback: Callable[[], T], action: str) -> T:
    """Return ``primary()``, or ``fallback()`` if the primary raised.

    The primary's error is logged. Whatever the fallback returns or raises is
    the final outcome.
    """
    try:
        return primary()
    except Exception as err:
        logger.error("error while %s through API. Error: %s", action, err)
    logger.debug("Falling back to %s for %s", KUBECTL, action)
    return fallback()


class WorkloadAccessor:
    """Exec, logs and waits for pods, containers and nodes.

    Args:
        kube: Structured API client, or None to go straight to kubectl.
        runner: Runs kubectl for the fallbacks and manifest application.
        prober: Single-shot status queries used by the waits.
        options: Runtime options (verbosity).
        waiter: Polling primitive.
    """

    def __init__(
        self,
        kube: KubeClient | None,
        runner: CommandRunner,
        prober: StatusProber,
        options: RuntimeOptions | None = None,
        waiter: Waiter | None = None,
    ) -> None:
        self.kube = kube
        self.runner = runner
        self.prober = prober
        self.options = options if options is not None else runner.options
        self.waiter = waiter if waiter is not None else Waiter()

    def _client(self) -> KubeClient:
        if self.kube is None:
            raise ProbeError("Kubernetes API client is not configured")
        return self.kube

    # ============================================================================
    # Exec and logs
    # ============================================================================

    def exec_in_pod(
        self,
        command: str | Sequence[str],
        container_name: str,
        pod_name: str,
        namespace: str = NS_DEFAULT,
        stdin: str | None = None,
    ) -> str:
        """Run a command inside a container and return its stdout.

        Args:
            command: Command string or argv.
            container_name: Container to run in; may be empty for single-container pods.
            pod_name: Pod to run in.
            namespace: Namespace of the pod.
            stdin: Text for the command's stdin, or None.

        Returns:
            stdout of the command.

        Raises:
            CommandError: If the API path failed and kubectl failed too.
        """
        argv = split_command(command)
        if not argv:
            raise ValueError("empty command")

        def through_api() -> str:
            stdout, _ = self._client().exec_stream(argv, container_name, pod_name, namespace, stdin=stdin)
            return stdout

        def through_kubectl() -> str:
            cmd = [KUBECTL, "-n", namespace or NS_DEFAULT, "exec", pod_name]
            if stdin is not None:
                cmd.append("-i")
            if container_name:
                cmd += ["-c", container_name]
            cmd += ["--", *argv]
            return self.runner.run(cmd, elevated=False, stdin=stdin)

        return with_fallback(through_api, through_kubectl, f"exec into pod {pod_name}")

    def fetch_log(self, pod_name: str, namespace: str = NS_DEFAULT) -> str:
        """Return the log of a pod.

        Raises:
            CommandError: If the API path failed and kubectl failed too.
        """
        namespace = namespace or NS_DEFAULT
        log = with_fallback(
            lambda: self._client().read_log(pod_name, namespace),
            lambda: self.runner.run([KUBECTL, "-n", namespace, "logs", pod_name], elevated=False),
            f"getting log of pod {pod_name}",
        )
        if self.options.verbose:
            console.print(f"Log of pod {pod_name!r}:\n{log}")
        return log

    def apply_manifest(self, path: str | Path) -> str:
        """Apply a manifest file with ``kubectl apply -f``.

        Raises:
            CitfError: If kubectl rejects the file.
        """
        try:
            output = self.runner.run([KUBECTL, "apply", "-f", str(path)], elevated=False)
        except CommandError as err:
            logger.error("Error while applying %s. Error: %s", path, err)
            raise CitfError(f"failed applying {path}", err.details) from err
        console.print(f"[green]\u2705 Applied {path}[/green]")
        return output

    # ============================================================================
    # Waits
    # ============================================================================

    def wait_for_pods_by_prefix(
        self,
        namespace: str,
        prefix: str,
        policy: RetryPolicy | None = None,
    ) -> list[PodRecord]:
        """Wait until at least one pod in *namespace* starts with *prefix*.

        The first non-empty set of matches is returned, even if more matching
        pods show up later.

        Raises:
            WaitTimeoutError: If no pod matched within the policy bound.
        """
        if policy is None:
            policy = RetryPolicy(max_attempts=POD_LOOKUP_MAX_ATTEMPTS, interval=POD_LOOKUP_POLL_INTERVAL_SECONDS)
        return self.waiter.until(
            lambda: self.prober.pods_by_prefix(namespace, prefix),
            bool,
            policy,
            resource=f"pods with prefix {prefix!r} in namespace {namespace!r}",
        )

    def wait_for_nodes(self, policy: RetryPolicy | None = None) -> list[NodeRecord]:
        """Wait until the cluster reports at least one node.

        Raises:
            WaitTimeoutError: If no node showed up within the policy bound.
        """
        if policy is None:
            policy = RetryPolicy(max_attempts=NODE_LOOKUP_MAX_ATTEMPTS, interval=NODE_LOOKUP_POLL_INTERVAL_SECONDS)
        return self.waiter.until(self.prober.list_nodes, bool, policy, resource="nodes")

    def node_names(self) -> list[str]:
        return [node.name for node in self.wait_for_nodes()]

    def wait_for_container_state(
        self,
        pod: PodRecord,
        container_index: int,
        timeout: float,
        interval: float = CONTAINER_POLL_INTERVAL_SECONDS,
    ) -> ContainerState:
        """Wait until *pod* reports a status for container *container_index*.

        First waits for any container status at all, then for enough of them
        to cover the index. Both phases share one deadline and re-fetch the
        pod on every poll.

        Args:
            pod: Pod to watch.
            container_index: Zero-based index into the pod's container statuses.
            timeout: Seconds both phases may take together.
            interval: Seconds between polls.

        Returns:
            The state of the container at *container_index*.

        Raises:
            ValueError: If container_index is negative.
            WaitTimeoutError: If either phase runs out of time.
        """
        if container_index < 0:
            raise ValueError(f"container index must not be negative, got {container_index}")

        started = self.waiter.clock()
        label = f"pod {pod.name!r} of namespace {pod.namespace!r}"

        def reload() -> PodRecord | None:
            return self.prober.reload_pod(pod)

        def count(current: PodRecord | None) -> int:
            return len(current.container_statuses) if current is not None else 0

        try:
            current = self.waiter.until(
                reload,
                lambda p: count(p) > 0,
                RetryPolicy(timeout=timeout, interval=interval),
                resource=f"containers of {label}",
            )
        except WaitTimeoutError as err:
            raise WaitTimeoutError(
                err.resource, err.elapsed, err.allowed, err.last_value, err.last_error,
                message=f"{label} had no container till {timeout:g}s",
            ) from err

        if count(current) <= container_index:
            remaining = max(timeout - (self.waiter.clock() - started), 0.0)
            wanted = container_index + 1
            try:
                current = self.waiter.until(
                    reload,
                    lambda p: count(p) > container_index,
                    RetryPolicy(timeout=remaining, interval=interval),
                    resource=f"{wanted} containers of {label}",
                )
            except WaitTimeoutError as err:
                raise WaitTimeoutError(
                    err.resource, err.elapsed, err.allowed, err.last_value, err.last_error,
                    message=f"{label} did not have at least {wanted} containers till {timeout:g}s",
                ) from err

        return current.container_statuses[container_index].state
