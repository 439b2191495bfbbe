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

"""Single-shot status probes for the cluster, nodes, pods and containers.

A probe makes one call and returns. Looping until something changes is the
job of :mod:`citf.wait`. "Not found" is an empty result, never an error, so
callers can tell "still provisioning" apart from "probe broke".
"""

from __future__ import annotations

from citf import console
from citf.config import RuntimeOptions
from citf.constants import (
    MINIKUBE,
    MINIKUBE_STATUS_COMPONENTS,
    NS_DEFAULT,
    NS_GOOD_PHASES,
    POD_GOOD_STATES,
    POD_WAIT_STATES,
    STATUS_ABSENT,
)
from citf.exceptions import CommandError, ProbeError
from citf.k8s import KubeClient
from citf.models import ClusterStatus, NamespaceRecord, NodeRecord, PodRecord, ResourceKind
from citf.system import CommandRunner


def parse_status_output(output: str) -> ClusterStatus:
    """Parse ``minikube status`` output into a component -> status mapping.

    Each line holds a component name and its status separated by whitespace;
    a trailing colon on the name is dropped and the status is the rest of
    the line (e.g. ``kubeconfig: Correctly Configured``).

    Args:
        output: Raw stdout of the status command.

    Returns:
        Mapping of component name to status string.
    """
    status: ClusterStatus = {}
    for line in output.splitlines():
        parts = line.strip().split(None, 1)
        if not parts:
            continue
        key = parts[0].rstrip(":")
        if not key:
            continue
        status[key] = parts[1].strip() if len(parts) > 1 else STATUS_ABSENT
    return status


def cluster_component(status: ClusterStatus) -> str:
    """Return the status of the cluster itself, or "" if the output lacks it."""
    for component in MINIKUBE_STATUS_COMPONENTS:
        if component in status:
            return status[component]
    return STATUS_ABSENT


def is_namespace_in_good_phase(namespace: NamespaceRecord) -> bool:
    return namespace.phase in NS_GOOD_PHASES


def is_pod_state_wait(state: str) -> bool:
    return state in POD_WAIT_STATES


def is_pod_state_good(state: str) -> bool:
    return state in POD_GOOD_STATES


class StatusProber:
    """Queries the current status of cluster resources.

    Args:
        runner: Runs the minikube status command.
        kube: Structured API client; only the cluster probe works without one.
        options: Runtime options (sudo use, verbosity).
    """

    def __init__(
        self,
        runner: CommandRunner,
        kube: KubeClient | None = None,
        options: RuntimeOptions | None = None,
    ) -> None:
        self.runner = runner
        self.kube = kube
        self.options = options if options is not None else runner.options

    def _client(self) -> KubeClient:
        if self.kube is None:
            raise ProbeError("Kubernetes API client is not configured", "Reload citf once the cluster is up.")
        return self.kube

    def cluster_status(self) -> ClusterStatus:
        """Run ``minikube status`` and parse it.

        minikube exits non-zero when the cluster is stopped or missing, so a
        non-zero exit still has its output parsed. Only a failure to start
        the command is raised.

        Raises:
            CommandError: If the status command could not be started.
        """
        try:
            output = self.runner.run([MINIKUBE, "status"])
        except CommandError as err:
            if err.exit_code is None:
                raise
            output = err.stdout
        status = parse_status_output(output)
        if self.options.verbose:
            console.print(f"minikube status: {status}")
        return status

    def list_nodes(self) -> list[NodeRecord]:
        """List nodes; an empty list means "not ready yet", not an error."""
        return self._client().list_nodes()

    def list_namespaces(self) -> list[NamespaceRecord]:
        return self._client().list_namespaces()

    def pods_by_prefix(self, namespace: str, prefix: str) -> list[PodRecord]:
        """List pods in *namespace* whose name starts with *prefix*.

        Prefix matching picks up pods generated from one workload template,
        whatever random suffix they were given.
        """
        pods = self._client().list_pods(namespace)
        if self.options.verbose:
            console.print("*" * 80)
            console.print(f"Current pods in {namespace!r} namespace are:")
            for pod in pods:
                console.print(f"  {pod.name}")
            console.print("*" * 80)
        return [pod for pod in pods if pod.name.startswith(prefix)]

    def get_pod(self, namespace: str, name: str) -> PodRecord | None:
        return self._client().get_pod(namespace, name)

    def reload_pod(self, pod: PodRecord) -> PodRecord | None:
        """Fetch a fresh snapshot of *pod*, or None if it is gone."""
        return self.get_pod(pod.namespace, pod.name)

    def probe(self, kind: ResourceKind, name: str, namespace: str = NS_DEFAULT, index: int = 0) -> str:
        """Return the current status string of one resource.

        Args:
            kind: Kind of resource.
            name: Component name for CLUSTER, node name for NODE, pod name
                prefix for POD and pod name for CONTAINER.
            namespace: Namespace of pods and containers.
            index: Container index for CONTAINER.

        Returns:
            The cluster component status, node Ready condition status, pod
            phase, or container state kind; "" if the resource is absent.
        """
        kind = ResourceKind(kind)
        if kind is ResourceKind.CLUSTER:
            return self.cluster_status().get(name, STATUS_ABSENT)
        if kind is ResourceKind.NODE:
            node = next((n for n in self.list_nodes() if n.name == name), None)
            return node.ready if node is not None else STATUS_ABSENT
        if kind is ResourceKind.POD:
            pods = self.pods_by_prefix(namespace, name)
            return pods[0].phase if pods else STATUS_ABSENT
        pod = self.get_pod(namespace, name)
        if pod is None or not 0 <= index < len(pod.container_statuses):
            return STATUS_ABSENT
        return pod.container_statuses[index].state.kind.value
