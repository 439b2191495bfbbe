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

"""Thin wrapper over the Kubernetes API returning citf records."""

from __future__ import annotations

from collections.abc import Sequence

from kubernetes import client, config
from kubernetes.client.rest import ApiException
from kubernetes.stream import stream

from citf import logger
from citf.constants import EXEC_TIMEOUT_SECONDS, NS_DEFAULT
from citf.exceptions import CitfError, ExecError
from citf.models import NamespaceRecord, NodeRecord, PodRecord


def load_kube_config(kubeconfig: str | None = None, context: str | None = None) -> None:
    """Load client configuration from a kubeconfig, falling back to in-cluster config.

    Args:
        kubeconfig: Path of the kubeconfig file, or None for the default.
        context: kubeconfig context to use, or None for the current one.

    Raises:
        CitfError: If neither configuration can be loaded.
    """
    try:
        config.load_kube_config(config_file=kubeconfig, context=context)
        logger.debug("Loaded kubeconfig")
    except config.ConfigException:
        try:
            config.load_incluster_config()
            logger.debug("Loaded in-cluster Kubernetes configuration")
        except config.ConfigException as err:
            raise CitfError(
                "Cannot load Kubernetes configuration",
                "Make sure the cluster is up and a kubeconfig is available at ~/.kube/config",
            ) from err


class KubeClient:
    """Structured access to the handful of API calls citf needs.

    Transport and authorization errors surface as ``ApiException`` (or
    whatever the client raises); only "pod not found" is turned into None.
    """

    def __init__(
        self,
        core_v1: client.CoreV1Api | None = None,
        kubeconfig: str | None = None,
        context: str | None = None,
    ) -> None:
        if core_v1 is None:
            load_kube_config(kubeconfig, context)
            core_v1 = client.CoreV1Api()
        self.core_v1 = core_v1

    def list_nodes(self) -> list[NodeRecord]:
        return [NodeRecord.from_api(node) for node in self.core_v1.list_node().items]

    def list_namespaces(self) -> list[NamespaceRecord]:
        return [NamespaceRecord.from_api(ns) for ns in self.core_v1.list_namespace().items]

    def list_pods(self, namespace: str) -> list[PodRecord]:
        pods = self.core_v1.list_namespaced_pod(namespace=namespace or NS_DEFAULT)
        return [PodRecord.from_api(pod) for pod in pods.items]

    def get_pod(self, namespace: str, name: str) -> PodRecord | None:
        """Return the pod, or None if it does not exist."""
        try:
            pod = self.core_v1.read_namespaced_pod(name=name, namespace=namespace or NS_DEFAULT)
        except ApiException as err:
            if err.status == 404:
                return None
            raise
        return PodRecord.from_api(pod)

    def exec_stream(
        self,
        command: Sequence[str],
        container: str,
        pod: str,
        namespace: str,
        stdin: str | None = None,
        timeout: int = EXEC_TIMEOUT_SECONDS,
    ) -> tuple[str, str]:
        """Run a non-interactive command in a pod over the exec websocket.

        Args:
            command: argv to execute.
            container: Container name; may be empty for single-container pods.
            pod: Pod name.
            namespace: Pod namespace; empty means ``default``.
            stdin: Text written to the command's stdin, or None for no stdin.
            timeout: Seconds to wait for the command to finish.

        Returns:
            Tuple of (stdout, stderr).

        Raises:
            ExecError: If the command does not finish in time or exits non-zero.
        """
        kwargs = {"container": container} if container else {}
        resp = stream(
            self.core_v1.connect_get_namespaced_pod_exec,
            pod,
            namespace or NS_DEFAULT,
            command=list(command),
            stderr=True,
            stdin=stdin is not None,
            stdout=True,
            tty=False,
            _preload_content=False,
            **kwargs,
        )
        try:
            if stdin is not None:
                resp.write_stdin(stdin)
            resp.run_forever(timeout=timeout)
            if resp.is_open():
                raise ExecError(f"exec in pod {pod!r} did not finish within {timeout}s")
            stdout = resp.read_stdout()
            stderr = resp.read_stderr()
            returncode = resp.returncode
        finally:
            resp.close()

        if returncode:
            raise ExecError(f"command {list(command)} in pod {pod!r} exited with {returncode}", stderr or None)
        return stdout, stderr

    def read_log(self, pod: str, namespace: str) -> str:
        return self.core_v1.read_namespaced_pod_log(name=pod, namespace=namespace or NS_DEFAULT)
