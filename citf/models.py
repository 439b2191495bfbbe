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

"""Immutable snapshots of cluster objects taken at probe time."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from citf.constants import CONDITION_READY

# component name -> status string; "" means the component is absent
ClusterStatus = dict[str, str]


class ResourceKind(str, Enum):
    """Kinds of resources the status prober knows how to query."""

    CLUSTER = "cluster"
    NODE = "node"
    POD = "pod"
    CONTAINER = "container"


class ContainerStateKind(str, Enum):
    """Tag of a :class:`ContainerState`."""

    WAITING = "Waiting"
    RUNNING = "Running"
    TERMINATED = "Terminated"
    UNKNOWN = "Unknown"


@dataclass(frozen=True)
class ContainerState:
    """State of one container.

    Attributes:
        kind: Which state the container is in.
        reason: Short reason for Waiting/Terminated states.
        message: Longer human readable message, if any.
        exit_code: Exit code of a terminated container.
    """

    kind: ContainerStateKind
    reason: str = ""
    message: str = ""
    exit_code: int | None = None

    @classmethod
    def from_api(cls, state: Any) -> ContainerState:
        """Build from a ``V1ContainerState`` (or None)."""
        if state is None:
            return cls(ContainerStateKind.UNKNOWN)
        if state.running is not None:
            return cls(ContainerStateKind.RUNNING)
        if state.terminated is not None:
            terminated = state.terminated
            return cls(
                ContainerStateKind.TERMINATED,
                reason=terminated.reason or "",
                message=terminated.message or "",
                exit_code=terminated.exit_code,
            )
        if state.waiting is not None:
            return cls(
                ContainerStateKind.WAITING,
                reason=state.waiting.reason or "",
                message=state.waiting.message or "",
            )
        return cls(ContainerStateKind.UNKNOWN)


@dataclass(frozen=True)
class ContainerStatusRecord:
    """Status of one container in a pod."""

    name: str
    state: ContainerState
    ready: bool = False
    restart_count: int = 0

    @classmethod
    def from_api(cls, status: Any) -> ContainerStatusRecord:
        """Build from a ``V1ContainerStatus``."""
        return cls(
            name=status.name,
            state=ContainerState.from_api(status.state),
            ready=bool(status.ready),
            restart_count=status.restart_count or 0,
        )


@dataclass(frozen=True)
class PodRecord:
    """Snapshot of a pod. Use ``StatusProber.reload_pod`` for a fresher view."""

    name: str
    namespace: str = ""
    phase: str = ""
    container_statuses: tuple[ContainerStatusRecord, ...] = ()

    @classmethod
    def from_api(cls, pod: Any) -> PodRecord:
        """Build from a ``V1Pod``."""
        status = pod.status
        statuses = (status.container_statuses or []) if status is not None else []
        return cls(
            name=pod.metadata.name,
            namespace=pod.metadata.namespace or "",
            phase=(status.phase or "") if status is not None else "",
            container_statuses=tuple(ContainerStatusRecord.from_api(cs) for cs in statuses),
        )


@dataclass(frozen=True)
class NodeRecord:
    """Snapshot of a node.

    Attributes:
        name: Node name.
        ready: Status of the Ready condition ("True", "False", "Unknown"),
            or "" if the node reports no Ready condition.
        labels: Node labels.
    """

    name: str
    ready: str = ""
    labels: dict[str, str] = field(default_factory=dict, hash=False, compare=False)

    @classmethod
    def from_api(cls, node: Any) -> NodeRecord:
        """Build from a ``V1Node``."""
        conditions = (node.status.conditions or []) if node.status is not None else []
        ready = next((c.status for c in conditions if c.type == CONDITION_READY), "")
        return cls(name=node.metadata.name, ready=ready or "", labels=dict(node.metadata.labels or {}))


@dataclass(frozen=True)
class NamespaceRecord:
    """Snapshot of a namespace."""

    name: str
    phase: str = ""

    @classmethod
    def from_api(cls, namespace: Any) -> NamespaceRecord:
        """Build from a ``V1Namespace``."""
        phase = namespace.status.phase if namespace.status is not None else ""
        return cls(name=namespace.metadata.name, phase=phase or "")
