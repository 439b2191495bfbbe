"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from collections.abc import Callable

import pytest
from hypothesis import Verbosity, settings

from citf.config import MinikubeConfig, RuntimeOptions
from citf.models import ContainerState, ContainerStateKind, ContainerStatusRecord, NodeRecord, PodRecord
from citf.system import split_command
from citf.wait import Waiter

# Configure Hypothesis for property-based testing
settings.register_profile("default", max_examples=100, verbosity=Verbosity.normal)
settings.register_profile("ci", max_examples=1000, verbosity=Verbosity.verbose)
settings.register_profile("dev", max_examples=10, verbosity=Verbosity.verbose)

# Load the default profile
settings.load_profile("default")


class FakeClock:
    """Clock that only moves when something sleeps on it."""

    def __init__(self, start: float = 100.0):
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


class FakeRunner:
    """Records commands instead of running them.

    ``handler`` receives the argv and returns the command's stdout; it may
    raise ``CommandError`` to simulate a failure.
    """

    def __init__(self, options: RuntimeOptions, handler: Callable[[list[str]], str] | None = None):
        self.options = options
        self.handler = handler
        self.calls: list[list[str]] = []
        self.stdin: list[str | None] = []

    def run(self, command, elevated=None, stream=False, stdin=None) -> str:
        argv = split_command(command)
        self.calls.append(argv)
        self.stdin.append(stdin)
        if self.handler is None:
            return ""
        return self.handler(argv)


class FakeKube:
    """In-memory stand-in for ``citf.k8s.KubeClient``."""

    def __init__(self):
        self.nodes: list[NodeRecord] = []
        self.namespaces = []
        self.pods: dict[str, list[PodRecord]] = {}
        self.pod_lists: list[list[PodRecord]] | None = None
        self.list_pods_calls = 0
        self.get_pod_calls = 0
        self.exec_error: Exception | None = None
        self.exec_output = ("", "")
        self.exec_calls: list[tuple] = []
        self.log_error: Exception | None = None
        self.log_output = ""

    def list_nodes(self):
        return list(self.nodes)

    def list_namespaces(self):
        return list(self.namespaces)

    def list_pods(self, namespace):
        self.list_pods_calls += 1
        if self.pod_lists is not None:
            # Replay scripted listings, repeating the last one.
            index = min(self.list_pods_calls, len(self.pod_lists)) - 1
            return list(self.pod_lists[index])
        return list(self.pods.get(namespace, []))

    def get_pod(self, namespace, name):
        self.get_pod_calls += 1
        return next((p for p in self.pods.get(namespace, []) if p.name == name), None)

    def exec_stream(self, command, container, pod, namespace, stdin=None, timeout=60):
        self.exec_calls.append((list(command), container, pod, namespace, stdin))
        if self.exec_error is not None:
            raise self.exec_error
        return self.exec_output

    def read_log(self, pod, namespace):
        if self.log_error is not None:
            raise self.log_error
        return self.log_output


def make_pod(name: str, namespace: str = "default", phase: str = "Running", containers: int = 1) -> PodRecord:
    statuses = tuple(
        ContainerStatusRecord(name=f"c{i}", state=ContainerState(ContainerStateKind.RUNNING), ready=True)
        for i in range(containers)
    )
    return PodRecord(name=name, namespace=namespace, phase=phase, container_statuses=statuses)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def waiter(clock):
    return Waiter(clock=clock, sleep=clock.sleep)


@pytest.fixture
def options(tmp_path):
    """Runtime options pointing at throwaway home directories."""
    home = tmp_path / "home"
    root_home = tmp_path / "root"
    home.mkdir()
    root_home.mkdir()
    return RuntimeOptions(
        use_sudo=False,
        verbose=False,
        change_minikube_none_user=False,
        user="tester",
        home=home,
        root_home=root_home,
    )


@pytest.fixture
def minikube_cfg():
    return MinikubeConfig(timeout=3, wait_time_unit=1, vm_driver="none")


@pytest.fixture
def runner(options):
    return FakeRunner(options)


@pytest.fixture
def kube():
    return FakeKube()


@pytest.fixture
def clean_env(monkeypatch):
    """Remove citf environment variables that could leak into settings."""
    for name in (
        "USE_SUDO",
        "CITF_VERBOSE_LOG",
        "CHANGE_MINIKUBE_NONE_USER",
        "CITF_CONF_ENVIRONMENT",
        "CITF_MINIKUBE_TIMEOUT",
        "CITF_MINIKUBE_WAIT_TIME_UNIT",
        "CITF_MINIKUBE_VM_DRIVER",
        "CITF_ROOT_HOME",
    ):
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def pod_factory():
    return make_pod
