"""Tests for the Kubernetes API wrapper and the records it returns."""

from types import SimpleNamespace

import pytest
from kubernetes.client.rest import ApiException

from citf import k8s
from citf.exceptions import ExecError
from citf.k8s import KubeClient
from citf.models import ContainerStateKind, NodeRecord, PodRecord


def api_pod(name, namespace="default", phase="Running", statuses=None):
    return SimpleNamespace(
        metadata=SimpleNamespace(name=name, namespace=namespace),
        status=SimpleNamespace(phase=phase, container_statuses=statuses),
    )


def api_container_status(name, running=None, waiting=None, terminated=None):
    return SimpleNamespace(
        name=name,
        ready=running is not None,
        restart_count=None,
        state=SimpleNamespace(running=running, waiting=waiting, terminated=terminated),
    )


class FakeCoreV1:
    def __init__(self, pods=(), nodes=(), read_error=None):
        self.pods = list(pods)
        self.nodes = list(nodes)
        self.read_error = read_error

    def list_namespaced_pod(self, namespace):
        return SimpleNamespace(items=[p for p in self.pods if p.metadata.namespace == namespace])

    def list_node(self):
        return SimpleNamespace(items=self.nodes)

    def read_namespaced_pod(self, name, namespace):
        if self.read_error is not None:
            raise self.read_error
        return next(p for p in self.pods if p.metadata.name == name)

    def read_namespaced_pod_log(self, name, namespace):
        return f"log of {namespace}/{name}"

    def connect_get_namespaced_pod_exec(self, *args, **kwargs):
        raise AssertionError("only called through kubernetes.stream")


class FakeExecStream:
    def __init__(self, stdout="", stderr="", returncode=0, still_open=False):
        self.stdout = stdout
        self.stderr = stderr
        self.returncode = returncode
        self.still_open = still_open
        self.closed = False
        self.written = []

    def write_stdin(self, data):
        self.written.append(data)

    def run_forever(self, timeout=None):
        pass

    def is_open(self):
        return self.still_open

    def read_stdout(self):
        return self.stdout

    def read_stderr(self):
        return self.stderr

    def close(self):
        self.closed = True


def test_pod_record_from_api():
    """Test conversion of pods and their container states."""
    pod = api_pod(
        "web-1",
        statuses=[
            api_container_status("app", running=SimpleNamespace()),
            api_container_status("init", waiting=SimpleNamespace(reason="ContainerCreating", message=None)),
            api_container_status(
                "job", terminated=SimpleNamespace(reason="Completed", message="", exit_code=0)
            ),
        ],
    )

    record = PodRecord.from_api(pod)

    assert record.name == "web-1"
    assert record.phase == "Running"
    kinds = [cs.state.kind for cs in record.container_statuses]
    assert kinds == [ContainerStateKind.RUNNING, ContainerStateKind.WAITING, ContainerStateKind.TERMINATED]
    assert record.container_statuses[1].state.reason == "ContainerCreating"
    assert record.container_statuses[2].state.exit_code == 0
    assert record.container_statuses[0].restart_count == 0


def test_pod_record_without_status():
    """Test that a pod that has no status yet converts to an empty record."""
    pod = SimpleNamespace(metadata=SimpleNamespace(name="new", namespace=None), status=None)

    assert PodRecord.from_api(pod) == PodRecord("new")


def test_node_record_ready_condition():
    """Test that the Ready condition decides readiness."""
    node = SimpleNamespace(
        metadata=SimpleNamespace(name="minikube", labels={"role": "cp"}),
        status=SimpleNamespace(
            conditions=[
                SimpleNamespace(type="MemoryPressure", status="False"),
                SimpleNamespace(type="Ready", status="True"),
            ]
        ),
    )

    record = NodeRecord.from_api(node)

    assert record.ready == "True"
    assert record.labels == {"role": "cp"}


def test_list_pods_and_nodes():
    """Test listing through the wrapper."""
    core = FakeCoreV1(pods=[api_pod("a"), api_pod("b", namespace="other")])
    client = KubeClient(core_v1=core)

    assert [p.name for p in client.list_pods("")] == ["a"]
    assert client.list_nodes() == []


def test_get_pod_not_found_is_none():
    """Test that a 404 becomes None."""
    client = KubeClient(core_v1=FakeCoreV1(read_error=ApiException(status=404)))

    assert client.get_pod("default", "gone") is None


def test_get_pod_other_errors_propagate():
    """Test that errors other than not found are raised."""
    client = KubeClient(core_v1=FakeCoreV1(read_error=ApiException(status=500)))

    with pytest.raises(ApiException):
        client.get_pod("default", "web-1")


def test_read_log():
    client = KubeClient(core_v1=FakeCoreV1())

    assert client.read_log("web-1", "") == "log of default/web-1"


def test_exec_stream_returns_output(monkeypatch):
    """Test a successful exec through the websocket."""
    resp = FakeExecStream(stdout="hello\n")
    captured = {}

    def fake_stream(func, pod, namespace, **kwargs):
        captured.update(kwargs, pod=pod, namespace=namespace)
        return resp

    monkeypatch.setattr(k8s, "stream", fake_stream)
    client = KubeClient(core_v1=FakeCoreV1())

    assert client.exec_stream(["echo", "hello"], "app", "web-1", "", stdin="x") == ("hello\n", "")
    assert captured["namespace"] == "default"
    assert captured["container"] == "app"
    assert captured["stdin"] is True
    assert captured["tty"] is False
    assert resp.written == ["x"]
    assert resp.closed


def test_exec_stream_non_zero_exit(monkeypatch):
    """Test that a failing command raises ExecError."""
    resp = FakeExecStream(stderr="no such file", returncode=2)
    monkeypatch.setattr(k8s, "stream", lambda *args, **kwargs: resp)
    client = KubeClient(core_v1=FakeCoreV1())

    with pytest.raises(ExecError, match="exited with 2"):
        client.exec_stream(["ls", "/missing"], "", "web-1", "default")

    assert resp.closed


def test_exec_stream_timeout(monkeypatch):
    """Test that a command still running after the timeout raises ExecError."""
    resp = FakeExecStream(still_open=True)
    monkeypatch.setattr(k8s, "stream", lambda *args, **kwargs: resp)
    client = KubeClient(core_v1=FakeCoreV1())

    with pytest.raises(ExecError, match="did not finish"):
        client.exec_stream(["sleep", "100"], "", "web-1", "default", timeout=1)

    assert resp.closed
