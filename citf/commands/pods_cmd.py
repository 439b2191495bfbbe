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


"""Pod subcommands (wait, exec, logs, container-state)."""

from __future__ import annotations

import typer

from citf import console
from citf.commands.context import get_context
from citf.constants import NS_DEFAULT
from citf.exceptions import CitfError

app = typer.Typer(help="Inspect and wait for pods.")


@app.command()
def wait(
    ctx: typer.Context,
    prefix: str = typer.Argument(..., help="Pod name prefix"),
    namespace: str = typer.Option(NS_DEFAULT, "--namespace", "-n", help="Pod namespace"),
) -> None:
    """Wait until a pod whose name starts with PREFIX exists."""
    citf = get_context(ctx).citf(include_k8s=True)
    for pod in citf.workload.wait_for_pods_by_prefix(namespace, prefix):
        console.print(f"  {pod.name:<40} {pod.phase}")


@app.command("exec")
def exec_(
    ctx: typer.Context,
    pod: str = typer.Argument(..., help="Pod name"),
    command: list[str] = typer.Argument(..., help="Command to run, after --"),
    namespace: str = typer.Option(NS_DEFAULT, "--namespace", "-n", help="Pod namespace"),
    container: str = typer.Option("", "--container", "-c", help="Container name"),
) -> None:
    """Run a command in a pod and print its output."""
    citf = get_context(ctx).citf(include_k8s=True)
    typer.echo(citf.workload.exec_in_pod(command, container, pod, namespace), nl=False)


@app.command()
def logs(
    ctx: typer.Context,
    pod: str = typer.Argument(..., help="Pod name"),
    namespace: str = typer.Option(NS_DEFAULT, "--namespace", "-n", help="Pod namespace"),
) -> None:
    """Print the log of a pod."""
    citf = get_context(ctx).citf(include_k8s=True)
    typer.echo(citf.workload.fetch_log(pod, namespace), nl=False)


@app.command("container-state")
def container_state(
    ctx: typer.Context,
    pod: str = typer.Argument(..., help="Pod name"),
    namespace: str = typer.Option(NS_DEFAULT, "--namespace", "-n", help="Pod namespace"),
    index: int = typer.Option(0, "--index", "-i", min=0, help="Container index"),
    timeout: float = typer.Option(60.0, "--timeout", min=0, help="Seconds to wait"),
) -> None:
    """Wait for a container of a pod to report a state and print it."""
    citf = get_context(ctx).citf(include_k8s=True)
    record = citf.prober.get_pod(namespace, pod)
    if record is None:
        raise CitfError(f"pod {pod!r} not found in namespace {namespace!r}")
    state = citf.workload.wait_for_container_state(record, index, timeout)
    line = state.kind.value
    if state.reason:
        line += f" ({state.reason})"
    console.print(line)
