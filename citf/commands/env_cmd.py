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


"""Environment subcommands (setup, teardown, status)."""

from __future__ import annotations

import typer

from citf import console
from citf.commands.context import get_context

app = typer.Typer(help="Manage the test environment.")


@app.command()
def setup(ctx: typer.Context) -> None:
    """Bring the configured environment to Running."""
    citf = get_context(ctx).citf(include_environment=True)
    citf.environment.setup()
    console.print("[green]\u2705 Environment ready[/green]")


@app.command()
def teardown(
    ctx: typer.Context,
    docker: bool = typer.Option(
        False, "--docker", help="Also stop ALL running Docker containers on this machine"),
) -> None:
    """Delete the environment."""
    citf = get_context(ctx).citf(include_environment=True, include_docker=docker)
    citf.environment.teardown()
    console.print("[green]\u2705 Environment deleted[/green]")
    if citf.docker is not None:
        citf.docker.teardown()


@app.command()
def status(ctx: typer.Context) -> None:
    """Print the status of every environment component."""
    citf = get_context(ctx).citf(include_environment=True)
    components = citf.environment.status()
    if not components:
        console.print("[yellow]\u2139\ufe0f  No status reported, the environment is probably absent[/yellow]")
        return
    for component, value in components.items():
        console.print(f"  {component:<12}: {value or '(absent)'}")
