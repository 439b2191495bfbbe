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


"""
cli.py - Command line front end for citf.

Subcommands:
    env      Set up, tear down or inspect the test environment
    pods     Wait for pods, exec into them, read their logs
    apply    Apply a manifest file to the cluster
    config   Show the resolved configuration

Examples:
    # Bring minikube up (tearing down a stopped cluster first)
    citf env setup

    # Wait for an nginx pod and run a command in it
    citf pods wait nginx
    citf pods exec nginx-7f8d -- echo hello

    # Use a config file and verbose output
    citf --config citf.yaml --verbose env status
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import typer

from citf import console
from citf.commands import config_cmd, env_cmd, pods_cmd
from citf.commands.context import CliContext, get_context
from citf.exceptions import CitfError

app = typer.Typer(
    help="Container integration test framework.",
    no_args_is_help=True,
)


@app.callback()
def _main_callback(
    ctx: typer.Context,
    config: Path | None = typer.Option(None, "--config", help="YAML config file"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Verbose output"),
) -> None:
    """Initialize logging for all subcommands."""
    ctx.obj = CliContext(config_path=config, verbose=verbose)
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
        datefmt="%H:%M:%S",
    )


@app.command()
def apply(
    ctx: typer.Context,
    manifest: Path = typer.Argument(..., exists=True, dir_okay=False, help="Manifest file"),
) -> None:
    """Apply a manifest file with kubectl."""
    citf = get_context(ctx).citf(include_k8s=True)
    citf.workload.apply_manifest(manifest)


app.add_typer(env_cmd.app, name="env")
app.add_typer(pods_cmd.app, name="pods")
app.add_typer(config_cmd.app, name="config")


def main() -> None:
    """Console script entry point."""
    try:
        app()
    except CitfError as e:
        console.print(f"[red]\u274c {e}[/red]")
        sys.exit(1)


if __name__ == "__main__":
    main()
