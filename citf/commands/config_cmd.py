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


"""Config subcommands."""

from __future__ import annotations

import typer

from citf.commands.context import get_context
from citf.config import MinikubeConfig, display_config, load_settings

app = typer.Typer(help="Inspect the resolved configuration.")


@app.command()
def show(ctx: typer.Context) -> None:
    """Print the configuration after env vars, config file and defaults."""
    state = get_context(ctx)
    display_config(load_settings(state.config_path), state.runtime(), MinikubeConfig())
