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


"""State shared by the CLI subcommands."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from citf.config import RuntimeOptions
from citf.harness import Citf, CreateOptions


@dataclass
class CliContext:
    """Global CLI options, stored on the typer context object."""

    config_path: Path | None = None
    verbose: bool = False

    def runtime(self) -> RuntimeOptions:
        if self.verbose:
            return RuntimeOptions(verbose=True)
        return RuntimeOptions()

    def citf(self, **parts: bool) -> Citf:
        """Create a harness with the given ``include_*`` parts."""
        return Citf.create(CreateOptions(config_path=self.config_path, **parts), runtime=self.runtime())


def get_context(ctx: typer.Context) -> CliContext:
    if not isinstance(ctx.obj, CliContext):
        ctx.obj = CliContext()
    return ctx.obj
