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

"""Environment drivers (minikube, docker)."""

from __future__ import annotations

from typing import Protocol

from citf.models import ClusterStatus


class Environment(Protocol):
    """What every environment driver provides."""

    def setup(self) -> None:
        """Bring the environment to a running state. Failures here are fatal."""

    def status(self) -> ClusterStatus:
        """Return the current component -> status mapping."""

    def teardown(self) -> None:
        """Destroy the environment."""
