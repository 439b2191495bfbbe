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

"""Docker container runtime checks and teardown."""

from __future__ import annotations

from collections.abc import Callable

import docker
from rich.panel import Panel

from citf import console, logger
from citf.constants import STATUS_ABSENT, STATUS_RUNNING
from citf.exceptions import CitfError
from citf.models import ClusterStatus

DOCKER_COMPONENT = "docker"


class Docker:
    """Driver for the local Docker daemon.

    Args:
        client_factory: Returns a connected ``docker.DockerClient``.
    """

    def __init__(self, client_factory: Callable[[], docker.DockerClient] = docker.from_env) -> None:
        self.client_factory = client_factory

    def status(self) -> ClusterStatus:
        """Report ``Running`` if the daemon answers a ping, "" otherwise."""
        try:
            client = self.client_factory()
        except docker.errors.DockerException as err:
            logger.debug("Failed to connect to Docker: %s", err)
            return {DOCKER_COMPONENT: STATUS_ABSENT}
        try:
            client.ping()
        except docker.errors.DockerException as err:
            logger.debug("Docker daemon did not answer: %s", err)
            return {DOCKER_COMPONENT: STATUS_ABSENT}
        finally:
            client.close()
        return {DOCKER_COMPONENT: STATUS_RUNNING}

    def setup(self) -> None:
        """Check the daemon is reachable; citf does not start it.

        Raises:
            CitfError: If the Docker daemon is not running.
        """
        if self.status()[DOCKER_COMPONENT] != STATUS_RUNNING:
            raise CitfError("Docker daemon is not reachable", "Start Docker and check DOCKER_HOST.")

    def teardown(self) -> None:
        """Stop every running container on the machine.

        CAUTION: this stops all containers, not only the ones citf started.
        Failures to stop individual containers are logged and skipped.

        Raises:
            CitfError: If the running containers cannot be listed.
        """
        console.print(Panel.fit("Stopping docker containers", style="bold blue"))
        try:
            client = self.client_factory()
        except docker.errors.DockerException as err:
            raise CitfError("Failed to connect to Docker", str(err)) from err
        try:
            try:
                containers = client.containers.list()
            except docker.errors.DockerException as err:
                raise CitfError("error while getting container ids", str(err)) from err
            for container in containers:
                try:
                    container.stop()
                    console.print(f"[green]\u2713 Stopped container: {container.short_id}[/green]")
                except docker.errors.APIError as err:
                    logger.error("error occurred while stopping docker container: %s. Error: %s", container.short_id, err)
        finally:
            client.close()
