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


"""The citf harness: one object wiring config, environment and cluster access."""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path

from citf import logger
from citf.config import CitfSettings, ConfigKey, MinikubeConfig, RuntimeOptions, load_settings
from citf.constants import PLATFORM_MINIKUBE
from citf.environments import Environment
from citf.environments.docker import Docker
from citf.environments.minikube import Minikube
from citf.exceptions import UnsupportedPlatformError
from citf.k8s import KubeClient
from citf.log import TestLogger, TestReporter
from citf.status import StatusProber
from citf.system import CommandRunner
from citf.wait import Waiter
from citf.workload import WorkloadAccessor


@dataclass(frozen=True)
class CreateOptions:
    """Which parts of :class:`Citf` to build.

    Attributes:
        config_path: YAML config file, or None for env vars and defaults only.
        include_environment: Build the environment driver.
        include_k8s: Build the Kubernetes API client and workload accessor.
        include_docker: Build the Docker runtime driver.
        include_logger: Build the test logger.
        reporter: Test reporter handed to the test logger.
    """

    config_path: str | Path | None = None
    include_environment: bool = False
    include_k8s: bool = False
    include_docker: bool = False
    include_logger: bool = False
    reporter: TestReporter | None = None

    @classmethod
    def include_all(cls, config_path: str | Path | None = None, reporter: TestReporter | None = None) -> CreateOptions:
        return cls(
            config_path=config_path,
            include_environment=True,
            include_k8s=True,
            include_docker=True,
            include_logger=True,
            reporter=reporter,
        )

    @classmethod
    def include_all_but(
        cls,
        *excluded: str,
        config_path: str | Path | None = None,
        reporter: TestReporter | None = None,
    ) -> CreateOptions:
        """Everything except the named parts.

        Args:
            excluded: Any of ``environment``, ``k8s``, ``docker``, ``logger``.

        Raises:
            ValueError: If a name is not a known part.
        """
        options = cls.include_all(config_path, reporter)
        changes = {}
        for name in excluded:
            field = f"include_{name}"
            if not hasattr(options, field):
                raise ValueError(f"unknown part {name!r}")
            changes[field] = False
        return replace(options, **changes)


def build_environment(
    settings: CitfSettings,
    runner: CommandRunner,
    prober: StatusProber,
    waiter: Waiter,
    minikube_cfg: MinikubeConfig | None = None,
) -> Environment:
    """Return the environment driver for the configured platform.

    Raises:
        UnsupportedPlatformError: If the platform has no driver.
    """
    platform = settings.get_string(ConfigKey.ENVIRONMENT)
    if platform == PLATFORM_MINIKUBE:
        return Minikube(runner, prober, runner.options, minikube_cfg, waiter)
    raise UnsupportedPlatformError(f"platform: {platform!r} is not supported by citf")


class Citf:
    """Entry point for test code.

    Use :meth:`create` rather than building one by hand. Parts that were not
    requested are None.
    """

    def __init__(
        self,
        settings: CitfSettings,
        options: RuntimeOptions,
        runner: CommandRunner,
        waiter: Waiter,
        minikube_cfg: MinikubeConfig | None = None,
    ) -> None:
        self.settings = settings
        self.options = options
        self.runner = runner
        self.waiter = waiter
        self.minikube_cfg = minikube_cfg if minikube_cfg is not None else MinikubeConfig()
        self.prober = StatusProber(runner, None, options)
        self.environment: Environment | None = None
        self.kube: KubeClient | None = None
        self.workload: WorkloadAccessor | None = None
        self.docker: Docker | None = None
        self.logger: TestLogger | None = None

    @property
    def debug_enabled(self) -> bool:
        return self.options.verbose

    @classmethod
    def create(
        cls,
        options: CreateOptions,
        runtime: RuntimeOptions | None = None,
        waiter: Waiter | None = None,
    ) -> Citf:
        """Build a harness with the parts *options* asks for.

        A config file that cannot be loaded is logged and defaults are used.

        Raises:
            UnsupportedPlatformError: If the configured platform is not supported.
            CitfError: If the Kubernetes client was requested and cannot be configured.
        """
        runtime = runtime if runtime is not None else RuntimeOptions()
        citf = cls(
            load_settings(options.config_path),
            runtime,
            CommandRunner(runtime),
            waiter if waiter is not None else Waiter(),
        )
        citf.reload(replace(options, config_path=None))
        return citf

    def reload(self, options: CreateOptions) -> None:
        """Rebuild the requested parts, e.g. once the cluster is up.

        Raises:
            UnsupportedPlatformError: If the configured platform is not supported.
            CitfError: If the Kubernetes client was requested and cannot be configured.
        """
        if options.config_path is not None:
            self.settings = load_settings(options.config_path)
        if options.include_environment:
            self.environment = build_environment(self.settings, self.runner, self.prober, self.waiter, self.minikube_cfg)
        if options.include_k8s:
            self.kube = KubeClient()
            self.prober.kube = self.kube
            self.workload = WorkloadAccessor(self.kube, self.runner, self.prober, self.options, self.waiter)
        if options.include_docker:
            self.docker = Docker()
        if options.include_logger:
            self.logger = TestLogger(options.reporter, verbose=self.options.verbose)
        logger.debug("citf reloaded with %s", options)
