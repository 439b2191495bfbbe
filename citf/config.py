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

"""Configuration classes, config file loading and config display."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Any

import yaml
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, PydanticBaseSettingsSource, SettingsConfigDict
from rich.panel import Panel

from citf import console, logger
from citf.constants import (
    DEFAULT_MINIKUBE_TIMEOUT_SECONDS,
    DEFAULT_PLATFORM,
    DEFAULT_ROOT_HOME,
    DEFAULT_VM_DRIVER,
    DEFAULT_WAIT_TIME_UNIT_SECONDS,
    ENV_CHANGE_MINIKUBE_NONE_USER,
    ENV_CONF_PREFIX,
    ENV_MINIKUBE_PREFIX,
    ENV_USE_SUDO,
    ENV_VERBOSE_LOG,
)
from citf.exceptions import ConfigurationError


# ============================================================================
# User configuration
# ============================================================================

class ConfigKey(str, Enum):
    """Keys that may be looked up through ``CitfSettings.get_string``."""

    ENVIRONMENT = "environment"


class CitfSettings(BaseSettings):
    """User configuration, resolved as CITF_CONF_* env var > config file > default.

    Attributes:
        environment: Platform to bring up (only ``minikube`` is supported).
    """

    model_config = SettingsConfigDict(env_prefix=ENV_CONF_PREFIX, extra="ignore")

    environment: str = DEFAULT_PLATFORM

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        # Config file values arrive as init kwargs and must lose to env vars.
        return env_settings, init_settings

    def get_string(self, key: ConfigKey) -> str:
        """Return the resolved value for *key*.

        Args:
            key: Configuration key to look up.

        Returns:
            The value after env var, config file and default precedence.
        """
        values = {ConfigKey.ENVIRONMENT: self.environment}
        return values[ConfigKey(key)]


def read_config_file(path: str | Path) -> dict[str, Any]:
    """Read a YAML config file into a dict of non-empty known keys.

    Args:
        path: Path of the YAML config file.

    Returns:
        Mapping of setting name to value.

    Raises:
        ConfigurationError: If the file cannot be read or parsed.
    """
    try:
        with open(path) as f:
            data = yaml.safe_load(f)
    except OSError as err:
        raise ConfigurationError(f"error reading file: {str(path)!r}", str(err)) from err
    except yaml.YAMLError as err:
        raise ConfigurationError(f"error parsing file: {str(path)!r}", str(err)) from err

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"error parsing file: {str(path)!r}", "top level must be a mapping")
    known = set(CitfSettings.model_fields)
    return {key: value for key, value in data.items() if key in known and value not in (None, "")}


def load_settings(path: str | Path | None = None) -> CitfSettings:
    """Load user settings, falling back to defaults if the file is unusable.

    Args:
        path: Optional path to a YAML config file.

    Returns:
        Resolved settings.
    """
    values: dict[str, Any] = {}
    if path:
        try:
            values = read_config_file(path)
        except ConfigurationError as err:
            logger.error("error loading config file. Error: %s", err)
    return CitfSettings(**values)


# ============================================================================
# Runtime options
# ============================================================================

def _parse_env_bool(value: Any, default: bool) -> Any:
    if isinstance(value, str):
        value = value.strip().lower()
        if value not in ("true", "false"):
            return default
        return value == "true"
    return value


class RuntimeOptions(BaseSettings):
    """Process-wide switches, read from the environment once at startup.

    Attributes:
        use_sudo: Whether commands run elevated through ``sudo``.
        verbose: Whether to print verbose diagnostics.
        change_minikube_none_user: Whether minikube fixes file ownership
            itself, making the post-start ownership commands unnecessary.
        user: Name of the invoking user.
        home: Home directory of the invoking user.
        root_home: Home directory minikube writes to when run as root.
    """

    model_config = SettingsConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    use_sudo: bool = Field(default=True, validation_alias=ENV_USE_SUDO)
    verbose: bool = Field(default=False, validation_alias=ENV_VERBOSE_LOG)
    change_minikube_none_user: bool = Field(default=False, validation_alias=ENV_CHANGE_MINIKUBE_NONE_USER)
    user: str = Field(default="", validation_alias="USER")
    home: Path = Field(default_factory=Path.home, validation_alias="HOME")
    root_home: Path = Field(default=Path(DEFAULT_ROOT_HOME), validation_alias="CITF_ROOT_HOME")

    @field_validator("use_sudo", mode="before")
    @classmethod
    def _use_sudo(cls, value: Any) -> Any:
        return _parse_env_bool(value, default=True)

    @field_validator("verbose", "change_minikube_none_user", mode="before")
    @classmethod
    def _strict_true(cls, value: Any) -> Any:
        return _parse_env_bool(value, default=False)


class MinikubeConfig(BaseSettings):
    """minikube driver configuration, auto-loaded from CITF_MINIKUBE_* env vars.

    Attributes:
        timeout: Seconds allowed for any minikube sub-task that must stabilize.
        wait_time_unit: Polling interval in seconds for those sub-tasks.
        vm_driver: Value passed to ``minikube start --vm-driver``.
    """

    model_config = SettingsConfigDict(env_prefix=ENV_MINIKUBE_PREFIX, extra="ignore")

    timeout: float = Field(default=DEFAULT_MINIKUBE_TIMEOUT_SECONDS, gt=0)
    wait_time_unit: float = Field(default=DEFAULT_WAIT_TIME_UNIT_SECONDS, gt=0)
    vm_driver: str = DEFAULT_VM_DRIVER


# ============================================================================
# Display
# ============================================================================

def display_config(settings: CitfSettings, options: RuntimeOptions, minikube_cfg: MinikubeConfig) -> None:
    """Print the resolved configuration.

    Args:
        settings: User configuration.
        options: Runtime options.
        minikube_cfg: minikube driver configuration.
    """
    console.print(Panel.fit("Configuration", style="bold blue"))
    console.print("[yellow]Platform:[/yellow]")
    console.print(f"  environment              : {settings.environment}")
    console.print("[yellow]Runtime:[/yellow]")
    console.print(f"  use_sudo                 : {options.use_sudo}")
    console.print(f"  verbose                  : {options.verbose}")
    console.print(f"  change_minikube_none_user: {options.change_minikube_none_user}")
    console.print(f"  user                     : {options.user or '(unset)'}")
    console.print(f"  home                     : {options.home}")
    if settings.environment == DEFAULT_PLATFORM:
        console.print("[yellow]minikube:[/yellow]")
        console.print(f"  vm_driver                : {minikube_cfg.vm_driver}")
        console.print(f"  timeout                  : {minikube_cfg.timeout:g}s")
        console.print(f"  wait_time_unit           : {minikube_cfg.wait_time_unit:g}s")
