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

"""Constants: commands, environment variable names, defaults and lookup tables."""

from __future__ import annotations

ENV_USE_SUDO = "USE_SUDO"
ENV_VERBOSE_LOG = "CITF_VERBOSE_LOG"
ENV_CHANGE_MINIKUBE_NONE_USER = "CHANGE_MINIKUBE_NONE_USER"
ENV_CONF_PREFIX = "CITF_CONF_"
ENV_MINIKUBE_PREFIX = "CITF_MINIKUBE_"

PLATFORM_MINIKUBE = "minikube"
DEFAULT_PLATFORM = PLATFORM_MINIKUBE

SUDO = "sudo"
MINIKUBE = "minikube"
KUBECTL = "kubectl"

# The status command prints "host: Running" on current minikube releases and
# "minikube: Running" on old ones.
MINIKUBE_STATUS_COMPONENTS = ("host", "minikube")
STATUS_RUNNING = "Running"
STATUS_STOPPED = "Stopped"
STATUS_ABSENT = ""

DEFAULT_VM_DRIVER = "none"
DEFAULT_MINIKUBE_TIMEOUT_SECONDS = 60.0
DEFAULT_WAIT_TIME_UNIT_SECONDS = 1.0
DEFAULT_ROOT_HOME = "/root"

KUBE_DIR = ".kube"
MINIKUBE_DIR = ".minikube"

NS_DEFAULT = "default"

POD_LOOKUP_MAX_ATTEMPTS = 10
POD_LOOKUP_POLL_INTERVAL_SECONDS = 2.0
NODE_LOOKUP_MAX_ATTEMPTS = 10
NODE_LOOKUP_POLL_INTERVAL_SECONDS = 1.0
CONTAINER_POLL_INTERVAL_SECONDS = 1.0
EXEC_TIMEOUT_SECONDS = 60

CONDITION_READY = "Ready"

NS_GOOD_PHASES = ("Active",)
POD_WAIT_STATES = ("Pending", "ContainerCreating", "PodInitializing")
POD_GOOD_STATES = ("Running", "Succeeded")
