# Copyright 2025 Domyn
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

from enum import Enum
from pathlib import Path
from typing import IO, Annotated

from kubernetes.utils import parse_quantity
from pydantic import AfterValidator, BaseModel, ConfigDict, Field, model_validator
import yaml

from ksvc_compiler.config.defaults import default_for
from ksvc_compiler.models.descriptor import (
    EnvVar,
    TopologySpreadConstraint,
    Volume,
    VolumeMount,
)


class Protocol(str, Enum):
    """Wire protocol served by the container."""

    HTTP_JSON = "HTTP_JSON"
    UPI_V1 = "UPI_V1"


def _check_quantity(v: str) -> str:
    # raises ValueError on malformed quantities, which pydantic reports
    parse_quantity(v)
    return v


Quantity = Annotated[str, AfterValidator(_check_quantity)]


class InitContainer(BaseModel):
    model_config = ConfigDict(coerce_numbers_to_str=True)

    name: str
    image: str
    command: list[str] | None = None
    args: list[str] | None = None
    envs: list[EnvVar] = Field(default_factory=list)
    cpu_requests: Quantity | None = None
    memory_requests: Quantity | None = None


class DeploymentModel(BaseModel):
    """Platform-agnostic description of one deployable service."""

    # YAML happily turns `target: 80` into an int
    model_config = ConfigDict(frozen=True, coerce_numbers_to_str=True)

    # identity ----------------------------------------------------------------
    name: str = Field(min_length=1)
    namespace: str = Field(min_length=1)
    labels: dict[str, str] = Field(default_factory=dict)

    # runtime -----------------------------------------------------------------
    image: str
    container_port: int = Field(default_factory=default_for("container_port", 8080))
    protocol: Protocol = Protocol.HTTP_JSON
    envs: list[EnvVar] = Field(default_factory=list)

    # resources ---------------------------------------------------------------
    cpu_requests: Quantity = Field(default_factory=default_for("resources.cpu_requests", "1"))
    memory_requests: Quantity = Field(
        default_factory=default_for("resources.memory_requests", "512Mi")
    )
    cpu_limit: Quantity | None = None
    memory_limit: Quantity | None = None
    queue_proxy_resource_percentage: int = 0  # 0 means "leave Knative's default"

    # autoscaling -------------------------------------------------------------
    min_replicas: int = Field(default=0, ge=0)
    max_replicas: int = Field(default=1, ge=0)
    initial_scale: int | None = None
    autoscaling_metric: str = "concurrency"
    # Absolute value for concurrency / rps, % of the requested value for cpu / memory
    autoscaling_target: str = "1"

    # scheduling --------------------------------------------------------------
    topology_spread_constraints: list[TopologySpreadConstraint] = Field(default_factory=list)
    is_cluster_local: bool = False

    # probes ------------------------------------------------------------------
    liveness_http_get_path: str = ""
    readiness_http_get_path: str = ""
    probe_port: int = Field(default_factory=default_for("probe.port", 8080))
    probe_initial_delay_seconds: int = Field(
        default_factory=default_for("probe.initial_delay_seconds", 20)
    )
    probe_period_seconds: int = Field(default_factory=default_for("probe.period_seconds", 10))
    probe_timeout_seconds: int = Field(default_factory=default_for("probe.timeout_seconds", 5))
    probe_failure_threshold: int = Field(
        default_factory=default_for("probe.failure_threshold", 5)
    )

    # storage -----------------------------------------------------------------
    init_containers: list[InitContainer] | None = None
    volumes: list[Volume] = Field(default_factory=list)
    volume_mounts: list[VolumeMount] = Field(default_factory=list)

    @model_validator(mode="after")
    def _check_replica_bounds(self):
        if self.min_replicas > self.max_replicas:
            raise ValueError(
                f"min_replicas ({self.min_replicas}) must not exceed "
                f"max_replicas ({self.max_replicas})"
            )
        return self

    @classmethod
    def read(cls, path: str | Path) -> "DeploymentModel":
        with Path(path).expanduser().open() as f:
            return load_deployment_model(f)


def load_deployment_model(stream: IO[str]) -> DeploymentModel:
    """Load a YAML document from ``stream`` into a DeploymentModel."""
    data = yaml.safe_load(stream) or {}
    if not isinstance(data, dict):
        raise ValueError("Deployment model must be a YAML mapping")
    return DeploymentModel.model_validate(data)
