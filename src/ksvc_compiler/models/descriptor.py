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

"""Knative Serving ``serving.knative.dev/v1`` Service schema.

Only the subset of the Kubernetes/Knative schema that the compiler emits is
modelled. Field names are snake_case in Python and serialise to the camelCase
names the API server expects; both spellings are accepted on input.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

KNATIVE_SERVING_API_VERSION = "serving.knative.dev/v1"
KNATIVE_SERVICE_KIND = "Service"


class K8sModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        validate_by_name=True,
        validate_by_alias=True,
    )


class ObjectMeta(K8sModel):
    name: str | None = None
    namespace: str | None = None
    labels: dict[str, str] | None = None
    annotations: dict[str, str] | None = None


class LabelSelectorRequirement(K8sModel):
    key: str
    operator: str
    values: list[str] | None = None


class LabelSelector(K8sModel):
    match_labels: dict[str, str] | None = None
    match_expressions: list[LabelSelectorRequirement] | None = None


class TopologySpreadConstraint(K8sModel):
    max_skew: int = 1
    topology_key: str
    when_unsatisfiable: str = "DoNotSchedule"
    label_selector: LabelSelector | None = None
    min_domains: int | None = None


class EnvVar(K8sModel):
    # valueFrom and friends are passed through as-is
    model_config = ConfigDict(extra="allow")

    name: str
    value: str | None = None


class VolumeMount(K8sModel):
    name: str
    mount_path: str
    sub_path: str | None = None
    read_only: bool | None = None


class Volume(K8sModel):
    """A pod volume; the source (configMap, secret, emptyDir, ...) is kept verbatim."""

    model_config = ConfigDict(extra="allow")

    name: str


class ContainerPort(K8sModel):
    name: str | None = None
    container_port: int
    protocol: str | None = None


class ResourceRequirements(K8sModel):
    requests: dict[str, str] | None = None
    limits: dict[str, str] | None = None


class HTTPGetAction(K8sModel):
    path: str
    port: int | str
    scheme: str | None = None


class TCPSocketAction(K8sModel):
    host: str | None = None
    port: int | str


class Probe(K8sModel):
    http_get: HTTPGetAction | None = None
    tcp_socket: TCPSocketAction | None = None
    initial_delay_seconds: int | None = None
    period_seconds: int | None = None
    timeout_seconds: int | None = None
    success_threshold: int | None = None
    failure_threshold: int | None = None


class Container(K8sModel):
    name: str | None = None
    image: str | None = None
    command: list[str] | None = None
    args: list[str] | None = None
    ports: list[ContainerPort] | None = None
    env: list[EnvVar] | None = None
    resources: ResourceRequirements | None = None
    volume_mounts: list[VolumeMount] | None = None
    liveness_probe: Probe | None = None
    readiness_probe: Probe | None = None


class RevisionSpec(K8sModel):
    """Knative RevisionSpec: an inlined PodSpec plus the serving knobs."""

    containers: list[Container]
    volumes: list[Volume] | None = None
    init_containers: list[Container] | None = None
    topology_spread_constraints: list[TopologySpreadConstraint] | None = None
    container_concurrency: int | None = None
    timeout_seconds: int | None = None


class RevisionTemplate(K8sModel):
    metadata: ObjectMeta
    spec: RevisionSpec


class TrafficTarget(K8sModel):
    revision_name: str | None = None
    latest_revision: bool | None = None
    percent: int | None = None
    tag: str | None = None


class ServiceSpec(K8sModel):
    template: RevisionTemplate
    traffic: list[TrafficTarget] | None = None


class KnativeServiceDescriptor(K8sModel):
    api_version: str = Field(default=KNATIVE_SERVING_API_VERSION)
    kind: str = Field(default=KNATIVE_SERVICE_KIND)
    metadata: ObjectMeta
    spec: ServiceSpec

    def to_manifest(self) -> dict[str, Any]:
        """Plain dict ready to be dumped as YAML/JSON and applied to a cluster."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
