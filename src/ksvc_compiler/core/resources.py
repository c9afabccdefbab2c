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

from collections.abc import Sequence
from decimal import Decimal
import math

from kubernetes.utils import parse_quantity

from ksvc_compiler.models.deployment import DeploymentModel, InitContainer
from ksvc_compiler.models.descriptor import (
    Container,
    HTTPGetAction,
    Probe,
    ResourceRequirements,
)


def compute_resource(quantity: str, fraction: Decimal | float) -> int:
    """Scale a Kubernetes quantity by ``fraction``, rounding up to whole units.

    ``compute_resource("2Gi", 0.5) == 1073741824``
    """
    return math.ceil(parse_quantity(quantity) * Decimal(str(fraction)))


def _requests(cpu: str | None, memory: str | None) -> dict[str, str] | None:
    requests = {}
    if cpu:
        requests["cpu"] = cpu
    if memory:
        requests["memory"] = memory
    return requests or None


def build_resource_requirements(model: DeploymentModel) -> ResourceRequirements:
    limits = {}
    if model.cpu_limit:
        limits["cpu"] = model.cpu_limit
    if model.memory_limit:
        limits["memory"] = model.memory_limit
    return ResourceRequirements(
        requests=_requests(model.cpu_requests, model.memory_requests),
        limits=limits or None,
    )


def build_http_probe(path: str, port: int, model: DeploymentModel) -> Probe:
    return Probe(
        http_get=HTTPGetAction(path=path, port=port),
        initial_delay_seconds=model.probe_initial_delay_seconds,
        period_seconds=model.probe_period_seconds,
        timeout_seconds=model.probe_timeout_seconds,
        failure_threshold=model.probe_failure_threshold,
    )


def build_init_containers(specs: Sequence[InitContainer]) -> list[Container]:
    containers = []
    for spec in specs:
        requests = _requests(spec.cpu_requests, spec.memory_requests)
        containers.append(
            Container(
                name=spec.name,
                image=spec.image,
                command=list(spec.command) if spec.command else None,
                args=list(spec.args) if spec.args else None,
                env=[env.model_copy(deep=True) for env in spec.envs] or None,
                resources=ResourceRequirements(requests=requests) if requests else None,
            )
        )
    return containers
