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

from collections.abc import Mapping, Sequence

from ksvc_compiler.core.labels import LabelSet
from ksvc_compiler.core.resources import (
    build_http_probe,
    build_init_containers,
    build_resource_requirements,
)
from ksvc_compiler.models.deployment import DeploymentModel, Protocol
from ksvc_compiler.models.descriptor import (
    Container,
    ContainerPort,
    LabelSelector,
    ObjectMeta,
    RevisionSpec,
    RevisionTemplate,
    TopologySpreadConstraint,
)

# Max time the revision has to respond to a request
DEFAULT_REQUEST_TIMEOUT_SECONDS = 30

# Knative requires the "h2c" port name to serve gRPC
GRPC_PORT_NAME = "h2c"

POD_SPREADING_LABEL_KEY = "app"


def patch_topology_spread_constraints(
    constraints: Sequence[TopologySpreadConstraint], revision_name: str
) -> list[TopologySpreadConstraint]:
    """Spread the revision's pods across each constraint's topology key.

    Returns copies of ``constraints`` whose label selector matches
    ``app=<revision_name>``. Selectors that already exist keep their other
    match labels and expressions. The given constraints are left untouched.
    """
    patched = []
    for constraint in constraints:
        selector = constraint.label_selector
        if selector is None:
            selector = LabelSelector(match_labels={POD_SPREADING_LABEL_KEY: revision_name})
        else:
            selector = selector.model_copy(
                deep=True,
                update={
                    "match_labels": LabelSet(selector.match_labels)
                    .with_label(POD_SPREADING_LABEL_KEY, revision_name)
                    .to_dict()
                },
            )
        patched.append(constraint.model_copy(deep=True, update={"label_selector": selector}))
    return patched


def build_container(model: DeploymentModel) -> Container:
    port_name = GRPC_PORT_NAME if model.protocol == Protocol.UPI_V1 else None

    container = Container(
        image=model.image,
        ports=[ContainerPort(name=port_name, container_port=model.container_port)],
        resources=build_resource_requirements(model),
        volume_mounts=[m.model_copy(deep=True) for m in model.volume_mounts] or None,
        env=[e.model_copy(deep=True) for e in model.envs] or None,
    )
    if model.liveness_http_get_path:
        container.liveness_probe = build_http_probe(
            model.liveness_http_get_path, model.probe_port, model
        )
    if model.readiness_http_get_path:
        container.readiness_probe = build_http_probe(
            model.readiness_http_get_path, model.probe_port, model
        )
    return container


def build_revision_template(
    model: DeploymentModel,
    name: str,
    labels: LabelSet,
    annotations: Mapping[str, str],
) -> RevisionTemplate:
    init_containers = None
    if model.init_containers is not None:
        init_containers = build_init_containers(model.init_containers) or None

    return RevisionTemplate(
        metadata=ObjectMeta(
            name=name,
            labels=labels.to_dict(),
            annotations=dict(annotations),
        ),
        spec=RevisionSpec(
            containers=[build_container(model)],
            volumes=[v.model_copy(deep=True) for v in model.volumes] or None,
            init_containers=init_containers,
            topology_spread_constraints=patch_topology_spread_constraints(
                model.topology_spread_constraints, name
            )
            or None,
            timeout_seconds=DEFAULT_REQUEST_TIMEOUT_SECONDS,
        ),
    )
