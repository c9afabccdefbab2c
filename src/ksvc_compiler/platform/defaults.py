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

from dataclasses import dataclass, field

from ksvc_compiler.config.defaults import default_for
from ksvc_compiler.models.descriptor import (
    Container,
    KnativeServiceDescriptor,
    Probe,
    TCPSocketAction,
    TrafficTarget,
)

KNATIVE_USER_CONTAINER_NAME = "user-container"


@dataclass
class KnativeDefaulter:
    """Offline equivalent of Knative Serving's ``Service.SetDefaults``.

    Only the fields the compiler emits are covered; everything else is left
    for the admission webhook.
    """

    user_container_name: str = field(
        default_factory=default_for("knative.user_container_name", KNATIVE_USER_CONTAINER_NAME)
    )
    container_concurrency: int = field(
        default_factory=default_for("knative.container_concurrency", 0)
    )
    revision_timeout_seconds: int = field(
        default_factory=default_for("knative.revision_timeout_seconds", 300)
    )

    def apply(self, descriptor: KnativeServiceDescriptor) -> KnativeServiceDescriptor:
        svc = descriptor.model_copy(deep=True)
        revision = svc.spec.template.spec

        if revision.container_concurrency is None:
            revision.container_concurrency = self.container_concurrency
        if revision.timeout_seconds is None:
            revision.timeout_seconds = self.revision_timeout_seconds

        for i, container in enumerate(revision.containers):
            if not container.name:
                container.name = (
                    self.user_container_name
                    if len(revision.containers) == 1
                    else f"{self.user_container_name}-{i}"
                )
            self._default_probes(container)

        if not svc.spec.traffic:
            svc.spec.traffic = [TrafficTarget(latest_revision=True, percent=100)]

        return svc

    @staticmethod
    def _default_probes(container: Container) -> None:
        if container.readiness_probe is None:
            container.readiness_probe = Probe()
        probe = container.readiness_probe
        if probe.http_get is None and probe.tcp_socket is None:
            # Knative's queue-proxy fills in the user port at runtime
            probe.tcp_socket = TCPSocketAction(port=0)
        if probe.success_threshold is None:
            probe.success_threshold = 1

        if container.liveness_probe is not None and container.liveness_probe.success_threshold is None:
            container.liveness_probe.success_threshold = 1
